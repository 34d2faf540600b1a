"""
Repository 포트 - 영속화 추상화 (Django/ORM 미사용)

모든 메서드는 실패 시 StorageError. save()는 id가 채워진 엔티티를 반환한다.
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Optional, Protocol

from evaluations.domain.exams.entities import (
    Exam,
    Exercise,
    ExerciseSolution,
    ExerciseSolutionResult,
    TestCase,
)


class ExamRepository(Protocol):

    @abstractmethod
    def find_by_id(self, exam_id: int) -> Optional[Exam]:
        ...

    @abstractmethod
    def find_all(self) -> list[Exam]:
        """id 오름차순."""
        ...

    @abstractmethod
    def find_by_owner(self, owner: str) -> list[Exam]:
        ...

    @abstractmethod
    def save(self, exam: Exam) -> Exam:
        ...

    @abstractmethod
    def delete(self, exam: Exam) -> None:
        ...


class ExerciseRepository(Protocol):

    @abstractmethod
    def find_by_id(self, exercise_id: int) -> Optional[Exercise]:
        ...

    @abstractmethod
    def get_exam_exercises(self, exam: Exam) -> list[Exercise]:
        ...

    @abstractmethod
    def save(self, exercise: Exercise) -> Exercise:
        ...

    @abstractmethod
    def delete(self, exercise: Exercise) -> None:
        ...

    @abstractmethod
    def delete_exam_exercises(self, exam: Exam) -> None:
        ...


class TestCaseRepository(Protocol):

    @abstractmethod
    def find_by_id(self, test_case_id: int) -> Optional[TestCase]:
        ...

    @abstractmethod
    def get_exercise_private_test_cases(self, exercise: Exercise) -> list[TestCase]:
        ...

    @abstractmethod
    def get_exercise_public_test_cases(self, exercise: Exercise) -> list[TestCase]:
        ...

    @abstractmethod
    def save(self, test_case: TestCase) -> TestCase:
        ...

    @abstractmethod
    def delete(self, test_case: TestCase) -> None:
        ...

    @abstractmethod
    def delete_exercise_test_cases(self, exercise: Exercise) -> None:
        ...

    @abstractmethod
    def delete_exam_test_cases(self, exam: Exam) -> None:
        ...


class ExerciseSolutionRepository(Protocol):
    """수정/삭제 없음 (solution은 불변)."""

    @abstractmethod
    def find_by_id(self, solution_id: int) -> Optional[ExerciseSolution]:
        ...

    @abstractmethod
    def get_exercise_solutions(self, exercise: Exercise) -> list[ExerciseSolution]:
        ...

    @abstractmethod
    def save(self, solution: ExerciseSolution) -> ExerciseSolution:
        ...


class ExerciseSolutionResultRepository(Protocol):
    """insert 전용. (solution, test case)당 최대 1건."""

    @abstractmethod
    def find_by_solution_and_test_case(
        self, solution: ExerciseSolution, test_case: TestCase
    ) -> Optional[ExerciseSolutionResult]:
        ...

    @abstractmethod
    def get_solution_results(self, solution: ExerciseSolution) -> list[ExerciseSolutionResult]:
        ...

    @abstractmethod
    def save(self, result: ExerciseSolutionResult) -> ExerciseSolutionResult:
        """중복 시 DuplicateResultError."""
        ...
