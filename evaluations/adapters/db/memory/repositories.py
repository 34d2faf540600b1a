"""
In-memory Repository - 테스트/로컬 실행용 (Django 미사용)

엔티티는 저장/조회 시 복사. back-reference는 조회 시점의 저장된 부모로 다시 연결.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from typing import Optional

from evaluations.domain.exams.entities import (
    Exam,
    Exercise,
    ExerciseSolution,
    ExerciseSolutionResult,
    TestCase,
    Visibility,
)
from evaluations.domain.shared.errors import DuplicateResultError, StorageError


@dataclass
class MemoryStore:
    exams: dict[int, Exam] = field(default_factory=dict)
    exercises: dict[int, Exercise] = field(default_factory=dict)
    test_cases: dict[int, TestCase] = field(default_factory=dict)
    solutions: dict[int, ExerciseSolution] = field(default_factory=dict)
    results: dict[int, ExerciseSolutionResult] = field(default_factory=dict)
    next_id: int = 1
    writes: int = 0
    fail_after_writes: Optional[int] = None  # 테스트용 장애 주입: N번째 이후 쓰기 실패

    def allocate_id(self) -> int:
        value = self.next_id
        self.next_id += 1
        return value

    def record_write(self, action: str) -> None:
        if self.fail_after_writes is not None and self.writes >= self.fail_after_writes:
            raise StorageError(f"{action} failed: store unavailable")
        self.writes += 1


class MemoryExamRepository:

    def __init__(self, store: MemoryStore) -> None:
        self._store = store

    def find_by_id(self, exam_id: int) -> Optional[Exam]:
        row = self._store.exams.get(exam_id)
        return copy.deepcopy(row) if row is not None else None

    def find_all(self) -> list[Exam]:
        return [copy.deepcopy(self._store.exams[k]) for k in sorted(self._store.exams)]

    def find_by_owner(self, owner: str) -> list[Exam]:
        return [e for e in self.find_all() if owner in e.owners]

    def save(self, exam: Exam) -> Exam:
        self._store.record_write("save exam")
        if exam.id is None:
            exam.id = self._store.allocate_id()
        self._store.exams[exam.id] = copy.deepcopy(exam)
        return exam

    def delete(self, exam: Exam) -> None:
        self._store.record_write("delete exam")
        self._store.exams.pop(exam.id, None)


class MemoryExerciseRepository:

    def __init__(self, store: MemoryStore) -> None:
        self._store = store

    def _load(self, row: Exercise) -> Exercise:
        exercise = copy.deepcopy(row)
        exam = self._store.exams.get(row.exam.id)
        if exam is not None:
            exercise.exam = copy.deepcopy(exam)
        return exercise

    def find_by_id(self, exercise_id: int) -> Optional[Exercise]:
        row = self._store.exercises.get(exercise_id)
        return self._load(row) if row is not None else None

    def get_exam_exercises(self, exam: Exam) -> list[Exercise]:
        return [
            self._load(row)
            for _, row in sorted(self._store.exercises.items())
            if row.exam.id == exam.id
        ]

    def save(self, exercise: Exercise) -> Exercise:
        self._store.record_write("save exercise")
        if exercise.id is None:
            exercise.id = self._store.allocate_id()
        self._store.exercises[exercise.id] = copy.deepcopy(exercise)
        return exercise

    def delete(self, exercise: Exercise) -> None:
        self._store.record_write("delete exercise")
        self._store.exercises.pop(exercise.id, None)

    def delete_exam_exercises(self, exam: Exam) -> None:
        self._store.record_write("delete exam exercises")
        for key in [k for k, row in self._store.exercises.items() if row.exam.id == exam.id]:
            del self._store.exercises[key]


class MemoryTestCaseRepository:

    def __init__(self, store: MemoryStore) -> None:
        self._store = store
        self._exercises = MemoryExerciseRepository(store)

    def _load(self, row: TestCase) -> TestCase:
        test_case = copy.deepcopy(row)
        exercise = self._exercises.find_by_id(row.exercise.id)
        if exercise is not None:
            test_case.exercise = exercise
        return test_case

    def find_by_id(self, test_case_id: int) -> Optional[TestCase]:
        row = self._store.test_cases.get(test_case_id)
        return self._load(row) if row is not None else None

    def _by_visibility(self, exercise: Exercise, visibility: Visibility) -> list[TestCase]:
        return [
            self._load(row)
            for _, row in sorted(self._store.test_cases.items())
            if row.exercise.id == exercise.id and row.visibility == visibility
        ]

    def get_exercise_private_test_cases(self, exercise: Exercise) -> list[TestCase]:
        return self._by_visibility(exercise, Visibility.PRIVATE)

    def get_exercise_public_test_cases(self, exercise: Exercise) -> list[TestCase]:
        return self._by_visibility(exercise, Visibility.PUBLIC)

    def save(self, test_case: TestCase) -> TestCase:
        self._store.record_write("save test case")
        if test_case.id is None:
            test_case.id = self._store.allocate_id()
        self._store.test_cases[test_case.id] = copy.deepcopy(test_case)
        return test_case

    def delete(self, test_case: TestCase) -> None:
        self._store.record_write("delete test case")
        self._store.test_cases.pop(test_case.id, None)

    def delete_exercise_test_cases(self, exercise: Exercise) -> None:
        self._store.record_write("delete exercise test cases")
        for key in [k for k, row in self._store.test_cases.items() if row.exercise.id == exercise.id]:
            del self._store.test_cases[key]

    def delete_exam_test_cases(self, exam: Exam) -> None:
        self._store.record_write("delete exam test cases")
        for key in [k for k, row in self._store.test_cases.items() if row.exercise.exam.id == exam.id]:
            del self._store.test_cases[key]


class MemoryExerciseSolutionRepository:

    def __init__(self, store: MemoryStore) -> None:
        self._store = store
        self._exercises = MemoryExerciseRepository(store)

    def _load(self, row: ExerciseSolution) -> ExerciseSolution:
        solution = copy.deepcopy(row)
        exercise = self._exercises.find_by_id(row.exercise.id)
        if exercise is not None:
            solution.exercise = exercise
        return solution

    def find_by_id(self, solution_id: int) -> Optional[ExerciseSolution]:
        row = self._store.solutions.get(solution_id)
        return self._load(row) if row is not None else None

    def get_exercise_solutions(self, exercise: Exercise) -> list[ExerciseSolution]:
        return [
            self._load(row)
            for _, row in sorted(self._store.solutions.items())
            if row.exercise.id == exercise.id
        ]

    def save(self, solution: ExerciseSolution) -> ExerciseSolution:
        self._store.record_write("save solution")
        solution.id = self._store.allocate_id()
        self._store.solutions[solution.id] = copy.deepcopy(solution)
        return solution


class MemoryExerciseSolutionResultRepository:

    def __init__(self, store: MemoryStore) -> None:
        self._store = store
        self._solutions = MemoryExerciseSolutionRepository(store)
        self._test_cases = MemoryTestCaseRepository(store)

    def _load(self, row: ExerciseSolutionResult) -> ExerciseSolutionResult:
        return replace(
            copy.deepcopy(row),
            solution=self._solutions.find_by_id(row.solution.id) or copy.deepcopy(row.solution),
            test_case=self._test_cases.find_by_id(row.test_case.id) or copy.deepcopy(row.test_case),
        )

    def _matching(self, solution_id: int, test_case_id: Optional[int] = None) -> list[ExerciseSolutionResult]:
        return [
            row
            for _, row in sorted(self._store.results.items())
            if row.solution.id == solution_id
            and (test_case_id is None or row.test_case.id == test_case_id)
        ]

    def find_by_solution_and_test_case(
        self, solution: ExerciseSolution, test_case: TestCase
    ) -> Optional[ExerciseSolutionResult]:
        rows = self._matching(solution.id, test_case.id)
        return self._load(rows[0]) if rows else None

    def get_solution_results(self, solution: ExerciseSolution) -> list[ExerciseSolutionResult]:
        return [self._load(row) for row in self._matching(solution.id)]

    def save(self, result: ExerciseSolutionResult) -> ExerciseSolutionResult:
        if self._matching(result.solution.id, result.test_case.id):
            raise DuplicateResultError(
                f"Result already recorded: solution={result.solution.id} test_case={result.test_case.id}"
            )
        self._store.record_write("save solution result")
        result.id = self._store.allocate_id()
        self._store.results[result.id] = copy.deepcopy(result)
        return result
