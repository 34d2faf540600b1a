"""
조회 헬퍼 - id → 엔티티, 없으면 NotFoundError. UoW 트랜잭션 안에서만 호출.
"""
from __future__ import annotations

from evaluations.application.ports.unit_of_work import UnitOfWork
from evaluations.domain.exams.entities import Exam, Exercise, ExerciseSolution, TestCase
from evaluations.domain.shared.errors import NotFoundError


def exam_or_404(uow: UnitOfWork, exam_id: int) -> Exam:
    exam = uow.exams.find_by_id(exam_id)
    if exam is None:
        raise NotFoundError("Exam", exam_id)
    return exam


def exercise_or_404(uow: UnitOfWork, exercise_id: int) -> Exercise:
    exercise = uow.exercises.find_by_id(exercise_id)
    if exercise is None:
        raise NotFoundError("Exercise", exercise_id)
    return exercise


def test_case_or_404(uow: UnitOfWork, test_case_id: int) -> TestCase:
    test_case = uow.test_cases.find_by_id(test_case_id)
    if test_case is None:
        raise NotFoundError("TestCase", test_case_id)
    return test_case


def solution_or_404(uow: UnitOfWork, solution_id: int) -> ExerciseSolution:
    solution = uow.solutions.find_by_id(solution_id)
    if solution is None:
        raise NotFoundError("ExerciseSolution", solution_id)
    return solution


def all_test_cases(uow: UnitOfWork, exercise: Exercise) -> list[TestCase]:
    """private + public (공개 여부와 무관하게 모두 채점 대상)."""
    return [
        *uow.test_cases.get_exercise_private_test_cases(exercise),
        *uow.test_cases.get_exercise_public_test_cases(exercise),
    ]
