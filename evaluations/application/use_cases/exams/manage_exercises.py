"""
Exercise Use Case - 소속 시험이 UPCOMING일 때만 생성/수정/삭제
"""
from __future__ import annotations

import logging
from typing import Optional

from evaluations.application.ports.unit_of_work import UnitOfWork
from evaluations.application.use_cases.exams.lookups import exam_or_404, exercise_or_404
from evaluations.domain.exams.entities import Exercise, Language

logger = logging.getLogger(__name__)


def get_exercises(uow: UnitOfWork, exam_id: int) -> list[Exercise]:
    with uow:
        exam = exam_or_404(uow, exam_id)
        return uow.exercises.get_exam_exercises(exam)


def get_exercise(uow: UnitOfWork, exercise_id: int) -> Exercise:
    with uow:
        return exercise_or_404(uow, exercise_id)


def create_exercise(
    uow: UnitOfWork,
    exam_id: int,
    question: str,
    language: Language,
    awarded_score: int,
    solution_template: Optional[str] = None,
) -> Exercise:
    with uow:
        exam = exam_or_404(uow, exam_id)
        exam.require_upcoming("create exercise")
        exercise = Exercise(
            exam=exam,
            question=question,
            language=language,
            awarded_score=awarded_score,
            solution_template=solution_template,
        )
        exercise = uow.exercises.save(exercise)
    logger.info("EXERCISE_CREATED | exam_id=%s exercise_id=%s", exam_id, exercise.id)
    return exercise


def modify_exercise(
    uow: UnitOfWork,
    exercise_id: int,
    question: str,
    language: Language,
    awarded_score: int,
    solution_template: Optional[str] = None,
) -> Exercise:
    with uow:
        exercise = exercise_or_404(uow, exercise_id)
        exercise.update(question, language, awarded_score, solution_template)
        return uow.exercises.save(exercise)


def delete_exercise(uow: UnitOfWork, exercise_id: int) -> None:
    """문제 + 소속 테스트케이스 삭제."""
    with uow:
        exercise = exercise_or_404(uow, exercise_id)
        exercise.exam.require_upcoming("delete exercise")
        uow.test_cases.delete_exercise_test_cases(exercise)
        uow.exercises.delete(exercise)
    logger.info("EXERCISE_DELETED | exercise_id=%s", exercise_id)


def clear_exercises(uow: UnitOfWork, exam_id: int) -> None:
    """시험의 모든 문제 + 테스트케이스 삭제 (시험은 유지)."""
    with uow:
        exam = exam_or_404(uow, exam_id)
        exam.require_upcoming("clear exercises")
        uow.test_cases.delete_exam_test_cases(exam)
        uow.exercises.delete_exam_exercises(exam)
    logger.info("EXAM_EXERCISES_CLEARED | exam_id=%s", exam_id)
