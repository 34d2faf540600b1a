"""
Exam 생명주기 Use Case - 도메인/포트만 사용 (Django 미사용)

상태 전이: UPCOMING → IN_PROGRESS → FINISHED.
상태 검사는 쓰기 전에 수행 (fail fast).
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from evaluations.application.ports.events import EventPublisherPort
from evaluations.application.ports.unit_of_work import UnitOfWork
from evaluations.application.use_cases.exams.lookups import exam_or_404
from evaluations.domain.exams.entities import Exam, ExamWithScore
from evaluations.domain.shared.errors import ValidationError
from evaluations.domain.shared.events import ExamStateChanged

logger = logging.getLogger(__name__)


def create_exam(
    uow: UnitOfWork,
    description: str,
    starting_at: datetime,
    duration: timedelta,
    owners: Iterable[str] = (),
) -> Exam:
    """새 시험 (UPCOMING). 값 오류 시 ValidationError (저장 전)."""
    if isinstance(owners, str):
        raise ValidationError("The owners must be a collection of user ids")
    exam = Exam(
        description=description,
        starting_at=starting_at,
        duration=duration,
        owners=set(owners),
    )
    with uow:
        exam = uow.exams.save(exam)
    logger.info("EXAM_CREATED | exam_id=%s", exam.id)
    return exam


def get_exam(uow: UnitOfWork, exam_id: int) -> Exam:
    with uow:
        return exam_or_404(uow, exam_id)


def get_exam_with_score(uow: UnitOfWork, exam_id: int) -> ExamWithScore:
    """시험 + 배점 합계. 문제가 없으면 0."""
    with uow:
        exam = exam_or_404(uow, exam_id)
        exercises = uow.exercises.get_exam_exercises(exam)
        return ExamWithScore(exam=exam, total_score=sum(e.awarded_score for e in exercises))


def list_exams(uow: UnitOfWork) -> list[Exam]:
    with uow:
        return uow.exams.find_all()


def list_owned_exams(uow: UnitOfWork, owner: str) -> list[Exam]:
    with uow:
        return uow.exams.find_by_owner(owner)


def modify_exam(
    uow: UnitOfWork,
    exam_id: int,
    description: str,
    starting_at: datetime,
    duration: timedelta,
) -> Exam:
    with uow:
        exam = exam_or_404(uow, exam_id)
        exam.update(description, starting_at, duration)
        return uow.exams.save(exam)


def add_owner(uow: UnitOfWork, exam_id: int, owner: str) -> Exam:
    with uow:
        exam = exam_or_404(uow, exam_id)
        exam.add_owner(owner)
        return uow.exams.save(exam)


def remove_owner(uow: UnitOfWork, exam_id: int, owner: str) -> Exam:
    with uow:
        exam = exam_or_404(uow, exam_id)
        exam.remove_owner(owner)
        return uow.exams.save(exam)


def _transition(
    uow: UnitOfWork,
    exam_id: int,
    transition: Callable[[Exam], None],
    publisher: Optional[EventPublisherPort],
) -> Exam:
    with uow:
        exam = exam_or_404(uow, exam_id)
        previous = exam.state
        transition(exam)
        exam = uow.exams.save(exam)
    logger.info(
        "EXAM_STATE_CHANGED | exam_id=%s from=%s to=%s",
        exam.id, previous.value, exam.state.value,
    )
    if publisher is not None:
        publisher.publish(ExamStateChanged(exam_id=exam.id, state=exam.state.value))
    return exam


def start_exam(uow: UnitOfWork, exam_id: int, publisher: Optional[EventPublisherPort] = None) -> Exam:
    """UPCOMING → IN_PROGRESS. 그 외 상태면 IllegalStateError (상태 불변)."""
    return _transition(uow, exam_id, Exam.start, publisher)


def finish_exam(uow: UnitOfWork, exam_id: int, publisher: Optional[EventPublisherPort] = None) -> Exam:
    """IN_PROGRESS → FINISHED. 그 외 상태면 IllegalStateError (상태 불변)."""
    return _transition(uow, exam_id, Exam.finish, publisher)


def delete_exam(uow: UnitOfWork, exam_id: int) -> None:
    """
    UPCOMING에서만 삭제. 테스트케이스 → 문제 → 시험 순으로 한 트랜잭션에서 cascade.
    (UPCOMING 시험에는 solution이 존재할 수 없다)
    """
    with uow:
        exam = exam_or_404(uow, exam_id)
        exam.require_upcoming("delete exam")
        uow.test_cases.delete_exam_test_cases(exam)
        uow.exercises.delete_exam_exercises(exam)
        uow.exams.delete(exam)
    logger.info("EXAM_DELETED | exam_id=%s", exam_id)
