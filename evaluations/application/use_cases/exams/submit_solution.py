"""
Solution 제출 Use Case - 도메인/포트만 사용

제출 → (IN_PROGRESS 검사) → 저장 + commit → test case마다 실행 요청 1건.
commit 후 발행하므로 결과가 미저장 solution에 도착하는 일은 없다.
Lifecycle 쪽에서는 재시도하지 않는다 (DispatchError는 호출부로).
"""
from __future__ import annotations

import logging
from typing import Optional

from evaluations.application.ports.events import EventPublisherPort
from evaluations.application.ports.executor import ExecutorPort
from evaluations.application.ports.unit_of_work import UnitOfWork
from evaluations.application.use_cases.exams.lookups import (
    all_test_cases,
    exercise_or_404,
    solution_or_404,
)
from evaluations.application.use_cases.executions.dispatch_execution import dispatch_executions
from evaluations.domain.exams.entities import ExerciseSolution, ExerciseSolutionResult
from evaluations.domain.executions.entities import CorrelationToken
from evaluations.domain.shared.errors import IllegalStateError

logger = logging.getLogger(__name__)


def create_exercise_solution(
    uow: UnitOfWork,
    executor: ExecutorPort,
    exercise_id: int,
    answer: str,
    compiler_flags: Optional[str] = None,
    publisher: Optional[EventPublisherPort] = None,
) -> ExerciseSolution:
    """
    Raises:
        NotFoundError, IllegalStateError (시험이 IN_PROGRESS가 아님), ValidationError,
        DispatchError (solution은 이미 저장됨. pending_test_case_ids로 재전송 가능)
    """
    with uow:
        exercise = exercise_or_404(uow, exercise_id)
        exam = exercise.exam
        if not exam.is_in_progress():
            raise IllegalStateError(
                f"Cannot submit solution: exam {exam.id} is {exam.state.value}"
            )
        solution = uow.solutions.save(
            ExerciseSolution(exercise=exercise, answer=answer, compiler_flags=compiler_flags)
        )
        test_cases = all_test_cases(uow, exercise)

    logger.info(
        "SOLUTION_SUBMITTED | exercise_id=%s solution_id=%s test_cases=%d",
        exercise_id, solution.id, len(test_cases),
    )
    dispatch_executions(executor, solution, test_cases, publisher)
    return solution


def resend_pending_executions(
    uow: UnitOfWork,
    executor: ExecutorPort,
    solution_id: int,
    publisher: Optional[EventPublisherPort] = None,
) -> list[CorrelationToken]:
    """
    DispatchError 이후 호출부가 선택하는 재전송.
    결과가 아직 없는 test case만 다시 보낸다.
    """
    with uow:
        solution = solution_or_404(uow, solution_id)
        graded = {r.test_case.id for r in uow.solution_results.get_solution_results(solution)}
        pending = [tc for tc in all_test_cases(uow, solution.exercise) if tc.id not in graded]

    logger.info("EXECUTION_RESEND | solution_id=%s pending=%d", solution_id, len(pending))
    return dispatch_executions(executor, solution, pending, publisher)


def get_solution(uow: UnitOfWork, solution_id: int) -> ExerciseSolution:
    with uow:
        return solution_or_404(uow, solution_id)


def list_solutions(uow: UnitOfWork, exercise_id: int) -> list[ExerciseSolution]:
    with uow:
        exercise = exercise_or_404(uow, exercise_id)
        return uow.solutions.get_exercise_solutions(exercise)


def get_solution_results(uow: UnitOfWork, solution_id: int) -> list[ExerciseSolutionResult]:
    with uow:
        solution = solution_or_404(uow, solution_id)
        return uow.solution_results.get_solution_results(solution)
