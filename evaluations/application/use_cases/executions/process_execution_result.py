"""
Execution 결과 수신 Use Case - 도메인/포트만 사용 (Django/boto3/redis 미사용)

token → (solution, test case) 재조회 → outcome 분류 → 결과 1건 저장.
호출 사이에 상태를 들고 있지 않는다 (token + 저장된 엔티티만으로 재개 가능).

중복 수신 정책: first-write-wins.
- lock(ResultLockPort): 같은 token 동시 수신 차단 (선택)
- 트랜잭션 안에서 기존 결과 조회
- 어댑터 unique 제약 → DuplicateResultError
"""
from __future__ import annotations

import logging
from typing import Optional

from evaluations.application.ports.events import EventPublisherPort
from evaluations.application.ports.locks import ResultLockPort
from evaluations.application.ports.unit_of_work import UnitOfWork
from evaluations.domain.exams.entities import ExerciseSolutionResult
from evaluations.domain.executions.entities import CorrelationToken, ExecutionOutcome
from evaluations.domain.executions.grading import grade_outcome
from evaluations.domain.shared.errors import DuplicateResultError, NotFoundError, ValidationError
from evaluations.domain.shared.events import ExecutionFailed, ExecutionResultRecorded
from evaluations.domain.shared.result import Err, Ok, Result

logger = logging.getLogger(__name__)

LOG_DUPLICATE_SKIP = "IDEMPOTENT_SKIP solution_id=%s test_case_id=%s reason=%s"

ERR_INFRASTRUCTURE = "infrastructure_error"
ERR_DUPLICATE = "duplicate"


def process_execution_result(
    uow: UnitOfWork,
    token: CorrelationToken,
    outcome: ExecutionOutcome,
    publisher: Optional[EventPublisherPort] = None,
    lock: Optional[ResultLockPort] = None,
) -> Result[ExerciseSolutionResult]:
    """
    Returns:
        Ok(ExerciseSolutionResult): 결과 저장됨
        Err(code="infrastructure_error"): init/unknown error, 저장 안 함
        Err(code="duplicate"): 이미 결과 있음 (first-write-wins)
    Raises:
        NotFoundError: solution 또는 test case 없음
        ValidationError: test case가 solution의 exercise 소속이 아님
        StorageError: repository 실패
    """
    if lock is not None and not lock.acquire(token):
        logger.info(LOG_DUPLICATE_SKIP, token.solution_id, token.test_case_id, "in_flight")
        return Err(f"Result for {token} is being processed", code=ERR_DUPLICATE)
    try:
        result = _grade_and_store(uow, token, outcome)
    finally:
        if lock is not None:
            lock.release(token)

    if publisher is not None:
        if isinstance(result, Ok):
            publisher.publish(
                ExecutionResultRecorded(
                    solution_id=token.solution_id,
                    test_case_id=token.test_case_id,
                    result=result.value.result.value,
                    result_id=result.value.id,
                )
            )
        elif result.code == ERR_INFRASTRUCTURE:
            publisher.publish(
                ExecutionFailed(
                    solution_id=token.solution_id,
                    test_case_id=token.test_case_id,
                    kind=type(outcome).__name__,
                    error=getattr(outcome, "error", ""),
                )
            )
    return result


def _grade_and_store(
    uow: UnitOfWork,
    token: CorrelationToken,
    outcome: ExecutionOutcome,
) -> Result[ExerciseSolutionResult]:
    try:
        with uow:
            solution = uow.solutions.find_by_id(token.solution_id)
            if solution is None:
                raise NotFoundError("ExerciseSolution", token.solution_id)
            test_case = uow.test_cases.find_by_id(token.test_case_id)
            if test_case is None:
                raise NotFoundError("TestCase", token.test_case_id)
            if test_case.exercise.id != solution.exercise.id:
                raise ValidationError(
                    f"Test case {test_case.id} does not belong to exercise {solution.exercise.id}"
                )

            grade = grade_outcome(outcome, test_case.expected_outputs)
            if grade is None:
                logger.warning(
                    "EXECUTION_INFRASTRUCTURE_ERROR | solution_id=%s test_case_id=%s kind=%s error=%s",
                    token.solution_id, token.test_case_id,
                    type(outcome).__name__, getattr(outcome, "error", ""),
                )
                return Err(f"{type(outcome).__name__} for {token}", code=ERR_INFRASTRUCTURE)

            if uow.solution_results.find_by_solution_and_test_case(solution, test_case) is not None:
                logger.info(LOG_DUPLICATE_SKIP, token.solution_id, token.test_case_id, "already_graded")
                return Err(f"Result for {token} already recorded", code=ERR_DUPLICATE)

            saved = uow.solution_results.save(
                ExerciseSolutionResult(
                    solution=solution,
                    test_case=test_case,
                    result=grade.verdict,
                    detail=grade.detail,
                )
            )
    except DuplicateResultError:
        logger.info(LOG_DUPLICATE_SKIP, token.solution_id, token.test_case_id, "unique_violation")
        return Err(f"Result for {token} already recorded", code=ERR_DUPLICATE)

    logger.info(
        "EXECUTION_RESULT_RECORDED | solution_id=%s test_case_id=%s result=%s",
        token.solution_id, token.test_case_id, saved.result.value,
    )
    return Ok(saved)
