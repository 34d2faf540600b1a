"""
Execution 요청 발행 Use Case - 도메인/포트만 사용 (boto3 미사용)

(solution, test case) 1쌍 → ExecutionRequest 1건 + CorrelationToken.
응답은 기다리지 않는다. 재시도는 호출부 판단 (resend_pending_executions).
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from evaluations.application.ports.events import EventPublisherPort
from evaluations.application.ports.executor import ExecutorPort
from evaluations.domain.exams.entities import ExerciseSolution, TestCase
from evaluations.domain.executions.entities import CorrelationToken, ExecutionRequest
from evaluations.domain.shared.errors import DispatchError
from evaluations.domain.shared.events import ExecutionRequested

logger = logging.getLogger(__name__)


def build_execution_request(solution: ExerciseSolution, test_case: TestCase) -> ExecutionRequest:
    return ExecutionRequest(
        code=solution.answer,
        language=solution.exercise.language,
        timeout=test_case.timeout,
        program_arguments=tuple(test_case.program_arguments),
        stdin=tuple(test_case.stdin_lines()),
        compiler_flags=solution.compiler_flags,
    )


def dispatch_execution(
    executor: ExecutorPort,
    solution: ExerciseSolution,
    test_case: TestCase,
    publisher: Optional[EventPublisherPort] = None,
) -> CorrelationToken:
    """요청 1건 전송. 실패 시 DispatchError (엔티티 변경 없음)."""
    token = CorrelationToken(solution_id=solution.id, test_case_id=test_case.id)
    request = build_execution_request(solution, test_case)
    try:
        executor.request_execution(request, token)
    except DispatchError:
        raise
    except Exception as e:
        raise DispatchError(
            f"Execution request could not be sent: {e}",
            solution_id=solution.id,
            pending_test_case_ids=[test_case.id],
            cause=e,
        ) from e

    logger.info(
        "EXECUTION_DISPATCHED | solution_id=%s test_case_id=%s language=%s timeout=%s",
        token.solution_id, token.test_case_id, request.language.value, request.timeout,
    )
    if publisher is not None:
        publisher.publish(ExecutionRequested(solution_id=token.solution_id, test_case_id=token.test_case_id))
    return token


def dispatch_executions(
    executor: ExecutorPort,
    solution: ExerciseSolution,
    test_cases: Sequence[TestCase],
    publisher: Optional[EventPublisherPort] = None,
) -> list[CorrelationToken]:
    """
    test case마다 1건씩 전송.
    중간 실패 시 DispatchError.pending_test_case_ids에 실패분 + 미전송분을 담아 올린다.
    """
    tokens: list[CorrelationToken] = []
    for idx, test_case in enumerate(test_cases):
        try:
            tokens.append(dispatch_execution(executor, solution, test_case, publisher))
        except DispatchError as e:
            pending = [tc.id for tc in test_cases[idx:]]
            logger.error(
                "EXECUTION_DISPATCH_FAILED | solution_id=%s sent=%d pending=%s error=%s",
                solution.id, len(tokens), pending, e,
            )
            raise DispatchError(
                str(e),
                solution_id=solution.id,
                pending_test_case_ids=pending,
                cause=e.cause or e,
            ) from e
    return tokens
