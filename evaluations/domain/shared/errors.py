"""
Evaluations 도메인 오류 - 순수 파이썬

호출부(REST 계층 등)는 타입만 보고 응답을 결정한다.
- ValidationError   → 400 (입력 수정 후 재시도 가능)
- NotFoundError     → 404
- IllegalStateError → 409 (시험 상태상 허용되지 않음)
- DispatchError     → 503 (executor 채널 불가, 재시도 여부는 호출부 판단)
- StorageError      → 500 (그대로 전파)
"""
from __future__ import annotations

from typing import Optional, Sequence


class EvaluationsError(Exception):
    """Evaluations 도메인 공통 베이스."""
    pass


class ValidationError(EvaluationsError, ValueError):
    """값 형식/범위 위반."""
    pass


class NotFoundError(EvaluationsError):
    """id로 엔티티를 찾지 못함."""

    def __init__(self, entity: str, entity_id) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: id={entity_id}")


class IllegalStateError(EvaluationsError):
    """현재 Exam 상태에서 허용되지 않는 작업."""
    pass


class DispatchError(EvaluationsError):
    """Executor로 요청 전송 실패. 엔티티 상태는 변경하지 않는다."""

    def __init__(
        self,
        message: str,
        solution_id: Optional[int] = None,
        pending_test_case_ids: Sequence[int] = (),
        cause: Optional[Exception] = None,
    ) -> None:
        self.solution_id = solution_id
        self.pending_test_case_ids = tuple(pending_test_case_ids)
        self.cause = cause
        super().__init__(message)


class StorageError(EvaluationsError):
    """Repository(영속화) 실패."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        self.cause = cause
        super().__init__(message)


class DuplicateResultError(StorageError):
    """(solution, test case) 결과가 이미 존재 (unique 위반)."""
    pass
