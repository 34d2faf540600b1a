"""
Executor 포트 - 실행 요청 전송 (boto3 미사용)
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from evaluations.domain.executions.entities import CorrelationToken, ExecutionRequest


class ExecutorPort(Protocol):
    """send 전용. 응답은 기다리지 않는다 (fire-and-forget)."""

    @abstractmethod
    def request_execution(self, request: ExecutionRequest, token: CorrelationToken) -> None:
        """전송 실패 시 DispatchError."""
        ...
