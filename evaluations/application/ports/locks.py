"""
Result Lock 포트 - 같은 correlation token에 대한 동시 수신 방지
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from evaluations.domain.executions.entities import CorrelationToken


class ResultLockPort(Protocol):

    @abstractmethod
    def acquire(self, token: CorrelationToken) -> bool:
        """
        Returns:
            True: 처리 진행
            False: 같은 token을 다른 워커가 처리 중 (중복 수신)
        """
        ...

    @abstractmethod
    def release(self, token: CorrelationToken) -> None:
        ...
