"""
Event 포트 - 도메인 이벤트 발행 (publish 전용)
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from evaluations.domain.shared.events import DomainEvent


class EventPublisherPort(Protocol):

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        ...
