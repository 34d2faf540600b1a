"""
도메인 이벤트 SQS 발행 - EventPublisherPort 구현

발행 실패는 로그만 남긴다 (이벤트는 부가 알림, 트랜잭션은 이미 commit됨).
"""
from __future__ import annotations

import logging
from typing import Optional

from evaluations.adapters.queue.sqs.client import SQSQueueClient
from evaluations.domain.shared.events import DomainEvent

logger = logging.getLogger(__name__)


class SQSEventPublisher:

    def __init__(self, queue_name: str, client: Optional[SQSQueueClient] = None) -> None:
        self._queue_name = queue_name
        self._client = client

    def _get_client(self) -> SQSQueueClient:
        if self._client is None:
            self._client = SQSQueueClient()
        return self._client

    def publish(self, event: DomainEvent) -> None:
        if not self._get_client().send_message(self._queue_name, event.to_dict()):
            logger.warning("EVENT_PUBLISH_FAILED | event=%s queue=%s", event.name, self._queue_name)
