"""
Execution 응답 SQS 큐 - receive/delete (worker 전용)
"""
from __future__ import annotations

from typing import Any, Optional

from evaluations.adapters.queue.sqs.client import SQSQueueClient


class SQSExecutionResponseQueue:

    def __init__(self, queue_name: str, client: Optional[SQSQueueClient] = None) -> None:
        self._queue_name = queue_name
        self._client = client

    @property
    def queue_name(self) -> str:
        return self._queue_name

    def _get_client(self) -> SQSQueueClient:
        if self._client is None:
            self._client = SQSQueueClient()
        return self._client

    def receive(self, wait_time_seconds: int = 20) -> Optional[dict[str, Any]]:
        return self._get_client().receive_message(self._queue_name, wait_time_seconds=wait_time_seconds)

    def delete(self, receipt_handle: str) -> bool:
        return self._get_client().delete_message(self._queue_name, receipt_handle)
