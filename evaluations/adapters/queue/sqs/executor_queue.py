"""
Executor SQS 어댑터 - ExecutorPort 구현 (요청 큐로 전송만, 응답은 worker가 수신)
"""
from __future__ import annotations

import logging
from typing import Optional

from evaluations.adapters.queue.sqs.client import SQSQueueClient
from evaluations.config import EvaluationsConfig
from evaluations.domain.executions.entities import CorrelationToken, ExecutionRequest
from evaluations.domain.shared.errors import DispatchError
from evaluations.shared.contracts.execution_request import ExecutionRequestMessage

logger = logging.getLogger(__name__)


class SQSExecutorAdapter:

    def __init__(self, queue_name: str, client: Optional[SQSQueueClient] = None) -> None:
        self._queue_name = queue_name
        self._client = client

    @classmethod
    def from_config(
        cls, config: EvaluationsConfig, client: Optional[SQSQueueClient] = None
    ) -> "SQSExecutorAdapter":
        """요청 큐 이름 + AWS_REGION을 설정에서."""
        client = client or SQSQueueClient(region_name=config.AWS_REGION)
        return cls(config.EXECUTION_REQUESTS_QUEUE, client=client)

    def _get_client(self) -> SQSQueueClient:
        if self._client is None:
            self._client = SQSQueueClient()
        return self._client

    def request_execution(self, request: ExecutionRequest, token: CorrelationToken) -> None:
        message = ExecutionRequestMessage.new(request, token)
        if not self._get_client().send_message(self._queue_name, message.to_dict()):
            raise DispatchError(
                f"Failed to enqueue execution request {token} to {self._queue_name}",
                solution_id=token.solution_id,
                pending_test_case_ids=[token.test_case_id],
            )
        logger.debug("EXECUTION_REQUEST_ENQUEUED | queue=%s token=%s", self._queue_name, token)
