"""
Execution Response Worker - Hexagonal 프레임워크 계층 (thin)

- Use Case + Adapter만 호출.
- SQS 수신 → ExecutionResponseMessage 파싱 → process_execution_result → delete.
- poison message(파싱 불가, 없는 solution/test case)는 삭제.
- StorageError는 삭제하지 않음 (visibility timeout 후 재수신).
"""
from __future__ import annotations

import logging
import os
import signal
import sys
import time
import uuid
from typing import Any, Callable, Optional

from evaluations.adapters.cache.redis.result_lock import RedisResultLock
from evaluations.adapters.db.django.uow import DjangoUnitOfWork
from evaluations.adapters.queue.sqs.client import QueueUnavailableError, SQSQueueClient
from evaluations.adapters.queue.sqs.event_publisher import SQSEventPublisher
from evaluations.adapters.queue.sqs.response_queue import SQSExecutionResponseQueue
from evaluations.application.ports.events import EventPublisherPort
from evaluations.application.ports.locks import ResultLockPort
from evaluations.application.ports.unit_of_work import UnitOfWork
from evaluations.application.use_cases.executions.process_execution_result import (
    process_execution_result,
)
from evaluations.config import EvaluationsConfig
from evaluations.domain.shared.errors import NotFoundError, StorageError, ValidationError
from evaluations.domain.shared.result import Ok
from evaluations.shared.contracts.execution_response import ExecutionResponseMessage

logger = logging.getLogger("evaluations.execution_response_worker")

QUEUE_UNAVAILABLE_BACKOFF_SECONDS = 60
UNEXPECTED_ERROR_BACKOFF_SECONDS = 5

# handle_message 반환값
RECORDED = "recorded"
SKIPPED = "skipped"      # duplicate / infrastructure error (Err)
REJECTED = "rejected"    # poison message
RETRY = "retry"          # 저장 실패, 메시지 유지

_shutdown = False


def _handle_signal(sig, frame) -> None:
    global _shutdown
    logger.info("Received signal %s, graceful shutdown", sig)
    _shutdown = True


def handle_message(
    message: dict[str, Any],
    uow: UnitOfWork,
    publisher: Optional[EventPublisherPort] = None,
    lock: Optional[ResultLockPort] = None,
) -> str:
    """SQS 메시지 1건 처리. 삭제 여부는 반환값으로 판단 (RETRY만 유지)."""
    request_id = uuid.uuid4().hex[:8]
    try:
        response = ExecutionResponseMessage.from_json(message.get("Body") or "")
        token = response.token()
        outcome = response.outcome()
    except ValidationError as e:
        logger.error("EXECUTION_RESPONSE_REJECTED | request_id=%s | error=%s", request_id, e)
        return REJECTED

    logger.info(
        "EXECUTION_RESPONSE_RECEIVED | request_id=%s | token=%s | type=%s",
        request_id, token, response.type,
    )
    try:
        result = process_execution_result(uow, token, outcome, publisher=publisher, lock=lock)
    except (ValidationError, NotFoundError) as e:
        logger.error(
            "EXECUTION_RESPONSE_REJECTED | request_id=%s | token=%s | error=%s",
            request_id, token, e,
        )
        return REJECTED
    except StorageError as e:
        logger.warning(
            "EXECUTION_RESPONSE_RETRY | request_id=%s | token=%s | error=%s",
            request_id, token, e,
        )
        return RETRY

    if isinstance(result, Ok):
        return RECORDED
    logger.info(
        "EXECUTION_RESPONSE_SKIPPED | request_id=%s | token=%s | code=%s",
        request_id, token, result.code,
    )
    return SKIPPED


def run_execution_response_worker(
    config: Optional[EvaluationsConfig] = None,
    queue: Optional[SQSExecutionResponseQueue] = None,
    uow_factory: Callable[[], UnitOfWork] = DjangoUnitOfWork,
    publisher: Optional[EventPublisherPort] = None,
    lock: Optional[ResultLockPort] = None,
) -> int:
    """메인 루프. 0 정상 종료, 1 오류."""
    signal.signal(signal.SIGTERM, _handle_signal)
    signal.signal(signal.SIGINT, _handle_signal)

    config = config or EvaluationsConfig.load()
    client: Optional[SQSQueueClient] = None
    if queue is None:
        client = SQSQueueClient(region_name=config.AWS_REGION)
        queue = SQSExecutionResponseQueue(config.EXECUTION_RESPONSES_QUEUE, client=client)
    if publisher is None and config.EVENTS_QUEUE:
        client = client or SQSQueueClient(region_name=config.AWS_REGION)
        publisher = SQSEventPublisher(config.EVENTS_QUEUE, client=client)
    if lock is None:
        lock = RedisResultLock.from_config(config)

    consecutive_errors = 0
    max_consecutive_errors = config.WORKER_MAX_CONSECUTIVE_ERRORS

    logger.info("Execution response worker started | queue=%s", queue.queue_name)
    try:
        while not _shutdown:
            try:
                try:
                    message = queue.receive(wait_time_seconds=config.SQS_WAIT_TIME_SECONDS)
                except QueueUnavailableError as e:
                    logger.warning("SQS unavailable, waiting %ss: %s", QUEUE_UNAVAILABLE_BACKOFF_SECONDS, e)
                    time.sleep(QUEUE_UNAVAILABLE_BACKOFF_SECONDS)
                    continue

                if not message:
                    continue

                receipt_handle = message.get("ReceiptHandle")
                status = handle_message(message, uow_factory(), publisher=publisher, lock=lock)

                if status == RETRY:
                    consecutive_errors += 1
                else:
                    if receipt_handle:
                        queue.delete(receipt_handle)
                    consecutive_errors = 0

                if consecutive_errors >= max_consecutive_errors:
                    logger.error("Too many consecutive errors (%s), exit", consecutive_errors)
                    return 1

            except KeyboardInterrupt:
                break
            except Exception as e:
                logger.exception("Unexpected error: %s", e)
                consecutive_errors += 1
                if consecutive_errors >= max_consecutive_errors:
                    return 1
                time.sleep(UNEXPECTED_ERROR_BACKOFF_SECONDS)

        return 0
    finally:
        from django.db import connection
        connection.close()


if __name__ == "__main__":
    from dotenv import load_dotenv

    load_dotenv()
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "evaluations.framework.settings")
    import django

    django.setup()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] [EXECUTION-RESPONSE-WORKER] %(message)s",
    )
    sys.exit(run_execution_response_worker())
