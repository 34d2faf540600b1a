"""
SQS 큐 클라이언트 (boto3)

send / receive / delete. 인증 오류는 QueueUnavailableError로 구분
(worker는 이걸 잡고 백오프 후 재시도).
"""

from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

# 자격 증명 없는 로컬 환경에서 로그 스팸 방지: 인증 오류는 주기당 한 번만 로그
_last_auth_error_log = 0.0
_AUTH_ERROR_LOG_INTERVAL = 60.0  # 초

_AUTH_ERROR_CODES = (
    "InvalidClientTokenId",
    "UnrecognizedClientException",
    "SignatureDoesNotMatch",
    "InvalidSignatureException",
)


class QueueUnavailableError(Exception):
    """SQS 접근 불가 (자격 증명 없음/만료 등)."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)


def _is_auth_error(e: Exception) -> bool:
    if isinstance(e, ClientError):
        code = (e.response or {}).get("Error", {}).get("Code", "")
        return code in _AUTH_ERROR_CODES
    return False


def _log_auth_error_once(queue_name: str, op: str, e: Exception) -> None:
    global _last_auth_error_log
    now = time.time()
    if now - _last_auth_error_log >= _AUTH_ERROR_LOG_INTERVAL:
        logger.warning("SQS %s (%s): %s - AWS 자격 증명 확인 필요", op, queue_name, e)
        _last_auth_error_log = now


class SQSQueueClient:
    """AWS SQS 기반 큐 클라이언트. queue URL은 이름별로 캐시."""

    def __init__(self, region_name: Optional[str] = None, sqs=None):
        self.region_name = region_name or os.getenv("AWS_REGION", "ap-northeast-2")
        self.sqs = sqs if sqs is not None else boto3.client("sqs", region_name=self.region_name)
        self._queue_urls: Dict[str, str] = {}
        logger.info("SQSQueueClient initialized: %s", self.region_name)

    def _get_queue_url(self, queue_name: str) -> str:
        if queue_name in self._queue_urls:
            return self._queue_urls[queue_name]
        try:
            url = self.sqs.get_queue_url(QueueName=queue_name)["QueueUrl"]
        except (ClientError, BotoCoreError) as e:
            if _is_auth_error(e):
                _log_auth_error_once(queue_name, "get_queue_url", e)
                raise QueueUnavailableError(f"Queue URL unavailable: {e}", cause=e) from e
            logger.error("Failed to get queue URL for %s: %s", queue_name, e)
            raise
        self._queue_urls[queue_name] = url
        return url

    def send_message(self, queue_name: str, message: Dict[str, Any], delay_seconds: int = 0) -> bool:
        """실패 시 False (예외 없음)."""
        try:
            queue_url = self._get_queue_url(queue_name)
            response = self.sqs.send_message(
                QueueUrl=queue_url,
                MessageBody=json.dumps(message, ensure_ascii=False),
                DelaySeconds=delay_seconds,
            )
            logger.debug("Message sent to %s: %s", queue_name, response.get("MessageId"))
            return True
        except (ClientError, BotoCoreError, QueueUnavailableError) as e:
            logger.error("Failed to send message to %s: %s", queue_name, e)
            return False

    def receive_message(self, queue_name: str, wait_time_seconds: int = 20) -> Optional[Dict[str, Any]]:
        """메시지 1건 또는 None. 인증 오류는 QueueUnavailableError."""
        try:
            queue_url = self._get_queue_url(queue_name)
            response = self.sqs.receive_message(
                QueueUrl=queue_url,
                MaxNumberOfMessages=1,
                WaitTimeSeconds=wait_time_seconds,
                MessageAttributeNames=["All"],
            )
        except QueueUnavailableError:
            raise
        except (ClientError, BotoCoreError) as e:
            if _is_auth_error(e):
                _log_auth_error_once(queue_name, "receive_message", e)
                raise QueueUnavailableError(f"Receive unavailable: {e}", cause=e) from e
            logger.error("Failed to receive message from %s: %s", queue_name, e)
            return None
        messages = response.get("Messages", [])
        return messages[0] if messages else None

    def delete_message(self, queue_name: str, receipt_handle: str) -> bool:
        try:
            queue_url = self._get_queue_url(queue_name)
            self.sqs.delete_message(QueueUrl=queue_url, ReceiptHandle=receipt_handle)
            return True
        except (ClientError, BotoCoreError, QueueUnavailableError) as e:
            logger.error("Failed to delete message: %s", e)
            return False
