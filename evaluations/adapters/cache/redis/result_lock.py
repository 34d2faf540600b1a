"""
Redis 기반 결과 처리 락 (같은 token 동시 수신 차단)

- 키: execution-result:{solution_id}:{test_case_id}:lock
- SET NX EX: 실패 시 다른 worker가 처리 중 → 호출부는 duplicate로 처리
- Redis 미사용/장애 시 허용. first-write-wins는 DB 조회 + unique 제약이 보장.
- 연결은 첫 acquire 때. host 없음/ping 실패면 이 인스턴스는 이후 Redis를 쓰지 않는다.
"""

from __future__ import annotations

import logging
from typing import Optional

import redis

from evaluations.config import EvaluationsConfig
from evaluations.domain.executions.entities import CorrelationToken

logger = logging.getLogger(__name__)

LOG_LOCK_ACQUIRED = "RESULT_LOCK token=%s acquired"
LOG_LOCK_BUSY = "RESULT_LOCK token=%s busy"
LOG_LOCK_RELEASED = "RESULT_LOCK token=%s released"

DEFAULT_LOCK_TTL_SECONDS = 600


def _lock_key(token: CorrelationToken) -> str:
    return f"execution-result:{token.solution_id}:{token.test_case_id}:lock"


class RedisResultLock:
    """ResultLockPort 구현."""

    def __init__(
        self,
        host: Optional[str] = None,
        port: int = 6379,
        password: Optional[str] = None,
        db: int = 0,
        ttl_seconds: int = DEFAULT_LOCK_TTL_SECONDS,
        client: Optional[redis.Redis] = None,
    ) -> None:
        self._host = host
        self._port = port
        self._password = password
        self._db = db
        self._ttl_seconds = ttl_seconds
        self._client = client
        self._disabled = False

    @classmethod
    def from_config(cls, config: EvaluationsConfig) -> "RedisResultLock":
        return cls(
            host=config.REDIS_HOST,
            port=config.REDIS_PORT,
            password=config.REDIS_PASSWORD,
            db=config.REDIS_DB,
            ttl_seconds=config.RESULT_LOCK_TTL_SECONDS,
        )

    def _get_client(self) -> Optional[redis.Redis]:
        if self._client is not None:
            return self._client
        if self._disabled:
            return None
        if not self._host:
            logger.debug("REDIS_HOST not set, result lock disabled")
            self._disabled = True
            return None
        try:
            client = redis.Redis(
                host=self._host,
                port=self._port,
                password=self._password,
                db=self._db,
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
            )
            client.ping()
        except redis.RedisError as e:
            logger.warning("Redis connection failed, result lock disabled: %s", e)
            self._disabled = True
            return None
        logger.info("Redis connected for result lock: %s:%s db=%s", self._host, self._port, self._db)
        self._client = client
        return client

    def acquire(self, token: CorrelationToken) -> bool:
        client = self._get_client()
        if client is None:
            return True
        try:
            if client.set(_lock_key(token), "1", nx=True, ex=self._ttl_seconds):
                logger.debug(LOG_LOCK_ACQUIRED, token)
                return True
            logger.info(LOG_LOCK_BUSY, token)
            return False
        except redis.RedisError as e:
            logger.warning("Redis lock acquire failed, allowing result: %s", e)
            return True

    def release(self, token: CorrelationToken) -> None:
        client = self._get_client()
        if client is None:
            return
        try:
            client.delete(_lock_key(token))
            logger.debug(LOG_LOCK_RELEASED, token)
        except redis.RedisError as e:
            logger.warning("Redis lock release failed: %s", e)
