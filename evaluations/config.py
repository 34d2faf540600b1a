# evaluations/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v not in (None, "") else default


@dataclass(frozen=True)
class EvaluationsConfig:
    # AWS
    AWS_REGION: str = "ap-northeast-2"

    # SQS queues
    EXECUTION_REQUESTS_QUEUE: str = "evaluations-execution-requests"
    EXECUTION_RESPONSES_QUEUE: str = "evaluations-execution-responses"
    EVENTS_QUEUE: Optional[str] = None  # 미설정 시 이벤트 발행 안 함
    SQS_WAIT_TIME_SECONDS: int = 20  # long polling (최대 20)

    # Redis (REDIS_HOST 미설정 시 result lock 비활성)
    REDIS_HOST: Optional[str] = None
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: Optional[str] = None
    REDIS_DB: int = 0

    # Redis result lock (SQS visibility timeout보다 길게)
    RESULT_LOCK_TTL_SECONDS: int = 600

    # Worker
    WORKER_MAX_CONSECUTIVE_ERRORS: int = 10

    @staticmethod
    def load() -> "EvaluationsConfig":
        return EvaluationsConfig(
            AWS_REGION=_env("AWS_REGION", "ap-northeast-2") or "ap-northeast-2",

            EXECUTION_REQUESTS_QUEUE=_env(
                "EVALUATIONS_EXECUTION_REQUESTS_QUEUE", "evaluations-execution-requests"
            ) or "evaluations-execution-requests",
            EXECUTION_RESPONSES_QUEUE=_env(
                "EVALUATIONS_EXECUTION_RESPONSES_QUEUE", "evaluations-execution-responses"
            ) or "evaluations-execution-responses",
            EVENTS_QUEUE=_env("EVALUATIONS_EVENTS_QUEUE"),
            SQS_WAIT_TIME_SECONDS=min(20, int(_env("EVALUATIONS_SQS_WAIT_TIME_SECONDS", "20") or "20")),

            REDIS_HOST=_env("REDIS_HOST"),
            REDIS_PORT=int(_env("REDIS_PORT", "6379") or "6379"),
            REDIS_PASSWORD=_env("REDIS_PASSWORD"),
            REDIS_DB=int(_env("REDIS_DB", "0") or "0"),

            RESULT_LOCK_TTL_SECONDS=int(_env("EVALUATIONS_RESULT_LOCK_TTL_SECONDS", "600") or "600"),

            WORKER_MAX_CONSECUTIVE_ERRORS=int(
                _env("EVALUATIONS_WORKER_MAX_CONSECUTIVE_ERRORS", "10") or "10"
            ),
        )
