"""
도메인 이벤트 - publish 전용 (이 코어는 다시 소비하지 않음)
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class DomainEvent:
    occurred_at: str = field(default_factory=_now_iso, kw_only=True)

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["event"] = self.name
        return d


@dataclass(frozen=True)
class ExamStateChanged(DomainEvent):
    exam_id: int
    state: str


@dataclass(frozen=True)
class ExecutionRequested(DomainEvent):
    solution_id: int
    test_case_id: int


@dataclass(frozen=True)
class ExecutionResultRecorded(DomainEvent):
    solution_id: int
    test_case_id: int
    result: str
    result_id: Optional[int] = None


@dataclass(frozen=True)
class ExecutionFailed(DomainEvent):
    """Initialization/Unknown error: 채점 결과 없이 관측용으로만 발행."""
    solution_id: int
    test_case_id: int
    kind: str
    error: str = ""
