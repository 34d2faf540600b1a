# evaluations/shared/contracts/execution_request.py
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional
import json
from datetime import datetime, timezone

from evaluations.domain.executions.entities import CorrelationToken, ExecutionRequest


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ExecutionRequestMessage:
    """
    Evaluations → Executor 로 전달되는 '계약' (Contract)

    원칙:
    - Executor는 시험/문제를 모른다. 실행에 필요한 값만 담는다.
    - reply_data는 불투명 값. Executor는 응답에 그대로 echo만 한다.
    """

    code: str
    language: str
    timeout: int
    reply_data: Dict[str, Any]

    program_arguments: List[str] = field(default_factory=list)
    stdin: List[str] = field(default_factory=list)
    compiler_flags: Optional[str] = None

    created_at: str = ""

    @staticmethod
    def new(request: ExecutionRequest, token: CorrelationToken) -> "ExecutionRequestMessage":
        return ExecutionRequestMessage(
            code=request.code,
            language=request.language.value,
            timeout=request.timeout,
            reply_data=token.to_dict(),
            program_arguments=list(request.program_arguments),
            stdin=list(request.stdin),
            compiler_flags=request.compiler_flags,
            created_at=_now_iso(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ExecutionRequestMessage":
        return ExecutionRequestMessage(
            code=str(data.get("code") or ""),
            language=str(data.get("language") or ""),
            timeout=int(data.get("timeout") or 0),
            reply_data=dict(data.get("reply_data") or {}),
            program_arguments=list(data.get("program_arguments") or []),
            stdin=list(data.get("stdin") or []),
            compiler_flags=data.get("compiler_flags"),
            created_at=str(data.get("created_at") or ""),
        )

    @staticmethod
    def from_json(raw: str) -> "ExecutionRequestMessage":
        return ExecutionRequestMessage.from_dict(json.loads(raw))
