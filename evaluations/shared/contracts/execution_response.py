# evaluations/shared/contracts/execution_response.py
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Literal, Optional
import json

from evaluations.domain.executions.entities import (
    CompileErrorOutcome,
    CorrelationToken,
    ExecutionOutcome,
    FinishedOutcome,
    InitializationErrorOutcome,
    TimedOutOutcome,
    UnknownErrorOutcome,
)
from evaluations.domain.shared.errors import ValidationError

ExecutionResponseType = Literal[
    "FINISHED",
    "TIMED_OUT",
    "COMPILE_ERROR",
    "INITIALIZATION_ERROR",
    "UNKNOWN_ERROR",
]

RESPONSE_TYPES = ("FINISHED", "TIMED_OUT", "COMPILE_ERROR", "INITIALIZATION_ERROR", "UNKNOWN_ERROR")


def _lines(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key) or []
    if not isinstance(value, list) or any(not isinstance(v, str) for v in value):
        raise ValidationError(f"'{key}' must be a list of strings")
    return list(value)


@dataclass(frozen=True)
class ExecutionResponseMessage:
    """
    Executor → Evaluations 로 전달되는 '계약' (Contract)

    type별 사용 필드:
    - FINISHED: exit_code, stdout, stderr
    - COMPILE_ERROR: compiler_errors
    - INITIALIZATION_ERROR / UNKNOWN_ERROR: error
    """

    type: ExecutionResponseType
    reply_data: Dict[str, Any]

    exit_code: Optional[int] = None
    stdout: List[str] = field(default_factory=list)
    stderr: List[str] = field(default_factory=list)
    compiler_errors: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @staticmethod
    def from_outcome(outcome: ExecutionOutcome, token: CorrelationToken) -> "ExecutionResponseMessage":
        reply = token.to_dict()
        if isinstance(outcome, FinishedOutcome):
            return ExecutionResponseMessage(
                type="FINISHED",
                reply_data=reply,
                exit_code=outcome.exit_code,
                stdout=list(outcome.stdout),
                stderr=list(outcome.stderr),
            )
        if isinstance(outcome, TimedOutOutcome):
            return ExecutionResponseMessage(type="TIMED_OUT", reply_data=reply)
        if isinstance(outcome, CompileErrorOutcome):
            return ExecutionResponseMessage(
                type="COMPILE_ERROR", reply_data=reply, compiler_errors=list(outcome.compiler_errors)
            )
        if isinstance(outcome, InitializationErrorOutcome):
            return ExecutionResponseMessage(type="INITIALIZATION_ERROR", reply_data=reply, error=outcome.error)
        if isinstance(outcome, UnknownErrorOutcome):
            return ExecutionResponseMessage(type="UNKNOWN_ERROR", reply_data=reply, error=outcome.error)
        raise TypeError(f"Unknown execution outcome: {type(outcome).__name__}")

    def token(self) -> CorrelationToken:
        return CorrelationToken.from_dict(self.reply_data)

    def outcome(self) -> ExecutionOutcome:
        if self.type == "FINISHED":
            if self.exit_code is None:
                raise ValidationError("FINISHED response without exit_code")
            return FinishedOutcome(
                exit_code=self.exit_code,
                stdout=tuple(self.stdout),
                stderr=tuple(self.stderr),
            )
        if self.type == "TIMED_OUT":
            return TimedOutOutcome()
        if self.type == "COMPILE_ERROR":
            return CompileErrorOutcome(compiler_errors=tuple(self.compiler_errors))
        if self.type == "INITIALIZATION_ERROR":
            return InitializationErrorOutcome(error=self.error or "")
        return UnknownErrorOutcome(error=self.error or "")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ExecutionResponseMessage":
        if not isinstance(data, dict):
            raise ValidationError("Execution response must be an object")
        response_type = data.get("type")
        if response_type not in RESPONSE_TYPES:
            raise ValidationError(f"Unknown execution response type: {response_type!r}")
        reply_data = data.get("reply_data")
        if not isinstance(reply_data, dict):
            raise ValidationError("Execution response without reply_data")
        exit_code = data.get("exit_code")
        if exit_code is not None:
            try:
                exit_code = int(exit_code)
            except (TypeError, ValueError) as e:
                raise ValidationError(f"Malformed exit_code: {exit_code!r}") from e
        error = data.get("error")
        return ExecutionResponseMessage(
            type=response_type,
            reply_data=reply_data,
            exit_code=exit_code,
            stdout=_lines(data, "stdout"),
            stderr=_lines(data, "stderr"),
            compiler_errors=_lines(data, "compiler_errors"),
            error=str(error) if error is not None else None,
        )

    @staticmethod
    def from_json(raw: str) -> "ExecutionResponseMessage":
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Malformed execution response: {e}") from e
        return ExecutionResponseMessage.from_dict(data)
