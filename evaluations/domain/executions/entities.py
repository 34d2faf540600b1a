"""
Execution 도메인 - 순수 파이썬

- CorrelationToken: (solution_id, test_case_id). 외부 전송 계층을 그대로 왕복하는 불투명 값.
- ExecutionRequest: executor에 보내는 실행 요청.
- ExecutionOutcome: executor가 돌려주는 최종 결과 (닫힌 union).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from evaluations.domain.exams.entities import Language, Verdict
from evaluations.domain.shared.errors import ValidationError


@dataclass(frozen=True)
class CorrelationToken:
    solution_id: int
    test_case_id: int

    def to_dict(self) -> dict[str, int]:
        return {"solution_id": self.solution_id, "test_case_id": self.test_case_id}

    @staticmethod
    def from_dict(data: Optional[dict[str, Any]]) -> "CorrelationToken":
        if not isinstance(data, dict):
            raise ValidationError("Missing correlation data")
        try:
            return CorrelationToken(
                solution_id=int(data["solution_id"]),
                test_case_id=int(data["test_case_id"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Malformed correlation data: {data!r}") from e

    def __str__(self) -> str:
        return f"{self.solution_id}:{self.test_case_id}"


@dataclass(frozen=True)
class ExecutionRequest:
    code: str
    language: Language
    timeout: int
    program_arguments: tuple[str, ...] = ()
    stdin: tuple[str, ...] = ()
    compiler_flags: Optional[str] = None


# ---------------------------------------------------------------------------
# Outcome union
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FinishedOutcome:
    """프로그램이 종료 코드와 함께 끝남."""
    exit_code: int
    stdout: tuple[str, ...] = ()
    stderr: tuple[str, ...] = ()


@dataclass(frozen=True)
class TimedOutOutcome:
    """Executor 자체 timeout."""
    pass


@dataclass(frozen=True)
class CompileErrorOutcome:
    compiler_errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class InitializationErrorOutcome:
    """Executor 환경 초기화 실패 (인프라 장애)."""
    error: str = ""


@dataclass(frozen=True)
class UnknownErrorOutcome:
    """원인 불명 executor 장애 (인프라 장애)."""
    error: str = ""


ExecutionOutcome = Union[
    FinishedOutcome,
    TimedOutOutcome,
    CompileErrorOutcome,
    InitializationErrorOutcome,
    UnknownErrorOutcome,
]

INFRASTRUCTURE_OUTCOMES = (InitializationErrorOutcome, UnknownErrorOutcome)


@dataclass(frozen=True)
class Grade:
    verdict: Verdict
    detail: Optional[str] = None
