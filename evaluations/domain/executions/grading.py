"""
Execution outcome 분류 (채점 정책 v1) - 순수 파이썬

우선순위 (먼저 일치하는 규칙 적용):
1) InitializationError / UnknownError → None (인프라 장애, 결과 저장 안 함)
2) CompileError → NOT_COMPILED
3) TimedOut → TIMED_OUT
4) Finished, exit_code != 0 → FAILED
5) Finished, exit_code == 0, stderr 있음 → FAILED
6) Finished, exit_code == 0, stderr 없음, stdout == expected (순서 포함) → APPROVED
7) 그 외 Finished → FAILED
"""
from __future__ import annotations

from typing import Optional, Sequence

from evaluations.domain.exams.entities import Verdict
from evaluations.domain.executions.entities import (
    CompileErrorOutcome,
    ExecutionOutcome,
    FinishedOutcome,
    Grade,
    InitializationErrorOutcome,
    TimedOutOutcome,
    UnknownErrorOutcome,
)

DETAIL_MAX_LENGTH = 2000


def _join(lines: Sequence[str]) -> Optional[str]:
    if not lines:
        return None
    return "\n".join(lines)[:DETAIL_MAX_LENGTH]


def is_infrastructure_failure(outcome: ExecutionOutcome) -> bool:
    return isinstance(outcome, (InitializationErrorOutcome, UnknownErrorOutcome))


def grade_outcome(outcome: ExecutionOutcome, expected_outputs: Sequence[str]) -> Optional[Grade]:
    """outcome을 verdict로 분류. 인프라 장애면 None."""
    if is_infrastructure_failure(outcome):
        return None

    if isinstance(outcome, CompileErrorOutcome):
        return Grade(Verdict.NOT_COMPILED, _join(outcome.compiler_errors))

    if isinstance(outcome, TimedOutOutcome):
        return Grade(Verdict.TIMED_OUT)

    if isinstance(outcome, FinishedOutcome):
        if outcome.exit_code != 0:
            detail = _join(outcome.stderr) or f"exit_code={outcome.exit_code}"
            return Grade(Verdict.FAILED, detail)
        if outcome.stderr:
            return Grade(Verdict.FAILED, _join(outcome.stderr))
        if list(outcome.stdout) == list(expected_outputs):
            return Grade(Verdict.APPROVED)
        return Grade(Verdict.FAILED)

    raise TypeError(f"Unsupported execution outcome: {type(outcome).__name__}")
