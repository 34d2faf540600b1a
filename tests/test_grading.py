import pytest

from evaluations.domain.exams.entities import Verdict
from evaluations.domain.executions.entities import (
    CompileErrorOutcome,
    FinishedOutcome,
    InitializationErrorOutcome,
    TimedOutOutcome,
    UnknownErrorOutcome,
)
from evaluations.domain.executions.grading import DETAIL_MAX_LENGTH, grade_outcome


def test_non_zero_exit_code_fails():
    grade = grade_outcome(FinishedOutcome(exit_code=7), ["x"])
    assert grade.verdict == Verdict.FAILED
    assert grade.detail == "exit_code=7"


def test_non_zero_exit_code_with_stderr_keeps_stderr_as_detail():
    grade = grade_outcome(FinishedOutcome(exit_code=1, stderr=("Traceback", "boom")), [])
    assert grade.verdict == Verdict.FAILED
    assert grade.detail == "Traceback\nboom"


def test_stderr_output_fails_even_on_clean_exit():
    grade = grade_outcome(FinishedOutcome(exit_code=0, stdout=("x",), stderr=("warn",)), ["x"])
    assert grade.verdict == Verdict.FAILED
    assert grade.detail == "warn"


def test_stdout_order_matters():
    grade = grade_outcome(FinishedOutcome(exit_code=0, stdout=("a", "b")), ["b", "a"])
    assert grade.verdict == Verdict.FAILED


def test_matching_stdout_is_approved():
    grade = grade_outcome(FinishedOutcome(exit_code=0, stdout=("x", "y")), ["x", "y"])
    assert grade.verdict == Verdict.APPROVED
    assert grade.detail is None


def test_empty_stdout_matches_empty_expected():
    assert grade_outcome(FinishedOutcome(exit_code=0), []).verdict == Verdict.APPROVED


def test_missing_trailing_line_fails():
    grade = grade_outcome(FinishedOutcome(exit_code=0, stdout=("x",)), ["x", "y"])
    assert grade.verdict == Verdict.FAILED


def test_timed_out():
    assert grade_outcome(TimedOutOutcome(), ["x"]).verdict == Verdict.TIMED_OUT


def test_compile_error():
    grade = grade_outcome(CompileErrorOutcome(compiler_errors=("line 1: missing ;",)), ["x"])
    assert grade.verdict == Verdict.NOT_COMPILED
    assert grade.detail == "line 1: missing ;"


@pytest.mark.parametrize("outcome", [InitializationErrorOutcome("no image"), UnknownErrorOutcome("oom")])
def test_infrastructure_failures_have_no_verdict(outcome):
    assert grade_outcome(outcome, ["x"]) is None


def test_detail_is_truncated():
    grade = grade_outcome(CompileErrorOutcome(compiler_errors=("e" * (DETAIL_MAX_LENGTH + 50),)), [])
    assert len(grade.detail) == DETAIL_MAX_LENGTH


def test_unknown_outcome_type_is_rejected():
    with pytest.raises(TypeError):
        grade_outcome(object(), [])
