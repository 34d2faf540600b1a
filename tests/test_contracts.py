import json

import pytest

from evaluations.domain.exams.entities import Language
from evaluations.domain.executions.entities import (
    CompileErrorOutcome,
    CorrelationToken,
    ExecutionRequest,
    FinishedOutcome,
    InitializationErrorOutcome,
    TimedOutOutcome,
    UnknownErrorOutcome,
)
from evaluations.domain.shared.errors import ValidationError
from evaluations.shared.contracts.execution_request import ExecutionRequestMessage
from evaluations.shared.contracts.execution_response import ExecutionResponseMessage


def test_request_message_carries_token_as_reply_data():
    request = ExecutionRequest(
        code="int main(){}", language=Language.C, timeout=1500,
        program_arguments=("-v",), stdin=("1", "2"), compiler_flags="-Wall",
    )
    message = ExecutionRequestMessage.new(request, CorrelationToken(8, 13))

    data = json.loads(message.to_json())
    assert data["reply_data"] == {"solution_id": 8, "test_case_id": 13}
    assert data["language"] == "C"
    assert data["stdin"] == ["1", "2"]
    assert data["created_at"]
    assert ExecutionRequestMessage.from_json(message.to_json()) == message


def test_response_finished():
    raw = json.dumps({
        "type": "FINISHED",
        "reply_data": {"solution_id": 1, "test_case_id": 2},
        "exit_code": 0,
        "stdout": ["x"],
        "stderr": [],
    })
    response = ExecutionResponseMessage.from_json(raw)
    assert response.token() == CorrelationToken(1, 2)
    assert response.outcome() == FinishedOutcome(exit_code=0, stdout=("x",), stderr=())


@pytest.mark.parametrize(
    "data, outcome",
    [
        ({"type": "TIMED_OUT"}, TimedOutOutcome()),
        ({"type": "COMPILE_ERROR", "compiler_errors": ["e1"]}, CompileErrorOutcome(("e1",))),
        ({"type": "INITIALIZATION_ERROR", "error": "no image"}, InitializationErrorOutcome("no image")),
        ({"type": "UNKNOWN_ERROR"}, UnknownErrorOutcome("")),
    ],
)
def test_response_outcome_kinds(data, outcome):
    data["reply_data"] = {"solution_id": 1, "test_case_id": 2}
    assert ExecutionResponseMessage.from_dict(data).outcome() == outcome


def test_outcome_to_message_and_back():
    token = CorrelationToken(4, 5)
    outcome = FinishedOutcome(exit_code=3, stdout=("a",), stderr=("b",))
    message = ExecutionResponseMessage.from_outcome(outcome, token)
    parsed = ExecutionResponseMessage.from_json(message.to_json())
    assert parsed.token() == token
    assert parsed.outcome() == outcome


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        json.dumps([1, 2]),
        json.dumps({"type": "EXPLODED", "reply_data": {"solution_id": 1, "test_case_id": 2}}),
        json.dumps({"type": "TIMED_OUT"}),
        json.dumps({"type": "FINISHED", "reply_data": {"solution_id": 1, "test_case_id": 2}, "exit_code": "zero"}),
        json.dumps({"type": "FINISHED", "reply_data": {"solution_id": 1, "test_case_id": 2}, "stdout": "x"}),
        json.dumps(
            {"type": "FINISHED", "reply_data": {"solution_id": 1, "test_case_id": 2}, "exit_code": 0, "stdout": [None]}
        ),
        json.dumps({"type": "COMPILE_ERROR", "reply_data": {"solution_id": 1, "test_case_id": 2}, "compiler_errors": [3]}),
    ],
)
def test_malformed_responses(raw):
    with pytest.raises(ValidationError):
        ExecutionResponseMessage.from_json(raw)


def test_finished_without_exit_code_has_no_outcome():
    response = ExecutionResponseMessage.from_dict(
        {"type": "FINISHED", "reply_data": {"solution_id": 1, "test_case_id": 2}}
    )
    with pytest.raises(ValidationError):
        response.outcome()


def test_bad_reply_data_has_no_token():
    response = ExecutionResponseMessage.from_dict({"type": "TIMED_OUT", "reply_data": {"solution_id": 1}})
    with pytest.raises(ValidationError):
        response.token()
