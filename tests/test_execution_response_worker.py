import json

import pytest

from evaluations.adapters.queue.sqs.client import QueueUnavailableError
from evaluations.config import EvaluationsConfig
from evaluations.domain.exams.entities import Verdict
from evaluations.domain.executions.entities import CorrelationToken, InitializationErrorOutcome, TimedOutOutcome
from evaluations.framework.workers import execution_response_worker as worker
from evaluations.shared.contracts.execution_response import ExecutionResponseMessage


def _message(outcome, token, receipt="rh-1"):
    return {
        "MessageId": "m-1",
        "ReceiptHandle": receipt,
        "Body": ExecutionResponseMessage.from_outcome(outcome, token).to_json(),
    }


@pytest.fixture
def solution(uow, started_exam, exercise, test_cases, executor):
    from evaluations.application.use_cases.exams.submit_solution import create_exercise_solution
    return create_exercise_solution(uow, executor, exercise.id, "code")


@pytest.fixture
def token(solution, test_cases):
    return CorrelationToken(solution.id, test_cases[0].id)


def test_recorded(uow, token, publisher):
    status = worker.handle_message(_message(TimedOutOutcome(), token), uow, publisher=publisher)
    assert status == worker.RECORDED
    (stored,) = uow.store.results.values()
    assert stored.result == Verdict.TIMED_OUT


def test_duplicate_and_infrastructure_are_skipped(uow, token, test_cases):
    assert worker.handle_message(_message(TimedOutOutcome(), token), uow) == worker.RECORDED
    assert worker.handle_message(_message(TimedOutOutcome(), token), uow) == worker.SKIPPED
    other = CorrelationToken(token.solution_id, test_cases[1].id)
    assert worker.handle_message(_message(InitializationErrorOutcome("x"), other), uow) == worker.SKIPPED
    assert len(uow.store.results) == 1


@pytest.mark.parametrize(
    "body",
    [
        "garbage",
        json.dumps({"type": "TIMED_OUT"}),
        json.dumps({"type": "TIMED_OUT", "reply_data": {"solution_id": 404, "test_case_id": 1}}),
    ],
)
def test_poison_messages_are_rejected(uow, body):
    assert worker.handle_message({"ReceiptHandle": "rh", "Body": body}, uow) == worker.REJECTED


def test_storage_failure_keeps_message(uow, token):
    uow.store.fail_after_writes = uow.store.writes
    assert worker.handle_message(_message(TimedOutOutcome(), token), uow) == worker.RETRY


class ScriptedQueue:
    """receive 결과를 순서대로 반환. 소진되면 KeyboardInterrupt로 루프 종료."""

    queue_name = "exec-responses"

    def __init__(self, script):
        self.script = list(script)
        self.deleted = []

    def receive(self, wait_time_seconds=20):
        if not self.script:
            raise KeyboardInterrupt
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def delete(self, receipt_handle):
        self.deleted.append(receipt_handle)
        return True


def test_loop_deletes_handled_messages_and_keeps_retries(uow, token, monkeypatch):
    monkeypatch.setattr(worker.time, "sleep", lambda seconds: None)
    duplicate = _message(TimedOutOutcome(), token, receipt="rh-dup")
    poison = {"ReceiptHandle": "rh-poison", "Body": "garbage"}
    queue = ScriptedQueue([
        None,
        QueueUnavailableError("no credentials"),
        _message(TimedOutOutcome(), token, receipt="rh-ok"),
        duplicate,
        poison,
    ])

    code = worker.run_execution_response_worker(
        config=EvaluationsConfig(),
        queue=queue,
        uow_factory=lambda: uow,
        lock=None,
    )

    assert code == 0
    assert queue.deleted == ["rh-ok", "rh-dup", "rh-poison"]
    assert len(uow.store.results) == 1


def test_loop_exits_after_consecutive_storage_failures(uow, token, monkeypatch):
    monkeypatch.setattr(worker.time, "sleep", lambda seconds: None)
    uow.store.fail_after_writes = uow.store.writes
    queue = ScriptedQueue([_message(TimedOutOutcome(), token, receipt=f"rh-{i}") for i in range(3)])

    code = worker.run_execution_response_worker(
        config=EvaluationsConfig(WORKER_MAX_CONSECUTIVE_ERRORS=2),
        queue=queue,
        uow_factory=lambda: uow,
    )

    assert code == 1
    assert queue.deleted == []


def test_loop_builds_publisher_client_for_configured_region(uow, monkeypatch):
    regions = []

    class RecordingClient:
        def __init__(self, region_name=None, sqs=None):
            regions.append(region_name)

    monkeypatch.setattr(worker, "SQSQueueClient", RecordingClient)
    config = EvaluationsConfig(AWS_REGION="eu-west-1", EVENTS_QUEUE="evaluations-events")

    code = worker.run_execution_response_worker(
        config=config,
        queue=ScriptedQueue([]),
        uow_factory=lambda: uow,
    )

    assert code == 0
    assert regions == ["eu-west-1"]
