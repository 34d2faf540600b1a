from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from evaluations.adapters.db.memory.uow import InMemoryUnitOfWork
from evaluations.application.use_cases.exams import manage_exams, manage_exercises, manage_test_cases
from evaluations.domain.exams.entities import Language, Visibility

STARTING_AT = datetime(2030, 3, 2, 9, 0, tzinfo=timezone.utc)


class FakeExecutor:
    """request_execution 호출 기록. fail_on에 든 test case id는 실패."""

    def __init__(self, fail_on=(), error: Exception | None = None):
        self.calls = []
        self.fail_on = set(fail_on)
        self.error = error

    def request_execution(self, request, token):
        if token.test_case_id in self.fail_on:
            raise self.error or ConnectionError("executor unreachable")
        self.calls.append((request, token))

    @property
    def tokens(self):
        return [token for _, token in self.calls]


class RecordingPublisher:
    def __init__(self):
        self.events = []

    def publish(self, event):
        self.events.append(event)

    def names(self):
        return [e.name for e in self.events]


class RecordingLock:
    def __init__(self, busy=()):
        self.busy = set(busy)
        self.acquired = []
        self.released = []

    def acquire(self, token):
        if token in self.busy:
            return False
        self.acquired.append(token)
        return True

    def release(self, token):
        self.released.append(token)


class FakeRedis:
    """SET NX EX / DELETE만 흉내."""

    def __init__(self, error: Exception | None = None):
        self.values = {}
        self.error = error
        self.set_calls = []

    def set(self, key, value, nx=False, ex=None):
        if self.error is not None:
            raise self.error
        self.set_calls.append((key, value, nx, ex))
        if nx and key in self.values:
            return None
        self.values[key] = value
        return True

    def delete(self, key):
        if self.error is not None:
            raise self.error
        return 1 if self.values.pop(key, None) is not None else 0


@pytest.fixture
def uow():
    return InMemoryUnitOfWork()


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def exam(uow):
    return manage_exams.create_exam(
        uow, "Algorithms midterm", STARTING_AT, timedelta(hours=2), owners=["prof-lee"]
    )


@pytest.fixture
def exercise(uow, exam):
    return manage_exercises.create_exercise(
        uow, exam.id, "Sort the input lines", Language.PYTHON, 10
    )


@pytest.fixture
def test_cases(uow, exercise):
    private = manage_test_cases.create_test_case(
        uow, exercise.id, Visibility.PRIVATE, 1000, ["b", "a"], ["a", "b"]
    )
    public = manage_test_cases.create_test_case(
        uow, exercise.id, Visibility.PUBLIC, 2500, ["y", "x"], ["x", "y"],
        program_arguments=["--fast"],
    )
    return private, public


@pytest.fixture
def started_exam(uow, exam, exercise, test_cases):
    return manage_exams.start_exam(uow, exam.id)
