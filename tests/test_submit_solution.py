import pytest

from evaluations.application.use_cases.exams import manage_exams, manage_test_cases
from evaluations.application.use_cases.exams.submit_solution import (
    create_exercise_solution,
    get_solution,
    get_solution_results,
    list_solutions,
    resend_pending_executions,
)
from evaluations.application.use_cases.executions.process_execution_result import process_execution_result
from evaluations.domain.exams.entities import Language, Visibility
from evaluations.domain.executions.entities import CorrelationToken, FinishedOutcome
from evaluations.domain.shared.errors import DispatchError, IllegalStateError, NotFoundError
from tests.conftest import FakeExecutor


def test_submission_requires_exam_in_progress(uow, exam, exercise, test_cases, executor):
    writes = uow.store.writes
    with pytest.raises(IllegalStateError):
        create_exercise_solution(uow, executor, exercise.id, "print(1)")
    assert uow.store.writes == writes
    assert executor.calls == []

    manage_exams.start_exam(uow, exam.id)
    manage_exams.finish_exam(uow, exam.id)
    writes = uow.store.writes
    with pytest.raises(IllegalStateError):
        create_exercise_solution(uow, executor, exercise.id, "print(1)")
    assert uow.store.writes == writes
    assert executor.calls == []


def test_submission_to_unknown_exercise(uow, executor):
    with pytest.raises(NotFoundError):
        create_exercise_solution(uow, executor, 12345, "code")


def test_one_dispatch_per_test_case(uow, started_exam, exercise, test_cases, executor, publisher):
    private, public = test_cases

    solution = create_exercise_solution(
        uow, executor, exercise.id, "import sys", compiler_flags="-O2", publisher=publisher
    )

    assert solution.id is not None
    assert sorted(executor.tokens, key=lambda t: t.test_case_id) == [
        CorrelationToken(solution.id, private.id),
        CorrelationToken(solution.id, public.id),
    ]
    by_case = {token.test_case_id: request for request, token in executor.calls}
    for test_case in (private, public):
        request = by_case[test_case.id]
        assert request.code == "import sys"
        assert request.language == Language.PYTHON
        assert request.timeout == test_case.timeout
        assert list(request.stdin) == test_case.inputs
        assert request.compiler_flags == "-O2"
    assert list(by_case[public.id].program_arguments) == ["--fast"]
    assert publisher.names() == ["ExecutionRequested", "ExecutionRequested"]


def test_explicit_stdin_is_sent_instead_of_inputs(uow, exam, exercise, executor):
    manage_test_cases.create_test_case(
        uow, exercise.id, Visibility.PRIVATE, 100, ["ignored"], ["ok"], stdin=["fed"]
    )
    manage_exams.start_exam(uow, exam.id)

    create_exercise_solution(uow, executor, exercise.id, "code")

    (request, _), = executor.calls
    assert request.stdin == ("fed",)


def test_exercise_without_test_cases_dispatches_nothing(uow, exam, exercise, executor):
    manage_exams.start_exam(uow, exam.id)
    solution = create_exercise_solution(uow, executor, exercise.id, "code")
    assert executor.calls == []
    assert get_solution(uow, solution.id).answer == "code"


def test_dispatch_failure_keeps_solution_and_reports_pending(uow, started_exam, exercise, test_cases):
    private, public = test_cases
    executor = FakeExecutor(fail_on={public.id})

    with pytest.raises(DispatchError) as excinfo:
        create_exercise_solution(uow, executor, exercise.id, "code")

    error = excinfo.value
    assert error.pending_test_case_ids == (public.id,)
    assert isinstance(error.cause, ConnectionError)
    assert [t.test_case_id for t in executor.tokens] == [private.id]
    (solution,) = list_solutions(uow, exercise.id)
    assert error.solution_id == solution.id
    assert get_solution_results(uow, solution.id) == []


def test_first_dispatch_failure_leaves_everything_pending(uow, started_exam, exercise, test_cases):
    private, public = test_cases
    executor = FakeExecutor(fail_on={private.id}, error=DispatchError("queue down"))

    with pytest.raises(DispatchError) as excinfo:
        create_exercise_solution(uow, executor, exercise.id, "code")

    assert excinfo.value.pending_test_case_ids == (private.id, public.id)
    assert executor.calls == []


def test_resend_only_covers_ungraded_test_cases(uow, started_exam, exercise, test_cases, executor):
    private, public = test_cases
    solution = create_exercise_solution(uow, executor, exercise.id, "code")
    process_execution_result(
        uow, CorrelationToken(solution.id, private.id), FinishedOutcome(0, stdout=("a", "b"))
    )

    retry = FakeExecutor()
    tokens = resend_pending_executions(uow, retry, solution.id)

    assert tokens == [CorrelationToken(solution.id, public.id)]
    assert retry.tokens == tokens


def test_resend_unknown_solution(uow, executor):
    with pytest.raises(NotFoundError):
        resend_pending_executions(uow, executor, 999)


def test_solution_reads_are_write_free(uow, started_exam, exercise, test_cases, executor):
    solution = create_exercise_solution(uow, executor, exercise.id, "code")
    writes = uow.store.writes

    assert list_solutions(uow, exercise.id) == list_solutions(uow, exercise.id) == [solution]
    assert get_solution_results(uow, solution.id) == []
    assert uow.store.writes == writes
