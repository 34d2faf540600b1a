import pytest

from evaluations.application.use_cases.exams import manage_exams, manage_exercises, manage_test_cases
from evaluations.domain.exams.entities import Language, Visibility
from evaluations.domain.shared.errors import IllegalStateError, NotFoundError, ValidationError


def test_create_and_modify_exercise(uow, exam, exercise):
    assert manage_exercises.get_exercises(uow, exam.id) == [exercise]

    manage_exercises.modify_exercise(uow, exercise.id, "Sort descending", Language.JAVA, 20, "class Main {}")
    stored = manage_exercises.get_exercise(uow, exercise.id)
    assert (stored.question, stored.language, stored.awarded_score) == ("Sort descending", Language.JAVA, 20)
    assert stored.solution_template == "class Main {}"


def test_exercise_for_unknown_exam(uow):
    with pytest.raises(NotFoundError):
        manage_exercises.create_exercise(uow, 404, "Q", Language.C, 1)
    with pytest.raises(NotFoundError):
        manage_exercises.get_exercises(uow, 404)


def test_invalid_exercise_is_not_saved(uow, exam):
    writes = uow.store.writes
    with pytest.raises(ValidationError):
        manage_exercises.create_exercise(uow, exam.id, "Q", Language.C, 0)
    with pytest.raises(ValidationError):
        manage_exercises.create_exercise(uow, exam.id, 42, Language.PYTHON, 10)
    assert uow.store.writes == writes


def test_delete_exercise_removes_its_test_cases(uow, exam, exercise, test_cases):
    keep = manage_exercises.create_exercise(uow, exam.id, "Keep me", Language.RUBY, 1)
    keep_case = manage_test_cases.create_test_case(uow, keep.id, Visibility.PUBLIC, 100, [], [])

    manage_exercises.delete_exercise(uow, exercise.id)

    assert manage_exercises.get_exercises(uow, exam.id) == [keep]
    assert set(uow.store.test_cases) == {keep_case.id}


def test_clear_exercises_keeps_exam(uow, exam, exercise, test_cases):
    manage_exercises.clear_exercises(uow, exam.id)
    assert manage_exercises.get_exercises(uow, exam.id) == []
    assert uow.store.test_cases == {}
    assert manage_exams.get_exam(uow, exam.id).id == exam.id


@pytest.mark.parametrize("finish", [False, True])
def test_children_are_frozen_once_exam_leaves_upcoming(uow, exam, exercise, test_cases, finish):
    manage_exams.start_exam(uow, exam.id)
    if finish:
        manage_exams.finish_exam(uow, exam.id)
    private, _ = test_cases
    writes = uow.store.writes

    attempts = [
        lambda: manage_exercises.create_exercise(uow, exam.id, "New", Language.C, 1),
        lambda: manage_exercises.modify_exercise(uow, exercise.id, "Changed", Language.C, 1),
        lambda: manage_exercises.delete_exercise(uow, exercise.id),
        lambda: manage_exercises.clear_exercises(uow, exam.id),
        lambda: manage_test_cases.create_test_case(uow, exercise.id, Visibility.PUBLIC, 10, [], []),
        lambda: manage_test_cases.modify_test_case(uow, private.id, Visibility.PUBLIC, 10, [], []),
        lambda: manage_test_cases.delete_test_case(uow, private.id),
    ]
    for attempt in attempts:
        with pytest.raises(IllegalStateError):
            attempt()

    assert uow.store.writes == writes
    assert manage_exercises.get_exercise(uow, exercise.id).question == "Sort the input lines"


def test_test_cases_split_by_visibility(uow, exercise, test_cases):
    private, public = test_cases
    assert manage_test_cases.get_private_test_cases(uow, exercise.id) == [private]
    assert manage_test_cases.get_public_test_cases(uow, exercise.id) == [public]
    assert manage_test_cases.get_test_case(uow, public.id).program_arguments == ["--fast"]


def test_modify_and_delete_test_case(uow, exercise, test_cases):
    private, public = test_cases
    manage_test_cases.modify_test_case(
        uow, private.id, Visibility.PUBLIC, 3000, ["1"], ["2"], stdin=["3"]
    )
    stored = manage_test_cases.get_test_case(uow, private.id)
    assert stored.visibility == Visibility.PUBLIC
    assert (stored.timeout, stored.inputs, stored.expected_outputs, stored.stdin) == (3000, ["1"], ["2"], ["3"])

    manage_test_cases.delete_test_case(uow, public.id)
    assert manage_test_cases.get_public_test_cases(uow, exercise.id) == [stored]
    with pytest.raises(NotFoundError):
        manage_test_cases.get_test_case(uow, public.id)


def test_test_case_for_unknown_exercise(uow):
    with pytest.raises(NotFoundError):
        manage_test_cases.create_test_case(uow, 77, Visibility.PUBLIC, 10, [], [])
    with pytest.raises(NotFoundError):
        manage_test_cases.get_public_test_cases(uow, 77)


def test_test_case_lines_must_not_be_a_single_string(uow, exercise):
    writes = uow.store.writes
    with pytest.raises(ValidationError):
        manage_test_cases.create_test_case(uow, exercise.id, Visibility.PUBLIC, 100, "hello", "hello")
    assert uow.store.writes == writes

    created = manage_test_cases.create_test_case(uow, exercise.id, Visibility.PUBLIC, 100, ["hello"], ["hello"])
    assert manage_test_cases.get_test_case(uow, created.id).inputs == ["hello"]
