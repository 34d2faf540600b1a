"""
Exams Repository - Django ORM 구현 (메서드 내부에서만 evaluations.apps.exams import)

DatabaseError → StorageError, 결과 unique 위반 → DuplicateResultError.
엔티티 back-reference(exercise.exam 등)는 조회 시점의 저장 상태로 채운다.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from evaluations.domain.exams.entities import (
    Exam,
    ExamState,
    Exercise,
    ExerciseSolution,
    ExerciseSolutionResult,
    Language,
    TestCase,
    Verdict,
    Visibility,
)
from evaluations.domain.shared.errors import DuplicateResultError, StorageError


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    from django.db import DatabaseError
    try:
        yield
    except DatabaseError as e:
        raise StorageError(f"{action} failed: {e}", cause=e) from e


# ---------------------------------------------------------------------------
# model → entity
# ---------------------------------------------------------------------------


def _exam_to_entity(m) -> Optional[Exam]:
    if m is None:
        return None
    return Exam(
        id=m.id,
        description=m.description,
        starting_at=m.starting_at,
        duration=m.duration,
        state=ExamState(m.state),
        owners={o.owner for o in m.owners.all()},
    )


def _exercise_to_entity(m, exam: Optional[Exam] = None) -> Optional[Exercise]:
    if m is None:
        return None
    return Exercise(
        id=m.id,
        exam=exam or _exam_to_entity(m.exam),
        question=m.question,
        language=Language(m.language),
        awarded_score=int(m.awarded_score),
        solution_template=m.solution_template,
    )


def _test_case_to_entity(m, exercise: Optional[Exercise] = None) -> Optional[TestCase]:
    if m is None:
        return None
    return TestCase(
        id=m.id,
        exercise=exercise or _exercise_to_entity(m.exercise),
        visibility=Visibility(m.visibility),
        timeout=int(m.timeout),
        inputs=list(m.inputs or []),
        expected_outputs=list(m.expected_outputs or []),
        program_arguments=list(m.program_arguments or []),
        stdin=list(m.stdin) if m.stdin is not None else None,
    )


def _solution_to_entity(m, exercise: Optional[Exercise] = None) -> Optional[ExerciseSolution]:
    if m is None:
        return None
    return ExerciseSolution(
        id=m.id,
        exercise=exercise or _exercise_to_entity(m.exercise),
        answer=m.answer,
        compiler_flags=m.compiler_flags,
    )


def _result_to_entity(m, solution: Optional[ExerciseSolution] = None) -> Optional[ExerciseSolutionResult]:
    if m is None:
        return None
    solution = solution or _solution_to_entity(m.solution)
    return ExerciseSolutionResult(
        id=m.id,
        solution=solution,
        test_case=_test_case_to_entity(m.test_case, solution.exercise),
        result=Verdict(m.result),
        detail=m.detail,
    )


# ---------------------------------------------------------------------------
# Exam
# ---------------------------------------------------------------------------


class DjangoExamRepository:
    """ExamRepository 구현. owners는 ExamOwnerModel 행으로 동기화."""

    def find_by_id(self, exam_id: int) -> Optional[Exam]:
        from evaluations.apps.exams.models import ExamModel
        with _storage_errors("find exam"):
            m = ExamModel.objects.prefetch_related("owners").filter(id=exam_id).first()
            return _exam_to_entity(m)

    def find_all(self) -> list[Exam]:
        from evaluations.apps.exams.models import ExamModel
        with _storage_errors("list exams"):
            qs = ExamModel.objects.prefetch_related("owners").order_by("id")
            return [_exam_to_entity(m) for m in qs]

    def find_by_owner(self, owner: str) -> list[Exam]:
        from evaluations.apps.exams.models import ExamModel
        with _storage_errors("list owned exams"):
            qs = (
                ExamModel.objects.prefetch_related("owners")
                .filter(owners__owner=owner)
                .distinct()
                .order_by("id")
            )
            return [_exam_to_entity(m) for m in qs]

    def save(self, exam: Exam) -> Exam:
        from evaluations.apps.exams.models import ExamModel, ExamOwnerModel
        with _storage_errors("save exam"):
            fields = {
                "description": exam.description,
                "starting_at": exam.starting_at,
                "duration": exam.duration,
                "state": exam.state.value,
            }
            if exam.id is None:
                m = ExamModel.objects.create(**fields)
            else:
                m, _ = ExamModel.objects.update_or_create(id=exam.id, defaults=fields)
            ExamOwnerModel.objects.filter(exam=m).exclude(owner__in=exam.owners).delete()
            existing = set(ExamOwnerModel.objects.filter(exam=m).values_list("owner", flat=True))
            ExamOwnerModel.objects.bulk_create(
                [ExamOwnerModel(exam=m, owner=o) for o in sorted(exam.owners - existing)]
            )
            exam.id = m.id
            return exam

    def delete(self, exam: Exam) -> None:
        from evaluations.apps.exams.models import ExamModel
        with _storage_errors("delete exam"):
            ExamModel.objects.filter(id=exam.id).delete()


# ---------------------------------------------------------------------------
# Exercise
# ---------------------------------------------------------------------------


class DjangoExerciseRepository:

    def find_by_id(self, exercise_id: int) -> Optional[Exercise]:
        from evaluations.apps.exams.models import ExerciseModel
        with _storage_errors("find exercise"):
            m = ExerciseModel.objects.select_related("exam").filter(id=exercise_id).first()
            return _exercise_to_entity(m)

    def get_exam_exercises(self, exam: Exam) -> list[Exercise]:
        from evaluations.apps.exams.models import ExerciseModel
        with _storage_errors("list exercises"):
            qs = ExerciseModel.objects.filter(exam_id=exam.id).order_by("id")
            return [_exercise_to_entity(m, exam) for m in qs]

    def save(self, exercise: Exercise) -> Exercise:
        from evaluations.apps.exams.models import ExerciseModel
        with _storage_errors("save exercise"):
            fields = {
                "exam_id": exercise.exam.id,
                "question": exercise.question,
                "language": exercise.language.value,
                "awarded_score": exercise.awarded_score,
                "solution_template": exercise.solution_template,
            }
            if exercise.id is None:
                m = ExerciseModel.objects.create(**fields)
            else:
                m, _ = ExerciseModel.objects.update_or_create(id=exercise.id, defaults=fields)
            exercise.id = m.id
            return exercise

    def delete(self, exercise: Exercise) -> None:
        from evaluations.apps.exams.models import ExerciseModel
        with _storage_errors("delete exercise"):
            ExerciseModel.objects.filter(id=exercise.id).delete()

    def delete_exam_exercises(self, exam: Exam) -> None:
        from evaluations.apps.exams.models import ExerciseModel
        with _storage_errors("delete exam exercises"):
            ExerciseModel.objects.filter(exam_id=exam.id).delete()


# ---------------------------------------------------------------------------
# TestCase
# ---------------------------------------------------------------------------


class DjangoTestCaseRepository:

    def find_by_id(self, test_case_id: int) -> Optional[TestCase]:
        from evaluations.apps.exams.models import TestCaseModel
        with _storage_errors("find test case"):
            m = TestCaseModel.objects.select_related("exercise__exam").filter(id=test_case_id).first()
            return _test_case_to_entity(m)

    def _by_visibility(self, exercise: Exercise, visibility: Visibility) -> list[TestCase]:
        from evaluations.apps.exams.models import TestCaseModel
        with _storage_errors("list test cases"):
            qs = TestCaseModel.objects.filter(
                exercise_id=exercise.id, visibility=visibility.value
            ).order_by("id")
            return [_test_case_to_entity(m, exercise) for m in qs]

    def get_exercise_private_test_cases(self, exercise: Exercise) -> list[TestCase]:
        return self._by_visibility(exercise, Visibility.PRIVATE)

    def get_exercise_public_test_cases(self, exercise: Exercise) -> list[TestCase]:
        return self._by_visibility(exercise, Visibility.PUBLIC)

    def save(self, test_case: TestCase) -> TestCase:
        from evaluations.apps.exams.models import TestCaseModel
        with _storage_errors("save test case"):
            fields = {
                "exercise_id": test_case.exercise.id,
                "visibility": test_case.visibility.value,
                "timeout": test_case.timeout,
                "inputs": list(test_case.inputs),
                "expected_outputs": list(test_case.expected_outputs),
                "program_arguments": list(test_case.program_arguments),
                "stdin": list(test_case.stdin) if test_case.stdin is not None else None,
            }
            if test_case.id is None:
                m = TestCaseModel.objects.create(**fields)
            else:
                m, _ = TestCaseModel.objects.update_or_create(id=test_case.id, defaults=fields)
            test_case.id = m.id
            return test_case

    def delete(self, test_case: TestCase) -> None:
        from evaluations.apps.exams.models import TestCaseModel
        with _storage_errors("delete test case"):
            TestCaseModel.objects.filter(id=test_case.id).delete()

    def delete_exercise_test_cases(self, exercise: Exercise) -> None:
        from evaluations.apps.exams.models import TestCaseModel
        with _storage_errors("delete exercise test cases"):
            TestCaseModel.objects.filter(exercise_id=exercise.id).delete()

    def delete_exam_test_cases(self, exam: Exam) -> None:
        from evaluations.apps.exams.models import TestCaseModel
        with _storage_errors("delete exam test cases"):
            TestCaseModel.objects.filter(exercise__exam_id=exam.id).delete()


# ---------------------------------------------------------------------------
# ExerciseSolution / ExerciseSolutionResult (insert 전용)
# ---------------------------------------------------------------------------


class DjangoExerciseSolutionRepository:

    def find_by_id(self, solution_id: int) -> Optional[ExerciseSolution]:
        from evaluations.apps.exams.models import ExerciseSolutionModel
        with _storage_errors("find solution"):
            m = ExerciseSolutionModel.objects.select_related("exercise__exam").filter(id=solution_id).first()
            return _solution_to_entity(m)

    def get_exercise_solutions(self, exercise: Exercise) -> list[ExerciseSolution]:
        from evaluations.apps.exams.models import ExerciseSolutionModel
        with _storage_errors("list solutions"):
            qs = ExerciseSolutionModel.objects.filter(exercise_id=exercise.id).order_by("id")
            return [_solution_to_entity(m, exercise) for m in qs]

    def save(self, solution: ExerciseSolution) -> ExerciseSolution:
        from evaluations.apps.exams.models import ExerciseSolutionModel
        with _storage_errors("save solution"):
            m = ExerciseSolutionModel.objects.create(
                exercise_id=solution.exercise.id,
                answer=solution.answer,
                compiler_flags=solution.compiler_flags,
            )
            solution.id = m.id
            return solution


class DjangoExerciseSolutionResultRepository:

    def find_by_solution_and_test_case(
        self, solution: ExerciseSolution, test_case: TestCase
    ) -> Optional[ExerciseSolutionResult]:
        from evaluations.apps.exams.models import ExerciseSolutionResultModel
        with _storage_errors("find solution result"):
            m = (
                ExerciseSolutionResultModel.objects.select_related("test_case")
                .filter(solution_id=solution.id, test_case_id=test_case.id)
                .first()
            )
            return _result_to_entity(m, solution)

    def get_solution_results(self, solution: ExerciseSolution) -> list[ExerciseSolutionResult]:
        from evaluations.apps.exams.models import ExerciseSolutionResultModel
        with _storage_errors("list solution results"):
            qs = (
                ExerciseSolutionResultModel.objects.select_related("test_case")
                .filter(solution_id=solution.id)
                .order_by("id")
            )
            return [_result_to_entity(m, solution) for m in qs]

    def save(self, result: ExerciseSolutionResult) -> ExerciseSolutionResult:
        from django.db import DatabaseError, IntegrityError, transaction
        from evaluations.apps.exams.models import ExerciseSolutionResultModel
        try:
            # savepoint: unique 위반 후에도 바깥 atomic은 정상 종료 가능
            with transaction.atomic():
                m = ExerciseSolutionResultModel.objects.create(
                    solution_id=result.solution.id,
                    test_case_id=result.test_case.id,
                    result=result.result.value,
                    detail=result.detail,
                )
        except IntegrityError as e:
            raise DuplicateResultError(
                f"Result already recorded: solution={result.solution.id} test_case={result.test_case.id}",
                cause=e,
            ) from e
        except DatabaseError as e:
            raise StorageError(f"save solution result failed: {e}", cause=e) from e
        result.id = m.id
        return result
