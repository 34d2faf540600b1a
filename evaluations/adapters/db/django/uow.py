"""
Django Unit of Work - transaction.atomic 래퍼 (lazy import)
"""
from __future__ import annotations


class DjangoUnitOfWork:
    """Django transaction.atomic으로 트랜잭션 경계. 메서드 내부에서 Django import."""

    def __init__(self) -> None:
        self._atomic = None
        self._exams = None
        self._exercises = None
        self._test_cases = None
        self._solutions = None
        self._solution_results = None

    @property
    def exams(self):
        from evaluations.adapters.db.django.repositories_exams import DjangoExamRepository
        if self._exams is None:
            self._exams = DjangoExamRepository()
        return self._exams

    @property
    def exercises(self):
        from evaluations.adapters.db.django.repositories_exams import DjangoExerciseRepository
        if self._exercises is None:
            self._exercises = DjangoExerciseRepository()
        return self._exercises

    @property
    def test_cases(self):
        from evaluations.adapters.db.django.repositories_exams import DjangoTestCaseRepository
        if self._test_cases is None:
            self._test_cases = DjangoTestCaseRepository()
        return self._test_cases

    @property
    def solutions(self):
        from evaluations.adapters.db.django.repositories_exams import DjangoExerciseSolutionRepository
        if self._solutions is None:
            self._solutions = DjangoExerciseSolutionRepository()
        return self._solutions

    @property
    def solution_results(self):
        from evaluations.adapters.db.django.repositories_exams import DjangoExerciseSolutionResultRepository
        if self._solution_results is None:
            self._solution_results = DjangoExerciseSolutionResultRepository()
        return self._solution_results

    def __enter__(self) -> DjangoUnitOfWork:
        from django.db import transaction
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._atomic is not None:
            atomic, self._atomic = self._atomic, None
            atomic.__exit__(exc_type, exc_val, exc_tb)

    def commit(self) -> None:
        # atomic() 블록 내에서는 명시적 commit 없음; __exit__ 시 자동
        pass

    def rollback(self) -> None:
        from django.db import transaction
        transaction.set_rollback(True)
