"""
Unit of Work 포트 - 트랜잭션 경계 (Django 미사용)

cascade 삭제(시험 → 문제 → 테스트케이스)는 하나의 UoW 안에서 수행:
전부 삭제되거나 아무것도 삭제되지 않는다.
"""
from __future__ import annotations

from typing import Protocol

from evaluations.application.ports.repositories import (
    ExamRepository,
    ExerciseRepository,
    ExerciseSolutionRepository,
    ExerciseSolutionResultRepository,
    TestCaseRepository,
)


class UnitOfWork(Protocol):
    """트랜잭션 단위. __enter__에서 시작, __exit__에서 commit/rollback."""

    @property
    def exams(self) -> ExamRepository:
        ...

    @property
    def exercises(self) -> ExerciseRepository:
        ...

    @property
    def test_cases(self) -> TestCaseRepository:
        ...

    @property
    def solutions(self) -> ExerciseSolutionRepository:
        ...

    @property
    def solution_results(self) -> ExerciseSolutionResultRepository:
        ...

    def __enter__(self) -> "UnitOfWork":
        ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...
