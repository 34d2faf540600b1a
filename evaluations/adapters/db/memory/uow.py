"""
In-memory Unit of Work - 진입 시 snapshot, 예외 시 snapshot 복원 (rollback)
"""
from __future__ import annotations

import copy
from typing import Optional

from evaluations.adapters.db.memory.repositories import (
    MemoryExamRepository,
    MemoryExerciseRepository,
    MemoryExerciseSolutionRepository,
    MemoryExerciseSolutionResultRepository,
    MemoryStore,
    MemoryTestCaseRepository,
)


class InMemoryUnitOfWork:

    def __init__(self, store: Optional[MemoryStore] = None) -> None:
        self.store = store or MemoryStore()
        self._snapshot: Optional[MemoryStore] = None
        self.exams = MemoryExamRepository(self.store)
        self.exercises = MemoryExerciseRepository(self.store)
        self.test_cases = MemoryTestCaseRepository(self.store)
        self.solutions = MemoryExerciseSolutionRepository(self.store)
        self.solution_results = MemoryExerciseSolutionResultRepository(self.store)
        self.committed = 0
        self.rolled_back = 0

    def __enter__(self) -> InMemoryUnitOfWork:
        self._snapshot = copy.deepcopy(self.store)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        self._snapshot = None

    def commit(self) -> None:
        self.committed += 1

    def rollback(self) -> None:
        if self._snapshot is None:
            return
        writes = self.store.writes
        # 같은 store 객체를 repository가 참조하므로 필드 단위 복원
        for name in ("exams", "exercises", "test_cases", "solutions", "results", "next_id"):
            setattr(self.store, name, getattr(self._snapshot, name))
        self.store.writes = writes
        self.rolled_back += 1
