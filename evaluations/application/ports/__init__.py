from evaluations.application.ports.unit_of_work import UnitOfWork
from evaluations.application.ports.repositories import (
    ExamRepository,
    ExerciseRepository,
    ExerciseSolutionRepository,
    ExerciseSolutionResultRepository,
    TestCaseRepository,
)
from evaluations.application.ports.executor import ExecutorPort
from evaluations.application.ports.events import EventPublisherPort
from evaluations.application.ports.locks import ResultLockPort

__all__ = [
    "UnitOfWork",
    "ExamRepository",
    "ExerciseRepository",
    "TestCaseRepository",
    "ExerciseSolutionRepository",
    "ExerciseSolutionResultRepository",
    "ExecutorPort",
    "EventPublisherPort",
    "ResultLockPort",
]
