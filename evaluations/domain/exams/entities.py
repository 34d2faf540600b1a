"""
시험 도메인 엔티티 - 순수 파이썬 (Django/ORM/boto3 미사용)

상태 전이 규칙은 엔티티 메서드로 표현.
Exam 1-* Exercise 1-* TestCase, Exercise 1-* ExerciseSolution 1-* ExerciseSolutionResult.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, Optional

from evaluations.domain.shared.errors import IllegalStateError, ValidationError

# 검증 상수 (REST DTO 검증과 동기화)
DESCRIPTION_MAX_LENGTH = 64
OWNER_MAX_LENGTH = 64
QUESTION_MIN_LENGTH = 1
MAX_TIMEOUT_MS = 60_000


class ExamState(str, Enum):
    UPCOMING = "UPCOMING"
    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"


class Language(str, Enum):
    """Executor가 지원하는 언어 태그."""
    JAVA = "JAVA"
    C = "C"
    CPP = "CPP"
    PYTHON = "PYTHON"
    RUBY = "RUBY"


class Visibility(str, Enum):
    """PUBLIC: 채점 전 학생에게 노출, PRIVATE: 비공개."""
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class Verdict(str, Enum):
    APPROVED = "APPROVED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"
    NOT_COMPILED = "NOT_COMPILED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


def _enum_value(enum_cls, value, name: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Invalid {name}: {value!r}") from None


def _check_lines(value, name: str) -> list[str]:
    if value is None:
        raise ValidationError(f"The {name} are missing")
    if isinstance(value, (str, bytes)):
        raise ValidationError(f"The {name} must be a sequence of lines, not a single string")
    lines = list(value)
    if any(not isinstance(line, str) for line in lines):
        raise ValidationError(f"The {name} must be a sequence of strings")
    return lines


def _check_description(description: str) -> str:
    if not isinstance(description, str) or not description.strip():
        raise ValidationError("The description is missing")
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError("The description is too long")
    return description


def _check_schedule(starting_at: datetime, duration: timedelta) -> None:
    if not isinstance(starting_at, datetime):
        raise ValidationError("The starting moment is missing")
    if not isinstance(duration, timedelta):
        raise ValidationError("The duration is missing")
    if duration <= timedelta(0):
        raise ValidationError("The duration must be positive")


def _check_owner(owner: str) -> str:
    if not isinstance(owner, str) or not owner.strip():
        raise ValidationError("The owner is missing")
    if len(owner) > OWNER_MAX_LENGTH:
        raise ValidationError("The owner is too long")
    return owner


@dataclass
class Exam:
    """
    시험. UPCOMING → IN_PROGRESS → FINISHED (단방향, 건너뛰기 없음).
    """
    description: str
    starting_at: datetime
    duration: timedelta
    state: ExamState = ExamState.UPCOMING
    owners: set[str] = field(default_factory=set)
    id: Optional[int] = None

    def __post_init__(self) -> None:
        _check_description(self.description)
        _check_schedule(self.starting_at, self.duration)
        self.state = _enum_value(ExamState, self.state, "exam state")
        self.owners = {_check_owner(o) for o in self.owners}

    def is_upcoming(self) -> bool:
        return self.state == ExamState.UPCOMING

    def is_in_progress(self) -> bool:
        return self.state == ExamState.IN_PROGRESS

    def is_finished(self) -> bool:
        return self.state == ExamState.FINISHED

    def require_upcoming(self, action: str) -> None:
        if not self.is_upcoming():
            raise IllegalStateError(f"Cannot {action}: exam {self.id} is {self.state.value}")

    def update(self, description: str, starting_at: datetime, duration: timedelta) -> None:
        """UPCOMING 상태에서만 수정 가능."""
        self.require_upcoming("modify exam")
        _check_description(description)
        _check_schedule(starting_at, duration)
        self.description = description
        self.starting_at = starting_at
        self.duration = duration

    def start(self) -> None:
        """UPCOMING → IN_PROGRESS."""
        if self.state != ExamState.UPCOMING:
            raise IllegalStateError(f"Cannot start exam {self.id}: state={self.state.value}")
        self.state = ExamState.IN_PROGRESS

    def finish(self) -> None:
        """IN_PROGRESS → FINISHED."""
        if self.state != ExamState.IN_PROGRESS:
            raise IllegalStateError(f"Cannot finish exam {self.id}: state={self.state.value}")
        self.state = ExamState.FINISHED

    def add_owner(self, owner: str) -> None:
        if self.is_finished():
            raise IllegalStateError(f"Cannot add owner: exam {self.id} is FINISHED")
        self.owners.add(_check_owner(owner))

    def remove_owner(self, owner: str) -> None:
        if self.is_finished():
            raise IllegalStateError(f"Cannot remove owner: exam {self.id} is FINISHED")
        self.owners.discard(owner)


@dataclass(frozen=True)
class ExamWithScore:
    """시험 + 소속 문제 배점 합계 (조회 전용)."""
    exam: Exam
    total_score: int


def _check_exercise_fields(question: str, language, awarded_score: int) -> Language:
    if not isinstance(question, str) or len(question.strip()) < QUESTION_MIN_LENGTH:
        raise ValidationError("The question is missing")
    if isinstance(awarded_score, bool) or not isinstance(awarded_score, int) or awarded_score <= 0:
        raise ValidationError("The awarded score must be a positive integer")
    return _enum_value(Language, language, "language")


@dataclass
class Exercise:
    """시험 문제 1개. 소속 Exam은 생성 후 변경 불가."""
    exam: Exam
    question: str
    language: Language
    awarded_score: int
    solution_template: Optional[str] = None
    id: Optional[int] = None

    def __post_init__(self) -> None:
        if self.exam is None:
            raise ValidationError("The exam is missing")
        self.language = _check_exercise_fields(self.question, self.language, self.awarded_score)

    def update(
        self,
        question: str,
        language: Language,
        awarded_score: int,
        solution_template: Optional[str] = None,
    ) -> None:
        self.exam.require_upcoming("modify exercise")
        self.language = _check_exercise_fields(question, language, awarded_score)
        self.question = question
        self.awarded_score = awarded_score
        self.solution_template = solution_template


def _check_test_case_fields(visibility, timeout: int) -> Visibility:
    if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
        raise ValidationError("The timeout must be a positive number of milliseconds")
    if timeout > MAX_TIMEOUT_MS:
        raise ValidationError("The timeout is too long")
    return _enum_value(Visibility, visibility, "visibility")


@dataclass
class TestCase:
    """
    입력/기대 출력 fixture.
    stdin이 없으면 inputs가 프로그램 표준입력으로 전달된다.
    """
    __test__ = False  # pytest 수집 대상 아님

    exercise: Exercise
    visibility: Visibility
    timeout: int
    inputs: list[str] = field(default_factory=list)
    expected_outputs: list[str] = field(default_factory=list)
    program_arguments: list[str] = field(default_factory=list)
    stdin: Optional[list[str]] = None
    id: Optional[int] = None

    def __post_init__(self) -> None:
        if self.exercise is None:
            raise ValidationError("The exercise is missing")
        self.visibility = _check_test_case_fields(self.visibility, self.timeout)
        self.inputs = _check_lines(self.inputs, "inputs")
        self.expected_outputs = _check_lines(self.expected_outputs, "expected outputs")
        self.program_arguments = _check_lines(self.program_arguments or [], "program arguments")
        if self.stdin is not None:
            self.stdin = _check_lines(self.stdin, "stdin lines")

    @property
    def exam(self) -> Exam:
        return self.exercise.exam

    def is_public(self) -> bool:
        return self.visibility == Visibility.PUBLIC

    def stdin_lines(self) -> list[str]:
        return list(self.stdin) if self.stdin is not None else list(self.inputs)

    def update(
        self,
        visibility: Visibility,
        timeout: int,
        inputs: Iterable[str],
        expected_outputs: Iterable[str],
        program_arguments: Optional[Iterable[str]] = None,
        stdin: Optional[Iterable[str]] = None,
    ) -> None:
        self.exam.require_upcoming("modify test case")
        new_visibility = _check_test_case_fields(visibility, timeout)
        new_inputs = _check_lines(inputs, "inputs")
        new_expected = _check_lines(expected_outputs, "expected outputs")
        new_arguments = _check_lines(program_arguments or [], "program arguments")
        new_stdin = _check_lines(stdin, "stdin lines") if stdin is not None else None
        self.visibility = new_visibility
        self.timeout = timeout
        self.inputs = new_inputs
        self.expected_outputs = new_expected
        self.program_arguments = new_arguments
        self.stdin = new_stdin


@dataclass
class ExerciseSolution:
    """학생 제출 코드. 생성 후 수정 없음 (재제출은 새 solution)."""
    exercise: Exercise
    answer: str
    compiler_flags: Optional[str] = None
    id: Optional[int] = None

    def __post_init__(self) -> None:
        if self.exercise is None:
            raise ValidationError("The exercise is missing")
        if self.answer is None or not isinstance(self.answer, str):
            raise ValidationError("The answer is missing")


@dataclass
class ExerciseSolutionResult:
    """(solution, test case) 1쌍의 채점 결과. 생성 후 수정 없음."""
    solution: ExerciseSolution
    test_case: TestCase
    result: Verdict
    detail: Optional[str] = None
    id: Optional[int] = None

    def __post_init__(self) -> None:
        if self.solution is None or self.test_case is None:
            raise ValidationError("The solution and the test case are required")
        self.result = _enum_value(Verdict, self.result, "result")
