"""
TestCase Use Case - 소속 시험이 UPCOMING일 때만 생성/수정/삭제
"""
from __future__ import annotations

from typing import Iterable, Optional

from evaluations.application.ports.unit_of_work import UnitOfWork
from evaluations.application.use_cases.exams.lookups import exercise_or_404, test_case_or_404
from evaluations.domain.exams.entities import TestCase, Visibility


def get_private_test_cases(uow: UnitOfWork, exercise_id: int) -> list[TestCase]:
    with uow:
        exercise = exercise_or_404(uow, exercise_id)
        return uow.test_cases.get_exercise_private_test_cases(exercise)


def get_public_test_cases(uow: UnitOfWork, exercise_id: int) -> list[TestCase]:
    with uow:
        exercise = exercise_or_404(uow, exercise_id)
        return uow.test_cases.get_exercise_public_test_cases(exercise)


def get_test_case(uow: UnitOfWork, test_case_id: int) -> TestCase:
    with uow:
        return test_case_or_404(uow, test_case_id)


def create_test_case(
    uow: UnitOfWork,
    exercise_id: int,
    visibility: Visibility,
    timeout: int,
    inputs: Iterable[str],
    expected_outputs: Iterable[str],
    program_arguments: Optional[Iterable[str]] = None,
    stdin: Optional[Iterable[str]] = None,
) -> TestCase:
    with uow:
        exercise = exercise_or_404(uow, exercise_id)
        exercise.exam.require_upcoming("create test case")
        test_case = TestCase(
            exercise=exercise,
            visibility=visibility,
            timeout=timeout,
            inputs=inputs,
            expected_outputs=expected_outputs,
            program_arguments=program_arguments or [],
            stdin=stdin,
        )
        return uow.test_cases.save(test_case)


def modify_test_case(
    uow: UnitOfWork,
    test_case_id: int,
    visibility: Visibility,
    timeout: int,
    inputs: Iterable[str],
    expected_outputs: Iterable[str],
    program_arguments: Optional[Iterable[str]] = None,
    stdin: Optional[Iterable[str]] = None,
) -> TestCase:
    with uow:
        test_case = test_case_or_404(uow, test_case_id)
        test_case.update(visibility, timeout, inputs, expected_outputs, program_arguments, stdin)
        return uow.test_cases.save(test_case)


def delete_test_case(uow: UnitOfWork, test_case_id: int) -> None:
    with uow:
        test_case = test_case_or_404(uow, test_case_id)
        test_case.exam.require_upcoming("delete test case")
        uow.test_cases.delete(test_case)
