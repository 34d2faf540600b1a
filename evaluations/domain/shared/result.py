"""
도메인 공통: Use Case 결과 타입 (외부 라이브러리 없음)

결과 수신 핸들러처럼 "실패도 정상 흐름"인 경우에만 사용한다.
규칙 위반은 예외(errors.py)로 표현.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    message: str
    code: str = "error"

    @property
    def ok(self) -> bool:
        return False


Result = Ok[T] | Err
