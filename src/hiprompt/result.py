"""
Result values for expected failures.

Session and data operations never raise for expected conditions (bad
credentials, failed query, missing row). They return a Result that holds
either a value or an error from hiprompt.errors.

Usage:
    result = await session_manager.sign_in(email, password)
    if result.is_ok:
        print(result.value.email)
    else:
        print(result.error.message)
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Result(Generic[T, E]):
    """Either a value (success) or an error (failure)."""

    value: Optional[T] = None
    error: Optional[E] = None

    @classmethod
    def ok(cls, value: T = None) -> "Result[T, E]":
        return cls(value=value, error=None)

    @classmethod
    def fail(cls, error: E) -> "Result[T, E]":
        if error is None:
            raise ValueError("Result.fail() needs an error")
        return cls(value=None, error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def is_error(self) -> bool:
        return self.error is not None
