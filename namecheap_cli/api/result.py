"""
Explicit success/failure values returned by service operations
"""

import functools
from typing import Any, Callable, Generic, Optional, TypeVar

from namecheap_cli.api.exceptions import NamecheapError


T = TypeVar("T")
U = TypeVar("U")


class Result(Generic[T]):
    """
    Outcome of one service operation: either a value or a classified error.

    Commands never see raw transport exceptions; they receive a Result and
    hand it to the command guard, which decides the exit code.
    """

    __slots__ = ("value", "error")

    def __init__(self, value: Optional[T] = None, error: Optional[NamecheapError] = None):
        self.value = value
        self.error = error

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: NamecheapError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, re-raising the carried error on failure"""
        if self.error is not None:
            raise self.error
        return self.value

    def map(self, func: Callable[[T], U]) -> "Result[U]":
        if self.error is not None:
            return Result.failure(self.error)
        return Result.success(func(self.value))

    def __repr__(self):
        if self.ok:
            return f"Result.success({self.value!r})"
        return f"Result.failure({self.error!r})"


def returns_result(func: Callable[..., Any]) -> Callable[..., Result]:
    """Wrap a raising operation so that classified errors come back as Result"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Result:
        try:
            return Result.success(func(*args, **kwargs))
        except NamecheapError as e:
            return Result.failure(e)

    return wrapper
