"""
Result values: an explicit container for "a value or an error".

Use these instead of raising and catching::

    from typesafe import result

    def parse_port(text: str) -> result.Result[int, Exception]:
        return result.wrap(lambda: int(text))

    parse_port("80").map(lambda p: p + 1).value_or(8080)
"""

import inspect
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)
U = TypeVar("U")
F = TypeVar("F", bound=BaseException)
R = TypeVar("R")


class _ResultMethods(Generic[T, E]):
    """Combinators shared by Ok and Err."""

    def is_ok(self) -> bool:
        return isinstance(self, Ok)

    def is_error(self) -> bool:
        return isinstance(self, Err)

    def value_or(self, value_if_error: T) -> T:
        if isinstance(self, Ok):
            return self.value
        return value_if_error

    def error_or(self, error_if_ok: E) -> E:
        if isinstance(self, Err):
            return self.error
        return error_if_ok

    def map(self, fn: Callable[[T], U]) -> "Result[U, E]":
        """Transform the value of an Ok; an Err passes through untouched."""
        if isinstance(self, Ok):
            return Ok(fn(self.value))
        return self  # type: ignore[return-value]

    def map_err(self, fn: Callable[[E], F]) -> "Result[T, F]":
        """Transform the error of an Err; an Ok passes through untouched."""
        if isinstance(self, Err):
            return Err(fn(self.error))
        return self  # type: ignore[return-value]

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        if isinstance(self, Ok):
            return fn(self.value)
        return self  # type: ignore[return-value]

    def or_else(self, fn: Callable[[E], "Result[T, F]"]) -> "Result[T, F]":
        if isinstance(self, Err):
            return fn(self.error)
        return self  # type: ignore[return-value]

    def match(self, on_ok: Callable[[T], R], on_error: Callable[[E], R]) -> R:
        if isinstance(self, Ok):
            return on_ok(self.value)
        return on_error(self.error)  # type: ignore[union-attr]

    def __iter__(self) -> Iterator[T]:
        if isinstance(self, Ok):
            yield self.value


@dataclass(frozen=True)
class Ok(_ResultMethods[T, E]):
    value: T


@dataclass(frozen=True)
class Err(_ResultMethods[T, E]):
    error: E


Result = Union[Ok[T, E], Err[T, E]]


class RetryError(Exception):
    """Every error collected by retry/retry_async, in attempt order."""

    def __init__(self, attempts: int, errors: list[BaseException] | None = None) -> None:
        self.attempts = attempts
        self.errors: list[BaseException] = list(errors or [])
        self.message = f"Failed after {attempts} attempts."
        super().__init__(self.message)


def ok(value: T) -> Result[T, E]:
    """Successful Result. Any value is allowed, None included."""
    return Ok(value)


def error(err: E) -> Result[T, E]:
    return Err(err)


def wrap(fn: Callable[[], T]) -> Result[T, Exception]:
    """
    Run ``fn`` and capture any Exception it raises as an Err.

    BaseExceptions that are not Exceptions (KeyboardInterrupt, SystemExit) propagate.
    """
    try:
        return Ok(fn())
    except Exception as exc:
        return Err(exc)


async def wrap_async(fn: Callable[[], Awaitable[T] | T]) -> Result[T, Exception]:
    """Like wrap, awaiting the value returned by ``fn`` when it is awaitable."""
    try:
        value = fn()
        if inspect.isawaitable(value):
            value = await value
        return Ok(value)
    except Exception as exc:
        return Err(exc)


def retry(fn: Callable[[], Result[T, E]], retries: int) -> Result[T, RetryError]:
    """
    Call ``fn`` until it returns an Ok, at most ``retries`` times.

    When every attempt fails the Err carries a RetryError listing the errors.
    ``retries <= 0`` fails immediately with "Failed after 0 attempts.".
    """
    if not isinstance(retries, int) or retries <= 0:
        return Err(RetryError(attempts=0))
    errors: list[BaseException] = []
    for _ in range(retries):
        outcome = fn()
        if isinstance(outcome, Ok):
            return outcome  # type: ignore[return-value]
        errors.append(outcome.error)
    return Err(RetryError(attempts=retries, errors=errors))


async def retry_async(
    fn: Callable[[], Awaitable[Result[T, E]]], retries: int
) -> Result[T, RetryError]:
    if not isinstance(retries, int) or retries <= 0:
        return Err(RetryError(attempts=0))
    errors: list[BaseException] = []
    for _ in range(retries):
        outcome = await fn()
        if isinstance(outcome, Ok):
            return outcome  # type: ignore[return-value]
        errors.append(outcome.error)
    return Err(RetryError(attempts=retries, errors=errors))
