"""
Optional values: an explicit container for "a value or nothing".

Use these instead of returning ``None`` for "not found"::

    from typesafe import optional

    def find_user(user_id: str) -> optional.Optional[User]:
        return optional.from_nullable(users.get(user_id))

    port = optional.wrap(lambda: os.environ.get("PORT")).map(int).value_or(8080)
"""

import inspect
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")


class _OptionalMethods(Generic[T]):
    """Combinators shared by Some and Nothing."""

    def is_some(self) -> bool:
        return isinstance(self, Some)

    def is_none(self) -> bool:
        return isinstance(self, Nothing)

    def value_or(self, value_if_empty: T) -> T:
        """Return the contained value, or ``value_if_empty`` when empty."""
        if isinstance(self, Some):
            return self.value
        return value_if_empty

    def map(self, fn: Callable[[T], U]) -> "Optional[U]":
        """Transform the value if present. ``fn`` returning None yields Nothing."""
        if isinstance(self, Some):
            return from_nullable(fn(self.value))
        return NOTHING

    def and_then(self, fn: Callable[[T], "Optional[U]"]) -> "Optional[U]":
        """Chain an operation that itself returns an Optional."""
        if isinstance(self, Some):
            return fn(self.value)
        return NOTHING

    def or_else(self, fn: Callable[[], "Optional[T]"]) -> "Optional[T]":
        """Return self when it holds a value, otherwise the fallback from ``fn``."""
        if isinstance(self, Some):
            return self
        return fn()

    def match(self, on_some: Callable[[T], R], on_none: Callable[[], R]) -> R:
        if isinstance(self, Some):
            return on_some(self.value)
        return on_none()

    def __iter__(self) -> Iterator[T]:
        if isinstance(self, Some):
            yield self.value


@dataclass(frozen=True)
class Some(_OptionalMethods[T]):
    value: T


@dataclass(frozen=True)
class Nothing(_OptionalMethods[T]):
    def __bool__(self) -> bool:
        return False


Optional = Union[Some[T], Nothing[T]]

NOTHING: Nothing = Nothing()


def some(value: T) -> Optional[T]:
    """Wrap a present value. Passing None is allowed and still yields Some(None)."""
    return Some(value)


def none() -> Optional[T]:
    return NOTHING


def from_nullable(value: T | None) -> Optional[T]:
    """Some(value) unless value is None."""
    if value is None:
        return NOTHING
    return Some(value)


def wrap(fn: Callable[[], T | None]) -> Optional[T]:
    """Run ``fn`` and convert a None result into Nothing."""
    return from_nullable(fn())


async def wrap_async(fn: Callable[[], Awaitable[T | None] | T | None]) -> Optional[T]:
    """Run ``fn``, awaiting its result when it is awaitable, and convert None into Nothing."""
    value = fn()
    if inspect.isawaitable(value):
        value = await value
    return from_nullable(value)
