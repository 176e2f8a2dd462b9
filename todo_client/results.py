"""
Result type for operations whose failure is expected.

Remote calls fail for ordinary reasons (service down, bad status) and the
caller always has to react, so store operations hand back a ``Result``
instead of raising.  Exceptions stay reserved for programming errors.

Usage:
    result = store.add(draft)
    if result.is_ok:
        flash(f"Added {result.value.text}")
    else:
        flash(str(result.error))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, cast

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Result(Generic[T, E]):
    """Either a confirmed value (Ok) or a typed error (Err)."""

    _value: T | None
    _error: E | None
    _is_ok: bool

    @classmethod
    def ok(cls, value: T) -> Result[T, E]:
        return cls(_value=value, _error=None, _is_ok=True)

    @classmethod
    def err(cls, error: E) -> Result[T, E]:
        return cls(_value=None, _error=error, _is_ok=False)

    @property
    def is_ok(self) -> bool:
        return self._is_ok

    @property
    def is_err(self) -> bool:
        return not self._is_ok

    @property
    def value(self) -> T:
        """
        Return the Ok value.

        Raises:
            ValueError: If this Result is Err.
        """
        if not self._is_ok:
            raise ValueError("Cannot access value on Err result")
        return cast(T, self._value)

    @property
    def error(self) -> E:
        """
        Return the Err value.

        Raises:
            ValueError: If this Result is Ok.
        """
        if self._is_ok:
            raise ValueError("Cannot access error on Ok result")
        return cast(E, self._error)

    def unwrap(self) -> T:
        """Return the Ok value or re-raise the wrapped error."""
        if self._is_ok:
            return cast(T, self._value)
        raise cast(E, self._error)

    def __repr__(self) -> str:
        if self._is_ok:
            return f"Ok({self._value!r})"
        return f"Err({self._error!r})"
