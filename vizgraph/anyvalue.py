"""A single-slot container that remembers the exact type of what it holds."""

from __future__ import annotations

from typing import Any, TypeVar

T = TypeVar("T")

_EMPTY = object()


class AnyValue:
    """Holds one value of any type; reads must name the exact type held."""

    __slots__ = ("_value",)

    def __init__(self, value: Any = _EMPTY) -> None:
        self._value = value

    def valid(self) -> bool:
        """True when a value is held."""
        return self._value is not _EMPTY

    def is_type(self, kind: type) -> bool:
        """True when the held value is exactly of type ``kind``."""
        return self.valid() and type(self._value) is kind

    def get(self, kind: type[T]) -> T:
        """Return the held value, raising if empty or of another type."""
        if not self.valid():
            raise LookupError("can't query value from an empty AnyValue")
        if not self.is_type(kind):
            raise TypeError(
                f"invalid type when querying AnyValue: holds "
                f"{type(self._value).__name__}, asked for {kind.__name__}"
            )
        return self._value

    def value(self, kind: type[T]) -> T:
        """Return the held value, or ``kind()`` if empty or of another type."""
        return self._value if self.is_type(kind) else kind()

    def set(self, value: Any) -> None:
        """Replace the held value."""
        self._value = value

    def reset(self) -> None:
        """Drop the held value."""
        self._value = _EMPTY

    def __repr__(self) -> str:
        if not self.valid():
            return "AnyValue()"
        return f"AnyValue({self._value!r})"