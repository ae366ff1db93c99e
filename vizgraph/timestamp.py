"""Monotonic modification stamps shared by every graph object."""

from __future__ import annotations

import itertools
import threading
from functools import total_ordering

_counter = itertools.count(1)
_counter_lock = threading.Lock()


def _next_value() -> int:
    with _counter_lock:
        return next(_counter)


def _as_int(other: object) -> int | None:
    if isinstance(other, TimeStamp):
        return other._value
    if isinstance(other, int) and not isinstance(other, bool):
        return other
    return None


@total_ordering
class TimeStamp:
    """A point in a process-wide sequence; newer stamps compare greater."""

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value = 0
        self.renew()

    def renew(self) -> None:
        """Move this stamp to the newest point in the sequence."""
        self._value = _next_value()

    def __int__(self) -> int:
        return self._value

    def __lt__(self, other: object) -> bool:
        value = _as_int(other)
        if value is None:
            return NotImplemented
        return self._value < value

    def __eq__(self, other: object) -> bool:
        value = _as_int(other)
        if value is None:
            return NotImplemented
        return self._value == value

    __hash__ = None  # stamps are mutable

    def __repr__(self) -> str:
        return f"TimeStamp({self._value})"