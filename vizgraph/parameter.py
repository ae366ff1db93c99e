"""Typed node parameters stored in a small fixed-size value buffer."""

from __future__ import annotations

import numbers
import struct
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

_BUFFER_SIZE = 4
_ZERO = bytes(_BUFFER_SIZE)
_FORMATS = {bool: "<?", int: "<i", float: "<f"}
_VALID_KINDS = (float, int, bool, str)


class ParameterType(Enum):
    BOUNDED_FLOAT = auto()
    BOUNDED_INT = auto()
    FLOAT = auto()
    INT = auto()
    BOOL = auto()
    FILENAME = auto()
    UNKNOWN = auto()


class ParameterChangeType(Enum):
    NEW_VALUE = auto()
    NEW_MINMAX = auto()


_FLOAT_TYPES = {ParameterType.BOUNDED_FLOAT, ParameterType.FLOAT}
_INT_TYPES = {ParameterType.BOUNDED_INT, ParameterType.INT}


class ParameterObserver:
    """Receives notice when a parameter's value or bounds change."""

    last_parameter_change: "tuple[Parameter, ParameterChangeType] | None" = None

    def parameter_changed(self, parameter: "Parameter", change_type: ParameterChangeType) -> None:
        """Record the latest change; subclasses override this to react."""
        self.last_parameter_change = (parameter, change_type)


def _check_kind(kind: type) -> None:
    if kind not in _VALID_KINDS:
        raise TypeError("parameter values must be float, int, bool or str")


def _kind_of(value: Any, parameter_type: ParameterType) -> type:
    if isinstance(value, str):
        return str
    if isinstance(value, bool):
        return bool
    if isinstance(value, numbers.Real):
        if parameter_type in _FLOAT_TYPES:
            return float
        if parameter_type in _INT_TYPES:
            return int
        return int if isinstance(value, numbers.Integral) else float
    raise TypeError(
        f"parameter values must be float, int, bool or str, not {type(value).__name__}"
    )


def _encode(kind: type, value: Any) -> bytes:
    try:
        packed = struct.pack(_FORMATS[kind], kind(value))
    except struct.error as exc:
        raise ValueError(f"value {value!r} does not fit a parameter") from exc
    return packed.ljust(_BUFFER_SIZE, b"\0")


def _decode(kind: type, buffer: bytes) -> Any:
    return struct.unpack_from(_FORMATS[kind], buffer)[0]


@dataclass(frozen=True)
class _RawValue:
    buffer: bytes = _ZERO
    text: str = ""


def _make_raw(value: Any, parameter_type: ParameterType) -> _RawValue:
    kind = _kind_of(value, parameter_type)
    if kind is str:
        return _RawValue(text=value)
    return _RawValue(buffer=_encode(kind, value))


class Parameter:
    """A named value on a node, with optional bounds and a change observer."""

    def __init__(
        self,
        observer: ParameterObserver | None,
        name: str,
        parameter_type: ParameterType,
        value: Any,
    ) -> None:
        self._observer = observer
        self._name = name
        self._type = ParameterType(parameter_type)
        self._string_value = ""
        self._value = _ZERO
        self._min = _ZERO
        self._max = _ZERO
        self._has_min_max = False
        if not self.set_value(value):
            self._notify(ParameterChangeType.NEW_VALUE)

    @property
    def name(self) -> str:
        return self._name

    @property
    def type(self) -> ParameterType:
        return self._type

    @property
    def observer(self) -> ParameterObserver | None:
        return self._observer

    @observer.setter
    def observer(self, observer: ParameterObserver | None) -> None:
        self._observer = observer

    def value_as(self, kind: type) -> Any:
        """The current value read as ``kind``."""
        _check_kind(kind)
        if kind is str:
            return self._string_value
        return _decode(kind, self._value)

    def min_as(self, kind: type) -> Any:
        """The lower bound read as ``kind``."""
        return self._bound_as(kind, self._min)

    def max_as(self, kind: type) -> Any:
        """The upper bound read as ``kind``."""
        return self._bound_as(kind, self._max)

    def _bound_as(self, kind: type, buffer: bytes) -> Any:
        _check_kind(kind)
        if kind is str:
            raise TypeError("string parameters have no bounds")
        return _decode(kind, buffer)

    def is_type(self, kind: type) -> bool:
        """True when ``kind`` is the natural type of this parameter."""
        if kind is bool:
            return self._type is ParameterType.BOOL
        if kind is int:
            return self._type in _INT_TYPES
        if kind is str:
            return self._type is ParameterType.FILENAME
        if kind is float:
            return self._type in _FLOAT_TYPES
        return False

    def set_value(self, new_value: Any) -> bool:
        """Store a new value; return True and notify if it changed."""
        return self._set_raw(_make_raw(new_value, self._type))

    def _set_raw(self, raw: _RawValue) -> bool:
        changed = False
        if raw.text and raw.text != self._string_value:
            self._string_value = raw.text
            changed = True
        elif raw.buffer != self._value:
            self._value = raw.buffer
            changed = True
        if changed:
            self._notify(ParameterChangeType.NEW_VALUE)
        return changed

    def set_min_max(self, new_min: Any, new_max: Any, initial_value: Any) -> bool:
        """Set the bounds; the first call also sets ``initial_value``.

        Returns True (and notifies) when the bounds are new or changed.
        """
        kind = _kind_of(new_min, self._type)
        if kind is str:
            raise TypeError("string parameters have no bounds")
        encoded_min = _encode(kind, new_min)
        encoded_max = _encode(kind, new_max)
        notify = (
            not self._has_min_max
            or _decode(kind, self._min) != _decode(kind, encoded_min)
            or _decode(kind, self._max) != _decode(kind, encoded_max)
        )
        self._min = encoded_min
        self._max = encoded_max
        if not self._has_min_max:
            self.set_value(initial_value)
            self._has_min_max = True
        if notify:
            self._notify(ParameterChangeType.NEW_MINMAX)
        return notify

    def unset_min_max(self) -> None:
        """Clear the bounds."""
        self._min = _ZERO
        self._max = _ZERO
        self._has_min_max = False

    def has_min_max(self) -> bool:
        return self._has_min_max

    def _notify(self, change_type: ParameterChangeType) -> None:
        if self._observer is not None:
            self._observer.parameter_changed(self, change_type)

    def __repr__(self) -> str:
        return f"Parameter({self._name!r}, {self._type.name})"