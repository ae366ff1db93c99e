"""Typed connection points between graph nodes, addressed by small integer ids."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from .anyvalue import AnyValue
from .fieldselector import FieldSelector
from .timestamp import TimeStamp

if TYPE_CHECKING:
    from .node import Node

INVALID_ID = -1
_MAX_IDS = 255


class PortType(Enum):
    DATASET = auto()
    ACTOR = auto()
    COORDINATE_SYSTEM = auto()
    CELLSET = auto()
    FIELD = auto()
    UNKNOWN = auto()


_TYPE_NAMES = {
    PortType.ACTOR: "actor",
    PortType.DATASET: "dataset",
    PortType.COORDINATE_SYSTEM: "coordinate_system",
    PortType.CELLSET: "cellset",
    PortType.FIELD: "field",
}


def port_type_string(port_type: PortType) -> str:
    """Short lower-case name of a port type."""
    return _TYPE_NAMES.get(port_type, "<unknown>")


def is_input_port_id(port_id: int) -> bool:
    """Input port ids use the low byte; output port ids the next byte up."""
    return bool(port_id & 0x00FF)


class IdPool:
    """Hands out small integer ids, reusing released ones most recent first."""

    def __init__(self, first: int) -> None:
        self._next = first
        self._free: list[int] = []

    def acquire(self) -> int:
        if self._free:
            return self._free.pop()
        value = self._next
        self._next += 1
        if value >= _MAX_IDS:
            raise RuntimeError("exhausted number of graph objects")
        return value

    def release(self, value: int) -> None:
        self._free.append(value)


_in_pool = IdPool(1)
_out_pool = IdPool(1)
_in_ports: dict[int, "InPort"] = {}
_out_ports: dict[int, "OutPort"] = {}


def _out_index(port_id: int) -> int:
    return (port_id >> 8) & 0x00FF


class Port(ABC):
    """A named, typed endpoint owned by a node."""

    def __init__(self, port_type: PortType, name: str, node: "Node") -> None:
        self._type = PortType(port_type)
        self._name = name
        self._node = node

    @property
    def type(self) -> PortType:
        return self._type

    @property
    def name(self) -> str:
        return self._name

    @property
    def node(self) -> "Node":
        return self._node

    @property
    @abstractmethod
    def id(self) -> int:
        """The id under which this port can be found again."""

    @staticmethod
    def from_id(port_id: int) -> "Port | None":
        """Look up an input or output port by id."""
        if is_input_port_id(port_id):
            return InPort.from_id(port_id)
        return OutPort.from_id(port_id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, {self._type.name}, id={self.id})"


class InPort(Port):
    """Receives a value from at most one connected output port."""

    def __init__(self, port_type: PortType, name: str, node: "Node") -> None:
        super().__init__(port_type, name, node)
        self._connection = INVALID_ID
        self._value_last_received = TimeStamp()
        self._selector = FieldSelector()
        self._id = _in_pool.acquire()
        _in_ports[self._id] = self

    @property
    def id(self) -> int:
        return self._id

    def is_connected(self) -> bool:
        return self._connection != INVALID_ID

    def connect(self, source: "OutPort") -> bool:
        """Attach to ``source`` (dropping any earlier link); False on type mismatch."""
        if source.type != self.type:
            return False
        self.disconnect()
        self._connection = source.id
        self.node.mark_changed()
        return True

    def disconnect(self) -> None:
        """Drop the link to the upstream port, if any."""
        if not self.is_connected():
            return
        upstream = self.other()
        if upstream is not None:
            upstream.disconnect(self)
        self._connection = INVALID_ID
        if self.node is not None:
            self.node.mark_changed()

    def other(self) -> "OutPort | None":
        """The connected output port."""
        return OutPort.from_id(self._connection)

    @property
    def cselector(self) -> FieldSelector | None:
        """The field selector of a dataset port, without marking the node changed."""
        return self._selector if self.type is PortType.DATASET else None

    def selector(self) -> FieldSelector | None:
        """The field selector of a dataset port; marks the owning node changed."""
        self.node.mark_changed()
        return self.cselector

    def mark_value_received(self) -> None:
        self._value_last_received.renew()

    def connection_has_new_value(self) -> bool:
        """True when the upstream value is newer than the last one received."""
        upstream = self.other()
        return (
            self.is_connected()
            and upstream is not None
            and self._value_last_received < upstream.value_last_changed
        )

    def release(self) -> None:
        """Disconnect and give the id back; the port is unusable afterwards."""
        if self._id == INVALID_ID:
            return
        self.disconnect()
        _in_ports.pop(self._id, None)
        _in_pool.release(self._id)
        self._id = INVALID_ID

    @staticmethod
    def from_id(port_id: int) -> "InPort | None":
        if port_id == INVALID_ID:
            return None
        return _in_ports.get(port_id)


class OutPort(Port):
    """Holds a value and feeds any number of input ports."""

    def __init__(self, port_type: PortType, name: str, node: "Node") -> None:
        super().__init__(port_type, name, node)
        self._value = AnyValue()
        self._value_last_changed = TimeStamp()
        self._connections: list[int] = []
        self._index = _out_pool.acquire()
        _out_ports[self._index] = self

    @property
    def id(self) -> int:
        if self._index == INVALID_ID:
            return INVALID_ID
        return (self._index << 8) & 0xFF00

    def connect(self, target: InPort) -> bool:
        """Record ``target`` as a downstream port; False on type mismatch."""
        if target.type != self.type:
            return False
        self._connections.append(target.id)
        return True

    def disconnect(self, target: InPort) -> None:
        """Forget ``target`` as a downstream port."""
        self._connections = [c for c in self._connections if c != target.id]

    def disconnect_all_downstream_ports(self) -> None:
        for port_id in list(self._connections):
            port = InPort.from_id(port_id)
            if port is not None:
                port.disconnect()

    def connections(self) -> tuple[int, ...]:
        """Ids of the connected input ports."""
        return tuple(self._connections)

    @property
    def value(self) -> AnyValue:
        return self._value

    @property
    def value_last_changed(self) -> TimeStamp:
        return self._value_last_changed

    def set_value(self, value: Any) -> None:
        self._value.set(value)

    def unset_value(self) -> None:
        self._value.reset()

    def release(self) -> None:
        """Give the id back and disconnect everything downstream."""
        if self._index == INVALID_ID:
            return
        _out_ports.pop(self._index, None)
        _out_pool.release(self._index)
        self.disconnect_all_downstream_ports()
        self._connections.clear()
        self._index = INVALID_ID

    @staticmethod
    def from_id(port_id: int) -> "OutPort | None":
        if port_id == INVALID_ID:
            return None
        return _out_ports.get(_out_index(port_id))


def connect(source: OutPort, target: InPort) -> bool:
    """Link an output port to an input port; False when the types differ."""
    return source.connect(target) and target.connect(source)