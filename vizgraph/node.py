"""Base class of every graph node: ports, parameters and change tracking."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Any, Sequence

from .dataset import CellSet, CoordinateSystem, DataSet, Field
from .parameter import Parameter, ParameterChangeType, ParameterObserver
from .port import INVALID_ID, IdPool, InPort, OutPort
from .timestamp import TimeStamp


class NodeType(Enum):
    SOURCE = auto()
    FILTER = auto()
    ACTOR = auto()
    MAPPER = auto()
    UTILITY = auto()


class NodeObserver:
    """Receives notice when a node is marked changed."""

    def node_changed(self, node: "Node") -> None:
        """Called after a change; does nothing by default."""


_pool = IdPool(0)
_nodes: dict[int, "Node"] = {}


class Node(ParameterObserver, ABC):
    """A graph node with input and output ports and named parameters."""

    def __init__(self, primary: bool = False) -> None:
        self._id = _pool.acquire()
        _nodes[self._id] = self
        self._primary = primary
        self.name = ""
        self._unique_name = ""
        self._summary = ""
        self._parameters: list[Parameter] = []
        self._observer: NodeObserver | None = None
        self._last_updated = TimeStamp()
        self._last_changed = TimeStamp()

    # Identity ---------------------------------------------------------------

    @property
    def id(self) -> int:
        return self._id

    @property
    def is_primary(self) -> bool:
        return self._primary

    @abstractmethod
    def is_valid(self) -> bool:
        """True when the node has what it needs to produce output."""

    @abstractmethod
    def node_type(self) -> NodeType:
        """The broad category of this node."""

    @abstractmethod
    def kind(self) -> str:
        """The specific kind of this node, e.g. "Contour"."""

    def unique_name(self) -> str:
        """Kind followed by id, fixed on first use."""
        if not self._unique_name:
            self._unique_name = f"{self.kind()}{self._id}"
        return self._unique_name

    def summary(self) -> str:
        return self._summary or "<no summary>"

    def _set_summary_text(self, text: str) -> None:
        self._summary = text

    # Ports ------------------------------------------------------------------

    def inputs(self) -> Sequence[InPort]:
        return ()

    def outputs(self) -> Sequence[OutPort]:
        return ()

    def input(self, name: str) -> InPort | None:
        return next((p for p in self.inputs() if p.name == name), None)

    def output(self, name: str) -> OutPort | None:
        return next((p for p in self.outputs() if p.name == name), None)

    # Parameters -------------------------------------------------------------

    @property
    def parameters(self) -> tuple[Parameter, ...]:
        return tuple(self._parameters)

    def parameter(self, name: str) -> Parameter | None:
        return next((p for p in self._parameters if p.name == name), None)

    def add_parameter(self, parameter: Parameter) -> Parameter:
        self._parameters.append(parameter)
        return parameter

    def parameter_changed(self, parameter: Parameter, change_type: ParameterChangeType) -> None:
        """A new value marks the node changed; new bounds alone do not."""
        if change_type is ParameterChangeType.NEW_VALUE:
            self.mark_changed()

    # Change tracking --------------------------------------------------------

    def set_observer(self, observer: NodeObserver | None) -> None:
        self._observer = observer

    def _notify_observer(self) -> None:
        if self._observer is not None:
            self._observer.node_changed(self)

    def mark_changed(self) -> None:
        """Record a change here and in every node downstream."""
        self._last_changed.renew()
        self._notify_observer()
        for port in self.outputs():
            for port_id in port.connections():
                downstream = InPort.from_id(port_id)
                if downstream is not None and downstream.node is not None:
                    downstream.node.mark_changed()

    def mark_updated(self) -> None:
        self._last_updated.renew()

    def needs_update(self) -> bool:
        return self._last_updated <= self._last_changed

    @abstractmethod
    def update(self) -> None:
        """Bring this node's outputs up to date."""

    # Pulling values from upstream -------------------------------------------

    @staticmethod
    def _port_value(port: InPort | None, kind: type) -> Any:
        if port is None or not port.is_connected():
            return kind()
        upstream = port.other()
        if upstream is None:
            return kind()
        upstream.node.update()
        port.mark_value_received()
        return upstream.value.value(kind)

    def dataset_from_port(self, port: InPort) -> DataSet:
        """Update upstream and take its dataset, refreshing the port's field names."""
        dataset = self._port_value(port, DataSet)
        selector = port.selector()
        if selector is not None:
            selector.set_field_names(dataset)
        return dataset

    def cell_set_from_port(self, port: InPort) -> CellSet:
        return self._port_value(port, CellSet)

    def coordinate_system_from_port(self, port: InPort) -> CoordinateSystem:
        return self._port_value(port, CoordinateSystem)

    def field_from_port(self, port: InPort) -> Field:
        return self._port_value(port, Field)

    # Lifetime ---------------------------------------------------------------

    def release(self) -> None:
        """Disconnect and free all ports, then give the node id back."""
        if self._id == INVALID_ID:
            return
        for in_port in list(self.inputs()):
            in_port.release()
        for out_port in list(self.outputs()):
            out_port.release()
        _nodes.pop(self._id, None)
        _pool.release(self._id)
        self._id = INVALID_ID

    @staticmethod
    def from_id(node_id: int) -> "Node | None":
        if node_id == INVALID_ID:
            return None
        return _nodes.get(node_id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id}, name={self.name!r})"