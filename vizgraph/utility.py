"""Utility nodes: splitting, assembling and inspecting graph values."""

from __future__ import annotations

from typing import Callable

from .actor import Actor
from .dataset import DataSet, Range, summary_string
from .node import Node, NodeType
from .parameter import Parameter, ParameterChangeType, ParameterType
from .port import InPort, OutPort, PortType

RangeCallback = Callable[[Range], None]


class UtilityNode(Node):
    """Base class of nodes that reshape or inspect values."""

    def __init__(self, primary: bool = False) -> None:
        super().__init__(primary)

    def node_type(self) -> NodeType:
        return NodeType.UTILITY

    def is_valid(self) -> bool:
        return True


class DataSetToComponentsNode(UtilityNode):
    """Splits a dataset into coordinates, cells and one port per field."""

    def __init__(self) -> None:
        super().__init__(primary=True)
        self._dataset_in_port = InPort(PortType.DATASET, "dataset", self)
        self._out_ports: list[OutPort] = [
            OutPort(PortType.COORDINATE_SYSTEM, "coordinates", self),
            OutPort(PortType.CELLSET, "cellset", self),
        ]

    def kind(self) -> str:
        return "DataSetToComponents"

    def inputs(self) -> tuple[InPort, ...]:
        return (self._dataset_in_port,)

    def outputs(self) -> tuple[OutPort, ...]:
        return tuple(self._out_ports)

    def _truncate_outputs(self, count: int) -> None:
        for port in self._out_ports[count:]:
            port.release()
        del self._out_ports[count:]

    def update(self) -> None:
        if not self.needs_update():
            return

        if not self._dataset_in_port.is_connected():
            self._truncate_outputs(2)
            for port in self._out_ports:
                port.unset_value()
            self.mark_updated()
            return

        dataset = self.dataset_from_port(self._dataset_in_port)
        coords_port, cells_port = self._out_ports[:2]
        if dataset.coordinate_systems:
            coords_port.set_value(dataset.coordinate_system(0))
        cells_port.set_value(dataset.cell_set)

        shown = [f for f in dataset.fields if not dataset.has_coordinate_system(f.name)]
        for slot, field in enumerate(shown, start=2):
            if slot < len(self._out_ports):
                port = self._out_ports[slot]
                if port.name != field.name:
                    replacement = OutPort(PortType.FIELD, field.name, self)
                    port.release()
                    self._out_ports[slot] = port = replacement
            else:
                port = OutPort(PortType.FIELD, field.name, self)
                self._out_ports.append(port)
            port.set_value(field)

        self._truncate_outputs(len(shown) + 2)
        self.mark_updated()


_FIELD_INPUTS = ("field1", "field2", "field3", "field4")


class ComponentsToDataSetNode(UtilityNode):
    """Assembles coordinates, cells and up to four fields into a dataset."""

    def __init__(self) -> None:
        super().__init__(primary=True)
        self._in_ports: list[InPort] = [
            InPort(PortType.COORDINATE_SYSTEM, "coords", self),
            InPort(PortType.CELLSET, "cells", self),
            *(InPort(PortType.FIELD, name, self) for name in _FIELD_INPUTS),
        ]
        self._dataset_out_port = OutPort(PortType.DATASET, "dataset", self)

    def kind(self) -> str:
        return "ComponentsToDataSet"

    def inputs(self) -> tuple[InPort, ...]:
        return tuple(self._in_ports)

    def outputs(self) -> tuple[OutPort, ...]:
        return (self._dataset_out_port,)

    def update(self) -> None:
        if not self.needs_update():
            return

        coords_port, cells_port, *field_ports = self._in_ports
        if not (coords_port.is_connected() and cells_port.is_connected()):
            self._dataset_out_port.unset_value()
            self.mark_updated()
            return

        dataset = DataSet()
        dataset.add_coordinate_system(self.coordinate_system_from_port(coords_port))
        dataset.cell_set = self.cell_set_from_port(cells_port)
        for port in field_ports:
            if port.is_connected():
                dataset.add_field(self.field_from_port(port))

        self._dataset_out_port.set_value(dataset)
        self._set_summary_text(summary_string(dataset))
        self.mark_updated()


class ExtractActorFieldRangeNode(UtilityNode):
    """Reports the value range of an actor's primary field to a callback."""

    def __init__(self) -> None:
        super().__init__(primary=True)
        self._actor_port = InPort(PortType.ACTOR, "actor", self)
        self._callback: RangeCallback | None = None
        self._active = True
        self._range = Range()
        self.add_parameter(Parameter(self, "active", ParameterType.BOOL, True))

    def kind(self) -> str:
        return "ExtractActorFieldRange"

    def inputs(self) -> tuple[InPort, ...]:
        return (self._actor_port,)

    def parameter_changed(self, parameter: Parameter, change_type: ParameterChangeType) -> None:
        if change_type is ParameterChangeType.NEW_VALUE and parameter.name == "active":
            self._active = parameter.value_as(bool)
        self.mark_changed()

    def set_callback(self, callback: RangeCallback | None) -> None:
        self._callback = callback

    @property
    def range(self) -> Range:
        """The most recently extracted range."""
        return self._range

    def needs_update(self) -> bool:
        return self._active and Node.needs_update(self)

    def _report(self) -> None:
        if self._callback is not None:
            self._callback(self._range)

    def update(self) -> None:
        if not self.needs_update():
            return

        upstream = self._actor_port.other() if self._actor_port.is_connected() else None
        if upstream is None:
            self._range = Range(0.0, 0.0)
            self._report()
            self.mark_updated()
            return

        upstream.node.update()
        actor = upstream.value.get(Actor)
        self._range = actor.primary_field().range()
        self._report()
        self.mark_updated()