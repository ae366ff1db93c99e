"""Nodes that turn one dataset into another."""

from __future__ import annotations

from abc import abstractmethod

import numpy as np

from .dataset import DataSet, Field, summary_string
from .node import Node, NodeType
from .port import InPort, OutPort, PortType


class FilterNode(Node):
    """A node with one dataset input and one dataset output."""

    def __init__(self) -> None:
        super().__init__()
        self._dataset_out_port = OutPort(PortType.DATASET, "dataset", self)
        self._dataset_in_port = InPort(PortType.DATASET, "dataset", self)

    def inputs(self) -> tuple[InPort, ...]:
        return (self._dataset_in_port,)

    def outputs(self) -> tuple[OutPort, ...]:
        return (self._dataset_out_port,)

    def dataset_input(self) -> InPort:
        """The port the main input dataset arrives on."""
        return self._dataset_in_port

    def node_type(self) -> NodeType:
        return NodeType.FILTER

    def is_valid(self) -> bool:
        return self._dataset_in_port.is_connected()

    @abstractmethod
    def execute(self) -> DataSet:
        """Compute the output dataset from the inputs."""

    def needs_update(self) -> bool:
        return Node.needs_update(self) or self._dataset_in_port.connection_has_new_value()

    def update(self) -> None:
        """Re-run ``execute`` when needed; clear the output while unconnected."""
        valid = self.is_valid()
        needed = self.needs_update()

        if not valid and needed:
            self._dataset_out_port.unset_value()
            self.mark_updated()

        if not valid or not needed:
            return

        dataset = self.execute()
        self._dataset_out_port.set_value(dataset)
        self._set_summary_text(summary_string(dataset))
        self.mark_updated()


def _with_geometry(source: DataSet, new_field: Field) -> DataSet:
    result = DataSet(source.cell_set)
    for coordinates in source.coordinate_systems:
        result.add_coordinate_system(coordinates)
    result.add_field(new_field)
    return result


class VectorMagnitudeNode(FilterNode):
    """Magnitude of the first field (or of the point positions if there is none)."""

    OUTPUT_FIELD = "magnitude"

    def kind(self) -> str:
        return "VectorMagnitude"

    def execute(self) -> DataSet:
        dataset = self.dataset_from_port(self.dataset_input())
        if dataset.fields:
            source = dataset.get_field(0)
        elif dataset.coordinate_systems:
            source = dataset.coordinate_system(0)
        else:
            raise ValueError("no field to compute a vector magnitude from")

        count = source.number_of_values()
        values = np.asarray(source.data, dtype=float).reshape(count, -1)
        magnitude = np.linalg.norm(values, axis=1)
        return _with_geometry(
            dataset, Field(self.OUTPUT_FIELD, source.association, magnitude)
        )