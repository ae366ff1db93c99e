"""Nodes that produce datasets without any input."""

from __future__ import annotations

import math
from abc import abstractmethod
from typing import Callable

import numpy as np

from .dataset import (
    Association,
    CellSet,
    CoordinateSystem,
    DataSet,
    Field,
    make_uniform_dataset,
    summary_string,
)
from .node import Node, NodeType
from .parameter import Parameter, ParameterType
from .port import OutPort, PortType

SourceCallback = Callable[[], DataSet]

_NUM_RANDOM_POINTS = 10_000


class SourceNode(Node):
    """A node with a single dataset output filled by ``execute``."""

    def __init__(self) -> None:
        super().__init__()
        self._dataset_port = OutPort(PortType.DATASET, "dataset", self)

    def outputs(self) -> tuple[OutPort, ...]:
        return (self._dataset_port,)

    def node_type(self) -> NodeType:
        return NodeType.SOURCE

    def is_valid(self) -> bool:
        return True

    @abstractmethod
    def execute(self) -> DataSet:
        """Produce the dataset this source emits."""

    def update(self) -> None:
        """Re-run ``execute`` when the node has changed since its last update."""
        valid = self.is_valid()
        needed = self.needs_update()

        if not valid and needed:
            self._dataset_port.unset_value()
            self.mark_updated()

        if not valid or not needed:
            return

        dataset = self.execute()
        self._dataset_port.set_value(dataset)
        self._set_summary_text(summary_string(dataset))
        self.mark_updated()


def abc_field(size: int, a: float, b: float, c: float) -> np.ndarray:
    """The ABC flow on a ``size``-cubed grid, x varying fastest, as float32 vectors."""
    size = int(size)
    if size < 1:
        raise ValueError("grid size must be at least 1")
    factor = np.float32(2.0 * math.pi / size)
    index = np.arange(size**3, dtype=np.int64)
    z = factor * (index // (size * size)).astype(np.float32)
    y = factor * ((index // size) % size).astype(np.float32)
    x = factor * (index % size).astype(np.float32)
    a32, b32, c32 = np.float32(a), np.float32(b), np.float32(c)
    out = np.empty((index.size, 3), dtype=np.float32)
    out[:, 0] = a32 * np.sin(z) + c32 * np.cos(y)
    out[:, 1] = b32 * np.sin(x) + a32 * np.cos(z)
    out[:, 2] = c32 * np.sin(y) + b32 * np.cos(x)
    return out


class ABCSourceNode(SourceNode):
    """A uniform grid carrying an ABC flow "Velocity" point field."""

    def __init__(self) -> None:
        super().__init__()
        self.add_parameter(
            Parameter(self, "size", ParameterType.BOUNDED_INT, 64)
        ).set_min_max(8, 256, 64)
        for name in ("A", "B", "C"):
            self.add_parameter(
                Parameter(self, name, ParameterType.BOUNDED_FLOAT, 0.5)
            ).set_min_max(0.0, 1.0, 0.5)

    def kind(self) -> str:
        return "ABCSource"

    def execute(self) -> DataSet:
        size = self.parameter("size").value_as(int)
        scale = 2.0 * math.pi
        a = self.parameter("A").value_as(float) * scale
        b = self.parameter("B").value_as(float) * scale
        c = self.parameter("C").value_as(float) * scale

        dataset = make_uniform_dataset(size, -1.0, 2.0 / size)
        dataset.add_field(Field("Velocity", Association.POINTS, abc_field(size, a, b, c)))
        return dataset


def _empty_dataset() -> DataSet:
    return DataSet()


class CallbackSourceNode(SourceNode):
    """A source whose dataset comes from a user-supplied callable."""

    def __init__(self, callback: SourceCallback | None = None) -> None:
        super().__init__()
        self._callback: SourceCallback = _empty_dataset
        if callback is not None:
            self.set_callback(callback)

    def kind(self) -> str:
        return "CallbackSource"

    def set_callback(self, callback: SourceCallback) -> None:
        """Replace the callable; call ``mark_changed`` to have it run again."""
        self._callback = callback

    def execute(self) -> DataSet:
        return self._callback()


class RandomPointsSourceNode(SourceNode):
    """Ten thousand normally distributed points, one vertex cell each."""

    def kind(self) -> str:
        return "RandomPointsSource"

    def execute(self) -> DataSet:
        rng = np.random.default_rng(0)
        points = rng.normal(0.0, 4.0, size=(_NUM_RANDOM_POINTS, 3)).astype(np.float32)
        cells = CellSet.explicit("vertex", [(i,) for i in range(_NUM_RANDOM_POINTS)])
        dataset = DataSet(cells)
        dataset.add_coordinate_system(CoordinateSystem("coords", points))
        return dataset