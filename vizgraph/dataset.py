"""A small in-memory dataset model: fields, coordinates and cells."""

from __future__ import annotations

import math
from dataclasses import dataclass
from dataclasses import field as _dc_field
from enum import Enum, auto
from typing import Sequence

import numpy as np


class Association(Enum):
    ANY = auto()
    WHOLE_DATASET = auto()
    POINTS = auto()
    CELLS = auto()


@dataclass(frozen=True)
class Range:
    """A closed interval; the default interval is empty."""

    min: float = math.inf
    max: float = -math.inf

    def is_non_empty(self) -> bool:
        return self.min <= self.max

    def center(self) -> float:
        """Midpoint of the interval (NaN when empty)."""
        return 0.5 * (self.max + self.min)

    def length(self) -> float:
        """Width of the interval, 0 when empty."""
        return self.max - self.min if self.is_non_empty() else 0.0


@dataclass(eq=False)
class Field:
    """A named array of values associated with points, cells or the whole set."""

    name: str = ""
    association: Association = Association.ANY
    data: np.ndarray = _dc_field(default_factory=lambda: np.empty(0))

    def __post_init__(self) -> None:
        self.data = np.asarray(self.data)
        if self.data.ndim == 0:
            self.data = self.data.reshape(1)

    def number_of_values(self) -> int:
        return int(self.data.shape[0])

    def number_of_components(self) -> int:
        if self.data.ndim <= 1:
            return 1
        return int(np.prod(self.data.shape[1:]))

    def range(self) -> Range:
        """Range of the first component's values."""
        count = self.number_of_values()
        if count == 0:
            return Range()
        values = self.data if self.data.ndim == 1 else self.data.reshape(count, -1)[:, 0]
        return Range(float(np.min(values)), float(np.max(values)))


class CoordinateSystem(Field):
    """A point field holding 3D point positions."""

    def __init__(self, name: str = "coords", points: Sequence | np.ndarray = ()) -> None:
        super().__init__(name, Association.POINTS, np.asarray(points, dtype=float).reshape(-1, 3))

    def bounds(self) -> tuple[Range, Range, Range]:
        """Per-axis ranges of the points."""
        if self.number_of_values() == 0:
            return (Range(), Range(), Range())
        lows = self.data.min(axis=0)
        highs = self.data.max(axis=0)
        return tuple(Range(float(lo), float(hi)) for lo, hi in zip(lows, highs))


_STRUCTURED_SHAPES = {0: "vertex", 1: "line", 2: "quad", 3: "hexahedron"}


@dataclass(frozen=True)
class CellSet:
    """Cell topology: empty, structured by point dimensions, or explicit."""

    shape: str = "empty"
    point_dimensions: tuple[int, ...] | None = None
    connectivity: tuple[tuple[int, ...], ...] = ()

    @classmethod
    def structured(cls, point_dimensions: Sequence[int]) -> "CellSet":
        dims = tuple(int(d) for d in point_dimensions)
        shape = _STRUCTURED_SHAPES[sum(1 for d in dims if d > 1)]
        return cls(shape=shape, point_dimensions=dims)

    @classmethod
    def explicit(cls, shape: str, connectivity: Sequence[Sequence[int]]) -> "CellSet":
        cells = tuple(tuple(int(i) for i in cell) for cell in connectivity)
        return cls(shape=shape, connectivity=cells)

    def is_structured(self) -> bool:
        return self.point_dimensions is not None

    def number_of_cells(self) -> int:
        if self.point_dimensions is not None:
            return math.prod(d - 1 for d in self.point_dimensions if d > 1)
        return len(self.connectivity)


class DataSet:
    """Fields, coordinate systems (kept as point fields) and a cell set."""

    def __init__(self, cell_set: CellSet | None = None) -> None:
        self._fields: list[Field] = []
        self._coordinate_names: list[str] = []
        self.cell_set = cell_set if cell_set is not None else CellSet()

    @property
    def fields(self) -> tuple[Field, ...]:
        return tuple(self._fields)

    @property
    def coordinate_systems(self) -> tuple[CoordinateSystem, ...]:
        return tuple(self.coordinate_system(i) for i in range(len(self._coordinate_names)))

    def add_field(self, field: Field) -> None:
        """Add a field, replacing one with the same name and association."""
        for index, existing in enumerate(self._fields):
            if existing.name == field.name and existing.association == field.association:
                self._fields[index] = field
                return
        self._fields.append(field)

    def add_coordinate_system(self, coordinates: Field) -> None:
        if not isinstance(coordinates, CoordinateSystem):
            coordinates = CoordinateSystem(coordinates.name, coordinates.data)
        self.add_field(coordinates)
        if coordinates.name not in self._coordinate_names:
            self._coordinate_names.append(coordinates.name)

    def get_field(self, key: int | str) -> Field:
        """Field by position or by name."""
        if isinstance(key, int) and not isinstance(key, bool):
            if not 0 <= key < len(self._fields):
                raise IndexError(f"field index {key} out of range")
            return self._fields[key]
        for candidate in self._fields:
            if candidate.name == key:
                return candidate
        raise KeyError(f"no field named {key!r}")

    def has_field(self, name: str) -> bool:
        return any(f.name == name for f in self._fields)

    def has_coordinate_system(self, name: str) -> bool:
        return name in self._coordinate_names

    def coordinate_system(self, index: int = 0) -> CoordinateSystem:
        if not 0 <= index < len(self._coordinate_names):
            raise IndexError(f"coordinate system index {index} out of range")
        name = self._coordinate_names[index]
        for candidate in self._fields:
            if candidate.name == name and candidate.association is Association.POINTS:
                if isinstance(candidate, CoordinateSystem):
                    return candidate
                return CoordinateSystem(candidate.name, candidate.data)
        raise KeyError(f"coordinate system {name!r} has no point field")

    def number_of_points(self) -> int:
        if self._coordinate_names:
            return self.coordinate_system(0).number_of_values()
        if self.cell_set.point_dimensions is not None:
            return math.prod(self.cell_set.point_dimensions)
        return 0

    def __repr__(self) -> str:
        names = ", ".join(f.name for f in self._fields)
        return f"DataSet(fields=[{names}], cells={self.cell_set.number_of_cells()})"


def _triple(value, cast) -> tuple:
    if isinstance(value, (int, float, np.number)):
        return (cast(value),) * 3
    items = tuple(cast(v) for v in value)
    if len(items) != 3:
        raise ValueError("expected a scalar or three values")
    return items


def make_uniform_dataset(dimensions, origin=0.0, spacing=1.0) -> DataSet:
    """A regular grid of points with x varying fastest, and structured cells."""
    dims = _triple(dimensions, int)
    if any(d < 1 for d in dims):
        raise ValueError("grid dimensions must be at least 1")
    origins = _triple(origin, float)
    spacings = _triple(spacing, float)
    axes = [o + s * np.arange(n) for n, o, s in zip(dims, origins, spacings)]
    zz, yy, xx = np.meshgrid(axes[2], axes[1], axes[0], indexing="ij")
    points = np.column_stack([xx.ravel(), yy.ravel(), zz.ravel()])
    dataset = DataSet(CellSet.structured(dims))
    dataset.add_coordinate_system(CoordinateSystem("coords", points))
    return dataset


def summary_string(dataset: DataSet) -> str:
    """A multi-line human-readable description of a dataset."""
    coords = dataset.coordinate_systems
    lines = ["DataSet:", f"  CoordSystems[{len(coords)}]"]
    lines.extend(f"    {c.name}: {c.number_of_values()} points" for c in coords)
    cells = dataset.cell_set
    if cells.shape == "empty":
        lines.append("  CellSet: empty")
    else:
        layout = "structured" if cells.is_structured() else "explicit"
        lines.append(f"  CellSet: {layout} {cells.shape}, {cells.number_of_cells()} cells")
    lines.append(f"  Fields[{len(dataset.fields)}]")
    lines.extend(
        f"    {f.name}: {f.association.name.lower()}, "
        f"{f.number_of_components()} component(s), {f.number_of_values()} values"
        for f in dataset.fields
    )
    return "\n".join(lines) + "\n"