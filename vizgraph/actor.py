"""Actors: a dataset's geometry bundled with up to four chosen fields."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field as _dc_field

from .dataset import CellSet, CoordinateSystem, DataSet, Field
from .fieldselector import NONE_FIELD, FieldSelector
from .node import Node, NodeType
from .port import InPort, OutPort, PortType

_MAX_FIELDS = 4


def _empty_fields() -> tuple[Field, ...]:
    return tuple(Field() for _ in range(_MAX_FIELDS))


@dataclass(eq=False)
class Actor:
    """Cells, coordinates and four field slots, one of which is primary."""

    cell_set: CellSet = _dc_field(default_factory=CellSet)
    coordinates: CoordinateSystem = _dc_field(default_factory=CoordinateSystem)
    fields: tuple[Field, ...] = _dc_field(default_factory=_empty_fields)
    primary_field_index: int = 0

    def primary_field(self) -> Field:
        """The field in the primary slot."""
        return self.fields[self.primary_field_index]


class ActorNode(Node):
    """Turns an input dataset into an actor using its own field selection."""

    def __init__(self) -> None:
        super().__init__()
        self._dataset_port = InPort(PortType.DATASET, "dataset", self)
        self._actor_port = OutPort(PortType.ACTOR, "actor", self)
        self._selector = FieldSelector()
        self.selector().set_field_names(DataSet())

    def kind(self) -> str:
        return "Actor"

    def inputs(self) -> tuple[InPort, ...]:
        return (self._dataset_port,)

    def outputs(self) -> tuple[OutPort, ...]:
        return (self._actor_port,)

    def node_type(self) -> NodeType:
        return NodeType.ACTOR

    def is_valid(self) -> bool:
        return self._dataset_port.is_connected()

    @property
    def cselector(self) -> FieldSelector:
        """The field selector, without marking the node changed."""
        return self._selector

    def selector(self) -> FieldSelector:
        """The field selector; marks the node changed since it may be edited."""
        self.mark_changed()
        return self._selector

    def update(self) -> None:
        if not self.needs_update():
            return
        dataset = self.dataset_from_port(self._dataset_port)
        self._actor_port.set_value(self._make_actor(dataset))
        self.mark_updated()

    def _make_actor(self, dataset: DataSet) -> Actor:
        self.selector().set_field_names(dataset)
        names = self.cselector
        primary = names.current_field
        if primary > _MAX_FIELDS - 1:
            primary = 0

        def slot(index: int) -> Field:
            if len(names) <= index:
                return Field()
            name = names.field_name(index)
            return Field() if name == NONE_FIELD else dataset.get_field(name)

        coordinates = (
            dataset.coordinate_system(0) if dataset.coordinate_systems else CoordinateSystem()
        )
        return Actor(
            cell_set=dataset.cell_set,
            coordinates=coordinates,
            fields=tuple(slot(i) for i in range(_MAX_FIELDS)),
            primary_field_index=primary,
        )