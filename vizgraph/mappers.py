"""Mapper nodes that turn actors into renderable scene content."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field as _dc_field
from typing import Iterator

from .actor import Actor
from .node import Node, NodeType
from .parameter import Parameter, ParameterChangeType, ParameterType
from .port import INVALID_ID, InPort, PortType

_GLYPHS = "glyphs"
_POINTS = "points"
_TRIANGLES = "triangles"
_VOLUME = "volume"


@dataclass(eq=False)
class Mapper:
    """A named piece of scene content built from one actor."""

    name: str
    kind: str
    actor: Actor = _dc_field(default_factory=Actor)
    visible: bool = True
    calculate_normals: bool = False

    def group_is_empty(self) -> bool:
        """True when the current actor yields nothing to draw."""
        actor = self.actor
        if actor.coordinates.number_of_values() == 0:
            return True
        if self.kind == _VOLUME:
            return (
                not actor.cell_set.is_structured()
                or actor.primary_field().number_of_values() == 0
            )
        return actor.cell_set.number_of_cells() == 0


class Scene:
    """An ordered collection of mappers addressed by name."""

    def __init__(self) -> None:
        self._mappers: dict[str, Mapper] = {}

    def add_mapper(self, mapper: Mapper) -> Mapper:
        """Add ``mapper``; its name must not be taken yet."""
        if mapper.name in self._mappers:
            raise ValueError(f"a mapper named {mapper.name!r} is already in the scene")
        self._mappers[mapper.name] = mapper
        return mapper

    def remove_mapper(self, name: str) -> None:
        try:
            del self._mappers[name]
        except KeyError:
            raise KeyError(f"no mapper named {name!r}") from None

    def mapper(self, name: str) -> Mapper:
        try:
            return self._mappers[name]
        except KeyError:
            raise KeyError(f"no mapper named {name!r}") from None

    def set_mapper_visible(self, name: str, visible: bool) -> None:
        self.mapper(name).visible = bool(visible)

    def __contains__(self, name: object) -> bool:
        return name in self._mappers

    def __len__(self) -> int:
        return len(self._mappers)

    def __iter__(self) -> Iterator[Mapper]:
        return iter(list(self._mappers.values()))


class MapperNode(Node):
    """A primary node that feeds the actor on its input into a scene mapper."""

    _MAPPER_KIND = ""

    def __init__(self) -> None:
        super().__init__(primary=True)
        self._mapper: Mapper | None = None
        self._scene: Scene | None = None
        self._visible = True
        self._actor_port = InPort(PortType.ACTOR, "actor", self)
        self.add_parameter(Parameter(self, "visible", ParameterType.BOOL, True))

    def inputs(self) -> tuple[InPort, ...]:
        return (self._actor_port,)

    def node_type(self) -> NodeType:
        return NodeType.MAPPER

    def is_valid(self) -> bool:
        return self._actor_port.is_connected()

    @property
    def mapper(self) -> Mapper | None:
        return self._mapper

    def parameter_changed(self, parameter: Parameter, change_type: ParameterChangeType) -> None:
        if change_type is ParameterChangeType.NEW_VALUE and parameter.name == "visible":
            self._visible = parameter.value_as(bool)
            if self._scene is not None and self.unique_name() in self._scene:
                self._scene.set_mapper_visible(self.unique_name(), self._visible)
        self.mark_changed()

    def is_visible(self) -> bool:
        return self._visible

    def is_mapper_empty(self) -> bool:
        if self._mapper is None:
            raise RuntimeError("mapper node has not been added to a scene")
        return self._mapper.group_is_empty()

    def add_mapper_to_scene(self, scene: Scene, actor: Actor | None = None) -> Mapper:
        """Create this node's mapper in ``scene``, named after the node."""
        self._scene = scene
        mapper = Mapper(
            name=self.unique_name(),
            kind=self._MAPPER_KIND,
            actor=actor if actor is not None else Actor(),
            visible=self._visible,
        )
        self._configure_mapper(mapper)
        self._mapper = scene.add_mapper(mapper)
        return self._mapper

    def _configure_mapper(self, mapper: Mapper) -> None:
        """Hook for subclasses to apply their parameters to a new mapper."""

    def update(self) -> None:
        if self._mapper is None or not self.is_visible() or not self.needs_update():
            return

        self.update_upstream_nodes()

        upstream = self._actor_port.other() if self._actor_port.is_connected() else None
        if upstream is None:
            self._mapper.actor = Actor()
            self.mark_updated()
            return

        self._mapper.actor = upstream.value.get(Actor)
        self.mark_updated()

    def update_upstream_nodes(self) -> None:
        """Bring the connected actor node up to date."""
        if self._actor_port.is_connected():
            upstream = self._actor_port.other()
            if upstream is not None:
                upstream.node.update()

    def release(self) -> None:
        """Disconnect, take the mapper out of its scene, and free the ids."""
        if self.id != INVALID_ID:
            self._actor_port.disconnect()
            if self._scene is not None and self.unique_name() in self._scene:
                self._scene.remove_mapper(self.unique_name())
            self._scene = None
            self._mapper = None
        super().release()


class GlyphMapperNode(MapperNode):
    _MAPPER_KIND = _GLYPHS

    def kind(self) -> str:
        return "GlyphMapper"


class PointMapperNode(MapperNode):
    _MAPPER_KIND = _POINTS

    def kind(self) -> str:
        return "PointMapper"


class TriangleMapperNode(MapperNode):
    _MAPPER_KIND = _TRIANGLES

    def __init__(self) -> None:
        super().__init__()
        self.add_parameter(Parameter(self, "calculate normals", ParameterType.BOOL, False))

    def kind(self) -> str:
        return "TriangleMapper"

    def parameter_changed(self, parameter: Parameter, change_type: ParameterChangeType) -> None:
        if change_type is ParameterChangeType.NEW_MINMAX:
            return
        if parameter.name == "calculate normals" and self._mapper is not None:
            self._mapper.calculate_normals = parameter.value_as(bool)
        super().parameter_changed(parameter, change_type)

    def _configure_mapper(self, mapper: Mapper) -> None:
        parameter = self.parameter("calculate normals")
        mapper.calculate_normals = parameter.value_as(bool) if parameter is not None else False


class VolumeMapperNode(MapperNode):
    _MAPPER_KIND = _VOLUME

    def kind(self) -> str:
        return "VolumeMapper"