import pytest

from vizgraph.actor import Actor, ActorNode
from vizgraph.dataset import Association, CellSet, CoordinateSystem, DataSet, Field
from vizgraph.node import NodeType
from vizgraph.port import connect
from vizgraph.sources import CallbackSourceNode


@pytest.fixture
def track():
    created = []

    def add(node):
        created.append(node)
        return node

    yield add
    for node in reversed(created):
        node.release()


def _dataset(names=("a", "b")):
    dataset = DataSet(CellSet.explicit("vertex", [(0,), (1,)]))
    dataset.add_coordinate_system(CoordinateSystem("coords", [[0, 0, 0], [1, 0, 0]]))
    for offset, name in enumerate(names):
        dataset.add_field(Field(name, Association.POINTS, [offset, offset + 1.0]))
    return dataset


def _pipeline(track, dataset):
    source = track(CallbackSourceNode(lambda: dataset))
    node = track(ActorNode())
    assert connect(source.output("dataset"), node.input("dataset"))
    return node


def _actor(node):
    return node.output("actor").value.get(Actor)


def test_default_actor():
    actor = Actor()
    assert actor.primary_field_index == 0
    assert len(actor.fields) == 4
    assert actor.primary_field().name == ""
    assert actor.cell_set.number_of_cells() == 0


def test_actor_node_basics(track):
    node = track(ActorNode())
    assert node.kind() == "Actor"
    assert node.node_type() is NodeType.ACTOR
    assert node.is_valid() is False
    assert node.cselector.names == ("[none]",)
    assert [p.name for p in node.inputs()] == ["dataset"]
    assert [p.name for p in node.outputs()] == ["actor"]


def test_actor_from_dataset(track):
    dataset = _dataset()
    node = _pipeline(track, dataset)
    assert node.is_valid() is True
    node.update()
    actor = _actor(node)
    assert node.cselector.names == ("a", "b", "[none]")
    assert actor.primary_field().name == "a"
    assert actor.fields[1] is dataset.get_field("b")
    assert actor.fields[2].name == ""
    assert actor.fields[3].name == ""
    assert actor.cell_set is dataset.cell_set
    assert actor.coordinates.name == "coords"


def test_selecting_field_changes_primary(track):
    node = _pipeline(track, _dataset())
    node.update()
    assert node.needs_update() is False
    node.selector().current_field = 1
    assert node.needs_update() is True
    node.update()
    assert _actor(node).primary_field().name == "b"


def test_none_selection_gives_empty_primary(track):
    node = _pipeline(track, _dataset())
    node.selector().current_field = 2
    node.update()
    actor = _actor(node)
    assert actor.primary_field_index == 2
    assert actor.primary_field().name == ""


def test_primary_index_beyond_slots_falls_back(track):
    node = _pipeline(track, _dataset(("f0", "f1", "f2", "f3", "f4")))
    node.selector().current_field = 4
    node.update()
    actor = _actor(node)
    assert actor.primary_field_index == 0
    assert actor.primary_field().name == "f0"


def test_stale_selection_resets(track):
    node = _pipeline(track, _dataset(("only",)))
    node.selector().current_field = 3
    node.update()
    assert node.cselector.current_field == 0
    assert _actor(node).primary_field().name == "only"


def test_unconnected_update_gives_empty_actor(track):
    node = track(ActorNode())
    node.update()
    actor = _actor(node)
    assert actor.primary_field().name == ""
    assert actor.coordinates.number_of_values() == 0


def test_update_skipped_when_unchanged(track):
    node = _pipeline(track, _dataset())
    node.update()
    first = _actor(node)
    node.update()
    assert _actor(node) is first