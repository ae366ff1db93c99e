import logging

import numpy as np
import pytest

from vizgraph.actor import ActorNode
from vizgraph.dataset import Association, Field, make_uniform_dataset
from vizgraph.execution_graph import ExecutionGraph, GraphExecutionPolicy
from vizgraph.mappers import TriangleMapperNode, VolumeMapperNode
from vizgraph.node import Node
from vizgraph.port import connect
from vizgraph.sources import CallbackSourceNode


def _small_dataset():
    dataset = make_uniform_dataset(3)
    dataset.add_field(Field("value", Association.POINTS, np.arange(27.0)))
    return dataset


@pytest.fixture
def graph():
    g = ExecutionGraph()
    yield g
    g.close()


def _pipeline(graph, mapper_cls=VolumeMapperNode, callback=_small_dataset):
    source = graph.add_node(CallbackSourceNode(callback))
    actor = graph.add_node(ActorNode())
    mapper = graph.add_node(mapper_cls())
    assert connect(source.output("dataset"), actor.input("dataset"))
    assert connect(actor.output("actor"), mapper.input("actor"))
    return source, actor, mapper


def test_add_node_names_and_counts(graph):
    source = graph.add_node(CallbackSourceNode(_small_dataset))
    named = graph.add_node(ActorNode(), "my actor")
    assert source.name == "CallbackSource"
    assert named.name == "my actor"
    assert len(graph) == 2
    assert list(graph) == [source, named]
    assert graph.node(1) is named


def test_add_node_rejects_non_nodes(graph):
    with pytest.raises(TypeError):
        graph.add_node(object())


def test_mapper_node_is_added_to_scene(graph):
    mapper = graph.add_node(VolumeMapperNode())
    assert mapper.unique_name() in graph.scene
    assert len(graph.scene) == 1


def test_main_thread_update_counts_visible_mappers(graph):
    _, _, mapper = _pipeline(graph)
    calls = []
    graph.update(GraphExecutionPolicy.MAIN_THREAD_ONLY, lambda: calls.append(1))
    assert calls == [1]
    assert graph.num_visible_mappers() == 1
    assert mapper.is_mapper_empty() is False
    assert graph.is_ready()


def test_update_without_changes_skips_callback(graph):
    _pipeline(graph)
    calls = []
    graph.update(GraphExecutionPolicy.MAIN_THREAD_ONLY, lambda: calls.append(1))
    graph.update(GraphExecutionPolicy.MAIN_THREAD_ONLY, lambda: calls.append(2))
    assert calls == [1]


def test_all_async_update_then_sync(graph):
    _pipeline(graph, TriangleMapperNode)
    calls = []
    graph.update(GraphExecutionPolicy.ALL_ASYNC, lambda: calls.append(1))
    graph.sync()
    assert graph.is_ready()
    assert calls == [1]
    assert graph.num_visible_mappers() == 1


def test_filter_nodes_async_defers_mappers_to_sync(graph):
    _, _, mapper = _pipeline(graph)
    graph.update(GraphExecutionPolicy.FILTER_NODES_ASYNC)
    graph.sync()
    assert graph.num_visible_mappers() == 1
    assert mapper.mapper.actor.primary_field().name == "value"


def test_scheduled_parameter_update_is_applied(graph):
    _, _, mapper = _pipeline(graph)
    graph.update(GraphExecutionPolicy.MAIN_THREAD_ONLY)
    before = int(graph.last_change())
    parameter = mapper.parameter("visible")
    graph.schedule_parameter_update(parameter, False)
    assert parameter.value_as(bool) is True
    graph.update(GraphExecutionPolicy.MAIN_THREAD_ONLY)
    assert parameter.value_as(bool) is False
    assert graph.scene.mapper(mapper.unique_name()).visible is False
    assert mapper.is_visible() is False
    assert int(graph.last_change()) > before


def test_remove_node_releases_it(graph):
    _, _, mapper = _pipeline(graph)
    name = mapper.unique_name()
    node_id = mapper.id
    graph.remove_node(node_id)
    assert len(graph) == 2
    assert name not in graph.scene
    assert Node.from_id(node_id) is None
    assert mapper not in list(graph)


def test_remove_unknown_node_changes_nothing(graph):
    _pipeline(graph)
    graph.remove_node(-1)
    assert len(graph) == 3


def test_describe_lists_nodes_and_mappers(graph):
    source, actor, mapper = _pipeline(graph)
    text = graph.describe()
    assert "---Nodes---" in text
    assert "---Mapper Nodes---" in text
    for node in (source, actor, mapper):
        assert node.unique_name() in text
    assert f"mappers added to scene: {{'{mapper.unique_name()}'}}" in text


def test_errors_during_update_are_logged_not_raised(graph, caplog):
    def broken():
        raise RuntimeError("broken source")

    _pipeline(graph, callback=broken)
    calls = []
    with caplog.at_level(logging.ERROR):
        graph.update(GraphExecutionPolicy.MAIN_THREAD_ONLY, lambda: calls.append(1))
    assert calls == [1]
    assert "Error thrown when evaluating graph" in caplog.text
    assert graph.num_visible_mappers() == 0


def test_closed_graph_rejects_update():
    g = ExecutionGraph()
    source = g.add_node(CallbackSourceNode(_small_dataset))
    node_id = source.id
    g.close()
    assert len(g) == 0
    assert Node.from_id(node_id) is None
    with pytest.raises(RuntimeError):
        g.update(GraphExecutionPolicy.MAIN_THREAD_ONLY)


def test_context_manager_closes():
    with ExecutionGraph() as g:
        g.add_node(VolumeMapperNode())
        assert len(g.scene) == 1
    assert len(g) == 0
    assert len(g.scene) == 0