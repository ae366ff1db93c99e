"""A collection of nodes updated together, optionally on a worker thread."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Iterator

from .mappers import MapperNode, Scene
from .node import Node, NodeObserver, NodeType
from .parameter import Parameter
from .timestamp import TimeStamp

logger = logging.getLogger(__name__)

GraphUpdateCallback = Callable[[], None]


class GraphExecutionPolicy(Enum):
    """Where the work of ``ExecutionGraph.update`` is done."""

    MAIN_THREAD_ONLY = auto()  # every node updated on the calling thread
    FILTER_NODES_ASYNC = auto()  # sources and filters on a worker, mappers on sync()
    ALL_ASYNC = auto()  # every node updated on a worker


@dataclass(frozen=True)
class _DeferredParameterUpdate:
    parameter: Parameter
    value: Any


class ExecutionGraph(NodeObserver):
    """Owns nodes and a scene, and brings them up to date on request."""

    def __init__(self, scene: Scene | None = None) -> None:
        self._scene = scene if scene is not None else Scene()
        self._nodes: list[Node] = []
        self._primary_nodes: list[Node] = []
        self._last_change = TimeStamp()
        self._need_to_update = True
        self._is_updating = False
        self._current_policy = GraphExecutionPolicy.MAIN_THREAD_ONLY
        self._num_visible_mappers = 0
        self._pending: list[_DeferredParameterUpdate] = []
        self._pending_lock = threading.Lock()
        self._future: Future | None = None
        self._executor: ThreadPoolExecutor | None = None
        self._closed = False

    # Nodes ------------------------------------------------------------------

    @property
    def scene(self) -> Scene:
        """The scene that mapper nodes place their content in."""
        return self._scene

    def add_node(self, node: Node, name: str = "") -> Node:
        """Take ownership of ``node``; it is named ``name`` or else its kind."""
        if not isinstance(node, Node):
            raise TypeError("only graph nodes can be added to an execution graph")
        node.name = name if name else node.kind()
        self._nodes.append(node)
        node.set_observer(self)
        if node.is_primary:
            self._primary_nodes.append(node)
            if node.node_type() is NodeType.MAPPER:
                node.add_mapper_to_scene(self._scene, None)
        return node

    def remove_node(self, node_id: int) -> None:
        """Remove and release the node with ``node_id``, if the graph holds it."""
        removed = [n for n in self._nodes if n.id == node_id]
        self._primary_nodes = [n for n in self._primary_nodes if n.id != node_id]
        self._nodes = [n for n in self._nodes if n.id != node_id]
        for node in removed:
            node.release()

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes))

    def node(self, index: int) -> Node:
        """The node at position ``index`` in insertion order."""
        return self._nodes[index]

    # Updates ----------------------------------------------------------------

    def schedule_parameter_update(self, parameter: Parameter, value: Any) -> None:
        """Queue a parameter value to be applied at the start of the next update."""
        with self._pending_lock:
            self._pending.append(_DeferredParameterUpdate(parameter, value))

    def update(
        self,
        policy: GraphExecutionPolicy = GraphExecutionPolicy.ALL_ASYNC,
        callback: GraphUpdateCallback | None = None,
    ) -> None:
        """Update every node that needs it, then call ``callback``.

        Does nothing while an update is already running (except that a
        ``FILTER_NODES_ASYNC`` request first waits for it) or when nothing
        has changed.
        """
        if self._closed:
            raise RuntimeError("execution graph is closed")

        if self._is_updating and policy is GraphExecutionPolicy.FILTER_NODES_ASYNC:
            self.sync()

        if self._is_updating:
            return

        if not self._needs_to_update():
            return

        self._is_updating = True
        self._current_policy = policy

        def do_update() -> None:
            while self._needs_to_update():
                self._num_visible_mappers = 0
                self._consume_parameters()
                try:
                    for node in list(self._primary_nodes):
                        if isinstance(node, MapperNode):
                            if self._current_policy is not GraphExecutionPolicy.FILTER_NODES_ASYNC:
                                node.update()
                                if not node.is_mapper_empty():
                                    self._num_visible_mappers += 1
                            else:
                                node.update_upstream_nodes()
                        else:
                            node.update()
                except Exception:
                    logger.exception("--Error thrown when evaluating graph--")
                self._need_to_update = False

            self._is_updating = False

            if callback is not None:
                callback()

        if policy is GraphExecutionPolicy.MAIN_THREAD_ONLY:
            do_update()
        else:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="vizgraph-update"
                )
            self._future = self._executor.submit(do_update)

    def sync(self) -> None:
        """Wait for a running update; finish mapper work deferred to this thread."""
        future = self._future
        if future is None:
            return
        self._future = None
        future.result()
        if self._current_policy is GraphExecutionPolicy.FILTER_NODES_ASYNC:
            for node in list(self._primary_nodes):
                if isinstance(node, MapperNode):
                    node.update()
                    if not node.is_mapper_empty():
                        self._num_visible_mappers += 1

    def is_ready(self) -> bool:
        """True when no asynchronous update is still running."""
        return self._future is None or self._future.done()

    def num_visible_mappers(self) -> int:
        """Mappers that had something to draw after the last update."""
        return self._num_visible_mappers

    def last_change(self) -> TimeStamp:
        """Stamp renewed each time queued parameter values are applied."""
        return self._last_change

    def node_changed(self, node: Node) -> None:
        self._need_to_update = True

    def _needs_to_update(self) -> bool:
        with self._pending_lock:
            return bool(self._pending) or self._need_to_update

    def _consume_parameters(self) -> None:
        with self._pending_lock:
            for pending in self._pending:
                pending.parameter.set_value(pending.value)
            self._pending.clear()
            self._last_change.renew()

    # Utility ----------------------------------------------------------------

    def describe(self) -> str:
        """A listing of the nodes, the primary nodes and the scene's mappers."""
        lines = ["", "---Nodes---"]
        lines.extend(n.unique_name() for n in self._nodes)
        lines += ["", "---Mapper Nodes---"]
        lines.extend(n.unique_name() for n in self._primary_nodes)
        lines.append("")
        mapper_names = ",".join(f"'{m.name}'" for m in self._scene)
        lines.append(f"mappers added to scene: {{{mapper_names}}}")
        return "\n".join(lines) + "\n"

    def close(self) -> None:
        """Wait for pending work, then release every node."""
        if self._closed:
            return
        try:
            self.sync()
        finally:
            self._closed = True
            nodes, self._nodes, self._primary_nodes = self._nodes, [], []
            for node in nodes:
                node.release()
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None

    def __enter__(self) -> "ExecutionGraph":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()