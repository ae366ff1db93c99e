# vizgraph

vizgraph builds and runs dataflow graphs for scientific visualization.
A graph is made of nodes joined by typed ports (`vizgraph.port`):

- **source nodes** (`vizgraph.sources`) make datasets:
  - `ABCSourceNode` makes a uniform grid with an ABC-flow `"Velocity"` point field.
  - `RandomPointsSourceNode` makes 10,000 normally distributed points, each one a vertex cell.
  - `CallbackSourceNode` returns whatever its callable returns.
- **filter nodes** (`vizgraph.filters`) turn one dataset into another.
  `VectorMagnitudeNode` computes the magnitude of the dataset's first field
  and outputs the geometry plus a `"magnitude"` field. Coordinate systems are
  stored as fields, so on a generated grid the first field is the point
  coordinates.
- **actor nodes** (`vizgraph.actor`): `ActorNode` picks the fields of a
  dataset to show and outputs an `Actor`.
- **mapper nodes** (`vizgraph.mappers`) place actors into a `Scene` as
  `Mapper` entries: `GlyphMapperNode`, `PointMapperNode`,
  `TriangleMapperNode`, `VolumeMapperNode`.
- **utility nodes** (`vizgraph.utility`):
  - `DataSetToComponentsNode` splits a dataset into a coordinates port, a
    cellset port and one port per non-coordinate field.
  - `ComponentsToDataSetNode` joins `coords`, `cells` and up to four
    `field1`…`field4` inputs back into a dataset.
  - `ExtractActorFieldRangeNode` reports the value range of an actor's
    primary field to a callback.

Each node keeps timestamps of when it last changed and when it was last
updated. Only stale nodes run again. A change to a node marks everything
downstream of it as changed too.

Datasets are modelled in `vizgraph.dataset`, which provides `DataSet`,
`Field`, `CoordinateSystem`, `CellSet`, `Range`, `make_uniform_dataset` and
`summary_string`. Values are held as numpy arrays.

## Installing

```
pip install .
```

The only runtime dependency is numpy. To install the test tools as well:

```
pip install ".[test]"
pytest
```

## Example

```python
from vizgraph.execution_graph import ExecutionGraph, GraphExecutionPolicy
from vizgraph.sources import ABCSourceNode
from vizgraph.filters import VectorMagnitudeNode
from vizgraph.actor import ActorNode
from vizgraph.mappers import TriangleMapperNode
from vizgraph.port import connect

graph = ExecutionGraph()

source = graph.add_node(ABCSourceNode())
magnitude = graph.add_node(VectorMagnitudeNode())
actor = graph.add_node(ActorNode())
mapper = graph.add_node(TriangleMapperNode())

connect(source.output("dataset"), magnitude.input("dataset"))
connect(magnitude.output("dataset"), actor.input("dataset"))
connect(actor.output("actor"), mapper.input("actor"))

graph.update(GraphExecutionPolicy.ALL_ASYNC, lambda: print("updated"))
graph.sync()

print(graph.describe())
print(source.summary())
print(graph.num_visible_mappers())
```

`connect` returns `False` and links nothing when the two port types differ.
When a mapper node is added to a graph, it creates a `Mapper` in the graph's
`scene`, named after the node's `unique_name()`.

## Parameters

Nodes expose typed parameters (`vizgraph.parameter`): bool, int, float,
bounded int or float, and file names. Look them up with `Node.parameter(name)`
and set them with `Parameter.set_value`. To change a parameter while an update
may be running, use `ExecutionGraph.schedule_parameter_update`. The new value
is applied at the start of the next update pass:

```python
size = source.parameter("size")
graph.schedule_parameter_update(size, 32)
graph.update(GraphExecutionPolicy.MAIN_THREAD_ONLY, None)
```

Each mapper node has a `visible` parameter. `TriangleMapperNode` also has
`calculate normals`.

## Execution policies

`GraphExecutionPolicy` controls how `ExecutionGraph.update` runs:

- `MAIN_THREAD_ONLY`: every node updates on the calling thread.
- `FILTER_NODES_ASYNC`: sources and filters run on a worker thread, and
  mappers update when `sync()` is called.
- `ALL_ASYNC` (the default): everything runs on a worker thread. Call
  `sync()` to wait for it, or check `is_ready()` without blocking.

An exception raised while nodes are evaluated is logged through the
`vizgraph.execution_graph` logger and does not reach the caller.

Call `ExecutionGraph.close()` when you are done with a graph, or use the graph
as a context manager. Closing waits for any running update and releases the
nodes.

## What the package does not do

- It does not render. A `Scene` only records its `Mapper` entries, with their
  actor and visibility, and `Mapper.group_is_empty()` says whether there is
  anything to draw.
- It reads and writes no data files. Datasets come from the source nodes or
  from your own callable passed to `CallbackSourceNode`.
- `VectorMagnitudeNode` is the only filter.
- There is no command-line program and no graphical node editor.
- Node ids and port ids are small integers. Creating more than about 255
  nodes, input ports or output ports that are alive at the same time raises
  `RuntimeError`. Ids are given back when a node or port is released.