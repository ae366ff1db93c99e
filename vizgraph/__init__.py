"""Dataflow graphs of source, filter, actor, mapper and utility nodes for visualization."""

__version__ = "1.0.0"

__all__ = [
    "actor",
    "anyvalue",
    "dataset",
    "execution_graph",
    "fieldselector",
    "filters",
    "mappers",
    "node",
    "parameter",
    "port",
    "sources",
    "timestamp",
    "utility",
]