"""Workload timeline engine: layout, capacity, dependency routing and undoable edits."""

__version__ = "0.1.0"
