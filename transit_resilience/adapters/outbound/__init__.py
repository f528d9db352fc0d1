# Outbound Adapters (Driven)
# Dataset loading, file storage, and reporting implementations

from .csv_dataset import load_dataset, load_nodes, load_edges
from .file_store import LocalFileStore
from .console_reporter import ConsoleReporter

__all__ = [
    "load_dataset",
    "load_nodes",
    "load_edges",
    "LocalFileStore",
    "ConsoleReporter",
]
