"""
tabgraph - graphs stored as node and edge tables.

A graph is a pair of Polars tables plus the bookkeeping that keeps ids unique
when graphs are grown, combined and pruned: the highest node and edge ids
ever allocated, an append-only action log, global attributes and graph
actions. Graph measures are computed with NetworkIt.

Modules:
    common: Exceptions, logging, configuration, validation and id mapping
    graph: Graph container, constructors, mutators, measures and persistence
"""

__version__ = "0.1.0"

from .common.exceptions import (
    GraphError,
    ValidationError,
    LengthMismatchError,
    ColumnNotFoundError,
    ColumnIndexOutOfRangeError,
    MinimumSizeError,
    NodeNotFoundError,
    EdgeNotFoundError,
    DataFormatError,
    InvalidGraphObjectError,
    GraphConstructionError,
    DirectedMismatchError,
    ConfigurationError,
    UnsupportedAggregationError,
    ComputationError,
)
from .common.logging_config import setup_logging
from .common.selectors import ByIndex, ByName
from .graph import *  # noqa: F401,F403
from .graph import __all__ as _graph_all

__all__ = [
    "GraphError",
    "ValidationError",
    "LengthMismatchError",
    "ColumnNotFoundError",
    "ColumnIndexOutOfRangeError",
    "MinimumSizeError",
    "NodeNotFoundError",
    "EdgeNotFoundError",
    "DataFormatError",
    "InvalidGraphObjectError",
    "GraphConstructionError",
    "DirectedMismatchError",
    "ConfigurationError",
    "UnsupportedAggregationError",
    "ComputationError",
    "setup_logging",
    "ByIndex",
    "ByName",
] + list(_graph_all)
