"""
Shared utilities for tabgraph: exceptions, logging, configuration,
validation, column selectors and NetworkIt id mapping.
"""

from .exceptions import (
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
from .id_mapper import IDMapper
from .logging_config import get_logger, setup_logging
from .selectors import ByIndex, ByName, ColumnSelector

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
    "IDMapper",
    "get_logger",
    "setup_logging",
    "ByIndex",
    "ByName",
    "ColumnSelector",
]
