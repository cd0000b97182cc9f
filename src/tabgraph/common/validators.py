"""
Input validation utilities for the tabgraph library.

This module checks graph containers, node and edge tables, and attribute
vectors before any table is modified, so that every public operation is
all-or-nothing.
"""

from collections.abc import Iterable, Mapping
from typing import Any, List, Optional, Sequence

import numpy as np
import polars as pl

from .exceptions import (
    InvalidGraphObjectError,
    LengthMismatchError,
    NodeNotFoundError,
    ValidationError
)

NODE_CORE_COLUMNS = ["id", "type", "label"]
EDGE_CORE_COLUMNS = ["id", "from", "to", "rel"]


def is_vector(value: Any) -> bool:
    """
    Return True for list-like attribute values.

    Any iterable counts (ranges, generators, arrays, Series) except strings,
    bytes and mappings, which are treated as single values.
    """
    if isinstance(value, (np.ndarray, pl.Series)):
        return True
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping))


def expand_vector(value: Any, n: int, field: str) -> List[Any]:
    """
    Broadcast a scalar to ``n`` values or check a vector has length ``n``.

    Parameters
    ----------
    value : Any
        Scalar or list-like value
    n : int
        Required number of values
    field : str
        Name used in the error message

    Returns
    -------
    List[Any]
        Exactly ``n`` values

    Raises
    ------
    LengthMismatchError
        If a list-like value does not have exactly ``n`` elements

    Examples
    --------
    >>> expand_vector("a", 3, "type")
    ['a', 'a', 'a']
    >>> expand_vector([1, 2], 3, "value")  # doctest: +SKIP
    LengthMismatchError: Validation error in field 'value': ...
    """
    if is_vector(value):
        values = list(value)
        if len(values) != n:
            raise LengthMismatchError(
                f"Expected {n} values but got {len(values)}",
                field=field,
                expected_length=n,
                actual_length=len(values)
            )
        return values
    return [value] * n


def validate_node_df(df: pl.DataFrame, name: str = "nodes_df") -> None:
    """
    Validate the structure of a node table.

    Checks that it is a DataFrame with ``id``, ``type`` and ``label`` columns,
    integer ids that are positive, non-null and unique.

    Raises
    ------
    InvalidGraphObjectError
        If any check fails
    """
    _validate_table(df, NODE_CORE_COLUMNS, name)


def validate_edge_df(df: pl.DataFrame, name: str = "edges_df") -> None:
    """
    Validate the structure of an edge table.

    Checks the ``id``, ``from``, ``to`` and ``rel`` columns and that ``from``
    and ``to`` hold non-null integers.

    Raises
    ------
    InvalidGraphObjectError
        If any check fails
    """
    _validate_table(df, EDGE_CORE_COLUMNS, name)

    for col in ["from", "to"]:
        if not df[col].dtype.is_integer():
            raise InvalidGraphObjectError(
                f"Column '{col}' must hold integer node ids, got {df[col].dtype}",
                component=name
            )
        if df[col].null_count() > 0:
            raise InvalidGraphObjectError(
                f"Column '{col}' contains null node ids",
                component=name
            )


def _validate_table(df: pl.DataFrame, required: List[str], name: str) -> None:
    if not isinstance(df, pl.DataFrame):
        raise InvalidGraphObjectError(
            f"{name} must be a polars DataFrame, got {type(df).__name__}",
            component=name
        )

    missing = [col for col in required if col not in df.columns]
    if missing:
        raise InvalidGraphObjectError(
            f"{name} is missing required columns: {missing}",
            component=name,
            details={"available_columns": df.columns}
        )

    ids = df["id"]
    if not ids.dtype.is_integer():
        raise InvalidGraphObjectError(
            f"Column 'id' of {name} must be integer, got {ids.dtype}",
            component=name
        )
    if ids.null_count() > 0:
        raise InvalidGraphObjectError(f"Column 'id' of {name} contains nulls", component=name)
    if len(ids) > 0 and ids.min() < 1:
        raise InvalidGraphObjectError(f"Column 'id' of {name} must be positive", component=name)
    if ids.n_unique() != len(ids):
        raise InvalidGraphObjectError(f"Column 'id' of {name} contains duplicates", component=name)


def validate_edge_endpoints(
    nodes_df: pl.DataFrame,
    edges_df: pl.DataFrame,
    error_cls: type = InvalidGraphObjectError
) -> None:
    """
    Check that every ``from``/``to`` value exists as a node id.

    Parameters
    ----------
    nodes_df : pl.DataFrame
        Node table
    edges_df : pl.DataFrame
        Edge table
    error_cls : type, default InvalidGraphObjectError
        Exception class to raise; mutators pass NodeNotFoundError
    """
    if edges_df.is_empty():
        return

    node_ids = set(nodes_df["id"].to_list())
    endpoints = pl.concat([edges_df["from"], edges_df["to"]]).unique().to_list()
    dangling = sorted(node_id for node_id in endpoints if node_id not in node_ids)
    if dangling:
        message = f"Edges reference node ids that do not exist: {dangling}"
        if error_cls is NodeNotFoundError:
            raise NodeNotFoundError(message, field="from/to", value=dangling)
        raise error_cls(message, component="edges_df")


def validate_graph_object(graph: Any) -> None:
    """
    Validate a graph container.

    Checks the container type, both tables, dangling edge endpoints and
    that the ``last_node``/``last_edge`` counters cover every allocated id.

    Raises
    ------
    InvalidGraphObjectError
        If the container is malformed
    """
    from ..graph.core import Graph

    if not isinstance(graph, Graph):
        raise InvalidGraphObjectError(
            f"Expected a Graph object, got {type(graph).__name__}",
            component="graph"
        )

    validate_node_df(graph.nodes_df)
    validate_edge_df(graph.edges_df)
    validate_edge_endpoints(graph.nodes_df, graph.edges_df)

    if not graph.nodes_df.is_empty() and graph.last_node < graph.nodes_df["id"].max():
        raise InvalidGraphObjectError(
            "last_node is smaller than the largest node id",
            component="last_node",
            details={"last_node": graph.last_node, "max_id": graph.nodes_df["id"].max()}
        )
    if not graph.edges_df.is_empty() and graph.last_edge < graph.edges_df["id"].max():
        raise InvalidGraphObjectError(
            "last_edge is smaller than the largest edge id",
            component="last_edge",
            details={"last_edge": graph.last_edge, "max_id": graph.edges_df["id"].max()}
        )


def validate_node_ids(graph: Any, node_ids: Sequence[int]) -> None:
    """
    Check that every id in ``node_ids`` exists in the graph's node table.

    Raises
    ------
    NodeNotFoundError
        If one or more ids are missing
    """
    existing = set(graph.nodes_df["id"].to_list())
    missing = [node_id for node_id in node_ids if node_id not in existing]
    if missing:
        raise NodeNotFoundError(
            f"Node ids not found in graph: {missing}",
            field="nodes",
            value=missing
        )


def validate_attribute_name(attr: str, protected: List[str]) -> None:
    """
    Reject attribute names that would overwrite structural columns.

    Raises
    ------
    ValidationError
        If ``attr`` is one of ``protected``
    """
    if attr in protected:
        raise ValidationError(
            f"Attribute '{attr}' cannot be set directly",
            field="attr",
            value=attr,
            expected=f"a column other than {protected}"
        )
