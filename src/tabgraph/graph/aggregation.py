"""
Aggregation of node, edge and degree values over filtered subsets.

Every aggregate ignores nulls and returns a float. When no non-null value is
left after filtering, the result is NaN.
"""

from typing import Optional, Sequence, Union
import math

import numpy as np
import polars as pl

from ..common.exceptions import ColumnNotFoundError, UnsupportedAggregationError, ValidationError
from ..common.logging_config import get_logger, log_function_entry
from ..common.validators import validate_graph_object
from .analysis import get_degree_in, get_degree_out, get_degree_total
from .core import Graph
from .filtering import FilterLike, filter_table

logger = get_logger(__name__)

SUPPORTED_AGGREGATIONS = ["sum", "min", "max", "mean", "median"]

Filters = Optional[Union[FilterLike, Sequence[FilterLike]]]


def aggregate(
    table: pl.DataFrame,
    attribute: str,
    agg: str,
    filters: Filters = None
) -> float:
    """
    Aggregate one numeric column of a table, optionally over filtered rows.

    Parameters
    ----------
    table : pl.DataFrame
        Node, edge or degree table
    attribute : str
        Numeric or Boolean column to aggregate
    agg : str
        One of ``sum``, ``min``, ``max``, ``mean``, ``median``
    filters : Filter, str or sequence of these, optional
        Row conditions combined with AND

    Returns
    -------
    float
        The aggregate, or NaN when no non-null values remain

    Raises
    ------
    UnsupportedAggregationError
        If agg is not supported
    ColumnNotFoundError
        If the attribute or a filter field is missing
    ValidationError
        If the attribute is neither numeric nor Boolean

    Examples
    --------
    >>> df = pl.DataFrame({"value": [1.0, 2.0, None, 6.0]})
    >>> aggregate(df, "value", "mean")
    3.0
    >>> aggregate(df, "value", "sum", filters="value > 10")
    nan
    """
    if agg not in SUPPORTED_AGGREGATIONS:
        raise UnsupportedAggregationError(
            f"Unsupported aggregation '{agg}'",
            parameter="agg",
            value=agg,
            valid_options=SUPPORTED_AGGREGATIONS,
            function="aggregate"
        )

    if attribute not in table.columns:
        raise ColumnNotFoundError(
            f"Column '{attribute}' not found",
            column=attribute,
            available=table.columns
        )

    dtype = table[attribute].dtype
    # Booleans count True as 1
    if not (dtype.is_numeric() or dtype in (pl.Boolean, pl.Null)):
        raise ValidationError(
            f"Column '{attribute}' is not numeric ({dtype})",
            field=attribute,
            expected="a numeric column"
        )

    values = filter_table(table, filters)[attribute].drop_nulls()
    if dtype.is_float():
        values = values.filter(values.is_not_nan())

    if values.is_empty():
        logger.debug("No values left to aggregate for '%s'", attribute)
        return math.nan

    array = values.cast(pl.Float64).to_numpy()

    if agg == "sum":
        result = np.sum(array)
    elif agg == "min":
        result = np.min(array)
    elif agg == "max":
        result = np.max(array)
    elif agg == "mean":
        result = np.mean(array)
    else:
        result = np.median(array)

    return float(result)


def aggregate_node_attr(
    graph: Graph,
    node_attr: str,
    agg: str,
    conditions: Filters = None
) -> float:
    """Aggregate a node attribute over the nodes matching ``conditions``."""
    log_function_entry("aggregate_node_attr", node_attr=node_attr, agg=agg)
    validate_graph_object(graph)
    return aggregate(graph.nodes_df, node_attr, agg, conditions)


def aggregate_edge_attr(
    graph: Graph,
    edge_attr: str,
    agg: str,
    conditions: Filters = None
) -> float:
    """Aggregate an edge attribute over the edges matching ``conditions``."""
    log_function_entry("aggregate_edge_attr", edge_attr=edge_attr, agg=agg)
    validate_graph_object(graph)
    return aggregate(graph.edges_df, edge_attr, agg, conditions)


def _aggregate_degree(
    graph: Graph,
    degrees: pl.DataFrame,
    column: str,
    agg: str,
    conditions: Filters
) -> float:
    # Conditions select nodes; the degree column is then aggregated over them
    selected = filter_table(graph.nodes_df, conditions).select("id")
    table = selected.join(degrees, on="id", how="inner")
    return aggregate(table, column, agg)


def get_agg_degree_out(graph: Graph, agg: str, conditions: Filters = None) -> float:
    """
    Aggregate the out-degree over the nodes matching ``conditions``.

    Parameters
    ----------
    graph : Graph
        Graph to measure
    agg : str
        One of ``sum``, ``min``, ``max``, ``mean``, ``median``
    conditions : Filter, str or sequence of these, optional
        Conditions on node attributes

    Returns
    -------
    float
        The aggregate, or NaN when no node matches

    Examples
    --------
    >>> graph = create_random_graph(n=10, m=22, seed=23)
    >>> get_agg_degree_out(graph, agg="mean")
    2.2
    """
    log_function_entry("get_agg_degree_out", agg=agg, conditions=conditions)
    _check_agg(agg, "get_agg_degree_out")
    return _aggregate_degree(graph, get_degree_out(graph), "outdegree", agg, conditions)


def get_agg_degree_in(graph: Graph, agg: str, conditions: Filters = None) -> float:
    """Aggregate the in-degree over the nodes matching ``conditions``."""
    log_function_entry("get_agg_degree_in", agg=agg, conditions=conditions)
    _check_agg(agg, "get_agg_degree_in")
    return _aggregate_degree(graph, get_degree_in(graph), "indegree", agg, conditions)


def get_agg_degree_total(graph: Graph, agg: str, conditions: Filters = None) -> float:
    """Aggregate the total degree over the nodes matching ``conditions``."""
    log_function_entry("get_agg_degree_total", agg=agg, conditions=conditions)
    _check_agg(agg, "get_agg_degree_total")
    return _aggregate_degree(graph, get_degree_total(graph), "total_degree", agg, conditions)


def _check_agg(agg: str, function_name: str) -> None:
    # Checked before degrees are computed so a typo fails fast
    if agg not in SUPPORTED_AGGREGATIONS:
        raise UnsupportedAggregationError(
            f"Unsupported aggregation '{agg}'",
            parameter="agg",
            value=agg,
            valid_options=SUPPORTED_AGGREGATIONS,
            function=function_name
        )
