"""
Graph composition for the tabgraph library.

Combining two graphs shifts every id of the incoming graph past the ids the
base graph has ever allocated, so ids stay unique even when the base graph
has had nodes or edges deleted.
"""

from datetime import datetime
from typing import Tuple

import polars as pl

from ..common.exceptions import DirectedMismatchError
from ..common.logging_config import get_logger, log_function_entry
from ..common.validators import validate_graph_object
from .core import Graph, commit_graph_change, normalize_edge_df, normalize_node_df

logger = get_logger(__name__)


def renumber_graph_tables(
    base: Graph,
    incoming: Graph
) -> Tuple[pl.DataFrame, pl.DataFrame, int, int]:
    """
    Concatenate two graphs' tables after renumbering the incoming ids.

    Incoming node ids and ``from``/``to`` references are shifted by
    ``base.last_node``; incoming edge ids by ``base.last_edge``. Base rows
    come first in both tables, and attribute columns present on only one side
    are filled with nulls on the other.

    Parameters
    ----------
    base : Graph
        Graph whose ids are kept
    incoming : Graph
        Graph whose ids are shifted

    Returns
    -------
    nodes_df : pl.DataFrame
        Combined node table
    edges_df : pl.DataFrame
        Combined edge table
    last_node : int
        ``base.last_node + incoming.last_node``
    last_edge : int
        ``base.last_edge + incoming.last_edge``
    """
    node_offset = base.last_node
    edge_offset = base.last_edge

    incoming_nodes = incoming.nodes_df.with_columns(pl.col("id") + node_offset)
    incoming_edges = incoming.edges_df.with_columns(
        pl.col("id") + edge_offset,
        pl.col("from") + node_offset,
        pl.col("to") + node_offset,
    )

    nodes_df = normalize_node_df(
        pl.concat([base.nodes_df, incoming_nodes], how="diagonal_relaxed")
    )
    edges_df = normalize_edge_df(
        pl.concat([base.edges_df, incoming_edges], how="diagonal_relaxed")
    )

    return (
        nodes_df,
        edges_df,
        base.last_node + incoming.last_node,
        base.last_edge + incoming.last_edge,
    )


def combine_graphs(
    base: Graph,
    incoming: Graph,
    coerce_directed: bool = False
) -> Graph:
    """
    Combine two graphs into one.

    Parameters
    ----------
    base : Graph
        Graph whose ids, log, global attributes, info and actions are kept
    incoming : Graph
        Graph appended after renumbering its node and edge ids
    coerce_directed : bool, default False
        Allow combining graphs of different directedness; the result takes
        ``base.directed``

    Returns
    -------
    Graph
        Combined graph with one new ``combine_graphs`` log entry

    Raises
    ------
    InvalidGraphObjectError
        If either graph is malformed
    DirectedMismatchError
        If directedness differs and coerce_directed is False

    Examples
    --------
    >>> g1 = add_cycle(create_graph(), n=3)
    >>> g2 = add_path(create_graph(), n=2)
    >>> combined = combine_graphs(g1, g2)
    >>> get_node_ids(combined)
    [1, 2, 3, 4, 5]

    Notes
    -----
    Combining is associative on id allocation: (a + b) + c and a + (b + c)
    assign the same id ranges, because each step offsets by the counters
    rather than by the number of rows present.
    """
    time_function_start = datetime.now()
    log_function_entry(
        "combine_graphs",
        base_nodes=base.nodes_df.height if isinstance(base, Graph) else None,
        incoming_nodes=incoming.nodes_df.height if isinstance(incoming, Graph) else None,
        coerce_directed=coerce_directed
    )

    validate_graph_object(base)
    validate_graph_object(incoming)

    if base.directed != incoming.directed and not coerce_directed:
        raise DirectedMismatchError(
            "Cannot combine a directed graph with an undirected graph",
            operation="combine_graphs",
            details={"base_directed": base.directed, "incoming_directed": incoming.directed}
        )

    nodes_df, edges_df, last_node, last_edge = renumber_graph_tables(base, incoming)

    logger.info(
        "Combined graphs: %d + %d nodes, %d + %d edges",
        base.nodes_df.height, incoming.nodes_df.height,
        base.edges_df.height, incoming.edges_df.height
    )

    combined = base.evolve(
        nodes_df=nodes_df,
        edges_df=edges_df,
        last_node=last_node,
        last_edge=last_edge
    )

    return commit_graph_change(combined, "combine_graphs", time_function_start)
