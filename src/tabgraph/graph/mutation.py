"""
Node and edge mutators for the tabgraph library.

New nodes are numbered from ``last_node + 1`` and new edges from
``last_edge + 1``. Deleting rows never lowers the counters, so ids are never
reused within a graph's lineage.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import polars as pl

from ..common.exceptions import EdgeNotFoundError, NodeNotFoundError, ValidationError
from ..common.logging_config import get_logger, log_function_entry
from ..common.validators import (
    expand_vector,
    validate_attribute_name,
    validate_edge_df,
    validate_edge_endpoints,
    validate_graph_object,
    validate_node_df,
    validate_node_ids
)
from .construction import create_edge_df, create_node_df
from .core import Graph, commit_graph_change, normalize_edge_df, normalize_node_df

logger = get_logger(__name__)

PROTECTED_NODE_ATTRS = ["id"]
PROTECTED_EDGE_ATTRS = ["id", "from", "to"]


def _append_nodes(graph: Graph, node_df: pl.DataFrame) -> Graph:
    first_id = graph.last_node + 1
    new_ids = list(range(first_id, first_id + node_df.height))

    node_df = node_df.with_columns(pl.Series("id", new_ids, dtype=pl.Int64))
    nodes_df = normalize_node_df(
        pl.concat([graph.nodes_df, node_df], how="diagonal_relaxed")
    )

    return graph.evolve(nodes_df=nodes_df, last_node=graph.last_node + node_df.height)


def _append_edges(graph: Graph, edge_df: pl.DataFrame) -> Graph:
    first_id = graph.last_edge + 1
    new_ids = list(range(first_id, first_id + edge_df.height))

    edge_df = edge_df.with_columns(pl.Series("id", new_ids, dtype=pl.Int64))
    edges_df = normalize_edge_df(
        pl.concat([graph.edges_df, edge_df], how="diagonal_relaxed")
    )

    return graph.evolve(edges_df=edges_df, last_edge=graph.last_edge + edge_df.height)


def add_node(
    graph: Graph,
    type: Optional[str] = None,
    label: Optional[str] = None,
    **attrs: Any
) -> Graph:
    """
    Add a single node.

    Parameters
    ----------
    graph : Graph
        Graph to extend
    type : str, optional
        Node type
    label : str, optional
        Node label
    **attrs
        Scalar node attributes

    Returns
    -------
    Graph
        Graph with the node numbered ``last_node + 1``

    Examples
    --------
    >>> graph = add_node(create_graph(), type="person", label="ann")
    >>> get_node_ids(graph)
    [1]
    """
    time_function_start = datetime.now()
    log_function_entry("add_node", type=type, label=label)

    validate_graph_object(graph)

    node_df = create_node_df(1, type=type, label=[label], **attrs)
    return commit_graph_change(_append_nodes(graph, node_df), "add_node", time_function_start)


def add_n_nodes(
    graph: Graph,
    n: int,
    type: Optional[str] = None,
    label: Optional[str] = None
) -> Graph:
    """
    Add ``n`` nodes sharing the same type and label.

    Raises
    ------
    ValidationError
        If n is not a positive integer
    """
    time_function_start = datetime.now()
    log_function_entry("add_n_nodes", n=n, type=type, label=label)

    validate_graph_object(graph)

    node_df = create_node_df(n, type=type, label=None if label is None else [label] * n)
    return commit_graph_change(_append_nodes(graph, node_df), "add_n_nodes", time_function_start)


def add_node_df(graph: Graph, node_df: pl.DataFrame) -> Graph:
    """
    Append the rows of a node table.

    The rows keep their order and attributes but receive fresh ids starting
    at ``last_node + 1``; the ids in ``node_df`` are ignored.

    Raises
    ------
    InvalidGraphObjectError
        If node_df is not a valid node table
    """
    time_function_start = datetime.now()
    log_function_entry("add_node_df", rows=getattr(node_df, "height", None))

    validate_graph_object(graph)
    validate_node_df(node_df, name="node_df")

    if node_df.is_empty():
        return commit_graph_change(graph, "add_node_df", time_function_start)

    return commit_graph_change(_append_nodes(graph, node_df), "add_node_df", time_function_start)


def add_edge(
    graph: Graph,
    from_: int,
    to: int,
    rel: Optional[str] = None,
    **attrs: Any
) -> Graph:
    """
    Add a single edge between two existing nodes.

    Parameters
    ----------
    graph : Graph
        Graph to extend
    from_ : int
        Outgoing node id
    to : int
        Incoming node id
    rel : str, optional
        Relationship label
    **attrs
        Scalar edge attributes

    Returns
    -------
    Graph
        Graph with the edge numbered ``last_edge + 1``

    Raises
    ------
    NodeNotFoundError
        If either endpoint is not in the graph
    """
    time_function_start = datetime.now()
    log_function_entry("add_edge", from_=from_, to=to, rel=rel)

    validate_graph_object(graph)

    edge_df = create_edge_df(from_=from_, to=to, rel=rel, **attrs)
    validate_edge_endpoints(graph.nodes_df, edge_df, error_cls=NodeNotFoundError)

    return commit_graph_change(_append_edges(graph, edge_df), "add_edge", time_function_start)


def add_edge_df(graph: Graph, edge_df: pl.DataFrame) -> Graph:
    """
    Append the rows of an edge table.

    ``from``/``to`` must reference existing node ids; the rows receive fresh
    edge ids starting at ``last_edge + 1``.

    Raises
    ------
    InvalidGraphObjectError
        If edge_df is not a valid edge table
    NodeNotFoundError
        If an endpoint is not in the graph
    """
    time_function_start = datetime.now()
    log_function_entry("add_edge_df", rows=getattr(edge_df, "height", None))

    validate_graph_object(graph)
    validate_edge_df(edge_df, name="edge_df")
    validate_edge_endpoints(graph.nodes_df, edge_df, error_cls=NodeNotFoundError)

    if edge_df.is_empty():
        return commit_graph_change(graph, "add_edge_df", time_function_start)

    return commit_graph_change(_append_edges(graph, edge_df), "add_edge_df", time_function_start)


def delete_node(graph: Graph, node: int) -> Graph:
    """
    Remove a node together with every edge incident to it.

    Raises
    ------
    NodeNotFoundError
        If the node id is not in the graph
    """
    time_function_start = datetime.now()
    log_function_entry("delete_node", node=node)

    validate_graph_object(graph)
    validate_node_ids(graph, [node])

    nodes_df = graph.nodes_df.filter(pl.col("id") != node)
    edges_df = graph.edges_df.filter((pl.col("from") != node) & (pl.col("to") != node))

    removed_edges = graph.edges_df.height - edges_df.height
    if removed_edges:
        logger.debug("delete_node removed %d incident edges of node %d", removed_edges, node)

    return commit_graph_change(
        graph.evolve(nodes_df=nodes_df, edges_df=edges_df),
        "delete_node",
        time_function_start
    )


def delete_edge(
    graph: Graph,
    id: Optional[int] = None,
    from_: Optional[int] = None,
    to: Optional[int] = None
) -> Graph:
    """
    Remove one edge, by id or by its endpoints.

    Parameters
    ----------
    graph : Graph
        Graph to update
    id : int, optional
        Edge id; takes precedence over from_/to
    from_, to : int, optional
        Endpoints of the edge; when several edges connect the pair, the
        first one in table order is removed

    Raises
    ------
    ValidationError
        If neither an id nor both endpoints are given
    EdgeNotFoundError
        If no matching edge exists
    """
    time_function_start = datetime.now()
    log_function_entry("delete_edge", id=id, from_=from_, to=to)

    validate_graph_object(graph)

    if id is not None:
        matches = graph.edges_df.filter(pl.col("id") == id)
        lookup = {"id": id}
    elif from_ is not None and to is not None:
        matches = graph.edges_df.filter((pl.col("from") == from_) & (pl.col("to") == to))
        if not graph.directed:
            matches = pl.concat([
                matches,
                graph.edges_df.filter((pl.col("from") == to) & (pl.col("to") == from_))
            ]).unique(subset=["id"], keep="first", maintain_order=True)
        lookup = {"from": from_, "to": to}
    else:
        raise ValidationError(
            "Either an edge id or both endpoints must be given",
            field="id",
            expected="id or from_ and to"
        )

    if matches.is_empty():
        raise EdgeNotFoundError(
            f"No edge matches {lookup}",
            field=next(iter(lookup)),
            value=lookup
        )

    edge_id = matches["id"][0]
    edges_df = graph.edges_df.filter(pl.col("id") != edge_id)

    return commit_graph_change(graph.evolve(edges_df=edges_df), "delete_edge", time_function_start)


def set_node_attrs(
    graph: Graph,
    attr: str,
    values: Any,
    nodes: Optional[Sequence[int]] = None
) -> Graph:
    """
    Set a node attribute for all nodes or a subset of them.

    Parameters
    ----------
    graph : Graph
        Graph to update
    attr : str
        Attribute (column) name; created when absent
    values : Any or list
        Scalar, or one value per selected node
    nodes : list of int, optional
        Node ids to update; all nodes when omitted. Other nodes keep their
        current value (null for a new column).

    Raises
    ------
    ValidationError
        If attr is ``id``
    NodeNotFoundError
        If a node id is not in the graph
    LengthMismatchError
        If values does not have one entry per selected node
    """
    time_function_start = datetime.now()
    log_function_entry("set_node_attrs", attr=attr, nodes=nodes)

    validate_graph_object(graph)
    validate_attribute_name(attr, PROTECTED_NODE_ATTRS)
    if nodes is not None:
        validate_node_ids(graph, list(nodes))

    nodes_df = _set_column(graph.nodes_df, attr, values, nodes, "nodes")

    return commit_graph_change(
        graph.evolve(nodes_df=normalize_node_df(nodes_df)),
        "set_node_attrs",
        time_function_start
    )


def set_edge_attrs(
    graph: Graph,
    attr: str,
    values: Any,
    edges: Optional[Sequence[int]] = None
) -> Graph:
    """
    Set an edge attribute for all edges or a subset of them.

    Same rules as set_node_attrs(); ``id``, ``from`` and ``to`` are protected.

    Raises
    ------
    EdgeNotFoundError
        If an edge id is not in the graph
    """
    time_function_start = datetime.now()
    log_function_entry("set_edge_attrs", attr=attr, edges=edges)

    validate_graph_object(graph)
    validate_attribute_name(attr, PROTECTED_EDGE_ATTRS)

    if edges is not None:
        existing = set(graph.edges_df["id"].to_list())
        missing = [edge_id for edge_id in edges if edge_id not in existing]
        if missing:
            raise EdgeNotFoundError(
                f"Edge ids not found in graph: {missing}",
                field="edges",
                value=missing
            )

    edges_df = _set_column(graph.edges_df, attr, values, edges, "edges")

    return commit_graph_change(
        graph.evolve(edges_df=normalize_edge_df(edges_df)),
        "set_edge_attrs",
        time_function_start
    )


def _set_column(
    df: pl.DataFrame,
    attr: str,
    values: Any,
    ids: Optional[Sequence[int]],
    field: str
) -> pl.DataFrame:
    row_ids = df["id"].to_list()
    targets = row_ids if ids is None else list(ids)
    assigned: Dict[int, Any] = dict(zip(targets, expand_vector(values, len(targets), "values")))

    current: List[Any] = df[attr].to_list() if attr in df.columns else [None] * df.height
    updated = [
        assigned[row_id] if row_id in assigned else old
        for row_id, old in zip(row_ids, current)
    ]

    logger.debug("Setting '%s' on %d of %d %s", attr, len(assigned), df.height, field)

    return df.with_columns(pl.Series(attr, updated, strict=False))
