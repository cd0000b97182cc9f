"""
Graph measures for the tabgraph library.

Degree, coreness and adjacency queries are delegated to NetworkIt. The node
and edge tables are converted into an ``nk.Graph`` whose internal node ids
follow node-table order; an IDMapper translates results back to node ids.
"""

from typing import List, Tuple

import networkit as nk
import numpy as np
import polars as pl
from scipy import sparse

from ..common.exceptions import ComputationError
from ..common.id_mapper import IDMapper
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer
from ..common.validators import validate_graph_object
from .core import Graph

logger = get_logger(__name__)

NODE_INFO_SCHEMA = {
    "id": pl.Int64,
    "type": pl.Utf8,
    "label": pl.Utf8,
    "deg": pl.Int64,
    "indeg": pl.Int64,
    "outdeg": pl.Int64,
    "loops": pl.Int64,
}
EDGE_INFO_SCHEMA = {"id": pl.Int64, "from": pl.Int64, "to": pl.Int64, "rel": pl.Utf8}


def to_networkit(graph: Graph) -> Tuple[nk.Graph, IDMapper]:
    """
    Convert a graph into a NetworkIt graph.

    Parameters
    ----------
    graph : Graph
        Graph to convert

    Returns
    -------
    nk_graph : nk.Graph
        Unweighted NetworkIt graph with the same directedness; parallel edges
        and self-loops are kept
    id_mapper : IDMapper
        Mapping between node ids and NetworkIt's internal ids

    Raises
    ------
    ComputationError
        If NetworkIt rejects the graph

    Examples
    --------
    >>> nk_graph, mapper = to_networkit(add_star(create_graph(), n=4))
    >>> nk_graph.numberOfEdges()
    3
    """
    validate_graph_object(graph)

    id_mapper = IDMapper.from_node_ids(graph.nodes_df["id"].to_list())

    try:
        nk_graph = nk.Graph(graph.nodes_df.height, weighted=False, directed=graph.directed)
        for from_id, to_id in graph.edges_df.select(["from", "to"]).iter_rows():
            nk_graph.addEdge(id_mapper.get_internal(from_id), id_mapper.get_internal(to_id))
    except Exception as e:
        raise ComputationError(
            f"Failed to build NetworkIt graph: {str(e)}",
            operation="to_networkit",
            error_type="networkit",
            resource_info={"nodes": graph.nodes_df.height, "edges": graph.edges_df.height},
            cause=e
        )

    logger.debug(
        "Converted graph to NetworkIt: %d nodes, %d edges",
        nk_graph.numberOfNodes(), nk_graph.numberOfEdges()
    )

    return nk_graph, id_mapper


def _loop_counts(graph: Graph) -> np.ndarray:
    # Self-loops per node, in node-table order
    loops = (
        graph.edges_df
        .filter(pl.col("from") == pl.col("to"))
        .group_by("from")
        .agg(pl.len().cast(pl.Int64).alias("loops"))
    )
    loop_counts = dict(zip(loops["from"].to_list(), loops["loops"].to_list()))
    return np.array(
        [loop_counts.get(node_id, 0) for node_id in graph.nodes_df["id"].to_list()],
        dtype=np.int64
    )


def _degree_arrays(graph: Graph) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    # Returns (indegree, outdegree, total) in node-table order.
    # A self-loop adds 2 to the total degree in both directed and undirected graphs.
    nk_graph, _ = to_networkit(graph)

    try:
        if nk_graph.isDirected():
            in_degrees = np.array([nk_graph.degreeIn(v) for v in nk_graph.iterNodes()], dtype=np.int64)
            out_degrees = np.array([nk_graph.degreeOut(v) for v in nk_graph.iterNodes()], dtype=np.int64)
            total = in_degrees + out_degrees
        else:
            # NetworkIt counts an undirected self-loop once
            total = np.array([nk_graph.degree(v) for v in nk_graph.iterNodes()], dtype=np.int64)
            total = total + _loop_counts(graph)
            in_degrees = total
            out_degrees = total
    except Exception as e:
        raise ComputationError(
            f"Failed to calculate degrees: {str(e)}",
            operation="degree",
            error_type="networkit",
            cause=e
        )

    return in_degrees, out_degrees, total


def _degree_frame(graph: Graph, column: str, values: np.ndarray, normalized: bool) -> pl.DataFrame:
    ids = graph.nodes_df["id"]

    if normalized:
        n_nodes = graph.nodes_df.height
        scaled = values / (n_nodes - 1) if n_nodes > 1 else np.zeros(len(values))
        series = pl.Series(column, scaled, dtype=pl.Float64)
    else:
        series = pl.Series(column, values, dtype=pl.Int64)

    return pl.DataFrame([ids, series])


def get_degree_in(graph: Graph, normalized: bool = False) -> pl.DataFrame:
    """
    In-degree of every node.

    Parameters
    ----------
    graph : Graph
        Graph to measure
    normalized : bool, default False
        Divide by ``n - 1``

    Returns
    -------
    pl.DataFrame
        Columns ``id`` and ``indegree``, in node-table order. For undirected
        graphs the in-degree equals the degree.
    """
    log_function_entry("get_degree_in", normalized=normalized)
    in_degrees, _, _ = _degree_arrays(graph)
    return _degree_frame(graph, "indegree", in_degrees, normalized)


def get_degree_out(graph: Graph, normalized: bool = False) -> pl.DataFrame:
    """Out-degree of every node (columns ``id``, ``outdegree``)."""
    log_function_entry("get_degree_out", normalized=normalized)
    _, out_degrees, _ = _degree_arrays(graph)
    return _degree_frame(graph, "outdegree", out_degrees, normalized)


def get_degree_total(graph: Graph, normalized: bool = False) -> pl.DataFrame:
    """Total degree of every node (columns ``id``, ``total_degree``)."""
    log_function_entry("get_degree_total", normalized=normalized)
    _, _, total = _degree_arrays(graph)
    return _degree_frame(graph, "total_degree", total, normalized)


def get_coreness(graph: Graph) -> pl.DataFrame:
    """
    K-core number of every node.

    The decomposition runs on the simple undirected view of the graph:
    edge directions are dropped, parallel edges are merged and self-loops are
    removed.

    Returns
    -------
    pl.DataFrame
        Columns ``id`` and ``coreness`` (integer), in node-table order

    Raises
    ------
    ComputationError
        If NetworkIt's CoreDecomposition fails
    """
    log_function_entry("get_coreness", nodes=graph.nodes_df.height if isinstance(graph, Graph) else None)
    validate_graph_object(graph)

    if graph.nodes_df.is_empty():
        return pl.DataFrame(schema={"id": pl.Int64, "coreness": pl.Int64})

    id_mapper = IDMapper.from_node_ids(graph.nodes_df["id"].to_list())

    pairs = set()
    for from_id, to_id in graph.edges_df.select(["from", "to"]).iter_rows():
        if from_id != to_id:
            u = id_mapper.get_internal(from_id)
            v = id_mapper.get_internal(to_id)
            pairs.add((min(u, v), max(u, v)))

    with LoggingTimer("get_coreness", {"nodes": graph.nodes_df.height, "edges": len(pairs)}):
        try:
            simple = nk.Graph(graph.nodes_df.height, weighted=False, directed=False)
            for u, v in sorted(pairs):
                simple.addEdge(u, v)

            decomposition = nk.centrality.CoreDecomposition(simple)
            decomposition.run()
            scores = decomposition.scores()
        except Exception as e:
            raise ComputationError(
                f"Core decomposition failed: {str(e)}",
                operation="get_coreness",
                error_type="networkit",
                resource_info={"nodes": graph.nodes_df.height, "edges": len(pairs)},
                cause=e
            )

    return pl.DataFrame([
        graph.nodes_df["id"],
        pl.Series("coreness", [int(round(score)) for score in scores], dtype=pl.Int64),
    ])


def get_adjacency_matrix(graph: Graph) -> sparse.csr_matrix:
    """
    Sparse adjacency matrix with rows and columns in node-table order.

    Entries count parallel edges. Undirected graphs give a symmetric matrix.

    Examples
    --------
    >>> matrix = get_adjacency_matrix(add_path(create_graph(), n=3))
    >>> matrix.toarray().tolist()
    [[0, 1, 0], [0, 0, 1], [0, 0, 0]]
    """
    validate_graph_object(graph)

    n_nodes = graph.nodes_df.height
    id_mapper = IDMapper.from_node_ids(graph.nodes_df["id"].to_list())

    rows: List[int] = []
    cols: List[int] = []
    for from_id, to_id in graph.edges_df.select(["from", "to"]).iter_rows():
        u = id_mapper.get_internal(from_id)
        v = id_mapper.get_internal(to_id)
        rows.append(u)
        cols.append(v)
        if not graph.directed and u != v:
            rows.append(v)
            cols.append(u)

    data = np.ones(len(rows), dtype=np.int64)
    matrix = sparse.coo_matrix((data, (rows, cols)), shape=(n_nodes, n_nodes))

    return matrix.tocsr()


def node_info(graph: Graph) -> pl.DataFrame:
    """
    Summary of every node: ``id, type, label, deg, indeg, outdeg, loops``.

    Each self-loop counts twice in ``deg``; on undirected graphs
    ``indeg`` and ``outdeg`` equal ``deg``.

    An empty graph gives an empty DataFrame with the same columns.
    """
    validate_graph_object(graph)

    if graph.nodes_df.is_empty():
        return pl.DataFrame(schema=NODE_INFO_SCHEMA)

    in_degrees, out_degrees, total = _degree_arrays(graph)

    return pl.DataFrame(
        {
            "id": graph.nodes_df["id"],
            "type": graph.nodes_df["type"],
            "label": graph.nodes_df["label"],
            "deg": total,
            "indeg": in_degrees,
            "outdeg": out_degrees,
            "loops": _loop_counts(graph),
        },
        schema=NODE_INFO_SCHEMA
    )


def edge_info(graph: Graph) -> pl.DataFrame:
    """Summary of every edge: ``id, from, to, rel``."""
    validate_graph_object(graph)

    if graph.edges_df.is_empty():
        return pl.DataFrame(schema=EDGE_INFO_SCHEMA)

    return graph.edges_df.select(list(EDGE_INFO_SCHEMA))
