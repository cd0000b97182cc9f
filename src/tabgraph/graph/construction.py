"""
Graph construction module for the tabgraph library.

This module builds node and edge tables with sequential ids and adds
canonical shapes (stars, cycles, paths), random graphs and nodes derived
from data-frame columns. Shapes are built as small stand-alone graphs and
appended to the target graph through the composition engine, so their ids
never collide with ids the target has already allocated.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
import polars as pl

from ..common.exceptions import (
    DataFormatError,
    MinimumSizeError,
    ValidationError,
    require_positive
)
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer
from ..common.selectors import ColumnSelector, resolve_columns
from ..common.validators import expand_vector, is_vector, validate_graph_object
from .combine import renumber_graph_tables
from .core import (
    Graph,
    GraphInfo,
    commit_graph_change,
    empty_edge_df,
    normalize_edge_df,
    normalize_node_df
)

logger = get_logger(__name__)

RESERVED_NODE_ATTRS = ["id"]
RESERVED_EDGE_ATTRS = ["id", "from", "to"]

# Minimum number of nodes per shape
MIN_STAR_NODES = 4
MIN_CYCLE_NODES = 3
MIN_PATH_NODES = 2

# Values drawn for the `value` attribute of random graphs
RANDOM_NODE_VALUES = np.arange(1, 21) * 0.5


def create_node_df(
    n: int,
    type: Union[str, Sequence[Optional[str]], None] = None,
    label: Union[bool, str, Sequence[Any], None] = True,
    **attrs: Any
) -> pl.DataFrame:
    """
    Create a node table with ids ``1..n``.

    Parameters
    ----------
    n : int
        Number of nodes; must be positive
    type : str or list, optional
        Group label for every node (scalar) or per node (list of length n)
    label : bool, str or list, default True
        True labels each node with its id as text, False gives empty labels,
        None gives null labels, a list supplies one label per node
    **attrs
        Additional node attributes, each a scalar or a list of length n

    Returns
    -------
    pl.DataFrame
        Node table with columns ``id``, ``type``, ``label`` and the attributes

    Raises
    ------
    ValidationError
        If n is not a positive integer or an attribute is named ``id``
    LengthMismatchError
        If a list-valued type, label or attribute does not have n values

    Examples
    --------
    >>> ndf = create_node_df(n=3, type="a", value=[1.5, 2.0, 0.5])
    >>> ndf["label"].to_list()
    ['1', '2', '3']
    """
    _require_count(n, "n")

    if label is True:
        labels = [str(index) for index in range(1, n + 1)]
    elif label is False:
        labels = [""] * n
    else:
        labels = [None if item is None else str(item) for item in expand_vector(label, n, "label")]

    types = [None if item is None else str(item) for item in expand_vector(type, n, "type")]

    columns = {
        "id": pl.Series("id", list(range(1, n + 1)), dtype=pl.Int64),
        "type": pl.Series("type", types, dtype=pl.Utf8),
        "label": pl.Series("label", labels, dtype=pl.Utf8),
    }
    columns.update(_attribute_columns(attrs, n, RESERVED_NODE_ATTRS + ["type", "label"]))

    return pl.DataFrame(list(columns.values()))


def create_edge_df(
    from_: Union[int, Sequence[int]],
    to: Union[int, Sequence[int]],
    rel: Union[str, Sequence[Optional[str]], None] = None,
    **attrs: Any
) -> pl.DataFrame:
    """
    Create an edge table with ids ``1..len(from_)``.

    Parameters
    ----------
    from_ : int or list of int
        Outgoing node ids
    to : int or list of int
        Incoming node ids; must match the length of from_
    rel : str or list, optional
        Relationship label for every edge (scalar) or per edge (list)
    **attrs
        Additional edge attributes, each a scalar or a list of matching length

    Returns
    -------
    pl.DataFrame
        Edge table with columns ``id``, ``from``, ``to``, ``rel`` and the attributes

    Raises
    ------
    ValidationError
        If no edges are given or endpoints are not integers
    LengthMismatchError
        If from_/to or an attribute list have mismatched lengths

    Examples
    --------
    >>> edf = create_edge_df(from_=[1, 3, 3, 4], to=[2, 2, 1, 3], rel=["X", "Y", "Y", "Z"])
    >>> edf["id"].to_list()
    [1, 2, 3, 4]
    """
    if is_vector(from_):
        from_values = list(from_)
        to_values = expand_vector(to, len(from_values), "to")
    elif is_vector(to):
        to_values = list(to)
        from_values = expand_vector(from_, len(to_values), "from")
    else:
        from_values, to_values = [from_], [to]

    n = len(from_values)
    if n == 0:
        raise ValidationError("At least one edge must be specified", field="from")

    for field, values in (("from", from_values), ("to", to_values)):
        if not all(_is_integer(value) for value in values):
            raise ValidationError(
                "Edge endpoints must be integer node ids",
                field=field,
                expected="integers"
            )

    rels = [None if item is None else str(item) for item in expand_vector(rel, n, "rel")]

    columns = {
        "id": pl.Series("id", list(range(1, n + 1)), dtype=pl.Int64),
        "from": pl.Series("from", [int(value) for value in from_values], dtype=pl.Int64),
        "to": pl.Series("to", [int(value) for value in to_values], dtype=pl.Int64),
        "rel": pl.Series("rel", rels, dtype=pl.Utf8),
    }
    columns.update(_attribute_columns(attrs, n, RESERVED_EDGE_ATTRS + ["rel"]))

    return pl.DataFrame(list(columns.values()))


def _is_integer(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _require_count(n: Any, field: str) -> None:
    if not _is_integer(n):
        raise ValidationError(f"Expected an integer, got {type(n).__name__}", field=field, value=n)
    require_positive(n, field)


def _attribute_columns(
    attrs: Dict[str, Any],
    n: int,
    reserved: List[str]
) -> Dict[str, pl.Series]:
    columns = {}
    for name, value in attrs.items():
        if name in reserved:
            raise ValidationError(
                f"'{name}' cannot be supplied as an attribute",
                field=name,
                expected=f"an attribute name other than {reserved}"
            )
        columns[name] = pl.Series(name, expand_vector(value, n, name), strict=False)
    return columns


# Shape constructors

def add_star(
    graph: Graph,
    n: int,
    type: Union[str, Sequence[Optional[str]], None] = None,
    label: Union[bool, str, Sequence[Any], None] = True,
    rel: Union[str, Sequence[Optional[str]], None] = None,
    edge_attrs: Optional[Dict[str, Any]] = None,
    **node_attrs: Any
) -> Graph:
    """
    Add a star of ``n`` nodes; the first node is the centre.

    Parameters
    ----------
    graph : Graph
        Target graph
    n : int
        Number of nodes in the star (at least 4)
    type : str or list, optional
        Node type, scalar or per node
    label : bool, str or list, default True
        Node labels (see create_node_df)
    rel : str or list, optional
        Relationship label of the n - 1 new edges
    edge_attrs : dict, optional
        Edge attributes, each a scalar or a list of n - 1 values
    **node_attrs
        Node attributes, each a scalar or a list of n values, applied in
        creation order

    Returns
    -------
    Graph
        Graph with the star appended and one ``add_star`` log entry

    Raises
    ------
    MinimumSizeError
        If n is smaller than 4
    LengthMismatchError
        If an attribute list has the wrong length

    Examples
    --------
    >>> graph = add_star(create_graph(), n=4, type="four_star")
    >>> graph = add_star(graph, n=5, type="five_star")
    >>> get_edge_df(graph)["from"].to_list()
    [1, 1, 1, 5, 5, 5, 5]
    """
    from_, to = _star_edges(n) if _is_integer(n) and n >= MIN_STAR_NODES else ([], [])
    return _add_shape(
        graph, "add_star", n, MIN_STAR_NODES, from_, to,
        type, label, rel, edge_attrs, node_attrs
    )


def add_cycle(
    graph: Graph,
    n: int,
    type: Union[str, Sequence[Optional[str]], None] = None,
    label: Union[bool, str, Sequence[Any], None] = True,
    rel: Union[str, Sequence[Optional[str]], None] = None,
    edge_attrs: Optional[Dict[str, Any]] = None,
    **node_attrs: Any
) -> Graph:
    """
    Add a cycle of ``n`` nodes (at least 3); edge attributes take n values.

    See add_star() for the parameters.
    """
    from_, to = _cycle_edges(n) if _is_integer(n) and n >= MIN_CYCLE_NODES else ([], [])
    return _add_shape(
        graph, "add_cycle", n, MIN_CYCLE_NODES, from_, to,
        type, label, rel, edge_attrs, node_attrs
    )


def add_path(
    graph: Graph,
    n: int,
    type: Union[str, Sequence[Optional[str]], None] = None,
    label: Union[bool, str, Sequence[Any], None] = True,
    rel: Union[str, Sequence[Optional[str]], None] = None,
    edge_attrs: Optional[Dict[str, Any]] = None,
    **node_attrs: Any
) -> Graph:
    """
    Add a path of ``n`` nodes (at least 2); edge attributes take n - 1 values.

    See add_star() for the parameters.
    """
    from_, to = _path_edges(n) if _is_integer(n) and n >= MIN_PATH_NODES else ([], [])
    return _add_shape(
        graph, "add_path", n, MIN_PATH_NODES, from_, to,
        type, label, rel, edge_attrs, node_attrs
    )


def _star_edges(n: int) -> Tuple[List[int], List[int]]:
    return [1] * (n - 1), list(range(2, n + 1))


def _cycle_edges(n: int) -> Tuple[List[int], List[int]]:
    return list(range(1, n + 1)), list(range(2, n + 1)) + [1]


def _path_edges(n: int) -> Tuple[List[int], List[int]]:
    return list(range(1, n)), list(range(2, n + 1))


def _add_shape(
    graph: Graph,
    function_used: str,
    n: int,
    minimum: int,
    from_: List[int],
    to: List[int],
    type: Any,
    label: Any,
    rel: Any,
    edge_attrs: Optional[Dict[str, Any]],
    node_attrs: Dict[str, Any]
) -> Graph:
    time_function_start = datetime.now()
    log_function_entry(function_used, n=n, type=type, rel=rel)

    validate_graph_object(graph)

    _require_count(n, "n")
    if n < minimum:
        raise MinimumSizeError(
            f"{function_used} needs at least {minimum} nodes, got {n}",
            minimum=minimum,
            value=n
        )

    # Both tables are built before the graph is touched so a bad attribute
    # vector leaves the target unchanged.
    shape_nodes = create_node_df(n, type=type, label=label, **node_attrs)
    shape_edges = create_edge_df(from_, to, rel=rel, **(edge_attrs or {}))

    shape = Graph(nodes_df=shape_nodes, edges_df=shape_edges, directed=graph.directed)
    return _append_shape(graph, shape, function_used, time_function_start)


def _append_shape(
    graph: Graph,
    shape: Graph,
    function_used: str,
    time_function_start: datetime
) -> Graph:
    nodes_df, edges_df, last_node, last_edge = renumber_graph_tables(graph, shape)

    logger.info(
        "%s added %d nodes and %d edges",
        function_used, shape.nodes_df.height, shape.edges_df.height
    )

    return commit_graph_change(
        graph.evolve(
            nodes_df=nodes_df,
            edges_df=edges_df,
            last_node=last_node,
            last_edge=last_edge
        ),
        function_used,
        time_function_start
    )


# Column-derived nodes

def add_nodes_from_df_cols(
    graph: Graph,
    df: pl.DataFrame,
    columns: Union[ColumnSelector, str, int, Iterable[Union[ColumnSelector, str, int]]],
    type: Optional[str] = None,
    keep_duplicates: bool = False
) -> Graph:
    """
    Add nodes from the distinct text values found in data-frame columns.

    Each text cell is trimmed and split on whitespace; every distinct token
    becomes the label of one new node. Non-text columns are skipped.

    Parameters
    ----------
    graph : Graph
        Target graph
    df : pl.DataFrame
        Data frame supplying the values
    columns : selector, str, int or iterable of these
        Columns to read, by name (ByName or str) or zero-based position
        (ByIndex or int)
    type : str, optional
        Type assigned to every new node
    keep_duplicates : bool, default False
        When False, tokens that already appear as a node label in the graph
        are not added again

    Returns
    -------
    Graph
        Graph with the new nodes and one ``add_nodes_from_df_cols`` log entry
        (also when no node was added)

    Raises
    ------
    DataFormatError
        If df is not a polars DataFrame
    ColumnNotFoundError
        If a named column is absent
    ColumnIndexOutOfRangeError
        If a position is outside the data frame's columns

    Examples
    --------
    >>> df = pl.DataFrame({
    ...     "col_1": ["f", "p", "q"],
    ...     "col_2": ["q", "x", "f"],
    ...     "col_3": [1, 5, 3],
    ... })
    >>> graph = add_nodes_from_df_cols(create_graph(), df, ["col_1", "col_2"])
    >>> get_node_df(graph)["label"].to_list()
    ['f', 'p', 'q', 'x']
    """
    time_function_start = datetime.now()
    log_function_entry(
        "add_nodes_from_df_cols",
        columns=columns, type=type, keep_duplicates=keep_duplicates
    )

    validate_graph_object(graph)

    if not isinstance(df, pl.DataFrame):
        raise DataFormatError(
            f"Expected a polars DataFrame, got {_type_name(df)}",
            format_type="DataFrame"
        )

    column_names = resolve_columns(df, columns)
    text_columns = [name for name in column_names if df[name].dtype == pl.Utf8]

    skipped = [name for name in column_names if name not in text_columns]
    if skipped:
        logger.debug("Skipping non-text columns: %s", skipped)

    tokens: Dict[str, None] = {}
    for name in text_columns:
        for value in df[name].drop_nulls().to_list():
            for token in value.split():
                tokens[token] = None

    labels = list(tokens)

    if not keep_duplicates:
        existing = set(graph.nodes_df["label"].drop_nulls().to_list())
        labels = [label for label in labels if label not in existing]

    if not labels:
        logger.info("add_nodes_from_df_cols found no new node labels")
        return commit_graph_change(graph, "add_nodes_from_df_cols", time_function_start)

    new_nodes = create_node_df(len(labels), type=type, label=labels)
    shape = Graph(nodes_df=new_nodes, edges_df=empty_edge_df(), directed=graph.directed)

    return _append_shape(graph, shape, "add_nodes_from_df_cols", time_function_start)


def _type_name(value: Any) -> str:
    return type(value).__name__


# Random graphs

def create_random_graph(
    n: int,
    m: int,
    directed: bool = True,
    seed: Optional[int] = None,
    graph_name: Optional[str] = None,
    write_backups: Optional[bool] = None,
    backup_dir: Optional[str] = None
) -> Graph:
    """
    Create a random graph with ``n`` nodes and ``m`` distinct edges.

    Edges are drawn without replacement from all possible non-loop node
    pairs (ordered pairs for directed graphs, unordered otherwise). Each node
    gets a ``value`` attribute drawn from 0.5, 1.0, ..., 10.0.

    Parameters
    ----------
    n : int
        Number of nodes
    m : int
        Number of edges
    directed : bool, default True
        Whether the graph is directed
    seed : int, optional
        Seed for NumPy's random generator; equal seeds give equal graphs
    graph_name, write_backups, backup_dir
        Passed through to the graph's info (see create_graph)

    Returns
    -------
    Graph
        Random graph whose log holds a single ``create_random_graph`` entry

    Raises
    ------
    ValidationError
        If n is not positive, m is negative, or m exceeds the number of
        possible edges

    Examples
    --------
    >>> graph = create_random_graph(n=10, m=22, seed=23)
    >>> count_edges(graph)
    22
    """
    time_function_start = datetime.now()
    log_function_entry("create_random_graph", n=n, m=m, directed=directed, seed=seed)

    _require_count(n, "n")
    if not _is_integer(m):
        raise ValidationError(f"Expected an integer, got {_type_name(m)}", field="m", value=m)
    require_positive(m, "m", allow_zero=True)

    if directed:
        sources, targets = np.nonzero(~np.eye(n, dtype=bool))
    else:
        sources, targets = np.triu_indices(n, k=1)

    if m > len(sources):
        raise ValidationError(
            f"Cannot place {m} edges; at most {len(sources)} are possible",
            field="m",
            value=m,
            expected=f"m <= {len(sources)}"
        )

    with LoggingTimer("create_random_graph", {"nodes": n, "edges": m}):
        rng = np.random.default_rng(seed)
        chosen = np.sort(rng.choice(len(sources), size=m, replace=False))
        values = rng.choice(RANDOM_NODE_VALUES, size=n)

        nodes_df = create_node_df(n, label=True, value=values.tolist())
        if m > 0:
            edges_df = create_edge_df(
                from_=(sources[chosen] + 1).tolist(),
                to=(targets[chosen] + 1).tolist()
            )
        else:
            edges_df = empty_edge_df()

    graph = Graph(
        nodes_df=normalize_node_df(nodes_df),
        edges_df=normalize_edge_df(edges_df),
        directed=directed,
        graph_info=GraphInfo(
            graph_name=graph_name,
            write_backups=write_backups,
            backup_dir=backup_dir
        )
    )

    return commit_graph_change(graph, "create_random_graph", time_function_start)
