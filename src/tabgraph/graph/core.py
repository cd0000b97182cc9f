"""
Graph container for the tabgraph library.

A Graph pairs a Polars node table with a Polars edge table and carries the
bookkeeping needed to keep ids unique across compositions: the highest node
and edge ids ever allocated, an append-only action log, global attribute
bindings, registered graph actions and backup settings.

Graphs are treated as values. Every mutating function in this package takes
a Graph and returns a new one; the input is left untouched.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Union
import uuid

import polars as pl

from ..common.config import resolve_graph_settings
from ..common.exceptions import (
    GraphError,
    InvalidGraphObjectError,
    ValidationError,
    validate_parameter
)
from ..common.logging_config import get_logger, log_function_entry
from ..common.validators import (
    NODE_CORE_COLUMNS,
    EDGE_CORE_COLUMNS,
    expand_vector,
    is_vector,
    validate_edge_df,
    validate_edge_endpoints,
    validate_graph_object,
    validate_node_df
)
from .log import add_action_to_log, create_empty_log

logger = get_logger(__name__)

NODE_SCHEMA = {"id": pl.Int64, "type": pl.Utf8, "label": pl.Utf8}
EDGE_SCHEMA = {"id": pl.Int64, "from": pl.Int64, "to": pl.Int64, "rel": pl.Utf8}
GLOBAL_ATTRS_SCHEMA = {"attr": pl.Utf8, "value": pl.Utf8, "attr_type": pl.Utf8}
ATTR_TYPES = ["graph", "node", "edge"]


class GraphInfo:
    """
    Descriptive metadata and backup settings of a graph.

    Parameters
    ----------
    graph_id : str, optional
        Short random identifier; generated when omitted
    graph_name : str, optional
        Display name; defaults to ``graph_<graph_id>``
    graph_time : datetime, optional
        Creation time; defaults to now
    write_backups : bool, optional
        Write a snapshot after every mutating call
    backup_dir : str, optional
        Directory receiving the snapshots
    """

    def __init__(
        self,
        graph_id: Optional[str] = None,
        graph_name: Optional[str] = None,
        graph_time: Optional[datetime] = None,
        write_backups: Optional[bool] = None,
        backup_dir: Optional[str] = None
    ) -> None:
        settings = resolve_graph_settings(write_backups=write_backups, backup_dir=backup_dir)

        self.graph_id = graph_id or uuid.uuid4().hex[:8]
        self.graph_name = graph_name or f"graph_{self.graph_id}"
        self.graph_time = graph_time or datetime.now()
        self.write_backups = settings["write_backups"]
        self.backup_dir = settings["backup_dir"]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "graph_id": self.graph_id,
            "graph_name": self.graph_name,
            "graph_time": self.graph_time.isoformat(),
            "write_backups": self.write_backups,
            "backup_dir": self.backup_dir,
        }

    @classmethod
    def from_dict(cls, info: Dict[str, Any]) -> 'GraphInfo':
        return cls(
            graph_id=info["graph_id"],
            graph_name=info["graph_name"],
            graph_time=datetime.fromisoformat(info["graph_time"]),
            write_backups=info["write_backups"],
            backup_dir=info["backup_dir"],
        )

    def __repr__(self) -> str:
        return (
            f"GraphInfo(graph_id={self.graph_id!r}, graph_name={self.graph_name!r}, "
            f"write_backups={self.write_backups})"
        )


class GraphAction:
    """A named callback re-applied to the graph after every mutation."""

    def __init__(self, action_name: str, function: Callable[['Graph'], 'Graph']) -> None:
        self.action_name = action_name
        self.function = function

    def __repr__(self) -> str:
        return f"GraphAction({self.action_name!r})"


class Graph:
    """
    Graph stored as a node table and an edge table.

    Parameters
    ----------
    nodes_df : pl.DataFrame
        Node table with at least ``id``, ``type`` and ``label`` columns
    edges_df : pl.DataFrame
        Edge table with at least ``id``, ``from``, ``to`` and ``rel`` columns
    directed : bool, default True
        Whether edges are directed; cannot be changed afterwards
    last_node : int, optional
        Highest node id ever allocated; defaults to the largest id present
    last_edge : int, optional
        Highest edge id ever allocated; defaults to the largest id present
    global_attrs : pl.DataFrame, optional
        Global attribute bindings (``attr``, ``value``, ``attr_type``)
    graph_log : pl.DataFrame, optional
        Action log
    graph_actions : List[GraphAction], optional
        Callbacks re-applied after every mutation
    graph_info : GraphInfo, optional
        Metadata and backup settings

    Notes
    -----
    Use create_graph() to build a validated, logged graph. The constructor
    itself does no validation so internal code can assemble intermediate
    states cheaply.
    """

    def __init__(
        self,
        nodes_df: pl.DataFrame,
        edges_df: pl.DataFrame,
        directed: bool = True,
        last_node: Optional[int] = None,
        last_edge: Optional[int] = None,
        global_attrs: Optional[pl.DataFrame] = None,
        graph_log: Optional[pl.DataFrame] = None,
        graph_actions: Optional[List[GraphAction]] = None,
        graph_info: Optional[GraphInfo] = None
    ) -> None:
        self.nodes_df = nodes_df
        self.edges_df = edges_df
        self._directed = bool(directed)
        self.last_node = last_node if last_node is not None else _max_id(nodes_df)
        self.last_edge = last_edge if last_edge is not None else _max_id(edges_df)
        self.global_attrs = (
            global_attrs if global_attrs is not None
            else pl.DataFrame(schema=GLOBAL_ATTRS_SCHEMA)
        )
        self.graph_log = graph_log if graph_log is not None else create_empty_log()
        self.graph_actions = list(graph_actions or [])
        self.graph_info = graph_info or GraphInfo()

    @property
    def directed(self) -> bool:
        return self._directed

    def evolve(self, **changes: Any) -> 'Graph':
        """
        Return a copy of this graph with some fields replaced.

        ``directed`` may only be passed when it equals the current value.
        """
        if "directed" in changes and bool(changes["directed"]) != self._directed:
            raise InvalidGraphObjectError(
                "The directedness of a graph cannot be changed",
                component="directed"
            )
        fields = {
            "nodes_df": self.nodes_df,
            "edges_df": self.edges_df,
            "directed": self._directed,
            "last_node": self.last_node,
            "last_edge": self.last_edge,
            "global_attrs": self.global_attrs,
            "graph_log": self.graph_log,
            "graph_actions": self.graph_actions,
            "graph_info": self.graph_info,
        }
        fields.update(changes)
        return Graph(**fields)

    def __repr__(self) -> str:
        return (
            f"<Graph | nodes={self.nodes_df.height} · edges={self.edges_df.height} · "
            f"directed={self._directed}>"
        )


def _max_id(df: pl.DataFrame) -> int:
    if df.is_empty():
        return 0
    return int(df["id"].max())


def empty_node_df() -> pl.DataFrame:
    return pl.DataFrame(schema=NODE_SCHEMA)


def empty_edge_df() -> pl.DataFrame:
    return pl.DataFrame(schema=EDGE_SCHEMA)


def normalize_node_df(df: pl.DataFrame) -> pl.DataFrame:
    """Cast the core node columns to their canonical types and put them first."""
    df = df.with_columns(
        [pl.col(col).cast(dtype) for col, dtype in NODE_SCHEMA.items()]
    )
    extra = [col for col in df.columns if col not in NODE_CORE_COLUMNS]
    return df.select(NODE_CORE_COLUMNS + extra)


def normalize_edge_df(df: pl.DataFrame) -> pl.DataFrame:
    """Cast the core edge columns to their canonical types and put them first."""
    df = df.with_columns(
        [pl.col(col).cast(dtype) for col, dtype in EDGE_SCHEMA.items()]
    )
    extra = [col for col in df.columns if col not in EDGE_CORE_COLUMNS]
    return df.select(EDGE_CORE_COLUMNS + extra)


def create_graph(
    nodes_df: Optional[pl.DataFrame] = None,
    edges_df: Optional[pl.DataFrame] = None,
    directed: bool = True,
    graph_name: Optional[str] = None,
    write_backups: Optional[bool] = None,
    backup_dir: Optional[str] = None
) -> Graph:
    """
    Create a graph, optionally from a node table and an edge table.

    Parameters
    ----------
    nodes_df : pl.DataFrame, optional
        Node table, typically from create_node_df()
    edges_df : pl.DataFrame, optional
        Edge table, typically from create_edge_df(); requires nodes_df
    directed : bool, default True
        Whether the graph is directed
    graph_name : str, optional
        Display name for the graph
    write_backups : bool, optional
        Write a snapshot after every mutating call (see common.config)
    backup_dir : str, optional
        Directory for snapshots (see common.config)

    Returns
    -------
    Graph
        New graph whose log holds a single ``create_graph`` entry

    Raises
    ------
    InvalidGraphObjectError
        If a table is malformed or edges reference missing nodes

    Examples
    --------
    >>> ndf = create_node_df(n=4, type=["A", "A", "B", "C"])
    >>> edf = create_edge_df(from_=[1, 3, 3, 4], to=[2, 2, 1, 3])
    >>> graph = create_graph(nodes_df=ndf, edges_df=edf)
    >>> count_nodes(graph), count_edges(graph)
    (4, 4)
    """
    time_function_start = datetime.now()
    log_function_entry("create_graph", directed=directed, graph_name=graph_name)

    if nodes_df is None:
        nodes_df = empty_node_df()
    if edges_df is None:
        edges_df = empty_edge_df()

    validate_node_df(nodes_df)
    validate_edge_df(edges_df)
    validate_edge_endpoints(nodes_df, edges_df)

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

    logger.debug("Created %r", graph)

    return commit_graph_change(graph, "create_graph", time_function_start)


def commit_graph_change(
    graph: Graph,
    function_used: str,
    time_function_start: datetime
) -> Graph:
    """
    Finish a mutating call: log it, run graph actions, write a backup.

    Parameters
    ----------
    graph : Graph
        Graph holding the new tables
    function_used : str
        Name recorded in the action log
    time_function_start : datetime
        When the mutating call started

    Returns
    -------
    Graph
        Graph with one more log entry, after graph actions have run

    Notes
    -----
    Backup failures are logged and do not undo the change.
    """
    graph = graph.evolve(
        graph_log=add_action_to_log(
            graph_log=graph.graph_log,
            function_used=function_used,
            time_modified=time_function_start,
            nodes=graph.nodes_df.height,
            edges=graph.edges_df.height
        )
    )

    logger.debug(
        "%s committed as version %d (%d nodes, %d edges)",
        function_used, graph.graph_log.height, graph.nodes_df.height, graph.edges_df.height
    )

    if graph.graph_actions:
        graph = trigger_graph_actions(graph)

    if graph.graph_info.write_backups:
        from .export import write_backup
        write_backup(graph)

    return graph


# Graph actions

def add_graph_action(
    graph: Graph,
    function: Callable[[Graph], Graph],
    action_name: Optional[str] = None
) -> Graph:
    """
    Register a callback that is re-applied after every mutation.

    Parameters
    ----------
    graph : Graph
        Graph to extend
    function : Callable[[Graph], Graph]
        Receives the freshly mutated graph and returns a graph
    action_name : str, optional
        Unique name; defaults to the function's ``__name__``

    Returns
    -------
    Graph
        Graph with the action appended to its action list

    Raises
    ------
    ValidationError
        If function is not callable or the name is already registered
    """
    validate_graph_object(graph)

    if not callable(function):
        raise ValidationError("Graph actions must be callable", field="function")

    action_name = action_name or getattr(function, "__name__", None)
    if not action_name:
        raise ValidationError("Graph actions need a name", field="action_name")

    if action_name in [action.action_name for action in graph.graph_actions]:
        raise ValidationError(
            f"A graph action named '{action_name}' already exists",
            field="action_name",
            value=action_name
        )

    return graph.evolve(graph_actions=graph.graph_actions + [GraphAction(action_name, function)])


def delete_graph_actions(graph: Graph, actions: Union[str, Sequence[str]]) -> Graph:
    """
    Remove graph actions by name.

    Raises
    ------
    ValidationError
        If any name is not registered
    """
    validate_graph_object(graph)

    names = [actions] if isinstance(actions, str) else list(actions)
    registered = [action.action_name for action in graph.graph_actions]
    unknown = [name for name in names if name not in registered]
    if unknown:
        raise ValidationError(
            f"Graph actions not found: {unknown}",
            field="actions",
            value=unknown
        )

    remaining = [action for action in graph.graph_actions if action.action_name not in names]
    return graph.evolve(graph_actions=remaining)


def get_graph_actions(graph: Graph) -> pl.DataFrame:
    """Return the registered actions as a table (``action_index``, ``action_name``)."""
    validate_graph_object(graph)
    return pl.DataFrame(
        {
            "action_index": list(range(1, len(graph.graph_actions) + 1)),
            "action_name": [action.action_name for action in graph.graph_actions],
        },
        schema={"action_index": pl.Int64, "action_name": pl.Utf8}
    )


def trigger_graph_actions(graph: Graph) -> Graph:
    """
    Run every registered graph action in registration order.

    The action list is detached while the callbacks run, so mutations made
    inside a callback are logged but do not re-trigger the actions.

    Raises
    ------
    InvalidGraphObjectError
        If a callback does not return a Graph, or returns a malformed one
    """
    actions = graph.graph_actions
    current = graph.evolve(graph_actions=[])

    for action in actions:
        logger.debug("Running graph action '%s'", action.action_name)
        result = action.function(current)
        if not isinstance(result, Graph):
            raise InvalidGraphObjectError(
                f"Graph action '{action.action_name}' returned {type(result).__name__}, not a Graph",
                component="graph_actions"
            )
        try:
            validate_graph_object(result)
        except GraphError as e:
            raise InvalidGraphObjectError(
                f"Graph action '{action.action_name}' returned an invalid graph: {str(e)}",
                component="graph_actions",
                cause=e
            )
        current = result

    return current.evolve(graph_actions=actions)


# Global attributes

def add_global_graph_attrs(
    graph: Graph,
    attr: Union[str, Sequence[str]],
    value: Any,
    attr_type: Union[str, Sequence[str]]
) -> Graph:
    """
    Bind global attributes to the graph.

    Existing bindings with the same ``attr`` and ``attr_type`` are replaced.

    Parameters
    ----------
    graph : Graph
        Graph to update
    attr : str or list of str
        Attribute names
    value : Any or list
        Values, stored as text
    attr_type : str or list of str
        One of "graph", "node" or "edge" per attribute

    Raises
    ------
    LengthMismatchError
        If value or attr_type lists do not match the number of attributes
    ConfigurationError
        If an attr_type is not one of the supported types
    """
    time_function_start = datetime.now()
    validate_graph_object(graph)

    attrs = list(attr) if is_vector(attr) else [attr]
    values = expand_vector(value, len(attrs), "value")
    attr_types = expand_vector(attr_type, len(attrs), "attr_type")

    for item in attr_types:
        validate_parameter(item, ATTR_TYPES, "attr_type", "add_global_graph_attrs")

    new_attrs = pl.DataFrame(
        {
            "attr": [str(item) for item in attrs],
            "value": [None if item is None else str(item) for item in values],
            "attr_type": attr_types,
        },
        schema=GLOBAL_ATTRS_SCHEMA
    )

    kept = graph.global_attrs.join(new_attrs, on=["attr", "attr_type"], how="anti")
    global_attrs = pl.concat([kept, new_attrs], how="vertical")

    return commit_graph_change(
        graph.evolve(global_attrs=global_attrs),
        "add_global_graph_attrs",
        time_function_start
    )


def delete_global_graph_attrs(
    graph: Graph,
    attr: Optional[str] = None,
    attr_type: Optional[str] = None
) -> Graph:
    """
    Remove global attribute bindings.

    With no arguments every binding is removed; otherwise only bindings
    matching the given ``attr`` and/or ``attr_type``.
    """
    time_function_start = datetime.now()
    validate_graph_object(graph)

    if attr_type is not None:
        validate_parameter(attr_type, ATTR_TYPES, "attr_type", "delete_global_graph_attrs")

    condition = pl.lit(True)
    if attr is not None:
        condition = condition & (pl.col("attr") == attr)
    if attr_type is not None:
        condition = condition & (pl.col("attr_type") == attr_type)

    global_attrs = graph.global_attrs.filter(~condition)

    return commit_graph_change(
        graph.evolve(global_attrs=global_attrs),
        "delete_global_graph_attrs",
        time_function_start
    )


def get_global_graph_attr_info(graph: Graph) -> pl.DataFrame:
    """Return the global attribute bindings (``attr``, ``value``, ``attr_type``)."""
    validate_graph_object(graph)
    return graph.global_attrs


# Simple accessors

def get_node_df(graph: Graph) -> pl.DataFrame:
    validate_graph_object(graph)
    return graph.nodes_df


def get_edge_df(graph: Graph) -> pl.DataFrame:
    validate_graph_object(graph)
    return graph.edges_df


def get_graph_log(graph: Graph) -> pl.DataFrame:
    validate_graph_object(graph)
    return graph.graph_log


def count_nodes(graph: Graph) -> int:
    validate_graph_object(graph)
    return graph.nodes_df.height


def count_edges(graph: Graph) -> int:
    validate_graph_object(graph)
    return graph.edges_df.height


def get_node_ids(graph: Graph) -> List[int]:
    """Node ids in table order."""
    validate_graph_object(graph)
    return graph.nodes_df["id"].to_list()


def get_edge_ids(graph: Graph) -> List[int]:
    """Edge ids in table order."""
    validate_graph_object(graph)
    return graph.edges_df["id"].to_list()


def is_graph_empty(graph: Graph) -> bool:
    """A graph is empty when it has no nodes."""
    validate_graph_object(graph)
    return graph.nodes_df.is_empty()


def is_graph_directed(graph: Graph) -> bool:
    validate_graph_object(graph)
    return graph.directed
