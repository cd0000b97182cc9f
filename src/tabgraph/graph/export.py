"""
Graph snapshots and automatic backups.

A snapshot is a directory holding the node, edge, log and global attribute
tables as Parquet files plus a ``graph.json`` file with the directedness,
id counters and graph info. Graph actions are callables and are not saved.
"""

from pathlib import Path
from typing import Union
import json

import polars as pl

from ..common.exceptions import DataFormatError, GraphError
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer
from ..common.validators import validate_graph_object
from .core import Graph, GraphInfo
from .log import LOG_SCHEMA

logger = get_logger(__name__)

SNAPSHOT_FILES = {
    "nodes": "nodes.parquet",
    "edges": "edges.parquet",
    "log": "log.parquet",
    "global_attrs": "global_attrs.parquet",
    "metadata": "graph.json",
}
SNAPSHOT_FORMAT_VERSION = 1


def save_graph(graph: Graph, path: Union[str, Path]) -> Path:
    """
    Write a graph snapshot to a directory.

    Parameters
    ----------
    graph : Graph
        Graph to save
    path : str or Path
        Target directory; created when missing, existing snapshot files are
        overwritten

    Returns
    -------
    Path
        The snapshot directory

    Examples
    --------
    >>> save_graph(graph, "snapshots/my_graph")  # doctest: +SKIP
    """
    log_function_entry("save_graph", path=str(path))
    validate_graph_object(graph)

    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)

    with LoggingTimer("save_graph", {"nodes": graph.nodes_df.height, "edges": graph.edges_df.height}):
        graph.nodes_df.write_parquet(directory / SNAPSHOT_FILES["nodes"])
        graph.edges_df.write_parquet(directory / SNAPSHOT_FILES["edges"])
        graph.graph_log.write_parquet(directory / SNAPSHOT_FILES["log"])
        graph.global_attrs.write_parquet(directory / SNAPSHOT_FILES["global_attrs"])

        metadata = {
            "format_version": SNAPSHOT_FORMAT_VERSION,
            "directed": graph.directed,
            "last_node": graph.last_node,
            "last_edge": graph.last_edge,
            "graph_info": graph.graph_info.to_dict(),
        }
        with open(directory / SNAPSHOT_FILES["metadata"], "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2)

    if graph.graph_actions:
        logger.debug("Graph actions are not saved: %s", [a.action_name for a in graph.graph_actions])

    logger.info("Graph snapshot written to %s", directory)

    return directory


def load_graph(path: Union[str, Path]) -> Graph:
    """
    Read a graph snapshot written by save_graph().

    Returns
    -------
    Graph
        Graph with the saved tables, counters, log, global attributes and
        info; no graph actions

    Raises
    ------
    DataFormatError
        If the directory, a snapshot file or a metadata field is missing or
        unreadable, or the restored graph is inconsistent
    """
    log_function_entry("load_graph", path=str(path))

    directory = Path(path)
    if not directory.is_dir():
        raise DataFormatError(
            f"Snapshot directory not found: {directory}",
            format_type="snapshot",
            file_path=str(directory)
        )

    missing = [name for name in SNAPSHOT_FILES.values() if not (directory / name).is_file()]
    if missing:
        raise DataFormatError(
            f"Snapshot is missing files: {missing}",
            format_type="snapshot",
            file_path=str(directory)
        )

    metadata_path = directory / SNAPSHOT_FILES["metadata"]
    try:
        with open(metadata_path, "r", encoding="utf-8") as f:
            metadata = json.load(f)
        directed = bool(metadata["directed"])
        last_node = int(metadata["last_node"])
        last_edge = int(metadata["last_edge"])
        graph_info = GraphInfo.from_dict(metadata["graph_info"])
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise DataFormatError(
            f"Invalid snapshot metadata: {str(e)}",
            format_type="json",
            file_path=str(metadata_path),
            cause=e
        )

    tables = {}
    for key in ["nodes", "edges", "log", "global_attrs"]:
        table_path = directory / SNAPSHOT_FILES[key]
        try:
            tables[key] = pl.read_parquet(table_path)
        except (OSError, pl.exceptions.PolarsError) as e:
            raise DataFormatError(
                f"Cannot read snapshot table '{key}': {str(e)}",
                format_type="parquet",
                file_path=str(table_path),
                cause=e
            )

    graph_log = tables["log"]
    if list(graph_log.columns) != list(LOG_SCHEMA):
        raise DataFormatError(
            f"Unexpected action log columns: {graph_log.columns}",
            format_type="parquet",
            file_path=str(directory / SNAPSHOT_FILES["log"])
        )

    graph = Graph(
        nodes_df=tables["nodes"],
        edges_df=tables["edges"],
        directed=directed,
        last_node=last_node,
        last_edge=last_edge,
        global_attrs=tables["global_attrs"],
        graph_log=graph_log.cast(LOG_SCHEMA),
        graph_info=graph_info
    )

    try:
        validate_graph_object(graph)
    except GraphError as e:
        raise DataFormatError(
            f"Snapshot does not hold a valid graph: {str(e)}",
            format_type="snapshot",
            file_path=str(directory),
            cause=e
        )

    logger.info("Graph snapshot loaded from %s", directory)

    return graph


def write_backup(graph: Graph) -> None:
    """
    Save a snapshot of the graph into its backup directory.

    The snapshot is named ``<graph_id>_v<version_id>`` after the latest log
    entry. Errors are logged as warnings and never propagate, so a failed
    backup does not undo the change that triggered it.
    """
    version_id = graph.graph_log.height
    target = Path(graph.graph_info.backup_dir) / f"{graph.graph_info.graph_id}_v{version_id}"

    try:
        save_graph(graph, target)
    except (OSError, pl.exceptions.PolarsError, GraphError) as e:
        logger.warning("Failed to write backup %s: %s", target, e)
        return

    logger.debug("Backup written to %s", target)
