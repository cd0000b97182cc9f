"""
Action log for graph containers.

Every mutating call appends one row to the graph's log: the version number,
the function that made the change, when it started, how long it took and the
node/edge counts afterwards. Rows are never updated or removed.
"""

from datetime import datetime
from typing import Optional

import polars as pl

LOG_SCHEMA = {
    "version_id": pl.Int64,
    "function_used": pl.Utf8,
    "time_modified": pl.Datetime("us"),
    "duration": pl.Float64,
    "nodes": pl.Int64,
    "edges": pl.Int64,
}


def create_empty_log() -> pl.DataFrame:
    """Return an action log with no entries."""
    return pl.DataFrame(schema=LOG_SCHEMA)


def graph_function_duration(time_start: datetime, now: Optional[datetime] = None) -> float:
    """Seconds elapsed since ``time_start``."""
    now = now or datetime.now()
    return (now - time_start).total_seconds()


def add_action_to_log(
    graph_log: pl.DataFrame,
    function_used: str,
    time_modified: datetime,
    nodes: int,
    edges: int
) -> pl.DataFrame:
    """
    Append one entry to an action log.

    Parameters
    ----------
    graph_log : pl.DataFrame
        Existing log (not modified)
    function_used : str
        Name of the mutating function
    time_modified : datetime
        When the mutating call started
    nodes : int
        Node count after the change
    edges : int
        Edge count after the change

    Returns
    -------
    pl.DataFrame
        New log with ``version_id = len(graph_log) + 1``

    Examples
    --------
    >>> log = add_action_to_log(create_empty_log(), "add_star", datetime.now(), 4, 3)
    >>> log["version_id"].to_list()
    [1]
    """
    entry = pl.DataFrame(
        {
            "version_id": [graph_log.height + 1],
            "function_used": [function_used],
            "time_modified": [time_modified],
            "duration": [graph_function_duration(time_modified)],
            "nodes": [nodes],
            "edges": [edges],
        },
        schema=LOG_SCHEMA
    )
    return pl.concat([graph_log, entry], how="vertical")
