"""
Graph-level settings for the tabgraph library.

Settings are resolved the same way as the logging configuration: explicit
arguments win over environment variables, which win over defaults.
"""

import os
from typing import Any, Dict, Optional


DEFAULT_WRITE_BACKUPS = False
DEFAULT_BACKUP_DIR = "graph_backups"

# Environment variable names
ENV_WRITE_BACKUPS = "TABGRAPH_WRITE_BACKUPS"
ENV_BACKUP_DIR = "TABGRAPH_BACKUP_DIR"


def _get_bool_env(env_var: str, default: bool) -> bool:
    """Parse boolean from environment variable."""
    value = os.getenv(env_var, "").lower()
    if value in ("true", "yes", "1", "on"):
        return True
    elif value in ("false", "no", "0", "off"):
        return False
    else:
        return default


def resolve_graph_settings(
    write_backups: Optional[bool] = None,
    backup_dir: Optional[str] = None
) -> Dict[str, Any]:
    """
    Resolve backup settings for a new graph.

    Parameters
    ----------
    write_backups : bool, optional
        Whether a snapshot is written after every mutating call. If None,
        uses TABGRAPH_WRITE_BACKUPS or defaults to False.
    backup_dir : str, optional
        Directory receiving the snapshots. If None, uses TABGRAPH_BACKUP_DIR
        or defaults to 'graph_backups'.

    Returns
    -------
    Dict[str, Any]
        Dictionary with keys 'write_backups' and 'backup_dir'

    Examples
    --------
    >>> resolve_graph_settings(write_backups=True, backup_dir="/tmp/snapshots")
    {'write_backups': True, 'backup_dir': '/tmp/snapshots'}
    """
    if write_backups is None:
        write_backups = _get_bool_env(ENV_WRITE_BACKUPS, DEFAULT_WRITE_BACKUPS)

    backup_dir = backup_dir or os.getenv(ENV_BACKUP_DIR, DEFAULT_BACKUP_DIR)

    return {
        "write_backups": bool(write_backups),
        "backup_dir": backup_dir,
    }
