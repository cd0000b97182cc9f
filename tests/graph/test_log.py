"""
Tests for the action log.
"""

from datetime import datetime, timedelta

from tabgraph.graph.combine import combine_graphs
from tabgraph.graph.construction import add_cycle, add_path, add_star
from tabgraph.graph.core import create_graph
from tabgraph.graph.log import (
    LOG_SCHEMA,
    add_action_to_log,
    create_empty_log,
    graph_function_duration
)
from tabgraph.graph.mutation import delete_node


class TestAddActionToLog:
    """Test add_action_to_log."""

    def test_empty_log_schema(self):
        graph_log = create_empty_log()
        assert graph_log.is_empty()
        assert dict(graph_log.schema) == LOG_SCHEMA

    def test_version_ids_increase(self):
        graph_log = create_empty_log()
        for count in range(3):
            graph_log = add_action_to_log(graph_log, "add_star", datetime.now(), 4 * (count + 1), 3)

        assert graph_log["version_id"].to_list() == [1, 2, 3]
        assert graph_log["nodes"].to_list() == [4, 8, 12]

    def test_input_log_unchanged(self):
        graph_log = create_empty_log()
        add_action_to_log(graph_log, "add_star", datetime.now(), 4, 3)
        assert graph_log.is_empty()

    def test_duration(self):
        start = datetime.now() - timedelta(seconds=2)
        graph_log = add_action_to_log(create_empty_log(), "add_path", start, 2, 1)

        assert graph_log["duration"][0] >= 2.0
        assert graph_function_duration(start, now=start + timedelta(seconds=1.5)) == 1.5


class TestGraphLog:
    """Every mutating call appends exactly one entry."""

    def test_sequence_of_calls(self):
        graph = create_graph()
        graph = add_star(graph, n=4)
        graph = add_cycle(graph, n=3)
        graph = delete_node(graph, 1)

        graph_log = graph.graph_log
        assert graph_log["version_id"].to_list() == [1, 2, 3, 4]
        assert graph_log["function_used"].to_list() == [
            "create_graph", "add_star", "add_cycle", "delete_node"
        ]
        assert graph_log["nodes"].to_list() == [0, 4, 7, 6]
        assert graph_log["edges"].to_list() == [0, 3, 6, 3]

    def test_combine_keeps_base_log(self):
        g1 = add_path(create_graph(), n=2)
        g2 = add_path(create_graph(), n=3)

        combined = combine_graphs(g1, g2)

        assert combined.graph_log.height == g1.graph_log.height + 1
        assert combined.graph_log["function_used"][-1] == "combine_graphs"
