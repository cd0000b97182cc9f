"""
Tests for the graph container, graph actions, global attributes and
accessors.
"""

import polars as pl
import pytest

from tabgraph.common.exceptions import (
    ConfigurationError,
    InvalidGraphObjectError,
    LengthMismatchError,
    ValidationError
)
from tabgraph.graph.construction import add_path, add_star, create_edge_df, create_node_df
from tabgraph.graph.core import (
    Graph,
    GraphInfo,
    add_global_graph_attrs,
    add_graph_action,
    count_edges,
    count_nodes,
    create_graph,
    delete_global_graph_attrs,
    delete_graph_actions,
    get_edge_df,
    get_edge_ids,
    get_global_graph_attr_info,
    get_graph_actions,
    get_graph_log,
    get_node_df,
    get_node_ids,
    is_graph_directed,
    is_graph_empty,
    trigger_graph_actions
)
from tabgraph.graph.mutation import add_node, set_node_attrs


class TestCreateGraph:
    """Test create_graph."""

    def test_empty_graph(self):
        graph = create_graph()

        assert count_nodes(graph) == 0
        assert count_edges(graph) == 0
        assert graph.last_node == 0
        assert graph.last_edge == 0
        assert is_graph_empty(graph)
        assert is_graph_directed(graph)
        assert get_node_df(graph).columns == ["id", "type", "label"]
        assert get_edge_df(graph).columns == ["id", "from", "to", "rel"]

    def test_log_has_create_entry(self):
        graph_log = get_graph_log(create_graph())

        assert graph_log.height == 1
        assert graph_log["function_used"].to_list() == ["create_graph"]
        assert graph_log["version_id"].to_list() == [1]

    def test_from_tables(self):
        ndf = create_node_df(n=4, type=["A", "A", "B", "C"], value=[1.0, 2.0, 3.0, 4.0])
        edf = create_edge_df(from_=[1, 3, 3, 4], to=[2, 2, 1, 3], rel="X")

        graph = create_graph(nodes_df=ndf, edges_df=edf, directed=False)

        assert count_nodes(graph) == 4
        assert count_edges(graph) == 4
        assert graph.last_node == 4
        assert graph.last_edge == 4
        assert not is_graph_directed(graph)
        assert "value" in get_node_df(graph).columns

    def test_dangling_edges_rejected(self):
        ndf = create_node_df(n=2)
        edf = create_edge_df(from_=[1], to=[3])

        with pytest.raises(InvalidGraphObjectError):
            create_graph(nodes_df=ndf, edges_df=edf)

    def test_graph_info(self):
        graph = create_graph(graph_name="my_graph", write_backups=False, backup_dir="/tmp/x")

        assert graph.graph_info.graph_name == "my_graph"
        assert graph.graph_info.backup_dir == "/tmp/x"
        assert len(graph.graph_info.graph_id) == 8

    def test_default_graph_name(self):
        info = GraphInfo(graph_id="abc12345")
        assert info.graph_name == "graph_abc12345"

    def test_graph_info_round_trip(self):
        info = GraphInfo(graph_name="g", write_backups=True, backup_dir="/tmp/b")
        restored = GraphInfo.from_dict(info.to_dict())

        assert restored.graph_id == info.graph_id
        assert restored.graph_time == info.graph_time
        assert restored.write_backups is True


class TestGraphValue:
    """Graphs behave as values."""

    def test_directed_is_read_only(self):
        graph = create_graph()
        with pytest.raises(AttributeError):
            graph.directed = False

    def test_evolve_rejects_directedness_change(self):
        with pytest.raises(InvalidGraphObjectError):
            create_graph().evolve(directed=False)

    def test_mutation_leaves_input_untouched(self):
        graph = add_star(create_graph(), n=4)
        nodes_before = graph.nodes_df.clone()
        log_before = graph.graph_log.height

        add_node(graph, label="extra")

        assert graph.nodes_df.equals(nodes_before)
        assert graph.graph_log.height == log_before
        assert graph.last_node == 4

    def test_repr(self):
        assert "nodes=4" in repr(add_star(create_graph(), n=4))

    def test_accessors(self):
        graph = add_path(create_graph(), n=3)
        assert get_node_ids(graph) == [1, 2, 3]
        assert get_edge_ids(graph) == [1, 2]


class TestGraphActions:
    """Test registration and triggering of graph actions."""

    def setup_method(self):
        self.graph = add_star(create_graph(), n=4)

    @staticmethod
    def mark_nodes(graph):
        return set_node_attrs(graph, "marked", True)

    def test_add_and_list(self):
        graph = add_graph_action(self.graph, self.mark_nodes, action_name="mark")
        actions = get_graph_actions(graph)

        assert actions["action_name"].to_list() == ["mark"]
        assert actions["action_index"].to_list() == [1]
        # Registration itself is not logged
        assert graph.graph_log.height == self.graph.graph_log.height

    def test_default_name(self):
        graph = add_graph_action(self.graph, self.mark_nodes)
        assert get_graph_actions(graph)["action_name"].to_list() == ["mark_nodes"]

    def test_duplicate_name(self):
        graph = add_graph_action(self.graph, self.mark_nodes, action_name="mark")
        with pytest.raises(ValidationError, match="already exists"):
            add_graph_action(graph, self.mark_nodes, action_name="mark")

    def test_not_callable(self):
        with pytest.raises(ValidationError, match="callable"):
            add_graph_action(self.graph, "mark")

    def test_actions_run_after_mutation(self):
        graph = add_graph_action(self.graph, self.mark_nodes, action_name="mark")
        graph = add_node(graph)

        assert graph.nodes_df["marked"].to_list() == [True] * 5
        functions = graph.graph_log["function_used"].to_list()
        assert functions[-2:] == ["add_node", "set_node_attrs"]
        # Still registered afterwards
        assert get_graph_actions(graph).height == 1

    def test_actions_run_in_order(self):
        def first(graph):
            return set_node_attrs(graph, "step", "first")

        def second(graph):
            return set_node_attrs(graph, "step", "second")

        graph = add_graph_action(self.graph, first)
        graph = add_graph_action(graph, second)
        graph = trigger_graph_actions(graph)

        assert set(graph.nodes_df["step"].to_list()) == {"second"}

    def test_action_must_return_graph(self):
        graph = add_graph_action(self.graph, lambda g: None, action_name="broken")
        with pytest.raises(InvalidGraphObjectError, match="broken"):
            add_node(graph)

    def test_action_leaving_dangling_edges(self):
        def drop_hub(graph):
            return graph.evolve(nodes_df=graph.nodes_df.filter(pl.col("id") != 1))

        graph = add_graph_action(self.graph, drop_hub)
        with pytest.raises(InvalidGraphObjectError, match="drop_hub"):
            add_path(graph, n=2)

    def test_action_breaking_counters(self):
        def reset_counter(graph):
            return graph.evolve(last_node=0)

        graph = add_graph_action(self.graph, reset_counter)
        with pytest.raises(InvalidGraphObjectError, match="last_node"):
            add_node(graph)

    def test_delete(self):
        graph = add_graph_action(self.graph, self.mark_nodes, action_name="mark")
        graph = delete_graph_actions(graph, "mark")

        assert get_graph_actions(graph).is_empty()
        with pytest.raises(ValidationError, match="not found"):
            delete_graph_actions(graph, ["mark"])


class TestGlobalAttrs:
    """Test global attribute bindings."""

    def test_add_and_read(self):
        graph = add_global_graph_attrs(
            create_graph(),
            attr=["layout", "fontsize"],
            value=["neato", 10],
            attr_type=["graph", "node"]
        )
        info = get_global_graph_attr_info(graph)

        assert info["attr"].to_list() == ["layout", "fontsize"]
        assert info["value"].to_list() == ["neato", "10"]
        assert graph.graph_log["function_used"][-1] == "add_global_graph_attrs"

    def test_replace_existing_binding(self):
        graph = add_global_graph_attrs(create_graph(), "layout", "neato", "graph")
        graph = add_global_graph_attrs(graph, "layout", "dot", "graph")

        info = get_global_graph_attr_info(graph)
        assert info.height == 1
        assert info["value"].to_list() == ["dot"]

    def test_invalid_attr_type(self):
        with pytest.raises(ConfigurationError):
            add_global_graph_attrs(create_graph(), "layout", "dot", "vertex")

    def test_length_mismatch(self):
        with pytest.raises(LengthMismatchError):
            add_global_graph_attrs(create_graph(), ["a", "b"], [1, 2, 3], "graph")

    def test_delete(self):
        graph = add_global_graph_attrs(
            create_graph(), ["layout", "color"], ["dot", "red"], ["graph", "node"]
        )

        only_graph = delete_global_graph_attrs(graph, attr_type="node")
        assert get_global_graph_attr_info(only_graph)["attr"].to_list() == ["layout"]

        cleared = delete_global_graph_attrs(graph)
        assert get_global_graph_attr_info(cleared).is_empty()
