"""
Tests for node and edge mutators.
"""

import polars as pl
import pytest

from tabgraph.common.exceptions import (
    EdgeNotFoundError,
    InvalidGraphObjectError,
    LengthMismatchError,
    NodeNotFoundError,
    ValidationError
)
from tabgraph.graph.construction import add_cycle, add_star, create_edge_df, create_node_df
from tabgraph.graph.core import create_graph
from tabgraph.graph.mutation import (
    add_edge,
    add_edge_df,
    add_n_nodes,
    add_node,
    add_node_df,
    delete_edge,
    delete_node,
    set_edge_attrs,
    set_node_attrs
)


class TestAddNodes:
    """Test node insertion."""

    def test_add_node(self):
        graph = add_node(create_graph(), type="person", label="ann", age=31)

        assert graph.nodes_df["id"].to_list() == [1]
        assert graph.nodes_df["label"].to_list() == ["ann"]
        assert graph.nodes_df["age"].to_list() == [31]
        assert graph.last_node == 1
        assert graph.graph_log["function_used"][-1] == "add_node"

    def test_add_node_without_label(self):
        graph = add_node(create_graph())
        assert graph.nodes_df["label"].to_list() == [None]

    def test_add_n_nodes(self):
        graph = add_n_nodes(add_star(create_graph(), n=4), n=3, type="extra")

        assert graph.nodes_df["id"].to_list() == [1, 2, 3, 4, 5, 6, 7]
        assert graph.nodes_df["type"].to_list()[-3:] == ["extra"] * 3
        assert graph.graph_log.height == 3

    def test_add_n_nodes_invalid(self):
        with pytest.raises(ValidationError):
            add_n_nodes(create_graph(), n=0)

    def test_add_node_df(self):
        graph = add_star(create_graph(), n=4)
        ndf = create_node_df(n=2, type="new", value=[1.5, 2.5])

        graph = add_node_df(graph, ndf)

        assert graph.nodes_df["id"].to_list() == [1, 2, 3, 4, 5, 6]
        assert graph.nodes_df["value"].to_list() == [None] * 4 + [1.5, 2.5]
        assert graph.last_node == 6

    def test_add_node_df_invalid(self):
        with pytest.raises(InvalidGraphObjectError):
            add_node_df(create_graph(), pl.DataFrame({"label": ["a"]}))


class TestAddEdges:
    """Test edge insertion."""

    def setup_method(self):
        self.graph = add_n_nodes(create_graph(), n=3)

    def test_add_edge(self):
        graph = add_edge(self.graph, from_=1, to=3, rel="knows", weight=0.5)

        assert graph.edges_df["id"].to_list() == [1]
        assert graph.edges_df["rel"].to_list() == ["knows"]
        assert graph.edges_df["weight"].to_list() == [0.5]
        assert graph.last_edge == 1

    def test_add_edge_unknown_node(self):
        with pytest.raises(NodeNotFoundError):
            add_edge(self.graph, from_=1, to=9)

    def test_add_edge_df(self):
        graph = add_edge(self.graph, from_=1, to=2)
        edf = create_edge_df(from_=[2, 3], to=[3, 1], rel="r")

        graph = add_edge_df(graph, edf)

        assert graph.edges_df["id"].to_list() == [1, 2, 3]
        assert graph.edges_df["from"].to_list() == [1, 2, 3]
        assert graph.last_edge == 3

    def test_add_edge_df_unknown_node(self):
        edf = create_edge_df(from_=[1], to=[4])
        with pytest.raises(NodeNotFoundError):
            add_edge_df(self.graph, edf)


class TestDelete:
    """Test node and edge deletion."""

    def setup_method(self):
        self.graph = add_star(create_graph(), n=4)

    def test_delete_node_removes_incident_edges(self):
        graph = delete_node(self.graph, 1)

        assert graph.nodes_df["id"].to_list() == [2, 3, 4]
        assert graph.edges_df.is_empty()
        assert graph.last_node == 4
        assert graph.last_edge == 3

    def test_delete_leaf(self):
        graph = delete_node(self.graph, 4)

        assert graph.edges_df["to"].to_list() == [2, 3]

    def test_delete_unknown_node(self):
        with pytest.raises(NodeNotFoundError):
            delete_node(self.graph, 10)

    def test_counters_never_decrease(self):
        graph = delete_node(self.graph, 4)
        graph = add_node(graph)

        assert graph.nodes_df["id"].to_list() == [1, 2, 3, 5]

    def test_delete_edge_by_id(self):
        graph = delete_edge(self.graph, id=2)

        assert graph.edges_df["id"].to_list() == [1, 3]
        assert graph.last_edge == 3

    def test_delete_edge_by_endpoints(self):
        graph = delete_edge(self.graph, from_=1, to=3)
        assert graph.edges_df["to"].to_list() == [2, 4]

    def test_delete_edge_direction_matters(self):
        with pytest.raises(EdgeNotFoundError):
            delete_edge(self.graph, from_=3, to=1)

    def test_delete_edge_undirected(self):
        graph = add_cycle(create_graph(directed=False), n=3)
        graph = delete_edge(graph, from_=2, to=1)

        assert graph.edges_df["id"].to_list() == [2, 3]

    def test_delete_edge_needs_arguments(self):
        with pytest.raises(ValidationError):
            delete_edge(self.graph, from_=1)

    def test_delete_unknown_edge(self):
        with pytest.raises(EdgeNotFoundError):
            delete_edge(self.graph, id=99)


class TestSetAttrs:
    """Test node and edge attribute setters."""

    def setup_method(self):
        self.graph = add_star(create_graph(), n=4)

    def test_set_all_nodes(self):
        graph = set_node_attrs(self.graph, "value", [1.0, 2.0, 3.0, 4.0])

        assert graph.nodes_df["value"].to_list() == [1.0, 2.0, 3.0, 4.0]
        assert graph.graph_log["function_used"][-1] == "set_node_attrs"

    def test_set_subset_of_nodes(self):
        graph = set_node_attrs(self.graph, "color", "red", nodes=[2, 4])
        assert graph.nodes_df["color"].to_list() == [None, "red", None, "red"]

        graph = set_node_attrs(graph, "color", ["blue"], nodes=[1])
        assert graph.nodes_df["color"].to_list() == ["blue", "red", None, "red"]

    def test_set_type(self):
        graph = set_node_attrs(self.graph, "type", "hub", nodes=[1])
        assert graph.nodes_df["type"].to_list() == ["hub", None, None, None]
        assert graph.nodes_df.columns[:3] == ["id", "type", "label"]

    def test_set_nodes_length_mismatch(self):
        with pytest.raises(LengthMismatchError):
            set_node_attrs(self.graph, "value", [1, 2], nodes=[1, 2, 3])

    def test_set_unknown_node(self):
        with pytest.raises(NodeNotFoundError):
            set_node_attrs(self.graph, "value", 1, nodes=[7])

    def test_set_protected_node_column(self):
        with pytest.raises(ValidationError):
            set_node_attrs(self.graph, "id", [5, 6, 7, 8])

    def test_set_edges(self):
        graph = set_edge_attrs(self.graph, "weight", [0.1, 0.2], edges=[1, 3])
        assert graph.edges_df["weight"].to_list() == [0.1, None, 0.2]

    @pytest.mark.parametrize("attr", ["id", "from", "to"])
    def test_set_protected_edge_column(self, attr):
        with pytest.raises(ValidationError):
            set_edge_attrs(self.graph, attr, 1)

    def test_set_unknown_edge(self):
        with pytest.raises(EdgeNotFoundError):
            set_edge_attrs(self.graph, "weight", 1.0, edges=[4])

    def test_input_unchanged(self):
        set_node_attrs(self.graph, "value", 1)
        assert "value" not in self.graph.nodes_df.columns
