"""
Graph container, constructors, mutators, measures, aggregation and
persistence.
"""

from .core import (
    Graph,
    GraphInfo,
    GraphAction,
    create_graph,
    add_graph_action,
    delete_graph_actions,
    get_graph_actions,
    trigger_graph_actions,
    add_global_graph_attrs,
    delete_global_graph_attrs,
    get_global_graph_attr_info,
    get_node_df,
    get_edge_df,
    get_graph_log,
    count_nodes,
    count_edges,
    get_node_ids,
    get_edge_ids,
    is_graph_empty,
    is_graph_directed,
)
from .log import add_action_to_log
from .combine import combine_graphs
from .construction import (
    create_node_df,
    create_edge_df,
    add_star,
    add_cycle,
    add_path,
    add_nodes_from_df_cols,
    create_random_graph,
)
from .mutation import (
    add_node,
    add_n_nodes,
    add_node_df,
    add_edge,
    add_edge_df,
    delete_node,
    delete_edge,
    set_node_attrs,
    set_edge_attrs,
)
from .analysis import (
    to_networkit,
    get_degree_in,
    get_degree_out,
    get_degree_total,
    get_coreness,
    get_adjacency_matrix,
    node_info,
    edge_info,
)
from .filtering import Filter, parse_filter, filter_table
from .aggregation import (
    aggregate,
    aggregate_node_attr,
    aggregate_edge_attr,
    get_agg_degree_out,
    get_agg_degree_in,
    get_agg_degree_total,
)
from .export import save_graph, load_graph, write_backup

__all__ = [
    "Graph",
    "GraphInfo",
    "GraphAction",
    "create_graph",
    "add_graph_action",
    "delete_graph_actions",
    "get_graph_actions",
    "trigger_graph_actions",
    "add_global_graph_attrs",
    "delete_global_graph_attrs",
    "get_global_graph_attr_info",
    "get_node_df",
    "get_edge_df",
    "get_graph_log",
    "count_nodes",
    "count_edges",
    "get_node_ids",
    "get_edge_ids",
    "is_graph_empty",
    "is_graph_directed",
    "add_action_to_log",
    "combine_graphs",
    "create_node_df",
    "create_edge_df",
    "add_star",
    "add_cycle",
    "add_path",
    "add_nodes_from_df_cols",
    "create_random_graph",
    "add_node",
    "add_n_nodes",
    "add_node_df",
    "add_edge",
    "add_edge_df",
    "delete_node",
    "delete_edge",
    "set_node_attrs",
    "set_edge_attrs",
    "to_networkit",
    "get_degree_in",
    "get_degree_out",
    "get_degree_total",
    "get_coreness",
    "get_adjacency_matrix",
    "node_info",
    "edge_info",
    "Filter",
    "parse_filter",
    "filter_table",
    "aggregate",
    "aggregate_node_attr",
    "aggregate_edge_attr",
    "get_agg_degree_out",
    "get_agg_degree_in",
    "get_agg_degree_total",
    "save_graph",
    "load_graph",
    "write_backup",
]
