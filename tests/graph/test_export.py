"""
Tests for graph snapshots and automatic backups.
"""

import json
import os
import shutil
import tempfile
from pathlib import Path

import pytest

from tabgraph.common.exceptions import DataFormatError
from tabgraph.graph.construction import add_cycle, add_star
from tabgraph.graph.core import add_global_graph_attrs, add_graph_action, create_graph
from tabgraph.graph.export import SNAPSHOT_FILES, load_graph, save_graph, write_backup
from tabgraph.graph.mutation import delete_node, set_node_attrs


class TestSnapshots:
    """Test save_graph and load_graph."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()

        graph = add_star(create_graph(graph_name="stars"), n=4, type="star")
        graph = add_cycle(graph, n=3, rel="ring")
        graph = set_node_attrs(graph, "value", [0.5, 1.0, 1.5, 2.0, 2.5, 3.0, 3.5])
        graph = delete_node(graph, 7)
        self.graph = add_global_graph_attrs(graph, "layout", "neato", "graph")

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_files_written(self):
        directory = save_graph(self.graph, os.path.join(self.temp_dir, "snap"))

        for name in SNAPSHOT_FILES.values():
            assert (directory / name).is_file()

        with open(directory / "graph.json", "r", encoding="utf-8") as f:
            metadata = json.load(f)
        assert metadata["directed"] is True
        assert metadata["last_node"] == 7
        assert metadata["graph_info"]["graph_name"] == "stars"

    def test_round_trip(self):
        path = os.path.join(self.temp_dir, "snap")
        save_graph(self.graph, path)

        loaded = load_graph(path)

        assert loaded.nodes_df.equals(self.graph.nodes_df)
        assert loaded.edges_df.equals(self.graph.edges_df)
        assert loaded.graph_log.equals(self.graph.graph_log)
        assert loaded.global_attrs.equals(self.graph.global_attrs)
        assert loaded.last_node == self.graph.last_node == 7
        assert loaded.last_edge == self.graph.last_edge
        assert loaded.directed == self.graph.directed
        assert loaded.graph_info.graph_id == self.graph.graph_info.graph_id

    def test_graph_actions_not_saved(self):
        graph = add_graph_action(self.graph, lambda g: g, action_name="noop")
        path = os.path.join(self.temp_dir, "snap")
        save_graph(graph, path)

        assert load_graph(path).graph_actions == []

    def test_empty_graph_round_trip(self):
        path = os.path.join(self.temp_dir, "empty")
        graph = create_graph(directed=False)
        save_graph(graph, path)

        loaded = load_graph(path)

        assert loaded.nodes_df.is_empty()
        assert loaded.nodes_df.schema == graph.nodes_df.schema
        assert not loaded.directed

    def test_missing_directory(self):
        with pytest.raises(DataFormatError, match="not found"):
            load_graph(os.path.join(self.temp_dir, "nowhere"))

    def test_missing_file(self):
        path = Path(save_graph(self.graph, os.path.join(self.temp_dir, "snap")))
        (path / "edges.parquet").unlink()

        with pytest.raises(DataFormatError, match="missing files"):
            load_graph(path)

    def test_corrupt_metadata(self):
        path = Path(save_graph(self.graph, os.path.join(self.temp_dir, "snap")))
        (path / "graph.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(DataFormatError, match="metadata"):
            load_graph(path)

    def test_inconsistent_counters(self):
        path = Path(save_graph(self.graph, os.path.join(self.temp_dir, "snap")))
        metadata = json.loads((path / "graph.json").read_text(encoding="utf-8"))
        metadata["last_node"] = 1
        (path / "graph.json").write_text(json.dumps(metadata), encoding="utf-8")

        with pytest.raises(DataFormatError, match="valid graph"):
            load_graph(path)


class TestBackups:
    """Test automatic backups after mutations."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_backup_after_each_mutation(self):
        graph = create_graph(write_backups=True, backup_dir=self.temp_dir)
        graph = add_star(graph, n=4)

        graph_id = graph.graph_info.graph_id
        backups = sorted(os.listdir(self.temp_dir))

        assert backups == [f"{graph_id}_v1", f"{graph_id}_v2"]
        assert load_graph(os.path.join(self.temp_dir, f"{graph_id}_v2")).nodes_df.height == 4

    def test_no_backups_by_default(self, monkeypatch):
        monkeypatch.delenv("TABGRAPH_WRITE_BACKUPS", raising=False)

        add_star(create_graph(backup_dir=self.temp_dir), n=4)

        assert os.listdir(self.temp_dir) == []

    def test_failed_backup_does_not_raise(self):
        blocker = os.path.join(self.temp_dir, "blocker")
        with open(blocker, "w", encoding="utf-8") as f:
            f.write("not a directory")

        graph = create_graph(write_backups=True, backup_dir=blocker)
        graph = add_star(graph, n=4)

        assert graph.nodes_df.height == 4
        assert graph.graph_log.height == 2

    def test_write_backup_directly(self):
        graph = add_star(create_graph(backup_dir=self.temp_dir), n=4)
        write_backup(graph)

        assert os.listdir(self.temp_dir) == [f"{graph.graph_info.graph_id}_v2"]

    def test_invalid_graph_backup_does_not_raise(self):
        graph = add_star(create_graph(backup_dir=self.temp_dir), n=4)
        broken = graph.evolve(last_node=0)

        write_backup(broken)

        assert os.listdir(self.temp_dir) == []
