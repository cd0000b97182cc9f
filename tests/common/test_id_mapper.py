"""
Tests for the IDMapper class.

This module covers:
- Basic mapping functionality
- Construction from node ids
- Error conditions
"""

import pytest

from tabgraph.common.id_mapper import IDMapper


class TestIDMapperBasic:
    """Test basic IDMapper functionality."""

    def test_empty_mapper(self):
        """Test empty mapper initialization and properties."""
        mapper = IDMapper()

        assert len(mapper) == 0
        assert repr(mapper) == "IDMapper(size=0)"

    def test_add_single_mapping(self):
        """Test adding a single mapping."""
        mapper = IDMapper()
        mapper.add_mapping(7, 0)

        assert len(mapper) == 1
        assert mapper.get_internal(7) == 0
        assert mapper.internal_to_original == {0: 7}

    def test_from_node_ids_with_gaps(self):
        """Node ids with gaps map to consecutive indices in order."""
        mapper = IDMapper.from_node_ids([1, 2, 5, 9])

        assert [mapper.get_internal(node_id) for node_id in [1, 2, 5, 9]] == [0, 1, 2, 3]
        assert len(mapper) == 4


class TestIDMapperErrors:
    """Test error conditions."""

    def setup_method(self):
        self.mapper = IDMapper.from_node_ids([10, 20])

    def test_unknown_original(self):
        with pytest.raises(KeyError, match="not found"):
            self.mapper.get_internal(30)

    def test_duplicate_original(self):
        with pytest.raises(ValueError, match="already mapped"):
            self.mapper.add_mapping(10, 2)

    def test_duplicate_internal(self):
        with pytest.raises(ValueError, match="already mapped"):
            self.mapper.add_mapping(30, 1)

    def test_negative_internal(self):
        with pytest.raises(ValueError, match="non-negative"):
            self.mapper.add_mapping(30, -1)

    def test_non_integer_internal(self):
        with pytest.raises(TypeError):
            self.mapper.add_mapping(30, "2")
