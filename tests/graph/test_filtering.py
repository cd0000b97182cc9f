"""
Tests for table filters.
"""

import polars as pl
import pytest

from tabgraph.common.exceptions import ColumnNotFoundError, ConfigurationError, ValidationError
from tabgraph.graph.construction import add_star
from tabgraph.graph.core import create_graph
from tabgraph.graph.filtering import Filter, filter_table, parse_filter


class TestParseFilter:
    """Test parsing of filter strings."""

    @pytest.mark.parametrize("condition, expected", [
        ("value > 5", Filter("value", ">", 5)),
        ("value>=2.5", Filter("value", ">=", 2.5)),
        ("type == 'a'", Filter("type", "==", "a")),
        ('label != "x y"', Filter("label", "!=", "x y")),
        ("flag == True", Filter("flag", "==", True)),
        ("type == null", Filter("type", "==", None)),
        ("type == person", Filter("type", "==", "person")),
        ("value <= -1", Filter("value", "<=", -1)),
    ])
    def test_valid(self, condition, expected):
        assert parse_filter(condition) == expected

    @pytest.mark.parametrize("condition", ["value", "value >", "> 5", "value = 5", "1value > 2"])
    def test_invalid(self, condition):
        with pytest.raises(ValidationError, match="Cannot parse filter"):
            parse_filter(condition)

    def test_filter_passthrough(self):
        condition = Filter("value", "<", 3)
        assert parse_filter(condition) is condition

    def test_not_a_filter(self):
        with pytest.raises(ValidationError):
            parse_filter(5)


class TestFilter:
    """Test the Filter type."""

    def test_unknown_operator(self):
        with pytest.raises(ConfigurationError):
            Filter("value", "=~", 3)

    def test_null_with_ordering_operator(self):
        with pytest.raises(ValidationError):
            Filter("value", ">", None)

    def test_repr(self):
        assert repr(Filter("value", ">", 5)) == "Filter('value', '>', 5)"


class TestFilterTable:
    """Test filter_table."""

    def setup_method(self):
        self.table = pl.DataFrame({
            "id": [1, 2, 3, 4, 5],
            "type": ["a", "b", "a", None, "a"],
            "value": [1.0, 6.0, 7.5, 3.0, None],
        })

    def test_no_filters(self):
        assert filter_table(self.table).equals(self.table)
        assert filter_table(self.table, []).equals(self.table)

    def test_single_string(self):
        result = filter_table(self.table, "value > 5")
        assert result["id"].to_list() == [2, 3]

    def test_filters_are_anded(self):
        result = filter_table(self.table, ["value > 2", Filter("type", "==", "a")])
        assert result["id"].to_list() == [3]

    def test_null_matching(self):
        assert filter_table(self.table, "type == None")["id"].to_list() == [4]
        assert filter_table(self.table, "value != None")["id"].to_list() == [1, 2, 3, 4]

    def test_nulls_never_match_comparisons(self):
        result = filter_table(self.table, "value < 100")
        assert 5 not in result["id"].to_list()

    def test_unknown_column(self):
        with pytest.raises(ColumnNotFoundError):
            filter_table(self.table, "weight > 1")

    def test_order_preserved(self):
        result = filter_table(self.table, "type == 'a'")
        assert result["id"].to_list() == [1, 3, 5]

    def test_number_against_text_column(self):
        nodes = add_star(create_graph(), n=4).nodes_df

        assert filter_table(nodes, "label == 1")["id"].to_list() == [1]
        assert filter_table(nodes, ["label != 1", "id < 4"])["id"].to_list() == [2, 3]

    def test_number_against_numeric_column_unchanged(self):
        result = filter_table(self.table, Filter("value", ">", 6))
        assert result["id"].to_list() == [3]
