"""
Row filters for node and edge tables.

A filter is a ``(field, op, value)`` triple compiled to a Polars expression.
Filters can also be written as strings such as ``"value > 5"`` or
``"type == 'a'"``. Several filters are combined with AND.
"""

from typing import Any, List, Optional, Sequence, Union
import re

import polars as pl

from ..common.exceptions import ColumnNotFoundError, ValidationError, validate_parameter
from ..common.logging_config import get_logger

logger = get_logger(__name__)

SUPPORTED_OPERATORS = ["==", "!=", "<", "<=", ">", ">="]

_FILTER_PATTERN = re.compile(r"^\s*([A-Za-z_][\w.]*)\s*(==|!=|<=|>=|<|>)\s*(.+?)\s*$")


class Filter:
    """
    A single comparison between a table column and a literal.

    Parameters
    ----------
    field : str
        Column name
    op : str
        One of ``==``, ``!=``, ``<``, ``<=``, ``>``, ``>=``
    value : Any
        Literal to compare against; None matches nulls with ``==`` and
        non-nulls with ``!=``

    Examples
    --------
    >>> Filter("value", ">", 5).to_expression()  # doctest: +SKIP
    """

    def __init__(self, field: str, op: str, value: Any) -> None:
        validate_parameter(op, SUPPORTED_OPERATORS, "op", "Filter")
        if not isinstance(field, str) or not field:
            raise ValidationError("Filter field must be a non-empty string", field="field", value=field)
        if value is None and op not in ("==", "!="):
            raise ValidationError(
                f"Null can only be compared with '==' or '!=', not '{op}'",
                field=field,
                value=op
            )

        self.field = field
        self.op = op
        self.value = value

    def to_expression(self, dtype: Optional[pl.DataType] = None) -> pl.Expr:
        """
        Compile the filter to a Polars expression.

        When the column dtype is given and the column holds text, a non-text
        literal is compared as text, so ``label == 1`` matches the label "1".
        """
        column = pl.col(self.field)
        value = self.value

        if value is None:
            return column.is_null() if self.op == "==" else column.is_not_null()

        if dtype == pl.Utf8 and not isinstance(value, str):
            value = str(value)

        if self.op == "==":
            return column == value
        if self.op == "!=":
            return column != value
        if self.op == "<":
            return column < value
        if self.op == "<=":
            return column <= value
        if self.op == ">":
            return column > value
        return column >= value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Filter):
            return NotImplemented
        return (self.field, self.op, self.value) == (other.field, other.op, other.value)

    def __hash__(self) -> int:
        return hash((self.field, self.op, self.value))

    def __repr__(self) -> str:
        return f"Filter({self.field!r}, {self.op!r}, {self.value!r})"


FilterLike = Union[Filter, str]


def _parse_literal(text: str) -> Any:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1]
    if text in ("None", "null", "NULL", "NA"):
        return None
    if text in ("True", "TRUE", "true"):
        return True
    if text in ("False", "FALSE", "false"):
        return False
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        # Bare words compare as text
        return text


def parse_filter(condition: FilterLike) -> Filter:
    """
    Turn a filter string like ``"value >= 2.5"`` into a Filter.

    Quoted literals are text; unquoted literals are read as null, booleans,
    integers or floats where possible and as text otherwise.

    Raises
    ------
    ValidationError
        If the string is not of the form ``field op literal``
    """
    if isinstance(condition, Filter):
        return condition

    if not isinstance(condition, str):
        raise ValidationError(
            f"Filters must be Filter objects or strings, got {type(condition).__name__}",
            field="filters",
            value=condition
        )

    match = _FILTER_PATTERN.match(condition)
    if match is None:
        raise ValidationError(
            f"Cannot parse filter '{condition}'",
            field="filters",
            value=condition,
            expected="'field op literal' with op in " + ", ".join(SUPPORTED_OPERATORS)
        )

    field, op, literal = match.groups()
    return Filter(field, op, _parse_literal(literal))


def normalize_filters(filters: Optional[Union[FilterLike, Sequence[FilterLike]]]) -> List[Filter]:
    """Accept None, a single filter or a sequence of filters."""
    if filters is None:
        return []
    if isinstance(filters, (Filter, str)):
        return [parse_filter(filters)]
    return [parse_filter(condition) for condition in filters]


def filter_table(
    table: pl.DataFrame,
    filters: Optional[Union[FilterLike, Sequence[FilterLike]]] = None
) -> pl.DataFrame:
    """
    Keep the rows of a table that satisfy every filter.

    Parameters
    ----------
    table : pl.DataFrame
        Node or edge table
    filters : Filter, str or sequence of these, optional
        Conditions combined with AND; no filters keeps every row

    Returns
    -------
    pl.DataFrame
        Matching rows in their original order

    Raises
    ------
    ColumnNotFoundError
        If a filter names a column the table does not have
    ValidationError
        If a filter cannot be parsed or compared with the column

    Examples
    --------
    >>> filter_table(nodes_df, ["value > 5", Filter("type", "==", "a")])  # doctest: +SKIP
    """
    conditions = normalize_filters(filters)
    if not conditions:
        return table

    for condition in conditions:
        if condition.field not in table.columns:
            raise ColumnNotFoundError(
                f"Column '{condition.field}' not found",
                column=condition.field,
                available=table.columns
            )

    schema = table.schema
    mask = conditions[0].to_expression(schema[conditions[0].field])
    for condition in conditions[1:]:
        mask = mask & condition.to_expression(schema[condition.field])

    try:
        result = table.filter(mask)
    except pl.exceptions.PolarsError as e:
        raise ValidationError(
            f"Cannot apply filters {conditions}: {str(e)}",
            field="filters",
            value=[repr(condition) for condition in conditions],
            cause=e
        )

    logger.debug("Filters %s kept %d of %d rows", conditions, result.height, table.height)

    return result
