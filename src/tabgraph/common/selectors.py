"""
Column selectors for choosing data-frame columns by name or by position.

A selector is either ``ByName("col")`` or ``ByIndex(2)``; plain strings and
integers are coerced to the matching selector. Positions are zero-based.
"""

from typing import Iterable, List, Union

import polars as pl

from .exceptions import (
    ColumnNotFoundError,
    ColumnIndexOutOfRangeError,
    ValidationError
)


class ByName:
    """Select a column by its name."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def resolve(self, df: pl.DataFrame) -> str:
        if self.name not in df.columns:
            raise ColumnNotFoundError(
                f"Column '{self.name}' is not in the data frame",
                column=self.name,
                available=list(df.columns)
            )
        return self.name

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ByName) and other.name == self.name

    def __hash__(self) -> int:
        return hash(("name", self.name))

    def __repr__(self) -> str:
        return f"ByName({self.name!r})"


class ByIndex:
    """Select a column by its zero-based position."""

    __slots__ = ("index",)

    def __init__(self, index: int) -> None:
        self.index = index

    def resolve(self, df: pl.DataFrame) -> str:
        if not 0 <= self.index < df.width:
            raise ColumnIndexOutOfRangeError(
                f"Column index {self.index} is outside the {df.width} columns of the data frame",
                index=self.index,
                n_columns=df.width
            )
        return df.columns[self.index]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ByIndex) and other.index == self.index

    def __hash__(self) -> int:
        return hash(("index", self.index))

    def __repr__(self) -> str:
        return f"ByIndex({self.index})"


ColumnSelector = Union[ByName, ByIndex]


def as_selector(column: Union[ColumnSelector, str, int]) -> ColumnSelector:
    """
    Coerce a column reference to a selector.

    Raises
    ------
    ValidationError
        If the reference is neither a selector, a string nor an integer
    """
    if isinstance(column, (ByName, ByIndex)):
        return column
    # bool is an int subclass but never a meaningful position
    if isinstance(column, bool):
        raise ValidationError(
            "Column references must be names or positions, got a boolean",
            field="columns",
            value=column
        )
    if isinstance(column, str):
        return ByName(column)
    if isinstance(column, int):
        return ByIndex(column)
    raise ValidationError(
        f"Column references must be names or positions, got {type(column).__name__}",
        field="columns",
        value=column
    )


def resolve_columns(
    df: pl.DataFrame,
    columns: Union[ColumnSelector, str, int, Iterable[Union[ColumnSelector, str, int]]]
) -> List[str]:
    """
    Resolve one or more column references to column names.

    Parameters
    ----------
    df : pl.DataFrame
        Data frame the columns belong to
    columns : selector, str, int or iterable of these
        Column references; duplicates are removed keeping the first one

    Returns
    -------
    List[str]
        Column names in the order first referenced

    Raises
    ------
    ColumnNotFoundError
        If a named column is absent
    ColumnIndexOutOfRangeError
        If a position is outside the data frame's columns
    ValidationError
        If no column references are given

    Examples
    --------
    >>> df = pl.DataFrame({"a": ["x"], "b": ["y"], "c": [1]})
    >>> resolve_columns(df, ["a", 1])
    ['a', 'b']
    """
    if isinstance(columns, (ByName, ByIndex, str, int)):
        columns = [columns]

    names = [as_selector(column).resolve(df) for column in columns]
    if not names:
        raise ValidationError("At least one column must be specified", field="columns")

    return list(dict.fromkeys(names))
