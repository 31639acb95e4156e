"""Errors and result sets produced by plan executors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional


class SqlError(Exception):
    """An error in a query or in the data it touches."""


class InternalError(SqlError):
    """An unexpected internal inconsistency."""


@dataclass
class Column:
    """A result column, with an optional name."""

    name: Optional[str] = None


class ResultSet:
    """Base class of executor results."""

    def into_row(self) -> list[Any]:
        """Return the first row of a query result."""
        if not isinstance(self, Query):
            raise SqlError(f"Not a query result: {self!r}")
        row = next(self.rows, None)
        if row is None:
            raise SqlError("No rows returned")
        return row

    def into_value(self) -> Any:
        """Return the first value of the first row of a query result."""
        row = self.into_row()
        if not row:
            raise SqlError("No value returned")
        return row[0]


@dataclass
class Begin(ResultSet):
    id: int
    mode: Any


@dataclass
class Commit(ResultSet):
    id: int


@dataclass
class Rollback(ResultSet):
    id: int


@dataclass
class Create(ResultSet):
    count: int


@dataclass
class Delete(ResultSet):
    count: int


@dataclass
class Update(ResultSet):
    count: int


@dataclass
class CreateTable(ResultSet):
    name: str


@dataclass
class DropTable(ResultSet):
    name: str


def _empty_rows() -> Iterator[list[Any]]:
    return iter(())


@dataclass
class Query(ResultSet):
    """Query result; rows are not part of equality or repr."""

    columns: list[Column] = field(default_factory=list)
    rows: Iterator[list[Any]] = field(default_factory=_empty_rows, compare=False, repr=False)

    def __post_init__(self) -> None:
        self.rows = iter(self.rows)


@dataclass
class Explain(ResultSet):
    node: Any