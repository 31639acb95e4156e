"""Source executors that read tables, and schema executors that change them."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from toysql.resultset import Column, Query, ResultSet
from toysql.resultset import CreateTable as CreateTableResult
from toysql.resultset import DropTable as DropTableResult


def _columns(table: Any) -> list[Column]:
    return [Column(column.name) for column in table.columns]


def _key(value: Any) -> tuple[str, Any]:
    return (type(value).__name__, value)


class Scan:
    """Scans all rows of a table, optionally through a filter expression."""

    def __init__(self, table: str, filter: Optional[Any] = None) -> None:
        self.table = table
        self.filter = filter

    def execute(self, txn: Any) -> ResultSet:
        table = txn.must_read_table(self.table)
        return Query(_columns(table), txn.scan(table.name, self.filter))


class KeyLookup:
    """Reads the rows with the given primary keys; missing keys are skipped."""

    def __init__(self, table: str, keys: Iterable[Any]) -> None:
        self.table = table
        self.keys = list(keys)

    def execute(self, txn: Any) -> ResultSet:
        table = txn.must_read_table(self.table)
        rows = [row for row in (txn.read(table.name, key) for key in self.keys) if row is not None]
        return Query(_columns(table), rows)


class IndexLookup:
    """Reads the rows whose indexed column holds any of the given values."""

    def __init__(self, table: str, column: str, values: Iterable[Any]) -> None:
        self.table = table
        self.column = column
        self.values = list(values)

    def execute(self, txn: Any) -> ResultSet:
        table = txn.must_read_table(self.table)
        pks: dict[tuple[str, Any], Any] = {}
        for value in self.values:
            for pk in txn.read_index(self.table, self.column, value):
                pks.setdefault(_key(pk), pk)
        rows = [row for row in (txn.read(table.name, pk) for pk in pks.values()) if row is not None]
        return Query(_columns(table), rows)


class Nothing:
    """Produces a single empty row with no columns."""

    def execute(self, txn: Any) -> ResultSet:
        return Query([], iter([[]]))


class CreateTable:
    """Creates a table from a schema."""

    def __init__(self, table: Any) -> None:
        self.table = table

    def execute(self, txn: Any) -> ResultSet:
        name = self.table.name
        txn.create_table(self.table)
        return CreateTableResult(name)


class DropTable:
    """Drops a table by name."""

    def __init__(self, table: str) -> None:
        self.table = table

    def execute(self, txn: Any) -> ResultSet:
        txn.delete_table(self.table)
        return DropTableResult(self.table)