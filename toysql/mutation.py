"""Mutation executors: INSERT, UPDATE and DELETE."""

from __future__ import annotations

from typing import Any, Iterable

from toysql.resultset import Create, InternalError, Query, ResultSet, SqlError
from toysql.resultset import Delete as DeleteResult
from toysql.resultset import Update as UpdateResult


def _key(value: Any) -> tuple[str, Any]:
    """Hashable key that keeps values of different types apart, e.g. True and 1."""
    return (type(value).__name__, value)


class Insert:
    """Inserts rows built from constant expressions into a table.

    With no column names given, each row is taken in table column order and
    padded with column defaults; otherwise values are matched to the named columns.
    A column's ``default`` of ``None`` means the column has no default.
    """

    def __init__(
        self, table: str, columns: Iterable[str], rows: Iterable[Iterable[Any]]
    ) -> None:
        self.table = table
        self.columns = list(columns)
        self.rows = [list(expressions) for expressions in rows]

    @staticmethod
    def make_row(table: Any, columns: Iterable[str], values: Iterable[Any]) -> list[Any]:
        """Build a row from column names and values, filling the rest with defaults."""
        columns, values = list(columns), list(values)
        if len(columns) != len(values):
            raise SqlError("Column and value counts do not match")
        inputs: dict[str, Any] = {}
        for name, value in zip(columns, values):
            table.get_column(name)
            if name in inputs:
                raise SqlError(f"Column {name} given multiple times")
            inputs[name] = value
        row = []
        for column in table.columns:
            if column.name in inputs:
                row.append(inputs[column.name])
            elif column.default is not None:
                row.append(column.default)
            else:
                raise SqlError(f"No value given for column {column.name}")
        return row

    @staticmethod
    def pad_row(table: Any, row: Iterable[Any]) -> list[Any]:
        """Extend a row with the defaults of the columns it does not cover."""
        row = list(row)
        for column in table.columns[len(row):]:
            if column.default is None:
                raise SqlError(f"No default value for column {column.name}")
            row.append(column.default)
        return row

    def execute(self, txn: Any) -> ResultSet:
        table = txn.must_read_table(self.table)
        count = 0
        for expressions in self.rows:
            values = [expr.evaluate(None) for expr in expressions]
            if self.columns:
                row = self.make_row(table, self.columns, values)
            else:
                row = self.pad_row(table, values)
            txn.create(table.name, row)
            count += 1
        return Create(count)


class Update:
    """Updates source rows by evaluating (field index, expression) assignments.

    Each primary key is updated at most once, even if the source yields it again.
    """

    def __init__(self, table: str, source: Any, expressions: Iterable[tuple[int, Any]]) -> None:
        self.table = table
        self.source = source
        self.expressions = list(expressions)

    def execute(self, txn: Any) -> ResultSet:
        result = self.source.execute(txn)
        if not isinstance(result, Query):
            raise InternalError(f"Unexpected response {result!r}")
        table = txn.must_read_table(self.table)
        updated: set[tuple[str, Any]] = set()
        for row in result.rows:
            id_ = table.get_row_key(row)
            if _key(id_) in updated:
                continue
            new = list(row)
            for field, expr in self.expressions:
                new[field] = expr.evaluate(row)
            txn.update(table.name, id_, new)
            updated.add(_key(id_))
        return UpdateResult(len(updated))


class Delete:
    """Deletes every row produced by the source."""

    def __init__(self, table: str, source: Any) -> None:
        self.table = table
        self.source = source

    def execute(self, txn: Any) -> ResultSet:
        table = txn.must_read_table(self.table)
        result = self.source.execute(txn)
        if not isinstance(result, Query):
            raise InternalError(f"Unexpected result {result!r}")
        count = 0
        for row in result.rows:
            txn.delete(table.name, table.get_row_key(row))
            count += 1
        return DeleteResult(count)