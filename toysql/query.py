"""Query executors: filtering, projection, ordering, limit and offset."""

from __future__ import annotations

import enum
import functools
import itertools
from typing import Any, Iterable, Iterator, Optional

from toysql.ast import ColumnRef
from toysql.resultset import Column, InternalError, Query, ResultSet, SqlError


class Direction(enum.Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


def _kind(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    return type(value).__name__


_NUMERIC = {"integer", "float"}


def _partial_cmp(a: Any, b: Any) -> Optional[int]:
    """Compare two values; nulls sort first, unrelated types are unordered (None)."""
    if a is None and b is None:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1
    ka, kb = _kind(a), _kind(b)
    if ka == kb or (ka in _NUMERIC and kb in _NUMERIC):
        return (a > b) - (a < b)
    return None


def _source_query(source: Any, txn: Any) -> Query:
    result = source.execute(txn)
    if not isinstance(result, Query):
        raise InternalError("Unexpected result")
    return result


class Filter:
    """Keeps rows for which the predicate is true; false and null drop the row."""

    def __init__(self, source: Any, predicate: Any) -> None:
        self.source = source
        self.predicate = predicate

    def execute(self, txn: Any) -> ResultSet:
        result = _source_query(self.source, txn)
        return Query(result.columns, self._rows(result.rows))

    def _rows(self, rows: Iterable[list[Any]]) -> Iterator[list[Any]]:
        for row in rows:
            value = self.predicate.evaluate(row)
            if value is True:
                yield row
            elif value is not False and value is not None:
                raise SqlError(f"Filter returned {value}, expected boolean")


class Projection:
    """Evaluates a list of (expression, label) pairs against each row."""

    def __init__(self, source: Any, expressions: Iterable[tuple[Any, Optional[str]]]) -> None:
        self.source = source
        self.expressions = list(expressions)

    def execute(self, txn: Any) -> ResultSet:
        result = _source_query(self.source, txn)
        columns = [self._column(expr, label, result.columns) for expr, label in self.expressions]
        expressions = [expr for expr, _ in self.expressions]
        rows = ([expr.evaluate(row) for expr in expressions] for row in result.rows)
        return Query(columns, rows)

    @staticmethod
    def _column(expr: Any, label: Optional[str], columns: list[Column]) -> Column:
        if label is not None:
            return Column(label)
        if isinstance(expr, ColumnRef) and 0 <= expr.index < len(columns):
            return Column(columns[expr.index].name)
        return Column()


class Order:
    """Sorts rows by a list of (expression, direction) pairs; the sort is stable."""

    def __init__(self, source: Any, orders: Iterable[tuple[Any, Direction]]) -> None:
        self.source = source
        self.orders = list(orders)

    def execute(self, txn: Any) -> ResultSet:
        result = self.source.execute(txn)
        if not isinstance(result, Query):
            raise InternalError(f"Unexpected result {result!r}")
        items = [
            (row, [expr.evaluate(row) for expr, _ in self.orders]) for row in result.rows
        ]
        items.sort(key=functools.cmp_to_key(self._compare))
        return Query(result.columns, (row for row, _ in items))

    def _compare(self, a: tuple[list[Any], list[Any]], b: tuple[list[Any], list[Any]]) -> int:
        for (_, direction), va, vb in zip(self.orders, a[1], b[1]):
            order = _partial_cmp(va, vb)
            if order:
                return order if direction is Direction.ASCENDING else -order
        return 0


class Limit:
    """Passes on at most ``limit`` rows."""

    def __init__(self, source: Any, limit: int) -> None:
        self.source = source
        self.limit = limit

    def execute(self, txn: Any) -> ResultSet:
        result = _source_query(self.source, txn)
        return Query(result.columns, itertools.islice(result.rows, self.limit))


class Offset:
    """Skips the first ``offset`` rows."""

    def __init__(self, source: Any, offset: int) -> None:
        self.source = source
        self.offset = offset

    def execute(self, txn: Any) -> ResultSet:
        result = _source_query(self.source, txn)
        return Query(result.columns, itertools.islice(result.rows, self.offset, None))