"""Join executors: nested loop joins and hash joins."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional

from toysql.resultset import InternalError, Query, ResultSet, SqlError


def _hash_key(value: Any) -> tuple[str, Any]:
    """Key that keeps values of different types apart, e.g. True and 1."""
    return (type(value).__name__, value)


def _query_pair(left: Any, right: Any, txn: Any) -> tuple[Query, Query]:
    left_result = left.execute(txn)
    if isinstance(left_result, Query):
        right_result = right.execute(txn)
        if isinstance(right_result, Query):
            return left_result, right_result
    raise InternalError("Unexpected result set")


def _nested_loop_rows(
    left_rows: Iterable[list[Any]],
    right_rows: list[list[Any]],
    right_width: int,
    predicate: Optional[Any],
    outer: bool,
) -> Iterator[list[Any]]:
    for left_row in left_rows:
        hit = False
        for right_row in right_rows:
            row = [*left_row, *right_row]
            if predicate is not None:
                value = predicate.evaluate(row)
                if value is False or value is None:
                    continue
                if value is not True:
                    raise SqlError(f"Join predicate returned {value}, expected boolean")
            hit = True
            yield row
        if outer and not hit:
            yield [*left_row, *([None] * right_width)]


class NestedLoopJoin:
    """Checks every left row against every right row using an optional predicate.

    With ``outer`` set, a left row without any match is emitted once with nulls
    for the right-hand columns.
    """

    def __init__(
        self, left: Any, right: Any, predicate: Optional[Any] = None, outer: bool = False
    ) -> None:
        self.left = left
        self.right = right
        self.predicate = predicate
        self.outer = outer

    def execute(self, txn: Any) -> ResultSet:
        left, right = _query_pair(self.left, self.right, txn)
        right_rows = list(right.rows)
        columns = [*left.columns, *right.columns]
        rows = _nested_loop_rows(
            left.rows, right_rows, len(right.columns), self.predicate, self.outer
        )
        return Query(columns, rows)


class HashJoin:
    """Joins rows where the left field equals the right field, via a hash table.

    The right side is loaded into memory; for duplicate right keys the last row wins.
    """

    def __init__(
        self, left: Any, left_field: int, right: Any, right_field: int, outer: bool = False
    ) -> None:
        self.left = left
        self.left_field = left_field
        self.right = right
        self.right_field = right_field
        self.outer = outer

    def execute(self, txn: Any) -> ResultSet:
        left, right = _query_pair(self.left, self.right, txn)
        r = self.right_field
        table: dict[tuple[str, Any], list[Any]] = {}
        for row in right.rows:
            if len(row) <= r:
                raise InternalError(f"Right index {r} out of bounds")
            table[_hash_key(row[r])] = row
        empty = [None] * len(right.columns)
        columns = [*left.columns, *right.columns]
        return Query(columns, self._rows(left.rows, table, empty))

    def _rows(
        self,
        left_rows: Iterable[list[Any]],
        table: dict[tuple[str, Any], list[Any]],
        empty: list[Any],
    ) -> Iterator[list[Any]]:
        l = self.left_field
        for row in left_rows:
            if len(row) <= l:
                raise SqlError(f"Left index {l} out of bounds")
            hit = table.get(_hash_key(row[l]))
            if hit is not None:
                yield [*row, *hit]
            elif self.outer:
                yield [*row, *empty]