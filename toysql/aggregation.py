"""Aggregate accumulators and the aggregation executor."""

from __future__ import annotations

import enum
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from toysql.resultset import Column, InternalError, Query, ResultSet


class Aggregate(enum.Enum):
    AVERAGE = "avg"
    COUNT = "count"
    MAX = "max"
    MIN = "min"
    SUM = "sum"


def _datatype(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    return "string"


def _compare(a: Any, b: Any) -> Optional[int]:
    """Compare two values of the same datatype; None if they are unordered."""
    if a is None:
        return 0
    if isinstance(a, float) and (math.isnan(a) or math.isnan(b)):
        return None
    return (a > b) - (a < b)


class Accumulator(ABC):
    """Accumulates values into a single aggregate."""

    @abstractmethod
    def accumulate(self, value: Any) -> None:
        """Add a value."""

    @abstractmethod
    def aggregate(self) -> Any:
        """Return the final aggregate."""


@dataclass
class Count(Accumulator):
    """Counts non-null values."""

    count: int = 0

    def accumulate(self, value: Any) -> None:
        if value is not None:
            self.count += 1

    def aggregate(self) -> Any:
        return self.count


@dataclass
class Sum(Accumulator):
    """Sums integers or floats; any other mix gives null."""

    sum: Any = None
    seen: bool = False

    def accumulate(self, value: Any) -> None:
        kind = _datatype(value)
        if kind not in ("integer", "float"):
            self.sum = None
        elif not self.seen:
            self.sum = value
        elif _datatype(self.sum) == kind:
            self.sum = self.sum + value
        else:
            self.sum = None
        self.seen = True

    def aggregate(self) -> Any:
        return self.sum


@dataclass
class Average(Accumulator):
    """Average of values; integer averages truncate toward zero."""

    count: Count = field(default_factory=Count)
    sum: Sum = field(default_factory=Sum)

    def accumulate(self, value: Any) -> None:
        self.count.accumulate(value)
        self.sum.accumulate(value)

    def aggregate(self) -> Any:
        total, count = self.sum.aggregate(), self.count.aggregate()
        kind = _datatype(total)
        if kind == "integer":
            quotient = abs(total) // count
            return quotient if total >= 0 else -quotient
        if kind == "float":
            return total / count
        return None


@dataclass
class _Extreme(Accumulator):
    value: Any = None
    seen: bool = False

    _keep_sign = 0

    def accumulate(self, value: Any) -> None:
        if not self.seen:
            self.value = value
            self.seen = True
            return
        if _datatype(self.value) != _datatype(value):
            self.value = None
            return
        order = _compare(value, self.value)
        if order is None:
            self.value = None
        elif order == self._keep_sign:
            self.value = value

    def aggregate(self) -> Any:
        return self.value


@dataclass
class Max(_Extreme):
    """Maximum value; mixed types or unordered values give null."""

    _keep_sign = 1


@dataclass
class Min(_Extreme):
    """Minimum value; mixed types or unordered values give null."""

    _keep_sign = -1


_ACCUMULATORS = {
    Aggregate.AVERAGE: Average,
    Aggregate.COUNT: Count,
    Aggregate.MAX: Max,
    Aggregate.MIN: Min,
    Aggregate.SUM: Sum,
}


def accumulator_for(aggregate: Aggregate) -> Accumulator:
    """Create a fresh accumulator for an aggregate function."""
    return _ACCUMULATORS[aggregate]()


def _group_key(bucket: tuple[Any, ...]) -> tuple[Any, ...]:
    return tuple((_datatype(v), v) for v in bucket)


class Aggregation:
    """Groups source rows by their trailing columns and aggregates the leading ones.

    Each source row holds one value per aggregate followed by the group-by values.
    """

    def __init__(self, source: Any, aggregates: Iterable[Aggregate]) -> None:
        self.source = source
        self.aggregates = list(aggregates)

    def _fresh(self) -> list[Accumulator]:
        return [accumulator_for(a) for a in self.aggregates]

    def execute(self, txn: Any) -> ResultSet:
        result = self.source.execute(txn)
        if not isinstance(result, Query):
            raise InternalError(f"Unexpected result {result!r}")
        width = len(self.aggregates)
        groups: dict[tuple[Any, ...], tuple[tuple[Any, ...], list[Accumulator]]] = {}
        for row in result.rows:
            values, bucket = row[:width], tuple(row[width:])
            key = _group_key(bucket)
            if key not in groups:
                groups[key] = (bucket, self._fresh())
            for acc, value in zip(groups[key][1], values):
                acc.accumulate(value)
        # No rows and no group-by columns still yields one row, e.g. COUNT(*) of nothing.
        if not groups and width == len(result.columns):
            groups[()] = ((), self._fresh())
        columns = [
            Column() if i < width else column for i, column in enumerate(result.columns)
        ]
        rows = (
            [*(acc.aggregate() for acc in accs), *bucket] for bucket, accs in groups.values()
        )
        return Query(columns, rows)