import math

import pytest

from toysql.aggregation import (
    Aggregate,
    Aggregation,
    Average,
    Count,
    Max,
    Min,
    Sum,
    accumulator_for,
)
from toysql.resultset import Column, Commit, InternalError, Query


class _Source:
    def __init__(self, result):
        self.result = result

    def execute(self, txn):
        return self.result


def _run(acc, values):
    for v in values:
        acc.accumulate(v)
    return acc.aggregate()


def test_count_skips_nulls():
    assert _run(Count(), [1, None, "x"]) == 2


def test_sum_integers():
    result = _run(Sum(), [1, 2])
    assert result == 3 and isinstance(result, int)


def test_sum_empty_and_mixed():
    assert Sum().aggregate() is None
    assert _run(Sum(), [1, 2.0]) is None
    assert _run(Sum(), [None, 1]) is None
    assert _run(Sum(), [True]) is None


def test_average_integer_truncates_toward_zero():
    assert _run(Average(), [-3, -4]) == -3


def test_average_float_and_empty():
    assert _run(Average(), [1.0, 4.0]) == pytest.approx(2.5)
    assert Average().aggregate() is None


def test_max_and_min():
    values = [3, 9, 1, 5]
    assert _run(Max(), values) == max(values)
    assert _run(Min(), values) == min(values)
    assert _run(Max(), ["b", "c", "a"]) == "c"
    assert _run(Min(), ["b", "c", "a"]) == "a"


def test_max_min_mixed_types_give_null():
    assert _run(Max(), [1, "a"]) is None
    assert _run(Min(), [1, 2.0]) is None
    assert _run(Max(), [1, None, 5]) is None


def test_max_nan_gives_null():
    assert _run(Max(), [1.0, math.nan]) is None


def test_accumulator_for_kinds():
    assert isinstance(accumulator_for(Aggregate.COUNT), Count)
    assert isinstance(accumulator_for(Aggregate.AVERAGE), Average)
    assert _run(accumulator_for(Aggregate.MIN), [4, 2]) == 2


def test_aggregation_groups_by_trailing_columns():
    source = _Source(
        Query([Column("v"), Column("g")], [[2, "a"], [1, "a"], [5, "b"]])
    )
    result = Aggregation(source, [Aggregate.MAX]).execute(None)
    assert result.columns == [Column(None), Column("g")]
    assert sorted(result.rows, key=lambda r: r[1]) == [[2, "a"], [5, "b"]]


def test_aggregation_without_rows_or_groups_gives_one_row():
    source = _Source(Query([Column("v")], []))
    result = Aggregation(source, [Aggregate.COUNT]).execute(None)
    assert list(result.rows) == [[0]]


def test_aggregation_without_rows_with_groups_gives_nothing():
    source = _Source(Query([Column("v"), Column("g")], []))
    result = Aggregation(source, [Aggregate.COUNT]).execute(None)
    assert list(result.rows) == []


def test_aggregation_distinguishes_group_value_types():
    source = _Source(Query([Column("v"), Column("g")], [[7, 1], [8, True]]))
    result = Aggregation(source, [Aggregate.MIN]).execute(None)
    assert sorted(result.rows, key=lambda r: r[0]) == [[7, 1], [8, True]]


def test_aggregation_rejects_non_query():
    with pytest.raises(InternalError, match="Unexpected result"):
        Aggregation(_Source(Commit(id=1)), [Aggregate.SUM]).execute(None)