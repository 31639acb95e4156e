import pytest

from toysql.resultset import (
    Begin,
    Column,
    Commit,
    InternalError,
    Query,
    SqlError,
)


def test_into_row_returns_first_row():
    q = Query([Column("a"), Column("b")], [[1, "x"], [2, "y"]])
    assert q.into_row() == [1, "x"]


def test_into_row_consumes_rows():
    q = Query([Column("a")], [[1], [2]])
    assert q.into_row() == [1]
    assert list(q.rows) == [[2]]


def test_into_row_no_rows():
    with pytest.raises(SqlError, match="No rows returned"):
        Query([Column("a")]).into_row()


def test_into_row_not_query():
    with pytest.raises(SqlError, match="Not a query result"):
        Commit(id=7).into_row()


def test_into_value():
    q = Query([Column("a"), Column("b")], [["first", 2]])
    assert q.into_value() == "first"


def test_into_value_empty_row():
    with pytest.raises(SqlError, match="No value returned"):
        Query([], [[]]).into_value()


def test_into_value_propagates_row_errors():
    def rows():
        raise InternalError("broken")
        yield []

    with pytest.raises(InternalError, match="broken"):
        Query([Column()], rows()).into_value()


def test_query_equality_ignores_rows():
    assert Query([Column("a")], [[1]]) == Query([Column("a")], [[2], [3]])
    assert Query([Column("a")]) != Query([Column("b")])


def test_query_repr_omits_rows():
    text = repr(Query([Column("a")], [["secretvalue"]]))
    assert "secretvalue" not in text
    assert "'a'" in text


def test_internal_error_is_sql_error():
    error = InternalError("oops")
    assert issubclass(InternalError, SqlError)
    assert str(error) == "oops"


def test_begin_equality():
    assert Begin(id=1, mode="rw") == Begin(id=1, mode="rw")
    assert Begin(id=1, mode="rw") != Begin(id=2, mode="rw")