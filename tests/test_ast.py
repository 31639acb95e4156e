import pytest

from toysql.ast import (
    Field,
    Function,
    Literal,
    Operation,
    Operator,
    Update,
)


def _tree():
    a = Field(None, "a")
    one = Literal(1)
    add = Operation(Operator.ADD, (a, one))
    b = Field("t", "b")
    isnull = Operation(Operator.IS_NULL, (b,))
    root = Operation(Operator.AND, (add, isnull))
    return root, add, a, one, isnull, b


def test_walk_visits_preorder():
    root, add, a, one, isnull, b = _tree()
    seen = []
    assert root.walk(lambda e: seen.append(e) or True) is True
    assert seen == [root, add, a, one, isnull, b]


def test_walk_halts_when_visitor_returns_false():
    root, add, a, one, isnull, b = _tree()
    seen = []

    def visitor(expr):
        seen.append(expr)
        return expr != a

    assert root.walk(visitor) is False
    assert seen == [root, add, a]


def test_contains():
    root, *_ = _tree()
    assert root.contains(lambda e: isinstance(e, Field) and e.name == "b")
    assert not root.contains(lambda e: isinstance(e, Function))


def test_transform_replaces_fields():
    root, *_ = _tree()

    def after(expr):
        if isinstance(expr, Field):
            return Literal(expr.name)
        return expr

    result = root.transform(lambda e: e, after)
    expected = Operation(
        Operator.AND,
        (
            Operation(Operator.ADD, (Literal("a"), Literal(1))),
            Operation(Operator.IS_NULL, (Literal("b"),)),
        ),
    )
    assert result == expected
    # The original tree is untouched.
    assert root.contains(lambda e: isinstance(e, Field))


def test_transform_call_order():
    a = Field(None, "a")
    one = Literal(1)
    add = Operation(Operator.ADD, (a, one))
    log = []

    def before(e):
        log.append(("before", e))
        return e

    def after(e):
        log.append(("after", e))
        return e

    assert add.transform(before, after) == add
    assert log == [
        ("before", add),
        ("before", a),
        ("after", a),
        ("before", one),
        ("after", one),
        ("after", add),
    ]


def test_transform_before_replacement_is_descended():
    inner = Operation(Operator.NOT, (Field(None, "x"),))
    neg = Operation(Operator.NEGATE, (inner,))

    def before(e):
        if isinstance(e, Operation) and e.operator is Operator.NEGATE:
            return e.operands[0]
        return e

    def after(e):
        return Literal(True) if isinstance(e, Field) else e

    assert neg.transform(before, after) == Operation(Operator.NOT, (Literal(True),))


def test_transform_propagates_errors():
    root, *_ = _tree()

    def after(e):
        if isinstance(e, Literal):
            raise RuntimeError("boom")
        return e

    with pytest.raises(RuntimeError, match="boom"):
        root.transform(lambda e: e, after)


def test_function_args_are_transformed():
    f = Function("upper", [Field(None, "s")])
    assert f.args == (Field(None, "s"),)
    result = f.transform(lambda e: e, lambda e: Literal("s") if isinstance(e, Field) else e)
    assert result == Function("upper", (Literal("s"),))


def test_operation_arity_checked():
    with pytest.raises(ValueError):
        Operation(Operator.ADD, (Literal(1),))
    with pytest.raises(ValueError):
        Operation(Operator.NOT, (Literal(1), Literal(2)))


def test_literal_equality_respects_type():
    assert Literal(1) != Literal(True)
    assert Literal(1) != Literal(1.0)
    assert Literal(None) == Literal()
    assert len({Literal(1), Literal(True)}) == 2


def test_update_assignments_sorted_by_column():
    stmt = Update("t", {"b": Literal(1), "a": Literal(2)})
    assert list(stmt.set) == ["a", "b"]