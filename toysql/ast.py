"""Abstract syntax tree for SQL statements and expressions."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional


class Expression:
    """Base class of all expression tree nodes."""

    def _children(self) -> tuple[Expression, ...]:
        return ()

    def _with_children(self, children: tuple[Expression, ...]) -> Expression:
        return self

    def walk(self, visitor: Callable[[Expression], bool]) -> bool:
        """Visit every node depth-first; stop and return False once the visitor does."""
        if not visitor(self):
            return False
        return all(child.walk(visitor) for child in self._children())

    def contains(self, visitor: Callable[[Expression], bool]) -> bool:
        """Return True as soon as the visitor returns True for any node."""
        return not self.walk(lambda expr: not visitor(expr))

    def transform(
        self,
        before: Callable[[Expression], Expression],
        after: Callable[[Expression], Expression],
    ) -> Expression:
        """Rebuild the tree, applying `before` on the way down and `after` on the way up."""
        expr = before(self)
        children = expr._children()
        if children:
            expr = expr._with_children(
                tuple(child.transform(before, after) for child in children)
            )
        return after(expr)


@dataclass(frozen=True)
class Field(Expression):
    """A column reference by optional table name and column name."""

    table: Optional[str]
    name: str


@dataclass(frozen=True)
class ColumnRef(Expression):
    """A column reference by position, used while building plans."""

    index: int


@dataclass(frozen=True, eq=False)
class Literal(Expression):
    """A constant: None, bool, int, float or str."""

    value: Any = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Literal):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self) -> int:
        return hash((type(self.value), self.value))


@dataclass(frozen=True)
class Function(Expression):
    """A function call."""

    name: str
    args: tuple[Expression, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))

    def _children(self) -> tuple[Expression, ...]:
        return self.args

    def _with_children(self, children: tuple[Expression, ...]) -> Expression:
        return replace(self, args=children)


class Operator(enum.Enum):
    """Operators, with the number of operands each takes."""

    AND = "and"
    NOT = "not"
    OR = "or"
    EQUAL = "equal"
    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    IS_NULL = "is_null"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    NOT_EQUAL = "not_equal"
    ADD = "add"
    ASSERT = "assert"
    DIVIDE = "divide"
    EXPONENTIATE = "exponentiate"
    FACTORIAL = "factorial"
    MODULO = "modulo"
    MULTIPLY = "multiply"
    NEGATE = "negate"
    SUBTRACT = "subtract"
    LIKE = "like"

    @property
    def arity(self) -> int:
        return 1 if self in _UNARY else 2


_UNARY = frozenset(
    {Operator.NOT, Operator.IS_NULL, Operator.ASSERT, Operator.FACTORIAL, Operator.NEGATE}
)


@dataclass(frozen=True)
class Operation(Expression):
    """An operator applied to its operands."""

    operator: Operator
    operands: tuple[Expression, ...]

    def __post_init__(self) -> None:
        operands = tuple(self.operands)
        if len(operands) != self.operator.arity:
            raise ValueError(
                f"Operator {self.operator.name} takes {self.operator.arity} "
                f"operand(s), got {len(operands)}"
            )
        object.__setattr__(self, "operands", operands)

    def _children(self) -> tuple[Expression, ...]:
        return self.operands

    def _with_children(self, children: tuple[Expression, ...]) -> Expression:
        return replace(self, operands=children)


class JoinType(enum.Enum):
    CROSS = "cross"
    INNER = "inner"
    LEFT = "left"
    RIGHT = "right"


class Order(enum.Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass
class Column:
    """A column definition in CREATE TABLE."""

    name: str
    datatype: Any
    primary_key: bool = False
    nullable: Optional[bool] = None
    default: Optional[Expression] = None
    unique: bool = False
    index: bool = False
    references: Optional[str] = None


@dataclass
class TableItem:
    """A table in a FROM clause."""

    name: str
    alias: Optional[str] = None


@dataclass
class JoinItem:
    """A join of two FROM items."""

    left: TableItem | JoinItem
    right: TableItem | JoinItem
    join_type: JoinType
    predicate: Optional[Expression] = None


class Statement:
    """Base class of all statements."""


@dataclass
class Begin(Statement):
    readonly: bool = False
    version: Optional[int] = None


@dataclass
class Commit(Statement):
    pass


@dataclass
class Rollback(Statement):
    pass


@dataclass
class Explain(Statement):
    statement: Statement


@dataclass
class CreateTable(Statement):
    name: str
    columns: list[Column] = field(default_factory=list)


@dataclass
class DropTable(Statement):
    name: str


@dataclass
class Delete(Statement):
    table: str
    where: Optional[Expression] = None


@dataclass
class Insert(Statement):
    table: str
    columns: Optional[list[str]] = None
    values: list[list[Expression]] = field(default_factory=list)


@dataclass
class Update(Statement):
    """An UPDATE; assignments are kept ordered by column name."""

    table: str
    set: dict[str, Expression] = field(default_factory=dict)
    where: Optional[Expression] = None

    def __post_init__(self) -> None:
        self.set = dict(sorted(self.set.items()))


@dataclass
class Select(Statement):
    select: list[tuple[Expression, Optional[str]]] = field(default_factory=list)
    from_: list[TableItem | JoinItem] = field(default_factory=list)
    where: Optional[Expression] = None
    group_by: list[Expression] = field(default_factory=list)
    having: Optional[Expression] = None
    order: list[tuple[Expression, Order]] = field(default_factory=list)
    offset: Optional[Expression] = None
    limit: Optional[Expression] = None