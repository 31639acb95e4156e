# toysql

`toysql` is the query side of a small relational database engine. It has three parts:

- **`toysql.ast`** is the syntax tree for SQL statements and expressions.
- **`toysql.resultset`** holds the result sets that executors return, and the errors
  they raise.
- **Executors** are the operators of a query plan. Each one has an `execute(txn)` method
  that returns a result set.

## Installing

```
pip install .
```

To install the test requirements as well and run the tests:

```
pip install .[test]
pytest
```

## The syntax tree (`toysql.ast`)

- Statements: `Begin`, `Commit`, `Rollback`, `Explain`, `CreateTable`, `DropTable`,
  `Delete`, `Insert`, `Update` and `Select`. All are subclasses of `Statement`.
  `Update` keeps its assignments sorted by column name.
- FROM items: `TableItem` (a name and an optional alias) and `JoinItem` (left, right,
  a `JoinType` and an optional predicate).
- Column definitions: `Column`. Sort orders: `Order`.
- Expressions, all subclasses of `Expression`:
  - `Field(table, name)`
  - `ColumnRef(index)`
  - `Literal(value)`. Two literals are equal only when both their types and their values
    match, so `Literal(True) != Literal(1)`.
  - `Function(name, args)`
  - `Operation(operator, operands)`. It takes an `Operator` and checks that the number of
    operands matches the operator's `arity`.

Every expression supports the following tree operations:

- `walk(visitor)` visits the nodes depth-first. It stops and returns `False` as soon as
  the visitor returns `False`.
- `contains(visitor)` returns `True` as soon as the visitor returns `True` for some node.
- `transform(before, after)` rebuilds the tree. It applies `before` to each node on the
  way down and `after` on the way up.

Expression nodes have no `evaluate` method of their own.

## Result sets (`toysql.resultset`)

The result sets are `Begin`, `Commit`, `Rollback`, `Create`, `Delete`, `Update`,
`CreateTable`, `DropTable`, `Query` and `Explain`.

A `Query` holds a list of `Column` labels, each with an optional name. It also holds
`rows`, an iterator of rows, where each row is a list of values. The rows take no part in
equality or in `repr`.

- `ResultSet.into_row()` returns the first row of a query result.
- `ResultSet.into_value()` returns the first value of that row.

Both raise `SqlError` when the result is not a query, or when there is nothing to return.

## Executors

| Module | Executors |
| --- | --- |
| `toysql.source` | `Scan`, `KeyLookup`, `IndexLookup`, `Nothing`, `CreateTable`, `DropTable` |
| `toysql.query` | `Filter`, `Projection`, `Order`, `Limit`, `Offset` (and the `Direction` enum) |
| `toysql.join` | `NestedLoopJoin`, `HashJoin` |
| `toysql.aggregation` | `Aggregation`, with the accumulators `Count`, `Sum`, `Average`, `Min`, `Max` |
| `toysql.mutation` | `Insert`, `Update`, `Delete` |

### What executors need from you

Some executors take expressions: predicates, projections, sort keys, insert values and
update assignments. These expressions must be objects with an `evaluate(row)` method.
`row` is a list of values, or `None` for constant expressions.

Executors also work against a transaction object that you supply. It provides:

- `must_read_table(name)`, which returns a table. The table has `name` and `columns`;
  each column has `name` and `default`, where `None` means no default. The table also
  provides `get_column(name)` and `get_row_key(row)`.
- `scan(table, filter)`, `read(table, key)` and `read_index(table, column, value)`.
- `create(table, row)`, `update(table, key, row)` and `delete(table, key)`, used for
  mutations.
- `create_table(table)` and `delete_table(name)`, used for schema changes.

### Building a plan

A plan is built by nesting executors. You run the outermost executor with the
transaction:

```python
from toysql.source import Scan
from toysql.query import Filter, Limit

plan = Limit(Filter(Scan("movies", None), predicate), 10)
result = plan.execute(txn)
for row in result.rows:
    print(row)
```

### Behaviour worth knowing

- `Filter`, `Scan` filters and `NestedLoopJoin` predicates drop rows for which the
  expression gives `False` or `None`. Any other non-boolean value raises `SqlError`.
- `Order` sorts stably. Nulls come first, and values of unrelated types compare as equal.
- `Projection` takes a column's name from its label. Without a label, a `ColumnRef`
  expression keeps the source column's name.
- `HashJoin` loads the right side into memory. When right keys are duplicated, the last
  right row wins.
- With `outer=True`, both joins pad unmatched left rows with nulls.
- `Aggregation` expects source rows laid out as one value per aggregate, followed by the
  group-by values. With no input rows and no group-by columns, it still returns one row,
  for example a count of 0.
- `Insert` works in one of two ways:
  - With column names, it matches values to those columns and fills the other columns
    with their defaults.
  - Without column names, it pads each row with defaults.
  - Either way, it raises `SqlError` when a needed column has no value.
- `Update` updates each primary key at most once.

## Errors

- `SqlError` is raised for problems in a query or its data.
- `InternalError` is a subclass of `SqlError`. It is raised when an executor receives a
  result set it cannot work with.

## What this package does not do

`toysql` has no SQL parser, no query planner and no expression evaluator. It has no
storage engine, no transactions and no server or command-line client. You build syntax
trees and executor plans yourself, and you supply the transaction and the evaluable
expressions that the executors run against.