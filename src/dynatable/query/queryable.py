# src/dynatable/query/queryable.py
"""Mutable handle over an immutable SQLAlchemy `Select`.

SQLAlchemy statements are generative: every `.where()` returns a new object.
Table hooks are plain side-effect callables, so they get a `TableQuery` whose
methods swap the wrapped statement in place and return the same handle.

    def only_active(query: TableQuery) -> None:
        query.where(User.active.is_(True)).options(selectinload(User.posts))
"""

from typing import Any, Callable, Optional, Type

from sqlalchemy import ColumnElement, Select, column as sql_column, func, select
from sqlalchemy.orm import Session

from dynatable.db.pagination import Page, paginate
from dynatable.query.sorting import SortDirection


class TableQuery:
    """A session-bound, in-place mutable query for one table request."""

    def __init__(self, session: Session, statement: Select, model: Optional[Type[Any]] = None):
        self.session = session
        self.statement = statement
        self.model = model

    def __repr__(self) -> str:
        target = self.model.__name__ if self.model is not None else "statement"
        return f"<TableQuery {target}>"

    # ===== In-place statement manipulation =====

    def where(self, *criteria: Any) -> "TableQuery":
        self.statement = self.statement.where(*criteria)
        return self

    def filter_by(self, **kwargs: Any) -> "TableQuery":
        self.statement = self.statement.filter_by(**kwargs)
        return self

    def join(self, target: Any, *args: Any, **kwargs: Any) -> "TableQuery":
        self.statement = self.statement.join(target, *args, **kwargs)
        return self

    def outerjoin(self, target: Any, *args: Any, **kwargs: Any) -> "TableQuery":
        self.statement = self.statement.outerjoin(target, *args, **kwargs)
        return self

    def options(self, *options: Any) -> "TableQuery":
        self.statement = self.statement.options(*options)
        return self

    def order_by(self, *clauses: Any) -> "TableQuery":
        self.statement = self.statement.order_by(*clauses)
        return self

    def apply(self, fn: Callable[[Select], Select]) -> "TableQuery":
        """Replace the statement with `fn(statement)` for anything not wrapped here."""
        self.statement = fn(self.statement)
        return self

    # ===== Ordering =====

    def column(self, name: str) -> ColumnElement:
        """Resolve `name` against the selected columns.

        Unknown names become a quoted column identifier; the database decides
        whether it exists when the statement runs.
        """
        selected = self.statement.selected_columns.get(name)
        if selected is not None:
            return selected
        return sql_column(name)

    def order_by_field(self, name: str, direction: SortDirection | str) -> "TableQuery":
        """Generic `ORDER BY <name> <direction>`."""
        direction = SortDirection.parse(direction)
        return self.order_by(direction.apply(self.column(name)))

    # ===== Execution =====

    def count(self) -> int:
        """Number of rows the current statement matches, ignoring ordering."""
        subquery = self.statement.order_by(None).subquery()
        return self.session.scalar(select(func.count()).select_from(subquery)) or 0

    def paginate(self, per_page: int, page: int = 1) -> Page:
        return paginate(self.session, self.statement, per_page, page)
