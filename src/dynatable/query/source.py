# src/dynatable/query/source.py
"""Where a table's rows come from: a mapped model or a pre-built statement."""

from dataclasses import dataclass
from typing import Any, Literal, Optional, Type

from sqlalchemy import Select, select

from dynatable.core.errors import InvalidConfiguration
from dynatable.db.introspection import resolve_model


@dataclass(frozen=True)
class DataSource:
    """Tagged union of the two supported table sources.

    Build it with `for_model` or `for_statement`; `resolve` picks one for an
    arbitrary argument. Exactly one of `model` and `statement` is set.
    """

    kind: Literal["model", "statement"]
    model: Optional[Type[Any]] = None
    statement: Optional[Select] = None

    @classmethod
    def for_model(cls, model: Any, registry: Any = None) -> "DataSource":
        return cls(kind="model", model=resolve_model(model, registry))

    @classmethod
    def for_statement(cls, statement: Select) -> "DataSource":
        if not isinstance(statement, Select):
            raise InvalidConfiguration(
                f"Expected a SQLAlchemy Select statement, got {type(statement).__name__}."
            )
        return cls(kind="statement", statement=statement)

    @classmethod
    def resolve(cls, source: Any, registry: Any = None) -> "DataSource":
        if isinstance(source, DataSource):
            return source
        if isinstance(source, Select):
            return cls.for_statement(source)
        return cls.for_model(source, registry)

    @property
    def name(self) -> str:
        if self.model is not None:
            return self.model.__name__
        return "statement"

    def base_statement(self) -> Select:
        """A fresh default query for the model, or the supplied statement."""
        if self.kind == "model":
            return select(self.model)
        return self.statement
