"""Database interaction components for dynatable."""

from dynatable.db.client import DbClient, DbConfig, PoolConfig
from dynatable.db.introspection import (
    computed_fields,
    disallowed_ordering_fields,
    resolve_model,
    snake_case,
)
from dynatable.db.pagination import Page, paginate

__all__ = [
    "DbClient",
    "DbConfig",
    "PoolConfig",
    "Page",
    "paginate",
    "computed_fields",
    "disallowed_ordering_fields",
    "resolve_model",
    "snake_case",
]
