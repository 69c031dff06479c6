"""
dynatable: sortable, paginated JSON table endpoints over SQLAlchemy models.
"""

__version__ = "0.1.0"

# `api` must load before `responder`: the router module imports the responder
from dynatable.core import (
    DynatableConfig,
    DynatableError,
    InvalidConfiguration,
    InvalidSortDirection,
    log,
)
from dynatable.api import TableResponse, TableRouter, register_exception_handlers
from dynatable.db import DbClient, DbConfig, Page, PoolConfig
from dynatable.meta import DISALLOW_ORDERING_KEY, MetaAssembler
from dynatable.query import DataSource, QueryBuilder, SortDirection, TableQuery
from dynatable.responder import ResponderConfig, TableResponder

__all__ = [
    "__version__",
    "DataSource",
    "DbClient",
    "DbConfig",
    "DISALLOW_ORDERING_KEY",
    "DynatableConfig",
    "DynatableError",
    "InvalidConfiguration",
    "InvalidSortDirection",
    "MetaAssembler",
    "Page",
    "PoolConfig",
    "QueryBuilder",
    "ResponderConfig",
    "SortDirection",
    "TableQuery",
    "TableResponder",
    "TableResponse",
    "TableRouter",
    "log",
    "register_exception_handlers",
]
