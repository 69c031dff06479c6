"""Query shaping: sources, sort parsing and the query builder."""

from dynatable.query.builder import OrderHandler, QueryBuilder, QueryHook
from dynatable.query.queryable import TableQuery
from dynatable.query.sorting import SortDirection, SortRequest
from dynatable.query.source import DataSource

__all__ = [
    "DataSource",
    "OrderHandler",
    "QueryBuilder",
    "QueryHook",
    "SortDirection",
    "SortRequest",
    "TableQuery",
]
