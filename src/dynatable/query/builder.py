# src/dynatable/query/builder.py
from typing import Any, Callable, Mapping, Optional

from dynatable.core.config import DynatableConfig
from dynatable.core.logging import color_palette, log
from dynatable.query.queryable import TableQuery
from dynatable.query.sorting import SortDirection, SortRequest

QueryHook = Callable[[TableQuery], Any]
OrderHandler = Callable[[TableQuery, SortDirection], Any]


class QueryBuilder:
    """
    Builds a filtered and sorted SQLAlchemy query from table request parameters.
    """

    def __init__(
        self,
        params: Mapping[str, Any],
        query_hook: Optional[QueryHook] = None,
        order_overrides: Optional[Mapping[str, OrderHandler]] = None,
        config: Optional[DynatableConfig] = None,
    ):
        self.params = params
        self.query_hook = query_hook
        self.order_overrides = order_overrides or {}
        self.config = config or DynatableConfig()

    def sort_request(self) -> Optional[SortRequest]:
        return SortRequest.from_params(
            self.params,
            field_param=self.config.order_by_field_param,
            direction_param=self.config.order_by_direction_param,
        )

    def build(self, initial_query: TableQuery) -> TableQuery:
        """
        Applies the query hook and the requested ordering to the initial query.

        The sort request is validated before anything else so a bad direction
        never reaches the hook or the database. The query is not executed.
        """
        sort = self.sort_request()
        query = initial_query

        if self.query_hook is not None:
            self.query_hook(query)

        if sort is None:
            return query

        handler = self.order_overrides.get(sort.field)
        if handler is not None:
            log.debug(
                f"Ordering {query!r} by {color_palette['field'](sort.field)} "
                f"{color_palette['direction'](sort.direction.value)} (override)"
            )
            handler(query, sort.direction)
        else:
            log.debug(
                f"Ordering {query!r} by {color_palette['field'](sort.field)} "
                f"{color_palette['direction'](sort.direction.value)}"
            )
            query.order_by_field(sort.field, sort.direction)

        return query
