# src/dynatable/responder.py
"""Main table responder: request in, paginated JSON table out."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from dynatable.api.response import TableResponse
from dynatable.core.config import DynatableConfig
from dynatable.core.errors import InvalidConfiguration
from dynatable.core.logging import color_palette, log
from dynatable.db.introspection import disallowed_ordering_fields
from dynatable.db.pagination import Page, parse_page_number, validate_per_page
from dynatable.meta import MetaAssembler
from dynatable.query.builder import OrderHandler, QueryBuilder, QueryHook
from dynatable.query.queryable import TableQuery
from dynatable.query.source import DataSource

CollectionHook = Callable[[List[Any]], Optional[Any]]


@dataclass(frozen=True)
class ResponderConfig:
    """Validated, read-only snapshot of a responder's settings."""

    source: DataSource
    per_page: int
    query_hook: Optional[QueryHook] = None
    order_overrides: Mapping[str, OrderHandler] = field(
        default_factory=lambda: MappingProxyType({})
    )
    collection_hook: Optional[CollectionHook] = None
    meta: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    schema: Optional[Type[BaseModel]] = None


def _request_params(request: Any) -> Mapping[str, Any]:
    # Starlette requests carry their query string in `query_params`
    params = getattr(request, "query_params", request)
    if params is None:
        return {}
    if not hasattr(params, "get"):
        raise InvalidConfiguration(
            f"Request parameters must be a mapping, got {type(params).__name__}."
        )
    return params


class TableResponder:
    """Builds the JSON response for one dynamic table request.

    Configure it with the fluent setters, then call `respond()` once:

        return (
            TableResponder(User, request, db)
            .per_page(25)
            .query(lambda q: q.where(User.active.is_(True)))
            .override_order_by({"full_name": order_by_full_name})
            .meta({"label": "Users", "active": lambda q, items: q.count()})
            .respond()
        )

    The source is a mapped model class (or its registered name / dotted
    path) or a pre-built `Select`. Invalid sources raise
    InvalidConfiguration right away.
    """

    def __init__(
        self,
        source: Any,
        request: Any,
        session: Session,
        config: Optional[DynatableConfig] = None,
        registry: Any = None,
    ):
        self.config = config or DynatableConfig()
        self.source = DataSource.resolve(source, registry)
        self.params = _request_params(request)
        self.session = session

        self._per_page: Any = self.config.default_per_page
        self._query_hook: Optional[QueryHook] = None
        self._order_overrides: Dict[str, OrderHandler] = {}
        self._collection_hook: Optional[CollectionHook] = None
        self._meta: Dict[str, Any] = {}
        self._schema: Optional[Type[BaseModel]] = None

    # ===== Fluent configuration =====

    def per_page(self, per_page: int) -> "TableResponder":
        """Sets the number of records to return per page."""
        self._per_page = per_page
        return self

    def query(self, query_hook: QueryHook) -> "TableResponder":
        """Sets the callable used to manipulate the table query."""
        self._query_hook = query_hook
        return self

    def override_order_by(self, overrides: Mapping[str, OrderHandler]) -> "TableResponder":
        """Sets the field name to callable mapping that replaces generic ordering."""
        self._order_overrides = dict(overrides)
        return self

    def collection_manipulator(self, collection_hook: CollectionHook) -> "TableResponder":
        """Sets the callable used to manipulate the page items."""
        self._collection_hook = collection_hook
        return self

    def meta(self, meta: Optional[Mapping[str, Any]] = None) -> "TableResponder":
        """Sets the response meta; callable values receive (query, items)."""
        self._meta = dict(meta or {})
        return self

    def schema(self, schema: Type[BaseModel]) -> "TableResponder":
        """Sets the pydantic model used to serialize each item."""
        self._schema = schema
        return self

    def build(self) -> ResponderConfig:
        """Validate the fluent settings and freeze them."""
        per_page = validate_per_page(self._per_page)

        for name, hook in (
            ("Query hook", self._query_hook),
            ("Collection manipulator", self._collection_hook),
        ):
            if hook is not None and not callable(hook):
                raise InvalidConfiguration(f"{name} must be callable.")

        for field_name, handler in self._order_overrides.items():
            if not callable(handler):
                raise InvalidConfiguration(
                    f"Order by override for '{field_name}' must be callable."
                )

        if self._schema is not None and not (
            isinstance(self._schema, type) and issubclass(self._schema, BaseModel)
        ):
            raise InvalidConfiguration("Item schema must be a pydantic model class.")

        return ResponderConfig(
            source=self.source,
            per_page=per_page,
            query_hook=self._query_hook,
            order_overrides=MappingProxyType(dict(self._order_overrides)),
            collection_hook=self._collection_hook,
            meta=MappingProxyType(dict(self._meta)),
            schema=self._schema,
        )

    # ===== Pipeline =====

    def _build_query(self, settings: ResponderConfig) -> TableQuery:
        initial = TableQuery(
            self.session, settings.source.base_statement(), settings.source.model
        )
        builder = QueryBuilder(
            self.params,
            query_hook=settings.query_hook,
            order_overrides=settings.order_overrides,
            config=self.config,
        )
        return builder.build(initial)

    def _paginate(self, query: TableQuery, settings: ResponderConfig) -> Page:
        page_number = parse_page_number(
            self.params.get(self.config.page_param), settings.per_page
        )
        return query.paginate(settings.per_page, page_number)

    def _manipulate_collection(self, page: Page, settings: ResponderConfig) -> Page:
        if settings.collection_hook is None:
            return page

        manipulated = settings.collection_hook(page.items)
        if manipulated is not None:
            page.items = list(manipulated)
        return page

    def _make_meta(
        self, query: TableQuery, items: List[Any], settings: ResponderConfig
    ) -> Dict[str, Any]:
        disallowed = disallowed_ordering_fields(
            settings.source.model, settings.order_overrides
        )
        return MetaAssembler(settings.meta).assemble(query, items, disallowed)

    def build_response(self) -> TableResponse:
        """Run the pipeline: build, paginate, manipulate, assemble meta."""
        settings = self.build()

        with log.timed(f"Table response for {color_palette['model'](settings.source.name)}"):
            query = self._build_query(settings)
            page = self._paginate(query, settings)
            page = self._manipulate_collection(page, settings)
            meta = self._make_meta(query, page.items, settings)

        return TableResponse.success(page, meta, schema=settings.schema)

    def respond(self) -> JSONResponse:
        return self.build_response().to_response()
