# src/dynatable/api/routes.py
"""FastAPI routes serving dynamic tables."""

from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from dynatable.core.config import DynatableConfig
from dynatable.core.logging import color_palette, log
from dynatable.query.source import DataSource
from dynatable.responder import TableResponder

Configure = Callable[[TableResponder], Any]


class TableRouter:
    """Registers GET endpoints that answer with a `TableResponder`."""

    def __init__(
        self,
        router: APIRouter,
        db_dependency: Callable[..., Session],
        config: Optional[DynatableConfig] = None,
        registry: Any = None,
    ):
        self.router = router
        self.db_dependency = db_dependency
        self.config = config or DynatableConfig()
        self.registry = registry

    def add_table(
        self,
        path: str,
        source: Any,
        configure: Optional[Configure] = None,
        summary: Optional[str] = None,
    ) -> None:
        """Add a table endpoint at `path`.

        `configure` is called with each request's fresh responder, so hooks,
        overrides and meta can be attached per endpoint.
        """
        # Resolve now so a bad model fails at startup, not on first request
        data_source = DataSource.resolve(source, self.registry)
        config = self.config

        @self.router.get(
            path,
            summary=summary or f"List {data_source.name} records",
            description=(
                f"Paginated {data_source.name} records. Sort with "
                f"`{config.order_by_field_param}` and `{config.order_by_direction_param}`."
            ),
        )
        def read_table(
            request: Request,
            db: Session = Depends(self.db_dependency),
        ) -> JSONResponse:
            responder = TableResponder(data_source, request, db, config=config)
            if configure is not None:
                configure(responder)
            return responder.respond()

        log.success(
            f"Registered table {color_palette['model'](data_source.name)} "
            f"at {color_palette['path'](self.router.prefix + path)}"
        )
