# src/dynatable/api/errors.py
"""Maps dynatable exceptions onto HTTP error responses."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from rich.markup import escape

from dynatable.core.config import DynatableConfig
from dynatable.core.errors import InvalidConfiguration, InvalidSortDirection
from dynatable.core.logging import log


def error_body(status_code: int, message: str, detail: Optional[str] = None) -> dict:
    body = {"error": True, "message": message, "status_code": status_code}
    if detail is not None:
        body["detail"] = detail
    return body


def register_exception_handlers(
    app: FastAPI, config: Optional[DynatableConfig] = None
) -> None:
    """Install handlers for bad sort requests and misconfigured tables."""
    config = config or DynatableConfig()

    @app.exception_handler(InvalidSortDirection)
    async def invalid_sort_direction_handler(request: Request, exc: InvalidSortDirection):
        log.warn(f"Rejected {escape(request.url.path)}: {escape(str(exc))}")
        return JSONResponse(status_code=400, content=error_body(400, str(exc)))

    @app.exception_handler(InvalidConfiguration)
    async def invalid_configuration_handler(request: Request, exc: InvalidConfiguration):
        log.error(f"Table misconfigured for {escape(request.url.path)}: {escape(str(exc))}")
        return JSONResponse(
            status_code=500,
            content=error_body(
                500,
                "Internal server error",
                str(exc) if config.debug_mode else None,
            ),
        )
