"""API components for serving dynamic tables."""

from dynatable.api.response import TableResponse, serialize_item
from dynatable.api.errors import register_exception_handlers
from dynatable.api.routes import TableRouter

__all__ = [
    "TableResponse",
    "TableRouter",
    "register_exception_handlers",
    "serialize_item",
]
