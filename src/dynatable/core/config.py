# src/dynatable/core/config.py
"""Configuration shared by responders, routers and error handlers."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from dynatable import __version__


class DynatableConfig(BaseModel):
    """Project-wide settings for dynamic table endpoints.

    The request parameter names default to the ones the React dynamic data
    table client sends (`orderByField`, `orderByDirection`, `page`).
    """

    model_config = ConfigDict(frozen=True)

    project_name: str = "dynatable"
    version: str = __version__
    description: Optional[str] = None
    debug_mode: bool = False

    default_per_page: int = Field(default=15, gt=0)

    order_by_field_param: str = "orderByField"
    order_by_direction_param: str = "orderByDirection"
    page_param: str = "page"
