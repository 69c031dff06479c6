"""Core utilities for the dynatable framework."""

from dynatable.core.config import DynatableConfig
from dynatable.core.errors import (
    DynatableError,
    InvalidConfiguration,
    InvalidSortDirection,
)
from dynatable.core.logging import Logger, LogLevel, color_palette, log

__all__ = [
    "DynatableConfig",
    "DynatableError",
    "InvalidConfiguration",
    "InvalidSortDirection",
    "Logger",
    "LogLevel",
    "log",
    "color_palette",
]
