# src/dynatable/core/errors.py
"""Exceptions raised by the table responder pipeline."""

from typing import Any


class DynatableError(Exception):
    """Base class for every error raised by dynatable."""


class InvalidConfiguration(DynatableError, ValueError):
    """The responder was given a data source or option it cannot work with."""


class InvalidSortDirection(DynatableError, ValueError):
    """The request asked for an ordering direction other than asc/desc."""

    def __init__(self, direction: Any):
        self.direction = direction
        super().__init__(
            f"Order by direction must be either asc or desc, got {direction!r}."
        )
