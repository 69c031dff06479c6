# src/dynatable/query/sorting.py
"""Sort parameters extracted from a table request."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from sqlalchemy import ColumnElement

from dynatable.core.errors import InvalidSortDirection


class SortDirection(str, Enum):
    """Ordering direction accepted from clients."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Any) -> "SortDirection":
        """Normalize a client supplied direction (case-insensitive)."""
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        raise InvalidSortDirection(value)

    def apply(self, column: ColumnElement) -> ColumnElement:
        """Wrap `column` in the matching ASC/DESC clause."""
        return column.desc() if self is SortDirection.DESC else column.asc()


@dataclass(frozen=True)
class SortRequest:
    """A validated (field, direction) pair."""

    field: str
    direction: SortDirection

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        field_param: str = "orderByField",
        direction_param: str = "orderByDirection",
    ) -> Optional["SortRequest"]:
        """Read the sort request out of `params`.

        Returns None unless both the field and the direction are present.
        Raises InvalidSortDirection when the direction is not asc/desc.
        """
        field = params.get(field_param)
        direction = params.get(direction_param)

        if not field or not direction:
            return None

        return cls(field=str(field), direction=SortDirection.parse(direction))
