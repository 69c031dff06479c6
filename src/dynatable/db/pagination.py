# src/dynatable/db/pagination.py
"""LIMIT/OFFSET pagination of SQLAlchemy statements."""

import math
from dataclasses import dataclass, field
from typing import Any, List, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from dynatable.core.errors import InvalidConfiguration
from dynatable.core.logging import color_palette, log

# Largest OFFSET a database driver can bind (64-bit signed)
MAX_OFFSET = 2**63 - 1


@dataclass
class Page:
    """One page of results plus the counters the database reported.

    `items` may be replaced after the fact; `page`, `per_page` and `total`
    always describe the original query.
    """

    page: int
    per_page: int
    total: int
    items: List[Any] = field(default_factory=list)

    @property
    def last_page(self) -> int:
        return max(math.ceil(self.total / self.per_page), 1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def first_item(self) -> Optional[int]:
        return self.offset + 1 if self.items else None

    @property
    def last_item(self) -> Optional[int]:
        return self.offset + len(self.items) if self.items else None


def validate_per_page(per_page: Any) -> int:
    if isinstance(per_page, bool) or not isinstance(per_page, int) or per_page < 1:
        raise InvalidConfiguration(
            f"Records per page must be a positive integer, got {per_page!r}."
        )
    return per_page


def parse_page_number(value: Any, per_page: int = 1) -> int:
    """Turn a request value into a 1-based page number, defaulting to 1.

    Pages whose offset would not fit a 64-bit signed integer count as invalid.
    """
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 1
    if page < 1 or (page - 1) * per_page > MAX_OFFSET:
        return 1
    return page


def returns_entities(statement: Select) -> bool:
    """True when the statement selects exactly one ORM entity, e.g. `select(User)`."""
    descriptions = statement.column_descriptions
    if len(descriptions) != 1:
        return False
    entity = descriptions[0].get("entity")
    return entity is not None and descriptions[0].get("expr") is entity


def paginate(session: Session, statement: Select, per_page: int, page: int = 1) -> Page:
    """Count the statement's rows and fetch a single page of them.

    Errors raised by the database propagate unchanged.
    """
    per_page = validate_per_page(per_page)
    page = parse_page_number(page, per_page)

    count_statement = select(func.count()).select_from(statement.order_by(None).subquery())
    total = session.scalar(count_statement) or 0

    result = session.execute(statement.limit(per_page).offset((page - 1) * per_page))
    if returns_entities(statement):
        items = list(result.scalars().unique().all())
    else:
        items = [dict(row) for row in result.mappings().all()]

    log.debug(
        f"Fetched page {color_palette['count'](page)} "
        f"({color_palette['count'](len(items))} of {color_palette['count'](total)} rows)"
    )
    return Page(page=page, per_page=per_page, total=total, items=items)
