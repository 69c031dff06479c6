# src/dynatable/api/response.py
"""JSON envelope for paginated table responses."""

from typing import Any, Dict, List, Mapping, Optional, Type

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import inspect as sa_inspect

from dynatable.db.introspection import computed_fields
from dynatable.db.pagination import Page


def serialize_item(item: Any, schema: Optional[Type[BaseModel]] = None) -> Any:
    """Convert one row into JSON-ready data.

    A pydantic `schema` takes precedence. Otherwise mapped instances expose
    their column attributes followed by their computed fields.
    """
    if schema is not None:
        return schema.model_validate(item, from_attributes=True).model_dump(mode="json")

    if isinstance(item, Mapping):
        # multi-entity rows map entity names to mapped instances
        return {key: serialize_item(value) for key, value in item.items()}

    state = sa_inspect(item, raiseerr=False)
    mapper = getattr(state, "mapper", None)
    if mapper is None:
        return item

    record = {attr.key: getattr(item, attr.key) for attr in mapper.column_attrs}
    for field in computed_fields(type(item)):
        if field not in record and hasattr(item, field):
            record[field] = getattr(item, field)
    return record


class TableResponse(BaseModel):
    """Success envelope: the page items, metadata and paging counters."""

    model_config = ConfigDict(populate_by_name=True)

    data: List[Any]
    meta: Dict[str, Any] = {}
    page: int
    per_page: int
    total: int
    last_page: int
    from_: Optional[int] = Field(default=None, alias="from")
    to: Optional[int] = None

    @classmethod
    def success(
        cls,
        page: Page,
        meta: Optional[Dict[str, Any]] = None,
        schema: Optional[Type[BaseModel]] = None,
    ) -> "TableResponse":
        return cls(
            data=[serialize_item(item, schema) for item in page.items],
            meta=meta or {},
            page=page.page,
            per_page=page.per_page,
            total=page.total,
            last_page=page.last_page,
            from_=page.first_item,
            to=page.last_item,
        )

    def body(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_response(self, status_code: int = 200) -> JSONResponse:
        return JSONResponse(status_code=status_code, content=self.body())
