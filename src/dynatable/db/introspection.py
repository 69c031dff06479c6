# src/dynatable/db/introspection.py
"""Model introspection: resolving table models and their computed fields."""

import importlib
import re
from functools import cached_property
from typing import Any, Iterable, List, Mapping, Optional, Type

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Mapper

from dynatable.core.errors import InvalidConfiguration

_SNAKE_BOUNDARY = re.compile(r"([^_])(?=[A-Z])")


def snake_case(name: str) -> str:
    """`fullName` -> `full_name`, `IsActive` -> `is_active`; snake names pass through."""
    return _SNAKE_BOUNDARY.sub(r"\1_", name.replace(" ", "")).lower()


def _lookup_registry(name: str, registry: Any) -> Optional[Type[Any]]:
    # Accepts a DeclarativeBase subclass or a bare sqlalchemy.orm.registry
    registry = getattr(registry, "registry", registry)
    for mapper in getattr(registry, "mappers", ()):
        cls = mapper.class_
        if name in (cls.__name__, f"{cls.__module__}.{cls.__qualname__}"):
            return cls
    return None


def _import_class(path: str) -> Optional[Type[Any]]:
    module_name, _, attr = path.rpartition(".")
    if not module_name:
        return None
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    return getattr(module, attr, None)


def resolve_model(model: Any, registry: Any = None) -> Type[Any]:
    """Resolve a mapped class, a registered class name or a dotted import path.

    Raises:
        InvalidConfiguration: if the identifier does not name a mapped SQLAlchemy class
    """
    if isinstance(model, str):
        resolved = _lookup_registry(model, registry) if registry is not None else None
        if resolved is None:
            resolved = _import_class(model)
        if resolved is None:
            raise InvalidConfiguration(f"Provided class '{model}' does not exist.")
        model = resolved

    if not isinstance(model, type):
        raise InvalidConfiguration(
            f"Expected a model class or a Select statement, got {type(model).__name__}."
        )

    if not isinstance(sa_inspect(model, raiseerr=False), Mapper):
        raise InvalidConfiguration(
            f"Provided class '{model.__name__}' is not a mapped SQLAlchemy model."
        )
    return model


def _declared_properties(model: Type[Any]) -> Iterable[str]:
    for klass in model.__mro__:
        if klass is object:
            continue
        for name, value in vars(klass).items():
            if name.startswith("_"):
                continue
            if isinstance(value, (property, cached_property)):
                yield name


def computed_fields(model: Optional[Type[Any]]) -> List[str]:
    """Names of the attributes a model derives in Python instead of storing.

    A model may list them explicitly in `__computed_fields__`; otherwise every
    public `property` or `cached_property` on the class (and its bases) counts. Names are
    snake_cased and deduplicated in discovery order.
    """
    if model is None:
        return []

    declared = getattr(model, "__computed_fields__", None)
    names = declared if declared is not None else _declared_properties(model)

    fields: List[str] = []
    for name in names:
        field = snake_case(name)
        if field and field not in fields:
            fields.append(field)
    return fields


def disallowed_ordering_fields(
    model: Optional[Type[Any]], order_overrides: Mapping[str, Any]
) -> List[str]:
    """Computed fields a client may not sort on: those without an override."""
    return [field for field in computed_fields(model) if field not in order_overrides]
