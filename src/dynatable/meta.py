# src/dynatable/meta.py
"""Response metadata assembly."""

from typing import Any, Callable, Dict, List, Mapping

from dynatable.core.logging import color_palette, log
from dynatable.query.queryable import TableQuery

DISALLOW_ORDERING_KEY = "disallow_ordering_by"

MetaProvider = Callable[[TableQuery, List[Any]], Any]


class MetaAssembler:
    """Evaluates caller metadata against the final query and collection.

    Values in the mapping are either literals or callables taking
    ``(query, items)``. ``disallow_ordering_by`` is managed internally and
    always overwritten.
    """

    def __init__(self, meta: Mapping[str, Any]):
        self.meta = meta

    def assemble(
        self, query: TableQuery, items: List[Any], disallowed: List[str]
    ) -> Dict[str, Any]:
        out: Dict[str, Any] = {}

        for key, value in self.meta.items():
            out[key] = value(query, items) if callable(value) else value

        if DISALLOW_ORDERING_KEY in out:
            log.debug(
                f"Overwriting caller value for reserved meta key "
                f"{color_palette['field'](DISALLOW_ORDERING_KEY)}"
            )
        out[DISALLOW_ORDERING_KEY] = list(disallowed)
        return out
