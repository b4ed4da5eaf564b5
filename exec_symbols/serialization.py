"""JSON serialization of facts, events, constraints and RMAP results.

``serialize`` flattens the core value types into plain dicts, lists and
scalars. Functions cannot be represented, so verb functions and constraint
predicates are dropped (or written as ``"[Function]"``); ``from_json``
therefore restores data only, never executable values.
"""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from .constraints import Constraint, Violation
from .primitives import Cons, Pair, _NilType
from .rmap import RMapResult
from .types import Event, FactSymbol, FactType, Noun, Reading, get_id, verb_name


def serialize(value: Any) -> Any:
    """Convert ``value`` to JSON-ready data."""
    return _serialize(value, set())


def _serialize(value: Any, in_progress: set[int]) -> Any:
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Noun):
        return _serialize(get_id(value), in_progress)

    marker = id(value)
    if marker in in_progress:
        return "[Circular]"
    in_progress.add(marker)
    try:
        return _serialize_compound(value, in_progress)
    finally:
        in_progress.discard(marker)


def _serialize_compound(value: Any, in_progress: set[int]) -> Any:
    def recurse(v: Any) -> Any:
        return _serialize(v, in_progress)

    if isinstance(value, FactSymbol):
        return {
            "type": "FactSymbol",
            "verb_symbol": recurse(verb_name(value)),
            "nouns": [recurse(n) for n in value.nouns],
        }
    if isinstance(value, Constraint):
        data = {"type": "Constraint", "modality": recurse(value.modality)}
        if value.name:
            data["name"] = value.name
        return data
    if isinstance(value, Event):
        return {
            "type": "Event",
            "fact": recurse(value.fact),
            "time": recurse(value.time),
            "readings": recurse(value.readings),
        }
    if isinstance(value, Reading):
        return {
            "type": "Reading",
            "verb": recurse(value.verb),
            "order": recurse(value.order),
            "template": recurse(value.template),
        }
    if isinstance(value, FactType):
        return {
            "type": "FactType",
            "arity": recurse(value.arity),
            "reading": recurse(value.reading),
        }
    if isinstance(value, Violation):
        return {
            "type": "Violation",
            "constraint": recurse(value.constraint),
            "entity": recurse(value.entity),
            "reason": recurse(value.reason),
        }
    if isinstance(value, (Cons, _NilType, Pair, list, tuple, set, frozenset)):
        return [recurse(item) for item in value]
    if isinstance(value, dict):
        return {str(k): recurse(v) for k, v in value.items()}
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: recurse(getattr(value, f.name)) for f in fields(value)}
    if callable(value):
        return "[Function]"
    return str(value)


def to_json(value: Any, **kwargs: Any) -> str:
    return json.dumps(serialize(value), **kwargs)


def from_json(text: str) -> Any:
    """Parse JSON produced by ``to_json``. Only plain data comes back."""
    return json.loads(text)


def rmap_to_json(result: RMapResult) -> dict[str, Any]:
    """Flatten an RMAP result into the plain schema/transformedFacts shape."""
    tables = [
        {
            "name": table.name,
            "key": table.key,
            "columns": [{"name": c.name, "type": c.type} for c in table.columns],
            "rows": serialize(list(table.rows)),
        }
        for table in result.schema.tables.values()
    ]
    return {
        "schema": {
            "tables": tables,
            "relationships": serialize(result.schema.relationships),
            "indices": serialize(result.schema.indices),
        },
        "transformedFacts": [
            {
                "verb": serialize(verb_name(fact)),
                "nouns": [serialize(n) for n in fact.nouns],
            }
            for fact in result.transformed_facts
        ],
    }
