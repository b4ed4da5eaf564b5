"""Rendering facts as text through readings.

A reading's template holds the fragments that surround the nouns; its
order says which noun fills each slot. Rendering alternates fragments and
noun identifiers:

    template  ["", " loves ", ""]     order [0, 1]
    nouns     [Alice, Bob]         -> "Alice loves Bob"

The inverse reading of the same fact type is a separate Reading
("is loved by", order [1, 0]) declared by the caller. There is no built-in
verb → reading registry; callers pass the readings they want used, either
directly or attached to an Event.
"""

from __future__ import annotations

from typing import Any, Iterable

from .primitives import NIL, reorder, to_list
from .types import (
    Event,
    FactSymbol,
    Noun,
    Reading,
    get_event_readings,
    get_fact,
    get_id,
    get_nouns,
    get_reading_order,
    get_reading_template,
    get_reading_verb,
    verb_name,
)


def _text(value: Any) -> str:
    if value is NIL or value is None:
        return ""
    if isinstance(value, Noun):
        return _text(get_id(value))
    return str(value)


def _plain(value: Any) -> Any:
    if isinstance(value, Noun):
        return get_id(value)
    return value


def render(fact: FactSymbol, reading: Reading) -> str:
    """Render ``fact`` with ``reading``.

    The reading's verb is not checked against the fact's verb, which is what
    lets an inverse reading render the primary fact. Nouns missing from the
    fact (order positions past its arity) render as empty strings.
    """
    nouns = to_list(reorder(get_nouns(fact), get_reading_order(reading)))
    fragments = to_list(get_reading_template(reading))

    parts: list[str] = []
    for i, fragment in enumerate(fragments):
        parts.append(_text(fragment))
        if i < len(nouns):
            parts.append(_text(nouns[i]))
    # More nouns than fragment gaps: keep the remaining nouns, space separated
    for noun in nouns[len(fragments):]:
        parts.append(" " + _text(noun))
    return "".join(parts)


def find_reading(readings: Iterable[Reading] | None, verb: Any) -> Reading | None:
    """Return the first reading in ``readings`` whose verb is ``verb``."""
    if readings is None:
        return None
    target = _plain(verb)
    for reading in readings:
        if _plain(get_reading_verb(reading)) == target:
            return reading
    return None


def render_event(
    event: Event,
    verb: Any = None,
    fallback: Iterable[Reading] | None = None,
) -> str | None:
    """Render an event's fact with a reading attached to the event.

    ``verb`` selects which reading to use and defaults to the fact's own
    verb; pass an inverse verb to render the inverse reading. When the event
    carries no matching reading, ``fallback`` is searched. Returns None if
    neither has one.
    """
    fact = get_fact(event)
    wanted = verb if verb is not None else verb_name(fact)
    reading = find_reading(get_event_readings(event) or (), wanted)
    if reading is None:
        reading = find_reading(fallback, wanted)
    if reading is None:
        return None
    return render(fact, reading)
