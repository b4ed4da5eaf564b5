"""Core value types — nouns, readings, fact types, facts and events.

  Noun        an entity: a wrapper around exactly one identifier value
  Reading     (verb, role order, template) used to render a fact as text
  FactType    (arity, verb function, reading, constraints) — a relationship type
  FactSymbol  (verb, nouns) — one instance of a relationship
  Event       (fact, time, readings) — a fact at a point in time

Every type is a frozen dataclass paired with accessor functions, so call
sites read the same whether they hold a domain fact or a meta-fact.
Nothing here validates its inputs; misuse surfaces as an ordinary Python
error at the call site.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from .primitives import NIL, Seq, append, seq


# ---------------------------------------------------------------------------
# Noun: entity identity
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Noun:
    """An entity. Two nouns are equal exactly when their ids are equal."""
    id: Any

    def __repr__(self) -> str:
        return f"Noun({self.id!r})"


def unit(id: Any) -> Noun:
    return Noun(id)


def get_id(noun: Noun) -> Any:
    return noun.id


def bind(noun: Noun, f: Callable[[Any], Noun]) -> Noun:
    """Apply ``f`` to the wrapped id: ``bind(unit(x), f) == f(x)``."""
    return f(get_id(noun))


def equals(a: Noun, b: Noun) -> bool:
    return get_id(a) == get_id(b)


# ---------------------------------------------------------------------------
# Reading: textual rendering of a relationship
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Reading:
    """How a fact is read aloud.

    ``order`` lists role positions (numerals) and ``template`` the string
    fragments placed around the reordered nouns. An inverse reading is just
    another Reading with its own verb and a permuted order.
    """
    verb: Any
    order: Seq = NIL
    template: Seq = NIL

    def __repr__(self) -> str:
        return f"Reading({self.verb!r})"


def get_reading_verb(reading: Reading) -> Any:
    return reading.verb


def get_reading_order(reading: Reading) -> Seq:
    return reading.order


def get_reading_template(reading: Reading) -> Seq:
    return reading.template


# ---------------------------------------------------------------------------
# FactSymbol: one fact
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FactSymbol:
    """A fact: a verb applied to an ordered sequence of nouns.

    The verb is usually a string, but a Noun wrapping the verb name is
    accepted too. Arity is the length of ``nouns``.
    """
    verb: Any
    nouns: Seq = NIL

    def __repr__(self) -> str:
        args = ", ".join(repr(n) for n in self.nouns)
        return f"{verb_name(self)}({args})"


def get_verb_symbol(fact: FactSymbol) -> Any:
    return fact.verb


def get_nouns(fact: FactSymbol) -> Seq:
    return fact.nouns


def verb_name(fact: FactSymbol) -> Any:
    """Return the verb as a plain value, unwrapping a Noun verb."""
    verb = get_verb_symbol(fact)
    if isinstance(verb, Noun):
        return get_id(verb)
    return verb


# ---------------------------------------------------------------------------
# FactType: a relationship type
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FactType:
    """A relationship type.

    ``verb_fn`` takes the full sequence of nouns and returns a FactSymbol.
    It is only called once ``arity`` arguments have been supplied through
    ``make_verb_fact``.
    """
    arity: int
    verb_fn: Callable[[Seq], FactSymbol]
    reading: Reading | None = None
    constraints: Any = NIL

    def __repr__(self) -> str:
        verb = get_reading_verb(self.reading) if self.reading is not None else "?"
        return f"FactType({verb!r}/{self.arity})"


def get_arity(fact_type: FactType) -> int:
    return fact_type.arity


def get_verb(fact_type: FactType) -> Callable[[Seq], FactSymbol]:
    return fact_type.verb_fn


def get_reading(fact_type: FactType) -> Reading | None:
    return fact_type.reading


def get_constraints(fact_type: FactType) -> Any:
    return fact_type.constraints


def make_verb_fact(fact_type: FactType) -> Any:
    """Curry the fact type's verb function over its arity.

    Returns a callable taking one noun per call; the call that supplies the
    last argument returns the FactSymbol built by the verb function, with
    nouns in call order. For arity 0 the verb function is invoked at once
    with an empty sequence and its result is returned directly.

        loves = make_verb_fact(loves_type)
        fact = loves(alice)(bob)
    """
    verb_fn = get_verb(fact_type)

    def collect(args: Seq, remaining: int) -> Any:
        if remaining <= 0:
            return verb_fn(args)
        return lambda arg: collect(append(args, seq(arg)), remaining - 1)

    return collect(NIL, get_arity(fact_type))


def fact_type_for(verb: Any, arity: int, reading: Reading | None = None,
                  constraints: Any = NIL) -> FactType:
    """Build a FactType whose verb function wraps its nouns in a FactSymbol."""
    return FactType(
        arity=arity,
        verb_fn=lambda nouns: FactSymbol(verb, nouns),
        reading=reading,
        constraints=constraints,
    )


# ---------------------------------------------------------------------------
# Event: a fact at a point in time
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Event:
    """A fact paired with a time and the readings relevant to rendering it.

    ``time`` is opaque (a tick, a label, a datetime or a Noun). Ordering
    events in time is left to the caller.
    """
    fact: FactSymbol
    time: Any = None
    readings: Any = NIL


def get_fact(event: Event) -> FactSymbol:
    return event.fact


def get_time(event: Event) -> Any:
    return event.time


def get_event_readings(event: Event) -> Any:
    return event.readings
