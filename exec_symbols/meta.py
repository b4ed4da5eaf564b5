"""Meta-fact declarations — the schema described as ordinary facts.

Each builder returns a FactSymbol whose verb is one of the reserved strings
below and whose nouns carry the declaration's arguments. Schema metadata
can therefore be stored, filtered and serialized exactly like domain facts.

Declarations are descriptive only: ``fact_type("loves", 2)`` does not
check that any FactType with that verb or arity exists.
"""

from __future__ import annotations

from typing import Any, Iterable

from .primitives import Seq, seq
from .types import FactSymbol, Noun, unit, verb_name

NOUN_TYPE = "nounType"
FACT_TYPE = "factType"
ROLE = "role"
READING = "reading"
INVERSE_READING = "inverseReading"
CONSTRAINT = "constraint"
CONSTRAINT_TARGET = "constraintTarget"
VIOLATION = "violation"

RESERVED_VERBS = frozenset({
    NOUN_TYPE,
    FACT_TYPE,
    ROLE,
    READING,
    INVERSE_READING,
    CONSTRAINT,
    CONSTRAINT_TARGET,
    VIOLATION,
})


def _wrap(value: Any) -> Noun:
    if isinstance(value, Noun):
        return value
    return unit(value)


def noun_type(name: Any) -> FactSymbol:
    return FactSymbol(NOUN_TYPE, seq(unit(name)))


def fact_type(verb: Any, arity: Any) -> FactSymbol:
    return FactSymbol(FACT_TYPE, seq(unit(verb), unit(arity)))


def role(verb: Any, index: Any, name: Any) -> FactSymbol:
    return FactSymbol(ROLE, seq(unit(verb), unit(index), unit(name)))


def reading(verb: Any, parts: Seq) -> FactSymbol:
    """Declare a reading; ``parts`` (the template) is stored unwrapped."""
    return FactSymbol(READING, seq(unit(verb), parts))


def inverse_reading(primary: Any, inverse: Any, order: Seq, template: Seq) -> FactSymbol:
    return FactSymbol(INVERSE_READING, seq(unit(primary), unit(inverse), order, template))


def constraint(id: Any, modality: Any) -> FactSymbol:
    return FactSymbol(CONSTRAINT, seq(unit(id), unit(modality)))


def constraint_target(constraint_id: Any, verb: Any, role_index: Any) -> FactSymbol:
    return FactSymbol(CONSTRAINT_TARGET, seq(unit(constraint_id), unit(verb), unit(role_index)))


def violation(noun: Any, constraint_id: Any, reason: Any) -> FactSymbol:
    return FactSymbol(VIOLATION, seq(_wrap(noun), unit(constraint_id), unit(reason)))


# ---------------------------------------------------------------------------
# Reflection
# ---------------------------------------------------------------------------

def is_meta_fact(fact: FactSymbol) -> bool:
    return verb_name(fact) in RESERVED_VERBS


def select_meta(facts: Iterable[FactSymbol], verb: str) -> list[FactSymbol]:
    """Return the facts declared with the reserved ``verb``, in input order."""
    return [f for f in facts if verb_name(f) == verb]
