"""People and Places — fact types, readings and constraints.

A small population of people, their names and where they live:

- loves(person, person)        "Alice loves Bob" / "Bob is loved by Alice"
- hasName(person, name)        "person1 has name John"
- livesAt(person, address)     "person1 lives at address1"
- smokes(person)               unary, mapped open-world by RMAP
- identifies(key, person)      reference predicate, erased by RMAP

The same declarations are also written down as meta-facts, so the model
can be queried with the same accessors as the population it describes.
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

from exec_symbols import meta
from exec_symbols.constraints import ALETHIC, DEONTIC, Constraint
from exec_symbols.primitives import UINT, nth, seq
from exec_symbols.types import (
    FactSymbol,
    Reading,
    equals,
    fact_type_for,
    get_nouns,
    make_verb_fact,
    unit,
    verb_name,
)


# ---------------------------------------------------------------------------
# Readings
# ---------------------------------------------------------------------------

def _binary_reading(verb: str, phrase: str) -> Reading:
    return Reading(verb, seq(UINT(0), UINT(1)), seq("", f" {phrase} ", ""))


def _inverse_reading(verb: str, phrase: str) -> Reading:
    return Reading(verb, seq(UINT(1), UINT(0)), seq("", f" {phrase} ", ""))


LOVES = _binary_reading("loves", "loves")
IS_LOVED_BY = _inverse_reading("isLovedBy", "is loved by")
HAS_NAME = _binary_reading("hasName", "has name")
IS_NAME_OF = _inverse_reading("isNameOf", "is the name of")
LIVES_AT = _binary_reading("livesAt", "lives at")
SMOKES = Reading("smokes", seq(UINT(0)), seq("", " smokes"))
IDENTIFIES = _binary_reading("identifies", "identifies")

READINGS = [LOVES, IS_LOVED_BY, HAS_NAME, IS_NAME_OF, LIVES_AT, SMOKES, IDENTIFIES]


# ---------------------------------------------------------------------------
# Fact types
# ---------------------------------------------------------------------------

def build_fact_types() -> dict:
    """Build the fact types keyed by verb."""
    return {
        "loves": fact_type_for("loves", 2, LOVES),
        "hasName": fact_type_for("hasName", 2, HAS_NAME),
        "livesAt": fact_type_for("livesAt", 2, LIVES_AT),
        "smokes": fact_type_for("smokes", 1, SMOKES),
        "identifies": fact_type_for("identifies", 2, IDENTIFIES),
    }


def build_meta_facts() -> list[FactSymbol]:
    """Describe the model itself as reserved-verb facts."""
    return [
        meta.noun_type("Person"),
        meta.noun_type("Name"),
        meta.noun_type("Address"),
        meta.fact_type("loves", 2),
        meta.role("loves", 0, "lover"),
        meta.role("loves", 1, "beloved"),
        meta.reading("loves", seq("", " loves ", "")),
        meta.inverse_reading("loves", "isLovedBy", seq(1, 0), seq("", " is loved by ", "")),
        meta.fact_type("hasName", 2),
        meta.role("hasName", 0, "person"),
        meta.role("hasName", 1, "name"),
        meta.reading("hasName", seq("", " has name ", "")),
        meta.fact_type("livesAt", 2),
        meta.fact_type("smokes", 1),
        meta.constraint("everyoneNamed", ALETHIC.value),
        meta.constraint_target("everyoneNamed", "hasName", 0),
        meta.constraint("noSelfLove", DEONTIC.value),
        meta.constraint_target("noSelfLove", "loves", 0),
    ]


# ---------------------------------------------------------------------------
# Population
# ---------------------------------------------------------------------------

def build_population(fact_types: dict | None = None) -> list[FactSymbol]:
    """A population where every constraint holds."""
    fact_types = fact_types or build_fact_types()
    loves = make_verb_fact(fact_types["loves"])
    has_name = make_verb_fact(fact_types["hasName"])
    lives_at = make_verb_fact(fact_types["livesAt"])
    smokes = make_verb_fact(fact_types["smokes"])
    identifies = make_verb_fact(fact_types["identifies"])

    alice, bob = unit("Alice"), unit("Bob")
    return [
        loves(alice)(bob),
        has_name(alice)(unit("Alice Smith")),
        has_name(bob)(unit("Bob Jones")),
        lives_at(alice)(unit("address1")),
        lives_at(bob)(unit("address1")),
        smokes(bob),
        identifies(unit("ssn-123"))(alice),
    ]


def build_population_with_gaps(fact_types: dict | None = None) -> list[FactSymbol]:
    """Carol loves herself and has no name."""
    fact_types = fact_types or build_fact_types()
    loves = make_verb_fact(fact_types["loves"])
    carol = unit("Carol")
    return build_population(fact_types) + [loves(carol)(carol)]


# ---------------------------------------------------------------------------
# Constraints
# ---------------------------------------------------------------------------

def _people(population) -> list:
    people = []
    for fact in population:
        if verb_name(fact) == "loves":
            for noun in get_nouns(fact):
                if noun not in people:
                    people.append(noun)
    return people


def everyone_named(population) -> bool:
    """Every person who loves or is loved has a name."""
    named = [nth(0, get_nouns(f)) for f in population if verb_name(f) == "hasName"]
    return all(any(equals(p, n) for n in named) for p in _people(population))


def no_self_love(population) -> bool:
    """Nobody ought to love themselves."""
    return not any(
        equals(nth(0, get_nouns(f)), nth(1, get_nouns(f)))
        for f in population
        if verb_name(f) == "loves"
    )


def build_constraints() -> list[Constraint]:
    return [
        Constraint(ALETHIC, everyone_named, name="everyoneNamed"),
        Constraint(DEONTIC, no_self_love, name="noSelfLove"),
    ]
