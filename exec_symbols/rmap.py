"""RMAP — relational mapping from a fact population to a table schema.

The pipeline runs a fixed sequence of passes once, each consuming the
output of the one before:

  1. transform_unaries         split off single-noun facts (open-world)
  2. erase_references          drop reference predicates, record black boxes
  3. map_compound_constraints  one table per compound-uniqueness fact type
  4. group_functional_roles    one table per object, keyed on <object>_id
  5. map_independent_objects   a table for every object still without one
  6. unpack_black_boxes        expand black-box columns into <name>_id
  7. handle_subtype_constraints

Passes 3 and 7 currently pass their input through. A Constraint carries
only a modality and a predicate, so the verb a uniqueness constraint
applies to cannot be recovered from it (the ``constraintTarget`` meta-fact
describes that link, but the pipeline does not consult it), and subtype
column qualification is not implemented.

The derivation is heuristic: column types are ``string`` / ``date`` only,
and no relationships or indices are derived yet.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Mapping, Sequence

from .constraints import Constraint
from .primitives import length, nth, to_list
from .types import FactSymbol, Noun, get_id, get_nouns, verb_name

logger = logging.getLogger(__name__)

REFERENCE_PREDICATES = ("identifies", "references", "refers_to")
UNARY_SEMANTICS = "open-world"


# ---------------------------------------------------------------------------
# Schema types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Column:
    name: str
    type: str = "string"


@dataclass(frozen=True)
class Table:
    """A derived table. Tables are identified by ``name``.

    ``object_id`` is the identifier of the object the table was derived from,
    or None for tables not derived from a single object.
    """
    name: str
    columns: tuple[Column, ...] = ()
    key: str | None = None
    rows: tuple[Any, ...] = ()
    functional_roles: tuple[FactSymbol, ...] = ()
    object_id: Any = None

    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]


@dataclass
class Schema:
    tables: dict[str, Table] = field(default_factory=dict)
    relationships: list[Any] = field(default_factory=list)
    indices: list[Any] = field(default_factory=list)


@dataclass(frozen=True)
class UnaryMapping:
    """A unary fact and the world semantics it was mapped under."""
    original: FactSymbol
    transformed: FactSymbol
    semantics: str = UNARY_SEMANTICS


@dataclass
class RMapResult:
    """Result of a pipeline run.

    ``transformed_facts`` holds the unary facts followed by every fact that
    survived reference erasure, so it is shorter than the input whenever a
    reference predicate was erased.
    """
    schema: Schema
    transformed_facts: list[FactSymbol] = field(default_factory=list)
    black_boxes: list[Any] = field(default_factory=list)
    unaries: list[UnaryMapping] = field(default_factory=list)

    def table_names(self) -> list[str]:
        return list(self.schema.tables)


def _ident(noun: Any) -> Any:
    if isinstance(noun, Noun):
        return get_id(noun)
    return noun


def _object_ids(fact: FactSymbol) -> list[Any]:
    return [_ident(noun) for noun in get_nouns(fact)]


def _distinct_objects(facts: Sequence[FactSymbol]) -> list[Any]:
    """Object identifiers in first-seen order, distinct under ``==``."""
    objects: list[Any] = []
    for fact in facts:
        for ident in _object_ids(fact):
            if ident not in objects:
                objects.append(ident)
    return objects


def _table_names(objects: Sequence[Any], taken: Iterable[str] = ()) -> list[str]:
    """Name each object's table ``str(ident)``.

    Distinct identifiers with the same text (``1`` and ``"1"``) keep
    separate tables: later ones get a ``_<type>`` suffix.
    """
    used = set(taken)
    names: list[str] = []
    for ident in objects:
        name = str(ident)
        if name in used:
            name = f"{name}_{type(ident).__name__}"
        used.add(name)
        names.append(name)
    return names


# ---------------------------------------------------------------------------
# Pass 1: unaries
# ---------------------------------------------------------------------------

def transform_unaries(
    facts: Sequence[FactSymbol],
) -> tuple[list[UnaryMapping], list[FactSymbol]]:
    """Split ``facts`` into unary mappings and the remaining facts.

    Every unary is mapped under open-world semantics and passed through
    unchanged; closed-world handling of unaries is not implemented.
    """
    unaries: list[UnaryMapping] = []
    remaining: list[FactSymbol] = []
    for fact in facts:
        if length(get_nouns(fact)) == 1:
            unaries.append(UnaryMapping(original=fact, transformed=fact))
        else:
            remaining.append(fact)
    return unaries, remaining


# ---------------------------------------------------------------------------
# Pass 2: reference predicates
# ---------------------------------------------------------------------------

def is_reference(fact: FactSymbol) -> bool:
    return verb_name(fact) in REFERENCE_PREDICATES


def erase_references(
    facts: Sequence[FactSymbol],
) -> tuple[list[Any], list[FactSymbol]]:
    """Remove reference facts; their first noun becomes a black box.

    Returns ``(black_boxes, facts_without_references)``.
    """
    black_boxes: list[Any] = []
    kept: list[FactSymbol] = []
    for fact in facts:
        if is_reference(fact):
            black_boxes.append(_ident(nth(0, get_nouns(fact))))
        else:
            kept.append(fact)
    return black_boxes, kept


# ---------------------------------------------------------------------------
# Pass 3: compound uniqueness
# ---------------------------------------------------------------------------

def map_compound_constraints(
    facts: Sequence[FactSymbol],
    constraints: Iterable[Constraint],
) -> tuple[dict[str, Table], list[FactSymbol]]:
    """Map fact types under a compound uniqueness constraint to their own table.

    No constraint can be tied to a verb, so no table is produced and every
    fact passes through.
    """
    compound_verbs: set[Any] = set()
    tables: dict[str, Table] = {}
    remaining: list[FactSymbol] = []
    for fact in facts:
        verb = verb_name(fact)
        if verb in compound_verbs:
            tables.setdefault(str(verb), Table(name=str(verb)))
        else:
            remaining.append(fact)
    return tables, remaining


# ---------------------------------------------------------------------------
# Pass 4: functional roles
# ---------------------------------------------------------------------------

def group_functional_roles(facts: Sequence[FactSymbol]) -> list[Table]:
    """One table per distinct object mentioned by ``facts``, in first-seen order.

    Each table is keyed on ``<object>_id`` and lists the facts the object
    plays a role in.
    """
    objects = _distinct_objects(facts)
    return [
        Table(
            name=name,
            columns=(Column("id", "string"),),
            key=f"{name}_id",
            functional_roles=tuple(f for f in facts if ident in _object_ids(f)),
            object_id=ident,
        )
        for ident, name in zip(objects, _table_names(objects))
    ]


# ---------------------------------------------------------------------------
# Pass 5: independent objects
# ---------------------------------------------------------------------------

def _is_mapped(ident: Any, tables: Sequence[Table]) -> bool:
    for table in tables:
        if table.object_id is not None:
            if table.object_id == ident:
                return True
        elif table.name == str(ident):
            return True
    return False


def map_independent_objects(
    facts: Sequence[FactSymbol],
    existing_tables: Iterable[Table],
) -> list[Table]:
    """Give every object not already mapped a table of its own.

    A table maps an object when it was derived from it, or, for tables
    without an ``object_id``, when it is named after it.
    """
    existing = list(existing_tables)
    mapped = [t.name for t in existing]
    independent = [o for o in _distinct_objects(facts) if not _is_mapped(o, existing)]

    return [
        Table(
            name=name,
            columns=(Column("id", "string"), Column("created_at", "date")),
            key=f"{name}_id",
            object_id=ident,
        )
        for ident, name in zip(independent, _table_names(independent, taken=mapped))
    ]


# ---------------------------------------------------------------------------
# Pass 6: black boxes
# ---------------------------------------------------------------------------

def unpack_black_boxes(tables: Iterable[Table], black_boxes: Iterable[Any]) -> list[Table]:
    """Replace each column named after a black box with ``<name>_id``."""
    boxes = {str(b) for b in black_boxes}
    unpacked: list[Table] = []
    for table in tables:
        columns: list[Column] = []
        for column in table.columns:
            if column.name in boxes:
                columns.append(Column(f"{column.name}_id", "string"))
            else:
                columns.append(column)
        unpacked.append(replace(table, columns=tuple(columns)))
    return unpacked


# ---------------------------------------------------------------------------
# Pass 7: subtypes
# ---------------------------------------------------------------------------

def handle_subtype_constraints(
    tables: Iterable[Table],
    constraints: Iterable[Constraint],
    subtypes: Mapping[str, Sequence[str]] | None = None,
) -> list[Table]:
    """Qualify columns for subtype constraints. Currently returns ``tables``."""
    return list(tables)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def rmap(
    facts: Iterable[FactSymbol],
    constraints: Iterable[Constraint] = (),
    subtypes: Mapping[str, Sequence[str]] | None = None,
) -> RMapResult:
    """Run the relational mapping pipeline over ``facts``.

    The output is deterministic for a given input order. Malformed facts
    raise from the accessors; nothing else in the pipeline raises.
    """
    facts = to_list(facts)
    constraints = to_list(constraints)

    unaries, remaining = transform_unaries(facts)
    logger.debug("rmap: %d unary, %d other facts", len(unaries), len(remaining))

    black_boxes, kept = erase_references(remaining)
    logger.debug("rmap: erased %d reference facts", len(remaining) - len(kept))

    fact_tables, rest = map_compound_constraints(kept, constraints)
    object_tables = group_functional_roles(rest)
    independent_tables = map_independent_objects(
        rest, list(fact_tables.values()) + object_tables
    )
    logger.debug(
        "rmap: %d fact tables, %d object tables, %d independent tables",
        len(fact_tables), len(object_tables), len(independent_tables),
    )

    tables = list(fact_tables.values()) + object_tables + independent_tables
    tables = unpack_black_boxes(tables, black_boxes)
    tables = handle_subtype_constraints(tables, constraints, subtypes or {})

    schema = Schema(tables={t.name: t for t in tables})
    return RMapResult(
        schema=schema,
        transformed_facts=[u.transformed for u in unaries] + kept,
        black_boxes=black_boxes,
        unaries=unaries,
    )


RMAP = rmap
