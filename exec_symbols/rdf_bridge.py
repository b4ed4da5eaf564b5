"""RDF bridge — facts to RDF graphs, RMAP schemas to SHACL shapes.

Translates:
  1. FactSymbols → an RDF data graph
       unary    (data:a, rdf:type, exs:verb)
       binary   (data:a, exs:verb, data:b)
       n-ary    a blank node typed exs:verb with exs:role0 .. exs:roleN links
     Every noun node also gets exs:id (its identifier as xsd:string) and an
     rdfs:label.
  2. An RMAP Schema → a SHACL shapes graph
       each table   → sh:NodeShape with sh:targetNode data:<table object>
       each column  → property shape with sh:datatype and sh:maxCount 1;
                      the ``id`` column is mandatory (sh:minCount 1)
     The verbs of a table's functional roles are recorded as rdfs:comment.
  3. shacl_validate() runs pySHACL over the two graphs, which checks that
     every derived table's object is present in a fact population. Each
     result is reported against the table and column it concerns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable
from urllib.parse import quote, unquote

from rdflib import BNode, Graph, Literal, Namespace, RDF, RDFS, URIRef, XSD
from rdflib.namespace import SH

from .primitives import to_list
from .rmap import Schema, Table
from .types import FactSymbol, Noun, get_id, get_nouns, verb_name

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Namespaces
# ---------------------------------------------------------------------------

EXS = Namespace("http://exec-symbols.example.org/")
EXS_DATA = Namespace("http://exec-symbols.example.org/data/")


# ---------------------------------------------------------------------------
# Column type mapping: RMAP column types → XSD datatypes
# ---------------------------------------------------------------------------

_TYPE_MAP = {
    "string": XSD.string,
    "date": XSD.dateTime,
    "integer": XSD.integer,
    "boolean": XSD.boolean,
}


def _local(value: Any) -> str:
    return quote(str(value), safe="")


def _ident(noun: Any) -> Any:
    if isinstance(noun, Noun):
        return get_id(noun)
    return noun


def noun_uri(identifier: Any) -> URIRef:
    return EXS_DATA[_local(identifier)]


def verb_uri(verb: Any) -> URIRef:
    return EXS[_local(verb)]


def table_node(table: Table) -> URIRef:
    """The data node a table describes: its object, or failing that its name."""
    if table.object_id is not None:
        return noun_uri(table.object_id)
    return noun_uri(table.name)


# ---------------------------------------------------------------------------
# Facts → RDF data graph
# ---------------------------------------------------------------------------

def facts_to_rdf(facts: Iterable[FactSymbol]) -> Graph:
    """Translate a fact population into an RDF data graph."""
    dg = Graph()
    dg.bind("exs", EXS)
    dg.bind("data", EXS_DATA)

    for fact in facts:
        verb = verb_uri(verb_name(fact))
        identifiers = [_ident(n) for n in get_nouns(fact)]
        for identifier in identifiers:
            uri = noun_uri(identifier)
            dg.add((uri, EXS["id"], Literal(str(identifier), datatype=XSD.string)))
            dg.add((uri, RDFS.label, Literal(str(identifier))))

        if len(identifiers) == 1:
            dg.add((noun_uri(identifiers[0]), RDF.type, verb))
        elif len(identifiers) == 2:
            dg.add((noun_uri(identifiers[0]), verb, noun_uri(identifiers[1])))
        else:
            node = BNode()
            dg.add((node, RDF.type, verb))
            for index, identifier in enumerate(identifiers):
                dg.add((node, EXS[f"role{index}"], noun_uri(identifier)))

    logger.debug("facts_to_rdf: %d triples", len(dg))
    return dg


# ---------------------------------------------------------------------------
# Schema → SHACL shapes graph
# ---------------------------------------------------------------------------

def schema_to_shacl(schema: Schema) -> Graph:
    """Translate an RMAP schema into a SHACL shapes graph."""
    sg = Graph()
    sg.bind("sh", SH)
    sg.bind("exs", EXS)
    sg.bind("xsd", XSD)

    for table in schema.tables.values():
        shape_uri = EXS[f"{_local(table.name)}Shape"]
        sg.add((shape_uri, RDF.type, SH.NodeShape))
        sg.add((shape_uri, SH.targetNode, table_node(table)))
        sg.add((shape_uri, RDFS.label, Literal(f"Shape for table {table.name}")))

        for column in table.columns:
            prop_shape = BNode()
            sg.add((shape_uri, SH.property, prop_shape))
            sg.add((prop_shape, SH.path, EXS[_local(column.name)]))
            sg.add((prop_shape, SH.name, Literal(column.name)))
            if column.type in _TYPE_MAP:
                sg.add((prop_shape, SH.datatype, _TYPE_MAP[column.type]))
            if column.name == "id":
                sg.add((prop_shape, SH.minCount, Literal(1)))
            sg.add((prop_shape, SH.maxCount, Literal(1)))

        verbs = []
        for fact in table.functional_roles:
            verb = str(verb_name(fact))
            if verb not in verbs:
                verbs.append(verb)
        for verb in verbs:
            sg.add((shape_uri, RDFS.comment, Literal(f"[functional role] {verb}")))

    return sg


# ---------------------------------------------------------------------------
# SHACL validation
# ---------------------------------------------------------------------------

def shacl_validate(schema: Schema, facts: Iterable[FactSymbol]) -> SHACLValidationResult:
    """Validate a fact population against the shapes derived from ``schema``.

    Each SHACL result is traced back to the table whose object it targets
    and the column its path names.
    """
    from pyshacl import validate as pyshacl_validate

    shapes_graph = schema_to_shacl(schema)
    data_graph = facts_to_rdf(to_list(facts))

    conforms, results_graph, results_text = pyshacl_validate(
        data_graph,
        shacl_graph=shapes_graph,
        inference="none",
        abort_on_first=False,
    )

    tables_by_node = {table_node(t): t.name for t in schema.tables.values()}
    violations = _table_violations(results_graph, tables_by_node)
    logger.debug("shacl_validate: conforms=%s, %d violations", conforms, len(violations))
    return SHACLValidationResult(
        conforms=conforms,
        violations=violations,
        results_text=results_text,
        shapes_graph=shapes_graph,
        data_graph=data_graph,
    )


def _column_of(path: Any) -> str:
    if path is None:
        return ""
    text = str(path)
    if text.startswith(str(EXS)):
        return unquote(text[len(str(EXS)):])
    return text


def _table_violations(results_graph: Graph, tables_by_node: dict) -> list[SHACLViolation]:
    violations = []
    for result in results_graph.subjects(RDF.type, SH.ValidationResult):
        focus = results_graph.value(result, SH.focusNode)
        message = results_graph.value(result, SH.resultMessage)
        violations.append(SHACLViolation(
            table=tables_by_node.get(focus),
            column=_column_of(results_graph.value(result, SH.resultPath)),
            focus_node=str(focus) if focus is not None else "",
            message=str(message) if message is not None else "",
        ))
    # results_graph iteration order is arbitrary
    order = list(tables_by_node.values())
    violations.sort(key=lambda v: (
        order.index(v.table) if v.table in order else len(order), v.column, v.message,
    ))
    return violations


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class SHACLViolation:
    """A SHACL result for one column of one derived table.

    ``table`` is None when the focus node is not the object of any table.
    """
    table: str | None
    column: str
    focus_node: str
    message: str

    def __repr__(self) -> str:
        return f"SHACLViolation({self.table}.{self.column}: {self.message})"


@dataclass
class SHACLValidationResult:
    """Outcome of checking a fact population against an RMAP schema."""
    conforms: bool
    violations: list[SHACLViolation] = field(default_factory=list)
    results_text: str = ""
    shapes_graph: Graph | None = None
    data_graph: Graph | None = None

    def failing_tables(self) -> list[str]:
        """Names of the tables with at least one violation, in schema order."""
        names: list[str] = []
        for v in self.violations:
            if v.table is not None and v.table not in names:
                names.append(v.table)
        return names

    def violations_for(self, table: str) -> list[SHACLViolation]:
        return [v for v in self.violations if v.table == table]

    def summary(self) -> str:
        status = "CONFORMS" if self.conforms else "DOES NOT CONFORM"
        lines = [f"SHACL Validation: {status}", "-" * 50]
        if not self.violations:
            lines.append("  Every table's object is present.")
        for table in self.failing_tables():
            lines.append(f"  Table {table}:")
            for v in self.violations_for(table):
                lines.append(f"    - {v.column}: {v.message}")
        unmatched = [v for v in self.violations if v.table is None]
        if unmatched:
            lines.append(f"  Outside any table ({len(unmatched)}):")
            for v in unmatched:
                lines.append(f"    - {v.focus_node} {v.column}: {v.message}")
        return "\n".join(lines)

    def shapes_as_turtle(self) -> str:
        if self.shapes_graph is None:
            return ""
        return self.shapes_graph.serialize(format="turtle")

    def data_as_turtle(self) -> str:
        if self.data_graph is None:
            return ""
        return self.data_graph.serialize(format="turtle")
