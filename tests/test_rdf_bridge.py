"""Tests for the fact→RDF and schema→SHACL bridge.

Checks the graphs produced from facts and RMAP schemas, and that pySHACL
validation reports missing objects for a population that lacks them.
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from rdflib import Graph, Literal, RDF, RDFS
from rdflib.namespace import SH, XSD

from exec_symbols.primitives import seq
from exec_symbols.rmap import Column, Schema, Table, rmap
from exec_symbols.rdf_bridge import (
    EXS,
    EXS_DATA,
    facts_to_rdf,
    noun_uri,
    schema_to_shacl,
    shacl_validate,
    table_node,
)
from exec_symbols.types import FactSymbol, unit


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _population() -> list[FactSymbol]:
    """Alice loves Bob, Bob owns a bike, Alice smokes."""
    return [
        FactSymbol("loves", seq(unit("Alice"), unit("Bob"))),
        FactSymbol(unit("owns"), seq(unit("Bob"), unit("bike"))),
        FactSymbol("smokes", seq(unit("Alice"))),
    ]


# ---------------------------------------------------------------------------
# Data graph tests
# ---------------------------------------------------------------------------

class TestFactsToRdf:
    def test_binary_fact_is_a_triple(self):
        dg = facts_to_rdf(_population())
        assert (EXS_DATA["Alice"], EXS["loves"], EXS_DATA["Bob"]) in dg
        assert (EXS_DATA["Bob"], EXS["owns"], EXS_DATA["bike"]) in dg

    def test_unary_fact_is_a_type(self):
        dg = facts_to_rdf(_population())
        assert (EXS_DATA["Alice"], RDF.type, EXS["smokes"]) in dg

    def test_nouns_carry_id_and_label(self):
        dg = facts_to_rdf(_population())
        assert dg.value(EXS_DATA["bike"], EXS["id"]) == Literal("bike", datatype=XSD.string)
        assert dg.value(EXS_DATA["bike"], RDFS.label) == Literal("bike")

    def test_ternary_fact_uses_blank_node(self):
        fact = FactSymbol("gives", seq(unit("Ann"), unit("book"), unit("Ben")))
        dg = facts_to_rdf([fact])
        [node] = list(dg.subjects(RDF.type, EXS["gives"]))
        assert dg.value(node, EXS["role0"]) == EXS_DATA["Ann"]
        assert dg.value(node, EXS["role1"]) == EXS_DATA["book"]
        assert dg.value(node, EXS["role2"]) == EXS_DATA["Ben"]

    def test_identifiers_are_quoted(self):
        uri = noun_uri("a b/c")
        assert str(uri) == str(EXS_DATA) + "a%20b%2Fc"


# ---------------------------------------------------------------------------
# Shapes graph tests
# ---------------------------------------------------------------------------

class TestSchemaToShacl:
    def test_one_node_shape_per_table(self):
        result = rmap(_population())
        sg = schema_to_shacl(result.schema)
        node_shapes = list(sg.subjects(RDF.type, SH.NodeShape))
        assert len(node_shapes) == len(result.schema.tables) == 3

    def test_target_node(self):
        result = rmap(_population())
        sg = schema_to_shacl(result.schema)
        assert (EXS["AliceShape"], SH.targetNode, EXS_DATA["Alice"]) in sg

    def test_table_targets_its_object(self):
        facts = [
            FactSymbol("has", seq(unit(1), unit("x"))),
            FactSymbol("has", seq(unit("1"), unit("y"))),
        ]
        schema = rmap(facts).schema
        assert list(schema.tables) == ["1", "x", "1_str", "y"]
        assert table_node(schema.tables["1_str"]) == noun_uri("1")
        sg = schema_to_shacl(schema)
        assert (EXS["1_strShape"], SH.targetNode, EXS_DATA["1"]) in sg
        assert table_node(Table(name="loose")) == EXS_DATA["loose"]

    def test_id_column_mandatory(self):
        result = rmap(_population())
        sg = schema_to_shacl(result.schema)
        [prop] = list(sg.objects(EXS["BobShape"], SH.property))
        assert sg.value(prop, SH.path) == EXS["id"]
        assert sg.value(prop, SH.datatype) == XSD.string
        assert sg.value(prop, SH.minCount).toPython() == 1
        assert sg.value(prop, SH.maxCount).toPython() == 1

    def test_optional_and_typed_columns(self):
        schema = Schema(tables={
            "t": Table(name="t", columns=(Column("id"), Column("created_at", "date"))),
        })
        sg = schema_to_shacl(schema)
        props = list(sg.objects(EXS["tShape"], SH.property))
        created = [p for p in props if sg.value(p, SH.path) == EXS["created_at"]]
        assert len(created) == 1
        assert sg.value(created[0], SH.datatype) == XSD.dateTime
        assert sg.value(created[0], SH.minCount) is None

    def test_functional_roles_as_comments(self):
        result = rmap(_population())
        sg = schema_to_shacl(result.schema)
        comments = {str(c) for c in sg.objects(EXS["BobShape"], RDFS.comment)}
        assert comments == {"[functional role] loves", "[functional role] owns"}

    def test_turtle_parses(self):
        sg = schema_to_shacl(rmap(_population()).schema)
        text = sg.serialize(format="turtle")
        assert "NodeShape" in text
        reparsed = Graph().parse(data=text, format="turtle")
        assert len(reparsed) == len(sg)


# ---------------------------------------------------------------------------
# Validation tests
# ---------------------------------------------------------------------------

class TestShaclValidate:
    def test_full_population_conforms(self):
        facts = _population()
        result = shacl_validate(rmap(facts).schema, facts)
        assert result.conforms
        assert result.violations == []
        assert "CONFORMS" in result.summary()

    def test_missing_object_violates(self):
        facts = _population()
        schema = rmap(facts).schema
        # drop the only fact mentioning the bike
        result = shacl_validate(schema, [facts[0], facts[2]])
        assert not result.conforms
        assert len(result.violations) == 1
        [violation] = result.violations
        assert violation.table == "bike"
        assert violation.column == "id"
        assert violation.focus_node == str(EXS_DATA["bike"])
        assert result.failing_tables() == ["bike"]
        assert result.violations_for("bike") == [violation]
        assert result.violations_for("Alice") == []
        summary = result.summary()
        assert "DOES NOT CONFORM" in summary
        assert "Table bike:" in summary
        assert "- id:" in summary

    def test_violations_follow_schema_order(self):
        facts = _population()
        schema = rmap(facts).schema
        result = shacl_validate(schema, [])
        assert result.failing_tables() == ["Alice", "Bob", "bike"]
        assert [v.table for v in result.violations] == ["Alice", "Bob", "bike"]

    def test_named_table_without_object(self):
        schema = Schema(tables={"ghost": Table(name="ghost", columns=(Column("id"),))})
        result = shacl_validate(schema, _population())
        assert result.failing_tables() == ["ghost"]
        assert result.violations[0].focus_node == str(EXS_DATA["ghost"])

    def test_turtle_output(self):
        facts = _population()
        result = shacl_validate(rmap(facts).schema, facts)
        assert "NodeShape" in result.shapes_as_turtle()
        assert "Alice" in result.data_as_turtle()
