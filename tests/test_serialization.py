"""Tests for JSON serialization of core values and RMAP results."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json
from datetime import datetime

import pytest
from exec_symbols.constraints import ALETHIC, Constraint, Violation
from exec_symbols.primitives import NIL, TRUE, UINT, pair, seq
from exec_symbols.rmap import rmap
from exec_symbols.serialization import from_json, rmap_to_json, serialize, to_json
from exec_symbols.types import (
    Event, FactSymbol, FactType, Reading, make_verb_fact, unit,
)


def _loves_fact() -> FactSymbol:
    reading = Reading(unit("loves"), seq(UINT(0), UINT(1)), seq(unit(""), unit(" loves "), unit("")))
    loves_type = FactType(2, lambda nouns: FactSymbol(unit("loves"), nouns), reading, unit(None))
    return make_verb_fact(loves_type)(unit("Alice"))(unit("Bob"))


class TestSerialize:
    def test_fact_symbol(self):
        data = serialize(_loves_fact())
        assert data == {
            "type": "FactSymbol",
            "verb_symbol": "loves",
            "nouns": ["Alice", "Bob"],
        }

    def test_constraint_drops_predicate(self):
        data = serialize(Constraint(ALETHIC, lambda pop: TRUE))
        assert data == {"type": "Constraint", "modality": "alethic"}

    def test_named_constraint(self):
        data = serialize(Constraint(ALETHIC, lambda pop: TRUE, name="unique"))
        assert data["name"] == "unique"

    def test_string_tagged_constraint(self):
        data = serialize(Constraint("deontic", lambda pop: TRUE))
        assert data == {"type": "Constraint", "modality": "deontic"}
        assert type(serialize(ALETHIC)) is str

    def test_event(self):
        when = datetime(2024, 1, 2, 3, 4, 5)
        data = serialize(Event(_loves_fact(), unit(when)))
        assert data["type"] == "Event"
        assert data["fact"]["verb_symbol"] == "loves"
        assert data["time"] == "2024-01-02T03:04:05"
        assert data["readings"] == []

    def test_reading(self):
        data = serialize(Reading("loves", seq(0, 1), seq("", " loves ", "")))
        assert data == {
            "type": "Reading",
            "verb": "loves",
            "order": [0, 1],
            "template": ["", " loves ", ""],
        }

    def test_fact_type(self):
        data = serialize(FactType(2, lambda nouns: None, Reading("r"), NIL))
        assert data["type"] == "FactType"
        assert data["arity"] == 2
        assert data["reading"]["verb"] == "r"

    def test_violation(self):
        c = Constraint(ALETHIC, lambda pop: False)
        data = serialize(Violation(c, unit("Alice"), "no name"))
        assert data["entity"] == "Alice"
        assert data["reason"] == "no name"
        assert data["constraint"]["modality"] == "alethic"

    def test_containers(self):
        assert serialize([unit(1), pair("a", unit("b"))]) == [1, ["a", "b"]]
        assert serialize({"k": seq(unit("x"))}) == {"k": ["x"]}
        assert serialize(NIL) == []

    def test_plain_functions(self):
        assert serialize(lambda x: x) == "[Function]"

    def test_circular(self):
        data: list = []
        data.append(data)
        assert serialize(data) == ["[Circular]"]


class TestJson:
    def test_round_trip_keeps_identifiers(self):
        parsed = from_json(to_json(_loves_fact()))
        assert parsed["verb_symbol"] == "loves"
        assert parsed["nouns"] == ["Alice", "Bob"]

    def test_event_round_trip(self):
        event = Event(_loves_fact(), unit("2024-01-01T00:00:00"), unit(None))
        text = to_json(event)
        assert isinstance(text, str)
        parsed = from_json(text)
        assert parsed["type"] == "Event"
        assert parsed["time"] == "2024-01-01T00:00:00"
        assert parsed["readings"] is None

    def test_kwargs_passed_to_json(self):
        text = to_json({"b": 1, "a": 2}, sort_keys=True)
        assert text == '{"a": 2, "b": 1}'


class TestRmapToJson:
    def test_shape(self):
        result = rmap([_loves_fact()], [Constraint(ALETHIC, lambda pop: TRUE)])
        data = rmap_to_json(result)

        tables = data["schema"]["tables"]
        assert [t["name"] for t in tables] == ["Alice", "Bob"]
        assert tables[0]["key"] == "Alice_id"
        assert tables[0]["columns"] == [{"name": "id", "type": "string"}]
        assert data["schema"]["relationships"] == []
        assert data["schema"]["indices"] == []

        assert data["transformedFacts"] == [{"verb": "loves", "nouns": ["Alice", "Bob"]}]
        json.dumps(data)

    def test_full_result_serializes(self):
        result = rmap([_loves_fact()])
        data = serialize(result)
        assert data["schema"]["tables"]["Alice"]["functional_roles"][0]["verb_symbol"] == "loves"
