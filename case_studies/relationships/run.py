"""People and Places — end-to-end exec-symbols walkthrough.

  Part 1  readings: render facts forwards and through inverse readings
  Part 2  meta-facts: query the model's own declarations
  Part 3  constraints: alethic failures vs deontic advisories
  Part 4  RMAP: derive a table schema and export it as JSON
  Part 5  SHACL: check a population against the derived schema

Run from the repository root:

    python -m case_studies.relationships.run
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

from exec_symbols import meta
from exec_symbols.constraints import evaluate_constraints
from exec_symbols.rdf_bridge import shacl_validate
from exec_symbols.readings import render, render_event
from exec_symbols.rmap import rmap
from exec_symbols.serialization import rmap_to_json, to_json
from exec_symbols.primitives import seq
from exec_symbols.types import Event, get_id, get_nouns

from .domain import (
    IS_LOVED_BY,
    READINGS,
    build_constraints,
    build_fact_types,
    build_meta_facts,
    build_population,
    build_population_with_gaps,
)


def print_header(title: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}")


def print_part(number: int, name: str) -> None:
    print(f"\n{'─' * 60}")
    print(f"  PART {number}: {name}")
    print(f"{'─' * 60}")


# ===========================================================================
# Part 1: readings
# ===========================================================================

def run_readings_demo(population) -> None:
    print_part(1, "Readings")
    fact_types = build_fact_types()
    for fact in population:
        reading = fact_types[str(fact.verb)].reading
        print(f"    {render(fact, reading)}")

    loves_fact = population[0]
    print(f"\n  Inverse: {render(loves_fact, IS_LOVED_BY)}")

    event = Event(loves_fact, "t0", seq(*READINGS))
    print(f"  Event reading: {render_event(event)}")
    print(f"  Event inverse: {render_event(event, verb='isLovedBy')}")


# ===========================================================================
# Part 2: meta-facts
# ===========================================================================

def run_meta_demo() -> None:
    print_part(2, "Meta-facts")
    declarations = build_meta_facts()
    print(f"  {len(declarations)} declarations, "
          f"all meta: {all(meta.is_meta_fact(f) for f in declarations)}")

    for verb in (meta.NOUN_TYPE, meta.FACT_TYPE, meta.CONSTRAINT):
        selected = meta.select_meta(declarations, verb)
        names = [str(get_id(next(iter(get_nouns(f))))) for f in selected]
        print(f"    {verb:<12} {', '.join(names)}")


# ===========================================================================
# Part 3: constraints
# ===========================================================================

def run_constraint_demo(title: str, population) -> None:
    print_part(3, f"Constraints: {title}")
    report = evaluate_constraints(build_constraints(), population)
    for line in report.summary().splitlines():
        print(f"  {line}")


# ===========================================================================
# Part 4: RMAP
# ===========================================================================

def run_rmap_demo(population):
    print_part(4, "RMAP")
    result = rmap(population, build_constraints())

    print(f"  Unaries ({len(result.unaries)}):")
    for mapping in result.unaries:
        print(f"    - {mapping.original!r} [{mapping.semantics}]")
    print(f"  Black boxes: {result.black_boxes}")
    print(f"  Tables ({len(result.schema.tables)}):")
    for table in result.schema.tables.values():
        roles = sorted({str(f.verb) for f in table.functional_roles})
        print(f"    - {table.name:<12} key={table.key:<16} roles={roles}")

    print("\n  JSON:")
    print(to_json(rmap_to_json(result), indent=2))
    return result


# ===========================================================================
# Part 5: SHACL
# ===========================================================================

def run_shacl_demo(result, population, title: str) -> None:
    print_part(5, f"SHACL: {title}")
    shacl_result = shacl_validate(result.schema, population)
    for line in shacl_result.summary().splitlines():
        print(f"  {line}")


def main():
    print_header("People and Places")

    population = build_population()
    with_gaps = build_population_with_gaps()

    run_readings_demo(population)
    run_meta_demo()
    run_constraint_demo("complete population", population)
    run_constraint_demo("population with gaps", with_gaps)

    result = run_rmap_demo(population)
    run_shacl_demo(result, population, "same population")
    # Bob's name is dropped, so the table derived for it has no object
    run_shacl_demo(result, [f for f in population if "Bob Jones" not in
                            [get_id(n) for n in get_nouns(f)]], "Bob's name removed")

    print(f"\n{'=' * 60}")
    print("  Walkthrough Complete")
    print(f"{'=' * 60}")


if __name__ == "__main__":
    main()
