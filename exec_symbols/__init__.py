"""exec-symbols — an embedded toolkit for modeling facts and deriving schemas.

Everything is an immutable value built by a constructor and read back
through accessor functions:

- Primitives (exec_symbols.primitives): truth values, pairs, persistent
  sequences and numerals
- Types (exec_symbols.types): nouns, readings, fact types, facts and events
- Readings (exec_symbols.readings): rendering facts as natural-language text
- State machines (exec_symbols.state_machine): guarded transitions folded
  over event streams
- Constraints (exec_symbols.constraints): alethic and deontic predicates over
  a fact population, and violation records
- Meta-facts (exec_symbols.meta): the schema itself written as facts

Two layers consume the core:

- RMAP (exec_symbols.rmap) derives a relational table schema from a fact
  population, in a fixed sequence of heuristic passes
- Serialization (exec_symbols.serialization) and the RDF bridge
  (exec_symbols.rdf_bridge) flatten facts to JSON and RDF, and check a
  population against SHACL shapes generated from an RMAP schema. The RDF
  bridge requires rdflib and pyshacl.
"""
