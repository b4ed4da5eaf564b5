"""Constraints, modalities and violation records.

A constraint pairs a modality with a predicate over a *population* — any
collection of facts the caller chooses (a list of FactSymbols, a sequence,
a dict keyed by verb...). The modality tells the caller how to treat a
failure:

  ALETHIC   must always hold; a failure means the population is rejected
  DEONTIC   ought to hold; a failure is tolerated but flagged

Evaluating a constraint never produces Violation records on its own.
Violation is a passive shape for callers that want to record which entity
broke which constraint and why.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable

from .primitives import Pair, pair


class Modality(str, Enum):
    """The two constraint modalities.

    Members are the reserved string tags themselves, so ``ALETHIC ==
    "alethic"`` and a constraint may be built with either form.
    """
    ALETHIC = "alethic"
    DEONTIC = "deontic"


ALETHIC = Modality.ALETHIC
DEONTIC = Modality.DEONTIC


def modality_tag(modality: Any) -> str:
    """Return the plain string tag of ``modality`` (a member or a string)."""
    return getattr(modality, "value", modality)


# ---------------------------------------------------------------------------
# Constraint
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Constraint:
    """A modality-tagged predicate over a population.

    Two constraints are equal only when they share the same predicate
    object. ``name`` is only used in reports and reprs.
    """
    modality: Modality | str
    predicate: Callable[[Any], Any]
    name: str = ""

    def __repr__(self) -> str:
        label = f" {self.name}" if self.name else ""
        return f"Constraint({modality_tag(self.modality)}{label})"


def get_modality(constraint: Constraint) -> Modality | str:
    return constraint.modality


def get_predicate(constraint: Constraint) -> Callable[[Any], Any]:
    return constraint.predicate


def evaluate_constraint(constraint: Constraint, population: Any) -> Any:
    """Apply the constraint's predicate to ``population``.

    The result is returned as-is; a falsy result is an ordinary outcome, not
    an error.
    """
    return get_predicate(constraint)(population)


def evaluate_with_modality(constraint: Constraint, population: Any) -> Pair:
    """Return ``pair(modality, result)`` so callers can reject or warn."""
    return pair(get_modality(constraint), evaluate_constraint(constraint, population))


# ---------------------------------------------------------------------------
# Violation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Violation:
    """A record of ``entity`` breaking ``constraint``, with a free-form reason."""
    constraint: Any
    entity: Any
    reason: Any = None


def get_violation_constraint(violation: Violation) -> Any:
    return violation.constraint


def get_violation_entity(violation: Violation) -> Any:
    return violation.entity


def get_violation_reason(violation: Violation) -> Any:
    return violation.reason


# ---------------------------------------------------------------------------
# Evaluating many constraints
# ---------------------------------------------------------------------------

@dataclass
class EvaluationReport:
    """Outcome of evaluating a set of constraints over one population.

    Failed alethic constraints are ``failures`` and make the population
    invalid. Failed deontic constraints are ``advisories``: they are
    reported but do not invalidate it.
    """
    failures: list[Constraint] = field(default_factory=list)
    advisories: list[Constraint] = field(default_factory=list)
    satisfied: list[Constraint] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.failures) == 0

    def summary(self) -> str:
        lines = []
        status = "PASS" if self.is_valid else "FAIL"
        lines.append(f"Constraint Evaluation: {status}")
        lines.append("-" * 50)
        if self.failures:
            lines.append(f"  Alethic failures ({len(self.failures)}):")
            for c in self.failures:
                lines.append(f"    - {c.name or c!r}")
        if self.advisories:
            lines.append(f"  Deontic advisories ({len(self.advisories)}):")
            for c in self.advisories:
                lines.append(f"    - {c.name or c!r}")
        if not self.failures and not self.advisories:
            lines.append(f"  All {len(self.satisfied)} constraints hold.")
        return "\n".join(lines)


def evaluate_constraints(
    constraints: Iterable[Constraint], population: Any
) -> EvaluationReport:
    """Evaluate every constraint over ``population`` and sort the outcomes.

    Exceptions raised by a predicate propagate to the caller.
    """
    report = EvaluationReport()
    for constraint in constraints:
        result = evaluate_with_modality(constraint, population)
        if result.second:
            report.satisfied.append(constraint)
        elif modality_tag(result.first) == ALETHIC.value:
            report.failures.append(constraint)
        else:
            report.advisories.append(constraint)
    return report
