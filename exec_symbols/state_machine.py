"""Guarded state machines driven by event streams.

A transition is a plain function ``(state, input) -> state``. Guarded
transitions built with ``make_transition`` leave the state untouched when
the guard does not hold; a failed guard is not an error.

``run_machine`` feeds the fact of every event to the transition, earliest
event first, and returns the final state. The machine value itself is never
modified, so one machine can be run over any number of streams.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from .primitives import TRUE, Pair, Seq, fold_left, fst, pair, seq, snd
from .types import Event, get_fact

logger = logging.getLogger(__name__)

Transition = Callable[[Any, Any], Any]


# ---------------------------------------------------------------------------
# State monad helpers
# ---------------------------------------------------------------------------

def unit_state(value: Any) -> Callable[[Any], Pair]:
    """Wrap ``value`` as a state action that leaves the state unchanged."""
    return lambda state: pair(value, state)


def bind_state(
    action: Callable[[Any], Pair],
    f: Callable[[Any], Callable[[Any], Pair]],
) -> Callable[[Any], Pair]:
    """Run ``action``, then the action ``f`` builds from its result value."""
    def run(state: Any) -> Pair:
        result = action(state)
        return f(fst(result))(snd(result))
    return run


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def make_transition(
    guard: Callable[[Any, Any], Any],
    compute_next: Callable[[Any, Any], Any],
) -> Transition:
    """Build ``transition(state, input)``.

    Returns ``compute_next(state, input)`` when ``guard(state, input)`` is
    truthy, otherwise ``state`` itself.
    """
    def transition(state: Any, input: Any) -> Any:
        if guard(state, input):
            return compute_next(state, input)
        return state
    return transition


def unguarded(compute_next: Callable[[Any, Any], Any]) -> Transition:
    return make_transition(lambda _state, _input: TRUE, compute_next)


# ---------------------------------------------------------------------------
# StateMachine
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StateMachine:
    """A transition plus the initial state. Running it does not change it."""
    transition: Transition
    initial: Any = None


def get_transition(machine: StateMachine) -> Transition:
    return machine.transition


def get_initial(machine: StateMachine) -> Any:
    return machine.initial


def run_machine(machine: StateMachine, stream: Iterable[Event]) -> Any:
    """Fold the machine's transition over the facts of ``stream``.

    Events are applied in stream order (earliest first), so each transition
    sees the state produced by all preceding events.
    """
    transition = get_transition(machine)
    state = fold_left(
        lambda current, event: transition(current, get_fact(event)),
        get_initial(machine),
        stream,
    )
    logger.debug("state machine finished in state %r", state)
    return state


def trace_machine(machine: StateMachine, stream: Iterable[Event]) -> Seq:
    """Return every state the machine passes through, initial state first."""
    transition = get_transition(machine)
    states = [get_initial(machine)]
    for event in stream:
        states.append(transition(states[-1], get_fact(event)))
    return seq(*states)
