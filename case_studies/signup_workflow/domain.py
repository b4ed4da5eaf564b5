"""User Signup — service calls recorded as events.

A signup handler talks to three services (ai, api, db). Each service is
wrapped so that every call is first recorded in an event log as a fact
``<service>.<method>(key:value, ...)`` and then forwarded to the real
implementation. The log is an explicit list: ``run_workflow`` takes one (or
starts a new one) and hands it back with the result.

After the handler finishes, a state machine is run over the log to find
how far the signup got:

  started --apollo search--> enriched --users create--> saved --slack post--> notified
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Callable

from exec_symbols.primitives import NIL, seq
from exec_symbols.state_machine import StateMachine, make_transition, run_machine, unguarded
from exec_symbols.types import Event, FactSymbol, unit, verb_name


# ---------------------------------------------------------------------------
# Call tracking
# ---------------------------------------------------------------------------

def call_fact(service: str, method: str, args: dict | None) -> FactSymbol:
    """The fact recorded for one call: one noun per ``key:value`` argument."""
    nouns = [unit(f"{key}:{value}") for key, value in (args or {}).items()]
    return FactSymbol(f"{service}.{method}", seq(*nouns))


def track_service(service: str, methods: dict[str, Callable], log: list) -> SimpleNamespace:
    """Wrap ``methods`` so each call appends an Event to ``log`` first.

    Event times are positions in the log, so a replayed workflow produces
    the same log.
    """
    def wrap(method: str, fn: Callable) -> Callable:
        def tracked(**kwargs):
            log.append(Event(call_fact(service, method, kwargs), len(log), NIL))
            return fn(**kwargs)
        return tracked

    return SimpleNamespace(**{name: wrap(name, fn) for name, fn in methods.items()})


# ---------------------------------------------------------------------------
# Progress machine
# ---------------------------------------------------------------------------

STAGES = ("started", "enriched", "saved", "notified")

_ADVANCES_ON = {
    "started": "api.apollo_search",
    "enriched": "db.users_create",
    "saved": "api.slack_post_message",
}


def _advances(stage: str, fact: FactSymbol) -> bool:
    return _ADVANCES_ON.get(stage) == verb_name(fact)


def _next_stage(stage: str, fact: FactSymbol) -> str:
    return STAGES[STAGES.index(stage) + 1]


PROGRESS_MACHINE = StateMachine(make_transition(_advances, _next_stage), "started")
CALL_COUNTER = StateMachine(unguarded(lambda count, fact: count + 1), 0)


# ---------------------------------------------------------------------------
# Workflow runner
# ---------------------------------------------------------------------------

@dataclass
class WorkflowRun:
    """What a tracked handler returned, plus its log and final stage."""
    result: Any
    log: list = field(default_factory=list)
    stage: str = "started"
    calls: int = 0

    def summary(self) -> str:
        lines = [f"Workflow: stage={self.stage}, {self.calls} recorded events"]
        for event in self.log:
            args = ", ".join(str(n.id) for n in event.fact.nouns)
            lines.append(f"  [{event.time}] {verb_name(event.fact)}({args})")
        return "\n".join(lines)


def run_workflow(
    trigger: str,
    handler: Callable,
    services: dict[str, dict[str, Callable]],
    event: dict,
    log: list | None = None,
) -> WorkflowRun:
    """Run ``handler`` with tracked services and return its result and log.

    The trigger itself is recorded first as ``<trigger>(event)``.
    """
    log = [] if log is None else log
    log.append(Event(FactSymbol(trigger, seq(unit("event"))), len(log), NIL))

    tracked = {name: track_service(name, methods, log) for name, methods in services.items()}
    result = handler(event=event, **tracked)

    return WorkflowRun(
        result=result,
        log=log,
        stage=run_machine(PROGRESS_MACHINE, log),
        calls=run_machine(CALL_COUNTER, log),
    )


# ---------------------------------------------------------------------------
# Services and handler
# ---------------------------------------------------------------------------

def build_services(with_slack: bool = True) -> dict[str, dict[str, Callable]]:
    """Stand-in services returning canned data."""
    def apollo_search(name, email, company):
        return {"title": "Engineer", "company": company}

    def research_company(company):
        return f"{company} builds widgets."

    def summarize(name, company, **details):
        return f"{name} works at {company}."

    def users_create(name, email, summary):
        return {"id": "user123", "url": "https://example.org/users/user123"}

    def slack_post_message(channel, text):
        return {"ok": True}

    api = {"apollo_search": apollo_search}
    if with_slack:
        api["slack_post_message"] = slack_post_message
    return {
        "ai": {"research_company": research_company, "summarize": summarize},
        "api": api,
        "db": {"users_create": users_create},
    }


def on_user_signup(event, ai, api, db):
    """Enrich the new user, save them, and announce the signup."""
    name, email, company = event["name"], event["email"], event["company"]

    contact = api.apollo_search(name=name, email=email, company=company)
    company_profile = ai.research_company(company=company)
    summary = ai.summarize(name=name, company=company, title=contact["title"],
                           profile=company_profile)
    user = db.users_create(name=name, email=email, summary=summary)
    if hasattr(api, "slack_post_message"):
        api.slack_post_message(channel="#signups", text=f"{name} signed up: {user['url']}")

    return {"success": True, "summary": summary, "user": user["id"]}


SIGNUP_EVENT = {"name": "John Doe", "email": "john@example.com", "company": "Acme Inc"}
