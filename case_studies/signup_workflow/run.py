"""User Signup — tracked service calls walkthrough.

Runs the signup handler twice, once with every service available and once
without the Slack integration, and prints the recorded event log, the
stage the progress machine reached, and the log as JSON.

Run from the repository root:

    python -m case_studies.signup_workflow.run
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

from exec_symbols.readings import render_event
from exec_symbols.serialization import to_json
from exec_symbols.state_machine import trace_machine
from exec_symbols.primitives import seq
from exec_symbols.types import Reading

from .domain import (
    PROGRESS_MACHINE,
    SIGNUP_EVENT,
    build_services,
    on_user_signup,
    run_workflow,
)


CREATE_READING = Reading(
    "db.users_create", seq(0, 1, 2), seq("created user ", " (", ", ", ")"),
)


def print_header(title: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}")


def run_scenario(title: str, services) -> None:
    print_header(title)
    run = run_workflow("onUserSignup", on_user_signup, services, SIGNUP_EVENT)

    print(f"\n  Result: {run.result}")
    print()
    for line in run.summary().splitlines():
        print(f"  {line}")

    stages = list(trace_machine(PROGRESS_MACHINE, run.log))
    print(f"\n  Stages: {' -> '.join(dict.fromkeys(stages))}")

    for event in run.log:
        text = render_event(event, fallback=[CREATE_READING])
        if text is not None:
            print(f"  Reading: {text}")

    print("\n  Log as JSON:")
    print(to_json(run.log, indent=2))


def main():
    run_scenario("Scenario A: all services available", build_services())
    run_scenario("Scenario B: no Slack integration", build_services(with_slack=False))


if __name__ == "__main__":
    main()
