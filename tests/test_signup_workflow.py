"""End-to-end tests for the User Signup case study."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from exec_symbols.primitives import to_list
from exec_symbols.serialization import from_json, to_json
from exec_symbols.state_machine import run_machine, trace_machine
from exec_symbols.types import Event, get_fact, get_id, get_nouns, verb_name

from case_studies.signup_workflow.domain import (
    CALL_COUNTER,
    PROGRESS_MACHINE,
    SIGNUP_EVENT,
    build_services,
    call_fact,
    on_user_signup,
    run_workflow,
    track_service,
)


@pytest.fixture
def run():
    return run_workflow("onUserSignup", on_user_signup, build_services(), SIGNUP_EVENT)


class TestTracking:
    def test_call_fact(self):
        fact = call_fact("db", "users_create", {"name": "Ann", "id": 7})
        assert verb_name(fact) == "db.users_create"
        assert [get_id(n) for n in get_nouns(fact)] == ["name:Ann", "id:7"]

    def test_call_fact_without_args(self):
        fact = call_fact("ai", "ping", None)
        assert to_list(get_nouns(fact)) == []

    def test_tracked_call_records_then_forwards(self):
        log = []
        service = track_service("api", {"double": lambda x: x * 2}, log)
        assert service.double(x=21) == 42
        assert len(log) == 1
        assert verb_name(get_fact(log[0])) == "api.double"
        assert log[0].time == 0


class TestWorkflow:
    def test_handler_result(self, run):
        assert run.result["success"] is True
        assert run.result["user"] == "user123"

    def test_log_order(self, run):
        verbs = [verb_name(get_fact(e)) for e in run.log]
        assert verbs == [
            "onUserSignup",
            "api.apollo_search",
            "ai.research_company",
            "ai.summarize",
            "db.users_create",
            "api.slack_post_message",
        ]
        assert [e.time for e in run.log] == list(range(6))

    def test_stage_reached(self, run):
        assert run.stage == "notified"
        assert run.calls == 6

    def test_without_slack(self):
        run = run_workflow("onUserSignup", on_user_signup,
                           build_services(with_slack=False), SIGNUP_EVENT)
        assert run.stage == "saved"
        assert run.calls == 5

    def test_log_passed_in_is_extended(self):
        existing = [Event(call_fact("db", "warmup", {}), 0)]
        run = run_workflow("onUserSignup", on_user_signup, build_services(),
                           SIGNUP_EVENT, log=existing)
        assert run.log is existing
        assert len(existing) == 7
        assert existing[1].time == 1

    def test_trace_stages(self, run):
        stages = list(trace_machine(PROGRESS_MACHINE, run.log))
        assert stages == [
            "started", "started", "enriched", "enriched", "enriched", "saved", "notified",
        ]

    def test_machines_are_reusable(self, run):
        assert run_machine(CALL_COUNTER, run.log[:2]) == 2
        assert run_machine(CALL_COUNTER, run.log) == 6

    def test_log_serializes(self, run):
        parsed = from_json(to_json(run.log))
        assert parsed[0]["fact"]["verb_symbol"] == "onUserSignup"
        assert parsed[1]["fact"]["nouns"][0] == "name:John Doe"

    def test_summary(self, run):
        text = run.summary()
        assert "stage=notified" in text
        assert "[4] db.users_create(" in text


class TestWalkthrough:
    def test_runs(self, capsys):
        from case_studies.signup_workflow import run as walkthrough
        walkthrough.main()
        out = capsys.readouterr().out
        assert "started -> enriched -> saved -> notified" in out
        assert "created user name:John Doe" in out
