from __future__ import annotations

from datetime import date

from planner.models import CapSubjectTimeIntent, MasteryGate
from planner.telemetry import (
    TelemetryEvent,
    clear_listeners,
    emit_event,
    register_listener,
    unregister_listener,
)


def test_listeners_receive_sanitized_payloads(telemetry_events) -> None:
    emit_event("weekly_plan_generated", child_id="lincoln", week_of=date(2026, 3, 2))

    assert telemetry_events == [
        TelemetryEvent(name="weekly_plan_generated", payload={"child_id": "lincoln", "week_of": "2026-03-02"}),
    ]


def test_failing_listener_does_not_break_emitters(telemetry_events) -> None:
    def broken(event: TelemetryEvent) -> None:
        raise RuntimeError("listener down")

    register_listener(broken)

    emit_event("ladder_session_applied", promoted=True)

    assert [event.name for event in telemetry_events] == ["ladder_session_applied"]


def test_clear_listeners_stops_delivery() -> None:
    received = []
    register_listener(received.append)
    clear_listeners()

    emit_event("weekly_plan_reflowed", displaced_count=0)

    assert received == []


def test_models_and_enums_are_flattened(telemetry_events) -> None:
    emit_event(
        "adjustment_intent_parsed",
        intent=CapSubjectTimeIntent(subject="Math", max_minutes_per_day=20),
        gate=MasteryGate.MOSTLY_INDEPENDENT,
        days=("Monday", "Friday"),
    )

    assert telemetry_events[0].payload == {
        "intent": {"type": "cap_subject_time", "subject": "Math", "max_minutes_per_day": 20},
        "gate": 2,
        "days": ["Monday", "Friday"],
    }


def test_unregistered_listener_is_skipped(telemetry_events) -> None:
    received = []
    register_listener(received.append)
    unregister_listener(received.append)
    unregister_listener(received.append)

    event = emit_event("weekly_plan_generated", item_count=3)

    assert received == []
    assert telemetry_events == [event]
