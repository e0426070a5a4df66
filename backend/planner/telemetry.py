"""In-process telemetry for plan generation, reflow, intent parsing and ladder sessions.

Events are plain names with a flat payload. They are logged as one JSON line
on the ``planner.telemetry`` logger and handed to any registered listeners.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from threading import RLock
from typing import Any, Callable, Dict, List, Mapping

from pydantic import BaseModel

logger = logging.getLogger("planner.telemetry")

PLAN_GENERATED = "weekly_plan_generated"
PLAN_REFLOWED = "weekly_plan_reflowed"
INTENT_PARSED = "adjustment_intent_parsed"
LADDER_SESSION_APPLIED = "ladder_session_applied"


@dataclass(frozen=True)
class TelemetryEvent:
    name: str
    payload: Dict[str, Any]


Listener = Callable[[TelemetryEvent], None]

_listeners: List[Listener] = []
_lock = RLock()


def register_listener(listener: Listener) -> None:
    with _lock:
        _listeners.append(listener)


def unregister_listener(listener: Listener) -> None:
    with _lock:
        if listener in _listeners:
            _listeners.remove(listener)


def clear_listeners() -> None:
    with _lock:
        _listeners.clear()


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_plain(entry) for entry in value]
    if isinstance(value, Mapping):
        return {str(key): _plain(entry) for key, entry in value.items()}
    return value


def emit_event(name: str, **fields: Any) -> TelemetryEvent:
    """Build the event, notify listeners, then log it.

    Listener failures are logged and swallowed so telemetry never breaks
    planning.
    """
    event = TelemetryEvent(name=name, payload={key: _plain(value) for key, value in fields.items()})

    with _lock:
        listeners = tuple(_listeners)
    for listener in listeners:
        try:
            listener(event)
        except Exception:  # noqa: BLE001
            logger.exception("Telemetry listener %r failed on %s", listener, name)

    if logger.isEnabledFor(logging.INFO):
        logger.info(json.dumps({"event": name, **event.payload}, default=str, sort_keys=True))
    return event


__all__ = [
    "INTENT_PARSED",
    "LADDER_SESSION_APPLIED",
    "Listener",
    "PLAN_GENERATED",
    "PLAN_REFLOWED",
    "TelemetryEvent",
    "clear_listeners",
    "emit_event",
    "register_listener",
    "unregister_listener",
]
