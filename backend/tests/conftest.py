from __future__ import annotations

from typing import Iterator, List

import pytest

from planner.config import get_settings
from planner.telemetry import TelemetryEvent, clear_listeners, register_listener


@pytest.fixture
def telemetry_events() -> Iterator[List[TelemetryEvent]]:
    events: List[TelemetryEvent] = []
    register_listener(events.append)
    yield events
    clear_listeners()


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
