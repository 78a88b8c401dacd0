"""Outbound event queue drained by the host once per tick."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


WAVE_STARTED = "wave_started"
ENEMY_SPAWNED = "enemy_spawned"
ENEMY_REACHED_BASE = "enemy_reached_base"
WAVE_COMPLETE = "wave_complete"


@dataclass
class Event:
    """Runtime event payload."""

    name: str
    payload: dict[str, Any]


class EventBus:
    """Collects events so the host can react to wave lifecycle changes."""

    def __init__(self) -> None:
        self._events: list[Event] = []

    def emit(self, name: str, **payload: Any) -> None:
        self._events.append(Event(name=name, payload=payload))

    @property
    def events(self) -> list[Event]:
        return self._events

    def named(self, name: str) -> list[Event]:
        return [event for event in self._events if event.name == name]

    def drain(self) -> list[Event]:
        events = self._events[:]
        self._events.clear()
        return events
