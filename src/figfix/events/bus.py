"""Synchronous event bus carrying pipeline lifecycle events to observers."""

from __future__ import annotations

from typing import Any, Callable

Listener = Callable[[Any], None]


class EventBus:
    """Publish-subscribe dispatch, synchronous and in registration order.

    Listeners either subscribe to one event type or receive every event.
    A listener that raises propagates into the pipeline run.
    """

    def __init__(self) -> None:
        self._by_type: dict[type, list[Listener]] = {}
        self._everything: list[Listener] = []

    def subscribe(self, event_type: type, callback: Listener) -> None:
        self._by_type.setdefault(event_type, []).append(callback)

    def on_all(self, callback: Listener) -> None:
        self._everything.append(callback)

    def record(self) -> list[Any]:
        """Return a list that collects every event emitted from now on."""
        events: list[Any] = []
        self._everything.append(events.append)
        return events

    def emit(self, event: Any) -> None:
        for callback in self._everything:
            callback(event)
        for callback in self._by_type.get(type(event), []):
            callback(event)
