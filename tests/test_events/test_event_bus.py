"""Tests for the synchronous event bus."""

import pytest

from figfix.events import EventBus, PassFailed, PassStarted, SafetyNetApplied


class TestEventBus:
    def test_typed_subscription(self):
        bus = EventBus()
        seen = []
        bus.subscribe(PassStarted, seen.append)
        bus.emit(PassStarted(pass_name="css-vars", priority=30))
        bus.emit(SafetyNetApplied(found=1, fixed=1))
        assert seen == [PassStarted(pass_name="css-vars", priority=30)]

    def test_on_all_runs_before_typed_listeners(self):
        bus = EventBus()
        order = []
        bus.subscribe(PassFailed, lambda e: order.append("typed"))
        bus.on_all(lambda e: order.append("all"))
        bus.emit(PassFailed(pass_name="post-fixes", error="boom", continued=True))
        assert order == ["all", "typed"]

    def test_record_collects_from_now_on(self):
        bus = EventBus()
        bus.emit(SafetyNetApplied(found=2, fixed=1))
        recorded = bus.record()
        bus.emit(SafetyNetApplied(found=1, fixed=0))
        assert recorded == [SafetyNetApplied(found=1, fixed=0)]

    def test_listener_errors_propagate(self):
        bus = EventBus()

        def explode(event):
            raise ValueError("listener failed")

        bus.on_all(explode)
        with pytest.raises(ValueError, match="listener failed"):
            bus.emit(SafetyNetApplied(found=0, fixed=0))

    def test_events_are_frozen(self):
        event = PassStarted(pass_name="css-vars", priority=30)
        with pytest.raises(AttributeError):
            event.priority = 1  # type: ignore[misc]
