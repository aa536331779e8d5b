"""Event system: bus and event types for pipeline lifecycle."""

from figfix.events.bus import EventBus
from figfix.events.types import (
    PassCompleted,
    PassFailed,
    PassStarted,
    PipelineCompleted,
    PipelineFailed,
    PipelineStarted,
    SafetyNetApplied,
)

__all__ = [
    "EventBus",
    "PassCompleted",
    "PassFailed",
    "PassStarted",
    "PipelineCompleted",
    "PipelineFailed",
    "PipelineStarted",
    "SafetyNetApplied",
]
