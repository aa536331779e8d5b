"""Event types emitted while a pipeline rewrites one markup file."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PipelineStarted:
    source: str
    passes: tuple[str, ...]


@dataclass(frozen=True)
class PipelineCompleted:
    source: str
    changes: int


@dataclass(frozen=True)
class PipelineFailed:
    source: str
    error: str


@dataclass(frozen=True)
class PassStarted:
    pass_name: str
    priority: int


@dataclass(frozen=True)
class PassCompleted:
    pass_name: str
    counters: dict[str, int] = field(default_factory=dict)
    elapsed_ms: float = 0.0


@dataclass(frozen=True)
class PassFailed:
    pass_name: str
    error: str
    continued: bool


@dataclass(frozen=True)
class SafetyNetApplied:
    found: int
    fixed: int
