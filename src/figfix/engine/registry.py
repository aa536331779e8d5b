"""Pass registry and the ordered execution plan built from a configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

from figfix.engine.config import PipelineConfig
from figfix.passes import Pass, builtin_passes


@dataclass(frozen=True)
class PlannedPass:
    """One pass with its effective settings."""

    instance: Pass
    priority: int
    enabled: bool

    @property
    def name(self) -> str:
        return self.instance.name

    @property
    def must_precede(self) -> tuple[str, ...]:
        return tuple(self.instance.must_precede)


@dataclass(frozen=True)
class PassPlan:
    """Every registered pass in execution order, plus config names that matched none."""

    entries: list[PlannedPass] = field(default_factory=list)
    unknown: tuple[str, ...] = ()

    def enabled(self) -> list[PlannedPass]:
        return [e for e in self.entries if e.enabled]

    def get(self, name: str) -> PlannedPass | None:
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None

    def position(self, name: str) -> int | None:
        """Index of *name* among the enabled passes, or ``None`` when it does not run."""
        for i, entry in enumerate(self.enabled()):
            if entry.name == name:
                return i
        return None


class PassRegistry:
    """Named passes in registration order; a re-registered name replaces the old pass."""

    def __init__(self, passes: list[Pass] | None = None) -> None:
        self._passes: dict[str, Pass] = {}
        for p in builtin_passes() if passes is None else passes:
            self.register(p)

    def register(self, pass_: Pass) -> None:
        self._passes[pass_.name] = pass_

    def get(self, name: str) -> Pass | None:
        return self._passes.get(name)

    def names(self) -> list[str]:
        return list(self._passes)

    def plan(self, config: PipelineConfig | None = None) -> PassPlan:
        """Apply *config* and sort by ascending priority (ties keep registration order)."""
        config = config or PipelineConfig()
        entries = []
        for p in self._passes.values():
            settings = config.settings_for(p.name)
            priority = p.priority if settings.priority is None else settings.priority
            entries.append(PlannedPass(instance=p, priority=priority, enabled=settings.enabled))
        entries.sort(key=lambda e: e.priority)
        unknown = tuple(name for name in config.passes if name not in self._passes)
        return PassPlan(entries=entries, unknown=unknown)
