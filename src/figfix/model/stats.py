"""Per-pass statistics counters collected during a pipeline run."""

from __future__ import annotations

from collections import Counter

# Counters that describe what a pass saw rather than what it changed.  They
# are reported, but a second run over already-processed markup may still
# produce them.
OBSERVATIONAL = frozenset({
    "blendModesVerified",
    "blendModesUnrecognized",
    "gradientsUnrecognized",
    "shapesUnrecognized",
    "compositesUnrecognized",
    "placeholdersUnrecognized",
    "nodesAnalyzed",
    "sectionsDetected",
})


class Stats:
    """Integer counters grouped by pass name.

    Purely observational: nothing in the pipeline branches on these values.
    """

    def __init__(self) -> None:
        self._counters: dict[str, Counter[str]] = {}
        self._timings: dict[str, float] = {}
        self._failures: dict[str, str] = {}

    def add(self, pass_name: str, key: str, amount: int = 1) -> None:
        self._counters.setdefault(pass_name, Counter())[key] += amount

    def record(self, pass_name: str, counters: dict[str, int], elapsed_ms: float) -> None:
        bucket = self._counters.setdefault(pass_name, Counter())
        for key, value in counters.items():
            bucket[key] += value
        self._timings[pass_name] = elapsed_ms

    def record_failure(self, pass_name: str, error: str) -> None:
        self._failures[pass_name] = error

    def for_pass(self, pass_name: str) -> dict[str, int]:
        return dict(self._counters.get(pass_name, Counter()))

    def totals(self) -> dict[str, int]:
        """All counters merged across passes."""
        merged: Counter[str] = Counter()
        for bucket in self._counters.values():
            merged.update(bucket)
        return dict(merged)

    def changes(self) -> int:
        """Sum of every counter that reflects a rewrite of the markup."""
        return sum(v for k, v in self.totals().items() if k not in OBSERVATIONAL)

    @property
    def timings(self) -> dict[str, float]:
        return dict(self._timings)

    @property
    def failures(self) -> dict[str, str]:
        return dict(self._failures)

    def to_dict(self) -> dict[str, object]:
        return {
            "passes": {name: dict(bucket) for name, bucket in self._counters.items()},
            "timings": self.timings,
            "failures": self.failures,
        }

    def __repr__(self) -> str:
        return f"Stats(passes={list(self._counters)}, changes={self.changes()})"
