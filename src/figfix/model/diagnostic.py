"""Findings about a pass plan: ordering violations, unknown names, disabled producers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    @property
    def rank(self) -> int:
        return _RANKS[self]


_RANKS = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}


@dataclass(frozen=True)
class Diagnostic:
    """One finding about the ordered pass plan.

    ``rule`` names the check that produced it; ``pass_name`` is the pass the
    finding is attached to (the one that must move, or the unknown name) and
    ``fix`` an optional suggested configuration change.
    """

    rule: str
    severity: Severity
    message: str
    pass_name: str | None = None
    fix: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    @property
    def is_warning(self) -> bool:
        return self.severity is Severity.WARNING

    def __str__(self) -> str:
        location = f" [pass={self.pass_name}]" if self.pass_name else ""
        return f"{self.severity.value}{location}: {self.message}"


def by_severity(diagnostics: list[Diagnostic]) -> list[Diagnostic]:
    """Errors first, then warnings, then info; rule order kept within a level."""
    return sorted(diagnostics, key=lambda d: d.severity.rank)
