"""Validation rules for pass plans.

Each rule is a function taking a PassPlan and returning a list of Diagnostic
objects describing any issues found.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from figfix.model.diagnostic import Diagnostic, Severity

if TYPE_CHECKING:
    from figfix.engine.registry import PassPlan


# ---------------------------------------------------------------------------
# Ordering rules (ERROR severity)
# ---------------------------------------------------------------------------


def check_ordering(plan: PassPlan) -> list[Diagnostic]:
    """Every enabled pass runs before the enabled passes it must precede."""
    diagnostics: list[Diagnostic] = []
    for entry in plan.enabled():
        position = plan.position(entry.name)
        for later in entry.must_precede:
            later_position = plan.position(later)
            if later_position is None or position is None or position < later_position:
                continue
            other = plan.get(later)
            diagnostics.append(
                Diagnostic(
                    rule="check_ordering",
                    severity=Severity.ERROR,
                    message=(
                        f"Pass '{entry.name}' (priority {entry.priority}) must run before "
                        f"'{later}' (priority {other.priority if other else '?'})."
                    ),
                    pass_name=entry.name,
                    fix=f"Give '{entry.name}' a lower priority than '{later}'.",
                )
            )
    return diagnostics


# ---------------------------------------------------------------------------
# Configuration rules (WARNING / INFO severity)
# ---------------------------------------------------------------------------


def check_unknown_passes(plan: PassPlan) -> list[Diagnostic]:
    """Configuration entries should name registered passes."""
    return [
        Diagnostic(
            rule="check_unknown_passes",
            severity=Severity.WARNING,
            message=f"Configuration names unknown pass '{name}'; it is ignored.",
            pass_name=name,
        )
        for name in plan.unknown
    ]


def check_any_enabled(plan: PassPlan) -> list[Diagnostic]:
    if plan.entries and not plan.enabled():
        return [
            Diagnostic(
                rule="check_any_enabled",
                severity=Severity.WARNING,
                message="Every pass is disabled; output only gets the safety-net sweep.",
            )
        ]
    return []


def check_disabled_producers(plan: PassPlan) -> list[Diagnostic]:
    """A pass that runs while a pass it depends on is disabled loses that input."""
    diagnostics: list[Diagnostic] = []
    for entry in plan.entries:
        if entry.enabled:
            continue
        for later in entry.must_precede:
            if plan.position(later) is not None:
                diagnostics.append(
                    Diagnostic(
                        rule="check_disabled_producers",
                        severity=Severity.INFO,
                        message=f"'{later}' runs while '{entry.name}' is disabled.",
                        pass_name=later,
                    )
                )
    return diagnostics


def check_shared_priorities(plan: PassPlan) -> list[Diagnostic]:
    """Equal priorities fall back to registration order; worth knowing about."""
    by_priority: dict[int, list[str]] = defaultdict(list)
    for entry in plan.enabled():
        by_priority[entry.priority].append(entry.name)
    return [
        Diagnostic(
            rule="check_shared_priorities",
            severity=Severity.INFO,
            message=f"Passes {', '.join(names)} share priority {priority}; registration order applies.",
        )
        for priority, names in by_priority.items()
        if len(names) > 1
    ]


ALL_RULES = [
    check_ordering,
    check_unknown_passes,
    check_any_enabled,
    check_disabled_producers,
    check_shared_priorities,
]
