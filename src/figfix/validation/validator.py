"""Plan validator: runs all validation rules and reports diagnostics."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from figfix.model.diagnostic import Diagnostic
from figfix.validation.rules import ALL_RULES

if TYPE_CHECKING:
    from figfix.engine.registry import PassPlan


class ValidationError(Exception):
    """Raised when a pass plan produces ERROR-severity diagnostics."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        messages = [str(d) for d in diagnostics if d.is_error]
        super().__init__(
            f"Pass plan is invalid with {len(messages)} error(s): " + "; ".join(messages)
        )


RuleFunc = Callable[["PassPlan"], list[Diagnostic]]


def validate(plan: PassPlan, extra_rules: list[RuleFunc] | None = None) -> list[Diagnostic]:
    """Run every rule against *plan* and return all diagnostics."""
    rules: list[RuleFunc] = list(ALL_RULES)
    if extra_rules:
        rules.extend(extra_rules)
    diagnostics: list[Diagnostic] = []
    for rule in rules:
        diagnostics.extend(rule(plan))
    return diagnostics


def validate_or_raise(plan: PassPlan, extra_rules: list[RuleFunc] | None = None) -> list[Diagnostic]:
    """Validate *plan*; raises :class:`ValidationError` on any ERROR diagnostic.

    Returns the warnings and info diagnostics otherwise.
    """
    diagnostics = validate(plan, extra_rules=extra_rules)
    errors = [d for d in diagnostics if d.is_error]
    if errors:
        raise ValidationError(errors)
    return diagnostics
