"""Stylesheet model: synthesized utility classes and parsed stylesheet rules."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SynthesizedClass:
    """A generated utility class bound to a design variable or a literal value.

    Compound utilities (``px``, ``my``) carry several properties and emit one
    declaration per property under the same selector.
    """

    name: str
    properties: tuple[str, ...]
    variable: str | None = None  # "--margin-r"
    fallback: str | None = None  # "32px"
    value: str | None = None  # literal value when no variable is bound

    def declaration_value(self) -> str:
        if self.variable is None:
            return self.value or ""
        if self.fallback:
            return f"var({self.variable}, {self.fallback})"
        return f"var({self.variable})"

    def declarations(self) -> list[tuple[str, str]]:
        value = self.declaration_value()
        return [(prop, value) for prop in self.properties]


class SynthesizedClassTable:
    """Insertion-ordered table of synthesized classes, deduplicated by class name.

    Names are a deterministic function of (utility, variable), so a repeated
    placeholder resolves to the entry registered first.
    """

    def __init__(self) -> None:
        self._entries: dict[str, SynthesizedClass] = {}

    def register(self, entry: SynthesizedClass) -> SynthesizedClass:
        existing = self._entries.get(entry.name)
        if existing is None:
            self._entries[entry.name] = entry
            return entry
        if existing != entry:
            logger.warning(
                "Synthesized class %s already bound to %s; ignoring %s",
                entry.name,
                existing.declaration_value(),
                entry.declaration_value(),
            )
        return existing

    def get(self, name: str) -> SynthesizedClass | None:
        return self._entries.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries.values())

    def clear(self) -> None:
        self._entries.clear()


@dataclass(frozen=True)
class StyleRule:
    """A single rule pairing a class selector with its declarations."""

    selector: str  # ".p-margin-r"
    declarations: dict[str, str]


@dataclass
class Stylesheet:
    """A companion stylesheet split into the sections the emitter writes."""

    imports: list[str] = field(default_factory=list)  # full @import statements
    root_variables: dict[str, str] = field(default_factory=dict)
    utilities: list[StyleRule] = field(default_factory=list)
    rules: list[StyleRule] = field(default_factory=list)

    def rule(self, selector: str) -> StyleRule | None:
        for rule in self.utilities + self.rules:
            if rule.selector == selector:
                return rule
        return None
