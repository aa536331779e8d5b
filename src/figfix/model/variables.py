"""Design-variable table built from a ``get_variable_defs`` dump (``variables.json``)."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

# Font(family: "Inter", style: Bold, size: 16, weight: 700, lineHeight: 120, letterSpacing: 0)
_FONT_RE = re.compile(
    r"""
    Font\(\s*
    family:\s*"(?P<family>[^"]+)"\s*,\s*
    style:\s*(?P<style>[\w ]+?)\s*,\s*
    size:\s*(?P<size>[\d.]+)\s*,\s*
    weight:\s*(?P<weight>\d+)
    """,
    re.VERBOSE,
)

_NUMERIC_RE = re.compile(r"^\d+(\.\d+)?$")


class VariableFileError(Exception):
    """Raised when a variables file exists but cannot be read as a JSON object."""


@dataclass(frozen=True)
class FontDescriptor:
    """A typography variable: family, named style, numeric size and weight."""

    family: str
    style: str
    size: float
    weight: int


VariableValue = Union[str, FontDescriptor]


def css_name(name: str) -> str:
    """Map a hierarchical variable name to a custom-property name.

    ``Colors/White`` -> ``--colors-white``; ``Margin / R`` -> ``--margin-r``;
    ``Spacing/0.5`` -> ``--spacing-0dot5``.
    """
    cleaned = re.sub(r"\s*/\s*", "/", name.strip()).lower()
    cleaned = re.sub(r"\s+", "-", cleaned).replace("/", "-").replace(".", "dot")
    return f"--{cleaned}"


def parse_font(value: str) -> FontDescriptor | None:
    match = _FONT_RE.search(value)
    if match is None:
        return None
    return FontDescriptor(
        family=match.group("family"),
        style=match.group("style").strip(),
        size=float(match.group("size")),
        weight=int(match.group("weight")),
    )


@dataclass
class VariableTable:
    """Read-only mapping from hierarchical variable name to literal or font descriptor."""

    entries: dict[str, VariableValue] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: dict[str, object]) -> VariableTable:
        entries: dict[str, VariableValue] = {}
        for name, value in raw.items():
            if not isinstance(value, (str, int, float)):
                continue
            text = str(value).strip()
            font = parse_font(text) if text.startswith("Font(") else None
            entries[name] = font if font is not None else text
        return cls(entries=entries)

    @classmethod
    def load(cls, path: Path) -> VariableTable:
        """Load ``variables.json``; a missing file yields an empty table."""
        if not path.exists():
            return cls()
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise VariableFileError(f"Cannot read variables file {path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise VariableFileError(f"Variables file {path} must contain a JSON object")
        return cls.from_mapping(raw)

    # --- lookups --------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, name: str) -> VariableValue | None:
        return self.entries.get(name)

    def lookup_css(self, custom_property: str) -> VariableValue | None:
        """Find a variable by its custom-property name (``--colors-white``)."""
        for name, value in self.entries.items():
            if css_name(name) == custom_property:
                return value
        return None

    def css_properties(self) -> dict[str, str]:
        """Custom-property declarations for every literal variable, in file order.

        Purely numeric values gain a ``px`` unit unless the variable is a colour.
        """
        props: dict[str, str] = {}
        for name, value in self.entries.items():
            if isinstance(value, FontDescriptor):
                continue
            prop = css_name(name)
            if _NUMERIC_RE.match(value) and "color" not in prop:
                value = f"{value}px"
            props[prop] = value
        return props

    def fonts(self) -> list[FontDescriptor]:
        return [v for v in self.entries.values() if isinstance(v, FontDescriptor)]
