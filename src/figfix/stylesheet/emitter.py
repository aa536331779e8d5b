"""Build and render the companion stylesheet for a rewritten component."""

from __future__ import annotations

from typing import Iterable
from urllib.parse import quote_plus

from figfix.model.variables import VariableTable
from figfix.stylesheet.model import StyleRule, Stylesheet, SynthesizedClassTable

HEADER = "/* Auto-generated design tokens from Figma */"
UTILITIES_COMMENT = "/* Figma-specific utility classes */"
CUSTOM_COMMENT = "/* Custom classes for Figma variables */"

GOOGLE_FONTS_URL = "https://fonts.googleapis.com/css2"

# Generator classes with no Tailwind counterpart.
FIGMA_UTILITIES = [
    StyleRule(".content-start", {"align-content": "flex-start"}),
    StyleRule(".content-end", {"align-content": "flex-end"}),
]


def font_import(fonts: Iterable[tuple[str, int]]) -> str | None:
    """One ``@import`` for every family, weights sorted: ``family=Inter:wght@400;700``."""
    families: dict[str, set[int]] = {}
    for family, weight in fonts:
        families.setdefault(family, set()).add(weight)
    if not families:
        return None
    params = [
        f"family={quote_plus(family)}:wght@{';'.join(str(w) for w in sorted(weights))}"
        for family, weights in families.items()
    ]
    return f"@import url('{GOOGLE_FONTS_URL}?{'&'.join(params)}&display=swap');"


def build_stylesheet(
    variables: VariableTable,
    synthesized: SynthesizedClassTable,
    fonts: Iterable[tuple[str, int]] = (),
) -> Stylesheet:
    """Collect everything a run accumulated into a :class:`Stylesheet`.

    Fonts observed in the markup come first, followed by typography variables
    declared in the variable table.
    """
    all_fonts = list(fonts) + [(f.family, f.weight) for f in variables.fonts()]
    directive = font_import(all_fonts)
    return Stylesheet(
        imports=[directive] if directive else [],
        root_variables=variables.css_properties(),
        utilities=list(FIGMA_UTILITIES),
        rules=[StyleRule(f".{entry.name}", dict(entry.declarations())) for entry in synthesized],
    )


def _category(custom_property: str) -> str:
    parts = custom_property.lstrip("-").split("-")
    return parts[0] if parts else ""


def _render_root(variables: dict[str, str]) -> list[str]:
    groups: dict[str, list[tuple[str, str]]] = {}
    for name, value in variables.items():
        groups.setdefault(_category(name), []).append((name, value))
    lines = [":root {"]
    for i, (category, entries) in enumerate(groups.items()):
        if i:
            lines.append("")
        lines.append(f"  /* {category[:1].upper() + category[1:]} */")
        lines.extend(f"  {name}: {value};" for name, value in entries)
    lines.append("}")
    return lines


def render_rule(rule: StyleRule, compact: bool = True) -> str:
    """Single-declaration rules on one line, compound rules one declaration per line."""
    if compact and len(rule.declarations) == 1:
        (prop, value), = rule.declarations.items()
        return f"{rule.selector} {{ {prop}: {value}; }}"
    body = "".join(f"  {prop}: {value};\n" for prop, value in rule.declarations.items())
    return f"{rule.selector} {{\n{body}}}"


def render_stylesheet(stylesheet: Stylesheet, header: str = HEADER) -> str:
    lines = [header]
    lines.extend(stylesheet.imports)
    if stylesheet.root_variables:
        lines.append("")
        lines.extend(_render_root(stylesheet.root_variables))
    if stylesheet.utilities:
        lines.append("")
        lines.append(UTILITIES_COMMENT)
        lines.extend(render_rule(rule, compact=False) for rule in stylesheet.utilities)
    if stylesheet.rules:
        lines.append("")
        lines.append(CUSTOM_COMMENT)
        lines.extend(render_rule(rule) for rule in stylesheet.rules)
    return "\n".join(lines) + "\n"


def emit_stylesheet(
    variables: VariableTable,
    synthesized: SynthesizedClassTable,
    fonts: Iterable[tuple[str, int]] = (),
) -> str:
    """Serialize the variable table, synthesized classes and font directive as CSS."""
    return render_stylesheet(build_stylesheet(variables, synthesized, fonts))
