"""Variable-placeholder resolution shared by the css-vars pass and the safety net.

The generator emits design-variable references as Tailwind arbitrary values:

    p-[var(--margin\\/r,32px)]
    bg-[var(--colors\\/white,#ffffff)]
    text-[color:var(--text\\/primary,#111)]

Each placeholder resolves to exactly one of:

- a canonical utility token (``bg-white``) when the variable's value has a
  direct Tailwind equivalent,
- a synthesized class bound to ``var(--name, fallback)`` and registered in the
  run's :class:`SynthesizedClassTable`,
- the fallback as a plain arbitrary value when the utility prefix has no known
  CSS property or carries a variant (``hover:``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from figfix.model.variables import FontDescriptor, VariableTable
from figfix.stylesheet.model import SynthesizedClass, SynthesizedClassTable

_PLACEHOLDER_RE = re.compile(
    r"""
    ^(?P<variant>(?:[\w-]+:)*)                # hover:, md:
    (?P<prefix>-?[a-z][a-z-]*?)
    -\[
    (?:(?P<kind>color|length):)?
    var\((?P<body>--.+)\)
    \]$
    """,
    re.VERBOSE,
)

_BORDER_SHORTHAND_RE = re.compile(r"^border-\[(?P<values>[0-9.]+(?:px)?(?:_[0-9.]+(?:px)?){2,3})\]$")

_STYLE_VAR_RE = re.compile(r"var\(\s*(?P<name>--[^,\s)]+)")

_LENGTH_RE = re.compile(r"^-?[\d.]+(px|rem|em|%|vh|vw)?$")

PREFIX_PROPERTIES: dict[str, tuple[str, ...]] = {
    "p": ("padding",),
    "pt": ("padding-top",),
    "pr": ("padding-right",),
    "pb": ("padding-bottom",),
    "pl": ("padding-left",),
    "px": ("padding-left", "padding-right"),
    "py": ("padding-top", "padding-bottom"),
    "m": ("margin",),
    "mt": ("margin-top",),
    "mr": ("margin-right",),
    "mb": ("margin-bottom",),
    "ml": ("margin-left",),
    "mx": ("margin-left", "margin-right"),
    "my": ("margin-top", "margin-bottom"),
    "gap": ("gap",),
    "gap-x": ("column-gap",),
    "gap-y": ("row-gap",),
    "rounded": ("border-radius",),
    "bg": ("background-color",),
    "w": ("width",),
    "h": ("height",),
    "size": ("width", "height"),
    "min-w": ("min-width",),
    "max-w": ("max-width",),
    "min-h": ("min-height",),
    "max-h": ("max-height",),
    "top": ("top",),
    "right": ("right",),
    "bottom": ("bottom",),
    "left": ("left",),
    "inset": ("inset",),
    "leading": ("line-height",),
    "tracking": ("letter-spacing",),
    "opacity": ("opacity",),
    "fill": ("fill",),
    "stroke": ("stroke",),
}

COLOR_PREFIXES = frozenset({"bg", "text", "border", "fill", "stroke", "outline", "decoration"})

# Literal values that map onto Tailwind's built-in colour keywords.
CANONICAL_COLORS: dict[str, str] = {
    "#fff": "white",
    "#ffffff": "white",
    "#ffffffff": "white",
    "white": "white",
    "#000": "black",
    "#000000": "black",
    "#000000ff": "black",
    "black": "black",
    "transparent": "transparent",
    "#00000000": "transparent",
    "rgba(0,0,0,0)": "transparent",
}


class ResolutionKind(Enum):
    CANONICAL = "canonical"
    SYNTHESIZED = "synthesized"
    FALLBACK = "fallback"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Resolution:
    kind: ResolutionKind
    token: str
    entry: SynthesizedClass | None = None

    @property
    def changed(self) -> bool:
        return self.kind is not ResolutionKind.UNRECOGNIZED


def clean_variable_name(raw: str) -> str:
    """Normalize an escaped variable reference: ``--Colors\\\\/White`` -> ``colors-white``.

    Dots become ``dot`` (``--spacing\\/0.5`` -> ``spacing-0dot5``); a dot in a
    class selector or custom-property name would end the identifier.
    """
    name = raw.strip()
    if name.startswith("--"):
        name = name[2:]
    name = name.replace("\\", "")
    name = name.replace("/", "-").replace("(", "_").replace(")", "").replace(".", "dot")
    name = re.sub(r"\s+", "-", name.strip())
    return name.lower()


def is_placeholder(token: str) -> bool:
    return _PLACEHOLDER_RE.match(token) is not None


def _split_body(body: str) -> tuple[str, str | None]:
    name, sep, fallback = body.partition(",")
    return name, (fallback.strip() or None) if sep else None


def _literal_value(variables: VariableTable, variable: str, fallback: str | None) -> str | None:
    value = variables.lookup_css(variable)
    if isinstance(value, str):
        return value
    if isinstance(value, FontDescriptor):
        return None
    return fallback


def _looks_like_length(value: str | None) -> bool:
    return value is not None and _LENGTH_RE.match(value.replace(" ", "")) is not None


def _properties_for(prefix: str, kind: str | None, fallback: str | None) -> tuple[str, str, tuple[str, ...]] | None:
    """Return (class-name prefix, css-type, properties) for a utility prefix."""
    if prefix == "text":
        if kind == "length" or (kind is None and _looks_like_length(fallback)):
            return "text-size", "length", ("font-size",)
        return "text", "color", ("color",)
    if prefix == "border":
        if kind == "length" or (kind is None and _looks_like_length(fallback)):
            return "border-w", "length", ("border-width",)
        return "border", "color", ("border-color",)
    props = PREFIX_PROPERTIES.get(prefix)
    if props is None:
        return None
    return prefix, kind or "", props


def resolve_token(
    token: str,
    variables: VariableTable,
    synthesized: SynthesizedClassTable,
) -> Resolution | None:
    """Resolve a single class token; ``None`` when the token holds no placeholder."""
    match = _PLACEHOLDER_RE.match(token)
    if match is None:
        return None
    variant, prefix, kind = match.group("variant"), match.group("prefix"), match.group("kind")
    raw_name, fallback = _split_body(match.group("body"))
    clean = clean_variable_name(raw_name)
    if not clean:
        return Resolution(ResolutionKind.UNRECOGNIZED, token)
    variable = f"--{clean}"

    mapping = None if variant else _properties_for(prefix, kind, fallback)
    if mapping is None:
        if fallback is None:
            return Resolution(ResolutionKind.UNRECOGNIZED, token)
        return Resolution(ResolutionKind.FALLBACK, f"{variant}{prefix}-[{fallback}]")

    class_prefix, css_type, properties = mapping
    if prefix in COLOR_PREFIXES and css_type != "length":
        literal = _literal_value(variables, variable, fallback)
        keyword = CANONICAL_COLORS.get((literal or "").replace(" ", "").lower())
        if keyword is not None:
            return Resolution(ResolutionKind.CANONICAL, f"{prefix}-{keyword}")

    entry = synthesized.register(
        SynthesizedClass(
            name=f"{class_prefix}-{clean}",
            properties=properties,
            variable=variable,
            fallback=fallback,
        )
    )
    return Resolution(ResolutionKind.SYNTHESIZED, entry.name, entry)


def resolve_border_shorthand(token: str, synthesized: SynthesizedClassTable) -> str | None:
    """``border-[0px_0px_2px]`` -> ``border-w-0-0-2`` bound to a literal border-width."""
    match = _BORDER_SHORTHAND_RE.match(token)
    if match is None:
        return None
    parts = match.group("values").split("_")
    name = "border-w-" + "-".join(p.replace("px", "").replace(".", "dot") for p in parts)
    entry = synthesized.register(
        SynthesizedClass(name=name, properties=("border-width",), value=" ".join(parts))
    )
    return entry.name


def normalize_style_value(value: str) -> str:
    """Clean escaped variable names inside an inline style value.

    ``var(--colors\\/white, #fff)`` -> ``var(--colors-white, #fff)``.
    """

    def _clean(match: re.Match[str]) -> str:
        return "var(--" + clean_variable_name(match.group("name"))

    return _STYLE_VAR_RE.sub(_clean, value)
