"""Font detection: materialize ``font-['Family:Style',sans-serif]`` classes as inline styles."""

from __future__ import annotations

import re

from figfix.model.context import RewriteContext
from figfix.model.markup import Document, Element, Expression, Style
from figfix.parser.printer import format_style
from figfix.passes.base import Tally

FONT_CLASS_RE = re.compile(r"^font-\['(?P<body>[^']+)'(?:,(?P<generic>[\w-]+))?\]$")

WEIGHT_MAP: dict[str, int] = {
    "Thin": 100,
    "ExtraLight": 200,
    "Light": 300,
    "Regular": 400,
    "Medium": 500,
    "SemiBold": 600,
    "Bold": 700,
    "ExtraBold": 800,
    "Black": 900,
}

DEFAULT_WEIGHT = 400


def parse_font_class(token: str) -> tuple[str, str, int, bool] | None:
    """Split a font class into (family, generic family, weight, italic)."""
    match = FONT_CLASS_RE.match(token)
    if match is None:
        return None
    family, _, style = match.group("body").partition(":")
    family = family.replace("_", " ").strip()
    if not family:
        return None
    style = style.replace("_", "").replace(" ", "")
    italic = style.endswith("Italic")
    if italic:
        style = style[: -len("Italic")]
    return family, match.group("generic") or "sans-serif", WEIGHT_MAP.get(style, DEFAULT_WEIGHT), italic


class FontDetectionPass:
    """Inline ``fontFamily``/``fontWeight`` for every element carrying a font class.

    Entries the element already sets are kept.  A style expression that is
    not a plain object literal is wrapped so the font sits beneath it.  The
    class itself is left in place; class cleanup strips it afterwards.
    """

    name = "font-detection"
    priority = 0
    description = "Inline font family and weight from font-['Family:Style'] classes"
    must_precede = ("class-cleanup",)

    def run(self, document: Document, context: RewriteContext) -> dict[str, int]:
        tally = Tally()
        for element in document.iter_elements():
            if self._convert(element, context):
                tally.count("fontsConverted")
        return tally.result()

    def _convert(self, element: Element, context: RewriteContext) -> bool:
        for token in element.classes:
            parsed = parse_font_class(token)
            if parsed is not None:
                break
        else:
            return False
        family, generic, weight, italic = parsed
        context.observe_font(family, weight)

        font = Style({"fontFamily": f"{family}, {generic}", "fontWeight": weight})
        if italic:
            font.set("fontStyle", "italic")

        style = element.ensure_style()
        if style is None:
            attr = element.get("style")
            assert attr is not None and isinstance(attr.value, Expression)
            attr.value = Expression(layer_font(attr.value.source, font))
            return True
        added = False
        for key, value in font.entries.items():
            if key not in style:
                style.set(key, value)
                added = True
        return added


def layer_font(source: str, font: Style) -> str:
    """Object-literal source putting *font* under an opaque style expression.

    The font entries come first so keys the expression already sets win.
    """
    head = format_style(font)[: -len(" }")]
    return f"{head}, ...{source.strip()} }}"
