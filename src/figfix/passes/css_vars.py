"""CSS-variable resolution: rewrite ``var(--x,fallback)`` placeholders in classes and styles."""

from __future__ import annotations

from figfix.model.context import RewriteContext
from figfix.model.markup import Document, Element
from figfix.passes.base import Tally
from figfix.resolution import (
    ResolutionKind,
    normalize_style_value,
    resolve_border_shorthand,
    resolve_token,
)

_COUNTER_BY_KIND = {
    ResolutionKind.CANONICAL: "varsConverted",
    ResolutionKind.SYNTHESIZED: "varsConverted",
    ResolutionKind.FALLBACK: "fallbacksInlined",
    ResolutionKind.UNRECOGNIZED: "placeholdersUnrecognized",
}


class CssVarsPass:
    name = "css-vars"
    priority = 30
    description = "Resolve variable placeholders to canonical or synthesized classes"
    must_precede = ("tailwind-optimizer",)

    def run(self, document: Document, context: RewriteContext) -> dict[str, int]:
        tally = Tally()
        for element in document.iter_elements():
            if element.has_static_classes():
                self._rewrite_classes(element, context, tally)
            self._normalize_style(element, tally)
        return tally.result()

    @staticmethod
    def _rewrite_classes(element: Element, context: RewriteContext, tally: Tally) -> None:
        tokens = element.classes
        out: list[str] = []
        for token in tokens:
            border = resolve_border_shorthand(token, context.synthesized)
            if border is not None:
                tally.count("bordersFixed")
                out.append(border)
                continue
            resolution = resolve_token(token, context.variables, context.synthesized)
            if resolution is None:
                out.append(token)
                continue
            tally.count(_COUNTER_BY_KIND[resolution.kind])
            out.append(resolution.token)
        if out != tokens:
            element.set_classes(out)

    @staticmethod
    def _normalize_style(element: Element, tally: Tally) -> None:
        style = element.style
        if style is None:
            return
        for key, value in list(style.entries.items()):
            if not isinstance(value, str) or "var(" not in value:
                continue
            cleaned = normalize_style_value(value)
            if cleaned != value:
                style.set(key, cleaned)
                tally.count("styleVarsNormalized")
