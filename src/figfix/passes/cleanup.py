"""Class cleanup: strip generator artifacts and add layout compensations."""

from __future__ import annotations

import re

from figfix.model.context import RewriteContext
from figfix.model.markup import Document, Element, Expression, Text
from figfix.passes.base import Tally
from figfix.passes.fonts import FONT_CLASS_RE

# Arbitrary pixel sizes with an exact Tailwind step.
TEXT_SIZE_MAP: dict[str, str] = {
    "text-[64px]": "text-6xl",
    "text-[48px]": "text-5xl",
    "text-[36px]": "text-4xl",
    "text-[32px]": "text-3xl",
    "text-[24px]": "text-2xl",
    "text-[20px]": "text-xl",
    "text-[18px]": "text-lg",
    "text-[16px]": "text-base",
    "text-[14px]": "text-sm",
    "text-[12px]": "text-xs",
}

SECTION_RE = re.compile(r"===\s*SECTION\s+\d+:")

OVERFLOW_CLASS = "overflow-x-hidden"


def strip_artifacts(tokens: list[str]) -> list[str]:
    """Drop font classes and ``text-nowrap whitespace-pre`` pairs."""
    kept = [t for t in tokens if not FONT_CLASS_RE.match(t)]
    out: list[str] = []
    i = 0
    while i < len(kept):
        if kept[i] == "text-nowrap" and i + 1 < len(kept) and kept[i + 1] == "whitespace-pre":
            i += 2
            continue
        out.append(kept[i])
        i += 1
    return out


def _has_explicit_width(tokens: list[str]) -> bool:
    return any(
        t.startswith("w-")
        or (t.startswith("min-w-") and t != "min-w-px")
        or t.startswith("max-w-")
        for t in tokens
    )


def _section_name(text: str) -> str | None:
    if not SECTION_RE.search(text):
        return None
    cleaned = text.replace("/*", "").replace("*/", "").replace("=", "")
    return cleaned.strip()


class ClassCleanupPass:
    name = "class-cleanup"
    priority = 10
    description = "Remove invalid generator classes, convert text sizes, add layout fixes"
    must_precede: tuple[str, ...] = ()

    def run(self, document: Document, context: RewriteContext) -> dict[str, int]:
        tally = Tally()
        for element in document.iter_elements():
            if element.has("data-node-id"):
                tally.count("nodesAnalyzed")
            self._detect_sections(element, context, tally)
            if not element.has_static_classes():
                continue
            if self._add_overflow(element, context):
                tally.count("overflowAdded")
            tokens = element.classes
            cleaned = strip_artifacts(tokens)
            if cleaned != tokens:
                tally.count("classesFixed")
            converted = [TEXT_SIZE_MAP.get(t, t) for t in cleaned]
            if converted != cleaned:
                tally.count("textSizesConverted")
            if self._needs_full_width(converted):
                converted.append("w-full")
                tally.count("widthsAdded")
            if converted != tokens:
                element.set_classes(converted)
        return tally.result()

    @staticmethod
    def _add_overflow(element: Element, context: RewriteContext) -> bool:
        """Contain horizontal overflow on the first named ``div`` of the run."""
        if context.root_container_processed or element.tag != "div" or not element.has("data-name"):
            return False
        context.root_container_processed = True
        tokens = element.classes
        if OVERFLOW_CLASS in tokens:
            return False
        element.set_classes(tokens + [OVERFLOW_CLASS])
        return True

    @staticmethod
    def _needs_full_width(tokens: list[str]) -> bool:
        has_basis = any(t.startswith("basis-0") for t in tokens)
        return has_basis and "grow" in tokens and not _has_explicit_width(tokens)

    @staticmethod
    def _detect_sections(element: Element, context: RewriteContext, tally: Tally) -> None:
        for child in element.children:
            if isinstance(child, Text):
                name = _section_name(child.rendered)
            elif isinstance(child, Expression):
                name = _section_name(child.source)
            else:
                continue
            if name is not None:
                context.sections.append(name)
                tally.count("sectionsDetected")
