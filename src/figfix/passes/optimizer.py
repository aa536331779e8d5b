"""Class-name optimizer: exact arbitrary-value to scale-step mappings and deduplication."""

from __future__ import annotations

import re

from figfix.model.context import RewriteContext
from figfix.model.markup import Document
from figfix.passes.base import Tally

# Default Tailwind spacing scale, keyed by pixel value.
SPACING_SCALE: dict[float, str] = {
    0: "0",
    1: "px",
    2: "0.5",
    4: "1",
    6: "1.5",
    8: "2",
    10: "2.5",
    12: "3",
    14: "3.5",
    16: "4",
    20: "5",
    24: "6",
    28: "7",
    32: "8",
    36: "9",
    40: "10",
    44: "11",
    48: "12",
    56: "14",
    64: "16",
    80: "20",
    96: "24",
    112: "28",
    128: "32",
    144: "36",
    160: "40",
    176: "44",
    192: "48",
    208: "52",
    224: "56",
    240: "60",
    256: "64",
    288: "72",
    320: "80",
    384: "96",
}

RADIUS_SCALE: dict[float, str] = {
    0: "rounded-none",
    2: "rounded-sm",
    4: "rounded",
    6: "rounded-md",
    8: "rounded-lg",
    12: "rounded-xl",
    16: "rounded-2xl",
    24: "rounded-3xl",
    9999: "rounded-full",
}

SPACING_PREFIXES = frozenset({
    "gap", "gap-x", "gap-y",
    "p", "pt", "pr", "pb", "pl", "px", "py",
    "m", "mt", "mr", "mb", "ml", "mx", "my",
    "w", "h", "size",
    "top", "right", "bottom", "left", "inset",
})

_NEGATABLE = frozenset({"m", "mt", "mr", "mb", "ml", "mx", "my", "top", "right", "bottom", "left", "inset"})

_ARBITRARY_PX_RE = re.compile(r"^(?P<prefix>[a-z][a-z-]*?)-\[(?P<px>-?\d+(?:\.\d+)?)px\]$")


def radius_token(px: float) -> str:
    """The standard radius utility for *px*, or an arbitrary value when none is exact."""
    standard = RADIUS_SCALE.get(px)
    if standard is not None:
        return standard
    return f"rounded-[{int(px) if float(px).is_integer() else f'{px:g}'}px]"


def optimize_token(token: str) -> str:
    match = _ARBITRARY_PX_RE.match(token)
    if match is None:
        return token
    prefix, px = match.group("prefix"), float(match.group("px"))
    if prefix == "rounded":
        return RADIUS_SCALE.get(px, token)
    if prefix not in SPACING_PREFIXES:
        return token
    step = SPACING_SCALE.get(abs(px))
    if step is None:
        return token
    if px < 0:
        return f"-{prefix}-{step}" if prefix in _NEGATABLE else token
    return f"{prefix}-{step}"


def merge_square(tokens: list[str]) -> list[str]:
    """``w-6 h-6`` -> ``size-6``, placed where the width token was."""
    widths = {t[2:]: i for i, t in enumerate(tokens) if t.startswith("w-")}
    heights = {t[2:]: i for i, t in enumerate(tokens) if t.startswith("h-")}
    if len(widths) != 1 or len(heights) != 1:
        return tokens
    (step, w_index), (h_step, h_index) = next(iter(widths.items())), next(iter(heights.items()))
    if step != h_step or step not in SPACING_SCALE.values():
        return tokens
    out = list(tokens)
    out[w_index] = f"size-{step}"
    del out[h_index]
    return out


def dedupe(tokens: list[str]) -> list[str]:
    return list(dict.fromkeys(tokens))


class TailwindOptimizerPass:
    name = "tailwind-optimizer"
    priority = 40
    description = "Map arbitrary pixel values to exact scale steps and deduplicate classes"
    must_precede: tuple[str, ...] = ()

    def run(self, document: Document, context: RewriteContext) -> dict[str, int]:
        tally = Tally()
        for element in document.iter_elements():
            if not element.has_static_classes():
                continue
            tokens = element.classes
            optimized = merge_square([optimize_token(t) for t in tokens])
            if optimized != tokens:
                tally.count("classesOptimized")
            deduped = dedupe(optimized)
            if len(deduped) != len(optimized):
                tally.count("duplicatesRemoved")
            if deduped != tokens:
                element.set_classes(deduped)
        return tally.result()
