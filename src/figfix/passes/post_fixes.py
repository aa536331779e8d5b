"""Visual-fidelity fixes: multi-stop gradients, shape geometry and blend-mode checks.

Every rewrite here is guarded by a classification step.  Patterns the pass
does not fully understand are counted under ``*Unrecognized`` and left
untouched.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from figfix.model.context import RewriteContext
from figfix.model.markup import Document, Element
from figfix.passes.base import Tally, Verdict
from figfix.passes.optimizer import radius_token
from figfix.resolution import normalize_style_value

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Gradients
# ---------------------------------------------------------------------------

DIRECTION_DEGREES: dict[str, int] = {
    "t": 0,
    "tr": 45,
    "r": 90,
    "br": 135,
    "b": 180,
    "bl": 225,
    "l": 270,
    "tl": 315,
}

_LINEAR_RE = re.compile(r"^bg-(?:gradient|linear)-to-(?P<dir>tr|tl|br|bl|t|r|b|l)$")
_RADIAL_TOKENS = frozenset({"bg-radial", "bg-gradient-radial"})
_STOP_RE = re.compile(r"^(?P<kind>from|via|to)-(?P<value>\[.+\]|white|black|transparent)$")
_POSITION_RE = re.compile(r"^(?P<kind>from|via|to)-(?P<pct>\d+(?:\.\d+)?)%$")


@dataclass
class _Stop:
    kind: str
    color: str
    position: float | None = None


def _stop_color(raw: str) -> str:
    if raw.startswith("["):
        raw = raw[1:-1]
        if raw.startswith("color:"):
            raw = raw[len("color:"):]
    return normalize_style_value(raw.replace("_", " "))


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def _collect_stops(tokens: list[str]) -> tuple[list[_Stop], set[str]]:
    """Ordered colour stops (from, vias, to) and the tokens that described them."""
    stops: dict[str, list[_Stop]] = {"from": [], "via": [], "to": []}
    positions: dict[str, list[float]] = {"from": [], "via": [], "to": []}
    used: set[str] = set()
    for token in tokens:
        stop = _STOP_RE.match(token)
        if stop:
            stops[stop.group("kind")].append(_Stop(stop.group("kind"), _stop_color(stop.group("value"))))
            used.add(token)
            continue
        pos = _POSITION_RE.match(token)
        if pos:
            positions[pos.group("kind")].append(float(pos.group("pct")))
            used.add(token)
    for kind, found in positions.items():
        for stop, pct in zip(stops[kind], found):
            stop.position = pct
    return stops["from"] + stops["via"] + stops["to"], used


def _color_stops(stops: list[_Stop]) -> str:
    last = len(stops) - 1
    parts = []
    for i, stop in enumerate(stops):
        position = stop.position if stop.position is not None else 100 * i / last
        parts.append(f"{stop.color} {_format_number(round(position, 2))}%")
    return ", ".join(parts)


def _gradient(tokens: list[str]) -> tuple[Verdict, str | None, set[str]]:
    """Classify gradient utilities on one element and build the CSS value."""
    direction = next((m for m in map(_LINEAR_RE.match, tokens) if m), None)
    radial = next((t for t in tokens if t in _RADIAL_TOKENS), None)
    if direction is None and radial is None:
        return Verdict.SKIPPED, None, set()

    stops, used = _collect_stops(tokens)
    vias = sum(1 for s in stops if s.kind == "via")
    if direction is not None:
        # Tailwind renders a single via stop natively.
        if vias < 2:
            return Verdict.SKIPPED, None, set()
        if len(stops) != vias + 2:
            return Verdict.UNRECOGNIZED, None, set()
        value = f"linear-gradient({DIRECTION_DEGREES[direction.group('dir')]}deg, {_color_stops(stops)})"
        return Verdict.REWRITTEN, value, used | {direction.group(0)}

    if len(stops) < 2:
        return Verdict.UNRECOGNIZED, None, set()
    return Verdict.REWRITTEN, f"radial-gradient(circle, {_color_stops(stops)})", used | {radial}


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------

_SHAPE_RE = re.compile(r"^(?P<kind>ellipse|circle|star|polygon|line)\b", re.IGNORECASE)
_ARBITRARY_PX_RE = re.compile(r"^(?P<axis>size|w|h)-\[(?P<px>\d+(?:\.\d+)?)px\]$")
_SCALE_RE = re.compile(r"^(?P<axis>size|w|h)-(?P<step>\d+(?:\.\d+)?)$")
_ROUNDED_RE = re.compile(r"^rounded(?:-.+)?$")


def shape_kind(element: Element) -> str | None:
    name = element.get_string("data-name")
    if not name:
        return None
    match = _SHAPE_RE.match(name.strip())
    return match.group("kind").lower() if match else None


def dimensions(tokens: list[str]) -> tuple[float | None, float | None]:
    """Width and height in px from sizing utilities (arbitrary or 4px scale)."""
    width = height = None
    for token in tokens:
        match = _ARBITRARY_PX_RE.match(token)
        if match:
            value = float(match.group("px"))
        else:
            match = _SCALE_RE.match(token)
            if not match:
                continue
            value = float(match.group("step")) * 4
        axis = match.group("axis")
        if axis in ("size", "w"):
            width = value
        if axis in ("size", "h"):
            height = value
    return width, height


def _with_radius(tokens: list[str], radius: str) -> list[str]:
    kept = [t for t in tokens if not _ROUNDED_RE.match(t)]
    return kept + [radius]


# ---------------------------------------------------------------------------
# Blend modes
# ---------------------------------------------------------------------------

BLEND_MODES = frozenset({
    "normal",
    "multiply",
    "screen",
    "overlay",
    "darken",
    "lighten",
    "color-dodge",
    "color-burn",
    "hard-light",
    "soft-light",
    "difference",
    "exclusion",
    "hue",
    "saturation",
    "color",
    "luminosity",
    "plus-darker",
    "plus-lighter",
})


class PostFixesPass:
    name = "post-fixes"
    priority = 25
    description = "Rebuild multi-stop and radial gradients, correct shapes, verify blend modes"
    must_precede = ("css-vars",)

    def run(self, document: Document, context: RewriteContext) -> dict[str, int]:
        tally = Tally()
        for element in document.iter_elements():
            if not element.has_static_classes():
                continue
            tally.classify(self._fix_gradient(element), "gradientsFixed", "gradientsUnrecognized")
            tally.classify(self._fix_shape(element), "shapesFixed", "shapesUnrecognized")
            self._verify_blend_modes(element, tally)
        return tally.result()

    @staticmethod
    def _fix_gradient(element: Element) -> Verdict:
        tokens = element.classes
        verdict, value, used = _gradient(tokens)
        if verdict is not Verdict.REWRITTEN:
            return verdict
        style = element.ensure_style()
        if style is None or "background" in style:
            return Verdict.UNRECOGNIZED
        style.set("background", value)
        element.set_classes([t for t in tokens if t not in used])
        return Verdict.REWRITTEN

    @staticmethod
    def _fix_shape(element: Element) -> Verdict:
        kind = shape_kind(element)
        if kind is None:
            return Verdict.SKIPPED
        tokens = element.classes

        if kind == "line":
            fixed = ["h-px" if t in ("h-0", "h-[0px]") else t for t in tokens]
            if fixed == tokens:
                return Verdict.SKIPPED
            element.set_classes(fixed)
            return Verdict.REWRITTEN

        if kind in ("star", "polygon"):
            changed = False
            if element.get_string("data-shape") != kind:
                element.set("data-shape", kind)
                changed = True
            for image in element.elements():
                if image.tag != "img" or (image.has("className") and not image.has_static_classes()):
                    continue
                if "object-contain" not in image.classes:
                    image.set_classes(image.classes + ["object-contain"])
                    changed = True
            return Verdict.REWRITTEN if changed else Verdict.SKIPPED

        width, height = dimensions(tokens)
        if width is None or height is None:
            logger.debug("Shape %r has no readable size", element.get_string("data-name"))
            return Verdict.UNRECOGNIZED
        if width == height and "rounded-full" in tokens:
            return Verdict.SKIPPED
        if kind == "circle" or width == height:
            radius = radius_token(min(width, height) / 2)
        else:
            radius = "rounded-[50%]"
        if radius in tokens and sum(1 for t in tokens if _ROUNDED_RE.match(t)) == 1:
            return Verdict.SKIPPED
        element.set_classes(_with_radius(tokens, radius))
        return Verdict.REWRITTEN

    @staticmethod
    def _verify_blend_modes(element: Element, tally: Tally) -> None:
        for token in element.classes:
            if not token.startswith("mix-blend-"):
                continue
            if token[len("mix-blend-"):] in BLEND_MODES:
                tally.count("blendModesVerified")
            else:
                logger.debug("Unrecognized blend mode %s on <%s>", token, element.tag)
                tally.count("blendModesUnrecognized")
