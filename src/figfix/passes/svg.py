"""SVG structure passes: composite inlining and image-wrapper flattening."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from figfix.assets import AssetResolver, SvgAsset, import_bindings
from figfix.model.context import RewriteContext
from figfix.model.markup import Attribute, Document, Element, Expression, Node
from figfix.passes.base import Parent, Tally, Verdict, rewrite

logger = logging.getLogger(__name__)

MIN_COMPOSITE_IMAGES = 3

_POSITION_PREFIXES = ("top-", "bottom-", "left-", "right-", "inset-")
_DIMENSION_PREFIXES = ("w-", "h-", "size-", "min-w-", "max-w-", "min-h-", "max-h-")
_IDENTIFIER_RE = re.compile(r"^\s*[A-Za-z_$][\w$]*\s*$")
_FILL_VAR_RE = re.compile(r"^var\(\s*--[\w-]+\s*,\s*(?P<fallback>[^)]+)\)$")


def _is_clipping(token: str) -> bool:
    return token in ("overflow-hidden", "overflow-clip") or token.startswith(("overflow-x-", "overflow-y-"))


def camel_case(name: str) -> str:
    """``fill-rule`` -> ``fillRule``; namespaced attributes keep their colon."""
    if ":" in name:
        return name
    head, *rest = name.split("-")
    return head + "".join(part.capitalize() for part in rest)


def clean_path_value(value: str) -> str:
    match = _FILL_VAR_RE.match(value.strip())
    return match.group("fallback").strip() if match else value


@dataclass
class _Layer:
    image: Element
    positioning: list[str]

    @property
    def source(self) -> str | None:
        attr = self.image.get("src")
        if attr is None or not isinstance(attr.value, Expression):
            return None
        if not _IDENTIFIER_RE.match(attr.value.source):
            return None
        return attr.value.source.strip()


def _single_image(element: Element) -> Element | None:
    content = element.content()
    if len(content) != 1:
        return None
    child = content[0]
    if not isinstance(child, Element) or child.tag != "img":
        return None
    return child


def _layer(child: Node) -> _Layer | None:
    """An absolutely positioned image, either direct or wrapped in a single div."""
    if not isinstance(child, Element):
        return None
    if child.tag == "img":
        return _Layer(child, child.classes)
    if child.tag == "div":
        image = _single_image(child)
        if image is not None:
            return _Layer(image, child.classes)
    return None


def _is_positioned(tokens: list[str]) -> bool:
    return "absolute" in tokens and any(t.startswith(_POSITION_PREFIXES) for t in tokens)


class SvgCompositePass:
    """Replace a stack of 3+ positioned SVG images with one inline ``<svg>``."""

    name = "svg-composites"
    priority = 15
    description = "Inline decomposed vector graphics as a single svg element"
    must_precede = ("svg-wrappers",)

    def run(self, document: Document, context: RewriteContext) -> dict[str, int]:
        tally = Tally()
        bindings = import_bindings(document)
        resolver = AssetResolver(context.asset_dir) if context.asset_dir is not None else None

        def visit(element: Element, parent: Parent) -> Element | None:
            layers = self._layers(element)
            if layers is None:
                return None
            replacement = self._inline(element, layers, bindings, resolver)
            tally.classify(
                Verdict.REWRITTEN if replacement is not None else Verdict.UNRECOGNIZED,
                "compositesInlined",
                "compositesUnrecognized",
            )
            return replacement

        rewrite(document, visit)
        return tally.result()

    @staticmethod
    def _layers(element: Element) -> list[_Layer] | None:
        children = element.content()
        if element.tag != "div" or len(children) < MIN_COMPOSITE_IMAGES:
            return None
        layers = []
        for child in children:
            layer = _layer(child)
            if layer is None or not _is_positioned(layer.positioning):
                return None
            layers.append(layer)
        return layers

    def _inline(
        self,
        container: Element,
        layers: list[_Layer],
        bindings: dict[str, str],
        resolver: AssetResolver | None,
    ) -> Element | None:
        tokens = container.classes
        if resolver is None or not any(t.startswith("w-") for t in tokens) or not any(t.startswith("h-") for t in tokens):
            return None

        assets: list[SvgAsset] = []
        for layer in layers:
            source = layer.source
            reference = bindings.get(source) if source else None
            asset = resolver.read_svg(reference) if reference else None
            if asset is not None:
                assets.append(asset)
        paths = [p for asset in assets for p in asset.paths]
        if not paths:
            logger.debug("No SVG paths found for composite %s", container.get_string("data-name"))
            return None

        first = assets[0]
        view_box = first.view_box
        if view_box is None and first.width and first.height:
            view_box = f"0 0 {first.width} {first.height}"

        attributes = [Attribute("className", " ".join(tokens))]
        if view_box:
            attributes.append(Attribute("viewBox", view_box))
        attributes.append(Attribute("fill", "none"))
        for name in ("data-name", "data-node-id"):
            value = container.get_string(name)
            if value is not None:
                attributes.append(Attribute(name, value))

        children = [
            Element(
                tag="path",
                attributes=[Attribute(camel_case(k), clean_path_value(v)) for k, v in path.items()],
            )
            for path in paths
        ]
        return Element(tag="svg", attributes=attributes, children=children)


class SvgWrapperPass:
    """Collapse an unsized absolute ``div`` around a single image into the image."""

    name = "svg-wrappers"
    priority = 20
    description = "Flatten absolutely positioned wrappers holding a single img"
    must_precede: tuple[str, ...] = ()

    def run(self, document: Document, context: RewriteContext) -> dict[str, int]:
        tally = Tally()

        def visit(element: Element, parent: Parent) -> Element | None:
            image = self._wrapped_image(element)
            if image is None:
                return None
            image.set_classes(element.classes + image.classes)
            for name in ("data-name", "data-node-id"):
                value = element.get_string(name)
                if value is not None:
                    image.set(name, value)
            tally.count("wrappersFlattened")
            return image

        rewrite(document, visit)
        return tally.result()

    @staticmethod
    def _wrapped_image(element: Element) -> Element | None:
        if element.tag != "div" or not element.has_static_classes():
            return None
        tokens = element.classes
        if "absolute" not in tokens:
            return None
        if any(t.startswith(_DIMENSION_PREFIXES) or _is_clipping(t) for t in tokens):
            return None
        child = _single_image(element)
        if child is None:
            return None
        if child.has("className") and not child.has_static_classes():
            return None
        return child
