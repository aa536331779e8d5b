"""Markup tree model: the parsed component module and its JSX element trees."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, Union

_LINE_BREAK_RE = re.compile(r"\r\n|\n|\r")


@dataclass(frozen=True)
class RawValue:
    """A style value kept verbatim as JavaScript source (identifiers, template literals)."""

    source: str


StyleValue = Union[str, int, float, RawValue]


@dataclass
class Style:
    """An inline ``style={{ ... }}`` object, as an ordered key-value map."""

    entries: dict[str, StyleValue] = field(default_factory=dict)

    def get(self, key: str, default: StyleValue | None = None) -> StyleValue | None:
        return self.entries.get(key, default)

    def set(self, key: str, value: StyleValue) -> None:
        self.entries[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class Expression:
    """A ``{...}`` JSX expression container; *source* is the text between the braces."""

    source: str


@dataclass(frozen=True)
class Text:
    """A JSX text child.

    *value* is the source text exactly as written, so printing it back keeps
    the spacing between inline elements.  :attr:`rendered` is what React
    displays: lines are trimmed where they meet a line break and blank lines
    are dropped.
    """

    value: str

    @property
    def rendered(self) -> str:
        lines = _LINE_BREAK_RE.split(self.value)
        kept = []
        for i, line in enumerate(lines):
            if i > 0:
                line = line.lstrip(" \t")
            if i < len(lines) - 1:
                line = line.rstrip(" \t")
            if line:
                kept.append(line)
        return " ".join(kept)

    @property
    def is_blank(self) -> bool:
        return not self.rendered


AttributeValue = Union[str, Expression, Style, None]


@dataclass
class Attribute:
    """A single JSX attribute.

    ``value`` is a plain string for quoted attributes, an :class:`Expression`
    for ``name={...}``, a :class:`Style` for a parseable ``style={{...}}``
    object and ``None`` for boolean shorthand attributes.  Spread attributes
    (``{...props}``) have an empty name.
    """

    name: str
    value: AttributeValue = None

    @property
    def is_spread(self) -> bool:
        return self.name == ""


@dataclass(eq=False)
class Element:
    """A JSX element.  Fragments (``<>...</>``) use an empty tag."""

    tag: str
    attributes: list[Attribute] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)

    # --- attributes -----------------------------------------------------------

    def get(self, name: str) -> Attribute | None:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None

    def get_string(self, name: str, default: str | None = None) -> str | None:
        """Return the attribute value if it is a plain string literal."""
        attr = self.get(name)
        if attr is not None and isinstance(attr.value, str):
            return attr.value
        return default

    def has(self, name: str) -> bool:
        return self.get(name) is not None

    def set(self, name: str, value: AttributeValue) -> None:
        """Set *name* in place, or append it when the element does not carry it yet."""
        attr = self.get(name)
        if attr is not None:
            attr.value = value
        else:
            self.attributes.append(Attribute(name=name, value=value))

    def remove(self, name: str) -> bool:
        for i, attr in enumerate(self.attributes):
            if attr.name == name:
                del self.attributes[i]
                return True
        return False

    @property
    def classes(self) -> list[str]:
        """Utility-class tokens of a string ``className``; empty when dynamic or absent."""
        value = self.get_string("className")
        if not value:
            return []
        return value.split()

    def has_static_classes(self) -> bool:
        return self.get_string("className") is not None

    def set_classes(self, tokens: list[str]) -> None:
        self.set("className", " ".join(t for t in tokens if t))

    @property
    def style(self) -> Style | None:
        attr = self.get("style")
        if attr is not None and isinstance(attr.value, Style):
            return attr.value
        return None

    def ensure_style(self) -> Style | None:
        """Return the inline style map, creating it when absent.

        Returns ``None`` when the element carries a ``style`` expression that
        could not be read as an object literal; such styles are left alone.
        """
        attr = self.get("style")
        if attr is None:
            style = Style()
            self.attributes.append(Attribute(name="style", value=style))
            return style
        if isinstance(attr.value, Style):
            return attr.value
        return None

    # --- children -------------------------------------------------------------

    @property
    def is_fragment(self) -> bool:
        return self.tag == ""

    def elements(self) -> list[Element]:
        return [c for c in self.children if isinstance(c, Element)]

    def content(self) -> list[Node]:
        """Children that render something; layout-only whitespace is left out."""
        return [c for c in self.children if not (isinstance(c, Text) and c.is_blank)]

    def replace_child(self, old: Node, new: Node) -> None:
        for i, child in enumerate(self.children):
            if child is old:
                self.children[i] = new
                return
        raise ValueError(f"<{_describe(old)}> is not a child of <{self.tag}>")

    def __repr__(self) -> str:
        return f"Element(tag={self.tag!r}, attributes={len(self.attributes)}, children={len(self.children)})"


Node = Union[Element, Text, Expression]


@dataclass(frozen=True)
class Code:
    """Opaque module source between JSX trees (imports, declarations, ``return (``)."""

    source: str


Segment = Union[Code, Element]


@dataclass(eq=False)
class Document:
    """A parsed component module: code segments interleaved with root elements."""

    segments: list[Segment] = field(default_factory=list)

    def roots(self) -> list[Element]:
        return [s for s in self.segments if isinstance(s, Element)]

    def code(self) -> list[Code]:
        return [s for s in self.segments if isinstance(s, Code)]

    def replace_child(self, old: Element, new: Element) -> None:
        for i, segment in enumerate(self.segments):
            if segment is old:
                self.segments[i] = new
                return
        raise ValueError(f"<{old.tag}> is not a root element of the document")

    def iter_elements(self) -> Iterator[Element]:
        """Yield every element in document order (pre-order)."""
        stack: list[Element] = list(reversed(self.roots()))
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.elements()))


def _describe(node: Node) -> str:
    return node.tag if isinstance(node, Element) else type(node).__name__
