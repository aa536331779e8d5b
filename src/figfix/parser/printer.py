"""Serialize a markup Document back to component source."""

from __future__ import annotations

import json
import re

from figfix.model.markup import (
    Attribute,
    Code,
    Document,
    Element,
    Expression,
    Node,
    RawValue,
    Style,
    StyleValue,
    Text,
)

INDENT = "  "

_IDENT_RE = re.compile(r"^[A-Za-z_$][\w$]*$")
_LINE_BREAK_RE = re.compile(r"\r\n|\n|\r")


def format_style_value(value: StyleValue) -> str:
    if isinstance(value, RawValue):
        return value.source
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, int):
        return str(value)
    return json.dumps(value, ensure_ascii=False)


def format_style(style: Style) -> str:
    if not style.entries:
        return "{}"
    parts = []
    for key, value in style.entries.items():
        key_src = key if _IDENT_RE.match(key) else json.dumps(key)
        parts.append(f"{key_src}: {format_style_value(value)}")
    return "{ " + ", ".join(parts) + " }"


def format_attribute(attr: Attribute) -> str:
    value = attr.value
    if attr.is_spread and isinstance(value, Expression):
        return "{" + value.source + "}"
    if value is None:
        return attr.name
    if isinstance(value, Style):
        return f"{attr.name}={{{format_style(value)}}}"
    if isinstance(value, Expression):
        return f"{attr.name}={{{value.source}}}"
    quote = "'" if '"' in value else '"'
    return f"{attr.name}={quote}{value}{quote}"


def _open_tag(element: Element, self_closing: bool) -> str:
    if element.is_fragment:
        return "<>"
    parts = [element.tag] + [format_attribute(a) for a in element.attributes]
    head = "<" + " ".join(parts)
    return head + (" />" if self_closing else ">")


def _close_tag(element: Element) -> str:
    return "</>" if element.is_fragment else f"</{element.tag}>"


def _format_leaf(node: Node) -> str:
    if isinstance(node, Text):
        return node.value
    if isinstance(node, Expression):
        return "{" + node.source + "}"
    raise TypeError(f"Not a leaf node: {node!r}")


def _line_indent(text: str, current: str) -> str:
    """Indentation of the line *text* leaves the printer on."""
    lines = _LINE_BREAK_RE.split(text)
    if len(lines) == 1:
        return current
    last_line = lines[-1]
    return last_line[: len(last_line) - len(last_line.lstrip())]


def _format_as_written(element: Element, indent: str) -> str:
    """Children printed as written; text whitespace is part of what JSX renders."""
    parts = [_open_tag(element, False)]
    current = indent
    for child in element.children:
        if isinstance(child, Text):
            parts.append(child.value)
            current = _line_indent(child.value, current)
        elif isinstance(child, Element):
            parts.append(format_element(child, current))
        else:
            parts.append(_format_leaf(child))
    parts.append(_close_tag(element))
    return "".join(parts)


def format_element(element: Element, indent: str = "") -> str:
    """Format *element* with its first line unindented and nested lines under *indent*.

    Elements whose children include text keep their source layout.  The rest
    (element-only or single-expression children, and trees built by passes)
    are laid out one child per line.
    """
    if not element.children and not element.is_fragment:
        return _open_tag(element, self_closing=True)
    if any(isinstance(child, Text) for child in element.children):
        return _format_as_written(element, indent)
    if len(element.children) == 1 and not isinstance(element.children[0], Element):
        return _open_tag(element, False) + _format_leaf(element.children[0]) + _close_tag(element)

    inner = indent + INDENT
    lines = [_open_tag(element, False)]
    for child in element.children:
        if isinstance(child, Element):
            lines.append(inner + format_element(child, inner))
        else:
            lines.append(inner + _format_leaf(child))
    lines.append(indent + _close_tag(element))
    return "\n".join(lines)


def _trailing_indent(code: Code | None) -> str:
    """Indentation a root element inherits from the code line it continues."""
    if code is None:
        return ""
    last_line = code.source.rsplit("\n", 1)[-1]
    return last_line if not last_line.strip() else ""


def print_markup(document: Document) -> str:
    """Serialize *document*: code verbatim, markup re-indented where it was rebuilt."""
    out: list[str] = []
    previous: Code | None = None
    for segment in document.segments:
        if isinstance(segment, Code):
            out.append(segment.source)
            previous = segment
        else:
            out.append(format_element(segment, _trailing_indent(previous)))
            previous = None
    return "".join(out)
