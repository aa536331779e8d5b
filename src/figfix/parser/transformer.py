"""Lark Transformer that converts a component parse tree into a markup Document."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedInput, VisitError

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
from figfix.parser.errors import ParseError
from figfix.parser.lexer import JsxLexer

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"

_IDENT_RE = re.compile(r"^[A-Za-z_$][\w$]*$")
_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")
_QUOTED_RE = re.compile(r"""^(?P<q>["'])(?P<body>.*)(?P=q)$""", re.DOTALL)


def _split_top_level(source: str, sep: str = ",") -> list[str]:
    """Split *source* on *sep* outside of quotes, brackets and template literals."""
    parts: list[str] = []
    depth = 0
    quote: str | None = None
    current: list[str] = []
    escaped = False
    for ch in source:
        if quote:
            current.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
            continue
        if ch in "\"'`":
            quote = ch
        elif ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        elif ch == sep and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    if quote or depth:
        raise ValueError("unbalanced object literal")
    parts.append("".join(current))
    return parts


def _style_value(raw: str) -> StyleValue:
    raw = raw.strip()
    quoted = _QUOTED_RE.match(raw)
    if quoted and quoted.group("q") not in quoted.group("body"):
        return quoted.group("body")
    if _NUMBER_RE.match(raw):
        return float(raw) if "." in raw else int(raw)
    return RawValue(raw)


def parse_style(source: str) -> Style | None:
    """Read ``{ fontFamily: "Inter", fontWeight: 700 }`` into a Style map.

    Returns ``None`` for anything that is not a plain object literal with
    ``key: value`` entries (spreads, computed keys, identifiers).
    """
    body = source.strip()
    if not (body.startswith("{") and body.endswith("}")):
        return None
    try:
        entries = _split_top_level(body[1:-1])
    except ValueError:
        return None
    style = Style()
    for entry in entries:
        if not entry.strip():
            continue
        parts = _split_top_level(entry, sep=":")
        if len(parts) < 2:
            return None
        key, value = parts[0].strip(), ":".join(parts[1:])
        quoted = _QUOTED_RE.match(key)
        if quoted:
            key = quoted.group("body")
        elif not _IDENT_RE.match(key):
            return None
        style.set(key, _style_value(value))
    return style


def _unquote(raw: str) -> str:
    return raw[1:-1]


class MarkupTransformer(Transformer):  # type: ignore[type-arg]
    """Transform a Lark parse tree into Document / Element objects."""

    # ---- leaves ----

    def code(self, items: list[Token]) -> Code:
        return Code(source=str(items[0]))

    def text(self, items: list[Token]) -> Text:
        return Text(str(items[0]))

    def expression(self, items: list[Token]) -> Expression:
        return Expression(str(items[0])[1:-1])

    # ---- attributes ----

    def string_attribute(self, items: list[Token]) -> Attribute:
        return Attribute(name=str(items[0]), value=_unquote(str(items[1])))

    def expression_attribute(self, items: list[object]) -> Attribute:
        name = str(items[0])
        expr = items[1]
        assert isinstance(expr, Expression)
        if name == "style":
            style = parse_style(expr.source)
            if style is not None:
                return Attribute(name=name, value=style)
        return Attribute(name=name, value=expr)

    def flag_attribute(self, items: list[Token]) -> Attribute:
        return Attribute(name=str(items[0]), value=None)

    def spread_attribute(self, items: list[Expression]) -> Attribute:
        return Attribute(name="", value=items[0])

    # ---- elements ----

    def self_closing(self, items: list[object]) -> Element:
        tag = str(items[0])
        attributes = [i for i in items[1:] if isinstance(i, Attribute)]
        return Element(tag=tag, attributes=attributes)

    def paired(self, items: list[object]) -> Element:
        opening, closing = items[0], items[-1]
        assert isinstance(opening, Token) and isinstance(closing, Token)
        if str(opening) != str(closing):
            raise ParseError(
                f"Mismatched closing tag </{closing}> for <{opening}>",
                line=closing.line,
                column=closing.column,
            )
        return Element(
            tag=str(opening),
            attributes=[i for i in items[1:-1] if isinstance(i, Attribute)],
            children=_children(items[1:-1]),
        )

    def fragment(self, items: list[object]) -> Element:
        return Element(tag="", children=_children(items))

    def start(self, items: list[object]) -> Document:
        segments = [i for i in items if isinstance(i, (Code, Element))]
        return Document(segments=segments)  # type: ignore[arg-type]


def _children(items: list[object]) -> list[Node]:
    return [i for i in items if isinstance(i, (Element, Text, Expression))]


@lru_cache(maxsize=1)
def _parser() -> Lark:
    return Lark(GRAMMAR_PATH.read_text(encoding="utf-8"), parser="lalr", lexer=JsxLexer, start="start")


def parse_markup(source: str) -> Document:
    """Parse component source into a Document.

    Raises :class:`ParseError` when the markup is malformed (unbalanced tags,
    unterminated attributes, stray braces in text).
    """
    try:
        tree = _parser().parse(source)
    except UnexpectedInput as e:
        raise ParseError(str(e), line=e.line, column=e.column) from e
    try:
        return MarkupTransformer().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, ParseError):
            raise e.orig_exc from e
        raise
