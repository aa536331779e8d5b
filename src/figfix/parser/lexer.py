"""Tokenizer for component modules that tracks where JSX markup starts and ends.

A regular-expression lexer cannot tell module code from element children or
from the inside of a tag, so the lark grammar declares its terminals and
takes them from :class:`JsxLexer`.  The scanner runs in three modes:

* code: everything up to a ``<`` that opens markup is one ``CODE`` token;
  strings, template literals and comments are skipped so a ``<div>`` inside
  them stays code.
* tag: a tag name, its attributes and the closing ``>`` or ``/>``.
* children: raw text (whitespace included), ``{...}`` expression containers
  and nested elements, up to the matching closing tag.
"""

from __future__ import annotations

import bisect
import re
from typing import Generator, Iterator

from lark import Token
from lark.lexer import Lexer

from figfix.parser.errors import ParseError

_NAME_RE = re.compile(r"[A-Za-z_$][\w$.:-]*")
_STRING_RE = re.compile(r""""[^"]*"|'[^']*'""")
_TEXT_RE = re.compile(r"[^<{}]+")
_SPACE_RE = re.compile(r"\s*")

# Source that may contain braces or "<" without meaning anything to us.
_SKIP_RE = re.compile(
    r"/\*.*?\*/"
    r"|(?<![:\w])//[^\n]*"
    r'|"(?:[^"\\\n]|\\.)*"'
    r"|'(?:[^'\\\n]|\\.)*'"
    r"|`(?:[^`\\]|\\.)*`",
    re.DOTALL,
)
_CODE_PLAIN_RE = re.compile(r"[^<\"'`/]+")
_EXPR_PLAIN_RE = re.compile(r"[^{}\"'`/]+")

# "<" after an identifier, call or index is a comparison or a type argument.
_NOT_BEFORE_MARKUP = re.compile(r"[\w)\].$]")
_MARKUP_OPENER_RE = re.compile(r"<(?=[A-Za-z>])")


class _Scanner:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", text)]

    # ---- positions ----

    def _location(self, pos: int) -> tuple[int, int]:
        index = bisect.bisect_right(self._line_starts, pos) - 1
        return index + 1, pos - self._line_starts[index] + 1

    def _token(self, type_: str, start: int, end: int) -> Token:
        line, column = self._location(start)
        end_line, end_column = self._location(end)
        self.pos = end
        return Token(type_, self.text[start:end], start, line, column, end_line, end_column, end)

    def error(self, message: str, pos: int | None = None) -> ParseError:
        line, column = self._location(self.pos if pos is None else pos)
        return ParseError(f"{message} at line {line}, column {column}", line=line, column=column)

    def _at(self, literal: str) -> bool:
        return self.text.startswith(literal, self.pos)

    def _skip_space(self) -> None:
        self.pos = _SPACE_RE.match(self.text, self.pos).end()  # type: ignore[union-attr]

    # ---- modes ----

    def tokens(self) -> Iterator[Token]:
        while self.pos < len(self.text):
            start = self.pos
            end = self._code_end(start)
            if end > start:
                yield self._token("CODE", start, end)
            if self.pos < len(self.text):
                yield from self._element()

    def _code_end(self, pos: int) -> int:
        text = self.text
        while pos < len(text):
            plain = _CODE_PLAIN_RE.match(text, pos)
            if plain:
                pos = plain.end()
                continue
            skip = _SKIP_RE.match(text, pos)
            if skip:
                pos = skip.end()
                continue
            if _MARKUP_OPENER_RE.match(text, pos) and not (pos and _NOT_BEFORE_MARKUP.match(text[pos - 1])):
                return pos
            pos += 1
        return pos

    def _element(self) -> Iterator[Token]:
        if self._at("<>"):
            yield self._token("_FRAGMENT_OPEN", self.pos, self.pos + 2)
            yield from self._children()
            if not self._at("</>"):
                raise self.error("Expected </> to close the fragment")
            yield self._token("_FRAGMENT_CLOSE", self.pos, self.pos + 3)
            return

        yield self._token("_LT", self.pos, self.pos + 1)
        closed = yield from self._tag()
        if closed:
            return
        yield from self._children()
        yield self._token("_LT_SLASH", self.pos, self.pos + 2)
        self._skip_space()
        yield self._name("Expected a closing tag name")
        self._skip_space()
        if not self._at(">"):
            raise self.error("Expected '>' to end the closing tag")
        yield self._token("_GT", self.pos, self.pos + 1)

    def _tag(self) -> Generator[Token, None, bool]:
        """Yield the tag name and attributes; return whether the tag closed itself."""
        self._skip_space()
        yield self._name("Expected a tag name")
        while True:
            self._skip_space()
            if self._at("/>"):
                yield self._token("_SLASH_GT", self.pos, self.pos + 2)
                return True
            if self._at(">"):
                yield self._token("_GT", self.pos, self.pos + 1)
                return False
            if self._at("{"):
                yield self._expression()
                continue
            yield self._name("Unexpected character in tag")
            self._skip_space()
            if not self._at("="):
                continue
            yield self._token("_EQ", self.pos, self.pos + 1)
            self._skip_space()
            if self._at("{"):
                yield self._expression()
                continue
            string = _STRING_RE.match(self.text, self.pos)
            if string is None:
                raise self.error("Expected a quoted or {braced} attribute value")
            yield self._token("STRING", self.pos, string.end())

    def _children(self) -> Iterator[Token]:
        while True:
            if self.pos >= len(self.text):
                raise self.error("Unexpected end of input inside an element")
            if self._at("</"):
                return
            char = self.text[self.pos]
            if char == "<":
                yield from self._element()
            elif char == "{":
                yield self._expression()
            elif char == "}":
                raise self.error("Unexpected '}' in JSX text")
            else:
                text = _TEXT_RE.match(self.text, self.pos)
                assert text is not None
                yield self._token("JSX_TEXT", self.pos, text.end())

    # ---- leaves ----

    def _name(self, message: str) -> Token:
        name = _NAME_RE.match(self.text, self.pos)
        if name is None:
            raise self.error(message)
        return self._token("NAME", self.pos, name.end())

    def _expression(self) -> Token:
        """A balanced ``{...}`` container, braces included."""
        text, start = self.text, self.pos
        pos, depth = start, 0
        while pos < len(text):
            plain = _EXPR_PLAIN_RE.match(text, pos)
            if plain:
                pos = plain.end()
                continue
            skip = _SKIP_RE.match(text, pos)
            if skip:
                pos = skip.end()
                continue
            char = text[pos]
            pos += 1
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return self._token("EXPRESSION", start, pos)
        raise self.error("Unterminated {expression}", start)


class JsxLexer(Lexer):
    """lark lexer adapter; the grammar ``%declare``s every terminal yielded here."""

    def __init__(self, lexer_conf: object) -> None:
        pass

    def lex(self, data: str) -> Iterator[Token]:  # type: ignore[override]
        return _Scanner(data).tokens()
