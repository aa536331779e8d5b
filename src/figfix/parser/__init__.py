"""Markup parser (lark) and printer for Figma MCP component modules."""

from figfix.parser.errors import ParseError
from figfix.parser.printer import print_markup
from figfix.parser.transformer import parse_markup, parse_style

__all__ = ["ParseError", "parse_markup", "parse_style", "print_markup"]
