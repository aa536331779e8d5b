"""Regex parser for the stylesheets this package emits, used to consolidate chunks.

Syntax example:
    @import url('https://fonts.googleapis.com/css2?family=Inter:wght@400&display=swap');
    :root { --colors-white: #ffffff; }
    .content-start { align-content: flex-start; }
    .p-margin-r { padding: var(--margin-r, 32px); }
"""

from __future__ import annotations

import re
from urllib.parse import unquote_plus

from figfix.stylesheet.emitter import FIGMA_UTILITIES, GOOGLE_FONTS_URL, font_import
from figfix.stylesheet.model import StyleRule, Stylesheet

__all__ = ["parse_stylesheet", "merge_stylesheets", "font_pairs"]

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)

_IMPORT_RE = re.compile(r"@import\s+url\((?P<q>['\"]?)[^)]*?(?P=q)\)\s*;")

# family=Inter:wght@400;700 inside a Google Fonts import
_FAMILY_RE = re.compile(r"family=(?P<family>[^:&']+):wght@(?P<weights>[\d;]+)")

# Matches a complete rule: selector { declarations }
_RULE_RE = re.compile(
    r"""
    (?P<selector>[^{}]+)     # everything before the opening brace
    \{                       # opening brace
    (?P<body>[^}]*)          # declarations
    \}                       # closing brace
    """,
    re.VERBOSE,
)

# Matches a single declaration: key: value;
_DECL_RE = re.compile(
    r"""
    (?P<key>-{0,2}[a-zA-Z_][a-zA-Z0-9_-]*)   # property or custom property
    \s*:\s*                                  # colon separator
    (?P<value>[^;]+?)                        # value (non-greedy up to semicolon)
    \s*;                                     # terminating semicolon
    """,
    re.VERBOSE,
)

_UTILITY_SELECTORS = frozenset(rule.selector for rule in FIGMA_UTILITIES)


def _parse_declarations(body: str) -> dict[str, str]:
    """Parse the body of a rule block into a declaration dictionary."""
    return {m.group("key").strip(): m.group("value").strip() for m in _DECL_RE.finditer(body)}


def parse_stylesheet(source: str) -> Stylesheet:
    """Parse emitted CSS into a :class:`Stylesheet`, keeping source order."""
    source = _COMMENT_RE.sub("", source)
    imports = [m.group(0) for m in _IMPORT_RE.finditer(source)]
    source = _IMPORT_RE.sub("", source)

    sheet = Stylesheet(imports=imports)
    for match in _RULE_RE.finditer(source):
        selector = match.group("selector").strip()
        declarations = _parse_declarations(match.group("body"))
        if not declarations:  # skip rules with no valid declarations
            continue
        if selector == ":root":
            sheet.root_variables.update(declarations)
        elif selector in _UTILITY_SELECTORS:
            sheet.utilities.append(StyleRule(selector, declarations))
        else:
            sheet.rules.append(StyleRule(selector, declarations))
    return sheet


def font_pairs(directive: str) -> list[tuple[str, int]] | None:
    """(family, weight) pairs of a Google Fonts ``@import``; ``None`` for any other import."""
    if GOOGLE_FONTS_URL not in directive:
        return None
    return [
        (unquote_plus(match.group("family")), int(weight))
        for match in _FAMILY_RE.finditer(directive)
        for weight in match.group("weights").split(";")
        if weight
    ]


def merge_stylesheets(sheets: list[Stylesheet]) -> Stylesheet:
    """Consolidate chunk stylesheets.

    Font imports are combined into one directive covering every family and
    weight any chunk uses; other imports are kept once each.  ``:root``
    variables and class rules are merged by name, later chunks overriding
    earlier ones in place.
    """
    merged = Stylesheet()
    fonts: list[tuple[str, int]] = []
    other_imports: list[str] = []
    utilities: dict[str, StyleRule] = {}
    rules: dict[str, StyleRule] = {}
    for sheet in sheets:
        for directive in sheet.imports:
            pairs = font_pairs(directive)
            if pairs is not None:
                fonts.extend(pairs)
            elif directive not in other_imports:
                other_imports.append(directive)
        merged.root_variables.update(sheet.root_variables)
        for rule in sheet.utilities:
            utilities.setdefault(rule.selector, rule)
        for rule in sheet.rules:
            rules[rule.selector] = rule
    directive = font_import(fonts)
    merged.imports = ([directive] if directive else []) + other_imports
    merged.utilities = list(utilities.values())
    merged.rules = list(rules.values())
    return merged
