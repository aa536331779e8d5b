from figfix.stylesheet.model import StyleRule, Stylesheet, SynthesizedClass, SynthesizedClassTable
from figfix.stylesheet.emitter import build_stylesheet, emit_stylesheet, render_stylesheet
from figfix.stylesheet.parser import merge_stylesheets, parse_stylesheet

__all__ = [
    "StyleRule",
    "Stylesheet",
    "SynthesizedClass",
    "SynthesizedClassTable",
    "build_stylesheet",
    "emit_stylesheet",
    "render_stylesheet",
    "merge_stylesheets",
    "parse_stylesheet",
]
