"""Built-in markup rewrite passes, in default priority order."""

from figfix.passes.base import Pass, Tally, Verdict, rewrite
from figfix.passes.cleanup import ClassCleanupPass
from figfix.passes.css_vars import CssVarsPass
from figfix.passes.fonts import FontDetectionPass
from figfix.passes.optimizer import TailwindOptimizerPass
from figfix.passes.post_fixes import PostFixesPass
from figfix.passes.svg import SvgCompositePass, SvgWrapperPass


def builtin_passes() -> list[Pass]:
    """Fresh instances of every built-in pass."""
    return [
        FontDetectionPass(),
        ClassCleanupPass(),
        SvgCompositePass(),
        SvgWrapperPass(),
        PostFixesPass(),
        CssVarsPass(),
        TailwindOptimizerPass(),
    ]


__all__ = [
    "Pass",
    "Tally",
    "Verdict",
    "rewrite",
    "builtin_passes",
    "ClassCleanupPass",
    "CssVarsPass",
    "FontDetectionPass",
    "PostFixesPass",
    "SvgCompositePass",
    "SvgWrapperPass",
    "TailwindOptimizerPass",
]
