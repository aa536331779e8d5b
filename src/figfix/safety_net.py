"""Text-level sweep for variable placeholders the tree passes did not reach.

Markup nested inside opaque expression containers (``{open && <div .../>}``)
is carried through the tree as raw source, so its class strings are only
visible here.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from figfix.model.variables import VariableTable
from figfix.resolution import is_placeholder, resolve_token
from figfix.stylesheet.model import SynthesizedClassTable

logger = logging.getLogger(__name__)

_CLASS_ATTR_RE = re.compile(r"""(?P<head>className=)(?P<q>["'])(?P<value>(?:(?!(?P=q)).)*)(?P=q)""")


@dataclass(frozen=True)
class SafetyNetResult:
    code: str
    found: int
    fixed: int

    @property
    def intervened(self) -> bool:
        return self.fixed > 0


def _count(code: str) -> int:
    return sum(
        1
        for match in _CLASS_ATTR_RE.finditer(code)
        for token in match.group("value").split()
        if is_placeholder(token)
    )


def apply_safety_net(
    code: str,
    variables: VariableTable,
    synthesized: SynthesizedClassTable,
) -> SafetyNetResult:
    """Resolve residual placeholders in ``className`` strings of serialized *code*.

    ``found`` counts placeholders present before the sweep and ``fixed`` the
    ones it rewrote, so ``fixed <= found`` always holds.
    """
    found = _count(code)
    if not found:
        return SafetyNetResult(code=code, found=0, fixed=0)

    def _rewrite(match: re.Match[str]) -> str:
        tokens = []
        for token in match.group("value").split(" "):
            resolution = resolve_token(token, variables, synthesized) if token else None
            tokens.append(resolution.token if resolution is not None and resolution.changed else token)
        quote = match.group("q")
        return f"{match.group('head')}{quote}{' '.join(tokens)}{quote}"

    fixed_code = _CLASS_ATTR_RE.sub(_rewrite, code)
    result = SafetyNetResult(code=fixed_code, found=found, fixed=found - _count(fixed_code))
    if result.intervened:
        logger.warning("Safety net resolved %d of %d residual placeholder(s)", result.fixed, found)
    else:
        logger.debug("Safety net left %d unresolvable placeholder(s)", found)
    return result
