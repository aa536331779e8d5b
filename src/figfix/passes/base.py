"""Base protocol for markup rewrite passes."""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Callable, Protocol, Union

from figfix.model.context import RewriteContext
from figfix.model.markup import Document, Element

Parent = Union[Document, Element]


class Verdict(Enum):
    """How a pass classified a candidate pattern."""

    REWRITTEN = "rewritten"
    UNRECOGNIZED = "unrecognized"
    SKIPPED = "skipped"


class Pass(Protocol):
    """A tree-rewrite step.

    ``run`` mutates *document* in place and returns the change counters it
    produced.  ``must_precede`` names passes that read something this pass
    writes (or delete something this pass reads) and therefore have to be
    scheduled after it.
    """

    name: str
    priority: int
    description: str
    must_precede: tuple[str, ...]

    def run(self, document: Document, context: RewriteContext) -> dict[str, int]: ...


def rewrite(document: Document, visit: Callable[[Element, Parent], Element | None]) -> None:
    """Walk *document* in pre-order, letting *visit* replace elements.

    When *visit* returns an element, it takes the visited element's place and
    the walk continues into the replacement's children.
    """

    def _walk(element: Element, parent: Parent) -> None:
        replacement = visit(element, parent)
        if replacement is not None and replacement is not element:
            parent.replace_child(element, replacement)
            element = replacement
        for child in list(element.elements()):
            _walk(child, element)

    for root in document.roots():
        _walk(root, document)


class Tally:
    """Counter helper that remembers every classification a pass made."""

    def __init__(self) -> None:
        self.counters: Counter[str] = Counter()

    def count(self, key: str, amount: int = 1) -> None:
        self.counters[key] += amount

    def classify(self, verdict: Verdict, rewritten: str, unrecognized: str | None = None) -> None:
        if verdict is Verdict.REWRITTEN:
            self.counters[rewritten] += 1
        elif verdict is Verdict.UNRECOGNIZED and unrecognized:
            self.counters[unrecognized] += 1

    def result(self) -> dict[str, int]:
        return {k: v for k, v in self.counters.items() if v}
