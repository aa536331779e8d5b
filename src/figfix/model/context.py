"""Per-run rewrite context shared by every pass."""

from __future__ import annotations

from pathlib import Path

from figfix.model.stats import Stats
from figfix.model.variables import VariableTable
from figfix.stylesheet.model import SynthesizedClassTable


class RewriteContext:
    """Mutable state carried through one pipeline invocation.

    Owned by the pipeline run and passed explicitly into every pass; it is
    reset at the start of each run so synthesized classes, observed fonts and
    the root-container flag never leak between unrelated files.
    """

    def __init__(
        self,
        variables: VariableTable | None = None,
        asset_dir: Path | None = None,
    ) -> None:
        self.variables = variables or VariableTable()
        self.asset_dir = asset_dir
        self.synthesized = SynthesizedClassTable()
        self.stats = Stats()
        self.fonts: dict[tuple[str, int], None] = {}
        self.sections: list[str] = []
        self.root_container_processed = False

    # --- fonts ----------------------------------------------------------------

    def observe_font(self, family: str, weight: int) -> None:
        """Record a (family, weight) pair seen by font detection, in first-seen order."""
        self.fonts.setdefault((family, weight), None)

    @property
    def observed_fonts(self) -> list[tuple[str, int]]:
        return list(self.fonts)

    # --- lifecycle ------------------------------------------------------------

    def reset(self) -> None:
        """Clear everything accumulated by a previous run; inputs are kept."""
        self.synthesized.clear()
        self.stats = Stats()
        self.fonts = {}
        self.sections = []
        self.root_container_processed = False

    def __repr__(self) -> str:
        return (
            f"RewriteContext(variables={len(self.variables)}, "
            f"synthesized={len(self.synthesized)}, fonts={len(self.fonts)})"
        )
