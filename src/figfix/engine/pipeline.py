"""Pipeline runner: parse, apply passes in plan order, print, sweep, emit the stylesheet."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from pathlib import Path

from figfix.engine.config import PipelineConfig
from figfix.engine.registry import PassPlan, PassRegistry
from figfix.events import types as events
from figfix.events.bus import EventBus
from figfix.model.context import RewriteContext
from figfix.model.diagnostic import Diagnostic
from figfix.model.stats import Stats
from figfix.parser import ParseError, parse_markup, print_markup
from figfix.safety_net import SafetyNetResult, apply_safety_net
from figfix.stylesheet.emitter import emit_stylesheet
from figfix.validation import validate_or_raise

logger = logging.getLogger(__name__)

_REACT_IMPORT_RE = re.compile(r"""^\s*import\s+React\b.*?from\s+['"]react['"]""", re.MULTILINE)


class PassError(Exception):
    """A pass raised while the pipeline was configured to abort on failure."""

    def __init__(self, pass_name: str, cause: BaseException) -> None:
        self.pass_name = pass_name
        self.cause = cause
        super().__init__(f"Pass '{pass_name}' failed: {cause}")


@dataclass
class PipelineResult:
    """Everything one run produced.  Nothing is written to disk by :meth:`Pipeline.run`."""

    code: str
    stylesheet: str
    context: RewriteContext
    safety_net: SafetyNetResult
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def stats(self) -> Stats:
        return self.context.stats

    def module_source(self, stylesheet_name: str | None = None) -> str:
        """The rewritten code with React and stylesheet imports prepended when missing."""
        imports = []
        if not _REACT_IMPORT_RE.search(self.code):
            imports.append("import React from 'react';")
        if stylesheet_name and f"'./{stylesheet_name}'" not in self.code:
            imports.append(f"import './{stylesheet_name}';")
        if not imports:
            return self.code
        return "\n".join(imports) + "\n" + self.code

    def to_dict(self) -> dict[str, object]:
        """Counters and run metadata in the shape reporting scripts consume."""
        report = self.stats.to_dict()
        report.update(
            totals=self.stats.totals(),
            totalFixes=self.stats.changes(),
            customClassesGenerated=len(self.context.synthesized),
            safetyNet={"found": self.safety_net.found, "fixed": self.safety_net.fixed},
            sections=list(self.context.sections),
        )
        return report


class Pipeline:
    """Runs the enabled passes of a validated plan over one markup source at a time.

    The plan is validated once, on construction; an ordering violation raises
    :class:`~figfix.validation.ValidationError` before any input is read.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        *,
        registry: PassRegistry | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.config = config or PipelineConfig()
        self.registry = registry or PassRegistry()
        self.event_bus = event_bus or EventBus()
        self.plan: PassPlan = self.registry.plan(self.config)
        self.diagnostics = validate_or_raise(self.plan)
        for diagnostic in self.diagnostics:
            if diagnostic.is_warning:
                logger.warning("%s", diagnostic)

    def run(self, source: str, context: RewriteContext | None = None, *, name: str = "<input>") -> PipelineResult:
        """Rewrite *source*.

        *context* is reset first, so synthesized classes, fonts and the
        root-container flag never carry over from an earlier run.
        """
        context = context or RewriteContext()
        context.reset()
        enabled = self.plan.enabled()
        self.event_bus.emit(events.PipelineStarted(source=name, passes=tuple(e.name for e in enabled)))

        try:
            document = parse_markup(source)
        except ParseError as exc:
            logger.error("Cannot parse %s: %s", name, exc)
            self.event_bus.emit(events.PipelineFailed(source=name, error=str(exc)))
            raise

        for entry in enabled:
            self.event_bus.emit(events.PassStarted(pass_name=entry.name, priority=entry.priority))
            started = time.perf_counter()
            try:
                counters = entry.instance.run(document, context)
            except Exception as exc:
                context.stats.record_failure(entry.name, str(exc))
                continued = self.config.continue_on_error
                self.event_bus.emit(events.PassFailed(pass_name=entry.name, error=str(exc), continued=continued))
                if not continued:
                    logger.error("Pass %s failed on %s: %s", entry.name, name, exc)
                    self.event_bus.emit(events.PipelineFailed(source=name, error=str(exc)))
                    raise PassError(entry.name, exc) from exc
                # Partial mutations of the failed pass stay in the tree.
                logger.error("Pass %s failed on %s; continuing", entry.name, name, exc_info=True)
                continue
            elapsed_ms = (time.perf_counter() - started) * 1000
            context.stats.record(entry.name, counters, elapsed_ms)
            logger.debug("Pass %s finished in %.1f ms: %s", entry.name, elapsed_ms, counters)
            self.event_bus.emit(
                events.PassCompleted(pass_name=entry.name, counters=dict(counters), elapsed_ms=elapsed_ms)
            )

        net = apply_safety_net(print_markup(document), context.variables, context.synthesized)
        if net.found:
            self.event_bus.emit(events.SafetyNetApplied(found=net.found, fixed=net.fixed))

        stylesheet = emit_stylesheet(context.variables, context.synthesized, context.observed_fonts)
        self.event_bus.emit(events.PipelineCompleted(source=name, changes=context.stats.changes()))
        return PipelineResult(
            code=net.code,
            stylesheet=stylesheet,
            context=context,
            safety_net=net,
            diagnostics=list(self.diagnostics),
        )


def process_file(
    pipeline: Pipeline,
    input_path: Path,
    output_path: Path,
    context: RewriteContext | None = None,
) -> PipelineResult:
    """Rewrite *input_path* into *output_path* plus a sibling ``.css`` file.

    Both files are written only after the whole run succeeded.
    """
    context = context or RewriteContext(asset_dir=input_path.parent)
    if context.asset_dir is None:
        context.asset_dir = input_path.parent
    source = input_path.read_text(encoding="utf-8")
    result = pipeline.run(source, context, name=str(input_path))

    css_path = output_path.with_suffix(".css")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    css_path.write_text(result.stylesheet, encoding="utf-8")
    output_path.write_text(result.module_source(css_path.name), encoding="utf-8")
    logger.info("Wrote %s and %s", output_path, css_path)
    return result
