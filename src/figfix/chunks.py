"""Chunk mode: a large design split into ``chunks/*.tsx`` is rewritten one chunk at a time.

Chunks run sequentially, each with a fresh context.  Their stylesheets are
merged into one companion stylesheet for a generated parent component that
renders every chunk inside the original wrapper element.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from figfix.engine.pipeline import Pipeline, PipelineResult
from figfix.model.context import RewriteContext
from figfix.model.markup import Attribute, Element
from figfix.model.variables import VariableTable
from figfix.parser import ParseError, parse_markup
from figfix.parser.printer import format_element
from figfix.stylesheet.emitter import render_stylesheet
from figfix.stylesheet.parser import merge_stylesheets, parse_stylesheet

logger = logging.getLogger(__name__)

CHUNKS_DIR = "chunks"
FIXED_DIR = "chunks-fixed"
WRAPPER_FILE = "parent-wrapper.tsx"

_COMPONENT_NAME_RE = re.compile(r"export\s+default\s+function\s+(\w+)")


def component_name(stem: str) -> str:
    """A valid PascalCase component name for a chunk file stem: ``01-hero-section`` -> ``Chunk01HeroSection``."""
    parts = re.split(r"[^A-Za-z0-9]+", stem)
    cleaned = "".join(part[:1].upper() + part[1:] for part in parts)
    if not cleaned or cleaned[0].isdigit():
        cleaned = "Chunk" + cleaned
    return cleaned


def find_chunks(input_path: Path) -> list[Path]:
    """Chunk sources next to *input_path*, sorted by file name; empty when not chunked."""
    chunks_dir = input_path.parent / CHUNKS_DIR
    if not chunks_dir.is_dir() or input_path.parent.name == CHUNKS_DIR:
        return []
    return sorted(chunks_dir.glob("*.tsx"))


@dataclass
class ChunkResult:
    name: str
    source: Path
    output: Path
    result: PipelineResult


@dataclass
class ChunkRun:
    chunks: list[ChunkResult] = field(default_factory=list)
    parent_source: str = ""
    stylesheet: str = ""
    custom_classes: int = 0

    def to_dict(self) -> dict[str, object]:
        totals: Counter[str] = Counter()
        for chunk in self.chunks:
            totals.update(chunk.result.stats.totals())
        return {
            "chunks": {c.name: c.result.to_dict() for c in self.chunks},
            "totals": dict(totals),
            "totalFixes": sum(c.result.stats.changes() for c in self.chunks),
            "customClassesGenerated": self.custom_classes,
            "safetyNet": {
                "found": sum(c.result.safety_net.found for c in self.chunks),
                "fixed": sum(c.result.safety_net.fixed for c in self.chunks),
            },
        }


def _wrapper_element(directory: Path) -> Element:
    """The first ``div`` of ``parent-wrapper.tsx`` without its children, or a full-width div."""
    path = directory / WRAPPER_FILE
    if path.exists():
        try:
            document = parse_markup(path.read_text(encoding="utf-8"))
        except ParseError as exc:
            logger.warning("Cannot parse %s, using a plain div: %s", path, exc)
        else:
            for element in document.iter_elements():
                if element.tag == "div":
                    return Element(tag="div", attributes=list(element.attributes))
            logger.warning("No wrapper div in %s, using a plain div", path)
    return Element(tag="div", attributes=[Attribute("className", "w-full")])


def parent_component(name: str, chunk_names: list[str], wrapper: Element, stylesheet_name: str) -> str:
    wrapper.children = [Element(tag=chunk) for chunk in chunk_names]
    imports = [
        "import React from 'react';",
        *(f"import {chunk} from './{FIXED_DIR}/{chunk}';" for chunk in chunk_names),
        f"import './{stylesheet_name}';",
    ]
    return (
        "\n".join(imports)
        + f"\n\nexport default function {name}() {{\n  return (\n    "
        + format_element(wrapper, "    ")
        + "\n  );\n}\n"
    )


def process_chunks(
    pipeline: Pipeline,
    input_path: Path,
    output_path: Path,
    variables: VariableTable | None = None,
) -> ChunkRun:
    """Rewrite every chunk, then write the parent component and the merged stylesheet.

    Any chunk failure propagates before the parent or stylesheet is written.
    """
    sources = find_chunks(input_path)
    fixed_dir = output_path.parent / FIXED_DIR
    run = ChunkRun()
    for source in sources:
        name = component_name(source.stem)
        context = RewriteContext(variables=variables, asset_dir=source.parent)
        logger.info("Processing chunk %s", source.name)
        result = pipeline.run(source.read_text(encoding="utf-8"), context, name=str(source))
        run.chunks.append(ChunkResult(name=name, source=source, output=fixed_dir / f"{name}.tsx", result=result))

    merged = merge_stylesheets([parse_stylesheet(c.result.stylesheet) for c in run.chunks])
    run.custom_classes = len(merged.rules)
    run.stylesheet = render_stylesheet(
        merged,
        header=f"/* Auto-generated design tokens from Figma (consolidated from {len(run.chunks)} chunks) */",
    )

    match = _COMPONENT_NAME_RE.search(input_path.read_text(encoding="utf-8"))
    css_path = output_path.with_suffix(".css")
    run.parent_source = parent_component(
        match.group(1) if match else "Component",
        [c.name for c in run.chunks],
        _wrapper_element(input_path.parent),
        css_path.name,
    )

    fixed_dir.mkdir(parents=True, exist_ok=True)
    for chunk in run.chunks:
        # Chunks share the consolidated stylesheet imported by the parent.
        chunk.output.write_text(chunk.result.module_source(None), encoding="utf-8")
    css_path.write_text(run.stylesheet, encoding="utf-8")
    output_path.write_text(run.parent_source, encoding="utf-8")
    return run
