"""Asset resolution for markup that references SVG files by import binding."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from figfix.model.markup import Document

logger = logging.getLogger(__name__)

# import imgLogo from "./assets/logo.svg";
_IMPORT_RE = re.compile(r"""import\s+(?P<name>[A-Za-z_$][\w$]*)\s+from\s+["'](?P<path>[^"']+)["']""")
# const imgLogo = "http://localhost:3845/assets/abc123.svg";
_CONST_RE = re.compile(r"""const\s+(?P<name>[A-Za-z_$][\w$]*)\s*=\s*["'](?P<path>[^"']+)["']""")

_SVG_OPEN_RE = re.compile(r"<svg\b(?P<attrs>[^>]*)>", re.DOTALL)
_PATH_RE = re.compile(r"<path\b(?P<attrs>[^>]*?)/?>", re.DOTALL)
_ATTR_RE = re.compile(r"""(?P<name>[\w:-]+)\s*=\s*"(?P<value>[^"]*)\"""")


@dataclass(frozen=True)
class SvgAsset:
    """The parts of an SVG file needed to inline it."""

    view_box: str | None
    width: str | None
    height: str | None
    paths: list[dict[str, str]] = field(default_factory=list)


def import_bindings(document: Document) -> dict[str, str]:
    """Map identifiers bound to asset paths in the module's code segments."""
    bindings: dict[str, str] = {}
    for code in document.code():
        for regex in (_IMPORT_RE, _CONST_RE):
            for match in regex.finditer(code.source):
                bindings.setdefault(match.group("name"), match.group("path"))
    return bindings


def parse_attributes(source: str) -> dict[str, str]:
    return {m.group("name"): m.group("value") for m in _ATTR_RE.finditer(source)}


def parse_svg(content: str) -> SvgAsset:
    opening = _SVG_OPEN_RE.search(content)
    root = parse_attributes(opening.group("attrs")) if opening else {}
    paths = [parse_attributes(m.group("attrs")) for m in _PATH_RE.finditer(content)]
    return SvgAsset(
        view_box=root.get("viewBox"),
        width=root.get("width"),
        height=root.get("height"),
        paths=[p for p in paths if p.get("d")],
    )


class AssetResolver:
    """Resolves import paths and dev-server URLs against an asset directory."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = base_dir

    def resolve(self, reference: str) -> Path:
        if reference.startswith(("http://", "https://")):
            # Served assets are saved next to the component under their file name.
            name = Path(urlparse(reference).path).name
            return self.base_dir / name
        return (self.base_dir / reference).resolve()

    def read_svg(self, reference: str) -> SvgAsset | None:
        path = self.resolve(reference)
        if path.suffix.lower() != ".svg":
            return None
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read SVG asset %s: %s", path, exc)
            return None
        return parse_svg(content)
