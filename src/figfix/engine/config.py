"""Pipeline configuration: per-pass enable/priority settings and failure policy."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable


class ConfigError(Exception):
    """Raised when pipeline configuration cannot be read or has invalid values."""


@dataclass(frozen=True)
class PassSettings:
    enabled: bool = True
    priority: int | None = None  # None keeps the pass's built-in priority


@dataclass(frozen=True)
class PipelineConfig:
    """Which passes run, in what order, and whether a failing pass aborts the run.

    Precedence, lowest first: built-in pass defaults, the settings file,
    command-line overrides.
    """

    passes: dict[str, PassSettings] = field(default_factory=dict)
    continue_on_error: bool = False

    def settings_for(self, pass_name: str) -> PassSettings:
        return self.passes.get(pass_name, PassSettings())

    def with_overrides(
        self,
        disable: Iterable[str] = (),
        priorities: dict[str, int] | None = None,
        continue_on_error: bool | None = None,
    ) -> PipelineConfig:
        passes = dict(self.passes)
        for name in disable:
            passes[name] = replace(passes.get(name, PassSettings()), enabled=False)
        for name, priority in (priorities or {}).items():
            passes[name] = replace(passes.get(name, PassSettings()), priority=priority)
        return PipelineConfig(
            passes=passes,
            continue_on_error=self.continue_on_error if continue_on_error is None else continue_on_error,
        )


def _pass_settings(name: str, raw: object) -> PassSettings:
    if isinstance(raw, bool):
        return PassSettings(enabled=raw)
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings for pass {name!r} must be an object, got {type(raw).__name__}")
    enabled = raw.get("enabled", True)
    priority = raw.get("priority")
    if not isinstance(enabled, bool):
        raise ConfigError(f"'enabled' for pass {name!r} must be a boolean")
    if priority is not None and (isinstance(priority, bool) or not isinstance(priority, int)):
        raise ConfigError(f"'priority' for pass {name!r} must be an integer")
    return PassSettings(enabled=enabled, priority=priority)


def config_from_mapping(raw: dict[str, object]) -> PipelineConfig:
    """Build a config from the settings layout ``{"transforms": {...}, "continueOnError": bool}``."""
    transforms = raw.get("transforms", {})
    if not isinstance(transforms, dict):
        raise ConfigError("'transforms' must be an object")
    transforms = dict(transforms)
    continue_on_error = raw.get("continueOnError", transforms.pop("continueOnError", False))
    if not isinstance(continue_on_error, bool):
        raise ConfigError("'continueOnError' must be a boolean")
    passes = {name: _pass_settings(name, value) for name, value in transforms.items()}
    return PipelineConfig(passes=passes, continue_on_error=continue_on_error)


def load_config(path: Path | None) -> PipelineConfig:
    """Read a JSON settings file; ``None`` yields the defaults."""
    if path is None:
        return PipelineConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Cannot read settings file {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings file {path} must contain a JSON object")
    return config_from_mapping(raw)


def parse_priority_override(text: str) -> tuple[str, int]:
    """Parse a ``PASS=N`` command-line override."""
    name, sep, value = text.partition("=")
    name = name.strip()
    if not sep or not name:
        raise ConfigError(f"Priority override {text!r} must look like PASS=N")
    try:
        return name, int(value.strip())
    except ValueError:
        raise ConfigError(f"Priority override {text!r} has a non-integer priority") from None
