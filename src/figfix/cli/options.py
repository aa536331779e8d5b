"""Options shared by commands that build a pipeline configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import click

from figfix.engine.config import PipelineConfig, load_config, parse_priority_override


def config_options(func: Callable) -> Callable:
    """Attach --config / --disable / --priority / --continue-on-error to a command."""
    decorators = [
        click.option(
            "--config",
            "config_path",
            type=click.Path(exists=True, dir_okay=False),
            default=None,
            help="JSON settings file with a 'transforms' section",
        ),
        click.option("--disable", multiple=True, metavar="PASS", help="Disable a pass (repeatable)"),
        click.option(
            "--priority",
            "priorities",
            multiple=True,
            metavar="PASS=N",
            help="Override a pass priority (repeatable)",
        ),
        click.option(
            "--continue-on-error/--abort-on-error",
            default=None,
            help="Keep going when a pass fails (default: abort)",
        ),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def build_config(
    config_path: str | None,
    disable: tuple[str, ...],
    priorities: tuple[str, ...],
    continue_on_error: bool | None,
) -> PipelineConfig:
    """Settings file first, command-line overrides on top.  Raises ConfigError."""
    config = load_config(Path(config_path) if config_path else None)
    overrides = dict(parse_priority_override(p) for p in priorities)
    return config.with_overrides(disable=disable, priorities=overrides, continue_on_error=continue_on_error)
