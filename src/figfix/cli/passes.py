"""CLI command: figfix passes -- show the effective pass plan."""

from __future__ import annotations

import sys

import click

from figfix.cli.options import build_config, config_options
from figfix.engine import ConfigError, PassRegistry
from figfix.model.diagnostic import Severity, by_severity
from figfix.validation import validate


@click.command()
@config_options
def passes(
    config_path: str | None,
    disable: tuple[str, ...],
    priorities: tuple[str, ...],
    continue_on_error: bool | None,
) -> None:
    """List passes in execution order with their ordering constraints.

    Prints plan diagnostics and exits with code 1 if the plan is invalid.
    """
    try:
        config = build_config(config_path, disable, priorities, continue_on_error)
    except ConfigError as exc:
        click.echo(f"Config error: {exc}", err=True)
        sys.exit(1)

    plan = PassRegistry().plan(config)
    click.echo(f"On pass failure: {'continue' if config.continue_on_error else 'abort'}")
    click.echo()
    for entry in plan.entries:
        parts = [f"  {entry.priority:>4}  {entry.name:<20}"]
        parts.append("enabled " if entry.enabled else "disabled")
        if entry.must_precede:
            parts.append(f"before: {', '.join(entry.must_precede)}")
        click.echo("  ".join(parts))

    diagnostics = validate(plan)
    if diagnostics:
        click.echo()
        for diag in by_severity(diagnostics):
            click.echo(str(diag))
            if diag.fix:
                click.echo(f"    fix: {diag.fix}")
    if any(d.severity is Severity.ERROR for d in diagnostics):
        sys.exit(1)
