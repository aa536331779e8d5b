"""CLI command: figfix process -- rewrite a generated component and emit its stylesheet."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from figfix.chunks import find_chunks, process_chunks
from figfix.cli.options import build_config, config_options
from figfix.engine import ConfigError, PassError, Pipeline, process_file
from figfix.events import PassFailed, SafetyNetApplied
from figfix.model.context import RewriteContext
from figfix.model.variables import VariableFileError, VariableTable
from figfix.parser import ParseError
from figfix.validation import ValidationError


def _report_pass_failure(event: PassFailed) -> None:
    if event.continued:
        click.echo(f"Warning: pass {event.pass_name} failed, continuing: {event.error}", err=True)


def _report_safety_net(event: SafetyNetApplied) -> None:
    click.echo(f"Safety net: fixed {event.fixed} of {event.found} residual placeholder(s)", err=True)


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("output_file", type=click.Path(dir_okay=False))
@click.option(
    "--variables",
    "variables_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="variables.json from get_variable_defs (default: next to INPUT_FILE)",
)
@config_options
@click.option("--stats-json", type=click.Path(dir_okay=False), default=None, help="Write run statistics as JSON")
@click.option("--no-chunks", is_flag=True, help="Ignore a chunks/ directory next to INPUT_FILE")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def process(
    input_file: str,
    output_file: str,
    variables_path: str | None,
    config_path: str | None,
    disable: tuple[str, ...],
    priorities: tuple[str, ...],
    continue_on_error: bool | None,
    stats_json: str | None,
    no_chunks: bool,
    verbose: bool,
) -> None:
    """Rewrite INPUT_FILE into OUTPUT_FILE and a sibling .css stylesheet.

    Nothing is written when parsing or a pass fails (unless
    --continue-on-error is given for pass failures).
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    input_path = Path(input_file)
    output_path = Path(output_file)

    # Step 1: Configuration and variables
    try:
        config = build_config(config_path, disable, priorities, continue_on_error)
        variables = VariableTable.load(
            Path(variables_path) if variables_path else input_path.parent / "variables.json"
        )
        pipeline = Pipeline(config)
    except (ConfigError, VariableFileError) as exc:
        click.echo(f"Config error: {exc}", err=True)
        sys.exit(1)
    except ValidationError as exc:
        click.echo(f"Invalid pass plan: {exc}", err=True)
        sys.exit(1)

    pipeline.event_bus.subscribe(PassFailed, _report_pass_failure)
    pipeline.event_bus.subscribe(SafetyNetApplied, _report_safety_net)

    # Step 2: Run
    chunked = not no_chunks and bool(find_chunks(input_path))
    try:
        if chunked:
            run = process_chunks(pipeline, input_path, output_path, variables)
            report = run.to_dict()
            click.echo(f"Processed {len(run.chunks)} chunk(s) into {output_path}")
        else:
            result = process_file(
                pipeline,
                input_path,
                output_path,
                RewriteContext(variables=variables, asset_dir=input_path.parent),
            )
            report = result.to_dict()
            click.echo(f"Wrote {output_path} and {output_path.with_suffix('.css').name}")
    except ParseError as exc:
        click.echo(f"Parse error: {exc}", err=True)
        sys.exit(1)
    except PassError as exc:
        click.echo(f"Pipeline aborted: {exc}", err=True)
        sys.exit(1)

    # Step 3: Summary
    click.echo(f"Changes: {report['totalFixes']}  Custom classes: {report['customClassesGenerated']}")
    if stats_json:
        Path(stats_json).write_text(json.dumps(report, indent=2, sort_keys=True) + "\n", encoding="utf-8")
