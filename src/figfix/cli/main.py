"""figfix CLI entry point: Click group with subcommands."""

import click

from figfix import __version__


@click.group()
@click.version_option(version=__version__, prog_name="figfix")
def cli() -> None:
    """figfix - rewrite pipeline for Figma MCP generated React/Tailwind markup."""


# Import and register subcommands
from figfix.cli.process import process  # noqa: E402
from figfix.cli.passes import passes  # noqa: E402

cli.add_command(process)
cli.add_command(passes)
