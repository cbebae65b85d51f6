"""srcmodel CLI - srcmodel command."""

import click

from srcmodel import __version__
from srcmodel.cli.index import index_command
from srcmodel.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="srcmodel")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """srcmodel - Build a cross-file structural model of a Go source tree."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(index_command, name="index")


if __name__ == "__main__":
    cli()
