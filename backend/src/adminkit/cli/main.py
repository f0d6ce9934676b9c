"""AdminKit CLI entry point."""

import logging
from pathlib import Path

import click


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level.",
)
@click.option(
    "--metadata-path",
    default=None,
    envvar="ADMINKIT_METADATA_PATH",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory containing entities/*.yaml.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str, metadata_path: Path | None):
    """AdminKit - CRUD admin scaffolding CLI."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["metadata_path"] = metadata_path


# Register subcommand groups
from adminkit.cli.entities_cmd import entities  # noqa: E402

cli.add_command(entities)
