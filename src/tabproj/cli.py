"""Click CLI for tabproj: inspect the projection table of a parse configuration."""

from __future__ import annotations

import json
import logging
import sys

import click
from pydantic import ValidationError

from tabproj.collate import collate
from tabproj.config import ParseConfig, load_config
from tabproj.errors import ProjectionError
from tabproj.projection import ProjectionTable, build_projections, lookup, table_to_json


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    envvar="TABPROJ_LOG",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (default: WARNING, env: TABPROJ_LOG)",
)
def main(log_level: str) -> None:
    """tabproj: resolve tabular column headers to JSON document locations."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_table(config_path: str) -> ProjectionTable:
    try:
        config: ParseConfig = load_config(config_path)
    except ValidationError as err:
        click.echo(f"Invalid configuration {config_path}:\n{err}", err=True)
        sys.exit(1)
    try:
        return build_projections(config)
    except ProjectionError as err:
        click.echo(f"Error: {err}", err=True)
        sys.exit(1)


@main.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
def projections(config_path: str) -> None:
    """Print the resolved projection table as JSON."""
    table = _load_table(config_path)
    click.echo(json.dumps(table_to_json(table), indent=2, ensure_ascii=False))


@main.command("lookup")
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("headers", nargs=-1, required=True)
def lookup_cmd(config_path: str, headers: tuple[str, ...]) -> None:
    """Show where each column HEADER would be placed.

    Exits with status 1 if any header has no projection.

    Examples:

        tabproj lookup config.json "Bee Loc" locationa
    """
    table = _load_table(config_path)

    unmapped = 0
    for header in headers:
        info = lookup(table, header)
        if info is None:
            unmapped += 1
            click.echo(f"{header!r} -> {collate(header)!r}: (unmapped)")
            continue
        types = "unknown" if info.possible_types is None else ", ".join(info.possible_types.names())
        required = " (required)" if info.must_exist else ""
        click.echo(f"{header!r} -> {info.target_location}: {types}{required}")

    sys.exit(1 if unmapped else 0)


if __name__ == "__main__":
    main()
