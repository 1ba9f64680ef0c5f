"""Click CLI: detect circular dependencies in a project."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

import click

from circular_scan.config import load_options, parse_alias_pairs
from circular_scan.errors import ScanError
from circular_scan.models import Cycle, DEFAULT_IGNORE
from circular_scan.pipeline import run_detect


def colorize(filename: str) -> str:
    if re.search(r"\.(jsx?|[mc]js)$", filename):
        color = "yellow"
    elif re.search(r"\.tsx?$", filename):
        color = "blue"
    elif filename.endswith(".vue"):
        color = "green"
    else:
        color = "bright_black"
    return click.style(filename, fg=color)


def print_circles(cycles: list[Cycle]) -> None:
    click.echo()
    for i, items in enumerate(cycles, start=1):
        click.echo(click.style(f"Circle.{i} - {len(items)} files", underline=True))
        for item in items:
            click.echo(f"→ {colorize(item)}")
    click.echo()


def _setup_logging(verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(message)s")


@click.command()
@click.version_option(version="0.1.0")
@click.argument("path", type=click.Path(file_okay=False, path_type=Path), default=".")
@click.option("--filter", "filter_", metavar="PATTERN", help="Glob pattern to filter output circles.")
@click.option("--alias", "aliases", multiple=True, metavar="FROM:TO",
              help="Path alias, follows `<from>:<to>` convention. Default: @:src")
@click.option("--absolute", is_flag=True, help="Print absolute paths instead.")
@click.option("-i", "--ignore", multiple=True, metavar="PATTERN",
              help=f"Glob patterns to exclude matches. {DEFAULT_IGNORE} is always excluded.")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path),
              help="Write the circles to a JSON file.")
@click.option("-t", "--throw", "throw", is_flag=True, help="Exit with code 1 when circles are found.")
@click.option("-j", "--jobs", type=click.IntRange(min=1), help="Number of worker processes.")
@click.option("-v", "--verbose", count=True, help="Log debug details.")
@click.option("-q", "--quiet", is_flag=True, help="Only log warnings and errors.")
def cli(
    path: Path,
    filter_: str | None,
    aliases: tuple[str, ...],
    absolute: bool,
    ignore: tuple[str, ...],
    output: Path | None,
    throw: bool,
    jobs: int | None,
    verbose: int,
    quiet: bool,
):
    """Detect circular dependencies among the files under PATH."""
    _setup_logging(verbose, quiet)

    def progress(name: str, completed: int, total: int):
        if not quiet:
            click.echo(f"\r  {completed}/{total} - {name}\x1b[K", nl=(completed == total), err=True)

    try:
        options = load_options(
            path,
            ignore=ignore,
            alias=parse_alias_pairs(aliases),
            absolute=absolute,
            filter=filter_,
            max_workers=jobs,
        )
        result = run_detect(options, progress=progress)
    except ScanError as e:
        raise click.ClickException(str(e))

    cycles = result.cycles
    if not cycles:
        click.echo(click.style("No circles were found.", fg="green"))
        return

    if output:
        output.write_text(json.dumps(cycles, indent=2), encoding="utf-8")
        click.echo(f"Output has been redirected to {click.style(str(output), fg='cyan', underline=True)}")
    else:
        print_circles(cycles)

    if throw:
        click.echo(click.style("Command failed with exit code 1", fg="red"), err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
