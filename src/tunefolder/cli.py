import logging
import sys
from pathlib import Path

import click

from .exceptions import ParseError, SourceError, UnsupportedSourceError
from .json_export import FolderJsonFormatter
from .linker import add_next_previous_slugs
from .parsers.utils import slugify
from .registry import get_parser


def _setup_logging(verbose: int) -> None:
    if verbose == 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s:%(name)s:%(message)s")


def _parse_field_letters(ctx: click.Context, param: click.Parameter, value: str) -> tuple[str, ...]:
    """Split "W,w" into ("W", "w"), rejecting anything but single letters."""
    letters = tuple(part.strip() for part in value.split(",") if part.strip())
    for letter in letters:
        if len(letter) != 1 or not letter.isascii() or not letter.isalpha():
            raise click.BadParameter(f"{letter!r} is not a single field letter")
    return letters


def _default_filename(name: str) -> str:
    return f"{slugify(name).lower() or 'folder'}.json"


@click.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-n", "--name", default=None,
              help="Folder name (default: derived from the source file name).")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: <name>.json)")
@click.option("--stdout", is_flag=True, default=False,
              help="Print to stdout instead of writing a file.")
@click.option("--per-tune-fields", default="W,w", show_default=True,
              callback=_parse_field_letters,
              help="Comma-separated field letters that never carry over to the next tune.")
@click.option("--no-links", is_flag=True, default=False,
              help="Skip adding nextSlug/previousSlug to each set.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v, -vv).")
def main(
    source: Path,
    name: str | None,
    output_path: str | None,
    stdout: bool,
    per_tune_fields: tuple[str, ...],
    no_links: bool,
    verbose: int,
) -> None:
    """Build a tune folder from an abc tune book or LaTeX outline.

    \b
    Supported sources:
      - .abc  one file holding every set
      - .tex  outline with \\section, \\subsection and \\abcinput lines
    """
    _setup_logging(verbose)

    # --- Resolve parser ---
    try:
        parser = get_parser(source)
    except UnsupportedSourceError as exc:
        click.echo(f"Error: {exc}", err=True)
        click.echo("Supported sources: .abc, .tex", err=True)
        sys.exit(1)

    # Only the abc parser has per-tune-only fields
    if hasattr(parser, "per_tune_fields"):
        parser.per_tune_fields = per_tune_fields

    # --- Parse ---
    try:
        folder = parser.parse(source, name)
    except SourceError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    except ParseError as exc:
        click.echo(f"Error: {source}: {exc}", err=True)
        sys.exit(1)

    if not no_links:
        folder = add_next_previous_slugs(folder)

    # --- Render ---
    text = FolderJsonFormatter().render(folder)

    # --- Output ---
    if stdout:
        click.echo(text, nl=False)
        return

    dest = Path(output_path) if output_path else Path(_default_filename(folder.name))
    dest.write_text(text, encoding="utf-8")
    click.echo(f"Written to {dest}")
