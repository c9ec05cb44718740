import logging
import sys
from pathlib import Path

import click

from .cache import ParseCache
from .exceptions import ChordSheetError, ParseError
from .registry import get_renderer, renderer_names
from .session import ChordSheetSession
from .validator import validate

_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        click.echo(f"Error: {path}: not valid UTF-8 ({exc.reason} at byte {exc.start})", err=True)
        sys.exit(1)


def _open(ctx: click.Context, path: Path) -> ChordSheetSession:
    """Open *path* through the shared cache, exiting with an error on parse failure."""
    try:
        return ChordSheetSession(_read(path), ctx.obj["cache"], prefer_flats=ctx.obj["flats"])
    except ParseError as exc:
        click.echo(f"Error: {path}: {exc}", err=True)
        sys.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.option("--flats", is_flag=True, default=False,
              help="Spell transposed chords with flats instead of sharps.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, flats: bool) -> None:
    """Inspect, validate and transpose ChordPro chord sheets."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["cache"] = ParseCache()
    ctx.obj["flats"] = flats


@main.command("validate")
@click.argument("path", type=_FILE)
def validate_command(path: Path) -> None:
    """Report structural problems in a chord sheet."""
    report = validate(_read(path))
    for error in report.errors:
        click.echo(f"error: {error}")
    for warning in report.warnings:
        click.echo(f"warning: {warning}")
    if not report.is_valid:
        sys.exit(1)
    if not report.warnings:
        click.echo("OK")


@main.command("info")
@click.argument("path", type=_FILE)
@click.pass_context
def info_command(ctx: click.Context, path: Path) -> None:
    """Show the metadata and detected key of a chord sheet."""
    session = _open(ctx, path)
    metadata = session.metadata
    rows = [
        ("Title", metadata.title),
        ("Artist", metadata.artist),
        ("Key", session.current_key),
        ("Tempo", metadata.tempo),
        ("Time", metadata.time_signature),
        ("Capo", metadata.capo),
        *sorted(metadata.extra.items()),
    ]
    for label, value in rows:
        if value:
            click.echo(f"{label}: {value}")
    click.echo(f"Lines: {len(session.song.lines)}")


@main.command("transpose")
@click.argument("path", type=_FILE)
@click.option("-s", "--semitones", default=0, show_default=True, type=int,
              help="Shift in semitones, -11 to 11.")
@click.option("--to", "target_key", default=None, metavar="KEY",
              help="Transpose to this key instead of by a fixed shift.")
@click.option("-f", "--format", "fmt", default="chordpro", show_default=True,
              type=click.Choice(renderer_names()), help="Output format.")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Write to PATH instead of stdout.")
@click.pass_context
def transpose_command(
    ctx: click.Context,
    path: Path,
    semitones: int,
    target_key: str | None,
    fmt: str,
    output_path: str | None,
) -> None:
    """Transpose a chord sheet and print (or write) the result."""
    session = _open(ctx, path)
    try:
        if target_key:
            session.transpose_to(target_key)
        else:
            session.set_level(semitones)
    except ChordSheetError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    text = session.render(get_renderer(fmt))

    if output_path is None:
        click.echo(text, nl=False)
        return

    dest = Path(output_path)
    dest.write_text(text, encoding="utf-8")
    click.echo(f"Written to {dest}")
