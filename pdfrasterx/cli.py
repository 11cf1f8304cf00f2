"""
Command-line interface for pdfrasterx.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeRemainingColumn
from rich.table import Table

from . import __version__
from .config import DEFAULT_QUALITY, DEFAULT_SCALE, DEFAULT_STITCH_QUALITY, ExportSettings, RenderConfig
from .core.utils import is_pdf_name, resolve_path
from .estimate import format_size
from .exceptions import (
    AuthenticationRejectedError,
    AuthenticationRequiredError,
    PdfRasterError,
)
from .selection import parse_page_selection
from .session import PipelineSession
from .types import ExportKind, ExportResult

console = Console()

MAX_PASSWORD_ATTEMPTS = 3


def persist_result(result: ExportResult, output_dir: str | Path) -> Path:
    """Write ``result`` into ``output_dir`` under its suggested filename."""

    directory = resolve_path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    destination = directory / result.filename
    destination.write_bytes(result.data)
    return destination


def _read_source(input_pdf: str) -> bytes:
    if not is_pdf_name(input_pdf):
        raise click.BadParameter(f"File does not have .pdf extension: {input_pdf}")
    return Path(input_pdf).read_bytes()


def _open_session(session: PipelineSession, input_pdf: str, password: str | None) -> None:
    """Load ``input_pdf``, prompting for a password while the source stays locked."""

    data = _read_source(input_pdf)
    name = os.path.basename(input_pdf)
    attempts = 0
    while True:
        try:
            session.load(data, password, name=name)
            return
        except AuthenticationRequiredError as exc:
            attempts += 1
            if attempts > MAX_PASSWORD_ATTEMPTS:
                raise
            if isinstance(exc, AuthenticationRejectedError):
                console.print(f"[bold yellow]![/bold yellow] {exc.message}")
            password = click.prompt("Password", hide_input=True)


def _rasterize(session: PipelineSession, config: RenderConfig) -> None:
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeRemainingColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Rendering pages", total=session.total_pages)

        def update_progress(current: int, total: int) -> None:
            progress.update(task, completed=current, total=total)

        generation = session.rasterize(config, progress=update_progress)

    if generation.skipped:
        skipped = ", ".join(str(page_id) for page_id in generation.skipped)
        console.print(f"[bold yellow]![/bold yellow] Skipped pages that failed to render: {skipped}")


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    pdfrasterx - Render PDF pages to images and export a selection of them.
    """


@cli.command(name="info")
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False))
@click.option("--password", default=None, help="Password of a protected PDF")
def show_info(input_pdf, password):
    """
    Display page count and protection state of a PDF.

    Example:

        pdfrasterx info input.pdf
    """
    session = PipelineSession()
    try:
        _open_session(session, input_pdf, password)
        source = session.source
        table = Table(title="PDF Information", show_header=False)
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("File", source.name)
        table.add_row("Pages", str(source.total_pages))
        table.add_row("Size", format_size(source.handle.file_size))
        table.add_row("Protected", "yes" if source.encrypted else "no")
        console.print(table)
    except (PdfRasterError, click.BadParameter) as exc:
        console.print(f"[bold red]✗ Error:[/bold red] {exc}")
        sys.exit(1)
    finally:
        session.reset()


@cli.command(name="export")
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--kind",
    "-k",
    type=click.Choice([kind.value for kind in ExportKind]),
    default=ExportKind.ARCHIVE.value,
    show_default=True,
    help="Export artifact to produce",
)
@click.option("--pages", "-p", default=None, help='Pages to export, e.g. "1-3, 5" (default: all)')
@click.option("--scale", default=DEFAULT_SCALE, show_default=True, type=float, help="Render scale (0.5-3.0)")
@click.option("--quality", default=DEFAULT_QUALITY, show_default=True, type=float, help="JPEG quality (0.1-1.0)")
@click.option(
    "--stitch-quality",
    default=DEFAULT_STITCH_QUALITY,
    show_default=True,
    type=float,
    help="JPEG quality of the stitched image",
)
@click.option("--password", default=None, help="Password of a protected PDF")
@click.option("--output-password", default=None, help="Encrypt the exported PDF with this password")
@click.option("--output-dir", "-o", default="./output", type=click.Path(file_okay=False), help="Output directory")
def export(input_pdf, kind, pages, scale, quality, stitch_quality, password, output_password, output_dir):
    """
    Rasterize a PDF and export the selected pages.

    Examples:

        pdfrasterx export input.pdf --kind archive

        pdfrasterx export input.pdf -k stitch -p "1-3, 5"

        pdfrasterx export input.pdf -k document --output-password secret
    """
    try:
        render_config = RenderConfig(scale=scale, quality=quality)
        settings = ExportSettings(stitch_quality=stitch_quality)
        session = PipelineSession(render_config=render_config, export_settings=settings)
        _open_session(session, input_pdf, password)

        console.print(f"\n[bold cyan]Rendering {session.total_pages} pages...[/bold cyan]")
        _rasterize(session, render_config)

        session.select_all()
        if pages:
            if not parse_page_selection(pages, session.total_pages):
                console.print(
                    f"[bold yellow]![/bold yellow] No valid pages in \"{escape(pages)}\", exporting all pages"
                )
            session.apply_range(pages)
        console.print(
            f"Selected {len(session.selection)} of {session.total_pages} pages "
            f"(~{session.estimate()})"
        )

        result = session.export(kind, output_password=output_password)
        if result is None:
            console.print("[bold yellow]![/bold yellow] Nothing selected, no file written")
            return
        destination = persist_result(result, output_dir)
        console.print(f"\n[bold green]✓ Wrote {destination.name}[/bold green] ({format_size(result.size)})")
        console.print(f"[dim]Output directory: {destination.parent}[/dim]")
    except (PdfRasterError, click.BadParameter) as exc:
        console.print(f"\n[bold red]✗ Error:[/bold red] {exc}")
        sys.exit(1)


@cli.command(name="page")
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False))
@click.argument("page_id", type=int)
@click.option("--scale", default=DEFAULT_SCALE, show_default=True, type=float, help="Render scale (0.5-3.0)")
@click.option("--quality", default=DEFAULT_QUALITY, show_default=True, type=float, help="JPEG quality (0.1-1.0)")
@click.option("--password", default=None, help="Password of a protected PDF")
@click.option("--output-dir", "-o", default="./output", type=click.Path(file_okay=False), help="Output directory")
def export_page(input_pdf, page_id, scale, quality, password, output_dir):
    """
    Render a PDF and save a single page as JPEG.

    Example:

        pdfrasterx page input.pdf 3
    """
    try:
        render_config = RenderConfig(scale=scale, quality=quality)
        session = PipelineSession(render_config=render_config)
        _open_session(session, input_pdf, password)
        _rasterize(session, render_config)
        destination = persist_result(session.export_page(page_id), output_dir)
        console.print(f"\n[bold green]✓ Wrote {destination.name}[/bold green]")
    except (PdfRasterError, click.BadParameter) as exc:
        console.print(f"\n[bold red]✗ Error:[/bold red] {exc}")
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    cli()
