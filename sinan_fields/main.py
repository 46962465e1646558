from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from . import config
from .config import load_style
from .errors import InvalidInput, RenderFailure
from .pipeline.demo import demo_form
from .pipeline.ingest import load_form
from .pipeline.run import build_form

app = typer.Typer(help="Render form-style surveillance fields to PDF")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _run(form, out: Optional[Path], style_path: Optional[Path]) -> None:
    try:
        style = load_style(style_path)
        path = build_form(form, out=out, style=style)
    except (InvalidInput, RenderFailure, OSError) as exc:
        typer.echo(f"FAILED: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Written: {path}")


@app.command()
def build(
    form_path: Path = typer.Argument(..., help="JSON form definition"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output PDF path"),
    out_dir: Optional[Path] = typer.Option(None, "--out-dir", help="Output directory"),
    style: Optional[Path] = typer.Option(None, "--style", help="JSON style overrides"),
    verbose: bool = typer.Option(False, "--verbose", help="Debug logging"),
) -> None:
    _setup_logging(verbose)
    if out_dir:
        config.set_out_dir(out_dir)
    try:
        form = load_form(form_path)
    except (InvalidInput, OSError) as exc:
        typer.echo(f"FAILED: {exc}", err=True)
        raise typer.Exit(code=1)
    _run(form, out, style)


@app.command()
def demo(
    out: Optional[Path] = typer.Option(None, "--out", help="Output PDF path"),
    out_dir: Optional[Path] = typer.Option(None, "--out-dir", help="Output directory"),
    style: Optional[Path] = typer.Option(None, "--style", help="JSON style overrides"),
    verbose: bool = typer.Option(False, "--verbose", help="Debug logging"),
) -> None:
    _setup_logging(verbose)
    if out_dir:
        config.set_out_dir(out_dir)
    _run(demo_form(), out, style)


if __name__ == "__main__":
    app()
