"""Typer-based CLI entry point."""

from __future__ import annotations

import logging
from functools import wraps
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from .appctx import GalleryContext
from .application.use_cases import AdmitAssetsRequest, DeleteAssetRequest, RotateAssetRequest
from .domain.models import CandidateFile, RotationDirection
from .errors import AssetNotFoundError, PhotoShelfError
from .utils.logging import configure_logging

app = typer.Typer(help="Keep a small shelf of PNG and JPEG images")
console = Console()
err_console = Console(stderr=True)


class _State:
    storage: Optional[Path] = None
    metadata_only: bool = False


_state = _State()


def _context() -> GalleryContext:
    payload_mode = "metadata" if _state.metadata_only else "base64"
    return GalleryContext(storage_path=_state.storage, payload_mode=payload_mode).load()


def _handle_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except AssetNotFoundError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except PhotoShelfError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    return f"{size / 1024:.1f} KB"


@app.callback()
def main(
    storage: Optional[Path] = typer.Option(
        None, "--storage", help="Storage file to use instead of the per-user default."
    ),
    metadata_only: bool = typer.Option(
        False, "--metadata-only", help="Persist descriptors without image bytes."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
) -> None:
    configure_logging(logging.DEBUG if verbose else logging.WARNING)
    _state.storage = storage
    _state.metadata_only = metadata_only


@app.command("list")
@_handle_errors
def list_assets() -> None:
    """Show the images on the shelf in display order."""

    ctx = _context()
    assets = ctx.store.list()
    if not assets:
        console.print("[dim]The shelf is empty.[/dim]")
        return
    table = Table(title=f"{len(assets)} of {ctx.store.capacity} images")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Size", justify="right")
    table.add_column("Dimensions", justify="right")
    for index, asset in enumerate(assets):
        dims = f"{asset.width}×{asset.height}" if asset.dimensions else "?"
        name = asset.name if asset.has_payload else f"{asset.name} [dim](no data)[/dim]"
        table.add_row(str(index), name, asset.mime_type, _format_size(asset.size_bytes), dims)
    console.print(table)


@app.command()
@_handle_errors
def add(files: List[Path] = typer.Argument(..., help="Image files to add.")) -> None:
    """Add images; the whole batch is refused if it would overflow the shelf."""

    ctx = _context()
    candidates = []
    for path in files:
        try:
            candidates.append(CandidateFile.from_path(path))
        except OSError as exc:
            err_console.print(f"[yellow]Skipping {path}: {exc}[/yellow]")
            candidates.append(CandidateFile(name=path.name, mime_type="", size_bytes=0, data=b""))

    response = ctx.admit.execute(AdmitAssetsRequest(candidates=candidates))
    for message in filter(None, (response.capacity_error, response.format_error)):
        err_console.print(f"[red]{message}[/red]")
    if not response.success:
        raise typer.Exit(1)
    console.print(f"[green]{response.message}[/green]")


@app.command()
@_handle_errors
def rotate(
    index: int = typer.Argument(..., help="Position of the image, starting at 0."),
    direction: RotationDirection = typer.Argument(..., help="left or right"),
) -> None:
    """Rotate an image a quarter turn."""

    ctx = _context()
    response = ctx.rotate.execute(RotateAssetRequest(index=index, direction=direction))
    if not response.success:
        err_console.print(f"[red]{response.error}[/red]")
        raise typer.Exit(1)
    asset = response.asset
    console.print(f"[green]{response.message}[/green] {asset.name} is now {asset.width}×{asset.height}")


@app.command()
@_handle_errors
def delete(index: int = typer.Argument(..., help="Position of the image, starting at 0.")) -> None:
    """Remove an image from the shelf."""

    ctx = _context()
    response = ctx.delete.execute(DeleteAssetRequest(index=index))
    if not response.success:
        raise AssetNotFoundError(response.error or f"No asset at index {index}")
    console.print(f"{response.message} ({response.asset.name})")


@app.command()
@_handle_errors
def export(
    index: int = typer.Argument(..., help="Position of the image, starting at 0."),
    destination: Path = typer.Argument(..., help="File or directory to write to."),
) -> None:
    """Write an image's bytes back to disk."""

    ctx = _context()
    asset = ctx.store.get(index)
    if not asset.has_payload:
        err_console.print(f"[red]{asset.name} was stored without image data.[/red]")
        raise typer.Exit(1)
    target = destination / asset.name if destination.is_dir() else destination
    try:
        target.write_bytes(asset.data)
    except OSError as exc:
        typer.echo(f"Error: cannot write {target}: {exc}", err=True)
        raise typer.Exit(1) from exc
    console.print(f"Wrote {target}")


if __name__ == "__main__":
    app()
