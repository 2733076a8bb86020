"""CLI entry point for the Lightroom ingestion client."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .client import LightroomClient
from .config import Settings, get_settings
from .errors import LightroomError, MissingTokenError
from .logging import configure_logging

app = typer.Typer(
    name="lr-ingest",
    help="Upload images to Lightroom and manage integration projects",
    add_completion=False,
)

console = Console()

T = TypeVar("T")

TOKEN_OPTION = typer.Option(None, "--token", "-t", help="User access token (defaults to LR_ACCESS_TOKEN)")
CATALOG_OPTION = typer.Option(None, "--catalog", "-c", help="Catalog id (defaults to the user's catalog)")


def build_client(settings: Settings) -> LightroomClient:
    return LightroomClient(settings)


def _token(token: Optional[str], settings: Settings) -> str:
    resolved = token or settings.access_token
    if not resolved:
        raise MissingTokenError("authentication failed")
    return resolved


async def _catalog_id(lr: LightroomClient, token: str, catalog: Optional[str]) -> str:
    if catalog:
        return catalog
    return (await lr.get_catalog(token))["id"]


def _run(work: Callable[[LightroomClient, Settings], Awaitable[T]]) -> T:
    settings = get_settings()

    async def runner() -> T:
        async with build_client(settings) as lr:
            return await work(lr, settings)

    try:
        return asyncio.run(runner())
    except LightroomError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"lr-ingest version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose logging",
    ),
) -> None:
    """Upload images to Lightroom and manage integration projects."""
    configure_logging("DEBUG" if verbose else get_settings().log_level)


@app.command()
def health() -> None:
    """Check whether the Lightroom services are up."""

    async def work(lr: LightroomClient, settings: Settings) -> str:
        return await lr.get_health()

    console.print(_run(work))


@app.command()
def account(token: Optional[str] = TOKEN_OPTION) -> None:
    """Show the account of the token's user."""

    async def work(lr: LightroomClient, settings: Settings) -> Any:
        return await lr.get_account(_token(token, settings))

    console.print_json(data=_run(work))


@app.command()
def catalog(token: Optional[str] = TOKEN_OPTION) -> None:
    """Show the user's catalog."""

    async def work(lr: LightroomClient, settings: Settings) -> Any:
        return await lr.get_catalog(_token(token, settings))

    console.print_json(data=_run(work))


@app.command()
def projects(token: Optional[str] = TOKEN_OPTION, catalog: Optional[str] = CATALOG_OPTION) -> None:
    """List the project albums owned by this integration."""

    async def work(lr: LightroomClient, settings: Settings) -> Any:
        user_token = _token(token, settings)
        return await lr.get_projects(user_token, await _catalog_id(lr, user_token, catalog))

    resources = _run(work)["resources"]
    if not resources:
        console.print("[yellow]No projects found[/yellow]")
        return

    table = Table(title="Projects")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Created", style="dim")
    for resource in resources:
        payload = resource.get("payload", {})
        table.add_row(resource.get("id", ""), payload.get("name", ""), payload.get("userCreated", ""))
    console.print(table)


@app.command("create-project")
def create_project(token: Optional[str] = TOKEN_OPTION, catalog: Optional[str] = CATALOG_OPTION) -> None:
    """Create a new project album owned by this integration."""

    async def work(lr: LightroomClient, settings: Settings) -> str:
        user_token = _token(token, settings)
        return await lr.create_project(user_token, await _catalog_id(lr, user_token, catalog))

    console.print(f"[green]✓[/green] {_run(work)}")


@app.command()
def upload(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Image file to upload"),
    token: Optional[str] = TOKEN_OPTION,
    catalog: Optional[str] = CATALOG_OPTION,
    imported_by: Optional[str] = typer.Option(
        None,
        "--imported-by",
        help="Importing account id (defaults to the token's account)",
    ),
    add_to_project: bool = typer.Option(
        False,
        "--project/--no-project",
        help="Attach the new asset to the first project album",
    ),
) -> None:
    """Upload an image as a new asset."""
    data = file.read_bytes()

    async def work(lr: LightroomClient, settings: Settings) -> str:
        user_token = _token(token, settings)
        catalog_id = await _catalog_id(lr, user_token, catalog)
        importer = imported_by or (await lr.get_account(user_token))["id"]
        if add_to_project:
            return await lr.upload_image_and_add_to_first_project(user_token, importer, catalog_id, file.name, data)
        return await lr.upload_image(user_token, importer, catalog_id, file.name, data)

    console.print(f"[green]✓[/green] Uploaded asset {_run(work)}")


@app.command("first-asset")
def first_asset(
    album: str = typer.Argument(..., help="Album id"),
    token: Optional[str] = TOKEN_OPTION,
    catalog: Optional[str] = CATALOG_OPTION,
) -> None:
    """Show the first asset of an album."""

    async def work(lr: LightroomClient, settings: Settings) -> Any:
        user_token = _token(token, settings)
        return await lr.get_first_album_asset(user_token, await _catalog_id(lr, user_token, catalog), album)

    asset = _run(work)
    if asset is None:
        console.print("[yellow]Album is empty[/yellow]")
        return
    console.print_json(data=asset)


if __name__ == "__main__":
    app()
