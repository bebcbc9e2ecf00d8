"""CLI interface — thin wrapper over VideosRepository and FastMCP server."""

import asyncio
import logging

import typer

from devbytes.config import settings
from devbytes.ingestion.playlist import DecodeError, NetworkError
from devbytes.models import DevByteVideo
from devbytes.repository import AmbiguousVideoError, VideoNotFoundError, VideosRepository
from devbytes.storage.base import StorageError
from devbytes.storage.sqlite import get_database
from devbytes.worker import RefreshWorker


app = typer.Typer(
    name="devbytes",
    help="Browse the DevBytes video playlist from a local offline cache.",
    no_args_is_help=True,
)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(asctime)s] <%(name)s> %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _get_repository() -> VideosRepository:
    """Create a repository over the shared on-disk cache."""
    try:
        settings.ensure_dirs()
        return VideosRepository(get_database())
    except OSError as e:
        typer.echo(f"❌ Could not create data directory {settings.data_dir}: {e}", err=True)
        raise typer.Exit(code=1)
    except StorageError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)


def _print_videos(videos: list[DevByteVideo]) -> None:
    for i, v in enumerate(videos, 1):
        typer.echo(f"  {i}. {v.updated:<25s}  {v.title}")


@app.command()
def refresh() -> None:
    """Fetch the playlist and update the offline cache."""
    repo = _get_repository()
    try:
        asyncio.run(repo.refresh())
    except (NetworkError, DecodeError, StorageError) as e:
        typer.echo(f"❌ Refresh failed: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"✅ Cache refreshed: {len(repo.list_videos())} video(s)")


@app.command(name="list")
def list_videos(
    refresh_first: bool = typer.Option(False, "--refresh", "-r", help="Refresh from the network before listing."),
) -> None:
    """List all cached videos."""
    repo = _get_repository()
    if refresh_first:
        try:
            asyncio.run(repo.refresh())
        except (NetworkError, DecodeError, StorageError) as e:
            if not repo.list_videos():
                typer.echo(f"❌ Refresh failed and the cache is empty: {e}", err=True)
                raise typer.Exit(code=1)
            typer.echo(f"⚠️  Refresh failed, showing cached videos: {e}", err=True)

    videos = repo.list_videos()
    if not videos:
        typer.echo("Cache is empty. Use 'devbytes refresh' to fetch the playlist.")
        return
    _print_videos(videos)


@app.command()
def info(query: str = typer.Argument(..., help="Video URL, index number, or title text.")) -> None:
    """Show full details for a cached video."""
    repo = _get_repository()
    try:
        video = repo.resolve(query)
    except VideoNotFoundError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)
    except AmbiguousVideoError as e:
        typer.echo(f"⚠️  {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Title:       {video.title}")
    typer.echo(f"URL:         {video.url}")
    typer.echo(f"Updated:     {video.updated}")
    typer.echo(f"Thumbnail:   {video.thumbnail}")
    typer.echo(f"\n{video.description}")


@app.command()
def watch(
    interval: float = typer.Option(settings.refresh_interval, "--interval", "-i", help="Seconds between refreshes."),
) -> None:
    """Keep the cache fresh in the foreground, printing every change."""
    repo = _get_repository()

    def show(videos: list[DevByteVideo]) -> None:
        typer.echo(f"📺 {len(videos)} cached video(s)")
        _print_videos(videos)

    async def _run() -> None:
        stop = asyncio.Event()
        with repo.videos.observe(show):
            await RefreshWorker(repo, interval=interval).run(stop)

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        typer.echo("Stopped.", err=True)


@app.command()
def serve(
    stdio: bool = typer.Option(False, "--stdio", help="Use stdio transport instead of HTTP."),
    host: str = typer.Option(settings.host, "--host", help="Host to bind to."),
    port: int = typer.Option(settings.port, "--port", help="Port to bind to."),
) -> None:
    """Start the devbytes MCP server."""
    from devbytes.server import mcp

    if stdio:
        typer.echo("Starting devbytes MCP server (stdio)...", err=True)
        mcp.run(transport="stdio")
    else:
        typer.echo(f"Starting devbytes MCP server on http://{host}:{port}/mcp")
        mcp.run(transport="streamable-http", host=host, port=port)
