"""FastMCP server — thin wrapper exposing VideosRepository as MCP tools."""

from fastmcp import FastMCP

from devbytes.config import settings
from devbytes.ingestion.playlist import DecodeError, NetworkError
from devbytes.models import DevByteVideo
from devbytes.repository import AmbiguousVideoError, VideoNotFoundError, VideosRepository
from devbytes.storage.base import StorageError
from devbytes.storage.sqlite import get_database


mcp = FastMCP(
    name="devbytes",
    instructions=(
        "devbytes serves the DevBytes video playlist from a local offline cache. "
        "Use list_videos to browse the cache, get_video for details, and "
        "refresh_videos to pull the latest playlist from the network."
    ),
)

_repository: VideosRepository | None = None


def _get_repository() -> VideosRepository:
    """Lazy-initialise the repository over the shared on-disk cache.

    Raises:
        StorageError: If the data directory or database cannot be opened.
    """
    global _repository
    if _repository is None:
        try:
            settings.ensure_dirs()
        except OSError as e:
            raise StorageError(f"Could not create data directory {settings.data_dir}: {e}") from e
        _repository = VideosRepository(get_database())
    return _repository


async def refresh_videos() -> dict:
    """Fetch the latest playlist and update the offline cache.

    Videos that disappeared from the playlist stay cached.
    """
    try:
        repo = _get_repository()
    except StorageError as e:
        return {"error": str(e), "cached": 0}
    try:
        await repo.refresh()
    except (NetworkError, DecodeError, StorageError) as e:
        return {"error": str(e), "cached": len(repo.list_videos())}
    return {"status": "refreshed", "cached": len(repo.list_videos())}


def list_videos() -> list[dict]:
    """List all cached videos (title, url, updated, short description)."""
    return [_video_summary(v) for v in _get_repository().list_videos()]


def get_video(query: str) -> dict:
    """Get full details for a cached video.

    Args:
        query: Video URL, 1-based index from list_videos, or part of the title.
    """
    try:
        video = _get_repository().resolve(query)
    except (VideoNotFoundError, AmbiguousVideoError, StorageError) as e:
        return {"error": str(e)}
    return video.model_dump(mode="json")


mcp.tool(refresh_videos, annotations={"readOnlyHint": False, "idempotentHint": True})
mcp.tool(list_videos, annotations={"readOnlyHint": True})
mcp.tool(get_video, annotations={"readOnlyHint": True})


def _video_summary(video: DevByteVideo) -> dict:
    """Create a concise summary dict for tool responses (excludes full description)."""
    return {
        "title": video.title,
        "url": video.url,
        "updated": video.updated,
        "thumbnail": video.thumbnail,
        "short_description": video.short_description,
    }
