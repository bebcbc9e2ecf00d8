"""Videos repository: keeps the offline cache in sync with the playlist server."""

import asyncio
import logging

from devbytes.ingestion.playlist import DevByteNetwork, PlaylistSource
from devbytes.mappers import as_database_model, as_domain_model
from devbytes.models import DevByteVideo
from devbytes.storage.base import VideoStore
from devbytes.storage.live import LiveData

logger = logging.getLogger(__name__)


class VideoNotFoundError(Exception):
    """Raised when a requested video is not in the cache."""


class AmbiguousVideoError(Exception):
    """Raised when a query matches multiple cached videos."""


class VideosRepository:
    """Single entry point for reading and refreshing cached videos.

    The repository holds no state of its own. ``videos`` is a live view of
    the store mapped to domain objects, and ``refresh()`` is the only way
    new data enters the store. Both the CLI and MCP server are thin
    wrappers over this class.
    """

    def __init__(self, store: VideoStore, source: PlaylistSource | None = None) -> None:
        self._store = store
        self._source = source or DevByteNetwork()
        self.videos: LiveData[list[DevByteVideo]] = self.observe_domain_videos()

    def observe_domain_videos(self) -> LiveData[list[DevByteVideo]]:
        """Live view of the cached videos as domain objects.

        Emits once for every store emission, mapping afresh each time.
        """
        return self._store.observe_all().map(as_domain_model)

    async def refresh(self) -> None:
        """Fetch the playlist and write it to the cache off the event loop.

        Cancelling the awaiting task does not interrupt the worker thread:
        the store ends up either fully updated or untouched.

        Raises:
            NetworkError: If the playlist cannot be fetched.
            DecodeError: If the playlist response is malformed.
            StorageError: If the cache write fails.
        """
        await asyncio.to_thread(self._refresh)

    def _refresh(self) -> None:
        logger.debug("Refreshing videos")
        playlist = self._source.fetch_playlist()
        self._store.upsert_all(as_database_model(playlist))
        logger.info("Refreshed %d videos from the playlist", len(playlist))

    def list_videos(self) -> list[DevByteVideo]:
        """Current cached videos, in store order."""
        return self.videos.value

    def resolve(self, query: str) -> DevByteVideo:
        """Find a cached video from human-friendly input.

        Tried in order: exact url, 1-based index into list_videos(),
        then case-insensitive substring of the title.

        Raises:
            VideoNotFoundError: If nothing matches.
            AmbiguousVideoError: If the title substring matches several videos.
        """
        videos = self.list_videos()

        for video in videos:
            if video.url == query:
                return video

        if query.isdigit():
            idx = int(query) - 1  # 1-based for humans
            if 0 <= idx < len(videos):
                return videos[idx]
            raise VideoNotFoundError(
                f"Index {query} out of range. Cache has {len(videos)} video(s)."
            )

        q = query.lower()
        matches = [v for v in videos if q in v.title.lower()]
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            raise AmbiguousVideoError(
                f"Multiple videos match '{query}':\n"
                + "\n".join(f"  {i+1}. {v.title}" for i, v in enumerate(matches))
            )

        raise VideoNotFoundError(f"No cached video matching: {query}")
