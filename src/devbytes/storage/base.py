"""Abstract store interface for cached videos."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from devbytes.storage.live import LiveData


class StorageError(Exception):
    """Raised when the video store cannot be opened or a write fails."""


class DatabaseVideo(BaseModel):
    """A video row as persisted in the local store. ``url`` is the row identity."""

    model_config = ConfigDict(frozen=True)

    url: str
    updated: str
    title: str
    description: str
    thumbnail: str


class VideoStore(ABC):
    """Abstract base class defining the video cache contract.

    A single writer refreshes the cache with bulk upserts; any number of
    readers observe the complete stored set through a live view.
    """

    @abstractmethod
    def upsert_all(self, videos: Sequence[DatabaseVideo]) -> None:
        """Insert or replace every video in one atomic batch.

        Rows whose url already exists are overwritten, new urls are added,
        and rows missing from ``videos`` are left alone.

        Raises:
            StorageError: If the batch cannot be written. Nothing is applied.
        """

    @abstractmethod
    def observe_all(self) -> LiveData[list[DatabaseVideo]]:
        """Live view of the complete stored set, re-emitted after every upsert."""

    def list_all(self) -> list[DatabaseVideo]:
        """Current complete stored set."""
        return self.observe_all().value
