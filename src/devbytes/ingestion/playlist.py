"""DevBytes playlist retrieval over HTTP."""

import http.client
import json
import logging
from abc import ABC, abstractmethod
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from devbytes.config import settings

logger = logging.getLogger(__name__)


class NetworkError(Exception):
    """Raised when the playlist endpoint cannot be reached or answers with an error."""


class DecodeError(Exception):
    """Raised when the playlist response does not match the expected schema."""


class NetworkVideo(BaseModel):
    """One video entry as published by the playlist server."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    description: str
    url: str
    updated: str
    thumbnail: str
    closed_captions: str | None = Field(default=None, alias="closedCaptions")


class NetworkVideoContainer(BaseModel):
    """Top-level playlist payload: ``{"videos": [...]}``."""

    videos: list[NetworkVideo]


class PlaylistSource(ABC):
    """Read-only remote source of the current playlist.

    Implementations make a single attempt per call. Retry policy
    belongs to the caller.
    """

    @abstractmethod
    def fetch_playlist(self) -> list[NetworkVideo]:
        """Fetch the current playlist.

        Raises:
            NetworkError: On connectivity loss, timeout, or non-success status.
            DecodeError: If the response body does not match the schema.
        """


class DevByteNetwork(PlaylistSource):
    """Fetches the DevBytes playlist JSON with urllib."""

    def __init__(self, url: str | None = None, timeout: float | None = None) -> None:
        self._url = url or settings.playlist_url
        self._timeout = timeout if timeout is not None else settings.request_timeout

    @property
    def url(self) -> str:
        return self._url

    def fetch_playlist(self) -> list[NetworkVideo]:
        body = self._download()
        videos = self.parse_playlist(body)
        logger.debug("Fetched %d videos from %s", len(videos), self._url)
        return videos

    def _download(self) -> bytes:
        """GET the playlist body, mapping every transport failure to NetworkError."""
        request = Request(self._url, headers={"Accept": "application/json"})
        try:
            with urlopen(request, timeout=self._timeout) as resp:
                status = resp.status
                if not 200 <= status < 300:
                    raise NetworkError(f"Playlist request failed with HTTP {status}: {self._url}")
                return resp.read()
        except HTTPError as e:
            raise NetworkError(f"Playlist request failed with HTTP {e.code}: {self._url}") from e
        except OSError as e:
            # URLError, socket timeouts and connection resets all land here
            raise NetworkError(f"Could not reach playlist endpoint {self._url}: {e}") from e
        except http.client.HTTPException as e:
            # truncated bodies and malformed status lines
            raise NetworkError(f"Playlist response from {self._url} was malformed or cut short: {e!r}") from e

    @staticmethod
    def parse_playlist(body: bytes | str) -> list[NetworkVideo]:
        """Decode a playlist response body.

        Accepts the ``{"videos": [...]}`` envelope or a bare JSON list.

        Raises:
            DecodeError: If the body is not JSON or entries are malformed.
        """
        try:
            payload = json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodeError(f"Playlist response is not valid JSON: {e}") from e

        if isinstance(payload, list):
            payload = {"videos": payload}

        try:
            return NetworkVideoContainer.model_validate(payload).videos
        except ValidationError as e:
            raise DecodeError(f"Playlist response has unexpected shape: {e}") from e
