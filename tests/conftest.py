# tests/conftest.py
"""Shared fixtures for devbytes tests."""

from unittest.mock import MagicMock

import pytest

import devbytes.storage.sqlite as sqlite_module
from devbytes.config import settings
from devbytes.ingestion.playlist import NetworkVideo, PlaylistSource
from devbytes.repository import VideosRepository
from devbytes.storage.sqlite import SQLiteVideoStore


@pytest.fixture(autouse=True)
def isolated_cache(tmp_path, monkeypatch):
    """Point the data dir at a temp directory and forget any open store."""
    monkeypatch.setattr(settings, "data_dir", tmp_path / "devbytes")
    monkeypatch.setattr(sqlite_module, "_instance", None)


@pytest.fixture
def playlist_payload():
    """Raw playlist JSON as served by the playlist endpoint."""
    return {
        "videos": [
            {
                "title": "Android Jetpack: Room",
                "description": "Room is a persistence library that provides an abstraction layer over SQLite.",
                "url": "https://www.youtube.com/watch?v=SKWh4ckvFPM",
                "updated": "2018-06-07T17:09:43+00:00",
                "thumbnail": "https://i4.ytimg.com/vi/SKWh4ckvFPM/hqdefault.jpg",
                "closedCaptions": None,
            },
            {
                "title": "Android Jetpack: LiveData",
                "description": "LiveData is an observable data holder class.",
                "url": "https://www.youtube.com/watch?v=OMcDk2_4LSk",
                "updated": "2018-06-12T18:02:11+00:00",
                "thumbnail": "https://i4.ytimg.com/vi/OMcDk2_4LSk/hqdefault.jpg",
                "closedCaptions": "https://example.com/captions/OMcDk2_4LSk.vtt",
            },
        ]
    }


@pytest.fixture
def sample_network_videos(playlist_payload):
    """The playlist payload as NetworkVideo models, in playlist order."""
    return [NetworkVideo.model_validate(v) for v in playlist_payload["videos"]]


@pytest.fixture
def store():
    """SQLiteVideoStore backed by in-memory database."""
    return SQLiteVideoStore(":memory:")


@pytest.fixture
def fake_source(sample_network_videos):
    """PlaylistSource returning sample_network_videos without touching the network."""
    source = MagicMock(spec=PlaylistSource)
    source.fetch_playlist.return_value = sample_network_videos
    return source


@pytest.fixture
def repository(store, fake_source):
    """VideosRepository wired to the in-memory store and fake source."""
    return VideosRepository(store, source=fake_source)


@pytest.fixture
def emissions():
    """Observer that records every value it is given."""

    class Recorder(list):
        def __call__(self, value):
            self.append(value)

    return Recorder()
