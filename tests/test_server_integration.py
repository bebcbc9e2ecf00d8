# tests/test_server_integration.py
"""MCP server integration tests — test tool functions directly."""

import asyncio
from unittest.mock import patch

import pytest

from devbytes.ingestion.playlist import NetworkError


@pytest.fixture
def server_repository(repository):
    """Patch the server's repository singleton with the in-memory one."""
    import devbytes.server as server_mod

    with patch.object(server_mod, "_repository", repository):
        yield repository


class TestMCPTools:
    def test_refresh_videos_tool(self, server_repository):
        from devbytes.server import refresh_videos
        result = asyncio.run(refresh_videos())
        assert result == {"status": "refreshed", "cached": 2}

    def test_refresh_videos_error(self, server_repository, fake_source):
        from devbytes.server import refresh_videos
        fake_source.fetch_playlist.side_effect = NetworkError("offline")
        result = asyncio.run(refresh_videos())
        assert result["error"] == "offline"
        assert result["cached"] == 0

    def test_list_videos_tool(self, server_repository):
        from devbytes.server import list_videos, refresh_videos
        asyncio.run(refresh_videos())
        result = list_videos()
        assert len(result) == 2
        assert result[0]["title"] == "Android Jetpack: Room"
        assert "short_description" in result[0]
        assert "description" not in result[0]

    def test_get_video_tool(self, server_repository):
        from devbytes.server import get_video, refresh_videos
        asyncio.run(refresh_videos())
        result = get_video("livedata")
        assert result["url"] == "https://www.youtube.com/watch?v=OMcDk2_4LSk"
        assert result["description"] == "LiveData is an observable data holder class."

    def test_get_video_not_found(self, server_repository):
        from devbytes.server import get_video
        assert "error" in get_video("1")

    def test_repository_created_lazily(self):
        import devbytes.server as server_mod
        with patch.object(server_mod, "_repository", None):
            first = server_mod._get_repository()
            assert server_mod._get_repository() is first

    def test_unusable_data_dir(self, tmp_path, monkeypatch):
        import devbytes.server as server_mod
        from devbytes.config import settings
        from devbytes.server import get_video, refresh_videos

        blocker = tmp_path / "not-a-dir"
        blocker.write_text("occupied")
        monkeypatch.setattr(settings, "data_dir", blocker)

        with patch.object(server_mod, "_repository", None):
            result = asyncio.run(refresh_videos())
            assert "Could not create data directory" in result["error"]
            assert result["cached"] == 0
            assert "error" in get_video("1")
