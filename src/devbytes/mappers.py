"""Conversions between network, database and domain video models."""

from collections.abc import Iterable

from devbytes.ingestion.playlist import NetworkVideo
from devbytes.models import DevByteVideo
from devbytes.storage.base import DatabaseVideo


def descriptor_to_record(video: NetworkVideo) -> DatabaseVideo:
    return DatabaseVideo(
        url=video.url,
        updated=video.updated,
        title=video.title,
        description=video.description,
        thumbnail=video.thumbnail,
    )


def record_to_domain(video: DatabaseVideo) -> DevByteVideo:
    return DevByteVideo(
        url=video.url,
        title=video.title,
        description=video.description,
        updated=video.updated,
        thumbnail=video.thumbnail,
    )


def as_database_model(videos: Iterable[NetworkVideo]) -> list[DatabaseVideo]:
    """Map a fetched playlist to storage rows, keeping playlist order."""
    return [descriptor_to_record(video) for video in videos]


def as_domain_model(videos: Iterable[DatabaseVideo]) -> list[DevByteVideo]:
    """Map stored rows to domain objects, keeping row order."""
    return [record_to_domain(video) for video in videos]
