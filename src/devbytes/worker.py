"""Periodic background refresh of the video cache."""

import asyncio
import enum
import logging
import random

from devbytes.config import settings
from devbytes.ingestion.playlist import DecodeError, NetworkError
from devbytes.repository import VideosRepository
from devbytes.storage.base import StorageError

logger = logging.getLogger(__name__)


class WorkResult(enum.Enum):
    SUCCESS = "success"
    RETRY = "retry"  # transient; worth trying again soon
    FAILURE = "failure"


def exponential_backoff(attempt: int, base_delay: float = 1.0, max_delay: float = 300.0) -> float:
    """Calculate exponential backoff delay with jitter."""
    delay = min(base_delay * (2 ** attempt), max_delay)
    # Add jitter to prevent thundering herd
    jitter = random.uniform(0, delay * 0.1)
    return delay + jitter


class RefreshWorker:
    """Keeps the cache fresh by refreshing the repository on a schedule.

    Network failures are retried with exponential backoff, up to
    ``max_retries`` times per cycle. Decode and storage failures are not
    retried; the cycle is logged as failed and the next one runs after
    the normal interval.
    """

    def __init__(
        self,
        repository: VideosRepository,
        interval: float | None = None,
        max_retries: int | None = None,
        base_delay: float | None = None,
    ) -> None:
        self._repository = repository
        self._interval = interval if interval is not None else settings.refresh_interval
        self._max_retries = max_retries if max_retries is not None else settings.refresh_max_retries
        self._base_delay = base_delay if base_delay is not None else settings.retry_base_delay

    async def do_work(self) -> WorkResult:
        """Run a single refresh and classify the outcome."""
        try:
            await self._repository.refresh()
        except NetworkError as e:
            logger.warning("Refresh failed, will retry: %s", e)
            return WorkResult.RETRY
        except (DecodeError, StorageError) as e:
            logger.error("Refresh failed: %s", e)
            return WorkResult.FAILURE
        return WorkResult.SUCCESS

    async def run_cycle(self, stop: asyncio.Event | None = None) -> WorkResult:
        """Refresh once, retrying network failures with backoff.

        If ``stop`` is set while waiting to retry, the cycle ends at once
        with RETRY and no further refresh is attempted.
        """
        attempt = 0
        while True:
            result = await self.do_work()
            if result is not WorkResult.RETRY or attempt >= self._max_retries:
                return result
            delay = exponential_backoff(attempt, self._base_delay)
            logger.info("Retrying refresh in %.1fs (attempt %d/%d)", delay, attempt + 1, self._max_retries)
            if await self._wait_for_stop(stop, delay):
                return result
            attempt += 1

    async def run(self, stop: asyncio.Event) -> None:
        """Refresh every ``interval`` seconds until ``stop`` is set."""
        while not stop.is_set():
            result = await self.run_cycle(stop)
            logger.debug("Refresh cycle finished: %s", result.value)
            await self._wait_for_stop(stop, self._interval)

    @staticmethod
    async def _wait_for_stop(stop: asyncio.Event | None, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds; True if ``stop`` was set meanwhile."""
        if stop is None:
            await asyncio.sleep(timeout)
            return False
        try:
            await asyncio.wait_for(stop.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            return False
        return True
