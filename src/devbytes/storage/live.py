"""Observable values that push every update to their subscribers."""

import asyncio
import logging
import threading
from collections.abc import AsyncIterator, Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

Observer = Callable[[T], None]


class Subscription:
    """Handle returned by LiveData.observe(); cancel() stops delivery."""

    def __init__(self, cancel: Callable[[], None]) -> None:
        self._cancel = cancel
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if self._active:
            self._active = False
            self._cancel()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.cancel()


class LiveData(Generic[T]):
    """A holder of the latest value of some data, pushed to observers on change.

    A new observer receives the current value straight away, then every
    subsequent value in the order it was posted. Posting and delivery share
    one lock, so two observers can never see values in different orders and
    an older value is never delivered after a newer one.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._observers: list[Observer] = []
        self._lock = threading.RLock()

    @property
    def value(self) -> T:
        return self._value

    def observe(self, observer: Observer) -> Subscription:
        """Register ``observer`` and deliver the current value to it."""
        with self._lock:
            self._observers.append(observer)
            self._deliver(observer, self._value)
        return Subscription(lambda: self._remove(observer))

    def post(self, value: T) -> None:
        """Publish a new value to every registered observer."""
        with self._lock:
            self._value = value
            for observer in list(self._observers):
                self._deliver(observer, value)

    def map(self, transform: Callable[[T], R]) -> "LiveData[R]":
        """Derived view applying ``transform`` to every value of this one."""
        return MappedLiveData(self, transform)

    async def stream(self) -> AsyncIterator[T]:
        """Iterate over values from inside an event loop.

        Values posted from other threads are handed to the loop in order.
        Closing the iterator unsubscribes.
        """
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()
        subscription = self.observe(lambda value: loop.call_soon_threadsafe(queue.put_nowait, value))
        try:
            while True:
                yield await queue.get()
        finally:
            subscription.cancel()

    def _remove(self, observer: Observer) -> None:
        with self._lock:
            try:
                self._observers.remove(observer)
            except ValueError:
                pass

    @staticmethod
    def _deliver(observer: Observer, value) -> None:
        try:
            observer(value)
        except Exception:
            logger.exception("Observer %r failed while handling an update", observer)


class MappedLiveData(LiveData[R]):
    """LiveData whose values are computed from a source LiveData.

    Nothing is cached: ``transform`` runs once per source value per observer.
    """

    def __init__(self, source: LiveData[T], transform: Callable[[T], R]) -> None:
        # observers live on the source; the base fields stay empty
        super().__init__(None)
        self._source = source
        self._transform = transform

    @property
    def value(self) -> R:
        return self._transform(self._source.value)

    def observe(self, observer: Observer) -> Subscription:
        transform = self._transform
        return self._source.observe(lambda value: observer(transform(value)))

    def post(self, value: R) -> None:
        raise TypeError("A mapped LiveData is read-only; post to its source instead")
