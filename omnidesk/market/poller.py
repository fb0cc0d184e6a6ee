"""Background price polling with a shared last-known-good cache."""

import logging
import threading
from typing import Callable, Optional, Sequence

from omnidesk.errors import OmnideskError
from omnidesk.models import PriceSnapshot

logger = logging.getLogger(__name__)

PRICES_UPDATE_EVENT = "prices-update"

Fetcher = Callable[[list[str]], list[PriceSnapshot]]
Subscriber = Callable[[str, list[PriceSnapshot]], None]


class PriceCache:
    """Snapshot list shared between the poller and readers.

    The whole list is swapped under the lock; readers always get one
    complete snapshot set.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshots: tuple[PriceSnapshot, ...] = ()

    def replace(self, snapshots: Sequence[PriceSnapshot]) -> None:
        """Replace the cached snapshots in full."""
        frozen = tuple(snapshots)
        with self._lock:
            self._snapshots = frozen

    def get(self) -> tuple[PriceSnapshot, ...]:
        """Get the current snapshots."""
        with self._lock:
            return self._snapshots


class PricePoller:
    """
    Polls a fixed symbol set on an interval.

    Each iteration fetches once; on success the result is published to
    subscribers and replaces the cache, on failure it is logged and the
    loop waits for the next interval. There is no retry or backoff.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        symbols: Sequence[str],
        cache: Optional[PriceCache] = None,
        interval: float = 5.0,
    ):
        """
        Initialize the poller.

        Args:
            fetcher: Callable fetching snapshots for display-form symbols.
            symbols: Symbols to poll. Fixed for the poller's lifetime.
            cache: Cache to write into. A new one is created if omitted.
            interval: Seconds between the end of one fetch and the next.
        """
        self._fetcher = fetcher
        self.symbols = tuple(symbols)
        self.cache = cache if cache is not None else PriceCache()
        self.interval = interval

        self._subscribers: list[Subscriber] = []
        self._subscribers_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for price updates.

        Args:
            callback: Called with (event_name, snapshots) after every
                successful fetch.

        Returns:
            A function that removes the subscription.
        """
        with self._subscribers_lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._subscribers_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self, snapshots: list[PriceSnapshot]) -> None:
        with self._subscribers_lock:
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(PRICES_UPDATE_EVENT, snapshots)
            except Exception:
                logger.exception("Price subscriber %r failed", callback)

    def poll_once(self) -> bool:
        """Run a single fetch/publish/cache cycle.

        Returns:
            True if the fetch succeeded.
        """
        try:
            snapshots = self._fetcher(list(self.symbols))
        except OmnideskError as e:
            logger.warning("Failed to fetch prices: %s", e.message)
            return False
        except Exception:
            logger.exception("Unexpected error while fetching prices")
            return False

        self._publish(snapshots)
        self.cache.replace(snapshots)
        return True

    def _run(self) -> None:
        logger.info(
            "Price poller started for %d symbols every %ss", len(self.symbols), self.interval
        )
        while not self._stop_event.is_set():
            self.poll_once()
            self._stop_event.wait(self.interval)
        logger.info("Price poller stopped")

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background polling thread. No-op if already running."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="omnidesk-price-poller", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the polling thread to stop and wait for it."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
