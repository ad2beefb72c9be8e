import logging
import threading

from shopledger.core.errors import StoreError

logger = logging.getLogger(__name__)


class CollectionWatcher:
    """Polls the store for writes made elsewhere and pushes fresh snapshots.

    Read failures are reported to every subscription's error channel and the
    poll is retried with exponential backoff; subscriptions stay active.
    """

    def __init__(self, store, poll_seconds=2.0, retry_seconds=1.0, max_backoff_seconds=60.0):
        self.store = store
        self.poll_seconds = max(0.1, float(poll_seconds))
        self.retry_seconds = max(0.1, float(retry_seconds))
        self.max_backoff_seconds = max(self.retry_seconds, float(max_backoff_seconds))
        self._stop_event = threading.Event()
        self._thread = None
        self._failures = 0

    @property
    def failures(self):
        return self._failures

    def start(self):
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="collection-watcher",
            daemon=True,
        )
        self._thread.start()
        logger.info("Collection watcher started (poll every %.1fs)", self.poll_seconds)

    def stop(self):
        if not self._thread:
            return
        self._stop_event.set()
        self._thread.join(timeout=self.max_backoff_seconds + 1)
        self._thread = None
        logger.info("Collection watcher stopped")

    def next_delay(self):
        if not self._failures:
            return self.poll_seconds
        backoff = self.retry_seconds * (2 ** (self._failures - 1))
        return min(backoff, self.max_backoff_seconds)

    def poll_once(self):
        try:
            stale = self.store.stale_collections()
        except StoreError as exc:
            self._failures += 1
            logger.warning(
                "Collection poll failed (attempt %d, retry in %.1fs): %s",
                self._failures,
                self.next_delay(),
                exc,
            )
            self.store.report_error(exc)
            return False

        if self._failures:
            logger.info("Collection poll recovered after %d failure(s)", self._failures)
        self._failures = 0
        for collection in stale:
            logger.debug("Pushing external changes for %s", collection)
            self.store.refresh(collection)
        return True

    def _run(self):
        while not self._stop_event.is_set():
            self.poll_once()
            self._stop_event.wait(self.next_delay())
