from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[["Snapshot"], None]
ErrorCallback = Callable[[Exception], None]


@dataclass(frozen=True)
class Snapshot:
    """A complete, point-in-time copy of one collection.

    ``records`` are plain documents (``{"id": ..., **fields}``) and must be
    treated as read-only by consumers.
    """

    collection: str
    records: tuple[dict, ...]
    version: int
    taken_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __len__(self) -> int:
        return len(self.records)


class Subscription:
    """A live view of one collection.

    Holds the latest delivered snapshot. After ``cancel()`` no callback
    fires again, including for snapshots that were already in flight.
    """

    def __init__(
        self,
        collection: str,
        order_by: str,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
        *,
        owner_id: Optional[str] = None,
        descending: bool = False,
        on_cancel: Optional[Callable[["Subscription"], None]] = None,
    ):
        self.collection = collection
        self.order_by = order_by
        self.owner_id = owner_id
        self.descending = descending
        self.latest: Optional[Snapshot] = None
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self._on_cancel = on_cancel
        self._lock = threading.RLock()
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def deliver(self, snapshot: Snapshot) -> bool:
        with self._lock:
            if not self._active:
                return False
            if self.latest is not None and snapshot.version < self.latest.version:
                logger.debug(
                    "Dropping out-of-order snapshot v%d for %s (have v%d)",
                    snapshot.version,
                    self.collection,
                    self.latest.version,
                )
                return False
            self.latest = snapshot
            self._on_snapshot(snapshot)
            return True

    def fail(self, exc: Exception) -> None:
        with self._lock:
            if not self._active:
                return
            if self._on_error is None:
                logger.error("Subscription to %s failed: %s", self.collection, exc)
                return
            self._on_error(exc)

    def cancel(self) -> None:
        with self._lock:
            if not self._active:
                return
            self._active = False
        if self._on_cancel is not None:
            self._on_cancel(self)
        logger.debug("Subscription to %s cancelled", self.collection)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()


@runtime_checkable
class RecordStore(Protocol):
    """Document collections with create/update/delete and live snapshots."""

    def create(self, collection: str, fields: dict[str, Any]) -> str:
        ...

    def delete(self, collection: str, record_id: str) -> None:
        ...

    def update(self, collection: str, record_id: str, fields: dict[str, Any]) -> None:
        ...

    def update_with(
        self,
        collection: str,
        record_id: str,
        compute: Callable[[dict], dict[str, Any]],
    ) -> dict[str, Any]:
        ...

    def get(self, collection: str, record_id: str) -> Optional[dict]:
        ...

    def subscribe(
        self,
        collection: str,
        order_by: str,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
        *,
        owner_id: Optional[str] = None,
        descending: bool = False,
    ) -> Subscription:
        ...


__all__ = ["RecordStore", "Snapshot", "Subscription"]
