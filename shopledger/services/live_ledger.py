from __future__ import annotations

import logging
import threading
from functools import partial
from typing import Callable, Optional

from pydantic import ValidationError

from shopledger.core.constants import (
    CONSUMABLES_COLLECTION,
    EXPENSES_COLLECTION,
    REVENUE_COLLECTION,
    STOCK_COLLECTION,
)
from shopledger.core.session import SessionContext
from shopledger.schemas.expense import Expense, RevenueEntry
from shopledger.schemas.inventory import ConsumableItem, StockItem
from shopledger.services import aggregation_service
from shopledger.store.base import RecordStore, Snapshot

logger = logging.getLogger(__name__)

# (collection, order_by, descending, record model)
_LIVE_COLLECTIONS = (
    (EXPENSES_COLLECTION, "createdAt", True, Expense),
    (REVENUE_COLLECTION, "createdAt", True, RevenueEntry),
    (STOCK_COLLECTION, "name", False, StockItem),
    (CONSUMABLES_COLLECTION, "name", False, ConsumableItem),
)


def parse_snapshot(snapshot: Snapshot, model) -> tuple:
    records = []
    for document in snapshot.records:
        try:
            records.append(model.model_validate(document))
        except ValidationError as exc:
            logger.warning(
                "Skipping malformed %s record %s: %s",
                snapshot.collection,
                document.get("id"),
                exc.errors()[0]["msg"] if exc.errors() else exc,
            )
    return tuple(records)


class LiveLedger:
    """The working set of one authenticated session.

    Holds exactly one subscription per collection. Every snapshot replaces
    the cached records of its collection outright. Switching sessions
    cancels the old subscriptions first; snapshots still in flight for the
    previous session are discarded by generation.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        scope_to_owner: bool = False,
        on_error: Optional[Callable[[str, Exception], None]] = None,
        on_change: Optional[Callable[[str], None]] = None,
    ):
        self.store = store
        self.scope_to_owner = scope_to_owner
        self._on_error = on_error
        self._on_change = on_change
        self._lock = threading.RLock()
        self._generation = 0
        self._session: Optional[SessionContext] = None
        self._subscriptions = {}
        self._records = {collection: () for collection, *_ in _LIVE_COLLECTIONS}
        self._loaded = set()

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    @property
    def session(self) -> Optional[SessionContext]:
        return self._session

    @property
    def loading(self) -> bool:
        with self._lock:
            return self._session is not None and len(self._loaded) < len(_LIVE_COLLECTIONS)

    def open(self, session: SessionContext) -> "LiveLedger":
        self.switch(session)
        return self

    def switch(self, session: Optional[SessionContext]) -> None:
        with self._lock:
            self._generation += 1
            generation = self._generation
            previous = list(self._subscriptions.values())
            self._subscriptions = {}
            self._session = session
            self._records = {collection: () for collection, *_ in _LIVE_COLLECTIONS}
            self._loaded = set()

        for subscription in previous:
            subscription.cancel()

        if session is None:
            logger.info("Live ledger closed")
            return

        owner_id = session.user_id if self.scope_to_owner else None
        acquired = []
        try:
            for collection, order_by, descending, model in _LIVE_COLLECTIONS:
                acquired.append(
                    self.store.subscribe(
                        collection,
                        order_by,
                        partial(self._apply, generation, collection, model),
                        partial(self._report, generation, collection),
                        owner_id=owner_id,
                        descending=descending,
                    )
                )
        except BaseException:
            for subscription in acquired:
                subscription.cancel()
            raise

        with self._lock:
            current = generation == self._generation
            if current:
                self._subscriptions = {sub.collection: sub for sub in acquired}
        if not current:
            for subscription in acquired:
                subscription.cancel()
            return
        logger.info("Live ledger opened for %s", session.user_id)

    def close(self) -> None:
        self.switch(None)

    def __enter__(self) -> "LiveLedger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def active_subscriptions(self) -> list:
        with self._lock:
            return [sub for sub in self._subscriptions.values() if sub.active]

    # =========================================================================
    # Snapshot handling
    # =========================================================================

    def _apply(self, generation: int, collection: str, model, snapshot: Snapshot) -> None:
        records = parse_snapshot(snapshot, model)
        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding %s snapshot from a previous session", collection)
                return
            self._records[collection] = records
            self._loaded.add(collection)
        if self._on_change is not None:
            self._on_change(collection)

    def _report(self, generation: int, collection: str, exc: Exception) -> None:
        with self._lock:
            if generation != self._generation:
                return
        logger.error("Error fetching %s: %s", collection, exc)
        if self._on_error is not None:
            self._on_error(collection, exc)

    # =========================================================================
    # Views
    # =========================================================================

    def _get(self, collection: str) -> tuple:
        with self._lock:
            return self._records[collection]

    @property
    def expenses(self) -> tuple:
        return self._get(EXPENSES_COLLECTION)

    @property
    def revenue(self) -> tuple:
        return self._get(REVENUE_COLLECTION)

    @property
    def stock_items(self) -> tuple:
        return self._get(STOCK_COLLECTION)

    @property
    def consumables(self) -> tuple:
        return self._get(CONSUMABLES_COLLECTION)

    def daily_summary(self, day: str):
        return aggregation_service.daily_summary(day, self.expenses, self.revenue)

    def monthly_summary(self, year: int, month: int):
        return aggregation_service.monthly_summary(year, month, self.expenses, self.revenue)

    def category_totals(self, start_date: Optional[str] = None, end_date: Optional[str] = None):
        return aggregation_service.category_totals(self.expenses, start_date, end_date)

    def all_time_totals(self):
        return aggregation_service.all_time_totals(self.expenses, self.revenue)

    def recent_expenses(self, limit: int = 20):
        return aggregation_service.recent_expenses(self.expenses, limit)

    def low_stock(self):
        return aggregation_service.low_stock_items(self.stock_items)

    def low_consumables(self):
        return aggregation_service.low_stock_items(self.consumables)


__all__ = ["LiveLedger", "parse_snapshot"]
