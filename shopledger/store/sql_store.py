from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from shopledger.core.errors import RecordNotFoundError, StoreError
from shopledger.models.record import CollectionVersion, Record
from shopledger.store.base import ErrorCallback, Snapshot, SnapshotCallback, Subscription

logger = logging.getLogger(__name__)


def _sort_key(order_by: str):
    # Ordering fields are ISO timestamps or names, so text order is enough.
    def key(document: dict) -> str:
        value = document.get(order_by)
        return "" if value is None else str(value)

    return key


def _to_document(record: Record) -> dict:
    document = dict(record.data or {})
    document["id"] = record.id
    return document


class SqlRecordStore:
    """Record store kept in a SQL database through SQLAlchemy.

    Every collection lives in the ``records`` table as JSON documents. Each
    write bumps the collection's row in ``collection_versions`` and, once
    committed, pushes a fresh snapshot to the collection's subscriptions.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        if session_factory is None:
            from shopledger.database.session import SessionLocal

            session_factory = SessionLocal
        self._session_factory = session_factory
        self._lock = threading.Lock()
        self._update_lock = threading.Lock()
        self._subscriptions: dict[str, list[Subscription]] = {}
        self._pushed_versions: dict[str, int] = {}

    # =========================================================================
    # Writes
    # =========================================================================

    @contextmanager
    def _write(self, collection: str, action: str):
        db: Optional[Session] = None
        try:
            db = self._session_factory()
            yield db
            self._bump_version(db, collection)
            db.commit()
        except SQLAlchemyError as exc:
            if db is not None:
                db.rollback()
            logger.exception("Store %s failed for %s", action, collection)
            raise StoreError("Failed to {} record in {}: {}".format(action, collection, exc)) from exc
        except Exception:
            if db is not None:
                db.rollback()
            raise
        finally:
            if db is not None:
                db.close()

    @staticmethod
    def _bump_version(db: Session, collection: str) -> None:
        row = db.get(CollectionVersion, collection)
        if row is None:
            row = CollectionVersion(collection=collection, version=0)
            db.add(row)
        row.version = (row.version or 0) + 1

    def create(self, collection: str, fields: dict[str, Any]) -> str:
        document = dict(fields)
        record_id = str(document.pop("id", None) or uuid.uuid4().hex)
        now = datetime.now(timezone.utc)
        document.setdefault("createdAt", now.isoformat())

        with self._write(collection, "create") as db:
            db.add(
                Record(
                    collection=collection,
                    id=record_id,
                    owner_id=document.get("userId"),
                    created_at=now,
                    data=document,
                )
            )
        logger.info(
            "Created %s/%s",
            collection,
            record_id,
            extra={"collection": collection, "record_id": record_id},
        )
        self.refresh(collection)
        return record_id

    def update(self, collection: str, record_id: str, fields: dict[str, Any]) -> None:
        with self._write(collection, "update") as db:
            record = db.get(Record, (collection, record_id))
            if record is None:
                raise RecordNotFoundError(collection, record_id)
            record.data = {**(record.data or {}), **fields}
        logger.info(
            "Updated %s/%s: %s",
            collection,
            record_id,
            sorted(fields),
            extra={"collection": collection, "record_id": record_id},
        )
        self.refresh(collection)

    def update_with(
        self,
        collection: str,
        record_id: str,
        compute: Callable[[dict], dict[str, Any]],
    ) -> dict[str, Any]:
        """Read-modify-write one record in a single locked write.

        ``compute`` receives the stored document and returns the fields to
        merge. Returns those fields.
        """
        with self._update_lock:
            with self._write(collection, "update") as db:
                stmt = (
                    select(Record)
                    .where(Record.collection == collection, Record.id == record_id)
                    .with_for_update()
                )
                record = db.execute(stmt).scalar_one_or_none()
                if record is None:
                    raise RecordNotFoundError(collection, record_id)
                fields = dict(compute(_to_document(record)))
                record.data = {**(record.data or {}), **fields}
        logger.info(
            "Updated %s/%s: %s",
            collection,
            record_id,
            sorted(fields),
            extra={"collection": collection, "record_id": record_id},
        )
        self.refresh(collection)
        return fields

    def delete(self, collection: str, record_id: str) -> None:
        """Remove a record. Deleting an unknown id is a successful no-op."""
        removed = False
        with self._write(collection, "delete") as db:
            record = db.get(Record, (collection, record_id))
            if record is not None:
                db.delete(record)
                removed = True
        if not removed:
            logger.info("Delete of missing record %s/%s ignored", collection, record_id)
            return
        logger.info(
            "Deleted %s/%s",
            collection,
            record_id,
            extra={"collection": collection, "record_id": record_id},
        )
        self.refresh(collection)

    # =========================================================================
    # Reads
    # =========================================================================

    @contextmanager
    def _read(self, what: str):
        db: Optional[Session] = None
        try:
            db = self._session_factory()
            yield db
        except SQLAlchemyError as exc:
            raise StoreError("Failed to read {}: {}".format(what, exc)) from exc
        finally:
            if db is not None:
                db.close()

    def get(self, collection: str, record_id: str) -> Optional[dict]:
        with self._read("{}/{}".format(collection, record_id)) as db:
            record = db.get(Record, (collection, record_id))
            return _to_document(record) if record is not None else None

    def versions(self) -> dict[str, int]:
        with self._read("collection versions") as db:
            rows = db.execute(select(CollectionVersion.collection, CollectionVersion.version)).all()
            return {row.collection: row.version for row in rows}

    def snapshot(
        self,
        collection: str,
        order_by: str,
        *,
        owner_id: Optional[str] = None,
        descending: bool = False,
    ) -> Snapshot:
        with self._read(collection) as db:
            # Version first: a write landing between the reads only under-labels
            # the snapshot, and the next poll pushes it again.
            version_row = db.get(CollectionVersion, collection)
            version = version_row.version if version_row is not None else 0
            stmt = select(Record).where(Record.collection == collection)
            if owner_id is not None:
                stmt = stmt.where(Record.owner_id == owner_id)
            records = db.execute(stmt).scalars().all()

        documents = sorted(
            (_to_document(record) for record in records),
            key=_sort_key(order_by),
            reverse=descending,
        )
        return Snapshot(collection=collection, records=tuple(documents), version=version)

    # =========================================================================
    # Live snapshots
    # =========================================================================

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
        subscription = Subscription(
            collection,
            order_by,
            on_snapshot,
            on_error,
            owner_id=owner_id,
            descending=descending,
            on_cancel=self._remove_subscription,
        )
        with self._lock:
            self._subscriptions.setdefault(collection, []).append(subscription)
        self._push(subscription)
        return subscription

    def _remove_subscription(self, subscription: Subscription) -> None:
        with self._lock:
            active = self._subscriptions.get(subscription.collection, [])
            if subscription in active:
                active.remove(subscription)

    def subscriptions(self, collection: Optional[str] = None) -> list[Subscription]:
        with self._lock:
            if collection is not None:
                return list(self._subscriptions.get(collection, []))
            return [sub for subs in self._subscriptions.values() for sub in subs]

    def _push(self, subscription: Subscription) -> None:
        try:
            snapshot = self.snapshot(
                subscription.collection,
                subscription.order_by,
                owner_id=subscription.owner_id,
                descending=subscription.descending,
            )
        except StoreError as exc:
            subscription.fail(exc)
            return
        if subscription.deliver(snapshot):
            with self._lock:
                pushed = self._pushed_versions.get(subscription.collection, 0)
                self._pushed_versions[subscription.collection] = max(pushed, snapshot.version)

    def refresh(self, collection: str) -> None:
        """Push a new snapshot of ``collection`` to every active subscription."""
        for subscription in self.subscriptions(collection):
            self._push(subscription)

    def stale_collections(self) -> list[str]:
        """Subscribed collections whose stored version moved past the last push."""
        versions = self.versions()
        with self._lock:
            subscribed = [name for name, subs in self._subscriptions.items() if subs]
            return [
                name
                for name in subscribed
                if versions.get(name, 0) != self._pushed_versions.get(name, 0)
            ]

    def report_error(self, exc: Exception) -> None:
        for subscription in self.subscriptions():
            subscription.fail(exc)


__all__ = ["SqlRecordStore"]
