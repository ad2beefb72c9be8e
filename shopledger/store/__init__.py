from shopledger.store.base import RecordStore, Snapshot, Subscription
from shopledger.store.sql_store import SqlRecordStore
from shopledger.store.watcher import CollectionWatcher

__all__ = ["CollectionWatcher", "RecordStore", "Snapshot", "SqlRecordStore", "Subscription"]
