import unittest
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from shopledger.core.errors import RecordNotFoundError, StoreError
from shopledger.store.base import RecordStore
from tests.helpers import make_store


class SqlRecordStoreTest(unittest.TestCase):
    def setUp(self):
        self.store, self.engine = make_store()

    def tearDown(self):
        self.engine.dispose()

    def test_implements_record_store(self):
        self.assertIsInstance(self.store, RecordStore)

    def test_create_assigns_id_and_timestamp(self):
        record_id = self.store.create("expenses", {"item": "Beef", "amount": 10})
        document = self.store.get("expenses", record_id)
        self.assertEqual(document["id"], record_id)
        self.assertEqual(document["item"], "Beef")
        self.assertIn("createdAt", document)

    def test_update_merges_fields(self):
        record_id = self.store.create("stock", {"name": "Beef", "currentQuantity": 3})
        self.store.update("stock", record_id, {"currentQuantity": 7})
        document = self.store.get("stock", record_id)
        self.assertEqual(document["currentQuantity"], 7)
        self.assertEqual(document["name"], "Beef")

    def test_update_missing_record_raises(self):
        with self.assertRaises(RecordNotFoundError):
            self.store.update("stock", "missing", {"currentQuantity": 1})

    def test_delete_is_idempotent(self):
        record_id = self.store.create("revenue", {"amount": 5})
        self.store.delete("revenue", record_id)
        self.store.delete("revenue", record_id)
        self.store.delete("revenue", "never-existed")
        self.assertIsNone(self.store.get("revenue", record_id))

    def test_subscribe_delivers_initial_and_subsequent_snapshots(self):
        self.store.create("stock", {"name": "Onion"})
        received = []

        subscription = self.store.subscribe("stock", "name", received.append)
        self.assertEqual(len(received), 1)
        self.assertEqual([doc["name"] for doc in received[0].records], ["Onion"])

        self.store.create("stock", {"name": "Beef"})
        self.assertEqual(len(received), 2)
        self.assertEqual([doc["name"] for doc in received[-1].records], ["Beef", "Onion"])
        self.assertIs(subscription.latest, received[-1])
        self.assertGreater(received[-1].version, received[0].version)

    def test_descending_order_and_owner_scope(self):
        self.store.create("expenses", {"createdAt": "2024-01-01T00:00:00", "userId": "a"})
        self.store.create("expenses", {"createdAt": "2024-01-02T00:00:00", "userId": "b"})
        received = []
        self.store.subscribe("expenses", "createdAt", received.append, descending=True)
        self.assertEqual(
            [doc["createdAt"] for doc in received[-1].records],
            ["2024-01-02T00:00:00", "2024-01-01T00:00:00"],
        )

        scoped = []
        self.store.subscribe("expenses", "createdAt", scoped.append, owner_id="a")
        self.assertEqual([doc["userId"] for doc in scoped[-1].records], ["a"])

    def test_cancelled_subscription_gets_no_more_snapshots(self):
        received = []
        with self.store.subscribe("revenue", "createdAt", received.append) as subscription:
            self.store.create("revenue", {"amount": 1})
        self.assertFalse(subscription.active)
        self.store.create("revenue", {"amount": 2})
        self.assertEqual(len(received), 2)
        self.assertEqual(self.store.subscriptions("revenue"), [])

    def test_read_errors_go_to_error_channel(self):
        received, errors = [], []
        subscription = self.store.subscribe("stock", "name", received.append, errors.append)

        with patch.object(self.store, "snapshot", side_effect=StoreError("offline")):
            self.store.refresh("stock")

        self.assertEqual(len(received), 1)
        self.assertEqual(len(errors), 1)
        self.assertTrue(subscription.active)

        self.store.create("stock", {"name": "Salt"})
        self.assertEqual(len(received), 2)

    def test_write_failure_raises_store_error(self):
        def broken_factory():
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))

        failing = type(self.store)(broken_factory)
        with self.assertRaises(StoreError):
            failing.create("expenses", {"amount": 1})

    def test_stale_collections_tracks_external_writes(self):
        received = []
        self.store.subscribe("stock", "name", received.append)
        self.assertEqual(self.store.stale_collections(), [])

        other_process = type(self.store)(self.store._session_factory)
        other_process.create("stock", {"name": "Garlic"})
        self.assertEqual(self.store.stale_collections(), ["stock"])

        self.store.refresh("stock")
        self.assertEqual(self.store.stale_collections(), [])
        self.assertEqual(len(received[-1].records), 1)


if __name__ == "__main__":
    unittest.main()
