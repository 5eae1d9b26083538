import unittest
from datetime import timezone
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from contact_backend.db import ContactSubmission, InMemoryDbClient, SqlAlchemyDbClient
from contact_backend.errors import StorageError


def _submission(**overrides) -> ContactSubmission:
    fields = {
        "name": "Ana",
        "email": "ana@x.com",
        "subject": "Hi",
        "message": "Hello",
    }
    fields.update(overrides)
    return ContactSubmission(**fields)


class DbClientContractMixin:
    """Behavior shared by every DbClient implementation."""

    def make_client(self):
        raise NotImplementedError

    def setUp(self):
        self.db = self.make_client()

    def test_insert_and_find(self):
        contact_id = self.db.insert(_submission())
        self.assertGreater(contact_id, 0)
        record = self.db.find_by_id(contact_id)
        self.assertIsNotNone(record)
        self.assertEqual(record.id, contact_id)
        self.assertEqual(record.name, "Ana")
        self.assertEqual(record.email, "ana@x.com")
        self.assertEqual(record.subject, "Hi")
        self.assertEqual(record.message, "Hello")
        self.assertFalse(record.is_read)
        self.assertEqual(record.created_at.utcoffset(), timezone.utc.utcoffset(None))

    def test_ids_are_unique(self):
        ids = {self.db.insert(_submission(name=f"n{i}")) for i in range(5)}
        self.assertEqual(len(ids), 5)

    def test_find_missing_returns_none(self):
        self.assertIsNone(self.db.find_by_id(999))

    def test_list_empty(self):
        self.assertEqual(self.db.list_all(), [])

    def test_list_is_newest_first(self):
        ids = [self.db.insert(_submission(subject=s)) for s in ("a", "b", "c")]
        records = self.db.list_all()
        self.assertEqual([r.id for r in records], list(reversed(ids)))
        created = [r.created_at for r in records]
        self.assertEqual(created, sorted(created, reverse=True))

    def test_mark_read_is_idempotent(self):
        contact_id = self.db.insert(_submission())
        self.assertTrue(self.db.mark_read(contact_id))
        self.assertTrue(self.db.mark_read(contact_id))
        self.assertTrue(self.db.find_by_id(contact_id).is_read)

    def test_mark_read_missing_returns_false(self):
        self.assertFalse(self.db.mark_read(123))
        self.assertFalse(self.db.mark_read(123))

    def test_mark_read_does_not_touch_created_at(self):
        contact_id = self.db.insert(_submission())
        before = self.db.find_by_id(contact_id).created_at
        self.db.mark_read(contact_id)
        self.assertEqual(self.db.find_by_id(contact_id).created_at, before)


class InMemoryDbClientTests(DbClientContractMixin, unittest.TestCase):
    def make_client(self):
        return InMemoryDbClient()

    def test_reset_clears_contacts(self):
        self.db.insert(_submission())
        self.db.reset()
        self.assertEqual(self.db.list_all(), [])
        self.assertEqual(self.db.insert(_submission()), 1)


class SqlAlchemyDbClientTests(DbClientContractMixin, unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the SQL client logic.
    """

    def make_client(self):
        return SqlAlchemyDbClient("sqlite+pysqlite:///:memory:")

    def test_requires_url(self):
        with self.assertRaises(ValueError):
            SqlAlchemyDbClient("")

    def test_unknown_dialect_raises_storage_error(self):
        with self.assertRaises(StorageError) as ctx:
            SqlAlchemyDbClient("bogus://x")
        self.assertIsNotNone(ctx.exception.__cause__)

    def test_constraint_violation_raises_storage_error(self):
        with self.assertRaises(StorageError) as ctx:
            self.db.insert(_submission(name=None))
        self.assertIsNotNone(ctx.exception.__cause__)
        self.assertEqual(self.db.list_all(), [])

    def test_unreachable_store_raises_storage_error(self):
        error = OperationalError("SELECT 1", {}, Exception("database is down"))
        with patch.object(self.db, "Session", side_effect=error):
            with self.assertRaises(StorageError) as ctx:
                self.db.list_all()
        self.assertIs(ctx.exception.__cause__, error)


if __name__ == "__main__":
    unittest.main()
