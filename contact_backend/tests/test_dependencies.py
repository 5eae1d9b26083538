import unittest
from unittest.mock import patch

from contact_backend.db import InMemoryDbClient, SqlAlchemyDbClient
from contact_backend.dependencies import get_db_client, reset_db_client


def _settings(**values):
    defaults = {"use_in_memory_backends": False, "database_url": None}
    defaults.update(values)
    return type("Settings", (), defaults)()


class GetDbClientTests(unittest.TestCase):
    def setUp(self):
        reset_db_client()

    def tearDown(self):
        reset_db_client()

    @patch("contact_backend.dependencies.get_settings")
    def test_falls_back_to_in_memory_without_url(self, mock_settings):
        mock_settings.return_value = _settings()
        self.assertIsInstance(get_db_client(), InMemoryDbClient)

    @patch("contact_backend.dependencies.get_settings")
    def test_in_memory_toggle_wins_over_url(self, mock_settings):
        mock_settings.return_value = _settings(
            use_in_memory_backends=True, database_url="sqlite+pysqlite:///:memory:"
        )
        self.assertIsInstance(get_db_client(), InMemoryDbClient)

    @patch("contact_backend.dependencies.get_settings")
    def test_uses_sqlalchemy_client_with_url(self, mock_settings):
        mock_settings.return_value = _settings(database_url="sqlite+pysqlite:///:memory:")
        self.assertIsInstance(get_db_client(), SqlAlchemyDbClient)

    @patch("contact_backend.dependencies.get_settings")
    def test_client_is_a_singleton(self, mock_settings):
        mock_settings.return_value = _settings()
        self.assertIs(get_db_client(), get_db_client())


if __name__ == "__main__":
    unittest.main()
