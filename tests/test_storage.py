"""
Unit tests for the secure stores.

Tests:
- StoredKeyPair validation
- InMemorySecureStore no-overwrite semantics
- MySQLSecureStore against a mocked connector
"""

from unittest.mock import MagicMock, patch

import mysql.connector
import pytest
from pydantic import ValidationError

from securekey.common.exceptions import NotFoundError, PersistenceError
from securekey.storage import InMemorySecureStore, MySQLSecureStore, StoredKeyPair


def make_record(identifier="device-1", public_key=b"public", private_key=b"private"):
    return StoredKeyPair(
        identifier=identifier,
        key_size_bits=2048,
        public_key=public_key,
        private_key=private_key,
    )


class TestStoredKeyPair:
    """Tests for the stored record model."""

    def test_valid_record(self):
        record = make_record()
        assert record.identifier == "device-1"
        assert record.private_key == b"private"

    def test_empty_identifier_rejected(self):
        with pytest.raises(ValidationError):
            make_record(identifier="")

    def test_non_positive_size_rejected(self):
        with pytest.raises(ValidationError):
            StoredKeyPair(identifier="x", key_size_bits=0, public_key=b"p", private_key=b"k")

    def test_empty_material_rejected(self):
        with pytest.raises(ValidationError):
            make_record(private_key=b"")

    def test_repr_hides_material(self):
        text = repr(make_record(private_key=b"top-secret"))
        assert "top-secret" not in text
        assert "device-1" in text


class TestInMemorySecureStore:
    """Tests for the in-memory store."""

    def test_save_and_load(self):
        store = InMemorySecureStore()
        assert store.exists("device-1") is False

        assert store.save(make_record()) is True

        assert store.exists("device-1") is True
        assert store.load("device-1") == make_record()

    def test_no_overwrite(self):
        store = InMemorySecureStore()
        store.save(make_record())

        with pytest.raises(PersistenceError):
            store.save(make_record(public_key=b"other"))
        assert store.load("device-1").public_key == b"public"

    def test_load_missing(self):
        with pytest.raises(NotFoundError):
            InMemorySecureStore().load("missing")

    def test_loaded_record_is_a_copy(self):
        store = InMemorySecureStore()
        store.save(make_record())

        loaded = store.load("device-1")
        loaded.public_key = b"changed"

        assert store.load("device-1").public_key == b"public"


@pytest.fixture
def mysql_conn():
    """Patch mysql.connector.connect and yield (connection, cursor) mocks."""
    conn = MagicMock()
    cursor = MagicMock()
    conn.cursor.return_value = cursor

    with patch.object(mysql.connector, "connect", return_value=conn) as connect:
        connect.conn = conn
        connect.cursor = cursor
        yield connect


class TestMySQLSecureStore:
    """Tests for the MySQL store with a mocked connector."""

    def test_uses_configured_connection(self, mysql_conn):
        store = MySQLSecureStore({"host": "db", "database": "keys"})
        mysql_conn.cursor.fetchone.return_value = None

        store.exists("device-1")

        mysql_conn.assert_called_once_with(host="db", database="keys")
        mysql_conn.conn.close.assert_called_once()

    def test_init_db_creates_table(self, mysql_conn):
        MySQLSecureStore({}).init_db()

        sql = mysql_conn.cursor.execute.call_args[0][0]
        assert "CREATE TABLE IF NOT EXISTS key_pairs" in sql
        # Exact, case- and space-sensitive identifier matching
        assert "identifier VARBINARY(255) PRIMARY KEY" in sql
        assert "identifier VARCHAR" not in sql
        mysql_conn.conn.commit.assert_called_once()

    def test_exists(self, mysql_conn):
        store = MySQLSecureStore({})

        mysql_conn.cursor.fetchone.return_value = (1,)
        assert store.exists("device-1") is True

        mysql_conn.cursor.fetchone.return_value = None
        assert store.exists("device-1") is False

    def test_save_inserts_and_commits(self, mysql_conn):
        assert MySQLSecureStore({}).save(make_record()) is True

        sql, params = mysql_conn.cursor.execute.call_args[0]
        assert sql.startswith("INSERT INTO key_pairs")
        assert params == ("device-1", 2048, b"public", b"private")
        mysql_conn.conn.commit.assert_called_once()
        mysql_conn.conn.close.assert_called_once()

    def test_over_long_identifier_rejected(self, mysql_conn):
        """Identifiers that would not fit the column never reach the server."""
        store = MySQLSecureStore({})

        with pytest.raises(PersistenceError):
            store.save(make_record(identifier="k" * 256))
        with pytest.raises(PersistenceError):
            store.save(make_record(identifier="\u00e9" * 128))
        mysql_conn.assert_not_called()

    def test_identifier_at_column_width(self, mysql_conn):
        assert MySQLSecureStore({}).save(make_record(identifier="k" * 255)) is True

    def test_duplicate_save(self, mysql_conn):
        mysql_conn.cursor.execute.side_effect = mysql.connector.IntegrityError("Duplicate entry")

        with pytest.raises(PersistenceError, match="already stored"):
            MySQLSecureStore({}).save(make_record())
        mysql_conn.conn.commit.assert_not_called()
        mysql_conn.conn.close.assert_called_once()

    def test_load(self, mysql_conn):
        mysql_conn.cursor.fetchone.return_value = (2048, bytearray(b"public"), bytearray(b"private"))

        record = MySQLSecureStore({}).load("device-1")

        assert record == make_record()
        assert isinstance(record.public_key, bytes)

    def test_load_missing(self, mysql_conn):
        mysql_conn.cursor.fetchone.return_value = None

        with pytest.raises(NotFoundError):
            MySQLSecureStore({}).load("device-1")

    def test_load_corrupt_row(self, mysql_conn):
        mysql_conn.cursor.fetchone.return_value = (0, b"public", b"private")

        with pytest.raises(PersistenceError):
            MySQLSecureStore({}).load("device-1")

    def test_connection_failure(self):
        with patch.object(mysql.connector, "connect", side_effect=mysql.connector.Error("refused")):
            store = MySQLSecureStore({})
            with pytest.raises(PersistenceError):
                store.exists("device-1")
            with pytest.raises(PersistenceError):
                store.save(make_record())
            with pytest.raises(PersistenceError):
                store.load("device-1")
