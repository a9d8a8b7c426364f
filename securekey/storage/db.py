"""
MySQL Secure Store

Stores key pair material in a ``key_pairs`` table keyed by identifier.
The primary key enforces the no-overwrite rule; the table should live in
a database whose access is restricted to the key-owning service.

Identifiers are VARBINARY so lookups compare bytes exactly: no case
folding and no trailing-space padding, matching InMemorySecureStore.
"""

import logging
from typing import Optional

import mysql.connector
from pydantic import ValidationError

from securekey.common.config import get_db_config
from securekey.common.exceptions import NotFoundError, PersistenceError
from securekey.storage.base import SecureStore, StoredKeyPair

logger = logging.getLogger(__name__)

# Width of the identifier column, in UTF-8 bytes
MAX_IDENTIFIER_BYTES = 255


class MySQLSecureStore(SecureStore):
    """
    Secure store backed by MySQL.

    A new connection is opened for each operation, so one instance can be
    shared between threads.
    """

    def __init__(self, db_config: Optional[dict] = None):
        """
        Args:
            db_config: Keyword arguments for mysql.connector.connect();
                defaults to the DB_* environment settings
        """
        self.db_config = db_config if db_config is not None else get_db_config()

    def get_db_connection(self):
        """
        Create and return a MySQL database connection.

        Returns:
            MySQL connection object

        Raises:
            PersistenceError: If connection fails
        """
        try:
            return mysql.connector.connect(**self.db_config)
        except mysql.connector.Error as e:
            raise PersistenceError(f"Database connection failed: {e}") from e

    def init_db(self):
        """
        Initialize database schema.
        Creates the key_pairs table if it doesn't exist.
        """
        conn = None
        try:
            conn = self.get_db_connection()
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS key_pairs (
                    identifier VARBINARY(255) PRIMARY KEY,
                    key_size_bits INT UNSIGNED NOT NULL,
                    public_key BLOB NOT NULL,
                    private_key BLOB NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci
            """)

            conn.commit()
            logger.info("key_pairs table ready in database '%s'", self.db_config.get('database'))

        except mysql.connector.Error as e:
            raise PersistenceError(f"Database initialization failed: {e}") from e

        finally:
            if conn:
                conn.close()

    def exists(self, identifier: str) -> bool:
        conn = None
        try:
            conn = self.get_db_connection()
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM key_pairs WHERE identifier = %s", (identifier,))
            return cursor.fetchone() is not None

        except mysql.connector.Error as e:
            raise PersistenceError(f"Key pair existence check failed: {e}") from e

        finally:
            if conn:
                conn.close()

    def save(self, record: StoredKeyPair) -> bool:
        # Over-long values would be truncated by a non-strict server
        if len(record.identifier.encode("utf-8")) > MAX_IDENTIFIER_BYTES:
            raise PersistenceError(
                f"Identifier exceeds {MAX_IDENTIFIER_BYTES} UTF-8 bytes"
            )

        conn = None
        try:
            conn = self.get_db_connection()
            cursor = conn.cursor()

            cursor.execute(
                "INSERT INTO key_pairs (identifier, key_size_bits, public_key, private_key) "
                "VALUES (%s, %s, %s, %s)",
                (record.identifier, record.key_size_bits, record.public_key, record.private_key)
            )

            conn.commit()
            return True

        except mysql.connector.IntegrityError as e:
            raise PersistenceError(
                f"A key pair is already stored under '{record.identifier}'"
            ) from e

        except mysql.connector.Error as e:
            raise PersistenceError(f"Saving key pair failed: {e}") from e

        finally:
            if conn:
                conn.close()

    def load(self, identifier: str) -> StoredKeyPair:
        conn = None
        try:
            conn = self.get_db_connection()
            cursor = conn.cursor()

            cursor.execute(
                "SELECT key_size_bits, public_key, private_key FROM key_pairs WHERE identifier = %s",
                (identifier,)
            )
            row = cursor.fetchone()

        except mysql.connector.Error as e:
            raise PersistenceError(f"Loading key pair failed: {e}") from e

        finally:
            if conn:
                conn.close()

        if row is None:
            raise NotFoundError(f"No key pair stored under '{identifier}'")

        key_size_bits, public_key, private_key = row
        try:
            return StoredKeyPair(
                identifier=identifier,
                key_size_bits=key_size_bits,
                public_key=bytes(public_key),
                private_key=bytes(private_key),
            )
        except (ValidationError, TypeError) as e:
            raise PersistenceError(f"Stored row for '{identifier}' is corrupt: {e}") from e


# CLI for database management
if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Database management for SecureKey")
    parser.add_argument("--init", action="store_true", help="Initialize database schema")
    parser.add_argument("--exists", metavar="IDENTIFIER", help="Check whether a key pair is stored")

    args = parser.parse_args()
    store = MySQLSecureStore()

    if args.init:
        print("[*] Initializing database...")
        store.init_db()
        print("[✓] Database initialized successfully")

    elif args.exists:
        try:
            found = store.exists(args.exists)
            print(f"[{'✓' if found else '✗'}] '{args.exists}' {'is' if found else 'is not'} stored")
        except PersistenceError as e:
            print(f"[✗] Lookup failed: {e}")

    else:
        parser.print_help()
