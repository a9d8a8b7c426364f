"""
Secure stores for SecureKey key material.

Includes:
- InMemorySecureStore for tests and ephemeral clients
- MySQLSecureStore for durable storage
"""

from .base import SecureStore, StoredKeyPair
from .memory import InMemorySecureStore
from .db import MySQLSecureStore

__all__ = [
    'SecureStore',
    'StoredKeyPair',
    'InMemorySecureStore',
    'MySQLSecureStore',
]
