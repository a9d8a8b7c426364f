"""
Shared fixtures.

Key generation is slow, so session-scoped pairs are generated once at the
smallest accepted size and rewrapped per test with from_raw_material().
"""

import pytest

from securekey import InMemorySecureStore, KeyPairFactory
from securekey.common.config import MIN_KEY_SIZE


@pytest.fixture(scope="session")
def engine_factory():
    """Factory without a store, for generating shared material."""
    return KeyPairFactory()


@pytest.fixture(scope="session")
def key_pair(engine_factory):
    """An unpersisted key pair without identifier or store."""
    return engine_factory.generate(None, MIN_KEY_SIZE)


@pytest.fixture(scope="session")
def other_key_pair(engine_factory):
    """A second, unrelated key pair."""
    return engine_factory.generate(None, MIN_KEY_SIZE)


@pytest.fixture
def store():
    return InMemorySecureStore()


@pytest.fixture
def factory(store):
    return KeyPairFactory(store=store)


@pytest.fixture
def stored_candidate(factory, key_pair):
    """Key pair bound to the test store under 'device-1', not yet persisted."""
    return factory.from_raw_material(
        "device-1",
        key_pair.private_key_material,
        key_pair.public_key_material,
        key_pair.key_size_bits,
    )
