"""
Key Pair Factory

Three ways to obtain a KeyPair:

1. generate()          - fresh RSA key pair from the engine
2. load()              - key material previously saved in the secure store
3. from_raw_material() - key bytes the caller already holds

Each path either returns a fully validated KeyPair or raises; none of them
writes to the store.
"""

import logging
from typing import Optional

from securekey.common.config import DEFAULT_KEY_SIZE, MAX_KEY_SIZE, MIN_KEY_SIZE
from securekey.common.exceptions import (
    InvalidArgumentError,
    InvalidKeyMaterialError,
    KeyGenerationError,
    NotFoundError,
    PersistenceError,
)
from securekey.common.utils import is_blank
from securekey.crypto.engine import DEFAULT_ENGINE, RSAEngine
from securekey.crypto.keypair import KeyPair
from securekey.storage.base import SecureStore

logger = logging.getLogger(__name__)


def _check_identifier(identifier, required: bool) -> Optional[str]:
    if identifier is not None and not isinstance(identifier, str):
        raise InvalidArgumentError(
            f"Identifier must be a string, got {type(identifier).__name__}"
        )
    if required and is_blank(identifier):
        raise InvalidArgumentError("Identifier must not be empty")
    return identifier


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class KeyPairFactory:
    """
    Builds KeyPair instances bound to one secure store and engine.
    """

    def __init__(self, store: Optional[SecureStore] = None, engine: Optional[RSAEngine] = None):
        """
        Args:
            store: Secure store used by load() and by KeyPair.persist()
            engine: RSA engine; defaults to the shared engine
        """
        self.store = store
        self.engine = engine or DEFAULT_ENGINE

    def generate(self, identifier: Optional[str], key_size_bits: int = DEFAULT_KEY_SIZE) -> KeyPair:
        """
        Generate a new key pair. The result is not persisted.

        Args:
            identifier: Identifier to persist under later, or None
            key_size_bits: Modulus size in bits; 2048 is recommended

        Raises:
            InvalidArgumentError: If the identifier is not a string
            KeyGenerationError: If the size is out of range or generation fails
        """
        identifier = _check_identifier(identifier, required=False)

        if not _is_int(key_size_bits):
            raise KeyGenerationError(
                f"Key size must be an integer, got {type(key_size_bits).__name__}"
            )
        if key_size_bits < MIN_KEY_SIZE or key_size_bits > MAX_KEY_SIZE:
            raise KeyGenerationError(
                f"Key size must be between {MIN_KEY_SIZE} and {MAX_KEY_SIZE} bits, "
                f"got {key_size_bits}"
            )

        public_material, private_material = self.engine.generate_key_pair(key_size_bits)

        key_pair = KeyPair(
            identifier,
            key_size_bits,
            public_material,
            private_material,
            store=self.store,
            engine=self.engine,
        )
        logger.info(
            "Generated %d-bit key pair '%s' (fingerprint %s)",
            key_size_bits, identifier, key_pair.fingerprint[:16]
        )
        return key_pair

    def load(self, identifier: str) -> KeyPair:
        """
        Retrieve an existing key pair from the secure store.

        Raises:
            InvalidArgumentError: If the identifier is empty
            PersistenceError: If the factory has no store or the store fails
            NotFoundError: If nothing is stored under the identifier
            InvalidKeyMaterialError: If the stored bytes are not a valid,
                matching pair of the recorded size
        """
        identifier = _check_identifier(identifier, required=True)
        if self.store is None:
            raise PersistenceError("Factory has no secure store to load from")

        record = self.store.load(identifier)

        try:
            key_pair = self._build(
                identifier,
                record.private_key,
                record.public_key,
                record.key_size_bits,
                persisted=True,
            )
        except InvalidKeyMaterialError as e:
            logger.debug("Stored key pair '%s' failed validation", identifier)
            raise InvalidKeyMaterialError(f"Stored key pair '{identifier}' is invalid: {e}") from e

        logger.info(
            "Loaded %d-bit key pair '%s' (fingerprint %s)",
            key_pair.key_size_bits, identifier, key_pair.fingerprint[:16]
        )
        return key_pair

    def from_raw_material(
        self,
        identifier: Optional[str],
        private_key_material: bytes,
        public_key_material: bytes,
        key_size_bits: int
    ) -> KeyPair:
        """
        Initialize a key pair from key data without touching the store.

        Raises:
            InvalidArgumentError: If the identifier is not a string
            InvalidKeyMaterialError: If either material does not parse, the
                two do not correspond, or the size differs from key_size_bits
        """
        identifier = _check_identifier(identifier, required=False)
        return self._build(identifier, private_key_material, public_key_material, key_size_bits)

    def load_or_generate(self, identifier: str, key_size_bits: int = DEFAULT_KEY_SIZE) -> KeyPair:
        """
        Return the stored key pair for identifier, generating and persisting
        one first if the store has none.
        """
        identifier = _check_identifier(identifier, required=True)
        try:
            return self.load(identifier)
        except NotFoundError:
            pass

        key_pair = self.generate(identifier, key_size_bits)
        key_pair.persist()
        return key_pair

    def _build(
        self,
        identifier: Optional[str],
        private_key_material: bytes,
        public_key_material: bytes,
        key_size_bits: int,
        persisted: bool = False
    ) -> KeyPair:
        # KeyPair validates parsing, pairing and modulus size
        return KeyPair(
            identifier,
            key_size_bits,
            public_key_material,
            private_key_material,
            store=self.store,
            engine=self.engine,
            persisted=persisted,
        )
