"""
RSA Key Pair

A KeyPair binds an identifier, a key size and matched public/private key
material. Signatures are generated and verified using SHA-256 with PKCS#1
v1.5 padding; encryption uses PKCS#1 v1.5 padding.

Instances are immutable after construction, apart from the flag recording
that they were written to the secure store. The key material is
authoritative: the parsed key handles are derived from it when the
instance is built and serve only as a cache.
"""

import logging
from functools import cached_property
from typing import Optional

from securekey.common.exceptions import InvalidKeyMaterialError, PersistenceError
from securekey.common.utils import constant_time_compare, is_blank, sha256_hex
from securekey.crypto.engine import DEFAULT_ENGINE, RSAEngine, max_plaintext_size
from securekey.storage.base import SecureStore, StoredKeyPair

logger = logging.getLogger(__name__)


class KeyPair:
    """
    An RSA key pair with its cryptographic operations.

    KeyPairFactory is the usual way to obtain instances. Constructing one
    directly applies the same checks: both materials must parse as RSA,
    belong together and have a modulus of key_size_bits.
    """

    def __init__(
        self,
        identifier: Optional[str],
        key_size_bits: int,
        public_key_material: bytes,
        private_key_material: bytes,
        store: Optional[SecureStore] = None,
        engine: Optional[RSAEngine] = None,
        persisted: bool = False,
    ):
        """
        Raises:
            InvalidKeyMaterialError: If either material does not parse, the
                two do not correspond, or the modulus is not key_size_bits
        """
        if isinstance(key_size_bits, bool) or not isinstance(key_size_bits, int) or key_size_bits <= 0:
            raise InvalidKeyMaterialError(f"Invalid key size: {key_size_bits!r}")

        engine = engine or DEFAULT_ENGINE
        private_key = engine.load_private_key(private_key_material)
        public_key = engine.load_public_key(public_key_material)

        if not engine.keys_match(private_key, public_key):
            raise InvalidKeyMaterialError("Public and private key do not form a pair")
        if private_key.key_size != key_size_bits:
            raise InvalidKeyMaterialError(
                f"Key material is {private_key.key_size} bits, expected {key_size_bits}"
            )

        self._identifier = None if is_blank(identifier) else identifier
        self._key_size_bits = key_size_bits
        self._public_key_material = bytes(public_key_material)
        self._private_key_material = bytes(private_key_material)
        self._public_key_handle = public_key
        self._private_key_handle = private_key
        self._store = store
        self._engine = engine
        self._persisted = persisted

    # -- attributes --------------------------------------------------------

    @property
    def identifier(self) -> Optional[str]:
        """Identifier within the secure store; None if never meant to be stored."""
        return self._identifier

    @property
    def key_size_bits(self) -> int:
        return self._key_size_bits

    @property
    def public_key_material(self) -> bytes:
        return self._public_key_material

    @property
    def private_key_material(self) -> bytes:
        return self._private_key_material

    @property
    def store(self) -> Optional[SecureStore]:
        return self._store

    @property
    def is_persisted(self) -> bool:
        """True once this instance was saved to, or loaded from, the store."""
        return self._persisted

    @property
    def public_key_handle(self):
        """Parsed public key, derived from the material."""
        return self._public_key_handle

    @property
    def private_key_handle(self):
        """Parsed private key, derived from the material."""
        return self._private_key_handle

    @cached_property
    def fingerprint(self) -> str:
        """Hex SHA-256 of the public key material."""
        return sha256_hex(self._public_key_material)

    @property
    def max_plaintext_size(self) -> int:
        """Largest plaintext encrypt() accepts, in bytes."""
        return max_plaintext_size(self._key_size_bits)

    # -- encryption --------------------------------------------------------

    def encrypt(self, plaintext: bytes) -> bytes:
        """
        Encrypt data under the public key.

        Args:
            plaintext: At most max_plaintext_size bytes; larger payloads must
                be chunked by the caller

        Returns:
            Ciphertext that only the matching private key decrypts

        Raises:
            EncryptionError: If the input is not bytes or is oversized
        """
        return self._engine.encrypt(self._public_key_handle, plaintext)

    def decrypt(self, ciphertext: bytes) -> bytes:
        """
        Decrypt data with the private key.

        Ciphertext produced under a different key is not guaranteed to raise:
        PKCS#1 v1.5 implicit rejection may yield unrelated bytes instead.

        Raises:
            DecryptionError: On malformed ciphertext or padding failure
        """
        return self._engine.decrypt(self._private_key_handle, ciphertext)

    # -- signatures --------------------------------------------------------

    def sign(self, data: bytes) -> bytes:
        """
        Generate a signature over SHA-256(data) with PKCS#1 v1.5 padding.

        Signing is deterministic: the same key and data give the same bytes.

        Raises:
            SigningError: If the data is not bytes or the engine fails
        """
        return self._engine.sign_sha256_pkcs1(self._private_key_handle, data)

    def verify(self, signature: bytes, data: bytes) -> bool:
        """
        Validate a PKCS#1 v1.5 signature over SHA-256(data).

        Returns:
            True only if the signature matches; False for any cryptographic
            mismatch (wrong data, altered or truncated signature)

        Raises:
            VerificationError: If verification could not run at all
        """
        return self._engine.verify_sha256_pkcs1(self._public_key_handle, signature, data)

    # -- persistence -------------------------------------------------------

    def to_record(self) -> StoredKeyPair:
        """Build the record a secure store persists for this key pair."""
        if self._identifier is None:
            raise PersistenceError("Key pair has no identifier")
        return StoredKeyPair(
            identifier=self._identifier,
            key_size_bits=self._key_size_bits,
            public_key=self._public_key_material,
            private_key=self._private_key_material,
        )

    def persist(self) -> bool:
        """
        Save the key pair to its secure store.

        Returns:
            True on success

        Raises:
            PersistenceError: If the identifier is empty, no store is attached,
                an entry already exists under the identifier, or the store fails
        """
        if self._identifier is None:
            raise PersistenceError("Cannot persist a key pair without an identifier")
        if self._store is None:
            raise PersistenceError(f"No secure store attached to key pair '{self._identifier}'")

        if not self._store.save(self.to_record()):
            raise PersistenceError(f"Secure store refused key pair '{self._identifier}'")

        self._persisted = True
        logger.info(
            "Persisted key pair '%s' (%d bits, fingerprint %s)",
            self._identifier, self._key_size_bits, self.fingerprint[:16]
        )
        return True

    def exists_in_store(self) -> bool:
        """Return True if the store holds an entry under this identifier."""
        if self._identifier is None or self._store is None:
            return False
        return self._store.exists(self._identifier)

    def with_identifier(self, identifier: str) -> "KeyPair":
        """
        Return an unpersisted copy of this key pair under another identifier.
        """
        return KeyPair(
            identifier,
            self._key_size_bits,
            self._public_key_material,
            self._private_key_material,
            store=self._store,
            engine=self._engine,
        )

    # -- value semantics ---------------------------------------------------

    def __eq__(self, other) -> bool:
        if not isinstance(other, KeyPair):
            return NotImplemented
        return (
            self._identifier == other._identifier
            and self._key_size_bits == other._key_size_bits
            and self._public_key_material == other._public_key_material
            and constant_time_compare(self._private_key_material, other._private_key_material)
        )

    def __hash__(self) -> int:
        return hash((self._identifier, self._key_size_bits, self._public_key_material))

    def __repr__(self) -> str:
        return (
            f"KeyPair(identifier={self._identifier!r}, "
            f"key_size_bits={self._key_size_bits}, "
            f"fingerprint={self.fingerprint[:16]!r})"
        )
