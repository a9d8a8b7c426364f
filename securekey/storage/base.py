"""
Secure store contract.

A secure store durably holds key pair material keyed by identifier. It
never overwrites: saving under an identifier that is already present fails.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field


class StoredKeyPair(BaseModel):
    """Key pair material as held by a secure store."""
    identifier: str = Field(..., min_length=1, description="Unique key pair identifier")
    key_size_bits: int = Field(..., gt=0, description="RSA modulus size in bits")
    public_key: bytes = Field(..., min_length=1, description="Public key material (DER)")
    private_key: bytes = Field(..., min_length=1, description="Private key material (DER)")

    def __repr__(self) -> str:
        # Private material stays out of logs and tracebacks
        return (
            f"StoredKeyPair(identifier={self.identifier!r}, "
            f"key_size_bits={self.key_size_bits})"
        )

    __str__ = __repr__


class SecureStore(ABC):
    """Identifier-keyed storage for key pair material."""

    @abstractmethod
    def exists(self, identifier: str) -> bool:
        """
        Check whether key material is stored under an identifier.

        Raises:
            PersistenceError: If the store cannot be queried
        """

    @abstractmethod
    def save(self, record: StoredKeyPair) -> bool:
        """
        Store key material.

        Returns:
            True once the record is durably stored

        Raises:
            PersistenceError: If the identifier is already present or the
                write fails
        """

    @abstractmethod
    def load(self, identifier: str) -> StoredKeyPair:
        """
        Fetch key material.

        Raises:
            NotFoundError: If nothing is stored under the identifier
            PersistenceError: If the store cannot be read
        """
