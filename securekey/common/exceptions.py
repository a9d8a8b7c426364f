"""
Custom exceptions for SecureKey.

Every fallible key pair operation raises a subclass of KeyPairError.
A failed signature check is not an error: verify() returns False.
"""


class KeyPairError(Exception):
    """Base exception for key pair errors."""
    pass


class InvalidArgumentError(KeyPairError, ValueError):
    """An argument was missing or malformed (e.g. empty identifier)."""
    pass


class KeyGenerationError(KeyPairError):
    """Key pair generation failed or the key size was rejected."""
    pass


class EncryptionError(KeyPairError):
    """Encryption failed."""
    pass


class DecryptionError(KeyPairError):
    """Decryption failed."""
    pass


class SigningError(KeyPairError):
    """Signature generation failed."""
    pass


class VerificationError(KeyPairError):
    """Signature verification could not be performed."""
    pass


class NotFoundError(KeyPairError):
    """No key pair is stored under the requested identifier."""
    pass


class InvalidKeyMaterialError(KeyPairError):
    """Key material is malformed, not RSA, mismatched or wrongly sized."""
    pass


class PersistenceError(KeyPairError):
    """Secure store operation failed."""
    pass
