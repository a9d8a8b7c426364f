"""
Utility functions for SecureKey.
"""

import base64
import hashlib
import hmac


def sha256_hex(data: bytes) -> str:
    """
    Compute SHA-256 hash and return as hex string.

    Args:
        data: Data to hash

    Returns:
        Hex-encoded SHA-256 hash
    """
    return hashlib.sha256(data).hexdigest()


def b64encode(data: bytes) -> str:
    """
    Base64 encode bytes to string.

    Args:
        data: Bytes to encode

    Returns:
        Base64-encoded string
    """
    return base64.b64encode(data).decode('ascii')


def b64decode(data: str) -> bytes:
    """
    Base64 decode string to bytes.

    Args:
        data: Base64-encoded string

    Returns:
        Decoded bytes

    Raises:
        binascii.Error: If the input is not valid base64
    """
    return base64.b64decode(data, validate=True)


def constant_time_compare(a: bytes, b: bytes) -> bool:
    """
    Constant-time comparison to prevent timing attacks.

    Args:
        a: First bytes object
        b: Second bytes object

    Returns:
        True if equal, False otherwise
    """
    return hmac.compare_digest(a, b)


def is_blank(value) -> bool:
    """Return True for None and for strings that are empty after stripping."""
    return value is None or (isinstance(value, str) and not value.strip())
