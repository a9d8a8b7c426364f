"""
RSA key pair core for SecureKey.

This package provides:
- RSAEngine: raw RSA primitives over the cryptography library
- KeyPair: an RSA key pair and its encrypt/decrypt/sign/verify operations
- KeyPairFactory: generate, load and from-raw-material construction
"""

from .engine import RSAEngine, DEFAULT_ENGINE, max_plaintext_size
from .keypair import KeyPair
from .factory import KeyPairFactory

__all__ = [
    'RSAEngine',
    'DEFAULT_ENGINE',
    'max_plaintext_size',
    'KeyPair',
    'KeyPairFactory',
]
