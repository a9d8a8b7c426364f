"""
SecureKey

RSA key pair management for a messaging client:
- Key pair generation (RSA, public exponent 65537)
- PKCS#1 v1.5 encryption/decryption
- SHA-256 + PKCS#1 v1.5 digital signatures
- Persistence to an injected secure store (in-memory or MySQL)
"""

from securekey.crypto import KeyPair, KeyPairFactory, RSAEngine
from securekey.common.exceptions import *
from securekey.storage import SecureStore, StoredKeyPair, InMemorySecureStore

__version__ = "1.0.0"

__all__ = [
    'KeyPair',
    'KeyPairFactory',
    'RSAEngine',
    'SecureStore',
    'StoredKeyPair',
    'InMemorySecureStore',
    'KeyPairError',
    'InvalidArgumentError',
    'KeyGenerationError',
    'EncryptionError',
    'DecryptionError',
    'SigningError',
    'VerificationError',
    'NotFoundError',
    'InvalidKeyMaterialError',
    'PersistenceError',
]
