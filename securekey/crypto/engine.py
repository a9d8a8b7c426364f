"""
RSA Engine

Thin adapter over the ``cryptography`` library providing every raw RSA
primitive the key pair needs:

- Key pair generation and DER/PEM (de)serialization
- Encryption/decryption with PKCS#1 v1.5 padding
- Signatures over SHA-256(data) with PKCS#1 v1.5 padding

Library exceptions are translated into SecureKey errors here, so nothing
above this module handles ``cryptography`` exception types.
"""

import hashlib
import logging
from typing import Tuple

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed

from securekey.common.config import PKCS1_PADDING_OVERHEAD, PUBLIC_EXPONENT
from securekey.common.exceptions import (
    DecryptionError,
    EncryptionError,
    InvalidKeyMaterialError,
    KeyGenerationError,
    SigningError,
    VerificationError,
)

logger = logging.getLogger(__name__)

_BYTES_TYPES = (bytes, bytearray)
_PARSE_ERRORS = (ValueError, TypeError, UnsupportedAlgorithm)


def modulus_size_bytes(key_size_bits: int) -> int:
    """Length in bytes of a modulus of the given bit size."""
    return (key_size_bits + 7) // 8


def max_plaintext_size(key_size_bits: int) -> int:
    """
    Largest plaintext a single PKCS#1 v1.5 encryption can carry.

    Args:
        key_size_bits: RSA modulus size in bits

    Returns:
        Maximum payload in bytes
    """
    return modulus_size_bytes(key_size_bits) - PKCS1_PADDING_OVERHEAD


def _is_pem(material: bytes) -> bool:
    return bytes(material).lstrip().startswith(b"-----BEGIN")


class RSAEngine:
    """
    Stateless RSA primitive provider.

    Operations take parsed key handles; the loaders turn key material into
    handles. Safe to share between threads.
    """

    def __init__(self, public_exponent: int = PUBLIC_EXPONENT):
        self.public_exponent = public_exponent

    # -- key generation and serialization ---------------------------------

    def generate_key_pair(self, bits: int) -> Tuple[bytes, bytes]:
        """
        Generate a fresh RSA key pair.

        Args:
            bits: Modulus size in bits

        Returns:
            Tuple of (public_material, private_material)
            public_material: DER SubjectPublicKeyInfo
            private_material: DER PKCS#8, unencrypted

        Raises:
            KeyGenerationError: If the engine rejects the parameters
        """
        try:
            private_key = rsa.generate_private_key(
                public_exponent=self.public_exponent,
                key_size=bits,
            )
        except (ValueError, TypeError) as e:
            logger.debug("RSA key generation rejected for %s bits: %s", bits, e)
            raise KeyGenerationError(f"Key generation failed: {e}") from e

        return (
            self.serialize_public_key(private_key.public_key()),
            self.serialize_private_key(private_key),
        )

    @staticmethod
    def serialize_public_key(public_key: rsa.RSAPublicKey) -> bytes:
        """Encode a public key as DER SubjectPublicKeyInfo."""
        return public_key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    @staticmethod
    def serialize_private_key(private_key: rsa.RSAPrivateKey) -> bytes:
        """Encode a private key as unencrypted DER PKCS#8."""
        return private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def load_public_key(self, material: bytes) -> rsa.RSAPublicKey:
        """
        Parse public key material.

        Accepts DER (SubjectPublicKeyInfo or PKCS#1 RSAPublicKey) and PEM.

        Raises:
            InvalidKeyMaterialError: If the bytes are not an RSA public key
        """
        if not isinstance(material, _BYTES_TYPES) or not material:
            raise InvalidKeyMaterialError("Public key material must be non-empty bytes")

        try:
            if _is_pem(material):
                public_key = serialization.load_pem_public_key(bytes(material))
            else:
                public_key = serialization.load_der_public_key(bytes(material))
        except _PARSE_ERRORS as e:
            raise InvalidKeyMaterialError(f"Unable to parse public key: {e}") from e

        if not isinstance(public_key, rsa.RSAPublicKey):
            raise InvalidKeyMaterialError(
                f"Public key is not RSA ({type(public_key).__name__})"
            )
        return public_key

    def load_private_key(self, material: bytes) -> rsa.RSAPrivateKey:
        """
        Parse private key material.

        Accepts unencrypted DER (PKCS#8 or traditional PKCS#1) and PEM.

        Raises:
            InvalidKeyMaterialError: If the bytes are not an RSA private key
        """
        if not isinstance(material, _BYTES_TYPES) or not material:
            raise InvalidKeyMaterialError("Private key material must be non-empty bytes")

        try:
            if _is_pem(material):
                private_key = serialization.load_pem_private_key(bytes(material), password=None)
            else:
                private_key = serialization.load_der_private_key(bytes(material), password=None)
        except _PARSE_ERRORS as e:
            raise InvalidKeyMaterialError(f"Unable to parse private key: {e}") from e

        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise InvalidKeyMaterialError(
                f"Private key is not RSA ({type(private_key).__name__})"
            )
        return private_key

    @staticmethod
    def keys_match(private_key: rsa.RSAPrivateKey, public_key: rsa.RSAPublicKey) -> bool:
        """Check that a private and public key share modulus and exponent."""
        return private_key.public_key().public_numbers() == public_key.public_numbers()

    # -- encryption --------------------------------------------------------

    def encrypt(self, public_key: rsa.RSAPublicKey, plaintext: bytes) -> bytes:
        """
        Encrypt plaintext with PKCS#1 v1.5 padding.

        Args:
            public_key: RSA public key handle
            plaintext: At most max_plaintext_size(key size) bytes

        Returns:
            Ciphertext, exactly one modulus long

        Raises:
            EncryptionError: If the input is not bytes, too long, or rejected
        """
        if not isinstance(plaintext, _BYTES_TYPES):
            raise EncryptionError(
                f"Plaintext must be bytes, got {type(plaintext).__name__}"
            )

        limit = max_plaintext_size(public_key.key_size)
        if len(plaintext) > limit:
            raise EncryptionError(
                f"Plaintext is {len(plaintext)} bytes; "
                f"a {public_key.key_size}-bit key carries at most {limit}"
            )

        try:
            return public_key.encrypt(bytes(plaintext), padding.PKCS1v15())
        except (ValueError, TypeError) as e:
            logger.debug("RSA encryption rejected: %s", e)
            raise EncryptionError(f"Encryption failed: {e}") from e

    def decrypt(self, private_key: rsa.RSAPrivateKey, ciphertext: bytes) -> bytes:
        """
        Decrypt PKCS#1 v1.5 ciphertext.

        Raises:
            DecryptionError: If the ciphertext is malformed or does not decrypt
        """
        if not isinstance(ciphertext, _BYTES_TYPES):
            raise DecryptionError(
                f"Ciphertext must be bytes, got {type(ciphertext).__name__}"
            )

        expected = modulus_size_bytes(private_key.key_size)
        if len(ciphertext) != expected:
            raise DecryptionError(
                f"Ciphertext must be {expected} bytes, got {len(ciphertext)}"
            )

        try:
            return private_key.decrypt(bytes(ciphertext), padding.PKCS1v15())
        except (ValueError, TypeError) as e:
            # No detail: padding oracles live in error messages
            logger.debug("RSA decryption failed")
            raise DecryptionError("Decryption failed") from e

    # -- signatures --------------------------------------------------------

    def sign_sha256_pkcs1(self, private_key: rsa.RSAPrivateKey, data: bytes) -> bytes:
        """
        Sign data using RSA private key.

        The signature is computed over SHA-256(data) using PKCS#1 v1.5 padding.
        The digest is passed as prehashed so it is not hashed a second time.

        Args:
            private_key: RSA private key handle
            data: Data to sign (bytes)

        Returns:
            Raw signature bytes

        Raises:
            SigningError: If the data is not bytes or the key is unusable
        """
        if not isinstance(data, _BYTES_TYPES):
            raise SigningError(f"Data must be bytes, got {type(data).__name__}")

        # Compute SHA-256 hash of data
        digest = hashlib.sha256(data).digest()

        try:
            return private_key.sign(
                digest,
                padding.PKCS1v15(),
                Prehashed(hashes.SHA256()),
            )
        except _PARSE_ERRORS as e:
            logger.debug("RSA signing failed: %s", e)
            raise SigningError(f"Signing failed: {e}") from e

    def verify_sha256_pkcs1(
        self,
        public_key: rsa.RSAPublicKey,
        signature: bytes,
        data: bytes
    ) -> bool:
        """
        Verify RSA signature.

        Args:
            public_key: RSA public key handle
            signature: Raw signature bytes
            data: Original data (bytes)

        Returns:
            True if signature is valid, False otherwise

        Raises:
            VerificationError: If verification could not be performed
        """
        if not isinstance(signature, _BYTES_TYPES):
            raise VerificationError(
                f"Signature must be bytes, got {type(signature).__name__}"
            )
        if not isinstance(data, _BYTES_TYPES):
            raise VerificationError(f"Data must be bytes, got {type(data).__name__}")

        digest = hashlib.sha256(data).digest()

        try:
            public_key.verify(
                bytes(signature),
                digest,
                padding.PKCS1v15(),
                Prehashed(hashes.SHA256()),
            )
            return True

        except InvalidSignature:
            return False
        except _PARSE_ERRORS as e:
            logger.debug("RSA verification could not run: %s", e)
            raise VerificationError(f"Verification failed to run: {e}") from e


# Shared engine instance
DEFAULT_ENGINE = RSAEngine()
