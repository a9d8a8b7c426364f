"""
Unit tests for the RSA engine.

Tests:
- Key generation and serialization formats
- Key material parsing (DER, PEM, garbage, non-RSA)
- Interoperability of signatures with plain cryptography calls
"""

import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding

from securekey.common.exceptions import (
    DecryptionError,
    EncryptionError,
    InvalidKeyMaterialError,
    KeyGenerationError,
    SigningError,
    VerificationError,
)
from securekey.crypto.engine import RSAEngine, max_plaintext_size, modulus_size_bytes


@pytest.fixture(scope="module")
def engine():
    return RSAEngine()


class TestSizes:
    """Tests for size helpers."""

    def test_modulus_size_bytes(self):
        assert modulus_size_bytes(2048) == 256
        assert modulus_size_bytes(1025) == 129

    def test_max_plaintext_size(self):
        """PKCS#1 v1.5 leaves 11 bytes of overhead."""
        assert max_plaintext_size(2048) == 245
        assert max_plaintext_size(1024) == 117


class TestKeyMaterial:
    """Tests for generation and parsing."""

    def test_generated_material_is_der(self, engine, key_pair):
        """Generated material should parse as DER SPKI / PKCS#8."""
        public_key = serialization.load_der_public_key(key_pair.public_key_material)
        private_key = serialization.load_der_private_key(
            key_pair.private_key_material, password=None
        )
        assert public_key.key_size == key_pair.key_size_bits
        assert engine.keys_match(private_key, public_key)

    def test_engine_rejects_tiny_keys(self, engine):
        with pytest.raises(KeyGenerationError):
            engine.generate_key_pair(256)

    def test_load_pem(self, engine, key_pair):
        """PEM encodings of the same key should be accepted."""
        pem = key_pair.public_key_handle.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        loaded = engine.load_public_key(pem)
        assert loaded.public_numbers() == key_pair.public_key_handle.public_numbers()

    def test_load_pkcs1_public_der(self, engine, key_pair):
        """PKCS#1 RSAPublicKey DER is accepted as well as SPKI."""
        der = key_pair.public_key_handle.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.PKCS1,
        )
        loaded = engine.load_public_key(der)
        assert loaded.public_numbers() == key_pair.public_key_handle.public_numbers()

    @pytest.mark.parametrize("material", [b"", b"not a key", b"\x30\x82\x01\x22garbage", None, "text"])
    def test_garbage_public_material(self, engine, material):
        with pytest.raises(InvalidKeyMaterialError):
            engine.load_public_key(material)

    @pytest.mark.parametrize("material", [b"", b"not a key", None])
    def test_garbage_private_material(self, engine, material):
        with pytest.raises(InvalidKeyMaterialError):
            engine.load_private_key(material)

    def test_non_rsa_keys_rejected(self, engine):
        """EC keys parse but are not RSA."""
        ec_key = ec.generate_private_key(ec.SECP256R1())
        private_der = ec_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        public_der = ec_key.public_key().public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

        with pytest.raises(InvalidKeyMaterialError):
            engine.load_private_key(private_der)
        with pytest.raises(InvalidKeyMaterialError):
            engine.load_public_key(public_der)

    def test_encrypted_private_key_rejected(self, engine, key_pair):
        """Password-protected material cannot be used without the password."""
        encrypted = key_pair.private_key_handle.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.BestAvailableEncryption(b"secret"),
        )
        with pytest.raises(InvalidKeyMaterialError):
            engine.load_private_key(encrypted)


class TestPrimitives:
    """Tests for the raw operations."""

    def test_signature_is_standard_pkcs1_sha256(self, engine, key_pair):
        """Signatures verify with cryptography's own SHA-256/PKCS#1 v1.5 check."""
        data = b"interoperable"
        signature = engine.sign_sha256_pkcs1(key_pair.private_key_handle, data)

        key_pair.public_key_handle.verify(signature, data, padding.PKCS1v15(), hashes.SHA256())

    def test_signature_length_is_modulus_length(self, engine, key_pair):
        signature = engine.sign_sha256_pkcs1(key_pair.private_key_handle, b"x")
        assert len(signature) == modulus_size_bytes(key_pair.key_size_bits)

    def test_sign_requires_bytes(self, engine, key_pair):
        with pytest.raises(SigningError):
            engine.sign_sha256_pkcs1(key_pair.private_key_handle, "text")

    def test_verify_requires_bytes(self, engine, key_pair):
        with pytest.raises(VerificationError):
            engine.verify_sha256_pkcs1(key_pair.public_key_handle, "sig", b"data")
        with pytest.raises(VerificationError):
            engine.verify_sha256_pkcs1(key_pair.public_key_handle, b"sig", 42)

    def test_encrypt_requires_bytes(self, engine, key_pair):
        with pytest.raises(EncryptionError):
            engine.encrypt(key_pair.public_key_handle, "text")

    def test_decrypt_requires_modulus_length(self, engine, key_pair):
        with pytest.raises(DecryptionError):
            engine.decrypt(key_pair.private_key_handle, b"\x00" * 10)

    def test_ciphertext_is_randomized(self, engine, key_pair):
        """PKCS#1 v1.5 encryption pads with random bytes."""
        first = engine.encrypt(key_pair.public_key_handle, b"same")
        second = engine.encrypt(key_pair.public_key_handle, b"same")
        assert first != second
