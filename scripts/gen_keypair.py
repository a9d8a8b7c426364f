#!/usr/bin/env python3
"""
Generate an RSA Key Pair

Creates a key pair, saves it to the MySQL secure store under the given
identifier and optionally exports the public key as PEM for distribution.

Usage:
    python scripts/gen_keypair.py --id alice-device-1 --bits 2048
    python scripts/gen_keypair.py --id alice-device-1 --export-public keys/alice.pem
"""

import argparse
import os
import sys

from cryptography.hazmat.primitives import serialization

from securekey import KeyPairFactory, KeyPairError
from securekey.common.config import DEFAULT_KEY_SIZE
from securekey.storage import MySQLSecureStore, SecureStore


def generate_keypair(
    identifier: str,
    bits: int = DEFAULT_KEY_SIZE,
    export_public: str = None,
    init_db: bool = False,
    store: SecureStore = None
):
    """
    Generate a key pair and save it to the secure store.

    Args:
        identifier: Identifier to store the key pair under
        bits: RSA modulus size
        export_public: Optional path for a PEM copy of the public key
        init_db: Create the key_pairs table first (MySQL store only)
        store: Secure store to use; defaults to MySQLSecureStore()

    Returns:
        The persisted KeyPair

    Raises:
        PersistenceError: If a key pair is already stored under identifier
    """
    if store is None:
        store = MySQLSecureStore()
    if init_db:
        print("[*] Initializing key_pairs table...")
        store.init_db()

    factory = KeyPairFactory(store=store)

    print(f"[*] Generating RSA key pair ({bits} bits)...")
    key_pair = factory.generate(identifier, bits)

    print(f"[*] Saving key pair as '{identifier}'...")
    key_pair.persist()
    print(f"[+] Key pair stored as '{identifier}'")

    if export_public:
        directory = os.path.dirname(export_public)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(export_public, "wb") as f:
            f.write(
                key_pair.public_key_handle.public_bytes(
                    encoding=serialization.Encoding.PEM,
                    format=serialization.PublicFormat.SubjectPublicKeyInfo,
                )
            )
        print(f"[+] Public key exported to: {export_public}")

    print(f"\n[✓] Key pair created successfully!")
    print(f"    Identifier: {key_pair.identifier}")
    print(f"    Size: {key_pair.key_size_bits} bits")
    print(f"    Fingerprint (SHA-256): {key_pair.fingerprint}")

    return key_pair


def main():
    parser = argparse.ArgumentParser(
        description="Generate an RSA key pair and store it in the secure store"
    )
    parser.add_argument(
        "--id",
        required=True,
        help="Identifier of the key pair (e.g. alice-device-1)"
    )
    parser.add_argument(
        "--bits",
        type=int,
        default=DEFAULT_KEY_SIZE,
        help=f"RSA key size in bits (default: {DEFAULT_KEY_SIZE})"
    )
    parser.add_argument(
        "--export-public",
        help="Write the public key as PEM to this path"
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Create the key_pairs table if it does not exist"
    )

    args = parser.parse_args()

    try:
        generate_keypair(
            identifier=args.id,
            bits=args.bits,
            export_public=args.export_public,
            init_db=args.init_db
        )
    except KeyPairError as e:
        print(f"[✗] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
