#!/usr/bin/env python3
"""
Sign or Verify a File

Signs a file with a stored key pair, or checks a base64 signature against
a file. Signatures are SHA-256 with PKCS#1 v1.5 padding.

Usage:
    python scripts/sign_verify.py sign --id alice-device-1 --file message.txt
    python scripts/sign_verify.py verify --id alice-device-1 --file message.txt --signature <base64>
"""

import argparse
import binascii
import sys

from securekey import KeyPairFactory, KeyPairError
from securekey.common.exceptions import VerificationError
from securekey.common.utils import b64encode, b64decode
from securekey.storage import MySQLSecureStore


def read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def sign_file(factory: KeyPairFactory, identifier: str, path: str) -> str:
    """
    Sign a file with a stored key pair.

    Returns:
        Base64-encoded signature
    """
    key_pair = factory.load(identifier)
    signature = key_pair.sign(read_file(path))
    return b64encode(signature)


def verify_file(factory: KeyPairFactory, identifier: str, path: str, signature_b64: str) -> bool:
    """
    Verify a base64 signature over a file.

    Returns:
        True if signature is valid, False otherwise

    Raises:
        VerificationError: If the signature text is not valid base64
    """
    try:
        signature = b64decode(signature_b64)
    except (binascii.Error, ValueError) as e:
        raise VerificationError(f"Signature is not valid base64: {e}") from e

    key_pair = factory.load(identifier)
    return key_pair.verify(signature, read_file(path))


def main():
    parser = argparse.ArgumentParser(description="Sign or verify files with a stored key pair")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sign_parser = subparsers.add_parser("sign", help="Sign a file")
    sign_parser.add_argument("--id", required=True, help="Key pair identifier")
    sign_parser.add_argument("--file", required=True, help="File to sign")

    verify_parser = subparsers.add_parser("verify", help="Verify a signature")
    verify_parser.add_argument("--id", required=True, help="Key pair identifier")
    verify_parser.add_argument("--file", required=True, help="Signed file")
    verify_parser.add_argument("--signature", required=True, help="Base64-encoded signature")

    args = parser.parse_args()
    factory = KeyPairFactory(store=MySQLSecureStore())

    try:
        if args.command == "sign":
            print(f"[*] Signing {args.file} with '{args.id}'...")
            print(sign_file(factory, args.id, args.file))
            return

        print(f"[*] Verifying {args.file} against '{args.id}'...")
        if verify_file(factory, args.id, args.file, args.signature):
            print("[✓] Signature is VALID")
        else:
            print("[✗] Signature is INVALID")
            sys.exit(1)

    except KeyPairError as e:
        print(f"[✗] {type(e).__name__}: {e}")
        sys.exit(2)


if __name__ == "__main__":
    main()
