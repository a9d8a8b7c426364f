"""
Runtime configuration for SecureKey.

Values come from the process environment, optionally seeded from a
``.env`` file in the working directory.
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Bounds accepted by the RSA engine
MIN_KEY_SIZE = 1024
MAX_KEY_SIZE = 16384

DEFAULT_KEY_SIZE = int(os.getenv('KEYPAIR_DEFAULT_SIZE', 2048))
PUBLIC_EXPONENT = int(os.getenv('KEYPAIR_PUBLIC_EXPONENT', 65537))

# PKCS#1 v1.5 encryption padding overhead in bytes
PKCS1_PADDING_OVERHEAD = 11


def get_db_config() -> dict:
    """
    Connection settings for the MySQL secure store.

    Returns:
        Keyword arguments for mysql.connector.connect()
    """
    return {
        'host': os.getenv('DB_HOST', 'localhost'),
        'port': int(os.getenv('DB_PORT', 3306)),
        'database': os.getenv('DB_NAME', 'securekey'),
        'user': os.getenv('DB_USER', 'skuser'),
        'password': os.getenv('DB_PASSWORD', 'skpass'),
    }
