"""
Common utilities, configuration and exceptions for SecureKey.
"""

from .utils import sha256_hex, b64encode, b64decode, constant_time_compare
from .exceptions import *

__all__ = [
    'sha256_hex',
    'b64encode',
    'b64decode',
    'constant_time_compare',
]
