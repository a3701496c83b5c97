"""
Utility helpers for the Python SDK.

Re-exports:
- bytes: hex / base64 helpers
- hash: Keccak-256 wrappers
- bech32: address codec primitives
"""

from .bech32 import Bech32Error, decode_bytes, encode_bytes
from .bytes import (b64decode, b64encode, base64_to_hex, ensure_bytes,
                    from_hex, to_hex)
from .hash import keccak256, keccak256_hex

__all__ = [
    # bytes
    "to_hex",
    "from_hex",
    "ensure_bytes",
    "b64decode",
    "b64encode",
    "base64_to_hex",
    # hash
    "keccak256",
    "keccak256_hex",
    # bech32
    "Bech32Error",
    "encode_bytes",
    "decode_bytes",
]
