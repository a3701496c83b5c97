"""
erd_sdk.address
===============

Address codec for the network.

Format
------
An account is identified by its 32-byte Ed25519 public key. The human-readable
form is the classic Bech32 encoding (BIP-173 checksum) of those 32 bytes with
HRP "erd"::

    erd1qyu5wthldzr8wx5c9ucg8kjagg0jfs53s8nr3zpz3hypefsdd8ssycr6th

The raw form is the 64-char lowercase hex of the key (no ``0x``).

This module provides:
- encode(raw_bytes, hrp="erd") -> str
- decode(address, hrp="erd") -> bytes
- address_to_hex(address) -> str / hex_to_address(hex) -> str
- is_valid(address) -> bool
- shard_of(address, num_shards=3) -> int (METACHAIN_SHARD for system accounts)
"""

from __future__ import annotations

from typing import Union

from .errors import InvalidAddressFormat
from .utils.bech32 import Bech32Error, decode_bytes, encode_bytes

__all__ = [
    "DEFAULT_HRP",
    "PUBKEY_LENGTH",
    "NUM_SHARDS",
    "METACHAIN_SHARD",
    "ZERO_ADDRESS",
    "METACHAIN_TOKEN_CONTRACT",
    "encode",
    "decode",
    "address_to_hex",
    "hex_to_address",
    "is_valid",
    "shard_of",
    "shard_of_pubkey",
]

DEFAULT_HRP = "erd"
PUBKEY_LENGTH = 32
NUM_SHARDS = 3
METACHAIN_SHARD = -1

# First 25 bytes of every system smart contract living on the metachain.
_SYSTEM_SC_PREFIX = bytes(9) + b"\x01" + bytes(15)
_ZERO_PREFIX = bytes(25)


def encode(raw: Union[bytes, bytearray, memoryview], hrp: str = DEFAULT_HRP) -> str:
    """32 raw public-key bytes -> bech32 address."""
    raw = bytes(raw)
    if len(raw) != PUBKEY_LENGTH:
        raise InvalidAddressFormat(raw.hex(), f"expected {PUBKEY_LENGTH} bytes, got {len(raw)}")
    try:
        return encode_bytes(hrp, raw)
    except Bech32Error as e:
        raise InvalidAddressFormat(raw.hex(), str(e)) from e


def decode(address: str, hrp: str = DEFAULT_HRP) -> bytes:
    """
    Bech32 address -> 32 raw public-key bytes.

    Rejects bad checksums (Bech32m included), a foreign HRP, payloads that
    are not exactly 32 bytes and any upper-case letter: addresses only exist in
    their lower-case form, so `encode(decode(a)) == a` for every accepted `a`.
    """
    if isinstance(address, str) and address != address.lower():
        raise InvalidAddressFormat(address, "address must be lower case")
    try:
        _, payload = decode_bytes(address, hrp)
    except Bech32Error as e:
        raise InvalidAddressFormat(address, str(e)) from e
    if len(payload) != PUBKEY_LENGTH:
        raise InvalidAddressFormat(address, f"expected {PUBKEY_LENGTH} bytes, got {len(payload)}")
    return payload


def address_to_hex(address: str, hrp: str = DEFAULT_HRP) -> str:
    return decode(address, hrp).hex()


def hex_to_address(hex_str: str, hrp: str = DEFAULT_HRP) -> str:
    s = hex_str[2:] if hex_str.lower().startswith("0x") else hex_str
    try:
        raw = bytes.fromhex(s)
    except ValueError as e:
        raise InvalidAddressFormat(hex_str, "not a hex string") from e
    return encode(raw, hrp)


def is_valid(address: str, hrp: str = DEFAULT_HRP) -> bool:
    try:
        decode(address, hrp)
    except InvalidAddressFormat:
        return False
    return True


def _is_metachain(raw: bytes) -> bool:
    head = raw[:25]
    return head == _SYSTEM_SC_PREFIX or head == _ZERO_PREFIX


def shard_of_pubkey(raw: bytes, num_shards: int = NUM_SHARDS) -> int:
    """
    Shard index of a raw 32-byte key.

    System accounts (25-byte zero or system-contract prefix, and the all-zero
    address) live on the metachain. Otherwise the last byte is masked with
    the smallest all-ones mask covering ``num_shards - 1``; when that lands on
    a shard that does not exist, the mask one bit narrower is used instead.
    """
    if len(raw) != PUBKEY_LENGTH:
        raise InvalidAddressFormat(raw.hex(), f"expected {PUBKEY_LENGTH} bytes, got {len(raw)}")
    if num_shards < 1:
        raise ValueError("num_shards must be at least 1")
    if _is_metachain(raw):
        return METACHAIN_SHARD
    if num_shards == 1:
        return 0

    n = (num_shards - 1).bit_length()
    mask_high = (1 << n) - 1
    mask_low = (1 << (n - 1)) - 1
    last = raw[-1]
    shard = last & mask_high
    if shard > num_shards - 1:
        shard = last & mask_low
    return shard


def shard_of(address: str, num_shards: int = NUM_SHARDS, hrp: str = DEFAULT_HRP) -> int:
    return shard_of_pubkey(decode(address, hrp), num_shards)


ZERO_ADDRESS = encode(bytes(PUBKEY_LENGTH))
METACHAIN_TOKEN_CONTRACT = "erd1qqqqqqqqqqqqqqqpqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqzllls8a5w6u"
