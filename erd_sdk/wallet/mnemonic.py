"""
Mnemonic helpers: BIP-39 phrases -> seed -> Ed25519 secret key.

- Generation, checksum validation and seed derivation are standard BIP-39 and
  delegated to the `mnemonic` (Trezor) package: 24 English words by default,
  seed = PBKDF2-HMAC-SHA512(NFKD(phrase), "mnemonic" + passphrase, 2048).
- Key derivation follows SLIP-0010 for ed25519 (hardened children only) along
  the account path ``m/44'/508'/0'/0'/<index>'``.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import List, Tuple

from mnemonic import Mnemonic

__all__ = [
    "COIN_TYPE",
    "HARDENED_OFFSET",
    "generate_mnemonic",
    "validate_mnemonic",
    "mnemonic_to_seed",
    "derivation_path",
    "derive_ed25519_key",
    "mnemonic_to_secret_key",
]

COIN_TYPE = 508
HARDENED_OFFSET = 0x80000000
_ED25519_CURVE = b"ed25519 seed"
_LANGUAGE = "english"


def generate_mnemonic(num_words: int = 24) -> str:
    if num_words not in (12, 15, 18, 21, 24):
        raise ValueError("num_words must be one of 12, 15, 18, 21, 24")
    return Mnemonic(_LANGUAGE).generate(strength=num_words * 32 // 3)


def validate_mnemonic(phrase: str) -> bool:
    return bool(Mnemonic(_LANGUAGE).check(" ".join(phrase.split())))


def mnemonic_to_seed(phrase: str, passphrase: str = "") -> bytes:
    """64-byte BIP-39 seed."""
    return Mnemonic.to_seed(" ".join(phrase.split()), passphrase)


def derivation_path(index: int = 0) -> List[int]:
    """m/44'/508'/0'/0'/index' as hardened child numbers."""
    if index < 0 or index >= HARDENED_OFFSET:
        raise ValueError("index out of range")
    return [44 | HARDENED_OFFSET, COIN_TYPE | HARDENED_OFFSET, HARDENED_OFFSET, HARDENED_OFFSET, index | HARDENED_OFFSET]


def _ckd(key: bytes, chain_code: bytes, child: int) -> Tuple[bytes, bytes]:
    data = b"\x00" + key + child.to_bytes(4, "big")
    digest = hmac.new(chain_code, data, hashlib.sha512).digest()
    return digest[:32], digest[32:]


def derive_ed25519_key(seed: bytes, path: List[int]) -> bytes:
    """SLIP-0010 ed25519 private key (32 bytes) for `path`; every index must be hardened."""
    digest = hmac.new(_ED25519_CURVE, seed, hashlib.sha512).digest()
    key, chain_code = digest[:32], digest[32:]
    for child in path:
        if child < HARDENED_OFFSET:
            raise ValueError("ed25519 derivation only supports hardened indices")
        key, chain_code = _ckd(key, chain_code, child)
    return key


def mnemonic_to_secret_key(phrase: str, index: int = 0, passphrase: str = "") -> bytes:
    return derive_ed25519_key(mnemonic_to_seed(phrase, passphrase), derivation_path(index))
