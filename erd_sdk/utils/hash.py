from __future__ import annotations

from Crypto.Hash import keccak as _keccak

from .bytes import BytesLike, ensure_bytes, to_hex

__all__ = ["keccak256", "keccak256_hex"]

# Contract addresses are derived with the original Keccak-256 padding, not the
# NIST SHA3-256 that hashlib exposes.


def keccak256(*parts: BytesLike) -> bytes:
    """Keccak-256 over the concatenation of `parts`."""
    h = _keccak.new(digest_bits=256)
    for part in parts:
        h.update(ensure_bytes(part))
    return h.digest()


def keccak256_hex(*parts: BytesLike, prefix: bool = False) -> str:
    return to_hex(keccak256(*parts), prefix=prefix)
