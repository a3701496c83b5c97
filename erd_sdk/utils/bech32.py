"""
Bech32 (BIP-0173) for byte payloads.

Only the classic checksum constant is accepted; a Bech32m string fails the
checksum like any other corruption. Both directions regroup the payload
between 8-bit bytes and 5-bit symbols.

    encode_bytes("erd", pubkey)            -> "erd1..."
    decode_bytes("erd1...", "erd")         -> ("erd", pubkey)
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

__all__ = ["Bech32Error", "encode_bytes", "decode_bytes", "regroup", "MAX_LENGTH"]

ALPHABET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_ALPHABET_INDEX = {ch: i for i, ch in enumerate(ALPHABET)}

MAX_LENGTH = 90
CHECKSUM_LENGTH = 6
SEPARATOR = "1"

_GEN = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)


class Bech32Error(ValueError):
    pass


def _checksum_state(symbols: Iterable[int]) -> int:
    state = 1
    for sym in symbols:
        top = state >> 25
        state = ((state & 0x1FFFFFF) << 5) ^ sym
        for bit, gen in enumerate(_GEN):
            if (top >> bit) & 1:
                state ^= gen
    return state


def _prefix_symbols(hrp: str) -> List[int]:
    codes = [ord(ch) for ch in hrp]
    return [c >> 5 for c in codes] + [0] + [c & 31 for c in codes]


def _checksum(hrp: str, symbols: List[int]) -> List[int]:
    state = _checksum_state(_prefix_symbols(hrp) + symbols + [0] * CHECKSUM_LENGTH) ^ 1
    return [(state >> (5 * (CHECKSUM_LENGTH - 1 - i))) & 31 for i in range(CHECKSUM_LENGTH)]


def _check_hrp(hrp: str) -> None:
    if not hrp or not all(ch.isdigit() or "a" <= ch <= "z" for ch in hrp):
        raise Bech32Error(f"invalid human-readable part {hrp!r}")


def regroup(values: Iterable[int], src_bits: int, dst_bits: int, *, pad: bool) -> List[int]:
    """Repack a stream of `src_bits`-wide integers into `dst_bits`-wide ones."""
    buf = 0
    held = 0
    out: List[int] = []
    mask = (1 << dst_bits) - 1
    for v in values:
        if v < 0 or v >> src_bits:
            raise Bech32Error(f"value {v} does not fit in {src_bits} bits")
        buf = (buf << src_bits) | v
        held += src_bits
        while held >= dst_bits:
            held -= dst_bits
            out.append((buf >> held) & mask)
        buf &= (1 << held) - 1
    if pad:
        if held:
            out.append((buf << (dst_bits - held)) & mask)
    elif held >= src_bits or buf:
        raise Bech32Error("invalid padding")
    return out


def encode_bytes(hrp: str, payload: bytes) -> str:
    _check_hrp(hrp)
    symbols = regroup(payload, 8, 5, pad=True)
    out = hrp + SEPARATOR + "".join(ALPHABET[s] for s in symbols + _checksum(hrp, symbols))
    if len(out) > MAX_LENGTH:
        raise Bech32Error("encoded string too long")
    return out


def decode_bytes(text: str, expected_hrp: Optional[str] = None) -> Tuple[str, bytes]:
    """
    Split, verify and unpack a Bech32 string. Upper-case input is accepted,
    mixed case is not. Raises Bech32Error on any defect.
    """
    if not isinstance(text, str):
        raise Bech32Error("bech32 input must be a string")
    if len(text) > MAX_LENGTH:
        raise Bech32Error("string too long")
    if any(not 33 <= ord(ch) <= 126 for ch in text):
        raise Bech32Error("non-printable character")
    lowered = text.lower()
    if text != lowered and text != text.upper():
        raise Bech32Error("mixed case")

    hrp, sep, body = lowered.rpartition(SEPARATOR)
    if not sep:
        raise Bech32Error("separator not found")
    _check_hrp(hrp)
    if expected_hrp is not None and hrp != expected_hrp:
        raise Bech32Error(f"expected prefix {expected_hrp!r}, got {hrp!r}")
    if len(body) < CHECKSUM_LENGTH:
        raise Bech32Error("checksum too short")

    unknown = [ch for ch in body if ch not in _ALPHABET_INDEX]
    if unknown:
        raise Bech32Error(f"character {unknown[0]!r} outside the bech32 alphabet")
    symbols = [_ALPHABET_INDEX[ch] for ch in body]
    if _checksum_state(_prefix_symbols(hrp) + symbols) != 1:
        raise Bech32Error("checksum mismatch")
    return hrp, bytes(regroup(symbols[:-CHECKSUM_LENGTH], 5, 8, pad=False))
