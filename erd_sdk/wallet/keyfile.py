"""
JSON key files (version 4): scrypt + AES-128-CTR protected Ed25519 seeds.

Schema
------
{
  "version": 4,
  "id": "<uuid4>",
  "address": "<pubkey hex>",
  "bech32": "erd1...",
  "crypto": {
    "ciphertext": "<hex>",
    "cipherparams": {"iv": "<hex, 16 bytes>"},
    "cipher": "aes-128-ctr",
    "kdf": "scrypt",
    "kdfparams": {"dklen": 32, "salt": "<hex>", "n": 4096, "r": 8, "p": 1},
    "mac": "<hex>"
  }
}

derived = scrypt(password, salt, n, r, p, dklen)
ciphertext = AES-128-CTR(key=derived[0:16], iv).encrypt(seed)
mac = HMAC-SHA256(key=derived[16:32], ciphertext)
"""

from __future__ import annotations

import hashlib
import hmac
import json
import secrets
import uuid
from typing import Any, Dict, Mapping, Union

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from ..address import encode as encode_address
from ..errors import WalletError

__all__ = ["encrypt_key_file", "decrypt_key_file"]

_CIPHER = "aes-128-ctr"
_KDF = "scrypt"


def _derive(password: str, salt: bytes, n: int, r: int, p: int, dklen: int) -> bytes:
    return Scrypt(salt=salt, length=dklen, n=n, r=r, p=p).derive(password.encode("utf-8"))


def _ctr(key: bytes, iv: bytes, data: bytes) -> bytes:
    ctx = Cipher(algorithms.AES(key), modes.CTR(iv)).encryptor()
    return ctx.update(data) + ctx.finalize()


def _mac(derived: bytes, ciphertext: bytes) -> bytes:
    return hmac.new(derived[16:32], ciphertext, hashlib.sha256).digest()


def encrypt_key_file(
    seed: bytes,
    public_key: bytes,
    password: str,
    *,
    n: int = 4096,
    r: int = 8,
    p: int = 1,
) -> Dict[str, Any]:
    """Build a key file dict protecting the 32-byte `seed`."""
    if len(seed) != 32:
        raise WalletError("seed must be 32 bytes")
    salt = secrets.token_bytes(32)
    iv = secrets.token_bytes(16)
    derived = _derive(password, salt, n, r, p, 32)
    ciphertext = _ctr(derived[:16], iv, seed)
    return {
        "version": 4,
        "id": str(uuid.uuid4()),
        "address": public_key.hex(),
        "bech32": encode_address(public_key),
        "crypto": {
            "ciphertext": ciphertext.hex(),
            "cipherparams": {"iv": iv.hex()},
            "cipher": _CIPHER,
            "kdf": _KDF,
            "kdfparams": {"dklen": 32, "salt": salt.hex(), "n": n, "r": r, "p": p},
            "mac": _mac(derived, ciphertext).hex(),
        },
    }


def decrypt_key_file(key_file: Union[str, Mapping[str, Any]], password: str) -> bytes:
    """Return the 32-byte seed. Raises WalletError on a bad password or malformed file."""
    try:
        doc = json.loads(key_file) if isinstance(key_file, str) else key_file
        crypto = doc["crypto"]
        if crypto.get("cipher") != _CIPHER or crypto.get("kdf") != _KDF:
            raise WalletError(f"unsupported key file cipher/kdf: {crypto.get('cipher')}/{crypto.get('kdf')}")
        params = crypto["kdfparams"]
        salt = bytes.fromhex(params["salt"])
        iv = bytes.fromhex(crypto["cipherparams"]["iv"])
        ciphertext = bytes.fromhex(crypto["ciphertext"])
        expected_mac = bytes.fromhex(crypto["mac"])
        n, r, p, dklen = int(params["n"]), int(params["r"]), int(params["p"]), int(params["dklen"])
    except (KeyError, TypeError, ValueError) as e:
        if isinstance(e, WalletError):
            raise
        raise WalletError(f"Malformed key file: {e}") from e

    derived = _derive(password, salt, n, r, p, dklen)
    if not hmac.compare_digest(_mac(derived, ciphertext), expected_mac):
        raise WalletError("MAC mismatch, possibly wrong password")

    seed = _ctr(derived[:16], iv, ciphertext)
    return seed.rjust(32, b"\x00")
