"""
erd_sdk.tx.encode
=================

Transaction `data` payload encoding and canonical signing bytes.

Payload format
--------------
The `data` field is ASCII made of `@`-delimited hex tokens::

    <function>@<arg0 hex>@<arg1 hex>...

- strings are hex-encoded byte for byte (two lowercase hex digits per byte)
- numbers are the minimal big-endian hex of their magnitude, left-padded to an
  even length; zero is "00", never ""
- addresses are the hex of their 32 raw bytes
- booleans are the hex of the strings "true"/"false"

SignBytes
---------
`sign_bytes(tx, nonce=..., chain_id=..., version=...)` is the compact JSON
object with keys in the order
``nonce, value, receiver, sender, gasPrice, gasLimit, data, chainID, version``
(`data` base64-encoded, omitted when empty). The signature is computed over
exactly these bytes.
"""

from __future__ import annotations

import json
from typing import Any, List, Mapping, Union

from ..address import address_to_hex as _address_to_hex
from ..bignum import ScaledDecimal
from ..errors import InvalidNumberFormat
from ..types.core import Transaction, wire_fields
from ..utils.bytes import base64_to_hex

__all__ = [
    "ARGS_DELIMITER",
    "join_data_arguments",
    "string_to_hex",
    "number_to_hex",
    "address_to_hex",
    "bool_to_hex",
    "convert_map_to_data_arguments",
    "base64_to_hex",
    "sign_bytes",
]

ARGS_DELIMITER = "@"


def join_data_arguments(*args: str) -> str:
    return ARGS_DELIMITER.join(args)


def string_to_hex(arg: str) -> str:
    return arg.encode("utf-8").hex()


def number_to_hex(arg: Union[int, str, ScaledDecimal]) -> str:
    """
    Minimal even-length big-endian hex of a non-negative integer.

    ScaledDecimal arguments are taken at RAW scale.
    """
    n = ScaledDecimal(arg).to_raw_scale()
    if n.lt(0):
        raise InvalidNumberFormat(arg, "negative numbers cannot be encoded as arguments")
    h = n.to_string(16)
    return h if len(h) % 2 == 0 else "0" + h


def address_to_hex(address: str) -> str:
    return _address_to_hex(address)


def bool_to_hex(flag: bool) -> str:
    return string_to_hex("true" if flag else "false")


def convert_map_to_data_arguments(flags: Mapping[str, Any]) -> List[str]:
    """{"canMint": True, ...} -> [hex("canMint"), hex("true"), ...] in mapping order."""
    out: List[str] = []
    for key, value in flags.items():
        out.append(string_to_hex(key))
        out.append(bool_to_hex(bool(value)))
    return out


def sign_bytes(tx: Transaction, *, nonce: int, chain_id: str, version: int) -> bytes:
    if tx.gas_price is None or tx.gas_limit is None:
        raise ValueError("gas_price and gas_limit must be set before signing")
    body = wire_fields(
        nonce=nonce,
        value=tx.value,
        receiver=tx.receiver,
        sender=tx.sender,
        gas_price=tx.gas_price,
        gas_limit=tx.gas_limit,
        data=tx.data,
        chain_id=chain_id,
        version=version,
    )
    return json.dumps(body, separators=(",", ":")).encode("utf-8")
