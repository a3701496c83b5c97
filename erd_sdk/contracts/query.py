"""
Typed decoding of contract query results.

A query returns an ordered list of base64 values. `parse_query_result` picks
one by index and interprets it as the requested `QueryResultType`:

=========  ==========================================  ================
type       present value                               absent / empty
=========  ==========================================  ================
INT        big-endian unsigned int                     0
BIG_INT    ScaledDecimal (RAW) of the hex magnitude    ScaledDecimal(0)
BOOLEAN    any non-zero byte                           False
ADDRESS    bech32 of the 32 raw bytes                  ""
HEX        "0x" + hex                                  "0x0"
STRING     UTF-8 text                                  ""
=========  ==========================================  ================

With a `pattern`, the value is first decoded as text and the first capture
group of ``re.search(pattern, text)`` (or the whole match when the pattern
has no groups) is interpreted instead: INT/BIG_INT parse base-10 digits (or
``0x`` hex), BOOLEAN accepts true/false/1/0, ADDRESS accepts a bech32 string
or 64 hex chars, HEX/STRING pass the text through.
"""

from __future__ import annotations

import enum
import re
from typing import Optional, Pattern, Union

from ..address import decode as decode_address
from ..address import encode as encode_address
from ..address import hex_to_address
from ..bignum import ScaledDecimal
from ..errors import InvalidAddressFormat, InvalidNumberFormat, QueryDecodeError
from ..types.core import ContractQueryResult
from ..utils.bytes import b64decode

__all__ = ["QueryResultType", "QueryValue", "parse_query_result", "query_value_bytes"]


class QueryResultType(enum.Enum):
    INT = "int"
    BIG_INT = "big_int"
    BOOLEAN = "boolean"
    ADDRESS = "address"
    HEX = "hex"
    STRING = "string"


QueryValue = Union[int, bool, str, ScaledDecimal]

_TRUE = ("true", "1")
_FALSE = ("false", "0", "")


def _default(kind: QueryResultType) -> QueryValue:
    return {
        QueryResultType.INT: 0,
        QueryResultType.BIG_INT: ScaledDecimal(0),
        QueryResultType.BOOLEAN: False,
        QueryResultType.ADDRESS: "",
        QueryResultType.HEX: "0x0",
        QueryResultType.STRING: "",
    }[kind]


def query_value_bytes(result: ContractQueryResult, index: int = 0) -> Optional[bytes]:
    """Raw bytes at `index`, or None when the slot is absent or empty."""
    if index < 0:
        raise QueryDecodeError("index must be non-negative", index)
    if index >= len(result.return_data):
        return None
    val = result.return_data[index]
    if not val:
        return None
    try:
        return b64decode(val)
    except ValueError as e:
        raise QueryDecodeError(f"value is not base64: {val!r}", index) from e


def _decode_bytes(raw: bytes, kind: QueryResultType, index: int) -> QueryValue:
    if kind is QueryResultType.INT:
        return int.from_bytes(raw, "big")
    if kind is QueryResultType.BIG_INT:
        return ScaledDecimal("0x" + (raw.hex() or "0"))
    if kind is QueryResultType.BOOLEAN:
        return any(raw)
    if kind is QueryResultType.ADDRESS:
        try:
            return encode_address(raw)
        except InvalidAddressFormat as e:
            raise QueryDecodeError(f"not an address: {e.reason}", index) from e
    if kind is QueryResultType.HEX:
        return "0x" + raw.hex()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise QueryDecodeError("value is not valid UTF-8", index) from e


def _decode_text(text: str, kind: QueryResultType, index: int) -> QueryValue:
    s = text.strip()
    try:
        if kind is QueryResultType.INT:
            return int(s, 16) if s.lower().startswith("0x") else int(s)
        if kind is QueryResultType.BIG_INT:
            return ScaledDecimal(s)
    except (ValueError, InvalidNumberFormat) as e:
        raise QueryDecodeError(f"not a number: {s!r}", index) from e
    if kind is QueryResultType.BOOLEAN:
        low = s.lower()
        if low in _TRUE:
            return True
        if low in _FALSE:
            return False
        raise QueryDecodeError(f"not a boolean: {s!r}", index)
    if kind is QueryResultType.ADDRESS:
        try:
            if len(s) == 64 or s.lower().startswith("0x"):
                return hex_to_address(s)
            decode_address(s)
            return s
        except InvalidAddressFormat as e:
            raise QueryDecodeError(f"not an address: {s!r}", index) from e
    return s


def parse_query_result(
    result: ContractQueryResult,
    kind: QueryResultType,
    index: int = 0,
    pattern: Optional[Union[str, Pattern[str]]] = None,
) -> QueryValue:
    """Decode the value at `index` of `result` as `kind` (see module docs)."""
    raw = query_value_bytes(result, index)
    if raw is None:
        return _default(kind)
    if pattern is None:
        return _decode_bytes(raw, kind, index)

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise QueryDecodeError("value is not valid UTF-8", index) from e
    m = re.search(pattern, text)
    if m is None:
        raise QueryDecodeError(f"pattern {getattr(pattern, 'pattern', pattern)!r} does not match {text!r}", index)
    extracted = m.group(1) if m.re.groups else m.group(0)
    return _decode_text(extracted or "", kind, index)
