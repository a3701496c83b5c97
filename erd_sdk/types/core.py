"""
Core chain types for the Python SDK.

Two complementary representations for the objects exchanged with a node:
- Lightweight `TypedDict` shapes mirroring the proxy's JSON payloads.
- Immutable `@dataclass` models used everywhere inside the SDK, with
  `from_node_dict()` / `to_node_dict()` converters.

Amounts are `ScaledDecimal` values at RAW scale; gas figures are plain ints.
Nothing here performs network I/O.
"""

from __future__ import annotations

import base64
import binascii
import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, TypedDict, Union

from ..bignum import NumberLike, Scale, ScaledDecimal
from ..errors import InvalidNumberFormat, NodeResponseError

# --- Common aliases ----------------------------------------------------------

Address = str  # bech32 "erd1..."
Hash = str  # 64-char hex, no 0x


# --- Node JSON shapes --------------------------------------------------------


class NetworkConfigDict(TypedDict, total=False):
    erd_chain_id: str
    erd_min_gas_price: int
    erd_min_gas_limit: int
    erd_gas_per_data_byte: int
    erd_min_transaction_version: int
    erd_latest_tag_software_version: str


class AccountDict(TypedDict, total=False):
    address: Address
    balance: str
    nonce: int
    code: str


class QueryResultDict(TypedDict, total=False):
    returnData: Optional[List[str]]
    returnCode: str
    returnMessage: str
    gasRefund: int
    gasRemaining: int


class TxWireDict(TypedDict, total=False):
    nonce: int
    value: str
    receiver: Address
    sender: Address
    gasPrice: int
    gasLimit: int
    data: str  # base64
    chainID: str
    version: int
    signature: str  # hex


# --- Helpers -----------------------------------------------------------------


def raw_amount(value: NumberLike) -> str:
    """Integral base-10 string of `value` at RAW scale (the wire form of amounts)."""
    v = ScaledDecimal(value).to_raw_scale()
    if not v.is_integral():
        raise InvalidNumberFormat(v.to_string(10), "amount is not a whole number of raw units")
    return v.to_string(10)


def wire_fields(
    *,
    nonce: int,
    value: NumberLike,
    receiver: Address,
    sender: Address,
    gas_price: int,
    gas_limit: int,
    data: Optional[str],
    chain_id: str,
    version: int,
) -> TxWireDict:
    """
    Canonical transaction dict in signing order.

    `data` is base64-encoded and left out entirely when empty.
    """
    d: TxWireDict = {
        "nonce": int(nonce),
        "value": raw_amount(value),
        "receiver": receiver,
        "sender": sender,
        "gasPrice": int(gas_price),
        "gasLimit": int(gas_limit),
    }
    if data:
        d["data"] = base64.b64encode(data.encode("utf-8")).decode("ascii")
    d["chainID"] = chain_id
    d["version"] = int(version)
    return d


def _int(v: Any, default: int = 0) -> int:
    if v is None or v == "":
        return default
    return int(v)


def _b64_text(s: Optional[str]) -> str:
    """Best-effort decode of a base64 `data` field; returns the input unchanged if it is not base64."""
    if not s:
        return ""
    try:
        return base64.b64decode(s, validate=True).decode("utf-8")
    except (binascii.Error, ValueError, UnicodeDecodeError):
        return s


# --- Network / accounts ------------------------------------------------------


_NETWORK_CONFIG_FIELDS = (
    "erd_chain_id",
    "erd_min_gas_price",
    "erd_min_gas_limit",
    "erd_gas_per_data_byte",
    "erd_min_transaction_version",
)


@dataclass(slots=True, frozen=True)
class NetworkConfig:
    chain_id: str
    min_gas_price: int
    min_gas_limit: int
    gas_per_data_byte: int
    min_transaction_version: int
    version: Optional[str] = None

    @staticmethod
    def from_node_dict(d: Mapping[str, Any]) -> "NetworkConfig":
        missing = [k for k in _NETWORK_CONFIG_FIELDS if d.get(k) is None]
        if missing:
            raise NodeResponseError(
                f"Error fetching network config: missing field(s) {', '.join(missing)}",
                path="/network/config",
            )
        return NetworkConfig(
            chain_id=str(d["erd_chain_id"]),
            min_gas_price=int(d["erd_min_gas_price"]),
            min_gas_limit=int(d["erd_min_gas_limit"]),
            gas_per_data_byte=int(d["erd_gas_per_data_byte"]),
            min_transaction_version=int(d["erd_min_transaction_version"]),
            version=d.get("erd_latest_tag_software_version"),
        )

    def to_node_dict(self) -> NetworkConfigDict:
        d: NetworkConfigDict = {
            "erd_chain_id": self.chain_id,
            "erd_min_gas_price": self.min_gas_price,
            "erd_min_gas_limit": self.min_gas_limit,
            "erd_gas_per_data_byte": self.gas_per_data_byte,
            "erd_min_transaction_version": self.min_transaction_version,
        }
        if self.version is not None:
            d["erd_latest_tag_software_version"] = self.version
        return d


@dataclass(slots=True, frozen=True)
class Account:
    address: Address
    balance: ScaledDecimal
    nonce: int
    code: str = ""

    @property
    def is_contract(self) -> bool:
        return bool(self.code)

    @staticmethod
    def from_node_dict(d: Mapping[str, Any]) -> "Account":
        return Account(
            address=d.get("address", ""),
            balance=ScaledDecimal(d.get("balance") or 0),
            nonce=_int(d.get("nonce")),
            code=d.get("code") or "",
        )

    def to_node_dict(self) -> AccountDict:
        return {
            "address": self.address,
            "balance": self.balance.to_raw_scale().to_string(10),
            "nonce": self.nonce,
            "code": self.code,
        }


# --- Contract queries --------------------------------------------------------


@dataclass(slots=True, frozen=True)
class ContractQueryParams:
    contract_address: Address
    function_name: str
    args: Sequence[str] = field(default_factory=tuple)

    def to_node_dict(self) -> Dict[str, Any]:
        return {
            "scAddress": self.contract_address,
            "funcName": self.function_name,
            "args": list(self.args),
        }


@dataclass(slots=True, frozen=True)
class ContractQueryResult:
    return_data: Tuple[str, ...]
    return_code: str
    gas_refund: int = 0
    gas_remaining: int = 0
    return_message: str = ""

    @staticmethod
    def from_node_dict(d: Mapping[str, Any]) -> "ContractQueryResult":
        return ContractQueryResult(
            return_data=tuple(x or "" for x in (d.get("returnData") or ())),
            return_code=str(d.get("returnCode", "")),
            gas_refund=_int(d.get("gasRefund")),
            gas_remaining=_int(d.get("gasRemaining")),
            return_message=d.get("returnMessage") or "",
        )


# --- Transactions ------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class Transaction:
    """Unsigned transaction as produced by a TransactionBuilder."""

    sender: Address
    receiver: Address
    value: ScaledDecimal = field(default_factory=ScaledDecimal)
    gas_price: Optional[int] = None
    gas_limit: Optional[int] = None
    data: Optional[str] = None
    meta: Optional[Mapping[str, Any]] = None
    nonce: Optional[int] = None


@dataclass(slots=True, frozen=True)
class SignedTransaction:
    sender: Address
    receiver: Address
    value: ScaledDecimal
    nonce: int
    gas_price: int
    gas_limit: int
    chain_id: str
    version: int
    signature: str
    data: Optional[str] = None
    meta: Optional[Mapping[str, Any]] = None

    @staticmethod
    def from_transaction(
        tx: Transaction, *, nonce: int, chain_id: str, version: int, signature: str
    ) -> "SignedTransaction":
        if tx.gas_price is None or tx.gas_limit is None:
            raise ValueError("gas_price and gas_limit must be resolved before signing")
        return SignedTransaction(
            sender=tx.sender,
            receiver=tx.receiver,
            value=tx.value,
            nonce=nonce,
            gas_price=tx.gas_price,
            gas_limit=tx.gas_limit,
            chain_id=chain_id,
            version=version,
            signature=signature,
            data=tx.data,
            meta=tx.meta,
        )

    def to_node_dict(self) -> TxWireDict:
        d = wire_fields(
            nonce=self.nonce,
            value=self.value,
            receiver=self.receiver,
            sender=self.sender,
            gas_price=self.gas_price,
            gas_limit=self.gas_limit,
            data=self.data,
            chain_id=self.chain_id,
            version=self.version,
        )
        d["signature"] = self.signature
        return d


class TransactionStatus(enum.Enum):
    PENDING = 0
    SUCCESS = 1
    FAILURE = 2

    @property
    def is_terminal(self) -> bool:
        return self is not TransactionStatus.PENDING

    @classmethod
    def from_raw(cls, status: Optional[str]) -> "TransactionStatus":
        """Map a node status string; anything unrecognised is still PENDING."""
        s = (status or "").lower()
        if s in ("success", "executed"):
            return cls.SUCCESS
        if s in ("fail", "invalid", "not-executed"):
            return cls.FAILURE
        return cls.PENDING


def classify_status(raw_status: Optional[str], smart_contract_errors: Sequence[str] = ()) -> TransactionStatus:
    """Node status string plus execution-result errors -> TransactionStatus."""
    status = TransactionStatus.from_raw(raw_status)
    if any(smart_contract_errors):
        return TransactionStatus.FAILURE
    return status


def _event_message(event: Mapping[str, Any]) -> str:
    topics = event.get("topics") or []
    if len(topics) > 1 and topics[1]:
        return _b64_text(topics[1])
    return _b64_text(event.get("data")) or str(event.get("identifier", ""))


def collect_smart_contract_errors(raw: Mapping[str, Any]) -> Tuple[str, ...]:
    """
    Error messages attached to a node transaction record: every non-empty
    `returnMessage` of its smart contract results plus `signalError` log events
    (top-level and per result).
    """
    out: List[str] = []
    logs: List[Mapping[str, Any]] = []
    if raw.get("logs"):
        logs.append(raw["logs"])
    for scr in raw.get("smartContractResults") or ():
        msg = scr.get("returnMessage")
        if msg:
            out.append(str(msg))
        if scr.get("logs"):
            logs.append(scr["logs"])
    for log in logs:
        for ev in log.get("events") or ():
            if ev.get("identifier") == "signalError":
                msg = _event_message(ev)
                if msg and msg not in out:
                    out.append(msg)
    return tuple(out)


@dataclass(slots=True, frozen=True)
class TransactionOnChain:
    """A previously broadcast transaction as reported by the node."""

    raw: Mapping[str, Any]
    status: TransactionStatus
    raw_status: str
    hash: Optional[Hash] = None
    sender: Optional[Address] = None
    receiver: Optional[Address] = None
    value: ScaledDecimal = field(default_factory=ScaledDecimal)
    data: str = ""
    nonce: int = 0
    gas_price: int = 0
    gas_limit: int = 0
    epoch: int = 0
    round: int = 0
    source_shard: int = 0
    destination_shard: int = 0
    signature: str = ""
    timestamp: Optional[datetime] = None
    smart_contract_errors: Tuple[str, ...] = ()

    @staticmethod
    def from_node_dict(d: Mapping[str, Any], tx_hash: Optional[Hash] = None) -> "TransactionOnChain":
        errors = collect_smart_contract_errors(d)
        raw_status = str(d.get("status", ""))
        ts = d.get("timestamp")
        return TransactionOnChain(
            raw=d,
            status=classify_status(raw_status, errors),
            raw_status=raw_status,
            hash=d.get("hash") or tx_hash,
            sender=d.get("sender"),
            receiver=d.get("receiver"),
            value=ScaledDecimal(d.get("value") or 0),
            data=_b64_text(d.get("data")),
            nonce=_int(d.get("nonce")),
            gas_price=_int(d.get("gasPrice")),
            gas_limit=_int(d.get("gasLimit")),
            epoch=_int(d.get("epoch")),
            round=_int(d.get("round")),
            source_shard=_int(d.get("sourceShard")),
            destination_shard=_int(d.get("destinationShard")),
            signature=d.get("signature") or "",
            timestamp=datetime.fromtimestamp(int(ts), tz=timezone.utc) if ts else None,
            smart_contract_errors=errors,
        )


@dataclass(slots=True, frozen=True)
class TransactionReceipt:
    hash: Hash
    signed_transaction: Optional[SignedTransaction] = None
    transaction_on_chain: Optional[TransactionOnChain] = None

    @property
    def status(self) -> TransactionStatus:
        if self.transaction_on_chain is None:
            return TransactionStatus.PENDING
        return self.transaction_on_chain.status


# --- Tokens ------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class TokenTransfer:
    """ESDT amount attached to a call; prepended as an `ESDTTransfer` instruction."""

    token_id: str
    value: Union[ScaledDecimal, int, str]


@dataclass(slots=True, frozen=True)
class TokenConfig:
    can_upgrade: bool = True
    can_mint: bool = False
    can_burn: bool = False
    can_change_owner: bool = False
    can_pause: bool = False
    can_freeze: bool = False
    can_wipe: bool = False

    def to_flags(self) -> Dict[str, bool]:
        """Flag names as the token system contract expects them."""
        return {
            "canUpgrade": self.can_upgrade,
            "canMint": self.can_mint,
            "canBurn": self.can_burn,
            "canChangeOwner": self.can_change_owner,
            "canPause": self.can_pause,
            "canFreeze": self.can_freeze,
            "canWipe": self.can_wipe,
        }


@dataclass(slots=True, frozen=True)
class TokenInfo:
    id: str
    name: str
    ticker: str
    owner: Address
    supply: ScaledDecimal
    decimals: int
    paused: bool
    config: TokenConfig

    @property
    def display_supply(self) -> ScaledDecimal:
        return ScaledDecimal(self.supply.value, Scale.RAW, self.decimals).to_display_scale()


__all__ = [
    "Address",
    "Hash",
    "NetworkConfigDict",
    "AccountDict",
    "QueryResultDict",
    "TxWireDict",
    "raw_amount",
    "wire_fields",
    "NetworkConfig",
    "Account",
    "ContractQueryParams",
    "ContractQueryResult",
    "Transaction",
    "SignedTransaction",
    "TransactionStatus",
    "classify_status",
    "collect_smart_contract_errors",
    "TransactionOnChain",
    "TransactionReceipt",
    "TokenTransfer",
    "TokenConfig",
    "TokenInfo",
]
