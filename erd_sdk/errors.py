"""
Typed error classes for the erd-sdk.

Encoding/decoding helpers raise synchronously (`InvalidNumberFormat`,
`InvalidAddressFormat`, `QueryDecodeError`); transaction building raises
`MissingRequiredField`; everything that talks to a node surfaces
`NodeResponseError`, and transaction tracking resolves failures through
`TransactionFailedError` / `TrackingError`. All of them derive from
`ErdSdkError` so callers can catch the whole family at once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .types.core import TransactionReceipt

__all__ = [
    "ErdSdkError",
    "InvalidNumberFormat",
    "InvalidAddressFormat",
    "MissingRequiredField",
    "NodeResponseError",
    "QueryDecodeError",
    "TransactionFailedError",
    "TrackingError",
    "TrackingCancelled",
    "WalletError",
]


class ErdSdkError(Exception):
    """Base class for all SDK errors."""


@dataclass(slots=True)
class InvalidNumberFormat(ErdSdkError, ValueError):
    """Raised when a value cannot be interpreted as a decimal number."""

    value: Any
    reason: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        suffix = f" ({self.reason})" if self.reason else ""
        return f"InvalidNumberFormat: {self.value!r}{suffix}"


@dataclass(slots=True)
class InvalidAddressFormat(ErdSdkError, ValueError):
    """Raised for malformed address text or raw key bytes."""

    address: Any
    reason: str = "malformed address"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"InvalidAddressFormat: {self.address!r}: {self.reason}"


@dataclass(slots=True)
class MissingRequiredField(ErdSdkError, ValueError):
    """Raised when merged transaction options lack a field an operation needs."""

    field: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.field} must be set"


@dataclass(slots=True)
class NodeResponseError(ErdSdkError):
    """
    Raised when the node answers with an explicit error, a non-`successful`
    code, no data, or cannot be reached at all.

    Fields:
      - message: human-readable description (prefixed with the operation)
      - path: API path that was called, when known
      - code: the node's `code` field, when present
      - http_status: HTTP status of the response, when there was one
    """

    message: str
    path: Optional[str] = None
    code: Optional[str] = None
    http_status: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        parts = [self.message]
        if self.path:
            parts.append(f"path={self.path}")
        if self.code:
            parts.append(f"code={self.code}")
        if self.http_status is not None:
            parts.append(f"http={self.http_status}")
        return " ".join(parts)


@dataclass(slots=True)
class QueryDecodeError(ErdSdkError, ValueError):
    """Raised when a present query return value cannot be read as the requested type."""

    message: str
    index: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f" [index={self.index}]" if self.index is not None else ""
        return f"QueryDecodeError{where}: {self.message}"


@dataclass(slots=True)
class TransactionFailedError(ErdSdkError):
    """
    Raised when a broadcast transaction fails on-chain.

    `receipt` carries the partial receipt (hash plus the on-chain record), which
    is usually the only place the failure reason can be found.
    """

    message: str
    receipt: Optional["TransactionReceipt"] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message

    @property
    def transaction(self):
        """On-chain transaction record, if one was fetched."""
        return self.receipt.transaction_on_chain if self.receipt is not None else None


@dataclass(slots=True)
class TrackingError(ErdSdkError):
    """Raised when polling a transaction's status fails for I/O reasons."""

    message: str
    tx_hash: Optional[str] = None
    cause: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        suffix = f" tx={self.tx_hash}" if self.tx_hash else ""
        return f"TrackingError{suffix}: {self.message}"


@dataclass(slots=True)
class TrackingCancelled(TrackingError):
    """Raised by a tracker whose caller signalled cancellation before the next poll."""


@dataclass(slots=True)
class WalletError(ErdSdkError, ValueError):
    """Raised when key material cannot be loaded or a wallet cannot sign a transaction."""

    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message
