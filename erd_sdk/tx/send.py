"""
erd_sdk.tx.send
===============

Sign, broadcast and track transactions.

Primary entry points
--------------------
- sign_and_send(tx, signer, provider) -> TransactionReceipt
    Signs with the given signer (which resolves nonce/chain id through the
    provider) and broadcasts the result.

- TransactionTracker(provider, tx_hash).wait_for_completion(cancel=None)
    Polls `provider.get_transaction(tx_hash)` every `poll_interval` seconds
    (5s by default) until the transaction reaches a terminal status.

Tracker states
--------------
PENDING (initial) -> SUCCESS | FAILURE (terminal, sticky).

- SUCCESS resolves with the full receipt.
- FAILURE raises `TransactionFailedError` carrying the partial receipt.
- A failed poll (node unreachable, error envelope, ...) raises `TrackingError`;
  polling is not retried.
- Setting the optional `cancel` event makes the next scheduled poll raise
  `TrackingCancelled` instead of polling again.

Polls of one tracker are strictly sequential; independent trackers share
nothing and can run concurrently.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import TYPE_CHECKING, Optional

from ..errors import (ErdSdkError, TrackingCancelled, TrackingError,
                      TransactionFailedError)
from ..types.core import (Transaction, TransactionOnChain, TransactionReceipt,
                          TransactionStatus)

if TYPE_CHECKING:  # pragma: no cover
    from ..provider.proxy import Provider
    from ..wallet.signer import Signer

__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "TransactionTracker",
    "failure_message",
    "sign_and_send",
    "wait_for_transaction",
]

DEFAULT_POLL_INTERVAL = 5.0


def failure_message(tx_hash: str, on_chain: Optional[TransactionOnChain]) -> str:
    if on_chain is not None and on_chain.smart_contract_errors:
        return "Smart contract error:\n\n" + "\n".join(on_chain.smart_contract_errors)
    return f"Transaction failed: {tx_hash}"


class TransactionTracker:
    """Polls one transaction hash until it succeeds or fails."""

    def __init__(
        self,
        provider: "Provider",
        tx_hash: str,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if poll_interval < 0:
            raise ValueError("poll_interval must be non-negative")
        self._provider = provider
        self._tx_hash = tx_hash
        self._poll_interval = float(poll_interval)
        self._log = logger or logging.getLogger(__name__)
        self._lock = asyncio.Lock()
        self._receipt = TransactionReceipt(hash=tx_hash)
        self._status = TransactionStatus.PENDING
        self._error: Optional[ErdSdkError] = None
        self._polls = 0

    @property
    def tx_hash(self) -> str:
        return self._tx_hash

    @property
    def status(self) -> TransactionStatus:
        return self._status

    @property
    def receipt(self) -> TransactionReceipt:
        return self._receipt

    @property
    def polls(self) -> int:
        return self._polls

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    async def _sleep(self, cancel: Optional[asyncio.Event]) -> bool:
        """Wait one poll interval. Returns True if `cancel` fired first."""
        if cancel is None:
            await asyncio.sleep(self._poll_interval)
            return False
        if cancel.is_set():
            return True
        try:
            await asyncio.wait_for(cancel.wait(), timeout=self._poll_interval)
        except asyncio.TimeoutError:
            return False
        return True

    def _settled(self) -> TransactionReceipt:
        if self._error is not None:
            raise self._error
        return self._receipt

    async def wait_for_completion(self, cancel: Optional[asyncio.Event] = None) -> TransactionReceipt:
        """
        Wait until the transaction has finished executing.

        Raises:
            TransactionFailedError: the transaction failed on-chain.
            TrackingError: a status poll failed.
            TrackingCancelled: `cancel` was set before the next poll.
        """
        async with self._lock:
            if self._status.is_terminal or self._error is not None:
                return self._settled()

            while True:
                if await self._sleep(cancel):
                    self._log.info("tracking cancelled tx=%s after %d poll(s)", self._tx_hash, self._polls)
                    raise TrackingCancelled("cancelled", tx_hash=self._tx_hash)

                try:
                    on_chain = await self._provider.get_transaction(self._tx_hash)
                except Exception as e:  # CancelledError is a BaseException
                    self._error = TrackingError(
                        f"Error checking transaction {self._tx_hash}: {e}",
                        tx_hash=self._tx_hash,
                        cause=e,
                    )
                    self._log.warning("status poll failed tx=%s: %s", self._tx_hash, e)
                    raise self._error from e

                self._polls += 1
                self._receipt = dataclasses.replace(self._receipt, transaction_on_chain=on_chain)
                self._log.debug(
                    "poll #%d tx=%s raw_status=%s -> %s",
                    self._polls,
                    self._tx_hash,
                    on_chain.raw_status,
                    on_chain.status.name,
                )

                if on_chain.status is TransactionStatus.FAILURE:
                    self._status = TransactionStatus.FAILURE
                    if on_chain.smart_contract_errors and on_chain.raw_status in ("success", "executed"):
                        self._log.warning(
                            "tx=%s reported %s but carries smart contract errors; treating as failed",
                            self._tx_hash,
                            on_chain.raw_status,
                        )
                    self._error = TransactionFailedError(failure_message(self._tx_hash, on_chain), self._receipt)
                    self._log.info("tx=%s failed", self._tx_hash)
                    raise self._error

                if on_chain.status is TransactionStatus.SUCCESS:
                    self._status = TransactionStatus.SUCCESS
                    self._log.info("tx=%s succeeded after %d poll(s)", self._tx_hash, self._polls)
                    return self._receipt


async def wait_for_transaction(
    provider: "Provider",
    tx_hash: str,
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    cancel: Optional[asyncio.Event] = None,
) -> TransactionReceipt:
    tracker = TransactionTracker(provider, tx_hash, poll_interval=poll_interval)
    return await tracker.wait_for_completion(cancel=cancel)


async def sign_and_send(
    tx: Transaction,
    signer: "Signer",
    provider: "Provider",
) -> TransactionReceipt:
    signed = await signer.sign_transaction(tx, provider)
    return await provider.send_signed_transaction(signed)
