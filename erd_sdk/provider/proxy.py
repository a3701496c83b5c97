"""
Async client for a network proxy's REST API.

It provides:
- the `Provider` protocol every other component depends on
- `ProxyProvider`, an httpx-based implementation:
  * GET  /network/config
  * GET  /address/{address}
  * POST /vm-values/query
  * POST /transaction/send
  * GET  /transaction/{hash}?withResults=true
- `parse_raw_transaction`, mapping a node transaction record to
  `TransactionOnChain`

Every response is an envelope ``{"data": ..., "error": "...", "code": "..."}``.
Anything other than ``code == "successful"`` with no error and a `data` member
raises `NodeResponseError`. Transport failures and non-JSON bodies surface as
`NodeResponseError` too. Requests are never retried here.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable

import httpx

from ..config import SDKConfig
from ..errors import NodeResponseError
from ..tx.send import TransactionTracker
from ..types.core import (Account, ContractQueryParams, ContractQueryResult,
                          NetworkConfig, SignedTransaction, TransactionOnChain,
                          TransactionReceipt)

logger = logging.getLogger(__name__)

__all__ = ["Provider", "ProxyProvider", "parse_raw_transaction"]

# raised by the from_node_dict mappers on records of the wrong shape
_MALFORMED = (ValueError, TypeError, AttributeError, KeyError, OverflowError)


@runtime_checkable
class Provider(Protocol):
    async def get_network_config(self) -> NetworkConfig: ...

    async def get_address(self, address: str) -> Account: ...

    async def query_contract(self, params: ContractQueryParams) -> ContractQueryResult: ...

    async def send_signed_transaction(self, signed_tx: SignedTransaction) -> TransactionReceipt: ...

    async def get_transaction(self, tx_hash: str) -> TransactionOnChain: ...


def parse_raw_transaction(raw: Mapping[str, Any], tx_hash: Optional[str] = None) -> TransactionOnChain:
    """Node transaction record -> TransactionOnChain (status classified, errors collected)."""
    return TransactionOnChain.from_node_dict(raw, tx_hash)


class ProxyProvider:
    """A `Provider` speaking to a proxy endpoint over HTTP."""

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        config: Optional[SDKConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._cfg = SDKConfig.with_overrides(config, proxy_url=url) if url or config is None else config
        self._client = client
        self._owns_client = client is None

    @property
    def url(self) -> str:
        return self._cfg.proxy_url

    @property
    def config(self) -> SDKConfig:
        return self._cfg

    # ---------- lifecycle ----------

    async def start(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._cfg.proxy_url,
                timeout=self._cfg.request_timeout,
                headers=self._cfg.http_headers(),
            )
            self._owns_client = True

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ProxyProvider":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ---------- core transport ----------

    async def _call(
        self,
        path: str,
        error_msg: str,
        *,
        method: str = "GET",
        json: Any = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Perform one request and return the envelope's `data` member."""
        if self._client is None:
            await self.start()
        assert self._client is not None  # for type-checkers

        logger.debug("%s %s", method, path)
        try:
            resp = await self._client.request(method, path, json=json, params=params)
        except httpx.HTTPError as exc:
            raise NodeResponseError(f"{error_msg}: {exc}", path=path) from exc

        try:
            body = resp.json()
        except ValueError as exc:
            raise NodeResponseError(
                f"{error_msg}: invalid JSON response", path=path, http_status=resp.status_code
            ) from exc

        if not isinstance(body, dict):
            raise NodeResponseError(f"{error_msg}: unexpected response", path=path, http_status=resp.status_code)

        error = body.get("error")
        code = body.get("code")
        if error or code != "successful":
            raise NodeResponseError(
                f"{error_msg}: {error or code or 'internal error'}",
                path=path,
                code=code,
                http_status=resp.status_code,
            )
        if body.get("data") is None:
            raise NodeResponseError(f"{error_msg}: no data returned", path=path, code=code, http_status=resp.status_code)
        if not isinstance(body["data"], dict):
            raise NodeResponseError(f"{error_msg}: malformed data", path=path, code=code, http_status=resp.status_code)
        return body["data"]

    # ---------- Provider ----------

    async def get_network_config(self) -> NetworkConfig:
        data = await self._call("/network/config", "Error fetching network config")
        try:
            return NetworkConfig.from_node_dict(data.get("config") or {})
        except _MALFORMED as exc:
            raise NodeResponseError("Error fetching network config: malformed config", path="/network/config") from exc

    async def get_address(self, address: str) -> Account:
        data = await self._call(f"/address/{address}", "Error fetching address info")
        account = data.get("account")
        if not account:
            raise NodeResponseError("Error fetching address info: no account returned", path=f"/address/{address}")
        try:
            return Account.from_node_dict(account)
        except _MALFORMED as exc:
            raise NodeResponseError("Error fetching address info: malformed account", path=f"/address/{address}") from exc

    async def get_nonce(self, address: str) -> int:
        return (await self.get_address(address)).nonce

    async def query_contract(self, params: ContractQueryParams) -> ContractQueryResult:
        data = await self._call(
            "/vm-values/query",
            "Error querying contract",
            method="POST",
            json=params.to_node_dict(),
        )
        result = data.get("data")
        if result is None:
            raise NodeResponseError("Error querying contract: no data returned", path="/vm-values/query")
        try:
            return ContractQueryResult.from_node_dict(result)
        except _MALFORMED as exc:
            raise NodeResponseError("Error querying contract: malformed result", path="/vm-values/query") from exc

    async def send_signed_transaction(self, signed_tx: SignedTransaction) -> TransactionReceipt:
        data = await self._call(
            "/transaction/send",
            "Error sending transaction",
            method="POST",
            json=signed_tx.to_node_dict(),
        )
        tx_hash = data.get("txHash")
        if not tx_hash:
            raise NodeResponseError("Error sending transaction: no hash returned", path="/transaction/send")
        logger.info("broadcast tx=%s sender=%s nonce=%d", tx_hash, signed_tx.sender, signed_tx.nonce)
        return TransactionReceipt(hash=tx_hash, signed_transaction=signed_tx)

    async def get_transaction(self, tx_hash: str) -> TransactionOnChain:
        path = f"/transaction/{tx_hash}"
        data = await self._call(path, "Error fetching transaction", params={"withResults": "true"})
        raw = data.get("transaction")
        if not raw:
            raise NodeResponseError("Error fetching transaction: transaction not found", path=path)
        try:
            return parse_raw_transaction(raw, tx_hash)
        except _MALFORMED as exc:
            raise NodeResponseError("Error fetching transaction: malformed record", path=path) from exc

    async def wait_for_transaction(
        self,
        tx_hash: str,
        *,
        poll_interval: Optional[float] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> TransactionReceipt:
        tracker = TransactionTracker(
            self,
            tx_hash,
            poll_interval=self._cfg.poll_interval if poll_interval is None else poll_interval,
        )
        return await tracker.wait_for_completion(cancel=cancel)
