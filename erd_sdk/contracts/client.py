"""
erd_sdk.contracts.client
========================

High-level contract handle.

    contract = await Contract.at("erd1qqq...", TransactionOptions(provider=p, signer=w, sender=w.address()))
    result = await contract.query("getSum")
    total = parse_query_result(result, QueryResultType.BIG_INT)
    receipt = await contract.invoke("add", [number_to_hex(5)])

Arguments passed to `query`/`invoke` are already hex-encoded tokens (see
`erd_sdk.tx.encode` for helpers). Options given to a call are merged over the
options the handle was created with.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Pattern, Sequence, Union

from ..address import ZERO_ADDRESS
from ..errors import NodeResponseError
from ..tx.build import (TransactionBuilder, TransactionOptions,
                        TransactionOptionsBase, build_payload)
from ..tx.send import sign_and_send
from ..types.core import (ContractQueryParams, ContractQueryResult,
                          TransactionReceipt)
from .deployer import (ContractMetadata, compute_deployed_address,
                       deploy_payload, upgrade_payload)
from .query import QueryResultType, QueryValue, parse_query_result

logger = logging.getLogger(__name__)

__all__ = [
    "Contract",
    "ContractInvocation",
    "ContractDeployment",
    "ContractUpgrade",
    "ContractDeploymentReceipt",
]

Code = Union[bytes, bytearray, str]


class ContractInvocation(TransactionBuilder):
    """Transaction calling `function` on the contract at `address`."""

    def __init__(
        self,
        address: str,
        function: str,
        args: Sequence[str] = (),
        options: Optional[TransactionOptions] = None,
    ) -> None:
        super().__init__(options)
        self._address = address
        self._function = function
        self._args = tuple(args)

    def data_string(self) -> str:
        return build_payload(self._function, self._args, self._options.esdt)

    def receiver_address(self) -> str:
        return self._address


class ContractDeployment(TransactionBuilder):
    def __init__(
        self,
        code: Code,
        metadata: Optional[ContractMetadata] = None,
        args: Sequence[str] = (),
        options: Optional[TransactionOptions] = None,
    ) -> None:
        super().__init__(options)
        self._data = deploy_payload(code, metadata, args)

    def data_string(self) -> str:
        return self._data

    def receiver_address(self) -> str:
        return ZERO_ADDRESS


class ContractUpgrade(TransactionBuilder):
    def __init__(
        self,
        address: str,
        code: Code,
        metadata: Optional[ContractMetadata] = None,
        args: Sequence[str] = (),
        options: Optional[TransactionOptions] = None,
    ) -> None:
        super().__init__(options)
        self._address = address
        self._data = upgrade_payload(code, metadata, args)

    def data_string(self) -> str:
        return self._data

    def receiver_address(self) -> str:
        return self._address


@dataclass(slots=True, frozen=True)
class ContractDeploymentReceipt:
    receipt: TransactionReceipt
    contract: "Contract"

    @property
    def hash(self) -> str:
        return self.receipt.hash

    @property
    def address(self) -> str:
        return self.contract.address


class Contract(TransactionOptionsBase):
    def __init__(self, address: str, options: Optional[TransactionOptions] = None) -> None:
        super().__init__(options)
        self._address = address

    @property
    def address(self) -> str:
        return self._address

    @classmethod
    async def at(cls, address: str, options: Optional[TransactionOptions] = None) -> "Contract":
        """
        Handle for the contract at `address`.

        When `options` carries a provider the address is checked to hold code.
        """
        c = cls(address, options)
        provider = c.options.provider
        if provider is not None:
            try:
                account = await provider.get_address(address)
            except NodeResponseError as e:
                raise NodeResponseError(f"Error checking for contract code: {e.message}", path=e.path, code=e.code) from e
            if not account.code:
                raise NodeResponseError(f"Error checking for contract code: no code found at {address}")
        return c

    async def query(
        self,
        function: str,
        args: Sequence[str] = (),
        options: Optional[TransactionOptions] = None,
    ) -> ContractQueryResult:
        """Call `function` read-only, without a transaction."""
        opts = self._merge_options(options, "provider")
        return await opts.provider.query_contract(  # type: ignore[union-attr]
            ContractQueryParams(contract_address=self._address, function_name=function, args=tuple(args))
        )

    async def query_value(
        self,
        function: str,
        kind: QueryResultType,
        args: Sequence[str] = (),
        *,
        index: int = 0,
        pattern: Optional[Union[str, Pattern[str]]] = None,
        options: Optional[TransactionOptions] = None,
    ) -> QueryValue:
        result = await self.query(function, args, options)
        return parse_query_result(result, kind, index, pattern)

    def create_invocation(
        self,
        function: str,
        args: Sequence[str] = (),
        options: Optional[TransactionOptions] = None,
    ) -> ContractInvocation:
        return ContractInvocation(self._address, function, args, self._merge_options(options, "provider"))

    async def invoke(
        self,
        function: str,
        args: Sequence[str] = (),
        options: Optional[TransactionOptions] = None,
    ) -> TransactionReceipt:
        """Call `function` with a signed transaction; returns once broadcast."""
        opts = self._merge_options(options, "sender", "signer", "provider")
        tx = await ContractInvocation(self._address, function, args, opts).build()
        logger.debug("invoke %s on %s", function, self._address)
        return await sign_and_send(tx, opts.signer, opts.provider)  # type: ignore[arg-type]

    @classmethod
    async def deploy(
        cls,
        code: Code,
        metadata: Optional[ContractMetadata] = None,
        args: Sequence[str] = (),
        options: Optional[TransactionOptions] = None,
    ) -> ContractDeploymentReceipt:
        """
        Deploy `code`. The returned receipt carries a handle for the new
        contract, whose address is computed from the signed transaction's
        sender and nonce.
        """
        base = TransactionOptionsBase(options)
        opts = base._merge_options(None, "sender", "signer", "provider")
        tx = await ContractDeployment(code, metadata, args, opts).build()
        signed = await opts.signer.sign_transaction(tx, opts.provider)  # type: ignore[union-attr]
        address = compute_deployed_address(signed.sender, signed.nonce)
        receipt = await opts.provider.send_signed_transaction(signed)  # type: ignore[union-attr]
        logger.info("deploying contract %s (tx=%s)", address, receipt.hash)
        return ContractDeploymentReceipt(receipt=receipt, contract=cls(address, options))

    async def upgrade(
        self,
        code: Code,
        metadata: Optional[ContractMetadata] = None,
        args: Sequence[str] = (),
        options: Optional[TransactionOptions] = None,
    ) -> TransactionReceipt:
        opts = self._merge_options(options, "sender", "signer", "provider")
        tx = await ContractUpgrade(self._address, code, metadata, args, opts).build()
        return await sign_and_send(tx, opts.signer, opts.provider)  # type: ignore[arg-type]
