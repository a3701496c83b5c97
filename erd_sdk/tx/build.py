"""
erd_sdk.tx.build
================

Transaction options and builders.

Options
-------
`TransactionOptions` bundles everything an operation may need (sender, value,
gas overrides, signer metadata, explicit nonce, provider, signer, attached
ESDT transfer). Classes that take base options at construction and accept
per-call overrides derive from `TransactionOptionsBase`; every merge goes
through one function::

    opts = merge_transaction_options(base, overrides, "sender", "provider")

Fields set (not None) in `overrides` win. Any field named in `required` that
is still absent raises `MissingRequiredField`.

Builders
--------
A `TransactionBuilder` knows its receiver and its `data` string; `build()`
fetches the network configuration and fills in default gas::

    gas_price = min_gas_price
    gas_limit = min_gas_limit + gas_per_data_byte * len(data)

Caller-supplied `gas_price` / `gas_limit` always win over these defaults.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence, Tuple, Union

from ..bignum import ScaledDecimal
from ..errors import MissingRequiredField
from ..types.core import NetworkConfig, TokenTransfer, Transaction
from .encode import join_data_arguments, number_to_hex, string_to_hex

if TYPE_CHECKING:  # pragma: no cover
    from ..provider.proxy import Provider
    from ..wallet.signer import Signer

logger = logging.getLogger(__name__)

__all__ = [
    "ESDT_TRANSFER",
    "TransactionOptions",
    "merge_transaction_options",
    "TransactionOptionsBase",
    "build_payload",
    "default_gas",
    "set_default_gas_price_and_limit",
    "TransactionBuilder",
    "TransferBuilder",
    "build_transaction",
]

ESDT_TRANSFER = "ESDTTransfer"


@dataclass(slots=True, frozen=True)
class TransactionOptions:
    sender: Optional[str] = None
    value: Optional[Union[ScaledDecimal, int, str]] = None
    gas_price: Optional[int] = None
    gas_limit: Optional[int] = None
    meta: Optional[Mapping[str, Any]] = None
    nonce: Optional[int] = None
    provider: Optional["Provider"] = None
    signer: Optional["Signer"] = None
    esdt: Optional[TokenTransfer] = None


_FIELDS = tuple(f.name for f in dataclasses.fields(TransactionOptions))


def _absent(v: Any) -> bool:
    return v is None or (isinstance(v, str) and v == "")


def merge_transaction_options(
    base: Optional[TransactionOptions],
    overrides: Optional[TransactionOptions],
    *required: str,
) -> TransactionOptions:
    """Merge `overrides` onto `base` (neither is modified) and check `required` fields."""
    merged = base or TransactionOptions()
    if overrides is not None:
        changes = {
            name: getattr(overrides, name)
            for name in _FIELDS
            if not _absent(getattr(overrides, name))
        }
        merged = dataclasses.replace(merged, **changes)
    for name in required:
        if name not in _FIELDS:
            raise ValueError(f"unknown transaction option: {name}")
        if _absent(getattr(merged, name)):
            raise MissingRequiredField(name)
    return merged


class TransactionOptionsBase:
    """Holds base options; subclasses merge per-call overrides on top."""

    def __init__(self, options: Optional[TransactionOptions] = None) -> None:
        self._options = options or TransactionOptions()

    @property
    def options(self) -> TransactionOptions:
        return self._options

    def _merge_options(self, overrides: Optional[TransactionOptions] = None, *required: str) -> TransactionOptions:
        return merge_transaction_options(self._options, overrides, *required)


def build_payload(function: Optional[str], args: Sequence[str] = (), esdt: Optional[TokenTransfer] = None) -> str:
    """
    `function@arg0@arg1...` with arguments already hex-encoded.

    With an ESDT transfer attached the payload becomes
    ``ESDTTransfer@<token hex>@<amount hex>[@<function hex>@args...]``.
    """
    if esdt is not None:
        head = [ESDT_TRANSFER, string_to_hex(esdt.token_id), number_to_hex(esdt.value)]
        if function:
            head.append(string_to_hex(function))
        return join_data_arguments(*head, *args)
    if not function:
        return join_data_arguments(*args) if args else ""
    return join_data_arguments(function, *args)


def default_gas(config: NetworkConfig, data: Optional[str]) -> Tuple[int, int]:
    """(gas_price, gas_limit) defaults for a payload under `config`."""
    size = len((data or "").encode("utf-8"))
    return config.min_gas_price, config.min_gas_limit + config.gas_per_data_byte * size


async def set_default_gas_price_and_limit(tx: Transaction, provider: "Provider") -> Transaction:
    """Copy of `tx` with default gas price/limit from the live network config."""
    config = await provider.get_network_config()
    gas_price, gas_limit = default_gas(config, tx.data)
    return dataclasses.replace(tx, gas_price=gas_price, gas_limit=gas_limit)


class TransactionBuilder(TransactionOptionsBase):
    """Base class for anything that turns into a signable `Transaction`."""

    def data_string(self) -> str:
        raise NotImplementedError

    def receiver_address(self) -> str:
        raise NotImplementedError

    async def build(self) -> Transaction:
        opts = self._options
        if _absent(opts.sender):
            raise MissingRequiredField("sender")
        if opts.provider is None:
            raise MissingRequiredField("provider")
        receiver = self.receiver_address()
        if _absent(receiver):
            raise MissingRequiredField("receiver")

        data = self.data_string()
        tx = Transaction(
            sender=opts.sender,  # type: ignore[arg-type]
            receiver=receiver,
            value=ScaledDecimal(opts.value if opts.value is not None else 0).to_raw_scale(),
            data=data or None,
            meta=opts.meta,
            nonce=opts.nonce,
        )
        tx = await set_default_gas_price_and_limit(tx, opts.provider)
        if opts.gas_price is not None or opts.gas_limit is not None:
            tx = dataclasses.replace(
                tx,
                gas_price=opts.gas_price if opts.gas_price is not None else tx.gas_price,
                gas_limit=opts.gas_limit if opts.gas_limit is not None else tx.gas_limit,
            )
        logger.debug(
            "built tx receiver=%s gas_price=%s gas_limit=%s data_len=%d",
            tx.receiver,
            tx.gas_price,
            tx.gas_limit,
            len(data),
        )
        return tx


class TransferBuilder(TransactionBuilder):
    """Plain value transfer, optionally with a function call or ESDT attached."""

    def __init__(
        self,
        receiver: Optional[str],
        function: Optional[str] = None,
        args: Sequence[str] = (),
        options: Optional[TransactionOptions] = None,
    ) -> None:
        super().__init__(options)
        self._receiver = receiver
        self._function = function
        self._args = tuple(args)

    def data_string(self) -> str:
        return build_payload(self._function, self._args, self._options.esdt)

    def receiver_address(self) -> str:
        return self._receiver or ""


async def build_transaction(
    receiver: Optional[str],
    function: Optional[str] = None,
    args: Sequence[str] = (),
    options: Optional[TransactionOptions] = None,
) -> Transaction:
    """Shortcut for ``TransferBuilder(...).build()``."""
    return await TransferBuilder(receiver, function, args, options).build()
