"""
erd_sdk.token.client
====================

ESDT tokens. Every management operation is a contract invocation against the
metachain token contract; transfers are `ESDTTransfer` payloads sent straight
to the receiver.

    token = await Token.load("MYTOKEN-a1b2c3", TransactionOptions(provider=p, signer=w, sender=w.address()))
    info = await token.get_info()
    await token.transfer("erd1...", 100)
    await token.pause()

Management calls default to `TOKEN_MGMT_STANDARD_GAS_COST`; a `gas_limit` in
the per-call options wins.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from ..address import METACHAIN_TOKEN_CONTRACT
from ..bignum import ScaledDecimal
from ..contracts.client import Contract
from ..contracts.query import QueryResultType, parse_query_result
from ..errors import NodeResponseError, QueryDecodeError
from ..tx.build import TransactionBuilder, TransactionOptions, TransactionOptionsBase, merge_transaction_options
from ..tx.encode import (ARGS_DELIMITER, address_to_hex,
                         convert_map_to_data_arguments, join_data_arguments,
                         number_to_hex, string_to_hex)
from ..tx.send import DEFAULT_POLL_INTERVAL, sign_and_send, wait_for_transaction
from ..types.core import ContractQueryResult, TokenConfig, TokenInfo, TransactionReceipt

logger = logging.getLogger(__name__)

__all__ = [
    "TOKEN_MGMT_STANDARD_GAS_COST",
    "TOKEN_ISSUE_COST",
    "TokenTransferBuilder",
    "token_info_from_properties",
    "Token",
]

TOKEN_MGMT_STANDARD_GAS_COST = 51_000_000
TOKEN_ISSUE_COST = 5_000_000_000_000_000_000  # 5 EGLD, raw

Amount = Union[int, str, ScaledDecimal]

_FLAG_INDICES = (
    ("can_upgrade", 5),
    ("can_mint", 6),
    ("can_burn", 7),
    ("can_change_owner", 8),
    ("can_pause", 9),
    ("can_freeze", 10),
    ("can_wipe", 11),
)


class TokenTransferBuilder(TransactionBuilder):
    """`ESDTTransfer@<token hex>@<amount hex>` sent to `receiver`."""

    def __init__(
        self,
        receiver: str,
        token_id: str,
        amount: Amount,
        options: Optional[TransactionOptions] = None,
    ) -> None:
        super().__init__(options)
        self._receiver = receiver
        self._token_id = token_id
        self._amount = amount

    def data_string(self) -> str:
        return join_data_arguments("ESDTTransfer", string_to_hex(self._token_id), number_to_hex(self._amount))

    def receiver_address(self) -> str:
        return self._receiver


def _text(result: ContractQueryResult, index: int) -> str:
    return str(parse_query_result(result, QueryResultType.STRING, index))


def _flag(result: ContractQueryResult, index: int) -> bool:
    return "true" in _text(result, index)


def token_info_from_properties(token_id: str, result: ContractQueryResult) -> TokenInfo:
    """
    Decode a `getTokenProperties` answer.

    Values are text: name, owner, supply, decimals, then the paused flag and
    the seven configuration flags, each of which counts as set when its text
    contains ``true``.
    """
    try:
        decimals = int(parse_query_result(result, QueryResultType.INT, 3, r"(\d+)"))
    except QueryDecodeError:
        decimals = 0
    supply_text = _text(result, 2) or "0"
    return TokenInfo(
        id=token_id,
        name=_text(result, 0),
        ticker=token_id.split("-", 1)[0],
        owner=_text(result, 1),
        supply=ScaledDecimal(supply_text),
        decimals=decimals,
        paused=_flag(result, 4),
        config=TokenConfig(**{name: _flag(result, idx) for name, idx in _FLAG_INDICES}),
    )


class Token(TransactionOptionsBase):
    """Handle for one ESDT token."""

    def __init__(self, token_id: str, options: Optional[TransactionOptions] = None) -> None:
        super().__init__(options)
        self._id = token_id
        self._contract = Contract(METACHAIN_TOKEN_CONTRACT, options)

    @property
    def id(self) -> str:
        return self._id

    @property
    def contract(self) -> Contract:
        return self._contract

    # ---------- discovery ----------

    @staticmethod
    async def get_all_token_ids(options: TransactionOptions) -> List[str]:
        result = await Contract(METACHAIN_TOKEN_CONTRACT, options).query("getAllESDTTokens")
        text = str(parse_query_result(result, QueryResultType.STRING))
        return [t for t in text.split(ARGS_DELIMITER) if t]

    @classmethod
    async def load(cls, token_id: str, options: TransactionOptions) -> "Token":
        """Handle for an existing token; fails if the node does not know `token_id`."""
        token = cls(token_id, options)
        await token.get_info()
        return token

    @classmethod
    async def issue(
        cls,
        name: str,
        ticker: str,
        initial_supply: Amount,
        options: TransactionOptions,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> "Token":
        """
        Issue a new token and return a handle for it.

        The node does not report the identifier it assigned, so once the issue
        transaction completes the token list is searched for ids with the
        ticker prefix whose name and owner match. Two identical issuances in
        flight at the same time cannot be told apart; the newest match wins.
        """
        opts = merge_transaction_options(options, None, "sender", "signer", "provider")
        contract = Contract(METACHAIN_TOKEN_CONTRACT, opts)
        receipt = await contract.invoke(
            "issue",
            [string_to_hex(name), string_to_hex(ticker), number_to_hex(initial_supply)],
            TransactionOptions(gas_limit=TOKEN_MGMT_STANDARD_GAS_COST, value=TOKEN_ISSUE_COST),
        )
        await wait_for_transaction(opts.provider, receipt.hash, poll_interval=poll_interval)  # type: ignore[arg-type]

        logger.warning("token id for %s/%s is discovered by listing tokens; concurrent issuance can race", name, ticker)
        prefix = f"{ticker}-"
        candidates = [t for t in await cls.get_all_token_ids(opts) if t.startswith(prefix)]
        for token_id in reversed(candidates):
            token = cls(token_id, options)
            info = await token.get_info()
            if info.name == name and info.owner == opts.sender:
                logger.info("issued token %s (tx=%s)", token_id, receipt.hash)
                return token
        raise NodeResponseError(f"Error locating issued token {ticker}: no matching id after tx {receipt.hash}")

    # ---------- read side ----------

    async def get_info(self, options: Optional[TransactionOptions] = None) -> TokenInfo:
        result = await self._contract.query("getTokenProperties", [string_to_hex(self._id)], options)
        return token_info_from_properties(self._id, result)

    # ---------- transfers ----------

    async def transfer(
        self, to: str, amount: Amount, options: Optional[TransactionOptions] = None
    ) -> TransactionReceipt:
        opts = self._merge_options(options, "sender", "provider", "signer")
        tx = await TokenTransferBuilder(to, self._id, amount, opts).build()
        return await sign_and_send(tx, opts.signer, opts.provider)  # type: ignore[arg-type]

    # ---------- management ----------

    async def _manage(
        self, function: str, args: List[str], options: Optional[TransactionOptions]
    ) -> TransactionReceipt:
        opts = merge_transaction_options(TransactionOptions(gas_limit=TOKEN_MGMT_STANDARD_GAS_COST), options)
        logger.debug("token %s: %s", self._id, function)
        return await self._contract.invoke(function, [string_to_hex(self._id), *args], opts)

    async def mint(self, amount: Amount, options: Optional[TransactionOptions] = None) -> TransactionReceipt:
        return await self._manage("mint", [number_to_hex(amount)], options)

    async def burn(self, amount: Amount, options: Optional[TransactionOptions] = None) -> TransactionReceipt:
        return await self._manage("ESDTBurn", [number_to_hex(amount)], options)

    async def pause(self, options: Optional[TransactionOptions] = None) -> TransactionReceipt:
        return await self._manage("pause", [], options)

    async def unpause(self, options: Optional[TransactionOptions] = None) -> TransactionReceipt:
        return await self._manage("unPause", [], options)

    async def freeze(self, address: str, options: Optional[TransactionOptions] = None) -> TransactionReceipt:
        return await self._manage("freeze", [address_to_hex(address)], options)

    async def unfreeze(self, address: str, options: Optional[TransactionOptions] = None) -> TransactionReceipt:
        return await self._manage("unFreeze", [address_to_hex(address)], options)

    async def wipe(self, address: str, options: Optional[TransactionOptions] = None) -> TransactionReceipt:
        return await self._manage("wipe", [address_to_hex(address)], options)

    async def change_owner(self, new_owner: str, options: Optional[TransactionOptions] = None) -> TransactionReceipt:
        return await self._manage("transferOwnership", [address_to_hex(new_owner)], options)

    async def update_config(self, config: TokenConfig, options: Optional[TransactionOptions] = None) -> TransactionReceipt:
        return await self._manage("controlChanges", convert_map_to_data_arguments(config.to_flags()), options)
