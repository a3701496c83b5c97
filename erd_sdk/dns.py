"""
erd_sdk.dns
===========

Name resolution against the per-shard DNS contracts.

    dns = Dns(TransactionOptions(provider=p))
    addr = await dns.resolve("alice.elrond")   # "" when unregistered
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .contracts.client import Contract
from .contracts.query import QueryResultType, parse_query_result
from .tx.build import TransactionOptions, TransactionOptionsBase
from .tx.encode import string_to_hex

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_SHARD_CONTRACTS", "Dns"]

DEFAULT_SHARD_CONTRACTS = (
    # shard 0
    "erd1qqqqqqqqqqqqqpgqe2cmllq3zhwfuzdpdzqh7223xnc907ffqphs865ruf",
    "erd1qqqqqqqqqqqqqpgq776u6lt7u5dr6ekn0636t3ua845gfppgqq4q4gewzt",
    # shard 1
    "erd1qqqqqqqqqqqqqpgq3uxwmwtgmms6jytn3vzlw89vrxxe9xjwqrmsjex283",
    # shard 2
    "erd1qqqqqqqqqqqqqpgqhmfvs04uzqrjajvslgsypfjhtyyaz7esqqjspwx8zh",
    "erd1qqqqqqqqqqqqqpgqmta7xtt292599mray67za5c3rl2yc5h0qq5sfya89w",
)


class Dns(TransactionOptionsBase):
    def __init__(
        self,
        options: Optional[TransactionOptions] = None,
        shard_contracts: Optional[Sequence[str]] = None,
    ) -> None:
        super().__init__(options)
        self._contracts = tuple(shard_contracts) if shard_contracts else DEFAULT_SHARD_CONTRACTS

    @property
    def shard_contracts(self) -> Sequence[str]:
        return self._contracts

    async def resolve(self, name: str, options: Optional[TransactionOptions] = None) -> str:
        """Bech32 address registered for `name`, or "" if no DNS contract knows it."""
        opts = self._merge_options(options, "provider")
        for address in self._contracts:
            contract = await Contract.at(address, opts)
            result = await contract.query("resolve", [string_to_hex(name)])
            if result.return_data:
                resolved = str(parse_query_result(result, QueryResultType.ADDRESS))
                logger.debug("dns %s -> %s (via %s)", name, resolved, address)
                return resolved
        return ""
