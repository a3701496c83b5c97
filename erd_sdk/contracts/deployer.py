"""
erd_sdk.contracts.deployer
==========================

Contract deployment payloads and deterministic contract addresses.

Address derivation
------------------
A contract's address depends only on the deployer's public key and the nonce
of the deploy transaction::

    h    = keccak256(deployer_pubkey || nonce.to_bytes(8, "little"))
    addr = 8 zero bytes || VM type (05 00) || h[10:30] || deployer_pubkey[30:32]

The node does exactly the same, so the address can be computed before the
transaction is even sent.

Payloads
--------
- deploy:  ``<code hex>@0500@<metadata>@<args...>`` sent to ZERO_ADDRESS
- upgrade: ``upgradeContract@<code hex>@<metadata>@<args...>`` sent to the contract

`<metadata>` is two bytes of hex: byte 0 holds ``upgradeable`` (0x01) and
``readable`` (0x04), byte 1 holds ``payable`` (0x02).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence, Union

from ..address import decode as decode_address
from ..address import encode as encode_address
from ..tx.encode import join_data_arguments
from ..utils.hash import keccak256

if TYPE_CHECKING:  # pragma: no cover
    from ..provider.proxy import Provider

__all__ = [
    "VM_TYPE",
    "UPGRADE_FUNCTION",
    "ContractMetadata",
    "contract_metadata_to_string",
    "code_to_hex",
    "deploy_payload",
    "upgrade_payload",
    "compute_deployed_address",
    "compute_deployed_address_for",
]

VM_TYPE = bytes.fromhex("0500")
UPGRADE_FUNCTION = "upgradeContract"

_UPGRADEABLE = 0x01
_READABLE = 0x04
_PAYABLE = 0x02


@dataclass(slots=True, frozen=True)
class ContractMetadata:
    upgradeable: bool = False
    readable: bool = False
    payable: bool = False


def contract_metadata_to_string(metadata: Optional[ContractMetadata] = None) -> str:
    m = metadata or ContractMetadata()
    b0 = (_UPGRADEABLE if m.upgradeable else 0) | (_READABLE if m.readable else 0)
    b1 = _PAYABLE if m.payable else 0
    return f"{b0:02x}{b1:02x}"


def code_to_hex(code: Union[bytes, bytearray, str]) -> str:
    """Contract bytecode as hex. Strings are taken to be hex already."""
    if isinstance(code, (bytes, bytearray)):
        return bytes(code).hex()
    s = code[2:] if code.lower().startswith("0x") else code
    bytes.fromhex(s)  # validate
    return s.lower()


def deploy_payload(
    code: Union[bytes, bytearray, str],
    metadata: Optional[ContractMetadata] = None,
    args: Sequence[str] = (),
) -> str:
    return join_data_arguments(code_to_hex(code), VM_TYPE.hex(), contract_metadata_to_string(metadata), *args)


def upgrade_payload(
    code: Union[bytes, bytearray, str],
    metadata: Optional[ContractMetadata] = None,
    args: Sequence[str] = (),
) -> str:
    return join_data_arguments(UPGRADE_FUNCTION, code_to_hex(code), contract_metadata_to_string(metadata), *args)


def compute_deployed_address(deployer: str, nonce: int) -> str:
    """Address a contract deployed by `deployer` with transaction nonce `nonce` will get."""
    if nonce < 0:
        raise ValueError("nonce must be non-negative")
    pubkey = decode_address(deployer)
    h = keccak256(pubkey, int(nonce).to_bytes(8, "little"))
    raw = bytes(8) + VM_TYPE + h[10:30] + pubkey[30:32]
    return encode_address(raw)


async def compute_deployed_address_for(provider: "Provider", deployer: str, nonce: Optional[int] = None) -> str:
    """Like `compute_deployed_address`, fetching the deployer's current nonce when none is given."""
    if nonce is None:
        nonce = (await provider.get_address(deployer)).nonce
    return compute_deployed_address(deployer, nonce)
