import pytest
from fakes import ALICE, BOB, GAS_PER_DATA_BYTE, MIN_GAS_LIMIT, query_result

from erd_sdk.address import ZERO_ADDRESS, address_to_hex
from erd_sdk.contracts.client import Contract, ContractInvocation
from erd_sdk.contracts.deployer import (ContractMetadata,
                                        compute_deployed_address,
                                        compute_deployed_address_for,
                                        contract_metadata_to_string,
                                        deploy_payload, upgrade_payload)
from erd_sdk.contracts.query import QueryResultType
from erd_sdk.errors import MissingRequiredField, NodeResponseError
from erd_sdk.tx.build import TransactionOptions
from erd_sdk.types.core import TokenTransfer

CODE = bytes.fromhex("0061736d01000000")
ALICE_CONTRACT_0 = "erd1qqqqqqqqqqqqqpgqak8zt22wl2ph4tswtyc39namqx6ysa2sd8ss4xmlj3"


def test_contract_address_vector():
    assert compute_deployed_address(ALICE, 0) == ALICE_CONTRACT_0


def test_contract_address_shape():
    addr = compute_deployed_address(ALICE, 5)
    raw = bytes.fromhex(address_to_hex(addr))
    assert raw[:8] == bytes(8)
    assert raw[8:10] == b"\x05\x00"
    assert raw[30:] == bytes.fromhex(address_to_hex(ALICE))[30:]
    assert addr != compute_deployed_address(ALICE, 6)


def test_contract_address_negative_nonce():
    with pytest.raises(ValueError):
        compute_deployed_address(ALICE, -1)


@pytest.mark.asyncio
async def test_contract_address_for_fetches_nonce(provider):
    provider.set_account(ALICE, nonce=0)
    assert await compute_deployed_address_for(provider, ALICE) == ALICE_CONTRACT_0
    assert await compute_deployed_address_for(provider, ALICE, 5) == compute_deployed_address(ALICE, 5)


@pytest.mark.parametrize(
    "metadata, expected",
    [
        (None, "0000"),
        (ContractMetadata(upgradeable=True), "0100"),
        (ContractMetadata(readable=True), "0400"),
        (ContractMetadata(payable=True), "0002"),
        (ContractMetadata(upgradeable=True, readable=True, payable=True), "0502"),
    ],
)
def test_metadata_string(metadata, expected):
    assert contract_metadata_to_string(metadata) == expected


def test_payloads():
    assert deploy_payload(CODE, ContractMetadata(upgradeable=True), ["05"]) == "0061736d01000000@0500@0100@05"
    assert deploy_payload("0x0061736D01000000") == "0061736d01000000@0500@0000"
    assert upgrade_payload(CODE) == "upgradeContract@0061736d01000000@0000"
    with pytest.raises(ValueError):
        deploy_payload("not hex")


@pytest.mark.asyncio
async def test_at_requires_code(provider, options):
    provider.set_account(BOB, code="")
    with pytest.raises(NodeResponseError):
        await Contract.at(BOB, options)

    provider.set_account(BOB, code="0061736d")
    contract = await Contract.at(BOB, options)
    assert contract.address == BOB


@pytest.mark.asyncio
async def test_at_without_provider_skips_check():
    contract = await Contract.at(BOB)
    assert contract.address == BOB


@pytest.mark.asyncio
async def test_query(provider, options):
    provider.query_results[(BOB, "getSum")] = query_result(b"\x2a")
    contract = Contract(BOB, options)
    result = await contract.query("getSum", ["01"])
    assert provider.queries[-1].args == ("01",)
    assert await contract.query_value("getSum", QueryResultType.INT) == 42
    assert result.return_data


@pytest.mark.asyncio
async def test_query_needs_provider():
    with pytest.raises(MissingRequiredField):
        await Contract(BOB).query("getSum")


@pytest.mark.asyncio
async def test_invoke_signs_and_sends(provider, options):
    provider.set_account(ALICE, nonce=4)
    receipt = await Contract(BOB, options).invoke("add", ["05"], TransactionOptions(value=3))
    assert receipt.hash == "hash-1"
    signed = provider.sent[0]
    assert signed.receiver == BOB
    assert signed.data == "add@05"
    assert signed.nonce == 4
    assert signed.value.eq(3)
    assert signed.gas_limit == MIN_GAS_LIMIT + GAS_PER_DATA_BYTE * len("add@05")


@pytest.mark.asyncio
async def test_invoke_requires_signer(provider):
    with pytest.raises(MissingRequiredField) as exc:
        await Contract(BOB, TransactionOptions(sender=ALICE, provider=provider)).invoke("add")
    assert exc.value.field == "signer"


@pytest.mark.asyncio
async def test_invocation_with_token_transfer(options):
    opts = TransactionOptions(esdt=TokenTransfer(token_id="TKN-abcdef", value=10))
    tx = await Contract(BOB, options).create_invocation("deposit", [], opts).build()
    assert tx.data.startswith("ESDTTransfer@")
    assert tx.data.endswith("@" + "deposit".encode().hex())
    assert isinstance(Contract(BOB, options).create_invocation("x"), ContractInvocation)


@pytest.mark.asyncio
async def test_deploy_computes_address_from_signed_nonce(provider, options):
    provider.set_account(ALICE, nonce=0)
    deployed = await Contract.deploy(CODE, ContractMetadata(upgradeable=True), [], options)
    signed = provider.sent[0]
    assert signed.receiver == ZERO_ADDRESS
    assert signed.data == "0061736d01000000@0500@0100"
    assert deployed.address == ALICE_CONTRACT_0
    assert deployed.hash == "hash-1"
    assert deployed.contract.options.provider is provider


@pytest.mark.asyncio
async def test_upgrade(provider, options):
    await Contract(BOB, options).upgrade(CODE)
    assert provider.sent[0].data == "upgradeContract@0061736d01000000@0000"
    assert provider.sent[0].receiver == BOB
