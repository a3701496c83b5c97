import pytest
from fakes import ALICE, BOB, query_result

from erd_sdk.address import METACHAIN_TOKEN_CONTRACT, address_to_hex
from erd_sdk.errors import NodeResponseError
from erd_sdk.token.client import (TOKEN_MGMT_STANDARD_GAS_COST, Token,
                                  token_info_from_properties)
from erd_sdk.tx.build import TransactionOptions
from erd_sdk.tx.encode import string_to_hex
from erd_sdk.types.core import TokenConfig

TOKEN_ID = "MYTOKEN-a1b2c3"


def _properties(name="MyTokenName", owner=ALICE, supply="1000", decimals="NumDecimals-6", paused="IsPaused-false"):
    flags = ["CanUpgrade-true", "CanMint-true", "CanBurn-false", "CanChangeOwner-false", "CanPause-true", "CanFreeze-false", "CanWipe-false"]
    return query_result(name, owner, supply, decimals, paused, *flags)


def test_token_info_decoding():
    info = token_info_from_properties(TOKEN_ID, _properties())
    assert info.name == "MyTokenName"
    assert info.ticker == "MYTOKEN"
    assert info.owner == ALICE
    assert info.supply.to_string() == "1000"
    assert info.decimals == 6
    assert info.display_supply.to_string() == "0.001"
    assert info.paused is False
    assert info.config == TokenConfig(can_upgrade=True, can_mint=True, can_pause=True)


def test_token_info_without_decimals():
    info = token_info_from_properties(TOKEN_ID, _properties(decimals="", paused="IsPaused-true"))
    assert info.decimals == 0
    assert info.paused is True


@pytest.mark.asyncio
async def test_load_queries_properties(provider, options):
    provider.query_results[(METACHAIN_TOKEN_CONTRACT, "getTokenProperties")] = _properties()
    token = await Token.load(TOKEN_ID, options)
    assert token.id == TOKEN_ID
    assert provider.queries[-1].args == (string_to_hex(TOKEN_ID),)


@pytest.mark.asyncio
async def test_get_all_token_ids(provider, options):
    provider.query_results[(METACHAIN_TOKEN_CONTRACT, "getAllESDTTokens")] = query_result("AAA-111111@BBB-222222")
    assert await Token.get_all_token_ids(options) == ["AAA-111111", "BBB-222222"]


@pytest.mark.asyncio
async def test_transfer(provider, options):
    await Token(TOKEN_ID, options).transfer(BOB, 1000)
    signed = provider.sent[0]
    assert signed.receiver == BOB
    assert signed.data == "ESDTTransfer@" + string_to_hex(TOKEN_ID) + "@03e8"
    assert signed.value.eq(0)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call, function, extra",
    [
        (lambda t: t.mint(256), "mint", ["0100"]),
        (lambda t: t.burn(1), "ESDTBurn", ["01"]),
        (lambda t: t.pause(), "pause", []),
        (lambda t: t.unpause(), "unPause", []),
        (lambda t: t.freeze(BOB), "freeze", [address_to_hex(BOB)]),
        (lambda t: t.unfreeze(BOB), "unFreeze", [address_to_hex(BOB)]),
        (lambda t: t.wipe(BOB), "wipe", [address_to_hex(BOB)]),
        (lambda t: t.change_owner(BOB), "transferOwnership", [address_to_hex(BOB)]),
    ],
)
async def test_management_payloads(provider, options, call, function, extra):
    await call(Token(TOKEN_ID, options))
    signed = provider.sent[0]
    assert signed.receiver == METACHAIN_TOKEN_CONTRACT
    assert signed.data == "@".join([function, string_to_hex(TOKEN_ID), *extra])
    assert signed.gas_limit == TOKEN_MGMT_STANDARD_GAS_COST


@pytest.mark.asyncio
async def test_management_gas_can_be_overridden(provider, options):
    await Token(TOKEN_ID, options).pause(TransactionOptions(gas_limit=60_000_000))
    assert provider.sent[0].gas_limit == 60_000_000


@pytest.mark.asyncio
async def test_update_config(provider, options):
    await Token(TOKEN_ID, options).update_config(TokenConfig(can_mint=True))
    parts = provider.sent[0].data.split("@")
    assert parts[0] == "controlChanges"
    assert parts[1] == string_to_hex(TOKEN_ID)
    assert parts[2:6] == [string_to_hex("canUpgrade"), string_to_hex("true"), string_to_hex("canMint"), string_to_hex("true")]
    assert len(parts) == 2 + 14


@pytest.mark.asyncio
async def test_issue_discovers_new_token(provider, options, caplog):
    provider.query_results[(METACHAIN_TOKEN_CONTRACT, "getAllESDTTokens")] = query_result(
        "OTHER-000000@MYTOKEN-a1b2c3"
    )
    provider.query_results[(METACHAIN_TOKEN_CONTRACT, "getTokenProperties")] = _properties()
    token = await Token.issue("MyTokenName", "MYTOKEN", 1000, options, poll_interval=0)
    assert token.id == TOKEN_ID

    issue = provider.sent[0]
    assert issue.receiver == METACHAIN_TOKEN_CONTRACT
    assert issue.data == "@".join(["issue", string_to_hex("MyTokenName"), string_to_hex("MYTOKEN"), "03e8"])
    assert issue.value.to_string() == "5000000000000000000"
    assert issue.gas_limit == TOKEN_MGMT_STANDARD_GAS_COST
    assert any("race" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_issue_without_match_raises(provider, options):
    provider.query_results[(METACHAIN_TOKEN_CONTRACT, "getAllESDTTokens")] = query_result("OTHER-000000")
    with pytest.raises(NodeResponseError):
        await Token.issue("MyTokenName", "MYTOKEN", 1000, options, poll_interval=0)
