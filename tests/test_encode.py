import json

import pytest
from fakes import BOB, BOB_PUBKEY

from erd_sdk.bignum import Scale, ScaledDecimal
from erd_sdk.errors import InvalidNumberFormat
from erd_sdk.tx.build import build_payload
from erd_sdk.tx.encode import (address_to_hex, bool_to_hex,
                               convert_map_to_data_arguments,
                               join_data_arguments, number_to_hex, sign_bytes,
                               string_to_hex)
from erd_sdk.types.core import TokenTransfer, Transaction


def test_string_to_hex():
    assert string_to_hex("this is a test") == "7468697320697320612074657374"
    assert string_to_hex("") == ""


@pytest.mark.parametrize(
    "value, expected",
    [
        (666, "029a"),
        (0, "00"),
        (10000, "2710"),
        (255, "ff"),
        ("256", "0100"),
        (ScaledDecimal("1", Scale.DISPLAY), "0de0b6b3a7640000"),
    ],
)
def test_number_to_hex(value, expected):
    assert number_to_hex(value) == expected


def test_number_to_hex_rejects_negative_and_fractions():
    with pytest.raises(InvalidNumberFormat):
        number_to_hex(-1)
    with pytest.raises(InvalidNumberFormat):
        number_to_hex("1.5")


def test_argument_helpers():
    assert address_to_hex(BOB) == BOB_PUBKEY
    assert bool_to_hex(True) == "74727565"
    assert bool_to_hex(False) == "66616c7365"
    assert join_data_arguments("a", "b", "c") == "a@b@c"
    assert convert_map_to_data_arguments({"canMint": True, "canBurn": False}) == [
        string_to_hex("canMint"),
        "74727565",
        string_to_hex("canBurn"),
        "66616c7365",
    ]


def test_build_payload_plain_call():
    assert build_payload("add", [number_to_hex(5)]) == "add@05"
    assert build_payload(None) == ""
    assert build_payload("ping") == "ping"


def test_build_payload_with_token_transfer():
    esdt = TokenTransfer(token_id="TKN-123456", value=1000)
    data = build_payload("deposit", ["01"], esdt)
    assert data == "ESDTTransfer@" + string_to_hex("TKN-123456") + "@03e8@" + string_to_hex("deposit") + "@01"
    # transfer without a call
    assert build_payload(None, (), esdt) == "ESDTTransfer@" + string_to_hex("TKN-123456") + "@03e8"


def test_sign_bytes_field_order_and_compactness():
    tx = Transaction(
        sender=BOB,
        receiver=BOB,
        value=ScaledDecimal("1", Scale.DISPLAY),
        gas_price=50_000,
        gas_limit=200_000,
        data="hello",
    )
    raw = sign_bytes(tx, nonce=53, chain_id="local-testnet", version=1)
    text = raw.decode("utf-8")
    assert " " not in text
    body = json.loads(text)
    assert list(body) == ["nonce", "value", "receiver", "sender", "gasPrice", "gasLimit", "data", "chainID", "version"]
    assert body["value"] == "1000000000000000000"
    assert body["data"] == "aGVsbG8="


def test_sign_bytes_omits_empty_data():
    tx = Transaction(sender=BOB, receiver=BOB, gas_price=1, gas_limit=1)
    body = json.loads(sign_bytes(tx, nonce=0, chain_id="T", version=1))
    assert "data" not in body
    assert body["value"] == "0"


def test_sign_bytes_requires_gas():
    with pytest.raises(ValueError):
        sign_bytes(Transaction(sender=BOB, receiver=BOB), nonce=0, chain_id="T", version=1)
