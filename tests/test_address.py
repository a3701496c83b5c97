import os

import pytest
from fakes import ALICE, ALICE_PUBKEY, BOB, BOB_PUBKEY

from erd_sdk.address import (METACHAIN_SHARD, METACHAIN_TOKEN_CONTRACT,
                             ZERO_ADDRESS, address_to_hex, decode, encode,
                             hex_to_address, is_valid, shard_of,
                             shard_of_pubkey)
from erd_sdk.errors import InvalidAddressFormat


def test_known_vectors():
    assert hex_to_address(BOB_PUBKEY) == BOB
    assert address_to_hex(BOB) == BOB_PUBKEY
    assert address_to_hex(ALICE) == ALICE_PUBKEY
    assert decode(ALICE) == bytes.fromhex(ALICE_PUBKEY)
    assert encode(bytes.fromhex(ALICE_PUBKEY)) == ALICE


def test_hex_prefix_accepted():
    assert hex_to_address("0x" + BOB_PUBKEY) == BOB


def test_zero_address():
    assert address_to_hex(ZERO_ADDRESS) == "00" * 32


@pytest.mark.parametrize(
    "bad",
    [
        BOB[:-1] + ("q" if BOB[-1] != "q" else "p"),  # checksum
        "btc1" + BOB[4:],  # foreign hrp
        "erd1qqqqsl0hkk",  # short payload
        "",
        "not an address",
    ],
)
def test_decode_rejects_malformed(bad):
    with pytest.raises(InvalidAddressFormat):
        decode(bad)
    assert is_valid(bad) is False


def test_only_lower_case_accepted():
    for text in (BOB.upper(), BOB[:10] + BOB[10:].upper()):
        with pytest.raises(InvalidAddressFormat):
            decode(text)
        assert is_valid(text) is False


def test_encode_requires_32_bytes():
    with pytest.raises(InvalidAddressFormat):
        encode(b"\x01" * 31)
    with pytest.raises(InvalidAddressFormat):
        hex_to_address("zz")


def test_custom_hrp_round_trip():
    addr = hex_to_address(BOB_PUBKEY, hrp="test")
    assert addr.startswith("test1")
    assert address_to_hex(addr, hrp="test") == BOB_PUBKEY
    with pytest.raises(InvalidAddressFormat):
        decode(addr)


def test_shard_of_regular_accounts():
    # last byte 0xe1 & 0b11 == 1
    assert shard_of(ALICE) == 1
    # last byte 0x28 & 0b11 == 0
    assert shard_of(BOB) == 0


def test_shard_mask_falls_back_when_out_of_range():
    raw = b"\x01" * 31 + b"\x03"
    assert shard_of_pubkey(raw, 3) == 1
    assert shard_of_pubkey(raw, 4) == 3
    assert shard_of_pubkey(raw, 1) == 0


def test_metachain_accounts():
    assert shard_of(METACHAIN_TOKEN_CONTRACT) == METACHAIN_SHARD
    assert shard_of(ZERO_ADDRESS) == METACHAIN_SHARD


def test_invalid_shard_count():
    with pytest.raises(ValueError):
        shard_of(ALICE, 0)


@pytest.mark.parametrize("num_shards", [1, 2, 3, 4, 5, 16, 256])
def test_zero_address_is_metachain_for_any_shard_count(num_shards):
    assert shard_of_pubkey(bytes(32), num_shards) == METACHAIN_SHARD
    assert shard_of(ZERO_ADDRESS, num_shards) == METACHAIN_SHARD


def test_round_trip_random_keys():
    for _ in range(200):
        key = os.urandom(32)
        addr = encode(key)
        assert decode(addr) == key
        assert encode(decode(addr)) == addr
        assert hex_to_address(address_to_hex(addr)) == addr
