import json

import httpx
import pytest
import respx
from fakes import ALICE, BOB

from erd_sdk.bignum import ScaledDecimal
from erd_sdk.config import SDKConfig
from erd_sdk.errors import NodeResponseError, TrackingError
from erd_sdk.provider.proxy import Provider, ProxyProvider
from erd_sdk.tx.send import TransactionTracker
from erd_sdk.types.core import (ContractQueryParams, SignedTransaction,
                                TransactionStatus)

URL = "http://proxy.test"

NETWORK_CONFIG = {
    "erd_chain_id": "T",
    "erd_min_gas_price": 1000000000,
    "erd_min_gas_limit": 50000,
    "erd_gas_per_data_byte": 1500,
    "erd_min_transaction_version": 1,
    "erd_latest_tag_software_version": "v1.1.0",
}


def _ok(data):
    return httpx.Response(200, json={"data": data, "error": "", "code": "successful"})


def _provider() -> ProxyProvider:
    return ProxyProvider(config=SDKConfig(proxy_url=URL, poll_interval=0))


def test_proxy_provider_satisfies_protocol():
    assert isinstance(_provider(), Provider)


@pytest.mark.asyncio
async def test_network_config():
    with respx.mock(base_url=URL) as mock:
        mock.get("/network/config").mock(return_value=_ok({"config": NETWORK_CONFIG}))
        async with _provider() as p:
            cfg = await p.get_network_config()
    assert cfg.chain_id == "T"
    assert cfg.min_gas_limit == 50000
    assert cfg.gas_per_data_byte == 1500
    assert cfg.version == "v1.1.0"


@pytest.mark.asyncio
async def test_network_config_missing_field_is_an_error():
    partial = dict(NETWORK_CONFIG)
    del partial["erd_min_gas_price"]
    with respx.mock(base_url=URL) as mock:
        mock.get("/network/config").mock(return_value=_ok({"config": partial}))
        async with _provider() as p:
            with pytest.raises(NodeResponseError) as exc:
                await p.get_network_config()
    assert "erd_min_gas_price" in exc.value.message


@pytest.mark.asyncio
async def test_address_and_nonce():
    account = {"address": ALICE, "balance": "1500000000000000000", "nonce": 12, "code": ""}
    with respx.mock(base_url=URL) as mock:
        mock.get(f"/address/{ALICE}").mock(return_value=_ok({"account": account}))
        async with _provider() as p:
            acc = await p.get_address(ALICE)
            nonce = await p.get_nonce(ALICE)
    assert acc.nonce == 12 == nonce
    assert acc.balance.eq(ScaledDecimal("1500000000000000000"))
    assert acc.is_contract is False


@pytest.mark.asyncio
async def test_query_contract_posts_params():
    with respx.mock(base_url=URL) as mock:
        route = mock.post("/vm-values/query").mock(
            return_value=_ok({"data": {"returnData": ["AQ=="], "returnCode": "ok", "gasRemaining": 10}})
        )
        async with _provider() as p:
            result = await p.query_contract(ContractQueryParams(BOB, "getSum", ("05",)))
    assert result.return_data == ("AQ==",)
    assert result.return_code == "ok"
    assert result.gas_remaining == 10
    sent = route.calls.last.request
    assert json.loads(sent.content) == {"scAddress": BOB, "funcName": "getSum", "args": ["05"]}


@pytest.mark.asyncio
async def test_send_signed_transaction():
    signed = SignedTransaction(
        sender=ALICE,
        receiver=BOB,
        value=ScaledDecimal(1),
        nonce=3,
        gas_price=1000000000,
        gas_limit=50000,
        chain_id="T",
        version=1,
        signature="ab" * 64,
    )
    with respx.mock(base_url=URL) as mock:
        mock.post("/transaction/send").mock(return_value=_ok({"txHash": "deadbeef"}))
        async with _provider() as p:
            receipt = await p.send_signed_transaction(signed)
    assert receipt.hash == "deadbeef"
    assert receipt.signed_transaction is signed
    assert receipt.status is TransactionStatus.PENDING


@pytest.mark.asyncio
async def test_get_transaction_requests_results():
    record = {"hash": "deadbeef", "status": "executed", "sender": ALICE, "receiver": BOB, "value": "5", "data": "aGVsbG8="}
    with respx.mock(base_url=URL) as mock:
        mock.get("/transaction/deadbeef", params={"withResults": "true"}).mock(
            return_value=_ok({"transaction": record})
        )
        async with _provider() as p:
            tx = await p.get_transaction("deadbeef")
    assert tx.status is TransactionStatus.SUCCESS
    assert tx.data == "hello"
    assert tx.value.eq(5)


@pytest.mark.asyncio
async def test_wait_for_transaction_uses_tracker():
    with respx.mock(base_url=URL) as mock:
        mock.get("/transaction/deadbeef").mock(
            side_effect=[
                _ok({"transaction": {"status": "pending"}}),
                _ok({"transaction": {"status": "success"}}),
            ]
        )
        async with _provider() as p:
            receipt = await p.wait_for_transaction("deadbeef")
    assert receipt.status is TransactionStatus.SUCCESS


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"data": None, "error": "account not found", "code": "internal_issue"}),
        httpx.Response(200, json={"data": {}, "error": "", "code": "bad_request"}),
        httpx.Response(200, json={"error": "", "code": "successful"}),
        httpx.Response(500, text="<html>oops</html>"),
    ],
)
async def test_error_envelopes(response):
    with respx.mock(base_url=URL) as mock:
        mock.get(f"/address/{ALICE}").mock(return_value=response)
        async with _provider() as p:
            with pytest.raises(NodeResponseError) as exc:
                await p.get_address(ALICE)
    assert exc.value.message.startswith("Error fetching address info")
    assert exc.value.path == f"/address/{ALICE}"


@pytest.mark.asyncio
async def test_transport_failure_is_node_error():
    with respx.mock(base_url=URL) as mock:
        mock.get("/network/config").mock(side_effect=httpx.ConnectError("refused"))
        async with _provider() as p:
            with pytest.raises(NodeResponseError) as exc:
                await p.get_network_config()
    assert "refused" in exc.value.message


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "record",
    [
        {"status": "pending", "timestamp": "soon"},
        {"status": "success", "nonce": "seven"},
        {"status": "success", "smartContractResults": ["not an object"]},
    ],
)
async def test_malformed_transaction_record(record):
    with respx.mock(base_url=URL) as mock:
        mock.get("/transaction/abc").mock(return_value=_ok({"transaction": record}))
        async with _provider() as p:
            with pytest.raises(NodeResponseError) as exc:
                await p.get_transaction("abc")
    assert "malformed" in exc.value.message
    assert exc.value.path == "/transaction/abc"


@pytest.mark.asyncio
async def test_malformed_record_stops_tracking():
    with respx.mock(base_url=URL) as mock:
        route = mock.get("/transaction/abc").mock(
            return_value=_ok({"transaction": {"status": "pending", "timestamp": "soon"}})
        )
        async with _provider() as p:
            tracker = TransactionTracker(p, "abc", poll_interval=0)
            for _ in range(2):
                with pytest.raises(TrackingError) as exc:
                    await tracker.wait_for_completion()
                assert isinstance(exc.value.cause, NodeResponseError)
    assert route.call_count == 1


@pytest.mark.asyncio
async def test_malformed_account_and_query_results():
    with respx.mock(base_url=URL) as mock:
        mock.get(f"/address/{ALICE}").mock(return_value=_ok({"account": {"address": ALICE, "nonce": "x"}}))
        mock.post("/vm-values/query").mock(return_value=_ok({"data": {"returnData": 5}}))
        mock.get("/network/config").mock(return_value=_ok("not an object"))
        async with _provider() as p:
            with pytest.raises(NodeResponseError):
                await p.get_address(ALICE)
            with pytest.raises(NodeResponseError):
                await p.query_contract(ContractQueryParams(contract_address=BOB, function_name="f"))
            with pytest.raises(NodeResponseError):
                await p.get_network_config()
