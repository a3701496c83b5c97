import pytest
from fakes import ALICE_SEED, FakeProvider

from erd_sdk.tx.build import TransactionOptions
from erd_sdk.wallet.signer import Ed25519Wallet


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def alice() -> Ed25519Wallet:
    return Ed25519Wallet.from_secret_key(ALICE_SEED)


@pytest.fixture
def options(provider, alice) -> TransactionOptions:
    return TransactionOptions(sender=alice.address(), provider=provider, signer=alice)
