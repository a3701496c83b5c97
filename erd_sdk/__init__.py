"""
erd-sdk — Python
Convenience exports for the most common client APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import SDKConfig  # noqa: F401
from .errors import (  # noqa: F401
    ErdSdkError,
    InvalidAddressFormat,
    InvalidNumberFormat,
    MissingRequiredField,
    NodeResponseError,
    QueryDecodeError,
    TrackingCancelled,
    TrackingError,
    TransactionFailedError,
    WalletError,
)

# Values & addresses
from .bignum import Scale, ScaledDecimal  # noqa: F401
from .address import (  # noqa: F401
    ZERO_ADDRESS,
    address_to_hex,
    hex_to_address,
    is_valid,
    shard_of,
)

# Node API
from .provider.proxy import Provider, ProxyProvider  # noqa: F401

# Tx helpers
from .tx.build import (  # noqa: F401
    TransactionOptions,
    TransferBuilder,
    build_transaction,
    merge_transaction_options,
)
from .tx.encode import number_to_hex, string_to_hex  # noqa: F401
from .tx.send import TransactionTracker, sign_and_send, wait_for_transaction  # noqa: F401

# Wallet
from .wallet.signer import Ed25519Wallet, Signer  # noqa: F401
from .wallet.mnemonic import generate_mnemonic  # noqa: F401

# Contracts
from .contracts.client import Contract  # noqa: F401
from .contracts.deployer import ContractMetadata, compute_deployed_address  # noqa: F401
from .contracts.query import QueryResultType, parse_query_result  # noqa: F401

# Tokens & DNS
from .token.client import Token  # noqa: F401
from .dns import Dns  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "SDKConfig",
    "ErdSdkError", "InvalidAddressFormat", "InvalidNumberFormat",
    "MissingRequiredField", "NodeResponseError", "QueryDecodeError",
    "TrackingCancelled", "TrackingError", "TransactionFailedError", "WalletError",
    # Values & addresses
    "Scale", "ScaledDecimal",
    "ZERO_ADDRESS", "address_to_hex", "hex_to_address", "is_valid", "shard_of",
    # Node API
    "Provider", "ProxyProvider",
    # Tx
    "TransactionOptions", "TransferBuilder", "build_transaction",
    "merge_transaction_options", "number_to_hex", "string_to_hex",
    "TransactionTracker", "sign_and_send", "wait_for_transaction",
    # Wallet
    "Ed25519Wallet", "Signer", "generate_mnemonic",
    # Contracts
    "Contract", "ContractMetadata", "compute_deployed_address",
    "QueryResultType", "parse_query_result",
    # Tokens & DNS
    "Token", "Dns",
]
