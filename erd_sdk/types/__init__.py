from .core import (Account, ContractQueryParams, ContractQueryResult,
                   NetworkConfig, SignedTransaction, TokenConfig, TokenInfo,
                   TokenTransfer, Transaction, TransactionOnChain,
                   TransactionReceipt, TransactionStatus, classify_status)

__all__ = [
    "Account",
    "ContractQueryParams",
    "ContractQueryResult",
    "NetworkConfig",
    "SignedTransaction",
    "TokenConfig",
    "TokenInfo",
    "TokenTransfer",
    "Transaction",
    "TransactionOnChain",
    "TransactionReceipt",
    "TransactionStatus",
    "classify_status",
]
