"""
Transaction building, payload encoding, signing bytes and status tracking.
"""

from .build import (TransactionBuilder, TransactionOptions,
                    TransactionOptionsBase, TransferBuilder, build_payload,
                    build_transaction, merge_transaction_options)
from .encode import (ARGS_DELIMITER, join_data_arguments, number_to_hex,
                     sign_bytes, string_to_hex)
from .send import TransactionTracker, sign_and_send, wait_for_transaction

__all__ = [
    "ARGS_DELIMITER",
    "TransactionBuilder",
    "TransactionOptions",
    "TransactionOptionsBase",
    "TransactionTracker",
    "TransferBuilder",
    "build_payload",
    "build_transaction",
    "join_data_arguments",
    "merge_transaction_options",
    "number_to_hex",
    "sign_and_send",
    "sign_bytes",
    "string_to_hex",
    "wait_for_transaction",
]
