"""
ESDT token handles and transfer builder.
"""

from .client import (TOKEN_ISSUE_COST, TOKEN_MGMT_STANDARD_GAS_COST, Token,
                     TokenTransferBuilder, token_info_from_properties)

__all__ = [
    "TOKEN_ISSUE_COST",
    "TOKEN_MGMT_STANDARD_GAS_COST",
    "Token",
    "TokenTransferBuilder",
    "token_info_from_properties",
]
