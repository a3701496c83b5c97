"""
Contracts: query decoding, deployment payloads/addresses and a client handle.
"""

from .client import (Contract, ContractDeployment, ContractDeploymentReceipt,
                     ContractInvocation, ContractUpgrade)
from .deployer import (ContractMetadata, compute_deployed_address,
                       compute_deployed_address_for,
                       contract_metadata_to_string)
from .query import QueryResultType, parse_query_result

__all__ = [
    "Contract",
    "ContractDeployment",
    "ContractDeploymentReceipt",
    "ContractInvocation",
    "ContractMetadata",
    "ContractUpgrade",
    "QueryResultType",
    "compute_deployed_address",
    "compute_deployed_address_for",
    "contract_metadata_to_string",
    "parse_query_result",
]
