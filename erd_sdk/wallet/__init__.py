"""
Wallets: Ed25519 signer, BIP-39 mnemonics and encrypted JSON key files.
"""

from .keyfile import decrypt_key_file, encrypt_key_file
from .mnemonic import (derivation_path, generate_mnemonic,
                       mnemonic_to_secret_key, validate_mnemonic)
from .signer import TX_VERSION, Ed25519Wallet, Signer

__all__ = [
    "Ed25519Wallet",
    "Signer",
    "TX_VERSION",
    "decrypt_key_file",
    "derivation_path",
    "encrypt_key_file",
    "generate_mnemonic",
    "mnemonic_to_secret_key",
    "validate_mnemonic",
]
