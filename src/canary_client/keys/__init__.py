"""
Key management for the Canary client.

Private key parsing and export, and key stores indexed by address.
"""

from .bech32_parser import (
    ParsedPrivateKey,
    export_private_key,
    keypair_from_text,
    parse_bech32_private_key,
    validate_bech32_private_key,
)
from .keystore import FileKeyStore, KeyInfo, KeyStore, MemoryKeyStore, create_keystore_from_key

__all__ = [
    "FileKeyStore",
    "KeyInfo",
    "KeyStore",
    "MemoryKeyStore",
    "ParsedPrivateKey",
    "create_keystore_from_key",
    "export_private_key",
    "keypair_from_text",
    "parse_bech32_private_key",
    "validate_bech32_private_key",
]
