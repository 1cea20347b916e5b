"""
Key storage interface.

A key store is an explicit object handed to whoever needs to sign; there is
no process-wide key registry. Keys are indexed by the account address they
derive.
"""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from ..crypto import KeyPair, SignatureScheme
from ..runtime.address import SuiAddress
from ..runtime.errors import KeyDecodeError, KeyStoreError
from .bech32_parser import (
    export_private_key,
    keystore_entry,
    parse_bech32_private_key,
    parse_keystore_entry,
)

logger = logging.getLogger(__name__)


class KeyInfo:
    """
    Information about a stored key.

    Contains metadata about keys without exposing private data.
    """

    def __init__(self, address: SuiAddress, scheme: SignatureScheme, public_key: bytes,
                 alias: Optional[str] = None):
        self.address = address
        self.scheme = scheme
        self.public_key = public_key
        self.alias = alias

    def to_dict(self) -> Dict[str, str]:
        result = {
            "address": str(self.address),
            "scheme": self.scheme.name.lower(),
            "publicKey": self.public_key.hex(),
        }
        if self.alias:
            result["alias"] = self.alias
        return result

    def __repr__(self) -> str:
        return f"KeyInfo(address='{self.address}', scheme='{self.scheme.name}')"


class KeyStore(ABC):
    """
    Abstract key store interface.

    Defines the interface for key storage and retrieval by address.
    """

    @abstractmethod
    def import_key(self, keypair: KeyPair, alias: Optional[str] = None) -> SuiAddress:
        """
        Store a key pair.

        Args:
            keypair: Key pair to store
            alias: Optional human readable name

        Returns:
            Address of the stored key

        Raises:
            KeyStoreError: If storage fails
        """

    @abstractmethod
    def get_key(self, address: Union[str, SuiAddress]) -> KeyPair:
        """
        Retrieve a key pair by address.

        Raises:
            KeyStoreError: If no key is stored for the address
        """

    @abstractmethod
    def list_keys(self) -> List[KeyInfo]:
        """List all stored keys."""

    @abstractmethod
    def delete_key(self, address: Union[str, SuiAddress]) -> bool:
        """
        Delete a key.

        Returns:
            True if key was deleted
        """

    def has_key(self, address: Union[str, SuiAddress]) -> bool:
        return SuiAddress(address) in self.list_addresses()

    def list_addresses(self) -> List[SuiAddress]:
        return [info.address for info in self.list_keys()]

    def get_key_info(self, address: Union[str, SuiAddress]) -> Optional[KeyInfo]:
        target = SuiAddress(address)
        for info in self.list_keys():
            if info.address == target:
                return info
        return None

    def import_bech32(self, text: str, alias: Optional[str] = None) -> SuiAddress:
        """Import a ``suiprivkey1...`` string."""
        return self.import_key(parse_bech32_private_key(text).to_keypair(), alias)

    def export_key(self, address: Union[str, SuiAddress]) -> str:
        """Export a stored key as ``suiprivkey1...``."""
        return export_private_key(self.get_key(address))


class MemoryKeyStore(KeyStore):
    """
    In-memory key store implementation.

    Stores keys in memory with no persistence.
    """

    def __init__(self):
        self._keys: Dict[SuiAddress, KeyPair] = {}
        self._aliases: Dict[SuiAddress, Optional[str]] = {}

    def import_key(self, keypair: KeyPair, alias: Optional[str] = None) -> SuiAddress:
        address = keypair.address
        self._keys[address] = keypair
        self._aliases[address] = alias
        logger.debug(f"Stored {keypair.scheme.name} key for {address} in memory key store")
        return address

    def get_key(self, address: Union[str, SuiAddress]) -> KeyPair:
        address = SuiAddress(address)
        try:
            return self._keys[address]
        except KeyError:
            raise KeyStoreError(f"No key stored for address {address}") from None

    def list_keys(self) -> List[KeyInfo]:
        return [KeyInfo(addr, kp.scheme, kp.public_key_bytes(), self._aliases.get(addr))
                for addr, kp in self._keys.items()]

    def delete_key(self, address: Union[str, SuiAddress]) -> bool:
        address = SuiAddress(address)
        if address in self._keys:
            del self._keys[address]
            self._aliases.pop(address, None)
            logger.debug(f"Deleted key {address} from memory key store")
            return True
        return False

    def __repr__(self) -> str:
        return f"MemoryKeyStore(count={len(self._keys)})"


class FileKeyStore(MemoryKeyStore):
    """
    File-based key store compatible with ``sui.keystore``.

    The file is a JSON array of base64 ``flag || secret`` strings. It is read
    once on construction and rewritten after every change.
    """

    def __init__(self, store_path: Union[str, Path]):
        """
        Initialize file key store.

        Args:
            store_path: Path of the keystore file; created on first write

        Raises:
            KeyStoreError: If an existing file cannot be parsed
        """
        super().__init__()
        self.store_path = Path(store_path)
        if self.store_path.exists():
            self._load()

    def _load(self) -> None:
        try:
            entries = json.loads(self.store_path.read_text())
        except (OSError, ValueError) as exc:
            raise KeyStoreError(f"Failed to read keystore {self.store_path}: {exc}",
                                cause=exc) from exc
        if not isinstance(entries, list):
            raise KeyStoreError(f"Keystore {self.store_path} must contain a JSON array")
        for index, entry in enumerate(entries):
            try:
                keypair = parse_keystore_entry(entry).to_keypair()
            except (KeyDecodeError, TypeError) as exc:
                raise KeyStoreError(f"Invalid keystore entry #{index} in {self.store_path}",
                                    cause=exc) from exc
            super().import_key(keypair)
        logger.debug(f"Loaded {len(entries)} keys from {self.store_path}")

    def _save(self) -> None:
        entries = [keystore_entry(kp) for kp in self._keys.values()]
        self.store_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.store_path.with_suffix(self.store_path.suffix + ".tmp")
        try:
            with open(tmp_path, "w") as f:
                json.dump(entries, f, indent=2)
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.store_path)
        except OSError as exc:
            raise KeyStoreError(f"Failed to write keystore {self.store_path}: {exc}",
                                cause=exc) from exc

    def import_key(self, keypair: KeyPair, alias: Optional[str] = None) -> SuiAddress:
        address = super().import_key(keypair, alias)
        self._save()
        return address

    def delete_key(self, address: Union[str, SuiAddress]) -> bool:
        deleted = super().delete_key(address)
        if deleted:
            self._save()
        return deleted

    def __repr__(self) -> str:
        return f"FileKeyStore(path='{self.store_path}', count={len(self._keys)})"


def create_keystore_from_key(private_key: str) -> Tuple[MemoryKeyStore, SuiAddress]:
    """
    Create an in-memory key store holding a single bech32 private key.

    Args:
        private_key: ``suiprivkey1...`` text

    Returns:
        The store and the address of the imported key

    Raises:
        KeyDecodeError: If the key text is invalid
    """
    store = MemoryKeyStore()
    address = store.import_bech32(private_key)
    return store, address
