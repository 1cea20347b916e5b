"""
Signer capability.

A signer owns one key pair and produces serialized Sui signatures:
``base64(flag || signature || public_key)`` over the intent digest of the
signed bytes.
"""

from __future__ import annotations

import base64
import binascii
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union

from ..codec.hashes import Intent, intent_digest
from ..codec.writer import BinaryWriter
from ..crypto import KEYPAIR_CLASSES, KeyPair, SignatureScheme, derive_address
from ..crypto.ed25519 import Ed25519PublicKey
from ..crypto.keypair import SIGNATURE_LENGTH
from ..crypto.secp256 import verify_compact
from ..keys.bech32_parser import keypair_from_text
from ..keys.keystore import KeyStore
from ..runtime.address import SuiAddress
from ..runtime.errors import DecodeError


class Signer(ABC):
    """
    Base signer interface.

    Anything that can sign on behalf of one address.
    """

    @property
    @abstractmethod
    def address(self) -> SuiAddress:
        """Address the signatures are valid for."""

    @property
    @abstractmethod
    def scheme(self) -> SignatureScheme:
        """Signature scheme of the key."""

    @abstractmethod
    def public_key_bytes(self) -> bytes:
        """Public key bytes."""

    @abstractmethod
    def sign(self, digest: bytes) -> bytes:
        """
        Sign a 32-byte intent digest.

        Args:
            digest: Digest to sign

        Returns:
            64-byte raw signature
        """

    def sign_with_intent(self, intent: Intent, message: bytes) -> str:
        """
        Sign a message under an intent and serialize the signature.

        Args:
            intent: Intent the message belongs to
            message: BCS bytes of the value being signed

        Returns:
            Base64 ``flag || signature || public_key``
        """
        signature = self.sign(intent_digest(intent, message))
        serialized = bytes([self.scheme]) + signature + self.public_key_bytes()
        return base64.b64encode(serialized).decode("ascii")

    def sign_transaction(self, tx_bytes: bytes) -> str:
        """Serialized signature over BCS ``TransactionData`` bytes."""
        return self.sign_with_intent(Intent.transaction(), tx_bytes)

    def sign_personal_message(self, message: bytes) -> str:
        """Serialized signature over an arbitrary message (``vector<u8>``)."""
        w = BinaryWriter()
        w.len_prefixed_bytes(message)
        return self.sign_with_intent(Intent.personal_message(), w.to_bytes())


class KeyPairSigner(Signer):
    """Signer backed by an in-process key pair."""

    def __init__(self, keypair: KeyPair):
        self._keypair = keypair

    @classmethod
    def from_private_key(cls, text: str) -> "KeyPairSigner":
        """
        Create a signer from ``suiprivkey1...`` or base64 keystore text.

        Raises:
            KeyDecodeError: If the key text is invalid
        """
        return cls(keypair_from_text(text))

    @classmethod
    def from_keystore(cls, store: KeyStore, address: Union[str, SuiAddress]) -> "KeyPairSigner":
        """
        Create a signer for one address held by a key store.

        Raises:
            KeyStoreError: If the store has no key for the address
        """
        return cls(store.get_key(address))

    @property
    def keypair(self) -> KeyPair:
        return self._keypair

    @property
    def address(self) -> SuiAddress:
        return self._keypair.address

    @property
    def scheme(self) -> SignatureScheme:
        return self._keypair.scheme

    def public_key_bytes(self) -> bytes:
        return self._keypair.public_key_bytes()

    def sign(self, digest: bytes) -> bytes:
        return self._keypair.sign(digest)

    def __repr__(self) -> str:
        return f"KeyPairSigner(address='{self.address}', scheme={self.scheme.name})"


@dataclass(frozen=True)
class SerializedSignature:
    """Parts of a ``flag || signature || public_key`` signature."""

    scheme: SignatureScheme
    signature: bytes
    public_key: bytes

    @classmethod
    def parse(cls, text: str) -> "SerializedSignature":
        """
        Split a base64 serialized signature.

        Raises:
            DecodeError: If the text is not a well formed serialized signature
        """
        try:
            raw = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise DecodeError("Signature is not valid base64", cause=exc) from exc
        if len(raw) < 1 + SIGNATURE_LENGTH:
            raise DecodeError(f"Serialized signature too short: {len(raw)} bytes")
        try:
            scheme = SignatureScheme(raw[0])
        except ValueError as exc:
            raise DecodeError(f"Unknown signature flag: {raw[0]:#04x}") from exc
        return cls(scheme, raw[1:1 + SIGNATURE_LENGTH], raw[1 + SIGNATURE_LENGTH:])

    @property
    def address(self) -> SuiAddress:
        return derive_address(self.scheme, self.public_key)

    def verify(self, intent: Intent, message: bytes) -> bool:
        digest = intent_digest(intent, message)
        if self.scheme == SignatureScheme.ED25519:
            return Ed25519PublicKey(self.public_key).verify(self.signature, digest)
        curve = KEYPAIR_CLASSES[self.scheme].curve
        return verify_compact(curve, self.public_key, self.signature, digest)


def verify_transaction_signature(serialized: str, tx_bytes: bytes) -> bool:
    """Check a serialized signature against BCS ``TransactionData`` bytes."""
    return SerializedSignature.parse(serialized).verify(Intent.transaction(), tx_bytes)
