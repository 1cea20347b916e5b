"""
Ed25519 cryptographic operations.

Sui Ed25519 signatures are computed directly over the 32-byte intent digest.
"""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey as CryptoEd25519PrivateKey,
    Ed25519PublicKey as CryptoEd25519PublicKey,
)

from ..runtime.errors import KeyDecodeError
from .keypair import SIGNATURE_LENGTH, KeyPair, SignatureScheme

PUBLIC_KEY_LENGTH = 32


class Ed25519PublicKey:
    """
    Ed25519 public key.

    Provides verification operations and serialization.
    """

    def __init__(self, public_key_bytes: bytes):
        """
        Initialize from 32-byte public key.

        Args:
            public_key_bytes: 32-byte Ed25519 public key

        Raises:
            KeyDecodeError: If key is invalid
        """
        if len(public_key_bytes) != PUBLIC_KEY_LENGTH:
            raise KeyDecodeError(
                f"Ed25519 public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(public_key_bytes)}")
        self._key_bytes = bytes(public_key_bytes)
        try:
            self._crypto_key = CryptoEd25519PublicKey.from_public_bytes(self._key_bytes)
        except ValueError as e:
            raise KeyDecodeError(f"Invalid Ed25519 public key: {e}", cause=e) from e

    @classmethod
    def from_hex(cls, hex_string: str) -> Ed25519PublicKey:
        try:
            key_bytes = bytes.fromhex(hex_string)
        except ValueError as e:
            raise KeyDecodeError(f"Invalid hex string: {e}", cause=e) from e
        return cls(key_bytes)

    def to_bytes(self) -> bytes:
        return self._key_bytes

    def to_hex(self) -> str:
        return self._key_bytes.hex()

    def verify(self, signature: bytes, message: bytes) -> bool:
        """
        Verify a signature against a message.

        Args:
            signature: 64-byte Ed25519 signature
            message: Message that was signed

        Returns:
            True if signature is valid
        """
        if len(signature) != SIGNATURE_LENGTH:
            return False
        try:
            self._crypto_key.verify(signature, message)
        except InvalidSignature:
            return False
        return True

    def __eq__(self, other) -> bool:
        if not isinstance(other, Ed25519PublicKey):
            return False
        return self._key_bytes == other._key_bytes

    def __hash__(self) -> int:
        return hash(self._key_bytes)

    def __repr__(self) -> str:
        return f"Ed25519PublicKey.from_hex('{self.to_hex()}')"


class Ed25519KeyPair(KeyPair):
    """Ed25519 private key seed with its public key."""

    scheme = SignatureScheme.ED25519

    def __init__(self, private_key_bytes: bytes):
        """
        Initialize from 32-byte private key seed.

        Raises:
            KeyDecodeError: If the seed is not 32 bytes
        """
        self._key_bytes = self._check_secret(private_key_bytes)
        self._crypto_key = CryptoEd25519PrivateKey.from_private_bytes(self._key_bytes)
        self._public_key = Ed25519PublicKey(
            self._crypto_key.public_key().public_bytes(
                encoding=serialization.Encoding.Raw,
                format=serialization.PublicFormat.Raw,
            )
        )

    @classmethod
    def generate(cls) -> Ed25519KeyPair:
        crypto_key = CryptoEd25519PrivateKey.generate()
        return cls(crypto_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        ))

    @property
    def public_key(self) -> Ed25519PublicKey:
        return self._public_key

    def public_key_bytes(self) -> bytes:
        return self._public_key.to_bytes()

    def secret_key_bytes(self) -> bytes:
        return self._key_bytes

    def sign(self, message: bytes) -> bytes:
        return self._crypto_key.sign(message)

    def verify(self, signature: bytes, message: bytes) -> bool:
        return self._public_key.verify(signature, message)
