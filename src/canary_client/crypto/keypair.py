"""
Signature schemes and the key pair interface shared by all schemes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum

from ..codec.hashes import blake2b256
from ..runtime.address import SuiAddress
from ..runtime.errors import ErrorCode, KeyDecodeError


class SignatureScheme(IntEnum):
    """Signature scheme flag byte, as used in addresses, keys and signatures."""

    ED25519 = 0x00
    SECP256K1 = 0x01
    SECP256R1 = 0x02

    @classmethod
    def from_flag(cls, flag: int) -> "SignatureScheme":
        try:
            return cls(flag)
        except ValueError as exc:
            raise KeyDecodeError(f"Unsupported signature scheme flag: {flag:#04x}",
                                 code=ErrorCode.UNSUPPORTED_SCHEME,
                                 details={"flag": flag}) from exc


SECRET_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64


def derive_address(scheme: SignatureScheme, public_key: bytes) -> SuiAddress:
    """
    Derive the account address of a public key.

    ``blake2b256(flag || public_key)``

    Args:
        scheme: Signature scheme of the key
        public_key: Public key bytes (32 for Ed25519, 33 compressed for ECDSA)

    Returns:
        Account address
    """
    return SuiAddress(blake2b256(bytes([scheme]) + public_key))


class KeyPair(ABC):
    """A secret key together with its public key and address."""

    scheme: SignatureScheme

    @abstractmethod
    def public_key_bytes(self) -> bytes:
        """Public key bytes in the encoding used for address derivation."""

    @abstractmethod
    def secret_key_bytes(self) -> bytes:
        """The 32 secret key bytes. Never log these."""

    @abstractmethod
    def sign(self, message: bytes) -> bytes:
        """Sign a message, returning a 64-byte signature."""

    @abstractmethod
    def verify(self, signature: bytes, message: bytes) -> bool:
        """Verify a 64-byte signature over a message."""

    @property
    def address(self) -> SuiAddress:
        return derive_address(self.scheme, self.public_key_bytes())

    @staticmethod
    def _check_secret(secret: bytes) -> bytes:
        if not isinstance(secret, (bytes, bytearray)) or len(secret) != SECRET_KEY_LENGTH:
            length = len(secret) if isinstance(secret, (bytes, bytearray)) else None
            raise KeyDecodeError(f"Secret key must be {SECRET_KEY_LENGTH} bytes, got {length}")
        return bytes(secret)

    def __eq__(self, other) -> bool:
        if not isinstance(other, KeyPair):
            return False
        return self.scheme == other.scheme and self.public_key_bytes() == other.public_key_bytes()

    def __hash__(self) -> int:
        return hash((self.scheme, self.public_key_bytes()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(address='{self.address}')"
