"""
Hash Functions - Blake2b-256 digests and intent messages

Sui hashes everything with 32-byte Blake2b. Signatures are computed over an
intent message: a three byte ``(scope, version, app_id)`` prefix followed by
the BCS bytes of the signed value, so a signature produced for one kind of
message can never be replayed as another.
"""

import hashlib
from dataclasses import dataclass
from enum import IntEnum

import base58

from ..runtime.errors import DecodeError

DIGEST_LENGTH = 32
TRANSACTION_DATA_SALT = b"TransactionData::"


class IntentScope(IntEnum):
    TRANSACTION_DATA = 0
    TRANSACTION_EFFECTS = 1
    CHECKPOINT_SUMMARY = 2
    PERSONAL_MESSAGE = 3


class IntentVersion(IntEnum):
    V0 = 0


class AppId(IntEnum):
    SUI = 0
    NARWHAL = 1
    CONSENSUS = 2


@dataclass(frozen=True)
class Intent:
    """Domain separation tag prepended to every signed message."""

    scope: IntentScope = IntentScope.TRANSACTION_DATA
    version: IntentVersion = IntentVersion.V0
    app_id: AppId = AppId.SUI

    def to_bytes(self) -> bytes:
        return bytes([self.scope, self.version, self.app_id])

    @classmethod
    def transaction(cls) -> "Intent":
        return cls(IntentScope.TRANSACTION_DATA)

    @classmethod
    def personal_message(cls) -> "Intent":
        return cls(IntentScope.PERSONAL_MESSAGE)


def blake2b256(data: bytes) -> bytes:
    """
    Compute the 32-byte Blake2b hash of input bytes.

    Args:
        data: Input bytes to hash

    Returns:
        Digest (32 bytes)
    """
    return hashlib.blake2b(data, digest_size=DIGEST_LENGTH).digest()


def intent_digest(intent: Intent, message: bytes) -> bytes:
    """
    Digest that is actually signed: ``blake2b256(intent || message)``.

    Args:
        intent: Intent the message is signed under
        message: BCS bytes of the signed value

    Returns:
        Signing digest (32 bytes)
    """
    return blake2b256(intent.to_bytes() + message)


def transaction_signing_digest(tx_bytes: bytes) -> bytes:
    return intent_digest(Intent.transaction(), tx_bytes)


def transaction_digest(tx_bytes: bytes) -> str:
    """
    Compute the base58 transaction digest the network will assign.

    Args:
        tx_bytes: BCS bytes of the TransactionData

    Returns:
        Base58 digest string
    """
    return encode_digest(blake2b256(TRANSACTION_DATA_SALT + tx_bytes))


def encode_digest(digest: bytes) -> str:
    return base58.b58encode(digest).decode("ascii")


def decode_digest(text: str) -> bytes:
    """
    Decode a base58 object or transaction digest.

    Raises:
        DecodeError: If the text is not base58 or not 32 bytes
    """
    try:
        raw = base58.b58decode(text)
    except ValueError as exc:
        raise DecodeError(f"Invalid base58 digest: {text!r}", cause=exc) from exc
    if len(raw) != DIGEST_LENGTH:
        raise DecodeError(f"Digest must be {DIGEST_LENGTH} bytes, got {len(raw)}",
                          details={"digest": text})
    return raw
