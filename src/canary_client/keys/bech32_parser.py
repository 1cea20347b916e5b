"""
Sui private key text formats.

Two encodings carry ``flag || 32 secret bytes``:

- Bech32 with the ``suiprivkey`` human readable part, as printed by
  ``sui keytool export``.
- Base64, as stored line by line in a ``sui.keystore`` file.

Decoding either one yields a scheme and the raw secret, or fails with
``KeyDecodeError``; a partially decoded key is never returned.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

import bech32

from ..crypto import KeyPair, SignatureScheme, keypair_from_secret
from ..crypto.keypair import SECRET_KEY_LENGTH
from ..runtime.errors import KeyDecodeError

SUI_PRIVATE_KEY_PREFIX = "suiprivkey"
PAYLOAD_LENGTH = SECRET_KEY_LENGTH + 1


@dataclass(frozen=True)
class ParsedPrivateKey:
    scheme: SignatureScheme
    secret_key: bytes

    @property
    def flag(self) -> int:
        return int(self.scheme)

    def to_keypair(self) -> KeyPair:
        return keypair_from_secret(self.scheme, self.secret_key)

    def __repr__(self) -> str:
        return f"ParsedPrivateKey(scheme={self.scheme.name})"


def _split_payload(payload: bytes) -> ParsedPrivateKey:
    if len(payload) != PAYLOAD_LENGTH:
        raise KeyDecodeError(
            f"Private key payload must be {PAYLOAD_LENGTH} bytes (flag + key), got {len(payload)}",
            details={"length": len(payload)},
        )
    scheme = SignatureScheme.from_flag(payload[0])
    return ParsedPrivateKey(scheme, bytes(payload[1:]))


def parse_bech32_private_key(text: str) -> ParsedPrivateKey:
    """
    Decode a ``suiprivkey1...`` string.

    Args:
        text: Bech32 encoded private key

    Returns:
        Scheme and 32 secret bytes

    Raises:
        KeyDecodeError: On a bad checksum, wrong prefix, wrong payload length
            or unknown scheme flag
    """
    if not isinstance(text, str) or not text.strip():
        raise KeyDecodeError("Private key text is empty")
    hrp, data = bech32.bech32_decode(text.strip())
    if hrp is None or data is None:
        raise KeyDecodeError("Invalid bech32 encoding or checksum")
    if hrp != SUI_PRIVATE_KEY_PREFIX:
        raise KeyDecodeError(
            f"Invalid prefix: expected '{SUI_PRIVATE_KEY_PREFIX}', got '{hrp}'",
            details={"prefix": hrp},
        )
    payload = bech32.convertbits(data, 5, 8, False)
    if payload is None:
        raise KeyDecodeError("Invalid bech32 data padding")
    return _split_payload(bytes(payload))


def validate_bech32_private_key(text: str) -> bool:
    try:
        parse_bech32_private_key(text)
    except KeyDecodeError:
        return False
    return True


def export_private_key(keypair: KeyPair) -> str:
    """
    Encode a key pair as ``suiprivkey1...``.

    Args:
        keypair: Key pair to export

    Returns:
        Bech32 private key text
    """
    payload = bytes([keypair.scheme]) + keypair.secret_key_bytes()
    data = bech32.convertbits(payload, 8, 5, True)
    return bech32.bech32_encode(SUI_PRIVATE_KEY_PREFIX, data)


def parse_keystore_entry(entry: str) -> ParsedPrivateKey:
    """
    Decode one base64 ``sui.keystore`` entry.

    Raises:
        KeyDecodeError: If the entry is not base64 of ``flag || secret``
    """
    try:
        payload = base64.b64decode(entry, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise KeyDecodeError("Keystore entry is not valid base64", cause=exc) from exc
    return _split_payload(payload)


def keystore_entry(keypair: KeyPair) -> str:
    return base64.b64encode(bytes([keypair.scheme]) + keypair.secret_key_bytes()).decode("ascii")


def keypair_from_text(text: str) -> KeyPair:
    """
    Build a key pair from either bech32 or base64 keystore text.

    Raises:
        KeyDecodeError: If the text is neither format
    """
    text = text.strip()
    if text.lower().startswith(SUI_PRIVATE_KEY_PREFIX):
        return parse_bech32_private_key(text).to_keypair()
    return parse_keystore_entry(text).to_keypair()
