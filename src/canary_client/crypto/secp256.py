"""
SECP256K1 and SECP256R1 (P-256) ECDSA operations.

Both schemes sign the SHA-256 hash of the message and produce a compact
64-byte ``r || s`` signature normalised to low-S. Public keys are 33-byte
compressed SEC1 points.
"""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from ..runtime.errors import KeyDecodeError
from .keypair import SIGNATURE_LENGTH, KeyPair, SignatureScheme

COMPRESSED_PUBLIC_KEY_LENGTH = 33

SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256R1_ORDER = 0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551


class _EcdsaKeyPair(KeyPair):
    curve: ec.EllipticCurve
    order: int

    def __init__(self, private_key_bytes: bytes):
        """
        Initialize from a 32-byte big-endian secret scalar.

        Raises:
            KeyDecodeError: If the scalar is not 32 bytes or not in ``[1, n)``
        """
        self._key_bytes = self._check_secret(private_key_bytes)
        scalar = int.from_bytes(self._key_bytes, "big")
        if not 0 < scalar < self.order:
            raise KeyDecodeError(f"{self.scheme.name} secret scalar out of range")
        self._crypto_key = ec.derive_private_key(scalar, self.curve)
        self._public_bytes = self._crypto_key.public_key().public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.CompressedPoint,
        )

    @classmethod
    def generate(cls):
        crypto_key = ec.generate_private_key(cls.curve)
        return cls(crypto_key.private_numbers().private_value.to_bytes(32, "big"))

    def public_key_bytes(self) -> bytes:
        return self._public_bytes

    def secret_key_bytes(self) -> bytes:
        return self._key_bytes

    def sign(self, message: bytes) -> bytes:
        der = self._crypto_key.sign(message, ec.ECDSA(hashes.SHA256()))
        r, s = decode_dss_signature(der)
        if s > self.order // 2:
            s = self.order - s
        return r.to_bytes(32, "big") + s.to_bytes(32, "big")

    def verify(self, signature: bytes, message: bytes) -> bool:
        return verify_compact(self.curve, self._public_bytes, signature, message)


def verify_compact(curve: ec.EllipticCurve, public_key: bytes, signature: bytes,
                   message: bytes) -> bool:
    """
    Verify a compact ``r || s`` signature over SHA-256 of the message.

    Args:
        curve: Curve of the key
        public_key: Compressed or uncompressed SEC1 public key
        signature: 64-byte signature
        message: Message that was signed

    Returns:
        True if signature is valid
    """
    if len(signature) != SIGNATURE_LENGTH:
        return False
    try:
        key = ec.EllipticCurvePublicKey.from_encoded_point(curve, public_key)
    except ValueError:
        return False
    r = int.from_bytes(signature[:32], "big")
    s = int.from_bytes(signature[32:], "big")
    try:
        key.verify(encode_dss_signature(r, s), message, ec.ECDSA(hashes.SHA256()))
    except InvalidSignature:
        return False
    return True


class Secp256k1KeyPair(_EcdsaKeyPair):
    scheme = SignatureScheme.SECP256K1
    curve = ec.SECP256K1()
    order = SECP256K1_ORDER


class Secp256r1KeyPair(_EcdsaKeyPair):
    scheme = SignatureScheme.SECP256R1
    curve = ec.SECP256R1()
    order = SECP256R1_ORDER
