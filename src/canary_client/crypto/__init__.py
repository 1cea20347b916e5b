"""
Cryptographic primitives for the Canary client.

Ed25519, secp256k1 and secp256r1 key pairs built on ``cryptography``, plus
address derivation.
"""

from typing import Dict, Type

from .ed25519 import Ed25519KeyPair, Ed25519PublicKey
from .keypair import KeyPair, SignatureScheme, derive_address
from .secp256 import Secp256k1KeyPair, Secp256r1KeyPair

KEYPAIR_CLASSES: Dict[SignatureScheme, Type[KeyPair]] = {
    SignatureScheme.ED25519: Ed25519KeyPair,
    SignatureScheme.SECP256K1: Secp256k1KeyPair,
    SignatureScheme.SECP256R1: Secp256r1KeyPair,
}


def keypair_from_secret(scheme: SignatureScheme, secret: bytes) -> KeyPair:
    """
    Build the key pair for a scheme from its 32 secret bytes.

    Raises:
        KeyDecodeError: If the secret is invalid for the scheme
    """
    return KEYPAIR_CLASSES[SignatureScheme(scheme)](secret)


__all__ = [
    "Ed25519KeyPair",
    "Ed25519PublicKey",
    "KEYPAIR_CLASSES",
    "KeyPair",
    "Secp256k1KeyPair",
    "Secp256r1KeyPair",
    "SignatureScheme",
    "derive_address",
    "keypair_from_secret",
]
