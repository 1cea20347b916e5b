"""
Signers for the Canary client.
"""

from .signer import KeyPairSigner, SerializedSignature, Signer, verify_transaction_signature

__all__ = [
    "KeyPairSigner",
    "SerializedSignature",
    "Signer",
    "verify_transaction_signature",
]
