"""
Serialized signatures produced by ``KeyPairSigner``.
"""

import base64

import pytest

from canary_client.codec import Intent
from canary_client.crypto import Ed25519KeyPair, Secp256k1KeyPair, Secp256r1KeyPair
from canary_client.keys import MemoryKeyStore, export_private_key
from canary_client.runtime.errors import DecodeError, KeyStoreError
from canary_client.signers import KeyPairSigner
from canary_client.signers.signer import SerializedSignature, verify_transaction_signature

TX_BYTES = b"\x00\x00\x01\x02\x03"


@pytest.mark.parametrize("keypair", [
    Ed25519KeyPair(bytes(range(32))),
    Secp256k1KeyPair(bytes(range(1, 33))),
    Secp256r1KeyPair(bytes(range(1, 33))),
], ids=["ed25519", "secp256k1", "secp256r1"])
def test_transaction_signature_layout(keypair):
    signer = KeyPairSigner(keypair)
    serialized = signer.sign_transaction(TX_BYTES)
    raw = base64.b64decode(serialized)
    assert raw[0] == keypair.scheme
    assert raw[65:] == keypair.public_key_bytes()

    parsed = SerializedSignature.parse(serialized)
    assert parsed.address == signer.address
    assert verify_transaction_signature(serialized, TX_BYTES)
    assert not verify_transaction_signature(serialized, TX_BYTES + b"\x00")


def test_personal_message_is_not_a_transaction_signature(signer):
    serialized = signer.sign_personal_message(TX_BYTES)
    assert not verify_transaction_signature(serialized, TX_BYTES)
    assert SerializedSignature.parse(serialized).verify(
        Intent.personal_message(), b"\x05" + TX_BYTES)


def test_from_private_key(keypair):
    signer = KeyPairSigner.from_private_key(export_private_key(keypair))
    assert signer.address == keypair.address


def test_from_keystore(keypair):
    store = MemoryKeyStore()
    store.import_key(keypair)
    assert KeyPairSigner.from_keystore(store, keypair.address).keypair is keypair
    with pytest.raises(KeyStoreError):
        KeyPairSigner.from_keystore(MemoryKeyStore(), keypair.address)


@pytest.mark.parametrize("text", ["not base64!", base64.b64encode(b"\x00" * 10).decode(),
                                  base64.b64encode(b"\x07" + b"\x00" * 96).decode()])
def test_parse_rejects_malformed(text):
    with pytest.raises(DecodeError):
        SerializedSignature.parse(text)
