"""
Key pairs for the three signature schemes and address derivation.
"""

import pytest

from canary_client.codec.hashes import blake2b256
from canary_client.crypto import (
    Ed25519KeyPair,
    Secp256k1KeyPair,
    Secp256r1KeyPair,
    SignatureScheme,
    derive_address,
    keypair_from_secret,
)
from canary_client.crypto.secp256 import SECP256K1_ORDER, SECP256R1_ORDER
from canary_client.keys.bech32_parser import export_private_key, parse_bech32_private_key
from canary_client.runtime.address import SuiAddress
from canary_client.runtime.errors import KeyDecodeError

SECRET = bytes(range(1, 33))

# RFC 8032 section 7.1, test 1
RFC8032_SECRET = bytes.fromhex(
    "9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60")
RFC8032_PUBLIC = bytes.fromhex(
    "d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a")
RFC8032_ADDRESS = "0x304af458e90e97c841685b8cbbc59b909f3e2cf150df590ada4c81452c29737d"


class TestEd25519:

    def test_deterministic_public_key(self):
        assert Ed25519KeyPair(SECRET).public_key_bytes() == Ed25519KeyPair(SECRET).public_key_bytes()

    def test_address_is_flagged_blake2b(self):
        kp = Ed25519KeyPair(SECRET)
        assert kp.address == SuiAddress(blake2b256(b"\x00" + kp.public_key_bytes()))

    def test_known_answer_address(self):
        kp = Ed25519KeyPair(RFC8032_SECRET)
        assert kp.public_key_bytes() == RFC8032_PUBLIC
        assert str(kp.address) == RFC8032_ADDRESS

    def test_known_answer_key_export(self):
        parsed = parse_bech32_private_key(export_private_key(Ed25519KeyPair(RFC8032_SECRET)))
        assert parsed.scheme is SignatureScheme.ED25519
        assert parsed.secret_key == RFC8032_SECRET
        assert str(parsed.to_keypair().address) == RFC8032_ADDRESS

    def test_sign_and_verify(self):
        kp = Ed25519KeyPair(SECRET)
        signature = kp.sign(b"message")
        assert len(signature) == 64
        assert kp.verify(signature, b"message")
        assert not kp.verify(signature, b"other message")

    def test_generate(self):
        assert Ed25519KeyPair.generate() != Ed25519KeyPair.generate()

    @pytest.mark.parametrize("secret", [b"", b"\x01" * 31, b"\x01" * 33])
    def test_wrong_length(self, secret):
        with pytest.raises(KeyDecodeError):
            Ed25519KeyPair(secret)


@pytest.mark.parametrize("cls,order", [
    (Secp256k1KeyPair, SECP256K1_ORDER),
    (Secp256r1KeyPair, SECP256R1_ORDER),
])
class TestEcdsa:

    def test_compressed_public_key(self, cls, order):
        public_key = cls(SECRET).public_key_bytes()
        assert len(public_key) == 33
        assert public_key[0] in (2, 3)

    def test_signature_is_low_s(self, cls, order):
        kp = cls(SECRET)
        for i in range(8):
            signature = kp.sign(b"message %d" % i)
            s = int.from_bytes(signature[32:], "big")
            assert s <= order // 2
            assert kp.verify(signature, b"message %d" % i)

    def test_address_uses_scheme_flag(self, cls, order):
        kp = cls(SECRET)
        assert kp.address == derive_address(kp.scheme, kp.public_key_bytes())
        assert kp.address != Ed25519KeyPair(SECRET).address

    def test_zero_scalar_rejected(self, cls, order):
        with pytest.raises(KeyDecodeError):
            cls(b"\x00" * 32)

    def test_scalar_above_order_rejected(self, cls, order):
        with pytest.raises(KeyDecodeError):
            cls(order.to_bytes(32, "big"))


def test_keypair_from_secret_dispatches_by_scheme():
    assert isinstance(keypair_from_secret(SignatureScheme.SECP256R1, SECRET), Secp256r1KeyPair)
    assert isinstance(keypair_from_secret(0, SECRET), Ed25519KeyPair)


def test_unknown_scheme_flag():
    with pytest.raises(KeyDecodeError) as exc_info:
        SignatureScheme.from_flag(0x05)
    assert exc_info.value.code.name == "UNSUPPORTED_SCHEME"
