"""
Test bootstrap:
- Make the tests directory importable so test modules can use ``helpers``
- Provide deterministic keys, a fake fullnode and a Canary deployment on it
"""
import pathlib
import sys

import pytest

TESTS_DIR = pathlib.Path(__file__).parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from helpers.mocks import FakeSui, make_address  # noqa: E402

from canary_client.crypto import Ed25519KeyPair  # noqa: E402
from canary_client.signers import KeyPairSigner  # noqa: E402

CANARY_PACKAGE = make_address(0xCAFE)


@pytest.fixture
def keypair():
    """Provide a deterministic Ed25519 key pair for testing."""
    return Ed25519KeyPair(bytes(range(32)))


@pytest.fixture
def signer(keypair):
    return KeyPairSigner(keypair)


@pytest.fixture
def other_signer():
    return KeyPairSigner(Ed25519KeyPair(bytes([7]) * 32))


@pytest.fixture
def sui():
    """In-memory fullnode."""
    return FakeSui()


@pytest.fixture
def canary(sui, signer):
    """
    A Canary deployment on the fake node: a shared Registry, the signer's
    AdminCap and a gas coin for the signer.
    """
    registry = sui.add_shared(
        f"{CANARY_PACKAGE}::member_registry::Registry",
        fields={"fee": "100000000", "member_count": "2", "balance": "0"},
    )
    admin_cap = sui.add_owned(signer.address, f"{CANARY_PACKAGE}::member_registry::AdminCap")
    gas = sui.add_coin(signer.address, 5_000_000_000)
    return {"package": CANARY_PACKAGE, "registry": registry, "admin_cap": admin_cap, "gas": gas}
