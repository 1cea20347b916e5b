"""
Pure value encoders.
"""

import pytest

from canary_client.runtime.address import SuiAddress
from canary_client.runtime.errors import BuildError, DecodeError, InvalidAddressError
from canary_client.tx import (
    decode_return_values,
    pure_address,
    pure_bool,
    pure_bytes,
    pure_option,
    pure_string,
    pure_u8,
    pure_u64,
    pure_u256,
    pure_vector,
)


def test_string():
    assert pure_string("example.com").value == b"\x0bexample.com"


def test_string_with_lone_surrogate():
    with pytest.raises(BuildError, match="UTF-8") as exc_info:
        pure_string("example\ud800.com")
    assert isinstance(exc_info.value.cause, UnicodeEncodeError)
    assert exc_info.value.details["position"] == 7


def test_u64():
    assert pure_u64(100_000_000).value == (100_000_000).to_bytes(8, "little")


def test_u256():
    assert pure_u256(1).value == b"\x01" + b"\x00" * 31


def test_address_pads_short_form():
    assert pure_address("0x2").value == SuiAddress("0x2").to_bytes()


def test_bytes_and_bool():
    assert pure_bytes(b"ab").value == b"\x02ab"
    assert pure_bool(False).value == b"\x00"


def test_vector_and_option():
    assert pure_vector([1, 2], pure_u8).value == b"\x02\x01\x02"
    assert pure_option(None, pure_u8).value == b"\x00"
    assert pure_option(7, pure_u8).value == b"\x01\x07"


@pytest.mark.parametrize("encode,value,error", [
    (pure_u64, -1, BuildError),
    (pure_u64, 1 << 64, BuildError),
    (pure_u8, 1.0, BuildError),
    (pure_string, b"bytes", BuildError),
    (pure_bytes, "text", BuildError),
    (pure_address, "0xnope", InvalidAddressError),
])
def test_invalid_values(encode, value, error):
    with pytest.raises(error):
        encode(value)


def test_decode_return_values_positional():
    values = decode_return_values([b"\x01", (5).to_bytes(8, "little")], ["bool", "u64"])
    assert values == (True, 5)


def test_decode_return_values_arity():
    with pytest.raises(DecodeError):
        decode_return_values([b"\x01"], ["bool", "u64"])
