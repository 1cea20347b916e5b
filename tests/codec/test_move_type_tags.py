"""
Move type tag parsing and typed decoding of return values.
"""

import pytest

from canary_client.codec import BinaryWriter, StructLayout, decode_value, decode_values, parse_type_tag
from canary_client.codec.move_types import PrimitiveType, StructType, VectorType, encode_type_tag
from canary_client.runtime.address import SuiAddress
from canary_client.runtime.errors import DecodeError, MalformedTypeError


class TestParseTypeTag:

    def test_primitive(self):
        assert parse_type_tag("u64") == PrimitiveType("u64")

    def test_nested_struct(self):
        tag = parse_type_tag("0x2::coin::Coin<0x2::sui::SUI>")
        assert isinstance(tag, StructType)
        assert tag.module == "coin"
        assert tag.name == "Coin"
        assert tag.type_params == (StructType(SuiAddress("0x2"), "sui", "SUI"),)
        assert str(tag) == "0x2::coin::Coin<0x2::sui::SUI>"

    def test_vector_of_struct(self):
        tag = parse_type_tag("vector<0xcafe::member_registry::MemberInfoWithAddress>")
        assert isinstance(tag, VectorType)
        assert tag.element.qualified_name == "member_registry::MemberInfoWithAddress"

    @pytest.mark.parametrize("text", [
        "",
        "0x2::coin",
        "0x2::coin::Coin<",
        "vector<u8",
        "u64 u64",
        "0xzz::m::T",
        "0x2::9bad::T",
        "0x2::m::T<u8,>",
    ])
    def test_malformed(self, text):
        with pytest.raises(MalformedTypeError):
            parse_type_tag(text)

    def test_encoding_of_struct_tag(self):
        w = BinaryWriter()
        encode_type_tag(w, parse_type_tag("0x2::sui::SUI"))
        data = w.to_bytes()
        assert data[0] == 7
        assert data[1:33] == SuiAddress("0x2").to_bytes()
        assert data[33:] == b"\x03sui\x03SUI\x00"


class TestDecodeValue:

    def test_bool_and_u64(self):
        assert decode_value("bool", b"\x01") is True
        assert decode_value("u64", (42).to_bytes(8, "little")) == 42

    def test_string(self):
        assert decode_value("0x1::string::String", b"\x0bexample.com") == "example.com"

    def test_address(self):
        raw = bytes(range(32))
        assert decode_value("address", raw) == SuiAddress(raw)

    def test_vector_u8_is_bytes(self):
        assert decode_value("vector<u8>", b"\x03abc") == b"abc"

    def test_option(self):
        assert decode_value("0x1::option::Option<u8>", b"\x00") is None
        assert decode_value("0x1::option::Option<u8>", b"\x01\x09") == 9

    def test_struct_with_layout(self):
        layout = StructLayout("m::Pair", (("left", "u8"), ("right", "bool")))
        value = decode_value("0xabc::m::Pair", b"\x05\x00", {"m::Pair": layout})
        assert value == {"left": 5, "right": False}

    def test_struct_without_layout(self):
        with pytest.raises(DecodeError, match="No layout"):
            decode_value("0xabc::m::Pair", b"\x05\x00")

    def test_trailing_bytes_rejected(self):
        with pytest.raises(DecodeError):
            decode_value("u8", b"\x01\x02")

    def test_short_buffer_rejected(self):
        with pytest.raises(DecodeError):
            decode_value("u64", b"\x01")

    def test_arity_mismatch(self):
        with pytest.raises(DecodeError, match="Expected 2 return values, got 1"):
            decode_values(["u8", "u8"], [b"\x01"])
