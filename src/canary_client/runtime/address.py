"""
SuiAddress Pydantic custom type for 32-byte Sui addresses and object ids.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

from .errors import DecodeError, InvalidAddressError

ADDRESS_LENGTH = 32
_HEX_DIGITS = frozenset("0123456789abcdef")


def normalize_address(value: str) -> str:
    """
    Normalize an address string to ``0x`` followed by 64 lower-case hex digits.

    Short forms such as ``0x2`` are left-padded with zeros.

    Args:
        value: Address text with or without the ``0x`` prefix

    Returns:
        Canonical address string

    Raises:
        InvalidAddressError: If the text is not hex or longer than 32 bytes
    """
    if not isinstance(value, str):
        raise InvalidAddressError(f"Address must be a string, got {type(value).__name__}")
    text = value.strip().lower()
    if text.startswith("0x"):
        text = text[2:]
    if not text or len(text) > ADDRESS_LENGTH * 2 or not set(text) <= _HEX_DIGITS:
        raise InvalidAddressError(f"Invalid address: {value!r}", details={"address": value})
    return "0x" + text.rjust(ADDRESS_LENGTH * 2, "0")


def is_valid_address(value: str) -> bool:
    try:
        normalize_address(value)
    except InvalidAddressError:
        return False
    return True


class SuiAddress:
    """Custom Pydantic type for Sui account addresses and object ids."""

    __slots__ = ("_bytes",)

    def __init__(self, value: Union[str, bytes, "SuiAddress"]):
        if isinstance(value, SuiAddress):
            self._bytes = value._bytes
        elif isinstance(value, (bytes, bytearray)):
            if len(value) != ADDRESS_LENGTH:
                raise InvalidAddressError(
                    f"Address must be {ADDRESS_LENGTH} bytes, got {len(value)}")
            self._bytes = bytes(value)
        else:
            self._bytes = bytes.fromhex(normalize_address(value)[2:])

    @classmethod
    def from_bytes(cls, data: bytes) -> "SuiAddress":
        """
        Decode an address from exactly 32 raw bytes.

        Raises:
            DecodeError: If the buffer is not 32 bytes long
        """
        if len(data) != ADDRESS_LENGTH:
            raise DecodeError(f"Address must be {ADDRESS_LENGTH} bytes, got {len(data)}",
                              details={"length": len(data)})
        return cls(bytes(data))

    def to_bytes(self) -> bytes:
        return self._bytes

    def to_hex(self) -> str:
        return "0x" + self._bytes.hex()

    def short(self) -> str:
        """Shortest hex form, e.g. ``0x6`` for the clock object."""
        return "0x" + (self._bytes.hex().lstrip("0") or "0")

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"SuiAddress('{self.to_hex()}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, SuiAddress):
            return self._bytes == other._bytes
        if isinstance(other, str):
            return is_valid_address(other) and normalize_address(other) == self.to_hex()
        return False

    def __hash__(self) -> int:
        return hash(self._bytes)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        """Return a Pydantic CoreSchema that validates and serializes the address."""
        return core_schema.no_info_before_validator_function(
            cls._validate,
            core_schema.is_instance_schema(cls),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def _validate(cls, value: Any) -> "SuiAddress":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except InvalidAddressError as exc:
            raise ValueError(exc.message) from exc


# Object ids share the address representation
ObjectID = SuiAddress

ZERO_ADDRESS = SuiAddress("0x0")
CLOCK_OBJECT_ID = SuiAddress("0x6")
