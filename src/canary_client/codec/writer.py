"""
Binary Writer - BCS encoding primitives

Binary Canonical Serialization: fixed-width little-endian integers, ULEB128
lengths and enum tags, length-prefixed byte strings and fixed 32-byte
addresses.
"""

import builtins
import struct
from typing import Callable, Iterable, List, Optional, TypeVar

from ..runtime.address import SuiAddress
from ..runtime.errors import BuildError

T = TypeVar("T")

U8_MAX = (1 << 8) - 1
U16_MAX = (1 << 16) - 1
U32_MAX = (1 << 32) - 1
U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1
U256_MAX = (1 << 256) - 1


def _check_range(v: int, limit: int, name: str) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise BuildError(f"{name} value must be an integer, got {type(v).__name__}")
    if v < 0 or v > limit:
        raise BuildError(f"{name} value out of range: {v}", details={"value": v, "type": name})
    return v


class BinaryWriter:
    """
    Append-only BCS writer.

    Integer writers reject out-of-range values with ``BuildError`` instead of
    masking them, so a caller can never silently encode a truncated amount.
    """

    def __init__(self):
        self._bb: List[int] = []

    def u8(self, v: int) -> None:
        self._bb.append(_check_range(v, U8_MAX, "u8"))

    def u16(self, v: int) -> None:
        self._bb.extend(struct.pack('<H', _check_range(v, U16_MAX, "u16")))

    def u32(self, v: int) -> None:
        self._bb.extend(struct.pack('<I', _check_range(v, U32_MAX, "u32")))

    def u64(self, v: int) -> None:
        self._bb.extend(struct.pack('<Q', _check_range(v, U64_MAX, "u64")))

    def u128(self, v: int) -> None:
        self._bb.extend(_check_range(v, U128_MAX, "u128").to_bytes(16, "little"))

    def u256(self, v: int) -> None:
        self._bb.extend(_check_range(v, U256_MAX, "u256").to_bytes(32, "little"))

    def bool(self, v: bool) -> None:
        if not isinstance(v, bool):
            raise BuildError(f"bool value must be True or False, got {v!r}")
        self._bb.append(1 if v else 0)

    def uvarint(self, v: int) -> None:
        """
        Write unsigned ULEB128, used for lengths and enum variant tags.

        Args:
            v: Unsigned integer value (at most u32 range)
        """
        x = _check_range(v, U32_MAX, "uleb128")
        while x >= 0x80:
            self._bb.append((x & 0x7F) | 0x80)
            x >>= 7
        self._bb.append(x)

    def bytes(self, v: bytes) -> None:
        """Write raw bytes without length prefix."""
        self._bb.extend(v)

    def len_prefixed_bytes(self, v: builtins.bytes) -> None:
        self.uvarint(len(v))
        self.bytes(v)

    def string(self, s: str) -> None:
        """Write a UTF-8 string with ULEB128 length prefix."""
        try:
            encoded = s.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise BuildError(f"String is not encodable as UTF-8: {exc.reason}",
                             details={"position": exc.start}, cause=exc) from exc
        self.len_prefixed_bytes(encoded)

    def address(self, v: SuiAddress) -> None:
        self.bytes(SuiAddress(v).to_bytes())

    def variant(self, index: int) -> None:
        """Write an enum variant tag."""
        self.uvarint(index)

    def vector(self, items: Iterable[T], write_item: Callable[[T], None]) -> None:
        items = list(items)
        self.uvarint(len(items))
        for item in items:
            write_item(item)

    def option(self, value: Optional[T], write_item: Callable[[T], None]) -> None:
        if value is None:
            self._bb.append(0)
        else:
            self._bb.append(1)
            write_item(value)

    def to_bytes(self) -> builtins.bytes:
        return bytes(self._bb)
