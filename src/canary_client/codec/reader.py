"""
Binary Reader - BCS decoding primitives

Mirror of ``BinaryWriter``. Every read past the end of the buffer raises
``DecodeError``.
"""

import builtins
import struct
from typing import Callable, List, Optional, TypeVar

from ..runtime.address import ADDRESS_LENGTH, SuiAddress
from ..runtime.errors import DecodeError

T = TypeVar("T")


class BinaryReader:
    """Cursor over a BCS encoded buffer."""

    def __init__(self, buf: builtins.bytes):
        self._buf = builtins.bytes(buf)
        self._off = 0

    @property
    def eof(self) -> bool:
        return self._off >= len(self._buf)

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._off

    def _take(self, n: int, what: str) -> builtins.bytes:
        if self._off + n > len(self._buf):
            raise DecodeError(
                f"Buffer overflow: attempting to read {what} beyond end",
                details={"offset": self._off, "needed": n, "length": len(self._buf)},
            )
        out = self._buf[self._off : self._off + n]
        self._off += n
        return out

    def u8(self) -> int:
        return self._take(1, "u8")[0]

    def u16(self) -> int:
        return struct.unpack("<H", self._take(2, "u16"))[0]

    def u32(self) -> int:
        return struct.unpack("<I", self._take(4, "u32"))[0]

    def u64(self) -> int:
        return struct.unpack("<Q", self._take(8, "u64"))[0]

    def u128(self) -> int:
        return int.from_bytes(self._take(16, "u128"), "little")

    def u256(self) -> int:
        return int.from_bytes(self._take(32, "u256"), "little")

    def bool(self) -> builtins.bool:
        b = self.u8()
        if b > 1:
            raise DecodeError(f"Invalid bool byte: {b}")
        return b == 1

    def uvarint(self) -> int:
        """
        Read unsigned ULEB128.

        Returns:
            Decoded unsigned integer value
        """
        x = 0
        s = 0
        while True:
            b = self.u8()
            x |= (b & 0x7F) << s
            if b < 0x80:
                break
            s += 7
            if s > 28:
                raise DecodeError("ULEB128 value exceeds u32 range")
        return x

    def bytes(self, n: int) -> builtins.bytes:
        return self._take(n, f"{n} bytes")

    def len_prefixed_bytes(self) -> builtins.bytes:
        n = self.uvarint()
        return self.bytes(n)

    def string(self) -> str:
        raw = self.len_prefixed_bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError("String is not valid UTF-8", cause=exc) from exc

    def address(self) -> SuiAddress:
        return SuiAddress.from_bytes(self.bytes(ADDRESS_LENGTH))

    def vector(self, read_item: Callable[[], T]) -> List[T]:
        n = self.uvarint()
        return [read_item() for _ in range(n)]

    def option(self, read_item: Callable[[], T]) -> Optional[T]:
        tag = self.u8()
        if tag == 0:
            return None
        if tag == 1:
            return read_item()
        raise DecodeError(f"Invalid option tag: {tag}")

    def ensure_consumed(self) -> None:
        """Raise ``DecodeError`` if unread bytes remain."""
        if not self.eof:
            raise DecodeError(
                f"{self.remaining} trailing bytes after value",
                details={"trailing": self.remaining},
            )
