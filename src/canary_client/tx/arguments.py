"""
Pure argument encoders.

Each encoder validates its input and returns a ``PureArg`` carrying the BCS
bytes of the value. Strings are UTF-8 with a ULEB128 length prefix, integers
are fixed-width little-endian, addresses are exactly 32 bytes.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Sequence, Tuple

from ..codec.move_types import LayoutMap, decode_values
from ..codec.writer import BinaryWriter
from ..runtime.address import SuiAddress
from ..runtime.errors import BuildError
from .types import PureArg


def _encode(write: Callable[[BinaryWriter], None]) -> PureArg:
    w = BinaryWriter()
    write(w)
    return PureArg(w.to_bytes())


def pure_string(value: str) -> PureArg:
    if not isinstance(value, str):
        raise BuildError(f"Expected str, got {type(value).__name__}")
    return _encode(lambda w: w.string(value))


def pure_bytes(value: bytes) -> PureArg:
    """``vector<u8>``"""
    if not isinstance(value, (bytes, bytearray)):
        raise BuildError(f"Expected bytes, got {type(value).__name__}")
    return _encode(lambda w: w.len_prefixed_bytes(bytes(value)))


def pure_bool(value: bool) -> PureArg:
    return _encode(lambda w: w.bool(value))


def pure_u8(value: int) -> PureArg:
    return _encode(lambda w: w.u8(value))


def pure_u16(value: int) -> PureArg:
    return _encode(lambda w: w.u16(value))


def pure_u32(value: int) -> PureArg:
    return _encode(lambda w: w.u32(value))


def pure_u64(value: int) -> PureArg:
    return _encode(lambda w: w.u64(value))


def pure_u128(value: int) -> PureArg:
    return _encode(lambda w: w.u128(value))


def pure_u256(value: int) -> PureArg:
    return _encode(lambda w: w.u256(value))


def pure_address(value: Any) -> PureArg:
    """
    Encode an address.

    Raises:
        InvalidAddressError: If the value is not a valid address
    """
    address = SuiAddress(value)
    return _encode(lambda w: w.address(address))


def pure_vector(values: Iterable[Any], encode_item: Callable[[Any], PureArg]) -> PureArg:
    """
    Encode a ``vector<T>`` by concatenating element encodings.

    Args:
        values: Elements
        encode_item: One of the ``pure_*`` encoders, applied per element
    """
    items = [encode_item(v).value for v in values]

    def write(w: BinaryWriter) -> None:
        w.uvarint(len(items))
        for item in items:
            w.bytes(item)

    return _encode(write)


def pure_option(value: Optional[Any], encode_item: Callable[[Any], PureArg]) -> PureArg:
    """Encode ``Option<T>``; None is the empty option."""
    inner = None if value is None else encode_item(value).value
    return _encode(lambda w: w.option(inner, w.bytes))


def decode_return_values(buffers: Sequence[bytes], types: Sequence[str],
                         layouts: Optional[LayoutMap] = None) -> Tuple[Any, ...]:
    """
    Decode the return buffers of a call positionally.

    Args:
        buffers: One BCS buffer per return value
        types: Declared Move return types, in order
        layouts: Struct layouts for non-primitive return types

    Returns:
        Tuple of decoded values, same arity as ``types``

    Raises:
        DecodeError: On arity mismatch, short buffers or trailing bytes
    """
    return decode_values(types, buffers, layouts)
