"""
Move type tags

Parses Move type strings such as ``0x2::coin::Coin<0x2::sui::SUI>`` into type
tags, encodes them for ``MoveCall.type_arguments`` and decodes BCS values of
a known type (used for view call return values).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..runtime.address import SuiAddress
from ..runtime.errors import DecodeError, InvalidAddressError, MalformedTypeError
from .reader import BinaryReader
from .writer import BinaryWriter

IDENTIFIER_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")

# BCS variant index of each primitive TypeTag
PRIMITIVE_TAGS: Dict[str, int] = {
    "bool": 0,
    "u8": 1,
    "u64": 2,
    "u128": 3,
    "address": 4,
    "signer": 5,
    "u16": 8,
    "u32": 9,
    "u256": 10,
}
_VECTOR_TAG = 6
_STRUCT_TAG = 7


def is_valid_identifier(name: str) -> bool:
    return isinstance(name, str) and bool(IDENTIFIER_RE.match(name))


@dataclass(frozen=True)
class PrimitiveType:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class VectorType:
    element: "TypeTag"

    def __str__(self) -> str:
        return f"vector<{self.element}>"


@dataclass(frozen=True)
class StructType:
    address: SuiAddress
    module: str
    name: str
    type_params: Tuple["TypeTag", ...] = ()

    @property
    def qualified_name(self) -> str:
        """``module::Name`` without the address, used for layout lookup."""
        return f"{self.module}::{self.name}"

    def is_(self, address: str, module: str, name: str) -> bool:
        return self.address == address and self.module == module and self.name == name

    def __str__(self) -> str:
        base = f"{self.address.short()}::{self.module}::{self.name}"
        if self.type_params:
            base += "<" + ", ".join(str(p) for p in self.type_params) + ">"
        return base


TypeTag = Union[PrimitiveType, VectorType, StructType]

_TOKEN_RE = re.compile(r"\s*(::|<|>|,|[A-Za-z0-9_]+)")


def _tokenize(text: str) -> List[str]:
    tokens = []
    pos = 0
    text = text.strip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise MalformedTypeError(f"Unexpected character in type {text!r} at {pos}",
                                     details={"type": text})
        tokens.append(match.group(1))
        pos = match.end()
    return tokens


class _TypeParser:
    def __init__(self, text: str):
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0

    def _error(self, message: str) -> MalformedTypeError:
        return MalformedTypeError(f"{message} in type {self.text!r}", details={"type": self.text})

    def _next(self) -> str:
        if self.pos >= len(self.tokens):
            raise self._error("Unexpected end")
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def _peek(self) -> Optional[str]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _expect(self, token: str) -> None:
        got = self._next()
        if got != token:
            raise self._error(f"Expected {token!r}, got {got!r}")

    def parse(self) -> TypeTag:
        tag = self._parse_tag()
        if self._peek() is not None:
            raise self._error(f"Trailing token {self._peek()!r}")
        return tag

    def _parse_tag(self) -> TypeTag:
        head = self._next()
        if head in PRIMITIVE_TAGS:
            return PrimitiveType(head)
        if head == "vector":
            self._expect("<")
            element = self._parse_tag()
            self._expect(">")
            return VectorType(element)
        try:
            address = SuiAddress(head)
        except InvalidAddressError as exc:
            raise self._error(f"Invalid address segment {head!r}") from exc
        self._expect("::")
        module = self._next()
        self._expect("::")
        name = self._next()
        if not is_valid_identifier(module) or not is_valid_identifier(name):
            raise self._error("Invalid identifier")
        params: List[TypeTag] = []
        if self._peek() == "<":
            self._next()
            params.append(self._parse_tag())
            while self._peek() == ",":
                self._next()
                params.append(self._parse_tag())
            self._expect(">")
        return StructType(address, module, name, tuple(params))


def parse_type_tag(text: Union[str, TypeTag]) -> TypeTag:
    """
    Parse a Move type string.

    Args:
        text: Type string, e.g. ``u64`` or ``0x1::string::String``

    Returns:
        Parsed type tag

    Raises:
        MalformedTypeError: If the string is not a valid Move type
    """
    if isinstance(text, (PrimitiveType, VectorType, StructType)):
        return text
    if not isinstance(text, str) or not text.strip():
        raise MalformedTypeError(f"Empty type string: {text!r}")
    return _TypeParser(text).parse()


def encode_type_tag(writer: BinaryWriter, tag: TypeTag) -> None:
    if isinstance(tag, PrimitiveType):
        writer.variant(PRIMITIVE_TAGS[tag.name])
    elif isinstance(tag, VectorType):
        writer.variant(_VECTOR_TAG)
        encode_type_tag(writer, tag.element)
    else:
        writer.variant(_STRUCT_TAG)
        writer.address(tag.address)
        writer.string(tag.module)
        writer.string(tag.name)
        writer.vector(tag.type_params, lambda p: encode_type_tag(writer, p))


@dataclass(frozen=True)
class StructLayout:
    """Field order and types of a Move struct returned by a view function."""

    name: str
    fields: Tuple[Tuple[str, str], ...]


LayoutMap = Mapping[str, StructLayout]


def _decode(tag: TypeTag, reader: BinaryReader, layouts: LayoutMap) -> Any:
    if isinstance(tag, PrimitiveType):
        if tag.name == "bool":
            return reader.bool()
        if tag.name in ("address", "signer"):
            return reader.address()
        return getattr(reader, tag.name)()

    if isinstance(tag, VectorType):
        if tag.element == PrimitiveType("u8"):
            return reader.len_prefixed_bytes()
        return reader.vector(lambda: _decode(tag.element, reader, layouts))

    if tag.is_("0x1", "string", "String") or tag.is_("0x1", "ascii", "String"):
        return reader.string()
    if tag.is_("0x2", "object", "ID") or tag.is_("0x2", "object", "UID"):
        return reader.address()
    if tag.is_("0x1", "option", "Option"):
        if len(tag.type_params) != 1:
            raise DecodeError(f"Option requires one type parameter: {tag}")
        return reader.option(lambda: _decode(tag.type_params[0], reader, layouts))

    layout = layouts.get(tag.qualified_name)
    if layout is None:
        raise DecodeError(f"No layout known for struct {tag}", details={"type": str(tag)})
    return {
        field: _decode(parse_type_tag(field_type), reader, layouts)
        for field, field_type in layout.fields
    }


def decode_value(type_str: Union[str, TypeTag], data: bytes,
                 layouts: Optional[LayoutMap] = None) -> Any:
    """
    Decode one BCS value of a known Move type.

    The whole buffer must be consumed.

    Args:
        type_str: Move type of the value
        data: BCS bytes
        layouts: Struct layouts keyed by ``module::Name``

    Returns:
        Decoded Python value

    Raises:
        DecodeError: If the bytes do not match the type
    """
    tag = parse_type_tag(type_str)
    reader = BinaryReader(data)
    value = _decode(tag, reader, layouts or {})
    reader.ensure_consumed()
    return value


def decode_values(types: Sequence[Union[str, TypeTag]], buffers: Sequence[bytes],
                  layouts: Optional[LayoutMap] = None) -> Tuple[Any, ...]:
    """
    Decode a positional tuple of return values with a fixed arity.

    Raises:
        DecodeError: If the number of buffers differs from the number of types
    """
    if len(buffers) != len(types):
        raise DecodeError(
            f"Expected {len(types)} return values, got {len(buffers)}",
            details={"expected": len(types), "actual": len(buffers)},
        )
    return tuple(decode_value(t, b, layouts) for t, b in zip(types, buffers))
