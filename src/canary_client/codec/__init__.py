"""
Canary Binary Codec Module

BCS (Binary Canonical Serialization) primitives, Blake2b hashing and Move
type tags.

Key components:
- writer.py: BCS writer (fixed-width integers, ULEB128, vectors, options)
- reader.py: BCS reader, raising DecodeError on malformed input
- hashes.py: Blake2b-256, intent digests and transaction digests
- move_types.py: Move type tag parsing, encoding and typed value decoding
"""

from .hashes import (
    Intent,
    IntentScope,
    blake2b256,
    intent_digest,
    transaction_digest,
    transaction_signing_digest,
)
from .move_types import StructLayout, decode_value, decode_values, parse_type_tag
from .reader import BinaryReader
from .writer import BinaryWriter

__all__ = [
    "BinaryReader",
    "BinaryWriter",
    "Intent",
    "IntentScope",
    "StructLayout",
    "blake2b256",
    "decode_value",
    "decode_values",
    "intent_digest",
    "parse_type_tag",
    "transaction_digest",
    "transaction_signing_digest",
]
