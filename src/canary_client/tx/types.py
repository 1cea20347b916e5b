"""
Programmable transaction data model.

Value types for the pieces of a Sui ``TransactionData``: object references,
call arguments (pure values and object arguments), command arguments,
commands, gas data and the finalized payload. All of them are immutable.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from ..runtime.address import SuiAddress
from ..runtime.errors import DecodeError
from ..codec.hashes import decode_digest, transaction_digest


@dataclass(frozen=True)
class ObjectReference:
    """``(object_id, version, digest)`` as observed at resolution time."""

    object_id: SuiAddress
    version: int
    digest: str

    @property
    def digest_bytes(self) -> bytes:
        return decode_digest(self.digest)

    @classmethod
    def from_rpc(cls, data: Dict[str, Any]) -> "ObjectReference":
        """
        Build a reference from an RPC object or coin entry.

        Accepts both ``objectId`` (object data) and ``coinObjectId`` (coin
        pages).

        Raises:
            DecodeError: If a required field is missing
        """
        object_id = data.get("objectId") or data.get("coinObjectId")
        if object_id is None or "version" not in data or "digest" not in data:
            raise DecodeError("Object reference requires objectId, version and digest",
                              details={"data": data})
        return cls(SuiAddress(object_id), int(data["version"]), data["digest"])

    def to_dict(self) -> Dict[str, Any]:
        return {"objectId": str(self.object_id), "version": str(self.version),
                "digest": self.digest}


class ObjectArgKind(Enum):
    """How an object is handed to a call."""

    OWNED = "owned"
    SHARED_MUTABLE = "shared_mutable"
    SHARED_IMMUTABLE = "shared_immutable"
    RECEIVING = "receiving"


@dataclass(frozen=True)
class PureArg:
    """BCS encoded plain value input."""

    value: bytes


@dataclass(frozen=True)
class ImmOrOwnedObject:
    reference: ObjectReference

    @property
    def object_id(self) -> SuiAddress:
        return self.reference.object_id

    @property
    def kind(self) -> ObjectArgKind:
        return ObjectArgKind.OWNED


@dataclass(frozen=True)
class SharedObject:
    object_id: SuiAddress
    initial_shared_version: int
    mutable: bool

    @property
    def kind(self) -> ObjectArgKind:
        return ObjectArgKind.SHARED_MUTABLE if self.mutable else ObjectArgKind.SHARED_IMMUTABLE


@dataclass(frozen=True)
class ReceivingObject:
    reference: ObjectReference

    @property
    def object_id(self) -> SuiAddress:
        return self.reference.object_id

    @property
    def kind(self) -> ObjectArgKind:
        return ObjectArgKind.RECEIVING


ObjectArg = Union[ImmOrOwnedObject, SharedObject, ReceivingObject]
CallArg = Union[PureArg, ImmOrOwnedObject, SharedObject, ReceivingObject]

OBJECT_ARG_TYPES = (ImmOrOwnedObject, SharedObject, ReceivingObject)


@dataclass(frozen=True)
class GasCoin:
    """The gas payment coin of the transaction."""


@dataclass(frozen=True)
class Input:
    index: int


@dataclass(frozen=True)
class Result:
    index: int


@dataclass(frozen=True)
class NestedResult:
    index: int
    result_index: int


Argument = Union[GasCoin, Input, Result, NestedResult]
ARGUMENT_TYPES = (GasCoin, Input, Result, NestedResult)


@dataclass(frozen=True)
class MoveCall:
    package: SuiAddress
    module: str
    function: str
    type_arguments: Tuple[str, ...] = ()
    arguments: Tuple[Argument, ...] = ()

    @property
    def target(self) -> str:
        return f"{self.package}::{self.module}::{self.function}"


@dataclass(frozen=True)
class TransferObjects:
    objects: Tuple[Argument, ...]
    address: Argument


@dataclass(frozen=True)
class SplitCoins:
    coin: Argument
    amounts: Tuple[Argument, ...]


@dataclass(frozen=True)
class MergeCoins:
    destination: Argument
    sources: Tuple[Argument, ...]


@dataclass(frozen=True)
class MakeMoveVec:
    type_tag: Optional[str]
    elements: Tuple[Argument, ...]


Command = Union[MoveCall, TransferObjects, SplitCoins, MergeCoins, MakeMoveVec]


@dataclass(frozen=True)
class ProgrammableTransaction:
    inputs: Tuple[CallArg, ...] = ()
    commands: Tuple[Command, ...] = ()


@dataclass(frozen=True)
class GasData:
    payment: Tuple[ObjectReference, ...]
    owner: SuiAddress
    price: int
    budget: int


@dataclass(frozen=True)
class TransactionPayload:
    """
    Finalized transaction data, ready to sign or simulate.

    Immutable: once produced by the assembler it never changes, so the
    bytes that are signed are the bytes that are submitted.
    """

    sender: SuiAddress
    kind: ProgrammableTransaction
    gas_data: GasData
    expiration: Optional[int] = None
    _bcs: bytes = field(default=b"", init=False, repr=False, compare=False)

    def to_bcs(self) -> bytes:
        """BCS bytes of ``TransactionData::V1``."""
        if not self._bcs:
            from .codec import TransactionCodec
            object.__setattr__(self, "_bcs", TransactionCodec.encode_transaction_data(self))
        return self._bcs

    def to_base64(self) -> str:
        return base64.b64encode(self.to_bcs()).decode("ascii")

    def kind_bytes(self) -> bytes:
        """BCS bytes of the ``TransactionKind`` alone (used for simulation)."""
        from .codec import TransactionCodec
        return TransactionCodec.encode_transaction_kind(self.kind)

    def digest(self) -> str:
        """Base58 digest the network will assign to this transaction."""
        return transaction_digest(self.to_bcs())

    @property
    def gas_budget(self) -> int:
        return self.gas_data.budget

    @property
    def gas_price(self) -> int:
        return self.gas_data.price
