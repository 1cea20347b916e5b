"""
Remote object resolution.

Turns an object id into a fresh reference, ownership metadata and type, and
from there into a correctly tagged transaction input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .api_client import SuiRpcClient
from .runtime.address import CLOCK_OBJECT_ID, SuiAddress
from .runtime.errors import (
    BuildError,
    DecodeError,
    ErrorCode,
    InvalidAddressError,
    MalformedTypeError,
    NotFoundError,
)
from .tx.types import ImmOrOwnedObject, ObjectArg, ObjectReference, SharedObject

logger = logging.getLogger(__name__)

CLOCK_INITIAL_SHARED_VERSION = 1


class Ownership(Enum):
    ADDRESS_OWNED = "address_owned"
    OBJECT_OWNED = "object_owned"
    SHARED = "shared"
    IMMUTABLE = "immutable"


def extract_package_id(type_str: str) -> SuiAddress:
    """
    Extract the package address from a fully qualified type string.

    ``0xabc::member_registry::Registry`` yields ``0xabc`` (zero padded).

    Args:
        type_str: Type string of an object

    Returns:
        Package id

    Raises:
        MalformedTypeError: If there is no ``::`` or the address is not hex
    """
    if not isinstance(type_str, str) or "::" not in type_str:
        raise MalformedTypeError(f"Type string has no '::' separator: {type_str!r}",
                                 details={"type": type_str})
    head = type_str.split("::", 1)[0]
    try:
        return SuiAddress(head)
    except InvalidAddressError as exc:
        raise MalformedTypeError(f"Invalid package address in type: {type_str!r}",
                                 details={"type": type_str}, cause=exc) from exc


def parse_owner(owner: Any) -> Tuple[Ownership, Optional[SuiAddress], Optional[int]]:
    """
    Classify RPC owner metadata.

    Returns:
        ``(ownership, owner_address, initial_shared_version)``

    Raises:
        DecodeError: If the owner shape is not recognised
    """
    if owner == "Immutable":
        return Ownership.IMMUTABLE, None, None
    if isinstance(owner, dict):
        if "AddressOwner" in owner:
            return Ownership.ADDRESS_OWNED, SuiAddress(owner["AddressOwner"]), None
        if "ObjectOwner" in owner:
            return Ownership.OBJECT_OWNED, SuiAddress(owner["ObjectOwner"]), None
        if "Shared" in owner:
            shared = owner["Shared"] or {}
            if "initial_shared_version" not in shared:
                raise DecodeError("Shared owner without initial_shared_version",
                                  details={"owner": owner})
            return Ownership.SHARED, None, int(shared["initial_shared_version"])
    raise DecodeError(f"Unrecognised object owner: {owner!r}", details={"owner": owner})


@dataclass(frozen=True)
class ResolvedObject:
    """Snapshot of an object as read from a fullnode."""

    reference: ObjectReference
    ownership: Ownership
    owner: Optional[SuiAddress] = None
    initial_shared_version: Optional[int] = None
    type: Optional[str] = None
    fields: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def object_id(self) -> SuiAddress:
        return self.reference.object_id

    @property
    def is_shared(self) -> bool:
        return self.ownership is Ownership.SHARED

    @property
    def package_id(self) -> SuiAddress:
        """
        Package that defines the object's type.

        Raises:
            MalformedTypeError: If the type is missing or malformed
        """
        if self.type is None:
            raise MalformedTypeError(f"Object {self.object_id} has no type information")
        return extract_package_id(self.type)

    def to_call_arg(self, mutable: bool = True) -> ObjectArg:
        """
        Build the transaction input for this object.

        Owned and immutable objects are passed by reference; shared objects by
        id and initial shared version with the requested mutability.

        Raises:
            BuildError: For objects owned by another object
        """
        if self.ownership is Ownership.SHARED:
            return SharedObject(self.object_id, self.initial_shared_version, mutable)
        if self.ownership is Ownership.OBJECT_OWNED:
            raise BuildError(f"Object {self.object_id} is owned by object {self.owner} "
                             f"and cannot be a transaction input")
        return ImmOrOwnedObject(self.reference)

    @classmethod
    def from_rpc(cls, data: Dict[str, Any]) -> "ResolvedObject":
        """
        Parse the ``data`` member of a ``sui_getObject`` response.

        Raises:
            DecodeError: If required fields are missing
        """
        reference = ObjectReference.from_rpc(data)
        if "owner" not in data:
            raise DecodeError(f"Object {reference.object_id} returned without owner metadata")
        ownership, owner, initial_shared_version = parse_owner(data["owner"])
        content = data.get("content") or {}
        return cls(
            reference=reference,
            ownership=ownership,
            owner=owner,
            initial_shared_version=initial_shared_version,
            type=data.get("type") or content.get("type"),
            fields=content.get("fields") or {},
        )


def clock_arg() -> SharedObject:
    """The system clock, shared at version 1 and always passed immutable."""
    return SharedObject(CLOCK_OBJECT_ID, CLOCK_INITIAL_SHARED_VERSION, False)


class ObjectResolver:
    """
    Reads objects from a fullnode.

    Every call fetches fresh state; nothing is cached, so a reference used in
    a transaction is never older than the call that produced it.
    """

    def __init__(self, rpc: SuiRpcClient):
        self.rpc = rpc

    async def resolve(self, object_id: Union[str, SuiAddress]) -> ResolvedObject:
        """
        Fetch an object.

        Args:
            object_id: Object id

        Returns:
            Resolved object

        Raises:
            NotFoundError: If the object does not exist or was deleted
            DecodeError: If the response is malformed
        """
        object_id = SuiAddress(object_id)
        response = await self.rpc.get_object(object_id)
        if not isinstance(response, dict):
            raise DecodeError(f"Unexpected sui_getObject response for {object_id}")

        error = response.get("error")
        if error:
            code = error.get("code") if isinstance(error, dict) else str(error)
            if code == "deleted":
                raise NotFoundError(f"Object {object_id} has been deleted",
                                    code=ErrorCode.OBJECT_DELETED,
                                    details={"object_id": str(object_id), "error": error})
            raise NotFoundError(f"Object {object_id} not found",
                                details={"object_id": str(object_id), "error": error})

        data = response.get("data")
        if not data:
            raise NotFoundError(f"Object {object_id} not found",
                                details={"object_id": str(object_id)})

        resolved = ResolvedObject.from_rpc(data)
        logger.debug(f"Resolved {object_id} at version {resolved.reference.version} "
                     f"({resolved.ownership.value})")
        return resolved

    async def reference(self, object_id: Union[str, SuiAddress]) -> ObjectReference:
        return (await self.resolve(object_id)).reference

    async def initial_shared_version(self, object_id: Union[str, SuiAddress]) -> int:
        """
        Version at which an object became shared.

        Raises:
            BuildError: If the object is not shared
        """
        resolved = await self.resolve(object_id)
        if not resolved.is_shared:
            raise BuildError(f"Object {resolved.object_id} is not shared",
                             details={"ownership": resolved.ownership.value})
        return resolved.initial_shared_version

    async def call_arg(self, object_id: Union[str, SuiAddress], mutable: bool = True) -> ObjectArg:
        """Resolve an object and build its transaction input."""
        object_id = SuiAddress(object_id)
        if object_id == CLOCK_OBJECT_ID:
            return clock_arg()
        return (await self.resolve(object_id)).to_call_arg(mutable)

    async def package_of(self, object_id: Union[str, SuiAddress]) -> SuiAddress:
        """
        Package id of the module that defines an object's type.

        Raises:
            MalformedTypeError: If the object's type string is malformed
        """
        return (await self.resolve(object_id)).package_id
