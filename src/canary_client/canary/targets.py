"""
Known entry and view functions of the Canary Move package.

Every call the client makes into the package goes through ``CallTarget``, so
a misspelled module or function name is caught before anything is built.
Return types use ``{package}`` where the package's own address belongs.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from ..codec.move_types import StructLayout
from ..tx.signatures import FunctionSignature, Param, ParamKind

MEMBER_REGISTRY = "member_registry"
PKG_STORAGE = "pkg_storage"

STRING = "0x1::string::String"
REGISTRY = "{package}::member_registry::Registry"
ADMIN_CAP = "{package}::member_registry::AdminCap"
CANARY_BLOB = "{package}::pkg_storage::CanaryBlob"
CLOCK = "0x2::clock::Clock"
SUI_COIN = "0x2::coin::Coin<0x2::sui::SUI>"


def _pure(name: str, type_: str) -> Param:
    return Param(name, ParamKind.PURE, type_)


def _ref(name: str, type_: str) -> Param:
    return Param(name, ParamKind.OBJECT_REF, type_)


def _mut(name: str, type_: str) -> Param:
    return Param(name, ParamKind.OBJECT_MUT, type_)


def _owned(name: str, type_: str) -> Param:
    return Param(name, ParamKind.BY_VALUE, type_)


class CallTarget(Enum):
    # member_registry entry functions
    JOIN_REGISTRY = FunctionSignature(MEMBER_REGISTRY, "join_registry", (
        _mut("registry", REGISTRY),
        _owned("payment", SUI_COIN),
        _pure("domain", STRING),
        _ref("clock", CLOCK),
    ))
    WITHDRAW = FunctionSignature(MEMBER_REGISTRY, "withdraw", (
        _mut("registry", REGISTRY),
        _ref("admin_cap", ADMIN_CAP),
        _pure("amount", "u64"),
    ))
    UPDATE_FEE = FunctionSignature(MEMBER_REGISTRY, "update_fee", (
        _mut("registry", REGISTRY),
        _ref("admin_cap", ADMIN_CAP),
        _pure("new_fee", "u64"),
    ))
    REMOVE_MEMBER = FunctionSignature(MEMBER_REGISTRY, "remove_member", (
        _mut("registry", REGISTRY),
        _ref("admin_cap", ADMIN_CAP),
        _pure("member", "address"),
    ))

    # member_registry views
    IS_MEMBER = FunctionSignature(MEMBER_REGISTRY, "is_member", (
        _ref("registry", REGISTRY),
        _pure("member", "address"),
    ), ("bool",))
    GET_MEMBER_INFO = FunctionSignature(MEMBER_REGISTRY, "get_member_info", (
        _ref("registry", REGISTRY),
        _pure("member", "address"),
    ), (STRING, "u64"))
    GET_ALL_MEMBERS = FunctionSignature(MEMBER_REGISTRY, "get_all_members", (
        _ref("registry", REGISTRY),
    ), ("vector<{package}::member_registry::MemberInfoWithAddress>",))
    GET_ADMIN = FunctionSignature(MEMBER_REGISTRY, "get_admin", (
        _ref("registry", REGISTRY),
    ), ("address",))

    # pkg_storage entry functions
    STORE_BLOB = FunctionSignature(PKG_STORAGE, "store_blob", (
        _mut("registry", REGISTRY),
        _ref("admin_cap", ADMIN_CAP),
        _pure("domain", STRING),
        _pure("contract_blob_id", "address"),
        _pure("explain_blob_id", "address"),
        _pure("package_id", "address"),
        _ref("clock", CLOCK),
    ))
    UPDATE_BLOB = FunctionSignature(PKG_STORAGE, "update_blob", (
        _ref("registry", REGISTRY),
        _ref("admin_cap", ADMIN_CAP),
        _mut("canary_blob", CANARY_BLOB),
        _pure("new_contract_blob_id", "address"),
        _pure("new_explain_blob_id", "address"),
        _ref("clock", CLOCK),
    ))
    DELETE_CANARY_BLOB = FunctionSignature(PKG_STORAGE, "delete_canary_blob", (
        _ref("registry", REGISTRY),
        _ref("admin_cap", ADMIN_CAP),
        _owned("canary_blob", CANARY_BLOB),
    ))

    # pkg_storage views
    DERIVE_CANARY_ADDRESS = FunctionSignature(PKG_STORAGE, "derive_canary_address", (
        _ref("registry", REGISTRY),
        _pure("domain", STRING),
        _pure("package_id", "address"),
    ), ("address",))
    CANARY_EXISTS = FunctionSignature(PKG_STORAGE, "canary_exists", (
        _ref("registry", REGISTRY),
        _pure("domain", STRING),
        _pure("package_id", "address"),
    ), ("bool",))
    GET_BLOB_IDS = FunctionSignature(PKG_STORAGE, "get_blob_id", (
        _ref("canary_blob", CANARY_BLOB),
    ), ("address", "address"))
    GET_FULL_INFO = FunctionSignature(PKG_STORAGE, "get_full_info", (
        _ref("canary_blob", CANARY_BLOB),
    ), ("address", "address", "address", STRING, "u64", "address"))

    @property
    def module(self) -> str:
        return self.value.module

    @property
    def function(self) -> str:
        return self.value.function


MEMBER_INFO_WITH_ADDRESS = StructLayout("member_registry::MemberInfoWithAddress", (
    ("member", "address"),
    ("domain", STRING),
    ("joined_at", "u64"),
))

LAYOUTS = {MEMBER_INFO_WITH_ADDRESS.name: MEMBER_INFO_WITH_ADDRESS}

ABORT_CODES: Dict[str, Dict[int, str]] = {
    MEMBER_REGISTRY: {
        0: "E_INSUFFICIENT_PAYMENT",
        1: "E_ALREADY_MEMBER",
        2: "E_NOT_ADMIN",
        3: "E_NOT_MEMBER",
        4: "E_INVALID_CAP",
    },
    PKG_STORAGE: {
        1: "E_DERIVED_OBJECT_ALREADY_EXISTS",
    },
}

ABORT_MESSAGES: Dict[str, str] = {
    "E_INSUFFICIENT_PAYMENT": "payment is below the registry fee",
    "E_ALREADY_MEMBER": "address is already a member",
    "E_NOT_ADMIN": "caller is not the registry admin",
    "E_NOT_MEMBER": "address is not a member",
    "E_INVALID_CAP": "admin capability does not belong to this registry",
    "E_DERIVED_OBJECT_ALREADY_EXISTS": "a canary blob already exists for this domain and package",
}


def describe_abort(module: str, code: int) -> Optional[str]:
    """
    Readable name of a Canary abort code.

    Returns:
        ``"E_NOT_ADMIN: caller is not the registry admin"`` style text, or None
        for codes outside the Canary modules
    """
    name = ABORT_CODES.get(module, {}).get(code)
    if name is None:
        return None
    return f"{name}: {ABORT_MESSAGES[name]}"


def target_for(module: str, function: str) -> CallTarget:
    """
    Look up a target by module and function name.

    Raises:
        KeyError: If the package declares no such function
    """
    for target in CallTarget:
        if target.module == module and target.function == function:
            return target
    raise KeyError(f"{module}::{function}")

