"""
Programmable transactions: data model, wire encoding, argument encoders, gas
estimation, signing and submission.

The assembler lives in ``canary_client.tx.builder``; it depends on the object
resolver, which itself depends on the types defined here.
"""

from .arguments import (
    decode_return_values,
    pure_address,
    pure_bool,
    pure_bytes,
    pure_option,
    pure_string,
    pure_u8,
    pure_u16,
    pure_u32,
    pure_u64,
    pure_u128,
    pure_u256,
    pure_vector,
)
from .codec import TransactionCodec
from .execute import (
    SignedTransaction,
    TransactionResponse,
    reconcile,
    sign_and_submit,
    sign_transaction,
    submit_transaction,
)
from .fees import PLACEHOLDER_GAS_BUDGET, GasCostSummary, budget_from_estimate, estimate_budget
from .signatures import FunctionSignature, Param, ParamKind
from .types import (
    GasCoin,
    GasData,
    ImmOrOwnedObject,
    Input,
    MakeMoveVec,
    MergeCoins,
    MoveCall,
    NestedResult,
    ObjectArgKind,
    ObjectReference,
    ProgrammableTransaction,
    PureArg,
    ReceivingObject,
    Result,
    SharedObject,
    SplitCoins,
    TransactionPayload,
    TransferObjects,
)

__all__ = [
    "FunctionSignature",
    "GasCoin",
    "GasCostSummary",
    "GasData",
    "ImmOrOwnedObject",
    "Input",
    "MakeMoveVec",
    "MergeCoins",
    "MoveCall",
    "NestedResult",
    "ObjectArgKind",
    "ObjectReference",
    "PLACEHOLDER_GAS_BUDGET",
    "Param",
    "ParamKind",
    "ProgrammableTransaction",
    "PureArg",
    "ReceivingObject",
    "Result",
    "SharedObject",
    "SignedTransaction",
    "SplitCoins",
    "TransactionCodec",
    "TransactionPayload",
    "TransactionResponse",
    "TransferObjects",
    "budget_from_estimate",
    "decode_return_values",
    "estimate_budget",
    "pure_address",
    "pure_bool",
    "pure_bytes",
    "pure_option",
    "pure_string",
    "pure_u8",
    "pure_u16",
    "pure_u32",
    "pure_u64",
    "pure_u128",
    "pure_u256",
    "pure_vector",
    "reconcile",
    "sign_and_submit",
    "sign_transaction",
    "submit_transaction",
]
