"""
Transaction codec for Sui programmable transactions.

BCS encoding of ``TransactionData::V1`` and its parts. Variant indices follow
the on-chain enum declarations and must never be reordered.
"""

from __future__ import annotations

from ..codec.move_types import encode_type_tag, parse_type_tag
from ..codec.writer import BinaryWriter
from ..runtime.errors import BuildError
from .types import (
    Argument, CallArg, Command, GasCoin, GasData, ImmOrOwnedObject, Input, MakeMoveVec,
    MergeCoins, MoveCall, NestedResult, ObjectReference, ProgrammableTransaction, PureArg,
    ReceivingObject, Result, SharedObject, SplitCoins, TransactionPayload, TransferObjects,
)

# TransactionData
TRANSACTION_DATA_V1 = 0
# TransactionKind
KIND_PROGRAMMABLE = 0
# CallArg
CALL_ARG_PURE = 0
CALL_ARG_OBJECT = 1
# ObjectArg
OBJECT_IMM_OR_OWNED = 0
OBJECT_SHARED = 1
OBJECT_RECEIVING = 2
# Argument
ARG_GAS_COIN = 0
ARG_INPUT = 1
ARG_RESULT = 2
ARG_NESTED_RESULT = 3
# Command
CMD_MOVE_CALL = 0
CMD_TRANSFER_OBJECTS = 1
CMD_SPLIT_COINS = 2
CMD_MERGE_COINS = 3
CMD_MAKE_MOVE_VEC = 5
# TransactionExpiration
EXPIRATION_NONE = 0
EXPIRATION_EPOCH = 1


class TransactionCodec:
    """
    BCS encoder for transaction data.

    Each ``write_*`` method appends one value to a writer; the ``encode_*``
    methods return complete byte strings.
    """

    @staticmethod
    def write_object_ref(w: BinaryWriter, ref: ObjectReference) -> None:
        w.address(ref.object_id)
        w.u64(ref.version)
        w.len_prefixed_bytes(ref.digest_bytes)

    @staticmethod
    def write_call_arg(w: BinaryWriter, arg: CallArg) -> None:
        if isinstance(arg, PureArg):
            w.variant(CALL_ARG_PURE)
            w.len_prefixed_bytes(arg.value)
            return
        w.variant(CALL_ARG_OBJECT)
        if isinstance(arg, ImmOrOwnedObject):
            w.variant(OBJECT_IMM_OR_OWNED)
            TransactionCodec.write_object_ref(w, arg.reference)
        elif isinstance(arg, SharedObject):
            w.variant(OBJECT_SHARED)
            w.address(arg.object_id)
            w.u64(arg.initial_shared_version)
            w.bool(arg.mutable)
        elif isinstance(arg, ReceivingObject):
            w.variant(OBJECT_RECEIVING)
            TransactionCodec.write_object_ref(w, arg.reference)
        else:
            raise BuildError(f"Unsupported call argument: {arg!r}")

    @staticmethod
    def write_argument(w: BinaryWriter, arg: Argument) -> None:
        if isinstance(arg, GasCoin):
            w.variant(ARG_GAS_COIN)
        elif isinstance(arg, Input):
            w.variant(ARG_INPUT)
            w.u16(arg.index)
        elif isinstance(arg, Result):
            w.variant(ARG_RESULT)
            w.u16(arg.index)
        elif isinstance(arg, NestedResult):
            w.variant(ARG_NESTED_RESULT)
            w.u16(arg.index)
            w.u16(arg.result_index)
        else:
            raise BuildError(f"Unsupported command argument: {arg!r}")

    @staticmethod
    def write_arguments(w: BinaryWriter, args) -> None:
        w.vector(args, lambda a: TransactionCodec.write_argument(w, a))

    @staticmethod
    def write_command(w: BinaryWriter, cmd: Command) -> None:
        if isinstance(cmd, MoveCall):
            w.variant(CMD_MOVE_CALL)
            w.address(cmd.package)
            w.string(cmd.module)
            w.string(cmd.function)
            w.vector(cmd.type_arguments, lambda t: encode_type_tag(w, parse_type_tag(t)))
            TransactionCodec.write_arguments(w, cmd.arguments)
        elif isinstance(cmd, TransferObjects):
            w.variant(CMD_TRANSFER_OBJECTS)
            TransactionCodec.write_arguments(w, cmd.objects)
            TransactionCodec.write_argument(w, cmd.address)
        elif isinstance(cmd, SplitCoins):
            w.variant(CMD_SPLIT_COINS)
            TransactionCodec.write_argument(w, cmd.coin)
            TransactionCodec.write_arguments(w, cmd.amounts)
        elif isinstance(cmd, MergeCoins):
            w.variant(CMD_MERGE_COINS)
            TransactionCodec.write_argument(w, cmd.destination)
            TransactionCodec.write_arguments(w, cmd.sources)
        elif isinstance(cmd, MakeMoveVec):
            w.variant(CMD_MAKE_MOVE_VEC)
            w.option(cmd.type_tag, lambda t: encode_type_tag(w, parse_type_tag(t)))
            TransactionCodec.write_arguments(w, cmd.elements)
        else:
            raise BuildError(f"Unsupported command: {cmd!r}")

    @staticmethod
    def write_transaction_kind(w: BinaryWriter, kind: ProgrammableTransaction) -> None:
        w.variant(KIND_PROGRAMMABLE)
        w.vector(kind.inputs, lambda a: TransactionCodec.write_call_arg(w, a))
        w.vector(kind.commands, lambda c: TransactionCodec.write_command(w, c))

    @staticmethod
    def write_gas_data(w: BinaryWriter, gas: GasData) -> None:
        w.vector(gas.payment, lambda r: TransactionCodec.write_object_ref(w, r))
        w.address(gas.owner)
        w.u64(gas.price)
        w.u64(gas.budget)

    @staticmethod
    def encode_transaction_kind(kind: ProgrammableTransaction) -> bytes:
        w = BinaryWriter()
        TransactionCodec.write_transaction_kind(w, kind)
        return w.to_bytes()

    @staticmethod
    def encode_transaction_data(payload: TransactionPayload) -> bytes:
        """
        Encode a payload as ``TransactionData::V1``.

        Args:
            payload: Finalized payload

        Returns:
            BCS bytes, the exact bytes that are signed and submitted
        """
        w = BinaryWriter()
        w.variant(TRANSACTION_DATA_V1)
        TransactionCodec.write_transaction_kind(w, payload.kind)
        w.address(payload.sender)
        TransactionCodec.write_gas_data(w, payload.gas_data)
        if payload.expiration is None:
            w.variant(EXPIRATION_NONE)
        else:
            w.variant(EXPIRATION_EPOCH)
            w.u64(payload.expiration)
        return w.to_bytes()
