"""
Transaction assembler for programmable transactions.

Operations are queued with their inputs; ``finalize`` resolves gas and turns
the queue into an immutable ``TransactionPayload``. The same routine serves
real submissions and read-only simulations (``AssemblyMode``).

Usage:
    assembler = TransactionAssembler(rpc, sender=signer.address)
    assembler.transfer_sui(recipient, 1_000_000)
    payload = await assembler.finalize()
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from ..api_client import SUI_COIN_TYPE, SuiRpcClient
from ..codec.move_types import is_valid_identifier, parse_type_tag
from ..objects import ObjectResolver, Ownership
from ..runtime.address import SuiAddress
from ..runtime.errors import (
    BuildError,
    ErrorCode,
    InsufficientFundsError,
    MalformedTypeError,
)
from .arguments import pure_address, pure_u64
from .execute import AbortDescriber, raise_for_effects
from .fees import PLACEHOLDER_GAS_BUDGET, GasCostSummary, estimate_budget
from .signatures import FunctionSignature
from .types import (
    ARGUMENT_TYPES,
    OBJECT_ARG_TYPES,
    Argument,
    CallArg,
    Command,
    GasCoin,
    GasData,
    ImmOrOwnedObject,
    Input,
    MakeMoveVec,
    MergeCoins,
    MoveCall,
    NestedResult,
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

logger = logging.getLogger(__name__)

# Sender used for simulations when none is given
SIMULATION_SENDER = SuiAddress("0x1")

MAX_INPUTS = 2048
MAX_COMMANDS = 1024

# Anything accepted where a command argument is expected
CommandArg = Union[CallArg, Argument]


def _check_type(type_str: str) -> None:
    try:
        parse_type_tag(type_str)
    except MalformedTypeError as exc:
        raise BuildError(f"Invalid type argument {type_str!r}", cause=exc) from exc


class AssemblyMode(Enum):
    SUBMIT = "submit"
    SIMULATE = "simulate"


class TransactionAssembler:
    """
    Mutable builder for one programmable transaction at a time.

    Adding an operation validates it immediately. ``finalize`` consumes the
    queued operations; finalizing again before adding new ones raises
    ``BuildError``.
    """

    def __init__(self, rpc: SuiRpcClient, sender: Optional[Union[str, SuiAddress]] = None,
                 resolver: Optional[ObjectResolver] = None,
                 describe_abort: Optional[AbortDescriber] = None):
        """
        Initialize the assembler.

        Args:
            rpc: RPC client used during finalization
            sender: Transaction sender; required for ``AssemblyMode.SUBMIT``
            resolver: Object resolver, created from ``rpc`` when omitted
            describe_abort: Names Move abort codes seen during budget dry runs
        """
        self.rpc = rpc
        self.sender = SuiAddress(sender) if sender is not None else None
        self.resolver = resolver or ObjectResolver(rpc)
        self.describe_abort = describe_abort
        self._inputs: List[CallArg] = []
        self._commands: List[Command] = []
        self._pure_index: Dict[bytes, int] = {}
        self._object_index: Dict[SuiAddress, int] = {}
        self._spent = False
        self._gas_budget: Optional[int] = None
        self._gas_price: Optional[int] = None
        self._gas_object: Optional[SuiAddress] = None
        self._expiration: Optional[int] = None

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    @property
    def inputs(self) -> List[CallArg]:
        return list(self._inputs)

    @property
    def commands(self) -> List[Command]:
        """Queued operations, in order."""
        return list(self._commands)

    def _touch(self) -> None:
        self._spent = False

    def input(self, arg: CallArg) -> Input:
        """
        Register a transaction input, sharing an existing slot when possible.

        Identical pure values share one input. The same object referenced
        twice shares one input; if either use is mutable the shared input is
        mutable.

        Raises:
            BuildError: On conflicting references to the same object
        """
        if isinstance(arg, PureArg):
            index = self._pure_index.get(arg.value)
            if index is None:
                index = self._append_input(arg)
                self._pure_index[arg.value] = index
            return Input(index)

        if not isinstance(arg, OBJECT_ARG_TYPES):
            raise BuildError(f"Not a transaction input: {arg!r}")

        index = self._object_index.get(arg.object_id)
        if index is None:
            index = self._append_input(arg)
            self._object_index[arg.object_id] = index
            return Input(index)

        existing = self._inputs[index]
        if isinstance(existing, SharedObject) and isinstance(arg, SharedObject):
            if existing.initial_shared_version != arg.initial_shared_version:
                raise BuildError(f"Conflicting initial shared versions for {arg.object_id}")
            if arg.mutable and not existing.mutable:
                self._inputs[index] = arg
        elif existing != arg:
            raise BuildError(f"Conflicting references to object {arg.object_id}",
                             details={"existing": repr(existing), "new": repr(arg)})
        return Input(index)

    def _append_input(self, arg: CallArg) -> int:
        if len(self._inputs) >= MAX_INPUTS:
            raise BuildError(f"Too many inputs (max {MAX_INPUTS})")
        self._touch()
        self._inputs.append(arg)
        return len(self._inputs) - 1

    def _argument(self, value: CommandArg) -> Argument:
        if isinstance(value, ARGUMENT_TYPES):
            self._check_argument(value)
            return value
        if isinstance(value, (PureArg,) + OBJECT_ARG_TYPES):
            return self.input(value)
        raise BuildError(f"Unsupported argument {value!r}; encode values with the pure_* helpers")

    def _check_argument(self, arg: Argument) -> None:
        if isinstance(arg, Input) and not 0 <= arg.index < len(self._inputs):
            raise BuildError(f"Input({arg.index}) does not exist")
        if isinstance(arg, (Result, NestedResult)) and not 0 <= arg.index < len(self._commands):
            raise BuildError(f"Result({arg.index}) refers to a command that does not exist yet")

    def _add_command(self, command: Command) -> Result:
        if len(self._commands) >= MAX_COMMANDS:
            raise BuildError(f"Too many commands (max {MAX_COMMANDS})")
        self._touch()
        self._commands.append(command)
        return Result(len(self._commands) - 1)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def move_call(self, package: Union[str, SuiAddress], module: str, function: str,
                  arguments: Sequence[CommandArg] = (),
                  type_arguments: Sequence[str] = ()) -> Result:
        """
        Queue a Move function call.

        Args:
            package: Package id
            module: Module name
            function: Function name
            arguments: Pure values, object inputs or earlier results, in
                declaration order
            type_arguments: Move type arguments

        Returns:
            Result of the call, usable as an argument to later operations

        Raises:
            BuildError: On an invalid package id, identifier, type or argument
        """
        package = SuiAddress(package)
        for label, name in (("module", module), ("function", function)):
            if not is_valid_identifier(name):
                raise BuildError(f"Invalid {label} name: {name!r}",
                                 code=ErrorCode.INVALID_IDENTIFIER)
        for type_arg in type_arguments:
            _check_type(type_arg)
        args = tuple(self._argument(a) for a in arguments)
        return self._add_command(MoveCall(package, module, function, tuple(type_arguments), args))

    def call(self, target: Any, package: Union[str, SuiAddress],
             arguments: Sequence[CommandArg] = (), type_arguments: Sequence[str] = ()) -> Result:
        """
        Queue a call to a declared function.

        Args:
            target: A ``FunctionSignature`` or an enum member whose value is one
            package: Package id
            arguments: Arguments in declaration order

        Raises:
            BuildError: If the arguments do not match the declaration
        """
        signature = getattr(target, "value", target)
        if not isinstance(signature, FunctionSignature):
            raise BuildError(f"Unknown call target: {target!r}")
        signature.check_arguments(arguments)
        return self.move_call(package, signature.module, signature.function, arguments,
                              type_arguments)

    def split_coins(self, coin: CommandArg, amounts: Sequence[Union[int, CommandArg]]) -> Result:
        """
        Queue a split of ``coin`` into new coins of the given amounts.

        Integer amounts are encoded as ``u64``. The new coins are
        ``NestedResult(result.index, i)``, one per amount.
        """
        if not amounts:
            raise BuildError("split_coins needs at least one amount")
        amount_args = tuple(self._argument(pure_u64(a) if isinstance(a, int) else a)
                            for a in amounts)
        return self._add_command(SplitCoins(self._argument(coin), amount_args))

    def make_move_vec(self, elements: Sequence[CommandArg],
                      type_tag: Optional[str] = None) -> Result:
        """
        Queue construction of a Move vector from ``elements``.

        Args:
            elements: Object inputs, pure values or earlier results
            type_tag: Element type. Required for an empty vector, inferred by
                the node otherwise

        Returns:
            The vector, usable as an argument to later operations

        Raises:
            BuildError: On an invalid type or an untyped empty vector
        """
        if type_tag is None and not elements:
            raise BuildError("make_move_vec needs a type tag for an empty vector")
        if type_tag is not None:
            _check_type(type_tag)
        return self._add_command(MakeMoveVec(type_tag, tuple(self._argument(e) for e in elements)))

    def merge_coins(self, destination: CommandArg, sources: Sequence[CommandArg]) -> Result:
        if not sources:
            raise BuildError("merge_coins needs at least one source coin")
        return self._add_command(MergeCoins(self._argument(destination),
                                            tuple(self._argument(s) for s in sources)))

    def transfer_objects(self, objects: Sequence[CommandArg],
                         recipient: Union[str, SuiAddress]) -> Result:
        if not objects:
            raise BuildError("transfer_objects needs at least one object")
        object_args = tuple(self._argument(o) for o in objects)
        return self._add_command(TransferObjects(object_args, self.input(pure_address(recipient))))

    def transfer_object(self, reference: ObjectReference,
                        recipient: Union[str, SuiAddress]) -> Result:
        """Queue the transfer of one owned object."""
        return self.transfer_objects([ImmOrOwnedObject(reference)], recipient)

    def transfer_sui(self, recipient: Union[str, SuiAddress], amount: int) -> Result:
        """
        Queue a transfer of ``amount`` MIST split from the gas coin.

        Raises:
            BuildError: If the recipient is invalid or the amount is not a u64
        """
        recipient_arg = self.input(pure_address(recipient))
        amount_arg = self.input(pure_u64(amount))
        split = self._add_command(SplitCoins(GasCoin(), (amount_arg,)))
        return self._add_command(TransferObjects((NestedResult(split.index, 0),), recipient_arg))

    # ------------------------------------------------------------------
    # Gas configuration
    # ------------------------------------------------------------------

    def set_gas_budget(self, budget: int) -> TransactionAssembler:
        if not isinstance(budget, int) or budget <= 0:
            raise BuildError(f"Gas budget must be a positive integer, got {budget!r}")
        self._gas_budget = budget
        return self

    def set_gas_price(self, price: int) -> TransactionAssembler:
        if not isinstance(price, int) or price <= 0:
            raise BuildError(f"Gas price must be a positive integer, got {price!r}")
        self._gas_price = price
        return self

    def set_gas_object(self, object_id: Union[str, SuiAddress]) -> TransactionAssembler:
        """Pin the coin used for gas; it is fetched fresh at finalization."""
        self._gas_object = SuiAddress(object_id)
        return self

    def set_expiration(self, epoch: Optional[int]) -> TransactionAssembler:
        if epoch is not None and (not isinstance(epoch, int) or epoch < 0):
            raise BuildError(f"Expiration epoch must be a non-negative integer, got {epoch!r}")
        self._expiration = epoch
        return self

    # ------------------------------------------------------------------
    # Finalization
    # ------------------------------------------------------------------

    def _take_queue(self) -> ProgrammableTransaction:
        if self._spent:
            raise BuildError("Transaction already finalized; queue new operations first")
        kind = ProgrammableTransaction(tuple(self._inputs), tuple(self._commands))
        self._inputs, self._commands = [], []
        self._pure_index, self._object_index = {}, {}
        self._spent = True
        return kind

    def _restore_queue(self, kind: ProgrammableTransaction) -> None:
        if self._inputs or self._commands:
            return
        self._inputs, self._commands = list(kind.inputs), list(kind.commands)
        for index, arg in enumerate(self._inputs):
            if isinstance(arg, PureArg):
                self._pure_index.setdefault(arg.value, index)
            else:
                self._object_index[arg.object_id] = index
        self._spent = False

    async def finalize(self, mode: AssemblyMode = AssemblyMode.SUBMIT) -> TransactionPayload:
        """
        Produce the immutable payload for the queued operations.

        SUBMIT resolves a gas coin owned by the sender, the reference gas
        price and a budget (pinned, or dry-run estimate plus 20%). SIMULATE
        uses the simulation sender unless one is set, no gas coin, the
        placeholder budget and the reference price.

        Args:
            mode: Assembly mode

        Returns:
            Finalized payload

        Raises:
            BuildError: On a second finalize without new operations, a missing
                sender or a pinned gas coin not owned by the sender
            InsufficientFundsError: If the sender owns no SUI coin
            ExecutionError: If the budget dry run fails
        """
        kind = self._take_queue()
        try:
            if mode is AssemblyMode.SIMULATE:
                return await self._finalize_simulation(kind)
            return await self._finalize_submission(kind)
        except BaseException:
            self._restore_queue(kind)
            raise

    async def _gas_price_or_reference(self) -> int:
        if self._gas_price is not None:
            return self._gas_price
        return await self.rpc.get_reference_gas_price()

    async def _finalize_simulation(self, kind: ProgrammableTransaction) -> TransactionPayload:
        sender = self.sender or SIMULATION_SENDER
        price = await self._gas_price_or_reference()
        budget = self._gas_budget or PLACEHOLDER_GAS_BUDGET
        return TransactionPayload(sender, kind, GasData((), sender, price, budget),
                                  self._expiration)

    async def _finalize_submission(self, kind: ProgrammableTransaction) -> TransactionPayload:
        if self.sender is None:
            raise BuildError("A sender is required to finalize a transaction for submission")
        sender = self.sender
        gas_ref = await self._select_gas(kind, sender)
        price = await self._gas_price_or_reference()

        budget = self._gas_budget
        if budget is None:
            draft = TransactionPayload(sender, kind, GasData((gas_ref,), sender, price,
                                                             PLACEHOLDER_GAS_BUDGET),
                                       self._expiration)
            budget = await self._estimate_budget(draft)

        payload = TransactionPayload(sender, kind, GasData((gas_ref,), sender, price, budget),
                                     self._expiration)
        logger.debug(f"Finalized transaction {payload.digest()} with budget {budget} at price {price}")
        return payload

    async def _select_gas(self, kind: ProgrammableTransaction,
                          sender: SuiAddress) -> ObjectReference:
        used = {arg.object_id for arg in kind.inputs
                if isinstance(arg, (ImmOrOwnedObject, ReceivingObject))}
        if self._gas_object is not None:
            if self._gas_object in used:
                raise BuildError(f"Gas object {self._gas_object} is also a transaction input")
            resolved = await self.resolver.resolve(self._gas_object)
            if resolved.ownership is not Ownership.ADDRESS_OWNED or resolved.owner != sender:
                raise BuildError(f"Gas object {self._gas_object} is not owned by sender {sender}",
                                 details={"owner": str(resolved.owner),
                                          "ownership": resolved.ownership.value})
            return resolved.reference

        page = await self.rpc.get_coins(sender, SUI_COIN_TYPE)
        for coin in page.get("data", []):
            coin_id = SuiAddress(coin["coinObjectId"])
            if coin_id not in used:
                # fetch fresh rather than trusting the coin listing's version
                return await self.resolver.reference(coin_id)
        raise InsufficientFundsError(f"No SUI coins available for gas in {sender}",
                                     details={"sender": str(sender)})

    async def _estimate_budget(self, draft: TransactionPayload) -> int:
        result = await self.rpc.dry_run_transaction_block(draft.to_base64())
        effects = result.get("effects") or {}
        raise_for_effects(effects, describe_abort=self.describe_abort)
        summary = GasCostSummary.from_effects(effects)
        budget = estimate_budget(summary)
        logger.debug(f"Dry run gas: {summary}, budget {budget}")
        return budget
