"""
Read-only view calls.

A ``ViewCall`` assembles one Move call in simulation mode, runs it through
``sui_devInspectTransactionBlock`` and decodes the returned buffers against
the function's declared return types. Nothing is signed or submitted.

Usage:
    view = ViewCall(rpc, package_id, CallTarget.IS_MEMBER, [registry, pure_address(addr)])
    (is_member,) = await view.run()
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .api_client import SuiRpcClient
from .codec.move_types import LayoutMap
from .objects import ObjectResolver
from .runtime.address import SuiAddress
from .runtime.errors import BuildError, DecodeError, QueryStateError
from .tx.arguments import decode_return_values
from .tx.builder import AssemblyMode, CommandArg, TransactionAssembler
from .tx.execute import AbortDescriber, execution_error, raise_for_effects
from .tx.signatures import FunctionSignature
from .tx.types import TransactionPayload

logger = logging.getLogger(__name__)


class ViewState(Enum):
    UNBUILT = "unbuilt"
    BUILT = "built"
    EXECUTED = "executed"
    DECODED = "decoded"


@dataclass(frozen=True)
class SimulationResult:
    """
    Raw outcome of a dev-inspect run.

    ``return_values`` holds one BCS buffer per declared return value of the
    inspected call; ``return_types`` are the type strings the node reported
    alongside them.
    """

    return_values: Tuple[bytes, ...]
    return_types: Tuple[str, ...] = ()
    effects: Dict[str, Any] = field(default_factory=dict, compare=False)
    events: List[Dict[str, Any]] = field(default_factory=list, compare=False)

    @classmethod
    def from_dev_inspect(cls, result: Dict[str, Any], command_index: int) -> SimulationResult:
        """
        Extract the return values of one command.

        Raises:
            DecodeError: If the response has no results for the command or
                the buffers are malformed
        """
        results = result.get("results") or []
        if command_index >= len(results):
            raise DecodeError(f"Dev-inspect returned no results for command {command_index}",
                              details={"results": len(results)})
        values: List[bytes] = []
        types: List[str] = []
        for entry in results[command_index].get("returnValues") or []:
            try:
                raw, type_str = entry
                values.append(bytes(raw))
            except (TypeError, ValueError) as exc:
                raise DecodeError(f"Malformed return value entry: {entry!r}", cause=exc) from exc
            types.append(type_str)
        return cls(tuple(values), tuple(types), result.get("effects") or {},
                   result.get("events") or [])


class ViewCall:
    """
    One read-only call, driven through ``UNBUILT -> BUILT -> EXECUTED -> DECODED``.

    Each step requires the previous one; calling a step out of order raises
    ``QueryStateError``. A failed step leaves the state unchanged.
    """

    def __init__(self, rpc: SuiRpcClient, package: Union[str, SuiAddress], target: Any,
                 arguments: Sequence[CommandArg] = (), type_arguments: Sequence[str] = (),
                 sender: Optional[Union[str, SuiAddress]] = None,
                 resolver: Optional[ObjectResolver] = None,
                 layouts: Optional[LayoutMap] = None,
                 describe_abort: Optional[AbortDescriber] = None):
        """
        Initialize the view call.

        Args:
            rpc: RPC client
            package: Package that defines the function
            target: ``FunctionSignature`` or an enum member whose value is one
            arguments: Call arguments in declaration order
            type_arguments: Move type arguments
            sender: Sender for the simulation; a synthetic one when omitted
            resolver: Object resolver shared with the caller
            layouts: Struct layouts for decoding struct return values
            describe_abort: Names Move abort codes raised by the view
        """
        signature = getattr(target, "value", target)
        if not isinstance(signature, FunctionSignature):
            raise BuildError(f"Unknown call target: {target!r}")
        self.rpc = rpc
        self.package = SuiAddress(package)
        self.signature = signature
        self.target = target
        self.arguments = tuple(arguments)
        self.type_arguments = tuple(type_arguments)
        self.sender = SuiAddress(sender) if sender is not None else None
        self.resolver = resolver
        self.layouts = layouts
        self.describe_abort = describe_abort

        self._state = ViewState.UNBUILT
        self._payload: Optional[TransactionPayload] = None
        self._result: Optional[SimulationResult] = None
        self._values: Optional[Tuple[Any, ...]] = None

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def payload(self) -> Optional[TransactionPayload]:
        return self._payload

    @property
    def result(self) -> Optional[SimulationResult]:
        return self._result

    def _require(self, expected: ViewState, step: str) -> None:
        if self._state is not expected:
            raise QueryStateError(
                f"Cannot {step} a view call in state {self._state.value}; "
                f"expected {expected.value}",
                details={"state": self._state.value, "step": step,
                         "function": self.signature.name},
            )

    @property
    def return_types(self) -> Tuple[str, ...]:
        """Declared return types with the package address filled in."""
        return tuple(t.format(package=self.package) for t in self.signature.returns)

    async def build(self) -> TransactionPayload:
        """
        Assemble the simulation payload.

        Raises:
            QueryStateError: If already built
            BuildError: If the arguments do not match the declaration
        """
        self._require(ViewState.UNBUILT, "build")
        assembler = TransactionAssembler(self.rpc, sender=self.sender, resolver=self.resolver,
                                         describe_abort=self.describe_abort)
        assembler.call(self.target, self.package, self.arguments, self.type_arguments)
        self._payload = await assembler.finalize(AssemblyMode.SIMULATE)
        self._state = ViewState.BUILT
        return self._payload

    async def execute(self) -> SimulationResult:
        """
        Run the payload through dev-inspect.

        Raises:
            QueryStateError: If not built, or already executed
            ExecutionError: If the call aborted or the node reported an error
            DecodeError: If the response carries no return values
        """
        self._require(ViewState.BUILT, "execute")
        payload = self._payload
        kind_b64 = base64.b64encode(payload.kind_bytes()).decode("ascii")
        response = await self.rpc.dev_inspect_transaction_block(
            payload.sender, kind_b64, payload.gas_price, None)

        if response.get("error"):
            raise execution_error(response["error"], describe_abort=self.describe_abort)
        effects = response.get("effects")
        if effects:
            raise_for_effects(effects, describe_abort=self.describe_abort)

        result = SimulationResult.from_dev_inspect(response, len(payload.kind.commands) - 1)
        logger.debug(f"View {self.signature.name} returned {len(result.return_values)} values")
        self._result = result
        self._state = ViewState.EXECUTED
        return result

    def decode(self) -> Tuple[Any, ...]:
        """
        Decode the return values positionally.

        Raises:
            QueryStateError: If not executed yet, or already decoded
            DecodeError: On arity mismatch or malformed buffers
        """
        self._require(ViewState.EXECUTED, "decode")
        self._values = decode_return_values(self._result.return_values, self.return_types,
                                            self.layouts)
        self._state = ViewState.DECODED
        return self._values

    @property
    def values(self) -> Tuple[Any, ...]:
        """
        Decoded values.

        Raises:
            QueryStateError: If the call has not been decoded
        """
        self._require(ViewState.DECODED, "read the values of")
        return self._values

    async def run(self) -> Tuple[Any, ...]:
        """Build, execute and decode in one go."""
        await self.build()
        await self.execute()
        return self.decode()
