"""
Declared Move function signatures.

A ``FunctionSignature`` records what a known entry or view function takes and
returns, so that a call can be checked for arity and argument kinds before
anything is sent.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence, Tuple

from ..runtime.errors import BuildError
from .types import ARGUMENT_TYPES, PureArg, SharedObject


class ParamKind(Enum):
    PURE = "pure"
    # &T
    OBJECT_REF = "object_ref"
    # &mut T
    OBJECT_MUT = "object_mut"
    # T taken by value, either an object input or a command result
    BY_VALUE = "by_value"


@dataclass(frozen=True)
class Param:
    name: str
    kind: ParamKind
    type: str


@dataclass(frozen=True)
class FunctionSignature:
    module: str
    function: str
    params: Tuple[Param, ...] = ()
    returns: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return f"{self.module}::{self.function}"

    def check_arguments(self, arguments: Sequence[Any]) -> None:
        """
        Check arity and argument kinds against the declaration.

        Raises:
            BuildError: On a count mismatch, a pure value in an object
                position, an object in a pure position, or an immutable shared
                object where mutable access or ownership is required
        """
        if len(arguments) != len(self.params):
            raise BuildError(
                f"{self.name} takes {len(self.params)} arguments, got {len(arguments)}",
                details={"expected": [p.name for p in self.params]},
            )
        for param, arg in zip(self.params, arguments):
            # command results and raw input indices carry no kind to check
            if isinstance(arg, ARGUMENT_TYPES):
                continue
            if param.kind is ParamKind.PURE:
                if not isinstance(arg, PureArg):
                    raise BuildError(f"{self.name}: '{param.name}' expects a pure {param.type} value")
                continue
            if isinstance(arg, PureArg):
                raise BuildError(f"{self.name}: '{param.name}' expects an object of type {param.type}")
            if (param.kind in (ParamKind.OBJECT_MUT, ParamKind.BY_VALUE)
                    and isinstance(arg, SharedObject) and not arg.mutable):
                raise BuildError(
                    f"{self.name}: '{param.name}' needs mutable access to shared {param.type}")
