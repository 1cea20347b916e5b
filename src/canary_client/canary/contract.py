"""
Shared plumbing for the Canary contract modules.

Handles signer checks, package discovery, transaction submission and view
calls so that ``MemberRegistry`` and ``PackageStorage`` only describe their
operations.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Tuple, Union

from ..api_client import SuiRpcClient
from ..objects import ObjectResolver, ResolvedObject
from ..query import ViewCall
from ..runtime.address import SuiAddress
from ..runtime.errors import BuildError
from ..signers.signer import Signer
from ..tx.builder import CommandArg, TransactionAssembler
from ..tx.execute import TransactionResponse, sign_and_submit
from .targets import LAYOUTS, CallTarget, describe_abort

logger = logging.getLogger(__name__)


class CanaryContract:
    """
    Base for the Canary module wrappers.

    The package id is taken from the type of the object an operation works
    on, unless one is pinned at construction.
    """

    def __init__(self, rpc: SuiRpcClient, signer: Optional[Signer] = None,
                 package_id: Optional[Union[str, SuiAddress]] = None,
                 resolver: Optional[ObjectResolver] = None):
        """
        Initialize the wrapper.

        Args:
            rpc: RPC client
            signer: Signer for transactions; queries work without one
            package_id: Canary package id, discovered from object types when omitted
            resolver: Object resolver, created from ``rpc`` when omitted
        """
        self.rpc = rpc
        self.signer = signer
        self.package_id = SuiAddress(package_id) if package_id is not None else None
        self.resolver = resolver or ObjectResolver(rpc)

    def _require_signer(self) -> Signer:
        if self.signer is None:
            raise BuildError("A signer is required to submit transactions")
        return self.signer

    def package_for(self, resolved: ResolvedObject) -> SuiAddress:
        """Pinned package id, or the package that defines ``resolved``'s type."""
        return self.package_id or resolved.package_id

    def assembler(self) -> TransactionAssembler:
        """A fresh assembler for the signer's address."""
        signer = self._require_signer()
        return TransactionAssembler(self.rpc, sender=signer.address, resolver=self.resolver,
                                    describe_abort=describe_abort)

    async def _submit(self, assembler: TransactionAssembler, operation: str) -> TransactionResponse:
        signer = self._require_signer()
        payload = await assembler.finalize()
        logger.info(f"Submitting {operation} as {signer.address.short()} ({payload.digest()})")
        return await sign_and_submit(self.rpc, payload, signer, describe_abort=describe_abort)

    async def _view(self, package: SuiAddress, target: CallTarget,
                    arguments: Sequence[CommandArg]) -> Tuple[Any, ...]:
        sender = self.signer.address if self.signer is not None else None
        view = ViewCall(self.rpc, package, target, arguments, sender=sender,
                        resolver=self.resolver, layouts=LAYOUTS, describe_abort=describe_abort)
        return await view.run()
