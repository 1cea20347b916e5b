"""
Transaction signing and submission.

Signs a finalized payload, submits it once and reports the outcome. There is
no automatic retry: when the response to a submission is lost the caller gets
``UnknownOutcomeError`` with the transaction digest and decides, after
``reconcile``, whether to try again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from ..api_client import SuiRpcClient
from ..runtime.errors import (
    BuildError,
    ConnectionError,
    ErrorCode,
    ExecutionError,
    NetworkError,
    RpcError,
    UnknownOutcomeError,
    is_transient_rpc_error,
    parse_move_abort,
)
from ..signers.signer import Signer
from .fees import GasCostSummary
from .types import TransactionPayload

logger = logging.getLogger(__name__)

# (module, abort_code) -> readable name, or None when unknown
AbortDescriber = Callable[[str, int], Optional[str]]


class TransactionResponse(BaseModel):
    """Response of ``sui_executeTransactionBlock`` / ``sui_getTransactionBlock``."""

    digest: str
    effects: Dict[str, Any] = Field(default_factory=dict)
    events: List[Dict[str, Any]] = Field(default_factory=list)
    object_changes: List[Dict[str, Any]] = Field(default_factory=list, alias="objectChanges")
    balance_changes: List[Dict[str, Any]] = Field(default_factory=list, alias="balanceChanges")
    checkpoint: Optional[str] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @property
    def status(self) -> str:
        return (self.effects.get("status") or {}).get("status", "unknown")

    @property
    def succeeded(self) -> bool:
        return self.status == "success"

    @property
    def error(self) -> Optional[str]:
        return (self.effects.get("status") or {}).get("error")

    @property
    def gas_used(self) -> GasCostSummary:
        return GasCostSummary.from_effects(self.effects)

    def created_objects(self, type_suffix: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        ``created`` entries of the object changes.

        Args:
            type_suffix: Only keep objects whose type ends with this, e.g.
                ``::pkg_storage::CanaryBlob``
        """
        created = [c for c in self.object_changes if c.get("type") == "created"]
        if type_suffix:
            created = [c for c in created if str(c.get("objectType", "")).endswith(type_suffix)]
        return created


@dataclass(frozen=True)
class SignedTransaction:
    """A payload with the signatures that authorize it."""

    payload: TransactionPayload
    signatures: Tuple[str, ...]

    @property
    def tx_bytes_b64(self) -> str:
        return self.payload.to_base64()

    @property
    def digest(self) -> str:
        return self.payload.digest()


def execution_error(error_text: Optional[str], digest: Optional[str] = None,
                    describe_abort: Optional[AbortDescriber] = None) -> ExecutionError:
    """
    Build an ``ExecutionError`` from an effects error string.

    Move aborts get ``module`` and ``abort_code`` details and, when a
    describer knows the code, a readable ``abort_name``.
    """
    details: Dict[str, Any] = {"error": error_text}
    if digest:
        details["digest"] = digest
    abort = parse_move_abort(error_text or "")
    if abort is None:
        return ExecutionError(f"Transaction failed: {error_text}", details=details)
    details.update(abort)
    name = describe_abort(abort["module"], abort["abort_code"]) if describe_abort else None
    if name:
        details["abort_name"] = name
    label = name or f"abort code {abort['abort_code']}"
    return ExecutionError(f"Move abort in {abort['module']}: {label}",
                          code=ErrorCode.MOVE_ABORT, details=details)


def raise_for_effects(effects: Dict[str, Any], digest: Optional[str] = None,
                      describe_abort: Optional[AbortDescriber] = None) -> None:
    """
    Raise ``ExecutionError`` unless ``effects.status.status`` is ``success``.
    """
    status = (effects or {}).get("status") or {}
    if status.get("status") != "success":
        raise execution_error(status.get("error") or "unknown failure", digest, describe_abort)


def sign_transaction(payload: TransactionPayload, signer: Signer) -> SignedTransaction:
    """
    Sign a payload with its sender's key.

    Args:
        payload: Finalized payload
        signer: Signer for ``payload.sender``

    Returns:
        Signed transaction

    Raises:
        BuildError: If the signer's address is not the payload sender
    """
    if signer.address != payload.sender:
        raise BuildError(f"Signer {signer.address} cannot sign for sender {payload.sender}")
    signature = signer.sign_transaction(payload.to_bcs())
    return SignedTransaction(payload, (signature,))


async def submit_transaction(rpc: SuiRpcClient, signed: SignedTransaction, *,
                             describe_abort: Optional[AbortDescriber] = None) -> TransactionResponse:
    """
    Submit a signed transaction once and wait for local execution.

    Args:
        rpc: RPC client
        signed: Signed transaction
        describe_abort: Optional mapping of Move abort codes to names

    Returns:
        Successful transaction response

    Raises:
        ExecutionError: If the node rejected the transaction or it aborted
        UnknownOutcomeError: If the request may have been delivered but no
            response arrived, or the node reported a transient failure such
            as a finality timeout
        ConnectionError: If the node could not be reached at all
    """
    digest = signed.digest
    try:
        result = await rpc.execute_transaction_block(signed.tx_bytes_b64, signed.signatures)
    except ConnectionError:
        raise
    except (RpcError, BuildError) as e:
        if is_transient_rpc_error(e):
            logger.warning(f"Outcome of transaction {digest} unknown: {e.message}")
            raise UnknownOutcomeError(
                f"Node failed before confirming transaction {digest}; reconcile before retrying",
                digest, details={"rpc_code": e.rpc_code}, cause=e) from e
        raise ExecutionError(f"Transaction {digest} rejected: {e.message}",
                             details={"digest": digest, **e.details}, cause=e) from e
    except NetworkError as e:
        if 400 <= e.details.get("status", 0) < 500:
            raise
        logger.warning(f"Outcome of transaction {digest} unknown: {e.message}")
        raise UnknownOutcomeError(
            f"No response for submitted transaction {digest}; reconcile before retrying",
            digest, cause=e) from e

    response = TransactionResponse.model_validate(result)
    if response.digest != digest:
        logger.warning(f"Node reported digest {response.digest}, expected {digest}")
    raise_for_effects(response.effects, response.digest, describe_abort)
    logger.info(f"Transaction {response.digest} executed")
    return response


async def sign_and_submit(rpc: SuiRpcClient, payload: TransactionPayload, signer: Signer, *,
                          describe_abort: Optional[AbortDescriber] = None) -> TransactionResponse:
    """Sign a payload and submit it. See ``submit_transaction``."""
    return await submit_transaction(rpc, sign_transaction(payload, signer),
                                    describe_abort=describe_abort)


async def reconcile(rpc: SuiRpcClient, digest: str) -> Optional[TransactionResponse]:
    """
    Look up the outcome of a transaction by digest.

    Args:
        rpc: RPC client
        digest: Digest from ``UnknownOutcomeError.digest``

    Returns:
        The response if the network knows the transaction, None otherwise
    """
    try:
        result = await rpc.get_transaction_block(digest)
    except (RpcError, BuildError) as e:
        if "could not find" in e.message.lower() or "not found" in e.message.lower():
            return None
        raise
    return TransactionResponse.model_validate(result)
