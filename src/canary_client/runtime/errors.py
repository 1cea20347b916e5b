"""
Canary Error Model

This module provides the error handling framework for the Canary client.
Every failure surfaced by the library is a ``CanaryError`` subclass carrying a
stable ``ErrorCode``, a message, optional structured details and the
underlying cause.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum
import builtins
import re


class ErrorCode(IntEnum):
    """Canary client error codes."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2

    # Object resolution errors (100-199)
    NOT_FOUND = 100
    OBJECT_DELETED = 101
    MALFORMED_TYPE = 102

    # Encoding errors (200-299)
    DECODE_ERROR = 200
    INVALID_ADDRESS = 201

    # Assembly errors (300-399)
    BUILD_ERROR = 300
    INVALID_IDENTIFIER = 301
    INSUFFICIENT_FUNDS = 302

    # Execution errors (400-499)
    EXECUTION_FAILED = 400
    MOVE_ABORT = 401
    UNKNOWN_OUTCOME = 402

    # Network errors (500-599)
    NETWORK_ERROR = 500
    CONNECTION_FAILED = 501
    TIMEOUT = 502
    RPC_ERROR = 503

    # Key errors (600-699)
    INVALID_KEY = 600
    UNSUPPORTED_SCHEME = 601
    KEY_NOT_FOUND = 602

    # Query errors (700-799)
    QUERY_STATE = 700


class CanaryError(Exception):
    """
    Base class for all Canary client errors.

    Provides structured error information: a code, a message, free-form
    details and the exception that caused it.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        """
        Initialize a Canary error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CanaryError':
        """Create error from dictionary representation."""
        code = ErrorCode(data.get("code", ErrorCode.UNKNOWN))
        message = data.get("message", "Unknown error")
        details = data.get("details")
        return cls(message, code, details)


class NotFoundError(CanaryError):
    """A referenced object does not exist or has been deleted."""

    def __init__(self, message: str = "Object not found", code: ErrorCode = ErrorCode.NOT_FOUND,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class MalformedTypeError(CanaryError):
    """A type string could not be parsed."""

    def __init__(self, message: str = "Malformed type string",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.MALFORMED_TYPE, details, cause)


class DecodeError(CanaryError):
    """Bytes do not decode to the expected shape."""

    def __init__(self, message: str = "Decode error", code: ErrorCode = ErrorCode.DECODE_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class BuildError(CanaryError):
    """Invalid transaction assembly input or misuse of an assembler."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.BUILD_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class InvalidAddressError(BuildError):
    """An address or object id is not valid hex of at most 32 bytes."""

    def __init__(self, message: str = "Invalid address",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.INVALID_ADDRESS, details, cause)


class InsufficientFundsError(CanaryError):
    """The sender has no coin available to pay for gas."""

    def __init__(self, message: str = "No gas coins available",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.INSUFFICIENT_FUNDS, details, cause)


class ExecutionError(CanaryError):
    """The ledger rejected or aborted a transaction or simulation."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.EXECUTION_FAILED,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)

    @property
    def abort_code(self) -> Optional[int]:
        return self.details.get("abort_code")


class UnknownOutcomeError(CanaryError):
    """
    A submission was sent but its response never arrived.

    The transaction may or may not have executed. ``digest`` is the locally
    computed transaction digest that can be passed to ``reconcile``.
    """

    def __init__(self, message: str, digest: str,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        details = dict(details or {})
        details.setdefault("digest", digest)
        super().__init__(message, ErrorCode.UNKNOWN_OUTCOME, details, cause)
        self.digest = digest


class NetworkError(CanaryError):
    """Network-related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.NETWORK_ERROR, details, cause)


class ConnectionError(NetworkError):
    """The connection could not be established; nothing was sent."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, details, cause)
        self.code = ErrorCode.CONNECTION_FAILED


class TimeoutError(NetworkError):
    """Request timeouts."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, details, cause)
        self.code = ErrorCode.TIMEOUT


class RpcError(NetworkError):
    """The node answered with a JSON-RPC error object."""

    def __init__(self, message: str, rpc_code: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, details, cause)
        self.code = ErrorCode.RPC_ERROR
        self.rpc_code = rpc_code


class KeyDecodeError(CanaryError):
    """Secret key text or bytes could not be decoded."""

    def __init__(self, message: str = "Invalid private key", code: ErrorCode = ErrorCode.INVALID_KEY,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class KeyStoreError(CanaryError):
    """Key store lookup or persistence failure."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.KEY_NOT_FOUND,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class QueryStateError(CanaryError):
    """A view call step was invoked out of order."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.QUERY_STATE, details, cause)


# JSON-RPC 2.0 reserved codes
_INVALID_PARAMS = -32602
_SERVER_ERROR_RANGE = range(-32099, -32000 + 1)
# Sui fullnode: the transaction itself was refused (bad signature, locked objects)
_TX_CLIENT_ERROR = -32002


def is_transient_rpc_error(error: BaseException) -> bool:
    """
    Check whether a JSON-RPC error reports a server-side condition rather than
    a refusal of the request.

    Covers the server range, including the finality timeout (-32050), except
    the code Sui uses for transactions it refused outright.
    """
    return (isinstance(error, RpcError)
            and error.rpc_code in _SERVER_ERROR_RANGE
            and error.rpc_code != _TX_CLIENT_ERROR)


def error_from_response(response: Dict[str, Any]) -> Optional[CanaryError]:
    """
    Create an appropriate error from a JSON-RPC response.

    Args:
        response: Decoded JSON-RPC response body

    Returns:
        Appropriate error instance or None if no error
    """
    if "error" not in response or response["error"] is None:
        return None

    error_data = response["error"]
    if isinstance(error_data, str):
        return RpcError(error_data)

    if not isinstance(error_data, dict):
        return RpcError(str(error_data))

    message = error_data.get("message", "Unknown error")
    rpc_code = error_data.get("code")
    details = {"rpc_code": rpc_code}
    if error_data.get("data") is not None:
        details["data"] = error_data["data"]

    if rpc_code == _INVALID_PARAMS:
        return BuildError(f"Node rejected request parameters: {message}", details=details)
    return RpcError(message, rpc_code, details)


_MOVE_ABORT_RE = re.compile(
    r"MoveAbort\(.*?name:\s*Identifier\(\"(?P<module>\w+)\"\).*?\},\s*(?P<code>\d+)\)",
    re.DOTALL,
)


def parse_move_abort(error_text: str) -> Optional[Dict[str, Any]]:
    """
    Extract the module name and abort code from an effects error string.

    Args:
        error_text: The ``effects.status.error`` text reported by the node

    Returns:
        ``{"module": ..., "abort_code": ...}`` or None if the text is not a Move abort
    """
    if not error_text:
        return None
    match = _MOVE_ABORT_RE.search(error_text)
    if not match:
        return None
    return {"module": match.group("module"), "abort_code": int(match.group("code"))}


class ErrorHandler:
    """
    Utility class for handling and categorizing errors.
    """

    @staticmethod
    def is_retryable(error: BaseException) -> bool:
        """
        Check if an error is safe to retry.

        Submissions that end in ``UnknownOutcomeError`` are never retryable:
        the caller must reconcile first.

        Args:
            error: Exception to check

        Returns:
            True if the error should be retried
        """
        if isinstance(error, UnknownOutcomeError):
            return False
        if isinstance(error, RpcError):
            return is_transient_rpc_error(error)
        if isinstance(error, CanaryError):
            return error.code in (ErrorCode.NETWORK_ERROR, ErrorCode.CONNECTION_FAILED,
                                  ErrorCode.TIMEOUT)
        return isinstance(error, (builtins.ConnectionError, builtins.TimeoutError))

    @staticmethod
    def extract_tx_digest(error: BaseException) -> Optional[str]:
        """
        Extract the transaction digest from error details if available.

        Args:
            error: Exception to examine

        Returns:
            Transaction digest if found
        """
        if isinstance(error, CanaryError) and error.details:
            return error.details.get("digest")
        return None


__all__ = [
    "ErrorCode",
    "CanaryError",
    "NotFoundError",
    "MalformedTypeError",
    "DecodeError",
    "BuildError",
    "InvalidAddressError",
    "InsufficientFundsError",
    "ExecutionError",
    "UnknownOutcomeError",
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
    "RpcError",
    "KeyDecodeError",
    "KeyStoreError",
    "QueryStateError",
    "error_from_response",
    "parse_move_abort",
    "ErrorHandler",
]
