"""
Canary Python client.

Async client for the Canary member registry and package storage contract on
Sui: key handling, object resolution, programmable transaction assembly with
gas estimation, signing and submission, and read-only view calls.
"""

from .runtime.address import ObjectID, SuiAddress, is_valid_address, normalize_address
from .runtime.errors import (
    BuildError,
    CanaryError,
    ConnectionError,
    DecodeError,
    ErrorCode,
    ErrorHandler,
    ExecutionError,
    InsufficientFundsError,
    InvalidAddressError,
    KeyDecodeError,
    KeyStoreError,
    MalformedTypeError,
    NetworkError,
    NotFoundError,
    QueryStateError,
    RpcError,
    TimeoutError,
    UnknownOutcomeError,
)

from .api_client import NETWORKS, ClientConfig, SuiRpcClient
from .transport.http import AiohttpTransport, RequestsTransport, Transport

from .crypto import Ed25519KeyPair, KeyPair, Secp256k1KeyPair, Secp256r1KeyPair, SignatureScheme
from .keys import (
    FileKeyStore,
    KeyStore,
    MemoryKeyStore,
    create_keystore_from_key,
    export_private_key,
    parse_bech32_private_key,
    validate_bech32_private_key,
)
from .signers import KeyPairSigner, Signer

# objects must load before the assembler, which depends on it
from .objects import ObjectResolver, Ownership, ResolvedObject, extract_package_id
from .tx import (
    ObjectReference,
    SignedTransaction,
    TransactionPayload,
    TransactionResponse,
    reconcile,
    sign_and_submit,
    sign_transaction,
    submit_transaction,
)
from .tx.builder import AssemblyMode, TransactionAssembler
from .query import SimulationResult, ViewCall, ViewState

from .canary import (
    BlobIds,
    CallTarget,
    CanaryBlobInfo,
    MemberInfo,
    MemberRegistry,
    PackageStorage,
    RegistryInfo,
)
from .config import CanaryConfig
from .facade import CanaryClient
from .utils import format_sui, format_timestamp, parse_sui

__version__ = "0.3.0"

__all__ = [
    # Facade and configuration
    "CanaryClient",
    "CanaryConfig",
    "ClientConfig",
    "NETWORKS",

    # RPC and transport
    "SuiRpcClient",
    "Transport",
    "AiohttpTransport",
    "RequestsTransport",

    # Identity
    "SignatureScheme",
    "KeyPair",
    "Ed25519KeyPair",
    "Secp256k1KeyPair",
    "Secp256r1KeyPair",
    "KeyStore",
    "MemoryKeyStore",
    "FileKeyStore",
    "create_keystore_from_key",
    "export_private_key",
    "parse_bech32_private_key",
    "validate_bech32_private_key",
    "Signer",
    "KeyPairSigner",

    # Objects
    "SuiAddress",
    "ObjectID",
    "normalize_address",
    "is_valid_address",
    "ObjectResolver",
    "ResolvedObject",
    "Ownership",
    "extract_package_id",

    # Transactions
    "AssemblyMode",
    "TransactionAssembler",
    "ObjectReference",
    "TransactionPayload",
    "SignedTransaction",
    "TransactionResponse",
    "sign_transaction",
    "submit_transaction",
    "sign_and_submit",
    "reconcile",

    # Queries
    "ViewCall",
    "ViewState",
    "SimulationResult",

    # Canary contract
    "CallTarget",
    "MemberRegistry",
    "PackageStorage",
    "RegistryInfo",
    "MemberInfo",
    "CanaryBlobInfo",
    "BlobIds",

    # Utilities
    "parse_sui",
    "format_sui",
    "format_timestamp",

    # Errors
    "CanaryError",
    "ErrorCode",
    "ErrorHandler",
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
]
