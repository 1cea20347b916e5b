"""
Canary contract: member registry and package storage.
"""

from .contract import CanaryContract
from .models import BlobIds, CanaryBlobInfo, MemberInfo, RegistryInfo
from .registry import MemberRegistry, registry_fee
from .storage import PackageStorage
from .targets import ABORT_CODES, LAYOUTS, CallTarget, describe_abort, target_for

__all__ = [
    "ABORT_CODES",
    "BlobIds",
    "CallTarget",
    "CanaryBlobInfo",
    "CanaryContract",
    "LAYOUTS",
    "MemberInfo",
    "MemberRegistry",
    "PackageStorage",
    "RegistryInfo",
    "describe_abort",
    "registry_fee",
    "target_for",
]
