"""Runtime helpers for the Canary client"""

from .address import SuiAddress, ObjectID, normalize_address, is_valid_address
from .errors import CanaryError, ErrorCode

__all__ = [
    "SuiAddress",
    "ObjectID",
    "normalize_address",
    "is_valid_address",
    "CanaryError",
    "ErrorCode",
]
