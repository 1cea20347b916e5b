"""
Utility helpers for the Canary client.
"""

from ..runtime.address import normalize_address
from .units import MIST_PER_SUI, format_sui, format_timestamp, parse_sui

__all__ = [
    "MIST_PER_SUI",
    "format_sui",
    "format_timestamp",
    "normalize_address",
    "parse_sui",
]
