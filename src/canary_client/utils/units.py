"""
SUI amount and timestamp helpers.

1 SUI = 10^9 MIST. Amounts on chain are always integer MIST; these helpers
convert from and to decimal SUI strings without going through floats.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Union

MIST_PER_SUI = 1_000_000_000
SUI_DECIMALS = 9

U64_MAX = 2 ** 64 - 1


def parse_sui(amount: Union[str, int, Decimal]) -> int:
    """
    Convert a SUI amount to MIST.

    Args:
        amount: Amount in SUI, e.g. ``"1.5"``

    Returns:
        Amount in MIST

    Raises:
        ValueError: If the amount is negative, has more than 9 decimals or
            does not fit in a u64
    """
    if isinstance(amount, float):
        raise ValueError("Pass SUI amounts as str or Decimal, not float")
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid SUI amount: {amount!r}") from exc
    if not value.is_finite() or value < 0:
        raise ValueError(f"Invalid SUI amount: {amount!r}")

    mist = value * MIST_PER_SUI
    if mist != mist.to_integral_value():
        raise ValueError(f"SUI amount has more than {SUI_DECIMALS} decimals: {amount!r}")
    result = int(mist)
    if result > U64_MAX:
        raise ValueError(f"SUI amount out of range: {amount!r}")
    return result


def format_sui(mist: int) -> str:
    """
    Format MIST as a SUI string with trailing zeros removed.

    ``format_sui(1_500_000_000) == "1.5"``, ``format_sui(0) == "0"``.
    """
    sign = "-" if mist < 0 else ""
    whole, frac = divmod(abs(int(mist)), MIST_PER_SUI)
    if not frac:
        return f"{sign}{whole}"
    return f"{sign}{whole}.{frac:09d}".rstrip("0")


def format_timestamp(ms: int) -> datetime:
    """Convert an on-chain millisecond timestamp (Clock) to an aware UTC datetime."""
    return datetime.fromtimestamp(int(ms) / 1000, tz=timezone.utc)
