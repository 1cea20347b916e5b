"""
Gas budget estimation.

A budget is derived from a dry run of the transaction: the net cost
(computation + storage - rebate, never below the computation cost) plus a
20% margin.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict

from ..runtime.errors import DecodeError

# Budget used for dry runs and simulations, in MIST
PLACEHOLDER_GAS_BUDGET = 10_000_000

# budget = estimate + estimate // BUDGET_MARGIN_DIVISOR
BUDGET_MARGIN_DIVISOR = 5


@dataclass(frozen=True)
class GasCostSummary:
    """Gas used by an executed or simulated transaction, in MIST."""

    computation_cost: int
    storage_cost: int
    storage_rebate: int
    non_refundable_storage_fee: int = 0

    @classmethod
    def from_effects(cls, effects: Dict[str, Any]) -> GasCostSummary:
        """
        Read ``effects.gasUsed`` from an RPC response.

        Raises:
            DecodeError: If the gas summary is missing or not numeric
        """
        gas_used = (effects or {}).get("gasUsed")
        if not isinstance(gas_used, dict):
            raise DecodeError("Effects carry no gasUsed summary", details={"effects": effects})
        try:
            return cls(
                computation_cost=int(gas_used["computationCost"]),
                storage_cost=int(gas_used["storageCost"]),
                storage_rebate=int(gas_used["storageRebate"]),
                non_refundable_storage_fee=int(gas_used.get("nonRefundableStorageFee", 0)),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise DecodeError(f"Malformed gasUsed summary: {gas_used}", cause=exc) from exc

    @property
    def net_cost(self) -> int:
        """Raw estimate: computation + storage - rebate, floored at the computation cost."""
        return max(self.computation_cost + self.storage_cost - self.storage_rebate,
                   self.computation_cost)


def budget_from_estimate(estimate: int) -> int:
    """
    Apply the safety margin to a raw estimate.

    Args:
        estimate: Raw gas estimate in MIST

    Returns:
        Budget, always >= estimate
    """
    estimate = max(estimate, 0)
    return estimate + estimate // BUDGET_MARGIN_DIVISOR


def estimate_budget(summary: GasCostSummary) -> int:
    return budget_from_estimate(summary.net_cost)
