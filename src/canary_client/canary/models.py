"""
Result models for Canary queries.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from ..runtime.address import SuiAddress
from ..runtime.errors import DecodeError
from ..utils.units import format_sui, format_timestamp


class RegistryInfo(BaseModel):
    """Registry state: fee and member count from the object, admin from ``get_admin``."""

    model_config = ConfigDict(frozen=True)

    id: SuiAddress
    fee: int
    member_count: int
    admin: SuiAddress

    @property
    def fee_sui(self) -> str:
        return format_sui(self.fee)

    @classmethod
    def from_fields(cls, registry_id: SuiAddress, fields: Dict[str, Any],
                    admin: SuiAddress) -> RegistryInfo:
        """
        Build from the ``content.fields`` of a Registry object.

        Raises:
            DecodeError: If ``fee`` or ``member_count`` is missing or not numeric
        """
        try:
            fee = int(fields["fee"])
            member_count = int(fields["member_count"])
        except (KeyError, TypeError, ValueError) as exc:
            raise DecodeError(f"Registry {registry_id} has malformed fields",
                              details={"fields": fields}, cause=exc) from exc
        return cls(id=registry_id, fee=fee, member_count=member_count, admin=admin)


class MemberInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    domain: str
    joined_at: int
    member: Optional[SuiAddress] = None

    @property
    def joined_at_datetime(self) -> datetime:
        return format_timestamp(self.joined_at)


class CanaryBlobInfo(BaseModel):
    """Everything ``get_full_info`` reports about a canary blob."""

    model_config = ConfigDict(frozen=True)

    id: SuiAddress
    contract_blob_id: SuiAddress
    explain_blob_id: SuiAddress
    package_id: SuiAddress
    domain: str
    uploaded_at: int
    uploaded_by_admin: SuiAddress

    @property
    def uploaded_at_datetime(self) -> datetime:
        return format_timestamp(self.uploaded_at)


class BlobIds(BaseModel):
    model_config = ConfigDict(frozen=True)

    contract_blob_id: SuiAddress
    explain_blob_id: SuiAddress
