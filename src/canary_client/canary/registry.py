"""
``member_registry`` operations: joining, admin actions and membership queries.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from ..objects import ResolvedObject, clock_arg
from ..runtime.address import SuiAddress
from ..runtime.errors import DecodeError
from ..tx.arguments import pure_address, pure_string, pure_u64
from ..tx.execute import TransactionResponse
from ..tx.types import GasCoin, NestedResult, PureArg
from .contract import CanaryContract
from .models import MemberInfo, RegistryInfo
from .targets import CallTarget

logger = logging.getLogger(__name__)

AddressLike = Union[str, SuiAddress]


def registry_fee(registry: ResolvedObject) -> int:
    """
    Membership fee in MIST from a resolved Registry object.

    Raises:
        DecodeError: If the object has no numeric ``fee`` field
    """
    try:
        return int(registry.fields["fee"])
    except (KeyError, TypeError, ValueError) as exc:
        raise DecodeError(f"Registry {registry.object_id} has no readable fee",
                          details={"fields": registry.fields}, cause=exc) from exc


class MemberRegistry(CanaryContract):
    """
    Wrapper for the ``member_registry`` module.

    Usage:
        registry = MemberRegistry(rpc, signer)
        await registry.join_registry(registry_id, "example.com")
        info = await registry.query_registry(registry_id)
    """

    async def join_registry(self, registry_id: AddressLike, domain: str,
                            payment_coin: Optional[AddressLike] = None) -> TransactionResponse:
        """
        Join a registry by paying its fee.

        Args:
            registry_id: Registry object id
            domain: Domain to register the member under
            payment_coin: Coin to pay with; when omitted the exact fee is
                split from the gas coin in the same transaction

        Returns:
            Transaction response

        Raises:
            ExecutionError: If the contract rejects the join (for example
                ``E_ALREADY_MEMBER`` or ``E_INSUFFICIENT_PAYMENT``)
        """
        registry = await self.resolver.resolve(registry_id)
        package = self.package_for(registry)
        assembler = self.assembler()

        if payment_coin is not None:
            coin = await self.resolver.call_arg(payment_coin)
        else:
            split = assembler.split_coins(GasCoin(), [registry_fee(registry)])
            coin = NestedResult(split.index, 0)

        assembler.call(CallTarget.JOIN_REGISTRY, package, [
            registry.to_call_arg(mutable=True),
            coin,
            pure_string(domain),
            clock_arg(),
        ])
        logger.info(f"Joining registry {registry.object_id.short()} as {domain!r}")
        return await self._submit(assembler, "join_registry")

    async def _admin_call(self, target: CallTarget, registry_id: AddressLike,
                          admin_cap_id: AddressLike, value: PureArg) -> TransactionResponse:
        registry = await self.resolver.resolve(registry_id)
        admin_cap = await self.resolver.call_arg(admin_cap_id)
        assembler = self.assembler()
        assembler.call(target, self.package_for(registry), [
            registry.to_call_arg(mutable=True),
            admin_cap,
            value,
        ])
        logger.info(f"Issuing {target.function} on registry {registry.object_id.short()}")
        return await self._submit(assembler, target.function)

    async def withdraw(self, registry_id: AddressLike, admin_cap_id: AddressLike,
                       amount: int) -> TransactionResponse:
        """Withdraw ``amount`` MIST of collected fees (admin only)."""
        return await self._admin_call(CallTarget.WITHDRAW, registry_id, admin_cap_id,
                                      pure_u64(amount))

    async def update_fee(self, registry_id: AddressLike, admin_cap_id: AddressLike,
                         new_fee: int) -> TransactionResponse:
        """Set the membership fee in MIST (admin only)."""
        return await self._admin_call(CallTarget.UPDATE_FEE, registry_id, admin_cap_id,
                                      pure_u64(new_fee))

    async def remove_member(self, registry_id: AddressLike, admin_cap_id: AddressLike,
                            member: AddressLike) -> TransactionResponse:
        return await self._admin_call(CallTarget.REMOVE_MEMBER, registry_id, admin_cap_id,
                                      pure_address(member))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def query_registry(self, registry_id: AddressLike) -> RegistryInfo:
        """
        Read a registry's fee, member count and admin.

        Raises:
            NotFoundError: If the registry does not exist
            DecodeError: If the registry fields are malformed
        """
        registry = await self.resolver.resolve(registry_id)
        (admin,) = await self._view(self.package_for(registry), CallTarget.GET_ADMIN,
                                    [registry.to_call_arg(mutable=False)])
        return RegistryInfo.from_fields(registry.object_id, registry.fields, admin)

    async def is_member(self, registry_id: AddressLike, address: AddressLike) -> bool:
        registry = await self.resolver.resolve(registry_id)
        (member,) = await self._view(self.package_for(registry), CallTarget.IS_MEMBER,
                                     [registry.to_call_arg(mutable=False), pure_address(address)])
        return member

    async def query_member(self, registry_id: AddressLike,
                           address: AddressLike) -> Optional[MemberInfo]:
        """
        Membership record of an address.

        Returns:
            The record, or None if the address is not a member
        """
        address = SuiAddress(address)
        registry = await self.resolver.resolve(registry_id)
        package = self.package_for(registry)
        registry_arg = registry.to_call_arg(mutable=False)

        (member,) = await self._view(package, CallTarget.IS_MEMBER,
                                     [registry_arg, pure_address(address)])
        if not member:
            return None
        domain, joined_at = await self._view(package, CallTarget.GET_MEMBER_INFO,
                                             [registry_arg, pure_address(address)])
        return MemberInfo(member=address, domain=domain, joined_at=joined_at)

    async def list_members(self, registry_id: AddressLike) -> List[MemberInfo]:
        """All members of a registry, in the order the contract returns them."""
        registry = await self.resolver.resolve(registry_id)
        (entries,) = await self._view(self.package_for(registry), CallTarget.GET_ALL_MEMBERS,
                                      [registry.to_call_arg(mutable=False)])
        return [MemberInfo(**entry) for entry in entries]

    async def get_fee(self, registry_id: AddressLike) -> int:
        """Current membership fee in MIST, read from the registry object."""
        return registry_fee(await self.resolver.resolve(registry_id))
