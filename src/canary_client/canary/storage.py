"""
``pkg_storage`` operations: canary blob lifecycle and lookups.
"""

from __future__ import annotations

import logging
from typing import Union

from ..objects import clock_arg
from ..runtime.address import SuiAddress
from ..tx.arguments import pure_address, pure_string
from ..tx.execute import TransactionResponse
from .contract import CanaryContract
from .models import BlobIds, CanaryBlobInfo
from .targets import CallTarget

logger = logging.getLogger(__name__)

AddressLike = Union[str, SuiAddress]


class PackageStorage(CanaryContract):
    """
    Wrapper for the ``pkg_storage`` module.

    A canary blob records, for one domain and package, the ids of the
    contract and explanation blobs stored off chain.
    """

    async def store_blob(self, registry_id: AddressLike, admin_cap_id: AddressLike, domain: str,
                         contract_blob_id: AddressLike, explain_blob_id: AddressLike,
                         package_id: AddressLike) -> TransactionResponse:
        """
        Create the canary blob for ``domain`` and ``package_id`` (admin only).

        Args:
            registry_id: Registry object id
            admin_cap_id: AdminCap owned by the signer
            domain: Domain the package belongs to
            contract_blob_id: Blob id of the contract source
            explain_blob_id: Blob id of the explanation
            package_id: Package the blob describes

        Raises:
            ExecutionError: ``E_DERIVED_OBJECT_ALREADY_EXISTS`` if a blob for
                this domain and package already exists
        """
        registry = await self.resolver.resolve(registry_id)
        admin_cap = await self.resolver.call_arg(admin_cap_id)
        assembler = self.assembler()
        assembler.call(CallTarget.STORE_BLOB, self.package_for(registry), [
            registry.to_call_arg(mutable=True),
            admin_cap,
            pure_string(domain),
            pure_address(contract_blob_id),
            pure_address(explain_blob_id),
            pure_address(package_id),
            clock_arg(),
        ])
        logger.info(f"Storing canary blob for {domain!r} in registry {registry.object_id.short()}")
        return await self._submit(assembler, "store_blob")

    async def update_blob(self, registry_id: AddressLike, admin_cap_id: AddressLike,
                          canary_blob_id: AddressLike, new_contract_blob_id: AddressLike,
                          new_explain_blob_id: AddressLike) -> TransactionResponse:
        """Point an existing canary blob at new contract and explanation blobs (admin only)."""
        registry = await self.resolver.resolve(registry_id)
        admin_cap = await self.resolver.call_arg(admin_cap_id)
        canary_blob = await self.resolver.call_arg(canary_blob_id, mutable=True)
        assembler = self.assembler()
        assembler.call(CallTarget.UPDATE_BLOB, self.package_for(registry), [
            registry.to_call_arg(mutable=False),
            admin_cap,
            canary_blob,
            pure_address(new_contract_blob_id),
            pure_address(new_explain_blob_id),
            clock_arg(),
        ])
        logger.info(f"Updating canary blob {SuiAddress(canary_blob_id).short()}")
        return await self._submit(assembler, "update_blob")

    async def delete_canary_blob(self, registry_id: AddressLike, admin_cap_id: AddressLike,
                                 canary_blob_id: AddressLike) -> TransactionResponse:
        registry = await self.resolver.resolve(registry_id)
        admin_cap = await self.resolver.call_arg(admin_cap_id)
        canary_blob = await self.resolver.call_arg(canary_blob_id, mutable=True)
        assembler = self.assembler()
        assembler.call(CallTarget.DELETE_CANARY_BLOB, self.package_for(registry), [
            registry.to_call_arg(mutable=False),
            admin_cap,
            canary_blob,
        ])
        logger.info(f"Deleting canary blob {SuiAddress(canary_blob_id).short()}")
        return await self._submit(assembler, "delete_canary_blob")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def derive_canary_address(self, registry_id: AddressLike, domain: str,
                                    package_id: AddressLike) -> SuiAddress:
        """
        Address the canary blob for ``domain`` and ``package_id`` has (or will have).

        Computed by the contract's own ``derive_canary_address`` view, so it
        always matches what ``store_blob`` creates.

        Raises:
            DecodeError: If the view returns anything but a 32-byte address
        """
        registry = await self.resolver.resolve(registry_id)
        (address,) = await self._view(self.package_for(registry), CallTarget.DERIVE_CANARY_ADDRESS, [
            registry.to_call_arg(mutable=False),
            pure_string(domain),
            pure_address(package_id),
        ])
        return address

    async def canary_exists(self, registry_id: AddressLike, domain: str,
                            package_id: AddressLike) -> bool:
        registry = await self.resolver.resolve(registry_id)
        (exists,) = await self._view(self.package_for(registry), CallTarget.CANARY_EXISTS, [
            registry.to_call_arg(mutable=False),
            pure_string(domain),
            pure_address(package_id),
        ])
        return exists

    async def query_canary_blob(self, canary_blob_id: AddressLike) -> CanaryBlobInfo:
        """
        Full description of a canary blob.

        Raises:
            NotFoundError: If the blob does not exist or was deleted
            DecodeError: If the view result does not have six values of the
                expected types
        """
        blob = await self.resolver.resolve(canary_blob_id)
        (contract_blob_id, explain_blob_id, package_id, domain, uploaded_at,
         uploaded_by_admin) = await self._view(self.package_for(blob), CallTarget.GET_FULL_INFO,
                                               [blob.to_call_arg(mutable=False)])
        return CanaryBlobInfo(
            id=blob.object_id,
            contract_blob_id=contract_blob_id,
            explain_blob_id=explain_blob_id,
            package_id=package_id,
            domain=domain,
            uploaded_at=uploaded_at,
            uploaded_by_admin=uploaded_by_admin,
        )

    async def get_blob_ids(self, canary_blob_id: AddressLike) -> BlobIds:
        blob = await self.resolver.resolve(canary_blob_id)
        contract_blob_id, explain_blob_id = await self._view(
            self.package_for(blob), CallTarget.GET_BLOB_IDS, [blob.to_call_arg(mutable=False)])
        return BlobIds(contract_blob_id=contract_blob_id, explain_blob_id=explain_blob_id)
