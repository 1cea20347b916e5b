"""
Canary client facade.

The ``CanaryClient`` bundles an RPC client, an optional signer and the two
contract wrappers behind one entry point.

Example:
    ```python
    from canary_client import CanaryClient, KeyPairSigner

    signer = KeyPairSigner.from_private_key("suiprivkey1...")
    async with CanaryClient.testnet(signer=signer) as canary:
        info = await canary.registry.query_registry(registry_id)
        await canary.registry.join_registry(registry_id, "example.com")
    ```
"""

from __future__ import annotations

from typing import Optional, Union

from .api_client import ClientConfig, SuiRpcClient
from .canary.registry import MemberRegistry
from .canary.storage import PackageStorage
from .canary.targets import describe_abort
from .config import CanaryConfig
from .objects import ObjectResolver
from .runtime.address import SuiAddress
from .runtime.errors import BuildError
from .signers.signer import KeyPairSigner, Signer
from .transport.http import Transport
from .tx.builder import TransactionAssembler
from .tx.execute import TransactionResponse, reconcile, sign_and_submit


class CanaryClient:
    """
    Entry point for Canary operations.

    Attributes:
        rpc: Sui JSON-RPC client
        resolver: Object resolver shared by every operation
        registry: ``member_registry`` operations
        storage: ``pkg_storage`` operations
    """

    def __init__(self, endpoint: Union[str, ClientConfig, SuiRpcClient] = "testnet",
                 signer: Optional[Signer] = None,
                 package_id: Optional[Union[str, SuiAddress]] = None,
                 registry_id: Optional[Union[str, SuiAddress]] = None,
                 transport: Optional[Transport] = None):
        """
        Initialize the client.

        Args:
            endpoint: Network name, URL, ClientConfig or an existing RPC client
            signer: Signer for transactions; queries work without one
            package_id: Canary package id, discovered from object types when omitted
            registry_id: Default registry for ``registry_id``-less helpers
            transport: Transport for a newly created RPC client
        """
        if isinstance(endpoint, SuiRpcClient):
            self.rpc = endpoint
        else:
            self.rpc = SuiRpcClient(endpoint, transport=transport)
        self.signer = signer
        self.registry_id = SuiAddress(registry_id) if registry_id is not None else None
        self.resolver = ObjectResolver(self.rpc)
        self.registry = MemberRegistry(self.rpc, signer, package_id, self.resolver)
        self.storage = PackageStorage(self.rpc, signer, package_id, self.resolver)

    # =========================================================================
    # Factories
    # =========================================================================

    @classmethod
    def mainnet(cls, **kwargs) -> CanaryClient:
        return cls("mainnet", **kwargs)

    @classmethod
    def testnet(cls, **kwargs) -> CanaryClient:
        return cls("testnet", **kwargs)

    @classmethod
    def devnet(cls, **kwargs) -> CanaryClient:
        return cls("devnet", **kwargs)

    @classmethod
    def localnet(cls, **kwargs) -> CanaryClient:
        return cls("localnet", **kwargs)

    @classmethod
    def from_config(cls, config: CanaryConfig,
                    transport: Optional[Transport] = None) -> CanaryClient:
        """
        Build a client from a ``CanaryConfig``.

        The signer is created from ``config.private_key`` when one is set.
        """
        signer = None
        if config.private_key is not None:
            signer = KeyPairSigner.from_private_key(config.private_key.get_secret_value())
        return cls(config.client_config(), signer=signer, package_id=config.package_id,
                   registry_id=config.registry_id, transport=transport)

    @classmethod
    def from_env(cls, transport: Optional[Transport] = None) -> CanaryClient:
        return cls.from_config(CanaryConfig.from_env(), transport=transport)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def __aenter__(self) -> CanaryClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        await self.rpc.close()

    # =========================================================================
    # Plain transactions
    # =========================================================================

    @property
    def address(self) -> Optional[SuiAddress]:
        return self.signer.address if self.signer is not None else None

    def _default_registry(self, registry_id: Optional[Union[str, SuiAddress]]) -> SuiAddress:
        if registry_id is not None:
            return SuiAddress(registry_id)
        if self.registry_id is None:
            raise BuildError("No registry id given and no default registry configured")
        return self.registry_id

    def assembler(self) -> TransactionAssembler:
        """A fresh assembler for the signer's address."""
        return self.registry.assembler()

    async def execute(self, assembler: TransactionAssembler) -> TransactionResponse:
        """Finalize, sign and submit an assembler built by the caller."""
        if self.signer is None:
            raise BuildError("A signer is required to submit transactions")
        payload = await assembler.finalize()
        return await sign_and_submit(self.rpc, payload, self.signer,
                                     describe_abort=describe_abort)

    async def transfer_sui(self, recipient: Union[str, SuiAddress],
                           amount: int) -> TransactionResponse:
        """Send ``amount`` MIST to ``recipient``."""
        assembler = self.assembler()
        assembler.transfer_sui(recipient, amount)
        return await self.execute(assembler)

    async def get_balance(self, owner: Optional[Union[str, SuiAddress]] = None) -> int:
        """SUI balance in MIST of ``owner``, the signer by default."""
        owner = owner if owner is not None else self.address
        if owner is None:
            raise BuildError("No owner given and no signer configured")
        return await self.rpc.get_balance(owner)

    async def reconcile(self, digest: str) -> Optional[TransactionResponse]:
        """Look up the outcome of a submission that ended in ``UnknownOutcomeError``."""
        return await reconcile(self.rpc, digest)

    # =========================================================================
    # Registry shortcuts (default registry)
    # =========================================================================

    async def join_registry(self, domain: str, registry_id: Optional[Union[str, SuiAddress]] = None,
                            payment_coin: Optional[Union[str, SuiAddress]] = None
                            ) -> TransactionResponse:
        return await self.registry.join_registry(self._default_registry(registry_id), domain,
                                                 payment_coin)

    async def is_member(self, address: Optional[Union[str, SuiAddress]] = None,
                        registry_id: Optional[Union[str, SuiAddress]] = None) -> bool:
        """Whether ``address`` (the signer by default) belongs to the registry."""
        address = address if address is not None else self.address
        if address is None:
            raise BuildError("No address given and no signer configured")
        return await self.registry.is_member(self._default_registry(registry_id), address)

    def __repr__(self) -> str:
        return f"CanaryClient(endpoint='{self.rpc.endpoint}', address={self.address})"
