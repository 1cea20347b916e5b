"""
Sui JSON-RPC API Client

Async client for the subset of the Sui fullnode JSON-RPC API used by the
Canary client: object reads, coin listing, gas price, dry run, dev inspect,
execution and transaction lookup. The client never retries on its own.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from .runtime.address import SuiAddress
from .runtime.errors import NetworkError, error_from_response
from .transport.http import AiohttpTransport, Transport

SUI_COIN_TYPE = "0x2::sui::SUI"

# Well-known endpoints
NETWORKS: Dict[str, str] = {
    "localnet": "http://127.0.0.1:9000",
    "devnet": "https://fullnode.devnet.sui.io:443",
    "testnet": "https://fullnode.testnet.sui.io:443",
    "mainnet": "https://fullnode.mainnet.sui.io:443",
}

DEFAULT_OBJECT_OPTIONS = {"showType": True, "showOwner": True, "showContent": True}
DEFAULT_EXECUTE_OPTIONS = {
    "showEffects": True,
    "showEvents": True,
    "showObjectChanges": True,
    "showBalanceChanges": True,
}


def resolve_endpoint(endpoint: str) -> str:
    """
    Map a network name to its fullnode URL; URLs are returned unchanged.

    Args:
        endpoint: ``mainnet``, ``testnet``, ``devnet``, ``localnet`` or a URL
    """
    return NETWORKS.get(endpoint.strip().lower(), endpoint.strip())


@dataclass
class ClientConfig:
    """Configuration for the Sui JSON-RPC client."""

    endpoint: str = "testnet"
    timeout: float = 30.0
    debug: bool = False
    verify_ssl: bool = True
    user_agent: str = "canary-client-python/0.3.0"

    @property
    def url(self) -> str:
        return resolve_endpoint(self.endpoint)


class SuiRpcClient:
    """
    Sui JSON-RPC client.

    Usage:
        async with SuiRpcClient("testnet") as rpc:
            price = await rpc.get_reference_gas_price()
    """

    def __init__(self, config: Union[str, ClientConfig, None] = None,
                 transport: Optional[Transport] = None):
        """
        Initialize the client.

        Args:
            config: Network name, endpoint URL or a ClientConfig object
            transport: Transport to use instead of the default aiohttp one
        """
        if config is None:
            self.config = ClientConfig()
        elif isinstance(config, str):
            self.config = ClientConfig(endpoint=config)
        else:
            self.config = config

        self.logger = logging.getLogger(__name__)
        self.endpoint = self.config.url
        self.transport = transport or AiohttpTransport(
            self.endpoint,
            timeout=self.config.timeout,
            verify_ssl=self.config.verify_ssl,
            user_agent=self.config.user_agent,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    async def call(self, method: str, params: Sequence[Any] = ()) -> Any:
        """
        Make a JSON-RPC request.

        Args:
            method: RPC method name
            params: Positional parameters

        Returns:
            The ``result`` member of the response

        Raises:
            RpcError: If the node returned an error object
            NetworkError: On transport failures
        """
        payload = {
            "jsonrpc": "2.0",
            "id": int(time.time() * 1000000),
            "method": method,
            "params": list(params),
        }

        if self.config.debug:
            self.logger.debug(f"Request: {method} -> {json.dumps(payload)}")

        response = await self.transport.post(payload)

        if self.config.debug:
            self.logger.debug(f"Response: {method} <- {json.dumps(response)}")

        if not isinstance(response, dict):
            raise NetworkError(f"Malformed JSON-RPC response for {method}",
                               details={"response": response})
        error = error_from_response(response)
        if error is not None:
            error.details.setdefault("method", method)
            raise error
        return response.get("result")

    async def get_object(self, object_id: Union[str, SuiAddress],
                         options: Optional[Dict[str, bool]] = None) -> Dict[str, Any]:
        """
        ``sui_getObject``. Returns the raw response with ``data`` or ``error``.
        """
        return await self.call("sui_getObject", [str(SuiAddress(object_id)),
                                                 options or DEFAULT_OBJECT_OPTIONS])

    async def get_coins(self, owner: Union[str, SuiAddress], coin_type: str = SUI_COIN_TYPE,
                        cursor: Optional[str] = None, limit: Optional[int] = None) -> Dict[str, Any]:
        """``suix_getCoins``: one page of ``{data, nextCursor, hasNextPage}``."""
        return await self.call("suix_getCoins", [str(SuiAddress(owner)), coin_type, cursor, limit])

    async def get_all_coins(self, owner: Union[str, SuiAddress],
                            coin_type: str = SUI_COIN_TYPE) -> List[Dict[str, Any]]:
        """All coins of a type owned by an address, following pagination."""
        coins: List[Dict[str, Any]] = []
        cursor = None
        while True:
            page = await self.get_coins(owner, coin_type, cursor)
            coins.extend(page.get("data", []))
            if not page.get("hasNextPage"):
                return coins
            cursor = page.get("nextCursor")

    async def get_balance(self, owner: Union[str, SuiAddress],
                          coin_type: str = SUI_COIN_TYPE) -> int:
        result = await self.call("suix_getBalance", [str(SuiAddress(owner)), coin_type])
        return int(result["totalBalance"])

    async def get_reference_gas_price(self) -> int:
        return int(await self.call("suix_getReferenceGasPrice"))

    async def dry_run_transaction_block(self, tx_bytes_b64: str) -> Dict[str, Any]:
        return await self.call("sui_dryRunTransactionBlock", [tx_bytes_b64])

    async def dev_inspect_transaction_block(self, sender: Union[str, SuiAddress],
                                            tx_kind_b64: str,
                                            gas_price: Optional[int] = None,
                                            epoch: Optional[int] = None) -> Dict[str, Any]:
        return await self.call("sui_devInspectTransactionBlock", [
            str(SuiAddress(sender)),
            tx_kind_b64,
            str(gas_price) if gas_price is not None else None,
            str(epoch) if epoch is not None else None,
        ])

    async def execute_transaction_block(self, tx_bytes_b64: str, signatures: Sequence[str],
                                        options: Optional[Dict[str, bool]] = None,
                                        request_type: str = "WaitForLocalExecution") -> Dict[str, Any]:
        return await self.call("sui_executeTransactionBlock", [
            tx_bytes_b64,
            list(signatures),
            options or DEFAULT_EXECUTE_OPTIONS,
            request_type,
        ])

    async def get_transaction_block(self, digest: str,
                                    options: Optional[Dict[str, bool]] = None) -> Dict[str, Any]:
        return await self.call("sui_getTransactionBlock",
                               [digest, options or {"showEffects": True, "showEvents": True}])

    def __repr__(self) -> str:
        return f"SuiRpcClient(endpoint='{self.endpoint}')"
