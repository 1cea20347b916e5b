"""
Mock objects for testing.

``FakeTransport`` answers JSON-RPC methods from registered handlers and
records every call. ``FakeSui`` builds on it with a small in-memory ledger:
objects, coins, a reference gas price, dry-run costs, dev-inspect return
values and execution outcomes.
"""

import base64
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import base58

from canary_client.api_client import ClientConfig, SuiRpcClient
from canary_client.codec.hashes import transaction_digest
from canary_client.runtime.address import SuiAddress
from canary_client.transport.http import Transport

SUI_COIN = "0x2::coin::Coin<0x2::sui::SUI>"


def make_digest(seed: int) -> str:
    """A valid base58 object digest derived from ``seed``."""
    return base58.b58encode(bytes([seed % 256]) * 32).decode("ascii")


def make_address(seed: int) -> SuiAddress:
    return SuiAddress(f"0x{seed:064x}")


class FakeTransport(Transport):
    """Transport that dispatches JSON-RPC methods to in-process handlers."""

    def __init__(self):
        super().__init__("http://fake-node")
        self.handlers: Dict[str, Callable[[List[Any]], Any]] = {}
        self.failures: Dict[str, BaseException] = {}
        self.calls: List[Tuple[str, List[Any]]] = []
        self.closed = False

    def on(self, method: str, handler: Callable[[List[Any]], Any]) -> None:
        """Answer ``method`` with ``handler(params)``."""
        self.handlers[method] = handler

    def respond(self, method: str, result: Any) -> None:
        self.handlers[method] = lambda params: result

    def fail(self, method: str, error: BaseException) -> None:
        """Raise ``error`` from the transport for the next call to ``method``."""
        self.failures[method] = error

    def rpc_error(self, method: str, code: int, message: str) -> None:
        def handler(params):
            raise _RpcErrorResponse(code, message)
        self.handlers[method] = handler

    def calls_to(self, method: str) -> List[List[Any]]:
        return [params for name, params in self.calls if name == method]

    async def post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        method = payload["method"]
        params = payload["params"]
        self.calls.append((method, params))

        failure = self.failures.pop(method, None)
        if failure is not None:
            raise failure

        handler = self.handlers.get(method)
        if handler is None:
            return {"jsonrpc": "2.0", "id": payload["id"],
                    "error": {"code": -32601, "message": f"Method not found: {method}"}}
        try:
            result = handler(params)
        except _RpcErrorResponse as e:
            return {"jsonrpc": "2.0", "id": payload["id"],
                    "error": {"code": e.code, "message": e.message}}
        return {"jsonrpc": "2.0", "id": payload["id"], "result": result}

    async def close(self) -> None:
        self.closed = True


class _RpcErrorResponse(Exception):
    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class FakeSui:
    """
    In-memory Sui fullnode.

    Example:
        sui = FakeSui()
        coin = sui.add_coin(owner, 5_000_000_000)
        registry = sui.add_shared("0xcafe::member_registry::Registry", fields={"fee": "100"})
    """

    def __init__(self):
        self.transport = FakeTransport()
        self.rpc = SuiRpcClient(ClientConfig(endpoint="http://fake-node"), transport=self.transport)
        self.objects: Dict[SuiAddress, Dict[str, Any]] = {}
        self.deleted: set = set()
        self.coins: Dict[SuiAddress, List[SuiAddress]] = {}
        self._next = 0x100

        self.gas_price = 750
        self.gas_used = {
            "computationCost": "1000000",
            "storageCost": "2000000",
            "storageRebate": "500000",
            "nonRefundableStorageFee": "0",
        }
        self.dry_run_status: Dict[str, Any] = {"status": "success"}
        self.execute_status: Dict[str, Any] = {"status": "success"}
        self.return_values: List[Tuple[bytes, str]] = []
        self.return_queue: List[List[Tuple[bytes, str]]] = []
        self.inspect_status: Dict[str, Any] = {"status": "success"}
        self.object_changes: List[Dict[str, Any]] = []
        self.executed: List[Tuple[bytes, List[str]]] = []

        self.transport.on("sui_getObject", self._get_object)
        self.transport.on("suix_getCoins", self._get_coins)
        self.transport.on("suix_getBalance", self._get_balance)
        self.transport.on("suix_getReferenceGasPrice", lambda params: str(self.gas_price))
        self.transport.on("sui_dryRunTransactionBlock", self._dry_run)
        self.transport.on("sui_devInspectTransactionBlock", self._dev_inspect)
        self.transport.on("sui_executeTransactionBlock", self._execute)
        self.transport.on("sui_getTransactionBlock", self._get_transaction)

    # ------------------------------------------------------------------
    # Ledger setup
    # ------------------------------------------------------------------

    def _new_id(self) -> SuiAddress:
        self._next += 1
        return make_address(self._next)

    def add_object(self, owner: Any, type_: str, version: int = 3,
                   fields: Optional[Dict[str, Any]] = None,
                   object_id: Optional[Any] = None) -> SuiAddress:
        object_id = SuiAddress(object_id) if object_id is not None else self._new_id()
        self.objects[object_id] = {
            "objectId": str(object_id),
            "version": str(version),
            "digest": make_digest(version + self._next),
            "type": type_,
            "owner": owner,
            "content": {"dataType": "moveObject", "type": type_, "fields": fields or {}},
        }
        return object_id

    def add_owned(self, owner: Any, type_: str, **kwargs) -> SuiAddress:
        return self.add_object({"AddressOwner": str(SuiAddress(owner))}, type_, **kwargs)

    def add_shared(self, type_: str, initial_shared_version: int = 5, version: int = 9,
                   **kwargs) -> SuiAddress:
        owner = {"Shared": {"initial_shared_version": initial_shared_version}}
        return self.add_object(owner, type_, version=version, **kwargs)

    def add_coin(self, owner: Any, balance: int = 10_000_000_000, **kwargs) -> SuiAddress:
        owner = SuiAddress(owner)
        coin_id = self.add_owned(owner, SUI_COIN, fields={"balance": str(balance)}, **kwargs)
        self.coins.setdefault(owner, []).append(coin_id)
        return coin_id

    def delete(self, object_id: Any) -> None:
        object_id = SuiAddress(object_id)
        self.objects.pop(object_id, None)
        self.deleted.add(object_id)

    def reference(self, object_id: Any) -> Tuple[SuiAddress, int, str]:
        data = self.objects[SuiAddress(object_id)]
        return SuiAddress(data["objectId"]), int(data["version"]), data["digest"]

    def set_return_values(self, values: Sequence[Tuple[bytes, str]]) -> None:
        self.return_values = list(values)

    def queue_return_values(self, *calls: Sequence[Tuple[bytes, str]]) -> None:
        """Return values for the next dev-inspect calls, one list per call."""
        self.return_queue.extend(list(values) for values in calls)

    # ------------------------------------------------------------------
    # RPC handlers
    # ------------------------------------------------------------------

    def _get_object(self, params):
        object_id = SuiAddress(params[0])
        if object_id in self.deleted:
            return {"error": {"code": "deleted", "object_id": str(object_id)}}
        data = self.objects.get(object_id)
        if data is None:
            return {"error": {"code": "notExists", "object_id": str(object_id)}}
        return {"data": data}

    def _get_coins(self, params):
        owner = SuiAddress(params[0])
        data = []
        for coin_id in self.coins.get(owner, []):
            if coin_id not in self.objects:
                continue
            obj = self.objects[coin_id]
            data.append({
                "coinType": "0x2::sui::SUI",
                "coinObjectId": obj["objectId"],
                "version": obj["version"],
                "digest": obj["digest"],
                "balance": obj["content"]["fields"]["balance"],
            })
        return {"data": data, "nextCursor": None, "hasNextPage": False}

    def _get_balance(self, params):
        owner = SuiAddress(params[0])
        total = sum(int(self.objects[c]["content"]["fields"]["balance"])
                    for c in self.coins.get(owner, []) if c in self.objects)
        return {"coinType": "0x2::sui::SUI", "coinObjectCount": len(self.coins.get(owner, [])),
                "totalBalance": str(total)}

    def _dry_run(self, params):
        return {"effects": {"status": self.dry_run_status, "gasUsed": self.gas_used}}

    def _dev_inspect(self, params):
        values = self.return_queue.pop(0) if self.return_queue else self.return_values
        return {
            "effects": {"status": self.inspect_status, "gasUsed": self.gas_used},
            "results": [{"returnValues": [[list(raw), type_str]
                                          for raw, type_str in values]}],
            "events": [],
        }

    def _execute(self, params):
        tx_bytes = base64.b64decode(params[0])
        self.executed.append((tx_bytes, params[1]))
        return {
            "digest": transaction_digest(tx_bytes),
            "effects": {"status": self.execute_status, "gasUsed": self.gas_used},
            "events": [],
            "objectChanges": self.object_changes,
        }

    def _get_transaction(self, params):
        for tx_bytes, _ in self.executed:
            if transaction_digest(tx_bytes) == params[0]:
                return {"digest": params[0],
                        "effects": {"status": self.execute_status, "gasUsed": self.gas_used}}
        raise _RpcErrorResponse(-32602, f"Could not find the referenced transaction {params[0]}")
