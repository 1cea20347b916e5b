"""
Environment driven configuration for Canary workers.

Variables:
    SUI_NETWORK            mainnet, testnet, devnet, localnet or a URL (default testnet)
    SUI_RPC_URL            custom fullnode URL, overrides SUI_NETWORK
    SUI_PRIVATE_KEY        suiprivkey1... or base64 keystore entry
    CANARY_PACKAGE_ID      Canary package id
    CANARY_REGISTRY_ID     Registry object id
    TASK_INTERVAL_SECONDS  polling interval for workers (default 3600)
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from .api_client import NETWORKS, ClientConfig, resolve_endpoint
from .runtime.address import SuiAddress

DEFAULT_NETWORK = "testnet"
DEFAULT_TASK_INTERVAL = 3600


class CanaryConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    network: str = DEFAULT_NETWORK
    rpc_url: Optional[str] = None
    private_key: Optional[SecretStr] = None
    package_id: Optional[SuiAddress] = None
    registry_id: Optional[SuiAddress] = None
    task_interval_seconds: int = Field(default=DEFAULT_TASK_INTERVAL, gt=0)
    timeout: float = Field(default=30.0, gt=0)

    @field_validator("network")
    @classmethod
    def _known_network(cls, value: str) -> str:
        value = value.strip()
        if value.startswith(("http://", "https://")):
            return value
        if value.lower() not in NETWORKS:
            raise ValueError(f"Unknown network {value!r}; expected one of {sorted(NETWORKS)} or a URL")
        return value.lower()

    @property
    def endpoint(self) -> str:
        """RPC URL: the custom one if set, else the network preset."""
        return self.rpc_url or resolve_endpoint(self.network)

    def client_config(self, **overrides) -> ClientConfig:
        options = {"endpoint": self.endpoint, "timeout": self.timeout}
        options.update(overrides)
        return ClientConfig(**options)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> CanaryConfig:
        """
        Read the configuration from environment variables.

        Empty variables count as unset.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Raises:
            pydantic.ValidationError: On an unknown network, an invalid
                object id or a non-positive interval
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            value = env.get(name)
            return value.strip() if value and value.strip() else None

        values = {
            "network": get("SUI_NETWORK"),
            "rpc_url": get("SUI_RPC_URL"),
            "private_key": get("SUI_PRIVATE_KEY"),
            "package_id": get("CANARY_PACKAGE_ID"),
            "registry_id": get("CANARY_REGISTRY_ID"),
            "task_interval_seconds": get("TASK_INTERVAL_SECONDS"),
        }
        return cls(**{k: v for k, v in values.items() if v is not None})
