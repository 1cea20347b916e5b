"""
HTTP transports for JSON-RPC.

A transport posts one JSON-RPC payload and returns the decoded response
body. It distinguishes failures where the request never left the client
(``ConnectionError``) from failures after it may have reached the node
(``TimeoutError`` and other ``NetworkError``s). Callers that submit
transactions rely on that distinction.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import aiohttp
import requests

from ..runtime.errors import ConnectionError, NetworkError, TimeoutError

logger = logging.getLogger(__name__)


class Transport(ABC):
    """Posts JSON-RPC payloads to one endpoint."""

    def __init__(self, endpoint: str, timeout: float = 30.0, verify_ssl: bool = True,
                 user_agent: Optional[str] = None):
        self.endpoint = endpoint
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.headers = {"Content-Type": "application/json"}
        if user_agent:
            self.headers["User-Agent"] = user_agent

    @abstractmethod
    async def post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send one JSON-RPC request.

        Args:
            payload: JSON-RPC request object

        Returns:
            Decoded JSON-RPC response object

        Raises:
            ConnectionError: If no connection could be established
            TimeoutError: If no response arrived in time
            NetworkError: On any other transport failure or HTTP error status
        """

    async def close(self) -> None:
        """Release connections held by the transport."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _check_status(self, status: int, body: str) -> None:
        if status >= 400:
            raise NetworkError(
                f"HTTP {status} from {self.endpoint}",
                details={"status": status, "body": body[:512]},
            )


class AiohttpTransport(Transport):
    """Transport over a lazily created ``aiohttp.ClientSession``."""

    def __init__(self, endpoint: str, timeout: float = 30.0, verify_ssl: bool = True,
                 user_agent: Optional[str] = None,
                 session: Optional[aiohttp.ClientSession] = None):
        super().__init__(endpoint, timeout, verify_ssl, user_agent)
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(ssl=self.verify_ssl)
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=self.headers,
            )
            self._owns_session = True
            logger.debug(f"Created new session for {self.endpoint}")
        return self._session

    async def post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        session = await self._get_session()
        try:
            async with session.post(self.endpoint, json=payload) as response:
                body = await response.text()
                self._check_status(response.status, body)
                return await response.json(content_type=None)
        except aiohttp.ClientConnectorError as e:
            raise ConnectionError(f"Cannot connect to {self.endpoint}: {e}", cause=e) from e
        except asyncio.TimeoutError as e:
            raise TimeoutError(f"Request to {self.endpoint} timed out after {self.timeout}s",
                               cause=e) from e
        except (aiohttp.ClientError, ValueError) as e:
            raise NetworkError(f"Request to {self.endpoint} failed: {e}", cause=e) from e

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
            logger.debug(f"Closed session for {self.endpoint}")


class RequestsTransport(Transport):
    """
    Transport over a blocking ``requests.Session``.

    Requests run in the event loop's default executor so the coroutine API is
    the same as ``AiohttpTransport``.
    """

    def __init__(self, endpoint: str, timeout: float = 30.0, verify_ssl: bool = True,
                 user_agent: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        super().__init__(endpoint, timeout, verify_ssl, user_agent)
        self._session = session or requests.Session()
        self._session.headers.update(self.headers)

    def _post_blocking(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self._session.post(self.endpoint, json=payload, timeout=self.timeout,
                                          verify=self.verify_ssl)
        except requests.exceptions.ConnectTimeout as e:
            raise ConnectionError(f"Cannot connect to {self.endpoint}: {e}", cause=e) from e
        except requests.exceptions.Timeout as e:
            raise TimeoutError(f"Request to {self.endpoint} timed out after {self.timeout}s",
                               cause=e) from e
        except requests.exceptions.RequestException as e:
            # requests cannot tell a refused connection from a dropped one
            raise NetworkError(f"Request to {self.endpoint} failed: {e}", cause=e) from e
        self._check_status(response.status_code, response.text)
        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(f"Invalid JSON from {self.endpoint}", cause=e) from e

    async def post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(self._post_blocking, payload))

    async def close(self) -> None:
        self._session.close()
