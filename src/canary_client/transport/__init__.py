"""
Transport layer for the Canary client.

Provides HTTP transport implementations for JSON-RPC.
"""

from .http import AiohttpTransport, RequestsTransport, Transport

__all__ = [
    "AiohttpTransport",
    "RequestsTransport",
    "Transport",
]
