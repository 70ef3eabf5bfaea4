"""
API Layer - Namecheap XML API gateway
Request building, transport, normalization and typed projections

Only the error taxonomy and Result are re-exported here; import the client
and models from their modules, since utils.config depends on this package.
"""

# Exceptions
from namecheap_cli.api.exceptions import (
    ApiMessage,
    AuthenticationError,
    NamecheapError,
    NetworkError,
    ProtocolError,
    RemoteError,
    ValidationError,
)

# Result values
from namecheap_cli.api.result import Result, returns_result

__all__ = [
    "ApiMessage",
    "NamecheapError",
    "ValidationError",
    "AuthenticationError",
    "NetworkError",
    "ProtocolError",
    "RemoteError",
    "Result",
    "returns_result",
]
