"""Remote user directory client library.

Architecture:
- client.py: HTTP client for find/search/count/verify
- headers.py: Inbound header forwarding
- entities.py: Wire entities and JSON decoding
- http_logging.py: Optional request/response tracing
- exceptions.py: Typed exceptions for error handling

Usage:
    from user_federation.config import load_settings
    from user_federation.core.remote import RemoteUserClient

    client = RemoteUserClient(load_settings())
    user = client.find_by_email("alice@example.com")
"""
from .client import (
    RemoteUserClient,
    USER_AGENT,
)
from .entities import (
    RemoteUserEntity,
    RemoteCredentialInput,
    UserCountResponse,
    VerifyPasswordResponse,
    decode_user,
    decode_users,
    decode_count,
    decode_verify,
    parse_user,
    parse_users,
    parse_count,
    parse_verify,
)
from .exceptions import (
    RemoteDirectoryError,
    DirectoryConfigError,
    EntityDecodeError,
    UserSearchError,
)
from .headers import (
    HeaderForwarder,
    HeaderSource,
    forwarded_headers,
    no_inbound_request,
)
from .http_logging import HttpTraceLogger

__all__ = [
    # Client
    "RemoteUserClient",
    "USER_AGENT",

    # Entities
    "RemoteUserEntity",
    "RemoteCredentialInput",
    "UserCountResponse",
    "VerifyPasswordResponse",
    "decode_user",
    "decode_users",
    "decode_count",
    "decode_verify",
    "parse_user",
    "parse_users",
    "parse_count",
    "parse_verify",

    # Exceptions
    "RemoteDirectoryError",
    "DirectoryConfigError",
    "EntityDecodeError",
    "UserSearchError",

    # Headers
    "HeaderForwarder",
    "HeaderSource",
    "forwarded_headers",
    "no_inbound_request",

    # Tracing
    "HttpTraceLogger",
]
