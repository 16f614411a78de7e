"""Wire entities exchanged with the remote user directory.

Decoding is lenient about unknown fields and missing optional strings,
strict about types: a value of the wrong JSON type raises
EntityDecodeError so the client can apply its per-operation policy.
"""
from __future__ import annotations
import json
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .exceptions import EntityDecodeError

RawBody = Union[bytes, str]


@dataclass(frozen=True)
class RemoteUserEntity:
    """One user record as returned by the remote directory."""
    id: str
    user_name: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    email_verified: bool = False
    enabled: bool = False
    created_at: str = ""
    roles: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Return the wire (camelCase) representation."""
        return {
            "id": self.id,
            "userName": self.user_name,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "emailVerified": self.email_verified,
            "enabled": self.enabled,
            "createdAt": self.created_at,
            "roles": list(self.roles),
        }


@dataclass(frozen=True)
class RemoteCredentialInput:
    """Credential payload for the verify endpoint."""
    username: str
    password: str = field(repr=False)

    def to_json(self) -> str:
        return json.dumps({"username": self.username, "password": self.password})


@dataclass(frozen=True)
class UserCountResponse:
    count: int = 0


@dataclass(frozen=True)
class VerifyPasswordResponse:
    valid: bool = False


# ─────────────────────────────────────────────────────────────────────────────
# Field helpers
# ─────────────────────────────────────────────────────────────────────────────
def _string(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise EntityDecodeError(f"field '{key}' must be a string, got {type(value).__name__}")
    return value


def _boolean(data: dict, key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise EntityDecodeError(f"field '{key}' must be a boolean, got {type(value).__name__}")
    return value


def _roles(data: dict) -> tuple[str, ...]:
    value = data.get("roles")
    if value is None:
        return ()
    if not isinstance(value, list):
        raise EntityDecodeError(f"field 'roles' must be an array, got {type(value).__name__}")
    for role in value:
        if not isinstance(role, str):
            raise EntityDecodeError("field 'roles' must contain only strings")
    return tuple(value)


def _require_object(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise EntityDecodeError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


# ─────────────────────────────────────────────────────────────────────────────
# Decoders (already-parsed JSON)
# ─────────────────────────────────────────────────────────────────────────────
def decode_user(data: Any) -> RemoteUserEntity:
    """Decode a single user object.

    Raises:
        EntityDecodeError: If the object is malformed or lacks id/userName
    """
    data = _require_object(data, "user")
    user_id = _string(data, "id")
    user_name = _string(data, "userName")
    if not user_id or not user_name:
        raise EntityDecodeError("user record requires non-empty 'id' and 'userName'")
    return RemoteUserEntity(
        id=user_id,
        user_name=user_name,
        first_name=_string(data, "firstName"),
        last_name=_string(data, "lastName"),
        email=_string(data, "email"),
        email_verified=_boolean(data, "emailVerified"),
        enabled=_boolean(data, "enabled"),
        created_at=_string(data, "createdAt"),
        roles=_roles(data),
    )


def decode_users(data: Any) -> list[RemoteUserEntity]:
    """Decode a JSON array of user objects, keeping source order."""
    if not isinstance(data, list):
        raise EntityDecodeError(f"user list must be a JSON array, got {type(data).__name__}")
    return [decode_user(item) for item in data]


def decode_count(data: Any) -> UserCountResponse:
    data = _require_object(data, "count response")
    count = data.get("count", 0)
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise EntityDecodeError(f"'count' must be a non-negative integer, got {count!r}")
    return UserCountResponse(count=count)


def decode_verify(data: Any) -> VerifyPasswordResponse:
    data = _require_object(data, "verify response")
    return VerifyPasswordResponse(valid=_boolean(data, "valid"))


# ─────────────────────────────────────────────────────────────────────────────
# Parsers (raw response bodies)
# ─────────────────────────────────────────────────────────────────────────────
def _load(body: RawBody) -> Any:
    try:
        return json.loads(body)
    except ValueError as e:
        raise EntityDecodeError(f"invalid JSON: {e}") from e
    except RecursionError as e:
        raise EntityDecodeError("invalid JSON: nesting too deep") from e


def parse_user(body: RawBody) -> RemoteUserEntity:
    return decode_user(_load(body))


def parse_users(body: RawBody) -> list[RemoteUserEntity]:
    return decode_users(_load(body))


def parse_count(body: RawBody) -> UserCountResponse:
    return decode_count(_load(body))


def parse_verify(body: RawBody) -> VerifyPasswordResponse:
    return decode_verify(_load(body))


def is_empty_body(body: Optional[RawBody]) -> bool:
    """True when a response carried no payload (None or whitespace only)."""
    return body is None or not body.strip()
