"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from user_federation.core.remote.exceptions import DirectoryConfigError
from user_federation.core.remote.headers import normalize_header_names

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

DEFAULT_FIND_USER_PATH = "/users/find"
DEFAULT_VERIFY_USER_PATH = "/users/verify"
DEFAULT_SEARCH_USER_PATH = "/users/search"
DEFAULT_COUNT_USER_PATH = "/users/count"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _load_secret_from_file(
    secret_name: str,
    env_var: str | None = None,
    environ: Optional[Mapping[str, object]] = None,
) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. env_var looked up in environ (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional key to check as fallback
        environ: Mapping holding env_var (defaults to os.environ)

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info("[settings] Loaded %s from /run/secrets", secret_name)
                return secret_value
        except OSError as e:
            logger.warning("[settings] Failed to read /run/secrets/%s: %s", secret_name, e)

    if env_var:
        environ = os.environ if environ is None else environ
        secret_value = environ.get(env_var)
        if secret_value:
            return str(secret_value)

    return None


def resolve_authorization(environ: Mapping[str, object]) -> str:
    """Static Authorization value: Docker secret first, then REMOTE_DIRECTORY_AUTHORIZATION."""
    return _load_secret_from_file(
        "remote_directory_authorization", "REMOTE_DIRECTORY_AUTHORIZATION", environ
    ) or ""


def _parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUE_VALUES


def _parse_header_list(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return normalize_header_names(value.split(","))
    return normalize_header_names(value)


def _parse_timeout(value: object) -> float:
    if value is None or value == "":
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except (TypeError, ValueError) as e:
        raise DirectoryConfigError(f"REMOTE_REQUEST_TIMEOUT must be a number, got {value!r}") from e
    if timeout <= 0:
        raise DirectoryConfigError(f"REMOTE_REQUEST_TIMEOUT must be positive, got {value!r}")
    return timeout


@dataclass(frozen=True)
class DirectoryClientConfig:
    """Remote directory client configuration.

    Resolved once when the client is built and never changed afterwards.
    """
    base_url: str
    find_user_path: str = DEFAULT_FIND_USER_PATH
    verify_user_path: str = DEFAULT_VERIFY_USER_PATH
    search_user_path: str = DEFAULT_SEARCH_USER_PATH
    count_user_path: str = DEFAULT_COUNT_USER_PATH
    authorization: str = ""
    headers_to_forward: tuple[str, ...] = ()
    debug_logging: bool = False
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_mapping(cls, values: Mapping[str, object], authorization: Optional[str] = None) -> "DirectoryClientConfig":
        """Build config from environment-style keys (os.environ, app.config).

        Args:
            values: Mapping holding REMOTE_* keys
            authorization: Pre-resolved authorization value (overrides the mapping)

        Raises:
            DirectoryConfigError: If REMOTE_DIRECTORY_URL is missing or a value is invalid
        """
        base_url = values.get("REMOTE_DIRECTORY_URL")
        if not base_url:
            raise DirectoryConfigError("REMOTE_DIRECTORY_URL is required")

        if authorization is None:
            authorization = values.get("REMOTE_DIRECTORY_AUTHORIZATION") or ""

        return cls(
            base_url=str(base_url),
            find_user_path=str(values.get("REMOTE_FIND_USER_PATH", DEFAULT_FIND_USER_PATH)),
            verify_user_path=str(values.get("REMOTE_VERIFY_USER_PATH", DEFAULT_VERIFY_USER_PATH)),
            search_user_path=str(values.get("REMOTE_SEARCH_USER_PATH", DEFAULT_SEARCH_USER_PATH)),
            count_user_path=str(values.get("REMOTE_COUNT_USER_PATH", DEFAULT_COUNT_USER_PATH)),
            authorization=str(authorization),
            headers_to_forward=_parse_header_list(values.get("REMOTE_HEADERS_TO_FORWARD")),
            debug_logging=_parse_bool(values.get("REMOTE_DEBUG_LOGGING")),
            timeout=_parse_timeout(values.get("REMOTE_REQUEST_TIMEOUT")),
        )


def load_settings(environ: Optional[Mapping[str, object]] = None) -> DirectoryClientConfig:
    """Load directory client settings from environment and /run/secrets.

    Args:
        environ: Mapping to read instead of os.environ (CLI overrides, app.config)
    """
    environ = os.environ if environ is None else environ
    return DirectoryClientConfig.from_mapping(environ, authorization=resolve_authorization(environ))
