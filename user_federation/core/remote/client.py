"""HTTP client for the remote user directory.

Handles request assembly, header forwarding, tracing, and the
per-operation error policy:

- find/count/verify never raise; failures become None/0/False
- search raises UserSearchError so listings are never silently truncated
"""
from __future__ import annotations
import logging
from http.cookiejar import DefaultCookiePolicy
from typing import TYPE_CHECKING, Mapping, Optional
from urllib.parse import urlsplit

import requests
from requests.adapters import HTTPAdapter

from .entities import (
    RemoteCredentialInput,
    RemoteUserEntity,
    is_empty_body,
    parse_count,
    parse_user,
    parse_users,
    parse_verify,
)
from .exceptions import DirectoryConfigError, EntityDecodeError, UserSearchError
from .headers import HeaderForwarder, HeaderSource
from .http_logging import HttpTraceLogger

if TYPE_CHECKING:
    from user_federation.config.settings import DirectoryClientConfig

logger = logging.getLogger(__name__)

USER_AGENT = "Keycloak User Federation SPI"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def _validate_url(url: str, what: str) -> str:
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise DirectoryConfigError(f"{what} is not a valid http(s) URL: {url!r}")
    return url


class RemoteUserClient:
    """Client for the remote directory's find/search/count/verify endpoints.

    Usage:
        client = RemoteUserClient(load_settings(), header_source=flask_header_source)
        user = client.find_by_username("alice")
        if user and client.verify_password("alice", password):
            ...

    The client keeps no state besides its configuration and connection
    pool, so a single instance can be shared across threads.
    """

    def __init__(
        self,
        config: "DirectoryClientConfig",
        header_source: Optional[HeaderSource] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            config: Resolved directory configuration
            header_source: Callable returning inbound request headers (or None)
            session: Optional pre-built requests session. The client takes it
                over: its ``auth`` is replaced by the header forwarder and its
                cookie jar stops storing cookies. Its adapters are kept.

        Raises:
            DirectoryConfigError: On a malformed base URL or missing endpoint path
        """
        self.config = config
        base_url = _validate_url(config.base_url or "", "Remote directory base URL")

        endpoints = {
            "find": config.find_user_path,
            "verify": config.verify_user_path,
            "search": config.search_user_path,
            "count": config.count_user_path,
        }
        for name, path in endpoints.items():
            if not path:
                raise DirectoryConfigError(f"Remote directory {name} endpoint path is not configured")

        self.find_user_url = _validate_url(base_url + config.find_user_path, "Find endpoint")
        self.verify_user_url = _validate_url(base_url + config.verify_user_path, "Verify endpoint")
        self.search_user_url = _validate_url(base_url + config.search_user_path, "Search endpoint")
        self.count_user_url = _validate_url(base_url + config.count_user_path, "Count endpoint")
        self.authorization = config.authorization or ""
        self.timeout = config.timeout
        self.tracer = HttpTraceLogger() if config.debug_logging else None

        self.session = session or requests.Session()
        self.session.auth = HeaderForwarder(config.headers_to_forward, header_source)
        self.session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        if session is None:
            adapter = HTTPAdapter(max_retries=0)
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "RemoteUserClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ─────────────────────────────────────────────────────────────────────────
    # Find
    # ─────────────────────────────────────────────────────────────────────────
    def get_user(self, params: Mapping[str, str]) -> Optional[RemoteUserEntity]:
        """Look up a single user; any failure is reported as not found."""
        try:
            resp = self._query(self.find_user_url, params)
            if is_empty_body(resp.content):
                return None
            resp.raise_for_status()
            return parse_user(resp.content)
        except (requests.RequestException, EntityDecodeError) as e:
            logger.warning("[remote-directory] find failed (%s): %s", self.find_user_url, e)
            return None

    def find_by_id(self, user_id: str) -> Optional[RemoteUserEntity]:
        return self.get_user({"type": "id", "id": user_id})

    def find_by_username(self, username: str) -> Optional[RemoteUserEntity]:
        return self.get_user({"type": "username", "username": username})

    def find_by_email(self, email: str) -> Optional[RemoteUserEntity]:
        return self.get_user({"type": "email", "email": email})

    # ─────────────────────────────────────────────────────────────────────────
    # Search / count
    # ─────────────────────────────────────────────────────────────────────────
    def search_users(
        self,
        params: Optional[Mapping[str, str]] = None,
        first_result: Optional[int] = None,
        max_results: Optional[int] = None,
    ) -> Optional[list[RemoteUserEntity]]:
        """Search users, preserving the remote ordering.

        Args:
            params: Filter parameters, sent verbatim in the given order
            first_result: Sent as ``skip`` when not None
            max_results: Sent as ``take`` when not None

        Returns:
            Decoded users, or None if the remote returned no body

        Raises:
            UserSearchError: On transport, status, or decode failure
        """
        query = dict(params or {})
        if first_result is not None:
            query["skip"] = str(first_result)
        if max_results is not None:
            query["take"] = str(max_results)

        try:
            resp = self._query(self.search_user_url, query)
        except requests.RequestException as e:
            raise UserSearchError(self.search_user_url, str(e)) from e

        if is_empty_body(resp.content):
            return None
        if resp.status_code >= 400:
            raise UserSearchError(self.search_user_url, resp.text, resp.status_code)
        try:
            return parse_users(resp.content)
        except EntityDecodeError as e:
            raise UserSearchError(self.search_user_url, str(e), resp.status_code) from e

    def get_user_count(self, params: Optional[Mapping[str, str]] = None) -> int:
        """Count users matching the filters; any failure counts as 0."""
        try:
            resp = self._query(self.count_user_url, params or {})
            if is_empty_body(resp.content):
                return 0
            resp.raise_for_status()
            return parse_count(resp.content).count
        except (requests.RequestException, EntityDecodeError) as e:
            logger.warning("[remote-directory] count failed (%s): %s", self.count_user_url, e)
            return 0

    # ─────────────────────────────────────────────────────────────────────────
    # Verify
    # ─────────────────────────────────────────────────────────────────────────
    def verify_password(self, username: str, password: str) -> bool:
        """Check a username/password pair against the remote directory.

        The credential body is never traced. Any failure counts as invalid.
        """
        credential = RemoteCredentialInput(username=username, password=password)
        try:
            headers = self._base_headers()
            headers["Content-Type"] = JSON_CONTENT_TYPE
            request = requests.Request(
                "POST",
                self.verify_user_url,
                headers=headers,
                data=credential.to_json().encode("utf-8"),
            )
            resp = self._send(request, include_body=False)
            if is_empty_body(resp.content):
                return False
            resp.raise_for_status()
            return parse_verify(resp.content).valid
        except (requests.RequestException, EntityDecodeError) as e:
            logger.warning("[remote-directory] verify failed (%s): %s", self.verify_user_url, e)
            return False

    # ─────────────────────────────────────────────────────────────────────────
    # Request assembly
    # ─────────────────────────────────────────────────────────────────────────
    def _base_headers(self) -> dict[str, str]:
        headers = {"User-Agent": USER_AGENT}
        if self.authorization:
            headers["Authorization"] = self.authorization
        return headers

    def _query(self, url: str, params: Mapping[str, str]) -> requests.Response:
        request = requests.Request("GET", url, params=list(params.items()), headers=self._base_headers())
        return self._send(request)

    def _send(self, request: requests.Request, include_body: bool = True) -> requests.Response:
        """Prepare (forwarding headers), trace, and send one request.

        Raises:
            requests.RequestException: On transport failure
        """
        prepared = self.session.prepare_request(request)
        settings = self.session.merge_environment_settings(prepared.url, {}, None, None, None)

        if self.tracer:
            self.tracer.log_request(prepared, include_body=include_body)
        try:
            resp = self.session.send(prepared, timeout=self.timeout, **settings)
        except requests.RequestException as e:
            if self.tracer:
                self.tracer.log_failure(e)
            raise
        if self.tracer:
            self.tracer.log_response(resp)
        return resp
