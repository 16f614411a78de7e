"""Forwarding of inbound request headers onto outbound directory calls.

The forwarder never looks at framework globals itself. It is handed a
header source: a zero-argument callable returning the inbound request's
headers, or None when the call runs outside an inbound request.
"""
from __future__ import annotations
from typing import Callable, Iterable, Mapping, Optional

from requests.auth import AuthBase
from requests.models import PreparedRequest

HeaderSource = Callable[[], Optional[Mapping[str, str]]]


def no_inbound_request() -> Optional[Mapping[str, str]]:
    """Header source for callers with no inbound request (CLI, jobs)."""
    return None


def normalize_header_names(names: Iterable[Optional[str]]) -> tuple[str, ...]:
    """Drop blank entries, keep configuration order."""
    return tuple(name.strip() for name in names if name and name.strip())


def forwarded_headers(names: Iterable[str], inbound: Optional[Mapping[str, str]]) -> list[tuple[str, str]]:
    """Return the (name, value) pairs to copy from the inbound headers.

    Names without a value in the inbound request are skipped.
    """
    if inbound is None:
        return []
    pairs = []
    for name in names:
        value = inbound.get(name)
        if value is not None:
            pairs.append((name, value))
    return pairs


class HeaderForwarder(AuthBase):
    """Attach configured inbound headers to every prepared request.

    Installed as the session's auth hook so it runs once per call during
    request preparation, before the request is traced or sent.
    """

    def __init__(self, headers_to_forward: Iterable[Optional[str]], header_source: Optional[HeaderSource] = None):
        self.headers_to_forward = normalize_header_names(headers_to_forward)
        self.header_source = header_source or no_inbound_request

    def __call__(self, request: PreparedRequest) -> PreparedRequest:
        if not self.headers_to_forward:
            return request

        inbound = self.header_source()
        for name, value in forwarded_headers(self.headers_to_forward, inbound):
            request.headers[name] = value
        return request
