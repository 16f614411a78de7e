"""Flask integration for the remote directory client.

Inbound request headers are read from ``flask.request`` only through
``flask_header_source``; the core client never touches Flask globals.
"""
from __future__ import annotations
from typing import Mapping, Optional

from flask import Flask, current_app, has_request_context, request

from user_federation.config.settings import load_settings
from user_federation.core.remote import RemoteUserClient

EXTENSION_KEY = "remote_directory"


def flask_header_source() -> Optional[Mapping[str, str]]:
    """Return the current request's headers, or None outside a request."""
    if not has_request_context():
        return None
    return request.headers


class RemoteDirectory:
    """Flask extension that owns one RemoteUserClient per application.

    Usage:
        directory = RemoteDirectory(app)
        ...
        user = current_directory().find_by_username("alice")
    """

    def __init__(self, app: Optional[Flask] = None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> RemoteUserClient:
        """Build the client from app.config (or the environment) and register it."""
        if app.config.get("REMOTE_DIRECTORY_URL"):
            config = load_settings(app.config)
        else:
            config = load_settings()

        client = RemoteUserClient(config, header_source=flask_header_source)
        app.extensions[EXTENSION_KEY] = client
        app.logger.info(
            "[remote-directory] Client ready for %s (forwarding: %s)",
            config.base_url,
            ", ".join(config.headers_to_forward) or "none",
        )
        return client


def current_directory() -> RemoteUserClient:
    """Return the client registered on the current Flask app."""
    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError:
        raise RuntimeError("RemoteDirectory extension is not initialised on this app") from None
