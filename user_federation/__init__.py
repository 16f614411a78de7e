"""Remote User Federation bridge package.

To use the directory client:
    from user_federation.core.remote import RemoteUserClient

To wire it into a Flask app:
    from user_federation.flask_ext import RemoteDirectory
"""
# Note: We don't import flask_ext by default to avoid a Flask dependency
# for CLI scripts that only use user_federation.core.remote

__version__ = "0.1.0"
