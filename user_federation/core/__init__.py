"""Core directory logic.

Pure Python plus requests; no Flask dependency. The Flask integration
lives in user_federation.flask_ext and is imported explicitly.

Module Structure:
    - remote/ : Remote user directory client, entities, header forwarding
"""
