"""Generic OAuth 2.0 client capability held by OAuth2 strategies.

Exports:
    :class:`OAuth2Client` -- authorization URL building, code exchange,
    token refresh and bearer-authenticated GET requests over ``httpx``.
"""

from passport_thegrid.oauth2.client import OAuth2Client

__all__ = ["OAuth2Client"]
