"""TheGrid OAuth 2.0 authentication strategy.

This module provides :class:`TheGridStrategy`, which authenticates requests
by delegating to TheGrid using the OAuth 2.0 protocol.  It contributes two
things on top of :class:`~passport_thegrid.strategy.oauth2.OAuth2Strategy`:

- endpoint, scope-separator and ``User-Agent`` defaults for TheGrid,
- :meth:`TheGridStrategy.user_profile`, which fetches ``/api/user`` and maps
  it into a normalized :class:`~passport_thegrid.models.Profile`.

Example::

    def verify(access_token, refresh_token, profile):
        return User.find_or_create(thegrid_id=profile.id)

    strategy = TheGridStrategy(
        {
            "clientID": "123-456-789",
            "clientSecret": "shhh-its-a-secret",
            "callbackURL": "https://www.example.net/auth/thegrid/callback",
            "userAgent": "myapp.com",
        },
        verify,
    )
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from passport_thegrid.exceptions import InternalOAuthError, OAuth2ClientError
from passport_thegrid.models import Email, Profile, StrategyOptions
from passport_thegrid.oauth2 import OAuth2Client
from passport_thegrid.strategy.oauth2 import (
    OAuth2Strategy,
    StrategyOptionsInput,
    VerifyCallback,
    coerce_options,
)

logger = logging.getLogger(__name__)

AUTHORIZATION_URL = "https://passport.thegrid.io/login/authorize"
TOKEN_URL = "https://passport.thegrid.io/login/authorize/token"
USER_PROFILE_URL = "https://passport.thegrid.io/api/user"
SCOPE_SEPARATOR = ","
DEFAULT_USER_AGENT = "passport-thegrid"


def resolve_options(options: Optional[StrategyOptionsInput]) -> StrategyOptions:
    """Fill in TheGrid defaults for every option left unset.

    A ``User-Agent`` already present in ``custom_headers`` (in any letter
    case) is kept as is; otherwise ``user_agent`` is used, falling back to
    ``"passport-thegrid"``.
    """
    opts = coerce_options(options)
    headers = dict(opts.custom_headers)
    if not any(key.lower() == "user-agent" and value for key, value in headers.items()):
        headers["User-Agent"] = opts.user_agent or DEFAULT_USER_AGENT

    return opts.model_copy(
        update={
            "authorization_url": opts.authorization_url or AUTHORIZATION_URL,
            "token_url": opts.token_url or TOKEN_URL,
            "user_profile_url": opts.user_profile_url or USER_PROFILE_URL,
            "scope_separator": opts.scope_separator or SCOPE_SEPARATOR,
            "custom_headers": headers,
        }
    )


class TheGridStrategy(OAuth2Strategy):
    """Authenticate users with their TheGrid account.

    Args:
        options: Strategy options (``client_id``, ``client_secret``,
            ``callback_url``, optional ``scope`` such as ``["user"]``, and
            any override of the TheGrid defaults).
        verify: ``verify(access_token, refresh_token, profile)`` returning
            the application's user, or a falsy value to reject it.
        client: Optional pre-built OAuth2 client.
    """

    name = "thegrid"

    def __init__(
        self,
        options: Optional[StrategyOptionsInput],
        verify: VerifyCallback,
        client: Optional[OAuth2Client] = None,
    ) -> None:
        resolved = resolve_options(options)
        super().__init__(resolved, verify, client)
        self._user_profile_url: str = resolved.user_profile_url or USER_PROFILE_URL

    @property
    def user_profile_url(self) -> str:
        return self._user_profile_url

    def user_profile(self, access_token: str) -> Profile:
        """Retrieve the user profile from TheGrid.

        Builds a normalized profile with:

        - ``provider`` -- always ``"thegrid"``
        - ``id`` -- the user's TheGrid ``uuid``
        - ``display_name`` -- the user's full name
        - ``emails`` -- a single entry holding the user's email address

        The response body and the parsed document are kept on ``raw`` and
        ``json_data``.

        Args:
            access_token: Bearer token obtained from the token exchange.

        Returns:
            A new :class:`~passport_thegrid.models.Profile`.

        Raises:
            InternalOAuthError: The request failed at the transport or HTTP
                level.
            json.JSONDecodeError: The body is not valid JSON.
            ValueError: The body is JSON but not an object.
        """
        try:
            body = self._oauth2.authenticated_get(self._user_profile_url, access_token)
        except OAuth2ClientError as exc:
            raise InternalOAuthError("failed to fetch user profile", exc) from exc

        document = json.loads(body)
        if not isinstance(document, dict):
            raise ValueError("TheGrid user profile is not a JSON object")

        logger.debug("Fetched TheGrid profile for %s", document.get("uuid"))
        return Profile(
            provider=self.name,
            id=document.get("uuid"),
            display_name=document.get("name"),
            emails=[Email(value=document.get("email"))],
            raw=body,
            json_data=document,
        )
