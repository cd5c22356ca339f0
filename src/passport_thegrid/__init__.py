"""passport_thegrid -- TheGrid authentication strategy using OAuth 2.0.

This package lets a web application delegate user authentication to TheGrid
and receive a normalized user profile.  The application supplies a verify
callback that turns tokens and profile into its own user object; everything
else -- redirect URL, code exchange, profile fetch -- is handled here.

Typical usage::

    from passport_thegrid import Authenticator, TheGridStrategy

    auth = Authenticator().use(
        TheGridStrategy(
            {"clientID": "...", "clientSecret": "...", "callbackURL": "..."},
            lambda access_token, refresh_token, profile: find_user(profile.id),
        )
    )

Modules:
    manager: :class:`Authenticator`, the strategy registry.
    strategy: Strategy base classes and the generic OAuth 2.0 flow.
    strategies: Provider strategies (TheGrid).
    oauth2: The generic OAuth 2.0 client.
    models: Pydantic models shared across the package.
    exceptions: Exception hierarchy.
"""

from passport_thegrid.exceptions import (
    AuthorizationError,
    InternalOAuthError,
    OAuth2ClientError,
    PassportError,
    StrategyNotFoundError,
    TokenError,
)
from passport_thegrid.manager import Authenticator
from passport_thegrid.models import AuthOutcome, Email, Profile, StrategyOptions
from passport_thegrid.strategies.thegrid import TheGridStrategy

__version__ = "0.1.0"

__all__ = [
    "Authenticator",
    "AuthOutcome",
    "AuthorizationError",
    "Email",
    "InternalOAuthError",
    "OAuth2ClientError",
    "PassportError",
    "Profile",
    "StrategyNotFoundError",
    "StrategyOptions",
    "TheGridStrategy",
    "TokenError",
]
