"""TheGrid OAuth 2.0 strategy.

Implements the ``thegrid`` strategy, which delegates authentication to
TheGrid (https://passport.thegrid.io) and normalizes the ``/api/user``
document into a :class:`~passport_thegrid.models.Profile`.

See Also:
    :class:`~passport_thegrid.strategies.thegrid.strategy.TheGridStrategy`
    :mod:`passport_thegrid.strategy.oauth2` for the generic flow.
"""

from passport_thegrid.strategies.thegrid.strategy import (
    AUTHORIZATION_URL,
    TOKEN_URL,
    USER_PROFILE_URL,
    TheGridStrategy,
    resolve_options,
)

__all__ = [
    "AUTHORIZATION_URL",
    "TOKEN_URL",
    "USER_PROFILE_URL",
    "TheGridStrategy",
    "resolve_options",
]
