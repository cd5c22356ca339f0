"""Strategy base classes.

- :class:`Strategy` -- abstract base for every authentication strategy.
- :class:`OAuth2Strategy` -- generic OAuth 2.0 Authorization Code strategy
  that provider strategies build on.
"""

from passport_thegrid.strategy.base import Strategy
from passport_thegrid.strategy.oauth2 import OAuth2Strategy, VerifyCallback

__all__ = ["Strategy", "OAuth2Strategy", "VerifyCallback"]
