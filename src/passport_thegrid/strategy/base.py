"""Abstract base class for authentication strategies.

A *strategy* is a pluggable unit implementing one authentication method.
Host applications register strategies with
:class:`~passport_thegrid.manager.Authenticator` and dispatch to them by
:attr:`~Strategy.name`.

To implement a new strategy, subclass :class:`Strategy`, set
:attr:`~Strategy.name` and implement :meth:`~Strategy.authenticate`.  For
OAuth 2.0 providers subclass
:class:`~passport_thegrid.strategy.oauth2.OAuth2Strategy` instead and only
override :meth:`~passport_thegrid.strategy.oauth2.OAuth2Strategy.user_profile`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from passport_thegrid.models import AuthOutcome


class Strategy(ABC):
    """Base class for authentication strategies.

    Subclasses must provide:

    1. A :attr:`name` class attribute or property, the identifier the host
       uses to select the strategy (e.g. ``"thegrid"``).
    2. An :meth:`authenticate` implementation returning an
       :class:`~passport_thegrid.models.AuthOutcome`.
    """

    name: str = ""

    @abstractmethod
    def authenticate(self, params: Mapping[str, str], **options: Any) -> AuthOutcome:
        """Run one authentication attempt.

        Args:
            params: Query parameters of the incoming request.
            **options: Strategy-specific per-request options.

        Returns:
            A redirect, success, or failure
            :class:`~passport_thegrid.models.AuthOutcome`.

        Raises:
            PassportError: On errors that end the attempt.
        """
        ...
