"""Authenticator -- registry and dispatcher for strategies.

The :class:`Authenticator` is what an embedding web application talks to.
It maps strategy names (``"thegrid"``, ...) to configured
:class:`~passport_thegrid.strategy.base.Strategy` instances and forwards
each incoming request's query parameters to the selected strategy.

Sessions, cookies and the storage of ``state`` values stay with the host
application; it passes them in as keyword arguments.

Example::

    from passport_thegrid import Authenticator, TheGridStrategy

    auth = Authenticator()
    auth.use(TheGridStrategy(options, verify))

    outcome = auth.authenticate("thegrid", request.query_params)
    if outcome.redirect_url:
        return redirect(outcome.redirect_url)
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from passport_thegrid.exceptions import StrategyNotFoundError
from passport_thegrid.models import AuthOutcome
from passport_thegrid.strategy.base import Strategy

logger = logging.getLogger(__name__)


class Authenticator:
    """Registry and dispatcher for authentication strategies."""

    def __init__(self) -> None:
        self._strategies: dict[str, Strategy] = {}

    def use(self, strategy: Strategy, name: Optional[str] = None) -> Authenticator:
        """Register *strategy* under *name*, defaulting to ``strategy.name``.

        An existing registration under the same name is replaced.

        Returns:
            ``self``, so registrations can be chained.

        Raises:
            ValueError: If neither *name* nor ``strategy.name`` is set.
        """
        key = name or strategy.name
        if not key:
            raise ValueError("Authentication strategies must have a name")
        if key in self._strategies:
            logger.debug("Replacing strategy '%s'", key)
        self._strategies[key] = strategy
        return self

    def unuse(self, name: str) -> Authenticator:
        """Remove the strategy registered under *name*, if any."""
        self._strategies.pop(name, None)
        return self

    def get_strategy(self, name: str) -> Strategy:
        """Retrieve a registered strategy.

        Raises:
            StrategyNotFoundError: If nothing is registered under *name*.
        """
        strategy = self._strategies.get(name)
        if strategy is None:
            available = ", ".join(sorted(self._strategies)) or "(none)"
            raise StrategyNotFoundError(
                f"Unknown authentication strategy '{name}'. "
                f"Available strategies: {available}"
            )
        return strategy

    def names(self) -> list[str]:
        """Return the sorted names of all registered strategies."""
        return sorted(self._strategies)

    def authenticate(
        self, name: str, params: Mapping[str, str], **options: Any
    ) -> AuthOutcome:
        """Run one authentication attempt with the strategy *name*.

        Args:
            name: The registered strategy name.
            params: Query parameters of the incoming request.
            **options: Forwarded to the strategy's ``authenticate``
                (e.g. ``state``, ``expected_state``, ``scope``).

        Returns:
            The strategy's :class:`~passport_thegrid.models.AuthOutcome`.
        """
        return self.get_strategy(name).authenticate(params, **options)
