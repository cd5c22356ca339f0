"""Generic OAuth 2.0 Authorization Code strategy.

:class:`OAuth2Strategy` drives one authorization-code attempt:

1. Without a ``code`` parameter, it answers with a redirect to the
   provider's authorization endpoint.
2. With a ``code``, it exchanges the code for tokens through the held
   :class:`~passport_thegrid.oauth2.OAuth2Client`, loads the user profile,
   and hands tokens and profile to the application's verify callback.
3. With an ``error`` parameter, it reports the provider's error.

Provider strategies subclass it, fill in their endpoint defaults and
override :meth:`OAuth2Strategy.user_profile`.  The OAuth2 mechanics are
held, not inherited: a strategy owns an ``OAuth2Client`` and delegates to it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from passport_thegrid.exceptions import (
    AuthorizationError,
    InternalOAuthError,
    OAuth2ClientError,
    TokenError,
)
from passport_thegrid.models import AuthOutcome, Profile, StrategyOptions, TokenResponse
from passport_thegrid.oauth2 import OAuth2Client
from passport_thegrid.strategy.base import Strategy

logger = logging.getLogger(__name__)

VerifyCallback = Callable[[str, Optional[str], Optional[Profile]], Any]
"""``verify(access_token, refresh_token, profile) -> user``.

Return the application's user object, or a falsy value to reject the
credentials.  Exceptions propagate to the caller of ``authenticate``.
"""

StrategyOptionsInput = Union[StrategyOptions, Mapping[str, Any]]


def coerce_options(options: Optional[StrategyOptionsInput]) -> StrategyOptions:
    """Return *options* as a :class:`StrategyOptions`, validating mappings."""
    if options is None:
        return StrategyOptions()
    if isinstance(options, StrategyOptions):
        return options
    return StrategyOptions.model_validate(dict(options))


class OAuth2Strategy(Strategy):
    """Authenticate users through an OAuth 2.0 provider.

    Args:
        options: Strategy options; ``authorization_url`` and ``token_url``
            are required at this level.
        verify: The application's verify callback, stored unmodified.
        client: Optional pre-built OAuth2 client.  By default one is built
            from *options*.

    Raises:
        TypeError: If *verify* is not callable.
        ValueError: If the authorization or token URL is missing.
    """

    name = "oauth2"

    def __init__(
        self,
        options: Optional[StrategyOptionsInput],
        verify: VerifyCallback,
        client: Optional[OAuth2Client] = None,
    ) -> None:
        if not callable(verify):
            raise TypeError(f"{type(self).__name__} requires a verify callback")
        opts = coerce_options(options)
        if not opts.authorization_url:
            raise ValueError(f"{type(self).__name__} requires an authorization_url option")
        if not opts.token_url:
            raise ValueError(f"{type(self).__name__} requires a token_url option")

        self.options = opts
        self._verify = verify
        self._oauth2 = client or OAuth2Client(
            client_id=opts.client_id,
            client_secret=opts.client_secret,
            authorization_url=opts.authorization_url,
            token_url=opts.token_url,
            custom_headers=opts.custom_headers,
            scope_separator=opts.scope_separator or " ",
            timeout=opts.timeout,
        )

    @property
    def oauth2(self) -> OAuth2Client:
        return self._oauth2

    @property
    def verify(self) -> VerifyCallback:
        return self._verify

    def authorization_url(
        self,
        state: Optional[str] = None,
        scope: Optional[Sequence[str]] = None,
    ) -> str:
        """Return the provider URL that starts the authorization flow."""
        return self._oauth2.authorize_url(
            redirect_uri=self.options.callback_url,
            scope=scope if scope is not None else self.options.scope,
            state=state,
        )

    def authenticate(
        self,
        params: Mapping[str, str],
        state: Optional[str] = None,
        expected_state: Optional[str] = None,
        scope: Optional[Sequence[str]] = None,
    ) -> AuthOutcome:
        """Run one step of the Authorization Code flow.

        Args:
            params: Query parameters of the incoming request.
            state: ``state`` value to put on the authorization redirect.
            expected_state: When set, the callback's ``state`` must match.
            scope: Overrides the configured scopes for the redirect.

        Returns:
            A redirect outcome when no code is present, a failure outcome
            when access was denied, the state did not match or the verify
            callback rejected the user, and a success outcome otherwise.

        Raises:
            AuthorizationError: The provider reported an error other than
                ``access_denied``.
            TokenError: The token endpoint returned an OAuth error.
            InternalOAuthError: The token exchange or profile fetch failed.
        """
        error = params.get("error")
        if error:
            description = params.get("error_description")
            if error == "access_denied":
                logger.warning("Authorization denied by user: %s", description or error)
                return AuthOutcome.fail(description or error)
            raise AuthorizationError(description, error, params.get("error_uri"))

        code = params.get("code")
        if not code:
            return AuthOutcome.redirect(self.authorization_url(state=state, scope=scope))

        if expected_state is not None and params.get("state") != expected_state:
            logger.warning("Rejecting callback with mismatched state")
            return AuthOutcome.fail("Invalid authorization request state.")

        tokens = self._exchange(code)
        profile = self._load_user_profile(tokens.access_token)

        user = self._verify(tokens.access_token, tokens.refresh_token, profile)
        if not user:
            return AuthOutcome.fail("Verification rejected the credentials.")
        return AuthOutcome.success(user)

    def user_profile(self, access_token: str) -> Profile:
        """Retrieve the user profile from the provider.

        The generic strategy has no profile endpoint; it returns an empty
        profile without any network call.  Subclasses override this.
        """
        return Profile(provider=self.name)

    def _exchange(self, code: str) -> TokenResponse:
        try:
            return self._oauth2.exchange_code(code, redirect_uri=self.options.callback_url)
        except OAuth2ClientError as exc:
            if isinstance(exc.data, dict) and exc.data.get("error"):
                raise TokenError(
                    exc.data.get("error_description"),
                    exc.data["error"],
                    exc.data.get("error_uri"),
                ) from exc
            raise InternalOAuthError("failed to obtain access token", exc) from exc

    def _load_user_profile(self, access_token: str) -> Optional[Profile]:
        if self.options.skip_user_profile:
            return None
        return self.user_profile(access_token)
