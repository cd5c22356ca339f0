"""Generic OAuth 2.0 client used by strategies.

This module provides :class:`OAuth2Client`, the capability every
:class:`~passport_thegrid.strategy.oauth2.OAuth2Strategy` holds.  It knows
nothing about any particular provider; it only speaks the Authorization Code
grant (:rfc:`6749` section 4.1):

1. Builds the authorization URL the user agent is redirected to.
2. Exchanges an authorization code for tokens at the token endpoint.
3. Refreshes an access token with a refresh token.
4. Issues bearer-authenticated GET requests to provider APIs.

Every request opens its own :class:`httpx.Client`, so one instance can be
shared by concurrent authentication attempts.  No retries are performed and
the only timeout is the transport timeout given at construction.

See Also:
    :class:`passport_thegrid.strategy.oauth2.OAuth2Strategy` which drives
    the flow and calls the application's verify callback.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit

import httpx
from pydantic import ValidationError

from passport_thegrid.exceptions import OAuth2ClientError
from passport_thegrid.models import TokenResponse

logger = logging.getLogger(__name__)


class OAuth2Client:
    """Stateless OAuth 2.0 client for one provider registration.

    Args:
        client_id: The application's client identifier.
        client_secret: The application's client secret.
        authorization_url: The provider's authorization endpoint.
        token_url: The provider's token endpoint.
        custom_headers: Headers sent with every request (e.g. ``User-Agent``).
        scope_separator: Separator used to join scopes into one string.
        timeout: Transport timeout in seconds.
        transport: Optional :class:`httpx.BaseTransport`, mainly for tests
            (``httpx.MockTransport``) and proxies.

    Example::

        client = OAuth2Client(
            "cid", "secret",
            "https://provider.example/authorize",
            "https://provider.example/token",
        )
        tokens = client.exchange_code(code, redirect_uri="https://app/cb")
        body = client.authenticated_get("https://provider.example/me", tokens.access_token)
    """

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        authorization_url: str,
        token_url: str,
        custom_headers: Optional[Mapping[str, str]] = None,
        scope_separator: str = " ",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.authorization_url = authorization_url
        self.token_url = token_url
        self.custom_headers = dict(custom_headers or {})
        self.scope_separator = scope_separator
        self.timeout = timeout
        self._transport = transport

    # ------------------------------------------------------------------
    # Authorization request
    # ------------------------------------------------------------------

    def authorize_url(
        self,
        redirect_uri: Optional[str] = None,
        scope: Optional[Sequence[str]] = None,
        state: Optional[str] = None,
        **params: str,
    ) -> str:
        """Build the URL the user agent is redirected to for authorization.

        Parameters already present in the configured authorization URL's
        query string are kept.

        Args:
            redirect_uri: Where the provider sends the user back.
            scope: Scopes to request, joined with :attr:`scope_separator`.
            state: Opaque value echoed back by the provider.
            **params: Additional provider-specific query parameters.

        Returns:
            The fully-formed authorization URL.
        """
        query: dict[str, str] = {"response_type": "code"}
        if self.client_id:
            query["client_id"] = self.client_id
        if redirect_uri:
            query["redirect_uri"] = redirect_uri
        if scope:
            query["scope"] = self.scope_separator.join(scope)
        if state:
            query["state"] = state
        query.update(params)

        base = urlsplit(self.authorization_url)
        merged = dict(parse_qsl(base.query))
        merged.update(query)
        return base._replace(query=urlencode(merged)).geturl()

    # ------------------------------------------------------------------
    # Token endpoint
    # ------------------------------------------------------------------

    def exchange_code(self, code: str, redirect_uri: Optional[str] = None) -> TokenResponse:
        """Exchange an authorization code for access and refresh tokens.

        Args:
            code: The authorization code received on the callback.
            redirect_uri: The redirect URI used in the authorization request.

        Returns:
            The parsed :class:`~passport_thegrid.models.TokenResponse`.

        Raises:
            OAuth2ClientError: On network errors, non-2xx responses, error
                bodies, or a response without ``access_token``.
        """
        data: dict[str, str] = {"grant_type": "authorization_code", "code": code}
        if redirect_uri:
            data["redirect_uri"] = redirect_uri
        return self._request_token(data)

    def refresh_access_token(self, refresh_token: str) -> TokenResponse:
        """Obtain a new access token using a refresh token.

        Raises:
            OAuth2ClientError: Same conditions as :meth:`exchange_code`.
        """
        return self._request_token(
            {"grant_type": "refresh_token", "refresh_token": refresh_token}
        )

    def _request_token(self, data: dict[str, str]) -> TokenResponse:
        if self.client_id:
            data["client_id"] = self.client_id
        if self.client_secret:
            data["client_secret"] = self.client_secret

        logger.debug("Requesting %s token from %s", data["grant_type"], self.token_url)
        response = self._send(
            "POST",
            self.token_url,
            data=data,
            headers={"Accept": "application/json"},
        )
        payload = _parse_token_body(response.text)

        if response.is_error or "error" in payload:
            raise OAuth2ClientError(response.status_code, payload or response.text)
        try:
            return TokenResponse.model_validate(payload)
        except ValidationError as exc:
            raise OAuth2ClientError(response.status_code, payload) from exc

    # ------------------------------------------------------------------
    # Protected resources
    # ------------------------------------------------------------------

    def authenticated_get(self, url: str, access_token: str) -> str:
        """GET a protected resource with the access token as bearer credential.

        Args:
            url: Absolute URL of the resource.
            access_token: The bearer token; it is never logged.

        Returns:
            The response body as text.

        Raises:
            OAuth2ClientError: On network errors or non-2xx responses.
        """
        logger.debug("GET %s", url)
        response = self._send(
            "GET", url, headers={"Authorization": f"Bearer {access_token}"}
        )
        if response.is_error:
            raise OAuth2ClientError(response.status_code, response.text)
        return response.text

    def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        data: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        merged = {**self.custom_headers, **headers}
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                return client.request(method, url, data=data, headers=merged)
        except httpx.HTTPError as exc:
            raise OAuth2ClientError(None, str(exc)) from exc


def _parse_token_body(text: str) -> dict[str, Any]:
    """Parse a token endpoint body, accepting JSON or form encoding.

    Some providers answer with ``application/x-www-form-urlencoded`` even
    when JSON is requested.
    """
    try:
        payload = json.loads(text)
    except ValueError:
        return dict(parse_qsl(text))
    return payload if isinstance(payload, dict) else {}
