"""Exception hierarchy for passport_thegrid.

All library exceptions inherit from :class:`PassportError`, so an embedding
application can catch a single type around
:meth:`~passport_thegrid.strategy.base.Strategy.authenticate`.  Parse errors
raised while decoding a profile document are *not* wrapped: they surface as
Python's own :class:`json.JSONDecodeError` / :class:`ValueError`.

Subclass hierarchy::

    PassportError
    +-- OAuth2ClientError       (raw failure reported by the OAuth2 client)
    +-- InternalOAuthError      (wraps an OAuth2ClientError with context)
    +-- TokenError              (token endpoint answered with an OAuth error)
    +-- AuthorizationError      (provider redirected back with an error)
    +-- StrategyNotFoundError   (registry lookup failed)
"""

from __future__ import annotations

from typing import Any, Optional


class PassportError(Exception):
    """Base exception for all passport_thegrid errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class OAuth2ClientError(PassportError):
    """Raised by :class:`~passport_thegrid.oauth2.OAuth2Client` on failure.

    ``status_code`` is ``None`` for network-level failures (timeout, DNS,
    connection refused) and the HTTP status otherwise.  ``data`` holds the
    response body, or the transport error text when there was no response.
    """

    def __init__(self, status_code: Optional[int], data: Any = None):
        if status_code is None:
            message = f"OAuth2 request failed: {data}"
        else:
            message = f"OAuth2 request failed with status {status_code}"
        super().__init__(message)
        self.status_code = status_code
        self.data = data


class InternalOAuthError(PassportError):
    """Wraps an error reported by the OAuth2 client with a fixed message.

    The original error is kept on ``oauth_error`` (and as ``__cause__`` when
    raised with ``from``).

    Example::

        try:
            body = client.authenticated_get(url, token)
        except OAuth2ClientError as exc:
            raise InternalOAuthError("failed to fetch user profile", exc) from exc
    """

    def __init__(self, message: str, oauth_error: Optional[BaseException] = None):
        super().__init__(message)
        self.oauth_error = oauth_error

    def __str__(self) -> str:
        if self.oauth_error is None:
            return self.message
        return f"{self.message}: {self.oauth_error}"


class TokenError(PassportError):
    """Raised when the token endpoint returns an OAuth 2.0 error response.

    Attributes mirror the error fields of :rfc:`6749` section 5.2.
    """

    def __init__(
        self,
        message: Optional[str],
        code: str = "invalid_request",
        uri: Optional[str] = None,
        status: int = 500,
    ):
        super().__init__(message or code)
        self.code = code
        self.uri = uri
        self.status = status


class AuthorizationError(PassportError):
    """Raised when the provider redirects back with an ``error`` parameter.

    ``status`` is the HTTP status an embedding application should answer
    with: 403 for ``access_denied``, 502 for ``server_error``, 503 for
    ``temporarily_unavailable`` and 500 for everything else.
    """

    _STATUS_BY_CODE = {
        "access_denied": 403,
        "server_error": 502,
        "temporarily_unavailable": 503,
    }

    def __init__(
        self,
        message: Optional[str],
        code: str = "server_error",
        uri: Optional[str] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message or code)
        self.code = code
        self.uri = uri
        self.status = status if status is not None else self._STATUS_BY_CODE.get(code, 500)


class StrategyNotFoundError(PassportError):
    """Raised when no strategy is registered under the requested name."""
