"""Pydantic models shared across passport_thegrid.

This is the single source of truth for data shapes in the package:

**Configuration** -- :class:`StrategyOptions`, the options a strategy is
constructed with.  Keys are accepted both in snake_case and in the camelCase
spelling used by Passport-style configuration (``clientID``,
``callbackURL``, ``userAgent`` ...).  Instances are frozen; strategies derive
their resolved configuration with ``model_copy(update=...)``.

**Protocol data** -- :class:`TokenResponse`, the parsed token endpoint
response.

**Results** -- :class:`Profile` and :class:`Email`, the normalized user
profile, and :class:`AuthOutcome`, the result of one authentication attempt.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Configuration ---


class StrategyOptions(BaseModel):
    """Options for an OAuth 2.0 strategy.

    Required credentials are typed optional: their absence is only reported
    once the OAuth2 client actually talks to the provider.

    Example::

        StrategyOptions(
            clientID="123-456-789",
            clientSecret="shhh-its-a-secret",
            callbackURL="https://www.example.net/auth/thegrid/callback",
            userAgent="myapp.com",
        )
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    client_id: Optional[str] = Field(default=None, alias="clientID")
    client_secret: Optional[str] = Field(default=None, alias="clientSecret")
    callback_url: Optional[str] = Field(default=None, alias="callbackURL")
    scope: list[str] = Field(default_factory=list)
    authorization_url: Optional[str] = Field(default=None, alias="authorizationURL")
    token_url: Optional[str] = Field(default=None, alias="tokenURL")
    user_profile_url: Optional[str] = Field(default=None, alias="userProfileURL")
    scope_separator: Optional[str] = Field(default=None, alias="scopeSeparator")
    custom_headers: dict[str, str] = Field(default_factory=dict, alias="customHeaders")
    user_agent: Optional[str] = Field(default=None, alias="userAgent")
    skip_user_profile: bool = Field(default=False, alias="skipUserProfile")
    timeout: float = Field(default=30.0, description="Transport timeout in seconds")

    @field_validator("scope", mode="before")
    @classmethod
    def _split_scope(cls, value: Any) -> Any:
        # A single scope may be given as a plain string.
        if isinstance(value, str):
            return [value]
        return value


# --- Protocol data ---


class TokenResponse(BaseModel):
    """Parsed response of the token endpoint (:rfc:`6749` section 5.1).

    Provider-specific fields are preserved in ``model_extra``.
    """

    model_config = ConfigDict(extra="allow")

    access_token: str
    token_type: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    scope: Optional[str] = None


# --- Results ---


class Email(BaseModel):
    value: Optional[str] = None


class Profile(BaseModel):
    """Normalized user profile produced by a strategy.

    ``model_dump(by_alias=True)`` gives the provider-agnostic JSON shape::

        {
            "provider": "thegrid",
            "id": "u-1",
            "displayName": "Ada Lovelace",
            "emails": [{"value": "ada@example.com"}],
            "_raw": "{...}",
            "_json": {...},
        }
    """

    model_config = ConfigDict(populate_by_name=True)

    provider: str
    id: Optional[str] = None
    display_name: Optional[str] = Field(default=None, alias="displayName")
    emails: list[Email] = Field(default_factory=list)
    raw: Optional[str] = Field(default=None, alias="_raw")
    json_data: Any = Field(default=None, alias="_json")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class AuthOutcome(BaseModel):
    """Result of a single :meth:`Strategy.authenticate` call.

    Exactly one of three shapes is produced:

    - ``redirect_url`` set -- the user agent must be sent to the provider.
    - ``user`` set -- authentication succeeded; ``info`` is optional extra
      data returned by the verify callback.
    - ``failure`` set -- the attempt was rejected (denied by the user,
      state mismatch, or the verify callback returned a falsy value).
    """

    user: Any = None
    info: Any = None
    redirect_url: Optional[str] = None
    failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.user is not None and self.failure is None

    @classmethod
    def success(cls, user: Any, info: Any = None) -> AuthOutcome:
        return cls(user=user, info=info)

    @classmethod
    def fail(cls, message: str) -> AuthOutcome:
        return cls(failure=message)

    @classmethod
    def redirect(cls, url: str) -> AuthOutcome:
        return cls(redirect_url=url)
