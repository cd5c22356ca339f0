"""Tests for the generic OAuth2Strategy flow, exercised through TheGrid."""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import pytest

from passport_thegrid.exceptions import AuthorizationError, InternalOAuthError, TokenError
from passport_thegrid.models import AuthOutcome, Profile
from passport_thegrid.strategy import OAuth2Strategy


def _noop_verify(access_token, refresh_token, profile):
    return None


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestOAuth2StrategyConstruction:
    def test_requires_authorization_url(self) -> None:
        with pytest.raises(ValueError, match="authorization_url"):
            OAuth2Strategy({"tokenURL": "https://p.example/token"}, _noop_verify)

    def test_requires_token_url(self) -> None:
        with pytest.raises(ValueError, match="token_url"):
            OAuth2Strategy({"authorizationURL": "https://p.example/auth"}, _noop_verify)

    def test_default_profile_has_no_network(self) -> None:
        strategy = OAuth2Strategy(
            {"authorizationURL": "https://p.example/auth", "tokenURL": "https://p.example/token"},
            _noop_verify,
        )
        assert strategy.user_profile("tok") == Profile(provider="oauth2")
        assert strategy.oauth2.scope_separator == " "


# ---------------------------------------------------------------------------
# Redirect step
# ---------------------------------------------------------------------------


class TestRedirect:
    def test_no_code_redirects_to_provider(self, make_strategy, fake_thegrid) -> None:
        strategy = make_strategy(scope=["user", "email"])

        outcome = strategy.authenticate({})

        assert outcome.redirect_url is not None
        assert not outcome.ok
        parts = urlsplit(outcome.redirect_url)
        assert f"{parts.scheme}://{parts.netloc}{parts.path}" == (
            "https://passport.thegrid.io/login/authorize"
        )
        assert parse_qs(parts.query) == {
            "response_type": ["code"],
            "client_id": ["123-456-789"],
            "redirect_uri": ["https://www.example.net/auth/thegrid/callback"],
            "scope": ["user,email"],
        }
        assert fake_thegrid.requests == []

    def test_state_and_scope_override(self, make_strategy) -> None:
        strategy = make_strategy(scope=["user"])

        outcome = strategy.authenticate({}, state="s-1", scope=["admin"])

        query = parse_qs(urlsplit(outcome.redirect_url).query)
        assert query["state"] == ["s-1"]
        assert query["scope"] == ["admin"]

    def test_single_scope_string(self, make_strategy) -> None:
        outcome = make_strategy(scope="user").authenticate({})
        assert parse_qs(urlsplit(outcome.redirect_url).query)["scope"] == ["user"]


# ---------------------------------------------------------------------------
# Callback step
# ---------------------------------------------------------------------------


class TestCallback:
    def test_successful_flow(self, make_strategy, fake_thegrid, verify) -> None:
        strategy = make_strategy()

        outcome = strategy.authenticate({"code": "auth-code"})

        assert isinstance(outcome, AuthOutcome)
        assert outcome.ok
        assert outcome.user == {"id": "u-1"}

        access_token, refresh_token, profile = verify.calls[0]
        assert access_token == "tok123"
        assert refresh_token == "ref456"
        assert profile.provider == "thegrid"
        assert profile.display_name == "Ada Lovelace"

        assert [r.url.path for r in fake_thegrid.requests] == [
            "/login/authorize/token",
            "/api/user",
        ]
        assert fake_thegrid.form(0) == {
            "grant_type": "authorization_code",
            "code": "auth-code",
            "redirect_uri": "https://www.example.net/auth/thegrid/callback",
            "client_id": "123-456-789",
            "client_secret": "shhh-its-a-secret",
        }
        assert fake_thegrid.requests[1].headers["Authorization"] == "Bearer tok123"

    def test_user_agent_on_every_request(self, make_strategy, fake_thegrid) -> None:
        make_strategy(userAgent="myapp.com").authenticate({"code": "c"})
        assert {r.headers["User-Agent"] for r in fake_thegrid.requests} == {"myapp.com"}

    def test_verify_rejection_fails(self, make_strategy, verify) -> None:
        verify.result = False
        outcome = make_strategy().authenticate({"code": "c"})
        assert not outcome.ok
        assert outcome.failure == "Verification rejected the credentials."

    def test_verify_exception_propagates(self, make_strategy, verify) -> None:
        def boom(access_token, refresh_token, profile):
            raise RuntimeError("database down")

        strategy = make_strategy()
        strategy._verify = boom
        with pytest.raises(RuntimeError, match="database down"):
            strategy.authenticate({"code": "c"})

    def test_skip_user_profile(self, make_strategy, fake_thegrid, verify) -> None:
        outcome = make_strategy(skipUserProfile=True).authenticate({"code": "c"})

        assert outcome.ok
        assert verify.calls[0][2] is None
        assert [r.url.path for r in fake_thegrid.requests] == ["/login/authorize/token"]

    def test_matching_state(self, make_strategy) -> None:
        outcome = make_strategy().authenticate(
            {"code": "c", "state": "s-1"}, expected_state="s-1"
        )
        assert outcome.ok

    def test_state_mismatch_fails_without_exchange(self, make_strategy, fake_thegrid) -> None:
        outcome = make_strategy().authenticate(
            {"code": "c", "state": "forged"}, expected_state="s-1"
        )
        assert outcome.failure == "Invalid authorization request state."
        assert fake_thegrid.requests == []

    def test_profile_failure_stops_flow(self, make_strategy, fake_thegrid, verify) -> None:
        fake_thegrid.user_status = 500
        fake_thegrid.user_body = "oops"

        with pytest.raises(InternalOAuthError, match="failed to fetch user profile"):
            make_strategy().authenticate({"code": "c"})
        assert verify.calls == []

    def test_profile_parse_error_stops_flow(self, make_strategy, fake_thegrid, verify) -> None:
        fake_thegrid.user_body = "not-json"

        with pytest.raises(ValueError):
            make_strategy().authenticate({"code": "c"})
        assert verify.calls == []


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    def test_access_denied_fails(self, make_strategy, fake_thegrid) -> None:
        outcome = make_strategy().authenticate(
            {"error": "access_denied", "error_description": "User said no"}
        )
        assert outcome.failure == "User said no"
        assert fake_thegrid.requests == []

    def test_provider_error_raises(self, make_strategy) -> None:
        with pytest.raises(AuthorizationError) as exc_info:
            make_strategy().authenticate(
                {
                    "error": "temporarily_unavailable",
                    "error_description": "Try later",
                    "error_uri": "https://passport.thegrid.io/errors",
                }
            )
        assert exc_info.value.code == "temporarily_unavailable"
        assert exc_info.value.status == 503
        assert exc_info.value.uri == "https://passport.thegrid.io/errors"
        assert str(exc_info.value) == "Try later"

    def test_token_error_response(self, make_strategy, fake_thegrid, verify) -> None:
        fake_thegrid.token_status = 400
        fake_thegrid.token_body = {
            "error": "invalid_grant",
            "error_description": "Authorization code expired",
        }

        with pytest.raises(TokenError) as exc_info:
            make_strategy().authenticate({"code": "stale"})

        assert exc_info.value.code == "invalid_grant"
        assert str(exc_info.value) == "Authorization code expired"
        assert verify.calls == []

    def test_token_transport_failure(self, make_strategy, fake_thegrid) -> None:
        fake_thegrid.token_status = 502
        fake_thegrid.token_body = "<html>Bad Gateway</html>"

        with pytest.raises(InternalOAuthError, match="failed to obtain access token"):
            make_strategy().authenticate({"code": "c"})
