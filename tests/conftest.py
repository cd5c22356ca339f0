"""Shared test fixtures for passport_thegrid.

Provides a fake TheGrid provider built on :class:`httpx.MockTransport`,
a recording verify callback, and a ready-to-use strategy wired to the fake
provider.  These fixtures are automatically discovered by pytest.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Optional
from urllib.parse import parse_qsl

import httpx
import pytest

from passport_thegrid import TheGridStrategy
from passport_thegrid.models import Profile


ADA = {"uuid": "u-1", "name": "Ada Lovelace", "email": "ada@example.com"}

BASE_OPTIONS: dict[str, Any] = {
    "clientID": "123-456-789",
    "clientSecret": "shhh-its-a-secret",
    "callbackURL": "https://www.example.net/auth/thegrid/callback",
}


class FakeTheGrid:
    """In-memory stand-in for passport.thegrid.io.

    Records every request and answers the token and user endpoints.  Tests
    tweak ``token_status``/``token_body`` and ``user_status``/``user_body``
    to simulate provider behaviour.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.token_status = 200
        self.token_body: Any = {
            "access_token": "tok123",
            "refresh_token": "ref456",
            "token_type": "Bearer",
            "expires_in": 3600,
        }
        self.user_status = 200
        self.user_body: Any = ADA

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/login/authorize/token":
            return self._respond(self.token_status, self.token_body)
        if request.url.path == "/api/user":
            return self._respond(self.user_status, self.user_body)
        return httpx.Response(404, text="not found")

    @staticmethod
    def _respond(status: int, body: Any) -> httpx.Response:
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def form(self, index: int = 0) -> dict[str, str]:
        """Decode the form body of the *index*-th recorded request."""
        return dict(parse_qsl(self.requests[index].content.decode()))


class RecordingVerify:
    """Verify callback that records its arguments and returns ``result``."""

    def __init__(self, result: Any = None) -> None:
        self.calls: list[tuple[str, Optional[str], Optional[Profile]]] = []
        self.result = result

    def __call__(
        self, access_token: str, refresh_token: Optional[str], profile: Optional[Profile]
    ) -> Any:
        self.calls.append((access_token, refresh_token, profile))
        if self.result is not None:
            return self.result
        return {"id": profile.id if profile else None}


@pytest.fixture
def ada_body() -> str:
    return json.dumps(ADA)


@pytest.fixture
def fake_thegrid() -> FakeTheGrid:
    return FakeTheGrid()


@pytest.fixture
def verify() -> RecordingVerify:
    return RecordingVerify()


@pytest.fixture
def make_strategy(
    fake_thegrid: FakeTheGrid, verify: RecordingVerify
) -> Callable[..., TheGridStrategy]:
    """Factory for TheGridStrategy instances talking to the fake provider."""

    def _make(**overrides: Any) -> TheGridStrategy:
        options = {**BASE_OPTIONS, **overrides}
        strategy = TheGridStrategy(options, verify)
        strategy.oauth2._transport = fake_thegrid.transport
        return strategy

    return _make
