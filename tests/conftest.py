"""Shared pytest fixtures for the itc test suite."""

import json
from typing import Callable
from unittest.mock import MagicMock

import httpx
import pytest

from itc.client import ITunesConnectClient
from itc.cookies import SessionState
from itc.models import Config, Provider, Session, User

SERVICE_KEY = "test-widget-key"
ACN01 = "acn01-value"
MYACINFO = "myacinfo-value"
ITCTX = "itctx-value"

Handler = Callable[[httpx.Request], httpx.Response]

SESSION_PAYLOAD = {
    "user": {
        "fullName": "Jane Appleseed",
        "firstName": "Jane",
        "lastName": "Appleseed",
        "emailAddress": "jane@example.com",
        "prsId": "1234567",
    },
    "provider": {"providerId": 5, "name": "Example Inc.", "contentTypes": ["SOFTWARE"]},
    "availableProviders": [
        {"providerId": 5, "name": "Example Inc.", "contentTypes": ["SOFTWARE"]},
        {"providerId": 7, "name": "Side Project LLC", "contentTypes": ["SOFTWARE", "MAC_SOFTWARE"]},
    ],
}

TESTER_PAYLOAD = {
    "id": "t1",
    "providerId": 5,
    "firstName": "Ada",
    "lastName": "Lovelace",
    "email": "a@b.com",
    "latestInstallInfo": {
        "latestInstalledAppAdamId": "10",
        "latestInstalledBuildId": "b42",
        "latestInstalledDate": "1500000000000",
        "latestInstalledShortVersion": "1.2",
        "latestInstalledVersion": "42",
    },
    "appAdamId": 10,
    "accountId": "acc-1",
    "inviteToken": "invite-xyz",
    "status": "installed",
    "statusModTime": "2017-07-14T02:40:00Z",
    "latestInstalledTrain": "1.2",
    "latestInstalledVersion": "42",
    "groups": ["g1", "g2"],
    "installCount": 3,
    "sessionCount": 12,
    "crashCount": 1,
}

GROUP_PAYLOAD = {
    "id": "g1",
    "providerId": 5,
    "appAdamId": 10,
    "name": "External Testers",
    "isActive": True,
    "isInternalGroup": False,
    "isDefaultExternalGroup": True,
}


def json_response(status_code: int, payload, cookies: dict[str, str] | None = None) -> httpx.Response:
    """Build a JSON response, optionally setting cookies."""
    headers = [("content-type", "application/json")]
    for name, value in (cookies or {}).items():
        headers.append(("set-cookie", f"{name}={value}; Path=/; Secure; HttpOnly"))
    return httpx.Response(status_code, content=json.dumps(payload).encode("utf-8"), headers=headers)


class FakeITunesConnect:
    """In-memory stand-in for the Apple auth and iTunes Connect hosts."""

    def __init__(self) -> None:
        self.calls: list[httpx.Request] = []
        self.routes: dict[tuple[str, str, str], Handler] = {}

        self.route("GET", "olympus.itunes.apple.com", "/v1/app/config",
                   lambda r: json_response(200, {"authServiceKey": SERVICE_KEY}))
        self.route("POST", "idmsa.apple.com", "/appleauth/auth/signin",
                   lambda r: json_response(200, {"authType": "sa"},
                                           {"acn01": ACN01, "myacinfo": MYACINFO}))
        self.route("GET", "olympus.itunes.apple.com", "/v1/session",
                   lambda r: json_response(200, SESSION_PAYLOAD, {"itctx": ITCTX}))

    def route(self, method: str, host: str, path: str, handler: Handler) -> None:
        self.routes[(method, host, path)] = handler

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get((request.method, request.url.host, request.url.path))
        if route is None:
            return httpx.Response(404, text="Not Found")
        return route(request)

    def calls_to(self, path: str) -> list[httpx.Request]:
        return [c for c in self.calls if c.url.path == path]

    def http(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_itc() -> FakeITunesConnect:
    """Returns a fake iTunes Connect server with working auth endpoints."""
    return FakeITunesConnect()


@pytest.fixture
def authenticated_state() -> SessionState:
    """Returns a SessionState as produced by a successful login."""
    return SessionState(
        service_key=SERVICE_KEY,
        acn01=ACN01,
        myacinfo=MYACINFO,
        itctx=ITCTX,
        session=Session(
            user=User(full_name="Jane Appleseed", email="jane@example.com"),
            provider=Provider(provider_id=5, name="Example Inc."),
            available_providers=[Provider(provider_id=5, name="Example Inc.")],
        ),
    )


@pytest.fixture
def itc_client(fake_itc: FakeITunesConnect, authenticated_state: SessionState) -> ITunesConnectClient:
    """Returns an authenticated client talking to the fake server."""
    return ITunesConnectClient(authenticated_state, fake_itc.http())


@pytest.fixture
def sample_config() -> Config:
    """Returns a Config with credentials for testing."""
    return Config(
        apple_id="jane@example.com",
        apple_id_password="hunter2",
        timeout=30.0,
        retries=0,
    )


@pytest.fixture
def mock_itc_client() -> MagicMock:
    """Returns a MagicMock for ITunesConnectClient usable as a context manager."""
    mock = MagicMock(spec=ITunesConnectClient)
    mock.__enter__.return_value = mock
    mock.__exit__.return_value = False
    return mock
