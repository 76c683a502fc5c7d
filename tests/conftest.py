"""Shared fixtures: test environment and a simulated Automower cloud."""

from __future__ import annotations

import base64
import json
import os
from typing import Dict, List, Optional, Set
from urllib.parse import parse_qsl

os.environ["CLIENT_ID"] = "test-client"
os.environ["CLIENT_SECRET"] = "test-secret"
os.environ["REDIRECT_URI"] = "http://testserver/callback"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TOKEN_URL"] = "https://auth.test/v1/oauth2/token"
os.environ["AUTHORIZE_URL"] = "https://auth.test/v1/oauth2/authorize"
os.environ["AMC_API_BASE"] = "https://amc.test/v1"
os.environ["AMC_PAYLOAD_ENVELOPE"] = "jsonapi"

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from mowerdash import models  # noqa: E402,F401
from mowerdash.services import (  # noqa: E402
    AutomowerClient,
    Credential,
    MowerService,
    TokenManager,
    TokenRecord,
    TokenStore,
)

TOKEN_URL = os.environ["TOKEN_URL"]
AUTHORIZE_URL = os.environ["AUTHORIZE_URL"]
API_BASE = os.environ["AMC_API_BASE"]
REDIRECT_URI = os.environ["REDIRECT_URI"]


def mower_resource(
    mower_id: str = "mower-1",
    name: str = "Lawn Ranger",
    activity: str = "PARKED_IN_CS",
    battery: int = 87,
) -> Dict:
    return {
        "type": "mower",
        "id": mower_id,
        "attributes": {
            "system": {"name": name, "model": "AUTOMOWER 430X", "serialNumber": 1},
            "mower": {"activity": activity, "state": "RESTRICTED", "mode": "MAIN_AREA"},
            "battery": {"batteryPercent": battery},
        },
    }


class FakeCloud:
    """In-process stand-in for the token endpoint and the device API.

    Refresh tokens rotate: only the most recently issued one is accepted, and
    only the most recently issued access token authorizes API calls.
    """

    def __init__(self) -> None:
        self.codes: Set[str] = {"good-code"}
        self.refresh_token: Optional[str] = None
        self.valid_access: Set[str] = set()
        self.envelope = "jsonapi"
        self.mowers: List[Dict] = [mower_resource()]
        self.api_failures: List[int] = []
        self.token_response: Optional[httpx.Response] = None
        self.token_requests: List[Dict[str, str]] = []
        self.api_requests: List[httpx.Request] = []
        self.actions: List[Dict] = []
        self._issued = 1

    def seed(self, access_token: Optional[str], refresh_token: str) -> None:
        self.valid_access = {access_token} if access_token else set()
        self.refresh_token = refresh_token

    @property
    def refresh_calls(self) -> int:
        return sum(1 for form in self.token_requests if form["grant_type"] == "refresh_token")

    def api_tokens(self) -> List[str]:
        return [r.headers["Authorization"].split(" ", 1)[1] for r in self.api_requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        if str(request.url) == TOKEN_URL:
            return self._token(request)
        if str(request.url).startswith(API_BASE):
            return self._api(request)
        return httpx.Response(404)

    def _issue(self) -> httpx.Response:
        self._issued += 1
        access, refresh = f"A{self._issued}", f"R{self._issued}"
        self.valid_access = {access}
        self.refresh_token = refresh
        return httpx.Response(
            200,
            json={
                "access_token": access,
                "refresh_token": refresh,
                "expires_in": 86399,
                "token_type": "Bearer",
                "scope": "iam:read amc:api",
            },
        )

    def _token(self, request: httpx.Request) -> httpx.Response:
        expected = base64.b64encode(b"test-client:test-secret").decode()
        if request.headers.get("Authorization") != f"Basic {expected}":
            return httpx.Response(401, json={"error": "invalid_client"})
        form = dict(parse_qsl(request.content.decode()))
        self.token_requests.append(form)
        if self.token_response is not None:
            return self.token_response

        grant = form.get("grant_type")
        if grant == "authorization_code":
            if form.get("code") in self.codes and form.get("redirect_uri") == REDIRECT_URI:
                self.codes.discard(form["code"])
                return self._issue()
        elif grant == "refresh_token":
            if self.refresh_token and form.get("refresh_token") == self.refresh_token:
                return self._issue()
        return httpx.Response(400, json={"error": "invalid_grant"})

    def _api(self, request: httpx.Request) -> httpx.Response:
        self.api_requests.append(request)
        if self.api_failures:
            return httpx.Response(self.api_failures.pop(0), json={"errors": ["boom"]})

        token = request.headers.get("Authorization", "").replace("Bearer ", "", 1)
        if token not in self.valid_access:
            return httpx.Response(401, json={"message": "Unauthorized"})
        if request.headers.get("X-Api-Key") != "test-client":
            return httpx.Response(403, json={"message": "Invalid API key"})

        if request.method == "GET" and request.url.path.endswith("/mowers"):
            body = {"data": self.mowers} if self.envelope == "jsonapi" else self.mowers
            return httpx.Response(200, json=body)
        if request.method == "POST" and request.url.path.endswith("/actions"):
            self.actions.append(
                {
                    "path": request.url.path,
                    "content_type": request.headers.get("Content-Type"),
                    "payload": json.loads(request.content),
                }
            )
            return httpx.Response(202)
        return httpx.Response(404)


@pytest.fixture
def cloud() -> FakeCloud:
    return FakeCloud()


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest_asyncio.fixture
async def http(cloud: FakeCloud):
    async with httpx.AsyncClient(transport=httpx.MockTransport(cloud.handler)) as client:
        yield client


@pytest.fixture
def manager(http: httpx.AsyncClient) -> TokenManager:
    return TokenManager(
        http,
        Credential("test-client", "test-secret"),
        token_url=TOKEN_URL,
        authorize_url=AUTHORIZE_URL,
        redirect_uri=REDIRECT_URI,
        scope="iam:read amc:api",
    )


@pytest.fixture
def amc(http: httpx.AsyncClient) -> AutomowerClient:
    return AutomowerClient(http, api_base=API_BASE, api_key="test-client")


@pytest.fixture
def service(manager: TokenManager, amc: AutomowerClient) -> MowerService:
    return MowerService(manager, amc)


@pytest.fixture
def store(db: Session) -> TokenStore:
    """Session holding the stale pair A1/R1."""

    return TokenStore.create(db, TokenRecord("A1", "R1", expires_in=3600))
