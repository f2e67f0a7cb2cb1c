"""Shared test fixtures: in-memory transport and login collaborators."""

import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from garmin_connect.adapters.protocol import Credentials, Session, TransportResponse  # noqa: E402
from garmin_connect.client import GarminConnectClient  # noqa: E402
from garmin_connect.endpoints import SOCIAL_PROFILE_URL, USER_PREFERENCES_URL  # noqa: E402
from garmin_connect.session import SessionContext  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"
DISPLAY_NAME = "runner-42"

Handler = Callable[[dict[str, str] | None, Session], Awaitable[TransportResponse]]


def load_fixture(name: str) -> Any:
    return json.loads((FIXTURES_DIR / name).read_text())


def json_response(payload: Any, status: int = 200) -> TransportResponse:
    return TransportResponse(
        status=status,
        body=json.dumps(payload).encode(),
        headers={"content-type": "application/json"},
    )


def make_activities(start: int, count: int) -> list[dict[str, Any]]:
    return [
        {
            "activityId": 14318900000 + i,
            "activityName": f"Run {i}",
            "startTimeLocal": "2024-03-14 06:30:02",
            "activityType": {"typeId": 1, "typeKey": "running", "parentTypeId": 17},
            "distance": 10000.0,
            "duration": 3000.0,
        }
        for i in range(start, start + count)
    ]


@dataclass
class RecordedCall:
    path: str
    params: dict[str, str] | None
    session: Session


class FakeTransport:
    """Routes GETs by path.

    A route is either a queue of responses (the last one repeats) or an async
    handler receiving (params, session).
    """

    def __init__(self) -> None:
        self.routes: dict[str, list[TransportResponse] | Handler] = {}
        self.calls: list[RecordedCall] = []
        self.closed = False

    def respond(self, path: str, *responses: TransportResponse) -> None:
        self.routes[path] = list(responses)

    def respond_json(self, path: str, payload: Any, status: int = 200) -> None:
        self.respond(path, json_response(payload, status))

    def handle(self, path: str, handler: Handler) -> None:
        self.routes[path] = handler

    def calls_to(self, path: str) -> list[RecordedCall]:
        return [call for call in self.calls if call.path == path]

    async def get(self, path, params, session) -> TransportResponse:
        self.calls.append(RecordedCall(path, dict(params) if params else None, session))
        await asyncio.sleep(0)
        route = self.routes.get(path)
        if route is None:
            return TransportResponse(status=404, body=b'{"message": "not found"}')
        if callable(route):
            return await route(dict(params) if params else None, session)
        if len(route) > 1:
            return route.pop(0)
        return route[0]

    async def aclose(self) -> None:
        self.closed = True


class FakeLogin:
    """Counts logins; optionally blocks on a gate or fails."""

    def __init__(
        self,
        fail_with: Exception | None = None,
        gate: asyncio.Event | None = None,
        expires_in: timedelta | None = None,
    ) -> None:
        self.calls = 0
        self.fail_with = fail_with
        self.gate = gate
        self.expires_in = expires_in
        self.closed = False

    async def login(self, credentials: Credentials) -> Session:
        self.calls += 1
        number = self.calls
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        expires_at = datetime.now(UTC) + self.expires_in if self.expires_in is not None else None
        return Session(access_token=f"token-{number}", expires_at=expires_at)

    async def aclose(self) -> None:
        self.closed = True


async def settle() -> None:
    """Let every ready task run until it blocks again."""
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.fixture
def credentials():
    return Credentials(username="alex.runner@example.com", password="correct-horse")


@pytest.fixture
def transport():
    fake = FakeTransport()
    fake.respond_json(SOCIAL_PROFILE_URL, load_fixture("social_profile.json"))
    fake.respond_json(USER_PREFERENCES_URL, load_fixture("user_preferences.json"))
    return fake


@pytest.fixture
def login():
    return FakeLogin()


@pytest.fixture
def context(transport, login, credentials):
    return SessionContext(transport, login, credentials)


@pytest.fixture
def client(context):
    return GarminConnectClient(context)
