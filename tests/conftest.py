"""
Shared fixtures for the Opsgenie SDK test suite.

The fake server is an ``httpx.MockTransport`` handler that replays a script
of responses and records every request it receives.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest
from pydantic import BaseModel, Field

from opsgenie_sdk import Config, OpsGenieClient, ResponseMeta

API_KEY = "a871eb83-2d00-4b09-9fb9-7c134a369082"


def no_backoff(wait_min: float, wait_max: float, attempt: int, response: Any) -> float:
    return 0.0


class FakeServer:
    """Replays scripted responses; the last entry repeats once the script runs out."""

    def __init__(self, *script: httpx.Response | Exception | Callable[..., Any]):
        self.script = list(script) or [httpx.Response(200, json={})]
        self.requests: list[httpx.Request] = []

    @property
    def attempts(self) -> int:
        return len(self.requests)

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.script)) - 1
        step = self.script[index]
        if isinstance(step, Exception):
            raise step
        if callable(step) and not isinstance(step, httpx.Response):
            step = await step(request)
        # Fresh copy per attempt so a replayed response is never already consumed.
        return httpx.Response(
            step.status_code, headers=step.headers, content=step.content
        )


class GetHeartbeatRequest(BaseModel):
    """GET descriptor modelled on the heartbeat endpoint."""

    name: str

    def validate(self) -> tuple[bool, Exception | None]:  # type: ignore[override]
        if not self.name:
            return False, ValueError("Invalid request name")
        return True, None

    def method(self) -> str:
        return "GET"

    def endpoint(self) -> str:
        return f"/v2/heartbeats/{self.name}"


class AddHeartbeatRequest(BaseModel):
    """POST descriptor with aliased and optional fields."""

    name: str
    description: str | None = None
    interval: int = 10
    interval_unit: str = Field(default="minutes", alias="intervalUnit")
    enabled: bool = True

    model_config = {"populate_by_name": True}

    def validate(self) -> tuple[bool, Exception | None]:  # type: ignore[override]
        return True, None

    def method(self) -> str:
        return "POST"

    def endpoint(self) -> str:
        return "/v2/heartbeats"


@dataclass
class RawRequest:
    """Dataclass descriptor whose method and path are chosen per test."""

    verb: str = "GET"
    path: str = "/v2/things"
    note: str = "hello"
    valid: bool = True
    reason: str | None = None

    def validate(self) -> tuple[bool, Exception | None]:
        if self.valid:
            return True, None
        return False, ValueError(self.reason) if self.reason else None

    def method(self) -> str:
        return self.verb

    def endpoint(self) -> str:
        return self.path


@dataclass
class HeartbeatResult(ResponseMeta):
    """Result that keeps the ``data`` member of the body."""

    data: dict[str, Any] = field(default_factory=dict)

    def load(self, data: Any) -> None:
        if not isinstance(data, dict) or "data" not in data:
            raise ValueError("response has no data member")
        self.data = data["data"]


@pytest.fixture
def make_client() -> Callable[..., OpsGenieClient]:
    """Factory building a client wired to a FakeServer with zero backoff."""

    def _make(server: FakeServer, **overrides: Any) -> OpsGenieClient:
        values: dict[str, Any] = {
            "api_key": API_KEY,
            "transport": httpx.MockTransport(server),
            "backoff": no_backoff,
        }
        values.update(overrides)
        return OpsGenieClient(Config(**values))

    return _make
