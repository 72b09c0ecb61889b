"""Shared test helpers for unit tests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pytest

from mfaflow.options import MfaOptions
from mfaflow.orchestrator import MultiFactorAuthentication
from mfaflow.transport import RawResponse

DOMAIN = "tenant.example.com"
CLIENT_ID = "test_client_id"


@dataclass
class RecordedRequest:
    url: str
    body: dict[str, Any]
    headers: dict[str, str]
    timeout: float

    @property
    def path(self) -> str:
        return self.url.removeprefix(f"https://{DOMAIN}")


@dataclass
class FakeTransport:
    """Transport that replays queued responses and records every request.

    Queue entries are ``(status_code, payload)`` tuples (payload is JSON
    encoded unless it is already a string) or exceptions to raise.
    """

    responses: list[Any] = field(default_factory=list)
    requests: list[RecordedRequest] = field(default_factory=list)

    def queue(self, status_code: int, payload: Any) -> FakeTransport:
        self.responses.append((status_code, payload))
        return self

    def queue_provider_error(
        self, error: str, description: str, status_code: int = 403
    ) -> FakeTransport:
        return self.queue(status_code, {"error": error, "error_description": description})

    def queue_error(self, exc: Exception) -> FakeTransport:
        self.responses.append(exc)
        return self

    @property
    def paths(self) -> list[str]:
        return [request.path for request in self.requests]

    async def post(
        self,
        url: str,
        body: dict[str, Any],
        headers: dict[str, str],
        timeout: float,
    ) -> RawResponse:
        self.requests.append(RecordedRequest(url, body, headers, timeout))
        if not self.responses:
            raise AssertionError(f"Unexpected request to {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        status_code, payload = response
        text = payload if isinstance(payload, str) else json.dumps(payload)
        return RawResponse(status_code=status_code, text=text)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_mfa(transport: FakeTransport):
    """Factory building an orchestrator wired to the fake transport."""

    def _make(options: MfaOptions | None = None, **kwargs: Any) -> MultiFactorAuthentication:
        return MultiFactorAuthentication(
            CLIENT_ID, DOMAIN, options, transport=transport, **kwargs
        )

    return _make
