"""HTTP transport and response normalization for the provider API.

The orchestrator never talks to ``requests`` directly. It hands a URL and
JSON body to :func:`post_json`, which calls a :class:`Transport` and folds
whatever comes back into a :data:`~mfaflow.results.Result`:

- 2xx with a JSON body -> ``Ok(payload)``
- non-2xx with a JSON body -> ``Err(ProviderError(error, error_description))``
- connection failure or timeout -> ``Err(TransportError)``
- body that is not JSON -> :class:`~mfaflow.exceptions.MalformedResponseError`
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Protocol

import requests

from mfaflow.exceptions import MalformedResponseError, ProviderError, TransportError
from mfaflow.logging import get_logger
from mfaflow.results import Err, Ok, Result

LOG = get_logger(__name__)

DEFAULT_TIMEOUT = 10.0  # seconds


@dataclass(frozen=True)
class RawResponse:
    """Status code and undecoded body of a provider response."""

    status_code: int
    text: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(Protocol):
    """Anything that can POST a JSON body and hand back the raw response.

    Implementations raise :class:`~mfaflow.exceptions.TransportError` when no
    response arrives before ``timeout`` seconds or the connection fails.
    """

    async def post(
        self,
        url: str,
        body: dict[str, Any],
        headers: dict[str, str],
        timeout: float,
    ) -> RawResponse: ...


class RequestsTransport:
    """Default transport backed by a ``requests.Session``.

    Requests are blocking, so each call runs in a worker thread and the
    awaiting coroutine is suspended until it finishes or times out.
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session or requests.Session()

    def _post(
        self,
        url: str,
        body: dict[str, Any],
        headers: dict[str, str],
        timeout: float,
    ) -> RawResponse:
        try:
            response = self._session.post(url, json=body, headers=headers, timeout=timeout)
        except requests.exceptions.Timeout as exc:
            raise TransportError(f"Request to {url} timed out after {timeout}s", "timeout") from exc
        except requests.exceptions.ConnectionError as exc:
            raise TransportError(f"Could not connect to {url}: {exc}", "connection_error") from exc
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc
        return RawResponse(status_code=response.status_code, text=response.text)

    async def post(
        self,
        url: str,
        body: dict[str, Any],
        headers: dict[str, str],
        timeout: float,
    ) -> RawResponse:
        return await asyncio.to_thread(self._post, url, body, headers, timeout)

    def close(self) -> None:
        self._session.close()


def _decode(response: RawResponse, url: str) -> Any:
    try:
        return json.loads(response.text)
    except ValueError as exc:
        LOG.error(
            "provider_response_not_json",
            url=url,
            status_code=response.status_code,
            body_length=len(response.text),
        )
        raise MalformedResponseError(
            f"Provider returned a non-JSON body (HTTP {response.status_code}) for {url}",
            status_code=response.status_code,
        ) from exc


async def post_json(
    transport: Transport,
    url: str,
    body: dict[str, Any],
    headers: dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Result:
    """POST ``body`` to ``url`` and normalize the answer into a Result.

    Args:
        transport: Transport used to send the request.
        url: Absolute endpoint URL.
        body: JSON-serializable request body.
        headers: Optional extra headers (e.g. ``Authorization``).
        timeout: Deadline in seconds for the whole request.

    Returns:
        ``Ok`` with the parsed payload, or ``Err`` with a
        :class:`ProviderError` / :class:`TransportError`.

    Raises:
        MalformedResponseError: If the body cannot be parsed as JSON.
    """
    request_headers = {"Content-Type": "application/json", **(headers or {})}
    try:
        response = await transport.post(url, body, request_headers, timeout)
    except TransportError as exc:
        LOG.warning("provider_request_failed", url=url, error=exc.name)
        return Err(exc)

    payload = _decode(response, url)
    if response.is_success:
        LOG.debug("provider_request_succeeded", url=url, status_code=response.status_code)
        return Ok(payload)

    if isinstance(payload, dict) and payload.get("error"):
        name = str(payload["error"])
        description = payload.get("error_description") or name
    else:
        name = ProviderError.default_name
        description = f"Provider returned HTTP {response.status_code} without an error code"
    LOG.info(
        "provider_request_rejected",
        url=url,
        status_code=response.status_code,
        error=name,
    )
    return Err(ProviderError(str(description), name=name))
