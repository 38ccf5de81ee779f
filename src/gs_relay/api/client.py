"""Async client for the remote control API.

Every method returns a Result; transport errors, non-2xx responses and
malformed payloads are all folded into Result.fail and never raised.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from types import TracebackType
from typing import Any, Self, TypeVar
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter

from gs_relay.api.models import CreateServerRequest, GameServer, HealthStatus
from gs_relay.api.result import Result
from gs_relay.config import Config

T = TypeVar("T")

logger = logging.getLogger(__name__)

SERVERS_PATH = "/api/game-servers"
HEALTH_PATH = "/health"

_SERVER_LIST = TypeAdapter(list[GameServer])


def server_path(name: str, action: str | None = None) -> str:
    """Build the path for one server, percent-encoding the name as a single segment."""
    segment = quote(name, safe="")
    # "." and ".." would be collapsed as dot-segments by URL normalization
    if segment in {".", ".."}:
        segment = segment.replace(".", "%2E")
    path = f"{SERVERS_PATH}/{segment}"
    if action:
        path = f"{path}/{action}"
    return path


def _transport_message(exc: Exception) -> str:
    """Human-readable message for a transport-level failure."""
    return str(exc) or type(exc).__name__


class ApiClient:
    """Talks to the remote control API over HTTP."""

    def __init__(self, cfg: Config, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Initialize client with configuration.

        Args:
            cfg: Application configuration (provides base URL, credential and timeout).
            transport: Optional httpx transport, used by tests to stub the API.

        """
        self._cfg = cfg
        self._client = httpx.AsyncClient(
            base_url=cfg.api_url,
            headers=cfg.auth_headers,
            timeout=cfg.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: TracebackType | None
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the underlying connection pool."""
        await self._client.aclose()

    async def request(
        self, method: str, path: str, parse: Callable[[Any], T] | None, body: dict[str, Any] | None = None
    ) -> Result[T]:
        """Send one request and fold the outcome into a Result.

        Args:
            method: HTTP verb.
            path: Request path relative to the API base URL (already encoded).
            parse: Converts the decoded JSON body into the payload type; None ignores the body.
            body: Optional JSON request body.

        """
        logger.debug("%s %s", method, path)
        try:
            response = await self._client.request(method, path, json=body)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("%s %s failed: %s", method, path, _transport_message(e))
            return Result.fail(_transport_message(e))

        if not response.is_success:
            error = response.text or f"HTTP {response.status_code}"
            logger.info("%s %s -> %d: %s", method, path, response.status_code, error)
            return Result.fail(error)

        if parse is None:
            return Result.success(None)
        try:
            payload = response.json() if response.content else None
            return Result.success(parse(payload))
        except ValueError:  # undecodable JSON or a payload that fails validation
            logger.warning("%s %s returned an unexpected body: %r", method, path, response.text[:200])
            return Result.fail("Invalid response from API")

    # --- Lifecycle operations ---

    async def list(self) -> Result[list[GameServer]]:
        """List all game servers."""
        return await self.request("GET", SERVERS_PATH, _SERVER_LIST.validate_python)

    async def get(self, name: str) -> Result[GameServer]:
        """Get one game server by name."""
        return await self.request("GET", server_path(name), GameServer.model_validate)

    async def create(self, req: CreateServerRequest) -> Result[GameServer]:
        """Create a game server."""
        return await self.request("POST", SERVERS_PATH, GameServer.model_validate, body=req.to_json())

    async def start(self, name: str) -> Result[GameServer]:
        """Start a stopped game server."""
        return await self.request("POST", server_path(name, "start"), GameServer.model_validate)

    async def stop(self, name: str) -> Result[GameServer]:
        """Stop a running game server."""
        return await self.request("POST", server_path(name, "stop"), GameServer.model_validate)

    async def delete(self, name: str) -> Result[None]:
        """Delete a game server. The response body, if any, is ignored."""
        return await self.request("DELETE", server_path(name), None)

    async def health(self) -> Result[HealthStatus]:
        """Query API health."""
        return await self.request("GET", HEALTH_PATH, HealthStatus.model_validate)
