"""Shared fixtures: a stubbed remote control API and an in-memory chat interaction."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeAlias

import httpx
import pytest

from gs_relay.api.client import ApiClient
from gs_relay.chat.interaction import Interaction, SelectCallback
from gs_relay.chat.messages import Reply
from gs_relay.config import Config

API_URL = "http://control.test"

Responder: TypeAlias = Callable[[httpx.Request], httpx.Response]


class StubApi:
    """Routes requests by (method, raw path) to canned responses and records them."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Responder] = {}
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def add(self, method: str, path: str, *, status: int = 200, json: Any = None, text: str | None = None) -> None:
        """Register a canned response; JSON wins over text when both are given."""

        def respond(_request: httpx.Request) -> httpx.Response:
            if json is not None:
                return httpx.Response(status, json=json)
            return httpx.Response(status, text=text or "")

        self.routes[(method, path)] = respond

    def add_responder(self, method: str, path: str, responder: Responder) -> None:
        self.routes[(method, path)] = responder

    def paths(self, method: str | None = None) -> list[str]:
        """Raw paths of recorded requests, optionally filtered by method."""
        return [r.url.raw_path.decode() for r in self.requests if method is None or r.method == method]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get((request.method, request.url.raw_path.decode()))
        if responder is None:
            return httpx.Response(404)
        return responder(request)


class FakeSubscription:
    """Records cancellation of a menu listener."""

    def __init__(self) -> None:
        self.cancelled = False
        self.cancel_calls = 0

    def cancel(self) -> None:
        self.cancel_calls += 1
        self.cancelled = True


@dataclass
class FakePick:
    """A menu pick delivered by FakeInteraction.pick."""

    user_id: str
    values: list[str] = field(default_factory=list)
    deferred: bool = False

    async def defer_update(self) -> None:
        self.deferred = True


class FakeInteraction(Interaction):
    """Interaction that records replies and lets tests deliver menu picks."""

    def __init__(
        self, command: str, subcommand: str | None = None, options: dict[str, str] | None = None, *, user_id: str = "user-1"
    ) -> None:
        super().__init__(command, subcommand, user_id, options)
        self.replies: list[Reply] = []
        self.listeners: dict[str, list[tuple[SelectCallback, FakeSubscription]]] = {}
        self.picks: list[FakePick] = []
        self.menu_shown = asyncio.Event()

    async def defer_reply(self, *, ephemeral: bool = True) -> None:
        self.deferred = True
        self.ephemeral = ephemeral

    async def _replace_reply(self, reply: Reply) -> None:
        self.replies.append(reply)
        if reply.menu is not None:
            self.menu_shown.set()

    def on_select(self, custom_id: str, callback: SelectCallback) -> FakeSubscription:
        subscription = FakeSubscription()
        self.listeners.setdefault(custom_id, []).append((callback, subscription))
        return subscription

    async def pick(self, custom_id: str, value: str, *, user_id: str | None = None, force: bool = False) -> int:
        """Deliver a pick to listeners; with force, cancelled listeners receive it too. Return deliveries."""
        delivered = 0
        for callback, subscription in list(self.listeners.get(custom_id, [])):
            if subscription.cancelled and not force:
                continue
            pick = FakePick(user_id=user_id or self.user_id, values=[value])
            self.picks.append(pick)
            await callback(pick)
            delivered += 1
        return delivered

    async def wait_for_menu(self, timeout: float = 1.0) -> None:
        await asyncio.wait_for(self.menu_shown.wait(), timeout)

    @property
    def contents(self) -> list[str | None]:
        return [r.content for r in self.replies]

    @property
    def last(self) -> Reply:
        return self.replies[-1]


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Configuration pointing at the stubbed API, without an API key."""
    return Config(data_dir=tmp_path, api_url=API_URL, operator="op-1")


@pytest.fixture
def stub_api() -> StubApi:
    return StubApi()


@pytest.fixture
def make_client(config: Config, stub_api: StubApi) -> Callable[..., ApiClient]:
    """Factory for API clients wired to the stub; pass a Config to override."""

    def make(cfg: Config | None = None) -> ApiClient:
        return ApiClient(cfg or config, transport=stub_api.transport)

    return make


@pytest.fixture
def make_interaction() -> type[FakeInteraction]:
    return FakeInteraction
