"""Terminal chat surface: replies go to Output, menu picks come from stdin.

Stdin is watched with ``loop.add_reader`` rather than a blocking read in a
thread, so a menu listener can be removed the moment the flow resolves.
Regular files and /dev/null cannot be watched that way; they never block, so
they are read in a worker thread instead.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TypeAlias

import httpx

from gs_relay.api.client import ApiClient
from gs_relay.chat.interaction import Interaction, SelectCallback
from gs_relay.chat.messages import Reply, SelectMenu
from gs_relay.commands.registry import build_dispatcher
from gs_relay.config import Config
from gs_relay.output import Output

logger = logging.getLogger(__name__)

_READ_SIZE = 4096

LineConsumer: TypeAlias = Callable[[str | None], None]


class ConsoleInput:
    """Line reader over a file descriptor, driven by the event loop.

    At most one consumer receives lines at a time. ``None`` is delivered once
    the descriptor reaches EOF.
    """

    def __init__(self, fd: int) -> None:
        self._fd = fd
        self._buffer = b""
        self._eof = False
        self._consumer: LineConsumer | None = None
        self._watching = False
        self._pollable = True
        self._pump: asyncio.Task[None] | None = None

    def listen(self, consumer: LineConsumer) -> ConsoleListening:
        """Deliver lines to consumer until the returned handle is cancelled."""
        self._consumer = consumer
        handle = ConsoleListening(self, consumer)
        loop = asyncio.get_running_loop()
        if not self._eof:
            self._start_reading(loop)
        # Lines read ahead of this consumer are delivered on the next loop turn
        loop.call_soon(self._drain)
        return handle

    def _start_reading(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._watching or self._pump is not None:
            return
        if self._pollable:
            try:
                loop.add_reader(self._fd, self._on_readable)
            except PermissionError:
                # epoll refuses regular files and /dev/null
                logger.debug("fd %d cannot be polled, reading it in a worker thread", self._fd)
                self._pollable = False
            else:
                self._watching = True
                return
        self._pump = loop.create_task(self._pump_reads())

    async def _pump_reads(self) -> None:
        """Read a non-pollable descriptor while someone is listening."""
        try:
            while self._consumer is not None and not self._eof:
                self._feed(await asyncio.to_thread(os.read, self._fd, _READ_SIZE))
        except OSError:
            logger.exception("Reading fd %d failed, treating it as closed", self._fd)
            self._feed(b"")
        finally:
            self._pump = None

    async def readline(self) -> str | None:
        """Read one line without its newline; None on EOF."""
        future: asyncio.Future[str | None] = asyncio.get_running_loop().create_future()

        def consume(line: str | None) -> None:
            if not future.done():
                future.set_result(line)
            handle.cancel()

        handle = self.listen(consume)
        try:
            return await future
        finally:
            handle.cancel()

    def release(self, consumer: LineConsumer) -> None:
        """Detach consumer if it is still the current one."""
        if self._consumer is not consumer:
            return
        self._consumer = None
        self._stop_watching()

    def _stop_watching(self) -> None:
        if self._watching:
            asyncio.get_running_loop().remove_reader(self._fd)
            self._watching = False

    def _on_readable(self) -> None:
        self._feed(os.read(self._fd, _READ_SIZE))

    def _feed(self, chunk: bytes) -> None:
        if not chunk:
            self._eof = True
            self._stop_watching()
        self._buffer += chunk
        self._drain()

    def _drain(self) -> None:
        while self._consumer is not None:
            line, sep, rest = self._buffer.partition(b"\n")
            if sep:
                self._buffer = rest
                self._consumer(line.decode(errors="replace").rstrip("\r"))
            elif self._eof:
                if line:
                    self._buffer = b""
                    self._consumer(line.decode(errors="replace"))
                else:
                    self._consumer(None)
                    return
            else:
                return


class ConsoleListening:
    """Subscription handle for a ConsoleInput consumer."""

    def __init__(self, source: ConsoleInput, consumer: LineConsumer) -> None:
        self._source = source
        self._consumer = consumer
        self._cancelled = False

    def cancel(self) -> None:
        """Stop receiving lines. Idempotent."""
        if self._cancelled:
            return
        self._cancelled = True
        self._source.release(self._consumer)


@dataclass
class ConsolePick:
    """A menu answer typed at the terminal."""

    user_id: str
    values: list[str] = field(default_factory=list)

    async def defer_update(self) -> None:
        logger.debug("Pick %s acknowledged", self.values)


class ConsoleInteraction(Interaction):
    """Interaction whose replies are printed and whose menus are answered on stdin."""

    def __init__(
        self,
        command: str,
        subcommand: str | None,
        user_id: str,
        options: Mapping[str, str] | None,
        *,
        out: Output,
        console: ConsoleInput,
    ) -> None:
        super().__init__(command, subcommand, user_id, options)
        self._out = out
        self._console = console
        self._menu: SelectMenu | None = None
        self.replies: list[Reply] = []
        # Strong references to callback tasks to prevent GC
        self._background_tasks: set[asyncio.Task[None]] = set()

    async def defer_reply(self, *, ephemeral: bool = True) -> None:
        self.deferred = True
        self.ephemeral = ephemeral
        logger.debug("Deferred reply for /%s %s", self.command, self.subcommand or "")

    async def _replace_reply(self, reply: Reply) -> None:
        self._menu = reply.menu
        self.replies.append(reply)
        self._out.print_reply(reply)

    def on_select(self, custom_id: str, callback: SelectCallback) -> ConsoleListening:
        def consume(line: str | None) -> None:
            if line is None:
                logger.debug("Stdin closed while menu %s was open", custom_id)
                listening.cancel()
                return
            token = line.strip()
            if not token:
                return
            value = self.resolve_pick(custom_id, token)
            if value is None:
                self._out.print_invalid_pick(token, len(self._menu.options) if self._menu else 0)
                return
            # A single-choice menu takes one answer; further lines belong to whoever reads next
            listening.cancel()
            task = asyncio.ensure_future(callback(ConsolePick(user_id=self.user_id, values=[value])))
            self._background_tasks.add(task)
            task.add_done_callback(self._background_tasks.discard)

        listening = self._console.listen(consume)
        return listening

    def resolve_pick(self, custom_id: str, token: str) -> str | None:
        """Map a typed answer (1-based index or exact label) to an option value."""
        menu = self._menu
        if menu is None or menu.custom_id != custom_id:
            return None
        if token.isdigit():
            index = int(token)
            if 1 <= index <= len(menu.options):
                return menu.options[index - 1].value
            return None
        for option in menu.options:
            if option.label == token:
                return option.value
        return None


async def run_console_command(
    cfg: Config,
    out: Output,
    command: str,
    subcommand: str | None,
    options: Mapping[str, str] | None = None,
    *,
    console: ConsoleInput,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ConsoleInteraction:
    """Run one chat command against the API and print its replies."""
    interaction = ConsoleInteraction(command, subcommand, cfg.operator, options, out=out, console=console)
    async with ApiClient(cfg, transport=transport) as api:
        await build_dispatcher(api, cfg.api_url).dispatch(interaction)
    return interaction
