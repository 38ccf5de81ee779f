"""Interactive selection flow: pick one server from a filtered menu within a bounded time.

The flow moves AWAITING_LIST -> PRESENTING_MENU -> RESOLVED | TIMED_OUT.
Two independent events race to end a presented menu: a user pick delivered by
the chat surface and the timeout timer. Both go through
SelectionSession.try_resolve; only the first caller renders, and it cancels
the other source.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

from gs_relay.api.client import ApiClient
from gs_relay.api.models import GameServer, ServerStatus
from gs_relay.api.result import Result
from gs_relay.chat.interaction import ComponentInteraction, Interaction, Subscription
from gs_relay.chat.messages import Reply, SelectMenu, SelectOption
from gs_relay.commands.render import modpack_label

logger = logging.getLogger(__name__)

SELECTION_TIMEOUT = 60.0


class FlowState(StrEnum):
    """Selection flow states."""

    AWAITING_LIST = "awaiting_list"
    PRESENTING_MENU = "presenting_menu"
    RESOLVED = "resolved"
    TIMED_OUT = "timed_out"


@dataclass
class SelectionSession:
    """State of one selection flow, private to its invocation."""

    candidates: tuple[GameServer, ...] = ()
    chosen_name: str | None = None
    resolved: bool = False
    state: FlowState = FlowState.AWAITING_LIST
    outcome: str | None = None  # terminal text shown to the user

    def try_resolve(self, chosen_name: str | None = None, *, state: FlowState = FlowState.RESOLVED) -> bool:
        """Resolve the session once. Return False, changing nothing, if it was already resolved."""
        if self.resolved:
            return False
        self.resolved = True
        self.chosen_name = chosen_name
        self.state = state
        return True


@dataclass(frozen=True)
class FlowAction:
    """What a selection flow does with the picked server."""

    verb: str
    required_status: str
    progress: str
    empty_message: str
    perform: Callable[[ApiClient, str], Awaitable[Result[GameServer]]]

    @property
    def custom_id(self) -> str:
        return f"{self.verb}-server"

    @property
    def placeholder(self) -> str:
        return f"Select a server to {self.verb}"


START_FLOW = FlowAction(
    verb="start",
    required_status=ServerStatus.STOPPED,
    progress="Starting",
    empty_message="No stopped servers to start.",
    perform=ApiClient.start,
)

STOP_FLOW = FlowAction(
    verb="stop",
    required_status=ServerStatus.RUNNING,
    progress="Stopping",
    empty_message="No running servers to stop.",
    perform=ApiClient.stop,
)


def build_menu(action: FlowAction, candidates: tuple[GameServer, ...]) -> SelectMenu:
    """One option per candidate: label is the name, description the modpack."""
    options = tuple(SelectOption(label=s.name, value=s.name, description=modpack_label(s)) for s in candidates)
    return SelectMenu(custom_id=action.custom_id, placeholder=action.placeholder, options=options)


class SelectionFlow:
    """Runs one selection flow against an interaction that was already acknowledged."""

    def __init__(
        self, interaction: Interaction, api: ApiClient, action: FlowAction, *, timeout: float = SELECTION_TIMEOUT
    ) -> None:
        """Initialize the flow.

        Args:
            interaction: The deferred command interaction whose reply the flow edits.
            api: Remote control client.
            action: Start or stop semantics.
            timeout: Seconds to wait for a pick.

        """
        self._interaction = interaction
        self._api = api
        self._action = action
        self._timeout = timeout
        self.session = SelectionSession()
        self._done = asyncio.Event()
        self._timer: asyncio.TimerHandle | None = None
        self._subscription: Subscription | None = None
        self._error: Exception | None = None
        # Strong references to background tasks to prevent GC
        self._background_tasks: set[asyncio.Task[None]] = set()

    async def run(self) -> SelectionSession:
        """Drive the flow to a terminal state and return the session.

        Raises:
            Exception: Whatever the chat surface raised while rendering the terminal reply.

        """
        result = await self._api.list()
        if not result.ok:
            await self._finish(f"Failed to list servers: {result.error}")
            return self.session

        candidates = tuple(s for s in result.unwrap() if s.status == self._action.required_status)
        if not candidates:
            await self._finish(self._action.empty_message)
            return self.session

        self.session.candidates = candidates
        self.session.state = FlowState.PRESENTING_MENU
        self._subscription = self._interaction.on_select(self._action.custom_id, self._on_pick)
        try:
            await self._interaction.edit_reply(Reply(content="Which server?", menu=build_menu(self._action, candidates)))
            # A pick may already have landed while the menu was being sent
            if not self.session.resolved:
                self._timer = asyncio.get_running_loop().call_later(self._timeout, self._on_timeout)
            await self._done.wait()
        finally:
            self._cancel_wait()

        if self._error is not None:
            raise self._error
        return self.session

    async def _finish(self, outcome: str) -> None:
        """Resolve without a menu (list failure or no candidates)."""
        self.session.try_resolve()
        self.session.outcome = outcome
        await self._interaction.edit_reply(outcome)

    async def _on_pick(self, component: ComponentInteraction) -> None:
        """Handle a menu pick; a pick after resolution is ignored."""
        if not component.values:
            return
        name = component.values[0]
        if not self.session.try_resolve(name):
            logger.debug("Ignoring late pick of %r on %s", name, self._action.custom_id)
            return
        self._cancel_wait()
        if component.user_id != self._interaction.user_id:
            logger.warning("Menu %s answered by %s, invoked by %s", self._action.custom_id, component.user_id, self._interaction.user_id)

        try:
            await component.defer_update()
            result = await self._action.perform(self._api, name)
            if result.ok:
                outcome = f"{self._action.progress} **{name}**..."
            else:
                outcome = f"Failed to {self._action.verb}: {result.error}"
            self.session.outcome = outcome
            await self._interaction.edit_reply(outcome)
        except Exception as e:
            self._error = e
        finally:
            self._done.set()

    def _on_timeout(self) -> None:
        """Timer callback: end the flow unless a pick got there first."""
        self._timer = None
        if not self.session.try_resolve(state=FlowState.TIMED_OUT):
            return
        self._cancel_wait()
        task = asyncio.ensure_future(self._render_timeout())
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _render_timeout(self) -> None:
        """Replace the menu with the timeout notice."""
        try:
            self.session.outcome = "Timed out."
            await self._interaction.edit_reply(self.session.outcome)
        except Exception as e:
            self._error = e
        finally:
            self._done.set()

    def _cancel_wait(self) -> None:
        """Cancel the timer and the pick listener. Idempotent."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
