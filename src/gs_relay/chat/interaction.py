"""Boundary between command handlers and a chat surface.

Handlers only talk to an Interaction: acknowledge, edit the (single) reply,
and listen for menu picks. A chat surface implements it for its platform.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from typing import Protocol, TypeAlias

from gs_relay.chat.messages import Reply


class ComponentInteraction(Protocol):
    """A user's pick on a select menu."""

    @property
    def user_id(self) -> str: ...

    @property
    def values(self) -> list[str]: ...

    async def defer_update(self) -> None:
        """Acknowledge the pick privately; the reply is edited afterwards."""
        ...


class Subscription(Protocol):
    """Handle for a registered menu listener."""

    def cancel(self) -> None:
        """Stop delivering picks. Idempotent."""
        ...


SelectCallback: TypeAlias = Callable[[ComponentInteraction], Awaitable[None]]


class Interaction(ABC):
    """One invocation of a chat command by a user."""

    def __init__(self, command: str, subcommand: str | None, user_id: str, options: Mapping[str, str] | None = None) -> None:
        """Initialize the interaction.

        Args:
            command: Top-level command name (e.g. "server").
            subcommand: Sub-operation name, or None for standalone commands.
            user_id: Identity of the invoking user.
            options: Typed command arguments by option name.

        """
        self.command = command
        self.subcommand = subcommand
        self.user_id = user_id
        self.options: dict[str, str] = dict(options or {})
        self.deferred = False
        self.ephemeral = False

    def get_option(self, name: str) -> str:
        """Return a required option value.

        Raises:
            KeyError: The option was not supplied.

        """
        return self.options[name]

    @abstractmethod
    async def defer_reply(self, *, ephemeral: bool = True) -> None:
        """Acknowledge the command before the real reply is ready."""

    async def edit_reply(self, reply: Reply | str) -> None:
        """Replace the reply with new content. A plain string becomes a text-only reply."""
        await self._replace_reply(Reply(content=reply) if isinstance(reply, str) else reply)

    @abstractmethod
    async def _replace_reply(self, reply: Reply) -> None:
        """Surface-specific reply replacement."""

    @abstractmethod
    def on_select(self, custom_id: str, callback: SelectCallback) -> Subscription:
        """Deliver picks on the menu with the given id to callback until cancelled."""
