"""Route chat commands to their handlers."""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeAlias

from gs_relay.chat.interaction import Interaction

logger = logging.getLogger(__name__)

Handler: TypeAlias = Callable[[Interaction], Awaitable[None]]


def command_label(command: str, subcommand: str | None) -> str:
    """Slash-command form of a command, e.g. ``/server start``."""
    return f"/{command} {subcommand}" if subcommand else f"/{command}"


class CommandDispatcher:
    """Looks up the handler for (command, subcommand), acknowledges, and runs it."""

    def __init__(self) -> None:
        self._handlers: dict[tuple[str, str | None], Handler] = {}

    def register(self, command: str, subcommand: str | None, handler: Handler) -> None:
        """Register a handler. Re-registering a pair replaces the previous handler."""
        self._handlers[(command, subcommand)] = handler

    def has_handler(self, command: str, subcommand: str | None) -> bool:
        """Check whether a handler is registered for the pair."""
        return (command, subcommand) in self._handlers

    async def dispatch(self, interaction: Interaction) -> bool:
        """Run the matching handler. Return False, doing nothing, when none matches.

        The interaction is acknowledged privately before the handler starts. An
        unexpected handler error still ends in one visible reply.
        """
        label = command_label(interaction.command, interaction.subcommand)
        handler = self._handlers.get((interaction.command, interaction.subcommand))
        if handler is None:
            logger.debug("No handler for %s", label)
            return False

        await interaction.defer_reply(ephemeral=True)
        logger.info("%s invoked by %s", label, interaction.user_id)
        try:
            await handler(interaction)
        except Exception:
            logger.exception("Error handling %s", label)
            try:
                await interaction.edit_reply(f"Something went wrong while running {label}.")
            except Exception:
                logger.exception("Could not report the failure of %s", label)
        return True
