"""The chat command surface: command definitions and dispatcher wiring."""

from dataclasses import dataclass

from gs_relay.api.client import ApiClient
from gs_relay.commands.dispatcher import CommandDispatcher, command_label
from gs_relay.commands.health import HealthCommand
from gs_relay.commands.selection import SELECTION_TIMEOUT
from gs_relay.commands.server import ServerCommands


@dataclass(frozen=True)
class OptionSpec:
    """A required string option of a command."""

    name: str
    description: str


@dataclass(frozen=True)
class CommandSpec:
    """One invocable (command, subcommand) pair."""

    command: str
    subcommand: str | None
    description: str
    options: tuple[OptionSpec, ...] = ()

    @property
    def label(self) -> str:
        return command_label(self.command, self.subcommand)

    @property
    def usage(self) -> str:
        """Usage line, e.g. ``/server status name:<name>``."""
        return " ".join([self.label, *(f"{o.name}:<{o.name}>" for o in self.options)])


_NAME = OptionSpec("name", "Server name")

COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(
        "server", "create", "Create a new Minecraft server",
        (_NAME, OptionSpec("modpack", "CurseForge modpack slug (e.g., all-the-mods-10)")),
    ),
    CommandSpec("server", "list", "List all servers"),
    CommandSpec("server", "status", "Get server status", (_NAME,)),
    CommandSpec("server", "start", "Start a server"),
    CommandSpec("server", "stop", "Stop a server"),
    CommandSpec("server", "delete", "Delete a server", (_NAME,)),
    CommandSpec("health", None, "Check bot and API health"),
)


def find_command(command: str, subcommand: str | None) -> CommandSpec | None:
    """Look up a command definition."""
    for spec in COMMANDS:
        if spec.command == command and spec.subcommand == subcommand:
            return spec
    return None


def build_dispatcher(api: ApiClient, api_url: str, *, selection_timeout: float = SELECTION_TIMEOUT) -> CommandDispatcher:
    """Create a dispatcher with every command of the surface registered."""
    server = ServerCommands(api, selection_timeout=selection_timeout)
    dispatcher = CommandDispatcher()
    dispatcher.register("server", "create", server.create)
    dispatcher.register("server", "list", server.list_)
    dispatcher.register("server", "status", server.status)
    dispatcher.register("server", "start", server.start)
    dispatcher.register("server", "stop", server.stop)
    dispatcher.register("server", "delete", server.delete)
    dispatcher.register("health", None, HealthCommand(api, api_url))
    return dispatcher
