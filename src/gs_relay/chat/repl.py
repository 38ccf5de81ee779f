"""Interactive chat session: slash-command lines in, command replies out."""

import logging
import shlex
from dataclasses import dataclass, field

import httpx

from gs_relay.api.client import ApiClient
from gs_relay.chat.console import ConsoleInput, ConsoleInteraction
from gs_relay.commands.registry import COMMANDS, build_dispatcher, find_command
from gs_relay.config import Config
from gs_relay.output import Output

logger = logging.getLogger(__name__)

QUIT_COMMANDS = frozenset({"/quit", "/exit"})


class CommandLineError(ValueError):
    """A chat line that does not name a known command with its required options."""


@dataclass(frozen=True)
class ParsedCommand:
    """A validated chat command line."""

    command: str
    subcommand: str | None
    options: dict[str, str] = field(default_factory=dict)


def parse_command_line(line: str) -> ParsedCommand:
    """Parse ``/server status name:ATM10`` style input.

    Options are ``key:value`` tokens with shell-style quoting; bare tokens fill the
    command's options in declaration order.

    Raises:
        CommandLineError: Unbalanced quotes, unknown command or option, or a missing required option.

    """
    try:
        tokens = shlex.split(line)
    except ValueError as e:
        raise CommandLineError(f"Cannot parse command: {e}.") from None
    if not tokens:
        raise CommandLineError("Empty command.")

    command = tokens[0].removeprefix("/")
    rest = tokens[1:]
    subcommand: str | None = None
    if rest and ":" not in rest[0] and find_command(command, None) is None:
        subcommand, rest = rest[0], rest[1:]

    spec = find_command(command, subcommand)
    if spec is None:
        shown = f"/{command} {subcommand}" if subcommand else f"/{command}"
        raise CommandLineError(f"Unknown command: {shown}. Type /help for the command list.")

    option_names = [o.name for o in spec.options]
    options: dict[str, str] = {}
    positional: list[str] = []
    for token in rest:
        key, sep, value = token.partition(":")
        if sep and key in option_names:
            options[key] = value
        elif sep and key.isidentifier():
            raise CommandLineError(f"Unknown option '{key}' for {spec.label}.")
        else:
            positional.append(token)

    unfilled = [name for name in option_names if name not in options]
    if len(positional) > len(unfilled):
        raise CommandLineError(f"Too many arguments for {spec.label}. Usage: {spec.usage}")
    options.update(zip(unfilled, positional, strict=False))

    missing = [name for name in option_names if not options.get(name)]
    if missing:
        raise CommandLineError(f"Missing required option(s): {', '.join(missing)}. Usage: {spec.usage}")

    return ParsedCommand(command=spec.command, subcommand=spec.subcommand, options=options)


async def run_chat_session(
    cfg: Config, out: Output, *, console: ConsoleInput, transport: httpx.AsyncBaseTransport | None = None
) -> int:
    """Read and run chat commands until /quit or EOF. Return the number of commands dispatched."""
    dispatched = 0
    async with ApiClient(cfg, transport=transport) as api:
        dispatcher = build_dispatcher(api, cfg.api_url)
        out.print_banner(cfg.api_url)
        while True:
            out.print_prompt()
            line = await console.readline()
            if line is None:
                break
            line = line.strip()
            if not line:
                continue
            if line in QUIT_COMMANDS:
                break
            if line == "/help":
                out.print_help(COMMANDS)
                continue
            try:
                parsed = parse_command_line(line)
            except CommandLineError as e:
                out.print_error("invalid_command", str(e))
                continue
            interaction = ConsoleInteraction(
                parsed.command, parsed.subcommand, cfg.operator, parsed.options, out=out, console=console
            )
            if await dispatcher.dispatch(interaction):
                dispatched += 1
    logger.info("Chat session ended after %d command(s)", dispatched)
    return dispatched
