"""Application context shared across CLI commands."""

import asyncio
import sys
from dataclasses import dataclass

import typer

from gs_relay.chat.console import ConsoleInput, run_console_command
from gs_relay.config import Config
from gs_relay.output import Output


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared application state passed through Typer context."""

    out: Output
    cfg: Config


def use_context(ctx: typer.Context) -> AppContext:
    """Extract application context from Typer context."""
    result: AppContext = ctx.obj
    return result


def run_chat_command(ctx: typer.Context, command: str, subcommand: str | None, options: dict[str, str] | None = None) -> None:
    """Run one chat command from the CLI, reading menu picks from stdin."""
    app = use_context(ctx)
    console = ConsoleInput(sys.stdin.fileno())
    asyncio.run(run_console_command(app.cfg, app.out, command, subcommand, options, console=console))
