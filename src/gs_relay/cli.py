"""CLI entry point for gs-relay."""

import asyncio
import sys
from pathlib import Path
from typing import Annotated

import typer
from mm_clikit import TyperPlus
from pydantic import ValidationError

from gs_relay.app_context import AppContext, run_chat_command, use_context
from gs_relay.chat.console import ConsoleInput
from gs_relay.chat.repl import run_chat_session
from gs_relay.config import Config
from gs_relay.log import setup_logging
from gs_relay.output import Output

app = TyperPlus(package_name="gs-relay")
server_app = typer.Typer(help="Manage game servers.", no_args_is_help=True)


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON.")] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path.")] = None,
    api_url: Annotated[str | None, typer.Option("--api-url", help="Remote control API base URL.")] = None,
    api_key: Annotated[str | None, typer.Option("--api-key", help="Remote control API key.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Mirror log output to stderr.")] = False,
) -> None:
    """Drive game-server lifecycle operations through chat-style commands."""
    out = Output(json_mode=json_output)
    try:
        cfg = Config.build(data_dir, api_url=api_url, api_key=api_key)
    except ValidationError as e:
        out.print_error_and_exit("invalid_config", f"Invalid configuration: {e.errors()[0]['msg']}")
    cfg.data_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(cfg.log_path, verbose=verbose)
    ctx.obj = AppContext(out=out, cfg=cfg)


# --- /server ---


@server_app.command("create")
def server_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Server name")],
    modpack: Annotated[str, typer.Argument(help="CurseForge modpack slug (e.g., all-the-mods-10)")],
) -> None:
    """Create a new Minecraft server."""
    run_chat_command(ctx, "server", "create", {"name": name, "modpack": modpack})


@server_app.command("list")
def server_list(ctx: typer.Context) -> None:
    """List all servers."""
    run_chat_command(ctx, "server", "list")


@server_app.command("status")
def server_status(ctx: typer.Context, name: Annotated[str, typer.Argument(help="Server name")]) -> None:
    """Get server status."""
    run_chat_command(ctx, "server", "status", {"name": name})


@server_app.command("start")
def server_start(ctx: typer.Context) -> None:
    """Start a server (pick from stopped servers)."""
    run_chat_command(ctx, "server", "start")


@server_app.command("stop")
def server_stop(ctx: typer.Context) -> None:
    """Stop a server (pick from running servers)."""
    run_chat_command(ctx, "server", "stop")


@server_app.command("delete")
def server_delete(ctx: typer.Context, name: Annotated[str, typer.Argument(help="Server name")]) -> None:
    """Delete a server."""
    run_chat_command(ctx, "server", "delete", {"name": name})


# --- standalone ---


def health(ctx: typer.Context) -> None:
    """Check bot and API health."""
    run_chat_command(ctx, "health", None)


def chat(ctx: typer.Context) -> None:
    """Start an interactive chat session (/server ..., /health, /help, /quit)."""
    app_ctx = use_context(ctx)
    console = ConsoleInput(sys.stdin.fileno())
    asyncio.run(run_chat_session(app_ctx.cfg, app_ctx.out, console=console))


app.add_typer(server_app, name="server")
app.command(aliases=["h"])(health)
app.command(aliases=["c"])(chat)
