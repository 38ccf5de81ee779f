"""Structured terminal output for CLI and JSON modes."""

# ruff: noqa: T201

from __future__ import annotations

import json
import sys
from collections.abc import Sequence
from typing import TYPE_CHECKING, NoReturn

import typer

from gs_relay.chat.messages import Embed, Reply, SelectMenu

if TYPE_CHECKING:
    from gs_relay.commands.registry import CommandSpec


def _plain(text: str) -> str:
    """Drop chat markdown emphasis for terminal display."""
    return text.replace("**", "")


class Output:
    """Handles all terminal output in JSON or human-readable format."""

    def __init__(self, *, json_mode: bool) -> None:
        """Initialize output handler.

        Args:
            json_mode: If True, output one JSON object per line; otherwise human-readable text.

        """
        self._json_mode = json_mode

    @property
    def json_mode(self) -> bool:
        return self._json_mode

    def print_error_and_exit(self, code: str, message: str) -> NoReturn:
        """Print an error in JSON or human-readable format and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        self.print_error(code, message)
        raise typer.Exit(code=1)

    def print_error(self, code: str, message: str) -> None:
        """Print an error without exiting (chat session mode)."""
        if self._json_mode:
            print(json.dumps({"ok": False, "error": code, "message": message}), flush=True)
        else:
            print(f"Error: {message}", file=sys.stderr, flush=True)

    # --- Replies ---

    def print_reply(self, reply: Reply) -> None:
        """Print the current state of a command reply."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": reply.to_dict()}), flush=True)
            return
        lines: list[str] = []
        if reply.content:
            lines.append(_plain(reply.content))
        if reply.embed is not None:
            lines.extend(self._embed_lines(reply.embed))
        if reply.menu is not None:
            lines.extend(self._menu_lines(reply.menu))
        print("\n".join(lines), flush=True)

    @staticmethod
    def _embed_lines(embed: Embed) -> list[str]:
        lines = [f"== {embed.title} =="]
        if embed.description:
            lines.extend(_plain(embed.description).splitlines())
        lines.extend(f"  {field.name}: {_plain(field.value)}" for field in embed.fields)
        if embed.footer:
            lines.append(embed.footer)
        return lines

    @staticmethod
    def _menu_lines(menu: SelectMenu) -> list[str]:
        lines = [f"{menu.placeholder}:"]
        for index, option in enumerate(menu.options, start=1):
            suffix = f" ({option.description})" if option.description else ""
            lines.append(f"  {index}) {option.label}{suffix}")
        lines.append(f"Enter a number 1-{len(menu.options)} or a name:")
        return lines

    def print_invalid_pick(self, token: str, count: int) -> None:
        """Tell the user a menu answer matched nothing."""
        self.print_error("invalid_pick", f"'{token}' is not an option; enter a number 1-{count} or a name.")

    # --- Chat session ---

    def print_banner(self, api_url: str) -> None:
        """Print the chat session greeting."""
        if not self._json_mode:
            print(f"Connected to {api_url}. Type /help for commands, /quit to leave.", flush=True)

    def print_prompt(self) -> None:
        """Print the chat input prompt."""
        if not self._json_mode:
            print("> ", end="", flush=True)

    def print_help(self, commands: Sequence[CommandSpec]) -> None:
        """Print the list of available commands."""
        if self._json_mode:
            data = [{"usage": spec.usage, "description": spec.description} for spec in commands]
            print(json.dumps({"ok": True, "data": {"commands": data}}), flush=True)
            return
        width = max(len(spec.usage) for spec in commands)
        for spec in commands:
            print(f"{spec.usage.ljust(width)}  {spec.description}")
        print(f"{'/quit'.ljust(width)}  Leave the session", flush=True)
