"""Status presentation and embed builders for command replies."""

from collections.abc import Sequence
from enum import IntEnum

from gs_relay.api.models import GameServer, HealthStatus, ServerStatus
from gs_relay.api.result import Result
from gs_relay.chat.messages import Embed, EmbedField

VANILLA = "vanilla"


class Color(IntEnum):
    """Embed accent colors."""

    GREEN = 0x57F287
    RED = 0xED4245
    YELLOW = 0xFEE75C
    ORANGE = 0xE67E22
    GREY = 0x95A5A6
    BLURPLE = 0x5865F2


_STATUS_COLORS: dict[str, Color] = {
    ServerStatus.RUNNING: Color.GREEN,
    ServerStatus.STOPPED: Color.RED,
    ServerStatus.STARTING: Color.YELLOW,
    ServerStatus.STOPPING: Color.ORANGE,
    ServerStatus.ERROR: Color.RED,
}

_STATUS_EMOJI: dict[str, str] = {
    ServerStatus.RUNNING: "🟢",
    ServerStatus.STOPPED: "🔴",
    ServerStatus.STARTING: "🟡",
    ServerStatus.STOPPING: "🟠",
    ServerStatus.ERROR: "❌",
}

_DEFAULT_EMOJI = "⚪"


def status_color(status: str) -> int:
    """Embed color for a server status; grey for anything unrecognized."""
    return int(_STATUS_COLORS.get(status, Color.GREY))


def status_emoji(status: str) -> str:
    """One-glyph indicator for a server status."""
    return _STATUS_EMOJI.get(status, _DEFAULT_EMOJI)


def modpack_label(server: GameServer) -> str:
    """Modpack name, or the vanilla label when none is set."""
    return server.modpack or VANILLA


def created_embed(server: GameServer, modpack: str) -> Embed:
    """Confirmation card for a newly created server."""
    return Embed(
        title="Server Created",
        color=Color.GREEN,
        description=f"**{server.name}** is being provisioned.",
        fields=(EmbedField("Modpack", modpack), EmbedField("Status", server.status)),
        footer="Use /server start to bring it online",
    )


def server_list_embed(servers: Sequence[GameServer]) -> Embed:
    """One line per server with its status glyph, modpack and status."""
    lines = [f"{status_emoji(s.status)} **{s.name}** - {modpack_label(s)} ({s.status})" for s in servers]
    return Embed(title="Game Servers", color=Color.BLURPLE, description="\n".join(lines))


def server_embed(server: GameServer) -> Embed:
    """Status card for one server."""
    return Embed(
        title=server.name,
        color=status_color(server.status),
        fields=(
            EmbedField("Status", f"{status_emoji(server.status)} {server.status}"),
            EmbedField("Modpack", modpack_label(server)),
            EmbedField("Port", str(server.port) if server.port is not None else "N/A"),
        ),
    )


def health_embed(result: Result[HealthStatus], api_url: str) -> Embed:
    """Health card: the relay itself is always online, the API may not be."""
    api_value = "🟢 Connected" if result.ok else f"🔴 {result.error}"
    return Embed(
        title="Health Check",
        color=Color.GREEN if result.ok else Color.RED,
        fields=(
            EmbedField("Bot", "🟢 Online"),
            EmbedField("Control API", api_value),
            EmbedField("API URL", api_url, inline=False),
        ),
    )
