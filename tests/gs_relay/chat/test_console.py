"""Tests for the terminal chat surface."""

import pytest

from gs_relay.chat.console import ConsoleInteraction, run_console_command
from gs_relay.chat.messages import Reply, SelectMenu, SelectOption
from gs_relay.commands.selection import START_FLOW, STOP_FLOW, FlowState, SelectionFlow

ATM10 = {"name": "ATM10", "status": "stopped", "modpack": "all-the-mods-10"}
PLAIN = {"name": "plain", "status": "stopped"}


class TestConsoleInput:
    """Line reading over a file descriptor."""

    @pytest.mark.asyncio
    async def test_lines_then_eof(self, make_console):
        """CRLF is stripped, an unterminated last line is delivered, then None."""
        console = make_console(b"one\ntwo\r\nthree")
        assert await console.readline() == "one"
        assert await console.readline() == "two"
        assert await console.readline() == "three"
        assert await console.readline() is None

    @pytest.mark.asyncio
    async def test_empty_input(self, make_console):
        """A closed, empty stream is EOF straight away."""
        console = make_console(b"")
        assert await console.readline() is None

    @pytest.mark.asyncio
    async def test_cancelled_listener_receives_nothing(self, make_console):
        """Lines stay buffered for the next reader after a listener is cancelled."""
        console = make_console(b"kept\n")
        received: list[str | None] = []
        console.listen(received.append).cancel()
        assert await console.readline() == "kept"
        assert received == []


class TestNonPollableInput:
    """Regular files and /dev/null are read without the event loop's poller."""

    @pytest.mark.asyncio
    async def test_regular_file_lines(self, make_file_console):
        """A redirected file yields its lines, then EOF."""
        console = make_file_console(b"one\ntwo\r\nthree")
        assert await console.readline() == "one"
        assert await console.readline() == "two"
        assert await console.readline() == "three"
        assert await console.readline() is None

    @pytest.mark.asyncio
    async def test_devnull_is_eof(self, make_file_console):
        """/dev/null is EOF straight away."""
        assert await make_file_console(None).readline() is None

    @pytest.mark.asyncio
    async def test_start_picked_from_file(self, config, stub_api, out, make_file_console):
        """A menu can be answered from a redirected file."""
        stub_api.add("GET", "/api/game-servers", json=[ATM10])
        stub_api.add("POST", "/api/game-servers/ATM10/start", json={**ATM10, "status": "starting"})
        interaction = await run_console_command(
            config, out, "server", "start", console=make_file_console(b"1\n"), transport=stub_api.transport
        )
        assert [r.content for r in interaction.replies] == ["Which server?", "Starting **ATM10**..."]

    @pytest.mark.asyncio
    async def test_menu_on_devnull_times_out(self, config, stub_api, out, make_file_console, make_client):
        """With /dev/null as stdin the menu is shown and ends by timeout."""
        stub_api.add("GET", "/api/game-servers", json=[{**ATM10, "status": "running"}])
        interaction = ConsoleInteraction("server", "stop", "op-1", None, out=out, console=make_file_console(None))
        async with make_client() as api:
            session = await SelectionFlow(interaction, api, STOP_FLOW, timeout=0.05).run()
        assert session.state is FlowState.TIMED_OUT
        assert [r.content for r in interaction.replies] == ["Which server?", "Timed out."]


class TestResolvePick:
    """Typed answers map to menu option values."""

    def _interaction(self, make_console, out) -> ConsoleInteraction:
        interaction = ConsoleInteraction("server", "start", "op-1", None, out=out, console=make_console(b""))
        interaction._menu = SelectMenu(
            custom_id="start-server",
            placeholder="Select a server to start",
            options=(SelectOption(label="ATM10", value="ATM10"), SelectOption(label="plain", value="plain")),
        )
        return interaction

    @pytest.mark.parametrize(("token", "value"), [("1", "ATM10"), ("2", "plain"), ("plain", "plain")])
    def test_valid(self, make_console, out, token: str, value: str):
        """1-based indexes and exact labels are accepted."""
        assert self._interaction(make_console, out).resolve_pick("start-server", token) == value

    @pytest.mark.parametrize("token", ["0", "3", "atm10", "PLAIN"])
    def test_invalid(self, make_console, out, token: str):
        """Out-of-range indexes and non-matching labels are rejected."""
        assert self._interaction(make_console, out).resolve_pick("start-server", token) is None

    def test_other_menu(self, make_console, out):
        """Answers only apply to the menu currently shown."""
        assert self._interaction(make_console, out).resolve_pick("stop-server", "1") is None


class TestConsoleCommands:
    """Commands run end to end against the stubbed API."""

    @pytest.mark.asyncio
    async def test_list_prints_embed(self, config, stub_api, out, make_console, capsys):
        """Embeds are printed as plain text."""
        stub_api.add("GET", "/api/game-servers", json=[ATM10])
        interaction = await run_console_command(
            config, out, "server", "list", console=make_console(b""), transport=stub_api.transport
        )
        assert interaction.ephemeral is True
        printed = capsys.readouterr().out
        assert "== Game Servers ==" in printed
        assert "🔴 ATM10 - all-the-mods-10 (stopped)" in printed

    @pytest.mark.asyncio
    async def test_start_by_number(self, config, stub_api, out, make_console, capsys):
        """The menu is answered on stdin with an option number."""
        stub_api.add("GET", "/api/game-servers", json=[ATM10, PLAIN])
        stub_api.add("POST", "/api/game-servers/plain/start", json={**PLAIN, "status": "starting"})
        interaction = await run_console_command(
            config, out, "server", "start", console=make_console(b"2\n"), transport=stub_api.transport
        )
        assert [r.content for r in interaction.replies] == ["Which server?", "Starting **plain**..."]
        assert stub_api.paths("POST") == ["/api/game-servers/plain/start"]
        printed = capsys.readouterr().out
        assert "  1) ATM10 (all-the-mods-10)" in printed
        assert "  2) plain (vanilla)" in printed
        assert "Enter a number 1-2 or a name:" in printed

    @pytest.mark.asyncio
    async def test_invalid_answer_then_name(self, config, stub_api, out, make_console, capsys):
        """A bad answer is reported and the menu keeps waiting."""
        stub_api.add("GET", "/api/game-servers", json=[ATM10])
        stub_api.add("POST", "/api/game-servers/ATM10/start", json={**ATM10, "status": "starting"})
        interaction = await run_console_command(
            config, out, "server", "start", console=make_console(b"9\n\nATM10\n"), transport=stub_api.transport
        )
        assert interaction.replies[-1].content == "Starting **ATM10**..."
        assert "'9' is not an option; enter a number 1-1 or a name." in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_eof_leaves_menu_to_time_out(self, config, stub_api, out, make_console, make_client):
        """Closing stdin does not pick anything; the timeout ends the flow."""
        stub_api.add("GET", "/api/game-servers", json=[ATM10])
        interaction = ConsoleInteraction("server", "start", "op-1", None, out=out, console=make_console(b""))
        async with make_client() as api:
            session = await SelectionFlow(interaction, api, START_FLOW, timeout=0.05).run()
        assert session.state is FlowState.TIMED_OUT
        assert interaction.replies[-1] == Reply(content="Timed out.")
        assert stub_api.paths("POST") == []
