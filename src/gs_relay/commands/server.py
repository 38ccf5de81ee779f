"""Handlers for the ``/server`` command and its sub-operations."""

from gs_relay.api.client import ApiClient
from gs_relay.api.models import CreateServerRequest
from gs_relay.chat.interaction import Interaction
from gs_relay.chat.messages import Reply
from gs_relay.commands.render import created_embed, server_embed, server_list_embed
from gs_relay.commands.selection import SELECTION_TIMEOUT, START_FLOW, STOP_FLOW, FlowAction, SelectionFlow


class ServerCommands:
    """Lifecycle handlers bound to one API client."""

    def __init__(self, api: ApiClient, *, selection_timeout: float = SELECTION_TIMEOUT) -> None:
        self._api = api
        self._selection_timeout = selection_timeout

    async def create(self, interaction: Interaction) -> None:
        name = interaction.get_option("name")
        modpack = interaction.get_option("modpack")
        result = await self._api.create(CreateServerRequest(name=name, modpack=modpack, created_by=interaction.user_id))
        if not result.ok:
            await interaction.edit_reply(f"Failed to create server: {result.error}")
            return
        await interaction.edit_reply(Reply(embed=created_embed(result.unwrap(), modpack)))

    async def list_(self, interaction: Interaction) -> None:
        result = await self._api.list()
        if not result.ok:
            await interaction.edit_reply(f"Failed to list servers: {result.error}")
            return
        servers = result.unwrap()
        if not servers:
            await interaction.edit_reply("No servers found. Create one with `/server create`")
            return
        await interaction.edit_reply(Reply(embed=server_list_embed(servers)))

    async def status(self, interaction: Interaction) -> None:
        result = await self._api.get(interaction.get_option("name"))
        if not result.ok:
            await interaction.edit_reply(f"Failed to get status: {result.error}")
            return
        await interaction.edit_reply(Reply(embed=server_embed(result.unwrap())))

    async def start(self, interaction: Interaction) -> None:
        await self._select(interaction, START_FLOW)

    async def stop(self, interaction: Interaction) -> None:
        await self._select(interaction, STOP_FLOW)

    async def delete(self, interaction: Interaction) -> None:
        name = interaction.get_option("name")
        result = await self._api.delete(name)
        if not result.ok:
            await interaction.edit_reply(f"Failed to delete server: {result.error}")
            return
        await interaction.edit_reply(f"Deleted **{name}**.")

    async def _select(self, interaction: Interaction, action: FlowAction) -> None:
        await SelectionFlow(interaction, self._api, action, timeout=self._selection_timeout).run()
