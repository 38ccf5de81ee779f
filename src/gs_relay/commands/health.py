"""Handler for the standalone ``/health`` command."""

from gs_relay.api.client import ApiClient
from gs_relay.chat.interaction import Interaction
from gs_relay.chat.messages import Reply
from gs_relay.commands.render import health_embed


class HealthCommand:
    """Reports relay and API health. Never fails: an API error is part of the report."""

    def __init__(self, api: ApiClient, api_url: str) -> None:
        self._api = api
        self._api_url = api_url

    async def __call__(self, interaction: Interaction) -> None:
        result = await self._api.health()
        await interaction.edit_reply(Reply(embed=health_embed(result, self._api_url)))
