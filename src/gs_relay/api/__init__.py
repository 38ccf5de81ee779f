"""Remote control API subsystem: HTTP client, wire models and the result envelope."""

from gs_relay.api.client import ApiClient as ApiClient
from gs_relay.api.models import CreateServerRequest as CreateServerRequest
from gs_relay.api.models import GameServer as GameServer
from gs_relay.api.models import ServerStatus as ServerStatus
from gs_relay.api.result import Result as Result
