"""Wire models for the remote control API."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ServerStatus(StrEnum):
    """Lifecycle states reported by the remote control API."""

    CREATING = "creating"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    ERROR = "error"


class GameServer(BaseModel):
    """A managed game-server instance, as reported by the API.

    ``status`` is kept as a plain string so states the API adds later still parse.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str
    status: str
    modpack: str | None = None
    port: int | None = None
    created_by: str = Field(default="", alias="createdBy")


class CreateServerRequest(BaseModel):
    """Body of ``POST /api/game-servers``.

    Values are sent as given; the API owns validation of names and modpacks.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    modpack: str
    created_by: str = Field(alias="createdBy")

    def to_json(self) -> dict[str, str]:
        """Serialize with wire field names."""
        return self.model_dump(by_alias=True)


class HealthStatus(BaseModel):
    """Body of ``GET /health``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    status: str
