"""Centralized application configuration."""

from __future__ import annotations

import getpass
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

DEFAULT_DATA_DIR = Path.home() / ".local" / "gs-relay"
DEFAULT_API_URL = "http://localhost:3000"

# Environment variables, applied on top of config.toml
ENV_API_URL = "GS_RELAY_API_URL"
ENV_API_KEY = "GS_RELAY_API_KEY"
ENV_OPERATOR = "GS_RELAY_OPERATOR"


class Config(BaseModel):
    """Application-wide configuration. Built once at startup, never mutated."""

    model_config = ConfigDict(frozen=True)

    data_dir: Path = Field(description="Base directory for logs and the optional config file")
    api_url: str = Field(default=DEFAULT_API_URL, min_length=1, description="Base URL of the remote control API")
    api_key: str | None = Field(default=None, repr=False, description="Bearer credential; None sends requests unauthenticated")
    operator: str = Field(default="operator", min_length=1, description="Identity recorded as createdBy on new servers")
    request_timeout: float = Field(default=15.0, gt=0, description="HTTP request timeout in seconds")

    @computed_field(description="Optional TOML configuration file")
    @property
    def config_path(self) -> Path:
        """Optional TOML configuration file."""
        return self.data_dir / "config.toml"

    @computed_field(description="Log file")
    @property
    def log_path(self) -> Path:
        """Log file."""
        return self.data_dir / "relay.log"

    @property
    def auth_headers(self) -> dict[str, str]:
        """Headers attached to every API request."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    @staticmethod
    def build(data_dir: Path | None = None, *, api_url: str | None = None, api_key: str | None = None) -> Config:
        """Build a Config from defaults, config.toml, environment and explicit overrides (in that order)."""
        resolved_dir = data_dir if data_dir is not None else DEFAULT_DATA_DIR
        config_path = resolved_dir / "config.toml"

        kwargs: dict[str, Any] = {"data_dir": resolved_dir, "operator": _default_operator()}
        if config_path.is_file():
            with config_path.open("rb") as f:
                toml_data = tomllib.load(f)
            for key in ("api_url", "api_key", "operator"):
                if isinstance(toml_data.get(key), str):
                    kwargs[key] = toml_data[key]
            if isinstance(toml_data.get("request_timeout"), int | float):
                kwargs["request_timeout"] = toml_data["request_timeout"]

        for env_name, key in ((ENV_API_URL, "api_url"), (ENV_API_KEY, "api_key"), (ENV_OPERATOR, "operator")):
            if env_value := os.environ.get(env_name):
                kwargs[key] = env_value

        if api_url:
            kwargs["api_url"] = api_url
        if api_key:
            kwargs["api_key"] = api_key

        # An empty key means "no key", never an empty bearer token
        if not kwargs.get("api_key"):
            kwargs["api_key"] = None

        return Config(**kwargs)


def _default_operator() -> str:
    """Return the OS user name, used as the default createdBy identity."""
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "operator"
