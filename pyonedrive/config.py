"""Client configuration for the OneDrive API.

The configuration file is YAML:

    accesstoken: <OAuth access token>
    base_url: https://api.onedrive.com/v1.0
    debug: false
    timeout: 30

The access token is obtained outside this library; it is only attached to
outgoing requests.
"""

from __future__ import annotations

import os
import stat
from collections.abc import Generator
from pathlib import Path

import httpx
import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import OneDriveError

# Default config locations
DEFAULT_CONFIG_NAME = ".onedrive"
XDG_CONFIG_NAME = "onedrive/onedrive.conf"
CONFIG_ENV_VAR = "ONEDRIVE_CONFIG"

# File permissions (owner read/write only)
CONFIG_FILE_MODE = stat.S_IRUSR | stat.S_IWUSR  # 0o600

DEFAULT_BASE_URL = "https://api.onedrive.com/v1.0"
DEFAULT_TIMEOUT = 30.0


class ConfigError(OneDriveError):
    """Raised when configuration loading/saving fails."""

    pass


class BearerAuth(httpx.Auth):
    """Attach a pre-issued access token to every request."""

    def __init__(self, access_token: str) -> None:
        self.access_token = access_token

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self.access_token}"
        yield request


class ClientConfig(BaseModel):
    """Settings for a OneDrive client."""

    access_token: str = Field(
        default="",
        alias="accesstoken",
        description="OAuth access token, supplied by the user",
    )
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API root URL")
    debug: bool = Field(default=False, description="Request pretty printed JSON")
    timeout: float = Field(default=DEFAULT_TIMEOUT, description="Seconds per request")

    model_config = {"populate_by_name": True}

    def _auth(self) -> httpx.Auth | None:
        if not self.access_token:
            return None
        return BearerAuth(self.access_token)

    def build_http_client(self) -> httpx.Client:
        """Get an HTTP client that sends the configured access token.

        Returns:
            Configured httpx.Client.
        """
        return httpx.Client(
            auth=self._auth(), timeout=self.timeout, follow_redirects=True
        )

    def build_async_http_client(self) -> httpx.AsyncClient:
        """Get an async HTTP client that sends the configured access token."""
        return httpx.AsyncClient(
            auth=self._auth(), timeout=self.timeout, follow_redirects=True
        )


def get_default_config_path() -> Path:
    """Determine the default configuration file path.

    Checks in order:
    1. ONEDRIVE_CONFIG environment variable
    2. ~/.onedrive (home directory)
    3. ~/.config/onedrive/onedrive.conf (XDG config)

    Returns:
        Path to the configuration file.
    """
    env_config = os.environ.get(CONFIG_ENV_VAR)
    if env_config:
        return Path(env_config).expanduser()

    home_config = Path.home() / DEFAULT_CONFIG_NAME
    if home_config.exists():
        return home_config

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        xdg_config = Path(xdg_config_home) / XDG_CONFIG_NAME
    else:
        xdg_config = Path.home() / ".config" / XDG_CONFIG_NAME

    if xdg_config.exists():
        return xdg_config

    # Default to home directory location
    return home_config


def load_config(config_path: str | Path | None = None) -> ClientConfig:
    """Load the client configuration.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        The configuration; defaults if the file does not exist.

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """
    path = (
        get_default_config_path()
        if config_path is None
        else Path(config_path).expanduser()
    )
    if not path.exists():
        return ClientConfig()

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {e}") from e

    if not data:
        return ClientConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    try:
        return ClientConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e


def save_config(config: ClientConfig, config_path: str | Path | None = None) -> Path:
    """Save the configuration with owner-only permissions.

    Returns:
        Path the configuration was written to.

    Raises:
        ConfigError: If the configuration cannot be saved.
    """
    path = (
        get_default_config_path()
        if config_path is None
        else Path(config_path).expanduser()
    )
    data = {
        "accesstoken": config.access_token,
        "base_url": config.base_url,
        "debug": config.debug,
        "timeout": config.timeout,
    }

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(data, default_flow_style=False))
        path.chmod(CONFIG_FILE_MODE)
    except OSError as e:
        raise ConfigError(f"Failed to save config: {e}") from e

    return path
