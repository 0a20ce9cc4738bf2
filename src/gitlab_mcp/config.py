"""Configuration management for the GitLab MCP server.

This module handles loading and validating configuration from environment
variables and an optional ``.env`` file. Configuration is read once at
startup and is immutable afterwards.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import dotenv_values


# Default configuration values
DEFAULT_BASE_URL = "https://gitlab.com/api/v4"
DEFAULT_TIMEOUT = 30
DEFAULT_LOG_LEVEL = "info"
DEFAULT_ENV_FILE = Path(".env")
VALID_LOG_LEVELS = ["debug", "info", "warning", "error"]
MIN_TIMEOUT = 1
MAX_TIMEOUT = 300

# Environment variable names
ENV_TOKEN = "GITLAB_TOKEN"
ENV_BASE_URL = "GITLAB_URL"
ENV_DEFAULT_PROJECT_ID = "DEFAULT_PROJECT_ID"
ENV_TIMEOUT = "GITLAB_TIMEOUT"
ENV_LOG_LEVEL = "GITLAB_LOG_LEVEL"

ENV_VAR_NAMES = [
    ENV_TOKEN,
    ENV_BASE_URL,
    ENV_DEFAULT_PROJECT_ID,
    ENV_TIMEOUT,
    ENV_LOG_LEVEL,
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GitLabConfig:
    """Configuration for the GitLab MCP server.

    Args:
        token: Personal/project access token presented as a Bearer credential
        base_url: GitLab REST API root (default: https://gitlab.com/api/v4)
        default_project_id: Optional project identifier. Carried for
            diagnostics only; tools always require an explicit projectId.
        timeout: Request timeout in seconds (1-300, default: 30)
        log_level: Logging level (debug/info/warning/error, default: info)
    """

    token: str
    base_url: str = DEFAULT_BASE_URL
    default_project_id: Optional[str] = None
    timeout: int = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.token:
            raise ValueError("token cannot be empty")

        if not self.base_url:
            raise ValueError("base_url cannot be empty")

        if not self.base_url.startswith(("https://", "http://")):
            raise ValueError(
                f"base_url must be an http(s) URL. Got: {self.base_url[:40]}"
            )

        if self.timeout < MIN_TIMEOUT or self.timeout > MAX_TIMEOUT:
            raise ValueError(
                f"timeout must be between {MIN_TIMEOUT} and {MAX_TIMEOUT} seconds. "
                f"Got: {self.timeout}"
            )

        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {VALID_LOG_LEVELS}. "
                f"Got: {self.log_level}"
            )

        # Frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))


def read_env_file(env_file: Optional[Union[str, Path]] = None) -> dict:
    """Read KEY=VALUE pairs from a ``.env`` file.

    Args:
        env_file: Path to the file (default: ./.env). A missing file yields {}.

    Returns:
        Dictionary of the variables defined in the file
    """
    path = Path(env_file) if env_file else DEFAULT_ENV_FILE
    path = path.expanduser()

    if not path.exists():
        if env_file is not None:
            logger.warning(f"Env file {path} not found, using environment only")
        return {}

    return {k: v for k, v in dotenv_values(path).items() if v is not None}


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    env_file: Optional[Union[str, Path]] = None,
) -> GitLabConfig:
    """Load configuration from environment variables and a ``.env`` file.

    Values from the real environment take precedence over the ``.env`` file.

    Args:
        environ: Environment mapping (default: os.environ)
        env_file: Path to a ``.env`` file (default: ./.env if present)

    Returns:
        GitLabConfig instance

    Raises:
        ValueError: If GITLAB_TOKEN is missing or any value is invalid

    Environment Variables:
        GITLAB_TOKEN: Access token (required)
        GITLAB_URL: API root URL (default: https://gitlab.com/api/v4)
        DEFAULT_PROJECT_ID: Default project identifier (optional, unused by tools)
        GITLAB_TIMEOUT: Timeout in seconds
        GITLAB_LOG_LEVEL: Log level
    """
    if environ is None:
        environ = os.environ

    values = read_env_file(env_file)
    values.update({k: v for k, v in environ.items() if k in ENV_VAR_NAMES})

    token = values.get(ENV_TOKEN)
    if not token:
        raise ValueError(
            f"{ENV_TOKEN} environment variable is required\n"
            f"  Fix: export {ENV_TOKEN}=<personal access token>\n"
            f"  Or: Add '{ENV_TOKEN}=...' to a .env file"
        )

    config_data: dict = {"token": token}

    if values.get(ENV_BASE_URL):
        config_data["base_url"] = values[ENV_BASE_URL]

    if values.get(ENV_DEFAULT_PROJECT_ID):
        config_data["default_project_id"] = values[ENV_DEFAULT_PROJECT_ID]

    if values.get(ENV_TIMEOUT):
        try:
            config_data["timeout"] = int(values[ENV_TIMEOUT])
        except ValueError:
            raise ValueError(
                f"{ENV_TIMEOUT} must be an integer. Got: {values[ENV_TIMEOUT]}"
            ) from None

    if values.get(ENV_LOG_LEVEL):
        config_data["log_level"] = values[ENV_LOG_LEVEL].lower()

    return GitLabConfig(**config_data)
