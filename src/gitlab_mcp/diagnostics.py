"""Configuration diagnostics for the GitLab MCP server.

This module provides diagnostic functionality to inspect configuration sources,
validate settings, and test GitLab connectivity.
"""

import asyncio
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .config import (
    ENV_BASE_URL,
    ENV_DEFAULT_PROJECT_ID,
    ENV_LOG_LEVEL,
    ENV_TIMEOUT,
    ENV_TOKEN,
    ENV_VAR_NAMES,
    GitLabConfig,
    load_config,
    read_env_file,
)
from .gitlab_client import GitLabClient

CONFIG_FIELDS = {
    "token": ENV_TOKEN,
    "base_url": ENV_BASE_URL,
    "default_project_id": ENV_DEFAULT_PROJECT_ID,
    "timeout": ENV_TIMEOUT,
    "log_level": ENV_LOG_LEVEL,
}


def mask_token(token: str) -> str:
    """Mask access token for security.

    Args:
        token: Token to mask

    Returns:
        Masked token showing only last 3 characters
    """
    if not token:
        return "****"
    if len(token) <= 3:
        return f"****{token}"
    return f"****{token[-3:]}"


async def check_gitlab_connectivity(
    config: GitLabConfig,
) -> Tuple[str, str, Optional[str]]:
    """Test connectivity to GitLab using the version endpoint.

    Args:
        config: Configuration to test

    Returns:
        Tuple of (status, message, version):
            status: "success" or "error"
            message: Description of result
            version: GitLab version if available, else None
    """
    async with GitLabClient(config) as client:
        try:
            response = await client.get_version()
        except Exception as e:
            return ("error", f"Connection failed: {str(e)}", None)

    version = None
    if isinstance(response, dict):
        version = response.get("version")

    return ("success", "GitLab reachable", version)


@dataclass
class DiagnosticsResult:
    """Result of configuration diagnostics.

    Attributes:
        env_vars: Environment variables found (with masked tokens)
        env_file_vars: Variables found in the .env file (with masked tokens)
        effective_config: Final effective configuration (with masked tokens)
        sources: Source of each config value (environment/env file/default)
        connectivity_status: GitLab connectivity test status
        connectivity_message: GitLab connectivity test message
        server_version: GitLab version if available
    """

    env_vars: Dict[str, str] = field(default_factory=dict)
    env_file_vars: Dict[str, str] = field(default_factory=dict)
    effective_config: Dict[str, Any] = field(default_factory=dict)
    sources: Dict[str, str] = field(default_factory=dict)
    connectivity_status: str = "not_tested"
    connectivity_message: str = ""
    server_version: Optional[str] = None

    def format_output(self) -> str:
        """Render the result as the ``--diagnose`` report."""
        lines = ["Configuration Diagnostics", "=" * 50, ""]

        lines += _section("Environment Variables:", self.env_vars, "(none set)")
        lines += _section("Env File (.env):", self.env_file_vars, "(not used)")

        lines.append("Effective Configuration:")
        for key, value in sorted(self.effective_config.items()):
            lines.append(f"  {key}: {value} (from {self.sources.get(key, 'unknown')})")
        if self.effective_config.get("default_project_id") is not None:
            lines.append(
                "  note: default_project_id is not applied to tools; "
                "every call must pass projectId"
            )
        lines.append("")

        lines.append("GitLab Connectivity:")
        if self.connectivity_status == "not_tested":
            lines.append("  Status: Not tested")
        else:
            lines.append(f"  Status: {self.connectivity_message}")
            if self.server_version:
                lines.append(f"  GitLab version: {self.server_version}")
        lines.append("")

        return "\n".join(lines)


def _section(title: str, values: Dict[str, str], empty: str) -> List[str]:
    lines = [title]
    if values:
        lines += [f"  {key}: {value}" for key, value in sorted(values.items())]
    else:
        lines.append(f"  {empty}")
    lines.append("")
    return lines


def _collect(values: Mapping[str, str]) -> Dict[str, str]:
    collected = {}
    for var_name in ENV_VAR_NAMES:
        if var_name in values:
            value = values[var_name]
            if var_name == ENV_TOKEN:
                value = mask_token(value)
            collected[var_name] = value
    return collected


def diagnose_configuration(
    environ: Optional[Mapping[str, str]] = None,
    env_file: Optional[Union[str, Path]] = None,
    check_connectivity: bool = True,
) -> DiagnosticsResult:
    """Diagnose configuration sources and settings.

    Args:
        environ: Environment mapping (default: os.environ)
        env_file: Path to a .env file (default: ./.env if present)
        check_connectivity: Whether to contact GitLab

    Returns:
        DiagnosticsResult with all diagnostic information

    Raises:
        ValueError: If the configuration is missing or invalid
    """
    if environ is None:
        environ = os.environ

    result = DiagnosticsResult()
    file_values = read_env_file(env_file)

    result.env_vars = _collect(environ)
    result.env_file_vars = _collect(file_values)

    config = load_config(environ=environ, env_file=env_file)

    result.effective_config = {
        "token": mask_token(config.token),
        "base_url": config.base_url,
        "default_project_id": config.default_project_id,
        "timeout": config.timeout,
        "log_level": config.log_level,
    }

    for field_name, var_name in CONFIG_FIELDS.items():
        if environ.get(var_name):
            result.sources[field_name] = "environment"
        elif file_values.get(var_name):
            result.sources[field_name] = "env file"
        else:
            result.sources[field_name] = "default"

    if check_connectivity:
        try:
            status, message, version = asyncio.run(check_gitlab_connectivity(config))
            result.connectivity_status = status
            result.connectivity_message = message
            result.server_version = version
        except Exception as e:
            result.connectivity_status = "error"
            result.connectivity_message = f"Connectivity test failed: {str(e)}"

    return result
