"""Unit tests for configuration loading and validation.

This module tests loading configuration from environment variables and
.env files, and validation of configuration values.
"""

import dataclasses

import pytest

from gitlab_mcp.config import (
    DEFAULT_BASE_URL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_TIMEOUT,
    GitLabConfig,
    load_config,
)


class TestGitLabConfig:
    """Test GitLabConfig data class."""

    def test_config_with_defaults(self):
        """Test creating config with only a token."""
        config = GitLabConfig(token="test-token-123")

        assert config.token == "test-token-123"
        assert config.base_url == DEFAULT_BASE_URL
        assert config.default_project_id is None
        assert config.timeout == DEFAULT_TIMEOUT
        assert config.log_level == DEFAULT_LOG_LEVEL

    def test_config_strips_trailing_slash(self):
        """Test that trailing slash is removed from base_url."""
        config = GitLabConfig(token="t", base_url="https://gitlab.example.com/api/v4/")

        assert config.base_url == "https://gitlab.example.com/api/v4"

    def test_config_is_immutable(self):
        """Test that configuration cannot be changed after construction."""
        config = GitLabConfig(token="t")

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.token = "other"

    def test_empty_token_rejected(self):
        """Test that an empty token is rejected."""
        with pytest.raises(ValueError, match="token cannot be empty"):
            GitLabConfig(token="")

    def test_non_http_base_url_rejected(self):
        """Test that base_url must be an http(s) URL."""
        with pytest.raises(ValueError, match="http"):
            GitLabConfig(token="t", base_url="gitlab.example.com")

    @pytest.mark.parametrize("timeout", [0, 301])
    def test_timeout_out_of_range_rejected(self, timeout):
        """Test that timeout outside 1-300 is rejected."""
        with pytest.raises(ValueError, match="timeout must be between"):
            GitLabConfig(token="t", timeout=timeout)

    def test_invalid_log_level_rejected(self):
        """Test that unknown log levels are rejected."""
        with pytest.raises(ValueError, match="log_level must be one of"):
            GitLabConfig(token="t", log_level="verbose")


class TestLoadConfig:
    """Test loading configuration from environment and .env files."""

    def test_missing_token_raises(self, tmp_path):
        """Test that a missing GITLAB_TOKEN is reported by name."""
        with pytest.raises(ValueError, match="GITLAB_TOKEN"):
            load_config(environ={}, env_file=tmp_path / "missing.env")

    def test_load_from_environment(self, tmp_path):
        """Test that every supported variable is read."""
        environ = {
            "GITLAB_TOKEN": "env-token",
            "GITLAB_URL": "https://git.internal/api/v4/",
            "DEFAULT_PROJECT_ID": "group/project",
            "GITLAB_TIMEOUT": "45",
            "GITLAB_LOG_LEVEL": "DEBUG",
        }

        config = load_config(environ=environ, env_file=tmp_path / "missing.env")

        assert config.token == "env-token"
        assert config.base_url == "https://git.internal/api/v4"
        assert config.default_project_id == "group/project"
        assert config.timeout == 45
        assert config.log_level == "debug"

    def test_defaults_when_only_token_set(self, tmp_path):
        """Test default values for optional settings."""
        config = load_config(
            environ={"GITLAB_TOKEN": "t"}, env_file=tmp_path / "missing.env"
        )

        assert config.base_url == DEFAULT_BASE_URL
        assert config.default_project_id is None
        assert config.timeout == DEFAULT_TIMEOUT

    def test_load_from_env_file(self, tmp_path):
        """Test reading values from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text(
            "GITLAB_TOKEN=file-token\nGITLAB_URL=https://file.example.com/api/v4\n"
        )

        config = load_config(environ={}, env_file=env_file)

        assert config.token == "file-token"
        assert config.base_url == "https://file.example.com/api/v4"

    def test_environment_overrides_env_file(self, tmp_path):
        """Test that real environment variables take precedence."""
        env_file = tmp_path / ".env"
        env_file.write_text("GITLAB_TOKEN=file-token\n")

        config = load_config(environ={"GITLAB_TOKEN": "env-token"}, env_file=env_file)

        assert config.token == "env-token"

    def test_invalid_timeout_raises(self, tmp_path):
        """Test that a non-integer timeout is reported."""
        with pytest.raises(ValueError, match="GITLAB_TIMEOUT must be an integer"):
            load_config(
                environ={"GITLAB_TOKEN": "t", "GITLAB_TIMEOUT": "soon"},
                env_file=tmp_path / "missing.env",
            )
