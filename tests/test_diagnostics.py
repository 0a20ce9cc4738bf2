"""Tests for configuration diagnostics."""

import pytest

from gitlab_mcp.diagnostics import (
    DiagnosticsResult,
    check_gitlab_connectivity,
    diagnose_configuration,
    mask_token,
)
from gitlab_mcp.config import GitLabConfig

from .conftest import BASE_URL


class TestMaskToken:
    """Test token masking."""

    def test_mask_long_token(self):
        assert mask_token("glpat-abcdef123") == "****123"

    def test_mask_short_token(self):
        assert mask_token("ab") == "****ab"

    def test_mask_empty_token(self):
        assert mask_token("") == "****"


class TestDiagnoseConfiguration:
    """Test configuration source reporting."""

    def test_sources_and_masking(self, tmp_path):
        """Test that sources are tracked and the token is masked."""
        env_file = tmp_path / ".env"
        env_file.write_text("GITLAB_URL=https://file.example.com/api/v4\n")
        environ = {"GITLAB_TOKEN": "secret-token-xyz", "DEFAULT_PROJECT_ID": "7"}

        result = diagnose_configuration(
            environ=environ, env_file=env_file, check_connectivity=False
        )

        assert result.env_vars["GITLAB_TOKEN"] == "****xyz"
        assert result.effective_config["token"] == "****xyz"
        assert result.sources["token"] == "environment"
        assert result.sources["base_url"] == "env file"
        assert result.sources["timeout"] == "default"
        assert result.connectivity_status == "not_tested"

        output = result.format_output()
        assert "secret-token-xyz" not in output
        assert "default_project_id is not applied" in output

    def test_missing_token_raises(self, tmp_path):
        """Test that diagnostics report missing configuration."""
        with pytest.raises(ValueError, match="GITLAB_TOKEN"):
            diagnose_configuration(
                environ={}, env_file=tmp_path / "none.env", check_connectivity=False
            )

    def test_format_output_not_tested(self):
        """Test output for an empty result."""
        output = DiagnosticsResult().format_output()

        assert "(none set)" in output
        assert "Status: Not tested" in output


@pytest.mark.asyncio
class TestConnectivity:
    """Test the GitLab connectivity check."""

    async def test_success_reports_version(self, httpx_mock):
        """Test that a reachable instance reports its version."""
        httpx_mock.add_response(
            method="GET", url=f"{BASE_URL}/version", json={"version": "16.8.0"}
        )

        status, message, version = await check_gitlab_connectivity(
            GitLabConfig(token="t", base_url=BASE_URL)
        )

        assert status == "success"
        assert version == "16.8.0"

    async def test_auth_failure_reports_error(self, httpx_mock):
        """Test that a 401 is reported as a connectivity error."""
        httpx_mock.add_response(
            method="GET", url=f"{BASE_URL}/version", status_code=401, text="Unauthorized"
        )

        status, message, version = await check_gitlab_connectivity(
            GitLabConfig(token="bad", base_url=BASE_URL)
        )

        assert status == "error"
        assert "401" in message
        assert version is None
