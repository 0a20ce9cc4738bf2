"""Shared pytest fixtures for GitLab MCP server tests."""

import pytest
import pytest_asyncio

from gitlab_mcp.config import GitLabConfig
from gitlab_mcp.gitlab_client import GitLabClient
from gitlab_mcp.tools import build_registry

BASE_URL = "https://gitlab.example.com/api/v4"


@pytest.fixture
def config() -> GitLabConfig:
    return GitLabConfig(token="test-token-123", base_url=BASE_URL, timeout=30)


@pytest_asyncio.fixture
async def client(config):
    gitlab_client = GitLabClient(config)
    yield gitlab_client
    await gitlab_client.close()


@pytest.fixture
def registry(client):
    return build_registry(client)
