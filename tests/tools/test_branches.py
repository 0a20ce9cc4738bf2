"""Tests for branch tools and default substitution."""

import json

import pytest

from ..conftest import BASE_URL

BRANCHES_URL = f"{BASE_URL}/projects/42/repository/branches"


@pytest.mark.asyncio
class TestCreateBranch:
    """Test create_branch ref defaulting."""

    async def test_ref_defaults_to_main(self, registry, httpx_mock):
        """Test that an omitted ref becomes main."""
        httpx_mock.add_response(method="POST", url=BRANCHES_URL, json={"name": "f"})

        await registry.call_tool("create_branch", {"projectId": "42", "branchName": "f"})

        body = json.loads(httpx_mock.get_request().content)
        assert body == {"branch": "f", "ref": "main"}

    async def test_explicit_ref_passed_through(self, registry, httpx_mock):
        """Test that a supplied ref is not overridden."""
        httpx_mock.add_response(method="POST", url=BRANCHES_URL, json={"name": "f"})

        await registry.call_tool(
            "create_branch", {"projectId": "42", "branchName": "f", "ref": "develop"}
        )

        body = json.loads(httpx_mock.get_request().content)
        assert body["ref"] == "develop"

    async def test_empty_ref_treated_as_missing(self, registry, httpx_mock):
        """Test that an empty ref string falls back to main."""
        httpx_mock.add_response(method="POST", url=BRANCHES_URL, json={"name": "f"})

        await registry.call_tool(
            "create_branch", {"projectId": "42", "branchName": "f", "ref": ""}
        )

        body = json.loads(httpx_mock.get_request().content)
        assert body["ref"] == "main"


@pytest.mark.asyncio
class TestListAndDeleteBranches:
    """Test list_branches and delete_branch."""

    async def test_list_branches(self, registry, httpx_mock):
        """Test that branches are listed for the project."""
        httpx_mock.add_response(method="GET", url=BRANCHES_URL, json=[{"name": "main"}])

        result = await registry.call_tool("list_branches", {"projectId": "42"})

        assert json.loads(result["content"][0]["text"]) == [{"name": "main"}]

    async def test_numeric_project_id_accepted(self, registry, httpx_mock):
        """Test that a numeric projectId is coerced to its string form."""
        httpx_mock.add_response(method="GET", url=BRANCHES_URL, json=[])

        result = await registry.call_tool("list_branches", {"projectId": 42})

        assert "isError" not in result

    async def test_delete_branch_returns_null_for_no_content(
        self, registry, httpx_mock
    ):
        """Test that an empty 204 body is reported as null."""
        httpx_mock.add_response(
            method="DELETE", url=f"{BRANCHES_URL}/feature%2Fx", status_code=204
        )

        result = await registry.call_tool(
            "delete_branch", {"projectId": "42", "branchName": "feature/x"}
        )

        assert result["content"][0]["text"] == "null"
