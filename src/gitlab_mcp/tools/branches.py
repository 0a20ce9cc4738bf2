"""Branch tools: list, create and delete repository branches."""

from pydantic import Field

from ..gitlab_client import GitLabClient
from .base import PROJECT_ID_PROPERTY, Tool, ToolDomain, ToolInput


class ListBranchesInput(ToolInput):
    project_id: str = Field(..., alias="projectId")


class CreateBranchInput(ToolInput):
    project_id: str = Field(..., alias="projectId")
    branch_name: str = Field(..., alias="branchName")
    ref: str


class DeleteBranchInput(ToolInput):
    project_id: str = Field(..., alias="projectId")
    branch_name: str = Field(..., alias="branchName")


async def list_branches(client: GitLabClient, args: ListBranchesInput):
    return await client.list_branches(args.project_id)


async def create_branch(client: GitLabClient, args: CreateBranchInput):
    return await client.create_branch(args.project_id, args.branch_name, args.ref)


async def delete_branch(client: GitLabClient, args: DeleteBranchInput):
    return await client.delete_branch(args.project_id, args.branch_name)


BRANCH_TOOLS = ToolDomain(
    name="branch",
    tools=[
        Tool(
            name="list_branches",
            description="List all branches in a GitLab project",
            input_schema={
                "type": "object",
                "properties": {"projectId": PROJECT_ID_PROPERTY},
                "required": ["projectId"],
            },
            input_model=ListBranchesInput,
            handler=list_branches,
        ),
        Tool(
            name="create_branch",
            description="Create a new branch in a GitLab project",
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": PROJECT_ID_PROPERTY,
                    "branchName": {
                        "type": "string",
                        "description": "Name of the new branch",
                    },
                    "ref": {
                        "type": "string",
                        "description": "Source branch or commit SHA (default: main)",
                        "default": "main",
                    },
                },
                "required": ["projectId", "branchName"],
            },
            input_model=CreateBranchInput,
            handler=create_branch,
        ),
        Tool(
            name="delete_branch",
            description="Delete a branch from a GitLab project",
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": PROJECT_ID_PROPERTY,
                    "branchName": {
                        "type": "string",
                        "description": "Name of the branch to delete",
                    },
                },
                "required": ["projectId", "branchName"],
            },
            input_model=DeleteBranchInput,
            handler=delete_branch,
        ),
    ],
)
