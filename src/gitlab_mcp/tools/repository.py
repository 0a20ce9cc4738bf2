"""Repository tools: project lookup and listing."""

from pydantic import Field

from ..gitlab_client import GitLabClient
from .base import EmptyInput, Tool, ToolDomain, ToolInput


class GetProjectInput(ToolInput):
    project_id: str = Field(..., alias="projectId")


async def list_projects(client: GitLabClient, args: EmptyInput):
    return await client.list_projects()


async def get_project(client: GitLabClient, args: GetProjectInput):
    return await client.get_project(args.project_id)


REPOSITORY_TOOLS = ToolDomain(
    name="repository",
    tools=[
        Tool(
            name="list_projects",
            description="List all GitLab projects the user has access to",
            input_schema={"type": "object", "properties": {}, "required": []},
            input_model=EmptyInput,
            handler=list_projects,
        ),
        Tool(
            name="get_project",
            description="Get details of a specific GitLab project",
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": {
                        "type": "string",
                        "description": 'Project ID or path (e.g., "username/project-name" or "123")',
                    }
                },
                "required": ["projectId"],
            },
            input_model=GetProjectInput,
            handler=get_project,
        ),
    ],
)
