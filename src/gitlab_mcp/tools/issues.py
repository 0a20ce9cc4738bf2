"""Issue tools: list and create project issues."""

from typing import List, Optional

from pydantic import Field

from ..gitlab_client import GitLabClient
from .base import PROJECT_ID_PROPERTY, Tool, ToolDomain, ToolInput


class ListIssuesInput(ToolInput):
    project_id: str = Field(..., alias="projectId")
    state: str


class CreateIssueInput(ToolInput):
    project_id: str = Field(..., alias="projectId")
    title: str
    description: Optional[str] = None
    labels: Optional[List[str]] = None


async def list_issues(client: GitLabClient, args: ListIssuesInput):
    return await client.list_issues(args.project_id, args.state)


async def create_issue(client: GitLabClient, args: CreateIssueInput):
    return await client.create_issue(
        args.project_id, args.title, args.description, args.labels
    )


ISSUE_TOOLS = ToolDomain(
    name="issue",
    tools=[
        Tool(
            name="list_issues",
            description="List issues in a GitLab project",
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": PROJECT_ID_PROPERTY,
                    "state": {
                        "type": "string",
                        "description": "State filter (opened, closed, all)",
                        "default": "opened",
                    },
                },
                "required": ["projectId"],
            },
            input_model=ListIssuesInput,
            handler=list_issues,
        ),
        Tool(
            name="create_issue",
            description="Create a new issue in a GitLab project",
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": PROJECT_ID_PROPERTY,
                    "title": {"type": "string", "description": "Issue title"},
                    "description": {
                        "type": "string",
                        "description": "Issue description (optional)",
                    },
                    "labels": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Labels to apply (optional)",
                    },
                },
                "required": ["projectId", "title"],
            },
            input_model=CreateIssueInput,
            handler=create_issue,
        ),
    ],
)
