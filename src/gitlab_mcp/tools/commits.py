"""Commit tools: list history and create multi-file commits."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from ..gitlab_client import GitLabClient
from .base import PROJECT_ID_PROPERTY, Tool, ToolDomain, ToolInput


class ListCommitsInput(ToolInput):
    project_id: str = Field(..., alias="projectId")
    branch: Optional[str] = None


class CreateCommitInput(ToolInput):
    project_id: str = Field(..., alias="projectId")
    branch: str
    commit_message: str = Field(..., alias="commitMessage")
    actions: List[Dict[str, Any]] = Field(..., min_length=1)


async def list_commits(client: GitLabClient, args: ListCommitsInput):
    return await client.get_commits(args.project_id, args.branch)


async def create_commit(client: GitLabClient, args: CreateCommitInput):
    return await client.create_commit(
        args.project_id, args.branch, args.commit_message, args.actions
    )


COMMIT_TOOLS = ToolDomain(
    name="commit",
    tools=[
        Tool(
            name="list_commits",
            description="List commits in a GitLab project, optionally for one branch",
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": PROJECT_ID_PROPERTY,
                    "branch": {
                        "type": "string",
                        "description": "Branch name (optional, default branch when omitted)",
                    },
                },
                "required": ["projectId"],
            },
            input_model=ListCommitsInput,
            handler=list_commits,
        ),
        Tool(
            name="create_commit",
            description="Create a commit with multiple file actions in one step",
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": PROJECT_ID_PROPERTY,
                    "branch": {
                        "type": "string",
                        "description": "Branch to commit to",
                    },
                    "commitMessage": {
                        "type": "string",
                        "description": "Commit message",
                    },
                    "actions": {
                        "type": "array",
                        "description": "File actions, passed to GitLab unchanged",
                        "items": {
                            "type": "object",
                            "properties": {
                                "action": {
                                    "type": "string",
                                    "enum": [
                                        "create",
                                        "delete",
                                        "move",
                                        "update",
                                        "chmod",
                                    ],
                                },
                                "file_path": {"type": "string"},
                                "previous_path": {"type": "string"},
                                "content": {"type": "string"},
                                "encoding": {
                                    "type": "string",
                                    "enum": ["text", "base64"],
                                },
                            },
                            "required": ["action", "file_path"],
                        },
                    },
                },
                "required": ["projectId", "branch", "commitMessage", "actions"],
            },
            input_model=CreateCommitInput,
            handler=create_commit,
        ),
    ],
)
