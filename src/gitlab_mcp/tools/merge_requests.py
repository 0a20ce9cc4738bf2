"""Merge request tools: create, list, inspect, update and merge."""

from typing import List, Literal, Optional

from pydantic import Field

from ..gitlab_client import GitLabClient
from .base import (
    MERGE_REQUEST_IID_PROPERTY,
    PROJECT_ID_PROPERTY,
    Tool,
    ToolDomain,
    ToolInput,
)


class CreateMergeRequestInput(ToolInput):
    project_id: str = Field(..., alias="projectId")
    source_branch: str = Field(..., alias="sourceBranch")
    target_branch: str = Field(..., alias="targetBranch")
    title: str
    description: Optional[str] = None


class ListMergeRequestsInput(ToolInput):
    project_id: str = Field(..., alias="projectId")
    state: str


class GetMergeRequestInput(ToolInput):
    project_id: str = Field(..., alias="projectId")
    merge_request_iid: int = Field(..., alias="mergeRequestIid")


class UpdateMergeRequestInput(ToolInput):
    project_id: str = Field(..., alias="projectId")
    merge_request_iid: int = Field(..., alias="mergeRequestIid")
    title: Optional[str] = None
    description: Optional[str] = None
    target_branch: Optional[str] = Field(None, alias="targetBranch")
    state_event: Optional[Literal["close", "reopen"]] = Field(
        None, alias="stateEvent"
    )
    labels: Optional[List[str]] = None

    def to_updates(self) -> dict:
        """Map the provided fields onto GitLab's update payload."""
        updates = self.model_dump(
            include={"title", "description", "target_branch", "state_event"},
            exclude_none=True,
        )
        if self.labels is not None:
            updates["labels"] = ",".join(self.labels)
        return updates


class MergeMergeRequestInput(ToolInput):
    project_id: str = Field(..., alias="projectId")
    merge_request_iid: int = Field(..., alias="mergeRequestIid")
    merge_commit_message: Optional[str] = Field(None, alias="mergeCommitMessage")


async def create_merge_request(client: GitLabClient, args: CreateMergeRequestInput):
    return await client.create_merge_request(
        args.project_id,
        args.source_branch,
        args.target_branch,
        args.title,
        args.description,
    )


async def list_merge_requests(client: GitLabClient, args: ListMergeRequestsInput):
    return await client.list_merge_requests(args.project_id, args.state)


async def get_merge_request(client: GitLabClient, args: GetMergeRequestInput):
    return await client.get_merge_request(args.project_id, args.merge_request_iid)


async def update_merge_request(client: GitLabClient, args: UpdateMergeRequestInput):
    return await client.update_merge_request(
        args.project_id, args.merge_request_iid, args.to_updates()
    )


async def merge_merge_request(client: GitLabClient, args: MergeMergeRequestInput):
    return await client.merge_merge_request(
        args.project_id, args.merge_request_iid, args.merge_commit_message
    )


MERGE_REQUEST_TOOLS = ToolDomain(
    name="merge request",
    tools=[
        Tool(
            name="create_merge_request",
            description="Create a new merge request (PR) in GitLab",
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": PROJECT_ID_PROPERTY,
                    "sourceBranch": {
                        "type": "string",
                        "description": "Source branch name",
                    },
                    "targetBranch": {
                        "type": "string",
                        "description": "Target branch name (default: main)",
                        "default": "main",
                    },
                    "title": {"type": "string", "description": "Merge request title"},
                    "description": {
                        "type": "string",
                        "description": "Merge request description (optional)",
                    },
                },
                "required": ["projectId", "sourceBranch", "title"],
            },
            input_model=CreateMergeRequestInput,
            handler=create_merge_request,
        ),
        Tool(
            name="list_merge_requests",
            description="List merge requests in a GitLab project",
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": PROJECT_ID_PROPERTY,
                    "state": {
                        "type": "string",
                        "description": "State filter (opened, closed, merged, all)",
                        "default": "opened",
                    },
                },
                "required": ["projectId"],
            },
            input_model=ListMergeRequestsInput,
            handler=list_merge_requests,
        ),
        Tool(
            name="get_merge_request",
            description="Get details of a specific merge request",
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": PROJECT_ID_PROPERTY,
                    "mergeRequestIid": MERGE_REQUEST_IID_PROPERTY,
                },
                "required": ["projectId", "mergeRequestIid"],
            },
            input_model=GetMergeRequestInput,
            handler=get_merge_request,
        ),
        Tool(
            name="update_merge_request",
            description="Update the title, description, target branch, labels or state of a merge request",
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": PROJECT_ID_PROPERTY,
                    "mergeRequestIid": MERGE_REQUEST_IID_PROPERTY,
                    "title": {"type": "string", "description": "New title"},
                    "description": {
                        "type": "string",
                        "description": "New description",
                    },
                    "targetBranch": {
                        "type": "string",
                        "description": "New target branch",
                    },
                    "stateEvent": {
                        "type": "string",
                        "enum": ["close", "reopen"],
                        "description": "Close or reopen the merge request",
                    },
                    "labels": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Replacement set of labels",
                    },
                },
                "required": ["projectId", "mergeRequestIid"],
            },
            input_model=UpdateMergeRequestInput,
            handler=update_merge_request,
        ),
        Tool(
            name="merge_merge_request",
            description="Merge a merge request",
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": PROJECT_ID_PROPERTY,
                    "mergeRequestIid": MERGE_REQUEST_IID_PROPERTY,
                    "mergeCommitMessage": {
                        "type": "string",
                        "description": "Custom merge commit message (optional)",
                    },
                },
                "required": ["projectId", "mergeRequestIid"],
            },
            input_model=MergeMergeRequestInput,
            handler=merge_merge_request,
        ),
    ],
)
