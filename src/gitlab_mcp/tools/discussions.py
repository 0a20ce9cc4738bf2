"""Merge request discussion tools: threads, notes and resolution."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..gitlab_client import GitLabClient
from .base import (
    MERGE_REQUEST_IID_PROPERTY,
    PROJECT_ID_PROPERTY,
    Tool,
    ToolDomain,
    ToolInput,
)

DISCUSSION_ID_PROPERTY = {"type": "string", "description": "Discussion ID"}
NOTE_ID_PROPERTY = {"type": "number", "description": "Note ID"}


class Position(BaseModel):
    """Line anchor for an inline diff comment. Passed to GitLab as given."""

    model_config = ConfigDict(extra="allow")

    base_sha: Optional[str] = None
    start_sha: Optional[str] = None
    head_sha: Optional[str] = None
    old_path: Optional[str] = None
    new_path: Optional[str] = None
    position_type: Optional[Literal["text"]] = None
    old_line: Optional[int] = None
    new_line: Optional[int] = None


class DiscussionsInput(ToolInput):
    project_id: str = Field(..., alias="projectId")
    merge_request_iid: int = Field(..., alias="mergeRequestIid")


class DiscussionInput(DiscussionsInput):
    discussion_id: str = Field(..., alias="discussionId")


class CreateDiscussionInput(DiscussionsInput):
    body: str
    position: Optional[Position] = None


class AddNoteInput(DiscussionInput):
    body: str


class NoteInput(DiscussionInput):
    note_id: int = Field(..., alias="noteId")


class UpdateNoteInput(NoteInput):
    body: str


class ResolveDiscussionInput(DiscussionInput):
    resolved: bool


async def list_discussions(client: GitLabClient, args: DiscussionsInput):
    return await client.list_discussions(args.project_id, args.merge_request_iid)


async def get_discussion(client: GitLabClient, args: DiscussionInput):
    return await client.get_discussion(
        args.project_id, args.merge_request_iid, args.discussion_id
    )


async def create_discussion(client: GitLabClient, args: CreateDiscussionInput):
    position = None
    if args.position is not None:
        position = args.position.model_dump(exclude_none=True)
    return await client.create_discussion(
        args.project_id, args.merge_request_iid, args.body, position
    )


async def add_note_to_discussion(client: GitLabClient, args: AddNoteInput):
    return await client.add_note_to_discussion(
        args.project_id, args.merge_request_iid, args.discussion_id, args.body
    )


async def update_discussion_note(client: GitLabClient, args: UpdateNoteInput):
    return await client.update_discussion_note(
        args.project_id,
        args.merge_request_iid,
        args.discussion_id,
        args.note_id,
        args.body,
    )


async def delete_discussion_note(client: GitLabClient, args: NoteInput):
    return await client.delete_discussion_note(
        args.project_id, args.merge_request_iid, args.discussion_id, args.note_id
    )


async def resolve_discussion(client: GitLabClient, args: ResolveDiscussionInput):
    return await client.resolve_discussion(
        args.project_id, args.merge_request_iid, args.discussion_id, args.resolved
    )


def _schema(required, **extra_properties):
    properties = {
        "projectId": PROJECT_ID_PROPERTY,
        "mergeRequestIid": MERGE_REQUEST_IID_PROPERTY,
    }
    properties.update(extra_properties)
    return {"type": "object", "properties": properties, "required": required}


POSITION_PROPERTY = {
    "type": "object",
    "description": "Position object for line-specific comments (optional)",
    "properties": {
        "base_sha": {"type": "string", "description": "Base commit SHA"},
        "start_sha": {"type": "string", "description": "Start commit SHA"},
        "head_sha": {"type": "string", "description": "Head commit SHA"},
        "old_path": {"type": "string", "description": "Old file path"},
        "new_path": {"type": "string", "description": "New file path"},
        "position_type": {
            "type": "string",
            "enum": ["text"],
            "description": "Position type",
        },
        "old_line": {"type": "number", "description": "Old line number"},
        "new_line": {"type": "number", "description": "New line number"},
    },
}


DISCUSSION_TOOLS = ToolDomain(
    name="discussion",
    tools=[
        Tool(
            name="list_merge_request_discussions",
            description="List all discussions in a merge request",
            input_schema=_schema(["projectId", "mergeRequestIid"]),
            input_model=DiscussionsInput,
            handler=list_discussions,
        ),
        Tool(
            name="get_merge_request_discussion",
            description="Get a specific discussion in a merge request",
            input_schema=_schema(
                ["projectId", "mergeRequestIid", "discussionId"],
                discussionId=DISCUSSION_ID_PROPERTY,
            ),
            input_model=DiscussionInput,
            handler=get_discussion,
        ),
        Tool(
            name="create_merge_request_discussion",
            description="Create a new discussion in a merge request",
            input_schema=_schema(
                ["projectId", "mergeRequestIid", "body"],
                body={"type": "string", "description": "Discussion body/comment text"},
                position=POSITION_PROPERTY,
            ),
            input_model=CreateDiscussionInput,
            handler=create_discussion,
        ),
        Tool(
            name="add_note_to_discussion",
            description="Add a reply note to an existing discussion",
            input_schema=_schema(
                ["projectId", "mergeRequestIid", "discussionId", "body"],
                discussionId=DISCUSSION_ID_PROPERTY,
                body={"type": "string", "description": "Reply note text"},
            ),
            input_model=AddNoteInput,
            handler=add_note_to_discussion,
        ),
        Tool(
            name="update_discussion_note",
            description="Update an existing note in a discussion",
            input_schema=_schema(
                ["projectId", "mergeRequestIid", "discussionId", "noteId", "body"],
                discussionId=DISCUSSION_ID_PROPERTY,
                noteId=NOTE_ID_PROPERTY,
                body={"type": "string", "description": "Updated note text"},
            ),
            input_model=UpdateNoteInput,
            handler=update_discussion_note,
        ),
        Tool(
            name="delete_discussion_note",
            description="Delete a note from a discussion",
            input_schema=_schema(
                ["projectId", "mergeRequestIid", "discussionId", "noteId"],
                discussionId=DISCUSSION_ID_PROPERTY,
                noteId=NOTE_ID_PROPERTY,
            ),
            input_model=NoteInput,
            handler=delete_discussion_note,
        ),
        Tool(
            name="resolve_discussion",
            description="Resolve or unresolve a discussion",
            input_schema=_schema(
                ["projectId", "mergeRequestIid", "discussionId"],
                discussionId=DISCUSSION_ID_PROPERTY,
                resolved={
                    "type": "boolean",
                    "description": "Whether to resolve (true) or unresolve (false) the discussion",
                    "default": True,
                },
            ),
            input_model=ResolveDiscussionInput,
            handler=resolve_discussion,
        ),
    ],
)
