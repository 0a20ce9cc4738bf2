"""File tools: read, create, update and delete repository files.

``get_file`` is the one tool that reshapes its result: GitLab returns the
file body base64-encoded, the tool returns it as plain text alongside the
rest of the file metadata.
"""

import base64
import binascii
from typing import Any, Dict

from pydantic import Field

from ..gitlab_client import GitLabClient
from .base import PROJECT_ID_PROPERTY, Tool, ToolDomain, ToolInput

FILE_PATH_PROPERTY = {
    "type": "string",
    "description": "Path to the file in the repository",
}

BRANCH_PROPERTY = {
    "type": "string",
    "description": "Target branch (default: main)",
    "default": "main",
}


class WriteFileInput(ToolInput):
    project_id: str = Field(..., alias="projectId")
    file_path: str = Field(..., alias="filePath")
    content: str
    commit_message: str = Field(..., alias="commitMessage")
    branch: str


class GetFileInput(ToolInput):
    project_id: str = Field(..., alias="projectId")
    file_path: str = Field(..., alias="filePath")
    ref: str


class DeleteFileInput(ToolInput):
    project_id: str = Field(..., alias="projectId")
    file_path: str = Field(..., alias="filePath")
    commit_message: str = Field(..., alias="commitMessage")
    branch: str


def decode_content(encoded: str) -> str:
    """Decode a base64 file body into text.

    Invalid UTF-8 sequences are replaced rather than rejected.

    Raises:
        ValueError: If the body is not valid base64
    """
    try:
        raw = base64.b64decode(encoded or "", validate=False)
    except binascii.Error as e:
        raise ValueError(f"File content is not valid base64: {str(e)}") from e
    return raw.decode("utf-8", errors="replace")


def decode_file(file: Any) -> Dict[str, Any]:
    """Return the file metadata with ``content`` decoded to text.

    Raises:
        ValueError: If GitLab did not return a file object
    """
    if not isinstance(file, dict):
        raise ValueError(
            f"Expected a file object from GitLab, got {type(file).__name__}"
        )
    return {**file, "content": decode_content(file.get("content", ""))}


async def create_file(client: GitLabClient, args: WriteFileInput):
    return await client.create_file(
        args.project_id, args.file_path, args.content, args.commit_message, args.branch
    )


async def update_file(client: GitLabClient, args: WriteFileInput):
    return await client.update_file(
        args.project_id, args.file_path, args.content, args.commit_message, args.branch
    )


async def get_file(client: GitLabClient, args: GetFileInput):
    file = await client.get_file(args.project_id, args.file_path, args.ref)
    return decode_file(file)


async def delete_file(client: GitLabClient, args: DeleteFileInput):
    return await client.delete_file(
        args.project_id, args.file_path, args.commit_message, args.branch
    )


def _write_schema(content_description: str) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "projectId": PROJECT_ID_PROPERTY,
            "filePath": FILE_PATH_PROPERTY,
            "content": {"type": "string", "description": content_description},
            "commitMessage": {"type": "string", "description": "Commit message"},
            "branch": BRANCH_PROPERTY,
        },
        "required": ["projectId", "filePath", "content", "commitMessage"],
    }


FILE_TOOLS = ToolDomain(
    name="file",
    tools=[
        Tool(
            name="create_file",
            description="Create a new file in a GitLab repository",
            input_schema=_write_schema("File content"),
            input_model=WriteFileInput,
            handler=create_file,
        ),
        Tool(
            name="update_file",
            description="Update an existing file in a GitLab repository",
            input_schema=_write_schema("New file content"),
            input_model=WriteFileInput,
            handler=update_file,
        ),
        Tool(
            name="get_file",
            description="Get file content from a GitLab repository",
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": PROJECT_ID_PROPERTY,
                    "filePath": FILE_PATH_PROPERTY,
                    "ref": {
                        "type": "string",
                        "description": "Branch or commit SHA (default: main)",
                        "default": "main",
                    },
                },
                "required": ["projectId", "filePath"],
            },
            input_model=GetFileInput,
            handler=get_file,
        ),
        Tool(
            name="delete_file",
            description="Delete a file from a GitLab repository",
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": PROJECT_ID_PROPERTY,
                    "filePath": FILE_PATH_PROPERTY,
                    "commitMessage": {
                        "type": "string",
                        "description": "Commit message",
                    },
                    "branch": BRANCH_PROPERTY,
                },
                "required": ["projectId", "filePath", "commitMessage"],
            },
            input_model=DeleteFileInput,
            handler=delete_file,
        ),
    ],
)
