"""GitLab tool domains and the registry that routes calls to them."""

from typing import List

from ..gitlab_client import GitLabClient
from .base import (
    DuplicateToolError,
    Tool,
    ToolDomain,
    ToolError,
    ToolInput,
    ToolValidationError,
    UnknownToolError,
)
from .branches import BRANCH_TOOLS
from .commits import COMMIT_TOOLS
from .discussions import DISCUSSION_TOOLS
from .files import FILE_TOOLS
from .issues import ISSUE_TOOLS
from .merge_requests import MERGE_REQUEST_TOOLS
from .registry import ToolRegistry, create_text_result
from .repository import REPOSITORY_TOOLS

# Registration order
ALL_DOMAINS: List[ToolDomain] = [
    REPOSITORY_TOOLS,
    BRANCH_TOOLS,
    MERGE_REQUEST_TOOLS,
    FILE_TOOLS,
    DISCUSSION_TOOLS,
    COMMIT_TOOLS,
    ISSUE_TOOLS,
]


def build_registry(client: GitLabClient) -> ToolRegistry:
    """Build the registry of every GitLab tool bound to ``client``."""
    return ToolRegistry(client, ALL_DOMAINS)


__all__ = [
    "ALL_DOMAINS",
    "DuplicateToolError",
    "Tool",
    "ToolDomain",
    "ToolError",
    "ToolInput",
    "ToolRegistry",
    "ToolValidationError",
    "UnknownToolError",
    "build_registry",
    "create_text_result",
]
