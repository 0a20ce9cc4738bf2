"""GitLab MCP Server - exposes the GitLab REST API as MCP tools.

This package provides a stdio MCP server that lets an agent discover and
invoke GitLab operations (projects, branches, files, commits, merge requests,
issues and merge request discussions) as schema-described tools.
"""

__version__ = "1.0.0"
