"""Tool registry and call routing.

All domains are merged into one flat ``name -> Tool`` mapping at startup.
A name declared twice is a configuration error. Every failure during a call
is converted into an error-flagged result so that a single bad invocation
never terminates the session.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from ..gitlab_client import GitLabClient
from .base import DuplicateToolError, Tool, ToolDomain, UnknownToolError

logger = logging.getLogger(__name__)


def create_text_result(text: str, is_error: bool = False) -> Dict[str, Any]:
    """Create an MCP tool result envelope carrying a single text item."""
    result: Dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if is_error:
        result["isError"] = True
    return result


def format_result(result: Any) -> str:
    """Pretty-print a tool result as JSON."""
    return json.dumps(result, indent=2, ensure_ascii=False)


class ToolRegistry:
    """Flat registry of every tool, bound to one GitLab client.

    Args:
        client: Shared GitLab client used by all handlers
        domains: Tool domains in registration order

    Raises:
        DuplicateToolError: If two tools share a name
    """

    def __init__(self, client: GitLabClient, domains: Iterable[ToolDomain]):
        self.client = client
        self._tools: Dict[str, Tool] = {}
        self._owners: Dict[str, str] = {}

        for domain in domains:
            for tool in domain.tools:
                if tool.name in self._tools:
                    raise DuplicateToolError(
                        tool.name, self._owners[tool.name], domain.name
                    )
                self._tools[tool.name] = tool
                self._owners[tool.name] = domain.name

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def tool_names(self) -> List[str]:
        return list(self._tools)

    def get(self, name: str) -> Tool:
        """Look up a tool by name.

        Raises:
            UnknownToolError: If no tool has this name
        """
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def list_tools(self) -> List[Dict[str, Any]]:
        """Return every tool descriptor for a tools/list request."""
        return [tool.to_descriptor() for tool in self._tools.values()]

    async def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Invoke a tool and wrap its outcome in a result envelope.

        Args:
            name: Tool name
            arguments: Raw argument mapping from the caller

        Returns:
            Result envelope; ``isError`` is set when the call failed
        """
        try:
            tool = self.get(name)
            logger.debug(f"Calling tool {name} ({self._owners[name]})")
            result = await tool.invoke(self.client, arguments)
            return create_text_result(format_result(result))

        except Exception as e:
            logger.warning(f"Tool {name} failed: {str(e)}")
            return create_text_result(f"Error: {str(e)}", is_error=True)
