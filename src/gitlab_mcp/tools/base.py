"""Tool definitions shared by every tool domain.

A tool couples a descriptor (name, description, JSON input schema) with a
typed input model and an async handler. The descriptor is the single source
of default values: defaults are substituted from the schema before the raw
arguments are parsed into the input model.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, ValidationError

from ..gitlab_client import GitLabClient


# Schema fragment reused by nearly every tool
PROJECT_ID_PROPERTY = {
    "type": "string",
    "description": "Project ID or path",
}

MERGE_REQUEST_IID_PROPERTY = {
    "type": "number",
    "description": "Merge request IID",
}


class ToolError(Exception):
    """Base exception for tool lookup and argument errors."""

    pass


class UnknownToolError(ToolError):
    """Raised when no registered tool matches the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class DuplicateToolError(ToolError):
    """Raised at registry build time when two tools share a name."""

    def __init__(self, name: str, first_domain: str, second_domain: str):
        self.name = name
        super().__init__(
            f"Tool name '{name}' is declared by both the {first_domain} "
            f"and {second_domain} domains"
        )


class ToolValidationError(ToolError):
    """Raised when tool arguments do not match the tool's input record.

    Args:
        tool_name: Name of the tool being invoked
        problems: Human readable "field: message" entries
    """

    def __init__(self, tool_name: str, problems: List[str]):
        self.tool_name = tool_name
        self.problems = problems
        super().__init__(
            f"Invalid arguments for {tool_name}: " + "; ".join(problems)
        )

    @classmethod
    def from_validation_error(
        cls, tool_name: str, error: ValidationError
    ) -> "ToolValidationError":
        problems = []
        for detail in error.errors():
            location = ".".join(str(part) for part in detail["loc"]) or "arguments"
            problems.append(f"{location}: {detail['msg']}")
        return cls(tool_name, problems)


class ToolInput(BaseModel):
    """Base class for typed tool arguments.

    Fields use snake_case names with the camelCase wire names as aliases.
    Unknown arguments are ignored, numbers given for string fields are
    accepted as their string form.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


class EmptyInput(ToolInput):
    """Input record for tools that take no arguments."""

    pass


ToolHandler = Callable[[GitLabClient, Any], Awaitable[Any]]


@dataclass(frozen=True)
class Tool:
    """A single invocable tool.

    Attributes:
        name: Unique tool name
        description: Human readable description
        input_schema: JSON schema describing the arguments
        input_model: Typed record the arguments are parsed into
        handler: Coroutine function ``handler(client, args)``
    """

    name: str
    description: str
    input_schema: Dict[str, Any]
    input_model: Type[ToolInput]
    handler: ToolHandler

    def to_descriptor(self) -> Dict[str, Any]:
        """Convert to the MCP tool descriptor dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }

    def schema_defaults(self) -> Dict[str, Any]:
        """Default values declared by the input schema."""
        properties = self.input_schema.get("properties", {})
        return {
            key: prop["default"] for key, prop in properties.items() if "default" in prop
        }

    def apply_defaults(self, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Fill declared defaults into missing, null or empty-string arguments.

        ``False`` and ``0`` are real values and are never replaced.
        """
        merged = dict(arguments or {})
        for key, default in self.schema_defaults().items():
            value = merged.get(key)
            if value is None or (isinstance(value, str) and value == ""):
                merged[key] = default
        return merged

    def parse_arguments(self, arguments: Optional[Dict[str, Any]]) -> ToolInput:
        """Apply defaults and parse raw arguments into the input record.

        Raises:
            ToolValidationError: If required fields are missing or malformed
        """
        if arguments is not None and not isinstance(arguments, dict):
            raise ToolValidationError(self.name, ["arguments: must be an object"])

        try:
            return self.input_model.model_validate(self.apply_defaults(arguments))
        except ValidationError as e:
            raise ToolValidationError.from_validation_error(self.name, e) from e

    async def invoke(
        self, client: GitLabClient, arguments: Optional[Dict[str, Any]]
    ) -> Any:
        """Parse arguments and run the handler."""
        args = self.parse_arguments(arguments)
        return await self.handler(client, args)


@dataclass(frozen=True)
class ToolDomain:
    """A named group of related tools (repository, branches, ...)."""

    name: str
    tools: List[Tool] = field(default_factory=list)

    @property
    def tool_names(self) -> List[str]:
        return [tool.name for tool in self.tools]
