"""Base types for the tool system."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mecenas.tools.context import ToolContext


@dataclass
class ToolParameter:
    """Definition of a tool parameter."""

    name: str
    type: str  # JSON Schema type
    description: str
    required: bool = False
    enum: list[str] | None = None


@dataclass
class ToolSchema:
    """JSON Schema representation of a tool for LLM function calling."""

    name: str
    description: str
    parameters: list[ToolParameter]

    def to_openai_format(self) -> dict[str, Any]:
        """Convert to OpenAI function calling format.

        Returns:
            Dictionary matching OpenAI's function schema format
        """
        properties = {}
        required = []

        for param in self.parameters:
            param_schema: dict[str, Any] = {
                "type": param.type,
                "description": param.description,
            }
            if param.enum:
                param_schema["enum"] = param.enum

            properties[param.name] = param_schema

            if param.required:
                required.append(param.name)

        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": properties,
                    "required": required,
                },
            },
        }


# Tool function signature: async function returning a JSON-serializable result
ToolFunction = Callable[["ToolContext", dict[str, Any]], Awaitable[Any]]


@dataclass
class Tool:
    """A tool that the agent can use."""

    schema: ToolSchema
    fn: ToolFunction

    async def execute(self, ctx: "ToolContext", args: dict[str, Any]) -> Any:
        """Execute the tool with given arguments.

        Args:
            ctx: Execution context (store, session, audit sink)
            args: Tool input object as produced by the model

        Returns:
            JSON-serializable tool result
        """
        return await self.fn(ctx, args)


class ToolError(Exception):
    """Raised by tools for invalid input or missing records.

    The message is user-facing (Polish) and is returned to the model as
    ``{"error": message}``.
    """
