"""Tool registration and discovery."""

from collections.abc import Callable
from typing import Any

from mecenas.tools.base import Tool, ToolFunction, ToolParameter, ToolSchema


class ToolRegistry:
    """Named collection of tools available to the agent.

    Tool modules register their functions on a registry instance passed to
    their ``register(registry)`` function, so several independent
    registries can coexist (e.g. in tests).
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def tool(
        self,
        name: str,
        description: str,
        parameters: list[ToolParameter] | None = None,
    ) -> Callable[[ToolFunction], ToolFunction]:
        """Decorator to register a function as a tool.

        Args:
            name: Tool name exposed to the model
            description: Human-readable description of what the tool does
            parameters: Input parameters of the tool

        Returns:
            Decorator function

        Example:
            @registry.tool(
                name="get_case",
                description="Pobierz szczegóły sprawy",
                parameters=[ToolParameter("caseId", "string", "ID sprawy")],
            )
            async def get_case(ctx: ToolContext, args: dict[str, Any]) -> Any:
                ...
        """

        def decorator(fn: ToolFunction) -> ToolFunction:
            schema = ToolSchema(name=name, description=description, parameters=parameters or [])
            self._tools[name] = Tool(schema=schema, fn=fn)
            return fn

        return decorator

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def known_names(self) -> frozenset[str]:
        """Names of all registered tools."""
        return frozenset(self._tools)

    def openai_schemas(self) -> list[dict[str, Any]]:
        """All tool schemas in OpenAI function format."""
        return [t.schema.to_openai_format() for t in self._tools.values()]

    def describe(self) -> str:
        """One line per tool, used in the local model's system prompt."""
        return "\n".join(f"- {t.schema.name}: {t.schema.description}" for t in self._tools.values())


def build_default_registry() -> ToolRegistry:
    """Create a registry with every built-in tool registered.

    Returns:
        Populated ToolRegistry
    """
    from mecenas.tools import (
        billing,
        calculators,
        cases,
        clients,
        court_decisions,
        deadlines,
        documents,
        law,
        privacy,
    )

    registry = ToolRegistry()
    for module in (
        clients,
        cases,
        deadlines,
        documents,
        law,
        billing,
        calculators,
        court_decisions,
        privacy,
    ):
        module.register(registry)
    return registry
