"""Tools the agent can call on behalf of the lawyer.

Each tool module exposes ``register(registry)`` which adds its tools to a
:class:`~mecenas.tools.registry.ToolRegistry`. Tool functions receive a
:class:`~mecenas.tools.context.ToolContext` and the raw input object and
return a JSON-serializable payload; :class:`ToolError` carries user-facing
validation messages.

Available tool groups:

- **clients** - create, list, get, update, delete clients
- **cases** - case CRUD, notes, timeline and the session's active case
- **deadlines** - procedural deadlines with reminder settings
- **documents** - watermarked drafts with version history
- **law** - statute search and article lookup
- **billing** - time entries and billing summaries
- **calculators** - court fees, statutory interest, limitation periods
- **court_decisions** - SAOS judgment search
- **privacy** - per-case privacy mode and AI consent

Usage::

    from mecenas.tools import ToolDispatcher, build_default_registry

    dispatcher = ToolDispatcher(build_default_registry(), store, audit)
    result = await dispatcher.execute("list_clients", {}, session)
"""

from .base import Tool, ToolError, ToolParameter, ToolSchema
from .context import ToolContext
from .dispatcher import MAX_TOOL_RESULT_CHARS, ToolDispatcher, truncate_result
from .registry import ToolRegistry, build_default_registry

__all__ = [
    "MAX_TOOL_RESULT_CHARS",
    "Tool",
    "ToolContext",
    "ToolDispatcher",
    "ToolError",
    "ToolParameter",
    "ToolRegistry",
    "ToolSchema",
    "build_default_registry",
    "truncate_result",
]
