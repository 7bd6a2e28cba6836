"""Tool dispatcher: the single boundary between models and tool code."""

import json
import logging
from datetime import date, datetime
from typing import Any

from mecenas.config.schema import SaosConfig
from mecenas.privacy.audit import AuditSink
from mecenas.store.base import CaseStore
from mecenas.store.models import Session
from mecenas.tools.base import ToolError
from mecenas.tools.context import ToolContext
from mecenas.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

MAX_TOOL_RESULT_CHARS = 16000
TRUNCATION_MARKER = "\n...[wynik skrócony]"


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime | date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(payload: Any) -> str:
    """Serialize a tool payload, keeping Polish characters readable."""
    return json.dumps(payload, ensure_ascii=False, default=_json_default)


def error_result(message: str) -> str:
    return to_json({"error": message})


def truncate_result(text: str, limit: int = MAX_TOOL_RESULT_CHARS) -> str:
    """Cut a tool result to ``limit`` characters with a visible marker."""
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


class ToolDispatcher:
    """Executes named tools against the case store.

    Never raises: unknown tools, invalid input and tool failures all come
    back as ``{"error": ...}`` JSON strings the model can read.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        store: CaseStore,
        audit: AuditSink,
        saos: SaosConfig | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Tools available for execution
            store: Case store passed to tools
            audit: Audit sink for consent and privacy-mode events
            saos: Court decision search settings
        """
        self.registry = registry
        self.store = store
        self.audit = audit
        self.saos = saos or SaosConfig()

    async def execute(self, name: str, args: dict[str, Any], session: Session) -> str:
        """Execute a tool call.

        Args:
            name: Tool name requested by the model
            args: Tool input object
            session: Conversation the call belongs to

        Returns:
            JSON string result, truncated to MAX_TOOL_RESULT_CHARS
        """
        tool = self.registry.get(name)
        if tool is None:
            logger.warning("Model requested unknown tool: %s", name)
            return error_result(f"Nieznane narzędzie: {name}")

        if not isinstance(args, dict):
            args = {}

        ctx = ToolContext(store=self.store, session=session, audit=self.audit, saos=self.saos)
        try:
            payload = await tool.execute(ctx, args)
        except ToolError as e:
            return error_result(str(e))
        except Exception:
            logger.exception("Tool execution error in %s", name)
            return error_result(
                f"Wewnętrzny błąd narzędzia {name}. Spróbuj ponownie lub użyj innego podejścia."
            )

        result = payload if isinstance(payload, str) else to_json(payload)
        return truncate_result(result)
