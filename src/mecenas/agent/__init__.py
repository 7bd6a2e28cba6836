"""Privacy-aware agent orchestration.

The orchestrator classifies every inbound message, picks the provider the
privacy decision allows (local Ollama or anonymized Anthropic), and runs the
tool-calling loop through the matching provider adapter.

Usage::

    from mecenas.agent import create_orchestrator
    from mecenas.config.loader import load_config

    orchestrator = create_orchestrator(load_config())
    session.add_turn("user", text)
    reply = await orchestrator.handle_message(text, session)
"""

from mecenas.agent.adapters import (
    LIMIT_MESSAGE,
    CloudAdapter,
    LocalAdapter,
    ProviderAdapter,
    ToolExecutor,
    TurnResult,
)
from mecenas.agent.complexity import QueryComplexityRouter
from mecenas.agent.orchestrator import (
    CloudPermit,
    Orchestrator,
    PrivacyViolationError,
    create_orchestrator,
)

__all__ = [
    "LIMIT_MESSAGE",
    "CloudAdapter",
    "CloudPermit",
    "LocalAdapter",
    "Orchestrator",
    "PrivacyViolationError",
    "ProviderAdapter",
    "QueryComplexityRouter",
    "ToolExecutor",
    "TurnResult",
    "create_orchestrator",
]
