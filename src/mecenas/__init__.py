"""Mecenas - privacy-aware legal assistant for Polish law firms.

Mecenas routes every chat message either to a locally hosted model (Ollama)
or to a cloud model (Anthropic) depending on whether the message or its
conversation context carries personal data, and keeps an audit trail of
every such decision.

Key modules:

- :mod:`mecenas.privacy` - PII detection, anonymization, privacy classifier, audit trail
- :mod:`mecenas.llm` - Ollama and Anthropic clients, availability probe
- :mod:`mecenas.agent` - Orchestrator, provider adapters, query-complexity router
- :mod:`mecenas.tools` - Legal practice tools (clients, cases, deadlines, documents, calculators)
- :mod:`mecenas.store` - Case store protocol and in-memory implementation
- :mod:`mecenas.reminders` - Deadline reminder scheduler
"""

__version__ = "0.1.0"
