"""Case store: clients, cases, deadlines, documents and law texts."""

from .base import CaseStore
from .memory import InMemoryCaseStore
from .models import (
    AiConsent,
    Article,
    Client,
    ConversationTurn,
    Deadline,
    Document,
    LegalCase,
    Session,
    TimeEntry,
)

__all__ = [
    "AiConsent",
    "Article",
    "CaseStore",
    "Client",
    "ConversationTurn",
    "Deadline",
    "Document",
    "InMemoryCaseStore",
    "LegalCase",
    "Session",
    "TimeEntry",
]
