"""Privacy protection for client data.

Decides per message whether content may reach the cloud model, replaces
personal data with reversible placeholders for cloud calls, and keeps an
audit trail of every decision.

Components:

- :func:`classify` - Privacy classifier producing a :class:`PrivacyDecision`
- :class:`PiiDetector` - Detects Polish personal data and sensitive terms
- :class:`Anonymizer` - Per-request reversible placeholder mapping
- :class:`PrivacyAuditLogger` - Audit sink with optional SQLite persistence
"""

from .anonymizer import Anonymizer, scrub_placeholders
from .audit import AuditSink, PrivacyAuditLogger, PrivacyAuditStore
from .classifier import classify, effective_mode
from .detector import PiiDetector, is_valid_pesel
from .models import (
    AuditAction,
    AuditEntry,
    Decision,
    DecisionReason,
    DetectionResult,
    PiiMatch,
    PiiType,
    PrivacyDecision,
    PrivacyMode,
)

__all__ = [
    "Anonymizer",
    "AuditAction",
    "AuditEntry",
    "AuditSink",
    "Decision",
    "DecisionReason",
    "DetectionResult",
    "PiiDetector",
    "PiiMatch",
    "PiiType",
    "PrivacyAuditLogger",
    "PrivacyAuditStore",
    "PrivacyDecision",
    "PrivacyMode",
    "classify",
    "effective_mode",
    "is_valid_pesel",
    "scrub_placeholders",
]
