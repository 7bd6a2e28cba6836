"""Execution context handed to every tool call."""

from dataclasses import dataclass, field

from mecenas.config.schema import SaosConfig
from mecenas.privacy.audit import AuditSink
from mecenas.privacy.models import AuditAction, AuditEntry
from mecenas.store.base import CaseStore
from mecenas.store.models import Session


@dataclass
class ToolContext:
    """Collaborators available to a tool for one call."""

    store: CaseStore
    session: Session
    audit: AuditSink
    saos: SaosConfig = field(default_factory=SaosConfig)

    def audit_event(
        self,
        action: AuditAction,
        case_id: str | None = None,
        reason: str | None = None,
        privacy_mode: str | None = None,
    ) -> None:
        """Record a privacy audit event attributed to the current session."""
        self.audit.record(
            AuditEntry(
                action=action,
                session_key=self.session.key,
                user_id=self.session.user_id,
                case_id=case_id,
                reason=reason,
                privacy_mode=privacy_mode or self.session.metadata.get("privacyMode"),
            )
        )
