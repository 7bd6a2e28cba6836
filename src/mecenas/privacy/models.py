"""Data models for the privacy routing system."""

import time
from dataclasses import dataclass, field
from enum import StrEnum


class PrivacyMode(StrEnum):
    """How aggressively personal data is protected."""

    AUTO = "auto"  # Protect only when PII is detected
    STRICT = "strict"  # Always local
    OFF = "off"  # No protection

    @classmethod
    def parse(cls, value: object) -> "PrivacyMode | None":
        """Return the mode for a raw metadata value, or None if unrecognized."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                return None
        return None


class Decision(StrEnum):
    """Where a message may be processed."""

    LOCAL = "local"
    CLOUD_ANONYMIZED = "cloud_anonymized"
    REFUSE = "refuse"


class DecisionReason(StrEnum):
    """Why the classifier reached its decision."""

    PRIVACY_OFF = "privacy_off"
    CASE_STRICT_MODE = "case_strict_mode"
    STRICT_MODE = "strict_mode"
    PII_DETECTED = "pii_detected"
    NO_PII = "no_pii"

    @property
    def is_sensitive(self) -> bool:
        """True for reasons that require local processing."""
        return self in (
            DecisionReason.CASE_STRICT_MODE,
            DecisionReason.STRICT_MODE,
            DecisionReason.PII_DETECTED,
        )


@dataclass(frozen=True)
class PrivacyDecision:
    """Outcome of classifying one inbound message. Never persisted."""

    decision: Decision
    reason: DecisionReason


class PiiType(StrEnum):
    """Kinds of personal data the detector recognizes."""

    PESEL = "pesel"
    NIP = "nip"
    REGON = "regon"
    PHONE = "phone"
    EMAIL = "email"
    POSTAL_CODE = "postal_code"
    CASE_SIGNATURE = "case_signature"
    PERSON_NAME = "person_name"
    ADDRESS = "address"


@dataclass(frozen=True)
class PiiMatch:
    """A detected PII span."""

    type: PiiType
    value: str
    index: int

    @property
    def end(self) -> int:
        return self.index + len(self.value)


@dataclass
class DetectionResult:
    """Result of scanning text for personal data."""

    matches: list[PiiMatch] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)

    @property
    def has_pii(self) -> bool:
        return bool(self.matches)

    @property
    def has_sensitive_keywords(self) -> bool:
        return bool(self.keywords)

    @property
    def is_sensitive(self) -> bool:
        return self.has_pii or self.has_sensitive_keywords

    @property
    def pii_types(self) -> list[str]:
        """Distinct PII types in first-seen order."""
        return list(dict.fromkeys(m.type.value for m in self.matches))


class AuditAction(StrEnum):
    """Privacy audit event kinds."""

    ROUTE_LOCAL = "route_local"
    ROUTE_CLOUD = "route_cloud"
    ROUTE_CLOUD_ANON = "route_cloud_anon"
    ROUTE_REFUSE = "route_refuse"
    CONSENT_RECORD = "consent_record"
    CONSENT_CHECK = "consent_check"
    CONSENT_REVOKE = "consent_revoke"
    MODE_CHANGE = "mode_change"


@dataclass
class AuditEntry:
    """One privacy audit event. Carries statistics, never PII values."""

    action: AuditAction
    session_key: str
    user_id: str | None = None
    case_id: str | None = None
    reason: str | None = None
    pii_match_count: int = 0
    pii_types: list[str] = field(default_factory=list)
    anonymization_count: int = 0
    privacy_mode: str | None = None
    provider: str | None = None
    timestamp: float = field(default_factory=time.time)
