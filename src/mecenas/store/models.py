"""Domain records for clients, cases, deadlines, documents and sessions."""

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any


def utcnow() -> datetime:
    return datetime.now(UTC)


def to_json_dict(record: Any) -> dict[str, Any]:
    """Convert a record dataclass to a JSON-friendly dict (camelCase keys, ISO dates)."""

    def convert(value: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, list):
            return [convert(v) for v in value]
        return value

    out: dict[str, Any] = {}
    for key, value in asdict(record).items():
        head, *rest = key.split("_")
        out[head + "".join(part.title() for part in rest)] = convert(value)
    return out


@dataclass
class Client:
    id: str
    name: str
    type: str  # osoba_fizyczna | osoba_prawna
    pesel: str | None = None
    nip: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class LegalCase:
    id: str
    client_id: str
    title: str
    law_area: str
    status: str = "nowa"
    sygnatura: str | None = None
    court: str | None = None
    description: str | None = None
    opposing_party: str | None = None
    value_of_dispute: float | None = None
    notes: str | None = None
    privacy_mode: str | None = None  # auto | strict | off overrides the session mode
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


@dataclass
class Deadline:
    id: str
    case_id: str
    title: str
    date: datetime
    type: str  # procesowy | ustawowy | umowny | wewnetrzny
    completed: bool = False
    reminder_days_before: int = 3
    notes: str | None = None
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class Document:
    id: str
    type: str
    title: str
    content: str
    case_id: str | None = None
    status: str = "szkic"  # szkic | do_sprawdzenia | zatwierdzony | zlozony
    version: int = 1
    parent_id: str | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


@dataclass
class TimeEntry:
    id: str
    case_id: str
    description: str
    duration_minutes: int
    date: datetime
    hourly_rate: float | None = None
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class Article:
    code_name: str  # KC, KPC, KK, ...
    article_number: str
    content: str
    chapter: str | None = None
    section: str | None = None


@dataclass
class AiConsent:
    case_id: str
    granted_by: str
    scope: str  # local_only | cloud_anonymized | full
    notes: str | None = None
    granted_at: datetime = field(default_factory=utcnow)


@dataclass
class ConversationTurn:
    role: str  # user | assistant
    content: str
    timestamp: datetime = field(default_factory=utcnow)


@dataclass
class Session:
    """A conversation. The orchestrator only mutates ``metadata``."""

    key: str
    user_id: str
    channel: str = "cli"
    messages: list[ConversationTurn] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def active_case_id(self) -> str | None:
        value = self.metadata.get("activeCaseId")
        return value if isinstance(value, str) and value else None

    def add_turn(self, role: str, content: str) -> None:
        self.messages.append(ConversationTurn(role=role, content=content))
