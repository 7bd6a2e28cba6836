"""Case store protocol consumed by the orchestrator, tools and reminders."""

from datetime import datetime
from typing import Any, Protocol

from mecenas.store.models import (
    AiConsent,
    Article,
    Client,
    Deadline,
    Document,
    LegalCase,
    TimeEntry,
)


class CaseStore(Protocol):
    """Persistence for the legal practice data.

    The orchestrator core only reads (``get_case``, ``get_client``,
    ``list_deadlines``); tools use the full surface.
    """

    # Clients
    def create_client(self, **fields: Any) -> Client: ...
    def get_client(self, client_id: str) -> Client | None: ...
    def list_clients(self) -> list[Client]: ...
    def search_clients(self, query: str) -> list[Client]: ...
    def update_client(self, client_id: str, **fields: Any) -> Client | None: ...
    def delete_client(self, client_id: str) -> bool: ...

    # Cases
    def create_case(self, **fields: Any) -> LegalCase: ...
    def get_case(self, case_id: str) -> LegalCase | None: ...
    def list_cases(
        self,
        client_id: str | None = None,
        status: str | None = None,
        law_area: str | None = None,
    ) -> list[LegalCase]: ...
    def search_cases(self, query: str) -> list[LegalCase]: ...
    def update_case(self, case_id: str, **fields: Any) -> LegalCase | None: ...
    def delete_case(self, case_id: str) -> bool: ...

    # Deadlines
    def create_deadline(self, **fields: Any) -> Deadline: ...
    def get_deadline(self, deadline_id: str) -> Deadline | None: ...
    def list_deadlines(
        self,
        case_id: str | None = None,
        upcoming: bool | None = None,
        completed: bool | None = None,
        now: datetime | None = None,
    ) -> list[Deadline]: ...
    def update_deadline(self, deadline_id: str, **fields: Any) -> Deadline | None: ...
    def complete_deadline(self, deadline_id: str) -> Deadline | None: ...
    def delete_deadline(self, deadline_id: str) -> bool: ...

    # Documents
    def create_document(self, **fields: Any) -> Document: ...
    def get_document(self, document_id: str) -> Document | None: ...
    def list_documents(
        self,
        case_id: str | None = None,
        status: str | None = None,
        type: str | None = None,
    ) -> list[Document]: ...
    def update_document(self, document_id: str, **fields: Any) -> Document | None: ...
    def get_document_versions(self, document_id: str) -> list[Document]: ...
    def delete_document(self, document_id: str) -> bool: ...

    # Time tracking
    def create_time_entry(self, **fields: Any) -> TimeEntry: ...
    def list_time_entries(self, case_id: str) -> list[TimeEntry]: ...

    # Law texts
    def get_article(self, code_name: str, article_number: str) -> Article | None: ...
    def search_articles(self, query: str, code_name: str | None = None, limit: int = 10) -> list[Article]: ...

    # AI consent
    def record_ai_consent(self, case_id: str, granted_by: str, scope: str, notes: str | None = None) -> AiConsent: ...
    def get_ai_consent(self, case_id: str) -> AiConsent | None: ...
    def revoke_ai_consent(self, case_id: str) -> bool: ...
