"""In-memory case store.

Backs the CLI chat session and the test-suite. Every method mirrors the
:class:`~mecenas.store.base.CaseStore` protocol.
"""

import copy
import logging
import uuid
from dataclasses import fields, replace
from datetime import datetime
from typing import Any, TypeVar

from mecenas.store.models import (
    AiConsent,
    Article,
    Client,
    Deadline,
    Document,
    LegalCase,
    TimeEntry,
    utcnow,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def _apply_updates(record: T, updates: dict[str, Any]) -> T:
    """Return a copy of ``record`` with known, non-None fields replaced."""
    allowed = {f.name for f in fields(record)} - {"id", "created_at"}  # type: ignore[arg-type]
    changes = {k: v for k, v in updates.items() if k in allowed and v is not None}
    return replace(record, **changes)  # type: ignore[type-var]


def _contains(haystack: str | None, needle: str) -> bool:
    return bool(haystack) and needle in haystack.lower()  # type: ignore[union-attr]


class InMemoryCaseStore:
    """Dictionary-backed implementation of the CaseStore protocol."""

    def __init__(self, articles: list[Article] | None = None) -> None:
        self._clients: dict[str, Client] = {}
        self._cases: dict[str, LegalCase] = {}
        self._deadlines: dict[str, Deadline] = {}
        self._documents: dict[str, Document] = {}
        self._document_history: dict[str, list[Document]] = {}
        self._time_entries: dict[str, TimeEntry] = {}
        self._articles: dict[tuple[str, str], Article] = {}
        self._consents: dict[str, AiConsent] = {}
        for article in articles or []:
            self.upsert_article(article)

    # ===== CLIENTS =====

    def create_client(self, **fields: Any) -> Client:
        client = Client(id=_new_id(), **fields)
        self._clients[client.id] = client
        return client

    def get_client(self, client_id: str) -> Client | None:
        return self._clients.get(client_id)

    def list_clients(self) -> list[Client]:
        return sorted(self._clients.values(), key=lambda c: c.name)

    def search_clients(self, query: str) -> list[Client]:
        q = query.lower()
        return [
            c
            for c in self.list_clients()
            if any(_contains(v, q) for v in (c.name, c.pesel, c.nip, c.email, c.phone))
        ]

    def update_client(self, client_id: str, **fields: Any) -> Client | None:
        existing = self._clients.get(client_id)
        if existing is None:
            return None
        updated = _apply_updates(existing, fields)
        self._clients[client_id] = updated
        return updated

    def delete_client(self, client_id: str) -> bool:
        if self._clients.pop(client_id, None) is None:
            return False
        for case in [c for c in self._cases.values() if c.client_id == client_id]:
            self.delete_case(case.id)
        return True

    # ===== CASES =====

    def create_case(self, **fields: Any) -> LegalCase:
        legal_case = LegalCase(id=_new_id(), **fields)
        self._cases[legal_case.id] = legal_case
        return legal_case

    def get_case(self, case_id: str) -> LegalCase | None:
        return self._cases.get(case_id)

    def list_cases(
        self,
        client_id: str | None = None,
        status: str | None = None,
        law_area: str | None = None,
    ) -> list[LegalCase]:
        cases = [
            c
            for c in self._cases.values()
            if (client_id is None or c.client_id == client_id)
            and (status is None or c.status == status)
            and (law_area is None or c.law_area == law_area)
        ]
        return sorted(cases, key=lambda c: c.updated_at, reverse=True)

    def search_cases(self, query: str) -> list[LegalCase]:
        q = query.lower()
        return [
            c
            for c in self.list_cases()
            if any(_contains(v, q) for v in (c.title, c.description, c.opposing_party, c.sygnatura))
        ]

    def update_case(self, case_id: str, **fields: Any) -> LegalCase | None:
        existing = self._cases.get(case_id)
        if existing is None:
            return None
        updated = _apply_updates(existing, {**fields, "updated_at": utcnow()})
        self._cases[case_id] = updated
        return updated

    def delete_case(self, case_id: str) -> bool:
        if self._cases.pop(case_id, None) is None:
            return False
        self._deadlines = {k: d for k, d in self._deadlines.items() if d.case_id != case_id}
        self._time_entries = {k: t for k, t in self._time_entries.items() if t.case_id != case_id}
        for doc_id in [k for k, d in self._documents.items() if d.case_id == case_id]:
            self.delete_document(doc_id)
        self._consents.pop(case_id, None)
        logger.debug("Deleted case %s with its deadlines, documents and time entries", case_id)
        return True

    # ===== DEADLINES =====

    def create_deadline(self, **fields: Any) -> Deadline:
        deadline = Deadline(id=_new_id(), **fields)
        self._deadlines[deadline.id] = deadline
        return deadline

    def get_deadline(self, deadline_id: str) -> Deadline | None:
        return self._deadlines.get(deadline_id)

    def list_deadlines(
        self,
        case_id: str | None = None,
        upcoming: bool | None = None,
        completed: bool | None = None,
        now: datetime | None = None,
    ) -> list[Deadline]:
        now = now or utcnow()
        deadlines = []
        for d in self._deadlines.values():
            if case_id is not None and d.case_id != case_id:
                continue
            if upcoming and (d.date < now or d.completed):
                continue
            if completed is not None and d.completed != completed:
                continue
            deadlines.append(d)
        return sorted(deadlines, key=lambda d: d.date)

    def update_deadline(self, deadline_id: str, **fields: Any) -> Deadline | None:
        existing = self._deadlines.get(deadline_id)
        if existing is None:
            return None
        updated = _apply_updates(existing, fields)
        self._deadlines[deadline_id] = updated
        return updated

    def complete_deadline(self, deadline_id: str) -> Deadline | None:
        return self.update_deadline(deadline_id, completed=True)

    def delete_deadline(self, deadline_id: str) -> bool:
        return self._deadlines.pop(deadline_id, None) is not None

    # ===== DOCUMENTS =====

    def create_document(self, **fields: Any) -> Document:
        document = Document(id=_new_id(), **fields)
        self._documents[document.id] = document
        return document

    def get_document(self, document_id: str) -> Document | None:
        return self._documents.get(document_id)

    def list_documents(
        self,
        case_id: str | None = None,
        status: str | None = None,
        type: str | None = None,
    ) -> list[Document]:
        docs = [
            d
            for d in self._documents.values()
            if (case_id is None or d.case_id == case_id)
            and (status is None or d.status == status)
            and (type is None or d.type == type)
        ]
        return sorted(docs, key=lambda d: d.created_at)

    def update_document(self, document_id: str, **fields: Any) -> Document | None:
        """Update a document; a content change archives the previous version."""
        existing = self._documents.get(document_id)
        if existing is None:
            return None

        changes = dict(fields)
        if "content" in changes and changes["content"] is not None and changes["content"] != existing.content:
            self._document_history.setdefault(document_id, []).append(copy.copy(existing))
            changes["version"] = existing.version + 1
        changes["updated_at"] = utcnow()

        updated = _apply_updates(existing, changes)
        self._documents[document_id] = updated
        return updated

    def get_document_versions(self, document_id: str) -> list[Document]:
        current = self._documents.get(document_id)
        if current is None:
            return []
        return [*self._document_history.get(document_id, []), current]

    def delete_document(self, document_id: str) -> bool:
        self._document_history.pop(document_id, None)
        return self._documents.pop(document_id, None) is not None

    # ===== TIME ENTRIES =====

    def create_time_entry(self, **fields: Any) -> TimeEntry:
        entry = TimeEntry(id=_new_id(), **fields)
        self._time_entries[entry.id] = entry
        return entry

    def list_time_entries(self, case_id: str) -> list[TimeEntry]:
        entries = [t for t in self._time_entries.values() if t.case_id == case_id]
        return sorted(entries, key=lambda t: t.date)

    # ===== LEGAL KNOWLEDGE =====

    def upsert_article(self, article: Article) -> Article:
        self._articles[(article.code_name.upper(), article.article_number)] = article
        return article

    def get_article(self, code_name: str, article_number: str) -> Article | None:
        return self._articles.get((code_name.upper(), article_number))

    def search_articles(self, query: str, code_name: str | None = None, limit: int = 10) -> list[Article]:
        q = query.lower()
        results = []
        for (code, number), article in self._articles.items():
            if code_name and code != code_name.upper():
                continue
            if q in article.content.lower() or q == number.lower():
                results.append(article)
            if len(results) >= limit:
                break
        return results

    # ===== AI CONSENT =====

    def record_ai_consent(self, case_id: str, granted_by: str, scope: str, notes: str | None = None) -> AiConsent:
        consent = AiConsent(case_id=case_id, granted_by=granted_by, scope=scope, notes=notes)
        self._consents[case_id] = consent
        return consent

    def get_ai_consent(self, case_id: str) -> AiConsent | None:
        return self._consents.get(case_id)

    def revoke_ai_consent(self, case_id: str) -> bool:
        return self._consents.pop(case_id, None) is not None
