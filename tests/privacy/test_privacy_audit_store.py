"""Tests for the privacy audit logger and its SQLite store."""

import sqlite3
import time
from unittest.mock import MagicMock

import pytest

from mecenas.privacy import PrivacyAuditLogger, PrivacyAuditStore
from mecenas.privacy.models import AuditAction, AuditEntry


def _entry(action=AuditAction.ROUTE_LOCAL, session_key="s1", **kwargs):
    return AuditEntry(action=action, session_key=session_key, **kwargs)


@pytest.fixture
def audit_store(tmp_path):
    return PrivacyAuditStore(tmp_path / "audit" / "privacy_audit.db")


class TestPrivacyAuditStore:
    def test_creates_parent_directory(self, tmp_path):
        PrivacyAuditStore(tmp_path / "nested" / "dir" / "audit.db")
        assert (tmp_path / "nested" / "dir" / "audit.db").exists()

    def test_log_and_query(self, audit_store):
        audit_store.log_event(
            _entry(
                user_id="u1",
                case_id="c1",
                reason="pii_detected",
                pii_match_count=2,
                pii_types=["pesel", "email"],
                privacy_mode="auto",
                provider="ollama",
            )
        )

        rows = audit_store.query()

        assert len(rows) == 1
        row = rows[0]
        assert row["action"] == "route_local"
        assert row["session_key"] == "s1"
        assert row["case_id"] == "c1"
        assert row["pii_match_count"] == 2
        assert row["pii_types"] == ["pesel", "email"]
        assert row["provider"] == "ollama"

    def test_filters(self, audit_store):
        audit_store.log_event(_entry(AuditAction.ROUTE_LOCAL, "s1", user_id="u1"))
        audit_store.log_event(_entry(AuditAction.ROUTE_REFUSE, "s1", user_id="u1"))
        audit_store.log_event(_entry(AuditAction.ROUTE_LOCAL, "s2", user_id="u2"))

        assert len(audit_store.query(action=AuditAction.ROUTE_LOCAL)) == 2
        assert len(audit_store.query(action="route_refuse")) == 1
        assert len(audit_store.query(session_key="s2")) == 1
        assert len(audit_store.query(user_id="u1")) == 2

    def test_since_filter(self, audit_store):
        now = time.time()
        audit_store.log_event(_entry(timestamp=now - 7200))
        audit_store.log_event(_entry(timestamp=now))
        assert len(audit_store.query(since=now - 3600)) == 1

    def test_newest_first_and_limit(self, audit_store):
        now = time.time()
        for i in range(5):
            audit_store.log_event(_entry(reason=f"r{i}", timestamp=now + i))

        rows = audit_store.query(limit=2)
        assert [r["reason"] for r in rows] == ["r4", "r3"]

    def test_limit_is_clamped(self, audit_store):
        audit_store.log_event(_entry())
        assert len(audit_store.query(limit=0)) == 1

    def test_no_pii_values_stored(self, audit_store):
        audit_store.log_event(_entry(pii_types=["pesel"], pii_match_count=1))
        conn = sqlite3.connect(audit_store.db_path)
        try:
            dump = "\n".join(conn.iterdump())
        finally:
            conn.close()
        assert "44051401359" not in dump


class TestPrivacyAuditLogger:
    def test_record_without_store(self):
        logger = PrivacyAuditLogger()
        logger.record(_entry())  # Should not raise

    def test_record_persists(self, audit_store):
        logger = PrivacyAuditLogger(audit_store)
        logger.record(_entry(AuditAction.ROUTE_CLOUD, provider="anthropic"))
        rows = audit_store.query()
        assert rows[0]["action"] == "route_cloud"

    def test_store_failure_is_swallowed(self):
        store = MagicMock()
        store.log_event.side_effect = sqlite3.OperationalError("disk I/O error")
        logger = PrivacyAuditLogger(store)

        logger.record(_entry())  # Should not raise

        store.log_event.assert_called_once()
