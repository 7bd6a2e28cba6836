"""Privacy audit trail for routing and consent decisions.

Every routing decision, consent change and privacy-mode change is recorded
as an :class:`~mecenas.privacy.models.AuditEntry`. Entries carry counts and
type names only, never the detected values themselves.

Schema:
- privacy_audit_log: one row per audit entry
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Protocol

from .models import AuditAction, AuditEntry

logger = logging.getLogger(__name__)

MAX_QUERY_LIMIT = 1000


class AuditSink(Protocol):
    """Fire-and-forget receiver of audit entries."""

    def record(self, entry: AuditEntry) -> None: ...


class PrivacyAuditStore:
    """SQLite-backed persistent store for privacy audit entries."""

    def __init__(self, db_path: str | Path = "~/.mecenas/privacy_audit.db") -> None:
        """Initialize the audit store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path).expanduser()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize_schema()

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=30.0)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        return conn

    def _initialize_schema(self) -> None:
        conn = self._get_connection()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS privacy_audit_log (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp REAL NOT NULL,
                    action TEXT NOT NULL,
                    session_key TEXT NOT NULL,
                    user_id TEXT,
                    case_id TEXT,
                    reason TEXT,
                    pii_match_count INTEGER NOT NULL DEFAULT 0,
                    pii_types TEXT,
                    anonymization_count INTEGER NOT NULL DEFAULT 0,
                    privacy_mode TEXT,
                    provider TEXT
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_privacy_audit_timestamp "
                "ON privacy_audit_log(timestamp)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_privacy_audit_session "
                "ON privacy_audit_log(session_key)"
            )
            conn.commit()
        finally:
            conn.close()

    def log_event(self, entry: AuditEntry) -> None:
        """Persist one audit entry.

        Args:
            entry: Entry to store
        """
        conn = self._get_connection()
        try:
            conn.execute(
                """
                INSERT INTO privacy_audit_log (
                    timestamp, action, session_key, user_id, case_id, reason,
                    pii_match_count, pii_types, anonymization_count,
                    privacy_mode, provider
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.timestamp,
                    str(entry.action),
                    entry.session_key,
                    entry.user_id,
                    entry.case_id,
                    entry.reason,
                    entry.pii_match_count,
                    json.dumps(entry.pii_types),
                    entry.anonymization_count,
                    entry.privacy_mode,
                    entry.provider,
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def query(
        self,
        action: AuditAction | str | None = None,
        session_key: str | None = None,
        user_id: str | None = None,
        since: float | None = None,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        """Query audit entries, newest first.

        Args:
            action: Filter by action
            session_key: Filter by session
            user_id: Filter by user
            since: Only entries with a timestamp at or after this epoch time
            limit: Maximum number of rows (clamped to 1..1000)

        Returns:
            List of entry dictionaries
        """
        query = "SELECT * FROM privacy_audit_log WHERE 1=1"
        params: list[Any] = []

        if action is not None:
            query += " AND action = ?"
            params.append(str(action))
        if session_key is not None:
            query += " AND session_key = ?"
            params.append(session_key)
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)
        if since is not None:
            query += " AND timestamp >= ?"
            params.append(since)

        query += " ORDER BY timestamp DESC, id DESC LIMIT ?"
        params.append(max(1, min(limit, MAX_QUERY_LIMIT)))

        conn = self._get_connection()
        try:
            cursor = conn.execute(query, params)
            rows = []
            for row in cursor.fetchall():
                record = dict(row)
                record["pii_types"] = json.loads(record["pii_types"] or "[]")
                rows.append(record)
            return rows
        finally:
            conn.close()


class PrivacyAuditLogger:
    """Default audit sink: logs every entry and optionally persists it."""

    def __init__(self, store: PrivacyAuditStore | None = None) -> None:
        """Initialize privacy audit logger.

        Args:
            store: Persistent store (entries are only logged if None)
        """
        self._store = store

    def record(self, entry: AuditEntry) -> None:
        """Record an audit entry. Never raises.

        Args:
            entry: The entry to record
        """
        logger.info(
            "Privacy audit: action=%s session=%s case=%s reason=%s pii=%d types=%s mode=%s provider=%s",
            entry.action,
            entry.session_key,
            entry.case_id,
            entry.reason,
            entry.pii_match_count,
            ",".join(entry.pii_types),
            entry.privacy_mode,
            entry.provider,
        )
        if self._store is None:
            return

        try:
            self._store.log_event(entry)
        except (sqlite3.Error, OSError) as e:
            logger.error("Failed to persist privacy audit entry %s: %s", entry.action, e)
