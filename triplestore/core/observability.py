"""
ObservabilityLogger - Session-based write log for a triple store.

Records every mutation (mapping changes, pushes, removals, clears) and
CLI-level errors as structured rows in SQLite, grouped by session.
"""

import json
import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class LogEntry:
    """A log entry from the observability database."""

    id: int
    ts: str
    session: str
    phase: str
    data: Dict[str, Any] = field(default_factory=dict)


class ObservabilityLogger:
    """Phase-based write log.

    Phases:
    - mapping: A prefix was bound
    - push: A triple was stored
    - remove: A property, subject, or property across all subjects was removed
    - clear: The whole store was emptied
    - error: A failed operation, as reported by the caller
    """

    PHASES = [
        "mapping",
        "push",
        "remove",
        "clear",
        "error",
    ]

    def __init__(self, db_path: Path):
        """Initialize logger with database path.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()
        self.session_id = self._new_session()

    def _init_db(self) -> None:
        """Create tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    ts TEXT NOT NULL DEFAULT (datetime('now')),
                    session TEXT NOT NULL,
                    phase TEXT NOT NULL,
                    data JSON NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_session ON logs(session);
                CREATE INDEX IF NOT EXISTS idx_phase ON logs(phase);

                CREATE VIEW IF NOT EXISTS writes AS
                SELECT id, ts, session, phase,
                       json_extract(data, '$.subject') as subject,
                       json_extract(data, '$.property') as property,
                       json_extract(data, '$.object') as object
                FROM logs WHERE phase IN ('push', 'remove', 'clear');

                CREATE VIEW IF NOT EXISTS errors AS
                SELECT id, ts, session,
                       json_extract(data, '$.error_type') as error_type,
                       json_extract(data, '$.subject') as subject,
                       data
                FROM logs WHERE phase = 'error';
            """)

    def _new_session(self) -> str:
        return f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:6]}"

    def new_session(self) -> str:
        """Start a new session and return its ID."""
        self.session_id = self._new_session()
        return self.session_id

    def log(self, phase: str, data: Dict[str, Any]) -> None:
        """Log a phase with structured data.

        Args:
            phase: One of PHASES
            data: Structured data for the log entry

        Raises:
            ValueError: If phase is not recognised
        """
        if phase not in self.PHASES:
            raise ValueError(f"Invalid phase: {phase}. Must be one of {self.PHASES}")

        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO logs (session, phase, data)
                VALUES (?, ?, ?)
                """,
                (self.session_id, phase, json.dumps(data, default=str)),
            )

    # Convenience methods

    def log_mapping(self, prefix: str, iri: str) -> None:
        self.log("mapping", {"prefix": prefix, "iri": iri})

    def log_push(self, subject: str, property: str, object: str) -> None:
        self.log("push", {"subject": subject, "property": property, "object": object})

    def log_remove(
        self,
        subject: Optional[str],
        property: Optional[str],
        scope: str,
        affected: int = 1,
    ) -> None:
        """Log a removal.

        Args:
            subject: Subject removed from (None for a sweep)
            property: Property removed (None when a whole subject went)
            scope: "property", "subject", or "property_sweep"
            affected: Number of records touched
        """
        self.log(
            "remove",
            {
                "subject": subject,
                "property": property,
                "scope": scope,
                "affected": affected,
            },
        )

    def log_clear(self, removed: int) -> None:
        self.log("clear", {"removed": removed})

    def log_error(
        self,
        error_type: str,
        subject: Optional[str] = None,
        details: Optional[Dict] = None,
    ) -> None:
        """Log a failed operation.

        Args:
            error_type: Exception class name or short error label
            subject: Optional subject involved
            details: Optional additional details
        """
        data: Dict[str, Any] = {
            "error_type": error_type,
        }
        if subject:
            data["subject"] = subject
        if details:
            data["details"] = details

        self.log("error", data)

    # Query methods

    def _fetch(self, query: str, params: tuple) -> List[LogEntry]:
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(query, params).fetchall()

            return [
                LogEntry(
                    id=row["id"],
                    ts=row["ts"],
                    session=row["session"],
                    phase=row["phase"],
                    data=json.loads(row["data"]),
                )
                for row in rows
            ]

    def get_session(self, session_id: Optional[str] = None) -> List[LogEntry]:
        """Get all logs for a session (defaults to the current one)."""
        session_id = session_id or self.session_id
        return self._fetch(
            "SELECT * FROM logs WHERE session = ? ORDER BY id",
            (session_id,),
        )

    def get_errors(self, limit: int = 100) -> List[LogEntry]:
        """Get the most recent error logs across all sessions."""
        return self._fetch(
            """
            SELECT * FROM logs
            WHERE phase = 'error'
            ORDER BY id DESC LIMIT ?
            """,
            (limit,),
        )

    def get_session_summary(self, session_id: Optional[str] = None) -> Dict[str, Any]:
        """Get summary statistics for a session.

        Args:
            session_id: Session ID (defaults to current session)

        Returns:
            Dictionary with session_id, phase_counts, error_count, total_logs
        """
        session_id = session_id or self.session_id

        with sqlite3.connect(self.db_path) as conn:
            phase_counts = {}
            for row in conn.execute(
                """
                SELECT phase, COUNT(*) as count
                FROM logs WHERE session = ?
                GROUP BY phase
                """,
                (session_id,),
            ):
                phase_counts[row[0]] = row[1]

        return {
            "session_id": session_id,
            "phase_counts": phase_counts,
            "error_count": phase_counts.get("error", 0),
            "total_logs": sum(phase_counts.values()),
        }

    def latest_session(self) -> Optional[str]:
        """Return the session ID of the most recent log row, if any."""
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute("SELECT session FROM logs ORDER BY id DESC LIMIT 1").fetchone()
        return row[0] if row else None
