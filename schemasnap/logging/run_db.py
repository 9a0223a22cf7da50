"""SQLite storage for the schemasnap run log."""

import json
import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


RUNS_SCHEMA = """
CREATE TABLE IF NOT EXISTS runs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    run_id TEXT UNIQUE NOT NULL,
    timestamp TEXT NOT NULL,
    command TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'started',
    duration_ms INTEGER,

    host TEXT,
    database_name TEXT,
    kinds TEXT,
    include_filter TEXT,
    exclude_filter TEXT,
    arguments TEXT,

    tables_count INTEGER,
    objects_count INTEGER,
    rows_count INTEGER,

    error_code TEXT,
    error_type TEXT,
    error_message TEXT,
    error_traceback TEXT,

    environment TEXT
);

CREATE INDEX IF NOT EXISTS idx_runs_timestamp ON runs(timestamp);
CREATE INDEX IF NOT EXISTS idx_runs_command_status ON runs(command, status);
"""

# Columns that may be changed after a run has been inserted
_UPDATABLE = frozenset({
    "status", "duration_ms", "tables_count", "objects_count", "rows_count",
    "error_code", "error_type", "error_message", "error_traceback",
})


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _cutoff(**delta) -> str:
    return (_utc_now() - timedelta(**delta)).isoformat()


def _as_json(value) -> Optional[str]:
    return json.dumps(value, default=str) if value else None


def get_default_run_db_path() -> str:
    """Default run log location, ~/.schemasnap/runs.db."""
    app_dir = Path.home() / ".schemasnap"
    app_dir.mkdir(exist_ok=True)
    return str(app_dir / "runs.db")


class RunDatabase:
    """Append-mostly table of CLI runs in a local SQLite file.

    The connection is opened on first use in autocommit mode and the
    schema is created on demand, so a fresh path needs no setup.
    """

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or get_default_run_db_path()
        self._conn: Optional[sqlite3.Connection] = None
        self._ready = False

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, isolation_level=None, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def initialize(self) -> None:
        """Create the runs table if it does not exist yet."""
        if self._ready:
            return
        self.conn.executescript(RUNS_SCHEMA)
        self._ready = True
        logger.debug("Run log ready at %s", self.db_path)

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self._ready = False

    def insert_run(
        self,
        run_id: str,
        command: str,
        host: Optional[str] = None,
        database_name: Optional[str] = None,
        kinds: Optional[List[str]] = None,
        include_filter: Optional[str] = None,
        exclude_filter: Optional[str] = None,
        arguments: Optional[Dict[str, Any]] = None,
        environment: Optional[Dict[str, str]] = None,
    ) -> int:
        """Record the start of a run.

        List and dict values (kinds, arguments, environment) are stored
        as JSON text.

        Returns:
            Row ID of the new entry
        """
        self.initialize()
        cursor = self.conn.execute(
            "INSERT INTO runs (run_id, timestamp, command, host, database_name, kinds,"
            " include_filter, exclude_filter, arguments, environment)"
            " VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                run_id,
                _utc_now().isoformat(),
                command,
                host,
                database_name,
                _as_json(kinds),
                include_filter,
                exclude_filter,
                _as_json(arguments),
                _as_json(environment),
            ),
        )
        return cursor.lastrowid

    def _update(self, run_id: str, **fields) -> None:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"cannot update run columns: {sorted(unknown)}")
        assignments = ", ".join(f"{name} = ?" for name in fields)
        self.initialize()
        self.conn.execute(
            f"UPDATE runs SET {assignments} WHERE run_id = ?",
            (*fields.values(), run_id),
        )

    def update_results(self, run_id: str, tables_count: int = 0, objects_count: int = 0, rows_count: int = 0) -> None:
        self._update(run_id, tables_count=tables_count, objects_count=objects_count, rows_count=rows_count)

    def update_success(self, run_id: str, duration_ms: int) -> None:
        self._update(run_id, status="success", duration_ms=duration_ms)

    def update_error(
        self,
        run_id: str,
        error_message: str,
        error_type: Optional[str] = None,
        error_code: Optional[str] = None,
        error_traceback: Optional[str] = None,
        duration_ms: Optional[int] = None,
    ) -> None:
        """Mark a run as failed.

        Args:
            run_id: Run identifier
            error_message: str() of the exception
            error_type: Exception class name
            error_code: SchemaSnapError code, when the exception carries one
            error_traceback: Formatted traceback
            duration_ms: Time until the failure
        """
        self._update(
            run_id,
            status="error",
            error_message=error_message,
            error_type=error_type,
            error_code=error_code,
            error_traceback=error_traceback,
            duration_ms=duration_ms,
        )

    def query_runs(
        self,
        command: Optional[str] = None,
        status: Optional[str] = None,
        since_hours: int = 24,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """List runs of the last ``since_hours`` hours, newest first.

        ``command`` and ``status`` narrow the result when given.
        """
        self.initialize()
        filters = {"timestamp >= ?": _cutoff(hours=since_hours)}
        if command:
            filters["command = ?"] = command
        if status:
            filters["status = ?"] = status

        rows = self.conn.execute(
            f"SELECT * FROM runs WHERE {' AND '.join(filters)}"
            " ORDER BY timestamp DESC, id DESC LIMIT ? OFFSET ?",
            (*filters.values(), limit, offset),
        ).fetchall()
        return [dict(row) for row in rows]

    def get_run_by_id(self, run_id: str) -> Optional[Dict[str, Any]]:
        self.initialize()
        row = self.conn.execute("SELECT * FROM runs WHERE run_id = ?", (run_id,)).fetchone()
        return dict(row) if row is not None else None

    def get_stats(self, since_hours: int = 24) -> Dict[str, Any]:
        """Summarize runs of the last ``since_hours`` hours.

        Returns:
            Dict with run counts per outcome, the average duration, the
            number of extracted objects and the five latest errors
        """
        self.initialize()
        since = _cutoff(hours=since_hours)

        by_status = {
            row["status"]: row["n"]
            for row in self.conn.execute(
                "SELECT status, COUNT(*) AS n FROM runs WHERE timestamp >= ? GROUP BY status",
                (since,),
            )
        }
        totals = self.conn.execute(
            "SELECT AVG(duration_ms) AS avg_ms, SUM(objects_count) AS objects"
            " FROM runs WHERE timestamp >= ?",
            (since,),
        ).fetchone()
        recent_errors = [
            dict(row)
            for row in self.conn.execute(
                "SELECT run_id, timestamp, command, error_code, error_type, error_message"
                " FROM runs WHERE timestamp >= ? AND status = 'error'"
                " ORDER BY timestamp DESC, id DESC LIMIT 5",
                (since,),
            )
        ]

        return {
            "total_runs": sum(by_status.values()),
            "success_count": by_status.get("success", 0),
            "error_count": by_status.get("error", 0),
            "avg_duration_ms": round(totals["avg_ms"] or 0, 2),
            "total_objects_extracted": totals["objects"] or 0,
            "since_hours": since_hours,
            "recent_errors": recent_errors,
        }

    def cleanup_old_runs(self, retention_days: int = 30) -> int:
        """Delete runs older than ``retention_days``. Returns the number deleted."""
        self.initialize()
        deleted = self.conn.execute(
            "DELETE FROM runs WHERE timestamp < ?", (_cutoff(days=retention_days),)
        ).rowcount
        if deleted:
            logger.info("Removed %d run(s) older than %d days", deleted, retention_days)
        return deleted

    def __enter__(self):
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
