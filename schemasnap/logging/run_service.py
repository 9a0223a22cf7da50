"""Run logging for schemasnap commands.

Every CLI command runs inside ``log_run(...)``, which records the run's
arguments, outcome and counts in the local run log. A broken run log is
reported as a warning and never stops the command itself.
"""

import logging
import os
import platform
import time
import traceback
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from schemasnap import __version__
from schemasnap.logging.run_db import RunDatabase

logger = logging.getLogger(__name__)

_run_logger: Optional["RunLogger"] = None


def get_run_logger() -> "RunLogger":
    """Return the process-wide RunLogger, built from settings on first use."""
    global _run_logger
    if _run_logger is None:
        from schemasnap.config import settings

        _run_logger = RunLogger(
            db_path=settings.run_logging_db_path,
            enabled=settings.run_logging_enabled,
            retention_days=settings.run_logging_retention_days,
        )
    return _run_logger


@dataclass
class RunContext:
    """Mutable view of the current run; commands fill in the counts."""

    run_id: str
    command: str
    started: float = field(default_factory=time.monotonic)

    tables_count: int = 0
    objects_count: int = 0
    rows_count: int = 0

    @property
    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.started) * 1000)


def _environment() -> Dict[str, str]:
    return {
        "python": platform.python_version(),
        "schemasnap": __version__,
        "cwd": os.getcwd(),
    }


class RunLogger:
    """Records command runs into a RunDatabase.

    Usage:
        with get_run_logger().log_run("dump", database_name="shop") as ctx:
            snap = introspector.snapshot()
            ctx.objects_count = snap.object_count()
    """

    def __init__(self, db_path: Optional[str] = None, enabled: bool = True, retention_days: int = 30):
        self.enabled = enabled
        self._db: Optional[RunDatabase] = None
        if not enabled:
            return

        try:
            self._db = RunDatabase(db_path)
            self._db.cleanup_old_runs(retention_days)
        except Exception as e:
            logger.warning("Run log unavailable, continuing without it: %s", e)
            self._db = None
            self.enabled = False

    @property
    def db(self) -> Optional[RunDatabase]:
        return self._db

    def _safely(self, action: str, fn, *args, **kwargs) -> None:
        try:
            fn(*args, **kwargs)
        except Exception as e:
            logger.warning("Failed to %s: %s", action, e)

    @contextmanager
    def log_run(
        self,
        command: str,
        host: Optional[str] = None,
        database_name: Optional[str] = None,
        kinds: Optional[List[str]] = None,
        include_filter: Optional[str] = None,
        exclude_filter: Optional[str] = None,
        arguments: Optional[Dict[str, Any]] = None,
    ) -> Iterator[RunContext]:
        """Record one run around the ``with`` block.

        An exception raised in the block is stored with its traceback and
        re-raised unchanged.
        """
        ctx = RunContext(run_id=uuid.uuid4().hex[:8], command=command)

        if self._db is None:
            yield ctx
            return

        self._safely(
            "record run start",
            self._db.insert_run,
            run_id=ctx.run_id,
            command=command,
            host=host,
            database_name=database_name,
            kinds=list(kinds or []),
            include_filter=include_filter,
            exclude_filter=exclude_filter,
            arguments=arguments,
            environment=_environment(),
        )

        try:
            yield ctx
        except Exception as e:
            self._safely(
                "record run error",
                self._db.update_error,
                ctx.run_id,
                error_message=str(e),
                error_type=type(e).__name__,
                error_code=getattr(e, "code", None),
                error_traceback=traceback.format_exc(),
                duration_ms=ctx.elapsed_ms,
            )
            logger.debug("Run %s (%s) failed: %s", ctx.run_id, command, e)
            raise

        self._safely(
            "record run result",
            self._db.update_results,
            ctx.run_id,
            tables_count=ctx.tables_count,
            objects_count=ctx.objects_count,
            rows_count=ctx.rows_count,
        )
        self._safely("record run success", self._db.update_success, ctx.run_id, ctx.elapsed_ms)
        logger.debug("Run %s (%s) finished in %dms", ctx.run_id, command, ctx.elapsed_ms)

    def query_runs(
        self,
        command: Optional[str] = None,
        status: Optional[str] = None,
        since_hours: int = 24,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        if self._db is None:
            return []
        return self._db.query_runs(command=command, status=status, since_hours=since_hours, limit=limit)

    def get_stats(self, since_hours: int = 24) -> Dict[str, Any]:
        if self._db is None:
            return {"error": "Logging not enabled"}
        return self._db.get_stats(since_hours=since_hours)

    def get_run(self, run_id: str) -> Optional[Dict[str, Any]]:
        if self._db is None:
            return None
        return self._db.get_run_by_id(run_id)


def log_run(command: str, **details):
    """Shortcut for ``get_run_logger().log_run(command, ...)``."""
    return get_run_logger().log_run(command, **details)
