"""CLI run logging module for schemasnap.

Records each CLI extraction run in a local SQLite database to help with
debugging and auditing.
"""

from schemasnap.logging.run_db import RunDatabase, get_default_run_db_path
from schemasnap.logging.run_service import (
    RunContext,
    RunLogger,
    get_run_logger,
    log_run,
)

__all__ = [
    "RunDatabase",
    "get_default_run_db_path",
    "RunContext",
    "RunLogger",
    "get_run_logger",
    "log_run",
]
