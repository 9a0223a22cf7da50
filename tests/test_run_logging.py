"""Tests for the SQLite run log."""

import pytest

from schemasnap.errors import QueryError
from schemasnap.logging import RunDatabase, RunLogger


@pytest.fixture
def run_db(tmp_path):
    with RunDatabase(str(tmp_path / "runs.db")) as db:
        yield db


class TestRunDatabase:
    """Test low-level run storage."""

    def test_insert_and_fetch(self, run_db):
        run_db.insert_run(
            run_id="abc12345",
            command="dump",
            host="db",
            database_name="shop",
            kinds=["table", "view"],
            include_filter="",
            exclude_filter="admin_log",
            arguments={"json": True},
        )

        run = run_db.get_run_by_id("abc12345")

        assert run["command"] == "dump"
        assert run["status"] == "started"
        assert run["kinds"] == '["table", "view"]'
        assert run["exclude_filter"] == "admin_log"

    def test_success_and_results(self, run_db):
        run_db.insert_run(run_id="r1", command="list")
        run_db.update_results("r1", tables_count=2, objects_count=5)
        run_db.update_success("r1", duration_ms=12)

        run = run_db.get_run_by_id("r1")

        assert run["status"] == "success"
        assert run["objects_count"] == 5
        assert run["duration_ms"] == 12

    def test_query_and_stats(self, run_db):
        run_db.insert_run(run_id="ok", command="dump")
        run_db.update_success("ok", duration_ms=10)
        run_db.insert_run(run_id="bad", command="script")
        run_db.update_error("bad", error_message="boom", error_type="QueryError", duration_ms=30)

        assert [r["run_id"] for r in run_db.query_runs(status="error")] == ["bad"]
        assert [r["run_id"] for r in run_db.query_runs(command="dump")] == ["ok"]

        stats = run_db.get_stats()
        assert stats["total_runs"] == 2
        assert stats["success_count"] == 1
        assert stats["error_count"] == 1
        assert stats["avg_duration_ms"] == 20
        assert stats["recent_errors"][0]["error_message"] == "boom"

    def test_cleanup_keeps_recent_runs(self, run_db):
        run_db.insert_run(run_id="recent", command="list")

        assert run_db.cleanup_old_runs(retention_days=30) == 0
        assert run_db.get_run_by_id("recent") is not None

    def test_missing_run(self, run_db):
        assert run_db.get_run_by_id("nope") is None


class TestRunLogger:
    """Test the run logging context manager."""

    def test_successful_run_is_recorded(self, run_logger):
        with run_logger.log_run("dump", database_name="shop", kinds=["table"]) as ctx:
            ctx.tables_count = 3
            ctx.objects_count = 7

        run = run_logger.get_run(ctx.run_id)
        assert run["status"] == "success"
        assert run["tables_count"] == 3
        assert run["objects_count"] == 7
        assert run["database_name"] == "shop"

    def test_failed_run_is_recorded_and_reraised(self, run_logger):
        with pytest.raises(QueryError):
            with run_logger.log_run("list") as ctx:
                raise QueryError("server went away", query="SHOW TRIGGERS")

        run = run_logger.get_run(ctx.run_id)
        assert run["status"] == "error"
        assert run["error_type"] == "QueryError"
        assert run["error_code"] == "QUERY_ERROR"
        assert "server went away" in run["error_message"]
        assert "Traceback" in run["error_traceback"]

    def test_disabled_logger_yields_context(self):
        run_logger = RunLogger(enabled=False)

        with run_logger.log_run("list") as ctx:
            ctx.objects_count = 1

        assert run_logger.query_runs() == []
        assert run_logger.get_run(ctx.run_id) is None
        assert run_logger.get_stats() == {"error": "Logging not enabled"}

    def test_unusable_path_disables_logging(self, tmp_path):
        run_logger = RunLogger(db_path=str(tmp_path / "missing" / "dir" / "runs.db"))

        assert run_logger.enabled is False
