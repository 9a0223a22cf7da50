"""Tests for the schemasnap CLI."""

import json

import pytest
from typer.testing import CliRunner

from schemasnap.commands import extract, runs
from schemasnap.main import app

runner = CliRunner()


@pytest.fixture
def cli_db(fake_db, monkeypatch):
    """Point the extract commands at the scripted database."""
    monkeypatch.setattr(extract, "_open", lambda *args: fake_db)
    return fake_db


class TestExtractList:
    """Test `schemasnap extract list`."""

    def test_lists_tables(self, cli_db, disabled_run_logger):
        result = runner.invoke(app, ["extract", "list", "table"])

        assert result.exit_code == 0
        assert result.output.split() == ["Users", "orders", "ADMIN_LOG"]
        assert cli_db.closed is True

    def test_exclude_is_case_insensitive(self, cli_db, disabled_run_logger):
        result = runner.invoke(app, ["extract", "list", "table", "--exclude", "admin_log, USERS"])

        assert result.exit_code == 0
        assert result.output.split() == ["orders"]

    def test_unknown_kind_is_rejected(self, cli_db, disabled_run_logger):
        result = runner.invoke(app, ["extract", "list", "index"])

        assert result.exit_code != 0
        assert cli_db.queries == []


class TestExtractScript:
    """Test `schemasnap extract script`."""

    def test_prints_canonical_script(self, cli_db, disabled_run_logger):
        result = runner.invoke(app, ["extract", "script", "view", "active_users"])

        assert result.exit_code == 0
        assert result.output.strip() == "CREATE VIEW `active_users` AS select `Users`.`id` AS `id` from `Users`"

    def test_prints_comment_first(self, cli_db, disabled_run_logger):
        result = runner.invoke(app, ["extract", "script", "function", "order_total", "--comment"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "-- sums an order"
        assert lines[1] == "CREATE FUNCTION `order_total`(o BIGINT) RETURNS decimal(10,2)"

    def test_missing_object_exits_with_error(self, cli_db, disabled_run_logger):
        cli_db.add_result("SHOW CREATE VIEW `ghost`", ["View", "Create View"], [])

        result = runner.invoke(app, ["extract", "script", "view", "ghost"])

        assert result.exit_code == 1
        assert "NOT_FOUND" in result.output
        assert "ghost" in result.output


class TestExtractDump:
    """Test `schemasnap extract dump`."""

    def test_writes_one_file_per_object(self, cli_db, disabled_run_logger, tmp_path):
        out = tmp_path / "snap"

        result = runner.invoke(app, ["extract", "dump", "--exclude", "admin_log", "--output", str(out)])

        assert result.exit_code == 0
        assert "Wrote 6 script(s)" in result.output
        assert sorted(p.name for p in (out / "table").iterdir()) == ["Users.sql", "orders.sql"]
        users = (out / "table" / "Users.sql").read_text(encoding="utf-8")
        assert users.endswith(") ENGINE=InnoDB\n")
        assert "AUTO_INCREMENT=1043" not in users
        trigger = (out / "trigger" / "trg_orders_bi.sql").read_text(encoding="utf-8")
        assert trigger.startswith("CREATE TRIGGER trg_orders_bi")

    def test_json_document(self, cli_db, disabled_run_logger):
        result = runner.invoke(app, [
            "extract", "dump", "--kind", "table", "--kind", "function",
            "--exclude", "admin_log", "--json", "--comments",
        ])

        assert result.exit_code == 0
        document = json.loads(result.output)
        assert document["database"] == "shop"
        assert list(document["scripts"]) == ["table", "function"]
        assert list(document["tables"]) == ["Users", "orders"]
        assert document["comments"]["table"] == {"Users": "registered users", "orders": ""}
        assert document["comments"]["function"] == {"order_total": "sums an order"}

    def test_failure_is_reported(self, cli_db, disabled_run_logger):
        result = runner.invoke(app, ["extract", "dump", "--kind", "table"])

        assert result.exit_code == 1
        assert "ADMIN_LOG" in result.output


class TestExtractData:
    """Test `schemasnap extract data`."""

    def test_prints_rows(self, cli_db, disabled_run_logger):
        cli_db.add_result("SELECT * FROM `Users` LIMIT 20", ["id", "name"], [["1", "ann"], ["2", None]])

        result = runner.invoke(app, ["extract", "data", "Users"])

        assert result.exit_code == 0
        assert "ann" in result.output
        assert "NULL" in result.output
        assert "2 row(s)" in result.output


class TestRunLogging:
    """Test that commands are recorded and `schemasnap runs` reads them."""

    def test_runs_are_recorded(self, cli_db, run_logger):
        runner.invoke(app, ["extract", "list", "view"])
        runner.invoke(app, ["extract", "script", "table", "ghost"])

        recorded = run_logger.query_runs()
        assert [r["command"] for r in recorded] == ["script", "list"]
        assert recorded[0]["status"] == "error"
        assert recorded[0]["error_code"] == "QUERY_ERROR"
        assert recorded[1]["status"] == "success"
        assert recorded[1]["objects_count"] == 1
        assert recorded[1]["database_name"] == "shop"

    def test_runs_list_and_stats(self, cli_db, run_logger, monkeypatch):
        monkeypatch.setattr(runs.console, "width", 200)
        runner.invoke(app, ["extract", "list", "trigger"])

        listed = runner.invoke(app, ["runs", "list"])
        stats = runner.invoke(app, ["runs", "stats"])

        assert listed.exit_code == 0
        assert "success" in listed.output
        assert stats.exit_code == 0
        assert "Total: 1" in stats.output

    def test_runs_disabled(self, disabled_run_logger):
        result = runner.invoke(app, ["runs", "list"])

        assert result.exit_code == 1
        assert "disabled" in result.output


class TestConfig:
    def test_shows_configuration(self):
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "Current Configuration" in result.output
        assert "MySQL host" in result.output
