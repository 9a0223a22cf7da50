"""Shared pytest fixtures for schemasnap tests."""

import pytest

from schemasnap.database.models import Column, Table
from schemasnap.logging import run_service
from schemasnap.logging.run_service import RunLogger

from tests.fixtures import FakeIntrospector


USERS_DDL = (
    "CREATE TABLE `Users` (\n"
    "  `id` int(11) NOT NULL AUTO_INCREMENT,\n"
    "  `name` varchar(64) NOT NULL,\n"
    "  PRIMARY KEY (`id`)\n"
    ") ENGINE=InnoDB AUTO_INCREMENT=1043 DEFAULT CHARSET=utf8mb4 ROW_FORMAT=DYNAMIC "
)

ORDERS_DDL = (
    "CREATE TABLE `orders` (\n"
    "  `id` bigint(20) NOT NULL,\n"
    "  `total` decimal(10,2) DEFAULT NULL\n"
    ") ENGINE=InnoDB DEFAULT CHARSET=latin1 "
)

VIEW_DDL = (
    "CREATE ALGORITHM=UNDEFINED DEFINER=`root`@`localhost` SQL SECURITY DEFINER "
    "VIEW `active_users` AS select `Users`.`id` AS `id` from `Users`"
)

FUNCTION_DDL = (
    "CREATE DEFINER=`app`@`%` FUNCTION `order_total`(o BIGINT) RETURNS decimal(10,2)\n"
    "    READS SQL DATA\n"
    "BEGIN RETURN 0; END"
)

PROCEDURE_DDL = (
    "CREATE DEFINER=`app`@`%` PROCEDURE `purge_orders`()\n"
    "BEGIN DELETE FROM orders; END"
)

TRIGGER_DDL = (
    "CREATE DEFINER=`root`@`localhost` TRIGGER trg_orders_bi BEFORE INSERT ON orders "
    "FOR EACH ROW SET NEW.total = IFNULL(NEW.total, 0)"
)

ROUTINE_STATUS_COLUMNS = [
    "Db", "Name", "Type", "Definer", "Modified", "Created", "Security_type",
    "Comment", "character_set_client", "collation_connection", "Database Collation",
]


@pytest.fixture
def users_table():
    """Table structure for the Users table."""
    return Table(
        name="Users",
        columns=[
            Column(name="id", data_type="int(11)", is_nullable=False, key="PRI", extra="auto_increment"),
            Column(name="name", data_type="varchar(64)", is_nullable=False),
        ],
        primary_key_columns=["id"],
        comment="registered users",
    )


@pytest.fixture
def orders_table():
    """Table structure for the orders table."""
    return Table(
        name="orders",
        columns=[
            Column(name="id", data_type="bigint(20)", is_nullable=False, key="PRI"),
            Column(name="total", data_type="decimal(10,2)"),
        ],
        primary_key_columns=["id"],
    )


@pytest.fixture
def fake_db(users_table, orders_table):
    """A scripted 'shop' database with one object of every kind."""
    db = FakeIntrospector(database="shop")

    db.add_result(
        "SHOW FULL TABLES WHERE TABLE_TYPE NOT LIKE 'VIEW'",
        ["Tables_in_shop", "Table_type"],
        [["Users", "BASE TABLE"], ["orders", "BASE TABLE"], ["ADMIN_LOG", "BASE TABLE"]],
    )
    db.add_result(
        "SHOW FULL TABLES WHERE TABLE_TYPE LIKE 'VIEW'",
        ["Tables_in_shop", "Table_type"],
        [["active_users", "VIEW"]],
    )
    db.add_result(
        "SHOW FUNCTION STATUS WHERE Db = DATABASE()",
        ROUTINE_STATUS_COLUMNS,
        [["shop", "order_total", "FUNCTION", "app@%", "2024-01-01", "2024-01-01", "DEFINER",
          "sums an order", "utf8mb4", "utf8mb4_general_ci", "utf8mb4_general_ci"]],
    )
    db.add_result(
        "SHOW PROCEDURE STATUS WHERE Db = DATABASE()",
        ROUTINE_STATUS_COLUMNS,
        [["shop", "purge_orders", "PROCEDURE", "app@%", "2024-01-01", "2024-01-01", "DEFINER",
          "", "utf8mb4", "utf8mb4_general_ci", "utf8mb4_general_ci"]],
    )
    db.add_result(
        "SHOW TRIGGERS",
        ["Trigger", "Event", "Table", "Statement", "Timing", "Created"],
        [["trg_orders_bi", "INSERT", "orders", "SET NEW.total = IFNULL(NEW.total, 0)", "BEFORE", None]],
    )

    db.add_result("SHOW CREATE TABLE `Users`", ["Table", "Create Table"], [["Users", USERS_DDL]])
    db.add_result("SHOW CREATE TABLE `orders`", ["Table", "Create Table"], [["orders", ORDERS_DDL]])
    db.add_result(
        "SHOW CREATE VIEW `active_users`",
        ["View", "Create View", "character_set_client", "collation_connection"],
        [["active_users", VIEW_DDL, "utf8mb4", "utf8mb4_general_ci"]],
    )
    db.add_result(
        "SHOW CREATE FUNCTION `order_total`",
        ["Function", "sql_mode", "Create Function", "character_set_client"],
        [["order_total", "STRICT_TRANS_TABLES", FUNCTION_DDL, "utf8mb4"]],
    )
    db.add_result(
        "SHOW CREATE PROCEDURE `purge_orders`",
        ["Procedure", "sql_mode", "Create Procedure", "character_set_client"],
        [["purge_orders", "STRICT_TRANS_TABLES", PROCEDURE_DDL, "utf8mb4"]],
    )
    db.add_result(
        "SHOW CREATE TRIGGER `trg_orders_bi`",
        ["Trigger", "sql_mode", "SQL Original Statement", "character_set_client"],
        [["trg_orders_bi", "STRICT_TRANS_TABLES", TRIGGER_DDL, "utf8mb4"]],
    )

    db.add_result(
        "SHOW TABLE STATUS WHERE Name='Users'",
        ["Name", "Engine", "Rows", "Comment"],
        [["Users", "InnoDB", "3", "registered users"]],
    )
    db.add_result(
        "SHOW FUNCTION STATUS WHERE Db = DATABASE() AND Name='order_total'",
        ROUTINE_STATUS_COLUMNS,
        [["shop", "order_total", "FUNCTION", "app@%", "2024-01-01", "2024-01-01", "DEFINER",
          "sums an order", "utf8mb4", "utf8mb4_general_ci", "utf8mb4_general_ci"]],
    )

    db.add_table(users_table)
    db.add_table(orders_table)
    return db


@pytest.fixture
def disabled_run_logger(monkeypatch):
    """Replace the global run logger with a disabled one."""
    run_logger = RunLogger(enabled=False)
    monkeypatch.setattr(run_service, "_run_logger", run_logger)
    return run_logger


@pytest.fixture
def run_logger(tmp_path, monkeypatch):
    """Install a run logger backed by a temporary SQLite file."""
    run_logger = RunLogger(db_path=str(tmp_path / "runs.db"))
    monkeypatch.setattr(run_service, "_run_logger", run_logger)
    yield run_logger
    run_logger.db.close()
