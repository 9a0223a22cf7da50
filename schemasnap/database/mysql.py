"""MySQL database introspector."""

import logging
from typing import List, Optional, Sequence, Tuple

import mysql.connector
from mysql.connector import Error as MySQLError

from ..errors import ConnectionError, NotFoundError, QueryError
from .base import DatabaseIntrospector
from .kinds import quote_identifier
from .models import Column, ObjectKind, Table
from .rows import RawValue, python_codec
from .type_mappers import TypeMapper

logger = logging.getLogger(__name__)


class MySQLIntrospector(DatabaseIntrospector):
    """Client for introspecting a MySQL database over a single connection."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 3306,
        user: str = "root",
        password: Optional[str] = None,
        database: Optional[str] = None,
        charset: str = "utf8mb4",
        connect_timeout: int = 10,
        type_mapper: Optional[TypeMapper] = None,
    ):
        """Initialize MySQL introspector.

        Args:
            host: Server host name
            port: Server port
            user: User name
            password: Password (None for no password)
            database: Database to introspect
            charset: Connection character set
            connect_timeout: Connection timeout in seconds
            type_mapper: Type mapper used to classify declared column types
        """
        super().__init__(type_mapper=type_mapper, encoding=python_codec(charset))
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.charset = charset
        self.connect_timeout = connect_timeout
        self._connection = None

    @classmethod
    def from_settings(cls, settings, **overrides) -> "MySQLIntrospector":
        """Build an introspector from Settings, letting non-None overrides win."""
        params = {
            "host": settings.mysql_host,
            "port": settings.mysql_port,
            "user": settings.mysql_user,
            "password": settings.mysql_password,
            "database": settings.mysql_database,
            "charset": settings.mysql_charset,
            "connect_timeout": settings.mysql_connect_timeout,
        }
        params.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**params)

    def get_database_name(self) -> str:
        return self.database or ""

    def connect(self):
        """Connect to MySQL, reusing an open connection."""
        if self._connection is not None:
            return self._connection

        try:
            self._connection = mysql.connector.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password or "",
                database=self.database,
                charset=self.charset,
                connection_timeout=self.connect_timeout,
            )
        except MySQLError as e:
            raise ConnectionError(
                f"Failed to connect to MySQL at {self.host}:{self.port}: {e}",
                details={"host": self.host, "port": self.port, "database": self.database},
            ) from e

        logger.info("Opened MySQL connection to %s:%s/%s", self.host, self.port, self.database)
        return self._connection

    def close(self):
        """Close the MySQL connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.info("Closed MySQL connection to %s:%s", self.host, self.port)

    def _execute(self, query: str) -> Tuple[List[str], Sequence[Sequence[RawValue]]]:
        conn = self.connect()
        cursor = None
        try:
            cursor = conn.cursor(raw=True)
            cursor.execute(query)
            column_names = [
                name.decode(self.encoding) if isinstance(name, (bytes, bytearray)) else name
                for name in (cursor.column_names or ())
            ]
            rows = cursor.fetchall() if cursor.with_rows else []
            return column_names, rows
        except MySQLError as e:
            raise QueryError(f"Query failed: {e}", query=query) from e
        finally:
            if cursor is not None:
                cursor.close()

    def get_columns(self, table: str) -> List[Column]:
        """Get all columns for a table, in ordinal order."""
        rows = self.get_data(f"SHOW FULL COLUMNS FROM {quote_identifier(table)}", table=table)
        columns = []
        for row in rows:
            columns.append(Column(
                name=row.get("Field"),
                data_type=row.get("Type"),
                is_nullable=(row.get("Null") == "YES"),
                key=row.get("Key") or "",
                default=row.get("Default"),
                extra=row.get("Extra") or "",
                comment=row.get("Comment") or "",
            ))
        return columns

    def get_table_info(self, table: str) -> Table:
        """Resolve a table's columns, primary key and comment.

        Raises:
            NotFoundError: If the table reports no columns
            QueryError: If the column query fails
        """
        columns = self.get_columns(table)
        if not columns:
            raise NotFoundError(ObjectKind.TABLE.value, table, "no columns")

        return Table(
            name=table,
            columns=columns,
            primary_key_columns=[c.name for c in columns if c.is_primary_key],
            comment=self.get_comment(ObjectKind.TABLE, table),
        )
