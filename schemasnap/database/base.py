"""Abstract base class for database introspection."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..errors import NotFoundError, SchemaSnapError
from .canonical import canonicalize
from .filters import NameFilter
from .kinds import get_kind_spec, quote_identifier
from .models import Column, MaterializedRow, ObjectKind, SchemaSnapshot, Table
from .rows import RawValue, materialize
from .type_mappers import TypeMapper, MySQLTypeMapper

logger = logging.getLogger(__name__)

KindLike = Union[ObjectKind, str]


class DatabaseIntrospector(ABC):
    """Abstract base class for database introspection.

    Subclasses provide the connection and query execution; listing,
    script extraction and aggregation are implemented here on top of
    ``_execute``. Every call re-queries the server; nothing is cached.
    """

    def __init__(self, type_mapper: Optional[TypeMapper] = None, encoding: str = "utf-8"):
        self._type_mapper = type_mapper or MySQLTypeMapper()
        self.encoding = encoding

    @abstractmethod
    def connect(self):
        """Establish connection to the database."""
        pass

    @abstractmethod
    def close(self):
        """Close the database connection."""
        pass

    @abstractmethod
    def get_database_name(self) -> str:
        """Get the name of the database being introspected."""
        pass

    @abstractmethod
    def _execute(self, query: str) -> Tuple[List[str], Sequence[Sequence[RawValue]]]:
        """Execute a query and fully read its result set.

        Args:
            query: SQL text to execute

        Returns:
            Tuple of (column names, rows of raw byte values)

        Raises:
            QueryError: If the query fails to execute or iterate
        """
        pass

    @abstractmethod
    def get_table_info(self, table: str) -> Table:
        """Resolve the structure of a single table.

        Args:
            table: Table name

        Returns:
            Table with its columns and primary key
        """
        pass

    def get_data(
        self,
        query: str,
        columns: Optional[Mapping[str, Column]] = None,
        table: str = "",
    ) -> List[MaterializedRow]:
        """Run a query and materialize every row of the result.

        Args:
            query: SQL text to execute
            columns: Optional column metadata used to type the values
            table: Table name, used in error messages

        Returns:
            List of materialized rows in server order
        """
        logger.debug("Query: %s", query)
        column_names, rows = self._execute(query)
        return [
            materialize(
                column_names, raw, columns,
                table=table, type_mapper=self._type_mapper, encoding=self.encoding,
            )
            for raw in rows
        ]

    def get_object_list(self, kind: KindLike, include: str = "", exclude: str = "") -> List[str]:
        """Get names of all objects of a kind, filtered by name.

        Args:
            kind: Object kind to list
            include: Comma-separated names to keep (empty keeps all)
            exclude: Comma-separated names to drop

        Returns:
            Object names in the order the server returned them
        """
        spec = get_kind_spec(kind)
        rows = self.get_data(spec.listing_query, table=self.get_database_name())
        names = [spec.object_name(row) for row in rows]
        return NameFilter(include, exclude).apply(names)

    def get_script(self, kind: KindLike, name: str) -> str:
        """Get the canonical creation script for an object.

        Raises:
            NotFoundError: If the server returns no definition
            QueryError: If the query fails
        """
        spec = get_kind_spec(kind)
        rows = self.get_data(spec.show_create_query(name), table=name)
        if not rows:
            raise NotFoundError(spec.kind.value, name)

        try:
            script = rows[0].get(spec.script_field)
        except KeyError:
            raise NotFoundError(spec.kind.value, name, f"no '{spec.script_field}' field in result")
        if script is None:
            raise NotFoundError(spec.kind.value, name, "definition not visible to current user")

        return canonicalize(script).strip()

    def get_comment(self, kind: KindLike, name: str) -> str:
        """Get an object's comment, or an empty string if it has none.

        Comments are cosmetic, so any failure is logged and ignored.
        """
        spec = get_kind_spec(kind)
        query = spec.status_query(name)
        if query is None:
            return ""

        try:
            rows = self.get_data(query, table=name)
            if not rows:
                return ""
            return rows[0].get("Comment") or ""
        except (SchemaSnapError, KeyError) as e:
            logger.debug("Could not read comment for %s %s: %s", spec.kind.value, name, e)
            return ""

    def get_script_list(self, kind: KindLike, include: str = "", exclude: str = "") -> Dict[str, str]:
        """Get canonical scripts for all objects of a kind.

        The first failing object aborts the whole list.
        """
        result: Dict[str, str] = {}
        for name in self.get_object_list(kind, include, exclude):
            result[name] = self.get_script(kind, name)
        logger.info("Loaded %d %s script(s)", len(result), ObjectKind.parse(kind).value)
        return result

    def get_table_list(self, include: str = "", exclude: str = "") -> Dict[str, Table]:
        """Get structures for all tables.

        The first table that cannot be resolved aborts the whole list.
        """
        result: Dict[str, Table] = {}
        for name in self.get_object_list(ObjectKind.TABLE, include, exclude):
            result[name] = self.get_table_info(name)
        logger.info("Loaded %d table structure(s)", len(result))
        return result

    def get_table_data(
        self,
        table: str,
        where: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[MaterializedRow]:
        """Get typed rows of a table, converted by its declared column types.

        Args:
            table: Table name
            where: Optional SQL condition appended as a WHERE clause
            limit: Optional maximum number of rows

        Returns:
            List of materialized rows
        """
        structure = self.get_table_info(table)
        query = f"SELECT * FROM {quote_identifier(table)}"
        if where:
            query += f" WHERE {where}"
        if limit is not None:
            query += f" LIMIT {int(limit)}"
        return self.get_data(query, structure.columns_by_name(), table=table)

    def snapshot(
        self,
        include: str = "",
        exclude: str = "",
        kinds: Optional[Iterable[KindLike]] = None,
        with_comments: bool = False,
    ) -> SchemaSnapshot:
        """Extract a canonical snapshot of the whole database.

        Args:
            include: Comma-separated names to keep (empty keeps all)
            exclude: Comma-separated names to drop
            kinds: Object kinds to extract (default: all)
            with_comments: Whether to also read object comments

        Returns:
            SchemaSnapshot with table structures, scripts and comments
        """
        resolved = [ObjectKind.parse(k) for k in kinds] if kinds else list(ObjectKind)
        snap = SchemaSnapshot(database=self.get_database_name())

        if ObjectKind.TABLE in resolved:
            snap.tables = self.get_table_list(include, exclude)

        for kind in resolved:
            scripts = self.get_script_list(kind, include, exclude)
            snap.scripts[kind] = scripts
            if with_comments:
                snap.comments[kind] = {name: self.get_comment(kind, name) for name in scripts}

        return snap

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
