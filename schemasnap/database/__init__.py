"""Database introspection module for schemasnap.

This module lists schema objects, materializes typed result rows and
canonicalizes object definitions, with a MySQL implementation of the
query layer.
"""

from .models import (
    Column,
    ColumnTypeCategory,
    MaterializedRow,
    ObjectKind,
    SchemaSnapshot,
    Table,
)
from .type_mappers import TypeMapper, MySQLTypeMapper, classify
from .rows import materialize, mysql_escape, python_codec
from .canonical import canonicalize
from .filters import NameFilter
from .kinds import KIND_SPECS, KindSpec, get_kind_spec
from .base import DatabaseIntrospector
from .mysql import MySQLIntrospector

__all__ = [
    # Data models
    "Column",
    "ColumnTypeCategory",
    "MaterializedRow",
    "ObjectKind",
    "SchemaSnapshot",
    "Table",
    # Type classification
    "TypeMapper",
    "MySQLTypeMapper",
    "classify",
    # Rows and scripts
    "materialize",
    "mysql_escape",
    "python_codec",
    "canonicalize",
    "NameFilter",
    "KIND_SPECS",
    "KindSpec",
    "get_kind_spec",
    # Introspectors
    "DatabaseIntrospector",
    "MySQLIntrospector",
]
