"""Database data models for schema introspection."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ..errors import InvalidObjectKindError


class ObjectKind(Enum):
    """Kinds of schema objects that can be introspected."""
    TABLE = "table"
    VIEW = "view"
    FUNCTION = "function"
    PROCEDURE = "procedure"
    TRIGGER = "trigger"

    @classmethod
    def parse(cls, value: Union["ObjectKind", str]) -> "ObjectKind":
        """Resolve an ObjectKind from an instance or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidObjectKindError(value)


class ColumnTypeCategory(Enum):
    """Semantic category of a declared column type."""
    INTEGER = "integer"
    FLOAT = "float"
    CHARACTER = "character"
    BINARY = "binary"
    TEMPORAL = "temporal"
    UNKNOWN = "unknown"


@dataclass
class Column:
    """Represents a table column as reported by the server."""
    name: str
    data_type: str
    is_nullable: bool = True
    key: str = ""
    default: Optional[str] = None
    extra: str = ""
    comment: str = ""

    @property
    def is_primary_key(self) -> bool:
        return self.key == "PRI"


@dataclass
class Table:
    """Represents a database table structure."""
    name: str
    columns: List[Column] = field(default_factory=list)
    primary_key_columns: List[str] = field(default_factory=list)
    comment: str = ""

    def columns_by_name(self) -> Dict[str, Column]:
        """Get a name -> Column mapping for row materialization."""
        return {col.name: col for col in self.columns}

    def get_column(self, name: str) -> Optional[Column]:
        """Find a column by name."""
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "comment": self.comment,
            "primary_key_columns": list(self.primary_key_columns),
            "columns": [
                {
                    "name": c.name,
                    "data_type": c.data_type,
                    "is_nullable": c.is_nullable,
                    "key": c.key,
                    "default": c.default,
                    "extra": c.extra,
                    "comment": c.comment,
                }
                for c in self.columns
            ],
        }


@dataclass(frozen=True)
class MaterializedRow:
    """A single result row converted into named, positioned, typed values.

    SQL NULL is materialized as None, which is distinct from an empty
    string or zero.
    """
    columns: Mapping[str, int]
    values: Tuple[Any, ...]

    def __post_init__(self):
        object.__setattr__(self, "columns", MappingProxyType(dict(self.columns)))
        object.__setattr__(self, "values", tuple(self.values))

    def get(self, name: str) -> Any:
        """Get a value by column name.

        Raises:
            KeyError: If the result set has no such column
        """
        return self.values[self.columns[name]]

    def __getitem__(self, key: Union[int, str]) -> Any:
        if isinstance(key, str):
            return self.get(key)
        return self.values[key]

    def __len__(self) -> int:
        return len(self.values)

    def to_dict(self) -> Dict[str, Any]:
        return {name: self.values[idx] for name, idx in self.columns.items()}


@dataclass
class SchemaSnapshot:
    """Canonical view of one database: table structures and object scripts."""
    database: str
    tables: Dict[str, Table] = field(default_factory=dict)
    scripts: Dict[ObjectKind, Dict[str, str]] = field(default_factory=dict)
    comments: Dict[ObjectKind, Dict[str, str]] = field(default_factory=dict)

    def object_count(self) -> int:
        return sum(len(names) for names in self.scripts.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "database": self.database,
            "tables": {name: table.to_dict() for name, table in self.tables.items()},
            "scripts": {kind.value: dict(items) for kind, items in self.scripts.items()},
            "comments": {kind.value: dict(items) for kind, items in self.comments.items()},
        }
