"""Database-specific type classification strategies."""

from abc import ABC, abstractmethod

from .models import ColumnTypeCategory


INTEGER_TYPES = ("tinyint", "smallint", "mediumint", "int", "bigint")
FLOAT_TYPES = ("float", "double", "decimal")
CHARACTER_TYPES = ("char", "varchar", "text", "tinytext", "mediumtext", "longtext", "json")
BINARY_TYPES = ("tinyblob", "blob", "mediumblob", "longblob")
TEMPORAL_TYPES = ("date", "datetime", "timestamp")


class TypeMapper(ABC):
    """Abstract base class for database type classification."""

    @abstractmethod
    def classify(self, db_type: str) -> ColumnTypeCategory:
        """Map a declared column type to its semantic category."""
        pass


class MySQLTypeMapper(TypeMapper):
    """Type mapper for MySQL declared column types.

    Matching is a case-sensitive prefix test, so callers must pass the
    lower-case type string MySQL reports (e.g. ``int(11) unsigned``).
    """

    def classify(self, db_type: str) -> ColumnTypeCategory:
        """Classify a MySQL declared type, returning UNKNOWN if nothing matches."""
        if db_type.startswith(INTEGER_TYPES):
            return ColumnTypeCategory.INTEGER
        elif db_type.startswith(FLOAT_TYPES):
            return ColumnTypeCategory.FLOAT
        elif db_type.startswith(BINARY_TYPES):
            return ColumnTypeCategory.BINARY
        elif db_type.startswith(CHARACTER_TYPES):
            return ColumnTypeCategory.CHARACTER
        elif db_type.startswith(TEMPORAL_TYPES):
            return ColumnTypeCategory.TEMPORAL
        return ColumnTypeCategory.UNKNOWN


_default_mapper = MySQLTypeMapper()


def classify(db_type: str) -> ColumnTypeCategory:
    """Classify a declared column type with the MySQL type mapper."""
    return _default_mapper.classify(db_type)
