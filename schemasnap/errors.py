"""Error types for schemasnap."""

from typing import Optional, Dict, Any


class SchemaSnapError(Exception):
    """Base exception for schemasnap errors."""

    def __init__(self, message: str, code: str = "SCHEMASNAP_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON output."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConnectionError(SchemaSnapError):
    """Error connecting to the database server."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONNECTION_ERROR", details=details)


class QueryError(SchemaSnapError):
    """A query could not be executed or its result could not be read."""

    def __init__(self, message: str, query: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        error_details = details or {}
        if query is not None:
            error_details["query"] = query
        super().__init__(message, code="QUERY_ERROR", details=error_details)
        self.query = query


class NotFoundError(SchemaSnapError):
    """A "show create" query returned no usable definition for an object."""

    def __init__(self, kind: str, name: str, reason: str = "not found"):
        super().__init__(
            f"{kind} {name}: {reason}",
            code="NOT_FOUND",
            details={"kind": kind, "name": name},
        )
        self.kind = kind
        self.name = name


class ClassificationError(SchemaSnapError):
    """A declared column type did not match any known type category.

    Raised instead of guessing, since a wrong guess would silently
    corrupt a schema comparison.
    """

    def __init__(self, table: str, column: str, data_type: str):
        super().__init__(
            f"invalid data type table: {table} column: {column} type: {data_type}",
            code="CLASSIFICATION_ERROR",
            details={"table": table, "column": column, "data_type": data_type},
        )
        self.table = table
        self.column = column
        self.data_type = data_type


class DecodeError(SchemaSnapError):
    """A text value could not be decoded with the connection character set."""

    def __init__(self, table: str, column: str, encoding: str, reason: str):
        super().__init__(
            f"cannot decode {table}.{column} as {encoding}: {reason}",
            code="DECODE_ERROR",
            details={"table": table, "column": column, "encoding": encoding},
        )
        self.table = table
        self.column = column
        self.encoding = encoding


class InvalidObjectKindError(SchemaSnapError):
    """An object kind could not be resolved."""

    def __init__(self, value: Any):
        super().__init__(
            f"Unknown object kind: {value!r}",
            code="INVALID_OBJECT_KIND",
            details={"value": str(value)},
        )
