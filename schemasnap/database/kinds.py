"""Per-kind query templates and result field names.

Each ObjectKind maps to one KindSpec describing how to list objects of
that kind, how to fetch an object's definition, which result field holds
the definition, and how (if at all) to read its comment. The name field
of a listing must stay in sync with the listing query's result shape.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Union

from .models import MaterializedRow, ObjectKind
from .rows import mysql_escape


def quote_identifier(name: str) -> str:
    """Quote a MySQL identifier with backticks."""
    return "`" + name.replace("`", "``") + "`"


@dataclass(frozen=True)
class KindSpec:
    """Query templates and field names for one object kind."""
    kind: ObjectKind
    keyword: str
    listing_query: str
    script_field: str
    name_field: Optional[str] = None  # None: first positional value
    comment_query: Optional[str] = None  # None: kind has no comment

    def show_create_query(self, name: str) -> str:
        return f"SHOW CREATE {self.keyword} {quote_identifier(name)}"

    def status_query(self, name: str) -> Optional[str]:
        if self.comment_query is None:
            return None
        return self.comment_query.format(name=mysql_escape(name))

    @property
    def has_comment(self) -> bool:
        return self.comment_query is not None

    def object_name(self, row: MaterializedRow) -> str:
        """Read the object name from one row of the listing query."""
        if self.name_field is None:
            return row[0]
        return row.get(self.name_field)


KIND_SPECS: Dict[ObjectKind, KindSpec] = {
    ObjectKind.TABLE: KindSpec(
        kind=ObjectKind.TABLE,
        keyword="TABLE",
        listing_query="SHOW FULL TABLES WHERE TABLE_TYPE NOT LIKE 'VIEW'",
        script_field="Create Table",
        comment_query="SHOW TABLE STATUS WHERE Name='{name}'",
    ),
    ObjectKind.VIEW: KindSpec(
        kind=ObjectKind.VIEW,
        keyword="VIEW",
        listing_query="SHOW FULL TABLES WHERE TABLE_TYPE LIKE 'VIEW'",
        script_field="Create View",
    ),
    ObjectKind.FUNCTION: KindSpec(
        kind=ObjectKind.FUNCTION,
        keyword="FUNCTION",
        listing_query="SHOW FUNCTION STATUS WHERE Db = DATABASE()",
        script_field="Create Function",
        name_field="Name",
        comment_query="SHOW FUNCTION STATUS WHERE Db = DATABASE() AND Name='{name}'",
    ),
    ObjectKind.PROCEDURE: KindSpec(
        kind=ObjectKind.PROCEDURE,
        keyword="PROCEDURE",
        listing_query="SHOW PROCEDURE STATUS WHERE Db = DATABASE()",
        script_field="Create Procedure",
        name_field="Name",
        comment_query="SHOW PROCEDURE STATUS WHERE Db = DATABASE() AND Name='{name}'",
    ),
    ObjectKind.TRIGGER: KindSpec(
        kind=ObjectKind.TRIGGER,
        keyword="TRIGGER",
        listing_query="SHOW TRIGGERS",
        script_field="SQL Original Statement",
        name_field="Trigger",
    ),
}


def get_kind_spec(kind: Union[ObjectKind, str]) -> KindSpec:
    """Resolve the KindSpec for a kind.

    Raises:
        InvalidObjectKindError: If the kind cannot be resolved
    """
    return KIND_SPECS[ObjectKind.parse(kind)]
