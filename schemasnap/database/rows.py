"""Conversion of raw result rows into typed values."""

import logging
import re
from typing import Any, Dict, Mapping, Optional, Sequence

from ..errors import ClassificationError, DecodeError
from .models import Column, ColumnTypeCategory, MaterializedRow
from .type_mappers import TypeMapper, MySQLTypeMapper

logger = logging.getLogger(__name__)

RawValue = Optional[bytes]

_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\x00": "\\0",
    "\n": "\\n",
    "\r": "\\r",
    "\x1a": "\\Z",
}

# MySQL character set names that Python spells differently
_CHARSET_CODECS = {
    "utf8mb4": "utf-8",
    "utf8mb3": "utf-8",
    "utf8": "utf-8",
    "latin1": "latin-1",
    "binary": "latin-1",
    "ucs2": "utf-16-be",
    "utf16": "utf-16-be",
    "utf16le": "utf-16-le",
    "utf32": "utf-32-be",
    "sjis": "shift_jis",
    "ujis": "euc_jp",
    "eucjpms": "euc_jp",
    "koi8r": "koi8_r",
    "koi8u": "koi8_u",
    "hebrew": "iso8859_8",
    "greek": "iso8859_7",
    "latin2": "iso8859_2",
    "latin5": "iso8859_9",
    "latin7": "iso8859_13",
}

# Plain ASCII decimal notation only; no underscores, padding or other digits
_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")
_FLOAT_TEXT = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?(?:inf|infinity|nan)",
    re.IGNORECASE,
)
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def python_codec(charset: Optional[str]) -> str:
    """Return the Python codec name for a MySQL character set name."""
    if not charset:
        return "utf-8"
    name = charset.lower()
    return _CHARSET_CODECS.get(name, name)


def _decode(raw: Any, encoding: str = "utf-8", table: str = "", column: str = "") -> str:
    if isinstance(raw, str):
        return raw
    try:
        return bytes(raw).decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise DecodeError(table, column, encoding, str(e)) from e


def mysql_escape(raw: Any, encoding: str = "utf-8") -> str:
    """Escape a character value so it can be embedded in a quoted MySQL literal."""
    text = _decode(raw, encoding)
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def _parse_int(text: str, table: str, column: str) -> int:
    if not _INTEGER_TEXT.fullmatch(text):
        logger.debug("Non-integer value %r in %s.%s, using 0", text, table, column)
        return 0
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        logger.debug("Integer %s in %s.%s out of 64-bit range, clamping", text, table, column)
        return max(_INT64_MIN, min(value, _INT64_MAX))
    return value


def _parse_float(text: str, table: str, column: str) -> float:
    if not _FLOAT_TEXT.fullmatch(text):
        logger.debug("Non-numeric value %r in %s.%s, using 0.0", text, table, column)
        return 0.0
    return float(text)


def convert_value(
    raw: RawValue,
    column: Column,
    table: str = "",
    type_mapper: Optional[TypeMapper] = None,
    encoding: str = "utf-8",
) -> Any:
    """Convert one raw column value according to its declared type.

    Args:
        raw: Raw bytes from the server, or None for SQL NULL
        column: Column metadata carrying the declared type
        table: Table name, used in error messages
        type_mapper: Type mapper to classify with (defaults to MySQL)
        encoding: Python codec of the connection character set

    Returns:
        int, float, str or bytes depending on the type category; None for NULL

    Raises:
        ClassificationError: If the declared type is not recognised
        DecodeError: If a text value is not valid in ``encoding``
    """
    if raw is None:
        return None

    mapper = type_mapper or MySQLTypeMapper()
    category = mapper.classify(column.data_type)

    if category == ColumnTypeCategory.BINARY:
        return bytes(raw)
    if category == ColumnTypeCategory.UNKNOWN:
        raise ClassificationError(table, column.name, column.data_type)

    text = _decode(raw, encoding, table, column.name)
    if category == ColumnTypeCategory.INTEGER:
        return _parse_int(text, table, column.name)
    elif category == ColumnTypeCategory.FLOAT:
        return _parse_float(text, table, column.name)
    elif category == ColumnTypeCategory.CHARACTER:
        return mysql_escape(text)
    return text


def materialize(
    column_names: Sequence[str],
    raw_values: Sequence[RawValue],
    columns: Optional[Mapping[str, Column]] = None,
    table: str = "",
    type_mapper: Optional[TypeMapper] = None,
    encoding: str = "utf-8",
) -> MaterializedRow:
    """Build a MaterializedRow from one fetched result row.

    Without column metadata every value is decoded as text, which is what
    listing and status queries need. With metadata each value is converted
    by its declared type; a column missing from the metadata stays text.

    Args:
        column_names: Result set column names, in order
        raw_values: One raw value per column, None for SQL NULL
        columns: Optional name -> Column mapping with declared types
        table: Table name, used in error messages
        type_mapper: Type mapper to classify with (defaults to MySQL)
        encoding: Python codec of the connection character set

    Returns:
        The materialized row
    """
    index: Dict[str, int] = {}
    for i, name in enumerate(column_names):
        if name not in index:
            index[name] = i

    mapper = type_mapper or MySQLTypeMapper()
    values = []
    for i, raw in enumerate(raw_values):
        if raw is None:
            values.append(None)
            continue

        column = columns.get(column_names[i]) if columns is not None else None
        if column is None:
            values.append(_decode(raw, encoding, table, column_names[i]))
        else:
            values.append(convert_value(raw, column, table=table, type_mapper=mapper, encoding=encoding))

    return MaterializedRow(columns=index, values=tuple(values))
