"""Normalization of server-generated object definitions.

SHOW CREATE output embeds session and environment details (the definer
account, the current AUTO_INCREMENT counter, the connection charset, the
view algorithm, the row format) that do not change what the object is.
canonicalize() strips them so two logically identical objects on
different servers produce identical text. ENGINE= is kept.
"""

import re

STRIP_PATTERNS = [
    re.compile(r"DEFINER=[^ ]* "),
    re.compile(r"AUTO_INCREMENT=[^ ]* "),
    re.compile(r"DEFAULT CHARSET=[^ ]* "),
    re.compile(r"ALGORITHM=[^ ]* "),
    re.compile(r"ROW_FORMAT=[^ ]* "),
]

SQL_SECURITY_DEFINER = "SQL SECURITY DEFINER "


def _strip_once(text: str) -> str:
    for pattern in STRIP_PATTERNS:
        text = pattern.sub("", text)
    return text.replace(SQL_SECURITY_DEFINER, "")


def canonicalize(raw: str) -> str:
    """Strip environment-specific clauses from a definition and trim it."""
    result = raw
    while True:
        # removing one clause can splice the text around it into another
        stripped = _strip_once(result)
        if stripped == result:
            break
        result = stripped
    return result.strip()
