"""Include/exclude name filtering for object listings."""

from typing import FrozenSet, Iterable, List


def parse_name_list(value: str) -> FrozenSet[str]:
    """Split a comma-separated name list into a lower-cased set."""
    if not value:
        return frozenset()
    return frozenset(
        part.strip() for part in value.lower().split(",") if part.strip()
    )


class NameFilter:
    """Case-insensitive allow/deny lists applied after enumeration.

    An object is kept when the include list is empty or names it, and the
    exclude list does not name it. Matching is exact membership, not a
    pattern match.
    """

    def __init__(self, include: str = "", exclude: str = ""):
        self.include = parse_name_list(include)
        self.exclude = parse_name_list(exclude)

    def matches(self, name: str) -> bool:
        lower_name = name.lower()
        if self.include and lower_name not in self.include:
            return False
        if self.exclude and lower_name in self.exclude:
            return False
        return True

    def apply(self, names: Iterable[str]) -> List[str]:
        """Filter names, keeping their original order."""
        return [name for name in names if self.matches(name)]
