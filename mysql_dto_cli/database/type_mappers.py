"""MySQL native type to TypeScript type mapping."""

import re
from enum import Enum
from typing import List, Optional, Sequence, Tuple


class TypeCategory(str, Enum):
    """Target type categories for generated fields."""
    NUMERIC = "numeric"
    TEXTUAL = "textual"
    OPAQUE = "opaque"

    def to_ts_type(self) -> str:
        """Render the category as a TypeScript type."""
        if self is TypeCategory.NUMERIC:
            return "number"
        elif self is TypeCategory.TEXTUAL:
            return "string"
        elif self is TypeCategory.OPAQUE:
            return "any"
        raise ValueError(f"Unhandled type category: {self!r}")


# Order matters: patterns are unanchored, so "int" also matches "bigint",
# "tinyint", "point", ... First match wins. Specific numeric types go before
# the bare "int", "float" and "double" rules at the end of the table.
# There is intentionally no rule for bare "mediumint" or "binary"; those fall
# through to the generic patterns.
MYSQL_TYPE_RULES: List[Tuple[TypeCategory, str]] = [
    (TypeCategory.NUMERIC, r"bigint unsigned"),
    (TypeCategory.NUMERIC, r"bigint"),
    (TypeCategory.NUMERIC, r"smallint unsigned"),
    (TypeCategory.NUMERIC, r"smallint"),
    (TypeCategory.NUMERIC, r"tinyint unsigned"),
    (TypeCategory.NUMERIC, r"tinyint\(\d+\)"),
    (TypeCategory.NUMERIC, r"tinyint"),
    (TypeCategory.NUMERIC, r"mediumint unsigned"),
    (TypeCategory.NUMERIC, r"decimal\(\d+,\d+\) unsigned"),
    (TypeCategory.NUMERIC, r"decimal\(\d+,\d+\)"),
    (TypeCategory.NUMERIC, r"float unsigned"),
    (TypeCategory.NUMERIC, r"float\(\d+,\d+\)"),
    (TypeCategory.NUMERIC, r"double\(\d+,\d+\)"),
    (TypeCategory.OPAQUE, r"varbinary\(\d+\)"),
    (TypeCategory.OPAQUE, r"binary\(\d+\)"),
    (TypeCategory.OPAQUE, r"longblob"),
    (TypeCategory.OPAQUE, r"mediumblob"),
    (TypeCategory.OPAQUE, r"blob"),
    (TypeCategory.OPAQUE, r"json"),
    (TypeCategory.TEXTUAL, r"varchar\(\d+\)"),
    (TypeCategory.TEXTUAL, r"char\(\d+\)"),
    (TypeCategory.TEXTUAL, r"enum\(.+\)"),
    (TypeCategory.TEXTUAL, r"set\(.+\)"),
    (TypeCategory.TEXTUAL, r"longtext"),
    (TypeCategory.TEXTUAL, r"mediumtext"),
    (TypeCategory.TEXTUAL, r"text"),
    (TypeCategory.TEXTUAL, r"datetime"),
    (TypeCategory.TEXTUAL, r"timestamp\(\d+\)"),
    (TypeCategory.TEXTUAL, r"timestamp"),
    (TypeCategory.TEXTUAL, r"time\(\d+\)"),
    (TypeCategory.TEXTUAL, r"time"),
    (TypeCategory.NUMERIC, r"int unsigned"),
    (TypeCategory.NUMERIC, r"int"),
    (TypeCategory.NUMERIC, r"float"),
    (TypeCategory.NUMERIC, r"double"),
]


class TypeMapper:
    """Maps a column's native type description to a TypeCategory.

    Each rule pattern is searched case-insensitively anywhere in the type
    description; the category of the first matching rule is returned.
    Descriptions matching no rule map to ``fallback``.
    """

    def __init__(
        self,
        rules: Optional[Sequence[Tuple[TypeCategory, str]]] = None,
        fallback: TypeCategory = TypeCategory.OPAQUE,
    ):
        if rules is None:
            rules = MYSQL_TYPE_RULES
        self.rules = [(category, re.compile(pattern, re.IGNORECASE)) for category, pattern in rules]
        self.fallback = fallback

    def match_rule(self, native_type: str) -> Optional[int]:
        """Return the index of the first rule matching ``native_type``."""
        for index, (_, regex) in enumerate(self.rules):
            if regex.search(native_type):
                return index
        return None

    def to_category(self, native_type: str) -> TypeCategory:
        index = self.match_rule(native_type or "")
        if index is None:
            return self.fallback
        return self.rules[index][0]

    def to_ts_type(self, native_type: str) -> str:
        """Convert a MySQL type to a TypeScript type."""
        return self.to_category(native_type).to_ts_type()
