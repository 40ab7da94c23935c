"""Identifier case conversion.

Table names and static descriptor names are derived from the type's
identifier text only, so these helpers are pure functions of a string.

    >>> to_table_case("UserAccount")
    'user_account'
    >>> to_table_case("HTTPRequestLog")
    'http_request_log'
    >>> to_screaming_snake_case("userAccount")
    'USER_ACCOUNT'

No pluralization is applied: ``User`` maps to ``user``, not ``users``.
"""

from __future__ import annotations

import re

# "HTTPRequest" -> "HTTP_Request"
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
# "userAccount" -> "user_Account", "Item2Tag" -> "Item2_Tag"
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")
_SEPARATORS = re.compile(r"[\s\-_]+")


def to_snake_case(identifier: str) -> str:
    """Convert a PascalCase, camelCase or separated identifier to snake_case."""
    text = _SEPARATORS.sub("_", identifier.strip())
    text = _ACRONYM_BOUNDARY.sub(r"\1_\2", text)
    text = _WORD_BOUNDARY.sub(r"\1_\2", text)
    return text.strip("_").lower()


def to_table_case(identifier: str) -> str:
    """Table name for a type identifier (lower snake case, not pluralized)."""
    return to_snake_case(identifier)


def to_screaming_snake_case(identifier: str) -> str:
    return to_snake_case(identifier).upper()


__all__ = [
    "to_snake_case",
    "to_table_case",
    "to_screaming_snake_case",
]
