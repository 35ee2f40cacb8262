"""Identifier validation for user-controlled column and table names.

Identifiers cannot be bound as parameters, so any name that reaches the SQL
text from outside the program must match a strict grammar: a bare name
(``column``) or a table-qualified one (``table.column``), each part made of
ASCII letters, digits and underscores and not starting with a digit.
"""

from __future__ import annotations

import re
from typing import Any

import structlog

from easyquery.errors import InvalidIdentifierError

logger = structlog.get_logger(__name__)

#: ``name`` or ``table.name``; nothing else.
IDENTIFIER_PATTERN: re.Pattern[str] = re.compile(
    r"[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)?"
)


def is_valid_identifier(identifier: Any) -> bool:
    """Return ``True`` when ``identifier`` is a safe column/table reference."""
    return isinstance(identifier, str) and IDENTIFIER_PATTERN.fullmatch(identifier) is not None


def validate_identifier(identifier: Any) -> str:
    """Validate and return a safe column or table identifier.

    Use this whenever a column or table name comes from user input::

        sort_col = validate_identifier(request.args["sort"])
        Builder.table("users").order_by(f"{sort_col} DESC")

    Args:
        identifier: The candidate name.

    Returns:
        ``identifier`` unchanged.

    Raises:
        InvalidIdentifierError: If ``identifier`` is not a string matching
            ``name`` or ``table.name``.
    """
    if not is_valid_identifier(identifier):
        logger.debug("identifier.rejected", identifier=repr(identifier))
        raise InvalidIdentifierError(identifier)
    return identifier
