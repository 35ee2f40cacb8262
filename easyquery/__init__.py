"""easyquery – a fluent, parameterized SQL statement builder.

Describe the query; get ``(sql, params)`` back.

Public API
----------
``table``
    Start a :class:`Builder` for a table.

``raw`` / ``raw_safe``
    Raw SQL expressions, plain (trusted text) or with validated identifiers.

``safe_identifier``
    Validate a user-supplied column or table name.

Re-exported types
-----------------
``Builder``, ``CompiledSQL``, ``RawExpr``, ``BuilderOptions``, the condition
variants, the diagnostics types, and all error classes.

Example
-------
::

    import easyquery

    sql, params = (
        easyquery.table("users")
        .where({"status": "active", "id": ("IN", [1, 2, 3])})
        .build()
    )
    # SELECT * FROM users WHERE status = ? AND id IN (?, ?, ?)
    # ['active', 1, 2, 3]
    cursor.execute(sql, params)

The placeholder style is the positional ``?`` (DB-API ``qmark``); parameter
order always follows placeholder order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from easyquery.builder import Builder
from easyquery.compile.assembler import QueryAssembler
from easyquery.compile.base import CompiledSQL, Fragment
from easyquery.compile.predicate import PredicateCompiler
from easyquery.diagnostics import BuildEvent, DiagnosticsSink, QueryLog, QueryLogEntry
from easyquery.errors import (
    EasyQueryError,
    EmptyMutationDataError,
    InvalidArgumentError,
    InvalidConditionError,
    InvalidIdentifierError,
    UnsupportedActionError,
)
from easyquery.schema.conditions import (
    Between,
    Compare,
    Condition,
    InSet,
    IsNull,
    RawCompare,
    to_condition,
)
from easyquery.schema.identifier import is_valid_identifier, validate_identifier
from easyquery.schema.options import BuilderOptions
from easyquery.schema.query_spec import Action, Join, JoinType, QuerySpec
from easyquery.schema.raw import RawExpr

__all__ = [
    # Entry points
    "table",
    "raw",
    "raw_safe",
    "safe_identifier",
    # Builder
    "Builder",
    "BuilderOptions",
    "CompiledSQL",
    "Fragment",
    "QueryAssembler",
    "PredicateCompiler",
    # Schema types
    "Action",
    "Join",
    "JoinType",
    "QuerySpec",
    "RawExpr",
    # Conditions
    "Condition",
    "Compare",
    "RawCompare",
    "Between",
    "InSet",
    "IsNull",
    "to_condition",
    # Identifiers
    "is_valid_identifier",
    "validate_identifier",
    # Diagnostics
    "BuildEvent",
    "DiagnosticsSink",
    "QueryLog",
    "QueryLogEntry",
    # Errors
    "EasyQueryError",
    "InvalidIdentifierError",
    "InvalidArgumentError",
    "InvalidConditionError",
    "EmptyMutationDataError",
    "UnsupportedActionError",
]


def table(
    name: str,
    alias: str = "",
    *,
    options: BuilderOptions | None = None,
    sink: DiagnosticsSink | None = None,
) -> Builder:
    """Return a new :class:`Builder` for ``name``.

    Args:
        name: Target table.
        alias: Optional table alias.
        options: Optional :class:`BuilderOptions`.
        sink: Optional diagnostics sink (e.g. a :class:`QueryLog`).
    """
    return Builder(name, alias, options=options, sink=sink)


def raw(sql: str, bindings: Iterable[Any] = ()) -> RawExpr:
    """Wrap trusted SQL text as a :class:`RawExpr`.  Never pass user input."""
    return RawExpr.of(sql, bindings)


def raw_safe(
    template: str,
    identifiers: Mapping[str, str],
    bindings: Iterable[Any] = (),
) -> RawExpr:
    """Build a :class:`RawExpr` substituting validated identifiers into ``template``.

    Raises:
        InvalidIdentifierError: If any identifier is unsafe.
    """
    return RawExpr.with_identifiers(template, identifiers, bindings)


def safe_identifier(identifier: str) -> str:
    """Validate a user-supplied column/table name and return it unchanged.

    Raises:
        InvalidIdentifierError: If the name is not ``name`` or ``table.name``.
    """
    return validate_identifier(identifier)
