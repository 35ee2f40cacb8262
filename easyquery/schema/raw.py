"""Raw SQL expressions: the escape hatch around per-value placeholders.

A :class:`RawExpr` is embedded verbatim wherever it appears (a SET value, a
WHERE operand, a SELECT column).  Its own ``bindings`` are appended to the
parameter stream at the point the fragment is embedded, so ``?`` markers
inside the fragment stay aligned with the final parameter list.

Only trusted text may go into :meth:`RawExpr.of`.  When a column or table
name comes from user input, use :meth:`RawExpr.with_identifiers`, which runs
every substituted name through the identifier validator::

    RawExpr.with_identifiers("COALESCE(SUM({col}), ?)", {"col": user_col}, [0])
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from easyquery.schema.identifier import validate_identifier


class RawExpr(BaseModel):
    """An immutable literal SQL fragment plus its ordered bound values.

    Attributes:
        sql: The SQL text inserted as-is.
        bindings: Values for ``?`` placeholders inside ``sql``, in order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    sql: str
    bindings: tuple[Any, ...] = Field(default_factory=tuple)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def of(cls, sql: str, bindings: Iterable[Any] = ()) -> RawExpr:
        """Wrap trusted SQL text.  No validation is performed.

        Args:
            sql: SQL expression, e.g. ``"NOW()"`` or ``"COALESCE(amount, ?)"``.
            bindings: Values for the ``?`` markers inside ``sql``.
        """
        return cls(sql=sql, bindings=tuple(bindings))

    @classmethod
    def with_identifiers(
        cls,
        template: str,
        identifiers: Mapping[str, str],
        bindings: Iterable[Any] = (),
    ) -> RawExpr:
        """Build an expression by substituting validated identifiers.

        Each ``{name}`` token in ``template`` is replaced literally by
        ``identifiers[name]`` after that identifier passes validation.

        Args:
            template: SQL text containing ``{name}`` markers.
            identifiers: Marker name to column/table name.
            bindings: Values for ``?`` markers, attached unchanged.

        Raises:
            InvalidIdentifierError: If any substituted identifier is unsafe.
        """
        sql = template
        for name, identifier in identifiers.items():
            sql = sql.replace(f"{{{name}}}", validate_identifier(identifier))
        return cls(sql=sql, bindings=tuple(bindings))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def has_bindings(self) -> bool:
        """True when the expression carries bound values."""
        return bool(self.bindings)

    def __str__(self) -> str:
        return self.sql
