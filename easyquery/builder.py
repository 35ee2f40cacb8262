"""Fluent statement builder.

``Builder`` owns one mutable :class:`~easyquery.schema.query_spec.QuerySpec`.
Every fluent call mutates that QuerySpec in place and returns the same builder;
``build`` reads it without modifying it::

    sql, params = (
        Builder.table("users", "u")
        .select(["u.id", "u.name"])
        .left_join("posts", "u.id = p.user_id", "p")
        .where({"u.status": "active", "u.age": (">=", 18)})
        .or_where({"u.role": "admin", "u.vip": 1})
        .order_by("u.id DESC")
        .limit(20, 40)
        .build()
    )

A builder may be reused for several statements; state persists until a
``clear_*`` call resets it.  Builders are not safe to share between threads.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import structlog

from easyquery.compile.assembler import QueryAssembler
from easyquery.compile.base import CompiledSQL
from easyquery.compile.predicate import PredicateCompiler
from easyquery.diagnostics.query_log import BuildEvent, DiagnosticsSink
from easyquery.errors import EasyQueryError, InvalidArgumentError
from easyquery.schema.identifier import validate_identifier
from easyquery.schema.options import BuilderOptions
from easyquery.schema.query_spec import (
    Action,
    Join,
    JoinType,
    MutationValue,
    QuerySpec,
    SelectColumn,
)
from easyquery.schema.raw import RawExpr

logger = structlog.get_logger(__name__)


class Builder:
    """Accumulates clause state and builds ``(sql, params)``.

    Args:
        table: Target table name.
        alias: Optional table alias.
        options: Builder switches; defaults to ``BuilderOptions()``.
        sink: Optional diagnostics sink notified after every successful build.
    """

    def __init__(
        self,
        table: str,
        alias: str = "",
        *,
        options: BuilderOptions | None = None,
        sink: DiagnosticsSink | None = None,
    ) -> None:
        self._options = options or BuilderOptions()
        self._sink = sink
        self._predicates = PredicateCompiler()
        self._assembler = QueryAssembler()
        self._spec = QuerySpec(table=self._table_name(table))
        self.alias(alias)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def table(
        cls,
        table: str,
        alias: str = "",
        *,
        options: BuilderOptions | None = None,
        sink: DiagnosticsSink | None = None,
    ) -> Builder:
        """Return a fresh builder for ``table``."""
        return cls(table, alias, options=options, sink=sink)

    @staticmethod
    def raw(sql: str, bindings: Iterable[Any] = ()) -> RawExpr:
        """Wrap trusted SQL text, e.g. ``Builder.raw("NOW()")``.

        Never pass user input here; use :meth:`raw_safe` for user-chosen
        column names.
        """
        return RawExpr.of(sql, bindings)

    @staticmethod
    def raw_safe(
        template: str,
        identifiers: Mapping[str, str],
        bindings: Iterable[Any] = (),
    ) -> RawExpr:
        """Build a raw expression from ``{name}`` markers and validated identifiers.

        Raises:
            InvalidIdentifierError: If any identifier is unsafe.
        """
        return RawExpr.with_identifiers(template, identifiers, bindings)

    @staticmethod
    def safe_identifier(identifier: str) -> str:
        """Validate and return a column/table name taken from user input.

        Raises:
            InvalidIdentifierError: If ``identifier`` is not ``name`` or
                ``table.name``.
        """
        return validate_identifier(identifier)

    # ------------------------------------------------------------------
    # Table and columns
    # ------------------------------------------------------------------

    def alias(self, alias: str) -> Builder:
        """Set the alias of the target table (empty string for none)."""
        self._spec.table_alias = self._table_name(alias) if alias else ""
        return self

    def select(self, columns: str | SelectColumn | Sequence[SelectColumn] = "*") -> Builder:
        """Set the SELECT column list.

        Args:
            columns: ``"*"``, a single expression string, a :class:`RawExpr`,
                or a sequence of either.  Raw bindings become parameters in
                column order, ahead of the WHERE parameters.
        """
        if isinstance(columns, (str, RawExpr)):
            self._spec.select_columns = [] if columns == "*" else [columns]
        else:
            self._spec.select_columns = list(columns)
        return self

    # ------------------------------------------------------------------
    # Statement kind and mutation data
    # ------------------------------------------------------------------

    def count(self, column: str = "*") -> Builder:
        """Build ``SELECT COUNT(<column>) AS cnt`` instead of a row SELECT."""
        self._spec.action = Action.COUNT
        self._spec.count_column = column
        return self

    def insert(self, data: Mapping[str, MutationValue]) -> Builder:
        """Build an INSERT; repeated calls merge ``data`` into earlier data.

        A column given again keeps its original position and takes the new
        value.
        """
        self._spec.action = Action.INSERT
        self._spec.mutation_data.update(data)
        return self

    def update(self, data: Mapping[str, MutationValue]) -> Builder:
        """Build an UPDATE; repeated calls merge like :meth:`insert`."""
        self._spec.action = Action.UPDATE
        self._spec.mutation_data.update(data)
        return self

    def delete(self) -> Builder:
        """Build a DELETE."""
        self._spec.action = Action.DELETE
        return self

    def on_duplicate_key_update(self, data: Mapping[str, MutationValue]) -> Builder:
        """Add ``ON DUPLICATE KEY UPDATE`` assignments (INSERT only).

        Merges like :meth:`insert`.  Ignored by every other action.
        """
        self._spec.on_duplicate_key_data.update(data)
        return self

    # ------------------------------------------------------------------
    # Joins
    # ------------------------------------------------------------------

    def join(
        self,
        table: str,
        condition: str,
        alias: str = "",
        type: str = "INNER",
    ) -> Builder:
        """Append a JOIN.

        Args:
            table: Table to join.
            condition: Pre-formed ON condition, e.g. ``"u.id = p.user_id"``.
            alias: Alias for ``table``.  When empty and
                ``implicit_join_alias`` is on, the first letter of ``table``.
            type: ``INNER``, ``LEFT``, ``RIGHT`` or ``FULL`` (any case).

        Raises:
            InvalidArgumentError: On an unknown join type.
        """
        try:
            join_type = JoinType(type.strip().upper())
        except ValueError as exc:
            raise InvalidArgumentError(
                f"Unsupported join type: {type!r}",
                details={"type": type, "allowed": [t.value for t in JoinType]},
            ) from exc

        if not alias and self._options.implicit_join_alias:
            alias = table[:1]
        self._spec.joins.append(
            Join(
                type=join_type,
                table=self._table_name(table),
                alias=self._table_name(alias) if alias else "",
                condition=condition,
            )
        )
        return self

    def inner_join(self, table: str, condition: str, alias: str = "") -> Builder:
        return self.join(table, condition, alias, "INNER")

    def left_join(self, table: str, condition: str, alias: str = "") -> Builder:
        return self.join(table, condition, alias, "LEFT")

    def right_join(self, table: str, condition: str, alias: str = "") -> Builder:
        return self.join(table, condition, alias, "RIGHT")

    def full_join(self, table: str, condition: str, alias: str = "") -> Builder:
        return self.join(table, condition, alias, "FULL")

    # ------------------------------------------------------------------
    # WHERE
    # ------------------------------------------------------------------

    def where(self, conditions: Mapping[str, Any]) -> Builder:
        """AND a group of conditions onto the WHERE clause.

        Conditions inside the group are AND-joined too::

            .where({"status": "active", "price": (">=", 100)})
            # WHERE status = ? AND price >= ?

        Raises:
            InvalidConditionError: If a condition value is malformed.
        """
        fragment = self._predicates.build(conditions, "AND")
        if fragment:
            self._spec.where_fragments.append(fragment.sql)
            self._spec.where_params.extend(fragment.params)
        return self

    def or_where(self, conditions: Mapping[str, Any]) -> Builder:
        """AND a parenthesised OR-group onto the WHERE clause::

            .where({"role": "admin"}).or_where({"role": "mod", "vip": 1})
            # WHERE role = ? AND (role = ? OR vip = ?)
        """
        fragment = self._predicates.build(conditions, "OR")
        if fragment:
            self._spec.where_fragments.append(f"({fragment.sql})")
            self._spec.where_params.extend(fragment.params)
        return self

    # ------------------------------------------------------------------
    # Grouping, ordering, paging
    # ------------------------------------------------------------------

    def group_by(self, group_by: str) -> Builder:
        self._spec.group_by = group_by
        return self

    def order_by(self, order_by: str) -> Builder:
        """Set the ORDER BY expression, e.g. ``"created_at DESC, id"``."""
        self._spec.order_by = order_by
        return self

    def limit(self, limit: int, offset: int = 0) -> Builder:
        """Set LIMIT and OFFSET.  ``limit=0`` removes the LIMIT clause.

        Raises:
            InvalidArgumentError: If either value is not a non-negative int.
        """
        self._spec.limit = _non_negative("limit", limit)
        self._spec.offset = _non_negative("offset", offset)
        return self

    def offset(self, offset: int) -> Builder:
        """Set OFFSET only; it is emitted only when a LIMIT is set."""
        self._spec.offset = _non_negative("offset", offset)
        return self

    # ------------------------------------------------------------------
    # Resets
    # ------------------------------------------------------------------

    def clear_where(self) -> Builder:
        self._spec.where_fragments = []
        self._spec.where_params = []
        return self

    def clear_select(self) -> Builder:
        self._spec.select_columns = []
        return self

    def clear_join(self) -> Builder:
        self._spec.joins = []
        return self

    def clear_group_by(self) -> Builder:
        self._spec.group_by = ""
        return self

    def clear_order_by(self) -> Builder:
        self._spec.order_by = ""
        return self

    def clear_limit(self) -> Builder:
        self._spec.limit = 0
        self._spec.offset = 0
        return self

    def clear_data(self) -> Builder:
        """Drop INSERT / UPDATE data and ON DUPLICATE KEY UPDATE data."""
        self._spec.mutation_data = {}
        self._spec.on_duplicate_key_data = {}
        return self

    def clear_all(self) -> Builder:
        """Reset every clause to its default; the table and alias are kept."""
        self._spec = QuerySpec(table=self._spec.table, table_alias=self._spec.table_alias)
        return self

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    @property
    def spec(self) -> QuerySpec:
        """The live clause state.  Read it; mutate through builder methods."""
        return self._spec

    def build(self, sink: DiagnosticsSink | None = None) -> CompiledSQL:
        """Assemble the statement without modifying the builder.

        Args:
            sink: Diagnostics sink for this call; overrides the builder's.

        Returns:
            :class:`~easyquery.compile.base.CompiledSQL`.

        Raises:
            EmptyMutationDataError: INSERT / UPDATE without data.
            UnsupportedActionError: Unknown action.
        """
        try:
            compiled = self._assembler.build(self._spec)
        except EasyQueryError as exc:
            logger.debug(
                "builder.build_failed",
                action=self._spec.action,
                table=self._spec.table,
                error=exc.code,
            )
            raise

        logger.debug(
            "builder.built",
            action=compiled.action,
            table=self._spec.table,
            sql=compiled.sql,
            param_count=len(compiled.params),
        )

        target = sink or self._sink
        if target is not None:
            target(
                BuildEvent(
                    action=compiled.action,
                    state=self._spec.snapshot(),
                    compiled=compiled,
                )
            )
        return compiled

    def get(self) -> CompiledSQL:
        """Alias for :meth:`build`."""
        return self.build()

    def get_sql(self) -> str:
        """Return only the SQL text of :meth:`build`."""
        return self._assembler.build(self._spec).sql

    def get_params(self) -> list[Any]:
        """Return only the parameters of :meth:`build`."""
        return self._assembler.build(self._spec).params

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _table_name(self, name: str) -> str:
        if self._options.validate_table_names:
            return validate_identifier(name)
        return name


def _non_negative(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(
            f"{name} must be a non-negative integer, got {value!r}",
            details={name: value},
        )
    return value
