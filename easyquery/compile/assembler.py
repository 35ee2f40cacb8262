"""Statement assembly: QuerySpec → parameterized SQL.

``QueryAssembler`` is the top-level orchestrator.  It dispatches on the
QuerySpec's action and stitches clause fragments together in statement order.
Because every clause is rendered as a :class:`~easyquery.compile.base.Fragment`
and fragments are concatenated left to right, the parameter list always
follows placeholder order, e.g. SET values before WHERE values for UPDATE.

Sub-builder hierarchy
---------------------
QueryAssembler
  ├── SelectClauseBuilder
  ├── FromClauseBuilder
  ├── JoinClauseBuilder
  ├── WhereClauseBuilder
  ├── AssignmentBuilder
  └── PagingClauseBuilder

The assembler only reads the QuerySpec; building twice from the same state
yields identical output.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from easyquery.compile.base import CompiledSQL, Fragment
from easyquery.compile.clause_builders import (
    AssignmentBuilder,
    FromClauseBuilder,
    JoinClauseBuilder,
    PagingClauseBuilder,
    SelectClauseBuilder,
    WhereClauseBuilder,
)
from easyquery.errors import EmptyMutationDataError, UnsupportedActionError
from easyquery.schema.query_spec import Action, QuerySpec


def _concat(*parts: Fragment | str) -> Fragment:
    """Join non-empty parts with single spaces, collecting params in order."""
    sql: list[str] = []
    params: list[Any] = []
    for part in parts:
        if isinstance(part, Fragment):
            if part.sql:
                sql.append(part.sql)
            params.extend(part.params)
        elif part:
            sql.append(part)
    return Fragment(" ".join(sql), tuple(params))


class QueryAssembler:
    """Assembles the final statement for a :class:`QuerySpec`."""

    def __init__(self) -> None:
        self._select = SelectClauseBuilder()
        self._from = FromClauseBuilder()
        self._join = JoinClauseBuilder()
        self._where = WhereClauseBuilder()
        self._assign = AssignmentBuilder()
        self._paging = PagingClauseBuilder()
        self._handlers: dict[Action, Callable[[QuerySpec], Fragment]] = {
            Action.SELECT: self._build_select,
            Action.COUNT: self._build_count,
            Action.INSERT: self._build_insert,
            Action.UPDATE: self._build_update,
            Action.DELETE: self._build_delete,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, spec: QuerySpec) -> CompiledSQL:
        """Compile ``spec`` to SQL text and ordered parameters.

        Args:
            spec: The clause state to assemble.  It is not modified.

        Returns:
            :class:`~easyquery.compile.base.CompiledSQL` for ``spec.action``.

        Raises:
            EmptyMutationDataError: INSERT / UPDATE without column data.
            UnsupportedActionError: ``spec.action`` is not a known action.
        """
        handler = self._handlers.get(spec.action)
        if handler is None:
            raise UnsupportedActionError(spec.action)
        fragment = handler(spec)
        return CompiledSQL(
            sql=fragment.sql,
            params=list(fragment.params),
            action=Action(spec.action).value,
        )

    # ------------------------------------------------------------------
    # Per-action assembly
    # ------------------------------------------------------------------

    def _build_select(self, spec: QuerySpec) -> Fragment:
        return _concat(
            self._select.build(spec),
            f"FROM {self._from.build(spec)}",
            self._joins(spec),
            self._where.build(spec),
            f"GROUP BY {spec.group_by}" if spec.group_by else "",
            f"ORDER BY {spec.order_by}" if spec.order_by else "",
            self._paging.build(spec),
        )

    def _build_count(self, spec: QuerySpec) -> Fragment:
        return _concat(
            self._select.build_count(spec),
            f"FROM {self._from.build(spec)}",
            self._joins(spec),
            self._where.build(spec),
            f"GROUP BY {spec.group_by}" if spec.group_by else "",
        )

    def _build_insert(self, spec: QuerySpec) -> Fragment:
        if not spec.mutation_data:
            raise EmptyMutationDataError(Action.INSERT.value)
        sets = self._assign.build(spec.mutation_data)
        upsert = Fragment("")
        if spec.on_duplicate_key_data:
            updates = self._assign.build(spec.on_duplicate_key_data)
            upsert = Fragment(f"ON DUPLICATE KEY UPDATE {updates.sql}", updates.params)
        return _concat(
            f"INSERT INTO {self._from.build(spec, with_alias=False)} SET",
            sets,
            upsert,
        )

    def _build_update(self, spec: QuerySpec) -> Fragment:
        if not spec.mutation_data:
            raise EmptyMutationDataError(Action.UPDATE.value)
        return _concat(
            f"UPDATE {self._from.build(spec, with_alias=False)} SET",
            self._assign.build(spec.mutation_data),
            self._where.build(spec),
        )

    def _build_delete(self, spec: QuerySpec) -> Fragment:
        return _concat(
            f"DELETE FROM {self._from.build(spec)}",
            self._where.build(spec),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _joins(self, spec: QuerySpec) -> str:
        return " ".join(self._join.build(join) for join in spec.joins)
