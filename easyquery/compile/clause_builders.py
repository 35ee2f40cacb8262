"""Clause-level SQL builders.

Each class renders exactly one clause from a read-only
:class:`~easyquery.schema.query_spec.QuerySpec`.  Builders that can emit
placeholders return a :class:`~easyquery.compile.base.Fragment` so the
assembler can concatenate text and parameters in the same order.

Classes
-------
SelectClauseBuilder   : ``SELECT <cols>`` / ``SELECT COUNT(<col>) AS cnt``
FromClauseBuilder     : ``<table>[ AS <alias>]``
JoinClauseBuilder     : ``<TYPE> JOIN <table>[ AS <alias>] ON <condition>``
WhereClauseBuilder    : ``WHERE <frag> AND <frag> ...``
AssignmentBuilder     : ``col = ?, col = <raw>, ...``
PagingClauseBuilder   : ``LIMIT n[ OFFSET m]``
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from easyquery.compile.base import Fragment
from easyquery.schema.query_spec import Join, QuerySpec
from easyquery.schema.raw import RawExpr


class SelectClauseBuilder:
    """Builds the ``SELECT …`` prefix."""

    def build(self, spec: QuerySpec) -> Fragment:
        if not spec.select_columns:
            return Fragment("SELECT *")

        items: list[str] = []
        params: list[Any] = []
        for column in spec.select_columns:
            if isinstance(column, RawExpr):
                items.append(column.sql)
                params.extend(column.bindings)
            else:
                items.append(column)
        return Fragment(f"SELECT {', '.join(items)}", tuple(params))

    def build_count(self, spec: QuerySpec) -> Fragment:
        return Fragment(f"SELECT COUNT({spec.count_column}) AS cnt")


class FromClauseBuilder:
    """Builds the table reference used after ``FROM`` / ``INTO`` / ``UPDATE``."""

    def build(self, spec: QuerySpec, with_alias: bool = True) -> str:
        if with_alias and spec.table_alias:
            return f"{spec.table} AS {spec.table_alias}"
        return spec.table


class JoinClauseBuilder:
    """Builds a single ``JOIN … ON …`` fragment."""

    def build(self, join: Join) -> str:
        table_sql = f"{join.table} AS {join.alias}" if join.alias else join.table
        return f"{join.type.value} JOIN {table_sql} ON {join.condition}"


class WhereClauseBuilder:
    """Builds ``WHERE …`` from the accumulated, already-compiled fragments."""

    def build(self, spec: QuerySpec) -> Fragment:
        if not spec.where_fragments:
            return Fragment("")
        return Fragment(
            f"WHERE {' AND '.join(spec.where_fragments)}", tuple(spec.where_params)
        )


class AssignmentBuilder:
    """Builds ``col = value`` lists for SET and ON DUPLICATE KEY UPDATE."""

    def build(self, data: Mapping[str, Any]) -> Fragment:
        sets: list[str] = []
        params: list[Any] = []
        for column, value in data.items():
            if isinstance(value, RawExpr):
                sets.append(f"{column} = {value.sql}")
                params.extend(value.bindings)
            else:
                sets.append(f"{column} = ?")
                params.append(value)
        return Fragment(", ".join(sets), tuple(params))


class PagingClauseBuilder:
    """Builds ``LIMIT n[ OFFSET m]``; empty when ``limit`` is 0."""

    def build(self, spec: QuerySpec) -> str:
        if spec.limit <= 0:
            return ""
        sql = f"LIMIT {spec.limit}"
        if spec.offset > 0:
            sql += f" OFFSET {spec.offset}"
        return sql
