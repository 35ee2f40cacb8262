"""Predicate compiler: condition mappings to boolean SQL fragments.

``PredicateCompiler`` turns an ordered ``column -> condition`` mapping into a
single :class:`~easyquery.compile.base.Fragment`.  Conditions are compiled in
mapping order and their parameters are collected in the same order, so the
i-th ``?`` of the fragment always binds the i-th parameter.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from easyquery.compile.base import Fragment
from easyquery.errors import InvalidArgumentError
from easyquery.schema.conditions import (
    Between,
    Compare,
    Condition,
    InSet,
    IsNull,
    RawCompare,
    to_condition,
)

Connective = Literal["AND", "OR"]


class PredicateCompiler:
    """Compiles condition mappings for WHERE clauses.

    The compiler holds no state; one instance can be shared freely.
    """

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(
        self,
        conditions: Mapping[str, Any],
        connective: Connective = "AND",
    ) -> Fragment:
        """Compile ``conditions`` joined by ``connective``.

        Args:
            conditions: Ordered ``column -> value`` mapping.  Values are
                resolved with :func:`~easyquery.schema.conditions.to_condition`.
            connective: ``"AND"`` or ``"OR"``.

        Returns:
            The joined fragment; empty when ``conditions`` is empty.

        Raises:
            InvalidConditionError: If a value cannot be resolved.
        """
        if connective not in ("AND", "OR"):
            raise InvalidArgumentError(f"Unknown connective: {connective!r}")

        parts: list[str] = []
        params: list[Any] = []
        for column, value in conditions.items():
            fragment = self.compile_condition(column, to_condition(column, value))
            parts.append(fragment.sql)
            params.extend(fragment.params)
        return Fragment(f" {connective} ".join(parts), tuple(params))

    def compile_condition(self, column: str, condition: Condition) -> Fragment:
        """Compile a single typed condition on ``column``."""
        if isinstance(condition, Compare):
            return Fragment(f"{column} {condition.op.strip()} ?", (condition.value,))

        if isinstance(condition, RawCompare):
            return Fragment(
                f"{column} {condition.op.strip()} {condition.raw.sql}",
                condition.raw.bindings,
            )

        if isinstance(condition, Between):
            return Fragment(
                f"{column} BETWEEN ? AND ?", (condition.low, condition.high)
            )

        if isinstance(condition, InSet):
            keyword = "NOT IN" if condition.negated else "IN"
            placeholders = ", ".join("?" for _ in condition.values)
            return Fragment(f"{column} {keyword} ({placeholders})", condition.values)

        if isinstance(condition, IsNull):
            keyword = "IS NOT NULL" if condition.negated else "IS NULL"
            return Fragment(f"{column} {keyword}")

        raise InvalidArgumentError(
            f"Unknown condition type: {type(condition).__name__}",
            details={"column": column},
        )
