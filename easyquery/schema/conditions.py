"""Typed WHERE condition variants.

Callers describe conditions with plain Python values::

    {"status": "active"}                      # implicit equality
    {"price": (">=", 100)}                    # operator pair
    {"age": ("BETWEEN", [18, 65])}
    {"id": ("IN", [1, 2, 3])}
    {"deleted_at": ("IS", None)}
    {"created_at": ("<", RawExpr.of("NOW()"))}

:func:`to_condition` resolves each value into exactly one of the closed
variants below at the call boundary, so the predicate compiler only ever
dispatches on type, never on shape or arity.  Operators are matched
case-insensitively against a closed table and stored in canonical
upper-case form.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Set
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, field_validator

from easyquery.errors import InvalidConditionError
from easyquery.schema.raw import RawExpr

_FROZEN = ConfigDict(frozen=True, extra="forbid")

# ---------------------------------------------------------------------------
# Operator groups (frozensets for O(1) membership tests)
# ---------------------------------------------------------------------------

#: Operator used for bare (non-pair) condition values.
EQUALS = "="

#: Binary comparison operators: ``col OP ?``.
COMPARISON_OPS: frozenset[str] = frozenset({"=", "<", ">", "<=", ">=", "!=", "<>", "<=>"})

#: Pattern-match operators: ``col OP ?`` with a pattern value.
PATTERN_OPS: frozenset[str] = frozenset({"LIKE", "NOT LIKE", "REGEXP", "NOT REGEXP"})

#: Range operator: operand is a ``[low, high]`` pair.
RANGE_OP = "BETWEEN"

#: Membership operators mapped to their ``negated`` flag.
MEMBERSHIP_OPS: dict[str, bool] = {"IN": False, "NOT IN": True}

#: Null-check operators mapped to their ``negated`` flag (operand must be None).
NULL_OPS: dict[str, bool] = {"IS": False, "IS NOT": True}

#: Every operator allowed into the SQL text.
SUPPORTED_OPS: frozenset[str] = (
    COMPARISON_OPS | PATTERN_OPS | {RANGE_OP} | frozenset(MEMBERSHIP_OPS) | frozenset(NULL_OPS)
)


def normalize_operator(op: str) -> str:
    """Return the canonical upper-case form used for operator dispatch."""
    return " ".join(op.split()).upper()


# ---------------------------------------------------------------------------
# Concrete condition types
# ---------------------------------------------------------------------------


class Compare(BaseModel):
    """``col OP ?`` with one bound value."""

    model_config = _FROZEN

    op: str = EQUALS
    value: Any = None


class RawCompare(BaseModel):
    """``col OP <raw sql>``; the raw fragment's bindings are the params."""

    model_config = _FROZEN

    op: str = EQUALS
    raw: RawExpr


class Between(BaseModel):
    """``col BETWEEN ? AND ?``."""

    model_config = _FROZEN

    low: Any
    high: Any


class InSet(BaseModel):
    """``col [NOT] IN (?, ?, ...)``; never empty."""

    model_config = _FROZEN

    values: tuple[Any, ...]
    negated: bool = False

    @field_validator("values")
    @classmethod
    def _non_empty(cls, values: tuple[Any, ...]) -> tuple[Any, ...]:
        if not values:
            raise InvalidConditionError(None, "IN expects at least one value")
        return values


class IsNull(BaseModel):
    """``col IS [NOT] NULL`` with no bound value."""

    model_config = _FROZEN

    negated: bool = False


Condition = Union[Compare, RawCompare, Between, InSet, IsNull]

_CONDITION_TYPES = (Compare, RawCompare, Between, InSet, IsNull)


# ---------------------------------------------------------------------------
# Call-boundary resolution
# ---------------------------------------------------------------------------


def to_condition(column: str, value: Any) -> Condition:
    """Resolve a raw condition value into a typed :data:`Condition`.

    Args:
        column: The column the condition applies to (used in error messages).
        value: A bare scalar / :class:`RawExpr`, an ``(operator, operand)``
            pair, or an already-typed condition.

    Returns:
        The matching condition variant.

    Raises:
        InvalidConditionError: If the value has an unrecognised shape, the
            operator is not in :data:`SUPPORTED_OPS`, a ``BETWEEN`` operand is
            not a two-element list, an ``IN`` operand is empty or not a
            collection, or a typed ``Compare`` uses an operator that belongs
            to another variant.
    """
    if isinstance(value, _CONDITION_TYPES):
        if isinstance(value, (Compare, RawCompare)):
            return _check_typed(column, value)
        return value

    if isinstance(value, RawExpr):
        return RawCompare(op=EQUALS, raw=value)

    if not isinstance(value, (list, tuple)):
        return Compare(op=EQUALS, value=value)

    if len(value) != 2 or not isinstance(value[0], str):
        raise InvalidConditionError(
            column, "expected a scalar, a RawExpr, or an (operator, operand) pair"
        )

    op, operand = value
    op = _check_operator(column, op)

    if op == RANGE_OP:
        if not isinstance(operand, (list, tuple)) or len(operand) != 2:
            raise InvalidConditionError(column, "BETWEEN expects a [low, high] pair")
        return Between(low=operand[0], high=operand[1])

    if op in MEMBERSHIP_OPS:
        if isinstance(operand, RawExpr):
            return RawCompare(op=op, raw=operand)
        values = _membership_values(column, op, operand)
        if not values:
            raise InvalidConditionError(column, f"{op} expects at least one value")
        return InSet(values=values, negated=MEMBERSHIP_OPS[op])

    if op in NULL_OPS and operand is None:
        return IsNull(negated=NULL_OPS[op])

    if isinstance(operand, RawExpr):
        return RawCompare(op=op, raw=operand)
    return Compare(op=op, value=operand)


def _check_operator(column: str, op: str) -> str:
    key = normalize_operator(op)
    if key not in SUPPORTED_OPS:
        raise InvalidConditionError(column, f"unsupported operator {op!r}")
    return key


def _check_typed(column: str, condition: Compare | RawCompare) -> Compare | RawCompare:
    op = _check_operator(column, condition.op)
    if op == RANGE_OP:
        raise InvalidConditionError(column, "use Between for BETWEEN conditions")
    if isinstance(condition, Compare):
        if op in MEMBERSHIP_OPS:
            raise InvalidConditionError(column, f"use InSet for {op} conditions")
        if op in NULL_OPS and condition.value is None:
            raise InvalidConditionError(column, f"use IsNull for {op} NULL conditions")
    if op != condition.op:
        return condition.model_copy(update={"op": op})
    return condition


def _membership_values(column: str, op: str, operand: Any) -> tuple[Any, ...]:
    # Sets are sorted so the same set always yields the same SQL params.
    if isinstance(operand, Set):
        try:
            return tuple(sorted(operand))
        except TypeError as exc:
            raise InvalidConditionError(
                column, f"{op} set values must be mutually comparable; pass a list"
            ) from exc
    if isinstance(operand, (str, bytes, Mapping)) or not isinstance(operand, Iterable):
        raise InvalidConditionError(column, f"{op} expects a list of values")
    return tuple(operand)
