"""Test helpers: placeholder counting and parameter inlining."""

from __future__ import annotations

from typing import Any


def placeholder_count(sql: str) -> int:
    """Return the number of positional ``?`` markers in ``sql``."""
    return sql.count("?")


def inline_params(sql: str, params: list[Any]) -> str:
    """Substitute ``params`` into ``sql`` left to right, for readable asserts.

    Strings are single-quoted and ``None`` renders as ``NULL``.  The test
    fails loudly if the marker and parameter counts disagree.

    Args:
        sql: Statement with positional ``?`` placeholders.
        params: Values in placeholder order.

    Returns:
        The statement with every ``?`` replaced by its literal.
    """
    pieces = sql.split("?")
    assert len(pieces) - 1 == len(params), (
        f"{len(pieces) - 1} placeholders but {len(params)} params: {sql!r}"
    )
    out = [pieces[0]]
    for value, tail in zip(params, pieces[1:]):
        out.append(_literal(value))
        out.append(tail)
    return "".join(out)


def _literal(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    return str(value)
