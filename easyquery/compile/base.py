"""Compiler output records: CompiledSQL and Fragment."""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Fragment:
    """A piece of SQL text and the bind values its ``?`` markers consume.

    Attributes:
        sql: SQL text with positional ``?`` placeholders.
        params: Values for those placeholders, left to right.
    """

    sql: str
    params: tuple[Any, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.sql)


@dataclass(frozen=True)
class CompiledSQL:
    """The output of a successful build.

    Unpacks as ``sql, params = compiled`` so it can be handed straight to a
    DB-API cursor::

        sql, params = Builder.table("users").where({"id": 7}).build()
        cursor.execute(sql, params)

    Attributes:
        sql: The statement with positional ``?`` placeholders.
        params: Bind values ordered exactly as the placeholders appear.
        action: The statement kind (``'select'``, ``'insert'``, ...).
    """

    sql: str
    params: list[Any] = field(default_factory=list)
    action: str = "select"

    def __iter__(self) -> Iterator[Any]:
        yield self.sql
        yield list(self.params)

    def to_dict(self) -> dict[str, Any]:
        """Return ``{"sql": ..., "params": [...]}``."""
        return {"sql": self.sql, "params": list(self.params)}
