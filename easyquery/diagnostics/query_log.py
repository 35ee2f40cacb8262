"""Build diagnostics: the sink protocol and an in-memory query log.

A sink is any callable accepting a :class:`BuildEvent`.  It is handed to a
builder explicitly, never registered globally::

    log = QueryLog()
    q = Builder.table("users", sink=log).where({"id": 1})
    q.build()
    log.metrics["select_queries"]   # 1

Sinks observe; they cannot change what ``build`` returns.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Protocol

from easyquery.compile.base import CompiledSQL
from easyquery.schema.query_spec import Action


@dataclass(frozen=True)
class BuildEvent:
    """Emitted once per successful ``build``.

    Attributes:
        action: The statement kind that was built.
        state: Detached copy of the clause state before assembly.
        compiled: The produced SQL and parameters.
    """

    action: str
    state: dict[str, Any]
    compiled: CompiledSQL


class DiagnosticsSink(Protocol):
    """Receives one :class:`BuildEvent` per build."""

    def __call__(self, event: BuildEvent) -> None: ...


def _empty_metrics() -> dict[str, int]:
    metrics = {"total_queries": 0}
    for action in Action:
        metrics[f"{action.value}_queries"] = 0
    return metrics


@dataclass
class QueryLogEntry:
    """One recorded build.

    Attributes:
        id: 1-based sequence number within the log.
        action: Statement kind.
        state: Clause state before assembly.
        sql: Produced SQL text.
        params: Produced parameters.
        elapsed: Seconds since the log was created or last reset.
    """

    id: int
    action: str
    state: dict[str, Any]
    sql: str
    params: list[Any]
    elapsed: float


@dataclass
class QueryLog:
    """In-memory :class:`DiagnosticsSink` collecting builds and per-action counts."""

    entries: list[QueryLogEntry] = field(default_factory=list)
    metrics: dict[str, int] = field(default_factory=_empty_metrics)
    _started: float = field(default_factory=time.perf_counter, repr=False)

    def __call__(self, event: BuildEvent) -> None:
        self.metrics["total_queries"] += 1
        self.metrics[f"{event.action}_queries"] += 1
        self.entries.append(
            QueryLogEntry(
                id=len(self.entries) + 1,
                action=event.action,
                state=event.state,
                sql=event.compiled.sql,
                params=list(event.compiled.params),
                elapsed=time.perf_counter() - self._started,
            )
        )

    def reset(self) -> None:
        """Drop all entries, zero the metrics and restart the clock."""
        self.entries = []
        self.metrics = _empty_metrics()
        self._started = time.perf_counter()
