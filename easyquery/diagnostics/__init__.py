"""easyquery build diagnostics."""
from easyquery.diagnostics.query_log import (
    BuildEvent,
    DiagnosticsSink,
    QueryLog,
    QueryLogEntry,
)

__all__ = [
    "BuildEvent",
    "DiagnosticsSink",
    "QueryLog",
    "QueryLogEntry",
]
