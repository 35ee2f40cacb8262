"""Unit tests for build diagnostics: sinks, QueryLog and structured logging."""
from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from easyquery.builder import Builder
from easyquery.diagnostics import BuildEvent, QueryLog
from easyquery.errors import EmptyMutationDataError, InvalidIdentifierError
from easyquery.schema.identifier import validate_identifier


class TestQueryLog:
    def test_records_each_build(self, query_log):
        q = Builder.table("users", sink=query_log).where({"id": 1})
        q.build()
        q.count().build()
        q.clear_all().insert({"name": "x"}).build()

        assert [e.id for e in query_log.entries] == [1, 2, 3]
        assert [e.action for e in query_log.entries] == ["select", "count", "insert"]
        assert query_log.entries[0].sql == "SELECT * FROM users WHERE id = ?"
        assert query_log.entries[0].params == [1]
        assert query_log.metrics == {
            "total_queries": 3,
            "select_queries": 1,
            "insert_queries": 1,
            "update_queries": 0,
            "delete_queries": 0,
            "count_queries": 1,
        }

    def test_elapsed_is_monotonic(self, query_log):
        q = Builder.table("users", sink=query_log)
        q.build()
        q.build()
        first, second = query_log.entries
        assert 0 <= first.elapsed <= second.elapsed

    def test_state_snapshot_is_detached(self, query_log):
        q = Builder.table("users", "u", sink=query_log).select(["u.id"]).where({"u.id": 1})
        q.build()
        q.where({"u.role": "admin"}).select(["u.name"])

        state = query_log.entries[0].state
        assert state["table"] == "users"
        assert state["alias"] == "u"
        assert state["action"] == "select"
        assert state["select"] == ["u.id"]
        assert state["where"] == ["u.id = ?"]
        assert state["where_params"] == [1]

    def test_reset(self, query_log):
        Builder.table("users", sink=query_log).build()
        query_log.reset()
        assert query_log.entries == []
        assert query_log.metrics["total_queries"] == 0


class TestSinkDispatch:
    def test_sink_receives_build_event(self):
        events: list[BuildEvent] = []
        r = Builder.table("users", sink=events.append).delete().where({"id": 4}).build()
        assert len(events) == 1
        event = events[0]
        assert event.action == "delete"
        assert event.compiled == r
        assert event.state["where_params"] == [4]

    def test_sink_does_not_change_output(self, query_log):
        plain = Builder.table("users").where({"id": 4}).build()
        logged = Builder.table("users", sink=query_log).where({"id": 4}).build()
        assert plain == logged

    def test_per_call_sink_overrides_builder_sink(self, query_log):
        other = QueryLog()
        q = Builder.table("users", sink=query_log)
        q.build(sink=other)
        assert query_log.entries == []
        assert other.metrics["select_queries"] == 1

    def test_no_event_on_failed_build(self, query_log):
        q = Builder.table("users", sink=query_log).update({})
        with pytest.raises(EmptyMutationDataError):
            q.build()
        assert query_log.entries == []

    def test_read_helpers_do_not_notify(self, query_log):
        q = Builder.table("users", sink=query_log)
        q.get_sql()
        q.get_params()
        assert query_log.metrics["total_queries"] == 0
        q.get()
        assert query_log.metrics["total_queries"] == 1


class TestLogging:
    def test_built_event_logged_without_param_values(self):
        with capture_logs() as logs:
            Builder.table("users").where({"password": "hunter2"}).build()

        built = [entry for entry in logs if entry["event"] == "builder.built"]
        assert len(built) == 1
        assert built[0]["action"] == "select"
        assert built[0]["table"] == "users"
        assert built[0]["sql"] == "SELECT * FROM users WHERE password = ?"
        assert built[0]["param_count"] == 1
        assert built[0]["log_level"] == "debug"
        assert "hunter2" not in repr(built[0])

    def test_build_failure_logged(self):
        with capture_logs() as logs:
            with pytest.raises(EmptyMutationDataError):
                Builder.table("users").insert({}).build()

        failed = [entry for entry in logs if entry["event"] == "builder.build_failed"]
        assert len(failed) == 1
        assert failed[0]["table"] == "users"
        assert failed[0]["error"] == "EMPTY_MUTATION_DATA"

    def test_rejected_identifier_logged(self):
        with capture_logs() as logs:
            with pytest.raises(InvalidIdentifierError):
                validate_identifier("a; b")

        assert logs == [
            {"event": "identifier.rejected", "identifier": "'a; b'", "log_level": "debug"}
        ]
