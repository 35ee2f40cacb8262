"""Shared pytest fixtures for easyquery unit tests."""
from __future__ import annotations

import pytest

from easyquery.builder import Builder
from easyquery.diagnostics import QueryLog
from easyquery.schema.options import BuilderOptions


@pytest.fixture
def users() -> Builder:
    """Fresh builder on ``users`` with default options."""
    return Builder.table("users")


@pytest.fixture
def query_log() -> QueryLog:
    """Empty in-memory diagnostics sink."""
    return QueryLog()


@pytest.fixture
def strict_options() -> BuilderOptions:
    """Table names validated, no implicit join aliases."""
    return BuilderOptions(implicit_join_alias=False, validate_table_names=True)
