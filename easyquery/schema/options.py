"""Builder configuration.

``BuilderOptions`` is passed to a :class:`~easyquery.builder.Builder` at
construction time; the defaults reproduce the classic behaviour::

    strict = BuilderOptions(validate_table_names=True, implicit_join_alias=False)
    q = Builder.table("users", "u", options=strict)
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BuilderOptions(BaseModel):
    """Switches that change how a builder records table references.

    Attributes:
        implicit_join_alias: When a join is added without an alias, alias the
            joined table by its first letter (``posts`` -> ``AS p``).  When
            ``False`` the join is emitted unaliased.
        validate_table_names: Run the table name, table alias, and every
            join table / alias through the identifier validator as they are
            set.  Off by default because table names are usually literals.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    implicit_join_alias: bool = True
    validate_table_names: bool = False
