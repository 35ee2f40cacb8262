"""easyquery schema models: QuerySpec, RawExpr, conditions, and options."""
from easyquery.schema.conditions import (
    Between,
    Compare,
    Condition,
    InSet,
    IsNull,
    RawCompare,
    to_condition,
)
from easyquery.schema.identifier import is_valid_identifier, validate_identifier
from easyquery.schema.options import BuilderOptions
from easyquery.schema.query_spec import Action, Join, JoinType, QuerySpec
from easyquery.schema.raw import RawExpr

__all__ = [
    "Action",
    "Between",
    "BuilderOptions",
    "Compare",
    "Condition",
    "InSet",
    "IsNull",
    "Join",
    "JoinType",
    "QuerySpec",
    "RawCompare",
    "RawExpr",
    "is_valid_identifier",
    "to_condition",
    "validate_identifier",
]
