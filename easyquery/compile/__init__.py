"""easyquery compilation layer: QuerySpec → parameterized SQL."""
from easyquery.compile.assembler import QueryAssembler
from easyquery.compile.base import CompiledSQL, Fragment
from easyquery.compile.predicate import PredicateCompiler

__all__ = [
    "CompiledSQL",
    "Fragment",
    "PredicateCompiler",
    "QueryAssembler",
]
