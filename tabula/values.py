"""
Which terms are values, and when two values are the same.

Structural equality goes through a canonical hashable key, so the
set operators can deduplicate with a dictionary instead of pairwise scans.
"""
from typing import Hashable, Iterable
from . import syntax
from .ontology import Term

SCALAR = (syntax.Bool, syntax.Int, syntax.Str, syntax.Unit)
CALLABLE = (syntax.Abs, syntax.Fn)

def is_value(term) -> bool:
	if isinstance(term, SCALAR + CALLABLE): return True
	if isinstance(term, syntax.Record): return all(is_value(m.value) for m in term.members)
	if isinstance(term, syntax.Table): return all(map(is_value, term.members))
	return False

def value_key(term:Term) -> Hashable:
	"""
	Two values are structurally equal exactly when their keys are.
	Records ignore the order of their fields; tables ignore the order
	of their columns and rows, and also any repetition of rows.
	Functions are only ever equal to themselves.
	"""
	kind = type(term)
	if kind in (syntax.Bool, syntax.Int, syntax.Str):
		return kind.__name__, term.value
	if kind is syntax.Unit:
		return "unit",
	if kind is syntax.Record:
		return "record", frozenset((m.key(), value_key(m.value)) for m in term.members)
	if kind is syntax.Table:
		return "table", frozenset(term.schema), frozenset(map(value_key, term.members))
	if isinstance(term, CALLABLE):
		return "function", id(term)
	raise ValueError("Not a value: %r" % term)

def is_same(a:Term, b:Term) -> bool:
	return value_key(a) == value_key(b)

def distinct(records:Iterable[syntax.Record]) -> list[syntax.Record]:
	""" Drop structural duplicates, keeping the first occurrence of each. """
	seen = {}
	for r in records:
		seen.setdefault(value_key(r), r)
	return list(seen.values())
