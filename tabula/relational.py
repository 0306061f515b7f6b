"""
Evaluation rules for the relational extension.

Three primitives do the real work:

* product:  every row of one table against every row of another, fields concatenated.
* select:   keep the rows for which the predicate, with that row's fields substituted in, is true.
* project:  build a new row per old row from a list of labelled expressions.

Everything else (member access, select-from-where, join) is composed from those.
The set operators (union, intersect, except) compare rows structurally and drop duplicates.
Table operators evaluate both operands before combining them.
"""
from typing import Optional, Sequence
from . import syntax
from .ontology import Nom, Term
from .pretty import pretty
from .substitution import substitute
from .values import is_value, value_key, distinct
from .evaluator import (
	evaluate, attach_evaluation_methods, expect_bool, expect_table, expect_term, _show,
	TypeMismatch, StructuralError,
)

def _table(site:Term, schema:Sequence[str], rows:Sequence[syntax.Record]) -> syntax.Table:
	return syntax.Table(schema, rows).at(site.spot)

def _row_bindings(record:syntax.Record, row:Optional[syntax.Param]) -> dict:
	bindings = {m.key(): m.value for m in record.members}
	if row is not None: bindings[row] = record
	return bindings

def _within_row(expr:Term, record:syntax.Record, row:Optional[syntax.Param]) -> Term:
	return evaluate(substitute(expr, _row_bindings(record, row)))

###############################################################################
# The primitives:

def product(site:Term, t1:syntax.Table, t2:syntax.Table) -> syntax.Table:
	clash = [c for c in t2.schema if c in t1.schema]
	if clash:
		raise TypeMismatch(site, "Both tables have a column called %s" % ', '.join(map(repr, clash)))
	rows = [
		syntax.Record(r1.members + r2.members).at(site.spot)
		for r1 in t1.members
		for r2 in t2.members
	]
	return _table(site, t1.schema + t2.schema, rows)

def select(site:Term, predicate:Optional[Term], table:syntax.Table, row:Optional[syntax.Param]=None) -> syntax.Table:
	if predicate is None: return table
	kept = [r for r in table.members if expect_bool(site, _within_row(predicate, r, row))]
	return _table(site, table.schema, kept)

def project(site:Term, projection:Optional[Sequence[syntax.Init]], table:syntax.Table, row:Optional[syntax.Param]=None) -> syntax.Table:
	if projection is None: return table
	labels = [i.key() for i in projection]
	repeated = sorted(set(l for l in labels if labels.count(l) > 1))
	if repeated:
		raise TypeMismatch(site, "A projection names column %s more than once" % ', '.join(map(repr, repeated)))
	rows = []
	for record in table.members:
		fields = [syntax.Init(i.label, _within_row(i.value, record, row)).at(i.spot) for i in projection]
		rows.append(syntax.Record(fields).at(site.spot))
	return _table(site, labels, rows)

###############################################################################
# Literals: evaluate the fields left to right, then check rows against the schema.

def conform(site:syntax.Table, table:syntax.Table) -> syntax.Table:
	for record in table.members:
		if record.labels() != table.schema:
			pattern = "This row does not fit the schema [%s]: %s"
			raise TypeMismatch(site, pattern % (', '.join(table.schema), pretty(record)))
	return table

def _eval_init(term:syntax.Init):
	value = expect_term(term, evaluate(term.value))
	return term if value is term.value else syntax.Init(term.label, value).at(term.spot)

def _eval_record(term:syntax.Record):
	members = [_eval_init(m) for m in term.members]
	if all(a is b for a, b in zip(members, term.members)): return term
	return syntax.Record(members).at(term.spot)

def _eval_table(term:syntax.Table):
	rows = [_eval_record(r) for r in term.members]
	if all(a is b for a, b in zip(rows, term.members)): return conform(term, term)
	return conform(term, _table(term, term.schema, rows))

###############################################################################
# Field and column access:

def _columns(site:Term, table:syntax.Table, labels:Sequence[Nom]) -> syntax.Table:
	missing = [l.text for l in labels if l.text not in table.schema]
	if missing:
		raise StructuralError(site, "This table has no column called %s" % ', '.join(map(repr, missing)))
	keys = [l.text for l in labels]
	rows = []
	for record in table.members:
		by_label = {m.key(): m for m in record.members}
		rows.append(syntax.Record([by_label[k] for k in keys]).at(record.spot))
	return _table(site, keys, rows)

def member(term:syntax.Mem, target:Term) -> Term:
	if isinstance(target, syntax.Record):
		value = target.field(term.member.text)
		if value is None:
			raise StructuralError(term, "This record has no field called '%s'" % term.member.text)
		return value
	if isinstance(target, syntax.Table):
		return _columns(term, target, [term.member])
	raise TypeMismatch(term, "'%s' is neither a record nor a table" % _show(target))

def _eval_mem(term:syntax.Mem): return member(term, evaluate(term.target))

def projection(term:syntax.Proj, target:Term) -> Term:
	if isinstance(target, syntax.Record):
		missing = [l.text for l in term.labels if target.field(l.text) is None]
		if missing:
			raise StructuralError(term, "This record has no field called %s" % ', '.join(map(repr, missing)))
		by_label = {m.key(): m for m in target.members}
		return syntax.Record([by_label[l.text] for l in term.labels]).at(term.spot)
	if isinstance(target, syntax.Table):
		return _columns(term, target, term.labels)
	raise TypeMismatch(term, "'%s' is neither a record nor a table" % _show(target))

def _eval_proj(term:syntax.Proj): return projection(term, evaluate(term.target))

###############################################################################
# Queries:

def run_query(term:syntax.Query, table:syntax.Table) -> syntax.Table:
	chosen = select(term, term.predicate, table, term.row)
	return project(term, term.projection, chosen, term.row)

def _eval_select_from_where(term:syntax.SelectFromWhere):
	source = expect_table(term, evaluate(term.source))
	return run_query(term, source)

def cross(term:syntax.Join, lhs:Term, rhs:Term) -> syntax.Table:
	return product(term, expect_table(term, lhs), expect_table(term, rhs))

def _eval_join(term:syntax.Join):
	lhs = evaluate(term.lhs)
	rhs = evaluate(term.rhs)
	return run_query(term, cross(term, lhs, rhs))

###############################################################################
# Set operators. The schema comes from the left operand.

def _operands(term:syntax.SetOperation, lhs:Term, rhs:Term) -> tuple[syntax.Table, syntax.Table]:
	t1, t2 = expect_table(term, lhs), expect_table(term, rhs)
	if t1.schema != t2.schema:
		pattern = "Schemas [%s] and [%s] do not match"
		raise TypeMismatch(term, pattern % (', '.join(t1.schema), ', '.join(t2.schema)))
	for t in t1, t2:
		if not is_value(t): raise TypeMismatch(term, "'%s' holds something other than values" % pretty(t))
	return t1, t2

def union(term:syntax.Union, lhs:Term, rhs:Term) -> syntax.Table:
	t1, t2 = _operands(term, lhs, rhs)
	return _table(term, t1.schema, distinct(t1.members + t2.members))

def intersection(term:syntax.Intersect, lhs:Term, rhs:Term) -> syntax.Table:
	t1, t2 = _operands(term, lhs, rhs)
	present = set(map(value_key, t2.members))
	return _table(term, t1.schema, distinct(r for r in t1.members if value_key(r) in present))

def difference(term:syntax.Except, lhs:Term, rhs:Term) -> syntax.Table:
	t1, t2 = _operands(term, lhs, rhs)
	absent = set(map(value_key, t2.members))
	return _table(term, t1.schema, distinct(r for r in t1.members if value_key(r) not in absent))

SET_OPERATIONS = {
	syntax.Union: union,
	syntax.Intersect: intersection,
	syntax.Except: difference,
}

def _combine(term:syntax.SetOperation):
	lhs = evaluate(term.lhs)
	rhs = evaluate(term.rhs)
	return SET_OPERATIONS[type(term)](term, lhs, rhs)

def _eval_union(term:syntax.Union): return _combine(term)
def _eval_intersect(term:syntax.Intersect): return _combine(term)
def _eval_except(term:syntax.Except): return _combine(term)

attach_evaluation_methods(globals())
