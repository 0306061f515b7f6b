"""
Single-step reduction, for tracing and debugging.

`step` applies exactly one rule and returns the result, which may well
still be reducible; it returns None once nothing applies any more.
Congruence rules work on the leftmost reducible part first, in the
same order `evaluate` would. The redex rules share their arithmetic,
their substitution and their table algebra with the multi-step rules.

Two redexes are coarser than the rest. Forcing a declaration is one step,
because a declaration is evaluated exactly once no matter who asks.
Combining tables is one step, and the row predicates and projection
expressions inside it are evaluated outright.
"""
from typing import Iterator, Optional
from . import syntax, runtime, relational
from .ontology import Term
from .evaluator import EVALUATE, Unsupported, expect_table

STEP = {}

def step(term:Term) -> Optional[Term]:
	try: fn = STEP[type(term)]
	except KeyError:
		if type(term) in EVALUATE:
			raise Unsupported(term, "There is no single-step rule for %s" % type(term).__name__)
		return None
	return fn(term)

def reduction_sequence(term:Term) -> Iterator[Term]:
	""" The term, then each successive step, ending with the first irreducible one. """
	while term is not None:
		yield term
		term = step(term)

def _advance(parts:tuple) -> Optional[tuple]:
	for i, part in enumerate(parts):
		if isinstance(part, Term):
			reduced = step(part)
			if reduced is not None:
				return parts[:i] + (reduced,) + parts[i+1:]

def _step_if(term:syntax.If):
	if (cond := step(term.cond)) is not None:
		return syntax.If(cond, term.then_part, term.else_part).at(term.spot)
	return runtime.branch(term, term.cond)

def _arithmetic(term:syntax.Arithmetic):
	if (arg := step(term.arg)) is not None:
		return type(term)(arg).at(term.spot)
	return runtime.ARITHMETIC[type(term)](term, term.arg)

def _step_succ(term:syntax.Succ): return _arithmetic(term)
def _step_pred(term:syntax.Pred): return _arithmetic(term)
def _step_iszero(term:syntax.Iszero): return _arithmetic(term)

def _step_not(term:syntax.Not):
	if (arg := step(term.arg)) is not None:
		return syntax.Not(arg).at(term.spot)
	return runtime.negation(term, term.arg)

def _binary(term:syntax.Binary):
	parts = _advance((term.lhs, term.rhs))
	if parts is not None: return type(term)(*parts).at(term.spot)
	return runtime.BINARY[type(term)](term, term.lhs, term.rhs)

def _step_and(term:syntax.And): return _binary(term)
def _step_or(term:syntax.Or): return _binary(term)
def _step_equals(term:syntax.Equals): return _binary(term)
def _step_less(term:syntax.Less): return _binary(term)

def _step_app(term:syntax.App):
	if (target := step(term.abs)) is not None:
		return syntax.App(target, term.arg).at(term.spot)
	target = runtime.expect_abs(term, term.abs)
	if (arg := step(term.arg)) is not None:
		return syntax.App(target, arg).at(term.spot)
	return runtime.beta(target, term.arg)

def _step_call(term:syntax.Call):
	if (target := step(term.fn)) is not None:
		return syntax.Call(target, term.args).at(term.spot)
	target = runtime.expect_fn(term, term.fn)
	args = _advance(term.args)
	if args is not None: return syntax.Call(target, args).at(term.spot)
	return runtime.instantiate(target, term.args)

def _step_ref(term:syntax.Ref):
	value = runtime.dereference(term)
	return None if value is term else value

def _step_def(term:syntax.Def):
	if term.defines_term() and not term.is_evaluated:
		runtime.force(term, term)
		return term

def _step_print(term:syntax.Print):
	if isinstance(term.expr, Term) and (expr := step(term.expr)) is not None:
		return syntax.Print(expr).at(term.spot)
	# Whatever is left cannot reduce: a value, or something to print as written.
	return runtime.show(term, None)

def _step_prog(term:syntax.Prog):
	runtime.check_nonempty(term)
	first, rest = term.stmts[0], term.stmts[1:]
	if (reduced := step(first)) is not None:
		return syntax.Prog((reduced,) + rest).at(term.spot)
	return syntax.Prog(rest).at(term.spot) if rest else first

def _step_comma(term:syntax.Comma):
	items = _advance(term.items)
	if items is not None: return syntax.Comma(items).at(term.spot)
	return syntax.Unit().at(term.spot)

def _step_init(term:syntax.Init):
	if (value := step(term.value)) is not None:
		return syntax.Init(term.label, value).at(term.spot)

def _step_record(term:syntax.Record):
	members = _advance(term.members)
	if members is not None: return syntax.Record(members).at(term.spot)

def _step_table(term:syntax.Table):
	rows = _advance(term.members)
	if rows is not None: return syntax.Table(term.schema, rows).at(term.spot)
	relational.conform(term, term)

def _step_mem(term:syntax.Mem):
	if (target := step(term.target)) is not None:
		return syntax.Mem(target, term.member).at(term.spot)
	return relational.member(term, term.target)

def _step_proj(term:syntax.Proj):
	if (target := step(term.target)) is not None:
		return syntax.Proj(target, term.labels).at(term.spot)
	return relational.projection(term, term.target)

def _step_select_from_where(term:syntax.SelectFromWhere):
	if (source := step(term.source)) is not None:
		return syntax.SelectFromWhere(term.projection, source, term.predicate, term.row).at(term.spot)
	return relational.run_query(term, expect_table(term, term.source))

def _step_join(term:syntax.Join):
	parts = _advance((term.lhs, term.rhs))
	if parts is not None:
		lhs, rhs = parts
		return syntax.Join(lhs, rhs, term.predicate, term.projection, term.row).at(term.spot)
	return relational.run_query(term, relational.cross(term, term.lhs, term.rhs))

def _set_operation(term:syntax.SetOperation):
	parts = _advance((term.lhs, term.rhs))
	if parts is not None: return type(term)(*parts).at(term.spot)
	return relational.SET_OPERATIONS[type(term)](term, term.lhs, term.rhs)

def _step_union(term:syntax.Union): return _set_operation(term)
def _step_intersect(term:syntax.Intersect): return _set_operation(term)
def _step_except(term:syntax.Except): return _set_operation(term)

for _k, _v in list(globals().items()):
	if _k.startswith("_step_"):
		STEP[_v.__annotations__["term"]] = _v
