"""
Evaluation rules for everything except tables:
conditionals, arithmetic on naturals, boolean connectives, comparisons,
application and calls (by substitution, call-by-value),
references and declarations (memoized), and sequencing with print.

The small value-level functions below each rule are shared with the stepper,
so single-step and multi-step reduction cannot drift apart.
"""
from typing import Optional, Sequence
from . import syntax
from .ontology import Term
from .pretty import pretty
from .substitution import substitute
from .values import is_value, is_same
from .evaluator import (
	evaluate, attach_evaluation_methods, expect_bool, expect_int, expect_term, _show,
	TypeMismatch, ArityMismatch, IllFormedApplication, StructuralError,
)

def emit(text:str):
	""" The one externally observable effect of the language. """
	print(text)

def _flag(site:Term, truth:bool) -> syntax.Bool:
	return syntax.Bool(truth).at(site.spot)

###############################################################################

#    t1 ->* true                      t1 ->* false
#    ---------------------------      ---------------------------
#    if t1 then t2 else t3 ->* t2     if t1 then t2 else t3 ->* t3

def branch(term:syntax.If, cond:Term) -> Term:
	return term.then_part if expect_bool(term, cond) else term.else_part

def _eval_if(term:syntax.If):
	return evaluate(branch(term, evaluate(term.cond)))

# Naturals do not go negative: the predecessor of zero is zero.

def successor(term:syntax.Succ, n:Term) -> Term:
	return syntax.Int(expect_int(term, n) + 1).at(term.spot)

def predecessor(term:syntax.Pred, n:Term) -> Term:
	z = expect_int(term, n)
	return n if z == 0 else syntax.Int(z - 1).at(term.spot)

def zero_test(term:syntax.Iszero, n:Term) -> Term:
	return _flag(term, expect_int(term, n) == 0)

ARITHMETIC = {
	syntax.Succ: successor,
	syntax.Pred: predecessor,
	syntax.Iszero: zero_test,
}

def _eval_succ(term:syntax.Succ): return successor(term, evaluate(term.arg))
def _eval_pred(term:syntax.Pred): return predecessor(term, evaluate(term.arg))
def _eval_iszero(term:syntax.Iszero): return zero_test(term, evaluate(term.arg))

# Both operands of a connective get evaluated; there is no short-cut.

def conjunction(term:syntax.And, a:Term, b:Term) -> Term:
	return _flag(term, expect_bool(term, a) & expect_bool(term, b))

def disjunction(term:syntax.Or, a:Term, b:Term) -> Term:
	return _flag(term, expect_bool(term, a) | expect_bool(term, b))

def negation(term:syntax.Not, a:Term) -> Term:
	return _flag(term, not expect_bool(term, a))

def equality(term:syntax.Equals, a:Term, b:Term) -> Term:
	for v in a, b:
		if not is_value(v): raise TypeMismatch(term, "'%s' is not a value" % _show(v))
	return _flag(term, is_same(a, b))

def less_than(term:syntax.Less, a:Term, b:Term) -> Term:
	return _flag(term, expect_int(term, a) < expect_int(term, b))

BINARY = {
	syntax.And: conjunction,
	syntax.Or: disjunction,
	syntax.Equals: equality,
	syntax.Less: less_than,
}

def _binary(term:syntax.Binary):
	lhs = evaluate(term.lhs)
	rhs = evaluate(term.rhs)
	return BINARY[type(term)](term, lhs, rhs)

def _eval_and(term:syntax.And): return _binary(term)
def _eval_or(term:syntax.Or): return _binary(term)
def _eval_equals(term:syntax.Equals): return _binary(term)
def _eval_less(term:syntax.Less): return _binary(term)
def _eval_not(term:syntax.Not): return negation(term, evaluate(term.arg))

###############################################################################

#        t1 ->* \x.t        t2 ->* v
#    ---------------------------------- E-app
#         t1 t2 ->* [x->v]t

def expect_abs(term:syntax.App, target:Term) -> syntax.Abs:
	if isinstance(target, syntax.Abs): return target
	raise IllFormedApplication(term, "ill-formed application target '%s'" % _show(target))

def beta(target:syntax.Abs, arg:Term) -> Term:
	return substitute(target.body, {target.param: arg})

def _eval_app(term:syntax.App):
	target = expect_abs(term, evaluate(term.abs))
	arg = expect_term(term, evaluate(term.arg))
	return evaluate(beta(target, arg))

# A call is like an application, except that all arguments
# get evaluated in turn and then substituted simultaneously.

def expect_fn(term:syntax.Call, target:Term) -> syntax.Fn:
	if not isinstance(target, syntax.Fn):
		raise IllFormedApplication(term, "ill-formed call target '%s'" % _show(target))
	need, got = len(target.params), len(term.args)
	if need != got:
		plural = '' if need == 1 else 's'
		raise ArityMismatch(term, "This takes %d argument%s, but got %d instead." % (need, plural, got))
	return target

def instantiate(target:syntax.Fn, args:Sequence[Term]) -> Term:
	return substitute(target.body, dict(zip(target.params, args)))

def _eval_call(term:syntax.Call):
	target = expect_fn(term, evaluate(term.fn))
	args = [expect_term(term, evaluate(a)) for a in term.args]
	return evaluate(instantiate(target, args))

###############################################################################

def force(dfn:syntax.Def, site:Term) -> Term:
	"""
	Evaluate a declaration's term at most once. The declaration node itself
	keeps the result, so every reference to it sees the same value.
	"""
	if dfn.state == syntax.Def.IN_PROGRESS:
		raise StructuralError(site, "'%s' is defined in terms of itself" % dfn.nom.text)
	if dfn.state == syntax.Def.UNEVALUATED:
		dfn.state = syntax.Def.IN_PROGRESS
		try: value = evaluate(dfn.value)
		except Exception:
			dfn.state = syntax.Def.UNEVALUATED
			raise
		dfn.value, dfn.state = value, syntax.Def.EVALUATED
	return dfn.value

def dereference(term:syntax.Ref) -> Optional[Term]:
	"""
	A reference to a declared term is its value. A reference to a declared type
	has nothing to evaluate, hence None. A parameter is left alone.
	"""
	dfn = term.dfn
	if isinstance(dfn, syntax.Def):
		return force(dfn, term) if dfn.defines_term() else None
	if dfn is None:
		raise StructuralError(term, "Nothing called '%s' is in scope here" % term.nom.text)
	return term

def _eval_ref(term:syntax.Ref): return dereference(term)

def _eval_def(term:syntax.Def):
	if term.defines_term(): force(term, term)
	return term

###############################################################################

#          t ->* v
#    ------------------- E-print-term      print v -> unit     print T -> unit
#    print t ->* print v

def show(term:syntax.Print, value:Optional[Term]) -> Term:
	emit(pretty(term.expr if value is None else value))
	return syntax.Unit().at(term.spot)

def _eval_print(term:syntax.Print):
	value = evaluate(term.expr) if isinstance(term.expr, Term) else None
	return show(term, value)

def check_nonempty(term:syntax.Prog):
	if not term.stmts: raise StructuralError(term, "A program needs at least one statement")

def _eval_prog(term:syntax.Prog):
	check_nonempty(term)
	result = None
	for stmt in term.stmts:
		result = evaluate(stmt)
	return result

def _eval_comma(term:syntax.Comma):
	""" A comma-list standing alone is only good for its effects, so its value is unit. """
	for item in term.items:
		evaluate(item)
	return syntax.Unit().at(term.spot)

attach_evaluation_methods(globals())
