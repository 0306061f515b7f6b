"""
The generic machinery every evaluation rule needs,
without the rules themselves. Those live in `runtime` (scalars,
functions, declarations, sequencing) and `relational` (tables).

Evaluation is multi-step and reflexive: a value evaluates to itself,
and so does anything else for which no rule is attached.
"""

from typing import Optional
from . import syntax
from .ontology import Term, Phrase
from .pretty import pretty

class EvaluationError(Exception):
	"""
	Fatal to the evaluation of the whole program.
	The term says where; the message says what, usually quoting the guilty value.
	"""
	def __init__(self, term:Phrase, message:str):
		super().__init__(term, message)
		self.term = term
		self.message = message
	def __str__(self): return "%s (at %s)" % (self.message, pretty(self.term))

class TypeMismatch(EvaluationError): pass
class ArityMismatch(EvaluationError): pass
class IllFormedApplication(EvaluationError): pass
class StructuralError(EvaluationError): pass
class Unsupported(EvaluationError, NotImplementedError): pass

EVALUATE = {}

def evaluate(term:Term) -> Optional[Term]:
	"""
	Reduce a term to its normal form. The one exception:
	a reference to a type declaration has no term to give, so the result is None.
	"""
	try: fn = EVALUATE[type(term)]
	except KeyError: return term
	return fn(term)

def attach_evaluation_methods(python_scope):
	for _k, _v in list(python_scope.items()):
		if _k.startswith("_eval_"):
			_t = _v.__annotations__["term"]
			assert isinstance(_t, type), (_k, _t)
			EVALUATE[_t] = _v

###############################################################################
# Checks on the shape of intermediate values:

def expect_bool(site:Term, value) -> bool:
	if isinstance(value, syntax.Bool): return value.value
	raise TypeMismatch(site, "'%s' is not a boolean value" % _show(value))

def expect_int(site:Term, value) -> int:
	if isinstance(value, syntax.Int): return value.value
	raise TypeMismatch(site, "'%s' is not a numeric value" % _show(value))

def expect_table(site:Term, value) -> syntax.Table:
	if isinstance(value, syntax.Table): return value
	raise TypeMismatch(site, "'%s' is not a table" % _show(value))

def expect_term(site:Term, value) -> Term:
	""" Only a reference to a declared type evaluates to nothing. """
	if value is None: raise TypeMismatch(site, "A type is not a value")
	return value

def _show(value) -> str:
	return "nothing" if value is None else pretty(value)

# Importing the rule modules attaches their rules.
from . import runtime, relational  # NOQA
