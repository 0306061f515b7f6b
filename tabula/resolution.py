"""
Connect every reference to its symbol.

By the time this pass is finished, each Ref points at the Def or Param it means,
and each TypeName at its type. Inside the predicate or projection of a query,
a name that means nothing else is left free: it names a column of the current row.
A term-position name that finds no term may still denote a declared type.

A front end may link references itself; links already present are kept.
"""
from typing import Iterable, NamedTuple
from . import syntax, primitive
from .diagnostics import Report
from .ontology import Symbol, Term, TermSymbol, TypeSymbol
from .space import Space, Layer, Chain, AlreadyExists
from .traversal import TopDown

class _Env(NamedTuple):
	terms: Space[TermSymbol]
	types: Space[TypeSymbol]
	in_query: bool

def resolve_words(program:Term, report:Report):
	"""
	The top-level declarations of a program share one layer per namespace,
	so they may refer to each other regardless of order.
	Declared types go with the types; everything else with the terms.
	"""
	root = primitive.root_scope()
	term_layer, type_layer = Layer(), Layer()
	top = program.stmts if isinstance(program, syntax.Prog) else (program,)
	defs = [s for s in top if isinstance(s, syntax.Def)]
	resolver = Resolver(report)
	resolver.install_each(term_layer, (d for d in defs if d.defines_term()))
	resolver.install_each(type_layer, (d for d in defs if not d.defines_term()))
	env = _Env(Chain(term_layer, root.terms), Chain(type_layer, root.types), False)
	resolver.visit(program, env)

class Resolver(TopDown):
	def __init__(self, report:Report):
		self.report = report
	
	def install_each(self, layer:Layer, symbols:Iterable[Symbol]):
		for symbol in symbols:
			try: layer.define(symbol)
			except AlreadyExists:
				key = symbol.nom.key()
				self.report.redefined(key, layer.locate(key), symbol.nom)
	
	def bind(self, env:_Env, params:Iterable[syntax.Param]) -> _Env:
		params = list(params)
		layer = Layer()
		self.install_each(layer, params)
		for p in params:
			if p.type_expr is not None: self.visit(p.type_expr, env)
		return env._replace(terms=Chain(layer, env.terms))
	
	def query_scope(self, env:_Env, query:syntax.Query) -> _Env:
		return super().query_scope(env, query)._replace(in_query=True)
	
	def visit_Ref(self, ref:syntax.Ref, env:_Env):
		if ref.dfn is not None: return
		key = ref.nom.key()
		symbol = env.terms.symbol(key)
		if symbol is None:
			# A declared type may be mentioned as a term; it just has no value.
			declared = env.types.symbol(key)
			if isinstance(declared, syntax.Def): symbol = declared
		if symbol is not None: ref.dfn = symbol
		elif not env.in_query: self.report.undefined_name(ref.nom)
	
	def visit_TypeName(self, it:syntax.TypeName, env:_Env):
		if it.dfn is not None: return
		symbol = env.types.symbol(it.nom.key())
		if symbol is None: self.report.undefined_name(it.nom)
		else: it.dfn = symbol
	
