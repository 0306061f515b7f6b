"""
Capture-avoiding simultaneous substitution.

The substitution is a pure tree-rebuilding transformation: it never mutates
the term it works on, and it never looks inside the replacement terms.
Keys are either parameter symbols, which replace the references linked to them,
or column labels (strings), which replace free references of that name.

When some replacement mentions a binder's own parameter free,
that binder gets a fresh parameter (named x'1, x'2, ... within one call)
and its body is renamed in the same pass.
"""
from typing import Mapping, Sequence
from boozetools.support.foundation import Visitor
from . import syntax
from .ontology import Nom, Term, Symbol
from .traversal import TopDown

Key = Symbol | str
Bindings = Mapping[Key, Term]

def substitute(term:Term, bindings:Bindings) -> Term:
	if not bindings: return term
	return Substitution().visit(term, dict(bindings))

def free_symbols(term:Term) -> set[syntax.Param]:
	""" Parameters referenced within the term but bound outside it """
	finder = FreeSymbols()
	finder.visit(term, frozenset())
	return finder.found

class FreeSymbols(TopDown):
	def __init__(self):
		self.found = set()
	
	def bind(self, env:frozenset, params): return env.union(params)
	
	def visit_Ref(self, ref:syntax.Ref, env:frozenset):
		if isinstance(ref.dfn, syntax.Param) and ref.dfn not in env:
			self.found.add(ref.dfn)
	
	def visit_Def(self, d:syntax.Def, env):
		# Declarations are closed; their bodies are not part of whoever mentions them.
		pass

class Substitution(Visitor):
	def __init__(self):
		self._counter = 0
	
	def _fresh(self, p:syntax.Param) -> syntax.Param:
		self._counter += 1
		base = p.nom.text.split("'")[0]
		return syntax.Param(Nom("%s'%d" % (base, self._counter), p.nom.spot), p.type_expr)
	
	def _enter(self, params:Sequence[syntax.Param], bindings:dict) -> tuple[list[syntax.Param], dict]:
		""" Shadow, then rename whatever would otherwise capture. """
		inner = {k:v for k,v in bindings.items() if k not in params}
		if not inner: return list(params), inner
		free_in_replacements = set()
		for v in inner.values(): free_in_replacements |= free_symbols(v)
		fresh = []
		for p in params:
			if p in free_in_replacements:
				q = self._fresh(p)
				inner[p] = syntax.Ref.to(q).at(p.nom.spot)
				fresh.append(q)
			else:
				fresh.append(p)
		return fresh, inner
	
	def _each(self, items, bindings):
		return [self.visit(i, bindings) for i in items]
	
	def _keep(self, it, bindings): return it
	visit_Bool = visit_Int = visit_Str = visit_Unit = visit_Def = _keep
	visit_TypeName = visit_ArrowType = visit_RecordType = visit_TableType = _keep
	
	def visit_Ref(self, ref:syntax.Ref, bindings:dict):
		key = ref.nom.text if ref.dfn is None else ref.dfn
		return bindings.get(key, ref)
	
	def visit_Abs(self, it:syntax.Abs, bindings:dict):
		(param,), inner = self._enter([it.param], bindings)
		if not inner: return it
		return syntax.Abs(param, self.visit(it.body, inner)).at(it.spot)
	
	def visit_Fn(self, it:syntax.Fn, bindings:dict):
		params, inner = self._enter(it.params, bindings)
		if not inner: return it
		return syntax.Fn(params, self.visit(it.body, inner)).at(it.spot)
	
	def visit_App(self, it:syntax.App, bindings:dict):
		return syntax.App(self.visit(it.abs, bindings), self.visit(it.arg, bindings)).at(it.spot)
	
	def visit_Call(self, it:syntax.Call, bindings:dict):
		return syntax.Call(self.visit(it.fn, bindings), self._each(it.args, bindings)).at(it.spot)
	
	def visit_Print(self, it:syntax.Print, bindings:dict):
		return syntax.Print(self.visit(it.expr, bindings)).at(it.spot)
	
	def visit_Prog(self, it:syntax.Prog, bindings:dict):
		return syntax.Prog(self._each(it.stmts, bindings)).at(it.spot)
	
	def visit_Comma(self, it:syntax.Comma, bindings:dict):
		return syntax.Comma(self._each(it.items, bindings)).at(it.spot)
	
	def visit_If(self, it:syntax.If, bindings:dict):
		cond, then_part, else_part = self._each((it.cond, it.then_part, it.else_part), bindings)
		return syntax.If(cond, then_part, else_part).at(it.spot)
	
	def _unary(self, it, bindings:dict):
		return type(it)(self.visit(it.arg, bindings)).at(it.spot)
	visit_Succ = visit_Pred = visit_Iszero = visit_Not = _unary
	
	def _binary(self, it, bindings:dict):
		return type(it)(self.visit(it.lhs, bindings), self.visit(it.rhs, bindings)).at(it.spot)
	visit_And = visit_Or = visit_Equals = visit_Less = _binary
	visit_Union = visit_Intersect = visit_Except = _binary
	
	def visit_Init(self, it:syntax.Init, bindings:dict):
		return syntax.Init(it.label, self.visit(it.value, bindings)).at(it.spot)
	
	def visit_Record(self, it:syntax.Record, bindings:dict):
		return syntax.Record(self._each(it.members, bindings)).at(it.spot)
	
	def visit_Table(self, it:syntax.Table, bindings:dict):
		return syntax.Table(it.schema, self._each(it.members, bindings)).at(it.spot)
	
	def visit_Mem(self, it:syntax.Mem, bindings:dict):
		return syntax.Mem(self.visit(it.target, bindings), it.member).at(it.spot)
	
	def visit_Proj(self, it:syntax.Proj, bindings:dict):
		return syntax.Proj(self.visit(it.target, bindings), it.labels).at(it.spot)
	
	def _query_body(self, it:syntax.Query, bindings:dict):
		# Free names inside a query denote its own columns, so column keys stop here.
		scoped = {k:v for k,v in bindings.items() if not isinstance(k, str)}
		row, inner = self._enter([it.row] if it.row else [], scoped)
		predicate, projection = it.predicate, it.projection
		if inner:
			if predicate is not None: predicate = self.visit(predicate, inner)
			if projection is not None: projection = self._each(projection, inner)
		return projection, predicate, (row[0] if row else None)
	
	def visit_SelectFromWhere(self, it:syntax.SelectFromWhere, bindings:dict):
		source = self.visit(it.source, bindings)
		projection, predicate, row = self._query_body(it, bindings)
		return syntax.SelectFromWhere(projection, source, predicate, row).at(it.spot)
	
	def visit_Join(self, it:syntax.Join, bindings:dict):
		lhs, rhs = self.visit(it.lhs, bindings), self.visit(it.rhs, bindings)
		projection, predicate, row = self._query_body(it, bindings)
		return syntax.Join(lhs, rhs, predicate, projection, row).at(it.spot)
