"""
Convenience base-class to handle the dreary bits of a
perfectly ordinary top-down walk through a term.

Subclasses decide what a binder does to the environment
by overriding `bind`; queries bind their row through `query_scope`.
"""
from typing import Iterable
from boozetools.support.foundation import Visitor
from . import syntax

class TopDown(Visitor):
	
	def bind(self, env, params:Iterable[syntax.Param]): return env
	
	def query_scope(self, env, query:syntax.Query):
		return self.bind(env, [query.row] if query.row else ())
	
	def tour(self, items, env):
		for i in items:
			self.visit(i, env)
	
	def _leaf(self, it, env): pass
	visit_Bool = visit_Int = visit_Str = visit_Unit = _leaf
	
	def visit_Ref(self, ref:syntax.Ref, env): pass
	
	def visit_Def(self, d:syntax.Def, env):
		self.visit(d.value, env)
	
	def visit_Abs(self, it:syntax.Abs, env):
		self.visit(it.body, self.bind(env, [it.param]))
	
	def visit_Fn(self, it:syntax.Fn, env):
		self.visit(it.body, self.bind(env, it.params))
	
	def visit_App(self, it:syntax.App, env):
		self.visit(it.abs, env)
		self.visit(it.arg, env)
	
	def visit_Call(self, it:syntax.Call, env):
		self.visit(it.fn, env)
		self.tour(it.args, env)
	
	def visit_Print(self, it:syntax.Print, env):
		self.visit(it.expr, env)
	
	def visit_Prog(self, it:syntax.Prog, env):
		self.tour(it.stmts, env)
	
	def visit_Comma(self, it:syntax.Comma, env):
		self.tour(it.items, env)
	
	def visit_If(self, it:syntax.If, env):
		self.visit(it.cond, env)
		self.visit(it.then_part, env)
		self.visit(it.else_part, env)
	
	def _unary(self, it, env):
		self.visit(it.arg, env)
	visit_Succ = visit_Pred = visit_Iszero = visit_Not = _unary
	
	def _binary(self, it:syntax.Binary, env):
		self.visit(it.lhs, env)
		self.visit(it.rhs, env)
	visit_And = visit_Or = visit_Equals = visit_Less = _binary
	visit_Union = visit_Intersect = visit_Except = _binary
	
	def visit_Init(self, it:syntax.Init, env):
		self.visit(it.value, env)
	
	def visit_Record(self, it:syntax.Record, env):
		self.tour(it.members, env)
	
	def visit_Table(self, it:syntax.Table, env):
		self.tour(it.members, env)
	
	def visit_Mem(self, it:syntax.Mem, env):
		self.visit(it.target, env)
	
	def visit_Proj(self, it:syntax.Proj, env):
		self.visit(it.target, env)
	
	def _query_body(self, it:syntax.Query, env):
		inner = self.query_scope(env, it)
		if it.predicate is not None: self.visit(it.predicate, inner)
		if it.projection is not None: self.tour(it.projection, inner)
	
	def visit_SelectFromWhere(self, it:syntax.SelectFromWhere, env):
		self.visit(it.source, env)
		self._query_body(it, env)
	
	def visit_Join(self, it:syntax.Join, env):
		self.visit(it.lhs, env)
		self.visit(it.rhs, env)
		self._query_body(it, env)
	
	# Types have no terms inside, but a walk may still meet them.
	def visit_TypeName(self, it:syntax.TypeName, env): pass
	
	def visit_ArrowType(self, it:syntax.ArrowType, env):
		self.tour(it.params, env)
		self.visit(it.result, env)
	
	def _fields(self, it, env):
		for _, t in it.fields: self.visit(t, env)
	visit_RecordType = visit_TableType = _fields
