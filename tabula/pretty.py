"""
Render terms, values and types as text, for `print` and for diagnostics.
"""
from boozetools.support.foundation import Visitor
from . import syntax
from .ontology import Phrase

def pretty(it:Phrase) -> str:
	return _RENDER.visit(it)

def _field_list(fields) -> str:
	return ', '.join("%s : %s" % (nom.text, pretty(t)) for nom, t in fields)

class Render(Visitor):
	
	def _each(self, items) -> str: return ', '.join(map(self.visit, items))
	
	def visit_Bool(self, it:syntax.Bool): return "true" if it.value else "false"
	def visit_Int(self, it:syntax.Int): return str(it.value)
	def visit_Str(self, it:syntax.Str):
		return '"%s"' % it.value.replace('\\', '\\\\').replace('"', '\\"')
	def visit_Unit(self, it:syntax.Unit): return "unit"
	
	def visit_Param(self, it:syntax.Param): return it.nom.text
	def visit_Ref(self, it:syntax.Ref): return it.nom.text
	def visit_Def(self, it:syntax.Def): return "def %s = %s" % (it.nom.text, self.visit(it.value))
	
	def visit_Abs(self, it:syntax.Abs):
		return "\\%s. %s" % (it.param.nom.text, self.visit(it.body))
	def visit_Fn(self, it:syntax.Fn):
		return "fn(%s) => %s" % (self._each(it.params), self.visit(it.body))
	def visit_App(self, it:syntax.App):
		return "(%s %s)" % (self._operand(it.abs), self._operand(it.arg))
	def visit_Call(self, it:syntax.Call):
		return "%s(%s)" % (self._operand(it.fn), self._each(it.args))
	
	def visit_Print(self, it:syntax.Print): return "print %s" % self.visit(it.expr)
	def visit_Prog(self, it:syntax.Prog): return '; '.join(map(self.visit, it.stmts))
	def visit_Comma(self, it:syntax.Comma): return self._each(it.items)
	
	def visit_If(self, it:syntax.If):
		parts = self.visit(it.cond), self.visit(it.then_part), self.visit(it.else_part)
		return "if %s then %s else %s" % parts
	
	def visit_Succ(self, it:syntax.Succ): return "succ %s" % self._operand(it.arg)
	def visit_Pred(self, it:syntax.Pred): return "pred %s" % self._operand(it.arg)
	def visit_Iszero(self, it:syntax.Iszero): return "iszero %s" % self._operand(it.arg)
	def visit_Not(self, it:syntax.Not): return "not %s" % self._operand(it.arg)
	
	def _operand(self, it) -> str:
		text = self.visit(it)
		return "(%s)" % text if isinstance(it, _NEEDS_PARENS) else text
	
	def _infix(self, it:syntax.Binary, glyph:str):
		return "%s %s %s" % (self._operand(it.lhs), glyph, self._operand(it.rhs))
	
	def visit_And(self, it:syntax.And): return self._infix(it, "and")
	def visit_Or(self, it:syntax.Or): return self._infix(it, "or")
	def visit_Equals(self, it:syntax.Equals): return self._infix(it, "==")
	def visit_Less(self, it:syntax.Less): return self._infix(it, "<")
	def visit_Union(self, it:syntax.Union): return self._infix(it, "union")
	def visit_Intersect(self, it:syntax.Intersect): return self._infix(it, "intersect")
	def visit_Except(self, it:syntax.Except): return self._infix(it, "except")
	
	def visit_Init(self, it:syntax.Init): return "%s = %s" % (it.label.text, self.visit(it.value))
	def visit_Record(self, it:syntax.Record): return "{%s}" % self._each(it.members)
	def visit_Table(self, it:syntax.Table):
		return "table[%s]{%s}" % (', '.join(it.schema), self._each(it.members))
	
	def visit_Mem(self, it:syntax.Mem): return "%s.%s" % (self._operand(it.target), it.member.text)
	def visit_Proj(self, it:syntax.Proj):
		return "%s[%s]" % (self._operand(it.target), ', '.join(l.text for l in it.labels))
	
	def _clauses(self, it:syntax.Query) -> str:
		text = ""
		if it.row is not None: text += " as %s" % it.row.nom.text
		if it.predicate is not None: text += " where %s" % self.visit(it.predicate)
		return text
	
	def _projection(self, it:syntax.Query) -> str:
		return "*" if it.projection is None else self._each(it.projection)
	
	def visit_SelectFromWhere(self, it:syntax.SelectFromWhere):
		return "select %s from %s%s" % (self._projection(it), self._operand(it.source), self._clauses(it))
	
	def visit_Join(self, it:syntax.Join):
		sides = self._operand(it.lhs), self._operand(it.rhs)
		return "select %s from %s join %s%s" % ((self._projection(it),) + sides + (self._clauses(it),))
	
	def visit_BuiltinType(self, it:syntax.BuiltinType): return it.nom.text
	def visit_TypeName(self, it:syntax.TypeName): return it.nom.text
	def visit_ArrowType(self, it:syntax.ArrowType):
		return "(%s -> %s)" % (self._each(it.params), self.visit(it.result))
	def visit_RecordType(self, it:syntax.RecordType): return "{%s}" % _field_list(it.fields)
	def visit_TableType(self, it:syntax.TableType): return "table{%s}" % _field_list(it.fields)

_NEEDS_PARENS = (
	syntax.If, syntax.Binary, syntax.SetOperation, syntax.Arithmetic, syntax.Not,
	syntax.Abs, syntax.Fn, syntax.Query, syntax.Print,
)

_RENDER = Render()
