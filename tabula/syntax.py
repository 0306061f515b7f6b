"""
The set of term nodes in simple form.
A front end (parser and type checker) builds these; the evaluator consumes them.
Class-level annotations make peace with the IDE wherever later passes add fields.

Apart from one deliberate exception (Def memoizes its evaluated value),
nothing here changes after construction. Reductions build new nodes.
"""
from typing import Optional, Sequence
from .ontology import Nom, Symbol, TermSymbol, TypeSymbol, Term, TypeExpression

def as_nom(name:Nom | str) -> Nom:
	return name if isinstance(name, Nom) else Nom(name, None)

###############################################################################
# Values: terms in normal form.

class Bool(Term):
	def __init__(self, value:bool):
		assert isinstance(value, bool), type(value)
		self.value = value
	def __repr__(self): return "<Bool %s>" % self.value

class Int(Term):
	""" Natural numbers. """
	def __init__(self, value:int):
		assert isinstance(value, int) and not isinstance(value, bool), type(value)
		assert value >= 0, value
		self.value = value
	def __repr__(self): return "<Int %d>" % self.value

class Str(Term):
	def __init__(self, value:str):
		assert isinstance(value, str), type(value)
		self.value = value
	def __repr__(self): return "<Str %r>" % self.value

class Unit(Term):
	def __repr__(self): return "<unit>"

class Param(TermSymbol):
	""" A bound variable: the parameter of a lambda or function, or a query's row variable. """
	def __init__(self, nom:Nom | str, type_expr:Optional[TypeExpression]=None):
		super().__init__(as_nom(nom))
		self.type_expr = type_expr

class Abs(Term):
	def __init__(self, param:Param, body:Term):
		assert isinstance(param, Param), type(param)
		self.param, self.body = param, body
	def __repr__(self): return "<Abs %s>" % self.param.nom.text

class Fn(Term):
	def __init__(self, params:Sequence[Param], body:Term):
		assert all(isinstance(p, Param) for p in params)
		self.params, self.body = tuple(params), body
	def __repr__(self): return "<Fn %s>" % ', '.join(p.nom.text for p in self.params)

class Init(Term):
	""" A labelled binding, as within a record or a projection list. """
	def __init__(self, label:Nom | str, value:Term):
		self.label = as_nom(label)
		self.value = value
	def key(self) -> str: return self.label.text
	def __repr__(self): return "<Init %s>" % self.label.text

class Record(Term):
	def __init__(self, members:Sequence[Init]):
		assert all(isinstance(m, Init) for m in members)
		self.members = tuple(members)
	
	def labels(self) -> tuple[str, ...]:
		return tuple(m.key() for m in self.members)
	
	def field(self, key:str) -> Optional[Term]:
		for m in self.members:
			if m.key() == key: return m.value
	
	def __repr__(self): return "<Record %s>" % ', '.join(self.labels())

class Table(Term):
	"""
	A schema (ordered column names) and its rows.
	The rows are a bag in general, but a set when produced by a set operator.
	"""
	def __init__(self, schema:Sequence[Nom | str], members:Sequence[Record]=()):
		self.schema = tuple(as_nom(c).text for c in schema)
		assert all(isinstance(r, Record) for r in members)
		self.members = tuple(members)
	def __repr__(self): return "<Table %s: %d rows>" % (', '.join(self.schema), len(self.members))

###############################################################################
# Redexes: everything else the evaluator knows how to reduce.

class App(Term):
	def __init__(self, abs:Term, arg:Term):
		self.abs, self.arg = abs, arg

class Call(Term):
	def __init__(self, fn:Term, args:Sequence[Term]):
		self.fn, self.args = fn, tuple(args)

class Ref(Term):
	"""
	A use of a name. The resolver (or a front end) links it to its symbol.
	While dfn is None the name is free, which inside a query means a column.
	"""
	dfn: Optional[Symbol]
	def __init__(self, nom:Nom | str, dfn:Optional[Symbol]=None):
		self.nom = as_nom(nom)
		self.dfn = dfn
		self.spot = self.nom.spot
	
	@staticmethod
	def to(symbol:Symbol) -> "Ref":
		return Ref(symbol.nom, symbol)
	
	def __repr__(self): return "<ref:%s>" % self.nom.text

class Def(TermSymbol, Term):
	"""
	A top-level declaration of a term or a type. All references to it share this node.
	The first evaluation overwrites the value with its normal form;
	later references get that cached result.
	"""
	value: Term | TypeExpression
	
	UNEVALUATED, IN_PROGRESS, EVALUATED = range(3)
	
	def __init__(self, nom:Nom | str, value:Term | TypeExpression):
		super().__init__(as_nom(nom))
		assert isinstance(value, (Term, TypeExpression)), type(value)
		self.value = value
		self.state = Def.UNEVALUATED if isinstance(value, Term) else Def.EVALUATED
	
	@property
	def is_evaluated(self) -> bool: return self.state == Def.EVALUATED
	def defines_term(self) -> bool: return isinstance(self.value, Term)

class Print(Term):
	def __init__(self, expr:Term | TypeExpression):
		self.expr = expr

class Prog(Term):
	def __init__(self, stmts:Sequence[Term]):
		self.stmts = tuple(stmts)

class Comma(Term):
	def __init__(self, items:Sequence[Term]):
		self.items = tuple(items)

class If(Term):
	def __init__(self, cond:Term, then_part:Term, else_part:Term):
		self.cond, self.then_part, self.else_part = cond, then_part, else_part

class Arithmetic(Term):
	def __init__(self, arg:Term): self.arg = arg

class Succ(Arithmetic): pass
class Pred(Arithmetic): pass
class Iszero(Arithmetic): pass

class Not(Term):
	def __init__(self, arg:Term): self.arg = arg

class Binary(Term):
	def __init__(self, lhs:Term, rhs:Term):
		self.lhs, self.rhs = lhs, rhs

class And(Binary): pass
class Or(Binary): pass
class Equals(Binary): pass
class Less(Binary): pass

class Mem(Term):
	""" Field of a record, or the one-column projection of a table. """
	def __init__(self, target:Term, member:Nom | str):
		self.target = target
		self.member = as_nom(member)

class Proj(Term):
	""" Keep just the named columns of a table (or fields of a record), in the order given. """
	def __init__(self, target:Term, labels:Sequence[Nom | str]):
		self.target = target
		self.labels = tuple(as_nom(l) for l in labels)

Projection = Optional[Sequence[Init]]

class Query(Term):
	"""
	Common ground for select-from-where and join.
	Within the predicate and projection, each field of the current row
	is in scope by its label, and the optional row variable names the whole row.
	No predicate keeps every row; no projection keeps every column.
	"""
	projection: Optional[tuple[Init, ...]]
	predicate: Optional[Term]
	row: Optional[Param]

	def _query(self, projection:Projection, predicate:Optional[Term], row:Optional[Param]):
		assert projection is None or all(isinstance(i, Init) for i in projection)
		assert row is None or isinstance(row, Param)
		self.projection = None if projection is None else tuple(projection)
		self.predicate = predicate
		self.row = row

class SelectFromWhere(Query):
	def __init__(self, projection:Projection, source:Term, predicate:Optional[Term]=None, row:Optional[Param]=None):
		self._query(projection, predicate, row)
		self.source = source

class Join(Query):
	def __init__(self, lhs:Term, rhs:Term, predicate:Optional[Term]=None, projection:Projection=None, row:Optional[Param]=None):
		self._query(projection, predicate, row)
		self.lhs, self.rhs = lhs, rhs

class SetOperation(Term):
	def __init__(self, lhs:Term, rhs:Term):
		self.lhs, self.rhs = lhs, rhs

class Union(SetOperation): pass
class Intersect(SetOperation): pass
class Except(SetOperation): pass

###############################################################################
# Types: these only ever get carried around and printed.

class BuiltinType(TypeSymbol):
	pass

class TypeName(TypeExpression):
	dfn: Optional[TypeSymbol]  # Resolver fills this in.
	def __init__(self, nom:Nom | str):
		self.nom = as_nom(nom)
		self.dfn = None
		self.spot = self.nom.spot

class ArrowType(TypeExpression):
	def __init__(self, params:Sequence[TypeExpression], result:TypeExpression):
		self.params, self.result = tuple(params), result

class RecordType(TypeExpression):
	def __init__(self, fields:Sequence[tuple[Nom | str, TypeExpression]]):
		self.fields = tuple((as_nom(n), t) for n, t in fields)

class TableType(TypeExpression):
	def __init__(self, fields:Sequence[tuple[Nom | str, TypeExpression]]):
		self.fields = tuple((as_nom(n), t) for n, t in fields)
