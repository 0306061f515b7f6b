import unittest

from tabula import syntax as s
from tabula.evaluator import evaluate
from tabula.pretty import pretty
from tabula.substitution import substitute, free_symbols

class SubstitutionTests(unittest.TestCase):
	
	def setUp(self):
		self.x, self.y, self.z = s.Param("x"), s.Param("y"), s.Param("z")
	
	def ref(self, p): return s.Ref.to(p)
	
	def test_replaces_linked_references_only(self):
		x, y = self.x, self.y
		other_x = s.Param("x")
		term = s.Call(self.ref(x), [self.ref(y), self.ref(other_x)])
		result = substitute(term, {x: s.Int(1)})
		self.assertEqual("1(y, x)", pretty(result))
		self.assertIs(other_x, result.args[1].dfn)
	
	def test_never_mutates(self):
		x = self.x
		term = s.Succ(self.ref(x))
		substitute(term, {x: s.Int(0)})
		self.assertIsInstance(term.arg, s.Ref)
	
	def test_simultaneous(self):
		x, y = self.x, self.y
		term = s.Call(self.ref(x), [self.ref(y)])
		result = substitute(term, {x: self.ref(y), y: self.ref(x)})
		self.assertIs(y, result.fn.dfn)
		self.assertIs(x, result.args[0].dfn)
	
	def test_shadowing(self):
		x = self.x
		inner = s.Abs(x, self.ref(x))
		term = s.App(inner, self.ref(x))
		result = substitute(term, {x: s.Int(5)})
		self.assertIs(inner, result.abs)
		self.assertEqual(5, result.arg.value)
	
	def test_capture_is_avoided(self):
		# [x -> y] (\y. x y) must not become \y. y y
		x, y = self.x, self.y
		term = s.Abs(y, s.App(self.ref(x), self.ref(y)))
		result = substitute(term, {x: self.ref(y)})
		self.assertIsNot(y, result.param)
		self.assertEqual("y'1", result.param.nom.text)
		self.assertIs(y, result.body.abs.dfn)
		self.assertIs(result.param, result.body.arg.dfn)
		self.assertEqual("\\y'1. (y y'1)", pretty(result))
	
	def test_fresh_names_count_within_one_call(self):
		x, y = self.x, self.y
		y2 = s.Param("y")
		term = s.Comma([s.Abs(y, self.ref(x)), s.Abs(y2, self.ref(x))])
		result = substitute(term, {x: s.Call(self.ref(y), [self.ref(y2)])})
		self.assertEqual(["y'1", "y'2"], [a.param.nom.text for a in result.items])
	
	def test_function_parameters_are_renamed_together(self):
		x, y, z = self.x, self.y, self.z
		term = s.Fn([y, z], s.Call(self.ref(x), [self.ref(y), self.ref(z)]))
		result = substitute(term, {x: self.ref(z)})
		self.assertEqual("y", result.params[0].nom.text)
		self.assertIs(y, result.params[0])
		self.assertEqual("z'1", result.params[1].nom.text)
		self.assertEqual("fn(y, z'1) => z(y, z'1)", pretty(result))
	
	def test_empty_bindings_give_back_the_term(self):
		term = s.Succ(s.Int(0))
		self.assertIs(term, substitute(term, {}))
	
	def test_declarations_are_left_alone(self):
		x = self.x
		d = s.Def("d", self.ref(x))
		result = substitute(s.Ref.to(d), {x: s.Int(1)})
		self.assertIs(d, result.dfn)
		self.assertIsInstance(d.value, s.Ref)
	
	def test_column_names_replace_free_references(self):
		term = s.Equals(s.Ref("dept"), s.Str("X"))
		result = substitute(term, {"dept": s.Str("X")})
		self.assertEqual('"X" == "X"', pretty(result))
	
	def test_column_names_stop_at_a_nested_query(self):
		nested = s.SelectFromWhere(None, s.Ref("t"), s.Ref("flag"))
		result = substitute(nested, {"flag": s.Bool(True), "t": s.Table(["flag"])})
		self.assertIsInstance(result.source, s.Table)
		self.assertIsInstance(result.predicate, s.Ref)
	
	def test_parameters_reach_into_queries(self):
		x, r = self.x, s.Param("r")
		query = s.SelectFromWhere(None, s.Table(["n"]), s.Less(s.Ref("n"), self.ref(x)), row=r)
		result = substitute(query, {x: s.Int(3)})
		self.assertEqual("select * from table[n]{} as r where n < 3", pretty(result))
		self.assertIs(r, result.row)
	
	def test_renamed_binder_still_computes(self):
		x, y = self.x, self.y
		const = s.Abs(x, s.Abs(y, self.ref(x)))
		partial = evaluate(s.App(const, self.ref(y)))
		self.assertIsNot(y, partial.param)
		result = evaluate(s.App(partial, s.Int(9)))
		self.assertIs(y, result.dfn)

class FreeSymbolTests(unittest.TestCase):
	
	def test_free_symbols(self):
		x, y, r = s.Param("x"), s.Param("y"), s.Param("r")
		term = s.Abs(x, s.Call(s.Ref.to(x), [s.Ref.to(y), s.Ref("column")]))
		self.assertEqual({y}, free_symbols(term))
		query = s.SelectFromWhere(None, s.Ref.to(x), s.Equals(s.Ref.to(r), s.Ref.to(y)), row=r)
		self.assertEqual({x, y}, free_symbols(query))
		self.assertEqual(set(), free_symbols(s.Ref.to(s.Def("d", s.Ref.to(x)))))

if __name__ == '__main__':
	unittest.main()
