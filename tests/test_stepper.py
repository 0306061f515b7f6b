import unittest
from unittest.mock import patch

from tabula import syntax as s
from tabula.evaluator import evaluate, TypeMismatch
from tabula.pretty import pretty
from tabula.stepper import step, reduction_sequence
from tabula.values import is_same, is_value

def trail(term) -> list[str]:
	return [pretty(t) for t in reduction_sequence(term)]

class SingleStepTests(unittest.TestCase):
	
	def test_values_do_not_step(self):
		x = s.Param("x")
		for v in [s.Bool(True), s.Int(3), s.Str(""), s.Unit(), s.Abs(x, s.Ref.to(x)), s.Record([s.Init("a", s.Int(1))])]:
			with self.subTest(v):
				self.assertIsNone(step(v))
	
	def test_one_step_at_a_time(self):
		term = s.If(s.Iszero(s.Pred(s.Int(1))), s.Succ(s.Int(0)), s.Int(5))
		self.assertEqual([
			"if iszero (pred 1) then succ 0 else 5",
			"if iszero 0 then succ 0 else 5",
			"if true then succ 0 else 5",
			"succ 0",
			"1",
		], trail(term))
	
	def test_leftmost_operand_goes_first(self):
		term = s.Less(s.Succ(s.Int(0)), s.Pred(s.Int(3)))
		self.assertEqual(["(succ 0) < (pred 3)", "1 < (pred 3)", "1 < 2", "true"], trail(term))
	
	def test_beta_step(self):
		x = s.Param("x")
		term = s.App(s.Abs(x, s.Succ(s.Ref.to(x))), s.Pred(s.Int(2)))
		self.assertEqual(["((\\x. succ x) (pred 2))", "((\\x. succ x) 1)", "succ 1", "2"], trail(term))
	
	def test_call_steps_arguments_in_order(self):
		x, y = s.Param("x"), s.Param("y")
		fn = s.Fn([x, y], s.Ref.to(y))
		term = s.Call(fn, [s.Succ(s.Int(0)), s.Succ(s.Int(1))])
		sequence = trail(term)
		self.assertEqual("(fn(x, y) => y)(1, succ 1)", sequence[1])
		self.assertEqual("(fn(x, y) => y)(1, 2)", sequence[2])
		self.assertEqual("2", sequence[-1])
	
	def test_stuck_terms_raise(self):
		with self.assertRaises(TypeMismatch):
			step(s.Succ(s.Bool(True)))
	
	def test_set_operators_want_rows_of_values(self):
		typedef = s.Def("T", s.TypeName("nat"))
		odd = s.Table(["k"], [s.Record([s.Init("k", s.Ref.to(typedef))])])
		fine = s.Table(["k"], [s.Record([s.Init("k", s.Int(1))])])
		for op in (s.Union, s.Intersect, s.Except):
			with self.subTest(op.__name__):
				with self.assertRaises(TypeMismatch):
					step(op(odd, fine))

	def test_declaration_forces_in_one_step(self):
		d = s.Def("n", s.Succ(s.Succ(s.Int(0))))
		self.assertIs(d, step(d))
		self.assertTrue(d.is_evaluated)
		self.assertIsNone(step(d))
		self.assertEqual(2, step(s.Ref.to(d)).value)
	
	def test_print_happens_in_its_own_step(self):
		program = s.Prog([s.Print(s.Succ(s.Int(0))), s.Int(7)])
		with patch("tabula.runtime.emit") as emit:
			first = step(program)
			emit.assert_not_called()
			second = step(first)
			emit.assert_called_once_with("1")
		self.assertEqual("unit; 7", pretty(second))
		self.assertEqual("7", pretty(step(second)))
		last = step(step(second))
		self.assertIsInstance(last, s.Int)
		self.assertIsNone(step(last))
	
	def test_table_operators_take_one_step(self):
		t = s.Table(["k"], [s.Record([s.Init("k", s.Int(1))])])
		u = s.Table(["k"], [s.Record([s.Init("k", s.Succ(s.Int(1)))])])
		sequence = list(reduction_sequence(s.Union(t, u)))
		self.assertEqual(3, len(sequence))
		self.assertEqual("table[k]{{k = 1}, {k = 2}}", pretty(sequence[-1]))

class AgreementTests(unittest.TestCase):
	""" Stepping to the end lands where evaluation does. """
	
	def examples(self):
		x, y, r = s.Param("x"), s.Param("y"), s.Param("r")
		people = s.Table(["name", "age"], [
			s.Record([s.Init("name", s.Str("Ann")), s.Init("age", s.Succ(s.Int(40)))]),
			s.Record([s.Init("name", s.Str("Bob")), s.Init("age", s.Int(7))]),
		])
		d = s.Def("people", people)
		yield "arithmetic", s.Iszero(s.Pred(s.Pred(s.Succ(s.Int(1)))))
		yield "logic", s.Or(s.Not(s.Bool(True)), s.Equals(s.Int(2), s.Succ(s.Succ(s.Int(0)))))
		yield "application", s.App(s.Abs(x, s.If(s.Ref.to(x), s.Int(1), s.Int(0))), s.Not(s.Bool(False)))
		yield "call", s.Call(s.Fn([x, y], s.Less(s.Ref.to(y), s.Ref.to(x))), [s.Int(3), s.Pred(s.Int(3))])
		yield "record", s.Mem(s.Record([s.Init("a", s.Succ(s.Int(0)))]), "a")
		yield "query", s.SelectFromWhere([s.Init("who", s.Mem(s.Ref.to(r), "name"))], s.Ref.to(d), s.Less(s.Ref("age"), s.Int(18)), row=r)
		yield "projection", s.Proj(people, ["age"])
		yield "join", s.Join(s.Proj(people, ["name"]), s.Table(["n"], [s.Record([s.Init("n", s.Int(0))])]))
		yield "except", s.Except(s.Proj(people, ["age"]), s.Table(["age"], [s.Record([s.Init("age", s.Int(7))])]))
		yield "program", s.Prog([d, s.Mem(s.Ref.to(d), "name")])
	
	def test_last_step_is_the_value(self):
		for name, term in self.examples():
			with self.subTest(name):
				expect = evaluate(term)
				*_, last = reduction_sequence(term)
				self.assertTrue(is_value(last), pretty(last))
				self.assertTrue(is_same(expect, last), (pretty(expect), pretty(last)))

if __name__ == '__main__':
	unittest.main()
