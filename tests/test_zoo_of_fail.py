import io
import unittest
from pathlib import Path
from unittest.mock import patch

from tabula import syntax as s, diagnostics, location
from tabula.ontology import Nom
from tabula.executive import run_program
from tabula.evaluator import (
	EvaluationError, TypeMismatch, ArityMismatch, IllFormedApplication, StructuralError,
)

def _bad(program) -> diagnostics.Report:
	report = diagnostics.Report(verbose=False)
	with patch("tabula.runtime.emit"):
		result = run_program(program, report)
	assert result is None, result
	assert report.sick()
	return report

class RuntimeFailureTests(unittest.TestCase):
	""" Programs that resolve fine but go wrong while running. """
	
	def test_each_kind_of_failure(self):
		x = s.Param("x")
		table = s.Table(["a"], [s.Record([s.Init("a", s.Int(1))])])
		zoo = [
			("Wrong kind of value", s.If(s.Int(1), s.Int(2), s.Int(3))),
			("Wrong kind of value", s.Union(table, s.Table(["b"]))),
			("Wrong number of arguments", s.Call(s.Fn([x], s.Ref("x")), [])),
			("Not something that can be applied", s.App(s.Bool(True), s.Unit())),
			("Malformed program", s.Mem(table, "b")),
			("Malformed program", s.Prog([])),
		]
		for intro, program in zoo:
			with self.subTest(intro=intro, program=program):
				report = _bad(program)
				self.assertEqual(1, len(report.issues))
				self.assertTrue(report.issues[0].description.startswith(intro + ":"))
	
	def test_output_before_a_failure_stands(self):
		program = s.Prog([s.Print(s.Int(1)), s.Pred(s.Str("one")), s.Print(s.Int(2))])
		report = diagnostics.Report(verbose=False)
		with patch("tabula.runtime.emit") as emit:
			self.assertIsNone(run_program(program, report))
		emit.assert_called_once_with("1")
		self.assertIn("'\"one\"' is not a numeric value", report.issues[0].description)
	
	def test_a_type_where_a_value_belongs(self):
		x = s.Param("x")
		cases = [
			s.Equals(s.Ref("T"), s.Int(0)),
			s.App(s.Abs(x, s.Ref("x")), s.Ref("T")),
			s.Call(s.Fn([x], s.Ref("x")), [s.Ref("T")]),
			s.Record([s.Init("a", s.Ref("T"))]),
			s.Mem(s.Ref("T"), "a"),
		]
		for term in cases:
			with self.subTest(term=term):
				report = _bad(s.Prog([s.Def("T", s.TypeName("nat")), term]))
				self.assertEqual(1, len(report.issues))
				self.assertTrue(report.issues[0].description.startswith("Wrong kind of value:"))
	
	def test_misapplied_value_is_quoted(self):
		report = _bad(s.App(s.If(s.Bool(True), s.Int(3), s.Int(4)), s.Int(1)))
		self.assertIn("'3'", report.issues[0].description)
		report = _bad(s.Call(s.Pred(s.Int(6)), [s.Int(1)]))
		self.assertIn("'5'", report.issues[0].description)
	
	def test_circular_definition(self):
		program = s.Prog([s.Def("a", s.Succ(s.Ref("b"))), s.Def("b", s.Pred(s.Ref("a"))), s.Print(s.Ref("a"))])
		report = _bad(program)
		self.assertIn("defined in terms of itself", report.issues[0].description)
	
	def test_the_offending_term_is_shown(self):
		report = _bad(s.Less(s.Int(1), s.Bool(False)))
		text = report.issues[0].as_text()
		self.assertIn("(built-in) | 1 < false", text)

class ResolutionFailureTests(unittest.TestCase):
	
	def test_undefined_names_are_collected(self):
		report = _bad(s.Prog([s.Print(s.Ref("nope")), s.Print(s.Ref("nada")), s.Print(s.TypeName("nix"))]))
		self.assertEqual(1, len(report.issues))
		text = report.issues[0].as_text()
		for name in ("nope", "nada", "nix"):
			self.assertIn(name, text)
	
	def test_redefinition(self):
		report = _bad(s.Prog([s.Def("a", s.Int(1)), s.Def("a", s.Int(2))]))
		self.assertEqual(1, len(report.issues))
		self.assertIn("more than once", report.issues[0].description)
	
	def test_duplicate_parameters(self):
		report = _bad(s.Fn([s.Param("x"), s.Param("x")], s.Int(0)))
		self.assertIn("more than once", report.issues[0].description)
	
	def test_columns_are_not_undefined(self):
		query = s.SelectFromWhere(None, s.Table(["a"]), s.Ref("a"))
		report = diagnostics.Report(verbose=False)
		run_program(query, report)
		self.assertTrue(report.ok())
	
	def test_nothing_runs_after_resolution_fails(self):
		report = diagnostics.Report(verbose=False)
		with patch("tabula.runtime.emit") as emit:
			run_program(s.Prog([s.Print(s.Int(1)), s.Print(s.Ref("missing"))]), report)
		emit.assert_not_called()
		self.assertTrue(report.sick())
	
	def test_issue_cap(self):
		report = diagnostics.Report(verbose=False, max_issues=2)
		program = s.Prog([s.Def("a", s.Int(1)), s.Def("a", s.Int(2)), s.Def("b", s.Int(1)), s.Def("b", s.Int(2)), s.Def("c", s.Int(1)), s.Def("c", s.Int(2))])
		self.assertIsNone(run_program(program, report))
		self.assertEqual(2, len(report.issues))

class IllustrationTests(unittest.TestCase):
	""" Issues point into the source text the front end registered. """
	
	def setUp(self):
		location.reset_location_index()
	
	def tearDown(self):
		location.reset_location_index()
	
	def test_undefined_name_is_underlined(self):
		text = "print nope\n"
		location.start_segment(Path("demo.tab"), text)
		location.insert_token(slice(0, 5))
		spot = location.insert_token(slice(6, 10))
		report = _bad(s.Print(s.Ref(Nom("nope", spot))))
		picture = report.issues[0].as_text()
		self.assertIn("demo.tab", picture)
		self.assertIn("print nope", picture)
	
	def test_evaluation_error_carries_its_location(self):
		text = "succ true\n"
		location.start_segment(Path("demo.tab"), text)
		first = location.insert_token(slice(0, 4))
		location.insert_token(slice(5, 9))
		report = _bad(s.Succ(s.Bool(True)).at(first))
		picture = report.issues[0].as_text()
		self.assertIn("demo.tab", picture)
		self.assertIn("succ true", picture)
		self.assertIn("Wrong kind of value", picture)

	def test_trace_points_at_a_site(self):
		text = "pred 0\n"
		location.start_segment(Path("demo.tab"), text)
		spot = location.insert_token(slice(0, 4))
		with patch("sys.stderr", new_callable=io.StringIO) as stderr:
			diagnostics.Report.trace("reducing", s.Pred(s.Int(0)).at(spot))
		self.assertIn("reducing", stderr.getvalue())
		self.assertIn("demo.tab", stderr.getvalue())

class ExceptionTests(unittest.TestCase):
	
	def test_hierarchy(self):
		for kind in (TypeMismatch, ArityMismatch, IllFormedApplication, StructuralError):
			with self.subTest(kind.__name__):
				self.assertTrue(issubclass(kind, EvaluationError))
		term = s.Int(0)
		ex = TypeMismatch(term, "no good")
		self.assertIs(term, ex.term)
		self.assertEqual("no good (at 0)", str(ex))

if __name__ == '__main__':
	unittest.main()
