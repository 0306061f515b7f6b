"""
The overall control: take a program from the front end, link its names,
evaluate it, and turn whatever goes wrong into a report.
"""
from typing import Optional
from .diagnostics import Report, TooManyIssues
from .evaluator import evaluate, EvaluationError
from .ontology import Term
from .pretty import pretty
from .resolution import resolve_words
from .stepper import reduction_sequence

def run_program(program:Term, report:Report, *, resolve=True, trace=False) -> Optional[Term]:
	"""
	Returns the program's value, or None if it could not be had,
	in which case the report says why. With trace set, the program
	runs one reduction step at a time, and verbose reports show each step.
	"""
	try:
		if resolve:
			resolve_words(program, report)
			if report.sick(): return None
		if trace: return _trace(program, report)
		return evaluate(program)
	except EvaluationError as ex:
		report.evaluation_failed(ex)
	except TooManyIssues:
		pass

def _trace(program:Term, report:Report) -> Term:
	result = program
	for count, result in enumerate(reduction_sequence(program)):
		report.info("%4d  %s" % (count, pretty(result)))
	return result

def execute(program:Term, *, verbose=0, trace=False) -> int:
	""" For drivers: run the program and complain to the console if need be. Returns an exit status. """
	report = Report(verbose=verbose)
	run_program(program, report, trace=trace)
	if report.sick():
		report.complain_to_console()
		return 1
	return 0
