"""
Everything that goes wrong with a program ends up here, as an issue.
An issue is a headline plus some annotated places in the source,
drawn with booze-tools' illustration helper.
"""
import sys, random
from typing import Any
from pathlib import Path
from boozetools.support.failureprone import SourceText, illustration

from .location import lookup_span
from .ontology import Phrase, Nom
from .pretty import pretty

class TooManyIssues(Exception):
	pass

_GASPS = ["Alas", "Oops", "Uh-oh", "Whoops", "Egad", "Crikey", "Yikes", "Ouch", "Aw, shucks"]

_VERDICTS = [
	"This term will not reduce.",
	"The evaluation cannot go on.",
	"Something here is not what it claims to be.",
	"I cannot make sense of this program.",
]

def _exclaim() -> str:
	return "%s! %s" % (random.choice(_GASPS), random.choice(_VERDICTS))

class Report:
	"""
	Collects the issues a program runs into, and explains them on demand.
	Once `max_issues` pile up, the next one raises TooManyIssues to cut things short.
	"""
	_issues: list["Pic"]

	def __init__(self, *, verbose:int=0, max_issues=10):
		self._verbose = int(verbose or 0)
		self._max_issues = max_issues
		self._issues = []
		self._first_declared = {}
		self._unknown_names = None

	@property
	def issues(self) -> list["Pic"]: return list(self._issues)

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	def issue(self, pic:Any):
		self._issues.append(pic)
		if len(self._issues) >= self._max_issues:
			raise TooManyIssues(self)

	def info(self, *args):
		""" Progress chatter, for verbose runs only """
		if self._verbose: print(*args, file=sys.stderr)

	@staticmethod
	def trace(message, site:Phrase):
		where = Annotation(site, message)
		print(where.illustrate(), where.path or "", file=sys.stderr)

	def complain_to_console(self):
		_bemoan(self._issues)

	def assert_no_issues(self, message):
		if self.sick():
			self.complain_to_console()
			raise AssertionError(_exclaim() + " " + message)

	# From the resolver:

	def redefined(self, text:str, first:Phrase, guilty:Phrase):
		"""
		All the later declarations of one name in one scope
		go into a single issue, anchored at the first of them.
		"""
		key = text, first
		pic = self._first_declared.get(key)
		if pic is None:
			pic = Pic("This name is declared more than once in the same scope.", [Annotation(first, "first declared here")])
			self._first_declared[key] = pic
			self.issue(pic)
		pic.also(guilty, "and again here")

	def undefined_name(self, guilty:Nom):
		if self._unknown_names is None:
			self._unknown_names = Pic("I don't see what this refers to.", [])
			self.issue(self._unknown_names)
		self._unknown_names.also(guilty, guilty.text)

	# From the executive, when evaluation stops short:

	def evaluation_failed(self, ex:"EvaluationError"):
		kind = _KIND_WORDS.get(type(ex).__name__, "Evaluation failed")
		self.issue(Pic("%s: %s" % (kind, ex.message), [Annotation(ex.term, pretty(ex.term))]))

_KIND_WORDS = {
	"TypeMismatch": "Wrong kind of value",
	"ArityMismatch": "Wrong number of arguments",
	"IllFormedApplication": "Not something that can be applied",
	"StructuralError": "Malformed program",
	"Unsupported": "Not supported",
}

class Annotation:
	""" One place in the source, with a caption to draw under it. """
	path: Path
	text: str
	slice: slice
	caption: str

	def __init__(self, node:Phrase, caption:str=""):
		self.path, self.text, self.slice = lookup_span(*node.span())
		self.caption = caption

	def illustrate(self) -> str:
		if self.text is None:
			return "  (built-in) | %s" % self.caption
		source = SourceText(self.text, filename=str(self.path))
		row, col = source.find_row_col(self.slice.start)
		width = max(1, self.slice.stop - self.slice.start)
		return illustration(source.line_of_text(row), col, width, prefix="% 6d |" % row, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation]):
		self._intro, self._anns = intro, anns

	@property
	def description(self) -> str: return self._intro

	def also(self, node:Phrase, caption:str=""):
		self._anns.append(Annotation(node, caption))

	def as_text(self) -> str:
		lines = [self._intro, ""]
		current = None
		for ann in self._anns:
			if ann.path != current:
				current = ann.path
				lines.append(str(current))
			lines.append(ann.illustrate())
		return "\n".join(lines)

def _bemoan(issues):
	if not issues: return
	out = sys.stderr
	print("*" * 60, file=out)
	print(_exclaim(), file=out)
	for pic in issues:
		print("  -" * 20, file=out)
		print(pic.as_text(), file=out)
	out.flush()
