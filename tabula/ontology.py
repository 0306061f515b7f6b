"""
The most fundamental classes of the term hierarchy live here,
apart from the concrete node types, to keep the import graph acyclic.
Everything that can be pointed at in a diagnostic is a Phrase.
"""

class Phrase:
	def left(self) -> int:
		""" Token index where this phrase begins """
		raise NotImplementedError(type(self))
	def right(self) -> int:
		""" Token index where this phrase ends """
		raise NotImplementedError(type(self))
	def span(self) -> tuple[int, int]: return self.left(), self.right()

class Nom(Phrase):
	""" One occurrence of a name, wherever it appears in the source. """
	spot: int  # zero-spot means built-in or synthesized.
	def __init__(self, text, spot=None):
		assert isinstance(text, str)
		assert isinstance(spot, int) or spot is None, type(spot)
		self.text, self.spot = text, spot or 0
	def __repr__(self): return "<Nom %s@%d>" % (self.text, self.spot)
	def key(self): return self.text
	def left(self): return self.spot
	def right(self): return self.spot

class Symbol(Phrase):
	"""
	Any named-and-defined thing that a reference may denote:
	declarations, parameters, built-in types.
	"""
	nom: Nom
	
	def __init__(self, nom:Nom): self.nom = nom
	def __repr__(self): return "<%s %s>" % (type(self).__name__, self.nom.text)
	def left(self): return self.nom.left()
	def right(self): return self.nom.right()

class TypeSymbol(Symbol): pass

class TermSymbol(Symbol): pass

class TypeExpression(Phrase):
	spot: int = 0
	def left(self): return self.spot
	def right(self): return self.spot

class Term(Phrase):
	"""
	Root of the term hierarchy. A term remembers the token it came from,
	which reductions pass along to whatever they produce.
	"""
	spot: int = 0
	def left(self): return self.spot
	def right(self): return self.spot
	def at(self, spot:int) -> "Term":
		""" For freshly-built terms only. """
		self.spot = spot
		return self
