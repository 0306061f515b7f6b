"""
Nested namespaces, for the resolver to look names up in.
A Layer is one level of scope; a Chain stacks a fresh layer over an outer space.
"""

from abc import ABC, abstractmethod
from typing import Generic, NamedTuple, Optional, TypeVar
from .ontology import Phrase, Symbol, TypeSymbol, TermSymbol

class AlreadyExists(KeyError): pass

T = TypeVar('T', bound=Symbol)

class Space(ABC, Generic[T]):
	@abstractmethod
	def symbol(self, key:str) -> Optional[T]:
		""" The symbol by that name, or None """

	@abstractmethod
	def locate(self, key:str) -> Phrase:
		""" Where that name was declared """

	@abstractmethod
	def mount(self, key:str, phrase:Phrase, symbol:T) -> T: ...

	def __contains__(self, key:str) -> bool:
		return self.symbol(key) is not None

	def define(self, symbol:T) -> T:
		return self.mount(symbol.nom.key(), symbol.nom, symbol)

class Layer(Space[T]):
	""" One level of scope. Declaring a name twice here is an error. """
	def __init__(self):
		self._entries: dict[str, tuple[Phrase, T]] = {}

	def symbol(self, key:str) -> Optional[T]:
		entry = self._entries.get(key)
		return None if entry is None else entry[1]

	def locate(self, key:str) -> Phrase:
		return self._entries[key][0]

	def mount(self, key:str, phrase:Phrase, symbol:T) -> T:
		if key in self._entries: raise AlreadyExists(key)
		self._entries[key] = phrase, symbol
		return symbol

class Chain(Space[T]):
	def __init__(self, top:Layer[T], outer:Space[T]):
		self.top, self.outer = top, outer

	def symbol(self, key:str) -> Optional[T]:
		found = self.top.symbol(key)
		return found if found is not None else self.outer.symbol(key)

	def locate(self, key:str) -> Phrase:
		space = self.top if key in self.top else self.outer
		return space.locate(key)

	def mount(self, key:str, phrase:Phrase, symbol:T) -> T:
		return self.top.mount(key, phrase, symbol)

class Scope(NamedTuple):
	types: Space[TypeSymbol]
	terms: Space[TermSymbol]

	@staticmethod
	def fresh() -> "Scope":
		return Scope(Layer(), Layer())
