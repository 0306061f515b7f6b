"""
The primitive namespace: built-in type names a program
may mention without declaring them.
"""

from .ontology import Nom
from . import syntax
from .space import Scope

BUILT_IN_TYPES = {
	name: syntax.BuiltinType(Nom(name, None))
	for name in ("bool", "nat", "string", "unit")
}

def root_scope() -> Scope:
	""" A fresh outermost scope; the type symbols themselves are shared. """
	scope = Scope.fresh()
	for symbol in BUILT_IN_TYPES.values():
		scope.types.define(symbol)
	return scope
