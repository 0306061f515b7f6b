"""
Points and spans within the collection of source texts a program came from.
Every token gets an integer; contiguous runs of those integers belong to one segment,
which is a file (or a string handed over by some front end) with its text.
Token zero is the built-in location, for anything synthesized without a source.
"""
from bisect import bisect_right
from pathlib import Path
from typing import NamedTuple, Optional

class Span(NamedTuple):
	""" Aimed at whatever prints error messages """
	path: Optional[Path]
	text: Optional[str]
	slice: slice

class Segment(NamedTuple):
	first_token: int
	path: Optional[Path]
	text: Optional[str]

class LocationIndex:
	def __init__(self):
		self._slices: list[slice] = []
		self._segments: list[Segment] = []
		self._bounds: list[int] = []
		self.reset()
	
	def reset(self):
		self._slices.clear()
		self._segments.clear()
		self._bounds.clear()
		self.start_segment(None, None)
		self.insert_token(slice(0,0))
	
	def start_segment(self, path:Optional[Path], text:Optional[str]):
		assert isinstance(path, Path) or path is None
		first = len(self._slices)
		self._segments.append(Segment(first, path, text))
		self._bounds.append(first)
	
	def insert_token(self, s:slice) -> int:
		index = len(self._slices)
		self._slices.append(s)
		return index
	
	def lookup_token(self, index:int) -> Span:
		if not 0 <= index < len(self._slices): index = 0  # Unknown tokens read as built-in.
		segment = self._segments[bisect_right(self._bounds, index)-1]
		return Span(segment.path, segment.text, self._slices[index])
	
	def lookup_span(self, first:int, last:int) -> Span:
		left = self.lookup_token(first)
		right = self.lookup_token(last)
		if left.path != right.path or left.text is not right.text:
			# Synthesized terms may straddle the built-in location; keep the real end.
			return left if left.text is not None else right
		return Span(left.path, left.text, slice(left.slice.start, right.slice.stop))

INDEX = LocationIndex()

def reset_location_index(): INDEX.reset()
def start_segment(path:Optional[Path], text:Optional[str]=None): INDEX.start_segment(path, text)
def insert_token(s:slice) -> int: return INDEX.insert_token(s)
def lookup_span(first:int, last:int) -> Span: return INDEX.lookup_span(first, last)
