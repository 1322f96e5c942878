#!/usr/bin/env python3

from slicereellib.core.errors import ParseError
from slicereellib.core.errors import ValidationError

#============================================

SECOND = 1
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
ZERO = 0

UNIT_SECONDS = {
	'h': HOUR,
	'm': MINUTE,
	's': SECOND,
}

#============================================

class TimeStringParser():
	"""
	Left to right scanner for compact durations such as 1h30m10s.

	Each step reads one or more digits followed by exactly one unit letter.
	Repeated units add up, so 1s1s is two seconds.
	"""
	def __init__(self, value: str):
		self.value = value
		self.offset = 0

	#============================
	def parse(self) -> int:
		seconds = 0
		if self._current() is None:
			raise ParseError("Failed to read integer")
		while self._current() is not None:
			count = self._read_int()
			letter = self._read_single_character().lower()
			unit = UNIT_SECONDS.get(letter)
			if unit is None:
				raise ParseError(
					f"Expected \"h\", \"m\" or \"s\", but got {letter} instead"
				)
			seconds += count * unit
		return seconds

	#============================
	def _read_single_character(self) -> str:
		ch = self._current()
		if ch is None:
			raise ParseError("Failed to read character")
		self.offset += 1
		return ch

	#============================
	def _read_int(self) -> int:
		start = self.offset
		ch = self._current()
		while ch is not None and ch in "0123456789":
			self.offset += 1
			ch = self._current()
		if start == self.offset:
			raise ParseError("Failed to read integer")
		return int(self.value[start:self.offset])

	#============================
	def _current(self):
		if self.offset >= len(self.value):
			return None
		return self.value[self.offset]

#============================================

def parse_duration(text: str) -> int:
	if text is None:
		raise ParseError("duration value is required")
	return TimeStringParser(str(text).strip()).parse()

#============================================

def number_text(value) -> str:
	"""
	Render seconds without a trailing .0 for whole values.
	"""
	if isinstance(value, float) and value.is_integer():
		return str(int(value))
	return str(value)

#============================================

def format_duration(seconds) -> str:
	"""
	Render seconds as XhYmZs, dropping zero components.

	Zero renders as 0s. Negative input is rejected.
	"""
	if seconds < 0:
		raise ValidationError('Invalid input. "seconds" must be greater than 0.')
	hours = int(seconds // HOUR)
	remaining = seconds - hours * HOUR
	minutes = int(remaining // MINUTE)
	remaining = remaining - minutes * MINUTE
	text = ""
	if hours > 0:
		text += f"{hours}h"
	if minutes > 0:
		text += f"{minutes}m"
	if isinstance(remaining, float):
		remaining = round(remaining, 3)
	if remaining > 0 or text == "":
		text += f"{number_text(remaining)}s"
	return text
