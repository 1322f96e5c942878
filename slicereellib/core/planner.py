#!/usr/bin/env python3

import math
from dataclasses import dataclass
from slicereellib.core import timestring
from slicereellib.core.errors import ValidationError

#============================================

@dataclass(frozen=True)
class TimeWindow():
	start_time: float
	end_time: float
	part_index: int

#============================================

def resolve_until(total_duration, skip, until=None):
	"""
	Apply the until default and bounds checks.

	Args:
		total_duration: Length of the source in seconds.
		skip: Offset applied to the first part.
		until: Explicit end bound or None for the whole source.

	Returns:
		The effective end bound in seconds.
	"""
	if until is None:
		return total_duration
	if until > total_duration:
		raise ValidationError(
			f"--until {timestring.format_duration(until)} is greater than the "
			f"total duration of the file {timestring.format_duration(total_duration)}"
		)
	if until < skip:
		raise ValidationError(
			f"--until {timestring.format_duration(until)} is less than "
			f"--skip {timestring.format_duration(skip)}"
		)
	return until

#============================================

def plan_parts(total_duration, skip, until, part_duration) -> list:
	"""
	Split [0, until) into parts aligned on multiples of part_duration.

	Skip only moves the start of the first part; later boundaries stay on
	multiples of part_duration counted from zero.

	Args:
		total_duration: Length of the source in seconds.
		skip: Offset applied to the first part.
		until: End bound or None for the whole source.
		part_duration: Length of each part in seconds.

	Returns:
		list: TimeWindow objects in part order.
	"""
	if part_duration <= 0:
		raise ValidationError("part duration must be greater than 0s")
	if skip < 0:
		raise ValidationError("--skip must not be negative")
	if total_duration < 0:
		raise ValidationError("total duration must not be negative")
	until = resolve_until(total_duration, skip, until)
	part_count = math.ceil(until / part_duration)
	windows = []
	for index in range(part_count):
		initial_start = index * part_duration
		start_time = initial_start
		if index == 0:
			start_time = initial_start + skip
		end_time = min(until, initial_start + part_duration)
		if start_time >= end_time:
			raise ValidationError(
				f"--skip {timestring.format_duration(skip)} must be less than the "
				f"end of the first part {timestring.format_duration(end_time)}"
			)
		windows.append(TimeWindow(start_time, end_time, index))
	return windows
