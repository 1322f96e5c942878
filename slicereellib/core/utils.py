#!/usr/bin/env python3

import os
import re
import shlex
import shutil
import subprocess
import sys
import time
from fractions import Fraction
from slicereellib.core import timestring
from slicereellib.core.errors import ValidationError

#============================================

_QUIET_MODE = False
_COMMAND_REPORTER = None

STDERR_TAIL_LINES = 20

# ratio denominator and width search limits
MAX_RATIO_DENOMINATOR = 1000
MAX_WIDTH_STEPS = 100000

#============================================

def set_quiet_mode(enabled: bool) -> None:
	global _QUIET_MODE
	_QUIET_MODE = bool(enabled)

#============================================

def is_quiet_mode() -> bool:
	return _QUIET_MODE

#============================================

def set_command_reporter(reporter) -> None:
	global _COMMAND_REPORTER
	_COMMAND_REPORTER = reporter

#============================================

def clear_command_reporter() -> None:
	set_command_reporter(None)

#============================================

def log(message: str) -> None:
	if _QUIET_MODE:
		return
	print(message)

#============================================

def warn(message: str) -> None:
	print(f"Warning: {message}", file=sys.stderr)

#============================================

def run_process(command: str, args: list) -> subprocess.CompletedProcess:
	"""
	Run one external command without a shell and capture its output.

	Args:
		command: Executable name.
		args: Argument list, passed through untouched.

	Returns:
		subprocess.CompletedProcess: Finished process, any exit status.
	"""
	cmd = [command] + list(args)
	if _COMMAND_REPORTER is not None:
		_COMMAND_REPORTER(cmd)
	proc = subprocess.run(cmd, stdin=subprocess.DEVNULL, capture_output=True,
		text=True)
	return proc

#============================================

def stderr_tail(text: str) -> str:
	if not text:
		return ""
	lines = text.strip().splitlines()
	return "\n".join(lines[-STDERR_TAIL_LINES:])

#============================================

def command_text(command: str, args: list) -> str:
	return shlex.join([command] + list(args))

#============================================

def check_dependency(cmd_name: str) -> None:
	if shutil.which(cmd_name) is None:
		raise ValidationError(f"missing dependency: {cmd_name}")

#============================================

def ensure_file_exists(filepath: str) -> None:
	if not os.path.isfile(filepath):
		raise ValidationError(f"Input file {filepath} does not exist")
	return

#============================================

def make_timestamp() -> str:
	datestamp = time.strftime("%y%b%d").lower()
	uppercase = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
	hourstamp = uppercase[(time.localtime()[3]) % 26]
	minstamp = f"{time.localtime()[4]:02d}"
	secstamp = uppercase[(time.localtime()[5]) % 26]
	timestamp = datestamp + hourstamp + minstamp + secstamp
	return timestamp

#============================================

def parse_ratio(raw_ratio) -> Fraction:
	"""
	Accept 16:9, 16/9, 1.5 or plain integers as an aspect ratio.
	"""
	if raw_ratio is None:
		return None
	if isinstance(raw_ratio, Fraction):
		ratio = raw_ratio
	elif isinstance(raw_ratio, int):
		ratio = Fraction(raw_ratio, 1)
	elif isinstance(raw_ratio, float):
		ratio = Fraction(str(raw_ratio))
	else:
		value = str(raw_ratio).strip()
		try:
			if ':' in value:
				parts = value.split(':')
				if len(parts) != 2:
					raise ValueError(value)
				ratio = Fraction(int(parts[0]), int(parts[1]))
			else:
				ratio = Fraction(value)
		except (ValueError, ZeroDivisionError):
			raise ValidationError(f"Invalid ratio: {raw_ratio}")
	if ratio <= 0:
		raise ValidationError(f"Invalid ratio: {raw_ratio}")
	snapped = ratio.limit_denominator(MAX_RATIO_DENOMINATOR)
	if snapped != ratio:
		warn(f"--ratio {raw_ratio} is approximated as {snapped}")
		ratio = snapped
	return ratio

#============================================

def adjust_width_from_ratio(width: int, ratio: Fraction) -> int:
	"""
	Grow width until width / ratio is a whole, even height.
	"""
	if ratio is None or ratio <= 0:
		raise ValidationError(f"aspect ratio must be positive, got {ratio}")
	if width <= 0:
		raise ValidationError(f"--width must be positive, got {width}")
	ratio = Fraction(ratio)
	old_width = width
	height = Fraction(width) / ratio
	while height.denominator != 1 or height.numerator % 2 != 0:
		if width - old_width >= MAX_WIDTH_STEPS:
			raise ValidationError(
				f"no width near {old_width} gives an even height for aspect ratio {ratio}"
			)
		width += 1
		height = Fraction(width) / ratio
	if width != old_width:
		warn(
			f"--width {old_width} is not divisible by the aspect ratio {ratio}. "
			f"Using --width {width} instead."
		)
	return width

#============================================

SUFFIX_START_TIME = re.compile(r"\$startTime")
SUFFIX_END_TIME = re.compile(r"\$endTime")
SUFFIX_PART = re.compile(r"\$part")

#============================================

def resolve_suffix(template: str, window) -> str:
	"""
	Expand $startTime, $endTime and $part in a part file name suffix.
	"""
	if not SUFFIX_START_TIME.search(template) or not SUFFIX_END_TIME.search(template):
		raise ValidationError("--suffix must contain both $startTime and $endTime")
	start_text = timestring.format_duration(window.start_time)
	end_text = timestring.format_duration(window.end_time)
	value = SUFFIX_START_TIME.sub(lambda _: start_text, template)
	value = SUFFIX_END_TIME.sub(lambda _: end_text, value)
	value = SUFFIX_PART.sub(lambda _: str(window.part_index), value)
	return value
