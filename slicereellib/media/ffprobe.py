#!/usr/bin/env python3

#python wrapper for ffprobe

import math
import re
import subprocess
from fractions import Fraction
from slicereellib.core.errors import ProbeError

#===============================
def getStdout(cmd: list) -> str:
	try:
		proc = subprocess.run(cmd, stdin=subprocess.DEVNULL, capture_output=True,
			text=True)
	except OSError as exc:
		raise ProbeError(f"failed to run {cmd[0]}: {exc}")
	if proc.returncode != 0:
		raise ProbeError(f"{cmd[0]} failed ({proc.returncode}): {proc.stderr.strip()}")
	return proc.stdout

#===============================
def parseDuration(text: str) -> float:
	value = text.strip()
	try:
		duration = float(value)
	except ValueError:
		raise ProbeError(f"Invalid duration: {value}")
	if math.isnan(duration) or not math.isfinite(duration):
		raise ProbeError(f"Invalid duration: {value}")
	if duration < 0:
		raise ProbeError(f"Invalid duration: {value}")
	return duration

#===============================
def parseRatio(text: str) -> Fraction:
	ratio = re.sub(r"[^0-9:]+", "", text)
	if re.fullmatch(r"[0-9]+:[0-9]+", ratio) is None:
		raise ProbeError(f"Invalid ratio: {text.strip()}")
	numerator, denominator = (int(part) for part in ratio.split(':'))
	if numerator <= 0 or denominator <= 0:
		raise ProbeError(f"Invalid ratio: {text.strip()}")
	return Fraction(numerator, denominator)

#===============================
def getDuration(mediafile: str) -> float:
	cmd = [
		"ffprobe", "-i", mediafile,
		"-show_entries", "format=duration",
		"-v", "quiet",
		"-of", "csv=p=0",
	]
	return parseDuration(getStdout(cmd))

#===============================
def getAspectRatio(mediafile: str) -> Fraction:
	cmd = [
		"ffprobe", "-v", "error",
		"-select_streams", "v:0",
		"-show_entries", "stream=display_aspect_ratio",
		"-of", "default=noprint_wrappers=1:nokey=1",
		mediafile,
	]
	return parseRatio(getStdout(cmd))

#===============================
class FfprobeMediaProbe():
	"""Media probe backed by the ffprobe binary."""
	def probe_duration(self, mediafile: str) -> float:
		return getDuration(mediafile)

	def probe_aspect_ratio(self, mediafile: str) -> Fraction:
		return getAspectRatio(mediafile)
