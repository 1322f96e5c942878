"""
Pytest coverage for the ffprobe wrapper.
"""

# Standard Library
import os
import subprocess
import sys
from fractions import Fraction

# PIP3 modules
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

# local repo modules
from slicereellib.core.errors import ProbeError
from slicereellib.media import ffprobe

#============================================

def test_parse_duration() -> None:
	assert ffprobe.parseDuration("12.500000\n") == 12.5

#============================================

@pytest.mark.parametrize("text", ["N/A", "", "nan", "inf", "-3"])
def test_parse_duration_rejects(text: str) -> None:
	with pytest.raises(ProbeError):
		ffprobe.parseDuration(text)

#============================================

def test_parse_ratio() -> None:
	assert ffprobe.parseRatio("16:9\n") == Fraction(16, 9)

#============================================

@pytest.mark.parametrize("text", ["N/A", "0:1", "16", "4:3:2"])
def test_parse_ratio_rejects(text: str) -> None:
	with pytest.raises(ProbeError):
		ffprobe.parseRatio(text)

#============================================

def test_get_duration_command(monkeypatch) -> None:
	"""
Ensure the duration probe uses the csv output form.
	"""
	seen = {}

	def fake_run(cmd, **kwargs):
		seen["cmd"] = cmd
		return subprocess.CompletedProcess(cmd, 0, stdout="42.0\n", stderr="")

	monkeypatch.setattr(ffprobe.subprocess, "run", fake_run)
	assert ffprobe.FfprobeMediaProbe().probe_duration("clip.mp4") == 42.0
	assert seen["cmd"] == [
		"ffprobe", "-i", "clip.mp4", "-show_entries", "format=duration",
		"-v", "quiet", "-of", "csv=p=0",
	]

#============================================

def test_get_aspect_ratio_failure(monkeypatch) -> None:
	def fake_run(cmd, **kwargs):
		return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="no such file")

	monkeypatch.setattr(ffprobe.subprocess, "run", fake_run)
	with pytest.raises(ProbeError):
		ffprobe.getAspectRatio("clip.mp4")
