"""
Pytest coverage for width adjustment, suffixes and ratios.
"""

# Standard Library
import os
import sys
from fractions import Fraction

# PIP3 modules
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

# local repo modules
from slicereellib.core import utils
from slicereellib.core.errors import ValidationError
from slicereellib.core.planner import TimeWindow

#============================================

def test_adjust_width_keeps_valid_width(capsys) -> None:
	assert utils.adjust_width_from_ratio(320, Fraction(1)) == 320
	assert capsys.readouterr().err == ""

#============================================

def test_adjust_width_grows_until_even_height(capsys) -> None:
	width = utils.adjust_width_from_ratio(321, Fraction(1))
	assert width == 322
	assert "Using --width 322 instead" in capsys.readouterr().err

#============================================

def test_adjust_width_sixteen_by_nine() -> None:
	width = utils.adjust_width_from_ratio(500, Fraction(16, 9))
	height = Fraction(width) / Fraction(16, 9)
	assert width > 500
	assert height.denominator == 1
	assert height.numerator % 2 == 0
	# smallest candidate: 512 / (16/9) = 288
	assert width == 512

#============================================

def test_adjust_width_rejects_non_positive_ratio() -> None:
	with pytest.raises(ValidationError):
		utils.adjust_width_from_ratio(320, Fraction(0))

#============================================

def test_resolve_suffix_default_template() -> None:
	window = TimeWindow(3600, 5430, 1)
	suffix = utils.resolve_suffix(".$startTime-$endTime-$part", window)
	assert suffix == ".1h-1h30m30s-1"

#============================================

def test_resolve_suffix_replaces_every_occurrence() -> None:
	window = TimeWindow(0, 10, 0)
	suffix = utils.resolve_suffix("_$startTime_$endTime_$startTime", window)
	assert suffix == "_0s_10s_0s"

#============================================

def test_resolve_suffix_part_is_optional() -> None:
	window = TimeWindow(0, 10, 4)
	assert utils.resolve_suffix("-$startTime-$endTime", window) == "-0s-10s"

#============================================

def test_resolve_suffix_requires_start_and_end() -> None:
	window = TimeWindow(0, 10, 0)
	with pytest.raises(ValidationError):
		utils.resolve_suffix("-$startTime-$part", window)
	with pytest.raises(ValidationError):
		utils.resolve_suffix("-$endTime", window)

#============================================

@pytest.mark.parametrize("raw,expected", [
	("16:9", Fraction(16, 9)),
	("16/9", Fraction(16, 9)),
	("1.5", Fraction(3, 2)),
	("1", Fraction(1)),
	(1, Fraction(1)),
	(None, None),
])
def test_parse_ratio(raw, expected) -> None:
	assert utils.parse_ratio(raw) == expected

#============================================

@pytest.mark.parametrize("raw", ["0", "-4:3", "4:0", "wide", "1:2:3"])
def test_parse_ratio_rejects(raw) -> None:
	with pytest.raises(ValidationError):
		utils.parse_ratio(raw)

#============================================

def test_log_respects_quiet_mode(capsys) -> None:
	utils.set_quiet_mode(True)
	utils.log("hidden")
	utils.set_quiet_mode(False)
	utils.log("shown")
	assert capsys.readouterr().out == "shown\n"

#============================================

def test_stderr_tail_keeps_last_lines() -> None:
	text = "\n".join(f"line {index}" for index in range(50))
	tail = utils.stderr_tail(text)
	assert tail.splitlines()[0] == "line 30"
	assert tail.splitlines()[-1] == "line 49"

#============================================

def test_parse_ratio_snaps_long_decimals(capsys) -> None:
	assert utils.parse_ratio("0.3333333") == Fraction(1, 3)
	assert "approximated as 1/3" in capsys.readouterr().err
	assert utils.parse_ratio("16:9") == Fraction(16, 9)
	assert capsys.readouterr().err == ""

#============================================

def test_adjust_width_gives_up_on_huge_ratio() -> None:
	with pytest.raises(ValidationError) as error:
		utils.adjust_width_from_ratio(320, Fraction(1000000))
	assert "no width near 320" in str(error.value)
