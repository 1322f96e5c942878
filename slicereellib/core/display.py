#!/usr/bin/env python3

"""
Highlighted command echo for live runs and --show-plan listings.
"""

# Standard Library
import re
import threading

# PIP3 modules
from rich.console import Console
from rich.text import Text

# local repo modules
from slicereellib.core import utils

#============================================

NORD_COLORS = {
	'header': "#88C0D0",
	'command': "#ECEFF4",
	'flags': "#81A1C1",
	'numbers': "#B48EAD",
	'paths': "#A3BE8C",
	'strings': "#EBCB8B",
	'codecs': "#D8DEE9",
	'error': "#BF616A",
}

#============================================

class CommandPrinter():
	def __init__(self, console: Console = None):
		self.console = console if console is not None else Console(stderr=True)
		self.command_styles = self._build_command_styles()
		self.lock = threading.Lock()

	#============================
	def _build_command_styles(self) -> list:
		return [
			(re.compile(r"\blibx264\b|\blibopus\b|\blibmp3lame\b|\baac\b"),
				NORD_COLORS['codecs']),
			(re.compile(r"(?<![\w/.])--?[A-Za-z][A-Za-z0-9_:-]*"), NORD_COLORS['flags']),
			(re.compile(r"\b\d+\.\d+\b"), NORD_COLORS['numbers']),
			(re.compile(r"\b\d+\b(?!\.\d)"), NORD_COLORS['numbers']),
			(re.compile(r"'[^']*'|\"[^\"]*\""), NORD_COLORS['strings']),
			(re.compile(r"(?:/|~|\./|\.\./)[^\s'\"`]+"), NORD_COLORS['paths']),
		]

	#============================
	def highlight(self, command: str) -> Text:
		text = Text(command, style=f"bold {NORD_COLORS['command']}")
		for pattern, style in self.command_styles:
			for match in pattern.finditer(command):
				text.stylize(style, match.start(), match.end())
		return text

	#============================
	def report(self, cmd: list) -> None:
		"""Command reporter hook for utils.run_process."""
		if utils.is_quiet_mode():
			return
		command = utils.command_text(cmd[0], cmd[1:])
		with self.lock:
			self.console.print(Text("CMD: ", style=NORD_COLORS['header']),
				self.highlight(command), sep="")

	#============================
	def print_plan(self, plan) -> None:
		with self.lock:
			self.console.print(Text("Here are the commands that will be run:",
				style=f"bold {NORD_COLORS['header']}"))
			for chain in plan:
				window = chain.window
				self.console.print(Text(f"part {window.part_index}",
					style=NORD_COLORS['header']))
				for operation in chain:
					self.console.print(Text("\t"), self.highlight(operation.display()),
						sep="")

	#============================
	def print_error(self, message: str) -> None:
		with self.lock:
			self.console.print(Text(f"error: {message}",
				style=f"bold {NORD_COLORS['error']}"))
