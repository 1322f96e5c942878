#!/usr/bin/env python3

from dataclasses import dataclass
from slicereellib.core import utils

#============================================

@dataclass(frozen=True)
class Operation():
	command: str
	args: tuple

	#============================
	def as_dict(self) -> dict:
		return {'command': self.command, 'args': list(self.args)}

	#============================
	def display(self) -> str:
		return utils.command_text(self.command, self.args)

#============================================

class OperationChain():
	"""
	Operations for one part, run strictly in order since a later
	operation may read a file an earlier one wrote.
	"""
	def __init__(self, window, operations: list = None):
		self.window = window
		self.operations = list(operations or [])

	#============================
	def append(self, operation: Operation) -> None:
		self.operations.append(operation)

	#============================
	def as_list(self) -> list:
		return [operation.as_dict() for operation in self.operations]

	#============================
	def __iter__(self):
		return iter(self.operations)

	#============================
	def __len__(self) -> int:
		return len(self.operations)

#============================================

class TemporaryFileSet():
	def __init__(self):
		self._paths = []

	#============================
	def add(self, path: str) -> None:
		if path in self:
			return
		self._paths.append(path)

	#============================
	def paths(self) -> list:
		return list(self._paths)

	#============================
	def __len__(self) -> int:
		return len(self._paths)

	#============================
	def __contains__(self, path: str) -> bool:
		return path in self._paths

#============================================

class Plan():
	def __init__(self, chains: list = None, temp_files: TemporaryFileSet = None):
		self.chains = list(chains or [])
		self.temp_files = temp_files if temp_files is not None else TemporaryFileSet()

	#============================
	def append(self, chain: OperationChain) -> None:
		self.chains.append(chain)

	#============================
	def operation_count(self) -> int:
		return sum(len(chain) for chain in self.chains)

	#============================
	def __iter__(self):
		return iter(self.chains)

	#============================
	def __len__(self) -> int:
		return len(self.chains)
