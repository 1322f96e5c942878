#!/usr/bin/env python3

"""
Bounded concurrent execution of a Plan.

Chains run on a fixed size thread pool; operations inside a chain run one
after another. Once a chain fails no further chains are started, chains
already running are left to finish, and the first failure is raised.
Temporary files are removed only after every chain succeeded.
"""

# Standard Library
import concurrent.futures
import os

# PIP3 modules
from tqdm import tqdm

# local repo modules
from slicereellib.core import utils
from slicereellib.core.errors import CleanupError
from slicereellib.core.errors import ExecutionError
from slicereellib.core.errors import ValidationError

#============================================

class ExecutionResult():
	def __init__(self):
		self.completed = []
		self.removed = []
		self.cleanup_error = None

	#============================
	def succeeded_parts(self) -> list:
		return sorted(self.completed)

#============================================

class ExecutionScheduler():
	def __init__(self, concurrency: int = 1, runner=None, keep_temp: bool = False,
		show_progress: bool = True):
		if concurrency < 1:
			raise ValidationError(f"--concurrency must be at least 1, got {concurrency}")
		self.concurrency = concurrency
		self.runner = runner if runner is not None else utils.run_process
		self.keep_temp = keep_temp
		self.show_progress = show_progress

	#============================
	def execute(self, plan) -> ExecutionResult:
		result = ExecutionResult()
		chains = plan.chains
		first_error = None
		next_index = 0
		in_flight = {}
		disable_progress = utils.is_quiet_mode() or not self.show_progress
		with concurrent.futures.ThreadPoolExecutor(max_workers=self.concurrency) as executor:
			with tqdm(total=len(chains), unit="part", disable=disable_progress) as progress:
				while next_index < len(chains) or len(in_flight) > 0:
					while (first_error is None and next_index < len(chains)
						and len(in_flight) < self.concurrency):
						future = executor.submit(self._run_chain, chains[next_index])
						in_flight[future] = next_index
						next_index += 1
					if len(in_flight) == 0:
						break
					done, _ = concurrent.futures.wait(in_flight,
						return_when=concurrent.futures.FIRST_COMPLETED)
					for future in done:
						index = in_flight.pop(future)
						error = future.exception()
						if error is None:
							result.completed.append(index)
							progress.update(1)
						elif first_error is None:
							first_error = error
		if first_error is not None:
			raise first_error
		if not self.keep_temp:
			self._cleanup(plan.temp_files, result)
		return result

	#============================
	def _run_chain(self, chain) -> None:
		for operation in chain:
			self._run_operation(operation)

	#============================
	def _run_operation(self, operation) -> None:
		try:
			proc = self.runner(operation.command, operation.args)
		except OSError as exc:
			raise ExecutionError(operation, 127, str(exc))
		if proc.returncode != 0:
			stderr = utils.stderr_tail(getattr(proc, 'stderr', ''))
			raise ExecutionError(operation, proc.returncode, stderr)

	#============================
	def _cleanup(self, temp_files, result: ExecutionResult) -> None:
		failures = []
		for filepath in temp_files.paths():
			if not os.path.exists(filepath):
				continue
			try:
				os.remove(filepath)
			except OSError as exc:
				failures.append((filepath, str(exc)))
				continue
			result.removed.append(filepath)
		if len(failures) > 0:
			result.cleanup_error = CleanupError(failures)
