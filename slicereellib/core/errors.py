"""Exception classes raised while planning and running a slice job.

Every error derives from SlicereelError, itself a RuntimeError, so callers
that only know about RuntimeError keep working.
"""

#============================================

class SlicereelError(RuntimeError):
	"""Base class for all slicereel failures."""

#============================================

class ParseError(SlicereelError):
	"""A duration string could not be parsed."""

#============================================

class ValidationError(SlicereelError):
	"""An input or option violates a planning constraint."""

#============================================

class UnsupportedFormatError(ValidationError):
	"""The requested output extension cannot be produced."""

	def __init__(self, extension: str):
		self.extension = extension
		super().__init__(f"Unsupported output format {extension}")

#============================================

class DuplicateOptionError(ValidationError):
	"""An option key was added twice to the same filter cluster."""

	def __init__(self, key: str):
		self.key = key
		super().__init__(f"Option {key} already exists")

#============================================

class DryRunRequiresDurationError(ValidationError):
	"""Dry runs never probe media, so the total duration must be given."""

	def __init__(self):
		super().__init__(
			"Cannot determine total duration in dry run mode. "
			"Please specify --total-duration."
		)

#============================================

class ProbeError(SlicereelError):
	"""ffprobe returned something that is not a usable number or ratio."""

#============================================

class ExecutionError(SlicereelError):
	"""An operation of a chain exited with a non-zero status.

	Attributes:
		operation: The Operation that failed.
		returncode: Exit status, negative when killed by a signal.
		stderr: Tail of the captured standard error.
	"""

	def __init__(self, operation, returncode: int, stderr: str = ""):
		self.operation = operation
		self.returncode = returncode
		self.stderr = stderr
		message = f"command failed ({returncode}): {operation.display()}"
		if stderr:
			message += f"\n{stderr}"
		super().__init__(message)

#============================================

class CleanupError(SlicereelError):
	"""One or more temporary files could not be removed."""

	def __init__(self, failures: list):
		self.failures = failures
		paths = ", ".join(path for path, _ in failures)
		super().__init__(f"failed to remove temporary files: {paths}")

#============================================

class OutputError(SlicereelError):
	"""A directory or file under the output tree could not be written."""

	def __init__(self, path: str, reason: str):
		self.path = path
		self.reason = reason
		super().__init__(f"cannot write {path}: {reason}")
