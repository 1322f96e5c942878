"""
Ordered ffmpeg filter option model.

A FilterGraph maps cluster names (scale, fps, palettegen, ...) to
OptionCluster objects. Both keep insertion order, which is the order
ffmpeg evaluates the filter chain, so serialization order matters.

	graph = FilterGraph()
	colorspace = graph.get_or_create_cluster("colorspace")
	colorspace.add_option("all", "bt709")
	colorspace.add_option("srgb")
	graph.serialize()  # "colorspace=all=bt709:srgb"
"""

from fractions import Fraction
from slicereellib.core.errors import DuplicateOptionError
from slicereellib.core.errors import ValidationError

#============================================

def normalize_option_value(value):
	"""
	Collapse loosely typed option values to either None or a string.

	Args:
		value: None, str, int, float, Fraction or bool.

	Returns:
		str or None: None means a value-less option.
	"""
	if value is None:
		return None
	if isinstance(value, bool):
		return "1" if value else "0"
	if isinstance(value, int):
		return str(value)
	if isinstance(value, float):
		if value.is_integer():
			return str(int(value))
		return repr(value)
	if isinstance(value, Fraction):
		if value.denominator == 1:
			return str(value.numerator)
		return f"{value.numerator}/{value.denominator}"
	if isinstance(value, str):
		return value
	raise ValidationError(f"unsupported filter option value: {value!r}")

#============================================

def parse_option_assignment(text: str) -> tuple:
	"""
	Split KEY=VALUE (or a bare KEY) as given on the command line.
	"""
	text = str(text).strip()
	if text == "":
		raise ValidationError("filter option must not be empty")
	if '=' not in text:
		return (text, None)
	key, value = text.split('=', 1)
	if key == "":
		raise ValidationError(f"filter option is missing a key: {text}")
	return (key, value)

#============================================

class OptionCluster():
	def __init__(self, name: str):
		self.name = name
		self.entries = {}

	#============================
	def add_option(self, key: str, value=None) -> None:
		if key in self.entries:
			raise DuplicateOptionError(key)
		self.entries[key] = normalize_option_value(value)

	#============================
	def has_option(self, key: str) -> bool:
		return key in self.entries

	#============================
	def clone(self):
		cluster = OptionCluster(self.name)
		cluster.entries = dict(self.entries)
		return cluster

	#============================
	def serialize(self) -> str:
		if len(self.entries) == 0:
			return self.name
		parts = []
		for key, value in self.entries.items():
			if value is None:
				parts.append(key)
			else:
				parts.append(f"{key}={value}")
		return f"{self.name}={':'.join(parts)}"

	#============================
	def __len__(self) -> int:
		return len(self.entries)

#============================================

class FilterGraph():
	def __init__(self):
		self.clusters = {}

	#============================
	def get_or_create_cluster(self, name: str) -> OptionCluster:
		cluster = self.clusters.get(name)
		if cluster is None:
			cluster = OptionCluster(name)
			self.clusters[name] = cluster
		return cluster

	#============================
	def clone(self):
		graph = FilterGraph()
		for name, cluster in self.clusters.items():
			graph.clusters[name] = cluster.clone()
		return graph

	#============================
	def serialize(self) -> str:
		return ",".join(cluster.serialize() for cluster in self.clusters.values())

	#============================
	def is_empty(self) -> bool:
		return len(self.clusters) == 0
