#!/usr/bin/env python3

import os
import yaml
from slicereellib.core import timestring
from slicereellib.core import utils
from slicereellib.core.errors import ValidationError
from slicereellib.core.options import OptionCluster
from slicereellib.core.options import parse_option_assignment

#============================================

CONFIG_HEADER_KEY = "slicereel"
CONFIG_HEADER_VALUE = 1

DEFAULT_SUFFIX = ".$startTime-$endTime-$part"
OUTPUT_DIR_SUFFIX = ".slicereel.output.parts"

DEFAULTS = {
	'inputs': [],
	'output_dir': None,
	'suffix': DEFAULT_SUFFIX,
	'duration': "1h",
	'skip': "0s",
	'until': None,
	'total_duration': None,
	'concurrency': 1,
	'threads': 1,
	'fps': None,
	'width': None,
	'height': None,
	'ratio': None,
	'out_extension': "mp4",
	'video_bitrate': None,
	'audio_bitrate': None,
	'preset': None,
	'compat': False,
	'hwaccel': None,
	'srgb': False,
	'palettegen': [],
	'paletteuse': [],
	'cache_dir': None,
	'keep_temp': False,
	'rm': False,
	'force_rm': False,
	'dry_run': False,
	'dump_json': None,
	'show_plan': False,
	'quiet': False,
}

#============================================

class SliceSettings():
	def __init__(self):
		self.config_file = None
		self.inputs = []
		self.output_dir = None
		self.output_dir_automatic = False
		self.suffix = DEFAULT_SUFFIX
		self.part_duration = timestring.HOUR
		self.skip = timestring.ZERO
		self.until = None
		self.total_duration = None
		self.concurrency = 1
		self.threads = 1
		self.fps = None
		self.width = None
		self.height = None
		self.ratio = None
		self.out_extension = "mp4"
		self.video_bitrate = None
		self.audio_bitrate = None
		self.preset = None
		self.compat = False
		self.hwaccel = None
		self.srgb = False
		self.palettegen_options = []
		self.paletteuse_options = []
		self.cache_dir = None
		self.keep_temp = False
		self.clear_output_dir = False
		self.dry_run = False
		self.dump_json = None
		self.show_plan = False
		self.quiet = False

#============================================

class SettingsLoader():
	def __init__(self, cli_values: dict = None, config_file: str = None):
		self.cli_values = cli_values or {}
		self.config_file = config_file
		self.dry_run = False

	#============================
	def load(self) -> SliceSettings:
		raw = dict(DEFAULTS)
		if self.config_file is not None:
			raw.update(self._load_yaml())
		for key, value in self.cli_values.items():
			if key not in DEFAULTS:
				raise ValidationError(f"unknown option: {key}")
			if value is None:
				continue
			if isinstance(value, list) and len(value) == 0:
				continue
			raw[key] = value
		# known before validation so errors can be reported in dry run form
		self.dry_run = bool(raw['dry_run'])
		settings = self._build_settings(raw)
		settings.config_file = self.config_file
		return settings

	#============================
	def _load_yaml(self) -> dict:
		if not os.path.isfile(self.config_file):
			raise ValidationError(f"config file not found: {self.config_file}")
		with open(self.config_file, 'r', encoding='utf-8') as handle:
			try:
				data = yaml.safe_load(handle)
			except yaml.YAMLError as exc:
				raise ValidationError(f"config {self.config_file}: {exc}")
		if not isinstance(data, dict):
			raise ValidationError("config file must be a mapping")
		if data.get(CONFIG_HEADER_KEY) != CONFIG_HEADER_VALUE:
			raise ValidationError(
				f"config file must set {CONFIG_HEADER_KEY}: {CONFIG_HEADER_VALUE}"
			)
		values = {}
		for key, value in data.items():
			if key == CONFIG_HEADER_KEY:
				continue
			if key not in DEFAULTS:
				raise ValidationError(f"config {self.config_file}: unknown key {key}")
			values[key] = value
		return values

	#============================
	def _build_settings(self, raw: dict) -> SliceSettings:
		settings = SliceSettings()
		settings.inputs = self._parse_inputs(raw['inputs'])
		settings.out_extension = self._coerce_str(raw['out_extension'], 'out_extension')
		if settings.out_extension.startswith('.'):
			raise ValidationError(
				"value passed to --out-extension must not start with a dot "
				"(i.e. --out-extension opus)"
			)
		self._resolve_output_dir(settings, raw)
		settings.suffix = self._coerce_str(raw['suffix'], 'suffix')
		settings.part_duration = self._coerce_duration(raw['duration'], 'duration')
		settings.skip = self._coerce_duration(raw['skip'], 'skip')
		settings.until = self._coerce_duration(raw['until'], 'until')
		settings.total_duration = self._coerce_duration(raw['total_duration'],
			'total_duration')
		settings.concurrency = self._coerce_positive_int(raw['concurrency'], 'concurrency')
		settings.threads = self._coerce_positive_int(raw['threads'], 'threads')
		settings.fps = self._coerce_fps(raw['fps'])
		settings.width = self._coerce_positive_int(raw['width'], 'width')
		settings.height = self._coerce_positive_int(raw['height'], 'height')
		settings.ratio = utils.parse_ratio(raw['ratio'])
		settings.video_bitrate = self._coerce_str(raw['video_bitrate'], 'video_bitrate')
		settings.audio_bitrate = self._coerce_str(raw['audio_bitrate'], 'audio_bitrate')
		settings.preset = self._coerce_str(raw['preset'], 'preset')
		settings.hwaccel = self._coerce_str(raw['hwaccel'], 'hwaccel')
		settings.compat = bool(raw['compat'])
		settings.srgb = bool(raw['srgb'])
		settings.palettegen_options = self._parse_filter_options(raw['palettegen'],
			'palettegen')
		settings.paletteuse_options = self._parse_filter_options(raw['paletteuse'],
			'paletteuse')
		settings.cache_dir = self._coerce_str(raw['cache_dir'], 'cache_dir')
		if settings.cache_dir is None:
			settings.cache_dir = os.path.join(settings.output_dir, ".cache", "slicereel")
		settings.keep_temp = bool(raw['keep_temp'])
		settings.dry_run = bool(raw['dry_run'])
		settings.dump_json = raw['dump_json']
		settings.show_plan = bool(raw['show_plan'])
		settings.quiet = bool(raw['quiet'])
		return settings

	#============================
	def _resolve_output_dir(self, settings: SliceSettings, raw: dict) -> None:
		output_dir = self._coerce_str(raw['output_dir'], 'output_dir')
		clear_output_dir = bool(raw['rm'])
		force_clear = bool(raw['force_rm'])
		if output_dir is None:
			if clear_output_dir:
				raise ValidationError(
					"You cannot use --rm without specifying an output directory. "
					"Use --force-rm to force deletion of the input file."
				)
			first_input = settings.inputs[0]['file']
			output_dir = os.path.splitext(first_input)[0] + OUTPUT_DIR_SUFFIX
			settings.output_dir_automatic = True
			clear_output_dir = force_clear
		elif force_clear:
			raise ValidationError("You cannot use --force-rm with --output")
		settings.output_dir = output_dir
		settings.clear_output_dir = clear_output_dir

	#============================
	def _parse_inputs(self, raw_inputs) -> list:
		if raw_inputs is None or len(raw_inputs) == 0:
			raise ValidationError("-i is required")
		if not isinstance(raw_inputs, list):
			raise ValidationError("inputs must be a list")
		inputs = []
		for entry in raw_inputs:
			if isinstance(entry, str):
				inputs.append({'file': entry, 'format': None})
				continue
			if not isinstance(entry, dict) or entry.get('file') is None:
				raise ValidationError("each input needs a file")
			inputs.append({
				'file': str(entry['file']),
				'format': self._coerce_str(entry.get('format'), 'inputs.format'),
			})
		return inputs

	#============================
	def _parse_filter_options(self, raw_options, key_path: str) -> list:
		if raw_options is None:
			return []
		if isinstance(raw_options, dict):
			items = list(raw_options.items())
		elif isinstance(raw_options, (list, tuple)):
			items = [parse_option_assignment(entry) for entry in raw_options]
		else:
			raise ValidationError(f"{key_path} must be a list or a mapping")
		cluster = OptionCluster(key_path)
		for key, value in items:
			key = str(key)
			if cluster.has_option(key):
				raise ValidationError(f"--{key_path} option {key} given twice")
			cluster.add_option(key, value)
		return list(cluster.entries.items())

	#============================
	def _coerce_duration(self, value, key_path: str):
		if value is None:
			return None
		if isinstance(value, bool):
			raise ValidationError(f"{key_path} must be a duration such as 1h30m")
		if isinstance(value, (int, float)):
			if value < 0:
				raise ValidationError(f"{key_path} must not be negative")
			return value
		return timestring.parse_duration(str(value))

	#============================
	def _coerce_positive_int(self, value, key_path: str):
		if value is None:
			return None
		if isinstance(value, bool):
			raise ValidationError(f"{key_path} must be an integer")
		try:
			number = int(str(value).strip())
		except ValueError:
			raise ValidationError(f"{key_path} must be an integer, got {value}")
		if number < 1:
			raise ValidationError(f"{key_path} must be at least 1, got {number}")
		return number

	#============================
	def _coerce_fps(self, value):
		if value is None:
			return None
		text = str(value).strip()
		if text == "":
			raise ValidationError("fps must not be empty")
		if text.isdigit():
			if int(text) < 1:
				raise ValidationError(f"fps must be at least 1, got {text}")
			return int(text)
		return text

	#============================
	def _coerce_str(self, value, key_path: str):
		if value is None:
			return None
		if isinstance(value, (dict, list)):
			raise ValidationError(f"{key_path} must be a string")
		return str(value)
