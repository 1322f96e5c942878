#!/usr/bin/env python3

import os
from fractions import Fraction
from slicereellib.core import timestring
from slicereellib.core import utils
from slicereellib.core.errors import UnsupportedFormatError
from slicereellib.core.operations import Operation
from slicereellib.core.operations import OperationChain
from slicereellib.core.operations import Plan
from slicereellib.core.operations import TemporaryFileSet
from slicereellib.core.options import FilterGraph

#============================================

FFMPEG = "ffmpeg"

# kind decides whether video filters apply; palette selects the two pass chain
OUTPUT_FORMATS = {
	'mp4': {'kind': 'video', 'codec': ('-c:v', 'libx264'), 'palette': False},
	'gif': {'kind': 'video', 'codec': (), 'palette': True},
	'aac': {'kind': 'audio', 'codec': ('-c:a', 'aac'), 'palette': False},
	'opus': {'kind': 'audio', 'codec': ('-c:a', 'libopus'), 'palette': False},
	'mp3': {'kind': 'audio', 'codec': ('-c:a', 'libmp3lame'), 'palette': False},
}

COMPAT_ARGS = ('-profile:v', 'baseline', '-level', '3.0')

PALETTE_SCALE_FLAGS = 'lanczos'

#============================================

def get_output_format(extension: str) -> dict:
	output_format = OUTPUT_FORMATS.get(extension)
	if output_format is None:
		raise UnsupportedFormatError(extension)
	return output_format

#============================================

def resolve_scale(width, height, ratio) -> tuple:
	"""
	Work out the scale filter dimensions.

	A lone width is adjusted to the aspect ratio and paired with the
	matching height when the ratio is known, otherwise the missing side
	is -1 so ffmpeg keeps the aspect ratio.

	Args:
		width: Requested width or None.
		height: Requested height or None.
		ratio: Display aspect ratio as a Fraction, or None.

	Returns:
		tuple: (width, height), or None when no scaling was requested.
	"""
	if width is None and height is None:
		return None
	if width is not None and height is not None:
		return (width, height)
	if height is not None:
		return (-1, height)
	if ratio is None:
		return (width, -1)
	width = utils.adjust_width_from_ratio(width, ratio)
	scaled_height = Fraction(width) / Fraction(ratio)
	return (width, int(scaled_height))

#============================================

def part_file_name(input_file: str, suffix: str, window, extension: str) -> str:
	stem = os.path.splitext(os.path.basename(input_file))[0]
	return f"{stem}{utils.resolve_suffix(suffix, window)}.{extension}"

#============================================

class PipelineBuilder():
	def __init__(self, settings, temp_files: TemporaryFileSet = None):
		self.settings = settings
		self.temp_files = temp_files if temp_files is not None else TemporaryFileSet()
		self.output_format = get_output_format(settings.out_extension)
		self.scale = None
		if self.output_format['kind'] == 'video':
			self.scale = resolve_scale(settings.width, settings.height, settings.ratio)
		else:
			self._warn_ignored_video_options()

	#============================
	def _warn_ignored_video_options(self) -> None:
		ignored = (
			('--width', self.settings.width),
			('--height', self.settings.height),
			('--fps', self.settings.fps),
		)
		for flag, value in ignored:
			if value is not None:
				utils.warn(f"ignoring {flag} argument")
		if self.settings.srgb:
			utils.warn("ignoring --srgb argument")

	#============================
	def build_plan(self, windows: list) -> Plan:
		plan = Plan(temp_files=self.temp_files)
		for window in windows:
			plan.append(self.build(window))
		return plan

	#============================
	def build(self, window) -> OperationChain:
		settings = self.settings
		primary_input = settings.inputs[0]['file']
		output_name = part_file_name(primary_input, settings.suffix, window,
			settings.out_extension)
		output_path = os.path.join(settings.output_dir, output_name)
		base_args = self._base_args(window)
		graph = self._build_filter_graph()
		chain = OperationChain(window)
		extra_inputs = []
		if self.output_format['palette']:
			palette_path = os.path.join(settings.cache_dir, f"{output_name}.palette.png")
			chain.append(self._build_palette_pass(base_args, graph, palette_path))
			self.temp_files.add(palette_path)
			extra_inputs = ['-i', palette_path]
			paletteuse = graph.get_or_create_cluster('paletteuse')
			for key, value in settings.paletteuse_options:
				paletteuse.add_option(key, value)
		args = list(base_args)
		args += extra_inputs
		args += self._encode_args()
		if not graph.is_empty():
			args += ['-vf', graph.serialize()]
		if settings.preset is not None:
			args += ['-preset', settings.preset]
		args.append(output_path)
		chain.append(Operation(FFMPEG, tuple(args)))
		return chain

	#============================
	def _build_palette_pass(self, base_args: list, graph: FilterGraph,
		palette_path: str) -> Operation:
		palette_graph = graph.clone()
		scale = palette_graph.get_or_create_cluster('scale')
		scale.add_option('flags', PALETTE_SCALE_FLAGS)
		palettegen = palette_graph.get_or_create_cluster('palettegen')
		for key, value in self.settings.palettegen_options:
			palettegen.add_option(key, value)
		args = list(base_args)
		args += ['-vf', palette_graph.serialize()]
		args.append(palette_path)
		return Operation(FFMPEG, tuple(args))

	#============================
	def _base_args(self, window) -> list:
		settings = self.settings
		args = []
		if settings.hwaccel is not None:
			args += ['-hwaccel', settings.hwaccel]
		args += [
			'-ss', timestring.number_text(window.start_time),
			'-to', timestring.number_text(window.end_time),
		]
		for input_entry in settings.inputs:
			if input_entry.get('format') is not None:
				args += ['-f', input_entry['format']]
			args += ['-i', input_entry['file']]
		args += ['-threads', str(settings.threads)]
		return args

	#============================
	def _encode_args(self) -> list:
		settings = self.settings
		args = []
		if settings.video_bitrate is not None:
			args += ['-b:v', settings.video_bitrate]
		if settings.audio_bitrate is not None:
			args += ['-b:a', settings.audio_bitrate]
		args += list(self.output_format['codec'])
		if settings.compat:
			args += list(COMPAT_ARGS)
		return args

	#============================
	def _build_filter_graph(self) -> FilterGraph:
		graph = FilterGraph()
		if self.output_format['kind'] != 'video':
			return graph
		if self.scale is not None:
			scale = graph.get_or_create_cluster('scale')
			scale.add_option('width', self.scale[0])
			scale.add_option('height', self.scale[1])
		if self.settings.fps is not None:
			fps = graph.get_or_create_cluster('fps')
			fps.add_option('fps', self.settings.fps)
		if self.settings.srgb:
			colorspace = graph.get_or_create_cluster('colorspace')
			colorspace.add_option('all', 'bt709')
			colorspace.add_option('trc', 'srgb')
		return graph
