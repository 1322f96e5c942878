#!/usr/bin/env python3

import argparse
import json
import sys
from slicereellib.core import utils
from slicereellib.core.display import CommandPrinter
from slicereellib.core.errors import SlicereelError
from slicereellib.core.loader import SettingsLoader
from slicereellib.core.project import SlicereelProject
from slicereellib.exporters import json_plan

#============================================

class InputFormatAction(argparse.Action):
	"""Remember -f for the next -i, as ffmpeg does."""
	def __call__(self, parser, namespace, values, option_string=None):
		namespace.pending_format = values

#============================================

class InputFileAction(argparse.Action):
	def __call__(self, parser, namespace, values, option_string=None):
		inputs = getattr(namespace, self.dest, None)
		if inputs is None:
			inputs = []
		inputs.append({'file': values, 'format': namespace.pending_format})
		namespace.pending_format = None
		setattr(namespace, self.dest, inputs)

#============================================

def parse_args(argv: list = None):
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Slice a media file into fixed length parts with ffmpeg")
	parser.add_argument('-f', '--format', dest='pending_format',
		action=InputFormatAction, help='input format for the next -i')
	parser.add_argument('-i', '--input', dest='inputs', action=InputFileAction,
		help='input media file, repeat for more inputs')
	parser.add_argument('-o', '--output', dest='output_dir',
		help='output directory for the parts')
	parser.add_argument('--suffix', dest='suffix',
		help='part name suffix, must contain $startTime and $endTime')
	parser.add_argument('-d', '--duration', dest='duration',
		help='duration of each part, e.g. 10m or 1h30m')
	parser.add_argument('--skip', '--start-from', dest='skip',
		help='time to skip at the start of the first part')
	parser.add_argument('--until', dest='until',
		help='stop slicing at this time')
	parser.add_argument('--total-duration', dest='total_duration',
		help='total duration of the input, skips probing')
	parser.add_argument('--concurrency', dest='concurrency', type=int,
		help='number of parts processed at once')
	parser.add_argument('--threads', dest='threads', type=int,
		help='ffmpeg -threads value for each command')
	parser.add_argument('--fps', dest='fps', help='output frame rate')
	parser.add_argument('-w', '--width', dest='width', type=int,
		help='output width')
	parser.add_argument('--height', dest='height', type=int,
		help='output height')
	parser.add_argument('--ratio', dest='ratio',
		help='aspect ratio such as 16:9, skips probing')
	parser.add_argument('--out-extension', dest='out_extension',
		help='output format: mp4, gif, aac, opus or mp3')
	parser.add_argument('--video-bitrate', dest='video_bitrate',
		help='video bitrate passed as -b:v')
	parser.add_argument('--audio-bitrate', dest='audio_bitrate',
		help='audio bitrate passed as -b:a')
	parser.add_argument('--preset', dest='preset', help='encoder preset')
	parser.add_argument('--compat', '--compatibility', dest='compat',
		action='store_true', default=None,
		help='use the baseline profile for old players')
	parser.add_argument('--hwaccel', dest='hwaccel',
		help='hardware decoding method')
	parser.add_argument('--srgb', dest='srgb', action='store_true', default=None,
		help='convert colors to sRGB')
	parser.add_argument('--palettegen', dest='palettegen', action='append',
		help='palettegen option KEY[=VALUE], repeatable')
	parser.add_argument('--paletteuse', dest='paletteuse', action='append',
		help='paletteuse option KEY[=VALUE], repeatable')
	parser.add_argument('--cache-dir', dest='cache_dir',
		help='directory for intermediate palette images')
	parser.add_argument('--keep-temp', dest='keep_temp', action='store_true',
		default=None, help='keep intermediate files')
	parser.add_argument('--rm', dest='rm', action='store_true', default=None,
		help='remove the output directory first, requires -o')
	parser.add_argument('--force-rm', dest='force_rm', action='store_true',
		default=None, help='remove the automatic output directory first')
	parser.add_argument('--dry-run', dest='dry_run', action='store_true',
		default=None, help='print the plan as JSON and run nothing')
	parser.add_argument('--dump-json', dest='dump_json', nargs='?', const='',
		help='write the plan as JSON, optionally to PATH')
	parser.add_argument('--show-plan', dest='show_plan', action='store_true',
		default=None, help='print every command before running')
	parser.add_argument('-c', '--config', dest='config_file',
		help='yaml config file')
	parser.add_argument('-q', '--quiet', dest='quiet', action='store_true',
		default=None, help='suppress progress output')
	parser.set_defaults(pending_format=None)
	args = parser.parse_args(argv)
	return args

#============================================

def cli_values(args) -> dict:
	values = dict(vars(args))
	values.pop('pending_format', None)
	values.pop('config_file', None)
	return values

#============================================

def main(argv: list = None):
	args = parse_args(argv)
	dry_run = bool(args.dry_run)
	printer = CommandPrinter()
	utils.set_quiet_mode(dry_run or bool(args.quiet))
	if args.pending_format is not None:
		utils.warn(f"-f {args.pending_format} is not followed by -i and was ignored")
	loader = SettingsLoader(cli_values(args), config_file=args.config_file)
	try:
		settings = loader.load()
		dry_run = settings.dry_run
		if dry_run or settings.quiet:
			utils.set_quiet_mode(True)
		project = SlicereelProject(settings, printer=printer)
		plan = project.run()
	except SlicereelError as exc:
		if dry_run or loader.dry_run:
			print(json.dumps({'error': str(exc)}))
		else:
			printer.print_error(str(exc))
		sys.exit(1)
	if dry_run:
		print(json_plan.plan_to_json(plan))


if __name__ == '__main__':
	main()
