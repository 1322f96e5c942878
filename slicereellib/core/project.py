#!/usr/bin/env python3

import os
import shutil
from slicereellib.core import planner
from slicereellib.core import utils
from slicereellib.core.display import CommandPrinter
from slicereellib.core.errors import DryRunRequiresDurationError
from slicereellib.core.errors import OutputError
from slicereellib.core.pipeline import FFMPEG
from slicereellib.core.pipeline import PipelineBuilder
from slicereellib.core.pipeline import get_output_format
from slicereellib.core.scheduler import ExecutionScheduler
from slicereellib.exporters import json_plan
from slicereellib.media.ffprobe import FfprobeMediaProbe

#============================================

class SlicereelProject():
	def __init__(self, settings, probe=None, runner=None, printer=None):
		self.settings = settings
		self.probe = probe if probe is not None else FfprobeMediaProbe()
		self.runner = runner
		self.printer = printer if printer is not None else CommandPrinter()
		self.dry_run = settings.dry_run
		self.primary_input = settings.inputs[0]['file']
		self.plan = None
		self.result = None
		self.dump_path = None

	#============================
	def build_plan(self):
		"""
		Partition the time range and expand every part into its chain.

		Returns:
			Plan: chains in part order plus the temporary file set.
		"""
		settings = self.settings
		output_format = get_output_format(settings.out_extension)
		total_duration = self._resolve_total_duration()
		windows = planner.plan_parts(total_duration, settings.skip, settings.until,
			settings.part_duration)
		if self._needs_aspect_probe(output_format):
			settings.ratio = self.probe.probe_aspect_ratio(self.primary_input)
		builder = PipelineBuilder(settings)
		self.plan = builder.build_plan(windows)
		return self.plan

	#============================
	def _resolve_total_duration(self):
		if self.settings.total_duration is not None:
			return self.settings.total_duration
		if self.dry_run:
			raise DryRunRequiresDurationError()
		return self.probe.probe_duration(self.primary_input)

	#============================
	def _needs_aspect_probe(self, output_format: dict) -> bool:
		settings = self.settings
		if self.dry_run or output_format['kind'] != 'video':
			return False
		if settings.ratio is not None:
			return False
		return settings.width is not None and settings.height is None

	#============================
	def run(self):
		if not self.dry_run:
			utils.ensure_file_exists(self.primary_input)
			if self.runner is None:
				utils.check_dependency(FFMPEG)
		plan = self.build_plan()
		utils.log(f"planned {len(plan)} part(s), {plan.operation_count()} command(s)")
		if not self.dry_run:
			self._prepare_directories()
		self._dump_plan(plan)
		if self.settings.show_plan:
			self.printer.print_plan(plan)
		if self.dry_run:
			return plan
		scheduler = ExecutionScheduler(self.settings.concurrency, runner=self.runner,
			keep_temp=self.settings.keep_temp)
		utils.set_command_reporter(self.printer.report)
		try:
			self.result = scheduler.execute(plan)
		finally:
			utils.clear_command_reporter()
		if self.result.cleanup_error is not None:
			utils.warn(str(self.result.cleanup_error))
		finished = self.result.succeeded_parts()
		utils.log(f"finished {len(finished)} part(s) in {self.settings.output_dir}")
		return plan

	#============================
	def _dump_plan(self, plan) -> None:
		dump_json = self.settings.dump_json
		if dump_json is None:
			return
		if dump_json == '':
			# dry runs create no directories, so the dump lands in the cwd
			output_dir = None if self.dry_run else self.settings.output_dir
			dump_json = json_plan.default_dump_path(output_dir)
		self.dump_path = json_plan.write_plan_json(plan, dump_json,
			create_parent=not self.dry_run)
		utils.log(f"plan written to {self.dump_path}")

	#============================
	def _prepare_directories(self) -> None:
		settings = self.settings
		if settings.output_dir_automatic:
			utils.log(f"Automatically using output directory {settings.output_dir}")
		if settings.clear_output_dir and os.path.isdir(settings.output_dir):
			utils.log(f"removing {settings.output_dir}")
			try:
				shutil.rmtree(settings.output_dir)
			except OSError as exc:
				raise OutputError(settings.output_dir, exc.strerror or str(exc))
		self._make_directory(settings.output_dir)
		if self.plan is not None and len(self.plan.temp_files) > 0:
			self._make_directory(settings.cache_dir)

	#============================
	def _make_directory(self, path: str) -> None:
		try:
			os.makedirs(path, exist_ok=True)
		except OSError as exc:
			raise OutputError(path, exc.strerror or str(exc))
