
import os
import sys
import tempfile
import unittest
from fractions import Fraction

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

from slicereellib.core.errors import ParseError
from slicereellib.core.errors import ValidationError
from slicereellib.core.loader import SettingsLoader

#============================================

class SettingsLoaderTest(unittest.TestCase):
	#============================================
	def _write_config(self, temp_dir: str, lines: list) -> str:
		yaml_path = os.path.join(temp_dir, "slice.yaml")
		with open(yaml_path, "w") as yaml_file:
			yaml_file.write("\n".join(lines) + "\n")
		return yaml_path

	#============================================
	def test_defaults(self) -> None:
		settings = SettingsLoader({'inputs': ['movie.mp4']}).load()
		self.assertEqual(settings.part_duration, 3600)
		self.assertEqual(settings.skip, 0)
		self.assertIsNone(settings.until)
		self.assertEqual(settings.out_extension, "mp4")
		self.assertEqual(settings.suffix, ".$startTime-$endTime-$part")
		self.assertEqual(settings.output_dir, "movie.slicereel.output.parts")
		self.assertTrue(settings.output_dir_automatic)
		self.assertEqual(settings.cache_dir,
			os.path.join("movie.slicereel.output.parts", ".cache", "slicereel"))
		self.assertEqual(settings.concurrency, 1)
		self.assertEqual(settings.threads, 1)
		self.assertFalse(settings.clear_output_dir)

	#============================================
	def test_config_file_values(self) -> None:
		with tempfile.TemporaryDirectory() as temp_dir:
			lines = []
			lines.append("slicereel: 1")
			lines.append("inputs:")
			lines.append("  - {file: capture.raw, format: h264}")
			lines.append("  - narration.wav")
			lines.append("output_dir: parts")
			lines.append("duration: 10m")
			lines.append("skip: 30s")
			lines.append("out_extension: gif")
			lines.append("ratio: '16:9'")
			lines.append("palettegen:")
			lines.append("  stats_mode: diff")
			lines.append("  max_colors: 128")
			lines.append("concurrency: 4")
			yaml_path = self._write_config(temp_dir, lines)
			settings = SettingsLoader({}, config_file=yaml_path).load()
		self.assertEqual(settings.inputs, [
			{'file': 'capture.raw', 'format': 'h264'},
			{'file': 'narration.wav', 'format': None},
		])
		self.assertEqual(settings.output_dir, "parts")
		self.assertEqual(settings.part_duration, 600)
		self.assertEqual(settings.skip, 30)
		self.assertEqual(settings.ratio, Fraction(16, 9))
		self.assertEqual(settings.palettegen_options,
			[('stats_mode', 'diff'), ('max_colors', '128')])
		self.assertEqual(settings.concurrency, 4)
		self.assertEqual(settings.config_file, yaml_path)

	#============================================
	def test_cli_overrides_config(self) -> None:
		with tempfile.TemporaryDirectory() as temp_dir:
			lines = ["slicereel: 1", "inputs: [a.mp4]", "duration: 10m", "threads: 2"]
			yaml_path = self._write_config(temp_dir, lines)
			cli_values = {'duration': '5m', 'threads': None, 'inputs': None}
			settings = SettingsLoader(cli_values, config_file=yaml_path).load()
		self.assertEqual(settings.part_duration, 300)
		self.assertEqual(settings.threads, 2)
		self.assertEqual(settings.inputs, [{'file': 'a.mp4', 'format': None}])

	#============================================
	def test_config_requires_header(self) -> None:
		with tempfile.TemporaryDirectory() as temp_dir:
			yaml_path = self._write_config(temp_dir, ["inputs: [a.mp4]"])
			with self.assertRaises(ValidationError):
				SettingsLoader({}, config_file=yaml_path).load()

	#============================================
	def test_config_unknown_key(self) -> None:
		with tempfile.TemporaryDirectory() as temp_dir:
			lines = ["slicereel: 1", "inputs: [a.mp4]", "bitrate: 2M"]
			yaml_path = self._write_config(temp_dir, lines)
			with self.assertRaises(ValidationError) as context:
				SettingsLoader({}, config_file=yaml_path).load()
		self.assertIn("bitrate", str(context.exception))

	#============================================
	def test_missing_config_file(self) -> None:
		with self.assertRaises(ValidationError):
			SettingsLoader({}, config_file="/nonexistent/slice.yaml").load()

	#============================================
	def test_inputs_required(self) -> None:
		with self.assertRaises(ValidationError):
			SettingsLoader({}).load()

	#============================================
	def test_bad_duration(self) -> None:
		with self.assertRaises(ParseError):
			SettingsLoader({'inputs': ['a.mp4'], 'duration': '10'}).load()

	#============================================
	def test_extension_with_dot(self) -> None:
		with self.assertRaises(ValidationError):
			SettingsLoader({'inputs': ['a.mp4'], 'out_extension': '.gif'}).load()

	#============================================
	def test_rm_and_force_rm_rules(self) -> None:
		with self.assertRaises(ValidationError):
			SettingsLoader({'inputs': ['a.mp4'], 'rm': True}).load()
		with self.assertRaises(ValidationError):
			SettingsLoader({'inputs': ['a.mp4'], 'output_dir': 'out',
				'force_rm': True}).load()
		settings = SettingsLoader({'inputs': ['a.mp4'], 'force_rm': True}).load()
		self.assertTrue(settings.clear_output_dir)
		settings = SettingsLoader({'inputs': ['a.mp4'], 'output_dir': 'out',
			'rm': True}).load()
		self.assertTrue(settings.clear_output_dir)

	#============================================
	def test_concurrency_must_be_positive(self) -> None:
		with self.assertRaises(ValidationError):
			SettingsLoader({'inputs': ['a.mp4'], 'concurrency': 0}).load()

	#============================================
	def test_duplicate_palette_option(self) -> None:
		values = {'inputs': ['a.mp4'], 'paletteuse': ['dither=bayer', 'dither=none']}
		with self.assertRaises(ValidationError):
			SettingsLoader(values).load()

	#============================================
	def test_malformed_yaml(self) -> None:
		with tempfile.TemporaryDirectory() as temp_dir:
			yaml_path = self._write_config(temp_dir, ["slicereel: 1", "inputs: [a.mp4"])
			with self.assertRaises(ValidationError):
				SettingsLoader({}, config_file=yaml_path).load()

	#============================================
	def test_dry_run_known_after_failed_load(self) -> None:
		with tempfile.TemporaryDirectory() as temp_dir:
			lines = ["slicereel: 1", "dry_run: true", "concurrency: 0"]
			yaml_path = self._write_config(temp_dir, lines)
			loader = SettingsLoader({}, config_file=yaml_path)
			with self.assertRaises(ValidationError):
				loader.load()
		self.assertTrue(loader.dry_run)


if __name__ == '__main__':
	unittest.main()
