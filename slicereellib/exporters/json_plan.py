#!/usr/bin/env python3

"""
JSON rendering of a Plan, shared by --dry-run and --dump-json.

The structure is a list of chains, each chain a list of
{"command": ..., "args": [...]} objects in execution order.
"""

import json
import os
from slicereellib.core import utils
from slicereellib.core.errors import OutputError

#============================================

def serialize_plan(plan) -> list:
	return [chain.as_list() for chain in plan]

#============================================

def plan_to_json(plan, indent: int = None) -> str:
	return json.dumps(serialize_plan(plan), indent=indent)

#============================================

def default_dump_path(output_dir: str = None) -> str:
	"""
	Timestamped dump file name, inside output_dir when one is given.
	"""
	filename = f"slicereel-plan-{utils.make_timestamp()}.json"
	if output_dir is None:
		return filename
	return os.path.join(output_dir, filename)

#============================================

def write_plan_json(plan, path: str, create_parent: bool = True) -> str:
	parent = os.path.dirname(path)
	try:
		if parent and create_parent:
			os.makedirs(parent, exist_ok=True)
		with open(path, 'w', encoding='utf-8') as handle:
			handle.write(plan_to_json(plan, indent=2))
			handle.write("\n")
	except OSError as exc:
		raise OutputError(path, exc.strerror or str(exc))
	return path
