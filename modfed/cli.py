# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line driver: rewrite one module's linkage using a JSON policy.

    python -m modfed src/app.js --policy mf.json -o out/app.js --emit-deps deps.json

Errors are reported as diagnostics: `file:line:col: error: message` on
stderr, or a JSON object on stdout with `--json`.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from pathlib import Path
from typing import List

from modfed.core.diagnostics import Diagnostic
from modfed.core.span import Span
from modfed.parser.parser import LinkageParseError, parse_module
from modfed.policy import PolicyError, TransformDep, load_policy_json
from modfed.printer import print_program
from modfed.rewrite.program_pass import rewrite_module


def main(argv: list[str] | None = None) -> int:
	"""
	Parse SOURCE, rewrite it against the policy and print the result.

	Returns 0 on success, 1 when any diagnostic was reported.
	"""
	parser = argparse.ArgumentParser(prog="modfed", description="Rewrite module linkage to load remote modules")
	parser.add_argument("source", type=Path, help="Path to the module source file")
	parser.add_argument("--policy", type=Path, required=True, help="Path to the policy JSON file")
	parser.add_argument("--remote-name", type=str, help="Override the policy's remote_name")
	parser.add_argument("-o", "--output", type=Path, help="Write rewritten source here (default: stdout)")
	parser.add_argument("--emit-deps", type=Path, help="Write every seen module reference as a JSON list")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/message/severity/file/line/column)",
	)
	args = parser.parse_args(argv)

	source_path: Path = args.source
	deps: List[TransformDep] = []
	diagnostics: List[Diagnostic] = []
	output = ""
	try:
		policy = load_policy_json(args.policy, on_transform_deps=deps.append)
		if args.remote_name:
			policy = dataclasses.replace(policy, remote_name=args.remote_name)
		module = parse_module(source_path.read_text(encoding="utf-8"), filename=str(source_path))
		output = print_program(rewrite_module(module, policy).body)
	except OSError as err:
		diagnostics.append(Diagnostic(message=str(err), phase="io", span=Span(file=err.filename)))
	except PolicyError as err:
		diagnostics.append(Diagnostic(message=str(err), phase="policy", span=Span(file=str(args.policy))))
	except LinkageParseError as err:
		diagnostics.append(Diagnostic(message=str(err), phase="parser", span=Span.from_loc(err.loc, file=str(source_path))))

	if diagnostics:
		_report(diagnostics, as_json=args.json)
		return 1

	if args.output is not None:
		args.output.parent.mkdir(parents=True, exist_ok=True)
		args.output.write_text(output, encoding="utf-8")
	else:
		sys.stdout.write(output)
	if args.emit_deps is not None:
		args.emit_deps.write_text(
			json.dumps([dataclasses.asdict(d) for d in deps], indent=2) + "\n",
			encoding="utf-8",
		)
	return 0


def _report(diagnostics: List[Diagnostic], *, as_json: bool) -> None:
	if as_json:
		payload = {"exit_code": 1, "diagnostics": [d.to_json() for d in diagnostics]}
		print(json.dumps(payload))
		return
	for d in diagnostics:
		print(d.render(), file=sys.stderr)


__all__ = ["main"]
