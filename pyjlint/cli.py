# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line driver: lint one or more `.pyj` files (or stdin) in sequence.

Exit status is 0 when no file produced a diagnostic and 1 otherwise,
including usage errors, unreadable inputs and syntax errors.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import FrozenSet, List, TextIO

from pyjlint.analysis.builtins import FileBaselibProvider, SourceUnavailableError, load_builtins, read_names_file
from pyjlint.core.diagnostics import Diagnostic
from pyjlint.linter import lint_code
from pyjlint.parser.parser import PyjSyntaxError

logger = logging.getLogger(__name__)

STDIN_NAME = "-"


class UsageError(Exception):
	"""Invalid command-line usage (reported on stderr, exit status 1)."""


def _configure_logging(verbosity: int) -> None:
	"""0 → WARNING, 1 → INFO, 2+ → DEBUG on the `pyjlint` logger."""
	level = logging.WARNING
	if verbosity == 1:
		level = logging.INFO
	elif verbosity >= 2:
		level = logging.DEBUG
	root = logging.getLogger("pyjlint")
	root.setLevel(level)
	if not root.handlers:
		handler = logging.StreamHandler(sys.stderr)
		handler.setFormatter(logging.Formatter(fmt="[%(levelname)-5.5s] %(name)s: %(message)s"))
		root.addHandler(handler)


def format_diagnostic(diag: Diagnostic) -> str:
	"""`filename:WARN|ERR:ident:line:col: message`; unknown positions are left empty."""
	parts = [
		diag.filename,
		diag.severity.label,
		diag.ident,
		"" if diag.start_line is None else str(diag.start_line),
		"" if diag.start_col is None else str(diag.start_col),
	]
	return ":".join(parts) + ": " + diag.message


def _make_reporter(as_json: bool, out: TextIO):
	def report(diag: Diagnostic) -> None:
		if as_json:
			print(json.dumps(diag.to_dict()), file=out)
		else:
			print(format_diagnostic(diag), file=out)

	return report


def validate_files(files: List[str]) -> List[str]:
	"""Default to stdin when no file is given; at most one `-` is allowed."""
	if not files:
		return [STDIN_NAME]
	if files.count(STDIN_NAME) > 1:
		raise UsageError("Can read a single file from STDIN (two or more dashes specified)")
	return files


def _load_builtins(args: argparse.Namespace) -> FrozenSet[str]:
	extra: List[str] = []
	for path in args.builtins_file:
		extra.extend(read_names_file(path))
	provider = FileBaselibProvider(args.baselib) if args.baselib is not None else None
	return load_builtins(provider, extra)


def _read_source(name: str) -> str:
	if name == STDIN_NAME:
		return sys.stdin.read()
	return Path(name).read_text(encoding="utf-8-sig")


def main(argv: list[str] | None = None) -> int:
	parser = argparse.ArgumentParser(prog="pyjlint", description="Scope linter for RapydScript .pyj sources")
	parser.add_argument("files", nargs="*", help="Files to lint; '-' or no file reads standard input")
	parser.add_argument("--json", action="store_true", help="Print one JSON object per diagnostic")
	parser.add_argument(
		"--builtins-file",
		type=Path,
		action="append",
		default=[],
		help="File of extra global names, one per line (repeatable)",
	)
	parser.add_argument("--baselib", type=Path, help="Base library source whose module-level names count as built-ins")
	parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
	args = parser.parse_args(argv)
	_configure_logging(args.verbose)

	try:
		files = validate_files(list(args.files))
	except UsageError as exc:
		print(f"ERROR: {exc}", file=sys.stderr)
		return 1

	try:
		builtins = _load_builtins(args)
	except (SourceUnavailableError, PyjSyntaxError) as exc:
		print(f"ERROR: {exc}", file=sys.stderr)
		return 1

	report = _make_reporter(args.json, sys.stdout)
	all_ok = True
	for name in files:
		try:
			code = _read_source(name)
		except (OSError, UnicodeDecodeError) as exc:
			print(f"ERROR: can't read file: {name}", file=sys.stderr)
			logger.info("read failed for %s: %s", name, exc)
			return 1
		filename = "<stdin>" if name == STDIN_NAME else name
		logger.info("linting %s", filename)
		if lint_code(code, filename=filename, builtins=builtins, report=report):
			all_ok = False
	return 0 if all_ok else 1


__all__ = ["UsageError", "format_diagnostic", "validate_files", "main"]
