# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
One-file lint pipeline: parse → walk → resolve.

A parse failure short-circuits the run into a single `syntax-err`
diagnostic; no scope diagnostics are ever mixed with it.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Callable, List, Optional

from pyjlint.analysis.builtins import DEFAULT_BUILTINS
from pyjlint.analysis.resolver import resolve
from pyjlint.analysis.walker import walk_module
from pyjlint.core.diagnostics import Diagnostic, Severity, render_message
from pyjlint.parser.ast import Module
from pyjlint.parser.parser import PyjSyntaxError, parse_source

logger = logging.getLogger(__name__)

Reporter = Callable[[Diagnostic], None]


def syntax_error_diagnostic(exc: PyjSyntaxError, filename: str) -> Diagnostic:
	return Diagnostic(
		filename=filename,
		ident="syntax-err",
		message=exc.message or render_message("syntax-err"),
		severity=Severity.ERROR,
		start_line=exc.line,
		start_col=exc.col,
	)


def lint_tree(
	tree: Module,
	code: str,
	*,
	filename: str = "<eval>",
	builtins: AbstractSet[str] = DEFAULT_BUILTINS,
) -> List[Diagnostic]:
	"""Analyze an already-parsed module; `code` is its source text for the line scan."""
	walker = walk_module(tree, filename)
	return resolve(walker, code, builtins)


def lint_code(
	code: str,
	*,
	filename: str = "<eval>",
	builtins: AbstractSet[str] = DEFAULT_BUILTINS,
	report: Optional[Reporter] = None,
) -> List[Diagnostic]:
	"""
	Lint one source text and return its ordered diagnostics.

	Every diagnostic is also passed to `report` when given.
	"""
	try:
		tree = parse_source(code)
	except PyjSyntaxError as exc:
		logger.debug("%s: parse failed: %s", filename, exc.message)
		messages = [syntax_error_diagnostic(exc, filename)]
	else:
		messages = lint_tree(tree, code, filename=filename, builtins=builtins)

	if report is not None:
		for diag in messages:
			report(diag)
	return messages


__all__ = ["Reporter", "syntax_error_diagnostic", "lint_tree", "lint_code"]
