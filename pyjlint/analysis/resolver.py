# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Whole-file diagnostic resolution.

Merges the walker's direct diagnostics, a line-oriented scan of the raw
source (trailing `;` and `no-lint` directives) and every walked scope's
messages, then filters and sorts them:

- a diagnostic is dropped when its start line carries a directive that
  names its identifier (a bare `no-lint` names all of them);
- an `undef` is dropped when the name is a known built-in;
- the rest is ordered by (line, column), ties keeping emission order.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Dict, FrozenSet, List, Optional, Tuple

from pyjlint.analysis.walker import Walker
from pyjlint.core.diagnostics import MESSAGES, Diagnostic, Severity, render_message

logger = logging.getLogger(__name__)

NO_LINT = "no-lint"
SUPPRESS_ALL: FrozenSet[str] = frozenset(MESSAGES)


def parse_directive(word: str) -> Optional[FrozenSet[str]]:
	"""
	Interpret the last word of a line as a suppression directive.

	Returns None when the word is not a directive, `SUPPRESS_ALL` for a bare
	marker and the listed identifiers for `no-lint:id1,id2`.
	"""
	if word.startswith("#"):
		word = word[1:]
	if word[: len(NO_LINT)].lower() != NO_LINT:
		return None
	_, colon, rest = word.partition(":")
	if not colon:
		return SUPPRESS_ALL
	return frozenset(part.strip() for part in rest.split(","))


def code_part(line: str) -> str:
	"""Strip a trailing `#` comment, ignoring `#` inside single-line string literals."""
	quote: Optional[str] = None
	escaped = False
	for i, ch in enumerate(line):
		if quote is not None:
			if escaped:
				escaped = False
			elif ch == "\\":
				escaped = True
			elif ch == quote:
				quote = None
		elif ch in ("'", '"'):
			quote = ch
		elif ch == "#":
			return line[:i]
	return line


def scan_lines(code: str, filename: str) -> Tuple[List[Diagnostic], Dict[int, FrozenSet[str]]]:
	"""
	Scan raw source lines for trailing semicolons and suppression directives.

	Returns the `eol-semicolon` diagnostics and a map of 1-based line number
	to the identifiers suppressed on that line.
	"""
	messages: List[Diagnostic] = []
	line_filters: Dict[int, FrozenSet[str]] = {}
	for num, raw in enumerate(code.split("\n"), start=1):
		line = raw.rstrip()
		code_text = code_part(line).rstrip()
		if code_text.endswith(";"):
			messages.append(
				Diagnostic(
					filename=filename,
					ident="eol-semicolon",
					message=render_message("eol-semicolon"),
					severity=Severity.WARN,
					start_line=num,
					start_col=code_text.rfind(";"),
					name=";",
				)
			)
		last = line.split(" ")[-1]
		if last:
			directive = parse_directive(last)
			if directive is not None:
				line_filters[num] = directive
	return messages, line_filters


def _is_suppressed(diag: Diagnostic, line_filters: Dict[int, FrozenSet[str]]) -> bool:
	if diag.start_line is None:
		return False
	idents = line_filters.get(diag.start_line)
	return idents is not None and diag.ident in idents


def _sort_key(diag: Diagnostic) -> Tuple[int, int]:
	return (diag.start_line or 0, diag.start_col or 0)


def resolve(walker: Walker, code: str, builtins: AbstractSet[str]) -> List[Diagnostic]:
	"""Produce the final, ordered diagnostic list for a fully walked file."""
	filename = walker.filename
	messages: List[Diagnostic] = list(walker.messages)
	text_messages, line_filters = scan_lines(code, filename)
	messages.extend(text_messages)
	for index in walker.walked_scopes:
		messages.extend(walker.arena[index].messages(filename))

	kept = [
		diag
		for diag in messages
		if not _is_suppressed(diag, line_filters) and not (diag.ident == "undef" and diag.name in builtins)
	]
	kept.sort(key=_sort_key)
	logger.debug("%s: %d diagnostics, %d after filtering", filename, len(messages), len(kept))
	return kept


__all__ = ["NO_LINT", "SUPPRESS_ALL", "parse_directive", "code_part", "scan_lines", "resolve"]
