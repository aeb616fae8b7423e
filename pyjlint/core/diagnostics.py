# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic record and message catalog shared by the walker and resolver.

Every finding is identified by a stable key from `MESSAGES`; the rendered
text is produced once, when the diagnostic is created, by substituting
`{name}` and `{line}` into the template.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional

from pyjlint.core.span import Span


class Severity(enum.IntEnum):
	WARN = 1
	ERROR = 2

	@property
	def label(self) -> str:
		return "WARN" if self is Severity.WARN else "ERR"


MESSAGES: dict[str, str] = {
	"undef": 'undefined symbol: "{name}"',
	"unused-import": '"{name}" is imported but not used',
	"unused-local": '"{name}" is defined but not used',
	"loop-shadowed": 'The loop variable "{name}" was previously used in this scope at line: {line}',
	"extra-semicolon": "This semi-colon is not needed",
	"eol-semicolon": "Semi-colons at the end of the line are unnecessary",
	"func-in-branch": (
		"JavaScript in strict mode does not allow the definition of named functions/classes "
		"inside a branch such as an if/try/switch"
	),
	"syntax-err": "A syntax error caused compilation to abort",
}


@dataclass
class Diagnostic:
	"""One lint finding. Text-scan diagnostics carry no end position."""

	filename: str
	ident: str
	message: str
	severity: Severity = Severity.ERROR
	start_line: Optional[int] = None
	start_col: Optional[int] = None
	end_line: Optional[int] = None
	end_col: Optional[int] = None
	name: str = ""
	other_line: Optional[int] = None

	def to_dict(self) -> dict[str, Any]:
		"""Render to a JSON-friendly dict (used by `--json`)."""
		return {
			"filename": self.filename,
			"ident": self.ident,
			"message": self.message,
			"level": self.severity.label,
			"start_line": self.start_line,
			"start_col": self.start_col,
			"end_line": self.end_line,
			"end_col": self.end_col,
			"name": self.name,
			"other_line": self.other_line,
		}


def render_message(ident: str, name: str = "", line: Optional[int] = None) -> str:
	template = MESSAGES[ident]
	return template.replace("{name}", name or "").replace("{line}", "" if line is None else str(line))


def make_diagnostic(
	filename: str,
	ident: str,
	name: str,
	span: Span,
	*,
	severity: Severity = Severity.ERROR,
	line: Optional[int] = None,
) -> Diagnostic:
	"""
	Build a diagnostic attributed to a node's span.

	`line` is the secondary line substituted into `{line}` (only the
	loop-shadowed message uses it).
	"""
	start = span.start
	end = span.end
	return Diagnostic(
		filename=filename,
		ident=ident,
		message=render_message(ident, name, line),
		severity=severity,
		start_line=start.line if start is not None else None,
		start_col=start.col if start is not None else None,
		end_line=end.line if end is not None else None,
		end_col=end.col if end is not None else None,
		name=name,
		other_line=line,
	)


__all__ = ["Severity", "MESSAGES", "Diagnostic", "render_message", "make_diagnostic"]
