# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source positions attached to AST nodes and diagnostics.

Lines are 1-based and columns 0-based, which is what the reporter prints.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Position:
	line: int
	col: int


@dataclass(frozen=True)
class Span:
	"""Start/end location of a node (both ends optional for synthetic nodes)."""

	start: Optional[Position] = None
	end: Optional[Position] = None

	@property
	def line(self) -> Optional[int]:
		return self.start.line if self.start is not None else None

	@classmethod
	def from_meta(cls, meta: Any) -> "Span":
		"""
		Construct a Span from a lark `Meta`/`Token`.

		Lark reports 1-based columns; they are shifted to 0-based here. Objects
		without position data (empty rules) produce the unknown Span().
		"""
		if meta is None or getattr(meta, "empty", False):
			return cls()
		line = getattr(meta, "line", None)
		column = getattr(meta, "column", None)
		if line is None or column is None:
			return cls()
		start = Position(line, column - 1)
		end_line = getattr(meta, "end_line", None)
		end_column = getattr(meta, "end_column", None)
		end = Position(end_line, end_column - 1) if end_line is not None and end_column is not None else None
		return cls(start=start, end=end)

	@classmethod
	def point(cls, line: int, col: int) -> "Span":
		return cls(start=Position(line, col), end=Position(line, col))


__all__ = ["Position", "Span"]
