# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
pyjlint.core: shared location and diagnostic types used by every stage.

Modules:
  - span: Position/Span source locations
  - diagnostics: Diagnostic record, severities and the message catalog
"""

__all__ = [
	"diagnostics",
	"span",
]
