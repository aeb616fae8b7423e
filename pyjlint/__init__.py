# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
pyjlint: scope linter for RapydScript-style `.pyj` sources.

Subpackages:
  core: spans, diagnostics and the message catalog
  parser: AST node definitions and the lark-based reference front-end
  analysis: scope graph, tree walker and diagnostic resolution
"""

from pyjlint.linter import lint_code

__all__ = ["core", "parser", "analysis", "lint_code"]
