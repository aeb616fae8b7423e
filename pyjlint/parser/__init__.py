# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
`.pyj` front-end: AST definitions and the lark-based reference parser.
"""

from __future__ import annotations

from . import ast
from .parser import PyjSyntaxError, parse_source

__all__ = ["ast", "PyjSyntaxError", "parse_source"]
