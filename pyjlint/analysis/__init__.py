# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
pyjlint.analysis: scope-resolution engine.

Modules:
  - scope: Binding/Scope records and the per-file ScopeArena
  - walker: single-pass traversal populating the arena
  - resolver: line scan, suppression, filtering and ordering
  - builtins: built-in symbol catalog and base-library provider
"""

__all__ = [
	"builtins",
	"resolver",
	"scope",
	"walker",
]
