# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Scope/binding graph for one file.

Scopes live in a `ScopeArena` and refer to each other by index: a scope
knows its parent index and the indices of its children, so the tree has no
object cycles and the arena can be dropped wholesale when the run ends.

Name resolution is deferred. `register_use` only consults the scope the
reference occurs in; anything not bound there is parked in that scope's
`undefined_references`. When an ancestor finalizes (after all of its
descendants have), it clears every parked reference in its subtree that
matches one of its own bindings. Whatever is still parked once the whole
file has finalized is genuinely undefined.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from pyjlint.core.diagnostics import Diagnostic, make_diagnostic
from pyjlint.core.span import Span

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BindingFlags:
	is_import: bool = False
	is_toplevel: bool = False
	is_class: bool = False
	is_function: bool = False
	is_func_arg: bool = False


@dataclass
class Binding:
	"""A declared name. `is_loop` and `used` are mutated after creation."""

	name: str
	span: Span
	is_import: bool = False
	is_toplevel: bool = False
	is_class: bool = False
	is_function: bool = False
	is_func_arg: bool = False
	is_loop: bool = False
	used: bool = False

	@classmethod
	def create(cls, name: str, span: Span, flags: BindingFlags) -> "Binding":
		return cls(
			name=name,
			span=span,
			is_import=flags.is_import,
			is_toplevel=flags.is_toplevel,
			is_class=flags.is_class,
			# A class is never also reported as a function.
			is_function=flags.is_function and not flags.is_class,
			is_func_arg=flags.is_func_arg,
		)


@dataclass
class ShadowRecord:
	name: str
	previous: Binding
	current: Binding


@dataclass
class Scope:
	index: int
	is_toplevel: bool = False
	parent: Optional[int] = None
	children: List[int] = field(default_factory=list)
	bindings: Dict[str, Binding] = field(default_factory=dict)
	shadowed: List[ShadowRecord] = field(default_factory=list)
	undefined_references: Dict[str, Span] = field(default_factory=dict)
	unused_bindings: Dict[str, Binding] = field(default_factory=dict)

	def add_binding(self, name: str, span: Span, flags: BindingFlags) -> Binding:
		"""
		Bind `name` in this scope and return the new Binding.

		Rebinding a name already bound in this same scope records a shadow;
		if the previous binding was used the new one starts out used too.
		"""
		binding = Binding.create(name, span, flags)
		previous = self.bindings.get(name)
		if previous is not None:
			if previous.used:
				binding.used = True
			self.shadowed.append(ShadowRecord(name, previous, binding))
		self.bindings[name] = binding
		return binding

	def register_use(self, name: str, span: Span) -> None:
		binding = self.bindings.get(name)
		if binding is not None:
			binding.used = True
		elif name not in self.undefined_references:
			self.undefined_references[name] = span

	def messages(self, filename: str) -> List[Diagnostic]:
		"""Diagnostics owned by this scope; only meaningful after the whole tree finalized."""
		out: List[Diagnostic] = []
		for name, span in self.undefined_references.items():
			out.append(make_diagnostic(filename, "undef", name, span))

		for name, binding in self.unused_bindings.items():
			if binding.is_import:
				out.append(make_diagnostic(filename, "unused-import", name, binding.span))
			elif not binding.is_toplevel and not binding.is_func_arg:
				out.append(make_diagnostic(filename, "unused-local", name, binding.span))

		for record in self.shadowed:
			if record.current.is_loop and not record.previous.is_loop:
				out.append(
					make_diagnostic(
						filename,
						"loop-shadowed",
						record.name,
						record.current.span,
						line=record.previous.span.line,
					)
				)
		return out


class ScopeArena:
	"""Owns every Scope created while walking one file."""

	def __init__(self) -> None:
		self.scopes: List[Scope] = []

	def __len__(self) -> int:
		return len(self.scopes)

	def __getitem__(self, index: int) -> Scope:
		return self.scopes[index]

	def new_scope(self, parent: Optional[int], *, is_toplevel: bool = False) -> Scope:
		scope = Scope(index=len(self.scopes), is_toplevel=is_toplevel, parent=parent)
		self.scopes.append(scope)
		if parent is not None:
			self.scopes[parent].children.append(scope.index)
		return scope

	def descendants(self, index: int) -> Iterator[Scope]:
		"""Pre-order iteration over the strict descendants of `index`."""
		stack = list(reversed(self.scopes[index].children))
		while stack:
			scope = self.scopes[stack.pop()]
			yield scope
			stack.extend(reversed(scope.children))

	def finalize(self, index: int) -> None:
		"""
		Resolve descendant references against the bindings of scope `index`
		and record its unused bindings.

		Must run after every descendant has finalized. Resolving a
		descendant reference does not mark the binding used; it only keeps
		the binding off the unused list.
		"""
		scope = self.scopes[index]
		resolved: List[Tuple[str, int]] = []
		for name, binding in scope.bindings.items():
			found = False
			for child in self.descendants(index):
				if name in child.undefined_references:
					found = True
					del child.undefined_references[name]
					resolved.append((name, child.index))
			if not found and not binding.used:
				scope.unused_bindings[name] = binding
		logger.debug(
			"finalized scope %d: %d bindings, %d resolved references, %d unused",
			index,
			len(scope.bindings),
			len(resolved),
			len(scope.unused_bindings),
		)


__all__ = ["BindingFlags", "Binding", "ShadowRecord", "Scope", "ScopeArena"]
