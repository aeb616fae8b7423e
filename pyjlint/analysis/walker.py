# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Single-pass tree walker that builds the scope graph.

Dispatch is by `NodeKind` through `_HANDLERS`; every kind must have an
entry (possibly `_no_action`), which is checked when this module is
imported. A handler runs before the node's children are visited; if it
pushed a scope, that scope is finalized and moved to `walked_scopes` once
the children are done, so scopes always complete leaves-first.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Set

from pyjlint.analysis.scope import Binding, BindingFlags, ScopeArena
from pyjlint.core.diagnostics import Diagnostic, Severity, make_diagnostic
from pyjlint.core.span import Span
from pyjlint.parser import ast as A
from pyjlint.parser.ast import NodeKind

logger = logging.getLogger(__name__)

# Constructs under which a named function/class definition is illegal.
BRANCH_KINDS = frozenset({NodeKind.IF, NodeKind.TRY, NodeKind.EXCEPT})

_IMPORT_KINDS = frozenset({NodeKind.IMPORT, NodeKind.IMPORTED_NAME})
_FUNCTION_KINDS = frozenset({NodeKind.FUNCTION, NodeKind.LAMBDA})


class Walker:
	"""
	Mutable traversal state for one file.

	`scope_stack` holds arena indices of the scopes currently open,
	`branch_depth` counts enclosing branch constructs and `current_node` is
	the node whose kind decides the flags of the next binding.
	"""

	def __init__(self, filename: str) -> None:
		self.filename = filename
		self.arena = ScopeArena()
		self.scope_stack: List[int] = []
		self.walked_scopes: List[int] = []
		self.branch_depth = 0
		self.current_node: Optional[A.Node] = None
		self.messages: List[Diagnostic] = []
		self._visited: Set[int] = set()

	def walk(self, root: A.Node) -> None:
		self._visit(root)
		assert not self.scope_stack, "scope stack not empty after walk"
		assert self.branch_depth == 0, "branch depth not balanced after walk"
		logger.debug(
			"%s: walked %d scopes, %d direct diagnostics",
			self.filename,
			len(self.walked_scopes),
			len(self.messages),
		)

	def _visit(self, node: A.Node) -> None:
		key = id(node)
		if key in self._visited:
			return
		self._visited.add(key)

		self.current_node = node
		scope_count = len(self.scope_stack)
		is_branch = node.kind in BRANCH_KINDS
		if is_branch:
			self.branch_depth += 1

		_HANDLERS[node.kind](self, node)

		for child in node.children():
			self._visit(child)

		if len(self.scope_stack) > scope_count:
			index = self.scope_stack.pop()
			assert len(self.scope_stack) == scope_count, "a node may open at most one scope"
			self.arena.finalize(index)
			self.walked_scopes.append(index)

		if is_branch:
			self.branch_depth -= 1

	def _claim(self, node: A.Node) -> None:
		"""Mark a node as handled so the traversal skips it."""
		self._visited.add(id(node))

	# --- scope-level operations -----------------------------------------

	def push_scope(self) -> None:
		node = self.current_node
		parent = self.scope_stack[-1] if self.scope_stack else None
		is_toplevel = node is not None and node.kind is NodeKind.MODULE
		scope = self.arena.new_scope(parent, is_toplevel=is_toplevel)
		self.scope_stack.append(scope.index)

	def add_binding(self, name: str, span: Optional[Span] = None) -> Binding:
		assert self.scope_stack, "binding outside of any scope"
		scope = self.arena[self.scope_stack[-1]]
		node = self.current_node
		assert node is not None
		flags = BindingFlags(
			is_toplevel=scope.is_toplevel,
			is_import=node.kind in _IMPORT_KINDS,
			is_function=node.kind in _FUNCTION_KINDS,
			is_class=node.kind is NodeKind.CLASS,
			is_func_arg=node.kind is NodeKind.PARAM,
		)
		return scope.add_binding(name, span if span is not None else node.span, flags)

	def register_use(self, name: str) -> None:
		assert self.scope_stack, "reference outside of any scope"
		node = self.current_node
		assert node is not None
		self.arena[self.scope_stack[-1]].register_use(name, node.span)

	def _bind_target(self, owner: A.Node, target: A.Node, *, is_loop: bool) -> None:
		"""
		Bind a simple name or each simple name of a destructuring target.

		Non-name elements are left for the normal traversal (they become uses).
		"""
		if target.kind is NodeKind.NAME:
			names = [target]
		elif target.kind is NodeKind.ARRAY:
			names = [el for el in target.elements if el.kind is NodeKind.NAME]
		else:
			return
		for name_node in names:
			self._claim(name_node)
			self.current_node = name_node
			binding = self.add_binding(name_node.id)
			if is_loop:
				binding.is_loop = True
			self.current_node = owner

	# --- handlers ---------------------------------------------------------

	def _no_action(self, node: A.Node) -> None:
		pass

	def _handle_module(self, node: A.Module) -> None:
		self.push_scope()

	def _handle_named_definition(self, node: A.FunctionDef | A.ClassDef) -> None:
		if self.branch_depth:
			self.messages.append(make_diagnostic(self.filename, "func-in-branch", node.name, node.span))
		self.add_binding(node.name, node.name_span)
		self.push_scope()

	def _handle_lambda(self, node: A.Lambda) -> None:
		self.push_scope()

	def _handle_param(self, node: A.Param) -> None:
		self.add_binding(node.name)

	def _handle_decorator(self, node: A.Decorator) -> None:
		self.register_use(node.name)

	def _handle_import(self, node: A.Import) -> None:
		if node.names:
			return
		name = node.alias if node.alias else node.path[0]
		self.add_binding(name, node.alias_span if node.alias else node.span)

	def _handle_imported_name(self, node: A.ImportedName) -> None:
		self.add_binding(node.alias if node.alias else node.name)

	def _handle_assign(self, node: A.Assign) -> None:
		if node.target.kind is NodeKind.NAME and node.op != "=":
			# Augmented assignment mutates an existing name: the target is
			# visited as an ordinary reference.
			return
		self._bind_target(node, node.target, is_loop=False)

	def _handle_var_def(self, node: A.VarDef) -> None:
		if node.value is not None:
			self.current_node = node.value
		self.add_binding(node.name, node.name_span)
		self.current_node = node

	def _handle_name(self, node: A.Name) -> None:
		self.register_use(node.id)

	def _handle_comprehension(self, node: A.Comprehension) -> None:
		self.push_scope()
		self._bind_target(node, node.target, is_loop=True)

	def _handle_for_in(self, node: A.ForIn) -> None:
		self._bind_target(node, node.target, is_loop=True)

	def _handle_global(self, node: A.Global) -> None:
		# Bound as used: later assignments in this scope write the outer name.
		for name, span in zip(node.names, node.name_spans):
			self.add_binding(name, span).used = True

	def _handle_empty(self, node: A.Empty) -> None:
		if node.marker == ";":
			self.messages.append(
				make_diagnostic(self.filename, "extra-semicolon", ";", node.span, severity=Severity.WARN)
			)


_HANDLERS: Dict[NodeKind, Callable[[Walker, A.Node], None]] = {
	NodeKind.MODULE: Walker._handle_module,
	NodeKind.FUNCTION: Walker._handle_named_definition,
	NodeKind.LAMBDA: Walker._handle_lambda,
	NodeKind.CLASS: Walker._handle_named_definition,
	NodeKind.PARAM: Walker._handle_param,
	NodeKind.DECORATOR: Walker._handle_decorator,
	NodeKind.IMPORT: Walker._handle_import,
	NodeKind.IMPORTED_NAME: Walker._handle_imported_name,
	NodeKind.ASSIGN: Walker._handle_assign,
	NodeKind.VAR_DEF: Walker._handle_var_def,
	NodeKind.NAME: Walker._handle_name,
	NodeKind.COMPREHENSION: Walker._handle_comprehension,
	NodeKind.FOR_IN: Walker._handle_for_in,
	NodeKind.EMPTY: Walker._handle_empty,
	NodeKind.WHILE: Walker._no_action,
	NodeKind.IF: Walker._no_action,
	NodeKind.TRY: Walker._no_action,
	NodeKind.EXCEPT: Walker._no_action,
	NodeKind.WITH: Walker._no_action,
	NodeKind.EXPR_STMT: Walker._no_action,
	NodeKind.RETURN: Walker._no_action,
	NodeKind.RAISE: Walker._no_action,
	NodeKind.ASSERT: Walker._no_action,
	NodeKind.GLOBAL: Walker._handle_global,
	NodeKind.BREAK: Walker._no_action,
	NodeKind.CONTINUE: Walker._no_action,
	NodeKind.DEL: Walker._no_action,
	NodeKind.CALL: Walker._no_action,
	NodeKind.KEYWORD_ARG: Walker._no_action,
	NodeKind.ATTRIBUTE: Walker._no_action,
	NodeKind.SUBSCRIPT: Walker._no_action,
	NodeKind.SLICE: Walker._no_action,
	NodeKind.BIN_OP: Walker._no_action,
	NodeKind.UNARY_OP: Walker._no_action,
	NodeKind.BOOL_OP: Walker._no_action,
	NodeKind.COMPARE: Walker._no_action,
	NodeKind.TERNARY: Walker._no_action,
	NodeKind.ARRAY: Walker._no_action,
	NodeKind.DICT: Walker._no_action,
	NodeKind.LITERAL: Walker._no_action,
}

_UNHANDLED = [kind.name for kind in NodeKind if kind not in _HANDLERS]
if _UNHANDLED:
	raise TypeError(f"walker has no dispatch entry for node kinds: {', '.join(_UNHANDLED)}")


def walk_module(root: A.Node, filename: str) -> Walker:
	"""Walk `root` and return the finished walker (scopes finalized)."""
	walker = Walker(filename)
	walker.walk(root)
	return walker


__all__ = ["BRANCH_KINDS", "Walker", "walk_module"]
