# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Walker dispatch and traversal state, driven by hand-built trees."""

from __future__ import annotations

from pyjlint.analysis import walker as walker_mod
from pyjlint.analysis.walker import BRANCH_KINDS, walk_module
from pyjlint.core.span import Span
from pyjlint.parser import ast as A
from pyjlint.parser.ast import NodeKind
from pyjlint.parser.parser import parse_source


def _name(name: str, line: int = 1, col: int = 0) -> A.Name:
	return A.Name(span=Span.point(line, col), id=name)


def test_every_node_kind_has_a_handler():
	assert set(walker_mod._HANDLERS) == set(NodeKind)


def test_branch_kinds():
	assert BRANCH_KINDS == {NodeKind.IF, NodeKind.TRY, NodeKind.EXCEPT}


def test_scopes_complete_leaves_first():
	ref = _name("value", 3, 15)
	inner = A.FunctionDef(
		span=Span.point(2, 0),
		name="inner",
		name_span=Span.point(2, 4),
		params=[],
		body=[A.Return(span=Span.point(3, 8), value=ref)],
	)
	assign = A.Assign(span=Span.point(4, 0), target=_name("value", 4, 0), op="=", value=A.Literal(span=Span.point(4, 8), value="1"))
	module = A.Module(span=Span.point(1, 0), body=[inner, assign])

	walker = walk_module(module, "t.pyj")

	assert walker.walked_scopes == [1, 0]
	top = walker.arena[0]
	assert top.is_toplevel
	assert not walker.arena[1].is_toplevel
	assert walker.arena[1].parent == 0
	assert walker.arena[1].undefined_references == {}
	assert set(top.bindings) == {"inner", "value"}
	assert top.bindings["inner"].is_function
	assert top.bindings["inner"].span == Span.point(2, 4)
	assert "inner" in top.unused_bindings
	assert "value" not in top.unused_bindings
	assert not top.bindings["value"].used
	assert walker.scope_stack == []
	assert walker.branch_depth == 0


def test_shared_subtree_is_visited_once():
	shared = A.Assign(span=Span.point(1, 0), target=_name("x"), op="=", value=A.Literal(span=Span.point(1, 4), value="1"))
	module = A.Module(span=Span.point(1, 0), body=[shared, shared])
	walker = walk_module(module, "t.pyj")
	assert walker.arena[0].shadowed == []


def test_binding_flags_follow_the_defining_node():
	walker = walk_module(
		parse_source(
			"import os\n"
			"from m import helper\n"
			"class A:\n"
			"    pass\n"
			"def f(arg):\n"
			"    for i in arg:\n"
			"        pass\n"
		),
		"t.pyj",
	)
	top = walker.arena[0]
	assert top.bindings["os"].is_import
	assert top.bindings["helper"].is_import
	assert top.bindings["A"].is_class and not top.bindings["A"].is_function
	assert top.bindings["f"].is_function
	assert all(b.is_toplevel for b in top.bindings.values())

	class_scope, fn_scope = walker.arena[1], walker.arena[2]
	assert class_scope.parent == 0 and not class_scope.is_toplevel
	assert fn_scope.bindings["arg"].is_func_arg
	assert fn_scope.bindings["i"].is_loop
	assert not fn_scope.bindings["i"].is_func_arg


def test_branch_depth_only_counts_enclosing_branches():
	walker = walk_module(
		parse_source("if a:\n    x = 1\ndef ok():\n    pass\ntry:\n    def bad():\n        pass\nexcept:\n    pass\n"),
		"t.pyj",
	)
	assert [(m.ident, m.name) for m in walker.messages] == [("func-in-branch", "bad")]


def test_with_initializer_is_walked_in_enclosing_scope():
	walker = walk_module(parse_source("def f(ctx):\n    with ctx as h:\n        h\n"), "t.pyj")
	fn_scope = walker.arena[1]
	assert fn_scope.bindings["ctx"].used
	assert fn_scope.bindings["h"].used
	assert fn_scope.undefined_references == {}


def test_stray_semicolon_is_reported_by_walker():
	walker = walk_module(parse_source(";\npass\n"), "t.pyj")
	assert [(m.ident, m.start_line, m.start_col) for m in walker.messages] == [("extra-semicolon", 1, 0)]
