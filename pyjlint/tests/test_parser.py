# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Parser front-end: token folding, AST shapes and syntax errors."""

from __future__ import annotations

import pytest

from pyjlint.core.span import Position
from pyjlint.parser import ast as A
from pyjlint.parser.ast import NodeKind
from pyjlint.parser.parser import PyjSyntaxError, parse_source


def _body(src: str):
	return parse_source(src).body


def test_name_spans_are_one_based_lines_zero_based_columns():
	(stmt,) = _body("x = foo\n")
	assert isinstance(stmt, A.Assign)
	assert stmt.target.span.start == Position(1, 0)
	assert stmt.value.span.start == Position(1, 4)


def test_missing_final_newline_is_accepted():
	(stmt,) = _body("foo")
	assert isinstance(stmt, A.ExprStmt)
	assert stmt.value.id == "foo"


def test_semicolon_separated_statements_and_trailing_separator():
	assert [s.kind for s in _body("x = 1; y = 2\n")] == [NodeKind.ASSIGN, NodeKind.ASSIGN]
	assert [s.kind for s in _body("x = 1;\n")] == [NodeKind.ASSIGN]


def test_stray_semicolon_becomes_empty_statement():
	body = _body("x = 1;;\n")
	assert [s.kind for s in body] == [NodeKind.ASSIGN, NodeKind.EMPTY]
	assert body[1].marker == ";"
	assert body[1].span.start == Position(1, 6)

	(lone,) = _body(";\n")
	assert lone.marker == ";"
	(stmt,) = _body("pass\n")
	assert stmt.marker == "pass"


def test_chained_and_augmented_assignment():
	(chain,) = _body("a = b = 1\n")
	assert chain.target.id == "a"
	assert isinstance(chain.value, A.Assign)
	assert chain.value.target.id == "b"
	assert chain.value.value.value == "1"

	(aug,) = _body("x += 2\n")
	assert aug.op == "+="
	assert aug.target.id == "x"


def test_destructuring_target_is_array():
	(stmt,) = _body("a, b = 1, 2\n")
	assert isinstance(stmt.target, A.ArrayLiteral)
	assert [el.id for el in stmt.target.elements] == ["a", "b"]
	assert len(stmt.value.elements) == 2


def test_imports():
	plain, aliased = _body("import a.b\nimport c.d as e\n")
	assert plain.path == ["a", "b"]
	assert plain.alias is None and plain.names == []
	assert aliased.alias == "e"
	assert aliased.alias_span.start == Position(2, 14)

	(frm,) = _body("from pkg.mod import (x, y as z)\n")
	assert frm.path == ["pkg", "mod"]
	assert [(n.name, n.alias) for n in frm.names] == [("x", None), ("y", "z")]


def test_elif_nests_in_orelse():
	src = "if a:\n    pass\nelif b:\n    pass\nelse:\n    c\n"
	(node,) = _body(src)
	assert isinstance(node, A.If)
	(inner,) = node.orelse
	assert isinstance(inner, A.If)
	assert inner.test.id == "b"
	assert inner.orelse[0].value.id == "c"


def test_try_shape():
	src = "try:\n    a\nexcept E as err:\n    b\nexcept:\n    c\nfinally:\n    d\n"
	(node,) = _body(src)
	assert isinstance(node, A.Try)
	first, bare = node.handlers
	assert first.type.id == "E"
	assert first.binder.name == "err"
	assert bare.type is None and bare.binder is None
	assert node.finalbody[0].value.id == "d"


def test_function_with_decorator_and_params():
	src = "@deco.attr(1)\ndef f(a, b=2, *rest, **kw):\n    return a\n"
	(fn,) = _body(src)
	assert isinstance(fn, A.FunctionDef)
	assert fn.name == "f"
	assert fn.name_span.start == Position(2, 4)
	assert [(p.name, p.star) for p in fn.params] == [("a", ""), ("b", ""), ("rest", "*"), ("kw", "**")]
	assert fn.params[1].default.value == "2"
	(deco,) = fn.decorators
	assert deco.name == "deco"
	assert len(deco.args) == 1


def test_class_with_bases():
	(cls,) = _body("class A(Base):\n    x = 1\n")
	assert isinstance(cls, A.ClassDef)
	assert cls.bases[0].id == "Base"
	assert cls.body[0].kind is NodeKind.ASSIGN


def test_comprehension_and_lambda():
	(stmt,) = _body("r = [n for n in xs if n]\n")
	comp = stmt.value
	assert isinstance(comp, A.Comprehension)
	assert comp.target.id == "n"
	assert comp.iterable.id == "xs"
	assert comp.condition.id == "n"

	(stmt,) = _body("g = lambda a, b: a\n")
	assert isinstance(stmt.value, A.Lambda)
	assert [p.name for p in stmt.value.params] == ["a", "b"]


def test_with_alias_is_var_def():
	(node,) = _body("with ctx() as h, other:\n    pass\n")
	first, second = node.items
	assert isinstance(first, A.VarDef)
	assert first.name == "h"
	assert isinstance(first.value, A.Call)
	assert second.kind is NodeKind.NAME


def test_keyword_arguments():
	(stmt,) = _body("f(key=1, *rest)\n")
	kwarg, star = stmt.value.args
	assert isinstance(kwarg, A.KeywordArg)
	assert kwarg.name == "key"
	assert star.op == "*"


def test_keyword_argument_must_be_identifier():
	with pytest.raises(PyjSyntaxError) as excinfo:
		parse_source("f(a.b=1)\n")
	assert excinfo.value.line == 1


def test_children_skip_missing_and_flatten_lists():
	(stmt,) = _body("x[1:] = {a: b}\n")
	kinds = [child.kind for child in stmt.children()]
	assert kinds == [NodeKind.SUBSCRIPT, NodeKind.DICT]
	assert [c.id for c in stmt.value.children()] == ["a", "b"]


def test_syntax_error_location():
	with pytest.raises(PyjSyntaxError) as excinfo:
		parse_source("x = 1\ny = = 2\n")
	err = excinfo.value
	assert err.line == 2
	assert err.col == 4
	assert err.message
	assert isinstance(err, ValueError)


def test_bad_indentation_is_syntax_error():
	with pytest.raises(PyjSyntaxError):
		parse_source("def f():\nreturn 1\n")


def test_assert_statement():
	(node,) = _body("assert x, 'message'\n")
	assert isinstance(node, A.Assert)
	assert node.test.id == "x"
	assert node.msg.value == "'message'"
	(bare,) = _body("assert ok\n")
	assert bare.msg is None


def test_global_and_nonlocal_declarations():
	glob, nonloc = _body("global a, b\nnonlocal c\n")
	assert isinstance(glob, A.Global)
	assert glob.keyword == "global"
	assert glob.names == ["a", "b"]
	assert glob.name_spans[1].start == Position(1, 10)
	assert nonloc.keyword == "nonlocal"
	assert nonloc.names == ["c"]


def test_dict_comprehension():
	(stmt,) = _body("d = {k: v for k, v in pairs if v}\n")
	comp = stmt.value
	assert isinstance(comp, A.Comprehension)
	assert comp.element.id == "k"
	assert comp.value.id == "v"
	assert [el.id for el in comp.target.elements] == ["k", "v"]
	assert comp.iterable.id == "pairs"
	assert comp.condition.id == "v"
