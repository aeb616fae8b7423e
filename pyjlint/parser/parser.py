# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Reference front-end: lark grammar + Tree → AST builder for `.pyj` sources.

The analysis core only consumes `pyjlint.parser.ast`; this module is one
way to produce it. Any failure to parse is surfaced as `PyjSyntaxError`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken
from lark.indenter import DedentError, Indenter

from pyjlint.core.span import Span
from pyjlint.parser.ast import (
	ArrayLiteral,
	Assert,
	Assign,
	Attribute,
	BinOp,
	BoolOp,
	Break,
	Call,
	ClassDef,
	Compare,
	Comprehension,
	Continue,
	Decorator,
	Delete,
	DictLiteral,
	Empty,
	ExceptHandler,
	ExprStmt,
	ForIn,
	FunctionDef,
	Global,
	If,
	Import,
	ImportedName,
	KeywordArg,
	Lambda,
	Literal,
	Module,
	Name,
	Node,
	Param,
	Raise,
	Return,
	Slice,
	Subscript,
	Ternary,
	Try,
	UnaryOp,
	VarDef,
	While,
	With,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()


class PyjSyntaxError(ValueError):
	"""
	Parse failure with a best-effort location.

	`line` is 1-based and `col` 0-based (matching diagnostics); either may be
	None when the parser cannot attribute the failure.
	"""

	def __init__(self, message: str, *, line: Optional[int] = None, col: Optional[int] = None) -> None:
		super().__init__(message)
		self.message = message
		self.line = line
		self.col = col


class PyjIndenter(Indenter):
	"""
	INDENT/DEDENT insertion plus `;` folding.

	A `;` directly after a statement is a separator (a trailing one is
	dropped); a `;` with no statement before it on the line becomes an
	EMPTY_STMT token so the stray separator is visible in the AST.
	"""

	NL_type = "_NEWLINE"
	OPEN_PAREN_types = ["LPAR", "LSQB", "LBRACE"]
	CLOSE_PAREN_types = ["RPAR", "RSQB", "RBRACE"]
	INDENT_type = "_INDENT"
	DEDENT_type = "_DEDENT"
	tab_len = 8

	SEMI_type = "_SEMI"
	EMPTY_type = "EMPTY_STMT"

	def process(self, stream):
		return self._fold_semicolons(super().process(stream))

	def _fold_semicolons(self, stream) -> Iterator[Token]:
		pending: Optional[Token] = None
		has_stmt = False
		for token in stream:
			ttype = token.type
			if ttype == self.SEMI_type:
				if not has_stmt:
					if pending is not None:
						yield pending
					yield Token.new_borrow_pos(self.EMPTY_type, token.value, token)
				pending = token
				has_stmt = False
				continue
			if ttype in (self.NL_type, self.INDENT_type, self.DEDENT_type):
				pending = None
				has_stmt = False
				yield token
				continue
			if pending is not None:
				yield pending
				pending = None
			has_stmt = True
			yield token


_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="file_input",
	propagate_positions=True,
	maybe_placeholders=False,
	postlex=PyjIndenter(),
)


def parse_source(source: str) -> Module:
	"""Parse `.pyj` source text into a `Module`, raising PyjSyntaxError on failure."""
	if not source.endswith("\n"):
		source += "\n"
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as exc:
		raise _syntax_error_from_lark(exc) from exc
	except DedentError as exc:
		raise PyjSyntaxError(str(exc)) from exc
	return Module(span=_span(tree), body=_build_stmts(tree.children))


def _syntax_error_from_lark(exc: UnexpectedInput) -> PyjSyntaxError:
	line = exc.line if isinstance(exc.line, int) and exc.line > 0 else None
	col = exc.column - 1 if isinstance(exc.column, int) and exc.column > 0 else None
	if isinstance(exc, UnexpectedCharacters):
		message = f"Unexpected character {exc.char!r}"
	elif isinstance(exc, UnexpectedEOF):
		message = "Unexpected end of input"
	elif isinstance(exc, UnexpectedToken):
		tok = exc.token
		if tok.type in ("_NEWLINE", "$END"):
			message = "Unexpected end of line"
		elif tok.type in ("_INDENT", "_DEDENT"):
			message = "Unexpected indentation"
		else:
			message = f"Unexpected token {tok.value!r}"
	else:
		message = str(exc).splitlines()[0] if str(exc) else "Invalid syntax"
	return PyjSyntaxError(message, line=line, col=col)


def _name(tree: Tree) -> str:
	return tree.data if isinstance(tree.data, str) else tree.data.value


def _span(obj: object) -> Span:
	if isinstance(obj, Token):
		return Span.from_meta(obj)
	if isinstance(obj, Tree):
		return Span.from_meta(obj.meta)
	return Span()


def _trees(tree: Tree, kind: Optional[str] = None) -> List[Tree]:
	return [c for c in tree.children if isinstance(c, Tree) and (kind is None or _name(c) == kind)]


def _tokens(tree: Tree, ttype: str = "NAME") -> List[Token]:
	return [c for c in tree.children if isinstance(c, Token) and c.type == ttype]


# --- statements ---------------------------------------------------------


def _build_stmts(children: list) -> List[Node]:
	out: List[Node] = []
	for child in children:
		if not isinstance(child, Tree):
			continue
		if _name(child) == "simple_stmt":
			for small in _trees(child):
				out.extend(_build_small_stmt(small))
		else:
			out.append(_build_compound_stmt(child))
	return out


def _build_suite(tree: Tree) -> List[Node]:
	return _build_stmts(tree.children)


def _build_small_stmt(tree: Tree) -> List[Node]:
	kind = _name(tree)
	span = _span(tree)
	kids = tree.children
	if kind == "expr_stmt":
		return [ExprStmt(span=span, value=_build_expr(kids[0]))]
	if kind == "assign_stmt":
		# a = b = 1 nests right-to-left: Assign(a, Assign(b, 1))
		node = _build_expr(kids[-1])
		for target in reversed(kids[:-1]):
			node = Assign(span=span, target=_build_expr(target), op="=", value=node)
		return [node]
	if kind == "augassign_stmt":
		op_tree = kids[1]
		return [Assign(span=span, target=_build_expr(kids[0]), op=op_tree.children[0].value, value=_build_expr(kids[2]))]
	if kind == "pass_stmt":
		return [Empty(span=span, marker="pass")]
	if kind == "empty_stmt":
		return [Empty(span=span, marker=";")]
	if kind == "break_stmt":
		return [Break(span=span)]
	if kind == "continue_stmt":
		return [Continue(span=span)]
	if kind == "return_stmt":
		return [Return(span=span, value=_build_expr(kids[0]) if kids else None)]
	if kind == "raise_stmt":
		return [Raise(span=span, exc=_build_expr(kids[0]) if kids else None)]
	if kind == "assert_stmt":
		return [Assert(span=span, test=_build_expr(kids[0]), msg=_build_expr(kids[1]) if len(kids) > 1 else None)]
	if kind in ("global_stmt", "nonlocal_stmt"):
		names = _tokens(tree)
		return [
			Global(
				span=span,
				keyword=kind[: -len("_stmt")],
				names=[tok.value for tok in names],
				name_spans=[_span(tok) for tok in names],
			)
		]
	if kind == "del_stmt":
		target = _build_expr(kids[0])
		targets = target.elements if isinstance(target, ArrayLiteral) else [target]
		return [Delete(span=span, targets=targets)]
	if kind == "import_name":
		return [_build_plain_import(item) for item in _trees(tree, "dotted_as_name")]
	if kind == "import_from":
		path = _dotted(_trees(tree, "dotted_name")[0])
		names: List[ImportedName] = []
		for item in _trees(_trees(tree, "import_as_names")[0], "import_as_name"):
			toks = _tokens(item)
			alias = toks[1].value if len(toks) > 1 else None
			names.append(ImportedName(span=_span(item), name=toks[0].value, alias=alias))
		return [Import(span=span, path=path, names=names)]
	raise TypeError(f"unexpected statement node {kind}")


def _build_plain_import(tree: Tree) -> Import:
	path = _dotted(_trees(tree, "dotted_name")[0])
	alias_tok = next(iter(_tokens(tree)), None)
	return Import(
		span=_span(tree),
		path=path,
		alias=alias_tok.value if alias_tok is not None else None,
		alias_span=_span(alias_tok) if alias_tok is not None else None,
	)


def _dotted(tree: Tree) -> List[str]:
	return [tok.value for tok in _tokens(tree)]


def _else_body(tree: Tree) -> List[Node]:
	clause = next(iter(_trees(tree, "else_clause")), None)
	if clause is None:
		return []
	return _build_suite(_trees(clause, "suite")[0])


def _build_compound_stmt(tree: Tree) -> Node:
	kind = _name(tree)
	span = _span(tree)
	if kind == "if_stmt":
		kids = tree.children
		orelse = _else_body(tree)
		for clause in reversed(_trees(tree, "elif_clause")):
			orelse = [
				If(
					span=_span(clause),
					test=_build_expr(clause.children[0]),
					body=_build_suite(clause.children[1]),
					orelse=orelse,
				)
			]
		return If(span=span, test=_build_expr(kids[0]), body=_build_suite(kids[1]), orelse=orelse)
	if kind == "while_stmt":
		kids = tree.children
		return While(span=span, test=_build_expr(kids[0]), body=_build_suite(kids[1]), orelse=_else_body(tree))
	if kind == "for_stmt":
		kids = tree.children
		return ForIn(
			span=span,
			target=_build_expr(kids[0]),
			iterable=_build_expr(kids[1]),
			body=_build_suite(kids[2]),
			orelse=_else_body(tree),
		)
	if kind == "try_stmt":
		finally_clause = next(iter(_trees(tree, "finally_clause")), None)
		return Try(
			span=span,
			body=_build_suite(tree.children[0]),
			handlers=[_build_except(c) for c in _trees(tree, "except_clause")],
			orelse=_else_body(tree),
			finalbody=_build_suite(_trees(finally_clause, "suite")[0]) if finally_clause is not None else [],
		)
	if kind == "with_stmt":
		items: List[Node] = []
		for item in _trees(tree, "with_item"):
			value = _build_expr(item.children[0])
			alias = next(iter(_tokens(item)), None)
			if alias is None:
				items.append(value)
			else:
				items.append(VarDef(span=_span(item), name=alias.value, name_span=_span(alias), value=value))
		return With(span=span, items=items, body=_build_suite(_trees(tree, "suite")[0]))
	if kind == "funcdef":
		return _build_funcdef(tree)
	if kind == "classdef":
		return _build_classdef(tree)
	if kind == "decorated":
		decorators = [_build_decorator(d) for d in _trees(tree, "decorator")]
		target_tree = _trees(tree)[-1]
		target = _build_funcdef(target_tree) if _name(target_tree) == "funcdef" else _build_classdef(target_tree)
		target.decorators = decorators
		return target
	raise TypeError(f"unexpected compound statement {kind}")


def _build_except(tree: Tree) -> ExceptHandler:
	exc_type = next(iter(_trees(tree)), None)
	if exc_type is not None and _name(exc_type) == "suite":
		exc_type = None
	binder_tok = next(iter(_tokens(tree)), None)
	binder = None
	if binder_tok is not None:
		binder = VarDef(span=_span(binder_tok), name=binder_tok.value, name_span=_span(binder_tok))
	return ExceptHandler(
		span=_span(tree),
		type=_build_expr(exc_type) if exc_type is not None else None,
		binder=binder,
		body=_build_suite(_trees(tree, "suite")[0]),
	)


def _build_params(tree: Optional[Tree]) -> List[Param]:
	if tree is None:
		return []
	params: List[Param] = []
	for item in _trees(tree):
		tok = _tokens(item)[0]
		kind = _name(item)
		if kind == "star_param":
			params.append(Param(span=_span(tok), name=tok.value, star="*"))
		elif kind == "kwstar_param":
			params.append(Param(span=_span(tok), name=tok.value, star="**"))
		else:
			defaults = _trees(item)
			default = _build_expr(defaults[0]) if defaults else None
			params.append(Param(span=_span(tok), name=tok.value, default=default))
	return params


def _build_funcdef(tree: Tree) -> FunctionDef:
	name_tok = _tokens(tree)[0]
	params_tree = next(iter(_trees(tree, "parameters")), None)
	return FunctionDef(
		span=_span(tree),
		name=name_tok.value,
		name_span=_span(name_tok),
		params=_build_params(params_tree),
		body=_build_suite(_trees(tree, "suite")[0]),
	)


def _build_classdef(tree: Tree) -> ClassDef:
	name_tok = _tokens(tree)[0]
	args_tree = next(iter(_trees(tree, "arguments")), None)
	return ClassDef(
		span=_span(tree),
		name=name_tok.value,
		name_span=_span(name_tok),
		bases=_build_arguments(args_tree),
		body=_build_suite(_trees(tree, "suite")[0]),
	)


def _build_decorator(tree: Tree) -> Decorator:
	path = _dotted(_trees(tree, "dotted_name")[0])
	args_tree = next(iter(_trees(tree, "arguments")), None)
	return Decorator(span=_span(tree), name=path[0], args=_build_arguments(args_tree))


# --- expressions --------------------------------------------------------

_BIT_OPS = {"bitor_expr": "|", "bitxor_expr": "^", "bitand_expr": "&"}
_CHAINED_OPS = {"shift_expr", "arith_expr", "term"}


def _build_arguments(tree: Optional[Tree]) -> List[Node]:
	if tree is None:
		return []
	args: List[Node] = []
	for item in tree.children:
		kind = _name(item) if isinstance(item, Tree) else ""
		if kind == "kwarg":
			key = item.children[0]
			if not (isinstance(key, Tree) and _name(key) == "var"):
				span = _span(key)
				raise PyjSyntaxError(
					"Keyword argument name must be an identifier",
					line=span.line,
					col=span.start.col if span.start else None,
				)
			args.append(KeywordArg(span=_span(item), name=key.children[0].value, value=_build_expr(item.children[1])))
		elif kind == "star_arg":
			args.append(UnaryOp(span=_span(item), op="*", operand=_build_expr(item.children[0])))
		elif kind == "kwstar_arg":
			args.append(UnaryOp(span=_span(item), op="**", operand=_build_expr(item.children[0])))
		else:
			args.append(_build_expr(item))
	return args


def _fold_left(tree: Tree, operands: list, ops: List[str]) -> Node:
	span = _span(tree)
	node = _build_expr(operands[0])
	for op, operand in zip(ops, operands[1:]):
		node = BinOp(span=span, op=op, left=node, right=_build_expr(operand))
	return node


def _build_expr(obj: object) -> Node:
	if isinstance(obj, Token):
		if obj.type == "NAME":
			return Name(span=_span(obj), id=obj.value)
		raise TypeError(f"unexpected token {obj.type} in expression")
	assert isinstance(obj, Tree), f"expected Tree, got {type(obj)}"
	tree = obj
	kind = _name(tree)
	span = _span(tree)
	kids = tree.children

	if kind == "var":
		return Name(span=span, id=kids[0].value)
	if kind == "number":
		return Literal(span=span, value=kids[0].value)
	if kind == "string":
		return Literal(span=span, value="".join(tok.value for tok in kids))
	if kind == "const_none":
		return Literal(span=span, value=None)
	if kind == "const_true":
		return Literal(span=span, value=True)
	if kind == "const_false":
		return Literal(span=span, value=False)
	if kind == "paren":
		return _build_expr(kids[0])
	if kind in ("tuple", "tuple_display", "list_display"):
		return ArrayLiteral(span=span, elements=[_build_expr(k) for k in kids])
	if kind in ("empty_tuple", "empty_list"):
		return ArrayLiteral(span=span, elements=[])
	if kind == "empty_dict":
		return DictLiteral(span=span, keys=[], values=[])
	if kind == "dict_display":
		items = _trees(tree, "dict_item")
		return DictLiteral(
			span=span,
			keys=[_build_expr(i.children[0]) for i in items],
			values=[_build_expr(i.children[1]) for i in items],
		)
	if kind == "comprehension":
		comp_for = kids[1]
		cond_tree = next(iter(_trees(comp_for, "comp_if")), None)
		return Comprehension(
			span=span,
			element=_build_expr(kids[0]),
			target=_build_expr(comp_for.children[0]),
			iterable=_build_expr(comp_for.children[1]),
			condition=_build_expr(cond_tree.children[0]) if cond_tree is not None else None,
		)
	if kind == "dict_comprehension":
		item, comp_for = kids
		cond_tree = next(iter(_trees(comp_for, "comp_if")), None)
		return Comprehension(
			span=span,
			element=_build_expr(item.children[0]),
			value=_build_expr(item.children[1]),
			target=_build_expr(comp_for.children[0]),
			iterable=_build_expr(comp_for.children[1]),
			condition=_build_expr(cond_tree.children[0]) if cond_tree is not None else None,
		)
	if kind == "call":
		args_tree = kids[1] if len(kids) > 1 else None
		return Call(span=span, func=_build_expr(kids[0]), args=_build_arguments(args_tree))
	if kind == "getitem":
		return Subscript(span=span, value=_build_expr(kids[0]), index=_build_expr(kids[1]))
	if kind == "getattr":
		return Attribute(span=span, value=_build_expr(kids[0]), attr=kids[1].value)
	if kind == "slice_full":
		return Slice(span=span, lower=_build_expr(kids[0]), upper=_build_expr(kids[1]))
	if kind == "slice_lower":
		return Slice(span=span, lower=_build_expr(kids[0]))
	if kind == "slice_upper":
		return Slice(span=span, upper=_build_expr(kids[0]))
	if kind == "slice_all":
		return Slice(span=span)
	if kind == "ternary":
		return Ternary(span=span, body=_build_expr(kids[0]), test=_build_expr(kids[1]), orelse=_build_expr(kids[2]))
	if kind == "lambdef":
		params_tree = kids[0] if len(kids) > 1 else None
		return Lambda(span=span, params=_build_params(params_tree), body=_build_expr(kids[-1]))
	if kind in ("or_test", "and_test"):
		return BoolOp(span=span, op=kind[:-5], values=[_build_expr(k) for k in kids])
	if kind == "not_op":
		return UnaryOp(span=span, op="not", operand=_build_expr(kids[0]))
	if kind == "comparison":
		operands = kids[0::2]
		ops = [" ".join(tok.value for tok in op.children) for op in kids[1::2]]
		return Compare(
			span=span,
			left=_build_expr(operands[0]),
			ops=ops,
			comparators=[_build_expr(k) for k in operands[1:]],
		)
	if kind in _BIT_OPS:
		return _fold_left(tree, kids, [_BIT_OPS[kind]] * (len(kids) - 1))
	if kind in _CHAINED_OPS:
		return _fold_left(tree, kids[0::2], [op.children[0].value for op in kids[1::2]])
	if kind == "factor":
		return UnaryOp(span=span, op=kids[0].children[0].value, operand=_build_expr(kids[1]))
	if kind == "power":
		return BinOp(span=span, op="**", left=_build_expr(kids[0]), right=_build_expr(kids[1]))
	raise TypeError(f"unexpected expression node {kind}")


__all__ = ["PyjSyntaxError", "PyjIndenter", "parse_source"]
