# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
AST for `.pyj` sources.

The set of node kinds is closed: every node class carries a `NodeKind` tag
and the walker dispatches on that tag, never on the Python class. Child
nodes are exposed through `children()` in source order; plain string
attributes (declared names, operators) are not children.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import ClassVar, Iterator, List, Optional

from pyjlint.core.span import Span


class NodeKind(enum.Enum):
	MODULE = "module"
	FUNCTION = "function"
	LAMBDA = "lambda"
	CLASS = "class"
	PARAM = "param"
	DECORATOR = "decorator"
	IMPORT = "import"
	IMPORTED_NAME = "imported_name"
	ASSIGN = "assign"
	VAR_DEF = "var_def"
	NAME = "name"
	COMPREHENSION = "comprehension"
	FOR_IN = "for_in"
	WHILE = "while"
	IF = "if"
	TRY = "try"
	EXCEPT = "except"
	WITH = "with"
	EMPTY = "empty"
	EXPR_STMT = "expr_stmt"
	RETURN = "return"
	RAISE = "raise"
	ASSERT = "assert"
	GLOBAL = "global"
	BREAK = "break"
	CONTINUE = "continue"
	DEL = "del"
	CALL = "call"
	KEYWORD_ARG = "keyword_arg"
	ATTRIBUTE = "attribute"
	SUBSCRIPT = "subscript"
	SLICE = "slice"
	BIN_OP = "bin_op"
	UNARY_OP = "unary_op"
	BOOL_OP = "bool_op"
	COMPARE = "compare"
	TERNARY = "ternary"
	ARRAY = "array"
	DICT = "dict"
	LITERAL = "literal"


class Node:
	kind: ClassVar[NodeKind]
	# Attribute names holding child nodes (or lists of them), in source order.
	child_fields: ClassVar[tuple[str, ...]] = ()
	span: Span

	def children(self) -> Iterator["Node"]:
		for name in self.child_fields:
			value = getattr(self, name)
			if value is None:
				continue
			if isinstance(value, list):
				for item in value:
					if item is not None:
						yield item
			else:
				yield value


@dataclass
class Module(Node):
	kind: ClassVar[NodeKind] = NodeKind.MODULE
	child_fields: ClassVar[tuple[str, ...]] = ("body",)
	span: Span
	body: List[Node]


@dataclass
class Name(Node):
	kind: ClassVar[NodeKind] = NodeKind.NAME
	span: Span
	id: str


@dataclass
class Param(Node):
	kind: ClassVar[NodeKind] = NodeKind.PARAM
	child_fields: ClassVar[tuple[str, ...]] = ("default",)
	span: Span
	name: str
	default: Optional[Node] = None
	star: str = ""  # "", "*" or "**"


@dataclass
class Decorator(Node):
	"""`@name` or `@name.attr(args)`; `name` is the leading identifier."""

	kind: ClassVar[NodeKind] = NodeKind.DECORATOR
	child_fields: ClassVar[tuple[str, ...]] = ("args",)
	span: Span
	name: str
	args: List[Node] = field(default_factory=list)


@dataclass
class FunctionDef(Node):
	kind: ClassVar[NodeKind] = NodeKind.FUNCTION
	child_fields: ClassVar[tuple[str, ...]] = ("decorators", "params", "body")
	span: Span
	name: str
	name_span: Span
	params: List[Param]
	body: List[Node]
	decorators: List[Decorator] = field(default_factory=list)


@dataclass
class Lambda(Node):
	kind: ClassVar[NodeKind] = NodeKind.LAMBDA
	child_fields: ClassVar[tuple[str, ...]] = ("params", "body")
	span: Span
	params: List[Param]
	body: Node


@dataclass
class ClassDef(Node):
	kind: ClassVar[NodeKind] = NodeKind.CLASS
	child_fields: ClassVar[tuple[str, ...]] = ("decorators", "bases", "body")
	span: Span
	name: str
	name_span: Span
	bases: List[Node]
	body: List[Node]
	decorators: List[Decorator] = field(default_factory=list)


@dataclass
class ImportedName(Node):
	"""One member of `from path import name [as alias]`."""

	kind: ClassVar[NodeKind] = NodeKind.IMPORTED_NAME
	span: Span
	name: str
	alias: Optional[str] = None


@dataclass
class Import(Node):
	"""
	`import a.b [as c]` (no `names`) or `from a.b import ...` (`names` set).

	Member imports bind through their `ImportedName` children only.
	"""

	kind: ClassVar[NodeKind] = NodeKind.IMPORT
	child_fields: ClassVar[tuple[str, ...]] = ("names",)
	span: Span
	path: List[str]
	alias: Optional[str] = None
	alias_span: Optional[Span] = None
	names: List[ImportedName] = field(default_factory=list)


@dataclass
class Assign(Node):
	kind: ClassVar[NodeKind] = NodeKind.ASSIGN
	child_fields: ClassVar[tuple[str, ...]] = ("target", "value")
	span: Span
	target: Node
	op: str
	value: Node


@dataclass
class VarDef(Node):
	"""Declared name with an optional initializer (`with x as n`, `except E as n`)."""

	kind: ClassVar[NodeKind] = NodeKind.VAR_DEF
	child_fields: ClassVar[tuple[str, ...]] = ("value",)
	span: Span
	name: str
	name_span: Span
	value: Optional[Node] = None


@dataclass
class Comprehension(Node):
	"""List comprehension; a dict comprehension also carries `value` (`element` is the key)."""

	kind: ClassVar[NodeKind] = NodeKind.COMPREHENSION
	child_fields: ClassVar[tuple[str, ...]] = ("target", "iterable", "condition", "element", "value")
	span: Span
	element: Node
	target: Node
	iterable: Node
	condition: Optional[Node] = None
	value: Optional[Node] = None


@dataclass
class ForIn(Node):
	kind: ClassVar[NodeKind] = NodeKind.FOR_IN
	child_fields: ClassVar[tuple[str, ...]] = ("target", "iterable", "body", "orelse")
	span: Span
	target: Node
	iterable: Node
	body: List[Node]
	orelse: List[Node] = field(default_factory=list)


@dataclass
class While(Node):
	kind: ClassVar[NodeKind] = NodeKind.WHILE
	child_fields: ClassVar[tuple[str, ...]] = ("test", "body", "orelse")
	span: Span
	test: Node
	body: List[Node]
	orelse: List[Node] = field(default_factory=list)


@dataclass
class If(Node):
	kind: ClassVar[NodeKind] = NodeKind.IF
	child_fields: ClassVar[tuple[str, ...]] = ("test", "body", "orelse")
	span: Span
	test: Node
	body: List[Node]
	orelse: List[Node] = field(default_factory=list)


@dataclass
class ExceptHandler(Node):
	kind: ClassVar[NodeKind] = NodeKind.EXCEPT
	child_fields: ClassVar[tuple[str, ...]] = ("type", "binder", "body")
	span: Span
	type: Optional[Node]
	binder: Optional[VarDef]
	body: List[Node]


@dataclass
class Try(Node):
	kind: ClassVar[NodeKind] = NodeKind.TRY
	child_fields: ClassVar[tuple[str, ...]] = ("body", "handlers", "orelse", "finalbody")
	span: Span
	body: List[Node]
	handlers: List[ExceptHandler] = field(default_factory=list)
	orelse: List[Node] = field(default_factory=list)
	finalbody: List[Node] = field(default_factory=list)


@dataclass
class With(Node):
	"""`items` holds plain context expressions or `VarDef`s for `expr as name`."""

	kind: ClassVar[NodeKind] = NodeKind.WITH
	child_fields: ClassVar[tuple[str, ...]] = ("items", "body")
	span: Span
	items: List[Node]
	body: List[Node]


@dataclass
class Empty(Node):
	"""No-op statement: `pass` or a stray `;`."""

	kind: ClassVar[NodeKind] = NodeKind.EMPTY
	span: Span
	marker: str


@dataclass
class ExprStmt(Node):
	kind: ClassVar[NodeKind] = NodeKind.EXPR_STMT
	child_fields: ClassVar[tuple[str, ...]] = ("value",)
	span: Span
	value: Node


@dataclass
class Return(Node):
	kind: ClassVar[NodeKind] = NodeKind.RETURN
	child_fields: ClassVar[tuple[str, ...]] = ("value",)
	span: Span
	value: Optional[Node] = None


@dataclass
class Raise(Node):
	kind: ClassVar[NodeKind] = NodeKind.RAISE
	child_fields: ClassVar[tuple[str, ...]] = ("exc",)
	span: Span
	exc: Optional[Node] = None


@dataclass
class Assert(Node):
	kind: ClassVar[NodeKind] = NodeKind.ASSERT
	child_fields: ClassVar[tuple[str, ...]] = ("test", "msg")
	span: Span
	test: Node
	msg: Optional[Node] = None


@dataclass
class Global(Node):
	"""`global` or `nonlocal` declaration; `keyword` tells which."""

	kind: ClassVar[NodeKind] = NodeKind.GLOBAL
	span: Span
	keyword: str
	names: List[str]
	name_spans: List[Span]


@dataclass
class Break(Node):
	kind: ClassVar[NodeKind] = NodeKind.BREAK
	span: Span


@dataclass
class Continue(Node):
	kind: ClassVar[NodeKind] = NodeKind.CONTINUE
	span: Span


@dataclass
class Delete(Node):
	kind: ClassVar[NodeKind] = NodeKind.DEL
	child_fields: ClassVar[tuple[str, ...]] = ("targets",)
	span: Span
	targets: List[Node]


@dataclass
class KeywordArg(Node):
	kind: ClassVar[NodeKind] = NodeKind.KEYWORD_ARG
	child_fields: ClassVar[tuple[str, ...]] = ("value",)
	span: Span
	name: str
	value: Node


@dataclass
class Call(Node):
	kind: ClassVar[NodeKind] = NodeKind.CALL
	child_fields: ClassVar[tuple[str, ...]] = ("func", "args")
	span: Span
	func: Node
	args: List[Node]


@dataclass
class Attribute(Node):
	kind: ClassVar[NodeKind] = NodeKind.ATTRIBUTE
	child_fields: ClassVar[tuple[str, ...]] = ("value",)
	span: Span
	value: Node
	attr: str


@dataclass
class Slice(Node):
	kind: ClassVar[NodeKind] = NodeKind.SLICE
	child_fields: ClassVar[tuple[str, ...]] = ("lower", "upper")
	span: Span
	lower: Optional[Node] = None
	upper: Optional[Node] = None


@dataclass
class Subscript(Node):
	kind: ClassVar[NodeKind] = NodeKind.SUBSCRIPT
	child_fields: ClassVar[tuple[str, ...]] = ("value", "index")
	span: Span
	value: Node
	index: Node


@dataclass
class BinOp(Node):
	kind: ClassVar[NodeKind] = NodeKind.BIN_OP
	child_fields: ClassVar[tuple[str, ...]] = ("left", "right")
	span: Span
	op: str
	left: Node
	right: Node


@dataclass
class UnaryOp(Node):
	"""Prefix operators, including `*`/`**` argument unpacking."""

	kind: ClassVar[NodeKind] = NodeKind.UNARY_OP
	child_fields: ClassVar[tuple[str, ...]] = ("operand",)
	span: Span
	op: str
	operand: Node


@dataclass
class BoolOp(Node):
	kind: ClassVar[NodeKind] = NodeKind.BOOL_OP
	child_fields: ClassVar[tuple[str, ...]] = ("values",)
	span: Span
	op: str
	values: List[Node]


@dataclass
class Compare(Node):
	kind: ClassVar[NodeKind] = NodeKind.COMPARE
	child_fields: ClassVar[tuple[str, ...]] = ("left", "comparators")
	span: Span
	left: Node
	ops: List[str]
	comparators: List[Node]


@dataclass
class Ternary(Node):
	kind: ClassVar[NodeKind] = NodeKind.TERNARY
	child_fields: ClassVar[tuple[str, ...]] = ("body", "test", "orelse")
	span: Span
	test: Node
	body: Node
	orelse: Node


@dataclass
class ArrayLiteral(Node):
	"""List display or tuple; also the destructuring target form."""

	kind: ClassVar[NodeKind] = NodeKind.ARRAY
	child_fields: ClassVar[tuple[str, ...]] = ("elements",)
	span: Span
	elements: List[Node]


@dataclass
class DictLiteral(Node):
	kind: ClassVar[NodeKind] = NodeKind.DICT
	span: Span
	keys: List[Node]
	values: List[Node]

	def children(self) -> Iterator[Node]:
		for key, value in zip(self.keys, self.values):
			yield key
			yield value


@dataclass
class Literal(Node):
	kind: ClassVar[NodeKind] = NodeKind.LITERAL
	span: Span
	value: object


__all__ = [
	"NodeKind",
	"Node",
	"Module",
	"Name",
	"Param",
	"Decorator",
	"FunctionDef",
	"Lambda",
	"ClassDef",
	"ImportedName",
	"Import",
	"Assign",
	"VarDef",
	"Comprehension",
	"ForIn",
	"While",
	"If",
	"ExceptHandler",
	"Try",
	"With",
	"Empty",
	"ExprStmt",
	"Return",
	"Raise",
	"Assert",
	"Global",
	"Break",
	"Continue",
	"Delete",
	"KeywordArg",
	"Call",
	"Attribute",
	"Slice",
	"Subscript",
	"BinOp",
	"UnaryOp",
	"BoolOp",
	"Compare",
	"Ternary",
	"ArrayLiteral",
	"DictLiteral",
	"Literal",
]
