# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Built-in symbol catalog: names never reported as undefined.

The catalog is assembled once per process by the caller (`load_builtins`)
and then passed read-only to every `lint_code` call. Base-library names
come from a `BaselibProvider`, which hands over already-resolved source
text or raises `SourceUnavailableError`; the module-level names bound by
that source are added to the defaults.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Protocol

from pyjlint.analysis.walker import walk_module
from pyjlint.parser.parser import parse_source

logger = logging.getLogger(__name__)

JS_GLOBALS = (
	"this",
	"undefined",
	"alert",
	"arguments",
	"window",
	"document",
	"console",
	"JSON",
	"parseInt",
	"parseFloat",
	"Math",
	"isNaN",
	"isFinite",
	"eval",
	"require",
)

PY_GLOBALS = ("bool", "int", "float")

NATIVE_CLASSES = (
	"Array",
	"Boolean",
	"Date",
	"Error",
	"EvalError",
	"Function",
	"Map",
	"Number",
	"Object",
	"Promise",
	"RangeError",
	"ReferenceError",
	"RegExp",
	"Set",
	"String",
	"Symbol",
	"SyntaxError",
	"TypeError",
	"URIError",
	"WeakMap",
)

BASELIB_NAMES = (
	"abs",
	"all",
	"any",
	"bind",
	"chr",
	"cmp",
	"dict",
	"dir",
	"enumerate",
	"filter",
	"getattr",
	"hasattr",
	"isinstance",
	"iter",
	"len",
	"list",
	"map",
	"max",
	"min",
	"ord",
	"print",
	"range",
	"reduce",
	"reversed",
	"setattr",
	"sorted",
	"str",
	"sum",
	"type",
	"zip",
	"Exception",
	"AttributeError",
	"IndexError",
	"KeyError",
	"ValueError",
)

DEFAULT_BUILTINS: FrozenSet[str] = frozenset(JS_GLOBALS + PY_GLOBALS + NATIVE_CLASSES + BASELIB_NAMES)


class SourceUnavailableError(RuntimeError):
	"""The base-library source could not be obtained."""


class BaselibProvider(Protocol):
	def read(self) -> str:
		...


class FileBaselibProvider:
	def __init__(self, path: Path) -> None:
		self.path = Path(path)

	def read(self) -> str:
		try:
			return self.path.read_text(encoding="utf-8-sig")
		except OSError as exc:
			raise SourceUnavailableError(f"base library source unavailable: {self.path}: {exc.strerror}") from exc


class StaticBaselibProvider:
	"""Provider over text that is already in memory (tests, embedding)."""

	def __init__(self, text: str) -> None:
		self.text = text

	def read(self) -> str:
		return self.text


def baselib_names(source: str) -> FrozenSet[str]:
	"""Names bound at module level by base-library source text."""
	walker = walk_module(parse_source(source), "<baselib>")
	return frozenset(walker.arena[0].bindings)


def load_builtins(provider: Optional[BaselibProvider] = None, extra: Iterable[str] = ()) -> FrozenSet[str]:
	"""
	Assemble the built-in symbol set.

	Raises SourceUnavailableError (from the provider) and PyjSyntaxError
	(when the base-library text does not parse); neither is swallowed.
	"""
	names = set(DEFAULT_BUILTINS)
	names.update(extra)
	if provider is not None:
		found = baselib_names(provider.read())
		logger.debug("base library provides %d names", len(found))
		names.update(found)
	return frozenset(names)


def read_names_file(path: Path) -> list[str]:
	"""Read newline-separated names; blank lines and `#` comments are skipped."""
	try:
		text = Path(path).read_text(encoding="utf-8")
	except OSError as exc:
		raise SourceUnavailableError(f"builtins file unavailable: {path}: {exc.strerror}") from exc
	names = []
	for line in text.splitlines():
		line = line.split("#", 1)[0].strip()
		if line:
			names.append(line)
	return names


__all__ = [
	"DEFAULT_BUILTINS",
	"SourceUnavailableError",
	"BaselibProvider",
	"FileBaselibProvider",
	"StaticBaselibProvider",
	"baselib_names",
	"load_builtins",
	"read_names_file",
]
