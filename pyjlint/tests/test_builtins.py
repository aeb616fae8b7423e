# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Built-in catalog assembly and base-library providers."""

from __future__ import annotations

import pytest

from pyjlint.analysis.builtins import (
	DEFAULT_BUILTINS,
	FileBaselibProvider,
	SourceUnavailableError,
	StaticBaselibProvider,
	baselib_names,
	load_builtins,
	read_names_file,
)
from pyjlint.linter import lint_code
from pyjlint.parser.parser import PyjSyntaxError


def test_defaults_cover_runtime_globals():
	for name in ("this", "window", "console", "Array", "Promise", "int", "print", "len", "Exception"):
		assert name in DEFAULT_BUILTINS


def test_baselib_names_are_module_level_bindings_only():
	source = "def helper(arg):\n    inner = arg\n    return inner\nCONST = 1\nclass Base:\n    attr = 2\n"
	assert baselib_names(source) == {"helper", "CONST", "Base"}


def test_load_builtins_merges_provider_and_extra_names():
	names = load_builtins(StaticBaselibProvider("def helper():\n    pass\n"), extra=["MY_GLOBAL"])
	assert {"helper", "MY_GLOBAL"} <= names
	assert DEFAULT_BUILTINS <= names
	assert load_builtins() == DEFAULT_BUILTINS


def test_loaded_builtins_silence_undefined_names():
	names = load_builtins(StaticBaselibProvider("def helper():\n    pass\n"))
	assert lint_code("helper()\n", builtins=names) == []
	assert [m.name for m in lint_code("helper()\n")] == ["helper"]


def test_missing_baselib_file_raises(tmp_path):
	provider = FileBaselibProvider(tmp_path / "missing.pyj")
	with pytest.raises(SourceUnavailableError):
		provider.read()
	with pytest.raises(SourceUnavailableError):
		load_builtins(provider)


def test_baselib_file_is_read(tmp_path):
	path = tmp_path / "baselib.pyj"
	path.write_text("def ρ_helper():\n    pass\n", encoding="utf-8")
	with pytest.raises(PyjSyntaxError):
		load_builtins(FileBaselibProvider(path))

	path.write_text("def base_helper():\n    pass\n", encoding="utf-8")
	assert "base_helper" in load_builtins(FileBaselibProvider(path))


def test_read_names_file(tmp_path):
	path = tmp_path / "names.txt"
	path.write_text("# extra globals\nFOO\n\n  BAR  # trailing\n", encoding="utf-8")
	assert read_names_file(path) == ["FOO", "BAR"]
	with pytest.raises(SourceUnavailableError):
		read_names_file(tmp_path / "nope.txt")


def test_baselib_file_with_byte_order_mark(tmp_path):
	path = tmp_path / "baselib.pyj"
	path.write_bytes(b"\xef\xbb\xbfdef base_helper():\n    pass\n")
	assert "base_helper" in load_builtins(FileBaselibProvider(path))
