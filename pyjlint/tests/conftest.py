# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
import pytest

from pyjlint.analysis.builtins import DEFAULT_BUILTINS
from pyjlint.linter import lint_code


@pytest.fixture
def lint():
	"""
	Lint a source snippet as `test.pyj`.

	A single leading newline is dropped so triple-quoted sources can start on
	their own line and still have their first statement on line 1.
	"""

	def _lint(src: str, builtins=DEFAULT_BUILTINS):
		if src.startswith("\n"):
			src = src[1:]
		return lint_code(src, filename="test.pyj", builtins=builtins)

	return _lint
