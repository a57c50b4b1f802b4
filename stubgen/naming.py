"""Naming helpers for Go source and test files."""

from __future__ import annotations

SOURCE_SUFFIX = ".go"
TEST_SUFFIX = "_test.go"


class SourcePath(str):
    """A Go file path with derived test-file naming."""

    def is_test_path(self) -> bool:
        return self.endswith(TEST_SUFFIX)

    def test_path(self) -> str:
        """Return the path of the test file that pairs with this source file."""
        if self.is_test_path():
            return str(self)
        base = str(self)
        if base.endswith(SOURCE_SUFFIX):
            base = base[: -len(SOURCE_SUFFIX)]
        return base + TEST_SUFFIX


def titlecase(identifier: str) -> str:
    """Title-case the first character of an identifier, leaving the rest untouched.

    Only single-character title mappings apply; a character whose title form
    expands to several characters (``ß`` -> ``Ss``) is kept as is.
    """
    first = identifier[:1]
    titled = first.title()
    if len(titled) != 1:
        titled = first
    return titled + identifier[1:]


__all__ = ["SOURCE_SUFFIX", "SourcePath", "TEST_SUFFIX", "titlecase"]
