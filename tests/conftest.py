from __future__ import annotations

import pytest

from tests._fixtures.source_builder import SourceBuilder


@pytest.fixture
def source_builder() -> SourceBuilder:
    """Provide an empty builder for a single Go file."""
    return SourceBuilder()


@pytest.fixture
def store_source() -> SourceBuilder:
    """A small file with a method set, free functions and a zero-signature init."""
    return (
        SourceBuilder(package="store", path="store/store.go")
        .func("init")
        .func("NewStore", params=[("dsn", "string")], results=[("", "*Store")], returns_error=True)
        .func("Get", receiver=("s", "*Store"), params=[("key", "string")], results=[("", "*Item")])
        .func("GetInternal", receiver=("s", "*Store"), params=[("key", "string")], results=[("", "int")])
        .func("Close", receiver=("s", "*Store"), returns_error=True)
        .func("hash", params=[("b", "...byte")], results=[("", "uint64")])
    )
