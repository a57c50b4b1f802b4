"""Core data models describing one parsed Go source file."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .naming import titlecase

BASIC_TYPES = frozenset(
    {
        "bool",
        "string",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
        "byte",
        "rune",
        "float32",
        "float64",
        "complex64",
        "complex128",
    }
)


@dataclass(frozen=True)
class Expression:
    """A type reference as written in a declaration."""

    value: str
    is_star: bool = False
    is_variadic: bool = False

    def __str__(self) -> str:
        value = f"*{self.value}" if self.is_star else self.value
        if self.is_variadic:
            return f"[]{value}"
        return value


@dataclass(frozen=True)
class Field:
    """A named, typed slot in a parameter or result list."""

    name: str
    type: Expression
    index: int = 0

    def is_basic_type(self) -> bool:
        return str(self.type) in BASIC_TYPES

    def is_named(self) -> bool:
        return self.name not in ("", "_")

    def short_name(self) -> str:
        """Return a one-letter variable name derived from the bare type name.

        Two fields whose types share a first letter get the same short name;
        callers that need unique identifiers must disambiguate themselves.
        """
        return self.type.value[:1].lower()


@dataclass(frozen=True)
class Function:
    """Signature of a declared function or method.

    A trailing ``error`` result is not part of ``results``; it is reported
    through ``returns_error`` instead.
    """

    name: str
    is_exported: bool = False
    receiver: Optional[Field] = None
    parameters: Tuple[Field, ...] = ()
    results: Tuple[Field, ...] = ()
    returns_error: bool = False

    def returns_multiple(self) -> bool:
        return len(self.results) > 1

    def only_returns_one_value(self) -> bool:
        return len(self.results) == 1 and not self.returns_error

    def only_returns_error(self) -> bool:
        return not self.results and self.returns_error

    def has_signature(self) -> bool:
        """Return True when the function has a receiver, parameters or results."""
        return self.receiver is not None or bool(self.parameters) or bool(self.results)

    def test_name(self) -> str:
        receiver = self.receiver.type.value if self.receiver is not None else ""
        return "Test" + titlecase(receiver) + titlecase(self.name)


@dataclass(frozen=True)
class Import:
    """A single import spec; a blank name means the package's default identifier."""

    path: str
    name: str = ""


@dataclass(frozen=True)
class Header:
    """Package clause, imports and the raw code preceding the declarations."""

    package: str
    imports: Tuple[Import, ...] = ()
    code: bytes = b""


@dataclass(frozen=True)
class SourceInfo:
    """Everything known about one analyzed source file."""

    header: Header
    funcs: Tuple[Function, ...] = field(default_factory=tuple)

    def testable_funcs(
        self,
        only: Optional[re.Pattern[str]] = None,
        excl: Optional[re.Pattern[str]] = None,
        already_tested: Iterable[str] = (),
    ) -> List[Function]:
        """Return the functions worth generating a test for, in declaration order.

        Functions without a receiver, parameters or results are skipped, as are
        functions whose test name already exists. ``excl`` drops names it
        matches; ``only`` keeps names it matches. Both filters apply together.
        """
        tested = set(already_tested)
        selected: List[Function] = []
        for func in self.funcs:
            if not func.has_signature():
                continue
            if func.test_name() in tested:
                continue
            if excl is not None and excl.search(func.name):
                continue
            if only is not None and not only.search(func.name):
                continue
            selected.append(func)
        return selected

    def uses_reflection(self) -> bool:
        """Return True when some function returns a value that needs deep equality."""
        return any(
            not result.is_basic_type() for func in self.funcs for result in func.results
        )


__all__ = [
    "BASIC_TYPES",
    "Expression",
    "Field",
    "Function",
    "Header",
    "Import",
    "SourceInfo",
]
