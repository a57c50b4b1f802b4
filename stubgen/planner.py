"""Turn parsed source files into test plans for a template renderer."""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import StubgenConfig, compile_pattern, merge_existing_tests
from .logging import get_logger
from .models import Field, Function
from .schema import ParsedFile


@dataclass(frozen=True)
class SelectionOptions:
    """Compiled filters applied when choosing test candidates."""

    only: Optional[re.Pattern[str]] = None
    exclude: Optional[re.Pattern[str]] = None
    exported_only: bool = False
    existing_tests: Tuple[str, ...] = ()


@dataclass
class FieldPlan:
    """A parameter, result or receiver with the names a template needs."""

    name: str
    type: str
    index: int
    short_name: str
    is_basic_type: bool
    is_named: bool
    declaration: str


@dataclass
class Candidate:
    """A function selected for test generation, rendered for template use."""

    name: str
    test_name: str
    receiver: Optional[FieldPlan]
    parameters: List[FieldPlan] = field(default_factory=list)
    results: List[FieldPlan] = field(default_factory=list)
    returns_error: bool = False
    returns_multiple: bool = False
    only_returns_one_value: bool = False
    only_returns_error: bool = False


@dataclass
class TestPlan:
    """Everything a renderer needs to emit the test file for one source file."""

    __test__ = False

    source_path: str
    test_path: str
    package: str
    uses_reflection: bool
    candidates: List[Candidate] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_selection_options(
    config: Optional[StubgenConfig] = None,
    *,
    only: Optional[str] = None,
    exclude: Optional[str] = None,
    exported: Optional[bool] = None,
    existing_tests: Iterable[str] = (),
) -> SelectionOptions:
    """Merge explicit overrides over configured defaults and compile the filters."""
    selection = config.selection if config is not None else None
    only_text = only if only is not None else (selection.only if selection else None)
    exclude_text = (
        exclude if exclude is not None else (selection.exclude if selection else None)
    )
    if exported is None:
        exported = selection.exported if selection else False
    configured_tests = selection.existing_tests if selection else []
    return SelectionOptions(
        only=compile_pattern(only_text),
        exclude=compile_pattern(exclude_text),
        exported_only=exported,
        existing_tests=tuple(merge_existing_tests(configured_tests, existing_tests)),
    )


class Planner:
    """Selects test candidates per file and packages them as plans."""

    def __init__(self) -> None:
        self.logger = get_logger("planner")

    def plan(self, parsed: ParsedFile, options: SelectionOptions | None = None) -> TestPlan:
        options = options or SelectionOptions()
        info = parsed.info
        already_tested = set(parsed.existing_tests) | set(options.existing_tests)
        funcs = info.testable_funcs(options.only, options.exclude, already_tested)
        if options.exported_only:
            funcs = [func for func in funcs if func.is_exported]
        self.logger.debug(
            "%s: selected %d of %d functions", parsed.path, len(funcs), len(info.funcs)
        )
        return TestPlan(
            source_path=str(parsed.path),
            test_path=parsed.path.test_path(),
            package=info.header.package,
            uses_reflection=info.uses_reflection(),
            candidates=[_candidate(func) for func in funcs],
        )

    def plan_many(
        self,
        files: Sequence[ParsedFile],
        options: SelectionOptions | None = None,
        *,
        workers: Optional[int] = None,
    ) -> List[TestPlan]:
        """Plan independent files concurrently; results follow input order."""
        if workers is not None and workers < 1:
            raise ValueError("workers must be a positive integer")
        if not files:
            return []
        if workers == 1 or len(files) == 1:
            return [self.plan(parsed, options) for parsed in files]
        self.logger.debug("Planning %d files with %s workers", len(files), workers or "default")
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(lambda parsed: self.plan(parsed, options), files))


def _candidate(func: Function) -> Candidate:
    return Candidate(
        name=func.name,
        test_name=func.test_name(),
        receiver=_field_plan(func.receiver) if func.receiver is not None else None,
        parameters=[_field_plan(item) for item in func.parameters],
        results=[_field_plan(item) for item in func.results],
        returns_error=func.returns_error,
        returns_multiple=func.returns_multiple(),
        only_returns_one_value=func.only_returns_one_value(),
        only_returns_error=func.only_returns_error(),
    )


def _field_plan(item: Field) -> FieldPlan:
    type_text = str(item.type)
    return FieldPlan(
        name=item.name,
        type=type_text,
        index=item.index,
        short_name=item.short_name(),
        is_basic_type=item.is_basic_type(),
        is_named=item.is_named(),
        declaration=f"{item.name} {type_text}" if item.is_named() else type_text,
    )


__all__ = [
    "Candidate",
    "FieldPlan",
    "Planner",
    "SelectionOptions",
    "TestPlan",
    "build_selection_options",
]
