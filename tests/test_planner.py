"""Tests for stubgen.planner."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from stubgen.config import SelectionConfig, StubgenConfig
from stubgen.naming import SourcePath
from stubgen.planner import Planner, SelectionOptions, build_selection_options
from stubgen.schema import ParsedFile
from tests._fixtures.source_builder import SourceBuilder


def _parsed(builder: SourceBuilder, existing: tuple[str, ...] = ()) -> ParsedFile:
    return ParsedFile(path=SourcePath(builder.path), info=builder.build(), existing_tests=existing)


def test_plan_describes_candidates(store_source: SourceBuilder) -> None:
    plan = Planner().plan(_parsed(store_source))

    assert plan.source_path == "store/store.go"
    assert plan.test_path == "store/store_test.go"
    assert plan.package == "store"
    assert plan.uses_reflection is True
    assert [c.test_name for c in plan.candidates] == [
        "TestNewStore",
        "TestStoreGet",
        "TestStoreGetInternal",
        "TestStoreClose",
        "TestHash",
    ]

    get = plan.candidates[1]
    assert get.receiver is not None and get.receiver.declaration == "s *Store"
    assert [item.declaration for item in get.parameters] == ["key string"]
    assert [item.declaration for item in get.results] == ["*Item"]
    assert get.returns_error is False

    hash_candidate = plan.candidates[-1]
    assert [item.declaration for item in hash_candidate.parameters] == ["b []byte"]
    assert plan.candidates[0].returns_error is True


def test_plan_exposes_field_details(store_source: SourceBuilder) -> None:
    plan = Planner().plan(_parsed(store_source))
    new_store, get, get_internal, close, hash_candidate = plan.candidates

    receiver = get.receiver
    assert receiver is not None
    assert (receiver.name, receiver.type, receiver.short_name) == ("s", "*Store", "s")
    assert receiver.is_basic_type is False
    assert receiver.is_named is True

    [key] = get.parameters
    assert (key.index, key.short_name, key.is_basic_type) == (0, "s", True)

    [item] = get.results
    assert item.name == ""
    assert item.is_named is False
    assert item.short_name == "i"
    assert item.is_basic_type is False

    [count] = get_internal.results
    assert count.is_basic_type is True

    [data] = hash_candidate.parameters
    assert (data.type, data.short_name, data.is_basic_type) == ("[]byte", "b", False)


def test_plan_exposes_result_shape(source_builder: SourceBuilder) -> None:
    source_builder.func("One", results=[("", "int")])
    source_builder.func("Pair", results=[("a", "int"), ("b", "string")], returns_error=True)
    source_builder.func("Check", params=[("x", "int")], returns_error=True)
    source_builder.func("Load", results=[("", "*Item")], returns_error=True)

    one, pair, check, load = Planner().plan(_parsed(source_builder)).candidates

    assert (one.returns_multiple, one.only_returns_one_value, one.only_returns_error) == (False, True, False)
    assert (pair.returns_multiple, pair.only_returns_one_value, pair.only_returns_error) == (True, False, False)
    assert [field.index for field in pair.results] == [0, 1]
    assert (check.returns_multiple, check.only_returns_one_value, check.only_returns_error) == (False, False, True)
    assert (load.returns_multiple, load.only_returns_one_value, load.only_returns_error) == (False, False, False)


def test_plan_merges_existing_tests_from_file_and_options(store_source: SourceBuilder) -> None:
    options = SelectionOptions(existing_tests=("TestHash",))

    plan = Planner().plan(_parsed(store_source, ("TestStoreGet",)), options)

    assert [c.name for c in plan.candidates] == ["NewStore", "GetInternal", "Close"]


def test_plan_exported_only(store_source: SourceBuilder) -> None:
    plan = Planner().plan(_parsed(store_source), SelectionOptions(exported_only=True))
    assert "hash" not in [c.name for c in plan.candidates]
    assert len(plan.candidates) == 4


def test_plan_filters(store_source: SourceBuilder) -> None:
    options = SelectionOptions(only=re.compile("^Get"), exclude=re.compile("Internal$"))
    plan = Planner().plan(_parsed(store_source), options)
    assert [c.name for c in plan.candidates] == ["Get"]


def test_plan_to_dict_is_json_ready(store_source: SourceBuilder) -> None:
    data = Planner().plan(_parsed(store_source)).to_dict()
    assert data["test_path"] == "store/store_test.go"
    assert data["candidates"][0]["name"] == "NewStore"
    assert data["candidates"][0]["results"][0]["type"] == "*Store"
    assert data["candidates"][0]["results"][0]["short_name"] == "s"


def test_plan_many_preserves_input_order() -> None:
    files = [
        _parsed(
            SourceBuilder(package=f"p{i}", path=f"p{i}/file.go").func(
                f"F{i}", params=[("x", "int")]
            )
        )
        for i in range(8)
    ]

    plans = Planner().plan_many(files, workers=4)

    assert [plan.package for plan in plans] == [f"p{i}" for i in range(8)]
    assert [plan.candidates[0].test_name for plan in plans] == [f"TestF{i}" for i in range(8)]


def test_plan_many_handles_empty_input() -> None:
    assert Planner().plan_many([]) == []


def test_build_selection_options_uses_config_defaults() -> None:
    config = StubgenConfig(
        root=Path("."),
        selection=SelectionConfig(
            only="^Get", exclude="Internal$", exported=True, existing_tests=["TestA"]
        ),
    )

    options = build_selection_options(config, existing_tests=["TestB", "TestA"])

    assert options.only is not None and options.only.pattern == "^Get"
    assert options.exclude is not None and options.exclude.pattern == "Internal$"
    assert options.exported_only is True
    assert options.existing_tests == ("TestA", "TestB")


def test_build_selection_options_overrides_config() -> None:
    config = StubgenConfig(root=Path("."), selection=SelectionConfig(only="^Get", exported=True))

    options = build_selection_options(config, only="^Set", exported=False)

    assert options.only is not None and options.only.pattern == "^Set"
    assert options.exclude is None
    assert options.exported_only is False


def test_build_selection_options_without_config() -> None:
    options = build_selection_options()
    assert options == SelectionOptions()


def test_plan_many_rejects_non_positive_workers(store_source: SourceBuilder) -> None:
    files = [_parsed(store_source), _parsed(SourceBuilder(path="b/b.go").func("B", params=[("x", "int")]))]
    with pytest.raises(ValueError, match="positive"):
        Planner().plan_many(files, workers=0)
