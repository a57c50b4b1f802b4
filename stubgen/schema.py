"""Validation of parser payloads and conversion into the core source model."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ValidationError

from .logging import get_logger
from .models import Expression, Field, Function, Header, Import, SourceInfo
from .naming import SourcePath

logger = get_logger("schema")


class PayloadError(RuntimeError):
    """Raised when a parser payload cannot be decoded or validated."""


class ExpressionPayload(BaseModel):
    value: str
    is_star: bool = False
    is_variadic: bool = False


class FieldPayload(BaseModel):
    name: str = ""
    type: ExpressionPayload
    index: Optional[int] = None


class FunctionPayload(BaseModel):
    name: str
    is_exported: bool = False
    receiver: Optional[FieldPayload] = None
    parameters: List[FieldPayload] = []
    results: List[FieldPayload] = []
    returns_error: bool = False


class ImportPayload(BaseModel):
    name: str = ""
    path: str


class HeaderPayload(BaseModel):
    package: str
    imports: List[ImportPayload] = []
    code: str = ""


class SourceFilePayload(BaseModel):
    """One parsed Go file as emitted by the upstream parser."""

    path: str
    header: HeaderPayload
    funcs: List[FunctionPayload] = []
    existing_tests: List[str] = []


@dataclass(frozen=True)
class ParsedFile:
    """A source model paired with its path and the tests that already exist for it."""

    path: SourcePath
    info: SourceInfo
    existing_tests: Tuple[str, ...] = ()


def load_parsed_files(path: Path) -> List[ParsedFile]:
    """Read a payload document from disk."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise PayloadError(f"Unable to read payload {path}: {exc}") from exc
    return parse_parsed_files(text)


def parse_parsed_files(text: str) -> List[ParsedFile]:
    """Parse a JSON document holding one file object or a list of them."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PayloadError(f"Payload is not valid JSON: {exc}") from exc

    items: List[Any] = data if isinstance(data, list) else [data]
    parsed: List[ParsedFile] = []
    for position, item in enumerate(items):
        try:
            payload = SourceFilePayload.model_validate(item)
        except ValidationError as exc:
            raise PayloadError(f"Invalid payload entry {position}: {exc}") from exc
        parsed.append(to_parsed_file(payload))
    logger.debug("Loaded %d parsed file(s)", len(parsed))
    return parsed


def to_parsed_file(payload: SourceFilePayload) -> ParsedFile:
    return ParsedFile(
        path=SourcePath(payload.path),
        info=to_source_info(payload),
        existing_tests=tuple(payload.existing_tests),
    )


def to_source_info(payload: SourceFilePayload) -> SourceInfo:
    header = Header(
        package=payload.header.package,
        imports=tuple(
            Import(name=item.name, path=item.path) for item in payload.header.imports
        ),
        code=payload.header.code.encode("utf-8"),
    )
    return SourceInfo(
        header=header,
        funcs=tuple(_to_function(item) for item in payload.funcs),
    )


def _to_function(payload: FunctionPayload) -> Function:
    return Function(
        name=payload.name,
        is_exported=payload.is_exported,
        receiver=_to_field(payload.receiver, 0) if payload.receiver else None,
        parameters=_to_fields(payload.parameters),
        results=_to_fields(payload.results),
        returns_error=payload.returns_error,
    )


def _to_fields(payloads: List[FieldPayload]) -> Tuple[Field, ...]:
    return tuple(_to_field(item, position) for position, item in enumerate(payloads))


def _to_field(payload: FieldPayload, position: int) -> Field:
    return Field(
        name=payload.name,
        type=Expression(
            value=payload.type.value,
            is_star=payload.type.is_star,
            is_variadic=payload.type.is_variadic,
        ),
        index=position if payload.index is None else payload.index,
    )


__all__ = [
    "ExpressionPayload",
    "FieldPayload",
    "FunctionPayload",
    "HeaderPayload",
    "ImportPayload",
    "ParsedFile",
    "PayloadError",
    "SourceFilePayload",
    "load_parsed_files",
    "parse_parsed_files",
    "to_parsed_file",
    "to_source_info",
]
