"""Source model and test-candidate selection for Go test stub generation."""

from .models import BASIC_TYPES, Expression, Field, Function, Header, Import, SourceInfo
from .naming import SourcePath

__all__ = [
    "BASIC_TYPES",
    "Expression",
    "Field",
    "Function",
    "Header",
    "Import",
    "SourceInfo",
    "SourcePath",
]
