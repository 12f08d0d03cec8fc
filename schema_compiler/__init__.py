"""Compile JSON Schema documents into composable runtime validators."""

from schema_compiler.compiler import MISSING, CheckResult, Validator, Violation, convert
from schema_compiler.core.errors import (
    MissingItemsError,
    SchemaCompilationError,
    SchemaCompilerError,
    SchemaValidationError,
    UnsupportedSchemaTypeError,
)
from schema_compiler.domain.schema import JSONSchema, SchemaNode

__version__ = "0.1.0"

__all__ = [
    "convert",
    "Validator",
    "CheckResult",
    "Violation",
    "MISSING",
    "JSONSchema",
    "SchemaNode",
    "SchemaCompilerError",
    "SchemaCompilationError",
    "MissingItemsError",
    "UnsupportedSchemaTypeError",
    "SchemaValidationError",
]
