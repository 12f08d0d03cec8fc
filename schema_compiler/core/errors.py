"""
Domain-specific exceptions for the schema compiler.

Compilation errors are fatal for the schema being converted; validation
errors describe a value rejected by an already compiled validator.
"""

from typing import Any


class SchemaCompilerError(Exception):
    """Base exception for all schema compiler errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class SchemaCompilationError(SchemaCompilerError):
    """
    Raised when a schema cannot be converted into a validator.

    Examples:
    - Schema node is not a mapping
    - Structurally required keyword is missing

    Exit code: 2
    """

    pass


class MissingItemsError(SchemaCompilationError):
    """
    Raised when an array schema has no usable "items" keyword.

    Examples:
    - {"type": "array"}
    - {"type": "array", "items": []}

    Exit code: 2
    """

    pass


class UnsupportedSchemaTypeError(SchemaCompilationError):
    """
    Raised when a node has no recognized "type" and no combinator keyword.

    Examples:
    - {"type": "unsupportedType"}
    - {} (no type, no oneOf/anyOf/allOf)

    Exit code: 2
    """

    pass


class SchemaValidationError(SchemaCompilerError):
    """
    Raised by Validator.parse when a value is rejected.

    The violations are available under details["errors"], each with a
    "path", a "reason" and the pydantic error "kind".

    Exit code: 1
    """

    pass


# CLI exit code mapping
ERROR_EXIT_CODE_MAP = {
    SchemaValidationError: 1,
    SchemaCompilationError: 2,
    MissingItemsError: 2,
    UnsupportedSchemaTypeError: 2,
}


def get_exit_code(error: Exception) -> int:
    """
    Get the CLI exit code for a given exception.

    Args:
        error: The exception instance

    Returns:
        Process exit code (defaults to 70 for unknown errors)
    """
    return ERROR_EXIT_CODE_MAP.get(type(error), 70)
