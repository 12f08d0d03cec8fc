"""
Schema model consumed by the compiler.

A JSON Schema document is open-ended: any keyword may appear. The compiler
only reacts to the keywords declared in JSONSchema; everything else is kept
verbatim in SchemaNode.extras and otherwise ignored.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypedDict

from schema_compiler.core.errors import SchemaCompilationError


class JSONSchema(TypedDict, total=False):
    """Static declaration of the keywords recognized by the compiler."""

    type: str
    properties: dict[str, JSONSchema]
    items: JSONSchema | list[JSONSchema]
    required: list[str]
    enum: list[str | int | float | bool | None]
    format: str
    minimum: int | float
    maximum: int | float
    minLength: int
    maxLength: int
    oneOf: list[JSONSchema]
    anyOf: list[JSONSchema]
    allOf: list[JSONSchema]
    description: str
    default: Any
    const: str | int | float | bool | None
    additionalProperties: bool | JSONSchema


RECOGNIZED_KEYWORDS = frozenset(JSONSchema.__annotations__)


@dataclass(frozen=True)
class SchemaNode:
    """
    Read-only view over one schema mapping.

    Recognized keywords and unrecognized ones are kept apart so that
    presence checks only ever look at keywords the compiler understands.
    """

    keywords: Mapping[str, Any]
    extras: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, schema: Mapping[str, Any] | SchemaNode) -> SchemaNode:
        """
        Build a node from a schema mapping.

        Args:
            schema: Schema mapping (or an existing node, returned as-is)

        Returns:
            SchemaNode sharing no mutable state with the input mapping

        Raises:
            SchemaCompilationError: If the schema is not a mapping
        """
        if isinstance(schema, SchemaNode):
            return schema

        if not isinstance(schema, Mapping):
            raise SchemaCompilationError(
                "Schema node must be a mapping",
                details={"type": type(schema).__name__},
            )

        keywords = {k: v for k, v in schema.items() if k in RECOGNIZED_KEYWORDS}
        extras = {k: v for k, v in schema.items() if k not in RECOGNIZED_KEYWORDS}
        return cls(MappingProxyType(keywords), MappingProxyType(extras))

    def has(self, keyword: str) -> bool:
        """Whether the keyword was supplied, whatever its value."""
        return keyword in self.keywords

    def get(self, keyword: str, default: Any = None) -> Any:
        return self.keywords.get(keyword, default)

    @property
    def type(self) -> Any:
        return self.keywords.get("type")

    def to_dict(self) -> dict[str, Any]:
        """Return a new plain dict holding recognized keywords and extras."""
        return {**self.extras, **self.keywords}
