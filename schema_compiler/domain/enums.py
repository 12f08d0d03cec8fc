"""
Domain enums for the JSON Schema keywords the compiler understands.

These enums give names to the closed vocabularies of the compiler:
schema types, string formats, combinators and object extensibility.
"""

from enum import Enum


class SchemaType(str, Enum):
    """Value of the JSON Schema "type" keyword handled by the dispatcher."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


class StringFormat(str, Enum):
    """String "format" values that narrow the accepted lexical form."""

    EMAIL = "email"
    DATE_TIME = "date-time"
    URI = "uri"
    UUID = "uuid"
    DATE = "date"


class Combinator(str, Enum):
    """Combinator keywords, in the order the resolver tries them."""

    ONE_OF = "oneOf"
    ANY_OF = "anyOf"
    ALL_OF = "allOf"


class ExtraPolicy(str, Enum):
    """
    Extensibility policy of an object validator.

    FORBID is the default: undeclared keys are rejected unless the schema
    opts in with "additionalProperties".
    """

    FORBID = "forbid"
    ALLOW = "allow"
    SCHEMA = "schema"


class ValidatorKind(str, Enum):
    """Shape of a compiled validator."""

    LITERAL = "literal"
    ENUM = "enum"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    UNION = "union"
