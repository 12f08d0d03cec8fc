"""
Main Compiler for JSON Schema documents.

Converts a JSON Schema document into a composable runtime Validator.

This is the core of the package:
- Dispatches every schema node on its "type" keyword
- Builds nested validator trees for objects, arrays and unions
- Resolves combinators ("oneOf", "anyOf", "allOf")
- Applies "description" and "default" uniformly to every validator

Keyword checks are presence based: a keyword supplied with 0, False, ""
or null is honored, never mistaken for an absent one.
"""

import logging
import math
import time
from collections.abc import Mapping
from typing import Any

from schema_compiler.compiler.formats import get_format_check
from schema_compiler.compiler.merger import merge_all_of
from schema_compiler.compiler.validator import (
    Validator,
    array_of,
    boolean,
    enum_of,
    integer,
    literal,
    number,
    object_of,
    string,
    union_of,
)
from schema_compiler.core.config import settings
from schema_compiler.core.errors import (
    MissingItemsError,
    SchemaCompilationError,
    UnsupportedSchemaTypeError,
)
from schema_compiler.domain.enums import Combinator, ExtraPolicy, SchemaType
from schema_compiler.domain.schema import SchemaNode

logger = logging.getLogger(__name__)


def convert(
    schema: Mapping[str, Any] | SchemaNode, *, exclusive_one_of: bool | None = None
) -> Validator:
    """
    Convert a JSON Schema into a Validator.

    This is the main entry point for conversion. Every call builds a fresh
    validator tree; nothing is cached between calls and the input schema
    is never modified.

    Args:
        schema: JSON Schema mapping (or SchemaNode)
        exclusive_one_of: Reject values matched by more than one "oneOf"
                          member. Defaults to settings.exclusive_one_of.

    Returns:
        Validator for the schema

    Raises:
        MissingItemsError: If an array schema has no "items"
        UnsupportedSchemaTypeError: If a node has neither a supported
                                    "type" nor a combinator keyword
        SchemaCompilationError: If a schema node is not a mapping

    Example:
        >>> validator = convert({"type": "string", "format": "email"})
        >>> validator.check("test@example.com").ok
        True
        >>> validator.check("invalid-email").ok
        False
    """
    start_time = time.time()
    if exclusive_one_of is None:
        exclusive_one_of = settings.exclusive_one_of

    try:
        validator = _parse_schema(schema, exclusive_one_of)
    except SchemaCompilationError as e:
        logger.warning("Schema conversion failed: %s", e.message, extra={"details": e.details})
        _record_conversion_metrics("error", time.time() - start_time)
        raise
    except Exception:
        _record_conversion_metrics("error", time.time() - start_time)
        raise

    duration = time.time() - start_time
    logger.debug(
        "Converted schema to %s validator in %.4fs", validator.kind.value, duration
    )
    _record_conversion_metrics("success", duration)
    return validator


def _record_conversion_metrics(status: str, duration: float) -> None:
    """
    Record conversion metrics to Prometheus when enabled.

    Metrics failures are logged and never break conversion.
    """
    if not settings.metrics_enabled:
        return

    try:
        from schema_compiler.core.observability import metrics

        metrics.conversions_total.labels(status=status).inc()
        metrics.conversion_duration_seconds.observe(duration)
    except Exception:
        logger.debug("Failed to record conversion metrics", exc_info=True)


# =============================================================================
# Type Dispatcher
# =============================================================================


def _parse_schema(schema: Mapping[str, Any] | SchemaNode, exclusive_one_of: bool) -> Validator:
    """
    Dispatch a schema node to its handler and apply its metadata.

    Any "type" other than the six supported ones (including an absent
    "type") is handled as a combinator node.
    """
    node = SchemaNode.from_mapping(schema)
    schema_type = node.type

    if schema_type == SchemaType.STRING:
        validator = _parse_string(node)
    elif schema_type == SchemaType.NUMBER:
        validator = _parse_number(node)
    elif schema_type == SchemaType.INTEGER:
        validator = _parse_number(node, is_integer=True)
    elif schema_type == SchemaType.BOOLEAN:
        validator = _parse_boolean(node)
    elif schema_type == SchemaType.ARRAY:
        validator = _parse_array(node, exclusive_one_of)
    elif schema_type == SchemaType.OBJECT:
        validator = _parse_object(node, exclusive_one_of)
    else:
        validator = _parse_combinator(node, exclusive_one_of)

    return _apply_metadata(validator, node)


def _apply_metadata(validator: Validator, node: SchemaNode) -> Validator:
    description = node.get("description")
    if isinstance(description, str) and description:
        validator = validator.describe(description)
    if node.has("default"):
        validator = validator.with_default(node.get("default"))
    return validator


# =============================================================================
# Primitive Handlers
# =============================================================================


def _number_keyword(node: SchemaNode, keyword: str) -> int | float | None:
    """Value of a numeric keyword, or None when it cannot be used as a bound."""
    if not node.has(keyword):
        return None
    value = node.get(keyword)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _length_keyword(node: SchemaNode, keyword: str) -> int | None:
    value = _number_keyword(node, keyword)
    if value is None:
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    return value if value >= 0 else None


def _enum_text(value: Any) -> str:
    """Text form of an enum member, spelled the way JSON spells it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _parse_string(node: SchemaNode) -> Validator:
    if node.has("const"):
        return literal(node.get("const"))

    members = node.get("enum")
    if isinstance(members, list) and members:
        return enum_of(_enum_text(member) for member in members)

    format_check = get_format_check(node.get("format"))
    if format_check is None and node.has("format"):
        logger.debug("Ignoring unsupported string format %r", node.get("format"))

    return string(
        min_length=_length_keyword(node, "minLength"),
        max_length=_length_keyword(node, "maxLength"),
        format_check=format_check,
        format_name=node.get("format") if format_check is not None else None,
    )


def _parse_number(node: SchemaNode, is_integer: bool = False) -> Validator:
    if node.has("const"):
        return literal(node.get("const"))

    minimum = _number_keyword(node, "minimum")
    maximum = _number_keyword(node, "maximum")
    if is_integer:
        return integer(minimum=minimum, maximum=maximum)
    return number(minimum=minimum, maximum=maximum)


def _parse_boolean(node: SchemaNode) -> Validator:
    if node.has("const"):
        return literal(node.get("const"))
    return boolean()


# =============================================================================
# Array Handler
# =============================================================================


def _parse_array(node: SchemaNode, exclusive_one_of: bool) -> Validator:
    """
    Convert an array node.

    "items" may be a single schema or a list of schemas. A list of two or
    more becomes a union of element validators; a list of one is that
    element's validator.

    Raises:
        MissingItemsError: If "items" is absent, null or an empty list
    """
    items = node.get("items")
    if items is None or (isinstance(items, (list, tuple)) and not items):
        raise MissingItemsError(
            'Array schema must have "items" defined', details={"items": items}
        )

    if isinstance(items, (list, tuple)):
        item_validators = [_parse_schema(item, exclusive_one_of) for item in items]
        if len(item_validators) == 1:
            item_validator = item_validators[0]
        else:
            item_validator = union_of(item_validators)
    else:
        item_validator = _parse_schema(items, exclusive_one_of)

    return array_of(item_validator)


# =============================================================================
# Object Handler
# =============================================================================


def _parse_object(node: SchemaNode, exclusive_one_of: bool) -> Validator:
    """
    Convert an object node.

    Extensibility policy:
    - additionalProperties true: undeclared keys are kept unchecked
    - additionalProperties a schema: undeclared values must match it
    - anything else, including absent: undeclared keys are rejected
    """
    properties = node.get("properties")
    if not isinstance(properties, Mapping):
        properties = {}

    required_names = node.get("required")
    if not isinstance(required_names, list):
        required_names = []

    fields = {
        key: _parse_schema(property_schema, exclusive_one_of)
        for key, property_schema in properties.items()
    }
    required = frozenset(name for name in required_names if name in fields)

    additional_schema = node.get("additionalProperties")
    additional = None
    if additional_schema is True:
        extra_policy = ExtraPolicy.ALLOW
    elif isinstance(additional_schema, Mapping):
        extra_policy = ExtraPolicy.SCHEMA
        additional = _parse_schema(additional_schema, exclusive_one_of)
    else:
        extra_policy = ExtraPolicy.FORBID

    title = node.extras.get("title")
    name = title if isinstance(title, str) and title.isidentifier() else "Object"

    return object_of(fields, required, extra_policy, additional, name=name)


# =============================================================================
# Combinator Resolver
# =============================================================================


def _parse_combinator(node: SchemaNode, exclusive_one_of: bool) -> Validator:
    """
    Convert a node without a supported "type".

    "oneOf" is tried first, then "anyOf", then "allOf"; an empty member
    list counts as absent. Both "oneOf" and "anyOf" accept the first
    matching member; with exclusive_one_of, "oneOf" also rejects values
    matched by more than one member.

    Raises:
        UnsupportedSchemaTypeError: If no combinator keyword applies
    """
    for combinator in (Combinator.ONE_OF, Combinator.ANY_OF):
        members = node.get(combinator.value)
        if not isinstance(members, list) or not members:
            continue
        if len(members) == 1:
            return _parse_schema(members[0], exclusive_one_of)
        variants = [_parse_schema(member, exclusive_one_of) for member in members]
        return union_of(
            variants, exclusive=exclusive_one_of and combinator is Combinator.ONE_OF
        )

    members = node.get(Combinator.ALL_OF.value)
    if isinstance(members, list) and members:
        return _parse_schema(merge_all_of(members), exclusive_one_of)

    raise UnsupportedSchemaTypeError(
        "Unsupported schema type",
        details={"type": node.type, "keywords": sorted(node.to_dict())},
    )
