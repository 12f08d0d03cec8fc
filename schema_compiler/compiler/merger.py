"""
Structural merge of schema nodes for "allOf".

The merge is shallow: a later node overrides every keyword of an earlier
one, except "properties" (unioned key by key, later wins) and "required"
(unioned, order preserved, duplicates dropped). Inputs are never mutated;
every merge returns a new dict.
"""

from collections.abc import Mapping, Sequence
from functools import reduce
from typing import Any

from schema_compiler.core.errors import SchemaCompilationError
from schema_compiler.domain.schema import SchemaNode


def _as_dict(schema: Mapping[str, Any] | SchemaNode) -> dict[str, Any]:
    if isinstance(schema, SchemaNode):
        return schema.to_dict()
    if isinstance(schema, Mapping):
        return dict(schema)
    raise SchemaCompilationError(
        "allOf members must be schema mappings", details={"type": type(schema).__name__}
    )


def merge_schemas(
    base_schema: Mapping[str, Any] | SchemaNode, add_schema: Mapping[str, Any] | SchemaNode
) -> dict[str, Any]:
    """
    Merge add_schema into base_schema.

    Args:
        base_schema: Accumulated schema
        add_schema: Schema whose keywords take precedence

    Returns:
        New merged schema dict

    Example:
        >>> merge_schemas(
        ...     {"type": "object", "properties": {"a": {}}, "required": ["a"]},
        ...     {"properties": {"b": {}}, "required": ["b", "a"]},
        ... )
        {'type': 'object', 'properties': {'a': {}, 'b': {}}, 'required': ['a', 'b']}
    """
    base = _as_dict(base_schema)
    add = _as_dict(add_schema)
    merged = {**base, **add}

    base_properties = base.get("properties")
    add_properties = add.get("properties")
    if isinstance(base_properties, Mapping) and isinstance(add_properties, Mapping):
        merged["properties"] = {**base_properties, **add_properties}

    base_required = base.get("required")
    add_required = add.get("required")
    if isinstance(base_required, list) and isinstance(add_required, list):
        merged["required"] = list(dict.fromkeys([*base_required, *add_required]))

    return merged


def merge_all_of(members: Sequence[Mapping[str, Any] | SchemaNode]) -> dict[str, Any]:
    """Left fold of merge_schemas over the members of an "allOf"."""
    if not members:
        raise SchemaCompilationError("allOf requires at least one member")
    return reduce(merge_schemas, members[1:], _as_dict(members[0]))
