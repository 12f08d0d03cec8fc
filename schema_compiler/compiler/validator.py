"""
Runtime validators emitted by the schema compiler.

A Validator pairs a pydantic type (the static type derived from the schema)
with a lazily built TypeAdapter that performs the runtime check. Validators
are composable: object, array and union validators are built from the
validators of their sub-schemas and keep references to them.

Capability set used by the compiler:
- literal: a single accepted value ("const")
- enum_of: a closed set of accepted values ("enum")
- string / number / integer / boolean: strict primitive checks with bounds
- array_of: homogeneous list
- object_of: keyed record with optional fields and an extensibility policy
- union_of: first matching member wins (two or more members)
- Validator.describe / Validator.with_default: metadata decorators
"""

import copy
import logging
import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from functools import cached_property
from typing import Annotated, Any, Literal, Union, get_origin

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    create_model,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.json_schema import GenerateJsonSchema, JsonSchemaValue

from schema_compiler.core.errors import SchemaValidationError
from schema_compiler.domain.enums import ExtraPolicy, ValidatorKind

logger = logging.getLogger(__name__)


class _Missing:
    """Marker for an absent input value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


# =============================================================================
# Check results
# =============================================================================


@dataclass(frozen=True)
class Violation:
    """One reason a value was rejected, located by its path inside the value."""

    path: tuple[str | int, ...]
    reason: str
    kind: str

    @classmethod
    def from_pydantic(cls, error: Mapping[str, Any]) -> "Violation":
        return cls(path=tuple(error["loc"]), reason=error["msg"], kind=error["type"])

    @property
    def location(self) -> str:
        """JSONPath-like rendering of the path, e.g. $.items[0].name"""
        parts = ["$"]
        for segment in self.path:
            if isinstance(segment, int):
                parts.append(f"[{segment}]")
            else:
                parts.append(f".{segment}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.location, "reason": self.reason, "kind": self.kind}


@dataclass(frozen=True)
class CheckResult:
    """Outcome of Validator.check: the parsed value or the violations."""

    ok: bool
    value: Any = None
    errors: tuple[Violation, ...] = ()


# =============================================================================
# Validator
# =============================================================================


class _ContractJsonSchema(GenerateJsonSchema):
    """Derived JSON Schema without the placeholder default of optional properties."""

    def default_schema(self, schema: Any) -> JsonSchemaValue:
        # Optional properties may be absent, but an explicit null is rejected
        if "default" in schema and schema["default"] is None:
            return self.generate_inner(schema["schema"])
        return super().default_schema(schema)


class Validator:
    """
    Compiled, immutable validator for one schema node.

    Attributes:
        kind: Shape of the validator (string, object, union, ...)
        fields: Property validators of an object validator, by property name
        required: Names of the required properties of an object validator
        extra_policy: Extensibility policy of an object validator
        additional: Validator for undeclared keys (ExtraPolicy.SCHEMA only)
        item: Element validator of an array validator
        variants: Member validators of a union validator
        values: Accepted values of a literal or enum validator
        model: Generated pydantic model of an object validator
        description: Text from the schema "description"
        default: Value substituted for an absent input (see has_default)
    """

    def __init__(
        self,
        kind: ValidatorKind,
        annotation: Any,
        *,
        fields: Mapping[str, "Validator"] | None = None,
        required: frozenset[str] = frozenset(),
        extra_policy: ExtraPolicy | None = None,
        additional: "Validator | None" = None,
        item: "Validator | None" = None,
        variants: tuple["Validator", ...] = (),
        values: tuple[Any, ...] = (),
        model: type[BaseModel] | None = None,
        description: str | None = None,
        default: Any = MISSING,
    ) -> None:
        self.kind = kind
        self._base_annotation = annotation
        self.fields = dict(fields or {})
        self.required = frozenset(required)
        self.extra_policy = extra_policy
        self.additional = additional
        self.item = item
        self.variants = tuple(variants)
        self.values = tuple(values)
        self.model = model
        self.description = description
        self.default = default

    def __repr__(self) -> str:
        return f"Validator(kind={self.kind.value}, annotation={self.annotation!r})"

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @property
    def annotation(self) -> Any:
        """The pydantic-compatible type this validator checks against."""
        if self.description:
            return Annotated[self._base_annotation, Field(description=self.description)]
        return self._base_annotation

    @cached_property
    def adapter(self) -> TypeAdapter:
        return TypeAdapter(self.annotation)

    def _replace(self, **changes: Any) -> "Validator":
        params = {
            "fields": self.fields,
            "required": self.required,
            "extra_policy": self.extra_policy,
            "additional": self.additional,
            "item": self.item,
            "variants": self.variants,
            "values": self.values,
            "model": self.model,
            "description": self.description,
            "default": self.default,
        }
        params.update(changes)
        return Validator(self.kind, self._base_annotation, **params)

    def describe(self, description: str) -> "Validator":
        """Return a copy annotated with a description; checking is unchanged."""
        return self._replace(description=description)

    def with_default(self, default: Any) -> "Validator":
        """Return a copy that substitutes default when the input is absent."""
        return self._replace(default=default)

    def check(self, value: Any = MISSING) -> CheckResult:
        """
        Check a value without raising.

        An absent value (no argument, or MISSING) is replaced by a copy of
        the default when there is one; the substituted value is checked
        like any other input.

        Returns:
            CheckResult with the parsed plain-Python value, or the violations
        """
        if value is MISSING:
            if not self.has_default:
                return CheckResult(
                    ok=False, errors=(Violation(path=(), reason="Field required", kind="missing"),)
                )
            value = copy.deepcopy(self.default)

        try:
            parsed = self.adapter.validate_python(value)
        except PydanticValidationError as e:
            return CheckResult(
                ok=False, errors=tuple(Violation.from_pydantic(err) for err in e.errors())
            )

        return CheckResult(
            ok=True, value=self.adapter.dump_python(parsed, by_alias=True, exclude_unset=True)
        )

    def parse(self, value: Any = MISSING) -> Any:
        """
        Check a value and return the parsed result.

        Raises:
            SchemaValidationError: If the value is rejected
        """
        result = self.check(value)
        if not result.ok:
            errors = [violation.to_dict() for violation in result.errors]
            summary = "; ".join(f"{err['path']}: {err['reason']}" for err in errors)
            raise SchemaValidationError(
                f"Value does not match schema: {summary}", details={"errors": errors}
            )
        return result.value

    def is_valid(self, value: Any = MISSING) -> bool:
        return self.check(value).ok

    def json_schema(self) -> dict[str, Any]:
        """JSON Schema pydantic derives for the annotation."""
        return self.adapter.json_schema(schema_generator=_ContractJsonSchema)


# =============================================================================
# Builders
# =============================================================================


def _reject_bool(value: Any) -> Any:
    # bool is an int subclass; JSON booleans are never numbers
    if isinstance(value, bool):
        raise ValueError("Input should be a valid number, not a boolean")
    return value


def _whole_to_int(value: float) -> int:
    if not value.is_integer():
        raise ValueError("Input should be a whole number")
    return int(value)


def _json_kind(value: Any) -> type:
    # JSON has one number type; bool is an int subclass but never a number
    if isinstance(value, bool):
        return bool
    if isinstance(value, (int, float)):
        return float
    return type(value)


def _same_kind_as(accepted: tuple[Any, ...]) -> BeforeValidator:
    kinds = {_json_kind(value) for value in accepted}

    def same_kind(value: Any) -> Any:
        if _json_kind(value) not in kinds:
            expected = ", ".join(repr(v) for v in accepted)
            raise ValueError(f"Input should be {expected}")
        return value

    return BeforeValidator(same_kind)


def literal(value: Any) -> Validator:
    """Exactly one accepted value; 1 and True are different values."""
    annotation = Annotated[Literal[value], _same_kind_as((value,))]
    return Validator(ValidatorKind.LITERAL, annotation, values=(value,))


def enum_of(values: Iterable[Any]) -> Validator:
    """Closed set of accepted values, in declaration order, duplicates dropped."""
    accepted = tuple(dict.fromkeys(values))
    if not accepted:
        raise ValueError("enum_of requires at least one value")
    annotation = Annotated[Literal[accepted], _same_kind_as(accepted)]
    return Validator(ValidatorKind.ENUM, annotation, values=accepted)


def string(
    min_length: int | None = None,
    max_length: int | None = None,
    format_check: Callable[[str], str] | None = None,
    format_name: str | None = None,
) -> Validator:
    metadata: list[Any] = [
        Field(
            strict=True,
            min_length=min_length,
            max_length=max_length,
            json_schema_extra={"format": format_name} if format_name else None,
        )
    ]
    if format_check is not None:
        metadata.append(AfterValidator(format_check))
    return Validator(ValidatorKind.STRING, Annotated[(str, *metadata)])


def _int_bounds(
    minimum: float | None, maximum: float | None
) -> tuple[int | None, int | None]:
    """Tightest integer bounds equivalent to possibly fractional ones."""
    return (
        math.ceil(minimum) if minimum is not None and math.isfinite(minimum) else None,
        math.floor(maximum) if maximum is not None and math.isfinite(maximum) else None,
    )


def number(minimum: float | None = None, maximum: float | None = None) -> Validator:
    int_min, int_max = _int_bounds(minimum, maximum)
    annotation = Annotated[
        Union[
            Annotated[int, Field(strict=True, ge=int_min, le=int_max)],
            Annotated[float, Field(strict=True, ge=minimum, le=maximum)],
        ],
        BeforeValidator(_reject_bool),
    ]
    return Validator(ValidatorKind.NUMBER, annotation)


def integer(minimum: float | None = None, maximum: float | None = None) -> Validator:
    """Whole numbers; integral floats such as 2.0 are accepted and returned as int."""
    int_min, int_max = _int_bounds(minimum, maximum)
    annotation = Annotated[
        Union[
            Annotated[int, Field(strict=True, ge=int_min, le=int_max)],
            Annotated[
                float, Field(strict=True, ge=minimum, le=maximum), AfterValidator(_whole_to_int)
            ],
        ],
        BeforeValidator(_reject_bool),
    ]
    return Validator(ValidatorKind.INTEGER, annotation)


def boolean() -> Validator:
    return Validator(ValidatorKind.BOOLEAN, Annotated[bool, Field(strict=True)])


def array_of(item: Validator) -> Validator:
    return Validator(ValidatorKind.ARRAY, list[item.annotation], item=item)


def object_of(
    fields: Mapping[str, Validator],
    required: Iterable[str] = (),
    extra_policy: ExtraPolicy = ExtraPolicy.FORBID,
    additional: Validator | None = None,
    name: str = "Object",
) -> Validator:
    """
    Keyed record validator backed by a generated pydantic model.

    Property names are used as field aliases, so any string is a valid
    property name. Optional properties that are absent stay absent in the
    parsed value; properties whose validator has a default are filled in
    before the record is checked.

    Args:
        fields: Property validators by property name
        required: Property names that must be present
        extra_policy: What to do with undeclared keys
        additional: Validator for undeclared values (ExtraPolicy.SCHEMA)
        name: Name of the generated model

    Returns:
        Validator of kind OBJECT
    """
    required = frozenset(required) & frozenset(fields)
    if extra_policy is ExtraPolicy.SCHEMA and additional is None:
        raise ValueError("ExtraPolicy.SCHEMA requires an additional validator")

    field_definitions: dict[str, Any] = {}
    defaults: dict[str, Any] = {}
    for index, (key, validator) in enumerate(fields.items()):
        if key in required:
            info = Field(alias=key)
        else:
            # Never validated: the field is simply left unset
            info = Field(default=None, alias=key)
        field_definitions[f"field_{index}"] = (validator.annotation, info)
        if validator.has_default:
            defaults[key] = validator.default

    namespace: dict[str, Any] = {
        "__module__": __name__,
        "model_config": ConfigDict(
            extra="forbid" if extra_policy is ExtraPolicy.FORBID else "allow"
        ),
    }
    if extra_policy is ExtraPolicy.SCHEMA:
        namespace["__annotations__"] = {"__pydantic_extra__": dict[str, additional.annotation]}
    base = type(f"{name}Base", (BaseModel,), namespace)

    def fill_defaults(cls, data: Any) -> Any:
        if not defaults or not isinstance(data, Mapping):
            return data
        filled = dict(data)
        for key, default in defaults.items():
            if key not in filled:
                filled[key] = copy.deepcopy(default)
        return filled

    model = create_model(
        name,
        __base__=base,
        __validators__={"fill_defaults": model_validator(mode="before")(fill_defaults)},
        **field_definitions,
    )

    return Validator(
        ValidatorKind.OBJECT,
        model,
        fields=fields,
        required=required,
        extra_policy=extra_policy,
        additional=additional if extra_policy is ExtraPolicy.SCHEMA else None,
        model=model,
    )


def _matches(validator: Validator, value: Any) -> bool:
    try:
        validator.adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def union_of(variants: Iterable[Validator], exclusive: bool = False) -> Validator:
    """
    Union validator: members are tried left to right, the first match wins.

    Args:
        variants: Two or more member validators
        exclusive: Reject values accepted by more than one member

    Returns:
        Validator of kind UNION
    """
    variants = tuple(variants)
    if len(variants) < 2:
        raise ValueError("union_of requires at least two variants")

    members = Union[tuple(variant.annotation for variant in variants)]
    # Identical member types collapse into a single type
    if get_origin(members) is Union:
        annotation = Annotated[members, Field(union_mode="left_to_right")]
    else:
        annotation = members

    if exclusive:

        def exactly_one(value: Any) -> Any:
            matched = sum(1 for variant in variants if _matches(variant, value))
            if matched > 1:
                raise ValueError(f"Input matches {matched} members, expected exactly one")
            return value

        annotation = Annotated[annotation, BeforeValidator(exactly_one)]

    return Validator(ValidatorKind.UNION, annotation, variants=variants)
