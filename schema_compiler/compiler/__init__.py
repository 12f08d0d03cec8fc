"""
JSON Schema compiler.

This package converts JSON Schema documents into runtime validators.

Key Components:
- compiler: Type dispatch, primitive/array/object handlers, combinators
- merger: Structural merge of "allOf" members
- validator: Validator objects and the builders the compiler emits into
- formats: String "format" checks

Design Principles:
- Purity: Same schema produces an equivalent, freshly built validator
- Presence: Keywords count when supplied, whatever their value
- Closed objects: Undeclared keys are rejected unless the schema opts in
"""

from schema_compiler.compiler.compiler import convert
from schema_compiler.compiler.merger import merge_all_of, merge_schemas
from schema_compiler.compiler.validator import MISSING, CheckResult, Validator, Violation

__all__ = [
    "convert",
    "merge_schemas",
    "merge_all_of",
    "Validator",
    "CheckResult",
    "Violation",
    "MISSING",
]
