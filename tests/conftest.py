"""
Pytest configuration and shared fixtures.

Provides:
- Repository root on sys.path (tests run without an editable install)
- Schema fixtures shared by compiler, validator and CLI tests
- Root logger isolation for tests that reconfigure logging
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]

# Add the package to path for imports
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402 (import after path setup)


@pytest.fixture
def person_schema() -> dict[str, Any]:
    """Object schema with one required and one optional property."""
    return {
        "type": "object",
        "properties": {
            "name": {"type": "string"},
            "age": {"type": "number"},
        },
        "required": ["name"],
    }


@pytest.fixture
def order_schema() -> dict[str, Any]:
    """Nested schema exercising objects, arrays, formats and combinators."""
    return {
        "type": "object",
        "description": "A customer order",
        "properties": {
            "id": {"type": "string", "format": "uuid"},
            "email": {"type": "string", "format": "email"},
            "status": {"type": "string", "enum": ["pending", "shipped"], "default": "pending"},
            "lines": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "sku": {"type": "string", "minLength": 1},
                        "quantity": {"type": "integer", "minimum": 1},
                    },
                    "required": ["sku", "quantity"],
                },
            },
            "discount": {"oneOf": [{"type": "number"}, {"type": "string"}]},
        },
        "required": ["id", "lines"],
    }


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after a test reconfigures logging."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
