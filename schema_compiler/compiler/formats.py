"""String format checks for the "format" keyword.

Each check receives an already validated string and returns it unchanged,
or raises ValueError; pydantic reports the message as a violation.
"""

import re
from collections.abc import Callable
from datetime import date, datetime

from email_validator import EmailNotValidError, validate_email
from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from schema_compiler.domain.enums import StringFormat

UUID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

# Seconds required, fraction optional, explicit UTC designator or offset
DATE_TIME_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})"
)

_url_adapter = TypeAdapter(AnyUrl)


def check_email(value: str) -> str:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"invalid email address: {e}") from e
    return value


def check_date_time(value: str) -> str:
    if not DATE_TIME_PATTERN.fullmatch(value):
        raise ValueError("invalid date-time, expected ISO 8601 with a timezone")
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError(f"invalid date-time: {e}") from e
    return value


def check_uri(value: str) -> str:
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError as e:
        raise ValueError("invalid uri") from e
    return value


def check_uuid(value: str) -> str:
    if not UUID_PATTERN.fullmatch(value):
        raise ValueError("invalid uuid")
    return value


def check_date(value: str) -> str:
    if not DATE_PATTERN.fullmatch(value):
        raise ValueError("invalid date, expected YYYY-MM-DD")
    try:
        date.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"invalid date: {e}") from e
    return value


FORMAT_CHECKS: dict[str, Callable[[str], str]] = {
    StringFormat.EMAIL.value: check_email,
    StringFormat.DATE_TIME.value: check_date_time,
    StringFormat.URI.value: check_uri,
    StringFormat.UUID.value: check_uuid,
    StringFormat.DATE.value: check_date,
}


def get_format_check(fmt: object) -> Callable[[str], str] | None:
    """Return the check for a format name, or None when it is not supported."""
    if not isinstance(fmt, str):
        return None
    return FORMAT_CHECKS.get(fmt)
