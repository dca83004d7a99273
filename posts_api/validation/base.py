"""Validation result types, field rules and the shared validator contract.

Validators never raise: ``validate`` always returns either a
``ValidationSuccess`` holding the sanitized DTO or a ``ValidationFailure``
holding every field error found in that call. Errors are collected in a list
local to the call, so a single validator instance can be shared freely.
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from collections.abc import Collection
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
import re
from typing import Any
from typing import ClassVar
from typing import Generic
from typing import Literal
from typing import TypeVar
from typing import Union

from pydantic import AnyUrl
from pydantic import BaseModel
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from posts_api.core.errors import EMPTY_VALUE
from posts_api.core.errors import INVALID_TYPE
from posts_api.core.errors import INVALID_URL
from posts_api.core.errors import INVALID_VALUE
from posts_api.core.errors import MAX_LENGTH
from posts_api.core.errors import MAX_VALUE
from posts_api.core.errors import REQUIRED
from posts_api.core.errors import ROOT_FIELD
from posts_api.core.errors import FieldError

T = TypeVar("T", bound=BaseModel)

_URL_ADAPTER = TypeAdapter(AnyUrl)
_INTEGER_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)


@dataclass(frozen=True)
class ValidationSuccess(Generic[T]):
    data: T
    success: Literal[True] = field(default=True, init=False)


@dataclass(frozen=True)
class ValidationFailure:
    errors: list[FieldError]
    success: Literal[False] = field(default=False, init=False)

    def __post_init__(self) -> None:
        if not self.errors:
            raise ValueError("ValidationFailure requires at least one error")


ValidationResult = Union[ValidationSuccess[T], ValidationFailure]


def is_integer(value: Any) -> bool:
    """True for ints; booleans are rejected even though they subclass int."""
    return isinstance(value, int) and not isinstance(value, bool)


def is_valid_url(value: str) -> bool:
    try:
        _URL_ADAPTER.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def parse_decimal(value: str) -> int | None:
    """Parse a plain ASCII decimal integer, or return None."""
    token = value.strip()
    if _INTEGER_PATTERN.fullmatch(token) is None:
        return None
    try:
        return int(token)
    except ValueError:
        # Digit strings past the interpreter's int conversion limit.
        return None


def parse_integer_list(value: str) -> list[int]:
    """Split a comma-separated string into integers, dropping non-numeric tokens."""
    parsed = (parse_decimal(token) for token in value.split(","))
    return [number for number in parsed if number is not None]


def coerce_integer(value: Any) -> int | None:
    """Coerce a query-string value to an integer, or None when it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return parse_decimal(value)
    return None


def _is_missing(value: Any) -> bool:
    """Falsy values other than real integers count as absent for required fields."""
    return not value and not is_integer(value)


def check_string(
    data: Mapping[str, Any],
    key: str,
    label: str,
    errors: list[FieldError],
    *,
    required: bool = False,
    non_empty: bool = False,
    max_length: int | None = None,
) -> str | None:
    """Validate a string field and return its trimmed value.

    Returns None when the field is absent or failed a rule.
    """
    if key not in data or (required and _is_missing(data[key])):
        if required:
            errors.append(FieldError(key, f"{label} is required", REQUIRED))
        return None

    value = data[key]
    if not isinstance(value, str):
        errors.append(FieldError(key, f"{label} must be a string", INVALID_TYPE))
        return None

    trimmed = value.strip()
    if non_empty and not trimmed:
        errors.append(FieldError(key, f"{label} cannot be empty", EMPTY_VALUE))
        return None
    if max_length is not None and len(trimmed) > max_length:
        errors.append(FieldError(key, f"{label} cannot exceed {max_length} characters", MAX_LENGTH))
        return None
    return trimmed


def check_positive_integer(
    data: Mapping[str, Any],
    key: str,
    label: str,
    errors: list[FieldError],
    *,
    required: bool = False,
) -> int | None:
    if key not in data or (required and _is_missing(data[key])):
        if required:
            errors.append(FieldError(key, f"{label} is required", REQUIRED))
        return None

    value = data[key]
    if not is_integer(value):
        errors.append(FieldError(key, f"{label} must be a number", INVALID_TYPE))
        return None
    if value <= 0:
        errors.append(FieldError(key, f"{label} must be a positive number", INVALID_VALUE))
        return None
    return value


def check_url(
    data: Mapping[str, Any],
    key: str,
    label: str,
    errors: list[FieldError],
) -> str | None:
    value = check_string(data, key, label, errors)
    if value and not is_valid_url(value):
        errors.append(FieldError(key, f"{label} must be a valid URL", INVALID_URL))
        return None
    return value


def check_id_array(
    data: Mapping[str, Any],
    key: str,
    label: str,
    errors: list[FieldError],
) -> list[int] | None:
    """Validate an array of positive ids and return the ids that passed.

    Invalid elements are dropped silently as long as one valid id survives;
    when none does, each invalid element is reported by index.
    """
    if key not in data:
        return None

    value = data[key]
    if not isinstance(value, list):
        errors.append(FieldError(key, f"{label} must be an array", INVALID_TYPE))
        return None

    valid: list[int] = []
    rejected: list[FieldError] = []
    for index, item in enumerate(value):
        element = f"{key}[{index}]"
        if not is_integer(item):
            rejected.append(FieldError(element, "Tag ID must be a number", INVALID_TYPE))
        elif item <= 0:
            rejected.append(FieldError(element, "Tag ID must be a positive number", INVALID_VALUE))
        else:
            valid.append(item)

    if not valid:
        errors.extend(rejected)
    return valid


def check_query_integer(
    data: Mapping[str, Any],
    key: str,
    label: str,
    errors: list[FieldError],
    *,
    maximum: int | None = None,
) -> int | None:
    if key not in data:
        return None

    value = coerce_integer(data[key])
    if value is None or value < 1:
        errors.append(FieldError(key, f"{label} must be a positive integer", INVALID_VALUE))
        return None
    if maximum is not None and value > maximum:
        errors.append(FieldError(key, f"{label} cannot exceed {maximum}", MAX_VALUE))
        return None
    return value


def check_integer_list_string(
    data: Mapping[str, Any],
    key: str,
    label: str,
    errors: list[FieldError],
) -> list[int] | None:
    if key not in data:
        return None

    value = data[key]
    if not isinstance(value, str):
        errors.append(FieldError(key, f"{label} must be a comma-separated string", INVALID_TYPE))
        return None

    parsed = parse_integer_list(value)
    if not parsed:
        if value.strip():
            errors.append(FieldError(key, f"{label} must be valid integers", INVALID_VALUE))
        return None
    return parsed


def check_choice(
    data: Mapping[str, Any],
    key: str,
    label: str,
    choices: Collection[str],
    errors: list[FieldError],
) -> str | None:
    if key not in data:
        return None

    value = data[key]
    if not isinstance(value, str):
        errors.append(FieldError(key, f"{label} must be a string", INVALID_TYPE))
        return None
    if value not in choices:
        errors.append(FieldError(key, f"{label} must be one of: {', '.join(choices)}", INVALID_VALUE))
        return None
    return value


class BaseValidator(ABC, Generic[T]):
    """Validate an untyped payload into the DTO type ``model``."""

    model: ClassVar[type[BaseModel]]
    root_message: ClassVar[str] = "Request body must be an object"

    def validate(self, data: Any) -> ValidationResult[T]:
        errors: list[FieldError] = []
        if not isinstance(data, Mapping):
            errors.append(FieldError(ROOT_FIELD, self.root_message, INVALID_TYPE))
            return ValidationFailure(errors=errors)

        values = self.validate_fields(data, errors)
        if errors:
            return ValidationFailure(errors=errors)
        return ValidationSuccess(data=self.model(**values))

    @abstractmethod
    def validate_fields(self, data: Mapping[str, Any], errors: list[FieldError]) -> dict[str, Any]:
        """Check every field, append failures to ``errors`` and return sanitized values."""
