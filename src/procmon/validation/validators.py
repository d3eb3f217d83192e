"""
Simplified validation functions.

This module provides the validation functions used for configuration files
and command-line arguments.
"""

import re
from typing import Any, List, Optional, Union

from .exceptions import ValidationError

# Linux truncates the executable name (comm) to 15 characters, but psutil
# reports the full name where it can, so only reject obviously bad input.
_PROCESS_NAME_RE = re.compile(r'^[^/\s,]+$')


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate that a value is a positive integer.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated integer value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    if int_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and int_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    return int_value


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a positive float.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated float value

    Raises:
        ValidationError: If validation fails
    """
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    if float_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and float_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    return float_value


def validate_name_list(
    names: Union[str, List[str]],
    field_name: str = "names",
    allow_empty: bool = False
) -> List[str]:
    """
    Normalize a comma-separated string or a list into a list of names.

    Surrounding whitespace is stripped, empty entries are dropped and
    duplicates are removed while keeping the first occurrence.

    Raises:
        ValidationError: If the input has the wrong type or is empty when
            `allow_empty` is False.
    """
    if isinstance(names, str):
        items = names.split(",")
    elif isinstance(names, list):
        items = names
    else:
        raise ValidationError(
            f"{field_name} must be a comma-separated string or a list of strings",
            field_name=field_name,
            value=names
        )

    result: List[str] = []
    for item in items:
        if not isinstance(item, str):
            raise ValidationError(
                f"{field_name} entries must be strings, got {item!r}",
                field_name=field_name,
                value=names
            )
        item = item.strip()
        if item and item not in result:
            result.append(item)

    if not result and not allow_empty:
        raise ValidationError(
            f"{field_name} cannot be empty",
            field_name=field_name,
            value=names
        )
    return result


def validate_process_names(
    names: Union[str, List[str]],
    field_name: str = "processes"
) -> List[str]:
    """
    Validate the executable names to monitor.

    Returns:
        Unique, stripped process names in the order given.

    Raises:
        ValidationError: If the list is empty or a name contains a path
            separator or whitespace.
    """
    validated = validate_name_list(names, field_name=field_name)
    for name in validated:
        if not _PROCESS_NAME_RE.match(name):
            raise ValidationError(
                f"{field_name} entry must be a bare executable name: {name!r}",
                field_name=field_name,
                value=name
            )
    return validated


def validate_enum_choice(
    value: Any,
    choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Args:
        value: Value to validate
        choices: List of allowed choices
        field_name: Name of the field being validated
        case_sensitive: Whether the comparison should be case-sensitive

    Returns:
        The matching choice, in the case used by `choices`

    Raises:
        ValidationError: If value is not in choices
    """
    str_value = str(value)

    if case_sensitive:
        if str_value not in choices:
            raise ValidationError(
                f"{field_name} must be one of {choices}, got {value}",
                field_name=field_name,
                value=value
            )
        return str_value

    lower_choices = [choice.lower() for choice in choices]
    lower_value = str_value.lower()
    if lower_value not in lower_choices:
        raise ValidationError(
            f"{field_name} must be one of {choices}, got {value}",
            field_name=field_name,
            value=value
        )
    return choices[lower_choices.index(lower_value)]
