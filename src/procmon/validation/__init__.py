"""
Validation and error handling for the procmon package.

This module provides input validation and error handling with consistent
error reporting across the application.
"""

from .exceptions import (
    ErrorSeverity,
    ValidationError,
    handle_error,
    handle_config_error,
    handle_collection_error,
    handle_cli_error,
)

from .validators import (
    validate_enum_choice,
    validate_name_list,
    validate_positive_float,
    validate_positive_integer,
    validate_process_names,
)

__all__ = [
    # Core functionality
    "ErrorSeverity",
    "ValidationError",
    "handle_error",
    "handle_config_error",
    "handle_collection_error",
    "handle_cli_error",
    # Validators
    "validate_enum_choice",
    "validate_name_list",
    "validate_positive_float",
    "validate_positive_integer",
    "validate_process_names",
]
