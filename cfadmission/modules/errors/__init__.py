"""
Errors Module - Black Box Interface

Purpose: Closed vocabulary of admission denials and their wire encoding
Interface: ValidationError, ErrorType, has_error_code(), webhook_error_to_validation_error()
Hidden: JSON layout of the denial reason

Every validator raises these; the admission layer only marshals them.
"""

from .errors import (
    IMMUTABLE_FIELD_ERROR_MESSAGE_TEMPLATE,
    UNKNOWN_ERROR_MESSAGE,
    ErrorType,
    ValidationError,
    admission_unknown_error_reason,
    cancelation_not_possible_error,
    duplicate_name_error,
    has_error_code,
    immutable_field_error,
    invalid_security_group_rule_error,
    placement_error,
    referential_missing_error,
    structural_error,
    unknown_error,
    webhook_error_to_validation_error,
)

__all__ = [
    "ErrorType",
    "ValidationError",
    "UNKNOWN_ERROR_MESSAGE",
    "IMMUTABLE_FIELD_ERROR_MESSAGE_TEMPLATE",
    "admission_unknown_error_reason",
    "cancelation_not_possible_error",
    "duplicate_name_error",
    "has_error_code",
    "immutable_field_error",
    "invalid_security_group_rule_error",
    "placement_error",
    "referential_missing_error",
    "structural_error",
    "unknown_error",
    "webhook_error_to_validation_error",
]
