"""
Validation error vocabulary shared by every admission validator.

A ValidationError is raised by validators and travels to the API server as
the denial reason of an AdmissionResponse. The reason is a JSON document so
that calling layers (the CF API shim, the CLI) can recover the error type
and decide how to present it.
"""

import json
from enum import Enum
from typing import Any, Optional, Union

UNKNOWN_ERROR_MESSAGE = "An unknown error has occurred"
IMMUTABLE_FIELD_ERROR_MESSAGE_TEMPLATE = "'%s' field is immutable"


class ErrorType(str, Enum):
    """Closed set of error types understood by calling layers."""

    DUPLICATE_NAME = "DuplicateNameError"
    IMMUTABLE_FIELD = "ImmutableFieldError"
    REFERENTIAL_MISSING = "ReferentialMissingError"
    PLACEMENT = "PlacementError"
    STRUCTURAL = "StructuralError"
    UNKNOWN = "UnknownError"
    INVALID_SECURITY_GROUP_RULE = "InvalidSecurityGroupRuleError"
    CANCELATION_NOT_POSSIBLE = "CancelationNotPossibleError"


class ValidationError(Exception):
    """
    Admission denial carrying a type tag and a user-facing message.

    The type is kept as a plain string so that reasons produced by newer
    webhooks still decode; known values compare equal to ErrorType members.
    """

    def __init__(self, error_type: Union[ErrorType, str], message: str):
        self.type = error_type.value if isinstance(error_type, ErrorType) else str(error_type)
        self.message = message
        super().__init__(self.marshal())

    def marshal(self) -> str:
        """Serialize to the wire format placed in the denial reason."""
        return json.dumps({"type": self.type, "message": self.message})

    def to_dict(self) -> dict:
        return {"type": self.type, "message": self.message}

    def is_type(self, error_type: Union[ErrorType, str]) -> bool:
        expected = error_type.value if isinstance(error_type, ErrorType) else error_type
        return self.type == expected

    @classmethod
    def unmarshal(cls, reason: Optional[str]) -> "ValidationError":
        """
        Decode a denial reason.

        Never raises: anything that is not a JSON object with string
        ``type`` and ``message`` fields decodes to an UnknownError, so callers
        can always branch on the result.
        """
        try:
            payload: Any = json.loads(reason or "")
        except (TypeError, ValueError):
            return unknown_error()

        if not isinstance(payload, dict):
            return unknown_error()

        error_type = payload.get("type")
        message = payload.get("message")
        if not isinstance(error_type, str) or not error_type or not isinstance(message, str):
            return unknown_error()

        return cls(error_type, message)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationError):
            return NotImplemented
        return self.type == other.type and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.type, self.message))

    def __repr__(self) -> str:
        return f"ValidationError(type={self.type!r}, message={self.message!r})"


def unknown_error(message: str = UNKNOWN_ERROR_MESSAGE) -> ValidationError:
    return ValidationError(ErrorType.UNKNOWN, message)


def duplicate_name_error(message: str) -> ValidationError:
    return ValidationError(ErrorType.DUPLICATE_NAME, message)


def immutable_field_error(field_path: str) -> ValidationError:
    return ValidationError(
        ErrorType.IMMUTABLE_FIELD, IMMUTABLE_FIELD_ERROR_MESSAGE_TEMPLATE % field_path
    )


def structural_error(message: str) -> ValidationError:
    return ValidationError(ErrorType.STRUCTURAL, message)


def referential_missing_error(message: str) -> ValidationError:
    return ValidationError(ErrorType.REFERENTIAL_MISSING, message)


def placement_error(message: str) -> ValidationError:
    return ValidationError(ErrorType.PLACEMENT, message)


def admission_unknown_error_reason() -> str:
    """Denial reason used when nothing more specific can be said."""
    return unknown_error().marshal()


def webhook_error_to_validation_error(err: Union[BaseException, str, None]) -> ValidationError:
    """
    Recover the ValidationError behind a webhook denial.

    Accepts either the error raised by a Kubernetes client (its string form
    usually wraps the reason, e.g. ``admission webhook "x" denied the request:
    {...}``) or the bare reason string.
    """
    if isinstance(err, ValidationError):
        return err

    text = "" if err is None else str(err)
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return unknown_error()

    return ValidationError.unmarshal(text[start : end + 1])


def has_error_code(err: Union[BaseException, str, None], error_type: Union[ErrorType, str]) -> bool:
    """Check whether a webhook denial carries the given error type."""
    return webhook_error_to_validation_error(err).is_type(error_type)


def invalid_security_group_rule_error(message: str) -> ValidationError:
    return ValidationError(ErrorType.INVALID_SECURITY_GROUP_RULE, message)


def cancelation_not_possible_error(message: str) -> ValidationError:
    return ValidationError(ErrorType.CANCELATION_NOT_POSSIBLE, message)
