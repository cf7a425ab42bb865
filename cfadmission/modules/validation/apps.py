"""App admission: unique display name per space, fixed lifecycle type."""

from cfadmission.modules.coordination import DuplicateValidator
from cfadmission.modules.errors import ErrorType, ValidationError
from cfadmission.modules.keys import AppKeys
from cfadmission.modules.resources import APP, CFApp

from .base import NameClaimingValidator, require_display_name


class AppValidator(NameClaimingValidator):
    kind = APP

    def __init__(self, duplicate_validator: DuplicateValidator):
        super().__init__(AppKeys(), duplicate_validator)

    def check_structure(self, app: CFApp) -> None:
        require_display_name(app.spec.display_name, "App")

    def check_immutable_fields(self, old_app: CFApp, app: CFApp) -> None:
        old_type = old_app.spec.lifecycle.type
        new_type = app.spec.lifecycle.type
        if old_type != new_type:
            raise ValidationError(
                ErrorType.IMMUTABLE_FIELD,
                f"Lifecycle type cannot be changed from {old_type} to {new_type}",
            )
