"""Service instance and service binding admission."""

from cfadmission.modules.coordination import DuplicateValidator
from cfadmission.modules.errors import immutable_field_error, structural_error
from cfadmission.modules.keys import ServiceBindingKeys, ServiceInstanceKeys
from cfadmission.modules.resources import (
    SERVICE_BINDING,
    SERVICE_INSTANCE,
    CFServiceBinding,
    CFServiceInstance,
)

from .base import NameClaimingValidator, require_display_name


class ServiceInstanceValidator(NameClaimingValidator):
    kind = SERVICE_INSTANCE

    def __init__(self, duplicate_validator: DuplicateValidator):
        super().__init__(ServiceInstanceKeys(), duplicate_validator)

    def check_structure(self, instance: CFServiceInstance) -> None:
        require_display_name(instance.spec.display_name, "Service instance")


class ServiceBindingValidator(NameClaimingValidator):
    """
    One binding per app and service instance pair.

    The binding's display name is free text and never claimed.
    """

    kind = SERVICE_BINDING
    skip_updates_while_deleting = True

    def __init__(self, duplicate_validator: DuplicateValidator):
        super().__init__(ServiceBindingKeys(), duplicate_validator)

    def check_structure(self, binding: CFServiceBinding) -> None:
        if not binding.spec.app_ref.name:
            raise structural_error("Service binding must reference an app")
        if not binding.spec.service.name:
            raise structural_error("Service binding must reference a service instance")

    def check_immutable_fields(self, old_binding: CFServiceBinding, binding: CFServiceBinding) -> None:
        if old_binding.spec.app_ref.name != binding.spec.app_ref.name:
            raise immutable_field_error("AppRef.Name")
        if old_binding.spec.service.name != binding.spec.service.name:
            raise immutable_field_error("Service.Name")
        if old_binding.spec.service.namespace != binding.spec.service.namespace:
            raise immutable_field_error("Service.Namespace")
