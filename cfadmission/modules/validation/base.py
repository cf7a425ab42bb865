"""
Shared shape of the admission validators.

Create runs structural checks, then referential and placement checks, and
claims the name last, so an object that is going to be rejected never
leaves a claim behind.
"""

from typing import Optional

from cfadmission.modules.coordination import DuplicateValidator
from cfadmission.modules.errors import structural_error
from cfadmission.modules.keys import KeyAdapter
from cfadmission.modules.resources import Resource, ResourceKind


MAX_LABEL_VALUE_LENGTH = 63


class ResourceValidator:
    """
    Admission contract for one resource kind.

    Each method returns None to admit the change or raises
    cfadmission.modules.errors.ValidationError to deny it.
    """

    kind: ResourceKind

    async def validate_create(self, obj: Resource) -> None:
        return None

    async def validate_update(self, old_obj: Resource, obj: Resource) -> None:
        return None

    async def validate_delete(self, obj: Resource) -> None:
        return None


class NameClaimingValidator(ResourceValidator):
    """Validator for kinds whose key is claimed through a DuplicateValidator."""

    # Finalizer updates on an object being deleted must not be blocked
    skip_updates_while_deleting = False

    def __init__(self, keys: KeyAdapter, duplicate_validator: DuplicateValidator):
        self.keys = keys
        self.duplicate_validator = duplicate_validator

    async def validate_create(self, obj: Resource) -> None:
        self.check_structure(obj)
        await self.check_references(obj)

        key = self.keys.key_of(obj)
        await self.duplicate_validator.validate_create(
            key.namespace,
            key.key,
            self.duplicate_message(obj),
            owner_namespace=obj.namespace,
            owner_name=obj.name,
        )

    async def validate_update(self, old_obj: Resource, obj: Resource) -> None:
        if self.skip_updates_while_deleting and obj.being_deleted:
            return

        self.check_immutable_fields(old_obj, obj)
        self.check_structure(obj)
        await self.check_update_references(old_obj, obj)

        old_key = self.keys.key_of(old_obj)
        new_key = self.keys.key_of(obj)
        await self.duplicate_validator.validate_update(
            old_key.namespace,
            old_key.key,
            new_key.key,
            self.duplicate_message(obj),
            owner_namespace=obj.namespace,
            owner_name=obj.name,
        )

    async def validate_delete(self, obj: Resource) -> None:
        key = self.keys.key_of(obj)
        await self.duplicate_validator.validate_delete(key.namespace, key.key)

    def check_structure(self, obj: Resource) -> None:
        """Raise StructuralError for malformed fields."""

    async def check_references(self, obj: Resource) -> None:
        """Raise for missing referenced objects or bad placement on create."""

    async def check_update_references(self, old_obj: Resource, obj: Resource) -> None:
        """Reference checks that also apply on update."""

    def check_immutable_fields(self, old_obj: Resource, obj: Resource) -> None:
        """Raise ImmutableFieldError for forbidden changes."""

    def duplicate_message(self, obj: Resource) -> Optional[str]:
        return self.keys.duplicate_message(obj)


def require_display_name(display_name: str, kind_label: str) -> None:
    if not display_name or not display_name.strip():
        raise structural_error(f"{kind_label} name cannot be empty")


def require_label_safe_name(name: str, kind_label: str) -> None:
    """Object names are copied into label values, which are limited to 63 characters."""
    if len(name) > MAX_LABEL_VALUE_LENGTH:
        raise structural_error(
            f"{kind_label} name cannot be longer than {MAX_LABEL_VALUE_LENGTH} chars"
        )
