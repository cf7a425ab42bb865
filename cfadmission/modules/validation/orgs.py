"""Org and space admission."""

import logging

from cfadmission.modules.coordination import DuplicateValidator
from cfadmission.modules.errors import placement_error, unknown_error
from cfadmission.modules.keys import OrgKeys, SpaceKeys
from cfadmission.modules.resources import (
    ORG,
    SPACE,
    CFOrg,
    CFSpace,
    ResourceLookupError,
    ResourceNotFoundError,
    ResourceReader,
)

from .base import NameClaimingValidator, require_display_name, require_label_safe_name

logger = logging.getLogger(__name__)


class OrgValidator(NameClaimingValidator):
    """Orgs live in the root namespace and are unique across the cluster."""

    kind = ORG

    def __init__(self, duplicate_validator: DuplicateValidator, root_namespace: str):
        super().__init__(OrgKeys(root_namespace), duplicate_validator)
        self.root_namespace = root_namespace

    def check_structure(self, org: CFOrg) -> None:
        require_display_name(org.spec.display_name, "Org")
        require_label_safe_name(org.name, "org")

    async def check_references(self, org: CFOrg) -> None:
        if org.namespace != self.root_namespace:
            raise placement_error(
                f"Organization '{org.spec.display_name}' must be placed in the root "
                f"'{self.root_namespace}' namespace"
            )


class SpaceValidator(NameClaimingValidator):
    """Spaces live in the namespace of an existing org."""

    kind = SPACE

    def __init__(self, duplicate_validator: DuplicateValidator, reader: ResourceReader, root_namespace: str):
        super().__init__(SpaceKeys(), duplicate_validator)
        self.reader = reader
        self.root_namespace = root_namespace

    def check_structure(self, space: CFSpace) -> None:
        require_display_name(space.spec.display_name, "Space")
        require_label_safe_name(space.name, "space")

    async def check_references(self, space: CFSpace) -> None:
        try:
            await self.reader.get(ORG, self.root_namespace, space.namespace)
        except ResourceNotFoundError:
            raise placement_error(
                f"Space '{space.spec.display_name}' must be placed in an organization "
                f"namespace, '{space.namespace}' is not one"
            )
        except ResourceLookupError as e:
            logger.error(f"Failed to look up org {space.namespace} for space {space.name}: {e}")
            raise unknown_error() from e
