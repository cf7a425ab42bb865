"""
Subnamespace anchor admission.

Anchors create the namespaces behind orgs and spaces, so their name label
is claimed like an org or space name. Anchors carrying neither label are
not ours and pass untouched.
"""

import logging
from typing import Optional

from cfadmission.modules.coordination import DuplicateValidator
from cfadmission.modules.errors import structural_error
from cfadmission.modules.keys import AnchorKeys, org_anchor_keys, space_anchor_keys
from cfadmission.modules.resources import SUBNAMESPACE_ANCHOR, SubnamespaceAnchor

from .base import ResourceValidator

logger = logging.getLogger(__name__)

CONFLICTING_LABELS_ERROR = "Anchor cannot carry both an org name and a space name label"


class AnchorValidator(ResourceValidator):
    kind = SUBNAMESPACE_ANCHOR

    def __init__(self, org_validator: DuplicateValidator, space_validator: DuplicateValidator):
        self.org_keys = org_anchor_keys()
        self.space_keys = space_anchor_keys()
        self.validators = {
            self.org_keys.entity_type: org_validator,
            self.space_keys.entity_type: space_validator,
        }

    def keys_for(self, anchor: SubnamespaceAnchor) -> Optional[AnchorKeys]:
        """
        Pick the org or space keys from the anchor's labels.

        Returns None when neither label is set.

        Raises:
            ValidationError: StructuralError when both labels are set
        """
        has_org = bool(self.org_keys.display_name(anchor))
        has_space = bool(self.space_keys.display_name(anchor))

        if has_org and has_space:
            logger.error(f"Anchor {anchor.namespace}/{anchor.name} has both org and space labels")
            raise structural_error(CONFLICTING_LABELS_ERROR)
        if has_org:
            return self.org_keys
        if has_space:
            return self.space_keys
        return None

    def existing_keys_for(self, anchor: SubnamespaceAnchor) -> Optional[AnchorKeys]:
        """Like keys_for, but an already stored anchor with bad labels is left alone."""
        has_org = bool(self.org_keys.display_name(anchor))
        has_space = bool(self.space_keys.display_name(anchor))
        if has_org == has_space:
            return None
        return self.org_keys if has_org else self.space_keys

    async def validate_create(self, anchor: SubnamespaceAnchor) -> None:
        keys = self.keys_for(anchor)
        if keys is None:
            return

        key = keys.key_of(anchor)
        await self.validators[keys.entity_type].validate_create(
            key.namespace,
            key.key,
            keys.duplicate_message(anchor),
            owner_namespace=anchor.namespace,
            owner_name=anchor.name,
        )

    async def validate_update(self, old_anchor: SubnamespaceAnchor, anchor: SubnamespaceAnchor) -> None:
        if self.keys_for(anchor) is None:
            return

        keys = self.existing_keys_for(old_anchor)
        if keys is None:
            return

        old_key = keys.key_of(old_anchor)
        new_key = keys.key_of(anchor)
        await self.validators[keys.entity_type].validate_update(
            old_key.namespace,
            old_key.key,
            new_key.key,
            keys.duplicate_message(anchor),
            owner_namespace=anchor.namespace,
            owner_name=anchor.name,
        )

    async def validate_delete(self, anchor: SubnamespaceAnchor) -> None:
        keys = self.existing_keys_for(anchor)
        if keys is None:
            return

        key = keys.key_of(anchor)
        await self.validators[keys.entity_type].validate_delete(key.namespace, key.key)
