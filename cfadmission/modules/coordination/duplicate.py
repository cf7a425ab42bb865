"""
Name claim protocol shared by every kind that needs unique names.

The registry only offers per-name atomic operations, so a rename is built
from three of them: lock the old name, claim the new one, release the old
one. The lock turns two concurrent renames away from the same name into a
deterministic winner and loser. Compensating steps run once; if they fail
the claim stays behind and is reported, never retried.
"""

import logging
from typing import Optional

from cfadmission.modules.errors import ValidationError, duplicate_name_error, unknown_error
from cfadmission.modules.registry import (
    NameAlreadyExistsError,
    NameNotFoundError,
    NameRegistry,
    RegistryError,
)

from .events import (
    REASON_DEREGISTER_FAILED,
    REASON_UNLOCK_FAILED,
    ClaimEventRecorder,
    LoggingClaimEvents,
)

logger = logging.getLogger(__name__)


class DuplicateValidator:
    def __init__(self, registry: NameRegistry, events: Optional[ClaimEventRecorder] = None):
        """
        Initialize the protocol over one registry partition.

        Args:
            registry: Claim store for a single entity type
            events: Sink for stuck-claim reports
        """
        self.registry = registry
        self.events = events or LoggingClaimEvents()

    @property
    def entity_type(self) -> str:
        return self.registry.entity_type

    async def validate_create(
        self,
        namespace: str,
        new_name: str,
        duplicate_message: Optional[str] = None,
        owner_namespace: str = "",
        owner_name: str = "",
    ) -> None:
        """
        Claim new_name in namespace.

        Raises:
            ValidationError: DuplicateNameError if taken, UnknownError otherwise
        """
        try:
            await self.registry.register_name(namespace, new_name, owner_namespace, owner_name)
        except NameAlreadyExistsError:
            logger.info(
                f"{self.entity_type} name {new_name!r} already exists in namespace {namespace}"
            )
            raise self._duplicate(new_name, duplicate_message)
        except RegistryError as e:
            logger.error(f"Failed to register {self.entity_type} name {new_name!r}: {e}")
            raise unknown_error() from e

    async def validate_update(
        self,
        namespace: str,
        old_name: str,
        new_name: str,
        duplicate_message: Optional[str] = None,
        owner_namespace: str = "",
        owner_name: str = "",
    ) -> None:
        """
        Move the claim from old_name to new_name.

        Unchanged names never touch the registry.
        """
        if old_name == new_name:
            return

        try:
            await self.registry.try_lock_name(namespace, old_name)
        except RegistryError as e:
            logger.info(
                f"Failed to acquire lock on old {self.entity_type} name {old_name!r} "
                f"in namespace {namespace}: {e}"
            )
            raise unknown_error() from e

        try:
            await self.registry.register_name(namespace, new_name, owner_namespace, owner_name)
        except RegistryError as register_error:
            await self._release_lock(namespace, old_name)

            if isinstance(register_error, NameAlreadyExistsError):
                logger.info(
                    f"{self.entity_type} name {new_name!r} already exists in namespace {namespace}"
                )
                raise self._duplicate(new_name, duplicate_message)

            logger.error(
                f"Failed to register new {self.entity_type} name {new_name!r} "
                f"during update: {register_error}"
            )
            raise unknown_error() from register_error

        try:
            await self.registry.deregister_name(namespace, old_name)
        except RegistryError as e:
            # The old name stays claimed until an operator releases it
            logger.error(
                f"Failed to deregister old {self.entity_type} name {old_name!r} "
                f"in namespace {namespace} during update: {e}"
            )
            await self.events.record_stuck_claim(
                self.entity_type, namespace, old_name, REASON_DEREGISTER_FAILED, str(e)
            )

    async def validate_delete(self, namespace: str, old_name: str) -> None:
        """Release old_name; a missing claim counts as released."""
        try:
            await self.registry.deregister_name(namespace, old_name)
        except NameNotFoundError:
            logger.info(
                f"Cannot deregister {self.entity_type} name {old_name!r} in namespace "
                f"{namespace}: registry entry not found"
            )
        except RegistryError as e:
            logger.error(
                f"Failed to deregister {self.entity_type} name {old_name!r} during delete: {e}"
            )
            raise unknown_error() from e

    async def _release_lock(self, namespace: str, old_name: str) -> None:
        try:
            await self.registry.unlock_name(namespace, old_name)
        except RegistryError as e:
            # A locked entry remains; renames away from it fail until an operator intervenes
            logger.error(
                f"Failed to release registry lock on old {self.entity_type} name {old_name!r} "
                f"in namespace {namespace}: {e}"
            )
            await self.events.record_stuck_claim(
                self.entity_type, namespace, old_name, REASON_UNLOCK_FAILED, str(e)
            )

    def _duplicate(self, name: str, duplicate_message: Optional[str]) -> ValidationError:
        return duplicate_name_error(
            duplicate_message or f"The {self.entity_type} name '{name}' is already taken"
        )
