"""In-process name registry for single-replica deployments and local runs."""

import asyncio
import logging
from typing import Dict, Optional, Tuple

from .interfaces import (
    CLAIM_STATE_CLAIMED,
    CLAIM_STATE_LOCKED,
    Claim,
    NameAlreadyExistsError,
    NameLockedError,
    NameNotFoundError,
    is_dry_run,
)

logger = logging.getLogger(__name__)


class InMemoryNameRegistry:
    """
    Claim store held in a dict.

    Claims live only as long as the process, so this is only correct when a
    single webhook replica serves all admission calls.
    """

    def __init__(self, entity_type: str):
        self.entity_type = entity_type
        self._claims: Dict[Tuple[str, str], Claim] = {}
        self._lock = asyncio.Lock()

    async def register_name(
        self, namespace: str, name: str, owner_namespace: str = "", owner_name: str = ""
    ) -> None:
        if is_dry_run():
            return

        async with self._lock:
            if (namespace, name) in self._claims:
                raise NameAlreadyExistsError(
                    f"registering name failed: {self.entity_type} name {name!r} already exists "
                    f"in namespace {namespace!r}",
                    namespace,
                    name,
                )
            self._claims[(namespace, name)] = Claim(
                entity_type=self.entity_type,
                namespace=namespace,
                name=name,
                state=CLAIM_STATE_CLAIMED,
                owner_namespace=owner_namespace,
                owner_name=owner_name,
            )

    async def deregister_name(self, namespace: str, name: str) -> None:
        if is_dry_run():
            return

        async with self._lock:
            if self._claims.pop((namespace, name), None) is None:
                raise NameNotFoundError(
                    f"deregistering name failed: {self.entity_type} name {name!r} not found "
                    f"in namespace {namespace!r}",
                    namespace,
                    name,
                )

    async def try_lock_name(self, namespace: str, name: str) -> None:
        if is_dry_run():
            return

        async with self._lock:
            claim = self._claims.get((namespace, name))
            if claim is None:
                raise NameNotFoundError(
                    f"failed to acquire lock: {self.entity_type} name {name!r} not found "
                    f"in namespace {namespace!r}",
                    namespace,
                    name,
                )
            if claim.locked:
                raise NameLockedError(
                    f"failed to acquire lock: {self.entity_type} name {name!r} is already locked "
                    f"in namespace {namespace!r}",
                    namespace,
                    name,
                )
            claim.state = CLAIM_STATE_LOCKED

    async def unlock_name(self, namespace: str, name: str) -> None:
        if is_dry_run():
            return

        async with self._lock:
            claim = self._claims.get((namespace, name))
            if claim is None:
                raise NameNotFoundError(
                    f"failed to release lock: {self.entity_type} name {name!r} not found "
                    f"in namespace {namespace!r}",
                    namespace,
                    name,
                )
            claim.state = CLAIM_STATE_CLAIMED

    async def get_claim(self, namespace: str, name: str) -> Optional[Claim]:
        async with self._lock:
            claim = self._claims.get((namespace, name))
            if claim is None:
                return None
            return Claim(**vars(claim))

    async def force_release(self, namespace: str, name: str) -> bool:
        async with self._lock:
            released = self._claims.pop((namespace, name), None) is not None

        if released:
            logger.warning(
                f"Operator released {self.entity_type} claim {name!r} in namespace {namespace}"
            )
        return released
