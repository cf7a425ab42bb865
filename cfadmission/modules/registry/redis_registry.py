"""
Redis-backed name registry.

Each claim is a Redis hash keyed by entity type, namespace and the hashed
name. State transitions that need a read-then-write (register, lock,
unlock) run as Lua scripts so Redis executes them atomically; this is the
only coordination admission handlers have between each other.
"""

import logging
from typing import Optional

from redis.exceptions import RedisError

from .interfaces import (
    CLAIM_STATE_CLAIMED,
    CLAIM_STATE_LOCKED,
    Claim,
    NameAlreadyExistsError,
    NameLockedError,
    NameNotFoundError,
    RegistryError,
    hashed_name,
    is_dry_run,
)

logger = logging.getLogger(__name__)

REGISTER_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return 0
end
redis.call('HSET', KEYS[1],
    'state', ARGV[1],
    'entity_type', ARGV[2],
    'namespace', ARGV[3],
    'name', ARGV[4],
    'owner_namespace', ARGV[5],
    'owner_name', ARGV[6])
return 1
"""

TRY_LOCK_SCRIPT = """
local state = redis.call('HGET', KEYS[1], 'state')
if not state then
    return -1
end
if state == ARGV[1] then
    return 0
end
redis.call('HSET', KEYS[1], 'state', ARGV[1])
return 1
"""

UNLOCK_SCRIPT = """
local state = redis.call('HGET', KEYS[1], 'state')
if not state then
    return -1
end
redis.call('HSET', KEYS[1], 'state', ARGV[1])
return 1
"""


class RedisNameRegistry:
    def __init__(self, redis_client, entity_type: str, key_prefix: str = "registry"):
        """
        Initialize the registry for one entity type.

        Args:
            redis_client: Async Redis client (decode_responses=True)
            entity_type: Partition of the registry, e.g. "app" or "route"
            key_prefix: Prefix for all claim keys
        """
        self.redis = redis_client
        self.entity_type = entity_type
        self.key_prefix = key_prefix

    def _key(self, namespace: str, name: str) -> str:
        return f"{self.key_prefix}:{self.entity_type}:{namespace}:{hashed_name(name)}"

    async def register_name(
        self, namespace: str, name: str, owner_namespace: str = "", owner_name: str = ""
    ) -> None:
        if is_dry_run():
            return

        key = self._key(namespace, name)
        try:
            created = await self.redis.eval(
                REGISTER_SCRIPT,
                1,
                key,
                CLAIM_STATE_CLAIMED,
                self.entity_type,
                namespace,
                name,
                owner_namespace,
                owner_name,
            )
        except RedisError as e:
            raise RegistryError(f"registering name failed: {e}", namespace, name) from e

        if int(created) == 0:
            raise NameAlreadyExistsError(
                f"registering name failed: {self.entity_type} name {name!r} already exists "
                f"in namespace {namespace!r}",
                namespace,
                name,
            )

        logger.debug(f"Registered {self.entity_type} name {name!r} in {namespace}")

    async def deregister_name(self, namespace: str, name: str) -> None:
        if is_dry_run():
            return

        try:
            deleted = await self.redis.delete(self._key(namespace, name))
        except RedisError as e:
            raise RegistryError(f"deregistering name failed: {e}", namespace, name) from e

        if int(deleted) == 0:
            raise NameNotFoundError(
                f"deregistering name failed: {self.entity_type} name {name!r} not found "
                f"in namespace {namespace!r}",
                namespace,
                name,
            )

        logger.debug(f"Deregistered {self.entity_type} name {name!r} in {namespace}")

    async def try_lock_name(self, namespace: str, name: str) -> None:
        if is_dry_run():
            return

        try:
            result = await self.redis.eval(
                TRY_LOCK_SCRIPT, 1, self._key(namespace, name), CLAIM_STATE_LOCKED
            )
        except RedisError as e:
            raise RegistryError(f"failed to acquire lock: {e}", namespace, name) from e

        result = int(result)
        if result == -1:
            raise NameNotFoundError(
                f"failed to acquire lock: {self.entity_type} name {name!r} not found "
                f"in namespace {namespace!r}",
                namespace,
                name,
            )
        if result == 0:
            raise NameLockedError(
                f"failed to acquire lock: {self.entity_type} name {name!r} is already locked "
                f"in namespace {namespace!r}",
                namespace,
                name,
            )

    async def unlock_name(self, namespace: str, name: str) -> None:
        if is_dry_run():
            return

        try:
            result = await self.redis.eval(
                UNLOCK_SCRIPT, 1, self._key(namespace, name), CLAIM_STATE_CLAIMED
            )
        except RedisError as e:
            raise RegistryError(f"failed to release lock: {e}", namespace, name) from e

        if int(result) == -1:
            raise NameNotFoundError(
                f"failed to release lock: {self.entity_type} name {name!r} not found "
                f"in namespace {namespace!r}",
                namespace,
                name,
            )

    async def get_claim(self, namespace: str, name: str) -> Optional[Claim]:
        try:
            data = await self.redis.hgetall(self._key(namespace, name))
        except RedisError as e:
            raise RegistryError(f"reading claim failed: {e}", namespace, name) from e

        if not data:
            return None

        return Claim(
            entity_type=data.get("entity_type", self.entity_type),
            namespace=data.get("namespace", namespace),
            name=data.get("name", name),
            state=data.get("state", CLAIM_STATE_CLAIMED),
            owner_namespace=data.get("owner_namespace", ""),
            owner_name=data.get("owner_name", ""),
        )

    async def force_release(self, namespace: str, name: str) -> bool:
        try:
            deleted = await self.redis.delete(self._key(namespace, name))
        except RedisError as e:
            raise RegistryError(f"releasing claim failed: {e}", namespace, name) from e

        if deleted:
            logger.warning(
                f"Operator released {self.entity_type} claim {name!r} in namespace {namespace}"
            )
        return bool(deleted)
