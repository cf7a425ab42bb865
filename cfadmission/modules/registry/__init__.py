"""
Registry Module - Black Box Interface

Purpose: Atomic per-name claims (register, deregister, lock, unlock)
Interface: NameRegistry protocol, RedisNameRegistry, InMemoryNameRegistry
Hidden: Key layout, Lua scripts, hashing of names

Any store offering the four atomic operations and distinguishable
already-exists / not-found outcomes can replace these implementations.
"""

from .interfaces import (
    CLAIM_STATE_CLAIMED,
    CLAIM_STATE_LOCKED,
    Claim,
    NameAlreadyExistsError,
    NameLockedError,
    NameNotFoundError,
    NameRegistry,
    RegistryError,
    dry_run_context,
    hashed_name,
    is_dry_run,
)
from .memory import InMemoryNameRegistry
from .redis_registry import RedisNameRegistry

__all__ = [
    "CLAIM_STATE_CLAIMED",
    "CLAIM_STATE_LOCKED",
    "Claim",
    "InMemoryNameRegistry",
    "NameAlreadyExistsError",
    "NameLockedError",
    "NameNotFoundError",
    "NameRegistry",
    "RedisNameRegistry",
    "RegistryError",
    "dry_run_context",
    "hashed_name",
    "is_dry_run",
]
