"""Name registry interfaces following Black Box Design principles."""
import contextvars
import hashlib
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol

CLAIM_STATE_CLAIMED = "claimed"
CLAIM_STATE_LOCKED = "locked"

_dry_run: contextvars.ContextVar[bool] = contextvars.ContextVar("registry_dry_run", default=False)


class RegistryError(Exception):
    """Base class for name registry failures."""

    def __init__(self, message: str, namespace: str = "", name: str = ""):
        super().__init__(message)
        self.namespace = namespace
        self.name = name


class NameAlreadyExistsError(RegistryError):
    """The name is already claimed (or locked) in the namespace."""


class NameNotFoundError(RegistryError):
    """No claim exists for the name in the namespace."""


class NameLockedError(RegistryError):
    """The claim is already locked by a concurrent rename."""


@dataclass
class Claim:
    """A registry entry as seen by operators."""

    entity_type: str
    namespace: str
    name: str
    state: str
    owner_namespace: str = ""
    owner_name: str = ""

    @property
    def locked(self) -> bool:
        return self.state == CLAIM_STATE_LOCKED


class NameRegistry(Protocol):
    """
    Protocol for claim stores.

    Every operation is atomic for a single (namespace, name); nothing spans
    two names. Implementations must raise NameAlreadyExistsError and
    NameNotFoundError so callers can classify failures.
    """

    entity_type: str

    async def register_name(
        self, namespace: str, name: str, owner_namespace: str = "", owner_name: str = ""
    ) -> None:
        """Claim a free name. Raises NameAlreadyExistsError if taken."""
        ...

    async def deregister_name(self, namespace: str, name: str) -> None:
        """Release a claim. Raises NameNotFoundError if absent."""
        ...

    async def try_lock_name(self, namespace: str, name: str) -> None:
        """Mark a claimed name locked. Raises NameLockedError or NameNotFoundError."""
        ...

    async def unlock_name(self, namespace: str, name: str) -> None:
        """Revert a locked name to claimed. Raises NameNotFoundError if absent."""
        ...

    async def get_claim(self, namespace: str, name: str) -> Optional[Claim]:
        """Operator helper: inspect a claim without changing it."""
        ...

    async def force_release(self, namespace: str, name: str) -> bool:
        """Operator helper: drop a claim regardless of state."""
        ...


def hashed_name(name: str) -> str:
    """Storage-safe form of an arbitrary key."""
    return "n-" + hashlib.sha1(name.encode("utf-8")).hexdigest()


def is_dry_run() -> bool:
    """True while handling an admission request marked dryRun."""
    return _dry_run.get()


@contextmanager
def dry_run_context(enabled: bool) -> Iterator[None]:
    """Scope the dry-run flag to the current request."""
    token = _dry_run.set(bool(enabled))
    try:
        yield
    finally:
        _dry_run.reset(token)
