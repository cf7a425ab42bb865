"""
Coordination Module - Black Box Interface

Purpose: Create/rename/delete protocol for unique names over a NameRegistry
Interface: DuplicateValidator.validate_create/update/delete(), claim event recorders
Hidden: Lock ordering, compensation, stuck-claim reporting

One DuplicateValidator per entity type; validators never talk to the
registry directly.
"""

from .duplicate import DuplicateValidator
from .events import (
    REASON_DEREGISTER_FAILED,
    REASON_UNLOCK_FAILED,
    STUCK_CLAIM_EVENT,
    ClaimEventRecorder,
    LoggingClaimEvents,
    RedisClaimEvents,
)

__all__ = [
    "DuplicateValidator",
    "ClaimEventRecorder",
    "LoggingClaimEvents",
    "RedisClaimEvents",
    "REASON_DEREGISTER_FAILED",
    "REASON_UNLOCK_FAILED",
    "STUCK_CLAIM_EVENT",
]
