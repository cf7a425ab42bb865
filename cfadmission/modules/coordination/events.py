"""
Stuck-claim reporting.

A rename whose compensation fails leaves a claim behind (locked, or still
claimed under the old name). Nothing heals it automatically; these recorders
make the condition visible so an operator can clear it.
"""

import json
import logging
from datetime import UTC, datetime
from typing import Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)

STUCK_CLAIM_EVENT = "claim.stuck"
REASON_UNLOCK_FAILED = "unlock_failed"
REASON_DEREGISTER_FAILED = "deregister_failed"


class ClaimEventRecorder(Protocol):
    """Protocol for stuck-claim sinks."""

    async def record_stuck_claim(
        self, entity_type: str, namespace: str, name: str, reason: str, error: str
    ) -> None:
        ...

    async def recent_events(self, limit: int = 100) -> List[dict]:
        ...

    async def stuck_claim_count(self, entity_type: str) -> int:
        ...


def _stuck_claim_event(entity_type: str, namespace: str, name: str, reason: str, error: str) -> dict:
    return {
        "type": STUCK_CLAIM_EVENT,
        "timestamp": datetime.now(UTC).isoformat(),
        "data": {
            "entity_type": entity_type,
            "namespace": namespace,
            "name": name,
            "reason": reason,
            "error": error,
        },
    }


class LoggingClaimEvents:
    """Recorder that only logs and counts; used with the in-memory registry."""

    def __init__(self):
        self._stuck_counts: Dict[str, int] = {}

    async def record_stuck_claim(
        self, entity_type: str, namespace: str, name: str, reason: str, error: str
    ) -> None:
        self._stuck_counts[entity_type] = self._stuck_counts.get(entity_type, 0) + 1
        logger.error(
            f"Stuck {entity_type} claim {name!r} in namespace {namespace} "
            f"({reason}): operator intervention required"
        )

    async def recent_events(self, limit: int = 100) -> List[dict]:
        return []

    async def stuck_claim_count(self, entity_type: str) -> int:
        return self._stuck_counts.get(entity_type, 0)


class RedisClaimEvents:
    EVENTS_KEY = "registry:events"
    EVENTS_CHANNEL = "events:registry"
    MAX_EVENTS = 1000

    def __init__(self, redis_client, metric_ttl: Optional[int] = None):
        """
        Initialize the recorder.

        Args:
            redis_client: Async Redis client
            metric_ttl: Optional expiry for the stuck-claim counters; counters
                never expire when unset so alerts keep firing until cleared
        """
        self.redis = redis_client
        self.metric_ttl = metric_ttl

    async def record_stuck_claim(
        self, entity_type: str, namespace: str, name: str, reason: str, error: str
    ) -> None:
        event = _stuck_claim_event(entity_type, namespace, name, reason, error)
        logger.error(
            f"Stuck {entity_type} claim {name!r} in namespace {namespace} "
            f"({reason}): operator intervention required"
        )

        # Reporting must never change the admission outcome
        try:
            payload = json.dumps(event)
            await self.redis.publish(self.EVENTS_CHANNEL, payload)
            await self.redis.lpush(self.EVENTS_KEY, payload)
            await self.redis.ltrim(self.EVENTS_KEY, 0, self.MAX_EVENTS - 1)

            metric_key = f"metrics:stuck_claims:{entity_type}"
            await self.redis.incrby(metric_key, 1)
            if self.metric_ttl:
                await self.redis.expire(metric_key, self.metric_ttl)
        except Exception as e:
            logger.warning(f"Failed to record stuck {entity_type} claim {name!r}: {e}")

    async def recent_events(self, limit: int = 100) -> List[dict]:
        raw_events = await self.redis.lrange(self.EVENTS_KEY, 0, max(limit, 1) - 1)

        events = []
        for raw in raw_events:
            try:
                events.append(json.loads(raw))
            except (TypeError, ValueError):
                logger.warning("Skipping malformed registry event")
        return events

    async def stuck_claim_count(self, entity_type: str) -> int:
        value = await self.redis.get(f"metrics:stuck_claims:{entity_type}")
        return int(value) if value else 0
