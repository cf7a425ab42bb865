"""
Authentication for the operator endpoints.

Admission requests come from the API server over mutual TLS and are not
authenticated here. Registry inspection and force release are destructive
enough to need an API key.
"""

import json
import logging
import os
import secrets
from datetime import UTC, datetime
from typing import Dict, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


class AuthModule:
    """
    Verifies operator API keys.

    Keys come from API_KEYS in "key" or "service:key" form; the service part
    becomes the caller identity recorded in the audit trail.
    """

    AUDIT_KEY = "auth:audit"
    MAX_AUDIT_EVENTS = 10000

    def __init__(self, api_keys: Optional[Iterable[str]] = None, redis_client=None):
        """
        Initialize auth module.

        Args:
            api_keys: Key entries; read from API_KEYS when None
            redis_client: Optional async Redis client for the audit trail
        """
        self.redis = redis_client
        self.api_keys: Dict[str, Optional[str]] = self._load_api_keys(api_keys)

    @staticmethod
    def _load_api_keys(entries: Optional[Iterable[str]]) -> Dict[str, Optional[str]]:
        if entries is None:
            entries = os.environ.get("API_KEYS", "").split(",")

        keys = {}
        for entry in entries:
            entry = entry.strip()
            if not entry:
                continue

            if ":" in entry:
                service, key = entry.split(":", 1)
                keys[key.strip()] = service.strip()
            else:
                keys[entry] = None

        return keys

    async def verify_api_key(self, api_key: Optional[str]) -> Tuple[bool, Optional[str]]:
        """
        Verify an operator API key.

        Returns:
            Tuple of (is_valid, service_identity)
        """
        if not api_key:
            return False, None

        for known_key, service_identity in self.api_keys.items():
            if secrets.compare_digest(api_key.encode("utf-8"), known_key.encode("utf-8")):
                await self._log_event("api_key_verified", {"service_identity": service_identity})
                return True, service_identity

        await self._log_event("api_key_rejected", {})
        return False, None

    async def _log_event(self, event_type: str, data: dict) -> None:
        if not self.redis:
            return

        event = {
            "type": event_type,
            "data": data,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        try:
            await self.redis.lpush(self.AUDIT_KEY, json.dumps(event))
            await self.redis.ltrim(self.AUDIT_KEY, 0, self.MAX_AUDIT_EVENTS - 1)
        except Exception as e:
            logger.warning(f"Failed to write auth audit event {event_type}: {e}")
