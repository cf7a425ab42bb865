"""
Operator endpoints for the claim store.

A claim left locked or claimed after a failed compensation is never healed
automatically. These endpoints let an operator find such claims through the
stuck-claim event log, inspect them and force-release them.
"""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from cfadmission.modules.auth import AuthModule
from cfadmission.modules.coordination import ClaimEventRecorder
from cfadmission.modules.registry import NameRegistry, RegistryError

from .models import ClaimResponse, ForceReleaseResponse, RegistryEventsResponse

logger = logging.getLogger(__name__)


def create_operator_router(
    registries: Dict[str, NameRegistry],
    events: ClaimEventRecorder,
    auth: AuthModule,
) -> APIRouter:
    """
    Create the operator router.

    Args:
        registries: Claim stores keyed by entity type
        events: Stuck-claim event source
        auth: API key verifier

    Returns:
        FastAPI router with registry endpoints
    """
    router = APIRouter(prefix="/registry", tags=["registry"])

    async def verify_api_key(
        x_api_key: Optional[str] = Header(None, description="Operator API key")
    ) -> Optional[str]:
        is_valid, service_identity = await auth.verify_api_key(x_api_key)
        if not is_valid:
            raise HTTPException(401, "Invalid API key")
        return service_identity

    def get_registry(entity: str) -> NameRegistry:
        registry = registries.get(entity)
        if registry is None:
            raise HTTPException(404, f"Unknown entity type: {entity}")
        return registry

    @router.get("/events", response_model=RegistryEventsResponse)
    async def list_events(
        limit: int = Query(100, ge=1, le=1000),
        _identity: Optional[str] = Depends(verify_api_key),
    ):
        """Recent stuck-claim events, newest first, with per-entity totals."""
        recent = await events.recent_events(limit)
        stuck_claims = {
            entity_type: await events.stuck_claim_count(entity_type) for entity_type in registries
        }
        return RegistryEventsResponse(events=recent, count=len(recent), stuck_claims=stuck_claims)

    @router.get("/{entity}/{namespace}/claims/{key:path}", response_model=ClaimResponse)
    async def get_claim(
        entity: str,
        namespace: str,
        key: str,
        _identity: Optional[str] = Depends(verify_api_key),
    ):
        registry = get_registry(entity)
        try:
            claim = await registry.get_claim(namespace, key)
        except RegistryError as e:
            logger.error(f"Failed to read {entity} claim {key!r} in {namespace}: {e}")
            raise HTTPException(503, "Claim store unavailable")

        if claim is None:
            raise HTTPException(404, "Claim not found")

        return ClaimResponse(
            entity_type=claim.entity_type,
            namespace=claim.namespace,
            name=claim.name,
            state=claim.state,
            owner_namespace=claim.owner_namespace,
            owner_name=claim.owner_name,
        )

    @router.delete("/{entity}/{namespace}/claims/{key:path}", response_model=ForceReleaseResponse)
    async def force_release(
        entity: str,
        namespace: str,
        key: str,
        identity: Optional[str] = Depends(verify_api_key),
    ):
        """
        Drop a claim regardless of its state.

        Returns:
            200: Claim released or already absent
            401: Unauthorized
            404: Unknown entity type
        """
        registry = get_registry(entity)
        try:
            released = await registry.force_release(namespace, key)
        except RegistryError as e:
            logger.error(f"Failed to force-release {entity} claim {key!r} in {namespace}: {e}")
            raise HTTPException(503, "Claim store unavailable")

        logger.warning(
            f"Operator {identity or 'anonymous'} force-released {entity} claim {key!r} "
            f"in namespace {namespace} (released={released})"
        )
        return ForceReleaseResponse(
            entity_type=entity, namespace=namespace, name=key, released=released
        )

    return router
