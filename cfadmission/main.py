#!/usr/bin/env python3
"""
cfadmission - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Builds the claim stores, resource reader and validators
3. Serves the admission webhooks and operator endpoints

All decisions are made in the modules, following black box principles.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import redis.asyncio as redis
import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from cfadmission.config.provider import ConfigProvider, EnvConfigProvider
from cfadmission.logging_config import configure_logging, get_logging_config
from cfadmission.modules.api import HealthResponse, create_admission_router, create_operator_router
from cfadmission.modules.auth import AuthModule
from cfadmission.modules.coordination import (
    ClaimEventRecorder,
    DuplicateValidator,
    LoggingClaimEvents,
    RedisClaimEvents,
)
from cfadmission.modules.keys import (
    AppKeys,
    OrgKeys,
    RouteKeys,
    SecurityGroupKeys,
    ServiceBindingKeys,
    ServiceInstanceKeys,
    SpaceKeys,
    org_anchor_keys,
    space_anchor_keys,
)
from cfadmission.modules.registry import InMemoryNameRegistry, NameRegistry, RedisNameRegistry
from cfadmission.modules.resources import KubernetesResourceReader, ResourceReader, load_kube_config
from cfadmission.modules.validation import (
    AnchorValidator,
    AppValidator,
    DomainValidator,
    OrgValidator,
    ResourceValidator,
    RouteValidator,
    SecurityGroupValidator,
    ServiceBindingValidator,
    ServiceInstanceValidator,
    SpaceValidator,
    TaskValidator,
)

logger = logging.getLogger(__name__)

ENTITY_TYPES = [
    AppKeys.entity_type,
    OrgKeys.entity_type,
    SpaceKeys.entity_type,
    RouteKeys.entity_type,
    ServiceInstanceKeys.entity_type,
    ServiceBindingKeys.entity_type,
    SecurityGroupKeys.entity_type,
    org_anchor_keys().entity_type,
    space_anchor_keys().entity_type,
]


@dataclass
class Components:
    """Everything the HTTP layer serves, built once per process."""

    root_namespace: str
    registries: Dict[str, NameRegistry]
    events: ClaimEventRecorder
    reader: ResourceReader
    auth: AuthModule
    validators: List[ResourceValidator] = field(default_factory=list)
    redis_client: Optional[redis.Redis] = None


def create_redis_client(config_provider: ConfigProvider) -> redis.Redis:
    """Create Redis client from configuration."""
    redis_config = config_provider.get_redis_config()
    return redis.from_url(
        redis_config.url,
        password=redis_config.password,
        encoding="utf-8",
        decode_responses=True,
    )


def build_validators(
    registries: Dict[str, NameRegistry],
    events: ClaimEventRecorder,
    reader: ResourceReader,
    root_namespace: str,
) -> List[ResourceValidator]:
    """Wire one validator per kind onto its claim store partition."""

    def duplicates(entity_type: str) -> DuplicateValidator:
        return DuplicateValidator(registries[entity_type], events)

    return [
        AppValidator(duplicates(AppKeys.entity_type)),
        OrgValidator(duplicates(OrgKeys.entity_type), root_namespace),
        SpaceValidator(duplicates(SpaceKeys.entity_type), reader, root_namespace),
        RouteValidator(duplicates(RouteKeys.entity_type), reader, root_namespace),
        DomainValidator(reader),
        ServiceInstanceValidator(duplicates(ServiceInstanceKeys.entity_type)),
        ServiceBindingValidator(duplicates(ServiceBindingKeys.entity_type)),
        SecurityGroupValidator(duplicates(SecurityGroupKeys.entity_type), root_namespace),
        TaskValidator(),
        AnchorValidator(
            duplicates(org_anchor_keys().entity_type),
            duplicates(space_anchor_keys().entity_type),
        ),
    ]


def build_components(
    config_provider: ConfigProvider,
    redis_client: Optional[redis.Redis] = None,
    reader: Optional[ResourceReader] = None,
) -> Components:
    """
    Build claim stores, lookups and validators from configuration.

    Args:
        config_provider: Source of configuration
        redis_client: Use this client instead of connecting from configuration
        reader: Use this reader instead of the Kubernetes API

    Raises:
        ValueError: If required configuration is missing
    """
    root_namespace = config_provider.get_cf_config().root_namespace
    registry_config = config_provider.get_registry_config()

    if registry_config.backend == "redis":
        redis_client = redis_client or create_redis_client(config_provider)
        registries: Dict[str, NameRegistry] = {
            entity_type: RedisNameRegistry(redis_client, entity_type) for entity_type in ENTITY_TYPES
        }
        events: ClaimEventRecorder = RedisClaimEvents(
            redis_client, metric_ttl=registry_config.stuck_claim_metric_ttl
        )
    else:
        logger.warning("Using in-memory claim store; claims are lost on restart")
        registries = {entity_type: InMemoryNameRegistry(entity_type) for entity_type in ENTITY_TYPES}
        events = LoggingClaimEvents()

    if reader is None:
        load_kube_config()
        reader = KubernetesResourceReader()

    auth_config = config_provider.get_auth_config()
    if not auth_config.enabled:
        logger.warning("No API_KEYS configured; operator endpoints will reject every request")
    auth = AuthModule(auth_config.api_keys, redis_client)

    return Components(
        root_namespace=root_namespace,
        registries=registries,
        events=events,
        reader=reader,
        auth=auth,
        validators=build_validators(registries, events, reader, root_namespace),
        redis_client=redis_client,
    )


def create_app(
    config_provider: Optional[ConfigProvider] = None,
    components: Optional[Components] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Passing components skips configuration entirely, which is how tests
    run the app against in-memory stores.
    """
    if components is None:
        components = build_components(config_provider or EnvConfigProvider())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Starting cfadmission with root namespace {components.root_namespace} "
            f"and {len(components.validators)} validators"
        )
        if components.redis_client:
            try:
                await components.redis_client.ping()
                logger.info("Connected to Redis claim store")
            except redis.RedisError as e:
                # Admission requests fail closed until Redis is reachable
                logger.error(f"Redis claim store unreachable at startup: {e}")

        yield

        logger.info("Shutting down cfadmission...")
        if components.redis_client:
            await components.redis_client.aclose()
        logger.info("cfadmission shutdown complete")

    app = FastAPI(
        title="cfadmission",
        description="Admission webhooks enforcing CF name uniqueness on Kubernetes",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.components = components

    app.include_router(create_admission_router(components.validators))
    app.include_router(create_operator_router(components.registries, components.events, components.auth))

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """
        Health check endpoint.

        Returns:
            200: Service healthy
            503: Claim store unreachable
        """
        registry_status = "memory"
        if components.redis_client:
            try:
                await components.redis_client.ping()
                registry_status = "connected"
            except redis.RedisError as e:
                logger.error(f"Health check failed: {e}")
                return JSONResponse(
                    status_code=503,
                    content={"status": "unhealthy", "registry": "disconnected", "error": str(e)},
                )

        return HealthResponse(
            status="healthy", registry=registry_status, validators=len(components.validators)
        )

    @app.exception_handler(redis.ConnectionError)
    async def redis_error_handler(request, exc):
        """Handle Redis connection errors."""
        logger.error(f"Redis connection error: {exc}")
        return JSONResponse(status_code=503, content={"error": "Claim store connection failed"})

    return app


def main() -> None:
    config_provider = EnvConfigProvider()
    api_config = config_provider.get_api_config()
    configure_logging(api_config.log_level)

    if not api_config.tls_enabled:
        logger.warning("Serving without TLS; the API server only calls webhooks over HTTPS")

    uvicorn.run(
        "cfadmission.main:create_app",
        factory=True,
        host=api_config.host,
        port=api_config.port,
        log_level=api_config.log_level.lower(),
        log_config=get_logging_config(api_config.log_level),
        ssl_certfile=api_config.tls_cert_file,
        ssl_keyfile=api_config.tls_key_file,
    )


if __name__ == "__main__":
    main()
