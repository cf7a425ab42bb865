"""
Read-only access to custom resources for referential checks.

Validators only need "does this object exist" and "list all of a kind", so
the reader exposes exactly that. The Kubernetes implementation wraps the
synchronous client and runs it off the event loop.
"""

import asyncio
import logging
from typing import List, Optional, Protocol

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from .models import Resource, ResourceKind

logger = logging.getLogger(__name__)


class ResourceLookupError(Exception):
    """Reading a resource failed for a reason other than absence."""


class ResourceNotFoundError(ResourceLookupError):
    """The requested resource does not exist."""


class ResourceReader(Protocol):
    """Protocol for resource lookups - allows swappable implementations."""

    async def get(self, kind: ResourceKind, namespace: str, name: str) -> Resource:
        """
        Fetch one resource.

        Raises:
            ResourceNotFoundError: the resource does not exist
            ResourceLookupError: any other failure
        """
        ...

    async def list(self, kind: ResourceKind, namespace: Optional[str] = None) -> List[Resource]:
        """List resources of a kind, cluster-wide when namespace is None."""
        ...


def load_kube_config() -> None:
    """Load in-cluster configuration, falling back to kubeconfig for development."""
    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes configuration")
    except config.ConfigException:
        try:
            config.load_kube_config()
            logger.info("Loaded kubeconfig for development")
        except config.ConfigException as e:
            logger.error(f"Failed to load Kubernetes config: {e}")
            raise RuntimeError("Cannot load Kubernetes configuration") from e


class KubernetesResourceReader:
    """ResourceReader backed by the Kubernetes CustomObjects API."""

    def __init__(self, custom_objects_api: Optional[client.CustomObjectsApi] = None):
        self.api = custom_objects_api or client.CustomObjectsApi()

    async def get(self, kind: ResourceKind, namespace: str, name: str) -> Resource:
        try:
            obj = await asyncio.to_thread(
                self.api.get_namespaced_custom_object,
                group=kind.group,
                version=kind.version,
                namespace=namespace,
                plural=kind.plural,
                name=name,
            )
        except ApiException as e:
            if e.status == 404:
                raise ResourceNotFoundError(f"{kind.kind} {namespace}/{name} not found") from e
            raise ResourceLookupError(
                f"getting {kind.kind} {namespace}/{name} failed: {e.status} - {e.reason}"
            ) from e

        return kind.model.model_validate(obj)

    async def list(self, kind: ResourceKind, namespace: Optional[str] = None) -> List[Resource]:
        try:
            if namespace:
                result = await asyncio.to_thread(
                    self.api.list_namespaced_custom_object,
                    group=kind.group,
                    version=kind.version,
                    namespace=namespace,
                    plural=kind.plural,
                )
            else:
                result = await asyncio.to_thread(
                    self.api.list_cluster_custom_object,
                    group=kind.group,
                    version=kind.version,
                    plural=kind.plural,
                )
        except ApiException as e:
            raise ResourceLookupError(
                f"listing {kind.plural} failed: {e.status} - {e.reason}"
            ) from e

        return [kind.model.model_validate(item) for item in result.get("items", [])]
