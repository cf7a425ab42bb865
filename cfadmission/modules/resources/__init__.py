"""
Resources Module - Black Box Interface

Purpose: Typed views of the custom resources and read-only lookups
Interface: CFApp, CFOrg, ... models, ResourceKind constants, ResourceReader
Hidden: Kubernetes client configuration, wire field naming

Validators depend on ResourceReader only, so any lookup source can back them.
"""

from .models import (
    APP,
    DOMAIN,
    ORG,
    ORG_NAME_LABEL,
    ROUTE,
    SECURITY_GROUP,
    SERVICE_BINDING,
    SERVICE_INSTANCE,
    SPACE,
    SPACE_NAME_LABEL,
    SUBNAMESPACE_ANCHOR,
    TASK,
    TASK_FAILED_CONDITION,
    TASK_SUCCEEDED_CONDITION,
    CFApp,
    CFDomain,
    CFOrg,
    CFRoute,
    CFSecurityGroup,
    CFServiceBinding,
    CFServiceInstance,
    CFSpace,
    CFTask,
    Resource,
    ResourceKind,
    SubnamespaceAnchor,
)
from .reader import (
    KubernetesResourceReader,
    ResourceLookupError,
    ResourceNotFoundError,
    ResourceReader,
    load_kube_config,
)

__all__ = [
    "APP",
    "DOMAIN",
    "ORG",
    "ORG_NAME_LABEL",
    "ROUTE",
    "SECURITY_GROUP",
    "SERVICE_BINDING",
    "SERVICE_INSTANCE",
    "SPACE",
    "SPACE_NAME_LABEL",
    "SUBNAMESPACE_ANCHOR",
    "TASK",
    "TASK_FAILED_CONDITION",
    "TASK_SUCCEEDED_CONDITION",
    "CFApp",
    "CFDomain",
    "CFOrg",
    "CFRoute",
    "CFSecurityGroup",
    "CFServiceBinding",
    "CFServiceInstance",
    "CFSpace",
    "CFTask",
    "KubernetesResourceReader",
    "Resource",
    "ResourceKind",
    "ResourceLookupError",
    "ResourceNotFoundError",
    "ResourceReader",
    "SubnamespaceAnchor",
    "load_kube_config",
]
