"""
Uniqueness keys per resource kind.

Adapters are pure functions of the resource: same resource, same key; two
resources that must not coexist produce the same key. Each adapter also
knows where its claims live and how to word the duplicate error.
"""

from dataclasses import dataclass
from typing import Protocol, TypeVar

from cfadmission.modules.resources import (
    ORG_NAME_LABEL,
    SPACE_NAME_LABEL,
    CFApp,
    CFOrg,
    CFRoute,
    CFSecurityGroup,
    CFServiceBinding,
    CFServiceInstance,
    CFSpace,
    Resource,
    SubnamespaceAnchor,
)

KEY_SEPARATOR = "::"

R_contra = TypeVar("R_contra", bound=Resource, contravariant=True)


@dataclass(frozen=True)
class UniqueKey:
    """Where a claim lives and what it is called."""

    namespace: str
    key: str


class KeyAdapter(Protocol[R_contra]):
    entity_type: str

    def key_of(self, resource: R_contra) -> UniqueKey:
        ...

    def duplicate_message(self, resource: R_contra) -> str:
        ...


def route_key(host: str, domain_namespace: str, domain_name: str, path: str) -> str:
    return KEY_SEPARATOR.join([host.lower(), domain_namespace, domain_name, path])


def service_binding_key(app_name: str, instance_namespace: str, instance_name: str) -> str:
    return KEY_SEPARATOR.join(["sb", app_name, instance_namespace, instance_name])


class AppKeys:
    entity_type = "app"

    def key_of(self, app: CFApp) -> UniqueKey:
        return UniqueKey(app.namespace, app.spec.display_name.lower())

    def duplicate_message(self, app: CFApp) -> str:
        return f"App with the name '{app.spec.display_name}' already exists."


class OrgKeys:
    """Orgs are unique cluster-wide, so claims live in the root namespace."""

    entity_type = "org"

    def __init__(self, root_namespace: str):
        self.root_namespace = root_namespace

    def key_of(self, org: CFOrg) -> UniqueKey:
        return UniqueKey(self.root_namespace, org.spec.display_name.lower())

    def duplicate_message(self, org: CFOrg) -> str:
        # The cf CLI matches on "Organization '.*' already exists."
        return f"Organization '{org.spec.display_name}' already exists."


class SpaceKeys:
    """Spaces are unique per org; the space namespace is the org namespace."""

    entity_type = "space"

    def key_of(self, space: CFSpace) -> UniqueKey:
        return UniqueKey(space.namespace, space.spec.display_name.lower())

    def duplicate_message(self, space: CFSpace) -> str:
        # The cf CLI matches on "Name must be unique per organization"
        return (
            f"Space '{space.spec.display_name}' already exists. "
            "Name must be unique per organization."
        )


class RouteKeys:
    entity_type = "route"

    def __init__(self, root_namespace: str):
        self.root_namespace = root_namespace

    def key_of(self, route: CFRoute) -> UniqueKey:
        domain_ref = route.spec.domain_ref
        return UniqueKey(
            self.root_namespace,
            route_key(route.spec.host, domain_ref.namespace, domain_ref.name, route.spec.path),
        )

    def duplicate_message(self, route: CFRoute, domain_name: str = "") -> str:
        path_details = f" and path '{route.spec.path}'" if route.spec.path else ""
        domain = domain_name or route.spec.domain_ref.name
        return f"Route already exists with host '{route.spec.host}'{path_details} for domain '{domain}'."


class ServiceInstanceKeys:
    """Service instance names are case-sensitive."""

    entity_type = "serviceinstance"

    def key_of(self, instance: CFServiceInstance) -> UniqueKey:
        return UniqueKey(instance.namespace, instance.spec.display_name)

    def duplicate_message(self, instance: CFServiceInstance) -> str:
        return f"The service instance name is taken: {instance.spec.display_name}"


class ServiceBindingKeys:
    """One binding per (app, service instance) pair; the display name is free."""

    entity_type = "servicebinding"

    def key_of(self, binding: CFServiceBinding) -> UniqueKey:
        service = binding.spec.service
        return UniqueKey(
            binding.namespace,
            service_binding_key(binding.spec.app_ref.name, service.namespace, service.name),
        )

    def duplicate_message(self, binding: CFServiceBinding) -> str:
        return (
            f"Service binding already exists: App: {binding.spec.app_ref.name} "
            f"Service Instance: {binding.spec.service.name}"
        )


class SecurityGroupKeys:
    """Security groups are global, so claims live in the root namespace."""

    entity_type = "securitygroup"

    def __init__(self, root_namespace: str):
        self.root_namespace = root_namespace

    def key_of(self, security_group: CFSecurityGroup) -> UniqueKey:
        return UniqueKey(self.root_namespace, security_group.spec.display_name.lower())

    def duplicate_message(self, security_group: CFSecurityGroup) -> str:
        return f"Security group with name '{security_group.spec.display_name}' already exists."


class AnchorKeys:
    """Subnamespace anchors carry the org or space name in a label."""

    def __init__(self, entity_type: str, name_label: str, duplicate_template: str):
        self.entity_type = entity_type
        self.name_label = name_label
        self.duplicate_template = duplicate_template

    def display_name(self, anchor: SubnamespaceAnchor) -> str:
        return anchor.metadata.labels.get(self.name_label, "")

    def key_of(self, anchor: SubnamespaceAnchor) -> UniqueKey:
        return UniqueKey(anchor.namespace, self.display_name(anchor).lower())

    def duplicate_message(self, anchor: SubnamespaceAnchor) -> str:
        return self.duplicate_template % self.display_name(anchor)


def org_anchor_keys() -> AnchorKeys:
    return AnchorKeys("org-anchor", ORG_NAME_LABEL, "Organization '%s' already exists.")


def space_anchor_keys() -> AnchorKeys:
    return AnchorKeys(
        "space-anchor",
        SPACE_NAME_LABEL,
        "Space '%s' already exists. Name must be unique per organization.",
    )
