"""
Custom resource models.

Only the fields admission validation reads are modelled; everything else in
the object is ignored. Field names are snake_case in Python and camelCase on
the wire, matching the CRD schemas.
"""

from typing import Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CF_GROUP = "korifi.cloudfoundry.org"
CF_VERSION = "v1alpha1"
HNC_GROUP = "hnc.x-k8s.io"
HNC_VERSION = "v1alpha2"

ORG_NAME_LABEL = "cloudfoundry.org/org-name"
SPACE_NAME_LABEL = "cloudfoundry.org/space-name"


class CRModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ObjectMeta(CRModel):
    name: str = ""
    namespace: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)
    deletion_timestamp: Optional[str] = None


class Resource(CRModel):
    """Common envelope of every custom resource."""

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @property
    def being_deleted(self) -> bool:
        return bool(self.metadata.deletion_timestamp)


class LocalObjectReference(CRModel):
    name: str = ""


class ObjectReference(CRModel):
    name: str = ""
    namespace: str = ""
    kind: str = ""
    api_version: str = ""


# Apps


class Lifecycle(CRModel):
    type: str = "buildpack"


class CFAppSpec(CRModel):
    display_name: str = ""
    desired_state: Optional[str] = None
    lifecycle: Lifecycle = Field(default_factory=Lifecycle)


class CFApp(Resource):
    spec: CFAppSpec = Field(default_factory=CFAppSpec)


# Orgs and spaces


class CFOrgSpec(CRModel):
    display_name: str = ""


class CFOrg(Resource):
    spec: CFOrgSpec = Field(default_factory=CFOrgSpec)


class CFSpaceSpec(CRModel):
    display_name: str = ""


class CFSpace(Resource):
    spec: CFSpaceSpec = Field(default_factory=CFSpaceSpec)


class SubnamespaceAnchor(Resource):
    pass


# Networking


class CFDomainSpec(CRModel):
    name: str = ""


class CFDomain(Resource):
    spec: CFDomainSpec = Field(default_factory=CFDomainSpec)


class Destination(CRModel):
    guid: str = ""
    app_ref: LocalObjectReference = Field(default_factory=LocalObjectReference)
    process_type: str = ""
    port: Optional[int] = None
    protocol: Optional[str] = None


class CFRouteSpec(CRModel):
    host: str = ""
    path: str = ""
    protocol: str = "http"
    domain_ref: ObjectReference = Field(default_factory=ObjectReference)
    destinations: List[Destination] = Field(default_factory=list)


class CFRoute(Resource):
    spec: CFRouteSpec = Field(default_factory=CFRouteSpec)


# Services


class CFServiceInstanceSpec(CRModel):
    display_name: str = ""
    type: str = "user-provided"


class CFServiceInstance(Resource):
    spec: CFServiceInstanceSpec = Field(default_factory=CFServiceInstanceSpec)


class CFServiceBindingSpec(CRModel):
    display_name: Optional[str] = None
    app_ref: LocalObjectReference = Field(default_factory=LocalObjectReference)
    service: ObjectReference = Field(default_factory=ObjectReference)


class CFServiceBinding(Resource):
    spec: CFServiceBindingSpec = Field(default_factory=CFServiceBindingSpec)


# Security groups


class SecurityGroupRule(CRModel):
    protocol: str = ""
    ports: str = ""
    destination: str = ""


class CFSecurityGroupSpec(CRModel):
    display_name: str = ""
    rules: List[SecurityGroupRule] = Field(default_factory=list)


class CFSecurityGroup(Resource):
    spec: CFSecurityGroupSpec = Field(default_factory=CFSecurityGroupSpec)


# Tasks

TASK_SUCCEEDED_CONDITION = "Succeeded"
TASK_FAILED_CONDITION = "Failed"


class Condition(CRModel):
    type: str = ""
    status: str = ""


class CFTaskSpec(CRModel):
    command: str = ""
    app_ref: LocalObjectReference = Field(default_factory=LocalObjectReference)
    canceled: bool = False


class CFTaskStatus(CRModel):
    sequence_id: int = 0
    conditions: List[Condition] = Field(default_factory=list)

    def condition_true(self, condition_type: str) -> bool:
        return any(
            condition.type == condition_type and condition.status == "True"
            for condition in self.conditions
        )


class CFTask(Resource):
    spec: CFTaskSpec = Field(default_factory=CFTaskSpec)
    status: CFTaskStatus = Field(default_factory=CFTaskStatus)


class ResourceKind:
    """API coordinates of a custom resource kind."""

    def __init__(self, kind: str, plural: str, model: Type[Resource], group: str = CF_GROUP, version: str = CF_VERSION):
        self.kind = kind
        self.plural = plural
        self.model = model
        self.group = group
        self.version = version

    @property
    def webhook_path(self) -> str:
        """Path the API server calls, e.g. /validate-korifi-cloudfoundry-org-v1alpha1-cfapp."""
        return f"/validate-{self.group.replace('.', '-')}-{self.version}-{self.kind.lower()}"

    def __repr__(self) -> str:
        return f"ResourceKind({self.kind})"


APP = ResourceKind("CFApp", "cfapps", CFApp)
ORG = ResourceKind("CFOrg", "cforgs", CFOrg)
SPACE = ResourceKind("CFSpace", "cfspaces", CFSpace)
DOMAIN = ResourceKind("CFDomain", "cfdomains", CFDomain)
ROUTE = ResourceKind("CFRoute", "cfroutes", CFRoute)
SERVICE_INSTANCE = ResourceKind("CFServiceInstance", "cfserviceinstances", CFServiceInstance)
SERVICE_BINDING = ResourceKind("CFServiceBinding", "cfservicebindings", CFServiceBinding)
SUBNAMESPACE_ANCHOR = ResourceKind(
    "SubnamespaceAnchor", "subnamespaceanchors", SubnamespaceAnchor, HNC_GROUP, HNC_VERSION
)
SECURITY_GROUP = ResourceKind("CFSecurityGroup", "cfsecuritygroups", CFSecurityGroup)
TASK = ResourceKind("CFTask", "cftasks", CFTask)
