"""
Admission API data models.

AdmissionReview payloads follow admission.k8s.io/v1; field names are
camelCase on the wire.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ADMISSION_API_VERSION = "admission.k8s.io/v1"
ADMISSION_REVIEW_KIND = "AdmissionReview"
DENIED_STATUS_CODE = 403


class Operation(str, Enum):
    """Admission operations sent by the API server."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CONNECT = "CONNECT"


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GroupVersionKind(WireModel):
    group: str = ""
    version: str = ""
    kind: str = ""


class AdmissionRequest(WireModel):
    """The part of an AdmissionReview the validators need."""

    uid: str = Field(..., description="Request UID, echoed in the response")
    kind: GroupVersionKind = Field(default_factory=GroupVersionKind)
    operation: Operation
    name: str = ""
    namespace: str = ""
    object: Optional[Dict[str, Any]] = Field(None, description="Object after the change")
    old_object: Optional[Dict[str, Any]] = Field(None, description="Object before the change")
    dry_run: bool = Field(default=False, description="Side effects must be skipped")


class AdmissionStatus(WireModel):
    code: int = DENIED_STATUS_CODE
    reason: str = ""
    message: str = ""


class AdmissionResponse(WireModel):
    uid: str
    allowed: bool
    status: Optional[AdmissionStatus] = None


class AdmissionReview(WireModel):
    api_version: str = ADMISSION_API_VERSION
    kind: str = ADMISSION_REVIEW_KIND
    request: Optional[AdmissionRequest] = None
    response: Optional[AdmissionResponse] = None

    @classmethod
    def allowed(cls, uid: str) -> "AdmissionReview":
        return cls(response=AdmissionResponse(uid=uid, allowed=True))

    @classmethod
    def denied(cls, uid: str, reason: str) -> "AdmissionReview":
        return cls(
            response=AdmissionResponse(
                uid=uid,
                allowed=False,
                status=AdmissionStatus(code=DENIED_STATUS_CODE, reason=reason, message=reason),
            )
        )


# Operator models


class ClaimResponse(BaseModel):
    """A claim as shown to operators."""

    entity_type: str
    namespace: str
    name: str
    state: str
    owner_namespace: str = ""
    owner_name: str = ""


class ForceReleaseResponse(BaseModel):
    entity_type: str
    namespace: str
    name: str
    released: bool


class RegistryEventsResponse(BaseModel):
    events: List[Dict[str, Any]] = Field(default_factory=list)
    count: int = 0
    stuck_claims: Dict[str, int] = Field(
        default_factory=dict, description="Stuck claims recorded per entity type"
    )


class HealthResponse(BaseModel):
    status: str = Field(..., description="Health status", pattern="^(healthy|unhealthy)$")
    registry: str = Field(..., description="Claim store status")
    validators: int = Field(default=0, description="Number of registered webhook paths")
    version: str = Field(default="1.0.0", description="API version")
