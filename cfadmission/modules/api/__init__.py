"""
API Module - Black Box Interface

Purpose: HTTP routing for admission reviews and registry operations
Interface: create_admission_router(), create_operator_router()
Hidden: AdmissionReview decoding, response encoding, auth dependencies

The API module only orchestrates - it contains no business logic.
All decisions are delegated to the validators and the claim store.
"""

from .admission import AdmissionHandler, create_admission_router
from .models import (
    AdmissionRequest,
    AdmissionResponse,
    AdmissionReview,
    AdmissionStatus,
    ClaimResponse,
    ForceReleaseResponse,
    HealthResponse,
    Operation,
    RegistryEventsResponse,
)
from .operator import create_operator_router

__all__ = [
    "AdmissionHandler",
    "AdmissionRequest",
    "AdmissionResponse",
    "AdmissionReview",
    "AdmissionStatus",
    "ClaimResponse",
    "ForceReleaseResponse",
    "HealthResponse",
    "Operation",
    "RegistryEventsResponse",
    "create_admission_router",
    "create_operator_router",
]
