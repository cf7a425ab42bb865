"""
Admission webhook endpoints.

One POST route per validated kind. The handler decodes the AdmissionReview,
runs the kind's validator and turns the outcome into an AdmissionReview
response; a ValidationError becomes a denial carrying its JSON encoding as
the status reason.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from cfadmission.modules.errors import (
    ValidationError,
    admission_unknown_error_reason,
    structural_error,
)
from cfadmission.modules.registry import dry_run_context
from cfadmission.modules.resources import Resource
from cfadmission.modules.validation import ResourceValidator

from .models import AdmissionRequest, AdmissionReview, Operation

logger = logging.getLogger(__name__)


class AdmissionHandler:
    """Adapts one ResourceValidator to AdmissionReview requests."""

    def __init__(self, validator: ResourceValidator):
        self.validator = validator
        self.kind = validator.kind

    async def handle(self, review: AdmissionReview) -> AdmissionReview:
        request = review.request
        if request is None:
            logger.error(f"{self.kind.kind} admission review without a request")
            return AdmissionReview.denied("", structural_error("missing admission request").marshal())

        try:
            with dry_run_context(request.dry_run):
                await self._dispatch(request)
        except ValidationError as e:
            logger.info(
                f"Denied {request.operation.value} of {self.kind.kind} "
                f"{request.namespace}/{request.name}: {e.type}: {e.message}"
            )
            return AdmissionReview.denied(request.uid, e.marshal())
        except Exception:
            logger.exception(
                f"Unexpected error validating {request.operation.value} of {self.kind.kind} "
                f"{request.namespace}/{request.name}"
            )
            return AdmissionReview.denied(request.uid, admission_unknown_error_reason())

        return AdmissionReview.allowed(request.uid)

    async def _dispatch(self, request: AdmissionRequest) -> None:
        if request.operation == Operation.CREATE:
            obj = self.decode(request.object, "object")
            await self.validator.validate_create(obj)
        elif request.operation == Operation.UPDATE:
            old_obj = self.decode(request.old_object, "oldObject")
            obj = self.decode(request.object, "object")
            await self.validator.validate_update(old_obj, obj)
        elif request.operation == Operation.DELETE:
            old_obj = self.decode(request.old_object, "oldObject")
            await self.validator.validate_delete(old_obj)

    def decode(self, raw: Optional[Dict[str, Any]], field: str) -> Resource:
        """
        Decode the admitted object.

        Raises:
            ValidationError: StructuralError when the object is absent or malformed
        """
        if raw is None:
            raise structural_error(f"Admission request for {self.kind.kind} has no {field}")

        try:
            return self.kind.model.model_validate(raw)
        except PydanticValidationError as e:
            logger.warning(f"Failed to decode {self.kind.kind} {field}: {e}")
            raise structural_error(f"Failed to decode {self.kind.kind}: {e.error_count()} invalid field(s)")


def _admission_endpoint(handler: AdmissionHandler):
    async def admit(review: AdmissionReview) -> JSONResponse:
        response = await handler.handle(review)
        return JSONResponse(content=response.model_dump(by_alias=True, exclude_none=True))

    return admit


def create_admission_router(validators: Iterable[ResourceValidator]) -> APIRouter:
    """
    Create the webhook router with one route per validator.

    Args:
        validators: Validators to expose, each at its kind's webhook path

    Returns:
        FastAPI router with admission endpoints
    """
    router = APIRouter(tags=["admission"])

    for validator in validators:
        router.add_api_route(
            validator.kind.webhook_path,
            _admission_endpoint(AdmissionHandler(validator)),
            methods=["POST"],
            name=f"validate_{validator.kind.kind.lower()}",
        )
        logger.info(f"Registered admission webhook {validator.kind.webhook_path}")

    return router
