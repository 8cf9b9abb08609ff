"""
Application API endpoints.

Job seekers apply and cancel; the company owning the job moves the status.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import (
    CompanyClaims,
    CurrentClaims,
    JobseekerClaims,
    get_application_service,
)
from app.core.responses import api_response
from app.schemas.application import (
    ApplicationCreate,
    ApplicationFilter,
    ApplicationOut,
    ApplicationUpdate,
)
from app.services.applications import ApplicationService

router = APIRouter()

Service = Annotated[ApplicationService, Depends(get_application_service)]


def _dump(application) -> dict:
    return ApplicationOut.model_validate(application).model_dump(mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_application(data: ApplicationCreate, claims: JobseekerClaims, service: Service):
    """Apply to a job whose end date hasn't passed; starts as PENDING."""
    application = service.create_application(claims["sub"], data.job_id)
    return api_response(
        _dump(application), "Application created successfully", status.HTTP_201_CREATED
    )


@router.get("")
def list_applications(
    filters: Annotated[ApplicationFilter, Query()],
    claims: CurrentClaims,
    service: Service,
):
    applications = service.filter_applications(filters)
    return api_response(
        [_dump(application) for application in applications],
        "Applications fetched successfully",
    )


@router.get("/{application_id}")
def get_application(application_id: int, claims: CurrentClaims, service: Service):
    application = service.get_application_by_id(application_id)
    return api_response(_dump(application), "Application fetched successfully")


@router.put("/{application_id}")
def update_application(
    application_id: int,
    data: ApplicationUpdate,
    claims: CompanyClaims,
    service: Service,
):
    application = service.update_status(claims["sub"], application_id, data.status)
    return api_response(_dump(application), "Application updated successfully")


@router.delete("/{application_id}")
def cancel_application(application_id: int, claims: JobseekerClaims, service: Service):
    application = service.cancel_application(claims["sub"], application_id)
    return api_response(_dump(application), "Application cancelled successfully")
