"""
Job API endpoints.

Listing and reading jobs is public; creating, updating and deleting needs a
COMPANY account and only touches that company's own jobs.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import CompanyClaims, get_job_service
from app.core.responses import api_response
from app.schemas.job import JobCreate, JobFilter, JobOut, JobUpdate
from app.services.jobs import JobService

router = APIRouter()

Service = Annotated[JobService, Depends(get_job_service)]


def _dump(job) -> dict:
    return JobOut.model_validate(job).model_dump(mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_job(data: JobCreate, claims: CompanyClaims, service: Service):
    job = service.create_job(claims["sub"], data)
    return api_response(_dump(job), "Job created successfully", status.HTTP_201_CREATED)


@router.get("")
def list_jobs(filters: Annotated[JobFilter, Query()], service: Service):
    jobs = service.get_all_jobs(filters)
    return api_response([_dump(job) for job in jobs], "Jobs fetched successfully")


@router.get("/{job_id}")
def get_job(job_id: int, service: Service):
    return api_response(_dump(service.get_job_by_id(job_id)), "Job fetched successfully")


@router.put("/{job_id}")
def update_job(job_id: int, data: JobUpdate, claims: CompanyClaims, service: Service):
    job = service.update_job(claims["sub"], job_id, data)
    return api_response(_dump(job), "Job updated successfully")


@router.delete("/{job_id}")
def delete_job(job_id: int, claims: CompanyClaims, service: Service):
    service.delete_job(claims["sub"], job_id)
    return api_response(message="Job deleted successfully")
