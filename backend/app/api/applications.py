from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from app.auth import get_current_user
from app.deps import get_application_service, get_message_router, get_storage
from app.errors import ValidationError
from app.schemas.application import ApplicationRecord, EmployerApplicationOut, WorkerApplicationOut
from app.schemas.user import ROLE_EMPLOYER, UserRecord
from app.services.applications import ApplicationService
from app.services.messaging import MessageRouter
from app.storage.base import Storage


router = APIRouter()


@router.get("", response_model=None)
def list_applications(
    applications: ApplicationService = Depends(get_application_service),
    current_user: UserRecord = Depends(get_current_user),
) -> list[WorkerApplicationOut] | list[EmployerApplicationOut]:
    return applications.list_for_user(current_user.id, current_user.role)


@router.post("", response_model=ApplicationRecord, status_code=status.HTTP_201_CREATED)
def create_application(
    payload: dict[str, Any] = Body(...),
    applications: ApplicationService = Depends(get_application_service),
    current_user: UserRecord = Depends(get_current_user),
) -> ApplicationRecord:
    job_id = payload.get("job_id")
    if isinstance(job_id, bool) or not isinstance(job_id, int):
        raise ValidationError("job_id is required", fields=["job_id"])
    return applications.submit_application(current_user.id, job_id, payload)


@router.put("/{application_id}", response_model=ApplicationRecord)
def update_application(
    application_id: int,
    payload: dict[str, Any] = Body(...),
    applications: ApplicationService = Depends(get_application_service),
    messaging: MessageRouter = Depends(get_message_router),
    storage: Storage = Depends(get_storage),
    current_user: UserRecord = Depends(get_current_user),
) -> ApplicationRecord:
    before = storage.get_application(application_id)
    updated = applications.update_application(current_user.id, current_user.role, application_id, payload)

    if current_user.role == ROLE_EMPLOYER and before is not None and updated.status != before.status:
        job = storage.get_job(updated.job_id)
        title = job.title if job else "a job"
        messaging.notify_system(
            updated.worker_id,
            "Application Update",
            f"Your application for {title} is now {updated.status.replace('_', ' ')}",
            related_id=updated.id,
        )
    return updated
