from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError as PydanticValidationError

from app.errors import DuplicateError, ForbiddenError, IneligibleError, NotFoundError, ValidationError
from app.logging_config import get_logger
from app.schemas.application import (
    TERMINAL_APPLICATION_STATUSES,
    WORKER_EDITABLE_FIELDS,
    ApplicationCreate,
    ApplicationPatch,
    ApplicationRecord,
    EmployerApplicationOut,
    WorkerApplicationOut,
)
from app.schemas.job import ACTIVE_JOB_STATUSES
from app.schemas.user import ROLE_ADMIN, ROLE_EMPLOYER, ROLE_WORKER, WorkerSummary
from app.storage.base import Storage


logger = get_logger(__name__)


def _validate(model: type[BaseModel], data: Mapping[str, Any]) -> BaseModel:
    try:
        return model.model_validate(dict(data))
    except PydanticValidationError as exc:
        fields = {str(error["loc"][0]) for error in exc.errors() if error.get("loc")}
        raise ValidationError("Invalid application data", fields=fields) from exc


class ApplicationService:
    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    def submit_application(self, worker_id: int, job_id: int, payload: Mapping[str, Any]) -> ApplicationRecord:
        worker = self.storage.get_user(worker_id)
        if worker is None or worker.role != ROLE_WORKER:
            raise ForbiddenError("Only workers can apply for jobs")

        data = _validate(ApplicationCreate, {**payload, "job_id": job_id})

        job = self.storage.get_job(job_id)
        if job is None:
            raise NotFoundError("Job not found")
        if job.status not in ACTIVE_JOB_STATUSES:
            raise IneligibleError("This job is not accepting applications")

        if self.storage.get_application_by_job_and_worker(job_id, worker_id) is not None:
            raise DuplicateError("You have already applied for this job", fields=["job_id"])

        application = self.storage.create_application(
            {**data.model_dump(exclude_none=True), "worker_id": worker_id}
        )
        logger.info(
            "application_submitted",
            application_id=application.id,
            job_id=job_id,
            worker_id=worker_id,
        )
        return application

    def update_application(
        self,
        actor_id: int,
        actor_role: str,
        application_id: int,
        patch: Mapping[str, Any],
    ) -> ApplicationRecord:
        application = self.storage.get_application(application_id)
        if application is None:
            raise NotFoundError("Application not found")

        self._authorize_update(actor_id, actor_role, application, patch)

        unknown = set(patch) - set(ApplicationPatch.model_fields)
        if unknown:
            raise ValidationError(f"Unknown application fields: {', '.join(sorted(unknown))}", fields=unknown)

        if application.status in TERMINAL_APPLICATION_STATUSES:
            raise IneligibleError(f"Application is already {application.status}")

        changes = _validate(ApplicationPatch, patch).model_dump(exclude_unset=True)
        if "status" in changes and changes["status"] is None:
            raise ValidationError("Application status cannot be empty", fields=["status"])
        updated = self.storage.update_application(application_id, changes)
        if updated is None:
            raise NotFoundError("Application not found")

        logger.info(
            "application_updated",
            application_id=application_id,
            actor_id=actor_id,
            actor_role=actor_role,
            fields=sorted(changes),
            status=updated.status,
        )
        return updated

    def _authorize_update(
        self,
        actor_id: int,
        actor_role: str,
        application: ApplicationRecord,
        patch: Mapping[str, Any],
    ) -> None:
        if actor_role == ROLE_ADMIN:
            return

        if actor_role == ROLE_EMPLOYER:
            job = self.storage.get_job(application.job_id)
            if job is None or job.employer_id != actor_id:
                raise ForbiddenError("You can only update applications for your own jobs")
            return

        if actor_role == ROLE_WORKER:
            if application.worker_id != actor_id:
                raise ForbiddenError("You can only update your own applications")
            offending = set(patch) - WORKER_EDITABLE_FIELDS
            if offending:
                raise ForbiddenError(
                    f"Workers cannot update these fields: {', '.join(sorted(offending))}",
                    fields=offending,
                )
            return

        raise ForbiddenError("Invalid user role")

    def list_for_user(self, user_id: int, role: str) -> list[WorkerApplicationOut] | list[EmployerApplicationOut]:
        if role == ROLE_WORKER:
            return self._worker_view(user_id)
        if role == ROLE_EMPLOYER:
            return self._employer_view(user_id)
        raise ForbiddenError("Invalid user role")

    def _worker_view(self, worker_id: int) -> list[WorkerApplicationOut]:
        enriched = []
        for application in self._recent_first(self.storage.list_applications_by_worker(worker_id)):
            base = application.model_dump()
            job = self.storage.get_job(application.job_id)
            if job is None:
                enriched.append(WorkerApplicationOut(**base))
                continue
            employer = self.storage.get_user(job.employer_id)
            profile = self.storage.get_employer_profile(job.employer_id)
            if profile is not None:
                company_name = profile.company_name
            else:
                company_name = employer.full_name if employer else None
            enriched.append(
                WorkerApplicationOut(
                    **base,
                    job_title=job.title,
                    company_name=company_name,
                    location=job.location,
                    hourly_rate=job.hourly_rate or application.expected_rate or 0,
                    employer_id=job.employer_id,
                )
            )
        return enriched

    def _employer_view(self, employer_id: int) -> list[EmployerApplicationOut]:
        enriched = []
        for application in self._recent_first(self.storage.list_applications_by_employer(employer_id)):
            worker = self.storage.get_user(application.worker_id)
            enriched.append(
                EmployerApplicationOut(
                    **application.model_dump(),
                    job=self.storage.get_job(application.job_id),
                    worker=(
                        WorkerSummary(
                            id=worker.id,
                            username=worker.username,
                            full_name=worker.full_name,
                            profile_picture=worker.profile_picture,
                        )
                        if worker
                        else None
                    ),
                )
            )
        return enriched

    @staticmethod
    def _recent_first(applications: list[ApplicationRecord]) -> list[ApplicationRecord]:
        return sorted(applications, key=lambda a: (a.updated_at, a.id), reverse=True)
