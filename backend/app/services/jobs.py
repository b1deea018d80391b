from __future__ import annotations

from app.errors import ForbiddenError, IneligibleError, NotFoundError
from app.logging_config import get_logger
from app.schemas.job import FINISHED_JOB_STATUSES, JobCreate, JobRecord, JobUpdate
from app.schemas.user import ROLE_EMPLOYER
from app.storage.base import Storage


logger = get_logger(__name__)

NULLABLE_JOB_FIELDS = frozenset({"hourly_rate", "start_date", "end_date"})


class JobService:
    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    def get_job(self, job_id: int) -> JobRecord:
        job = self.storage.get_job(job_id)
        if job is None:
            raise NotFoundError("Job not found")
        return job

    def list_jobs(self) -> list[JobRecord]:
        return self.storage.list_jobs()

    def list_employer_jobs(self, employer_id: int, role: str) -> list[JobRecord]:
        if role != ROLE_EMPLOYER:
            raise ForbiddenError("Only employers can access their jobs")
        return self.storage.list_jobs_by_employer(employer_id)

    def create_job(self, employer_id: int, role: str, payload: JobCreate) -> JobRecord:
        if role != ROLE_EMPLOYER:
            raise ForbiddenError("Only employers can post jobs")
        job = self.storage.create_job({**payload.model_dump(), "employer_id": employer_id})
        logger.info("job_created", job_id=job.id, employer_id=employer_id)
        return job

    def update_job(self, actor_id: int, job_id: int, payload: JobUpdate) -> JobRecord:
        job = self._owned_job(actor_id, job_id, "You can only update your own jobs")
        changes = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_JOB_FIELDS
        }

        new_status = changes.get("status")
        if new_status is not None and new_status != job.status and job.status in FINISHED_JOB_STATUSES:
            raise IneligibleError(f"Job is already {job.status}")

        updated = self.storage.update_job(job_id, changes)
        if updated is None:
            raise NotFoundError("Job not found")
        logger.info("job_updated", job_id=job_id, fields=sorted(changes), status=updated.status)
        return updated

    def delete_job(self, actor_id: int, job_id: int) -> None:
        self._owned_job(actor_id, job_id, "You can only delete your own jobs")
        self.storage.delete_job(job_id)
        logger.info("job_deleted", job_id=job_id, employer_id=actor_id)

    def _owned_job(self, actor_id: int, job_id: int, message: str) -> JobRecord:
        job = self.get_job(job_id)
        if job.employer_id != actor_id:
            raise ForbiddenError(message)
        return job
