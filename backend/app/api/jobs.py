from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.auth import get_current_user
from app.deps import get_job_service, get_matcher, get_storage
from app.schemas.job import JobCreate, JobRecord, JobUpdate, MatchedJobOut
from app.schemas.user import UserRecord
from app.services.jobs import JobService
from app.services.matcher import JobMatcher
from app.storage.base import Storage


router = APIRouter()


@router.get("", response_model=list[JobRecord])
def list_jobs(jobs: JobService = Depends(get_job_service)) -> list[JobRecord]:
    return jobs.list_jobs()


@router.get("/mine", response_model=list[JobRecord])
def list_my_jobs(
    jobs: JobService = Depends(get_job_service),
    current_user: UserRecord = Depends(get_current_user),
) -> list[JobRecord]:
    return jobs.list_employer_jobs(current_user.id, current_user.role)


@router.get("/match/{worker_id}", response_model=list[MatchedJobOut])
def match_jobs(
    worker_id: int,
    matcher: JobMatcher = Depends(get_matcher),
    storage: Storage = Depends(get_storage),
    current_user: UserRecord = Depends(get_current_user),
) -> list[MatchedJobOut]:
    matches = matcher.match_jobs(worker_id)
    profile = storage.get_worker_profile(worker_id)
    worker_skills = profile.skills if profile else []
    return [
        MatchedJobOut(**job.model_dump(), matched_skills=matcher.matched_skills(worker_skills, job.skills))
        for job in matches
    ]


@router.get("/{job_id}", response_model=JobRecord)
def get_job(job_id: int, jobs: JobService = Depends(get_job_service)) -> JobRecord:
    return jobs.get_job(job_id)


@router.post("", response_model=JobRecord, status_code=status.HTTP_201_CREATED)
def create_job(
    payload: JobCreate,
    jobs: JobService = Depends(get_job_service),
    current_user: UserRecord = Depends(get_current_user),
) -> JobRecord:
    return jobs.create_job(current_user.id, current_user.role, payload)


@router.put("/{job_id}", response_model=JobRecord)
def update_job(
    job_id: int,
    payload: JobUpdate,
    jobs: JobService = Depends(get_job_service),
    current_user: UserRecord = Depends(get_current_user),
) -> JobRecord:
    return jobs.update_job(current_user.id, job_id, payload)


@router.delete("/{job_id}")
def delete_job(
    job_id: int,
    jobs: JobService = Depends(get_job_service),
    current_user: UserRecord = Depends(get_current_user),
) -> dict[str, str | int]:
    jobs.delete_job(current_user.id, job_id)
    return {"status": "deleted", "job_id": job_id}
