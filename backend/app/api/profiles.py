from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.auth import get_current_user
from app.deps import get_profile_service
from app.schemas.user import (
    EmployerProfileIn,
    EmployerProfileRecord,
    EmployerProfileUpdate,
    EmployerWithProfileOut,
    UserOut,
    UserRecord,
    WorkerProfileIn,
    WorkerProfileRecord,
    WorkerProfileUpdate,
    WorkerWithProfileOut,
)
from app.services.profiles import ProfileService


router = APIRouter()


@router.get("/workers", response_model=list[UserOut])
def list_workers(profiles: ProfileService = Depends(get_profile_service)) -> list[UserOut]:
    return profiles.list_workers()


@router.get("/workers/{user_id}", response_model=WorkerWithProfileOut)
def get_worker(user_id: int, profiles: ProfileService = Depends(get_profile_service)) -> WorkerWithProfileOut:
    return profiles.get_worker(user_id)


@router.get("/employers/{user_id}", response_model=EmployerWithProfileOut)
def get_employer(user_id: int, profiles: ProfileService = Depends(get_profile_service)) -> EmployerWithProfileOut:
    return profiles.get_employer(user_id)


@router.get("/worker-profile", response_model=WorkerProfileRecord)
def get_worker_profile(
    profiles: ProfileService = Depends(get_profile_service),
    current_user: UserRecord = Depends(get_current_user),
) -> WorkerProfileRecord:
    return profiles.get_worker_profile(current_user.id, current_user.role)


@router.post("/worker-profile", response_model=WorkerProfileRecord, status_code=status.HTTP_201_CREATED)
def create_worker_profile(
    payload: WorkerProfileIn,
    profiles: ProfileService = Depends(get_profile_service),
    current_user: UserRecord = Depends(get_current_user),
) -> WorkerProfileRecord:
    return profiles.create_worker_profile(current_user.id, current_user.role, payload)


@router.put("/worker-profile", response_model=WorkerProfileRecord)
def update_worker_profile(
    payload: WorkerProfileUpdate,
    profiles: ProfileService = Depends(get_profile_service),
    current_user: UserRecord = Depends(get_current_user),
) -> WorkerProfileRecord:
    return profiles.update_worker_profile(current_user.id, current_user.role, payload)


@router.get("/employer-profile", response_model=EmployerProfileRecord)
def get_employer_profile(
    profiles: ProfileService = Depends(get_profile_service),
    current_user: UserRecord = Depends(get_current_user),
) -> EmployerProfileRecord:
    return profiles.get_employer_profile(current_user.id, current_user.role)


@router.post("/employer-profile", response_model=EmployerProfileRecord, status_code=status.HTTP_201_CREATED)
def create_employer_profile(
    payload: EmployerProfileIn,
    profiles: ProfileService = Depends(get_profile_service),
    current_user: UserRecord = Depends(get_current_user),
) -> EmployerProfileRecord:
    return profiles.create_employer_profile(current_user.id, current_user.role, payload)


@router.put("/employer-profile", response_model=EmployerProfileRecord)
def update_employer_profile(
    payload: EmployerProfileUpdate,
    profiles: ProfileService = Depends(get_profile_service),
    current_user: UserRecord = Depends(get_current_user),
) -> EmployerProfileRecord:
    return profiles.update_employer_profile(current_user.id, current_user.role, payload)
